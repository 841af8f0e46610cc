"""Bank identifier normalization for rule comparisons."""

from __future__ import annotations

from payroute.vocabulary import DBS_HK_SWIFT


def normalize_bank_identifier(raw: str | None) -> str:
    """Strip and upper-case a bank identifier. Display values are left untouched."""
    return (raw or "").strip().upper()


def has_bank_identifier(raw: str | None) -> bool:
    return normalize_bank_identifier(raw) != ""


def is_dbs_hk(raw: str | None) -> bool:
    return normalize_bank_identifier(raw) == DBS_HK_SWIFT
