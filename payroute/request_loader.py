"""
Request Loader -- Builds PaymentRequests from dicts and YAML files.

This module is the structured input gate. The engine never rejects a
value; anything that cannot become a PaymentRequest is rejected here,
before routing.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from payroute.models import PaymentRequest
from payroute.routing_policy import DEFAULT_REQUEST


_TRUE_WORDS = {"true", "yes", "y", "1", "on"}
_FALSE_WORDS = {"false", "no", "n", "0", "off", ""}


def _load_yaml(path: Path) -> Any:
    """Load a YAML file and return its contents."""
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        raise ValueError(f"Empty YAML file: {path}")
    return data


# ---------------------------------------------------------------------------
# Coercion
# ---------------------------------------------------------------------------

def coerce_amount(value: Any) -> float | int:
    """
    Coerce a raw amount to a number.

    Blank or missing amounts become 0. Numeric strings are parsed.
    Anything else raises ValueError.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        raise ValueError(f"Amount must be numeric, got {value!r}")
    if isinstance(value, (int, float)):
        return value
    text = str(value).strip().replace(",", "")
    if not text:
        return 0
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        raise ValueError(f"Amount must be numeric, got {value!r}") from None


def coerce_flag(value: Any) -> bool:
    """Coerce a POBO flag from bools or yes/no style strings."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    text = str(value).strip().lower()
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    raise ValueError(f"pay_on_behalf_of must be a boolean, got {value!r}")


# ---------------------------------------------------------------------------
# Request building
# ---------------------------------------------------------------------------

def _text_field(merged: dict[str, Any], key: str) -> str:
    value = merged.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string, got {value!r} (quote it in YAML)")
    return value


def request_from_dict(
    data: dict[str, Any],
    defaults: dict[str, Any] | None = None,
) -> PaymentRequest:
    """
    Build a PaymentRequest, filling missing fields from defaults.

    Method, country and currency are passed through as strings without
    normalization. Unknown keys are ignored. Text fields that arrive as
    another type (YAML reads a bare NO as False) raise ValueError.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Request must be a mapping, got {type(data).__name__}")

    merged = dict(defaults if defaults is not None else DEFAULT_REQUEST)
    merged.update({k: v for k, v in data.items() if v is not None or k == "amount"})

    return PaymentRequest(
        method=_text_field(merged, "method"),
        country=_text_field(merged, "country"),
        currency=_text_field(merged, "currency"),
        bank_identifier=_text_field(merged, "bank_identifier"),
        amount=coerce_amount(merged.get("amount")),
        pay_on_behalf_of=coerce_flag(merged.get("pay_on_behalf_of")),
    )


def load_requests(
    path: str | Path,
    defaults: dict[str, Any] | None = None,
) -> list[tuple[str, PaymentRequest]]:
    """
    Load a batch of requests from a YAML file.

    The file must contain a top-level 'requests' list. Each item may
    carry an 'id'; items without one are numbered from 1.

    Returns:
        List of (request_id, PaymentRequest) pairs in file order.
    """
    path = Path(path)
    raw = _load_yaml(path)

    if not isinstance(raw, dict) or "requests" not in raw:
        raise ValueError(f"Request file {path.name} missing top-level 'requests' key.")

    items = raw["requests"]
    if not isinstance(items, list):
        raise ValueError(f"Request file {path.name}: 'requests' must be a list.")

    loaded: list[tuple[str, PaymentRequest]] = []
    for i, item in enumerate(items, 1):
        try:
            request = request_from_dict(item, defaults)
        except ValueError as e:
            raise ValueError(f"Request #{i} in {path.name} is invalid: {e}") from e
        request_id = str(item.get("id") or i)
        loaded.append((request_id, request))
    return loaded
