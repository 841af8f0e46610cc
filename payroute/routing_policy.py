"""
Routing Policy
==============
Loads the operator policy that surrounds the routing engine.

The policy controls what the tooling does around a routing decision
(request defaults, audit records). It never alters the rule cascade:
vocabularies and thresholds are fixed in vocabulary.py.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

POLICY_PATH = Path(__file__).resolve().parent / "routing_policy.yaml"

DEFAULT_REQUEST: dict[str, Any] = {
    "method": "LOCAL",
    "country": "HKG",
    "currency": "HKD",
    "bank_identifier": "",
    "amount": 1000,
    "pay_on_behalf_of": False,
}


# ---------------------------------------------------------------------------
# Routing Policy
# ---------------------------------------------------------------------------

class RoutingPolicy:
    """
    Read-only access to the routing policy file.
    """

    def __init__(self, policy_path: Path | None = None) -> None:
        self._path = policy_path or POLICY_PATH
        self._policy: dict[str, Any] = {}
        self._load()

    def _load(self) -> None:
        if self._path.exists():
            with open(self._path, "r", encoding="utf-8") as f:
                self._policy = yaml.safe_load(f) or {}
        else:
            self._policy = {}

    # --- Core accessors ---

    @property
    def version(self) -> str:
        return str(self._policy.get("policy_version", "0.0.0"))

    def _section(self, key: str) -> dict[str, Any]:
        return self._policy.get(key) or {}

    @property
    def audit(self) -> dict[str, Any]:
        return self._section("audit_controls")

    # --- Decisions ---

    def request_defaults(self) -> dict[str, Any]:
        """Defaults for any request field the caller leaves out."""
        defaults = dict(DEFAULT_REQUEST)
        defaults.update({
            k: v for k, v in self._section("request_defaults").items()
            if k in DEFAULT_REQUEST
        })
        return defaults

    def should_audit(self) -> bool:
        """Returns True if every routing run should be audit-logged."""
        return bool(self.audit.get("audit_every_run", False))

    def logs_dir(self) -> Path | None:
        """
        Audit log directory, or None to use the audit logger's default.

        Relative paths resolve against the current working directory.
        """
        value = self.audit.get("logs_dir")
        if not value:
            return None
        path = Path(value)
        return path if path.is_absolute() else Path.cwd() / path

    # --- Summary ---

    def summary(self) -> str:
        """Human-readable policy summary."""
        lines = [
            f"Policy Version: {self.version}",
            f"Last Reviewed:  {self._policy.get('last_reviewed', 'N/A')}",
            f"Approved By:    {self._policy.get('approved_by', 'N/A')}",
            "",
            "Request Defaults:",
        ]
        for key, value in self.request_defaults().items():
            lines.append(f"  {key:.<30} {value!r}")

        lines.append("")
        lines.append(f"Audit Every Run: {self.should_audit()}")
        lines.append(f"Audit Logs Dir:  {self.logs_dir() or 'default'}")
        return "\n".join(lines)
