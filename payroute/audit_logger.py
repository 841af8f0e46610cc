"""
Audit Logger
=============
Writes an audit record for a routing decision.

Each record is a timestamped JSON file containing:
  - The request as supplied, and its hash
  - The verdict
  - The full step trace (every condition and scenario)
  - Policy version applied
  - Git commit hash (if available)
  - A record hash for tamper detection

The routing engine never writes these itself. Callers decide when a
decision should be recorded.
"""

from __future__ import annotations

import hashlib
import json
import subprocess
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from payroute.models import PaymentRequest, RouteResult


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

LOGS_DIR_NAME = "logs"


# ---------------------------------------------------------------------------
# Audit Logger
# ---------------------------------------------------------------------------

class AuditLogger:
    """
    Writes structured audit records for routing runs.
    """

    def __init__(self, logs_dir: Path | None = None) -> None:
        self._logs_dir = logs_dir or Path.cwd() / LOGS_DIR_NAME
        self._logs_dir.mkdir(parents=True, exist_ok=True)

    @property
    def logs_dir(self) -> Path:
        return self._logs_dir

    def log_run(
        self,
        *,
        operation: str,
        request: PaymentRequest,
        result: RouteResult,
        request_id: str | None = None,
        policy_version: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> Path:
        """
        Write a single audit record.

        Returns:
            Path to the written audit log file.
        """
        now = datetime.now(timezone.utc)
        timestamp = now.strftime("%Y-%m-%dT%H-%M-%S-%f")

        request_data = request.to_dict()
        record: dict[str, Any] = {
            "audit_version": "1.0",
            "timestamp_utc": now.isoformat(),
            "operation": operation,
            "git_commit": self._git_commit(),
            "request": request_data,
            "request_hash": self._hash_dict(request_data),
            "route": result.route,
            "steps": result.to_dict()["steps"],
        }

        if request_id:
            record["request_id"] = request_id

        if policy_version is not None:
            record["policy_version"] = policy_version

        if extra:
            record["extra"] = extra

        record_json = json.dumps(record, sort_keys=True, default=str)
        record["record_hash"] = hashlib.sha256(record_json.encode()).hexdigest()

        op_slug = operation.replace(" ", "_").replace("-", "_").lower()
        id_slug = ""
        if request_id:
            id_slug = "_" + "".join(
                ch if ch.isalnum() or ch in "-_" else "_" for ch in request_id
            )
        filename = f"{timestamp}_{op_slug}{id_slug}.json"
        filepath = self._logs_dir / filename

        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(record, f, indent=2, default=str, ensure_ascii=False)

        return filepath

    # --- Helpers ---

    @staticmethod
    def _hash_dict(d: dict[str, Any]) -> str:
        """SHA256 hash of a dictionary for tamper detection."""
        canonical = json.dumps(d, sort_keys=True, default=str)
        return hashlib.sha256(canonical.encode()).hexdigest()

    @staticmethod
    def _git_commit() -> str | None:
        """Get current git commit hash, or None if not in a repo."""
        try:
            result = subprocess.run(
                ["git", "rev-parse", "--short", "HEAD"],
                capture_output=True,
                text=True,
                timeout=5,
            )
            if result.returncode == 0:
                return result.stdout.strip()
        except (OSError, subprocess.SubprocessError):
            pass
        return None
