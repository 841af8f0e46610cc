"""
Console-safe icon map
======================
Legacy consoles (cp1252) cannot render symbols.
This module detects the encoding and falls back to ASCII.
"""

from __future__ import annotations

import os
import sys


def _can_render_symbols() -> bool:
    """Return True if stdout can handle non-ASCII symbols."""
    if os.environ.get("PYTHONIOENCODING", "").lower().startswith("utf"):
        return True
    encoding = getattr(sys.stdout, "encoding", None) or ""
    return encoding.lower().replace("-", "") in ("utf8", "utf16", "utf32")


_SYMBOLS = _can_render_symbols()

# ---- Condition marks ----
ICON_CHECK      = "✓" if _SYMBOLS else "[v]"
ICON_CROSS      = "✗" if _SYMBOLS else "[x]"

# ---- Step badges ----
ICON_SELECTED   = "●" if _SYMBOLS else "(*)"
ICON_SKIPPED    = "◌" if _SYMBOLS else "( )"
ICON_NEXT       = "○" if _SYMBOLS else "(-)"
ICON_ARROW      = "↓" if _SYMBOLS else " | "

# ---- Lookup helpers ----

STATUS_ICONS: dict[str, str] = {
    "SELECTED": ICON_SELECTED,
    "SKIPPED": ICON_SKIPPED,
    "PASSED TO NEXT": ICON_NEXT,
}

STATUS_STYLES: dict[str, str] = {
    "SELECTED": "green",
    "SKIPPED": "dim",
    "PASSED TO NEXT": "white",
}


def condition_mark(met: bool) -> str:
    return ICON_CHECK if met else ICON_CROSS
