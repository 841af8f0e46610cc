"""
Routing Vocabulary
==================
Fixed lookup tables consumed by the routing engine.

Every value here is process-wide and immutable. Comparisons against
these tables are case-sensitive; only the bank identifier is normalized
before it is compared (see normalizer.py).
"""

from __future__ import annotations

from enum import Enum


# ---------------------------------------------------------------------------
# Payment methods
# ---------------------------------------------------------------------------

class PaymentMethod(str, Enum):
    """Recognized payment methods. Any other string is accepted but unmatched."""
    LOCAL = "LOCAL"
    SWIFT = "SWIFT"
    UNSPECIFIED = "UNSPECIFIED"


METHOD_LABELS: dict[str, str] = {
    PaymentMethod.LOCAL.value: "LOCAL",
    PaymentMethod.SWIFT.value: "SWIFT",
    PaymentMethod.UNSPECIFIED.value: "Unspecified / Blank",
}

ELIGIBLE_METHODS = frozenset(m.value for m in PaymentMethod)


# ---------------------------------------------------------------------------
# Countries & currencies
# ---------------------------------------------------------------------------

HK_COUNTRY = "HKG"

COUNTRY_LABELS: dict[str, str] = {
    "HKG": "Hong Kong (HKG)",
    "CHN": "China (CHN)",
    "USA": "United States (USA)",
    "GBR": "United Kingdom (GBR)",
    "SGP": "Singapore (SGP)",
    "OTHER": "Other",
}

CURRENCIES: tuple[str, ...] = ("HKD", "CNH", "USD", "EUR", "GBP", "AUD", "JPY", "OTHER")

# Currency sets referenced by individual rules
POBO_CURRENCIES = frozenset({"HKD", "USD", "EUR", "CNH"})
RTGS_SWIFT_CURRENCIES = frozenset({"USD", "CNH", "HKD", "EUR"})
RTGS_LOCAL_CURRENCIES = frozenset({"USD", "EUR"})
TT_EXCLUDED_CURRENCIES = frozenset({"USD", "HKD", "CNH"})

CNH_FPS_THRESHOLD = 5_000_000


# ---------------------------------------------------------------------------
# Banks
# ---------------------------------------------------------------------------

DBS_HK_SWIFT = "DHBKHKHHXXX"


# ---------------------------------------------------------------------------
# Route & step names
# ---------------------------------------------------------------------------

GATE_NAME = "Channel Eligibility Check"
ROUTE_FPS = "FPS"
ROUTE_ACT = "ACT"
ROUTE_RTGS = "RTGS"
ROUTE_TT = "TT"
ROUTE_UNKNOWN = "UNKNOWN"

RAIL_ORDER: tuple[str, ...] = (ROUTE_FPS, ROUTE_ACT, ROUTE_RTGS, ROUTE_TT)
GATED_RAILS: tuple[str, ...] = (ROUTE_FPS, ROUTE_ACT, ROUTE_RTGS)

SKIP_REASON = "Skipped due to Eligibility Check"
