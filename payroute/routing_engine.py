"""
Payment Rail Routing Engine
===========================
Classifies a payment request into one settlement rail and explains why.

Cascade:
  1. Channel Eligibility Check -- decides whether FPS/ACT/RTGS may run
  2. FPS   -- HK faster payments (all-of)
  3. ACT   -- DBS HK book transfer (all-of)
  4. RTGS  -- HK real-time gross settlement (any-of three scenarios)
  5. TT    -- telegraphic transfer fallback (any-of five facts)

The first rail that matches wins and nothing after it is evaluated.
If the gate fails, FPS/ACT/RTGS are recorded as skipped and TT is
still evaluated. If TT does not match either, the verdict is UNKNOWN.

Within a rail every condition is computed, even after one fails, so
the trace can show the full picture. Only the choice of which rail
runs next short-circuits.

The engine holds no state and performs no I/O.
"""

from __future__ import annotations

from payroute.models import Condition, PaymentRequest, RouteResult, StepResult
from payroute.normalizer import has_bank_identifier, is_dbs_hk
from payroute.vocabulary import (
    CNH_FPS_THRESHOLD,
    DBS_HK_SWIFT,
    ELIGIBLE_METHODS,
    GATE_NAME,
    GATED_RAILS,
    HK_COUNTRY,
    POBO_CURRENCIES,
    ROUTE_ACT,
    ROUTE_FPS,
    ROUTE_RTGS,
    ROUTE_TT,
    ROUTE_UNKNOWN,
    RTGS_LOCAL_CURRENCIES,
    RTGS_SWIFT_CURRENCIES,
    SKIP_REASON,
    TT_EXCLUDED_CURRENCIES,
    PaymentMethod,
)


# ---------------------------------------------------------------------------
# Derived facts
# ---------------------------------------------------------------------------

class _Facts:
    """Boolean facts shared by several rules, computed once per request."""

    def __init__(self, request: PaymentRequest) -> None:
        self.request = request
        self.is_dbs_hk = is_dbs_hk(request.bank_identifier)
        self.has_bank = has_bank_identifier(request.bank_identifier)
        self.is_hkg = request.country == HK_COUNTRY
        self.is_swift = request.method == PaymentMethod.SWIFT.value
        self.is_unspecified = request.method == PaymentMethod.UNSPECIFIED.value
        self.pobo = bool(request.pay_on_behalf_of)

    @property
    def currency(self) -> str:
        return self.request.currency

    @property
    def amount(self):
        return self.request.amount

    @property
    def pobo_context(self) -> bool:
        """POBO with a bank, in HK, in a POBO currency."""
        return (
            self.pobo
            and self.has_bank
            and self.is_hkg
            and self.currency in POBO_CURRENCIES
        )


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class RoutingEngine:
    """
    Evaluates the eligibility gate and the rail cascade for a request.
    """

    def evaluate(self, request: PaymentRequest) -> RouteResult:
        facts = _Facts(request)
        result = RouteResult(route=ROUTE_UNKNOWN)

        gate = self._check_eligibility(facts)
        result.steps.append(gate)

        if gate.passed:
            for check in (self._check_fps, self._check_act, self._check_rtgs):
                step = check(facts)
                result.steps.append(step)
                if step.passed:
                    result.route = step.name
                    return result
        else:
            for name in GATED_RAILS:
                result.steps.append(StepResult(
                    name=name, passed=False, skipped=True, reason=SKIP_REASON,
                ))

        tt = self._check_tt(facts)
        result.steps.append(tt)
        if tt.passed:
            result.route = tt.name
        return result

    # --- Gate ---

    def _check_eligibility(self, f: _Facts) -> StepResult:
        method_eligible = f.request.method in ELIGIBLE_METHODS
        scenarios = [
            Condition("Method is LOCAL, SWIFT or Unspecified", method_eligible),
            Condition("OR (POBO is Enabled & Valid Context)", f.pobo_context),
        ]
        return StepResult(
            name=GATE_NAME,
            passed=any(s.met for s in scenarios),
            scenarios=scenarios,
        )

    # --- Rails ---

    def _check_fps(self, f: _Facts) -> StepResult:
        cnh_within_limit = f.currency == "CNH" and f.amount <= CNH_FPS_THRESHOLD
        conditions = [
            Condition("Method is NOT SWIFT", not f.is_swift),
            Condition(f"Country is {HK_COUNTRY}", f.is_hkg),
            Condition("Bank is NOT DBS HK", not f.is_dbs_hk),
            Condition(
                "Currency is HKD OR (CNH & Amt ≤ 5M)",
                f.currency == "HKD" or cnh_within_limit,
            ),
            Condition("POBO is Disabled", not f.pobo),
        ]
        return _all_of(ROUTE_FPS, conditions)

    def _check_act(self, f: _Facts) -> StepResult:
        conditions = [
            Condition(f"Country is {HK_COUNTRY}", f.is_hkg),
            Condition(f"Bank IS DBS HK ({DBS_HK_SWIFT})", f.is_dbs_hk),
            Condition("POBO is Disabled", not f.pobo),
        ]
        return _all_of(ROUTE_ACT, conditions)

    def _check_rtgs(self, f: _Facts) -> StepResult:
        hk_not_dbs = f.is_hkg and not f.is_dbs_hk
        cnh_over_limit = f.currency == "CNH" and f.amount > CNH_FPS_THRESHOLD
        scenarios = [
            Condition(
                "Scenario A: HKG, !DBS, SWIFT, Cur[USD/CNH/HKD/EUR]",
                hk_not_dbs and f.is_swift and f.currency in RTGS_SWIFT_CURRENCIES,
            ),
            Condition(
                "Scenario B: HKG, !DBS, !SWIFT, (Cur[USD/EUR] or CNH > 5M)",
                hk_not_dbs
                and not f.is_swift
                and (f.currency in RTGS_LOCAL_CURRENCIES or cnh_over_limit),
            ),
            Condition(
                "Scenario C: POBO Enabled, Valid Swift, HKG, Cur[HKD/USD/EUR/CNH]",
                f.pobo_context,
            ),
        ]
        return _any_of(ROUTE_RTGS, scenarios)

    def _check_tt(self, f: _Facts) -> StepResult:
        scenarios = [
            Condition("Method is SWIFT", f.is_swift),
            Condition("Method is Unspecified", f.is_unspecified),
            Condition(f"Country is NOT {HK_COUNTRY}", not f.is_hkg),
            Condition(
                "HKG, !DBS, Currency NOT in [USD, HKD, CNH]",
                f.is_hkg and not f.is_dbs_hk and f.currency not in TT_EXCLUDED_CURRENCIES,
            ),
            Condition("POBO is Enabled", f.pobo),
        ]
        return _any_of(ROUTE_TT, scenarios)


def _all_of(name: str, conditions: list[Condition]) -> StepResult:
    return StepResult(name=name, passed=all(c.met for c in conditions), conditions=conditions)


def _any_of(name: str, scenarios: list[Condition]) -> StepResult:
    return StepResult(name=name, passed=any(s.met for s in scenarios), scenarios=scenarios)


_ENGINE = RoutingEngine()


def evaluate(request: PaymentRequest) -> RouteResult:
    """Route a single request with the shared stateless engine."""
    return _ENGINE.evaluate(request)
