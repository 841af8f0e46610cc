"""
Routing Models
==============
Request and result types for the payment rail router.

A PaymentRequest goes in; a RouteResult comes out. The result carries
the verdict plus one StepResult per rule evaluated, in cascade order:

  Channel Eligibility Check → FPS → ACT → RTGS → TT

Both are created fresh per call and never mutated by the engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from payroute.vocabulary import ROUTE_UNKNOWN


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PaymentRequest:
    """A fully-formed payment request, exactly as supplied by the caller."""
    method: str
    country: str
    currency: str
    bank_identifier: str = ""
    amount: float = 0
    pay_on_behalf_of: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "method": self.method,
            "country": self.country,
            "currency": self.currency,
            "bank_identifier": self.bank_identifier,
            "amount": self.amount,
            "pay_on_behalf_of": self.pay_on_behalf_of,
        }


# ---------------------------------------------------------------------------
# Trace
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Condition:
    """A named boolean fact shown in the trace. Carries no behavior."""
    label: str
    met: bool

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "met": self.met}


@dataclass
class StepResult:
    """One entry in the routing trace."""
    name: str
    passed: bool
    skipped: bool | None = None
    reason: str | None = None
    conditions: list[Condition] | None = None  # all-of rules
    scenarios: list[Condition] | None = None   # any-of rules

    @property
    def is_skipped(self) -> bool:
        return bool(self.skipped)

    @property
    def status_label(self) -> str:
        if self.passed:
            return "SELECTED"
        if self.is_skipped:
            return "SKIPPED"
        return "PASSED TO NEXT"

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"name": self.name, "passed": self.passed}
        if self.skipped is not None:
            d["skipped"] = self.skipped
        if self.reason is not None:
            d["reason"] = self.reason
        if self.conditions is not None:
            d["conditions"] = [c.to_dict() for c in self.conditions]
        if self.scenarios is not None:
            d["scenarios"] = [s.to_dict() for s in self.scenarios]
        return d


@dataclass
class RouteResult:
    """The routing verdict plus the ordered trace that produced it."""
    route: str
    steps: list[StepResult] = field(default_factory=list)

    @property
    def is_resolved(self) -> bool:
        return self.route != ROUTE_UNKNOWN

    @property
    def selected_step(self) -> StepResult | None:
        """The rail step that produced the verdict, if any."""
        if not self.is_resolved:
            return None
        return next((s for s in self.steps if s.name == self.route and s.passed), None)

    def step(self, name: str) -> StepResult | None:
        return next((s for s in self.steps if s.name == name), None)

    def summary(self) -> str:
        lines = [
            "=" * 60,
            "ROUTING DECISION",
            "=" * 60,
            f"Route: {self.route}",
            "",
        ]
        for i, s in enumerate(self.steps, 1):
            lines.append(f"[{i}] {s.name} -- {s.status_label}")
            if s.conditions is not None:
                for c in s.conditions:
                    lines.append(f"    [{'x' if c.met else ' '}] {c.label}")
            if s.scenarios is not None:
                lines.append("    Matches any scenario:")
                for sc in s.scenarios:
                    lines.append(f"    [{'x' if sc.met else ' '}] {sc.label}")
            if s.reason:
                lines.append(f"    {s.reason}")
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "route": self.route,
            "steps": [s.to_dict() for s in self.steps],
        }
