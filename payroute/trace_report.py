"""
Trace Report
============
Renders a routing decision as a Markdown report using Jinja2.

The report mirrors the step-by-step view of the trace: a decision
banner, then one section per step with its status badge and every
condition or scenario marked met / not met.
"""

from __future__ import annotations

from jinja2 import BaseLoader, Environment

from payroute.models import PaymentRequest, RouteResult
from payroute.vocabulary import COUNTRY_LABELS, METHOD_LABELS


# ---------------------------------------------------------------------------
# Jinja2 Filters
# ---------------------------------------------------------------------------

def checkbox(met: bool) -> str:
    """Markdown task-list box for a condition."""
    return "[x]" if met else "[ ]"


def method_label(value: str) -> str:
    return METHOD_LABELS.get(value, value or "(blank)")


def country_label(value: str) -> str:
    return COUNTRY_LABELS.get(value, value or "(blank)")


REPORT_TEMPLATE = """\
# Routing Decision: {{ result.route }}

{% if request_id %}Request ID: `{{ request_id }}`

{% endif %}\
{% if policy_version %}Policy Version: `{{ policy_version }}`

{% endif %}\
## Payment Details

| Field | Value |
|---|---|
| Payment Method | {{ request.method | method_label }} |
| Beneficiary Country | {{ request.country | country_label }} |
| Currency | {{ request.currency }} |
| Beneficiary Bank SWIFT | {{ request.bank_identifier or "(none)" }} |
| Amount | {{ request.currency }} {{ "{:,}".format(request.amount) }} |
| POBO Enabled | {{ "Yes" if request.pay_on_behalf_of else "No" }} |

## Routing Path
{% for step in result.steps %}
### {{ loop.index }}. {{ step.name }} -- {{ step.status_label }}
{% if step.conditions is not none %}
{% for c in step.conditions %}- {{ c.met | checkbox }} {{ c.label }}
{% endfor %}{% endif %}\
{% if step.scenarios is not none %}
Matches any scenario:

{% for s in step.scenarios %}- {{ s.met | checkbox }} {{ s.label }}
{% endfor %}{% endif %}\
{% if step.reason %}
_{{ step.reason }}_
{% endif %}\
{% endfor %}\
"""


# ---------------------------------------------------------------------------
# Renderer
# ---------------------------------------------------------------------------

class TraceReportRenderer:
    """
    Renders RouteResults to Markdown.
    """

    def __init__(self) -> None:
        self.env = Environment(loader=BaseLoader(), autoescape=False)
        self.env.filters["checkbox"] = checkbox
        self.env.filters["method_label"] = method_label
        self.env.filters["country_label"] = country_label
        self._template = self.env.from_string(REPORT_TEMPLATE)

    def render(
        self,
        request: PaymentRequest,
        result: RouteResult,
        request_id: str | None = None,
        policy_version: str | None = None,
    ) -> str:
        return self._template.render(
            request=request,
            result=result,
            request_id=request_id,
            policy_version=policy_version,
        )
