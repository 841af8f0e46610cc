"""
Payment Rail Router -- CLI Interface
====================================
Terminal front end for the routing engine.

Commands:
  route            -- Route a single payment and show the rule trace
  batch            -- Route every request in a YAML file
  list-currencies  -- List recognized currencies
  list-countries   -- List recognized beneficiary countries
  list-methods     -- List recognized payment methods
  policy           -- Display the current routing policy
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from payroute.audit_logger import AuditLogger
from payroute.models import PaymentRequest, RouteResult, StepResult
from payroute.request_loader import load_requests, request_from_dict
from payroute.routing_engine import RoutingEngine
from payroute.routing_policy import RoutingPolicy
from payroute.trace_report import TraceReportRenderer
from payroute.vocabulary import (
    CNH_FPS_THRESHOLD,
    COUNTRY_LABELS,
    CURRENCIES,
    DBS_HK_SWIFT,
    METHOD_LABELS,
)
from payroute._icons import (
    ICON_ARROW,
    ICON_CROSS,
    STATUS_ICONS,
    STATUS_STYLES,
    condition_mark,
)

console = Console()


# ---------------------------------------------------------------------------
# Rendering helpers
# ---------------------------------------------------------------------------

def _step_panel(step: StepResult) -> Panel:
    status = step.status_label
    body = Text()
    if step.conditions is not None:
        for c in step.conditions:
            body.append(f"{condition_mark(c.met)} {c.label}\n", style="green" if c.met else "dim")
    if step.scenarios is not None:
        body.append("Matches any scenario:\n", style="bold")
        for s in step.scenarios:
            body.append(f"{condition_mark(s.met)} {s.label}\n", style="green" if s.met else "dim")
    if step.reason:
        body.append(step.reason, style="italic")
    return Panel(
        body,
        title=f"{STATUS_ICONS[status]} {step.name}",
        subtitle=status,
        border_style=STATUS_STYLES[status],
    )


def _render_result(result: RouteResult) -> None:
    banner_style = "blue" if result.is_resolved else "red"
    console.print()
    console.print(Panel(
        Text(result.route, style="bold"),
        title="Routing Decision",
        border_style=banner_style,
    ))
    for i, step in enumerate(result.steps):
        console.print(_step_panel(step))
        if i < len(result.steps) - 1:
            console.print(f"  {ICON_ARROW}")


def _audit(
    policy: RoutingPolicy,
    force: bool,
    logs_dir: str | None,
    operation: str,
    request: PaymentRequest,
    result: RouteResult,
    request_id: str | None = None,
) -> Path | None:
    if not (force or policy.should_audit()):
        return None
    target = Path(logs_dir) if logs_dir else policy.logs_dir()
    logger = AuditLogger(target)
    return logger.log_run(
        operation=operation,
        request=request,
        result=result,
        request_id=request_id,
        policy_version=policy.version,
    )


# ---------------------------------------------------------------------------
# CLI Group
# ---------------------------------------------------------------------------

@click.group()
@click.version_option("1.0.0", prog_name="Payment Rail Router")
def main():
    """Payment Rail Router -- FPS / ACT / RTGS / TT decision engine"""
    pass


# ---------------------------------------------------------------------------
# route
# ---------------------------------------------------------------------------

@main.command()
@click.option("--method", "-m", default=None, help="Payment method (LOCAL, SWIFT, UNSPECIFIED).")
@click.option("--country", "-c", default=None, help="Beneficiary country code, e.g. HKG.")
@click.option("--currency", "-y", default=None, help="Payment currency, e.g. HKD.")
@click.option("--bank", "-b", "bank_identifier", default=None,
              help="Beneficiary bank SWIFT/BIC code.")
@click.option("--dbs", is_flag=True, help=f"Use the DBS HK code ({DBS_HK_SWIFT}) as the bank.")
@click.option("--amount", "-a", default=None, help="Payment amount.")
@click.option("--pobo/--no-pobo", default=None, help="Payment on behalf of a third party.")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
@click.option("--markdown", is_flag=True, help="Print a Markdown trace report.")
@click.option("--output", "-o", default=None, type=click.Path(dir_okay=False),
              help="Write the Markdown trace report to a file.")
@click.option("--audit", is_flag=True, help="Write an audit record for this run.")
@click.option("--logs-dir", default=None, type=click.Path(file_okay=False),
              help="Directory for audit records.")
def route(method, country, currency, bank_identifier, dbs, amount, pobo,
          as_json, markdown, output, audit, logs_dir):
    """Route a single payment and show every rule evaluated."""
    policy = RoutingPolicy()

    supplied = {
        "method": method,
        "country": country,
        "currency": currency,
        "bank_identifier": DBS_HK_SWIFT if dbs else bank_identifier,
        "pay_on_behalf_of": pobo,
    }
    if amount is not None:
        supplied["amount"] = amount

    try:
        request = request_from_dict(supplied, policy.request_defaults())
    except ValueError as e:
        console.print(f"[red]{ICON_CROSS} Invalid request:[/red] {escape(str(e))}")
        sys.exit(1)

    result = RoutingEngine().evaluate(request)
    audit_path = _audit(policy, audit, logs_dir, "route", request, result)

    report = None
    if markdown or output:
        report = TraceReportRenderer().render(
            request, result, policy_version=policy.version,
        )
    if output:
        try:
            Path(output).write_text(report, encoding="utf-8")
        except OSError as e:
            console.print(f"[red]{ICON_CROSS} Could not write report:[/red] {escape(str(e))}")
            sys.exit(1)

    if as_json:
        click.echo(json.dumps(
            {"request": request.to_dict(), **result.to_dict()}, indent=2,
        ))
    elif markdown:
        click.echo(report)
    elif not output:
        _render_result(result)

    if output and not as_json:
        console.print(f"Trace report written to [cyan]{escape(output)}[/cyan]")
    if audit_path and not as_json:
        console.print(f"[dim]Audit record: {escape(str(audit_path))}[/dim]")


# ---------------------------------------------------------------------------
# batch
# ---------------------------------------------------------------------------

@main.command()
@click.argument("requests_file", type=click.Path())
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON.")
@click.option("--audit", is_flag=True, help="Write an audit record per request.")
@click.option("--logs-dir", default=None, type=click.Path(file_okay=False),
              help="Directory for audit records.")
def batch(requests_file, as_json, audit, logs_dir):
    """Route every request in a YAML file."""
    policy = RoutingPolicy()
    try:
        loaded = load_requests(requests_file, policy.request_defaults())
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[red]{ICON_CROSS} Request load failed:[/red] {escape(str(e))}")
        sys.exit(1)

    engine = RoutingEngine()
    results = []
    for request_id, request in loaded:
        result = engine.evaluate(request)
        _audit(policy, audit, logs_dir, "batch", request, result, request_id)
        results.append((request_id, request, result))

    if as_json:
        click.echo(json.dumps([
            {"id": rid, "request": req.to_dict(), **res.to_dict()}
            for rid, req, res in results
        ], indent=2))
        return

    table = Table(title=f"Routing Decisions -- {escape(Path(requests_file).name)}")
    table.add_column("ID", style="cyan")
    table.add_column("Method")
    table.add_column("Country")
    table.add_column("Currency")
    table.add_column("Bank")
    table.add_column("Amount", justify="right")
    table.add_column("POBO")
    table.add_column("Route", style="bold")

    for rid, req, res in results:
        # Request fields are free text; Text() keeps rich from reading them as markup
        table.add_row(
            Text(rid),
            Text(req.method),
            Text(req.country),
            Text(req.currency),
            Text(req.bank_identifier or "-"),
            f"{req.amount:,}",
            "Y" if req.pay_on_behalf_of else "N",
            Text(res.route, style="" if res.is_resolved else "red"),
        )
    console.print(table)


# ---------------------------------------------------------------------------
# Vocabulary listings
# ---------------------------------------------------------------------------

@main.command("list-currencies")
def list_currencies():
    """List recognized currencies."""
    table = Table(title="Recognized Currencies")
    table.add_column("Code", style="cyan")
    for code in CURRENCIES:
        table.add_row(code)
    console.print(table)
    console.print(f"[dim]Threshold for CNH checks: {CNH_FPS_THRESHOLD:,}[/dim]")


@main.command("list-countries")
def list_countries():
    """List recognized beneficiary countries."""
    table = Table(title="Recognized Countries")
    table.add_column("Code", style="cyan")
    table.add_column("Label", style="green")
    for code, label in COUNTRY_LABELS.items():
        table.add_row(code, label)
    console.print(table)


@main.command("list-methods")
def list_methods():
    """List recognized payment methods."""
    table = Table(title="Recognized Payment Methods")
    table.add_column("Value", style="cyan")
    table.add_column("Label", style="green")
    for value, label in METHOD_LABELS.items():
        table.add_row(value, label)
    console.print(table)
    console.print(f"[dim]Use {DBS_HK_SWIFT} (or --dbs) for DBS HK logic[/dim]")


# ---------------------------------------------------------------------------
# policy
# ---------------------------------------------------------------------------

@main.command("policy")
def policy_cmd():
    """Display the current routing policy."""
    policy = RoutingPolicy()
    console.print()
    console.print(Panel(
        policy.summary(),
        title=f"ROUTING POLICY v{policy.version}",
        border_style="blue",
    ))


if __name__ == "__main__":
    main()
