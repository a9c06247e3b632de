"""Display functions for anonymize commands."""

from typing import List

from rich.table import Table
from rich.panel import Panel
from rich import box
from rich.markup import escape

from cli.core.context import Context
from cli.core.utils import RESTORE_ADVICE
from dbanon.engine import RunSummary
from dbanon.rules import RuleGroup


def display_rule_plan(ctx: Context, groups: List[RuleGroup]):
    """Show every rule group and whether it will run."""
    table = Table(title="Rule Groups", box=box.SIMPLE)
    table.add_column("Group", style="cyan", no_wrap=True)
    table.add_column("Enabled")
    table.add_column("Rules", justify="right")
    table.add_column("Targets", style="dim")

    for group in groups:
        enabled = "[green]yes[/]" if group.enabled else "[dim]no[/]"
        targets = "\n".join(escape(rule.target) for rule in group.rules) or "-"
        table.add_row(group.name, enabled, str(len(group)), targets)

    ctx.console.print(table)


def display_summary(ctx: Context, summary: RunSummary):
    """Show per-rule results of a run."""
    table = Table(box=box.SIMPLE)
    table.add_column("#", style="dim")
    table.add_column("Rule", style="cyan")
    table.add_column("Target")
    table.add_column("Rows", justify="right")
    table.add_column("Status")

    for i, result in enumerate(summary.results, 1):
        status = "[green]✓[/]" if result.ok else "[red]✗[/]"
        rows = f"{result.rowcount:,}" if result.ok else "-"
        table.add_row(str(i), escape(result.rule.name), escape(result.rule.target), rows, status)

    if summary.results:
        ctx.console.print(table)

    ctx.console.print(
        f"Rules succeeded: {summary.succeeded}/{len(summary.resolved_rules)}  "
        f"Rows updated: {summary.rows_affected:,}  "
        f"Duration: {summary.duration:.2f}s",
        style="dim"
    )


def display_failure(ctx: Context, summary: RunSummary):
    """Report the failure that stopped a run, with the store's own message."""
    failure = summary.failure
    lines = [f"[bold]Error kind:[/] {failure.kind.value}"]
    if failure.rule is not None:
        lines.append(f"[bold]Rule:[/] {escape(failure.rule.name)} ({escape(failure.rule.target)})")
    lines.append(f"[bold]Message:[/] {escape(failure.message)}")

    ctx.stderr_console.print(Panel("\n".join(lines), title="Anonymization failed",
                                   border_style="red", expand=False))

    # Nothing was written when the run stopped before its first statement
    if summary.attempted:
        ctx.stderr_console.print(f"❌ {RESTORE_ADVICE}", style="bold red", soft_wrap=True)
