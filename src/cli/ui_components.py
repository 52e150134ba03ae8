"""Componentes de UI para CLI (Rich).

Tablas y paneles reutilizables por los comandos; no contienen lógica de
negocio.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import CommissionLine, PipelineReport, SkippedTransaction, TransactionValidation


def _money(value: float | None) -> str:
    return "null" if value is None else f"{value:.2f}"


def print_banner(console: Console) -> None:
    title = Text("MIDTEST", style="bold cyan")
    subtitle = Text("Transactions • Commissions • Validation", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_skipped_table(skipped: list[SkippedTransaction]) -> Table:
    table = Table(title="Skipped Transactions")
    table.add_column("Id", style="dim", no_wrap=True)
    table.add_column("Currency", style="cyan")
    table.add_column("Amount", justify="right")
    table.add_column("Reason", style="yellow")
    for item in skipped:
        tx = item.transaction
        table.add_row(tx.id, tx.currency, _money(tx.amount), item.reason)
    return table


def build_commissions_table(lines: list[CommissionLine]) -> Table:
    table = Table(title="Commissions")
    table.add_column("Id", style="dim", no_wrap=True)
    table.add_column("Currency", style="cyan")
    table.add_column("Amount", justify="right")
    table.add_column("Rate", justify="right")
    table.add_column("Commission", justify="right", style="green")
    for line in lines:
        table.add_row(
            line.transaction_id,
            line.currency,
            _money(line.amount),
            f"{line.rate * 100:g}%",
            _money(line.commission),
        )
    return table


def build_validations_table(validations: list[TransactionValidation]) -> Table:
    table = Table(title="Validation Results")
    table.add_column("Id", style="dim", no_wrap=True)
    table.add_column("Status")
    table.add_column("Attempts", justify="right")
    table.add_column("Detail", style="white")
    for item in validations:
        if item.succeeded:
            status = Text("VALID", style="green")
        elif item.result is not None:
            status = Text("INVALID", style="yellow")
        else:
            status = Text("FAILED", style="red")
        table.add_row(item.transaction_id, status, str(item.attempts), item.summary())
    return table


def build_summary_panel(report: PipelineReport) -> Panel:
    body = Text()
    body.append(f"Input transactions: {report.input_count}\n")
    body.append(f"Skipped: {len(report.skipped)}\n")
    body.append(f"Processed (> {report.threshold:g}): {len(report.processed)}\n")
    body.append(f"Total processed amount: {report.total_amount:.2f}\n")
    body.append(f"Total commission: {report.total_commission:.2f}\n")
    failed = len(report.failed_validations)
    style = "red" if failed else "green"
    body.append(f"Validations not OK: {failed}", style=style)
    return Panel(body, title=Text("Summary", style="bold yellow"), border_style="yellow")
