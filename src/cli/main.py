"""midtest CLI (Typer)."""

from __future__ import annotations

import asyncio
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console

from adapters.http_validator import HttpValidator
from adapters.json_exporter import export_report_json
from adapters.report_exporter import export_report_html
from adapters.simulated_validator import SimulatedValidator
from adapters.transactions_loader import load_transactions, sample_transactions
from cli import doctor
from cli.logging_setup import configure_logging
from cli.ui_components import (
    build_commissions_table,
    build_skipped_table,
    build_summary_panel,
    build_validations_table,
    print_banner,
)
from core.config import AppSettings
from core.domain.models import PipelineReport, Transaction
from core.errors import MidtestError
from core.services.commission import CommissionStrategyFactory
from core.services.transaction_pipeline import PipelineHooks, run_pipeline

app = typer.Typer(
    no_args_is_help=True,
    help="Clean, filter, price and validate transactions.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()


class ValidatorKind(str, Enum):
    SIMULATED = "simulated"
    HTTP = "http"


def _load_settings(**overrides: object) -> AppSettings:
    try:
        return AppSettings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc


async def _execute(
    *,
    settings: AppSettings,
    transactions: list[Transaction],
    kind: ValidatorKind,
    seed: int | None,
    hooks: PipelineHooks,
) -> PipelineReport:
    if kind is ValidatorKind.HTTP:
        if not settings.validator_url:
            raise MidtestError("the http validator needs MIDTEST_VALIDATOR_URL (or --validator-url)")
        async with HttpValidator(settings.validator_url, settings=settings) as validator:
            return await run_pipeline(
                settings=settings,
                transactions=transactions,
                validator=validator,
                hooks=hooks,
            )
    return await run_pipeline(
        settings=settings,
        transactions=transactions,
        validator=SimulatedValidator.from_settings(settings, seed=seed),
        hooks=hooks,
    )


@app.command()
def run(
    input_path: Optional[Path] = typer.Option(
        None,
        "--input",
        "-i",
        help="JSON file with transactions. Defaults to the built-in sample.",
        dir_okay=False,
    ),
    threshold: Optional[float] = typer.Option(None, "--threshold", help="Process amounts strictly above this."),
    max_attempts: Optional[int] = typer.Option(None, "--max-attempts", help="Validation attempts per transaction."),
    backoff: Optional[float] = typer.Option(None, "--backoff", help="Seconds to wait between attempts."),
    validator: Optional[ValidatorKind] = typer.Option(
        None,
        "--validator",
        case_sensitive=False,
        help="Validation backend (default: http when a URL is configured).",
    ),
    validator_url: Optional[str] = typer.Option(None, "--validator-url", help="HTTP validation endpoint."),
    json_out: Optional[Path] = typer.Option(None, "--json-out", help="Write the report as JSON."),
    html_out: Optional[Path] = typer.Option(None, "--html-out", help="Write the report as HTML."),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for the simulated validator."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
    no_banner: bool = typer.Option(False, "--no-banner", help="Do not print the banner."),
) -> None:
    """Run the transaction pipeline and print the results."""

    settings = _load_settings(
        amount_threshold=threshold,
        validation_max_attempts=max_attempts,
        validation_backoff_seconds=backoff,
        validator_url=validator_url,
    )
    configure_logging("DEBUG" if verbose else settings.log_level)

    if not no_banner:
        print_banner(_console)

    kind = validator or (ValidatorKind.HTTP if settings.validator_url else ValidatorKind.SIMULATED)
    try:
        transactions = load_transactions(input_path) if input_path else sample_transactions()
        report = asyncio.run(
            _execute(
                settings=settings,
                transactions=transactions,
                kind=kind,
                seed=seed,
                hooks=PipelineHooks(),
            )
        )
    except MidtestError as exc:
        _console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    if report.skipped:
        _console.print(build_skipped_table(report.skipped))
    _console.print(build_commissions_table(report.commissions))
    _console.print(build_validations_table(report.validations))
    _console.print(build_summary_panel(report))

    if json_out:
        path = export_report_json(report=report, output_path=json_out)
        _console.print(f"[green]JSON report:[/green] {path}")
    if html_out:
        path = export_report_html(report=report, output_path=html_out)
        _console.print(f"[green]HTML report:[/green] {path}")


@app.command()
def commission(
    amount: float = typer.Argument(..., help="Transaction amount."),
    currency: str = typer.Argument(..., help="Currency code (USD, EUR, ...)."),
) -> None:
    """Print the commission for a single amount."""

    settings = _load_settings()
    strategy = CommissionStrategyFactory.from_settings(settings).for_currency(currency)
    value = strategy.calculate_commission(amount)
    _console.print(f"{currency.upper()} {amount:.2f} -> commission {value:.2f}")
