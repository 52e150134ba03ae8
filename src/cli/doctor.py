"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
import tempfile
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from adapters.report_exporter import export_report_html
from core.config import AppSettings, get_user_env_file
from core.domain.models import PipelineReport

app = typer.Typer(help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc)


def _check_html_report() -> tuple[bool, str]:
    """Render an empty report to detect template problems."""

    try:
        with tempfile.TemporaryDirectory() as tmp:
            export_report_html(report=PipelineReport(threshold=0.0), output_path=Path(tmp) / "doctor.html")
        return True, "OK"
    except Exception as exc:
        return False, str(exc)


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """Run the checks when `doctor` is called without a subcommand."""

    if ctx.invoked_subcommand is None:
        run()


@app.command()
def run() -> None:
    """Show the effective configuration and run baseline checks."""

    settings = AppSettings()

    table = Table(title="midtest doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    env_file = get_user_env_file()
    table.add_row("User config", "OK" if env_file.exists() else "OPTIONAL", str(env_file))
    table.add_row("Threshold", "OK", f"> {settings.amount_threshold:g}")
    table.add_row(
        "Retries",
        "OK" if settings.validation_max_attempts > 0 else "WARN",
        f"{settings.validation_max_attempts} attempts, {settings.validation_backoff_seconds:g}s backoff",
    )
    table.add_row(
        "Commission rates",
        "OK",
        f"USD {settings.usd_commission_rate:g} / EUR {settings.eur_commission_rate:g} / "
        f"other {settings.default_commission_rate:g}",
    )

    if settings.validator_url:
        ok_http, detail_http = asyncio.run(_check_http(settings.validator_url, settings))
        table.add_row("Validator endpoint", "OK" if ok_http else "FAIL", detail_http)
    else:
        table.add_row("Validator endpoint", "OPTIONAL", "No URL set -> simulated validator")

    ok_html, detail_html = _check_html_report()
    table.add_row("HTML report", "OK" if ok_html else "FAIL", detail_html)

    _console.print(table)
