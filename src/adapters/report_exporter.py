"""Exportación del reporte a HTML (Jinja2).

El Core solo conoce el agregado `PipelineReport`; la plantilla vive en
`adapters/templates/report.html`.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from core.domain.models import PipelineReport


_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


def _get_env() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "xml"]),
    )
    env.filters["money"] = lambda value: "-" if value is None else f"{value:,.2f}"
    env.filters["percent"] = lambda value: f"{value * 100:g}%"
    return env


def render_report_html(*, report: PipelineReport) -> str:
    """Renderiza un HTML autocontenido para el reporte."""

    generated_at = report.generated_at.astimezone(timezone.utc).isoformat(timespec="seconds")
    generated_at_local = datetime.now().astimezone().isoformat(timespec="seconds")

    validations_ok = [v for v in report.validations if v.succeeded]
    template = _get_env().get_template("report.html")
    return template.render(
        report=report,
        generated_at=generated_at,
        generated_at_local=generated_at_local,
        validations_ok_count=len(validations_ok),
    )


def export_report_html(*, report: PipelineReport, output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_report_html(report=report), encoding="utf-8")
    return output_path
