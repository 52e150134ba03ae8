"""Exportación JSON del reporte de ejecución."""

from __future__ import annotations

import json
from pathlib import Path

from core.domain.models import PipelineReport


def export_report_json(*, report: PipelineReport, output_path: Path) -> Path:
    """Exporta `PipelineReport` a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = report.model_dump(mode="json")
    payload["total_commission"] = report.total_commission
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
