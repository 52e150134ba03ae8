"""Carga de transacciones.

Formatos JSON soportados:
- Lista: `[{"id": ..., "amount": ..., "currency": ...}, ...]`
- Objeto: `{"transactions": [...]}`

Si una entrada no trae `id` (o es `null`), se genera un UUID4.
"""

from __future__ import annotations

import json
import uuid
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from core.domain.models import Transaction
from core.errors import TransactionLoadError

_TRANSACTIONS = TypeAdapter(list[Transaction])


def parse_transactions(data: Any) -> list[Transaction]:
    if isinstance(data, dict):
        data = data.get("transactions")
    if not isinstance(data, list):
        raise TransactionLoadError("expected a list of transactions or an object with a 'transactions' list")

    items: list[Any] = []
    for item in data:
        if isinstance(item, dict) and item.get("id") is None:
            item = {**item, "id": str(uuid.uuid4())}
        items.append(item)

    try:
        return _TRANSACTIONS.validate_python(items)
    except ValidationError as exc:
        raise TransactionLoadError(f"invalid transaction data: {exc}") from exc


def load_transactions(path: Path) -> list[Transaction]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise TransactionLoadError(f"cannot read {path}: {exc}") from exc
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise TransactionLoadError(f"{path} is not valid JSON: {exc}") from exc
    return parse_transactions(data)


def sample_transactions() -> list[Transaction]:
    """Dataset de demo: incluye importe nulo, negativo y varias monedas."""

    return [
        Transaction.new(120.0, "USD"),
        Transaction.new(10.0, "EUR"),
        Transaction.new(75.5, "EUR"),
        Transaction.new(-5.0, "USD"),
        Transaction.new(200.0, "JPY"),
        Transaction.new(None, "USD"),
    ]
