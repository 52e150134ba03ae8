"""Contrato de validadores de transacciones.

Reglas de diseño:
- `validate` suele ser asíncrono (I/O HTTP). Una implementación bloqueante
  (función normal) también se admite: el pipeline la ejecuta en su pool de
  hilos.
- Un fallo transitorio se señala con `TransientValidationError`; el
  pipeline lo reintenta. Un rechazo definitivo es un `ValidationResult`
  con `valid=False`.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import Transaction, ValidationResult


@runtime_checkable
class TransactionValidator(Protocol):
    async def validate(self, transaction: Transaction) -> ValidationResult:
        """Valida `transaction` y devuelve el resultado normalizado."""

        ...
