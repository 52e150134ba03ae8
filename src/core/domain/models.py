"""Modelos del dominio (Pydantic v2).

Nota:
- Estos modelos describen *qué* es la información (transacciones, comisiones,
  validaciones), no *cómo* se obtiene ni cómo se presenta.
- `Transaction` y `ValidationResult` son inmutables: los cambios de estado
  producen copias.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict


class TransactionStatus(str, Enum):
    """Estados de una transacción dentro del pipeline."""

    NEW = "NEW"
    PROCESSED = "PROCESSED"


class Transaction(BaseModel):
    """Una transacción monetaria de entrada.

    `amount` admite `None` y valores negativos: el pipeline los descarta y
    registra un aviso, el modelo no los rechaza.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Identificador único (normalmente un UUID4).",
    )
    amount: float | None = Field(
        default=None,
        description="Importe en la moneda indicada. Puede faltar.",
    )
    currency: str = Field(
        ...,
        min_length=1,
        max_length=16,
        description="Código de moneda (p.ej. 'USD', 'EUR').",
    )
    status: TransactionStatus = Field(
        default=TransactionStatus.NEW,
        description="Estado actual de la transacción.",
    )

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: object) -> object:
        return TransactionStatus.NEW if value is None else value

    @classmethod
    def new(
        cls,
        amount: float | None,
        currency: str,
        status: TransactionStatus = TransactionStatus.NEW,
    ) -> "Transaction":
        """Crea una transacción con id aleatorio."""

        return cls(id=str(uuid.uuid4()), amount=amount, currency=currency, status=status)

    def with_status(self, status: TransactionStatus) -> "Transaction":
        return self.model_copy(update={"status": status})


class ValidationResult(BaseModel):
    """Resultado de validar una transacción contra el servicio externo."""

    model_config = ConfigDict(frozen=True)

    valid: bool
    message: str

    @classmethod
    def ok(cls, message: str = "OK") -> "ValidationResult":
        if message is None:
            raise ValueError("message must not be None")
        return cls(valid=True, message=message)

    @classmethod
    def invalid(cls, message: str) -> "ValidationResult":
        if message is None:
            raise ValueError("message must not be None")
        return cls(valid=False, message=message)


class SkippedTransaction(BaseModel):
    """Transacción descartada durante la limpieza de entrada."""

    transaction: Transaction
    reason: str = Field(
        ...,
        description="Motivo del descarte: 'null_amount' o 'negative_amount'.",
    )


class CommissionLine(BaseModel):
    """Comisión calculada para una transacción procesada."""

    transaction_id: str
    currency: str
    amount: float | None
    commission: float
    rate: float
    strategy: str


class TransactionValidation(BaseModel):
    """Resultado final (tras reintentos) de validar una transacción."""

    transaction_id: str
    result: ValidationResult | None = None
    error: str | None = Field(
        default=None,
        description="Mensaje de error si se agotaron los reintentos.",
    )
    attempts: int = Field(default=0, ge=0)

    @property
    def succeeded(self) -> bool:
        return self.result is not None and self.result.valid

    def summary(self) -> str:
        if self.result is not None:
            return self.result.message
        return f"{self.transaction_id} - FAILED ({self.error or 'unknown error'})"


class PipelineReport(BaseModel):
    """Agregado de una ejecución del pipeline (exportable a JSON/HTML)."""

    threshold: float
    input_count: int = Field(default=0, ge=0)
    skipped: list[SkippedTransaction] = Field(default_factory=list)
    processed: list[Transaction] = Field(default_factory=list)
    total_amount: float = 0.0
    commissions: list[CommissionLine] = Field(default_factory=list)
    validations: list[TransactionValidation] = Field(default_factory=list)
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Momento de generación del reporte (UTC).",
    )

    @property
    def total_commission(self) -> float:
        return sum(line.commission for line in self.commissions)

    @property
    def failed_validations(self) -> list[TransactionValidation]:
        return [v for v in self.validations if not v.succeeded]
