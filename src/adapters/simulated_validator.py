"""Validador simulado.

Emula una API externa de validación: latencia aleatoria y fallos
transitorios con una probabilidad configurable. Sirve para el modo demo de
la CLI y para ejercitar la lógica de reintentos.
"""

from __future__ import annotations

import asyncio
import logging
import random

from core.config import AppSettings
from core.domain.models import Transaction, ValidationResult
from core.errors import TransientValidationError

logger = logging.getLogger(__name__)


class SimulatedValidator:
    """Implementa `TransactionValidator` sin I/O real."""

    def __init__(
        self,
        *,
        success_rate: float = 0.8,
        latency_min: float = 0.1,
        latency_max: float = 0.4,
        rng: random.Random | None = None,
    ) -> None:
        if not 0.0 <= success_rate <= 1.0:
            raise ValueError("success_rate must be within [0, 1]")
        if latency_min < 0 or latency_min > latency_max:
            raise ValueError("latency range must satisfy 0 <= min <= max")
        self._success_rate = success_rate
        self._latency_min = latency_min
        self._latency_max = latency_max
        self._rng = rng or random.Random()

    @classmethod
    def from_settings(cls, settings: AppSettings, *, seed: int | None = None) -> "SimulatedValidator":
        return cls(
            success_rate=settings.validation_success_rate,
            latency_min=settings.validation_latency_min_seconds,
            latency_max=settings.validation_latency_max_seconds,
            rng=random.Random(seed),
        )

    def _latency(self) -> float:
        if self._latency_max <= self._latency_min:
            return self._latency_min
        return self._rng.uniform(self._latency_min, self._latency_max)

    async def validate(self, transaction: Transaction) -> ValidationResult:
        if transaction.amount is None:
            logger.warning("Transaction %s has null amount", transaction.id)
            return ValidationResult.invalid(f"{transaction.id} - INVALID (amount is null)")

        await asyncio.sleep(self._latency())

        if self._rng.random() < self._success_rate:
            logger.debug("Transaction %s validated successfully", transaction.id)
            return ValidationResult.ok(
                f"{transaction.id} - VALID (currency={transaction.currency}, amount={transaction.amount:.2f})"
            )

        logger.warning("Transient validation error for %s", transaction.id)
        raise TransientValidationError(
            f"Transient validation error for {transaction.id}",
            transaction_id=transaction.id,
        )
