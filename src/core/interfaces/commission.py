"""Contrato de estrategias de comisión."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class CommissionStrategy(Protocol):
    """Calcula la comisión para un importe.

    Reglas:
    - Un importe `None` produce comisión `0.0`.
    """

    def calculate_commission(self, amount: float | None) -> float:
        ...
