"""Commission strategies per currency.

Each currency maps to a flat percentage of the transaction amount. Unknown
currencies fall back to the default rate.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.config import AppSettings
from core.interfaces.commission import CommissionStrategy


@dataclass(frozen=True)
class PercentageCommissionStrategy:
    """Flat percentage of the amount; `None` amounts earn nothing."""

    rate: float
    name: str = "percentage"

    def calculate_commission(self, amount: float | None) -> float:
        if amount is None:
            return 0.0
        return amount * self.rate


class USDCommissionStrategy(PercentageCommissionStrategy):
    def __init__(self, rate: float = 0.02) -> None:
        super().__init__(rate=rate, name="usd")


class EURCommissionStrategy(PercentageCommissionStrategy):
    def __init__(self, rate: float = 0.01) -> None:
        super().__init__(rate=rate, name="eur")


class DefaultCommissionStrategy(PercentageCommissionStrategy):
    def __init__(self, rate: float = 0.05) -> None:
        super().__init__(rate=rate, name="default")


class CommissionStrategyFactory:
    """Resolves the strategy for a currency code (case-insensitive)."""

    def __init__(
        self,
        *,
        usd_rate: float = 0.02,
        eur_rate: float = 0.01,
        default_rate: float = 0.05,
    ) -> None:
        self._strategies: dict[str, CommissionStrategy] = {
            "USD": USDCommissionStrategy(usd_rate),
            "EUR": EURCommissionStrategy(eur_rate),
        }
        self._default = DefaultCommissionStrategy(default_rate)

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "CommissionStrategyFactory":
        return cls(
            usd_rate=settings.usd_commission_rate,
            eur_rate=settings.eur_commission_rate,
            default_rate=settings.default_commission_rate,
        )

    def for_currency(self, currency: str | None) -> CommissionStrategy:
        if currency is None:
            return self._default
        return self._strategies.get(currency.strip().upper(), self._default)
