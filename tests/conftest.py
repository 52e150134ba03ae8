"""Shared fixtures."""

import pytest

from core.config import AppSettings
from core.domain.models import Transaction, ValidationResult
from core.errors import TransientValidationError


@pytest.fixture
def settings():
    return AppSettings(
        _env_file=None,
        validation_backoff_seconds=0.0,
        validation_latency_min_seconds=0.0,
        validation_latency_max_seconds=0.0,
    )


class ScriptedValidator:
    """Validator whose outcome per transaction id is scripted.

    `failures[id]` transient failures are raised before succeeding.
    Ids in `rejected` get an invalid result.
    """

    def __init__(self, failures=None, rejected=()):
        self.failures = dict(failures or {})
        self.rejected = set(rejected)
        self.calls = []

    async def validate(self, transaction: Transaction) -> ValidationResult:
        self.calls.append(transaction.id)
        if self.failures.get(transaction.id, 0) > 0:
            self.failures[transaction.id] -= 1
            raise TransientValidationError(f"boom {transaction.id}", transaction_id=transaction.id)
        if transaction.id in self.rejected:
            return ValidationResult.invalid(f"{transaction.id} - INVALID")
        return ValidationResult.ok(f"{transaction.id} - VALID")


@pytest.fixture
def scripted_validator():
    return ScriptedValidator


def _tx(id, amount, currency="USD"):
    return Transaction(id=id, amount=amount, currency=currency)


@pytest.fixture
def sample():
    return [
        _tx("a", 120.0, "USD"),
        _tx("b", 10.0, "EUR"),
        _tx("c", 75.5, "EUR"),
        _tx("d", -5.0, "USD"),
        _tx("e", 200.0, "JPY"),
        _tx("f", None, "USD"),
    ]


@pytest.fixture
def make_tx():
    return _tx
