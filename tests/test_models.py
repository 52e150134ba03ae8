"""Tests for domain models: transactions, validation results, report."""

import pytest
from pydantic import ValidationError

from core.domain.models import (
    CommissionLine,
    PipelineReport,
    Transaction,
    TransactionStatus,
    TransactionValidation,
    ValidationResult,
)


class TestTransaction:
    def test_defaults_to_new(self):
        t = Transaction(id="x", amount=1.0, currency="USD")
        assert t.status is TransactionStatus.NEW

    def test_none_status_coerces_to_new(self):
        t = Transaction(id="x", amount=1.0, currency="USD", status=None)
        assert t.status is TransactionStatus.NEW

    def test_null_and_negative_amounts_allowed(self):
        assert Transaction(id="x", amount=None, currency="USD").amount is None
        assert Transaction(id="y", amount=-5.0, currency="USD").amount == -5.0

    def test_id_and_currency_required(self):
        with pytest.raises(ValidationError):
            Transaction(id="", amount=1.0, currency="USD")
        with pytest.raises(ValidationError):
            Transaction(id="x", amount=1.0, currency="")

    def test_with_status_returns_copy(self):
        t = Transaction(id="x", amount=60.0, currency="EUR")
        processed = t.with_status(TransactionStatus.PROCESSED)
        assert processed.status is TransactionStatus.PROCESSED
        assert t.status is TransactionStatus.NEW
        assert processed.id == t.id and processed.amount == t.amount

    def test_frozen(self):
        t = Transaction(id="x", amount=1.0, currency="USD")
        with pytest.raises(ValidationError):
            t.amount = 2.0

    def test_new_generates_unique_ids(self):
        a = Transaction.new(1.0, "USD")
        b = Transaction.new(1.0, "USD")
        assert a.id != b.id
        assert len(a.id) == 36


class TestValidationResult:
    def test_ok_default_message(self):
        r = ValidationResult.ok()
        assert r.valid is True
        assert r.message == "OK"

    def test_invalid(self):
        r = ValidationResult.invalid("bad")
        assert r.valid is False
        assert r.message == "bad"

    def test_message_required(self):
        with pytest.raises(ValueError):
            ValidationResult.invalid(None)
        with pytest.raises(ValueError):
            ValidationResult.ok(None)


class TestPipelineReport:
    def test_totals_and_failures(self):
        report = PipelineReport(
            threshold=50.0,
            commissions=[
                CommissionLine(transaction_id="a", currency="USD", amount=100.0, commission=2.0, rate=0.02, strategy="usd"),
                CommissionLine(transaction_id="b", currency="EUR", amount=100.0, commission=1.0, rate=0.01, strategy="eur"),
            ],
            validations=[
                TransactionValidation(transaction_id="a", result=ValidationResult.ok("a ok"), attempts=1),
                TransactionValidation(transaction_id="b", error="down", attempts=3),
            ],
        )
        assert report.total_commission == pytest.approx(3.0)
        assert [v.transaction_id for v in report.failed_validations] == ["b"]

    def test_validation_summary(self):
        ok = TransactionValidation(transaction_id="a", result=ValidationResult.ok("a - VALID"), attempts=1)
        failed = TransactionValidation(transaction_id="b", error="down", attempts=3)
        assert ok.summary() == "a - VALID"
        assert failed.summary() == "b - FAILED (down)"
        assert ok.succeeded and not failed.succeeded
