"""Tests for the transaction pipeline stages and the full run."""

import asyncio
import logging
import threading

import pytest

from core.domain.models import TransactionStatus, ValidationResult
from core.services.commission import CommissionStrategyFactory
from core.services.retry import RetryExecutor
from core.services.transaction_pipeline import (
    NEGATIVE_AMOUNT,
    NULL_AMOUNT,
    PipelineHooks,
    clean_transactions,
    compute_commissions,
    filter_processed,
    run_pipeline,
    total_amount,
    validate_transactions,
)


class TestCleanTransactions:
    def test_drops_null_and_negative(self, sample):
        kept, skipped = clean_transactions(sample)
        assert [t.id for t in kept] == ["a", "b", "c", "e"]
        assert {(s.transaction.id, s.reason) for s in skipped} == {("d", NEGATIVE_AMOUNT), ("f", NULL_AMOUNT)}

    def test_zero_is_kept(self, make_tx):
        kept, skipped = clean_transactions([make_tx("z", 0.0)])
        assert [t.id for t in kept] == ["z"]
        assert skipped == []

    def test_warnings_logged_and_hooked(self, sample, caplog):
        messages = []
        with caplog.at_level(logging.WARNING):
            clean_transactions(sample, hooks=PipelineHooks(warning=messages.append))
        assert len(messages) == 2
        assert any("null amount" in m for m in messages)
        assert any("negative amount" in r.getMessage() for r in caplog.records)


class TestFilterAndTotal:
    def test_strictly_above_threshold(self, make_tx):
        txs = [make_tx("a", 50.0), make_tx("b", 50.01), make_tx("c", 10.0)]
        processed = filter_processed(txs, 50.0)
        assert [t.id for t in processed] == ["b"]
        assert processed[0].status is TransactionStatus.PROCESSED

    def test_input_not_mutated(self, make_tx):
        original = make_tx("a", 100.0)
        filter_processed([original], 50.0)
        assert original.status is TransactionStatus.NEW

    def test_total_amount(self, sample):
        kept, _ = clean_transactions(sample)
        assert total_amount(filter_processed(kept, 50.0)) == pytest.approx(395.5)

    def test_total_treats_null_as_zero(self, make_tx):
        assert total_amount([make_tx("a", None), make_tx("b", 2.5)]) == pytest.approx(2.5)


class TestCommissions:
    def test_lines_per_currency(self, make_tx):
        lines = compute_commissions(
            [make_tx("a", 120.0, "USD"), make_tx("c", 75.5, "EUR"), make_tx("e", 200.0, "JPY")],
            CommissionStrategyFactory(),
        )
        assert [line.transaction_id for line in lines] == ["a", "c", "e"]
        assert [line.strategy for line in lines] == ["usd", "eur", "default"]
        assert lines[0].commission == pytest.approx(2.4)
        assert lines[1].commission == pytest.approx(0.755)
        assert lines[2].commission == pytest.approx(10.0)
        assert lines[2].rate == pytest.approx(0.05)


class TestValidateTransactions:
    def test_results_in_input_order_with_retries(self, scripted_validator, make_tx):
        validator = scripted_validator(failures={"a": 2}, rejected={"c"})
        txs = [make_tx("a", 100.0), make_tx("b", 100.0), make_tx("c", 100.0)]

        async def main():
            async with RetryExecutor() as ex:
                return await validate_transactions(
                    txs, validator=validator, retry_executor=ex, max_attempts=3, backoff=0
                )

        results = asyncio.run(main())
        assert [r.transaction_id for r in results] == ["a", "b", "c"]
        assert results[0].succeeded and results[0].attempts == 3
        assert results[1].succeeded and results[1].attempts == 1
        assert not results[2].succeeded and results[2].result.valid is False

    def test_exhausted_recorded_not_raised(self, scripted_validator, make_tx):
        validator = scripted_validator(failures={"a": 5})
        done = []

        async def main():
            async with RetryExecutor() as ex:
                return await validate_transactions(
                    [make_tx("a", 100.0), make_tx("b", 100.0)],
                    validator=validator,
                    retry_executor=ex,
                    max_attempts=2,
                    backoff=0,
                    hooks=PipelineHooks(validation_done=done.append),
                )

        results = asyncio.run(main())
        assert results[0].result is None
        assert results[0].attempts == 2
        assert "boom a" in results[0].error
        assert results[1].succeeded
        assert len(done) == 2


class TestRunPipeline:
    def test_full_run(self, settings, sample, scripted_validator):
        validator = scripted_validator(failures={"e": 1})
        report = asyncio.run(run_pipeline(settings=settings, transactions=sample, validator=validator))

        assert report.input_count == 6
        assert len(report.skipped) == 2
        assert [t.id for t in report.processed] == ["a", "c", "e"]
        assert all(t.status is TransactionStatus.PROCESSED for t in report.processed)
        assert report.total_amount == pytest.approx(395.5)
        assert report.total_commission == pytest.approx(2.4 + 0.755 + 10.0)
        assert [v.attempts for v in report.validations] == [1, 1, 2]
        assert report.failed_validations == []
        assert "b" not in validator.calls

    def test_threshold_from_settings(self, settings, sample, scripted_validator):
        settings = settings.model_copy(update={"amount_threshold": 100.0})
        report = asyncio.run(
            run_pipeline(settings=settings, transactions=sample, validator=scripted_validator())
        )
        assert [t.id for t in report.processed] == ["a", "e"]
        assert report.threshold == 100.0

    def test_empty_input(self, settings, scripted_validator):
        report = asyncio.run(run_pipeline(settings=settings, transactions=[], validator=scripted_validator()))
        assert report.input_count == 0
        assert report.processed == [] and report.validations == []
        assert report.total_amount == 0.0


class BlockingValidator:
    """Synchronous validator; records the thread each call ran on."""

    def __init__(self):
        self.threads = []

    def validate(self, transaction):
        self.threads.append(threading.current_thread().name)
        return ValidationResult.ok(f"{transaction.id} - VALID")


class TestWorkerPool:
    def test_blocking_validator_runs_on_pool(self, settings, sample):
        validator = BlockingValidator()
        report = asyncio.run(run_pipeline(settings=settings, transactions=sample, validator=validator))

        assert [v.attempts for v in report.validations] == [1, 1, 1]
        assert all(v.succeeded for v in report.validations)
        assert len(validator.threads) == 3
        assert all(name.startswith("midtest-validate") for name in validator.threads)

    def test_async_validator_stays_on_loop(self, settings, sample):
        seen = []

        class LoopValidator:
            async def validate(self, transaction):
                seen.append(threading.current_thread() is threading.main_thread())
                return ValidationResult.ok("ok")

        asyncio.run(run_pipeline(settings=settings, transactions=sample, validator=LoopValidator()))
        assert seen == [True, True, True]

    def test_negative_threshold_keeps_zero_amounts(self, settings, make_tx, scripted_validator):
        settings = settings.model_copy(update={"amount_threshold": -1.0})
        report = asyncio.run(
            run_pipeline(settings=settings, transactions=[make_tx("z", 0.0)], validator=scripted_validator())
        )
        assert [t.id for t in report.processed] == ["z"]
