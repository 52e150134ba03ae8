"""Transaction processing pipeline.

The flow is: clean the input (drop null and negative amounts), keep the
transactions above the threshold and mark them processed, total them,
compute commissions per currency, then validate every processed
transaction concurrently with retries. Side-effects beyond logging
(printing, progress) stay in the CLI through `PipelineHooks`.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

from core.config import AppSettings
from core.domain.models import (
    CommissionLine,
    PipelineReport,
    SkippedTransaction,
    Transaction,
    TransactionStatus,
    TransactionValidation,
)
from core.errors import RetryExhaustedError
from core.interfaces.validator import TransactionValidator
from core.services.commission import CommissionStrategyFactory
from core.services.retry import RetryExecutor, pool_size_for

logger = logging.getLogger(__name__)

NULL_AMOUNT = "null_amount"
NEGATIVE_AMOUNT = "negative_amount"


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers (warnings, progress)."""

    warning: Callable[[str], None] | None = None
    validation_done: Callable[[TransactionValidation], None] | None = None


def clean_transactions(
    transactions: Iterable[Transaction],
    *,
    hooks: PipelineHooks | None = None,
) -> tuple[list[Transaction], list[SkippedTransaction]]:
    """Split the input into usable transactions and skipped ones.

    A transaction is skipped when its amount is missing or negative. Zero
    is a valid amount.
    """

    kept: list[Transaction] = []
    skipped: list[SkippedTransaction] = []
    for tx in transactions:
        if tx.amount is None:
            reason = NULL_AMOUNT
            message = f"Skipping transaction with null amount: {tx.id}"
        elif tx.amount < 0:
            reason = NEGATIVE_AMOUNT
            message = f"Skipping transaction with negative amount: {tx.id} ({tx.amount})"
        else:
            kept.append(tx)
            continue
        logger.warning(message)
        if hooks and hooks.warning:
            hooks.warning(message)
        skipped.append(SkippedTransaction(transaction=tx, reason=reason))
    return kept, skipped


def filter_processed(transactions: Iterable[Transaction], threshold: float) -> list[Transaction]:
    """Keep transactions with `amount > threshold`, marked as processed."""

    return [
        tx.with_status(TransactionStatus.PROCESSED)
        for tx in transactions
        if tx.amount is not None and tx.amount > threshold
    ]


def total_amount(transactions: Iterable[Transaction]) -> float:
    return sum(0.0 if tx.amount is None else tx.amount for tx in transactions)


def compute_commissions(
    transactions: Iterable[Transaction],
    factory: CommissionStrategyFactory,
) -> list[CommissionLine]:
    lines: list[CommissionLine] = []
    for tx in transactions:
        strategy = factory.for_currency(tx.currency)
        commission = strategy.calculate_commission(tx.amount)
        lines.append(
            CommissionLine(
                transaction_id=tx.id,
                currency=tx.currency,
                amount=tx.amount,
                commission=commission,
                rate=float(getattr(strategy, "rate", 0.0)),
                strategy=str(getattr(strategy, "name", type(strategy).__name__)),
            )
        )
        logger.info(
            "Transaction %s currency=%s amount=%s commission=%.2f",
            tx.id,
            tx.currency,
            "null" if tx.amount is None else f"{tx.amount:.2f}",
            commission,
        )
    return lines


async def validate_transactions(
    transactions: Sequence[Transaction],
    *,
    validator: TransactionValidator,
    retry_executor: RetryExecutor,
    max_attempts: int,
    backoff: float,
    max_concurrency: int | None = None,
    hooks: PipelineHooks | None = None,
) -> list[TransactionValidation]:
    """Validate all transactions concurrently; results keep input order.

    `validator.validate` may be a coroutine function or a blocking call; the
    latter runs on the executor held by `retry_executor`.

    Exhausted retries are recorded on the returned item instead of aborting
    the whole batch.
    """

    semaphore = asyncio.Semaphore(max_concurrency or pool_size_for(len(transactions)))

    async def validate_one(tx: Transaction) -> TransactionValidation:
        attempts = 0

        if inspect.iscoroutinefunction(validator.validate):

            async def attempt():
                nonlocal attempts
                attempts += 1
                return await validator.validate(tx)

        else:
            # Blocking validators run on the retry executor's worker pool.
            def attempt():
                nonlocal attempts
                attempts += 1
                return validator.validate(tx)

        async with semaphore:
            try:
                result = await retry_executor.retry_async(attempt, max_attempts, backoff)
                outcome = TransactionValidation(transaction_id=tx.id, result=result, attempts=attempts)
            except RetryExhaustedError as exc:
                outcome = TransactionValidation(
                    transaction_id=tx.id,
                    error=str(exc.last_error or exc),
                    attempts=attempts,
                )
        if hooks and hooks.validation_done:
            hooks.validation_done(outcome)
        return outcome

    return list(await asyncio.gather(*(validate_one(tx) for tx in transactions)))


async def run_pipeline(
    *,
    settings: AppSettings,
    transactions: Sequence[Transaction],
    validator: TransactionValidator,
    hooks: PipelineHooks | None = None,
    factory: CommissionStrategyFactory | None = None,
) -> PipelineReport:
    hooks = hooks or PipelineHooks()
    factory = factory or CommissionStrategyFactory.from_settings(settings)
    threshold = settings.amount_threshold

    cleaned, skipped = clean_transactions(transactions, hooks=hooks)
    processed = filter_processed(cleaned, threshold)
    total = total_amount(processed)
    logger.info("Filtered transactions (>%s) count: %d", threshold, len(processed))
    logger.info("Total amount of filtered transactions: %s", total)

    commissions = compute_commissions(processed, factory)

    pool_size = pool_size_for(len(processed), upper=settings.max_pool_size)
    pool = ThreadPoolExecutor(max_workers=pool_size, thread_name_prefix="midtest-validate")
    retry_executor = RetryExecutor(pool)
    try:
        validations = await validate_transactions(
            processed,
            validator=validator,
            retry_executor=retry_executor,
            max_attempts=settings.validation_max_attempts,
            backoff=settings.validation_backoff_seconds,
            max_concurrency=pool_size,
            hooks=hooks,
        )
    finally:
        retry_executor.shutdown()
        pool.shutdown(wait=False)

    logger.info("Validation results:")
    for item in validations:
        logger.info(item.summary())

    return PipelineReport(
        threshold=threshold,
        input_count=len(transactions),
        skipped=skipped,
        processed=processed,
        total_amount=total,
        commissions=commissions,
        validations=validations,
    )
