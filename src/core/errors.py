"""Project exceptions.

Everything raised on purpose by the core and adapters derives from
`MidtestError`, so the CLI can report it without a traceback.
"""

from __future__ import annotations


class MidtestError(Exception):
    """Base class for expected, user-facing failures."""


class TransientValidationError(MidtestError):
    """A validation attempt failed in a way that may succeed on retry."""

    def __init__(self, message: str, *, transaction_id: str | None = None) -> None:
        super().__init__(message)
        self.transaction_id = transaction_id


class RetryExhaustedError(MidtestError):
    """Raised by `RetryExecutor` once every attempt has failed."""

    def __init__(self, attempts: int, last_error: BaseException | None = None) -> None:
        super().__init__("Exhausted retries")
        self.attempts = attempts
        self.last_error = last_error

    def __str__(self) -> str:
        if self.last_error is None:
            return f"Exhausted retries after {self.attempts} attempts"
        return f"Exhausted retries after {self.attempts} attempts: {self.last_error}"


class TransactionLoadError(MidtestError):
    """Input transactions could not be read or did not validate."""
