"""Validador remoto sobre HTTP.

Contrato del endpoint:
- `POST <url>` con la transacción en JSON.
- Respuesta 2xx: `{"valid": bool, "message": str}`.
- 429/5xx o error de red: fallo transitorio (se reintenta).
- Otro 4xx: rechazo definitivo.
"""

from __future__ import annotations

import logging

import httpx
from pydantic import BaseModel, ValidationError

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.models import Transaction, ValidationResult
from core.errors import TransientValidationError

logger = logging.getLogger(__name__)


class _ValidationPayload(BaseModel):
    valid: bool
    message: str | None = None


class HttpValidator:
    """Implementa `TransactionValidator` contra un endpoint HTTP."""

    def __init__(
        self,
        url: str,
        *,
        settings: AppSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = url
        self._settings = settings or AppSettings()
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "HttpValidator":
        if self._client is None:
            self._client = build_async_client(self._settings)
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def validate(self, transaction: Transaction) -> ValidationResult:
        if self._client is None:
            self._client = build_async_client(self._settings)
            self._owns_client = True

        try:
            response = await self._client.post(self._url, json=transaction.model_dump(mode="json"))
        except httpx.HTTPError as exc:
            raise TransientValidationError(
                f"Validation request failed for {transaction.id}: {exc}",
                transaction_id=transaction.id,
            ) from exc

        status = response.status_code
        if status == 429 or status >= 500:
            raise TransientValidationError(
                f"Validation service returned HTTP {status} for {transaction.id}",
                transaction_id=transaction.id,
            )
        if status >= 400:
            logger.info("Validation rejected %s with HTTP %d", transaction.id, status)
            return ValidationResult.invalid(f"{transaction.id} - INVALID (HTTP {status})")

        try:
            payload = _ValidationPayload.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise TransientValidationError(
                f"Malformed validation response for {transaction.id}",
                transaction_id=transaction.id,
            ) from exc

        default = "VALID" if payload.valid else "INVALID"
        message = f"{transaction.id} - {payload.message or default}"
        if payload.valid:
            return ValidationResult.ok(message)
        return ValidationResult.invalid(message)
