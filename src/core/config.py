"""Configuración del Core.

Centraliza variables de entorno (pydantic-settings) para la CLI, el pipeline
y los adaptadores de validación. Prefijo: `MIDTEST_`.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "midtest"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "midtest"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "midtest"
    return Path.home() / ".config" / "midtest"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Configuración central de la aplicación."""

    model_config = SettingsConfigDict(
        env_prefix="MIDTEST_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero, luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    amount_threshold: float = Field(
        default=50.0,
        description="Las transacciones con importe estrictamente mayor se procesan.",
    )

    validation_max_attempts: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Intentos máximos por validación (0 = fallar sin intentar).",
    )
    validation_backoff_seconds: float = Field(
        default=0.5,
        ge=0,
        description="Espera fija entre intentos de validación (segundos).",
    )
    validation_success_rate: float = Field(
        default=0.8,
        ge=0.0,
        le=1.0,
        description="Probabilidad de éxito del validador simulado.",
    )
    validation_latency_min_seconds: float = Field(
        default=0.1,
        ge=0,
        description="Latencia mínima simulada (segundos).",
    )
    validation_latency_max_seconds: float = Field(
        default=0.4,
        ge=0,
        description="Latencia máxima simulada (segundos, exclusiva).",
    )

    max_pool_size: int = Field(
        default=8,
        ge=2,
        le=64,
        description="Tamaño máximo del pool de trabajo para validaciones.",
    )

    usd_commission_rate: float = Field(default=0.02, ge=0, le=1)
    eur_commission_rate: float = Field(default=0.01, ge=0, le=1)
    default_commission_rate: float = Field(default=0.05, ge=0, le=1)

    validator_url: str | None = Field(
        default=None,
        description="Endpoint HTTP de validación. Sin valor se usa el validador simulado.",
    )
    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="midtest/0.1 (+https://local)",
        min_length=1,
        description="User-Agent para peticiones HTTP.",
    )

    log_level: str = Field(
        default="INFO",
        description="Nivel de logging (DEBUG, INFO, WARNING, ERROR).",
    )

    @model_validator(mode="after")
    def _check_latency_range(self) -> "AppSettings":
        if self.validation_latency_min_seconds > self.validation_latency_max_seconds:
            raise ValueError("validation_latency_min_seconds must not exceed validation_latency_max_seconds")
        return self
