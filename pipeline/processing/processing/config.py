"""Runtime settings, read from ``PERICIAS_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

_DEFAULT_DATABASE_URL = "sqlite:///pericias.db"
_DEFAULT_SECRET_KEY = "pericias-default-dev-secret-change-in-prod"
_DEFAULT_PERITO = "Engº Arthur Reis"


@dataclass(frozen=True)
class Settings:
    database_url: str = _DEFAULT_DATABASE_URL
    secret_key: str = _DEFAULT_SECRET_KEY
    # Expert name written on imported records; the spreadsheet has no column for it.
    perito_padrao: str = _DEFAULT_PERITO
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            database_url=os.environ.get("PERICIAS_DATABASE_URL", _DEFAULT_DATABASE_URL),
            secret_key=os.environ.get("PERICIAS_SECRET_KEY", _DEFAULT_SECRET_KEY),
            perito_padrao=os.environ.get("PERICIAS_PERITO_PADRAO", _DEFAULT_PERITO),
            log_level=os.environ.get("PERICIAS_LOG_LEVEL", "INFO").upper(),
        )
