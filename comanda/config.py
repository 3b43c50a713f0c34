"""Application settings using pydantic-settings."""

from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings


class ComandaSettings(BaseSettings):
    """Settings for building a ledger.

    All settings can be configured via environment variables with the
    COMANDA_ prefix. For example:
    - COMANDA_STORAGE=mongodb
    - COMANDA_LOG_LEVEL=DEBUG

    MongoDB connection details live in
    :class:`~comanda.integrations.mongodb.MongoConfiguration` and use the
    COMANDA_MONGO_ prefix.

    Attributes:
        storage: Where orders are kept. "memory" keeps them for the
            lifetime of the process only.
        log_level: Level at which successful writes are logged.
    """

    storage: Literal["memory", "mongodb"] = "memory"
    log_level: str = "INFO"

    model_config = {"env_prefix": "COMANDA_"}

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if value not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(f"unknown log level {value!r}")
        return value
