"""
Pydantic Settings — library configuration loaded from environment variables.

Every field can be overridden with an ``OPFLOW_``-prefixed variable, e.g.
``OPFLOW_LOG_LEVEL=DEBUG``.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # ── Logging ───────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # ── Declaration checks ────────────────────
    WARN_ON_DUPLICATE_STEP_NAMES: bool = True

    # ── Step events ───────────────────────────
    # Subscribe a StepLogListener to every new transaction instance.
    LOG_STEP_EVENTS: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_prefix="OPFLOW_",
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
