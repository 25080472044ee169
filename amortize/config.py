import decimal
import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "AMORTIZE_"}

    # Money defaults (used when an amount is built without an explicit currency)
    default_currency: str = "CAD"
    default_rounding: str = decimal.ROUND_HALF_UP

    # App
    log_level: str = "INFO"

    @field_validator("default_rounding")
    @classmethod
    def _known_rounding(cls, value: str) -> str:
        if not value.startswith("ROUND_") or not hasattr(decimal, value):
            raise ValueError(f"Unknown decimal rounding mode: {value}")
        return value


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    """Apply the configured log level to the root logger."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
