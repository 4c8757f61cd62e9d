"""Application configuration loaded from environment variables."""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, model_validator

load_dotenv()

logger = logging.getLogger(__name__)

_DEFAULT_SECRET = "change-me-in-production"  # noqa: S105


class Config(BaseModel):
    """Centralised app configuration backed by env vars."""

    # Flask
    flask_host: str = "127.0.0.1"
    flask_port: int = 5000
    flask_debug: bool = False
    flask_secret_key: str = _DEFAULT_SECRET
    cors_origins: list[str] = ["http://localhost:3000"]
    max_upload_size_mb: int = 5

    # SKU generation
    max_variants: int = 500

    # Logging
    log_level: str = "INFO"

    @model_validator(mode="after")
    def _warn_insecure_defaults(self) -> Config:
        """Log a warning when the secret key is left at its default outside debug."""
        if not self.flask_debug and self.flask_secret_key == _DEFAULT_SECRET:
            logger.warning("FLASK_SECRET_KEY is not set, using the development default")
        return self

    @classmethod
    def from_env(cls) -> Config:
        """Build config from environment variables."""
        cors_raw = os.getenv("CORS_ORIGINS", "http://localhost:3000")
        cors_origins = [o.strip() for o in cors_raw.split(",") if o.strip()]

        return cls(
            flask_host=os.getenv("FLASK_HOST", "127.0.0.1"),
            flask_port=int(os.getenv("FLASK_PORT", "5000")),
            flask_debug=os.getenv("FLASK_DEBUG", "false").lower() in ("1", "true", "yes"),
            flask_secret_key=os.getenv("FLASK_SECRET_KEY", _DEFAULT_SECRET),
            cors_origins=cors_origins,
            max_upload_size_mb=int(os.getenv("MAX_UPLOAD_SIZE_MB", "5")),
            max_variants=int(os.getenv("MAX_VARIANTS", "500")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(level: str | None = None) -> None:
    """Set up root logging in the format used by every entry point."""
    logging.basicConfig(
        level=level or settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


settings = Config.from_env()
