"""Environment configuration for batch jobs and the API server.

Values come from the process environment, with a local ``.env`` file
loaded first if one exists. Entry points call ``load_settings`` with the
variables they cannot run without; a missing variable aborts the process
before any work is done.

Example:
    from ingestion.lib.config import load_settings, FEC_API_KEY_VAR

    settings = load_settings(required=[FEC_API_KEY_VAR])
    client = FECClient(api_key=settings.fec_api_key)
"""

import logging
import os
from dataclasses import dataclass
from typing import Iterable, Optional

from dotenv import load_dotenv

# Load environment variables from .env file if present
load_dotenv()

CONGRESS_API_KEY_VAR = "CONGRESS_API_KEY"
FEC_API_KEY_VAR = "FEC_API_KEY"
OPENSECRETS_API_KEY_VAR = "OPENSECRETS_API_KEY"

DEFAULT_DATABASE_PATH = "data/politics.duckdb"
DEFAULT_CONGRESS_API_BASE_URL = "https://api.congress.gov/v3"
DEFAULT_FEC_API_BASE_URL = "https://api.open.fec.gov/v1"
DEFAULT_OPENSECRETS_API_BASE_URL = "https://www.opensecrets.org/api"
DEFAULT_REQUEST_DELAY_SECONDS = 1.0
DEFAULT_MAX_RETRIES = 3

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


class ConfigurationError(ValueError):
    """Raised when a required environment variable is missing or invalid."""

    def __init__(self, missing: Iterable[str]):
        self.missing = list(missing)
        names = ", ".join(self.missing)
        super().__init__(
            f"Missing required environment variable(s): {names}. "
            f"Set them in the environment or in your .env file."
        )


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for one process."""

    congress_api_key: Optional[str]
    fec_api_key: Optional[str]
    opensecrets_api_key: Optional[str]
    database_path: str = DEFAULT_DATABASE_PATH
    congress_api_base_url: str = DEFAULT_CONGRESS_API_BASE_URL
    fec_api_base_url: str = DEFAULT_FEC_API_BASE_URL
    opensecrets_api_base_url: str = DEFAULT_OPENSECRETS_API_BASE_URL
    request_delay_seconds: float = DEFAULT_REQUEST_DELAY_SECONDS
    max_retries: int = DEFAULT_MAX_RETRIES
    log_level: str = "INFO"


def _env(name: str) -> Optional[str]:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _float_env(name: str, default: float) -> float:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


def _int_env(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def load_settings(required: Iterable[str] = ()) -> Settings:
    """Read settings from the environment.

    Args:
        required: Environment variable names that must be set

    Returns:
        Settings instance

    Raises:
        ConfigurationError: If any required variable is missing
    """
    missing = [name for name in required if _env(name) is None]
    if missing:
        raise ConfigurationError(missing)

    return Settings(
        congress_api_key=_env(CONGRESS_API_KEY_VAR),
        fec_api_key=_env(FEC_API_KEY_VAR),
        opensecrets_api_key=_env(OPENSECRETS_API_KEY_VAR),
        database_path=_env("DATABASE_PATH") or DEFAULT_DATABASE_PATH,
        congress_api_base_url=_env("CONGRESS_API_BASE_URL") or DEFAULT_CONGRESS_API_BASE_URL,
        fec_api_base_url=_env("FEC_API_BASE_URL") or DEFAULT_FEC_API_BASE_URL,
        opensecrets_api_base_url=_env("OPENSECRETS_API_BASE_URL") or DEFAULT_OPENSECRETS_API_BASE_URL,
        request_delay_seconds=_float_env("REQUEST_DELAY_SECONDS", DEFAULT_REQUEST_DELAY_SECONDS),
        max_retries=_int_env("MAX_RETRIES", DEFAULT_MAX_RETRIES),
        log_level=(_env("LOG_LEVEL") or "INFO").upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for batch scripts."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
