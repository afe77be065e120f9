"""
Settings loaded from the environment (and an optional .env file).
"""

import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from tmlr.exceptions import ConfigError
from tmlr.models import Credentials
from tmlr.timeular import BASE_URL, DEFAULT_TIMEOUT

API_KEY_VAR = "TMLR_API_KEY"
API_SECRET_VAR = "TMLR_API_SECRET"

DEFAULT_REPORT_PATH = Path("report.csv")
DEFAULT_TIMEZONE = "UTC"


@dataclass(frozen=True)
class Settings:
    credentials: Credentials
    base_url: str = BASE_URL
    timeout: Optional[float] = DEFAULT_TIMEOUT
    debug: bool = False
    report_path: Path = DEFAULT_REPORT_PATH
    timezone: str = DEFAULT_TIMEZONE


def _truthy(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from ``environ``, or from os.environ after loading .env.

    Raises:
        ConfigError: if the API key or secret is missing, or TMLR_TIMEOUT
            is not a positive number.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    missing = [var for var in (API_KEY_VAR, API_SECRET_VAR) if not environ.get(var)]
    if missing:
        raise ConfigError(f"{', '.join(missing)} needs to be set")

    timeout = DEFAULT_TIMEOUT
    if environ.get("TMLR_TIMEOUT"):
        try:
            timeout = float(environ["TMLR_TIMEOUT"])
        except ValueError as exc:
            raise ConfigError(f"TMLR_TIMEOUT must be a number of seconds, got {environ['TMLR_TIMEOUT']!r}") from exc
        if not math.isfinite(timeout) or timeout <= 0:
            raise ConfigError(f"TMLR_TIMEOUT must be a positive number of seconds, got {environ['TMLR_TIMEOUT']!r}")

    return Settings(
        credentials=Credentials(key=environ[API_KEY_VAR], secret=environ[API_SECRET_VAR]),
        base_url=environ.get("TMLR_BASE_URL") or BASE_URL,
        timeout=timeout,
        debug=_truthy(environ.get("TMLR_DEBUG")),
        report_path=Path(environ.get("TMLR_REPORT_PATH") or DEFAULT_REPORT_PATH),
        timezone=environ.get("TMLR_TIMEZONE") or DEFAULT_TIMEZONE,
    )
