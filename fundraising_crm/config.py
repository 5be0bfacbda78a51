"""Runtime settings read from the environment and an optional ``.env`` file."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from dotenv import load_dotenv

from .statuses import StatusSet, status_set_by_name


logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path(".data/fundraising_crm.db")


def _float_setting(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {name}={raw!r}; using {default}")
        return default


@dataclass(frozen=True)
class Settings:
    db_path: Path
    statuses: StatusSet
    annual_target: float
    currency_symbol: str
    notes_debounce_seconds: float
    openai_api_key: str | None
    report_model: str
    log_level: str


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build settings from ``environ``, or from ``os.environ`` after loading ``.env``."""
    if environ is None:
        load_dotenv()
        environ = os.environ

    return Settings(
        db_path=Path(environ.get("CRM_DB_PATH") or DEFAULT_DB_PATH),
        statuses=status_set_by_name(environ.get("CRM_STATUS_SET")),
        annual_target=_float_setting(environ, "CRM_ANNUAL_TARGET", 120000.0),
        currency_symbol=environ.get("CRM_CURRENCY_SYMBOL") or "£",
        notes_debounce_seconds=_float_setting(environ, "CRM_NOTES_DEBOUNCE_SECONDS", 1.0),
        openai_api_key=environ.get("OPENAI_API_KEY") or None,
        report_model=environ.get("CRM_REPORT_MODEL") or "gpt-4o-mini",
        log_level=(environ.get("CRM_LOG_LEVEL") or "INFO").upper(),
    )
