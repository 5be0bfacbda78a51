from __future__ import annotations

from pathlib import Path

import pytest

from fundraising_crm.config import DEFAULT_DB_PATH, load_settings
from fundraising_crm.statuses import EXTENDED_STATUSES, SIMPLE_STATUSES


def test_defaults_apply_when_environment_is_empty() -> None:
    settings = load_settings({})

    assert settings.db_path == DEFAULT_DB_PATH
    assert settings.statuses is EXTENDED_STATUSES
    assert settings.annual_target == 120000.0
    assert settings.currency_symbol == "£"
    assert settings.notes_debounce_seconds == 1.0
    assert settings.openai_api_key is None
    assert settings.report_model == "gpt-4o-mini"
    assert settings.log_level == "INFO"


def test_environment_overrides(tmp_path) -> None:  # type: ignore[no-untyped-def]
    settings = load_settings(
        {
            "CRM_DB_PATH": str(tmp_path / "crm.db"),
            "CRM_STATUS_SET": "Simple",
            "CRM_ANNUAL_TARGET": "50000",
            "CRM_CURRENCY_SYMBOL": "$",
            "OPENAI_API_KEY": "sk-test",
            "CRM_LOG_LEVEL": "debug",
        }
    )

    assert settings.db_path == Path(tmp_path / "crm.db")
    assert settings.statuses is SIMPLE_STATUSES
    assert settings.annual_target == 50000.0
    assert settings.currency_symbol == "$"
    assert settings.openai_api_key == "sk-test"
    assert settings.log_level == "DEBUG"


def test_bad_numbers_fall_back_to_defaults() -> None:
    settings = load_settings({"CRM_ANNUAL_TARGET": "lots", "CRM_NOTES_DEBOUNCE_SECONDS": " "})

    assert settings.annual_target == 120000.0
    assert settings.notes_debounce_seconds == 1.0


def test_unknown_status_set_is_rejected() -> None:
    with pytest.raises(ValueError):
        load_settings({"CRM_STATUS_SET": "kanban"})
