from __future__ import annotations

from types import SimpleNamespace

from fundraising_crm.models import FundingGrant, StrategyItem
from fundraising_crm.narrative import (
    EMPTY_REPORT_MESSAGE,
    FAILURE_MESSAGE,
    MISSING_KEY_MESSAGE,
    build_report_prompt,
    generate_executive_report,
)


class _FakeCompletions:
    def __init__(self, content: str | None = None, error: Exception | None = None) -> None:
        self.content = content
        self.error = error
        self.calls: list[dict] = []

    def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _client(completions: _FakeCompletions) -> SimpleNamespace:
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


GRANTS = [FundingGrant(id="g1", funder="Tudor Trust", fund_name="Core Grant", amount=5000.0)]
STRATEGY = [StrategyItem(id="s1", fund="Legacy giving", details="Leaflet for supporters")]


def test_missing_api_key_returns_configuration_message() -> None:
    assert generate_executive_report(GRANTS, STRATEGY, api_key=None) == MISSING_KEY_MESSAGE
    assert generate_executive_report(GRANTS, STRATEGY, api_key="") == MISSING_KEY_MESSAGE


def test_report_text_is_returned_from_model() -> None:
    completions = _FakeCompletions(content="## Executive Summary\nAll good.")

    report = generate_executive_report(GRANTS, STRATEGY, model="test-model", client=_client(completions))

    assert report == "## Executive Summary\nAll good."
    assert len(completions.calls) == 1
    call = completions.calls[0]
    assert call["model"] == "test-model"
    assert call["messages"][0]["role"] == "system"
    assert "Tudor Trust" in call["messages"][1]["content"]
    assert "Legacy giving" in call["messages"][1]["content"]


def test_api_failure_returns_fixed_message() -> None:
    completions = _FakeCompletions(error=RuntimeError("rate limited"))

    assert generate_executive_report(GRANTS, STRATEGY, client=_client(completions)) == FAILURE_MESSAGE


def test_empty_completion_returns_placeholder() -> None:
    completions = _FakeCompletions(content="")

    assert generate_executive_report([], [], client=_client(completions)) == EMPTY_REPORT_MESSAGE


def test_prompt_serializes_records_with_stored_field_names() -> None:
    prompt = build_report_prompt(GRANTS, STRATEGY)

    assert '"fundName": "Core Grant"' in prompt
    assert '"furtherInfo": ""' in prompt
    assert "Critical Deadlines" in prompt
