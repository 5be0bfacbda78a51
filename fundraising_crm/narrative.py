"""Executive summary generation through a hosted text-generation model."""

from __future__ import annotations

import json
import logging
from typing import Any, Sequence

from openai import OpenAI

from .models import FundingGrant, StrategyItem


logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "API Key is missing. Please configure the environment variable."
FAILURE_MESSAGE = "Failed to generate report. Please try again later."
EMPTY_REPORT_MESSAGE = "No report generated."

DEFAULT_MODEL = "gpt-4o-mini"

SYSTEM_PROMPT = "You are an expert fundraising consultant for a charity."

REPORT_PROMPT = """\
Analyze the following data and provide an Executive Summary Report in Markdown format.

Data Provided:
1. Funding & Grants List: {funding}
2. Strategy Development Items: {strategy}

Please structure the report with the following sections:
1. **Executive Summary**: A brief overview of the current funding landscape.
2. **Critical Deadlines**: Identify the most urgent deadlines (Date for funding) coming up in the next 3 months.
3. **Financial Outlook**: Summarize the total potential funding vs. secured/approved funding.
4. **Strategy Recommendations**: Based on the strategy items and funding gaps, suggest 3 key actions.
5. **SMT Review Status**: Highlight any items still awaiting a decision that need immediate attention.

Keep the tone professional, encouraging, and action-oriented.
"""


def build_report_prompt(
    grants: Sequence[FundingGrant],
    strategy_items: Sequence[StrategyItem],
) -> str:
    return REPORT_PROMPT.format(
        funding=json.dumps([grant.to_dict() for grant in grants]),
        strategy=json.dumps([item.to_dict() for item in strategy_items]),
    )


def generate_executive_report(
    grants: Sequence[FundingGrant],
    strategy_items: Sequence[StrategyItem],
    api_key: str | None = None,
    model: str = DEFAULT_MODEL,
    client: Any | None = None,
) -> str:
    """Return a Markdown report, or a fixed message when it cannot be produced.

    Never raises: a missing key and any API failure are both reported as text.
    """
    if client is None:
        if not api_key:
            return MISSING_KEY_MESSAGE
        client = OpenAI(api_key=api_key)

    prompt = build_report_prompt(list(grants), list(strategy_items))
    logger.info(f"Requesting executive report from {model} ({len(grants)} grants)")

    try:
        response = client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
        )
        report = response.choices[0].message.content
    except Exception as exc:
        logger.error(f"Report generation failed: {exc}")
        return FAILURE_MESSAGE

    return report or EMPTY_REPORT_MESSAGE
