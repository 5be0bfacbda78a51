"""Plain and fuzzy filtering for grant and philanthropy lists."""

from __future__ import annotations

import re
from difflib import SequenceMatcher
from typing import Iterable

from .models import FundingGrant, PhilanthropicSite


SMART_MATCH_THRESHOLD = 55


def _normalize_token(value: str | None) -> str:
    if value is None:
        return ""
    return re.sub(r"[^a-z0-9]", "", value.lower())


def _similarity(left: str, right: str) -> float:
    if not left or not right:
        return 0.0
    return SequenceMatcher(None, left, right).ratio()


def _grant_fields(grant: FundingGrant) -> list[str]:
    return [grant.funder, grant.fund_name, grant.project]


def _grant_search_score(grant: FundingGrant, search_term: str) -> float:
    query_norm = _normalize_token(search_term)
    if not query_norm:
        return 0.0

    normalized = [_normalize_token(field) for field in _grant_fields(grant)]
    searchable = [field for field in normalized if field]

    score = 0.0
    if any(query_norm == field for field in searchable):
        score += 240
    elif any(query_norm in field for field in searchable):
        score += 150

    words = [
        _normalize_token(word)
        for field in _grant_fields(grant)
        for word in field.split()
    ]
    for token in search_term.split():
        token_norm = _normalize_token(token)
        if token_norm and any(word.startswith(token_norm) for word in words if word):
            score += 60

    best_ratio = max((_similarity(query_norm, field) for field in searchable), default=0.0)
    best_word_ratio = max((_similarity(query_norm, word) for word in words if word), default=0.0)
    best_ratio = max(best_ratio, best_word_ratio)

    if best_ratio >= 0.9:
        score += 120
    elif best_ratio >= 0.8:
        score += 80
    elif best_ratio >= 0.7:
        score += 45
    elif best_ratio >= 0.62:
        score += 20

    return score


def search_grants(
    grants: Iterable[FundingGrant],
    search_term: str = "",
    smart_search: bool = False,
) -> list[FundingGrant]:
    """Filter grants by funder, fund name, or project.

    Plain search keeps list order and matches case-insensitive substrings.
    Smart search tolerates typos and ranks the best matches first.
    """
    cleaned_search = search_term.strip()
    candidates = list(grants)
    if not cleaned_search:
        return candidates

    if not smart_search:
        needle = cleaned_search.lower()
        return [
            grant
            for grant in candidates
            if any(needle in field.lower() for field in _grant_fields(grant))
        ]

    scored: list[tuple[float, int, FundingGrant]] = []
    for position, grant in enumerate(candidates):
        score = _grant_search_score(grant, cleaned_search)
        if score >= SMART_MATCH_THRESHOLD:
            scored.append((score, position, grant))

    scored.sort(key=lambda item: (-item[0], item[1]))
    return [grant for _, _, grant in scored]


def search_philanthropic_sites(
    sites: Iterable[PhilanthropicSite],
    search_term: str = "",
) -> list[PhilanthropicSite]:
    needle = search_term.strip().lower()
    return [site for site in sites if needle in site.organisation.lower()]
