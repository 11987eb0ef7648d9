"""Relevance scoring for free-text medicine search.

Candidates arrive pre-filtered by the store (name or type contains the term),
so ranking only orders and truncates; it never drops a candidate by score.
"""

from __future__ import annotations

from typing import Iterable, List

from src.store.schemas import Medicine


EXACT_NAME = 100
EXACT_TYPE = 80
PREFIX_NAME = 60
PREFIX_TYPE = 40
CONTAINS_NAME = 30
CONTAINS_TYPE = 20
WORD_NAME = 10
WORD_TYPE = 5

MIN_WORD_LENGTH = 3


def calculate_relevance(medicine: Medicine, term: str) -> int:
    """Score one medicine against an already trimmed, lower-cased term.

    All rules stack: an exact name match also counts as a prefix and a
    substring match. Word bonuses are added on top even when the word is the
    whole term.
    """
    score = 0
    name = medicine.name.lower()
    type_ = medicine.type.lower()

    if name == term:
        score += EXACT_NAME
    if type_ == term:
        score += EXACT_TYPE

    if name.startswith(term):
        score += PREFIX_NAME
    if type_.startswith(term):
        score += PREFIX_TYPE

    if term in name:
        score += CONTAINS_NAME
    if term in type_:
        score += CONTAINS_TYPE

    # Single-space split: runs of spaces yield empty words, which the length check drops.
    for word in term.split(" "):
        if len(word) >= MIN_WORD_LENGTH:
            if word in name:
                score += WORD_NAME
            if word in type_:
                score += WORD_TYPE

    return score


def rank_medicines(
    candidates: Iterable[Medicine], term: str, limit: int = 10
) -> List[Medicine]:
    """Order candidates by relevance (highest first) and keep the top ``limit``.

    The sort is stable, so equally scored candidates keep their input order.
    """
    scored = [(calculate_relevance(m, term), m) for m in candidates]
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [medicine for _, medicine in scored[: max(0, limit)]]
