from __future__ import annotations

from typing import Iterable, Sequence

from .models import ParsedElement, RankedSelector, SelectorCandidate, SelectorReason
from .selector_matching import count_candidate_matches
from .selector_rules import is_dynamic_value, xpath_fragility_penalty

BASE_STRATEGY_SCORES: dict[str, int] = {
    "id": 100,
    "accessibility id": 95,
    "-ios predicate string": 90,
    "-ios class chain": 85,
    "-android uiautomator": 85,
    "xpath": 70,
    "class name": 55,
}
DEFAULT_STRATEGY_SCORE = 50

UNIQUE_MATCH_BONUS = 25
MULTIPLE_MATCHES_PENALTY = 10
NO_MATCH_PENALTY = 40
VALID_MATCH_BONUS = 5
ACTIONABLE_ELEMENT_BONUS = 8
DYNAMIC_TOKEN_PENALTY = 18

MIN_SCORE = 0
MAX_SCORE = 100


def score_selector_candidate(
    target: ParsedElement,
    all_elements: Sequence[ParsedElement],
    candidate: SelectorCandidate,
) -> RankedSelector:
    reasons: list[SelectorReason] = ["BASE_STRATEGY_PRIORITY"]
    score = BASE_STRATEGY_SCORES.get(candidate.strategy, DEFAULT_STRATEGY_SCORE)

    match_count = count_candidate_matches(candidate, all_elements)
    if match_count == 1:
        score += UNIQUE_MATCH_BONUS
        reasons.append("UNIQUE_MATCH")
    elif match_count > 1:
        score -= MULTIPLE_MATCHES_PENALTY
        reasons.append("MULTIPLE_MATCHES")
    else:
        score -= NO_MATCH_PENALTY
        reasons.append("NO_MATCH")

    if match_count > 0:
        score += VALID_MATCH_BONUS
        reasons.append("VALID_MATCH")

    if target.is_actionable:
        score += ACTIONABLE_ELEMENT_BONUS
        reasons.append("ACTIONABLE_ELEMENT_BONUS")

    if is_dynamic_value(candidate.value):
        score -= DYNAMIC_TOKEN_PENALTY
        reasons.append("DYNAMIC_TOKEN_PENALTY")

    if candidate.strategy == "xpath":
        penalty = xpath_fragility_penalty(candidate.value)
        if penalty > 0:
            score -= penalty
            reasons.append("FRAGILE_XPATH_PENALTY")

    return RankedSelector(
        candidate=candidate,
        score=max(MIN_SCORE, min(MAX_SCORE, round(score))),
        match_count=match_count,
        reasons=tuple(reasons),
    )


def rank_selector_candidates(
    target: ParsedElement,
    all_elements: Sequence[ParsedElement],
    candidates: Iterable[SelectorCandidate],
) -> list[RankedSelector]:
    ranked = [score_selector_candidate(target, all_elements, candidate) for candidate in candidates]
    ranked.sort(key=lambda item: (-item.score, item.match_count, item.value))
    return ranked
