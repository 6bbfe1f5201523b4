"""Rank robust Appium locators from a page-source hierarchy dump."""

from __future__ import annotations

__version__ = "0.1.0"

from .locator_generator import generate_selector_candidates
from .models import (
    SELECTOR_STRATEGIES,
    ParsedElement,
    ParsedSource,
    RankedSelector,
    SelectorCandidate,
)
from .report import SelectorReport, build_selector_report, match_candidate, select_elements
from .scoring import rank_selector_candidates, score_selector_candidate
from .selector_matching import candidate_matches_element, count_candidate_matches, find_matching_elements
from .source_parser import parse_source

__all__ = [
    "SELECTOR_STRATEGIES",
    "ParsedElement",
    "ParsedSource",
    "RankedSelector",
    "SelectorCandidate",
    "SelectorReport",
    "build_selector_report",
    "candidate_matches_element",
    "count_candidate_matches",
    "find_matching_elements",
    "generate_selector_candidates",
    "match_candidate",
    "parse_source",
    "rank_selector_candidates",
    "score_selector_candidate",
    "select_elements",
]
