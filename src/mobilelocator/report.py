from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .locator_generator import generate_selector_candidates
from .models import ParsedElement, ParsedSource, Platform, RankedSelector, SelectorCandidate
from .scoring import rank_selector_candidates
from .selector_matching import find_matching_elements

DEFAULT_TOP_LIMIT = 5


@dataclass(frozen=True, slots=True)
class SelectorReport:
    platform: Platform
    element_ref: str
    target: ParsedElement
    top_selectors: tuple[RankedSelector, ...]
    all_selectors: tuple[RankedSelector, ...]

    @property
    def best(self) -> RankedSelector | None:
        return self.all_selectors[0] if self.all_selectors else None

    def to_payload(self) -> dict[str, Any]:
        return {
            "platform": self.platform,
            "elementRef": self.element_ref,
            "target": self.target.to_payload(),
            "topSelectors": [item.to_payload() for item in self.top_selectors],
            "allSelectors": [item.to_payload() for item in self.all_selectors],
        }


@dataclass(frozen=True, slots=True)
class ElementListing:
    platform: Platform
    total: int
    only_actionable: bool
    elements: tuple[ParsedElement, ...]

    @property
    def returned(self) -> int:
        return len(self.elements)

    def to_payload(self) -> dict[str, Any]:
        return {
            "platform": self.platform,
            "total": self.total,
            "returned": self.returned,
            "onlyActionable": self.only_actionable,
            "elements": [element.to_payload() for element in self.elements],
        }


@dataclass(frozen=True, slots=True)
class MatchReport:
    platform: Platform
    candidate: SelectorCandidate
    matches: tuple[ParsedElement, ...]

    def to_payload(self) -> dict[str, Any]:
        return {
            "platform": self.platform,
            "strategy": self.candidate.strategy,
            "value": self.candidate.value,
            "matchCount": len(self.matches),
            "elementRefs": [element.element_ref for element in self.matches],
        }


def build_selector_report(
    source: ParsedSource,
    element_ref: str,
    *,
    limit: int = DEFAULT_TOP_LIMIT,
) -> SelectorReport | None:
    _require_positive_limit(limit)
    target = source.find_element(element_ref)
    if target is None:
        return None

    candidates = generate_selector_candidates(target)
    ranked = tuple(rank_selector_candidates(target, source.elements, candidates))
    return SelectorReport(
        platform=source.platform,
        element_ref=element_ref,
        target=target,
        top_selectors=ranked[:limit],
        all_selectors=ranked,
    )


def select_elements(
    source: ParsedSource,
    *,
    only_actionable: bool = False,
    limit: int | None = None,
) -> ElementListing:
    if limit is not None:
        _require_positive_limit(limit)
    elements = source.elements
    if only_actionable:
        elements = tuple(element for element in elements if element.is_actionable)
    if limit is not None:
        elements = elements[:limit]
    return ElementListing(
        platform=source.platform,
        total=len(source.elements),
        only_actionable=only_actionable,
        elements=elements,
    )


def match_candidate(source: ParsedSource, candidate: SelectorCandidate) -> MatchReport:
    return MatchReport(
        platform=source.platform,
        candidate=candidate,
        matches=tuple(find_matching_elements(candidate, source.elements)),
    )


def _require_positive_limit(limit: int) -> None:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ValueError("limit must be a positive integer")
