from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

Platform = Literal["ios", "android", "unknown"]
CandidatePlatform = Literal["ios", "android", "unknown", "generic"]

SelectorStrategy = Literal[
    "id",
    "accessibility id",
    "xpath",
    "class name",
    "-ios predicate string",
    "-ios class chain",
    "-android uiautomator",
]

SELECTOR_STRATEGIES: tuple[SelectorStrategy, ...] = (
    "id",
    "accessibility id",
    "xpath",
    "class name",
    "-ios predicate string",
    "-ios class chain",
    "-android uiautomator",
)

SelectorReason = Literal[
    "BASE_STRATEGY_PRIORITY",
    "UNIQUE_MATCH",
    "MULTIPLE_MATCHES",
    "NO_MATCH",
    "VALID_MATCH",
    "ACTIONABLE_ELEMENT_BONUS",
    "DYNAMIC_TOKEN_PENALTY",
    "FRAGILE_XPATH_PENALTY",
]

Number = int | float


def make_element_ref(platform: Platform, xpath: str) -> str:
    return f"{platform}:{xpath}"


@dataclass(frozen=True, slots=True)
class ParsedElement:
    element_ref: str
    index: int
    platform: Platform
    type: str
    xpath: str
    name: str = ""
    label: str = ""
    value: str = ""
    text: str = ""
    resource_id: str = ""
    content_desc: str = ""
    enabled: bool = False
    visible: bool = False
    accessible: bool = False
    clickable: bool = False
    x: Number = 0
    y: Number = 0
    width: Number = 0
    height: Number = 0
    attributes: dict[str, str] = field(default_factory=dict)

    @property
    def is_actionable(self) -> bool:
        return self.enabled and self.visible and (self.clickable or self.accessible)

    def to_payload(self) -> dict[str, Any]:
        return {
            "elementRef": self.element_ref,
            "index": self.index,
            "platform": self.platform,
            "type": self.type,
            "xpath": self.xpath,
            "name": self.name,
            "label": self.label,
            "value": self.value,
            "text": self.text,
            "resourceId": self.resource_id,
            "contentDesc": self.content_desc,
            "enabled": self.enabled,
            "visible": self.visible,
            "accessible": self.accessible,
            "clickable": self.clickable,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "attributes": dict(self.attributes),
        }


@dataclass(frozen=True, slots=True)
class ParsedSource:
    platform: Platform
    elements: tuple[ParsedElement, ...] = ()

    def find_element(self, element_ref: str) -> ParsedElement | None:
        for element in self.elements:
            if element.element_ref == element_ref:
                return element
        return None


@dataclass(frozen=True, slots=True)
class SelectorCandidate:
    strategy: SelectorStrategy
    value: str
    platform: CandidatePlatform

    def to_payload(self) -> dict[str, Any]:
        return {"strategy": self.strategy, "value": self.value, "platform": self.platform}


@dataclass(frozen=True, slots=True)
class RankedSelector:
    candidate: SelectorCandidate
    score: int
    match_count: int
    reasons: tuple[SelectorReason, ...]

    @property
    def strategy(self) -> SelectorStrategy:
        return self.candidate.strategy

    @property
    def value(self) -> str:
        return self.candidate.value

    @property
    def platform(self) -> CandidatePlatform:
        return self.candidate.platform

    def to_payload(self) -> dict[str, Any]:
        payload = self.candidate.to_payload()
        payload["score"] = self.score
        payload["matchCount"] = self.match_count
        payload["reasons"] = list(self.reasons)
        return payload
