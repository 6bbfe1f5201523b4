from __future__ import annotations

from .models import CandidatePlatform, ParsedElement, SelectorCandidate, SelectorStrategy
from .selector_rules import escape_double_quoted


class CandidateFactory:
    """Builds the locator candidates for one parsed element.

    Candidates are emitted in priority order and deduplicated on
    ``(strategy, value)``; empty values are dropped.
    """

    def __init__(self, element: ParsedElement) -> None:
        self.element = element
        self._candidates: list[SelectorCandidate] = []
        self._seen: set[tuple[str, str]] = set()

    def generate(self) -> list[SelectorCandidate]:
        primary = self._add_primary_accessibility_id()
        if self.element.platform == "ios":
            self._add_ios_strategies(primary)
        if self.element.platform == "android":
            self._add_android_strategies()
        self._add_attribute_xpath()
        self._add_structural_fallbacks()
        return list(self._candidates)

    def _add(self, strategy: SelectorStrategy, value: str, platform: CandidatePlatform | None = None) -> None:
        _add_unique(
            self._candidates,
            SelectorCandidate(strategy=strategy, value=value, platform=platform or self.element.platform),
            self._seen,
        )

    def _add_primary_accessibility_id(self) -> str:
        element = self.element
        primary = element.name or element.label or element.content_desc
        self._add("accessibility id", primary)
        return primary

    def _add_ios_strategies(self, primary: str) -> None:
        element = self.element
        if element.label and element.label != primary:
            self._add("accessibility id", element.label)

        name = escape_double_quoted(element.name)
        if element.name:
            self._add("-ios predicate string", f'name == "{name}"')
        if element.label:
            self._add("-ios predicate string", f'label == "{escape_double_quoted(element.label)}"')
        if element.name:
            self._add("-ios class chain", f'**/{element.type}[`name == "{name}"`]')

    def _add_android_strategies(self) -> None:
        element = self.element
        if element.resource_id:
            self._add("id", element.resource_id)
            self._add(
                "-android uiautomator",
                f'new UiSelector().resourceId("{escape_double_quoted(element.resource_id)}")',
            )

        if element.content_desc:
            self._add("accessibility id", element.content_desc)
            self._add(
                "-android uiautomator",
                f'new UiSelector().description("{escape_double_quoted(element.content_desc)}")',
            )

        if element.text:
            self._add("-android uiautomator", f'new UiSelector().text("{escape_double_quoted(element.text)}")')

    def _add_attribute_xpath(self) -> None:
        xpath = build_attribute_xpath(self.element)
        if xpath:
            self._add("xpath", xpath, "generic")

    def _add_structural_fallbacks(self) -> None:
        self._add("xpath", self.element.xpath, "generic")
        self._add("class name", self.element.type, "generic")


def generate_selector_candidates(element: ParsedElement) -> list[SelectorCandidate]:
    return CandidateFactory(element).generate()


def build_attribute_xpath(element: ParsedElement) -> str | None:
    if not element.type:
        return None
    if element.platform == "android":
        attr_name, attr_value = "text", element.text
    else:
        attr_name, attr_value = "name", element.name
    if not attr_value:
        return None
    return (
        f'//*[@type="{escape_double_quoted(element.type)}" '
        f'and @{attr_name}="{escape_double_quoted(attr_value)}"]'
    )


def _add_unique(
    candidates: list[SelectorCandidate],
    candidate: SelectorCandidate,
    seen: set[tuple[str, str]],
) -> None:
    if not candidate.value:
        return
    key = (candidate.strategy, candidate.value)
    if key in seen:
        return
    seen.add(key)
    candidates.append(candidate)
