"""Offline evaluation of Appium locator candidates against a parsed tree.

Only the subset of each locator syntax that the generator emits is
understood. Anything else evaluates to "no match" instead of raising.
"""

from __future__ import annotations

import re
from typing import Iterable

from .models import ParsedElement, SelectorCandidate

_DQ_LITERAL = r'"((?:[^"\\]|\\.)+)"'
_SQ_LITERAL = r"'((?:[^'\\]|\\.)+)'"

_IOS_PREDICATE_RE = re.compile(
    rf"(name|label|type)\s*(==|(?i:contains))\s*(?:{_DQ_LITERAL}|{_SQ_LITERAL})"
)
_IOS_CLASS_CHAIN_RE = re.compile(r"\*\*/([^\[`]+)(?:\[`(.+)`\])?")
_UIAUTOMATOR_CLAUSE_RE = re.compile(rf"\.(\w+)\({_DQ_LITERAL}\)")
_XPATH_ATTR_CLAUSE_RE = re.compile(rf"@([\w:.-]+)={_DQ_LITERAL}")
_ESCAPE_RE = re.compile(r"\\(.)")

_XPATH_FIELD_BY_ATTR = {
    "type": "type",
    "name": "name",
    "label": "label",
    "text": "text",
    "resource-id": "resource_id",
    "content-desc": "content_desc",
}


def candidate_matches_element(candidate: SelectorCandidate, element: ParsedElement) -> bool:
    strategy = candidate.strategy
    value = candidate.value
    if strategy == "id":
        return element.resource_id == value
    if strategy == "accessibility id":
        return value in (element.name, element.label, element.content_desc)
    if strategy == "class name":
        return element.type == value
    if strategy == "xpath":
        return match_simple_xpath(element, value)
    if strategy == "-ios predicate string":
        return match_ios_predicate(element, value)
    if strategy == "-ios class chain":
        return match_ios_class_chain(element, value)
    if strategy == "-android uiautomator":
        return match_android_uiautomator(element, value)
    return False


def count_candidate_matches(candidate: SelectorCandidate, elements: Iterable[ParsedElement]) -> int:
    return sum(1 for element in elements if candidate_matches_element(candidate, element))


def find_matching_elements(
    candidate: SelectorCandidate, elements: Iterable[ParsedElement]
) -> list[ParsedElement]:
    return [element for element in elements if candidate_matches_element(candidate, element)]


def match_ios_predicate(element: ParsedElement, predicate: str) -> bool:
    match = _IOS_PREDICATE_RE.fullmatch(predicate.strip())
    if not match:
        return False
    field_name, operator, double_quoted, single_quoted = match.groups()
    expected = _unescape(double_quoted if double_quoted is not None else single_quoted)
    actual = getattr(element, field_name)
    if operator == "==":
        return actual == expected
    return expected in actual


def match_ios_class_chain(element: ParsedElement, class_chain: str) -> bool:
    match = _IOS_CLASS_CHAIN_RE.fullmatch(class_chain.strip())
    if not match:
        return False
    target_type, predicate = match.groups()
    if element.type != target_type:
        return False
    if predicate is None:
        return True
    return match_ios_predicate(element, predicate)


def match_android_uiautomator(element: ParsedElement, selector: str) -> bool:
    clauses = _UIAUTOMATOR_CLAUSE_RE.findall(selector)
    if not clauses:
        return False
    return all(_uiautomator_clause_holds(element, method, _unescape(raw)) for method, raw in clauses)


def _uiautomator_clause_holds(element: ParsedElement, method: str, expected: str) -> bool:
    if method == "resourceId":
        return element.resource_id == expected
    if method == "description":
        return element.content_desc == expected
    if method == "text":
        return element.text == expected or element.label == expected
    if method == "className":
        return element.type == expected
    return False


def match_simple_xpath(element: ParsedElement, xpath: str) -> bool:
    if xpath == element.xpath:
        return True
    clauses = _XPATH_ATTR_CLAUSE_RE.findall(xpath)
    if not clauses:
        return False
    return all(_xpath_attr_value(element, attr) == _unescape(raw) for attr, raw in clauses)


def _xpath_attr_value(element: ParsedElement, attr: str) -> str | None:
    field_name = _XPATH_FIELD_BY_ATTR.get(attr)
    if field_name:
        return getattr(element, field_name)
    return element.attributes.get(attr)


def _unescape(value: str) -> str:
    return _ESCAPE_RE.sub(r"\1", value)
