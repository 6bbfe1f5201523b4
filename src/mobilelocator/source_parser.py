"""Normalize Appium page-source XML into a flat, ordered element list.

Both dialects are handled structurally: UiAutomator dumps (Android) carry
``class``, ``resource-id``, ``content-desc`` and ``bounds`` attributes, XCTest
dumps (iOS) carry ``type``, ``name``, ``label`` and explicit geometry.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import replace
from typing import Mapping

from lxml import etree

from .models import Number, ParsedElement, ParsedSource, Platform, make_element_ref

logger = logging.getLogger(__name__)

_BOUNDS_RE = re.compile(r"\[(-?\d+),(-?\d+)\]\[(-?\d+),(-?\d+)\]")
_IOS_TYPE_PREFIX = "XCUIElementType"
_ANDROID_CLASS_PREFIX = "android."

EMPTY_SOURCE = ParsedSource(platform="unknown", elements=())


def parse_source(raw_text: str | None) -> ParsedSource:
    if not raw_text or not raw_text.strip():
        return EMPTY_SOURCE

    root = _parse_xml(raw_text)
    if root is None:
        return EMPTY_SOURCE

    discovered = _walk(root)

    platform = _resolve_source_platform(discovered)
    elements = tuple(
        _finalize_element(element, index, platform) for index, element in enumerate(discovered)
    )
    return ParsedSource(platform=platform, elements=elements)


def _parse_xml(raw_text: str) -> etree._Element | None:
    parser = etree.XMLParser(
        recover=False,
        resolve_entities=False,
        no_network=True,
        remove_comments=True,
        remove_pis=True,
        huge_tree=True,
    )
    try:
        return etree.fromstring(raw_text.strip().encode("utf-8"), parser)
    except (etree.XMLSyntaxError, ValueError) as exc:
        logger.debug("Page source is not well-formed XML: %s", exc)
        return None


def _walk(root: etree._Element) -> list[ParsedElement]:
    """Depth-first pre-order walk with an explicit stack of node contexts.

    Each context is ``(node, node_type, attrs, xpath)``. Sibling indexes are
    counted per parent and per type before the children are pushed, and the
    children go on the stack in reverse so they pop in document order.
    """
    root_attrs = _extract_attributes(root)
    root_type = node_type_of(root.tag, root_attrs)
    stack = [(root, root_type, root_attrs, f"/{root_type}[1]")]
    out: list[ParsedElement] = []

    while stack:
        node, node_type, attrs, xpath = stack.pop()
        out.append(build_element(node_type, xpath, attrs))

        children = []
        child_counters: dict[str, int] = {}
        for child in node:
            if not isinstance(child.tag, str):
                continue
            child_attrs = _extract_attributes(child)
            child_type = node_type_of(child.tag, child_attrs)
            child_counters[child_type] = child_counters.get(child_type, 0) + 1
            children.append((child, child_type, child_attrs, f"{xpath}/{child_type}[{child_counters[child_type]}]"))
        stack.extend(reversed(children))

    return out


def _extract_attributes(node: etree._Element) -> dict[str, str]:
    return {str(key): str(value) for key, value in node.attrib.items()}


def node_type_of(tag: str, attrs: Mapping[str, str]) -> str:
    return attrs.get("type") or attrs.get("class") or tag


def detect_platform(node_type: str, attrs: Mapping[str, str]) -> Platform:
    if node_type.startswith(_IOS_TYPE_PREFIX) or attrs.get("type", "").startswith(_IOS_TYPE_PREFIX):
        return "ios"
    if (
        node_type.startswith(_ANDROID_CLASS_PREFIX)
        or attrs.get("class", "").startswith(_ANDROID_CLASS_PREFIX)
        or attrs.get("resource-id")
        or attrs.get("content-desc")
    ):
        return "android"
    return "unknown"


def parse_android_bounds(bounds: str) -> tuple[int, int, int, int] | None:
    match = _BOUNDS_RE.search(bounds)
    if not match:
        return None
    x1, y1, x2, y2 = (int(group) for group in match.groups())
    return x1, y1, max(0, x2 - x1), max(0, y2 - y1)


def as_bool(value: str | None) -> bool:
    text = (value or "").strip().lower()
    return text in {"true", "1"}


def as_number(value: str | None) -> Number:
    try:
        number = float((value or "").strip())
    except ValueError:
        return 0
    if not math.isfinite(number):
        return 0
    if number.is_integer():
        return int(number)
    return number


def _first_non_empty(*values: str | None) -> str:
    for value in values:
        if value:
            return value
    return ""


def build_element(node_type: str, xpath: str, attrs: Mapping[str, str]) -> ParsedElement:
    platform = detect_platform(node_type, attrs)
    decoded = parse_android_bounds(attrs["bounds"]) if attrs.get("bounds") else None
    geometry: list[Number] = []
    for position, key in enumerate(("x", "y", "width", "height")):
        if key in attrs:
            raw: Number = as_number(attrs[key])
        else:
            raw = decoded[position] if decoded else 0
        geometry.append(max(0, raw))
    x, y, width, height = geometry

    value = attrs.get("value", "")
    return ParsedElement(
        element_ref=make_element_ref(platform, xpath),
        index=0,
        platform=platform,
        type=node_type,
        xpath=xpath,
        name=_first_non_empty(attrs.get("name"), attrs.get("content-desc"), attrs.get("resourceId")),
        label=_first_non_empty(attrs.get("label"), attrs.get("text"), attrs.get("content-desc")),
        value=value,
        text=_first_non_empty(attrs.get("text"), value),
        resource_id=_first_non_empty(attrs.get("resource-id"), attrs.get("resourceId"), attrs.get("id")),
        content_desc=_first_non_empty(attrs.get("content-desc"), attrs.get("contentDesc")),
        enabled=as_bool(attrs.get("enabled")),
        visible=as_bool(attrs.get("visible")) or as_bool(attrs.get("displayed")),
        accessible=as_bool(attrs.get("accessible")),
        clickable=as_bool(attrs.get("clickable")),
        x=x,
        y=y,
        width=width,
        height=height,
        attributes=dict(attrs),
    )


def _resolve_source_platform(elements: list[ParsedElement]) -> Platform:
    if any(element.platform == "ios" for element in elements):
        return "ios"
    if any(element.platform == "android" for element in elements):
        return "android"
    return "unknown"


def _finalize_element(element: ParsedElement, index: int, source_platform: Platform) -> ParsedElement:
    platform = element.platform if element.platform != "unknown" else source_platform
    return replace(
        element,
        index=index,
        platform=platform,
        element_ref=make_element_ref(platform, element.xpath),
    )
