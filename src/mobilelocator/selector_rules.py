from __future__ import annotations

import re

_DYNAMIC_DIGIT_RUN_PATTERN = re.compile(r"(?:^|[^a-zA-Z])\d{5,}(?:$|[^a-zA-Z])")
_UUID_PATTERN = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}",
    re.IGNORECASE,
)
_DYNAMIC_MARKER_PATTERN = re.compile(r"autogen|generated|tmp|temp|anonymous", re.IGNORECASE)
_XPATH_INDEX_PATTERN = re.compile(r"\[\d+\]")

FRAGILE_XPATH_MAX_DEPTH = 5
FRAGILE_XPATH_MAX_INDEXES = 3
FRAGILE_XPATH_STEP_PENALTY = 8


def escape_double_quoted(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def is_dynamic_value(value: str) -> bool:
    """Return True when a locator value carries an auto-generated looking token.

    Long digit runs not glued to letters, UUIDs and temp/generated markers all
    tend to change between builds or sessions.
    """
    if _DYNAMIC_DIGIT_RUN_PATTERN.search(value):
        return True
    if _UUID_PATTERN.search(value):
        return True
    return bool(_DYNAMIC_MARKER_PATTERN.search(value))


def is_absolute_xpath(xpath: str) -> bool:
    return xpath.startswith("/")


def xpath_depth(xpath: str) -> int:
    return len([segment for segment in xpath.split("/") if segment])


def xpath_index_count(xpath: str) -> int:
    return len(_XPATH_INDEX_PATTERN.findall(xpath))


def xpath_fragility_penalty(xpath: str) -> int:
    if not is_absolute_xpath(xpath):
        return 0

    penalty = 0
    if xpath_depth(xpath) > FRAGILE_XPATH_MAX_DEPTH:
        penalty += FRAGILE_XPATH_STEP_PENALTY
    if xpath_index_count(xpath) > FRAGILE_XPATH_MAX_INDEXES:
        penalty += FRAGILE_XPATH_STEP_PENALTY
    return penalty
