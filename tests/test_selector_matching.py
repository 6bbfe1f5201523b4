from dataclasses import replace

from mobilelocator.locator_generator import generate_selector_candidates
from mobilelocator.models import ParsedElement, SelectorCandidate
from mobilelocator.selector_matching import (
    candidate_matches_element,
    count_candidate_matches,
    find_matching_elements,
)


def _element(**overrides: object) -> ParsedElement:
    base = ParsedElement(
        element_ref="ios:/XCUIElementTypeApplication[1]/XCUIElementTypeButton[1]",
        index=0,
        platform="ios",
        type="XCUIElementTypeButton",
        xpath="/XCUIElementTypeApplication[1]/XCUIElementTypeButton[1]",
        name="loginBtn",
        label="Log In",
    )
    return replace(base, **overrides)


def _android(**overrides: object) -> ParsedElement:
    base = _element(
        element_ref="android:/hierarchy[1]/android.widget.Button[1]",
        platform="android",
        type="android.widget.Button",
        xpath="/hierarchy[1]/android.widget.Button[1]",
        name="continueButton",
        label="Continue",
        text="Continue",
        resource_id="com.example:id/continue",
        content_desc="continueButton",
        attributes={"package": "com.example", "resource-id": "com.example:id/continue"},
    )
    return replace(base, **overrides)


def _matches(strategy: str, value: str, element: ParsedElement) -> bool:
    return candidate_matches_element(SelectorCandidate(strategy, value, "generic"), element)  # type: ignore[arg-type]


def test_id_accessibility_and_class_name_use_exact_equality() -> None:
    element = _android()

    assert _matches("id", "com.example:id/continue", element)
    assert not _matches("id", "com.example:id/cont", element)
    assert _matches("accessibility id", "continueButton", element)
    assert _matches("accessibility id", "Continue", element)
    assert not _matches("accessibility id", "continue", element)
    assert _matches("class name", "android.widget.Button", element)
    assert not _matches("class name", "Button", element)


def test_ios_predicate_equality_and_contains() -> None:
    element = _element()

    assert _matches("-ios predicate string", 'name == "loginBtn"', element)
    assert _matches("-ios predicate string", "label == 'Log In'", element)
    assert _matches("-ios predicate string", 'type == "XCUIElementTypeButton"', element)
    assert _matches("-ios predicate string", 'label CONTAINS "Log"', element)
    assert _matches("-ios predicate string", 'label contains "In"', element)
    assert not _matches("-ios predicate string", 'name == "login"', element)
    assert not _matches("-ios predicate string", 'name CONTAINS "xyz"', element)


def test_ios_predicate_rejects_unsupported_grammar() -> None:
    element = _element()

    assert not _matches("-ios predicate string", 'name BEGINSWITH "login"', element)
    assert not _matches("-ios predicate string", 'value == "loginBtn"', element)
    assert not _matches("-ios predicate string", 'name == "loginBtn" AND label == "Log In"', element)
    assert not _matches("-ios predicate string", "", element)


def test_ios_class_chain_checks_type_then_predicate() -> None:
    element = _element()

    assert _matches("-ios class chain", "**/XCUIElementTypeButton", element)
    assert _matches("-ios class chain", '**/XCUIElementTypeButton[`label == "Log In"`]', element)
    assert not _matches("-ios class chain", '**/XCUIElementTypeButton[`name == "other"`]', element)
    assert not _matches("-ios class chain", "**/XCUIElementTypeCell", element)
    assert not _matches("-ios class chain", "XCUIElementTypeButton", element)


def test_android_uiautomator_requires_all_clauses() -> None:
    element = _android()

    assert _matches("-android uiautomator", 'new UiSelector().resourceId("com.example:id/continue")', element)
    assert _matches(
        "-android uiautomator",
        'new UiSelector().className("android.widget.Button").description("continueButton")',
        element,
    )
    assert _matches("-android uiautomator", 'new UiSelector().text("Continue")', element)
    assert not _matches(
        "-android uiautomator",
        'new UiSelector().resourceId("com.example:id/continue").text("Cancel")',
        element,
    )
    assert not _matches("-android uiautomator", 'new UiSelector().index("1")', element)
    assert not _matches("-android uiautomator", "new UiSelector()", element)


def test_uiautomator_text_falls_back_to_label() -> None:
    element = _android(text="", label="Weiter")

    assert _matches("-android uiautomator", 'new UiSelector().text("Weiter")', element)


def test_xpath_literal_path_and_attribute_clauses() -> None:
    element = _android()

    assert _matches("xpath", "/hierarchy[1]/android.widget.Button[1]", element)
    assert not _matches("xpath", "/hierarchy[1]/android.widget.Button[2]", element)
    assert _matches("xpath", '//*[@type="android.widget.Button" and @text="Continue"]', element)
    assert _matches("xpath", '//*[@resource-id="com.example:id/continue"]', element)
    assert _matches("xpath", '//*[@content-desc="continueButton" and @package="com.example"]', element)
    assert not _matches("xpath", '//*[@type="android.widget.Button" and @text="Cancel"]', element)
    assert not _matches("xpath", '//*[@missing="x"]', element)
    assert not _matches("xpath", "//*", element)


def test_unknown_strategy_never_matches() -> None:
    assert not _matches("css selector", "#login", _element())


def test_generated_candidates_match_their_own_element() -> None:
    for element in (_element(name='say "hi"'), _android()):
        for candidate in generate_selector_candidates(element):
            assert candidate_matches_element(candidate, element), candidate


def test_count_and_find_matching_elements_keep_source_order() -> None:
    first = _element(index=0, name="row")
    second = _element(index=1, name="row", xpath="/XCUIElementTypeApplication[1]/XCUIElementTypeButton[2]")
    other = _element(index=2, name="other", label="", xpath="/XCUIElementTypeApplication[1]/XCUIElementTypeButton[3]")
    candidate = SelectorCandidate("accessibility id", "row", "ios")

    assert count_candidate_matches(candidate, [first, second, other]) == 2
    assert find_matching_elements(candidate, [other, second, first]) == [second, first]


def test_class_chain_accepts_dotted_and_dashed_types() -> None:
    element = _element(type="my-app.CustomCell", name="row")

    assert _matches("-ios class chain", "**/my-app.CustomCell", element)
    assert _matches("-ios class chain", '**/my-app.CustomCell[`name == "row"`]', element)
    chains = [
        candidate
        for candidate in generate_selector_candidates(element)
        if candidate.strategy == "-ios class chain"
    ]
    assert chains
    assert all(candidate_matches_element(candidate, element) for candidate in chains)
