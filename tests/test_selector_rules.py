from mobilelocator.selector_rules import (
    escape_double_quoted,
    is_dynamic_value,
    xpath_depth,
    xpath_fragility_penalty,
    xpath_index_count,
)


def test_is_dynamic_value_detects_generated_tokens() -> None:
    assert is_dynamic_value("user_123456789")
    assert is_dynamic_value("12345")
    assert is_dynamic_value("row-98765-cell")
    assert is_dynamic_value("item 3f2504e0-4f89-41d3-9a0c-0305e82c3301")
    assert is_dynamic_value("AutoGenerated_button")
    assert is_dynamic_value("tmpView")
    assert is_dynamic_value("anonymousCell")


def test_is_dynamic_value_accepts_stable_values() -> None:
    assert not is_dynamic_value("loginBtn")
    assert not is_dynamic_value("com.example:id/continue")
    assert not is_dynamic_value("order1234")
    assert not is_dynamic_value("v12345beta")
    assert not is_dynamic_value("/A[1]/B[2]")


def test_xpath_fragility_counts_depth_and_indexes() -> None:
    assert xpath_depth("/A[1]/B[2]/C[3]") == 3
    assert xpath_index_count("/A[1]/B[2]/C[3]") == 3
    assert xpath_fragility_penalty("/A[1]/B[2]/C[3]") == 0
    assert xpath_fragility_penalty("/A[1]/B[2]/C[3]/D[4]") == 8
    assert xpath_fragility_penalty("/A/B/C/D/E/F") == 8
    assert xpath_fragility_penalty("/A[1]/B[2]/C[3]/D[4]/E[5]/F[6]") == 16
    assert xpath_fragility_penalty("//A[1]/B[2]/C[3]/D[4]/E[5]/F[6]") == 16
    assert xpath_fragility_penalty('//*[@name="x"]') == 0


def test_escape_double_quoted() -> None:
    assert escape_double_quoted('a"b\\c') == 'a\\"b\\\\c'
