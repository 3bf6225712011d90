from __future__ import annotations

import pytest

from demystify.passes.pattern_mining import (
    CandidatePair,
    candidate_rename_map,
    extract_assignments,
    mine_candidates,
    to_label,
)


def test_quoted_dotted_value_is_camel_cased():
    pairs = mine_candidates("let a = 'fooBar.baz';\nuse(a);\n")
    assert [pair.as_tuple() for pair in pairs] == [("a", "fooBarBaz")]
    assert pairs[0].value == "fooBar.baz"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("var b = \"widthValue\";", [("b", "widthValue")]),
        ("const c1 = element;", [("c1", "element")]),
        ("var x = 1, yz = options.size;", [("yz", "optionsSize")]),
        ("let $ = jQuery;", [("$", "jQuery")]),
    ],
)
def test_declaration_shapes(text, expected):
    assert [pair.as_tuple() for pair in mine_candidates(text)] == expected


def test_no_match_is_empty():
    assert mine_candidates("console.log(1);\n") == []
    assert mine_candidates("") == []


def test_ambiguous_name_is_dropped():
    text = "let a = 'first';\nfunction f() {\n  let a = 'second';\n}\nvar b = 'third';\n"
    assert [pair.as_tuple() for pair in mine_candidates(text)] == [("b", "third")]


def test_ambiguity_counts_excluded_matches_too():
    text = "var a = function () {};\nvar b = 'value';\nvar a1 = 'other', a = 'label';\n"
    assert [pair.as_tuple() for pair in mine_candidates(text)] == [("b", "value"), ("a1", "other")]


def test_function_values_and_single_char_paths_are_excluded():
    text = "var a = function () {};\nvar b = e.target;\n"
    assert mine_candidates(text) == []


def test_long_names_never_match():
    assert mine_candidates("var total = 'something';") == []


def test_extract_assignments_keeps_order_and_duplicates():
    text = "var a = 'alpha', b = 'beta';\nlet a = 'gamma';"
    assert extract_assignments(text) == [("a", "alpha"), ("b", "beta"), ("a", "gamma")]


@pytest.mark.parametrize(
    "value, label",
    [
        ("fooBar.baz", "fooBarBaz"),
        ("window.location.href", "windowLocationHref"),
        ("plain", "plain"),
        ("trailing.", "trailing"),
    ],
)
def test_to_label(value, label):
    assert to_label(value) == label


def test_candidate_rename_map_uses_separator():
    pairs = [CandidatePair("a", "fooBarBaz", "fooBar.baz"), CandidatePair("b", "size", "size")]
    assert candidate_rename_map(pairs) == {"a": "fooBarBaz$a", "b": "size$b"}
    assert candidate_rename_map(pairs, "_") == {"a": "fooBarBaz_a", "b": "size_b"}
