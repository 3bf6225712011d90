from __future__ import annotations

import pytest

from demystify import js_ast
from demystify.passes.frequency import (
    DEFAULT_STOPLIST,
    ProfileState,
    derive_labels,
    is_short,
    long_name_map,
    profile_context,
    select_labels,
)


@pytest.mark.parametrize("name", ["a", "ab", "$", "_0", "a1", "e12", "t_"])
def test_short_names(name):
    assert is_short(name)


@pytest.mark.parametrize("name", ["abc", "use", "width", "a1b"])
def test_long_names(name):
    assert not is_short(name)


def test_highest_count_wins():
    assert select_labels({"widthValue": 3, "heightValue": 1}) == ["widthValue"]
    labels = derive_labels({"a": {"widthValue": 3, "heightValue": 1}})
    assert long_name_map(labels) == {"a": "widthValue$a"}


def test_full_tie_joins_labels_in_row_order():
    labels = derive_labels({"a": {"fooBar": 2, "bazQux": 2}})
    assert labels == {"a": ["fooBar", "bazQux"]}
    assert long_name_map(labels) == {"a": "fooBar$bazQux$a"}


def test_camel_case_beats_lowercase():
    assert select_labels({"element": 2, "isReady": 2}) == ["isReady"]


def test_longest_label_wins_after_case_filter():
    assert select_labels({"count": 1, "amount": 1}) == ["amount"]


def test_separator_free_label_preferred_on_tie():
    assert select_labels({"abc$d": 1, "efghi": 1}) == ["efghi"]
    assert select_labels({"abc$d": 1, "efg$h": 1}) == ["abc$d", "efg$h"]


def test_empty_row_yields_no_label():
    assert select_labels({}) == []
    assert long_name_map({"a": []}) == {}


def test_undeclared_names_are_not_renamed():
    labels = {"$": ["jQuery"], "a": ["options"]}
    assert long_name_map(labels, "$", declared={"a"}) == {"a": "options$a"}


def test_profile_credits_last_meaningful_name():
    tree = js_ast.parse("var widthValue = 3; var a = widthValue; var b = 1; b = a;")
    histogram = profile_context(tree)
    assert histogram == {"a": {"widthValue": 2}, "b": {"widthValue": 2}}


def test_profile_skips_property_keys_but_they_count_as_context():
    tree = js_ast.parse("var options = {b: 1}; var c = options.size;")
    histogram = profile_context(tree)
    assert "b" not in histogram
    assert histogram["c"] == {"options": 1}


def test_stoplisted_names_never_become_context():
    tree = js_ast.parse("var target = 1; function run(value) { return value + q; }")
    histogram = profile_context(tree)
    assert "value" in DEFAULT_STOPLIST
    assert histogram["q"] == {"run": 1}
    assert histogram["value"] == {"run": 2}


def test_names_before_any_context_are_skipped():
    tree = js_ast.parse("a(b); var longer = a;")
    assert profile_context(tree) == {"a": {"longer": 1}}


def test_profile_state_is_per_walk():
    state = ProfileState(stoplist=frozenset())
    state.observe("a", True)
    state.observe("element", True)
    state.observe("a", False)
    state.observe("a", True)
    assert state.histogram == {"a": {"element": 1}}
    assert ProfileState(stoplist=frozenset()).histogram == {}
