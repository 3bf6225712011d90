from __future__ import annotations

from demystify.passes.fixups import name_anonymous_functions


def test_assignment_heads_are_named():
    assert name_anonymous_functions("x = function (a) {};") == "x = function $x(a) {};"
    assert name_anonymous_functions("var run = function () {};") == "var run = function $run() {};"


def test_property_heads_are_named():
    text = "var o = {\n  start: function () {}\n};"
    assert name_anonymous_functions(text) == "var o = {\n  start: function $start() {}\n};"


def test_named_functions_are_left_alone():
    text = "x = function named() {};"
    assert name_anonymous_functions(text) == text


def test_custom_prefix():
    assert name_anonymous_functions("x = function () {};", "_") == "x = function _x() {};"
