from __future__ import annotations

import pytest

from demystify import js_ast
from demystify.exceptions import ParseError


def _identifiers(tree):
    return [node["name"] for node, _, _ in js_ast.walk(tree) if node["type"] == "Identifier"]


def test_parse_returns_program_dict(parse):
    tree = parse("var a = 1;")
    assert tree["type"] == "Program"
    declaration = tree["body"][0]
    assert declaration["type"] == "VariableDeclaration"
    assert declaration["kind"] == "var"
    identifier = declaration["declarations"][0]["id"]
    assert identifier["type"] == "Identifier"
    assert identifier["name"] == "a"


def test_parse_error_carries_position():
    with pytest.raises(ParseError) as excinfo:
        js_ast.parse("var a = 1;\nvar = ;")
    error = excinfo.value
    assert error.line == 2
    assert error.column is not None
    assert error.description


def test_async_flag_is_renamed_to_estree_field(parse):
    tree = parse("async function f() { await g(); }")
    assert tree["body"][0]["async"] is True


def test_module_source_type_accepts_imports():
    tree = js_ast.parse("import {a as b} from 'm';\nexport {b};", "module")
    assert tree["body"][0]["type"] == "ImportDeclaration"


def test_walk_is_document_order(parse):
    tree = parse("var total = first + second; call(total);")
    assert _identifiers(tree) == ["total", "first", "second", "call", "total"]


def test_walk_survives_deep_nesting(parse):
    source = "var x = " + " + ".join(["a"] * 500) + ";"
    tree = parse(source)
    assert len(_identifiers(tree)) == 501


@pytest.mark.parametrize(
    "parent, key, expected",
    [
        ({"type": "MemberExpression", "computed": False}, "property", False),
        ({"type": "MemberExpression", "computed": True}, "property", True),
        ({"type": "MemberExpression", "computed": False}, "object", True),
        ({"type": "Property", "computed": False}, "key", False),
        ({"type": "Property", "computed": False}, "value", True),
        ({"type": "Property", "computed": True}, "key", True),
        ({"type": "MethodDefinition", "computed": False}, "key", False),
        ({"type": "LabeledStatement"}, "label", False),
        ({"type": "BreakStatement"}, "label", False),
        ({"type": "MetaProperty"}, "property", False),
        ({"type": "ImportSpecifier"}, "imported", False),
        ({"type": "ImportSpecifier"}, "local", True),
        ({"type": "ExportSpecifier"}, "exported", False),
        ({"type": "CallExpression"}, "callee", True),
        (None, None, True),
    ],
)
def test_is_binding_safe(parent, key, expected):
    assert js_ast.is_binding_safe(parent, key) is expected


def test_declared_names_covers_all_binding_forms(parse):
    tree = parse(
        "var a, {b, c: [d]} = o; function f(g, ...h) { let i; }"
        " class K {} try {} catch (e) {} var fn = function named() {};"
    )
    assert js_ast.declared_names(tree) == {
        "a", "b", "d", "f", "g", "h", "i", "K", "e", "fn", "named",
    }


def test_binding_names_handles_defaults_and_rest(parse):
    tree = parse("var [x = 1, , ...rest] = list;")
    pattern = tree["body"][0]["declarations"][0]["id"]
    assert js_ast.binding_names(pattern) == ["x", "rest"]


def test_unknown_node_types_are_still_traversed():
    tree = {
        "type": "Program",
        "body": [
            {
                "type": "FancyStatement",
                "target": {"type": "Identifier", "name": "hidden"},
            }
        ],
    }
    assert _identifiers(tree) == ["hidden"]


@pytest.mark.parametrize(
    "source",
    [
        "try { f(); } catch { g(); }",
        "var v = a ?? b;",
    ],
)
def test_grammar_is_limited_to_es2017(source):
    with pytest.raises(ParseError):
        js_ast.parse(source)
