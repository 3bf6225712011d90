from __future__ import annotations

from collections import Counter

from demystify import codegen, js_ast
from demystify.passes.deshadow import free_names, resolve_shadowing


def _resolve(source: str):
    tree = js_ast.parse(source)
    result = resolve_shadowing(tree)
    return tree, result


def _member_and_key_names(tree):
    names = set()
    for node, parent, key in js_ast.walk(tree):
        if node["type"] == "Identifier" and not js_ast.is_binding_safe(parent, key):
            names.add(node["name"])
    return names


def test_inner_block_binding_gets_fresh_name():
    tree, result = _resolve("function f(){ let x = 1; { let x = 2; use(x); } return x; }")
    assert result.renames == [("x", "x1")]
    assert codegen.generate(tree) == (
        "function f() {\n"
        "  let x = 1;\n"
        "  {\n"
        "    let x1 = 2;\n"
        "    use(x1);\n"
        "  }\n"
        "  return x;\n"
        "}\n"
    )


def test_each_declaration_gets_a_distinct_name():
    tree, result = _resolve(
        "var a = 1; function g() { var a = 2; { let a = 3; read(a); } read(a); } read(a);"
    )
    assert result.renamed == 2
    assert {"a", "a1", "a2"} <= js_ast.declared_names(tree)
    calls = [
        node["arguments"][0]["name"]
        for node, _, _ in js_ast.walk(tree)
        if node["type"] == "CallExpression"
    ]
    assert calls == ["a2", "a1", "a"]


def test_generated_names_skip_existing_identifiers():
    tree, result = _resolve("var a = 1, a1 = 0; function g() { var a = 2; return a; }")
    assert result.renames == [("a", "a2")]
    assert "return a2;" in codegen.generate(tree)


def test_second_run_is_a_no_op():
    tree, _ = _resolve(
        "var e = 0; function f(e) { try { g(); } catch (e) { let q = e; } return function (e) { return e; }; }"
    )
    reparsed = js_ast.parse(codegen.generate(tree))
    assert resolve_shadowing(reparsed).renames == []


def test_property_and_member_names_are_untouched():
    source = "var x = 1; var o = {x: x, y() {}}; function h(x) { return o.x + o.y() + x; }"
    before = _member_and_key_names(js_ast.parse(source))
    tree, result = _resolve(source)
    assert result.renames == [("x", "x1")]
    assert _member_and_key_names(tree) == before
    assert "return o.x + o.y() + x1;" in codegen.generate(tree)


def test_shorthand_property_keeps_its_key():
    tree, _ = _resolve("var x = 1; function h(x) { return {x}; }")
    assert "x: x1" in codegen.generate(tree)


def test_var_is_hoisted_to_function_scope():
    tree, _ = _resolve("var g = 2; function f() { g(); if (c) { var g = 1; } }")
    printed = codegen.generate(tree)
    assert "g1();" in printed
    assert "var g1 = 1;" in printed
    assert printed.startswith("var g = 2;")


def test_function_declaration_name_resolves_in_outer_scope():
    tree, _ = _resolve("function run() {} function wrap() { function run() {} run(); } run();")
    printed = codegen.generate(tree)
    assert "function run1() {}" in printed
    assert "  run1();" in printed
    assert printed.endswith("\nrun();\n")


def test_catch_parameter_is_scoped_to_handler():
    tree, _ = _resolve("var e = 1; try { t(); } catch (e) { use(e); } use(e);")
    printed = codegen.generate(tree)
    assert "catch (e1)" in printed
    assert "use(e1);" in printed
    assert printed.endswith("\nuse(e);\n")


def test_same_scope_redeclaration_is_one_binding():
    tree, result = _resolve("var a = 1; var a = 2; a++;")
    assert result.renames == []


def test_loop_head_let_gets_its_own_scope():
    tree, _ = _resolve("let i = 9; for (let i = 0; i < 3; i++) { use(i); } use(i);")
    printed = codegen.generate(tree)
    assert "for (let i1 = 0; i1 < 3; i1++)" in printed
    assert printed.endswith("\nuse(i);\n")


def test_counters_are_per_run():
    _, first = _resolve("var a; function f(a) {}")
    _, second = _resolve("var a; function f(a) {}")
    assert first.renames == second.renames == [("a", "a1")]


def test_undeclared_globals_are_left_alone():
    tree, result = _resolve("function f(x) { return $(x); } $(1);")
    names = Counter(
        node["name"] for node, _, _ in js_ast.walk(tree) if node["type"] == "Identifier"
    )
    assert names["$"] == 2
    assert result.renames == []


def test_locals_sharing_a_global_name_are_suffixed():
    tree, result = _resolve("function f() { var $ = 1; return $; } $(1);")
    assert result.renames == [("$", "$1")]
    assert result.free_names == {"$"}
    printed = codegen.generate(tree)
    assert "return $1;" in printed
    assert printed.endswith("\n$(1);\n")


def test_global_used_before_local_declaration_is_preserved():
    tree, _ = _resolve("a(); function g() { var a = 'someLabel'; return a; }")
    printed = codegen.generate(tree)
    assert printed.startswith("a();\n")
    assert "var a1 = 'someLabel';" in printed


def test_free_names_ignores_declared_and_property_names():
    tree = js_ast.parse("var o = {}; o.width = 1; function f(x) { return x + y; } z();")
    assert free_names(tree) == {"y", "z"}


def test_switch_discriminant_resolves_outside_the_cases():
    tree, _ = _resolve("let x = 1; switch (x) { case 1: let x = 2; use(x); }")
    printed = codegen.generate(tree)
    assert "switch (x) {" in printed
    assert "let x1 = 2;" in printed
    assert "use(x1);" in printed
