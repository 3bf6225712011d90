"""Canonical ECMAScript code generation for ESTree dictionaries.

The output format is deliberately rigid so text-level passes can rely on it:

* two-space indentation (configurable), one statement per line, every
  statement terminated with ``;``;
* a single space around binary, assignment and ternary operators, and after
  commas;
* object literals are spread over multiple lines, patterns stay inline;
* anonymous functions print as ``function (``;
* literals keep their raw spelling from the source;
* parentheses are inserted from operator precedence, and around ``in``
  inside a ``for`` initializer; they are never copied from the input.

Re-parsing the generated text yields the same tree up to formatting, except
that an ``if`` consequent is wrapped in a block when an ``else`` follows it.
"""

from __future__ import annotations

import json
import re
from typing import Any, List, Optional, Sequence

from .js_ast import Node, recursion_headroom

_SEQUENCE = 0
_ASSIGNMENT = 1
_CONDITIONAL = 2
_PREFIX = 15
_POSTFIX = 16
_MEMBER = 19
_PRIMARY = 20

_BINARY_PRECEDENCE = {
    "??": 3,
    "||": 3,
    "&&": 4,
    "|": 5,
    "^": 6,
    "&": 7,
    "==": 8,
    "!=": 8,
    "===": 8,
    "!==": 8,
    "<": 9,
    ">": 9,
    "<=": 9,
    ">=": 9,
    "in": 9,
    "instanceof": 9,
    "<<": 10,
    ">>": 10,
    ">>>": 10,
    "+": 11,
    "-": 11,
    "*": 12,
    "/": 12,
    "%": 12,
    "**": 13,
}

_PRECEDENCE = {
    "MemberExpression": _MEMBER,
    "CallExpression": _MEMBER,
    "NewExpression": _MEMBER,
    "TaggedTemplateExpression": _MEMBER,
    "MetaProperty": _MEMBER,
    "UnaryExpression": _PREFIX,
    "AwaitExpression": _PREFIX,
    "ConditionalExpression": _CONDITIONAL,
    "AssignmentExpression": _ASSIGNMENT,
    "AssignmentPattern": _ASSIGNMENT,
    "ArrowFunctionExpression": _ASSIGNMENT,
    "YieldExpression": _ASSIGNMENT,
    "SpreadElement": _ASSIGNMENT,
    "RestElement": _ASSIGNMENT,
    "SequenceExpression": _SEQUENCE,
}

_WORD_OPERATORS = frozenset({"typeof", "void", "delete"})

# Expression statements may not start with these tokens.
_AMBIGUOUS_STATEMENT_START = re.compile(r"(?:\{|function\b|class\b|async\s+function\b|let\s*\[)")

_INTEGER_LITERAL = re.compile(r"\d+")


def precedence(node: Node) -> int:
    node_type = node["type"]
    if node_type in ("BinaryExpression", "LogicalExpression"):
        return _BINARY_PRECEDENCE.get(node["operator"], _PREFIX)
    if node_type == "UpdateExpression":
        return _PREFIX if node.get("prefix") else _POSTFIX
    return _PRECEDENCE.get(node_type, _PRIMARY)


def _has_call_in_chain(node: Node) -> bool:
    while True:
        node_type = node["type"]
        if node_type == "CallExpression":
            return True
        if node_type == "MemberExpression":
            node = node["object"]
        elif node_type == "TaggedTemplateExpression":
            node = node["tag"]
        else:
            return False


def _literal(node: Node) -> str:
    raw = node.get("raw")
    if isinstance(raw, str):
        return raw
    regex = node.get("regex")
    if isinstance(regex, dict):
        return f"/{regex.get('pattern', '')}/{regex.get('flags', '')}"
    value = node.get("value")
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return json.dumps(value)
    return repr(value)


class CodeGenerator:
    """Turn ESTree dictionaries back into source text."""

    def __init__(self, indent: str = "  ") -> None:
        self.indent = indent
        # Set while printing a ``for`` initializer, where a bare ``in``
        # operator would be read as a for-in loop.
        self._no_in = False

    def generate(self, node: Node) -> str:
        with recursion_headroom():
            if node["type"] == "Program":
                body = node.get("body") or []
                if not body:
                    return ""
                return "\n".join(self.statement(stmt, 0) for stmt in body) + "\n"
            if node["type"].endswith(("Statement", "Declaration")):
                return self.statement(node, 0)
            return self.expression(node, 0)

    # -- statements -------------------------------------------------
    def statement(self, node: Node, level: int) -> str:
        handler = getattr(self, f"_stmt_{node['type']}", None)
        if handler is None:
            raise ValueError(f"cannot generate statement for node type {node['type']!r}")
        return self._call(handler, node, level, no_in=False)

    def _call(self, handler: Any, node: Node, level: int, *, no_in: bool) -> str:
        saved, self._no_in = self._no_in, no_in
        try:
            return handler(node, level)
        finally:
            self._no_in = saved

    def _pad(self, level: int) -> str:
        return self.indent * level

    def _block(self, statements: Sequence[Node], level: int) -> str:
        if not statements:
            return "{}"
        inner = self._pad(level + 1)
        lines = [inner + self.statement(stmt, level + 1) for stmt in statements]
        return "{\n" + "\n".join(lines) + "\n" + self._pad(level) + "}"

    def _nested(self, node: Node, level: int) -> str:
        if node["type"] == "BlockStatement":
            return self._block(node["body"], level)
        return self.statement(node, level)

    def _braced(self, node: Node, level: int) -> str:
        if node["type"] == "BlockStatement":
            return self._block(node["body"], level)
        return self._block([node], level)

    def _stmt_BlockStatement(self, node: Node, level: int) -> str:
        return self._block(node["body"], level)

    def _stmt_EmptyStatement(self, node: Node, level: int) -> str:
        return ";"

    def _stmt_DebuggerStatement(self, node: Node, level: int) -> str:
        return "debugger;"

    def _stmt_ExpressionStatement(self, node: Node, level: int) -> str:
        text = self.expression(node["expression"], level)
        if _AMBIGUOUS_STATEMENT_START.match(text):
            text = f"({text})"
        return text + ";"

    def _stmt_VariableDeclaration(self, node: Node, level: int) -> str:
        return self._declaration(node, level) + ";"

    def _declaration(self, node: Node, level: int) -> str:
        parts: List[str] = []
        for declarator in node["declarations"]:
            text = self.expression(declarator["id"], level, _ASSIGNMENT)
            if declarator.get("init") is not None:
                text += " = " + self.expression(declarator["init"], level, _ASSIGNMENT)
            parts.append(text)
        return f"{node['kind']} " + ", ".join(parts)

    def _stmt_FunctionDeclaration(self, node: Node, level: int) -> str:
        return self._function(node, level)

    def _stmt_ClassDeclaration(self, node: Node, level: int) -> str:
        return self._class(node, level)

    def _stmt_ReturnStatement(self, node: Node, level: int) -> str:
        if node.get("argument") is None:
            return "return;"
        return "return " + self.expression(node["argument"], level) + ";"

    def _stmt_ThrowStatement(self, node: Node, level: int) -> str:
        return "throw " + self.expression(node["argument"], level) + ";"

    def _stmt_IfStatement(self, node: Node, level: int) -> str:
        head = "if (" + self.expression(node["test"], level) + ") "
        alternate = node.get("alternate")
        if alternate is None:
            return head + self._nested(node["consequent"], level)
        text = head + self._braced(node["consequent"], level) + " else "
        if alternate["type"] == "IfStatement":
            return text + self.statement(alternate, level)
        return text + self._nested(alternate, level)

    def _for_left(self, node: Node, level: int) -> str:
        if node["type"] == "VariableDeclaration":
            return self._declaration(node, level)
        return self.expression(node, level, _MEMBER)

    def _stmt_ForStatement(self, node: Node, level: int) -> str:
        init = node.get("init")
        if init is None:
            init_text = ""
        elif init["type"] == "VariableDeclaration":
            init_text = self._call(self._declaration, init, level, no_in=True)
        else:
            init_text = self._call(self.expression, init, level, no_in=True)
        text = "for (" + init_text + ";"
        if node.get("test") is not None:
            text += " " + self.expression(node["test"], level)
        text += ";"
        if node.get("update") is not None:
            text += " " + self.expression(node["update"], level)
        return text + ") " + self._nested(node["body"], level)

    def _stmt_ForInStatement(self, node: Node, level: int) -> str:
        left = self._for_left(node["left"], level)
        right = self.expression(node["right"], level)
        return f"for ({left} in {right}) " + self._nested(node["body"], level)

    def _stmt_ForOfStatement(self, node: Node, level: int) -> str:
        left = self._for_left(node["left"], level)
        right = self.expression(node["right"], level, _ASSIGNMENT)
        return f"for ({left} of {right}) " + self._nested(node["body"], level)

    def _stmt_WhileStatement(self, node: Node, level: int) -> str:
        test = self.expression(node["test"], level)
        return f"while ({test}) " + self._nested(node["body"], level)

    def _stmt_DoWhileStatement(self, node: Node, level: int) -> str:
        test = self.expression(node["test"], level)
        return "do " + self._nested(node["body"], level) + f" while ({test});"

    def _stmt_WithStatement(self, node: Node, level: int) -> str:
        obj = self.expression(node["object"], level)
        return f"with ({obj}) " + self._nested(node["body"], level)

    def _stmt_LabeledStatement(self, node: Node, level: int) -> str:
        return node["label"]["name"] + ": " + self.statement(node["body"], level)

    def _stmt_BreakStatement(self, node: Node, level: int) -> str:
        if node.get("label"):
            return f"break {node['label']['name']};"
        return "break;"

    def _stmt_ContinueStatement(self, node: Node, level: int) -> str:
        if node.get("label"):
            return f"continue {node['label']['name']};"
        return "continue;"

    def _stmt_TryStatement(self, node: Node, level: int) -> str:
        text = "try " + self._block(node["block"]["body"], level)
        handler = node.get("handler")
        if handler is not None:
            if handler.get("param") is not None:
                param = self.expression(handler["param"], level, _ASSIGNMENT)
                text += f" catch ({param}) "
            else:
                text += " catch "
            text += self._block(handler["body"]["body"], level)
        finalizer = node.get("finalizer")
        if finalizer is not None:
            text += " finally " + self._block(finalizer["body"], level)
        return text

    def _stmt_SwitchStatement(self, node: Node, level: int) -> str:
        head = "switch (" + self.expression(node["discriminant"], level) + ") "
        cases = node.get("cases") or []
        if not cases:
            return head + "{}"
        lines: List[str] = []
        case_pad = self._pad(level + 1)
        body_pad = self._pad(level + 2)
        for case in cases:
            if case.get("test") is None:
                lines.append(case_pad + "default:")
            else:
                lines.append(case_pad + "case " + self.expression(case["test"], level + 1) + ":")
            for stmt in case.get("consequent") or []:
                lines.append(body_pad + self.statement(stmt, level + 2))
        return head + "{\n" + "\n".join(lines) + "\n" + self._pad(level) + "}"

    def _stmt_ImportDeclaration(self, node: Node, level: int) -> str:
        source = _literal(node["source"])
        specifiers = node.get("specifiers") or []
        if not specifiers:
            return f"import {source};"
        parts: List[str] = []
        named: List[str] = []
        for spec in specifiers:
            local = spec["local"]["name"]
            if spec["type"] == "ImportDefaultSpecifier":
                parts.append(local)
            elif spec["type"] == "ImportNamespaceSpecifier":
                parts.append(f"* as {local}")
            else:
                imported = spec["imported"]["name"]
                named.append(local if imported == local else f"{imported} as {local}")
        if named:
            parts.append("{" + ", ".join(named) + "}")
        return "import " + ", ".join(parts) + f" from {source};"

    def _stmt_ExportNamedDeclaration(self, node: Node, level: int) -> str:
        if node.get("declaration") is not None:
            return "export " + self.statement(node["declaration"], level)
        names: List[str] = []
        for spec in node.get("specifiers") or []:
            local = spec["local"]["name"]
            exported = spec["exported"]["name"]
            names.append(local if local == exported else f"{local} as {exported}")
        text = "export {" + ", ".join(names) + "}"
        if node.get("source") is not None:
            text += " from " + _literal(node["source"])
        return text + ";"

    def _stmt_ExportDefaultDeclaration(self, node: Node, level: int) -> str:
        declaration = node["declaration"]
        if declaration["type"] in ("FunctionDeclaration", "ClassDeclaration"):
            return "export default " + self.statement(declaration, level)
        return "export default " + self.expression(declaration, level, _ASSIGNMENT) + ";"

    def _stmt_ExportAllDeclaration(self, node: Node, level: int) -> str:
        return "export * from " + _literal(node["source"]) + ";"

    # -- expressions ------------------------------------------------
    def expression(self, node: Node, level: int, minimum: int = _SEQUENCE) -> str:
        handler = getattr(self, f"_expr_{node['type']}", None)
        if handler is None:
            raise ValueError(f"cannot generate expression for node type {node['type']!r}")
        wrap = precedence(node) < minimum or (
            self._no_in and node["type"] == "BinaryExpression" and node["operator"] == "in"
        )
        if wrap:
            return "(" + self._call(handler, node, level, no_in=False) + ")"
        return handler(node, level)

    def _arguments(self, nodes: Sequence[Optional[Node]], level: int) -> str:
        return ", ".join(self.expression(arg, level, _ASSIGNMENT) for arg in nodes if arg is not None)

    def _expr_Identifier(self, node: Node, level: int) -> str:
        return node["name"]

    def _expr_Literal(self, node: Node, level: int) -> str:
        return _literal(node)

    def _expr_ThisExpression(self, node: Node, level: int) -> str:
        return "this"

    def _expr_Super(self, node: Node, level: int) -> str:
        return "super"

    def _expr_Import(self, node: Node, level: int) -> str:
        return "import"

    def _expr_ArrayExpression(self, node: Node, level: int) -> str:
        elements = node.get("elements") or []
        parts = [
            "" if element is None else self.expression(element, level, _ASSIGNMENT)
            for element in elements
        ]
        text = ", ".join(parts)
        if elements and elements[-1] is None:
            text += ","
        return f"[{text}]"

    _expr_ArrayPattern = _expr_ArrayExpression

    def _expr_ObjectExpression(self, node: Node, level: int) -> str:
        properties = node.get("properties") or []
        if not properties:
            return "{}"
        inner = self._pad(level + 1)
        lines = [inner + self._property(prop, level + 1) for prop in properties]
        return "{\n" + ",\n".join(lines) + "\n" + self._pad(level) + "}"

    def _expr_ObjectPattern(self, node: Node, level: int) -> str:
        properties = node.get("properties") or []
        return "{" + ", ".join(self._property(prop, level) for prop in properties) + "}"

    def _property_key(self, node: Node, level: int) -> str:
        if node.get("computed"):
            return "[" + self.expression(node["key"], level, _ASSIGNMENT) + "]"
        key = node["key"]
        if key["type"] == "Identifier":
            return key["name"]
        return self.expression(key, level)

    def _property(self, node: Node, level: int) -> str:
        if node["type"] != "Property":
            return self.expression(node, level, _ASSIGNMENT)
        key = self._property_key(node, level)
        value = node["value"]
        kind = node.get("kind", "init")
        if kind in ("get", "set"):
            return f"{kind} {key}" + self._function_tail(value, level)
        if node.get("method"):
            return self._method_prefix(value) + key + self._function_tail(value, level)
        if node.get("shorthand") and not node.get("computed"):
            # Shorthand stays shorthand only while key and binding agree.
            if value["type"] == "Identifier" and value["name"] == key:
                return key
            if (
                value["type"] == "AssignmentPattern"
                and value["left"]["type"] == "Identifier"
                and value["left"]["name"] == key
            ):
                return key + " = " + self.expression(value["right"], level, _ASSIGNMENT)
        return key + ": " + self.expression(value, level, _ASSIGNMENT)

    def _method_prefix(self, function: Node) -> str:
        prefix = "async " if function.get("async") else ""
        if function.get("generator"):
            prefix += "*"
        return prefix

    def _params(self, node: Node, level: int) -> str:
        return "(" + self._arguments(node.get("params") or [], level) + ")"

    def _function_tail(self, node: Node, level: int) -> str:
        return self._params(node, level) + " " + self._block(node["body"]["body"], level)

    def _function(self, node: Node, level: int) -> str:
        text = "async function" if node.get("async") else "function"
        if node.get("generator"):
            text += "*"
        if node.get("id"):
            text += " " + node["id"]["name"]
        else:
            text += " "
        return text + self._function_tail(node, level)

    _expr_FunctionExpression = _function

    def _expr_ArrowFunctionExpression(self, node: Node, level: int) -> str:
        text = "async " if node.get("async") else ""
        text += self._params(node, level) + " => "
        body = node["body"]
        if body["type"] == "BlockStatement":
            return text + self._block(body["body"], level)
        body_text = self.expression(body, level, _ASSIGNMENT)
        if body_text.startswith("{"):
            body_text = f"({body_text})"
        return text + body_text

    def _class(self, node: Node, level: int) -> str:
        text = "class"
        if node.get("id"):
            text += " " + node["id"]["name"]
        if node.get("superClass") is not None:
            text += " extends " + self.expression(node["superClass"], level, _MEMBER)
        members = (node.get("body") or {}).get("body") or []
        if not members:
            return text + " {}"
        inner = self._pad(level + 1)
        lines = [inner + self._method(member, level + 1) for member in members]
        return text + " {\n" + "\n".join(lines) + "\n" + self._pad(level) + "}"

    _expr_ClassExpression = _class

    def _method(self, node: Node, level: int) -> str:
        value = node["value"]
        text = "static " if node.get("static") else ""
        kind = node.get("kind")
        if kind in ("get", "set"):
            text += kind + " "
        else:
            text += self._method_prefix(value)
        return text + self._property_key(node, level) + self._function_tail(value, level)

    def _expr_TemplateLiteral(self, node: Node, level: int) -> str:
        quasis = node.get("quasis") or []
        expressions = node.get("expressions") or []
        parts = ["`"]
        for index, quasi in enumerate(quasis):
            value = quasi.get("value") or {}
            parts.append(value.get("raw", "") if isinstance(value, dict) else str(value))
            if index < len(expressions):
                parts.append("${" + self.expression(expressions[index], level) + "}")
        parts.append("`")
        return "".join(parts)

    def _expr_TaggedTemplateExpression(self, node: Node, level: int) -> str:
        return self.expression(node["tag"], level, _MEMBER) + self._expr_TemplateLiteral(node["quasi"], level)

    def _expr_MemberExpression(self, node: Node, level: int) -> str:
        obj = node["object"]
        text = self.expression(obj, level, _MEMBER)
        if obj["type"] == "Literal" and _INTEGER_LITERAL.fullmatch(text):
            text = f"({text})"
        if node.get("computed"):
            return text + "[" + self.expression(node["property"], level) + "]"
        return text + "." + node["property"]["name"]

    def _expr_CallExpression(self, node: Node, level: int) -> str:
        callee = self.expression(node["callee"], level, _MEMBER)
        return callee + "(" + self._arguments(node.get("arguments") or [], level) + ")"

    def _expr_NewExpression(self, node: Node, level: int) -> str:
        callee = node["callee"]
        text = self.expression(callee, level, _MEMBER)
        if _has_call_in_chain(callee):
            text = f"({text})"
        return "new " + text + "(" + self._arguments(node.get("arguments") or [], level) + ")"

    def _expr_SequenceExpression(self, node: Node, level: int) -> str:
        return ", ".join(
            self.expression(expr, level, _ASSIGNMENT) for expr in node["expressions"]
        )

    def _expr_UnaryExpression(self, node: Node, level: int) -> str:
        operator = node["operator"]
        argument = self.expression(node["argument"], level, _PREFIX)
        if operator in _WORD_OPERATORS:
            return f"{operator} {argument}"
        if operator in ("-", "+") and argument.startswith(operator):
            return f"{operator} {argument}"
        return operator + argument

    def _expr_UpdateExpression(self, node: Node, level: int) -> str:
        operator = node["operator"]
        if node.get("prefix"):
            return operator + self.expression(node["argument"], level, _PREFIX)
        return self.expression(node["argument"], level, _POSTFIX) + operator

    def _expr_BinaryExpression(self, node: Node, level: int) -> str:
        operator = node["operator"]
        own = precedence(node)
        left_node = node["left"]
        if operator == "**":
            left = self.expression(left_node, level, own + 1)
            if left_node["type"] in ("UnaryExpression", "AwaitExpression") and not left.startswith("("):
                left = f"({left})"
            right = self.expression(node["right"], level, own)
        else:
            left = self.expression(left_node, level, own)
            right = self.expression(node["right"], level, own + 1)
        return f"{left} {operator} {right}"

    _expr_LogicalExpression = _expr_BinaryExpression

    def _expr_ConditionalExpression(self, node: Node, level: int) -> str:
        test = self.expression(node["test"], level, _CONDITIONAL + 1)
        consequent = self.expression(node["consequent"], level, _ASSIGNMENT)
        alternate = self.expression(node["alternate"], level, _ASSIGNMENT)
        return f"{test} ? {consequent} : {alternate}"

    def _expr_AssignmentExpression(self, node: Node, level: int) -> str:
        left = self.expression(node["left"], level, _MEMBER)
        right = self.expression(node["right"], level, _ASSIGNMENT)
        return f"{left} {node['operator']} {right}"

    def _expr_AssignmentPattern(self, node: Node, level: int) -> str:
        left = self.expression(node["left"], level, _MEMBER)
        return left + " = " + self.expression(node["right"], level, _ASSIGNMENT)

    def _expr_SpreadElement(self, node: Node, level: int) -> str:
        return "..." + self.expression(node["argument"], level, _ASSIGNMENT)

    _expr_RestElement = _expr_SpreadElement

    def _expr_YieldExpression(self, node: Node, level: int) -> str:
        text = "yield*" if node.get("delegate") else "yield"
        if node.get("argument") is not None:
            text += " " + self.expression(node["argument"], level, _ASSIGNMENT)
        return text

    def _expr_AwaitExpression(self, node: Node, level: int) -> str:
        return "await " + self.expression(node["argument"], level, _PREFIX)

    def _expr_MetaProperty(self, node: Node, level: int) -> str:
        return node["meta"]["name"] + "." + node["property"]["name"]


def generate(node: Node, indent: str = "  ") -> str:
    """Return canonical source text for ``node``."""

    return CodeGenerator(indent=indent).generate(node)


__all__ = ["CodeGenerator", "generate", "precedence"]
