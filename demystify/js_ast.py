"""ESTree helpers built on top of :mod:`esprima`.

The parser returns its own node objects; the rest of the package works on
plain ``dict`` trees in ESTree shape instead, so passes can mutate names in
place and the printer can read any field without caring where the node came
from.  Child fields are listed explicitly in :data:`VISITOR_KEYS`, which also
fixes the document order used by every traversal.  Node types missing from
the table are still traversed (every nested node is visited) but never get
any special treatment.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

import esprima
from esprima.error_handler import Error as EsprimaError

from .exceptions import ParseError

LOG = logging.getLogger(__name__)

Node = Dict[str, Any]

VISITOR_KEYS: Dict[str, Tuple[str, ...]] = {
    "Program": ("body",),
    "ExpressionStatement": ("expression",),
    "BlockStatement": ("body",),
    "EmptyStatement": (),
    "DebuggerStatement": (),
    "WithStatement": ("object", "body"),
    "ReturnStatement": ("argument",),
    "LabeledStatement": ("label", "body"),
    "BreakStatement": ("label",),
    "ContinueStatement": ("label",),
    "IfStatement": ("test", "consequent", "alternate"),
    "SwitchStatement": ("discriminant", "cases"),
    "SwitchCase": ("test", "consequent"),
    "ThrowStatement": ("argument",),
    "TryStatement": ("block", "handler", "finalizer"),
    "CatchClause": ("param", "body"),
    "WhileStatement": ("test", "body"),
    "DoWhileStatement": ("body", "test"),
    "ForStatement": ("init", "test", "update", "body"),
    "ForInStatement": ("left", "right", "body"),
    "ForOfStatement": ("left", "right", "body"),
    "FunctionDeclaration": ("id", "params", "body"),
    "FunctionExpression": ("id", "params", "body"),
    "ArrowFunctionExpression": ("params", "body"),
    "VariableDeclaration": ("declarations",),
    "VariableDeclarator": ("id", "init"),
    "ClassDeclaration": ("id", "superClass", "body"),
    "ClassExpression": ("id", "superClass", "body"),
    "ClassBody": ("body",),
    "MethodDefinition": ("key", "value"),
    "ThisExpression": (),
    "Super": (),
    "Import": (),
    "Identifier": (),
    "Literal": (),
    "TemplateElement": (),
    "ArrayExpression": ("elements",),
    "ArrayPattern": ("elements",),
    "ObjectExpression": ("properties",),
    "ObjectPattern": ("properties",),
    "Property": ("key", "value"),
    "SpreadElement": ("argument",),
    "RestElement": ("argument",),
    "AssignmentPattern": ("left", "right"),
    "TemplateLiteral": ("quasis", "expressions"),
    "TaggedTemplateExpression": ("tag", "quasi"),
    "UnaryExpression": ("argument",),
    "UpdateExpression": ("argument",),
    "AwaitExpression": ("argument",),
    "YieldExpression": ("argument",),
    "BinaryExpression": ("left", "right"),
    "LogicalExpression": ("left", "right"),
    "AssignmentExpression": ("left", "right"),
    "ConditionalExpression": ("test", "consequent", "alternate"),
    "CallExpression": ("callee", "arguments"),
    "NewExpression": ("callee", "arguments"),
    "MemberExpression": ("object", "property"),
    "SequenceExpression": ("expressions",),
    "MetaProperty": ("meta", "property"),
    "ImportDeclaration": ("specifiers", "source"),
    "ImportSpecifier": ("imported", "local"),
    "ImportDefaultSpecifier": ("local",),
    "ImportNamespaceSpecifier": ("local",),
    "ExportNamedDeclaration": ("declaration", "specifiers", "source"),
    "ExportDefaultDeclaration": ("declaration",),
    "ExportAllDeclaration": ("source",),
    "ExportSpecifier": ("local", "exported"),
}

FUNCTION_TYPES = frozenset(
    {"FunctionDeclaration", "FunctionExpression", "ArrowFunctionExpression"}
)

_IMPORT_SPECIFIERS = frozenset(
    {"ImportSpecifier", "ImportDefaultSpecifier", "ImportNamespaceSpecifier"}
)

# esprima spells a few ESTree fields differently because they clash with
# Python keywords.
_FIELD_ALIASES = {"isAsync": "async", "isStatic": "static"}

_RECURSION_HEADROOM = 10000


@contextmanager
def recursion_headroom(limit: int = _RECURSION_HEADROOM) -> Iterator[None]:
    """Temporarily raise the interpreter recursion limit to ``limit``.

    Minified bundles routinely contain long operator chains that nest deeper
    than the default limit once they are parsed or printed recursively.
    """

    previous = sys.getrecursionlimit()
    if previous < limit:
        sys.setrecursionlimit(limit)
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)


def _to_tree(value: Any) -> Any:
    if isinstance(value, list):
        return [_to_tree(item) for item in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, dict):
        return {_FIELD_ALIASES.get(k, k): _to_tree(v) for k, v in value.items()}
    if hasattr(value, "__dict__"):
        return {
            _FIELD_ALIASES.get(k, k): _to_tree(v)
            for k, v in vars(value).items()
            if not k.startswith("_")
        }
    return value


def parse(source: str, source_type: str = "script") -> Node:
    """Parse ``source`` into an ESTree ``Program`` dictionary.

    The grammar is ECMAScript 2017 (esprima 4); later syntax such as ``??``
    or an optional catch binding is rejected.  Raises
    :class:`~demystify.exceptions.ParseError` with the position reported by
    the parser when ``source`` is malformed.
    """

    parser = esprima.parseModule if source_type == "module" else esprima.parseScript
    with recursion_headroom():
        try:
            program = parser(source)
        except EsprimaError as exc:
            message = str(exc) or getattr(exc, "description", None) or "parse error"
            raise ParseError(
                message,
                line=getattr(exc, "lineNumber", None),
                column=getattr(exc, "column", None),
                index=getattr(exc, "index", None),
                description=getattr(exc, "description", None),
            ) from exc
        tree = _to_tree(program)
    LOG.debug("parsed %d top-level statements", len(tree.get("body") or []))
    return tree


def is_node(value: Any) -> bool:
    return isinstance(value, dict) and isinstance(value.get("type"), str)


def _child_keys(node: Node) -> Tuple[str, ...]:
    keys = VISITOR_KEYS.get(node["type"])
    if keys is not None:
        return keys
    return tuple(
        key
        for key, value in node.items()
        if is_node(value) or (isinstance(value, list) and any(is_node(v) for v in value))
    )


def iter_children(node: Node) -> Iterator[Tuple[str, Node]]:
    """Yield ``(field, child)`` pairs of ``node`` in document order."""

    for key in _child_keys(node):
        value = node.get(key)
        if isinstance(value, list):
            for item in value:
                if is_node(item):
                    yield key, item
        elif is_node(value):
            yield key, value


def walk(tree: Node) -> Iterator[Tuple[Node, Optional[Node], Optional[str]]]:
    """Yield ``(node, parent, field)`` for every node, pre-order.

    The walk keeps an explicit stack so arbitrarily deep trees never hit the
    recursion limit.
    """

    stack: List[Tuple[Node, Optional[Node], Optional[str]]] = [(tree, None, None)]
    while stack:
        node, parent, key = stack.pop()
        yield node, parent, key
        children = list(iter_children(node))
        for child_key, child in reversed(children):
            stack.append((child, node, child_key))


def is_binding_safe(parent: Optional[Node], key: Optional[str]) -> bool:
    """Return ``True`` if an identifier stored at ``parent[key]`` names a binding.

    Property keys (shorthand ones included), non-computed member properties,
    class member names, labels and meta properties denote external contracts
    or other namespaces and must keep their spelling.
    """

    if parent is None:
        return True
    parent_type = parent.get("type")
    if parent_type == "MemberExpression":
        return not (key == "property" and not parent.get("computed"))
    if parent_type in ("Property", "MethodDefinition"):
        return not (key == "key" and not parent.get("computed"))
    if parent_type in ("LabeledStatement", "BreakStatement", "ContinueStatement"):
        return key != "label"
    if parent_type == "MetaProperty":
        return False
    if parent_type == "ImportSpecifier":
        return key != "imported"
    if parent_type == "ExportSpecifier":
        return key != "exported"
    return True


def binding_identifiers(pattern: Optional[Node]) -> Iterator[Node]:
    """Yield the ``Identifier`` nodes bound by a declaration pattern."""

    if pattern is None:
        return
    stack = [pattern]
    while stack:
        node = stack.pop()
        node_type = node.get("type")
        if node_type == "Identifier":
            yield node
        elif node_type == "ObjectPattern":
            for prop in reversed(node.get("properties") or []):
                if prop.get("type") == "Property":
                    stack.append(prop["value"])
                elif is_node(prop):
                    stack.append(prop)
        elif node_type == "ArrayPattern":
            for element in reversed(node.get("elements") or []):
                if is_node(element):
                    stack.append(element)
        elif node_type == "AssignmentPattern":
            stack.append(node["left"])
        elif node_type == "RestElement":
            stack.append(node["argument"])


def binding_names(pattern: Optional[Node]) -> List[str]:
    return [node["name"] for node in binding_identifiers(pattern)]


def declared_names(tree: Node) -> Set[str]:
    """Return every name the program declares anywhere."""

    names: Set[str] = set()
    for node, _, _ in walk(tree):
        node_type = node["type"]
        if node_type == "VariableDeclarator":
            names.update(binding_names(node.get("id")))
        elif node_type in FUNCTION_TYPES:
            if node.get("id"):
                names.add(node["id"]["name"])
            for param in node.get("params") or []:
                names.update(binding_names(param))
        elif node_type in ("ClassDeclaration", "ClassExpression"):
            if node.get("id"):
                names.add(node["id"]["name"])
        elif node_type == "CatchClause":
            names.update(binding_names(node.get("param")))
        elif node_type in _IMPORT_SPECIFIERS:
            names.add(node["local"]["name"])
    return names


def identifier_names(tree: Node) -> Set[str]:
    """Return the spelling of every ``Identifier`` in ``tree``."""

    return {node["name"] for node, _, _ in walk(tree) if node["type"] == "Identifier"}


__all__ = [
    "Node",
    "VISITOR_KEYS",
    "FUNCTION_TYPES",
    "parse",
    "recursion_headroom",
    "is_node",
    "iter_children",
    "walk",
    "is_binding_safe",
    "binding_identifiers",
    "binding_names",
    "declared_names",
    "identifier_names",
]
