"""Scope-aware deshadowing of declared bindings.

Every binding that reuses a name already declared elsewhere in the program
receives a numbered variant (``x`` -> ``x1`` -> ``x2`` ...), and every
reference that resolves to it is rewritten.  Afterwards a name identifies one
binding program-wide, so later passes can rename by plain name lookup.
Names the program uses without declaring (globals) stay reserved: a local
that reuses one is suffixed like any other shadowing binding.

Declarations are registered when their scope is entered, mirroring hoisting:
``var`` names belong to the enclosing function, ``let``/``const``/``class``
and function declarations to the enclosing block.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional, Sequence, Set, Tuple

from ..js_ast import (
    FUNCTION_TYPES,
    Node,
    binding_names,
    identifier_names,
    is_binding_safe,
    iter_children,
)

LOG = logging.getLogger(__name__)

Frame = Dict[str, str]

_LOOP_TYPES = frozenset({"ForStatement", "ForInStatement", "ForOfStatement"})
_EXIT = object()


class _Enter(NamedTuple):
    node: Node


@dataclass
class DeshadowResult:
    """Outcome of a deshadowing walk."""

    renames: List[Tuple[str, str]] = field(default_factory=list)
    references_rewritten: int = 0
    counters: Dict[str, int] = field(default_factory=dict)
    free_names: Set[str] = field(default_factory=set)

    @property
    def renamed(self) -> int:
        return len(self.renames)


def _var_names(root: Node) -> Iterator[str]:
    """Yield ``var`` bindings inside ``root`` without entering nested functions."""

    stack: List[Node] = [child for _, child in reversed(list(iter_children(root)))]
    while stack:
        node = stack.pop()
        node_type = node["type"]
        if node_type in FUNCTION_TYPES:
            continue
        if node_type == "VariableDeclaration" and node.get("kind") == "var":
            for declarator in node["declarations"]:
                yield from binding_names(declarator["id"])
        for _, child in reversed(list(iter_children(node))):
            stack.append(child)


def _lexical_names(statements: Sequence[Node]) -> Iterator[str]:
    """Yield block-scoped bindings declared directly in ``statements``."""

    for stmt in statements:
        stmt_type = stmt["type"]
        if stmt_type in ("ExportNamedDeclaration", "ExportDefaultDeclaration"):
            stmt = stmt.get("declaration") or {}
            stmt_type = stmt.get("type")
        if stmt_type == "VariableDeclaration" and stmt.get("kind") != "var":
            for declarator in stmt["declarations"]:
                yield from binding_names(declarator["id"])
        elif stmt_type in ("FunctionDeclaration", "ClassDeclaration") and stmt.get("id"):
            yield stmt["id"]["name"]
        elif stmt_type == "ImportDeclaration":
            for spec in stmt.get("specifiers") or []:
                yield spec["local"]["name"]


class ScopeResolver:
    """Depth-first walk assigning every colliding binding a unique name.

    ``reserved`` names are treated as already taken by an outer binding, so
    the first local declaration of one is suffixed.  Pass the program's free
    names here to keep references to globals pointing at the globals.  With
    ``dry_run`` the walk only records free names and never touches the tree.
    """

    def __init__(self, tree: Node, reserved: Iterable[str] = (), dry_run: bool = False) -> None:
        self.tree = tree
        self.dry_run = dry_run
        self.scopes: List[Frame] = [{}]
        self.counters: Dict[str, int] = {name: 0 for name in reserved}
        self._taken: Set[str] = identifier_names(tree)
        self.result = DeshadowResult(counters=self.counters)

    # -- frames -----------------------------------------------------
    def declare(self, frame: Frame, name: str) -> None:
        if name in frame:
            # Same-scope redeclaration (``var a; var a;``) spells one binding.
            return
        if self.dry_run or name not in self.counters:
            self.counters.setdefault(name, 0)
            frame[name] = name
            return
        count = self.counters[name] + 1
        candidate = f"{name}{count}"
        while candidate in self._taken:
            count += 1
            candidate = f"{name}{count}"
        self.counters[name] = count
        self._taken.add(candidate)
        frame[name] = candidate
        self.result.renames.append((name, candidate))
        LOG.debug("deshadow %s -> %s", name, candidate)

    def lookup(self, name: str) -> Optional[str]:
        for frame in reversed(self.scopes):
            if name in frame:
                return frame[name]
        return None

    def _rewrite(self, identifier: Node) -> None:
        resolved = self.lookup(identifier["name"])
        if resolved is None:
            self.result.free_names.add(identifier["name"])
        elif resolved != identifier["name"] and not self.dry_run:
            identifier["name"] = resolved
            self.result.references_rewritten += 1

    def _enter_scope(self, node: Node) -> bool:
        """Push and populate a frame for ``node``; return whether one was pushed."""

        node_type = node["type"]
        if node_type == "Program":
            frame = self.scopes[0]
            for name in _lexical_names(node.get("body") or []):
                self.declare(frame, name)
            for name in _var_names(node):
                self.declare(frame, name)
            return False

        names: List[str] = []
        if node_type in FUNCTION_TYPES:
            if node_type == "FunctionExpression" and node.get("id"):
                names.append(node["id"]["name"])
            for param in node.get("params") or []:
                names.extend(binding_names(param))
            if node["body"]["type"] == "BlockStatement":
                names.extend(_var_names(node["body"]))
        elif node_type == "BlockStatement":
            names.extend(_lexical_names(node.get("body") or []))
        elif node_type in _LOOP_TYPES:
            head = node.get("init") if node_type == "ForStatement" else node.get("left")
            if head is not None and head["type"] == "VariableDeclaration" and head.get("kind") != "var":
                for declarator in head["declarations"]:
                    names.extend(binding_names(declarator["id"]))
        elif node_type == "CatchClause":
            names.extend(binding_names(node.get("param")))
        elif node_type == "SwitchStatement":
            for case in node.get("cases") or []:
                names.extend(_lexical_names(case.get("consequent") or []))
        else:
            return False

        frame: Frame = {}
        self.scopes.append(frame)
        for name in names:
            self.declare(frame, name)
        return True

    # -- traversal --------------------------------------------------
    def run(self) -> DeshadowResult:
        stack: List[object] = [(self.tree, None, None)]
        while stack:
            item = stack.pop()
            if item is _EXIT:
                self.scopes.pop()
                continue
            if isinstance(item, _Enter):
                self._enter_scope(item.node)
                continue
            node, parent, key = item  # type: ignore[misc]
            if node["type"] == "Identifier":
                if is_binding_safe(parent, key):
                    self._rewrite(node)
                continue

            if node["type"] == "SwitchStatement":
                # The discriminant is evaluated outside the case block.
                stack.append(_EXIT)
                for case in reversed(node.get("cases") or []):
                    stack.append((case, node, "cases"))
                stack.append(_Enter(node))
                stack.append((node["discriminant"], node, "discriminant"))
                continue

            skip_id = False
            if node["type"] == "FunctionDeclaration" and node.get("id"):
                # The declared name lives in the enclosing scope, not the
                # function's own frame.
                self._rewrite(node["id"])
                skip_id = True

            if self._enter_scope(node):
                stack.append(_EXIT)
            children = list(iter_children(node))
            for child_key, child in reversed(children):
                if skip_id and child_key == "id":
                    continue
                stack.append((child, node, child_key))
        if not self.dry_run:
            LOG.info(
                "deshadow renamed %d bindings, rewrote %d identifiers",
                self.result.renamed,
                self.result.references_rewritten,
            )
        return self.result


def free_names(tree: Node) -> Set[str]:
    """Return the names ``tree`` references without declaring them in scope."""

    return ScopeResolver(tree, dry_run=True).run().free_names


def resolve_shadowing(tree: Node) -> DeshadowResult:
    """Make every declared name in ``tree`` unique, mutating it in place.

    A local that shares its name with a free (global) reference anywhere in
    the program is suffixed too, so the bare name keeps meaning the global.
    """

    globals_ = free_names(tree)
    if globals_:
        LOG.debug("free names: %s", sorted(globals_))
    return ScopeResolver(tree, reserved=globals_).run()


__all__ = ["DeshadowResult", "ScopeResolver", "free_names", "resolve_shadowing"]
