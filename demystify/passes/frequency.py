"""Contextual frequency analysis for short identifiers.

A single document-order walk remembers the most recent "meaningful" (long,
not stoplisted) identifier and credits it to every short identifier that
follows.  The dominant context of a short name becomes its label.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Collection, Dict, Iterable, List, Mapping, Optional

from ..js_ast import Node, is_binding_safe, walk

LOG = logging.getLogger(__name__)

SHORT_NAME_RE = re.compile(r"^[A-Za-z0-9$_]{1,2}[0-9_]*$")

# Identifier-shaped tokens that carry no meaning as a context label.
DEFAULT_STOPLIST = (
    "function",
    "class",
    "type",
    "name",
    "key",
    "value",
    "get",
    "set",
    "let",
    "var",
    "const",
    "generator",
    "await",
    "for",
)

Histogram = Dict[str, Dict[str, int]]


def is_short(name: str) -> bool:
    return bool(SHORT_NAME_RE.match(name))


@dataclass
class ProfileState:
    """Accumulator threaded through one profiling walk."""

    stoplist: Collection[str]
    last_meaningful: Optional[str] = None
    histogram: Histogram = field(default_factory=dict)

    def observe(self, name: str, binding_safe: bool) -> None:
        if not is_short(name) and name not in self.stoplist:
            self.last_meaningful = name
            return
        if not binding_safe or self.last_meaningful is None:
            return
        row = self.histogram.setdefault(name, {})
        row[self.last_meaningful] = row.get(self.last_meaningful, 0) + 1


def profile_context(tree: Node, stoplist: Iterable[str] = DEFAULT_STOPLIST) -> Histogram:
    """Build the context histogram of every short identifier in ``tree``."""

    state = ProfileState(stoplist=frozenset(stoplist))
    for node, parent, key in walk(tree):
        if node["type"] == "Identifier":
            state.observe(node["name"], is_binding_safe(parent, key))
    LOG.debug("profiled %d short names", len(state.histogram))
    return state.histogram


def select_labels(row: Mapping[str, int], separator: str = "$") -> List[str]:
    """Pick the winning context labels of one histogram row.

    Filters run in a fixed order: highest count, then camel-cased labels over
    all-lowercase ones, then longest, then labels free of ``separator`` when
    several remain.  Surviving ties are all returned in row order.
    """

    if not row:
        return []
    top = max(row.values())
    labels = [label for label, count in row.items() if count == top]
    if any(label != label.lower() for label in labels):
        labels = [label for label in labels if label != label.lower()]
    longest = max(len(label) for label in labels)
    labels = [label for label in labels if len(label) == longest]
    if len(labels) > 1:
        plain = [label for label in labels if separator not in label]
        if plain:
            labels = plain
    return labels


def derive_labels(histogram: Mapping[str, Mapping[str, int]], separator: str = "$") -> Dict[str, List[str]]:
    """Return the long-name table: short name -> winning labels."""

    return {name: select_labels(row, separator) for name, row in histogram.items()}


def long_name_map(
    labels: Mapping[str, List[str]],
    separator: str = "$",
    declared: Optional[Collection[str]] = None,
) -> Dict[str, str]:
    """Compose ``name -> <label1$label2...>$<name>`` rename entries.

    When ``declared`` is given, names the program never declares (globals such
    as ``$``) are left alone.
    """

    renames: Dict[str, str] = {}
    for name, winners in labels.items():
        if not winners:
            continue
        if declared is not None and name not in declared:
            continue
        renames[name] = separator.join(winners) + separator + name
    return renames


__all__ = [
    "DEFAULT_STOPLIST",
    "Histogram",
    "ProfileState",
    "is_short",
    "profile_context",
    "select_labels",
    "derive_labels",
    "long_name_map",
]
