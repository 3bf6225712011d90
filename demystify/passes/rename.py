"""Structural rename applicator shared by the inference passes."""

from __future__ import annotations

import logging
from typing import Mapping

from ..js_ast import Node, is_binding_safe, walk

LOG = logging.getLogger(__name__)


def apply_renames(tree: Node, rename_map: Mapping[str, str]) -> int:
    """Rewrite every binding-safe identifier named in ``rename_map``.

    All entries are applied in one walk; property keys, member property names
    and method names keep their spelling.  Returns the number of rewritten
    occurrences.
    """

    if not rename_map:
        return 0
    rewritten = 0
    for node, parent, key in walk(tree):
        if node["type"] != "Identifier":
            continue
        replacement = rename_map.get(node["name"])
        if replacement is None or not is_binding_safe(parent, key):
            continue
        node["name"] = replacement
        rewritten += 1
    LOG.debug("applied %d renames to %d identifiers", len(rename_map), rewritten)
    return rewritten


__all__ = ["apply_renames"]
