"""Literal-adjacency mining over canonical printed source.

The miner recognises exactly one textual shape, a short name declared or
assigned with a literal-looking value::

    (let|var|const|,) <ws>+ NAME <ws>* = <ws>* ['"]? VALUE
    NAME  := [A-Za-z0-9$_]{1,3}[0-9_]*
    VALUE := [A-Za-z$_][A-Za-z0-9.$_]{3,}

``let a = 'fooBar.baz'`` yields the pair ``("a", "fooBarBaz")``.  A name that
matches more than once is ambiguous and produces no pair at all.  The shape
relies on the spacing emitted by :mod:`demystify.codegen`; missing a match is
acceptable, a wrong label is bounded by the single-occurrence filter.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple

LOG = logging.getLogger(__name__)

DECLARATION_RE = re.compile(
    r"(?:let|var|const|,)\s+[A-Za-z0-9$_]{1,3}[0-9_]*\s*=\s*['\"]?[A-Za-z$_][A-Za-z0-9.$_]{3,}"
)
_QUOTES_RE = re.compile(r"['\"]+")
_PATH_STEP_RE = re.compile(r"\.(.)")

DEFAULT_EXCLUDED_VALUES: Tuple[str, ...] = ("function",)


@dataclass(frozen=True)
class CandidatePair:
    """A short name and the label derived from its literal value."""

    name: str
    label: str
    value: str

    def as_tuple(self) -> Tuple[str, str]:
        return (self.name, self.label)


def extract_assignments(text: str) -> List[Tuple[str, str]]:
    """Return ``(name, value)`` for every declaration-shaped match, in order."""

    pairs: List[Tuple[str, str]] = []
    for match in DECLARATION_RE.finditer(text):
        cleaned = _QUOTES_RE.sub("", match.group(0))
        sides = cleaned.split("=")
        name = sides[0].split()[-1]
        value = sides[1].split()[-1]
        pairs.append((name, value))
    return pairs


def to_label(value: str) -> str:
    """Collapse a dotted path into one camel-cased token (``a.b`` -> ``aB``)."""

    label = _PATH_STEP_RE.sub(lambda m: m.group(1).upper(), value)
    return label.replace(".", "")


def mine_candidates(
    text: str,
    excluded_values: Sequence[str] = DEFAULT_EXCLUDED_VALUES,
) -> List[CandidatePair]:
    """Mine unambiguous candidate pairs from canonical source ``text``."""

    assignments = extract_assignments(text)
    if not assignments:
        LOG.debug("no declaration patterns matched")
        return []

    occurrences = Counter(name for name, _ in assignments)
    candidates: List[CandidatePair] = []
    for name, value in assignments:
        if occurrences[name] != 1:
            LOG.debug("skipping ambiguous name %s (%d matches)", name, occurrences[name])
            continue
        if value in excluded_values or value[1:2] == ".":
            continue
        candidates.append(CandidatePair(name=name, label=to_label(value), value=value))
    LOG.debug("mined %d candidate pairs: %s", len(candidates), [c.as_tuple() for c in candidates])
    return candidates


def candidate_rename_map(pairs: Iterable[CandidatePair], separator: str = "$") -> Dict[str, str]:
    """Compose ``name -> <label><separator><name>`` for every pair."""

    return {pair.name: f"{pair.label}{separator}{pair.name}" for pair in pairs if pair.label}


__all__ = [
    "CandidatePair",
    "DECLARATION_RE",
    "DEFAULT_EXCLUDED_VALUES",
    "extract_assignments",
    "to_label",
    "mine_candidates",
    "candidate_rename_map",
]
