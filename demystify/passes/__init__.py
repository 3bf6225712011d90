"""Pass modules orchestrated by :mod:`demystify.pipeline`."""

from __future__ import annotations

from . import deshadow, fixups, frequency, pattern_mining, rename

__all__ = [
    "deshadow",
    "pattern_mining",
    "frequency",
    "rename",
    "fixups",
]
