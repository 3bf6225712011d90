"""Cosmetic text touch-ups on the final printed source."""

from __future__ import annotations

import re

_ASSIGNED_FUNCTION_RE = re.compile(r"([$A-Za-z_][$A-Za-z0-9_]*)\s*=\s*function\s*\(")
_PROPERTY_FUNCTION_RE = re.compile(r"([$A-Za-z_][$A-Za-z0-9_]*)\s*:\s*function\s*\(")


def name_anonymous_functions(text: str, prefix: str = "$") -> str:
    """Give anonymous functions assigned to a name a synthetic name.

    ``x = function (`` becomes ``x = function $x(`` and ``x: function (``
    becomes ``x: function $x(``, so stack traces and profilers show something
    better than ``anonymous``.
    """

    text = _ASSIGNED_FUNCTION_RE.sub(
        lambda m: f"{m.group(1)} = function {prefix}{m.group(1)}(", text
    )
    return _PROPERTY_FUNCTION_RE.sub(
        lambda m: f"{m.group(1)}: function {prefix}{m.group(1)}(", text
    )


__all__ = ["name_anonymous_functions"]
