"""Custom exception hierarchy for the renaming pipeline."""

from __future__ import annotations

from typing import Optional


class DemystifyError(Exception):
    """Base class for all demystify related errors."""


class ParseError(DemystifyError):
    """Raised when source text cannot be parsed as ECMAScript.

    The position attributes mirror the ones reported by :mod:`esprima`; any of
    them may be ``None`` when the parser did not supply it.
    """

    def __init__(
        self,
        message: str,
        *,
        line: Optional[int] = None,
        column: Optional[int] = None,
        index: Optional[int] = None,
        description: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.line = line
        self.column = column
        self.index = index
        self.description = description or message


class ConfigError(DemystifyError):
    """Raised for invalid pipeline configuration values or files."""


class PipelineExecutionError(DemystifyError):
    """Raised when a pipeline pass fails with an unexpected exception."""

    def __init__(self, pass_name: str, message: str) -> None:
        super().__init__(f"pass {pass_name!r} failed: {message}")
        self.pass_name = pass_name


__all__ = [
    "DemystifyError",
    "ParseError",
    "ConfigError",
    "PipelineExecutionError",
]
