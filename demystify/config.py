"""Pipeline configuration and JSON config file loading."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Tuple

from .exceptions import ConfigError
from .passes.frequency import DEFAULT_STOPLIST

_SEPARATOR_RE = re.compile(r"[$_A-Za-z0-9]+")
_SOURCE_TYPES = ("script", "module")


@dataclass(frozen=True)
class PipelineConfig:
    """Knobs for one pipeline run.

    Attributes
    ----------
    mining_rounds:
        Number of print/mine/rename rounds run by default.
    until_converged:
        Keep mining until a round renames nothing, capped by ``max_rounds``.
    separator:
        Joins labels to the original name (``fooBar$a``); must only contain
        identifier characters so composed names stay valid.
    stoplist:
        Long identifiers never used as a context label.
    source_type:
        ``"script"`` or ``"module"`` parse goal.
    name_functions:
        Splice synthetic names into anonymous function heads.
    indent:
        Indentation unit of the printer.
    """

    mining_rounds: int = 3
    until_converged: bool = False
    max_rounds: int = 10
    separator: str = "$"
    stoplist: Tuple[str, ...] = DEFAULT_STOPLIST
    source_type: str = "script"
    name_functions: bool = True
    indent: str = "  "

    def __post_init__(self) -> None:
        for name in ("mining_rounds", "max_rounds"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigError(f"{name} must be a non-negative integer, got {value!r}")
        if self.max_rounds < 1:
            raise ConfigError("max_rounds must be at least 1")
        for name in ("until_converged", "name_functions"):
            if not isinstance(getattr(self, name), bool):
                raise ConfigError(f"{name} must be a boolean")
        if not isinstance(self.separator, str) or not _SEPARATOR_RE.fullmatch(self.separator):
            raise ConfigError(f"separator must consist of identifier characters, got {self.separator!r}")
        if self.source_type not in _SOURCE_TYPES:
            raise ConfigError(f"source_type must be one of {', '.join(_SOURCE_TYPES)}")
        if not isinstance(self.indent, str) or self.indent.strip():
            raise ConfigError("indent must be whitespace")
        if isinstance(self.stoplist, str) or not all(isinstance(x, str) for x in self.stoplist):
            raise ConfigError("stoplist must be a list of strings")
        object.__setattr__(self, "stoplist", tuple(self.stoplist))

    @property
    def round_limit(self) -> int:
        return self.max_rounds if self.until_converged else self.mining_rounds

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PipelineConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"unknown configuration keys: {', '.join(unknown)}")
        values = dict(data)
        if isinstance(values.get("stoplist"), list):
            values["stoplist"] = tuple(values["stoplist"])
        return cls(**values)

    def merged(self, **overrides: Any) -> "PipelineConfig":
        """Return a copy with every non-``None`` override applied."""

        changes = {key: value for key, value in overrides.items() if value is not None}
        if not changes:
            return self
        return replace(self, **changes)


def load_config(path: Path) -> PipelineConfig:
    """Load a :class:`PipelineConfig` from a JSON object file."""

    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except OSError as exc:
        raise ConfigError(f"cannot read config file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid JSON in config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError("config file must contain a JSON object")
    return PipelineConfig.from_mapping(data)


__all__ = ["PipelineConfig", "load_config"]
