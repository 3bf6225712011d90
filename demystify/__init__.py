"""Contextual identifier renaming for minified JavaScript."""

from __future__ import annotations

from .config import PipelineConfig, load_config
from .exceptions import ConfigError, DemystifyError, ParseError, PipelineExecutionError
from .pipeline import demystify, run
from .report import DemystifyReport, MiningRound

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "demystify",
    "run",
    "PipelineConfig",
    "load_config",
    "DemystifyReport",
    "MiningRound",
    "DemystifyError",
    "ParseError",
    "ConfigError",
    "PipelineExecutionError",
]
