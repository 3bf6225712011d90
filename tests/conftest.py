"""Test configuration ensuring the project source tree is importable."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent

root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)
else:
    idx = sys.path.index(root_str)
    if idx != 0:
        sys.path.insert(0, sys.path.pop(idx))

# Import the project package eagerly so subsequent imports reuse it
importlib.import_module("demystify")

from demystify import js_ast  # noqa: E402


@pytest.fixture
def parse():
    """Parse a script into an ESTree dictionary."""

    return js_ast.parse


@pytest.fixture
def write_js(tmp_path):
    def _write(source: str, name: str = "input.js") -> Path:
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return path

    return _write
