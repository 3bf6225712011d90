#!/usr/bin/env python3
"""Compat shim that forwards to :mod:`demystify.main`.

Lets a source checkout run ``python main.py input.js`` without installing the
``demystify`` console script; both entry points share one code path.
"""

from __future__ import annotations

import sys

from demystify import main as _cli


def main(argv: list[str] | None = None) -> int:
    """Entry point for ``python main.py``.

    Parameters
    ----------
    argv:
        Optional argument vector.  When ``None`` the wrapper forwards the
        current ``sys.argv[1:]`` to :func:`demystify.main.main`.
    """

    return _cli.main(sys.argv[1:] if argv is None else argv)


if __name__ == "__main__":  # pragma: no cover - thin CLI shim
    raise SystemExit(main())
