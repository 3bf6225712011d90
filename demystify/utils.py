"""File and logging helpers shared by the CLI and the worker."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional


def setup_logging(level: int = logging.INFO) -> None:
    """Setup logging configuration"""
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    # Trace loggers may run at DEBUG; keep the console at the requested level.
    for handler in logging.getLogger().handlers:
        handler.setLevel(level)
    logging.debug("Logging setup complete.")


def create_output_path(input_path: str, suffix: str = "_demystified.js") -> str:
    """Return a deterministic output path next to ``input_path``."""

    path = Path(input_path)
    output_path = str(path.with_name(path.stem + suffix))
    logging.debug("Created output path '%s' from input '%s'", output_path, input_path)
    return output_path


def safe_read_file(filepath: str, encoding: str = 'utf-8') -> Optional[str]:
    """Safely read content from file with logging"""
    path = Path(filepath)
    if not path.exists() or not path.is_file():
        logging.warning(f"File does not exist or is not a file: '{filepath}'")
        return None
    try:
        with open(path, 'r', encoding=encoding) as f:
            content = f.read()
        logging.debug(f"Successfully read file '{filepath}' ({len(content)} chars)")
        return content
    except (OSError, UnicodeDecodeError) as e:
        logging.error(f"Failed to read file '{filepath}': {e}")
        return None


def safe_write_file(filepath: str, content: str, encoding: str = 'utf-8') -> bool:
    """Safely write content to file with logging"""
    path = Path(filepath)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = path.with_name(f".{path.name}.partial")
        with open(temp_path, 'w', encoding=encoding) as f:
            f.write(content)
        os.replace(temp_path, path)
        logging.debug(f"Successfully wrote to file '{filepath}'")
        return True
    except OSError as e:
        logging.error(f"Failed to write file '{filepath}': {e}")
        return False


__all__ = [
    "setup_logging",
    "create_output_path",
    "safe_read_file",
    "safe_write_file",
]
