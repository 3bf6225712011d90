"""Request/response wrapper around the pipeline.

A request is a mapping ``{"code": str, "id": any}``.  The reply is
``{"success": True, "result": str, "id": id}`` or, when anything goes wrong,
``{"success": False, "error": str, "id": id}``.  :func:`serve` speaks the same
protocol over JSON lines so the pipeline can run as a child process.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional, TextIO

from .config import PipelineConfig
from .pipeline import demystify

LOG = logging.getLogger(__name__)


def handle_request(message: Any, config: Optional[PipelineConfig] = None) -> Dict[str, Any]:
    """Run one request through the pipeline and return the reply mapping."""

    request_id = message.get("id") if isinstance(message, Mapping) else None
    try:
        if not isinstance(message, Mapping):
            raise ValueError("request must be a JSON object")
        code = message.get("code")
        if not isinstance(code, str):
            raise ValueError("request field 'code' must be a string")
        result = demystify(code, config)
    except Exception as exc:
        LOG.debug("request %r failed", request_id, exc_info=True)
        return {"success": False, "error": str(exc) or type(exc).__name__, "id": request_id}
    return {"success": True, "result": result, "id": request_id}


def serve(stdin: TextIO, stdout: TextIO, config: Optional[PipelineConfig] = None) -> int:
    """Answer JSON-line requests from ``stdin`` until EOF; return the count."""

    handled = 0
    for line in stdin:
        line = line.strip()
        if not line:
            continue
        try:
            message = json.loads(line)
        except json.JSONDecodeError as exc:
            reply: Dict[str, Any] = {"success": False, "error": f"invalid request: {exc}", "id": None}
        else:
            reply = handle_request(message, config)
        stdout.write(json.dumps(reply, ensure_ascii=False) + "\n")
        stdout.flush()
        handled += 1
    LOG.info("worker handled %d requests", handled)
    return handled


__all__ = ["handle_request", "serve"]
