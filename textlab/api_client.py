"""Client for the CleanTextLab ``/run`` endpoint."""
from __future__ import annotations

import json
import logging
import socket
from typing import Any, Dict, Optional, Sequence
from urllib import error, request

from . import config
from .results import ToolError, success

logger = logging.getLogger(__name__)


def _upstream_message(exc: error.HTTPError) -> str:
    fallback = f"API Error: {exc.code}"
    try:
        body = json.loads(exc.read().decode("utf-8"))
    except (OSError, ValueError):
        return fallback
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return fallback


def run_tool(
    input_text: str,
    steps: Sequence[str],
    *,
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    timeout_s: Optional[float] = None,
) -> Dict[str, Any]:
    """Run ``input_text`` through the given tool steps on the CleanTextLab API.

    Returns the decoded response object (``result`` plus optional ``error``
    and ``metadata``). Raises ``ToolError`` for every failure.
    """
    key = (api_key if api_key is not None else config.TEXTLAB_API_KEY).strip()
    if not key:
        raise ToolError("missing_api_key")
    if not input_text or not input_text.strip():
        raise ToolError("invalid_input", "Please enter some text to process.")
    step_list = [str(step) for step in steps if step]
    if not step_list:
        raise ToolError("invalid_input", "At least one tool step is required.")

    url = f"{(base_url or config.TEXTLAB_API_BASE).rstrip('/')}/run"
    data = json.dumps({"input": input_text, "steps": step_list}, ensure_ascii=True).encode("utf-8")
    headers = {"Content-Type": "application/json", "x-api-key": key}
    req = request.Request(url, data=data, headers=headers, method="POST")
    timeout = timeout_s if timeout_s is not None else config.TEXTLAB_API_TIMEOUT_S

    try:
        with request.urlopen(req, timeout=timeout) as resp:
            raw = resp.read().decode("utf-8")
    except error.HTTPError as exc:
        message = _upstream_message(exc)
        logger.warning("CleanTextLab API returned %s for steps %s", exc.code, step_list)
        raise ToolError("upstream_error", message) from exc
    except (socket.timeout, TimeoutError) as exc:
        raise ToolError("timeout", f"CleanTextLab API did not answer within {timeout}s.") from exc
    except error.URLError as exc:
        if isinstance(exc.reason, (socket.timeout, TimeoutError)):
            raise ToolError("timeout", f"CleanTextLab API did not answer within {timeout}s.") from exc
        logger.warning("CleanTextLab API unreachable: %s", exc.reason)
        raise ToolError("upstream_error", f"Network error occurred: {exc.reason}") from exc

    try:
        parsed = json.loads(raw)
    except ValueError as exc:
        raise ToolError("upstream_error", "CleanTextLab API returned invalid JSON.") from exc
    if not isinstance(parsed, dict):
        raise ToolError("upstream_error", "CleanTextLab API returned an unexpected response.")
    return parsed


def run_request(registry, input_text: str, *, steps: Optional[Sequence[str]] = None, tool_id: Optional[str] = None, runner=run_tool) -> Dict[str, Any]:
    """Run text through explicit ``steps``, or through the API step of ``tool_id``."""
    if not steps:
        tool = registry.get(tool_id)
        if tool is None:
            raise ToolError("not_found", f"Unknown tool: {tool_id}")
        steps = [tool.api_step]
    response = runner(input_text, steps)
    if response.get("error"):
        raise ToolError("upstream_error", str(response["error"]))
    return success(steps=list(steps), result=response.get("result", ""), metadata=response.get("metadata") or {})
