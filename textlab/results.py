from __future__ import annotations

import socket
from typing import Any, Dict

from . import config


ERROR_MESSAGES: Dict[str, str] = {
    "not_found": "Requested tool was not found.",
    "invalid_input": "Provided text or tool steps are invalid.",
    "invalid_catalog": "Tool catalog could not be loaded.",
    "missing_api_key": "API key is missing. Set TEXTLAB_API_KEY or CLEANTEXTLAB_API_KEY.",
    "upstream_error": "CleanTextLab API request failed.",
    "timeout": "Operation timed out.",
    "internal_error": "Unexpected internal error.",
}


class ToolError(Exception):
    def __init__(self, code: str, message: str | None = None):
        self.code = code
        self.message = message or ERROR_MESSAGES.get(code, "Operation failed.")
        super().__init__(self.message)


def success(**data: Any) -> Dict[str, Any]:
    return {"ok": True, **data}


def error(code: str, message: str | None = None, **data: Any) -> Dict[str, Any]:
    return {
        "ok": False,
        "error": {
            "code": code,
            "message": message or ERROR_MESSAGES.get(code, "Operation failed."),
        },
        **data,
    }


def from_exception(exc: Exception, default_code: str = "internal_error", **data: Any) -> Dict[str, Any]:
    if isinstance(exc, ToolError):
        return error(exc.code, exc.message, **data)
    if isinstance(exc, (TimeoutError, socket.timeout)):
        return error("timeout", str(exc) or None, **data)
    return error(default_code, str(exc) or None, **data)


def check_text_size(text: str) -> None:
    if len(text) > config.TEXTLAB_MAX_TEXT_CHARS:
        raise ToolError("invalid_input", f"Text exceeds {config.TEXTLAB_MAX_TEXT_CHARS} characters.")
