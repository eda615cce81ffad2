from __future__ import annotations

from collections import Counter, deque
from copy import deepcopy
from datetime import datetime, timezone
import re
import threading
from typing import Any, Deque, Dict, Iterable

from .models import Suggestion

_HISTORY_MAX = 500
_TEXT_PREVIEW_CHARS = 200

_LOCK = threading.Lock()
_CALL_HISTORY: Deque[Dict[str, Any]] = deque(maxlen=_HISTORY_MAX)
_ERROR_COUNTERS: Counter[str] = Counter()
_SUGGESTION_COUNTERS: Counter[str] = Counter()

_SECRET_PATTERNS = (
    re.compile(r"(token|password|secret|api[_-]?key)\s*[=:]\s*[^\s]+", re.IGNORECASE),
    re.compile(r"x-api-key\s*[=:]\s*[^\s]+", re.IGNORECASE),
    re.compile(r"bearer\s+[a-z0-9._-]+", re.IGNORECASE),
)
_SECRET_KEYS = {"api_key", "x-api-key", "authorization"}


def redact_text(value: str, max_chars: int = 4000) -> str:
    if not value:
        return value
    text = value
    for pattern in _SECRET_PATTERNS:
        text = pattern.sub("[REDACTED]", text)
    if len(text) > max_chars:
        return f"{text[:max_chars]}...[TRUNCATED]"
    return text


def _sanitize_value(value: Any, key: str | None = None) -> Any:
    if isinstance(value, dict):
        return {k: _sanitize_value(v, k) for k, v in value.items()}
    if isinstance(value, list):
        return [_sanitize_value(v, key) for v in value]
    if isinstance(value, str):
        if key is not None and key.lower() in _SECRET_KEYS:
            return "[REDACTED]"
        # user text can be huge; keep a preview only
        if key in {"text", "input", "result"}:
            return redact_text(value, max_chars=_TEXT_PREVIEW_CHARS)
        return redact_text(value, max_chars=1500)
    return value


def _error_key(response: Dict[str, Any]) -> str:
    err = response.get("error") or response.get("detail")
    if isinstance(err, dict):
        return str(err.get("code") or "unknown_error")
    return str(err or "unknown_error")


def record_call(name: str, method: str, path: str, payload: Dict[str, Any] | None, response: Dict[str, Any]) -> None:
    now = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    ok = bool(response.get("ok", True))

    entry = {
        "timestamp": now,
        "name": name,
        "method": method,
        "path": path,
        "ok": ok,
        "request": _sanitize_value(payload or {}),
        "response": _sanitize_value(response),
    }

    with _LOCK:
        _CALL_HISTORY.appendleft(entry)
        if not ok:
            _ERROR_COUNTERS[_error_key(response)] += 1


def record_suggestions(suggestions: Iterable[Suggestion]) -> None:
    with _LOCK:
        _SUGGESTION_COUNTERS.update(s.id for s in suggestions)


def get_call_history(offset: int = 0, limit: int = 20) -> Dict[str, Any]:
    safe_offset = max(offset, 0)
    safe_limit = max(1, min(limit, 100))
    with _LOCK:
        items = list(_CALL_HISTORY)
    total = len(items)
    sliced = items[safe_offset : safe_offset + safe_limit]
    return {"total": total, "offset": safe_offset, "limit": safe_limit, "items": deepcopy(sliced)}


def get_error_counters() -> Dict[str, int]:
    with _LOCK:
        return dict(_ERROR_COUNTERS)


def get_suggestion_counters() -> Dict[str, int]:
    with _LOCK:
        return dict(_SUGGESTION_COUNTERS)


def reset() -> None:
    with _LOCK:
        _CALL_HISTORY.clear()
        _ERROR_COUNTERS.clear()
        _SUGGESTION_COUNTERS.clear()
