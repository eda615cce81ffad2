"""Content-shape heuristics used to suggest tools.

Every detector takes the raw text and returns a bool. None of them raise:
a failed parse is a negative answer, not an error.
"""
from __future__ import annotations

import json
import re
from typing import Callable

_LINE_SPLIT = re.compile(r"\r?\n")
_URL = re.compile(r"(https?://|www\.)\S+", re.IGNORECASE)
_EMAIL = re.compile(r"\S+@\S+\.\S+")
_PHONE = re.compile(r"[0-9][0-9\-+().\s]{6,}")
_PERCENT_ESCAPE = re.compile(r"%[0-9A-Fa-f]{2}")
_BASE64 = re.compile(r"(?:[A-Za-z0-9+/]{4})*(?:[A-Za-z0-9+/]{2}==|[A-Za-z0-9+/]{3}=)?")
# Whitespace and line terminators stripped by JavaScript String.prototype.trim, BOM included
_TRIM_CHARS = "\t\n\v\f\r \u00a0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000\ufeff"
_EDGE_WHITESPACE = re.compile(f"\\A[{_TRIM_CHARS}]+|[{_TRIM_CHARS}]+\\Z")
_WHITESPACE = re.compile(f"[{_TRIM_CHARS}]+")
_NON_ASCII = re.compile(r"[^\x00-\x7f]")
_PATH_SEPARATOR = re.compile(r"[\\/]")

BASE64_MIN_CHARS = 16


def trim(text: str) -> str:
    return _EDGE_WHITESPACE.sub("", text)


def _lines(text: str) -> list[str]:
    return _LINE_SPLIT.split(trim(text))


def _non_empty_lines(text: str) -> list[str]:
    return [line for line in _lines(text) if line]


def _majority(matches: int, total: int) -> bool:
    # at least half of the lines, and never fewer than two
    return matches >= max(2, total // 2)


def _reject_constant(token: str):
    raise ValueError(f"non-standard JSON constant {token}")


def looks_like_json(text: str) -> bool:
    trimmed = trim(text)
    if not trimmed.startswith(("{", "[")):
        return False
    try:
        # integers stay strings; the int conversion digit limit would reject valid JSON
        json.loads(trimmed, parse_constant=_reject_constant, parse_int=str)
    except (ValueError, RecursionError):
        return False
    return True


def looks_like_csv(text: str) -> bool:
    lines = _lines(text)
    if len(lines) < 2:
        return False
    comma_lines = sum(1 for line in lines if "," in line)
    return _majority(comma_lines, len(lines))


def looks_like_email_list(text: str) -> bool:
    lines = _non_empty_lines(text)
    if len(lines) < 2:
        return False
    emailish = sum(1 for line in lines if _EMAIL.search(line))
    return _majority(emailish, len(lines))


def looks_like_phone_list(text: str) -> bool:
    lines = _non_empty_lines(text)
    if len(lines) < 2:
        return False
    phoneish = sum(1 for line in lines if _PHONE.search(line))
    return _majority(phoneish, len(lines))


def looks_like_url(text: str) -> bool:
    return _URL.search(text) is not None


def looks_like_url_encoded(text: str) -> bool:
    return len(_PERCENT_ESCAPE.findall(text)) > 1


def looks_like_base64(text: str) -> bool:
    trimmed = trim(text)
    if len(trimmed) < BASE64_MIN_CHARS:
        return False
    return _BASE64.fullmatch(_WHITESPACE.sub("", trimmed)) is not None


def has_accents(text: str) -> bool:
    return _NON_ASCII.search(text) is not None


def looks_like_paths(text: str) -> bool:
    lines = _non_empty_lines(text)
    if len(lines) < 2:
        return False
    pathish = sum(
        1 for line in lines if _PATH_SEPARATOR.search(line) and not line.startswith("http")
    )
    return _majority(pathish, len(lines))


# Evaluation order is fixed; suggestion rules refer to detectors by these names.
DETECTORS: tuple[tuple[str, Callable[[str], bool]], ...] = (
    ("json", looks_like_json),
    ("csv", looks_like_csv),
    ("email_list", looks_like_email_list),
    ("phone_list", looks_like_phone_list),
    ("url", looks_like_url),
    ("url_encoded", looks_like_url_encoded),
    ("base64", looks_like_base64),
    ("accents", has_accents),
    ("paths", looks_like_paths),
)


def detect_content_types(text: str) -> list[str]:
    """Names of every detector that fires on ``text``, in evaluation order."""
    return [name for name, detector in DETECTORS if detector(text)]
