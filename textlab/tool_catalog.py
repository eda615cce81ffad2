from __future__ import annotations

from functools import lru_cache
import json
from pathlib import Path
from typing import Any, Iterable

from pydantic import ValidationError

from . import config
from .models import Tool
from .results import ToolError

TOOL_CATALOG: dict[str, dict[str, Any]] = {
    "line-break-remover": {
        "name": "Line Break Remover",
        "category": "Text Cleaning",
        "api_step": "remove-line-breaks",
        "description": "Join wrapped lines into a single paragraph.",
        "placeholder": "This line was\nwrapped by an\nemail client.",
    },
    "sort-remove-duplicates": {
        "name": "Sort & Remove Duplicates",
        "category": "Text Cleaning",
        "api_step": "sort-remove-duplicates",
        "description": "Sort lines alphabetically and drop repeated entries.",
        "placeholder": "banana\napple\nbanana\ncherry",
    },
    "accent-remover": {
        "name": "Accent Remover",
        "category": "Text Cleaning",
        "api_step": "remove-accents",
        "description": "Strip diacritics and replace accented letters with plain ASCII.",
        "placeholder": "Crème brûlée à la française",
    },
    "email-extractor": {
        "name": "Email Extractor",
        "category": "Text Cleaning",
        "api_step": "extract-emails",
        "description": "Pull every email address out of free-form text.",
        "placeholder": "Contact alice@example.com or bob@example.org for details.",
    },
    "whitespace-cleaner": {
        "name": "Whitespace Cleaner",
        "category": "Text Cleaning",
        "api_step": "clean-whitespace",
        "description": "Collapse repeated spaces and trim every line.",
        "placeholder": "  too    many   spaces  ",
    },
    "case-converter": {
        "name": "Case Converter",
        "category": "Text Cleaning",
        "api_step": "convert-case",
        "description": "Convert text to upper, lower, title or sentence case.",
        "placeholder": "the quick brown fox",
    },
    "json-formatter": {
        "name": "JSON Formatter",
        "category": "Developer Tools",
        "api_step": "format-json",
        "description": "Pretty-print and validate JSON documents.",
        "placeholder": '{"name":"CleanTextLab","tools":30}',
    },
    "csv-json-converter": {
        "name": "CSV ↔ JSON Converter",
        "category": "Developer Tools",
        "api_step": "csv-to-json",
        "description": "Convert CSV rows to a JSON array of objects and back.",
        "placeholder": "name,email\nAlice,alice@example.com",
    },
    "sql-formatter": {
        "name": "SQL Formatter",
        "category": "Developer Tools",
        "api_step": "format-sql",
        "description": "Indent and uppercase keywords in SQL queries.",
        "placeholder": "select id, name from users where active = 1",
    },
    "regex-tester": {
        "name": "Regex Tester",
        "category": "Developer Tools",
        "api_step": "test-regex",
        "description": "Run a regular expression against sample text.",
        "placeholder": "/\\d{3}-\\d{4}/\n555-1234",
    },
    "ascii-tree-generator": {
        "name": "ASCII Tree Generator",
        "category": "Developer Tools",
        "api_step": "ascii-tree",
        "description": "Render a list of file paths as a directory tree.",
        "placeholder": "src/app.py\nsrc/utils/io.py\nREADME.md",
    },
    "sanitize-url": {
        "name": "URL Sanitizer",
        "category": "Web",
        "api_step": "sanitize-url",
        "description": "Remove tracking parameters such as utm_* and fbclid from URLs.",
        "placeholder": "https://example.com/page?utm_source=news&id=7",
    },
    "url-encode-decode": {
        "name": "URL Encoder/Decoder",
        "category": "Encoding",
        "api_step": "url-decode",
        "description": "Percent-encode or decode URL components.",
        "placeholder": "hello%20world%21",
    },
    "base64-encode-decode": {
        "name": "Base64 Encoder/Decoder",
        "category": "Encoding",
        "api_step": "base64-decode",
        "description": "Encode text to Base64 or decode it back.",
        "placeholder": "SGVsbG8sIENsZWFuVGV4dExhYiE=",
    },
    "phone-number-formatter": {
        "name": "Phone Number Formatter",
        "category": "Numbers",
        "api_step": "format-phone-numbers",
        "description": "Normalize phone numbers to a consistent international format.",
        "placeholder": "(555) 123-4567\n+1 555.987.6543",
    },
    "sms-length": {
        "name": "SMS Length Counter",
        "category": "Numbers",
        "api_step": "sms-length",
        "description": "Count characters and SMS segments for a message.",
        "placeholder": "Your code is 123456.",
    },
    "unix-timestamp": {
        "name": "Unix Timestamp Converter",
        "category": "Numbers",
        "api_step": "unix-timestamp",
        "description": "Convert between Unix timestamps and readable dates.",
        "placeholder": "1700000000",
    },
}


class ToolRegistry:
    """Read-only catalog of tools, keyed by tool id."""

    def __init__(self, tools: Iterable[Tool]) -> None:
        by_id: dict[str, Tool] = {}
        for tool in tools:
            if tool.id in by_id:
                raise ValueError(f"duplicate tool id: {tool.id}")
            by_id[tool.id] = tool
        self._tools = by_id

    def get(self, tool_id: str | None) -> Tool | None:
        if tool_id is None:
            return None
        return self._tools.get(tool_id)

    def all(self) -> list[Tool]:
        return list(self._tools.values())

    def categories(self) -> list[str]:
        """Distinct categories in the order they first appear in the catalog."""
        return list(dict.fromkeys(tool.category for tool in self._tools.values()))

    def by_category(self, category: str) -> list[Tool]:
        return [tool for tool in self._tools.values() if tool.category == category]

    def __contains__(self, tool_id: object) -> bool:
        return tool_id in self._tools

    def __len__(self) -> int:
        return len(self._tools)


def tools_from_catalog(catalog: dict[str, dict[str, Any]]) -> list[Tool]:
    return [Tool(id=tool_id, **entry) for tool_id, entry in catalog.items()]


def load_registry(path: str | Path | None = None) -> ToolRegistry:
    """Build a registry from a JSON tool list, or from the built-in catalog."""
    source = path or config.TEXTLAB_TOOLS_FILE
    if source is None:
        return ToolRegistry(tools_from_catalog(TOOL_CATALOG))

    try:
        with Path(source).open("r", encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, list):
            raise ToolError("invalid_catalog", f"Tool catalog {source} must contain a JSON list.")
        return ToolRegistry(Tool.model_validate(item) for item in raw)
    except ToolError:
        raise
    except (OSError, ValueError, ValidationError) as exc:
        raise ToolError("invalid_catalog", f"Could not load tool catalog {source}: {exc}") from exc


@lru_cache(maxsize=1)
def default_registry() -> ToolRegistry:
    """Process-wide registry, loaded on first use."""
    return load_registry()
