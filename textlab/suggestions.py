"""Turn detected content types into a short, ranked list of tool suggestions."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .detectors import DETECTORS, trim
from .models import Suggestion
from .tool_catalog import ToolRegistry, default_registry

MIN_INPUT_CHARS = 4
MAX_SUGGESTIONS = 3


@dataclass(frozen=True)
class SuggestionRule:
    detector: str
    tool_id: str
    reason: str
    confidence: float
    fallback_label: str


SUGGESTION_RULES: tuple[SuggestionRule, ...] = (
    SuggestionRule("json", "json-formatter", "Looks like JSON", 0.95, "JSON Formatter"),
    SuggestionRule("csv", "sort-remove-duplicates", "Looks like CSV/rows", 0.65, "Sort & Deduplicate"),
    SuggestionRule("csv", "csv-json-converter", "Convert CSV to JSON", 0.6, "CSV ↔ JSON"),
    SuggestionRule("email_list", "email-extractor", "Looks like email list", 0.9, "Email Extractor"),
    SuggestionRule("email_list", "sort-remove-duplicates", "Clean up list", 0.6, "Sort & Dedupe"),
    SuggestionRule("phone_list", "phone-number-formatter", "Looks like phone numbers", 0.8, "Phone Formatter"),
    SuggestionRule("url", "sanitize-url", "Clean tracking params", 0.8, "Sanitize URL"),
    SuggestionRule("url", "url-encode-decode", "Decode URL", 0.7, "URL Decoder"),
    SuggestionRule("url_encoded", "url-encode-decode", "Encoded chars (%)", 0.9, "URL Decoder"),
    SuggestionRule("base64", "base64-encode-decode", "Looks like Base64", 0.8, "Base64 Decoder"),
    SuggestionRule("accents", "accent-remover", "Has accents/diacritics", 0.7, "Accent Remover"),
    SuggestionRule("paths", "ascii-tree-generator", "Looks like file paths", 0.8, "ASCII Tree Generator"),
)


def _label(rule: SuggestionRule, registry: ToolRegistry) -> str:
    tool = registry.get(rule.tool_id)
    return tool.name if tool is not None else rule.fallback_label


def generate_candidates(text: str, registry: ToolRegistry) -> list[Suggestion]:
    """Run every detector once and emit the rules of the ones that fire.

    Candidates come out in rule-table order and may repeat a tool id.
    """
    if len(trim(text)) < MIN_INPUT_CHARS:
        return []

    fired = {name for name, detector in DETECTORS if detector(text)}
    return [
        Suggestion(
            id=rule.tool_id,
            label=_label(rule, registry),
            reason=rule.reason,
            confidence=rule.confidence,
        )
        for rule in SUGGESTION_RULES
        if rule.detector in fired
    ]


def rank_suggestions(
    candidates: Iterable[Suggestion],
    current_tool_id: str | None = None,
    limit: int = MAX_SUGGESTIONS,
) -> list[Suggestion]:
    """Drop the active tool, keep the best candidate per id, sort and truncate.

    Equal confidences keep the order in which their ids first appeared.
    """
    best: dict[str, Suggestion] = {}
    first_seen: dict[str, int] = {}
    for suggestion in candidates:
        if suggestion.id == current_tool_id:
            continue
        first_seen.setdefault(suggestion.id, len(first_seen))
        kept = best.get(suggestion.id)
        if kept is None or suggestion.confidence > kept.confidence:
            best[suggestion.id] = suggestion

    ranked = sorted(best.values(), key=lambda s: (-s.confidence, first_seen[s.id]))
    return ranked[: max(limit, 0)]


class SuggestionEngine:
    """Suggestion lookup bound to one tool registry."""

    def __init__(self, registry: ToolRegistry) -> None:
        self.registry = registry

    def detect(self, text: str | None, current_tool_id: str | None = None) -> list[Suggestion]:
        candidates = generate_candidates(text or "", self.registry)
        return rank_suggestions(candidates, current_tool_id)


def detect_suggestions(
    text: str | None,
    current_tool_id: str | None = None,
    *,
    registry: ToolRegistry | None = None,
) -> list[Suggestion]:
    """Suggest up to three tools for ``text``, excluding ``current_tool_id``."""
    engine = SuggestionEngine(registry if registry is not None else default_registry())
    return engine.detect(text, current_tool_id)
