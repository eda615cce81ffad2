from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Tool(BaseModel):
    """A CleanTextLab tool as listed in the catalog."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: str
    api_step: str = ""
    description: str = ""
    placeholder: str = ""


class Suggestion(BaseModel):
    """A tool worth switching to for the current text.

    ``id`` references ``Tool.id``; ``confidence`` is a fixed weight in
    [0, 1] assigned by the rule that produced the suggestion.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    reason: str
    confidence: float = Field(ge=0.0, le=1.0)


class SuggestRequest(BaseModel):
    text: str
    current_tool_id: str | None = None


class RunRequest(BaseModel):
    input: str
    steps: list[str] | None = None
    tool_id: str | None = None
