"""Pydantic models for writing suggestions."""

from __future__ import annotations

import uuid
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class Category(str, Enum):
    SPELLING = "spelling"
    GRAMMAR = "grammar"
    STYLE = "style"
    CLARITY = "clarity"
    TONE = "tone"


class EngineSuggestion(BaseModel):
    """One entry of analysis engine output, before it has been located in the text.

    Accepts both the engine's camelCase keys (``type``, ``originalText``,
    ``suggestion``) and the snake_case field names.
    """

    category: Category = Field(validation_alias=AliasChoices("category", "type"))
    original_text: str = Field(
        min_length=1,
        validation_alias=AliasChoices("original_text", "originalText"),
    )
    replacement_text: str = Field(
        validation_alias=AliasChoices("replacement_text", "replacementText", "suggestion"),
    )
    explanation: str

    model_config = ConfigDict(populate_by_name=True)


class Suggestion(BaseModel):
    """A located suggestion over the half-open range [start, end) of the flattened text."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    category: Category
    original_text: str = Field(min_length=1)
    replacement_text: str
    explanation: str
    start: int = Field(ge=0)
    end: int = Field(ge=0)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_range(self) -> Suggestion:
        if self.end < self.start:
            raise ValueError(f"end ({self.end}) must not precede start ({self.start})")
        if self.end - self.start != len(self.original_text):
            raise ValueError("range length must equal len(original_text)")
        return self

    @property
    def length(self) -> int:
        return self.end - self.start

    def overlaps(self, start: int, end: int) -> bool:
        return self.start < end and start < self.end

    def shifted(self, delta: int) -> Suggestion:
        # model_copy skips validation; delta is only applied to ranges after the edit
        return self.model_copy(update={"start": self.start + delta, "end": self.end + delta})

    @classmethod
    def located(cls, entry: EngineSuggestion, start: int) -> Suggestion:
        return cls(
            category=entry.category,
            original_text=entry.original_text,
            replacement_text=entry.replacement_text,
            explanation=entry.explanation,
            start=start,
            end=start + len(entry.original_text),
        )
