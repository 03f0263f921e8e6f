"""Pydantic models for document edits."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Edit(BaseModel):
    """Offsets [start, end) of the old flattened text replaced by inserted_length characters."""

    start: int = Field(ge=0)
    end: int = Field(ge=0)
    inserted_length: int = Field(ge=0)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_range(self) -> Edit:
        if self.end < self.start:
            raise ValueError(f"end ({self.end}) must not precede start ({self.start})")
        return self

    @property
    def delta(self) -> int:
        return self.inserted_length - (self.end - self.start)

    @classmethod
    def replacing(cls, start: int, end: int, text: str) -> Edit:
        return cls(start=start, end=end, inserted_length=len(text))


class AppliedEdit(Edit):
    """An edit produced by accepting a suggestion; carries the text to insert."""

    text: str
    suggestion_id: str

    @model_validator(mode="after")
    def _check_text(self) -> AppliedEdit:
        if len(self.text) != self.inserted_length:
            raise ValueError("inserted_length must equal len(text)")
        return self
