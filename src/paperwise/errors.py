"""Error types raised by the reconciliation engine."""

from __future__ import annotations


class PaperwiseError(Exception):
    """Base class for all paperwise errors."""


class SuggestionNotFound(PaperwiseError, KeyError):
    """No pending suggestion has the requested id."""

    def __init__(self, suggestion_id: str):
        super().__init__(suggestion_id)
        self.suggestion_id = suggestion_id

    def __str__(self) -> str:
        return f"Suggestion not found: {self.suggestion_id}"


class OffsetError(PaperwiseError, ValueError):
    """Base for flat-offset / native-position conversion failures."""


class OutOfRange(OffsetError):
    """A flat offset lies outside the flattened document text."""

    def __init__(self, offset: int, length: int):
        super().__init__(f"Offset {offset} outside flattened text of length {length}")
        self.offset = offset
        self.length = length


class InvalidPosition(OffsetError):
    """A native position does not address text content."""


class AnalysisFailed(PaperwiseError):
    """The external analysis call failed or returned unusable output."""
