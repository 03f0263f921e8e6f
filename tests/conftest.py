"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from paperwise.clients.llm_client import LLMClient, LLMResponse
from paperwise.document.model import DocNode, RichDocument
from paperwise.engine.store import SuggestionStore
from paperwise.models.suggestion import Category, Suggestion


def _make_suggestion(
    text: str,
    original: str,
    replacement: str = "",
    *,
    occurrence: int = 0,
    category: Category = Category.GRAMMAR,
    explanation: str = "test",
) -> Suggestion:
    """Locate the n-th occurrence of ``original`` in ``text`` and build a suggestion for it."""
    start = -1
    for _ in range(occurrence + 1):
        start = text.index(original, start + 1)
    return Suggestion(
        category=category,
        original_text=original,
        replacement_text=replacement,
        explanation=explanation,
        start=start,
        end=start + len(original),
    )


def _entry(original: str, replacement: str = "fixed", category: str = "grammar", explanation: str = "test") -> dict:
    """Engine output entry in the wire shape the analysis engine returns."""
    return {
        "type": category,
        "originalText": original,
        "suggestion": replacement,
        "explanation": explanation,
    }


@pytest.fixture
def sample_text() -> str:
    return "Their going to the park tomorow. The weather is very very nice."


@pytest.fixture
def sample_prosemirror() -> dict:
    """A TipTap ``editor.getJSON()`` document: heading, formatted paragraph, empty paragraph, rule, list."""
    return {
        "type": "doc",
        "content": [
            {"type": "heading", "attrs": {"level": 1}, "content": [{"type": "text", "text": "Title"}]},
            {
                "type": "paragraph",
                "content": [
                    {"type": "text", "text": "Hello "},
                    {"type": "text", "text": "bold", "marks": [{"type": "bold"}]},
                    {"type": "text", "text": " world"},
                ],
            },
            {"type": "paragraph"},
            {"type": "horizontalRule"},
            {
                "type": "bulletList",
                "content": [
                    {
                        "type": "listItem",
                        "content": [{"type": "paragraph", "content": [{"type": "text", "text": "item one"}]}],
                    },
                ],
            },
        ],
    }


@pytest.fixture
def rich_document(sample_prosemirror) -> RichDocument:
    # flattened: "Title\nHello bold world\n\nitem one"
    return RichDocument.from_prosemirror(sample_prosemirror)


@pytest.fixture
def simple_root() -> DocNode:
    return DocNode(
        "doc",
        children=[
            DocNode("paragraph", children=[DocNode("text", text="ab")]),
            DocNode("paragraph", children=[DocNode("text", text="cd")]),
        ],
    )


@pytest.fixture
def store() -> SuggestionStore:
    return SuggestionStore()


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Create a mock LLM client."""
    client = AsyncMock(spec=LLMClient)
    client.generate = AsyncMock(
        return_value=LLMResponse(text="[]", input_tokens=100, output_tokens=50)
    )
    client.generate_json = AsyncMock(return_value=[])
    return client


@pytest.fixture
def make_suggestion():
    return _make_suggestion


@pytest.fixture
def engine_entry():
    return _entry
