"""Tests for the editor session that ties document, store, renderer and scheduler together."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from paperwise.config import AppConfig, SchedulerConfig
from paperwise.document.model import RichDocument
from paperwise.engine.scheduler import SchedulerState
from paperwise.engine.session import EditorSession
from paperwise.models.analysis import AnalysisStatus
from paperwise.models.position import NativePosition

TEXT = "Teh cat sat on teh mat.\nIt were a good day."


@pytest.fixture
def fast_config() -> AppConfig:
    return AppConfig(scheduler=SchedulerConfig(debounce_seconds=0.01, max_wait_seconds=0.02))


@pytest.fixture
def engine(engine_entry) -> AsyncMock:
    return AsyncMock(
        return_value=[
            engine_entry("Teh", "The", "spelling"),
            engine_entry("teh", "the", "spelling"),
            engine_entry("It were", "It was", "grammar"),
        ]
    )


@pytest.fixture
async def session(engine, fast_config) -> EditorSession:
    session = EditorSession(RichDocument.from_text(TEXT), engine, config=fast_config)
    session.request_analysis()
    await session.scheduler.wait_idle()
    return session


def _assert_invariant(session: EditorSession) -> None:
    text = session.text
    for s in session.store.list():
        assert text[s.start : s.end] == s.original_text


class TestAnalysis:
    async def test_request_analysis_populates_store(self, session, engine):
        engine.assert_awaited_once()
        assert len(session.store) == 3
        assert session.status == AnalysisStatus.COMPLETE
        _assert_invariant(session)

    async def test_on_status_forwarded(self, engine, fast_config):
        statuses = []
        session = EditorSession(
            RichDocument.from_text(TEXT), engine, config=fast_config, on_status=statuses.append
        )
        session.request_analysis()
        await session.scheduler.wait_idle()
        assert statuses == [AnalysisStatus.ANALYZING, AnalysisStatus.COMPLETE]


class TestEdit:
    async def test_edit_reconciles_before_scheduling(self, session, engine):
        # delete "cat " so later suggestions shift left by 4
        session.edit(4, 8, "")
        assert session.text.startswith("Teh sat on teh mat.")
        assert len(session.store) == 3
        _assert_invariant(session)
        assert session.scheduler.state == SchedulerState.PENDING

    async def test_edit_inside_suggestion_drops_it(self, session):
        session.edit(1, 2, "x")
        assert [s.original_text for s in session.store.list()] == ["teh", "It were"]
        _assert_invariant(session)

    async def test_edit_inside_separator_leaves_state_untouched(self, engine, fast_config):
        text = TEXT.replace("\n", "\n\n")
        session = EditorSession(
            RichDocument.from_text(text, block_separator="\n\n"), engine, config=fast_config
        )
        session.request_analysis()
        await session.scheduler.wait_idle()
        before = session.store.list()
        generation = session.scheduler.generation

        with pytest.raises(ValueError, match="block separator"):
            session.edit(24, 24, "x")

        assert session.text == text
        assert session.store.list() == before
        assert session.scheduler.generation == generation
        _assert_invariant(session)

        session.edit(0, 0, "Oh, ")
        assert [s.start for s in session.store.list()] == [4, 19, 29]
        _assert_invariant(session)


class TestAcceptDismiss:
    async def test_accept_applies_replacement(self, session):
        first = session.store.list()[0]
        applied = session.accept(first.id)

        assert applied.suggestion_id == first.id
        assert session.text.startswith("The cat sat")
        assert first.id not in session.store
        _assert_invariant(session)

    async def test_accept_does_not_trigger_analysis(self, session, engine):
        generation = session.scheduler.generation
        session.accept(session.store.list()[0].id)

        assert session.scheduler.generation == generation + 1
        assert session.scheduler.state == SchedulerState.IDLE
        engine.assert_awaited_once()

    async def test_accept_unknown_returns_none(self, session):
        assert session.accept("missing") is None
        assert len(session.store) == 3

    async def test_accept_all(self, session):
        applied = session.accept_all()
        assert len(applied) == 3
        assert session.text == "The cat sat on the mat.\nIt was a good day."
        assert len(session.store) == 0

    async def test_accept_crossing_blocks_is_dismissed(self, fast_config, engine_entry):
        engine = AsyncMock(return_value=[engine_entry("mat.\nIt", "mat. It")])
        session = EditorSession(RichDocument.from_text(TEXT), engine, config=fast_config)
        session.request_analysis()
        await session.scheduler.wait_idle()
        (s,) = session.store.list()

        assert session.accept(s.id) is None
        assert session.text == TEXT
        assert len(session.store) == 0

    async def test_dismiss(self, session):
        s = session.store.list()[1]
        assert session.dismiss(s.id) is True
        assert session.dismiss(s.id) is False
        assert session.text == TEXT

    async def test_dismiss_many_clears_selection(self, session):
        ids = [s.id for s in session.store.list()]
        session.selected_id = ids[0]
        assert session.dismiss_many(ids) == 3
        assert session.selected_id is None


class TestRendering:
    async def test_highlights_follow_edits(self, session):
        session.edit(0, 0, "Oh, ")
        highlights = session.highlights()
        assert [h.flat_start for h in highlights] == [4, 19, 28]
        assert highlights[2].start == NativePosition((1, 0), 0)

    async def test_click_selects_and_dispatches(self, engine, fast_config):
        on_activated = MagicMock()
        session = EditorSession(
            RichDocument.from_text(TEXT), engine, config=fast_config, on_activated=on_activated
        )
        session.request_analysis()
        await session.scheduler.wait_idle()
        target = session.store.list()[2]

        assert session.click(NativePosition((1, 0), 3)) == target.id
        on_activated.assert_called_once_with(target.id)
        assert session.selected_id == target.id
        selected = [h for h in session.highlights() if "suggestion-selected" in h.css_class]
        assert [h.suggestion_id for h in selected] == [target.id]

    async def test_hover_previews(self, engine, fast_config):
        on_preview = MagicMock()
        session = EditorSession(
            RichDocument.from_text(TEXT), engine, config=fast_config, on_preview=on_preview
        )
        session.request_analysis()
        await session.scheduler.wait_idle()

        session.hover(NativePosition((0, 0), 1))
        session.hover(None)

        first = session.store.list()[0]
        assert [c.args for c in on_preview.call_args_list] == [(first.id,), (None,)]
