import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from conftest import make_snippet
from snipdesk.session import Draft, SessionEvent, ask, compute_dirty


@pytest.mark.parametrize("previous", [False, True])
def test_compute_dirty(previous) -> None:
    assert compute_dirty(previous, SessionEvent.EDITED) is True
    assert compute_dirty(previous, SessionEvent.LOADED) is False
    assert compute_dirty(previous, SessionEvent.SAVED) is False
    assert compute_dirty(previous, SessionEvent.TAGGED) is previous
    assert compute_dirty(previous, SessionEvent.FAVORITED) is previous


def test_draft_round_trips_snippet() -> None:
    snippet = make_snippet("a", tags=["x"], is_favorite=True)
    draft = Draft.from_snippet(snippet)

    assert draft.to_snippet() == snippet
    assert draft.baseline == snippet
    assert draft.tag_input == ""
    assert draft.is_dirty is False


def test_changed_fields_compares_with_baseline() -> None:
    draft = Draft.from_snippet(make_snippet("a"))
    draft.title = "other"
    draft.tags.append("ignored")
    assert draft.changed_fields() == ["title"]


def test_ask_accepts_sync_and_async_answers() -> None:
    assert asyncio.run(ask(MagicMock(return_value=True), "?")) is True
    assert asyncio.run(ask(AsyncMock(return_value=False), "?")) is False


def test_console_confirm(monkeypatch) -> None:
    from snipdesk.session import console_confirm

    monkeypatch.setattr("builtins.input", lambda prompt: "Yes")
    assert asyncio.run(console_confirm("Delete?")) is True
    monkeypatch.setattr("builtins.input", lambda prompt: "")
    assert asyncio.run(console_confirm("Delete?")) is False
