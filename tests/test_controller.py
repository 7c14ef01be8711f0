import asyncio
from unittest.mock import MagicMock

import pytest

from conftest import FakeStoreBridge, make_snippet
from snipdesk.core.exceptions import MutationFailure
from snipdesk.session import SessionController


def _controller(bridge, answers=(True,)):
    confirm = MagicMock(side_effect=list(answers))
    notify = MagicMock()
    return SessionController(bridge, confirm, notify), confirm, notify


def _started(bridge, answers=(True,)):
    controller, confirm, notify = _controller(bridge, answers)
    asyncio.run(controller.start())
    bridge.calls.clear()
    return controller, confirm, notify


def test_adding_tag_persists_and_invalidates(bridge, snippet_a) -> None:
    controller, _, _ = _started(bridge)
    asyncio.run(controller.select(snippet_a))
    bridge.calls.clear()

    asyncio.run(controller.add_tag("y"))

    assert controller.session.draft.tags == ["x", "y"]
    assert bridge.snippets["a"].tags == ["x", "y"]
    assert bridge.names() == ["save", "reload", "list_all"]
    assert controller.invalidation_token == 1
    assert controller.list_query.invalidation_token == 1
    assert controller.is_dirty is False


def test_dirty_navigation_declined_keeps_draft(bridge, snippet_a, snippet_b) -> None:
    controller, confirm, _ = _started(bridge, answers=(False,))
    asyncio.run(controller.select(snippet_a))
    controller.edit_title("Z")

    assert asyncio.run(controller.select(snippet_b)) is False

    confirm.assert_called_once()
    assert controller.selected_id == "a"
    assert controller.session.draft.title == "Z"
    assert controller.is_dirty is True


def test_dirty_navigation_accepted_loads_fresh_copy(bridge, snippet_a) -> None:
    controller, confirm, _ = _started(bridge, answers=(True,))
    asyncio.run(controller.select(snippet_a))
    controller.edit_title("Z")
    stale_b = make_snippet("b", title="old list copy")

    assert asyncio.run(controller.select(stale_b)) is True

    confirm.assert_called_once()
    assert controller.selected_id == "b"
    assert controller.session.draft.title == "Docker compose"
    assert controller.is_dirty is False


def test_clean_navigation_does_not_prompt(bridge, snippet_a, snippet_b) -> None:
    controller, confirm, _ = _started(bridge)
    asyncio.run(controller.select(snippet_a))
    asyncio.run(controller.select(snippet_b))
    confirm.assert_not_called()
    assert controller.selected_id == "b"


def test_reselecting_current_snippet_keeps_draft(bridge, snippet_a) -> None:
    controller, confirm, _ = _started(bridge)
    asyncio.run(controller.select(snippet_a))
    controller.edit_body("unsaved")

    assert asyncio.run(controller.select(snippet_a)) is True

    confirm.assert_not_called()
    assert controller.session.draft.body == "unsaved"


def test_empty_and_docker_search(bridge, snippet_b) -> None:
    bridge.search_results["docker"] = [snippet_b]
    controller, _, _ = _controller(bridge)

    asyncio.run(controller.start())
    assert [s.id for s in controller.list_query.items] == ["a", "b"]

    asyncio.run(controller.search("docker"))
    assert bridge.calls[-1] == ("search", "docker")
    assert [r.snippet.id for r in controller.rows()] == ["b"]


def test_save_keeps_selection_and_refreshes_list(bridge, snippet_a) -> None:
    controller, _, _ = _started(bridge)
    asyncio.run(controller.select(snippet_a))
    controller.edit_title("Renamed")
    bridge.calls.clear()

    persisted = asyncio.run(controller.save())

    assert persisted.title == "Renamed"
    assert controller.selected_id == "a"
    assert controller.is_dirty is False
    assert bridge.names() == ["save", "reload", "get_one", "list_all"]
    assert [r.selected for r in controller.rows() if r.snippet.id == "a"] == [True]


def test_delete_clears_selection_and_refetches(bridge, snippet_a) -> None:
    controller, confirm, _ = _started(bridge, answers=(True,))
    asyncio.run(controller.select(snippet_a))
    bridge.calls.clear()

    assert asyncio.run(controller.delete()) is True

    confirm.assert_called_once()
    assert controller.selected_id is None
    assert controller.session.draft is None
    assert bridge.names() == ["delete", "reload", "list_all"]
    assert [s.id for s in controller.list_query.items] == ["b"]


def test_failed_save_notifies_and_raises(bridge, snippet_a) -> None:
    controller, _, notify = _started(bridge)
    asyncio.run(controller.select(snippet_a))
    controller.edit_title("Z")
    bridge.fail.add("save")

    with pytest.raises(MutationFailure):
        asyncio.run(controller.save())

    notify.assert_called_once()
    assert notify.call_args.args[0].startswith("Failed to save snippet")
    assert controller.is_dirty is True
    assert controller.session.draft.title == "Z"
    assert controller.invalidation_token == 0


def test_failed_tag_notifies(bridge, snippet_a) -> None:
    controller, _, notify = _started(bridge)
    asyncio.run(controller.select(snippet_a))
    bridge.fail.add("save")

    with pytest.raises(MutationFailure):
        asyncio.run(controller.add_tag("y"))

    assert "tags" in notify.call_args.args[0]
    assert controller.session.draft.tags == ["x"]


def test_copy_body_notifies_success(bridge, snippet_a) -> None:
    controller, _, notify = _started(bridge)
    asyncio.run(controller.select(snippet_a))

    asyncio.run(controller.copy_body())

    notify.assert_called_once_with("Copied to clipboard!")
    assert bridge.clipboard.text == "print('a')"


def test_create_selects_new_snippet(bridge) -> None:
    controller, _, _ = _started(bridge)

    created = asyncio.run(controller.create("Fresh"))

    assert created.title == "Fresh"
    assert controller.selected_id == created.id
    assert created.id in bridge.snippets
    assert controller.invalidation_token == 1
    assert len(controller.list_query.items) == 3


def test_create_is_guarded(bridge, snippet_a) -> None:
    controller, _, _ = _started(bridge, answers=(False,))
    asyncio.run(controller.select(snippet_a))
    controller.edit_title("unsaved")

    assert asyncio.run(controller.create("Fresh")) is None
    assert controller.selected_id == "a"
    assert len(bridge.snippets) == 2


def test_list_failure_does_not_touch_open_draft(bridge, snippet_a) -> None:
    controller, _, _ = _started(bridge)
    asyncio.run(controller.select(snippet_a))
    controller.edit_title("keep me")
    bridge.fail.add("search")

    asyncio.run(controller.search("boom"))

    assert controller.list_error_text.startswith("Failed to load snippets")
    assert controller.session.draft.title == "keep me"
    assert controller.selected_id == "a"


def test_stop_unmounts_list(bridge) -> None:
    controller, _, _ = _started(bridge)
    controller.stop()
    assert controller.list_query.mounted is False
    assert controller.rows() == []


class _GatedBridge(FakeStoreBridge):
    def __init__(self, snippets) -> None:
        super().__init__(snippets)
        self.gates = {}

    async def get_one(self, snippet_id):
        gate = self.gates.get(snippet_id)
        if gate is not None:
            await gate.wait()
        return await super().get_one(snippet_id)


def test_returning_to_open_snippet_cancels_pending_switch(snippet_a, snippet_b) -> None:
    async def scenario():
        bridge = _GatedBridge([snippet_a, snippet_b])
        controller, _, _ = _controller(bridge)
        await controller.select(snippet_a)

        bridge.gates["b"] = asyncio.Event()
        to_b = asyncio.create_task(controller.select(snippet_b))
        await asyncio.sleep(0)
        back_to_a = await controller.select(snippet_a)
        bridge.gates["b"].set()
        return controller, back_to_a, await to_b

    controller, back_to_a, to_b = asyncio.run(scenario())

    assert back_to_a is True
    assert to_b is False
    assert controller.selected_id == "a"
    assert controller.session.draft.id == "a"


def test_later_selection_wins_over_slow_one(snippet_a, snippet_b) -> None:
    async def scenario():
        bridge = _GatedBridge([snippet_a, snippet_b])
        controller, _, _ = _controller(bridge)
        bridge.gates["a"] = asyncio.Event()
        to_a = asyncio.create_task(controller.select(snippet_a))
        await asyncio.sleep(0)
        to_b = await controller.select(snippet_b)
        bridge.gates["a"].set()
        return controller, await to_a, to_b

    controller, to_a, to_b = asyncio.run(scenario())

    assert (to_a, to_b) == (False, True)
    assert controller.selected_id == "b"
    assert controller.session.draft.title == "Docker compose"


def test_tag_kept_when_reload_fails_after_save(bridge, snippet_a) -> None:
    controller, _, notify = _started(bridge)
    asyncio.run(controller.select(snippet_a))
    bridge.fail.add("reload")

    assert asyncio.run(controller.add_tag("y")) is True

    assert bridge.snippets["a"].tags == ["x", "y"]
    assert controller.session.draft.tags == ["x", "y"]
    assert controller.invalidation_token == 1
    notify.assert_called_once()
    assert "could not be refreshed" in notify.call_args.args[0]


def test_delete_clears_selection_when_reload_fails(bridge, snippet_a) -> None:
    controller, _, notify = _started(bridge)
    asyncio.run(controller.select(snippet_a))
    bridge.fail.add("reload")

    assert asyncio.run(controller.delete()) is True

    assert controller.selected_id is None
    assert controller.session.draft is None
    assert controller.invalidation_token == 1
    assert [s.id for s in controller.list_query.items] == ["b"]
    assert "could not be refreshed" in notify.call_args.args[0]


def test_create_survives_reload_failure(bridge) -> None:
    controller, _, notify = _started(bridge)
    bridge.fail.add("reload")

    created = asyncio.run(controller.create("Fresh"))

    assert controller.selected_id == created.id
    assert created.id in bridge.snippets
    notify.assert_called_once()
