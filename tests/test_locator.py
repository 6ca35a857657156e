# File: tests/test_locator.py | Version: 1.0 | Path: /tests/test_locator.py
import asyncio
import logging

from taskviews.locator.loader import ActiveViewLoader
from taskviews.locator.locator import CrossViewLocator, LocatorState
from taskviews.schemas.view import ViewConfig
from taskviews.store.view_store import ViewStore

PARTITIONS = ["execution", "receivedVerification", "issuedVerification", "guidance", "completed"]


def _store():
    only_a = ViewConfig(
        id="v1",
        title="Client A",
        partition="completed",
        filters=[{"column": "clientName", "operator": "is", "value": "A"}],
    )
    everything = ViewConfig(id="v2", title="All", partition="execution")
    return ViewStore([only_a, everything], "v1")


def _locator(store, source, **kw):
    kw.setdefault("highlight_seconds", 0.05)
    return CrossViewLocator(store, source, partitions=PARTITIONS, **kw)


def test_found_record_activates_pair_then_highlights_after_load(fake_source_cls):
    source = fake_source_cls(
        {
            "execution": [{"id": "1", "clientName": "A", "status": "today"}],
            "guidance": [{"id": "7", "clientName": "B", "status": "today"}],
        }
    )
    store = _store()

    async def run():
        loader = ActiveViewLoader(store, source)
        locator = _locator(store, source, loader=loader)
        result = await locator.locate(7)
        assert result.state is LocatorState.pending_highlight
        assert locator.highlighted_id is None

        assert await locator.wait_for_highlight(timeout=1) is True
        highlighted = (locator.state, locator.highlighted_id)
        await asyncio.sleep(0.1)
        return result, highlighted, locator.highlighted_id

    result, highlighted, after = asyncio.run(run())
    assert (result.view_id, result.partition) == ("v2", "guidance")
    assert result.found is True
    assert store.active_view_id == "v2"
    assert store.active_view.partition == "guidance"
    assert highlighted == (LocatorState.found, "7")
    assert after is None


def test_each_partition_fetched_once_per_search(fake_source_cls):
    source = fake_source_cls({"completed": [{"id": "5", "clientName": "A", "status": "completed"}]})

    async def run():
        return await _locator(_store(), source).locate("5")

    result = asyncio.run(run())
    assert sorted(p for p, _ in source.calls) == sorted(PARTITIONS)
    assert (result.view_id, result.partition) == ("v1", "completed")


def test_views_are_outer_loop_and_first_match_wins(fake_source_cls):
    # visible to v2 in execution and to v1 in completed; v1 is enumerated first
    source = fake_source_cls(
        {
            "execution": [{"id": "5", "clientName": "B", "status": "today"}],
            "completed": [{"id": "5", "clientName": "A", "status": "completed"}],
        }
    )

    async def run():
        return await _locator(_store(), source).locate("5")

    for _ in range(3):
        result = asyncio.run(run())
        assert (result.view_id, result.partition) == ("v1", "completed")


def test_not_found_falls_back_to_first_view_default_partition(fake_source_cls, caplog):
    source = fake_source_cls({"execution": [{"id": "1"}]})
    store = _store()
    store.activate_view("v2")

    async def run():
        locator = _locator(store, source)
        with caplog.at_level(logging.WARNING, logger="taskviews.locator"):
            result = await locator.locate("404")
        return locator, result, await locator.wait_for_highlight(timeout=0.01)

    locator, result, highlighted = asyncio.run(run())
    assert result.state is LocatorState.not_found
    assert result.found is False
    assert highlighted is False
    assert store.active_view_id == "v1"
    assert store.active_view.partition == "execution"

    diag = result.diagnostic
    assert diag.record_id == "404"
    assert "id" in diag.id_fields
    assert len(diag.checks) == 2 * len(PARTITIONS)
    assert diag.checks[0].view_id == "v1"
    assert "404" in caplog.text


def test_fetch_failures_count_as_non_matches(fake_source_cls):
    source = fake_source_cls(
        {"guidance": [{"id": "7", "status": "today"}], "completed": [{"id": "8", "status": "completed"}]},
        failing={"guidance"},
    )

    async def run():
        locator = _locator(_store(), source)
        missing = await locator.locate("7")
        present = await locator.locate("8")
        return missing, present

    missing, present = asyncio.run(run())
    assert missing.state is LocatorState.not_found
    failed = [c for c in missing.diagnostic.checks if c.error]
    assert [c.partition for c in failed] == ["guidance", "guidance"]
    assert (present.view_id, present.partition) == ("v2", "completed")


def test_highlight_waits_for_matching_view_and_loaded_data(fake_source_cls):
    source = fake_source_cls({"execution": [{"id": "3", "status": "today"}]})
    store = _store()

    async def run():
        locator = _locator(store, source)
        await locator.locate("3")
        locator.on_view_data("v1", [{"id": "3"}], True)  # wrong view
        locator.on_view_data("v2", [{"id": "3"}], False)  # not loaded yet
        locator.on_view_data("v2", [{"id": "4"}], True)  # stale data
        pending = (locator.state, locator.highlighted_id)
        locator.on_view_data("v2", [{"id": "3"}], True)
        return pending, locator.state, locator.highlighted_id

    pending, state, highlighted = asyncio.run(run())
    assert pending == (LocatorState.pending_highlight, None)
    assert state is LocatorState.found
    assert highlighted == "3"


def test_new_search_supersedes_pending_highlight(fake_source_cls):
    source = fake_source_cls({"execution": [{"id": "3", "status": "today"}]})
    store = _store()

    async def run():
        locator = _locator(store, source)
        await locator.locate("3")
        waiter = asyncio.create_task(locator.wait_for_highlight(timeout=1))
        await asyncio.sleep(0)
        await locator.locate("missing")
        stale = await waiter
        # data for the old target arriving late must not highlight it
        locator.on_view_data("v2", [{"id": "3"}], True)
        return stale, locator.highlighted_id, locator.state

    stale, highlighted, state = asyncio.run(run())
    assert stale is False
    assert highlighted is None
    assert state is LocatorState.not_found


def test_in_flight_search_is_superseded(fake_source_cls):
    source = fake_source_cls({"execution": [{"id": "3", "status": "today"}]})
    store = _store()

    async def run():
        locator = _locator(store, source)
        first = asyncio.create_task(locator.locate("3"))
        await asyncio.sleep(0)
        second = await locator.locate("3")
        return await first, second

    first, second = asyncio.run(run())
    assert first.superseded is True
    assert first.found is False
    assert second.view_id == "v2"


def test_relocating_in_active_pair_still_highlights(fake_source_cls):
    source = fake_source_cls({"execution": [{"id": "3", "status": "today"}]})
    store = _store()
    store.activate_view("v2")

    async def run():
        loader = ActiveViewLoader(store, source)
        await loader.refresh()
        locator = _locator(store, source, loader=loader)
        await locator.locate("3")
        return await locator.wait_for_highlight(timeout=1), locator.highlighted_id

    assert asyncio.run(run()) == (True, "3")


def test_view_scoped_to_a_subject_is_searched_with_that_subject(fake_source_cls):
    source = fake_source_cls({("execution", "u2"): [{"id": "42", "status": "today"}]})
    mine = ViewConfig(id="v1", title="Mine", partition="execution")
    theirs = ViewConfig(id="v2", title="Ravi", partition="execution", selectedSubjectId="u2")
    store = ViewStore([mine, theirs], "v1")

    result = asyncio.run(_locator(store, source).locate("42"))
    assert (result.view_id, result.partition) == ("v2", "execution")
    assert ("execution", "u2") in source.calls
    assert ("execution", None) in source.calls
    assert len(source.calls) == len(set(source.calls))


def test_explicit_subject_overrides_view_subject(fake_source_cls):
    source = fake_source_cls({("execution", "u9"): [{"id": "42", "status": "today"}]})
    store = ViewStore([ViewConfig(id="v1", partition="execution", selectedSubjectId="u2")], "v1")

    result = asyncio.run(_locator(store, source, subject_id="u9").locate("42"))
    assert result.view_id == "v1"
    assert {s for _, s in source.calls} == {"u9"}
