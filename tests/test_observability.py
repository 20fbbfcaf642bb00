"""Tests for astound.observability — build events and the event log."""

import threading

from astound.observability.collector import BuildCollector
from astound.observability.events import (
    LifecycleRejected,
    ModuleLoaded,
    PageBuilt,
    PageRemoved,
    PluginSkipped,
    WorkerScriptWritten,
    now_ns,
)
from astound.observability.log import EventLog


def _page(path: str) -> PageBuilt:
    return PageBuilt(
        path=path, page_hash="abc", reused_hash=False,
        plugins_applied=3, duration_ms=0.1, timestamp_ns=now_ns(),
    )


class TestEventLog:
    """Tests for the event log store."""

    def test_append_and_len(self) -> None:
        log = EventLog()
        assert len(log) == 0
        log.append(_page("index.tsx"))
        assert len(log) == 1

    def test_max_events_enforced(self) -> None:
        log = EventLog(max_events=5)
        for i in range(10):
            log.append(_page(f"{i}.html"))
        assert len(log) == 5

    def test_recent(self) -> None:
        log = EventLog()
        for i in range(5):
            log.append(_page(f"{i}.html"))
        recent = log.recent(3)
        assert len(recent) == 3
        assert recent[-1].path == "4.html"

    def test_query_by_type(self) -> None:
        log = EventLog()
        log.append(_page("a.html"))
        log.append(ModuleLoaded(path="api.py", timestamp_ns=now_ns()))
        results = log.query(event_type=ModuleLoaded)
        assert [e.path for e in results] == ["api.py"]

    def test_query_by_route_prefix_newest_first(self) -> None:
        log = EventLog()
        log.append(_page("blog/a.md"))
        log.append(_page("about.html"))
        log.append(_page("blog/b.md"))
        results = log.query(route="blog/")
        assert [e.path for e in results] == ["blog/b.md", "blog/a.md"]

    def test_query_matches_source(self) -> None:
        log = EventLog()
        log.append(PluginSkipped(source="missing_plugin", reason="x", timestamp_ns=now_ns()))
        assert len(log.query(route="missing")) == 1

    def test_query_limit(self) -> None:
        log = EventLog()
        for i in range(10):
            log.append(_page(f"{i}.html"))
        assert len(log.query(limit=4)) == 4

    def test_clear(self) -> None:
        log = EventLog()
        log.append(_page("a.html"))
        assert log.clear() == 1
        assert len(log) == 0

    def test_counts(self) -> None:
        log = EventLog(max_events=50)
        log.append(_page("a.html"))
        log.append(_page("b.html"))
        log.append(ModuleLoaded(path="api.py", timestamp_ns=now_ns()))
        assert log.max_events == 50
        assert log.counts() == {"PageBuilt": 2, "ModuleLoaded": 1}

    def test_history_is_exact_and_oldest_first(self) -> None:
        log = EventLog()
        log.append(_page("blog/a.md"))
        log.append(_page("blog/a.mdx"))
        log.append(PageRemoved(path="blog/a.md", files_deleted=2, timestamp_ns=now_ns()))
        history = log.history("blog/a.md")
        assert [type(e) for e in history] == [PageBuilt, PageRemoved]

    def test_concurrent_appends(self) -> None:
        log = EventLog()

        def worker(n: int) -> None:
            for i in range(100):
                log.append(_page(f"{n}-{i}.html"))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(log) == 400


class TestBuildCollector:
    """BuildCollector — record_* helpers build the right events."""

    def test_default_log(self) -> None:
        assert isinstance(BuildCollector().log, EventLog)

    def test_record_page(self) -> None:
        collector = BuildCollector()
        collector.record_page("a.html", "abc", reused_hash=True, plugins_applied=3)
        (event,) = collector.log.recent()
        assert isinstance(event, PageBuilt)
        assert event.reused_hash is True
        assert event.plugins_applied == 3

    def test_record_other_events(self) -> None:
        collector = BuildCollector()
        collector.record_module("api.py")
        collector.record_removal("a.html", files_deleted=2)
        collector.record_rejected("b.html", "update")
        collector.record_worker("astound:params", "/.astound/js/w.x.js")
        collector.record_plugin_skipped("nope", "Cannot import")
        types = [type(e) for e in collector.log.recent()]
        assert types == [
            ModuleLoaded,
            PageRemoved,
            LifecycleRejected,
            WorkerScriptWritten,
            PluginSkipped,
        ]
        removed = collector.log.query(event_type=PageRemoved)[0]
        assert removed.files_deleted == 2
