"""Tests for astound.pipeline.transform — plugin loop and single-route builds."""

from __future__ import annotations

import asyncio
import json

import pytest

from astound._errors import BuildError
from astound.config import AstoundConfig
from astound.observability import BuildCollector, ModuleLoaded, PageBuilt
from astound.pipeline.cache import PageCache
from astound.pipeline.state import BuildState
from astound.pipeline.transform import builder, run_transforms
from astound.plugins.base import Accumulator, TransformOutput
from astound.routes.configure import RouteDescriptor
from astound.routes.loader import LoadedModule


class _Emit:
    """Plugin returning a fixed output."""

    def __init__(self, type_: str, code: str) -> None:
        self.name = f"emit-{type_}"
        self._output = TransformOutput(type=type_, code=code)  # type: ignore[arg-type]

    def transform(self, route_id, source, accumulator):
        return self._output


class _SlowEmit(_Emit):
    """Async plugin that suspends before returning."""

    async def transform(self, route_id, source, accumulator):
        await asyncio.sleep(0.01)
        return self._output


class _Recorder:
    """Plugin recording what it saw in the accumulator."""

    def __init__(self) -> None:
        self.seen: list[tuple[str, str]] = []

    def transform(self, route_id, source, accumulator):
        self.seen.append((accumulator.html, accumulator.js))


class TestRunTransforms:
    """run_transforms — strict sequential application."""

    @pytest.mark.asyncio
    async def test_different_slots_do_not_clobber(self) -> None:
        acc = Accumulator()
        await run_transforms([_Emit("html", "X"), _Emit("js", "Y")], "a.html", "", acc)
        assert (acc.html, acc.js) == ("X", "Y")

    @pytest.mark.asyncio
    async def test_last_writer_wins(self) -> None:
        acc = Accumulator()
        await run_transforms([_Emit("js", "first"), _Emit("js", "second")], "a", "", acc)
        assert acc.js == "second"

    @pytest.mark.asyncio
    async def test_async_transform_awaited_before_next(self) -> None:
        recorder = _Recorder()
        acc = Accumulator()
        await run_transforms([_SlowEmit("html", "slow"), recorder], "a", "", acc)
        assert recorder.seen == [("slow", "")]

    @pytest.mark.asyncio
    async def test_async_then_sync_same_slot(self) -> None:
        acc = Accumulator()
        await run_transforms([_SlowEmit("js", "slow"), _Emit("js", "fast")], "a", "", acc)
        assert acc.js == "fast"

    @pytest.mark.asyncio
    async def test_none_output_keeps_accumulator(self) -> None:
        acc = Accumulator(html="keep")
        applied = await run_transforms([_Recorder()], "a", "", acc)
        assert acc.html == "keep"
        assert applied == 1

    @pytest.mark.asyncio
    async def test_plugins_without_transform_skipped(self) -> None:
        class ScriptOnly:
            def add_script(self) -> str:
                return ""

        applied = await run_transforms([ScriptOnly()], "a", "", Accumulator())
        assert applied == 0

    @pytest.mark.asyncio
    async def test_receives_route_and_source(self) -> None:
        calls = []

        class Spy:
            def transform(self, route_id, source, accumulator):
                calls.append((route_id, source))

        await run_transforms([Spy()], "blog/a.md", "# A", Accumulator())
        assert calls == [("blog/a.md", "# A")]

    @pytest.mark.asyncio
    async def test_bad_output_raises(self) -> None:
        class Bad:
            name = "bad"

            def transform(self, route_id, source, accumulator):
                return "not an output"

        with pytest.raises(BuildError, match="'bad' returned str"):
            await run_transforms([Bad()], "a", "", Accumulator())


class TestBuilder:
    """builder — one route through hash resolution, plugins, and output."""

    @pytest.mark.asyncio
    async def test_writes_outputs_and_cache(self, config: AstoundConfig) -> None:
        state = BuildState(plugins=[_Emit("js", "console.log(1)"), _Emit("html", "<p>hi</p>")])
        await builder(RouteDescriptor(file="index.tsx", ext="tsx"), config, state)

        page_hash = state.pages.get("index.tsx")
        assert isinstance(page_hash, str)
        out = config.output_path
        assert (out / f"{page_hash}.js").read_text() == "console.log(1)"
        assert "<p>hi</p>" in (out / f"{page_hash}.client.js").read_text()
        assert json.loads(config.cache_path.read_text()) == {"index.tsx": page_hash}

    @pytest.mark.asyncio
    async def test_reuses_previous_hash(self, config: AstoundConfig) -> None:
        state = BuildState(previous={"index.tsx": "cafebabe"})
        await builder(RouteDescriptor(file="index.tsx", ext="tsx"), config, state)
        assert state.pages.get("index.tsx") == "cafebabe"
        assert (config.output_path / "cafebabe.js").exists()
        assert (config.output_path / "cafebabe.client.js").exists()

    @pytest.mark.asyncio
    async def test_cache_set_before_transforms(self, config: AstoundConfig) -> None:
        state = BuildState(previous={"index.tsx": "cafebabe"})

        class Peek:
            seen = None

            def transform(self, route_id, source, accumulator):
                Peek.seen = state.pages.get(route_id)

        state.plugins = [Peek()]
        await builder(RouteDescriptor(file="index.tsx", ext="tsx"), config, state)
        assert Peek.seen == "cafebabe"

    @pytest.mark.asyncio
    async def test_output_waits_for_async_plugins(self, config: AstoundConfig) -> None:
        state = BuildState(plugins=[_SlowEmit("js", "late")])
        await builder(RouteDescriptor(file="index.tsx", ext="tsx"), config, state)
        page_hash = state.pages.get("index.tsx")
        assert (config.output_path / f"{page_hash}.js").read_text() == "late"

    @pytest.mark.asyncio
    async def test_compiled_route_bypasses_plugins(self, config: AstoundConfig) -> None:
        (config.app_path / "api.py").write_text("VALUE = 1\n")
        recorder = _Recorder()
        collector = BuildCollector()
        state = BuildState(plugins=[recorder], collector=collector)

        await builder(RouteDescriptor(file="api.py", ext="py"), config, state)

        loaded = state.pages.get("api.py")
        assert isinstance(loaded, LoadedModule)
        assert loaded.module.VALUE == 1  # type: ignore[union-attr]
        assert recorder.seen == []
        assert not config.output_path.exists()
        assert json.loads(config.cache_path.read_text()) == {"api.py": "module:api.py"}
        assert len(collector.log.query(event_type=ModuleLoaded)) == 1

    @pytest.mark.asyncio
    async def test_unreadable_route_skipped(
        self, config: AstoundConfig, capsys: pytest.CaptureFixture[str],
    ) -> None:
        state = BuildState(pages=PageCache())
        await builder(RouteDescriptor(file="missing.tsx", ext="tsx"), config, state)
        assert "missing.tsx" not in state.pages
        assert "Read error: missing.tsx" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_records_page_event(self, config: AstoundConfig) -> None:
        collector = BuildCollector()
        state = BuildState(previous={"index.tsx": "cafebabe"}, collector=collector)
        await builder(RouteDescriptor(file="index.tsx", ext="tsx"), config, state)
        (event,) = collector.log.query(event_type=PageBuilt)
        assert event.path == "index.tsx"
        assert event.page_hash == "cafebabe"
        assert event.reused_hash is True

    @pytest.mark.asyncio
    async def test_worker_scripts_in_loader(self, config: AstoundConfig) -> None:
        from astound.pipeline.client import WorkerScript

        state = BuildState(workers=[WorkerScript(name="w", script="/.astound/js/w.x.js")])
        await builder(RouteDescriptor(file="index.tsx", ext="tsx"), config, state)
        page_hash = state.pages.get("index.tsx")
        loader = (config.output_path / f"{page_hash}.client.js").read_text()
        assert '"/.astound/js/w.x.js"' in loader
