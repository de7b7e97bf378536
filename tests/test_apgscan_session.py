from __future__ import annotations

import asyncio

from apgscan.analyzer import Analyzer
from apgscan.host import parse_html
from apgscan.session import MIN_SCAN_DURATION, ScanSession, ScanState
from apgscan.types import AnalysisResult, AnalyzerConfig, ScanCompleted, ScanFailed, ScanSkipped

PAGE = (
    '<div role="dialog" hidden><button aria-label="Close">x</button></div>'
    '<main><div role="dialog" aria-label="Inner" hidden><button>Close</button></div></main>'
)


class FakeClock:
    def __init__(self, ticks=(0.0,)):
        self.ticks = list(ticks)

    def __call__(self) -> float:
        if len(self.ticks) > 1:
            return self.ticks.pop(0)
        return self.ticks[0]


class RecordingSleep:
    def __init__(self, gate: asyncio.Event | None = None):
        self.calls: list[float] = []
        self.gate = gate

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        if self.gate is not None:
            await self.gate.wait()


class BrokenAnalyzer(Analyzer):
    def analyze(self, root, config=None):
        raise RuntimeError("detector exploded")


def test_full_scan_is_held_to_minimum_duration() -> None:
    sleep = RecordingSleep()
    session = ScanSession(sleep=sleep, clock=FakeClock([10.0, 10.2]))
    result = asyncio.run(session.run(parse_html(PAGE)))
    assert result.summary.patterns_found == 2
    assert len(sleep.calls) == 1
    assert abs(sleep.calls[0] - (MIN_SCAN_DURATION - 0.2)) < 1e-9


def test_slow_scan_does_not_sleep() -> None:
    sleep = RecordingSleep()
    session = ScanSession(min_duration=0.5, sleep=sleep, clock=FakeClock([0.0, 3.0]))
    asyncio.run(session.run(parse_html(PAGE)))
    assert sleep.calls == []


def test_scoped_scan_has_no_duration_floor() -> None:
    sleep = RecordingSleep()
    session = ScanSession(sleep=sleep, clock=FakeClock())
    doc = parse_html(PAGE)
    result = asyncio.run(session.run_within(doc, doc.select_one("main")))
    assert result.summary.patterns_found == 1
    assert sleep.calls == []


def test_state_change_notified_busy_then_idle() -> None:
    events: list[bool] = []
    session = ScanSession(on_state_change=events.append, min_duration=0)
    outcome = asyncio.run(session.scan(parse_html(PAGE)))
    assert isinstance(outcome, ScanCompleted)
    assert outcome.ok
    assert events == [True, False]
    assert session.state is ScanState.IDLE


def test_concurrent_scan_is_skipped_with_empty_result() -> None:
    events: list[bool] = []

    async def scenario():
        gate = asyncio.Event()
        session = ScanSession(on_state_change=events.append, sleep=RecordingSleep(gate), clock=FakeClock())
        doc = parse_html(PAGE)
        first = asyncio.create_task(session.scan(doc))
        while not session.busy:
            await asyncio.sleep(0)
        skipped = await session.scan(doc)
        skipped_result = await session.run(doc)
        gate.set()
        completed = await first
        after = await session.scan(doc)
        return skipped, skipped_result, completed, after

    skipped, skipped_result, completed, after = asyncio.run(scenario())
    assert isinstance(skipped, ScanSkipped)
    assert not skipped.ok
    assert skipped_result.summary.patterns_found == 0
    assert skipped_result.patterns == []
    assert isinstance(completed, ScanCompleted)
    assert completed.result.summary.patterns_found == 2
    assert isinstance(after, ScanCompleted)
    # Skipped calls fire no notifications.
    assert events == [True, False, True, False]


def test_failure_returns_empty_result_and_releases_session() -> None:
    events: list[bool] = []
    session = ScanSession(BrokenAnalyzer(), on_state_change=events.append, min_duration=0)
    doc = parse_html(PAGE)
    outcome = asyncio.run(session.scan(doc))
    assert isinstance(outcome, ScanFailed)
    assert "detector exploded" in outcome.reason
    assert isinstance(outcome.error, RuntimeError)
    assert outcome.result.to_dict() == AnalysisResult.empty().to_dict()
    assert events == [True, False]
    assert not session.busy
    assert asyncio.run(session.run(doc)).summary.patterns_found == 0
    assert events == [True, False, True, False]


def test_session_config_is_used_unless_overridden() -> None:
    session = ScanSession(config=AnalyzerConfig(include_suggestions=False), min_duration=0)
    doc = parse_html(PAGE)
    stripped = asyncio.run(session.run(doc))
    assert all(i.suggestion is None for m in stripped.patterns for i in m.issues)
    explicit = asyncio.run(session.run(doc, AnalyzerConfig()))
    assert any(i.suggestion for m in explicit.patterns for i in m.issues)


def test_negative_min_duration_is_clamped() -> None:
    assert ScanSession(min_duration=-1).min_duration == 0.0


def test_raising_idle_callback_keeps_completed_result() -> None:
    events: list[bool] = []

    def on_state_change(busy: bool) -> None:
        events.append(busy)
        if not busy:
            raise RuntimeError("ui gone")

    session = ScanSession(on_state_change=on_state_change, min_duration=0)
    doc = parse_html(PAGE)
    outcome = asyncio.run(session.scan(doc))
    assert isinstance(outcome, ScanCompleted)
    assert outcome.result.summary.patterns_found == 2
    assert events == [True, False]
    assert not session.busy
    assert asyncio.run(session.run(doc)).summary.patterns_found == 2
