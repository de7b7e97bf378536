# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
"""Single-flight scan sessions.

A session wraps one `Analyzer`. While a scan is in flight, further calls on
the same session return the empty result immediately instead of queuing.
"""
from __future__ import annotations

import asyncio
import logging
import time
from enum import Enum
from typing import Awaitable, Callable

from bs4.element import Tag

from .analyzer import Analyzer
from .types import (
    AnalysisResult,
    AnalyzerConfig,
    ScanCompleted,
    ScanFailed,
    ScanOutcome,
    ScanSkipped,
)

logger = logging.getLogger(__name__)

MIN_SCAN_DURATION = 0.5


class ScanState(str, Enum):
    IDLE = "idle"
    SCANNING = "scanning"


class ScanSession:
    def __init__(
        self,
        analyzer: Analyzer | None = None,
        *,
        config: AnalyzerConfig | None = None,
        on_state_change: Callable[[bool], None] | None = None,
        min_duration: float = MIN_SCAN_DURATION,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.analyzer = analyzer if analyzer is not None else Analyzer()
        self.config = config
        self.on_state_change = on_state_change
        self.min_duration = max(0.0, float(min_duration))
        self._sleep = sleep
        self._clock = clock
        self._state = ScanState.IDLE

    @property
    def state(self) -> ScanState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._state is ScanState.SCANNING

    def _notify(self, busy: bool) -> None:
        if self.on_state_change is not None:
            self.on_state_change(busy)

    async def scan(
        self,
        root: Tag,
        config: AnalyzerConfig | None = None,
        *,
        target: Tag | None = None,
    ) -> ScanOutcome:
        """Run one scan and report how it ended.

        Full-document scans are held to `min_duration` seconds so interactive
        callers do not flicker; scoped scans (`target` given) return as soon as
        they finish. Failures are logged and returned as `ScanFailed`.
        """
        if self._state is ScanState.SCANNING:
            logger.debug("Scan requested while another scan is running; skipped")
            return ScanSkipped()

        self._state = ScanState.SCANNING
        effective = config or self.config
        started = self._clock()
        try:
            self._notify(True)
            if target is not None:
                result = self.analyzer.analyze_within(root, target, effective)
            else:
                result = self.analyzer.analyze(root, effective)
                remaining = self.min_duration - (self._clock() - started)
                if remaining > 0:
                    await self._sleep(remaining)
            return ScanCompleted(result)
        except Exception as exc:
            logger.exception("Pattern analysis failed")
            return ScanFailed(reason=f"{type(exc).__name__}: {exc}", error=exc)
        finally:
            self._state = ScanState.IDLE
            try:
                self._notify(False)
            except Exception:
                logger.exception("Scan state callback failed")

    async def run(self, root: Tag, config: AnalyzerConfig | None = None) -> AnalysisResult:
        outcome = await self.scan(root, config)
        return outcome.result

    async def run_within(
        self,
        root: Tag,
        target: Tag,
        config: AnalyzerConfig | None = None,
    ) -> AnalysisResult:
        outcome = await self.scan(root, config, target=target)
        return outcome.result
