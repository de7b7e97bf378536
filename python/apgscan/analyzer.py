from __future__ import annotations

import logging

from bs4.element import Tag

from .patterns import PatternRegistry, default_registry
from .query.dom import contains
from .types import AnalysisResult, AnalyzerConfig, Match

logger = logging.getLogger(__name__)


def filter_by_confidence(matches: list[Match], config: AnalyzerConfig) -> list[Match]:
    return [m for m in matches if m.confidence >= config.min_confidence]


class Analyzer:
    """Runs every enabled pattern type over a tree and aggregates the results."""

    def __init__(self, registry: PatternRegistry | None = None) -> None:
        self.registry = registry if registry is not None else default_registry()

    def analyze(self, root: Tag, config: AnalyzerConfig | None = None) -> AnalysisResult:
        config = config or AnalyzerConfig()
        unknown = [name for name in config.enabled_types if name not in self.registry]
        if unknown:
            logger.debug("Ignoring unregistered pattern types: %s", ", ".join(unknown))

        matches: list[Match] = []
        for entry in self.registry:
            if not config.allows(entry.type_name):
                continue
            found = entry.detector.detect_all(root)
            for match in found:
                match.issues = entry.validator.validate(match)
                if not config.include_suggestions:
                    for issue in match.issues:
                        issue.suggestion = None
            logger.debug("Pattern %s: %d candidate(s)", entry.type_name, len(found))
            matches.extend(found)

        return AnalysisResult.from_matches(filter_by_confidence(matches, config))

    def analyze_within(
        self,
        root: Tag,
        target: Tag,
        config: AnalyzerConfig | None = None,
    ) -> AnalysisResult:
        full = self.analyze(root, config)
        # Containment is decided by the anchor alone, never by related nodes.
        return AnalysisResult.from_matches(m for m in full.patterns if contains(target, m.anchor))
