# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
"""Check interactive UI patterns in HTML documents against the WAI-ARIA
Authoring Practices.

The package re-exports the engine (`Analyzer`, `ScanSession`, the pattern
registry) and the convenience entry points most callers need
(`analyze_html`, `analyze_file`, `analyze_url`, `has_errors`).
"""
from .analyzer import Analyzer
from .host import load_document, parse_html
from .patterns import PatternRegistry, Rule, RuleSetValidator, default_registry
from .runtime import (
    analyze_document,
    analyze_file,
    analyze_html,
    analyze_url,
    error_count,
    has_errors,
    issue_count,
    warning_count,
)
from .session import ScanSession, ScanState
from .standards import configure_standards, reset_standards
from .types import (
    AnalysisResult,
    AnalyzerConfig,
    Confidence,
    DetectionMethod,
    Issue,
    Match,
    ScanCompleted,
    ScanFailed,
    ScanOutcome,
    ScanSkipped,
    Severity,
    Summary,
)

__all__ = [
    "AnalysisResult",
    "Analyzer",
    "AnalyzerConfig",
    "Confidence",
    "DetectionMethod",
    "Issue",
    "Match",
    "PatternRegistry",
    "Rule",
    "RuleSetValidator",
    "ScanCompleted",
    "ScanFailed",
    "ScanOutcome",
    "ScanSession",
    "ScanSkipped",
    "ScanState",
    "Severity",
    "Summary",
    "analyze_document",
    "analyze_file",
    "analyze_html",
    "analyze_url",
    "configure_standards",
    "default_registry",
    "error_count",
    "has_errors",
    "issue_count",
    "load_document",
    "parse_html",
    "reset_standards",
    "warning_count",
]
