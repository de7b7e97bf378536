from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from bs4.element import Tag

from .analyzer import Analyzer
from .host import fetch_url, load_file, resolve_root
from .query.dom import select_one
from .types import AnalysisResult, AnalyzerConfig

ConfigLike = AnalyzerConfig | Mapping[str, Any] | None


def _coerce_config(config: ConfigLike) -> AnalyzerConfig:
    if isinstance(config, AnalyzerConfig):
        return config
    return AnalyzerConfig.from_mapping(config)


def analyze_document(
    root: Tag | str,
    *,
    config: ConfigLike = None,
    selector: str | None = None,
    analyzer: Analyzer | None = None,
) -> AnalysisResult:
    document = resolve_root(root)
    analyzer = analyzer or Analyzer()
    effective = _coerce_config(config)
    if selector is None:
        return analyzer.analyze(document, effective)
    target = select_one(document, selector)
    if target is None:
        raise LookupError(f"Element not found: {selector}")
    return analyzer.analyze_within(document, target, effective)


def analyze_html(html: str, *, config: ConfigLike = None, **kwargs: Any) -> AnalysisResult:
    return analyze_document(html, config=config, **kwargs)


def analyze_file(path: str | Path, *, config: ConfigLike = None, **kwargs: Any) -> AnalysisResult:
    return analyze_document(load_file(path), config=config, **kwargs)


def analyze_url(url: str, *, config: ConfigLike = None, timeout: float = 30, **kwargs: Any) -> AnalysisResult:
    return analyze_document(fetch_url(url, timeout=timeout), config=config, **kwargs)


def error_count(root: Tag | str, **kwargs: Any) -> int:
    return analyze_document(root, **kwargs).summary.errors


def warning_count(root: Tag | str, **kwargs: Any) -> int:
    return analyze_document(root, **kwargs).summary.warnings


def issue_count(root: Tag | str, **kwargs: Any) -> int:
    summary = analyze_document(root, **kwargs).summary
    return summary.errors + summary.warnings


def has_errors(root: Tag | str, **kwargs: Any) -> bool:
    return error_count(root, **kwargs) > 0
