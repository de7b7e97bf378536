# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
import logging
from pathlib import Path
from typing import Dict, List, Optional, Any
import tomllib

from .standards import configure_standards
from .types import AnalyzerConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "apgscan.toml"

# Default configuration structure
DEFAULT_CONFIG = {
    "analyzer": {
        "enabled_types": [],  # empty = every registered pattern type
        "min_confidence": "low",
        "include_suggestions": True,
    },
    "scan": {
        "min_duration_ms": 500,
    },
    "watch": {
        "patterns": ["*.html", "*.htm"],
        "debounce_ms": 500,
    },
    "standards": {
        # "hidden_classes": ["hidden", "is-hidden"]
    },
}


class Config:
    def __init__(self, data: Dict[str, Any], path: Optional[Path] = None):
        self.data = data
        self.path = path
        self.root = path.parent if path else Path.cwd()

    @classmethod
    def find(cls, start: Optional[Path] = None) -> Optional[Path]:
        """Look for apgscan.toml, or a pyproject.toml with [tool.apgscan], upwards from `start`."""
        here = (start or Path.cwd()).resolve()
        for folder in (here, *here.parents):
            candidate = folder / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            pyproject = folder / "pyproject.toml"
            if not pyproject.exists():
                continue
            try:
                tool = _read_toml(pyproject).get("tool", {})
            except ValueError as e:
                logger.debug("Skipping unreadable %s: %s", pyproject, e)
                continue
            if "apgscan" in tool:
                return pyproject
        return None

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Config":
        """Load configuration from apgscan.toml (defaults when none is found)."""
        if path is None:
            path = cls.find()
            if path is None:
                return cls({}, None)
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"No config file found at {path}")

        data = _read_toml(path)
        if path.name == "pyproject.toml":
            data = data.get("tool", {}).get("apgscan", {})
        return cls(data, path)

    @property
    def analyzer(self) -> Dict[str, Any]:
        return self.data.get("analyzer", {})

    @property
    def scan(self) -> Dict[str, Any]:
        return self.data.get("scan", {})

    @property
    def watch(self) -> Dict[str, Any]:
        return self.data.get("watch", {})

    @property
    def standards(self) -> Dict[str, Any]:
        return self.data.get("standards", {})

    def analyzer_config(self, **overrides: Any) -> AnalyzerConfig:
        merged = dict(DEFAULT_CONFIG["analyzer"])
        merged.update(self.analyzer)
        merged.update({k: v for k, v in overrides.items() if v is not None})
        return AnalyzerConfig.from_mapping(merged)

    def min_duration(self) -> float:
        ms = self.scan.get("min_duration_ms", DEFAULT_CONFIG["scan"]["min_duration_ms"])
        if not isinstance(ms, (int, float)) or ms < 0:
            raise ValueError(f"scan.min_duration_ms must be a non-negative number, got {ms!r}")
        return ms / 1000.0

    def watch_patterns(self) -> List[str]:
        patterns = self.watch.get("patterns", DEFAULT_CONFIG["watch"]["patterns"])
        if isinstance(patterns, str):
            patterns = [patterns]
        return list(patterns)

    def debounce(self) -> float:
        return self.watch.get("debounce_ms", DEFAULT_CONFIG["watch"]["debounce_ms"]) / 1000.0

    def apply_standards(self) -> None:
        if self.standards:
            configure_standards(self.standards)

    def build_session(self, analyzer=None, **kwargs: Any):
        """ScanSession preloaded with this file's analyzer options and duration floor."""
        from .session import ScanSession

        kwargs.setdefault("config", self.analyzer_config())
        kwargs.setdefault("min_duration", self.min_duration())
        return ScanSession(analyzer, **kwargs)


def _read_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Failed to parse {path}: {e}")
