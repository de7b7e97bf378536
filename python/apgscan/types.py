from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Iterable, Mapping

from bs4.element import Tag

from .query.dom import element_selector, node_path

Node = Tag


class Confidence(IntEnum):
    LOW = 1
    MEDIUM = 2
    HIGH = 3

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, value: "str | Confidence") -> "Confidence":
        if isinstance(value, cls):
            return value
        text = str(value).strip().upper()
        if text not in cls.__members__:
            raise ValueError(f"unknown confidence {value!r} (expected low, medium, high)")
        return cls[text]


class DetectionMethod(str, Enum):
    EXPLICIT_MARKER = "explicit-marker"
    NATIVE_CONSTRUCT = "native-construct"
    HEURISTIC = "heuristic"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def node_to_dict(node: Tag | None) -> dict[str, str] | None:
    if node is None:
        return None
    return {"tag": node.name, "selector": element_selector(node), "path": node_path(node)}


def _related_to_dict(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, Tag):
        return node_to_dict(value)
    return [node_to_dict(n) for n in value]


@dataclass
class Issue:
    rule_id: str
    severity: Severity
    message: str
    suggestion: str | None = None
    node: Tag | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"severity": self.severity.value, "message": self.message}
        if self.suggestion is not None:
            out["suggestion"] = self.suggestion
        out["ruleId"] = self.rule_id
        if self.node is not None:
            out["element"] = node_to_dict(self.node)
        return out


@dataclass
class Match:
    type: str
    anchor: Tag
    confidence: Confidence
    detection_method: DetectionMethod
    related_nodes: dict[str, list[Tag] | Tag | None] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)
    issues: list[Issue] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "confidence": self.confidence.label,
            "detectionMethod": self.detection_method.value,
            "element": node_to_dict(self.anchor),
            "issues": [issue.to_dict() for issue in self.issues],
            "relatedElements": {_camel(k): _related_to_dict(v) for k, v in self.related_nodes.items()},
            "metadata": {_camel(k): v for k, v in self.metadata.items()},
        }


@dataclass(frozen=True)
class Summary:
    patterns_found: int = 0
    errors: int = 0
    warnings: int = 0
    info: int = 0

    @classmethod
    def from_matches(cls, matches: Iterable[Match]) -> "Summary":
        matches = list(matches)
        counts = {severity: 0 for severity in Severity}
        for match in matches:
            for issue in match.issues:
                counts[issue.severity] += 1
        return cls(
            patterns_found=len(matches),
            errors=counts[Severity.ERROR],
            warnings=counts[Severity.WARNING],
            info=counts[Severity.INFO],
        )

    def to_dict(self) -> dict[str, int]:
        return {
            "patternsFound": self.patterns_found,
            "errors": self.errors,
            "warnings": self.warnings,
            "info": self.info,
        }


@dataclass
class AnalysisResult:
    summary: Summary
    patterns: list[Match] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "AnalysisResult":
        return cls(summary=Summary(), patterns=[])

    @classmethod
    def from_matches(cls, matches: Iterable[Match]) -> "AnalysisResult":
        patterns = list(matches)
        return cls(summary=Summary.from_matches(patterns), patterns=patterns)

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary.to_dict(),
            "patterns": [match.to_dict() for match in self.patterns],
        }


def _config_get(data: Mapping[str, Any], name: str) -> Any:
    for key in (name, _camel(name), name.replace("_", "-")):
        if key in data:
            return data[key]
    return None


@dataclass(frozen=True)
class AnalyzerConfig:
    enabled_types: tuple[str, ...] = ()
    min_confidence: Confidence = Confidence.LOW
    include_suggestions: bool = True

    def __post_init__(self) -> None:
        enabled = self.enabled_types or ()
        if isinstance(enabled, str):
            enabled = (enabled,)
        enabled = tuple(enabled)
        if not all(isinstance(name, str) for name in enabled):
            raise ValueError(f"enabled_types must be a list of strings, got {enabled!r}")
        if not isinstance(self.include_suggestions, bool):
            raise ValueError(f"include_suggestions must be a boolean, got {self.include_suggestions!r}")
        # frozen dataclass
        object.__setattr__(self, "enabled_types", enabled)
        object.__setattr__(self, "min_confidence", Confidence.parse(self.min_confidence))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "AnalyzerConfig":
        data = data or {}
        values = {}
        for name in ("enabled_types", "min_confidence", "include_suggestions"):
            value = _config_get(data, name)
            if value is not None:
                values[name] = value
        return cls(**values)

    def allows(self, type_name: str) -> bool:
        return not self.enabled_types or type_name in self.enabled_types


class ScanOutcome:
    """Outcome of one scan session call; `result` is empty unless completed."""

    ok = False

    @property
    def result(self) -> AnalysisResult:
        return AnalysisResult.empty()


@dataclass
class ScanCompleted(ScanOutcome):
    analysis: AnalysisResult
    ok: bool = field(default=True, init=False)

    @property
    def result(self) -> AnalysisResult:
        return self.analysis


@dataclass
class ScanFailed(ScanOutcome):
    reason: str
    error: BaseException | None = None


@dataclass
class ScanSkipped(ScanOutcome):
    reason: str = "scan already in progress"
