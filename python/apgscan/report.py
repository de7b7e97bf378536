# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
"""Human-readable and JSON renderings of analysis results."""
import json
from pathlib import Path

from .types import Severity

RESULT_SCHEMA = "apgscan.result.v1"
ERROR_SCHEMA = "apgscan.error.v1"


def json_default(obj):
    """Best-effort JSON serializer fallback for CLI payload objects."""
    if isinstance(obj, Path):
        return str(obj)
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    return str(obj)


def json_dumps(payload, indent=None):
    return json.dumps(payload, ensure_ascii=True, indent=indent, default=json_default)


def result_payload(result, source=None, ok=True):
    payload = {"schema": RESULT_SCHEMA, "ok": ok}
    if source is not None:
        payload["source"] = str(source)
    payload.update(result.to_dict())
    return payload


def format_summary(summary):
    return (
        f"{summary.patterns_found} pattern(s), {summary.errors} error(s), "
        f"{summary.warnings} warning(s), {summary.info} info"
    )


def format_result(result, source=None):
    lines = []
    if source is not None:
        lines.append(f"[scan] {source}")
    for match in result.patterns:
        element = match.to_dict()["element"]
        lines.append(
            f"[{match.type}] {element['selector']} at {element['path']} "
            f"({match.confidence.label}, {match.detection_method.value})"
        )
        if not match.issues:
            lines.append("  [ok] no issues")
        for issue in match.issues:
            lines.append(f"  [{issue.severity.value}] {issue.rule_id}: {issue.message}")
            if issue.suggestion:
                lines.append(f"      fix: {issue.suggestion}")
    lines.append(f"[summary] {format_summary(result.summary)}")
    return "\n".join(lines)


def fails_threshold(summary, fail_on):
    """True when the summary meets the `--fail-on` level (error, warning or never)."""
    if fail_on == "never":
        return False
    if fail_on == Severity.WARNING.value:
        return summary.errors + summary.warnings > 0
    return summary.errors > 0
