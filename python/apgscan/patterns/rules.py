from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from ..types import Issue, Match, Severity


@dataclass(frozen=True)
class Rule:
    id: str
    severity: Severity
    predicate: Callable[[Match], bool]
    message: str
    suggestion: str | None = None
    description: str = ""

    def check(self, match: Match) -> Issue | None:
        if self.predicate(match):
            return None
        return Issue(
            rule_id=self.id,
            severity=self.severity,
            message=self.message,
            suggestion=self.suggestion,
            node=match.anchor,
        )

    def to_dict(self) -> dict[str, str | None]:
        return {
            "id": self.id,
            "severity": self.severity.value,
            "description": self.description or self.message,
            "message": self.message,
            "suggestion": self.suggestion,
        }


class RuleSetValidator:
    """Evaluates every rule of a rule set against a match.

    There is no short-circuiting: all failing rules surface together, in
    declaration order.
    """

    def __init__(self, rules: Sequence[Rule]) -> None:
        ids = [rule.id for rule in rules]
        if len(set(ids)) != len(ids):
            raise ValueError(f"duplicate rule ids in rule set: {ids}")
        self.rules = tuple(rules)

    def validate(self, match: Match) -> list[Issue]:
        issues = []
        for rule in self.rules:
            issue = rule.check(match)
            if issue is not None:
                issues.append(issue)
        return issues
