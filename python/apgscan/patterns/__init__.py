"""Pattern registry.

Each pattern type pairs a detector (finds candidates) with a validator
(checks them). Adding a pattern type is a `register` call; the analyzer and
scan session never change.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Protocol

from bs4.element import Tag

from ..types import Issue, Match
from .dialog import DIALOG_RULES, DialogDetector, DialogValidator
from .rules import Rule, RuleSetValidator

logger = logging.getLogger(__name__)


class Detector(Protocol):
    def detect_all(self, root: Tag) -> list[Match]: ...


class Validator(Protocol):
    def validate(self, match: Match) -> list[Issue]: ...


@dataclass(frozen=True)
class PatternEntry:
    type_name: str
    detector: Detector
    validator: Validator


class PatternRegistry:
    def __init__(self) -> None:
        self._entries: dict[str, PatternEntry] = {}

    def register(
        self,
        type_name: str,
        detector: Detector,
        validator: Validator,
        *,
        replace: bool = False,
    ) -> PatternEntry:
        name = str(type_name).strip()
        if not name:
            raise ValueError("pattern type name must not be empty")
        if name in self._entries and not replace:
            raise ValueError(f"pattern type {name!r} is already registered")
        entry = PatternEntry(type_name=name, detector=detector, validator=validator)
        self._entries[name] = entry
        logger.debug("Registered pattern type %s", name)
        return entry

    def unregister(self, type_name: str) -> None:
        self._entries.pop(type_name, None)

    def get(self, type_name: str) -> PatternEntry:
        try:
            return self._entries[type_name]
        except KeyError:
            raise KeyError(f"unknown pattern type: {type_name}") from None

    def types(self) -> list[str]:
        return list(self._entries)

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._entries

    def __iter__(self) -> Iterator[PatternEntry]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)


def default_registry() -> PatternRegistry:
    registry = PatternRegistry()
    registry.register("dialog", DialogDetector(), DialogValidator())
    return registry


__all__ = [
    "DIALOG_RULES",
    "Detector",
    "DialogDetector",
    "DialogValidator",
    "PatternEntry",
    "PatternRegistry",
    "Rule",
    "RuleSetValidator",
    "Validator",
    "default_registry",
]
