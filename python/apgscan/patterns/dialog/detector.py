from __future__ import annotations

from bs4.element import Tag

from ...query.dom import (
    attr_text,
    class_tokens,
    focusable_descendants,
    is_element,
    iter_elements,
    owner_document,
    text_content,
)
from ...types import Confidence, DetectionMethod, Match

DIALOG_ROLES = {"dialog", "alertdialog"}
DISMISS_WORDS = ("close", "dismiss", "cancel")
DISMISS_ATTRIBUTES = ("data-dismiss", "data-bs-dismiss", "data-close")
OVERLAY_WORDS = ("backdrop", "overlay", "mask")
TARGET_ATTRIBUTES = ("data-target", "data-bs-target")


def _explicit_role(node: Tag) -> str | None:
    tokens = (attr_text(node, "role") or "").split()
    return tokens[0].lower() if tokens else None


def _token_mentions(node: Tag, words: tuple[str, ...]) -> bool:
    return any(word in token for token in class_tokens(node) for word in words)


class DialogDetector:
    """Finds dialog and alertdialog candidates under a root node."""

    type_name = "dialog"

    def detect_all(self, root: Tag) -> list[Match]:
        matches = self._detect_explicit(root)
        matches.extend(self._detect_native(root))
        # Heuristic pass (overlay containers without markers) is not implemented.
        return matches

    def _detect_explicit(self, root: Tag) -> list[Match]:
        return [
            self._build_match(node, DetectionMethod.EXPLICIT_MARKER, Confidence.HIGH)
            for node in iter_elements(root)
            if _explicit_role(node) in DIALOG_ROLES
        ]

    def _detect_native(self, root: Tag) -> list[Match]:
        return [
            self._build_match(node, DetectionMethod.NATIVE_CONSTRUCT, Confidence.HIGH)
            for node in iter_elements(root)
            if node.name == "dialog"
        ]

    def _build_match(self, anchor: Tag, method: DetectionMethod, confidence: Confidence) -> Match:
        overlay = self.find_overlay(anchor)
        return Match(
            type=self.type_name,
            anchor=anchor,
            confidence=confidence,
            detection_method=method,
            related_nodes={
                "triggers": self.find_triggers(anchor),
                "dismiss_controls": self.find_dismiss_controls(anchor),
                "overlay": overlay,
                "focusable_descendants": focusable_descendants(anchor),
            },
            metadata={
                "is_modal": attr_text(anchor, "aria-modal") == "true",
                "has_overlay": overlay is not None,
                "is_alert": _explicit_role(anchor) == "alertdialog",
            },
        )

    def find_triggers(self, anchor: Tag) -> list[Tag]:
        dialog_id = attr_text(anchor, "id")
        if not dialog_id:
            return []
        targets = {dialog_id, f"#{dialog_id}"}
        triggers = []
        for node in iter_elements(owner_document(anchor)):
            if node is anchor:
                continue
            if attr_text(node, "aria-controls") == dialog_id or any(
                attr_text(node, name) in targets for name in TARGET_ATTRIBUTES
            ):
                triggers.append(node)
        return triggers

    def find_dismiss_controls(self, anchor: Tag) -> list[Tag]:
        controls = []
        for node in iter_elements(anchor, include_self=False):
            if node.name != "button" and _explicit_role(node) != "button":
                continue
            text = text_content(node).lower()
            label = (attr_text(node, "aria-label") or "").lower()
            if (
                any(word in text or word in label for word in DISMISS_WORDS)
                or _token_mentions(node, DISMISS_WORDS)
                or any(node.has_attr(name) for name in DISMISS_ATTRIBUTES)
            ):
                controls.append(node)
        return controls

    def find_overlay(self, anchor: Tag) -> Tag | None:
        parent = anchor.parent
        if parent is None:
            return None
        for sibling in parent.children:
            if sibling is anchor or not is_element(sibling):
                continue
            if _token_mentions(sibling, OVERLAY_WORDS):
                return sibling
        return None
