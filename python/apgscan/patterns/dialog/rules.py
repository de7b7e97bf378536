"""Dialog rule set.

Based on the APG dialog (modal) pattern:
https://www.w3.org/WAI/ARIA/apg/patterns/dialog-modal/
"""
from __future__ import annotations

from ...query.aria import has_accessible_name
from ...query.dom import is_visible
from ...types import Match, Severity
from ..rules import Rule, RuleSetValidator


def _modal_flag_consistent(match: Match) -> bool:
    # Only dialogs that look modal (an overlay sibling exists) need aria-modal.
    if not match.metadata["has_overlay"]:
        return True
    return match.metadata["is_modal"]


DIALOG_RULES: tuple[Rule, ...] = (
    Rule(
        id="accessible-name",
        severity=Severity.ERROR,
        predicate=lambda m: has_accessible_name(m.anchor),
        message="Dialog must have an accessible name",
        suggestion="Add aria-label or aria-labelledby attribute to the dialog",
        description="Dialogs are announced by name when they open.",
    ),
    Rule(
        id="dismiss-control-present",
        severity=Severity.ERROR,
        predicate=lambda m: len(m.related_nodes["dismiss_controls"]) > 0,
        message="Dialog should contain a close button",
        suggestion='Add a button with aria-label="Close" or visible close text',
    ),
    Rule(
        id="initially-hidden",
        severity=Severity.WARNING,
        predicate=lambda m: not is_visible(m.anchor),
        message="Dialog should be hidden initially",
        suggestion="Add the hidden attribute or display: none until the dialog opens",
    ),
    Rule(
        id="focusable-content",
        severity=Severity.ERROR,
        predicate=lambda m: len(m.related_nodes["focusable_descendants"]) > 0,
        message="Dialog contains no focusable elements",
        suggestion="Add at least one button, link, or input element",
        description="Focus moves into the dialog when it opens.",
    ),
    Rule(
        id="modal-flag-consistency",
        severity=Severity.WARNING,
        predicate=_modal_flag_consistent,
        message='Dialog appears to be modal but is missing aria-modal="true"',
        suggestion='Add aria-modal="true" if this dialog is modal',
    ),
    Rule(
        id="dismiss-control-labeled",
        severity=Severity.ERROR,
        predicate=lambda m: all(has_accessible_name(n) for n in m.related_nodes["dismiss_controls"]),
        message="Close button must have an accessible name",
        suggestion='Add aria-label="Close" or visible text to the close button',
    ),
)


class DialogValidator(RuleSetValidator):
    def __init__(self) -> None:
        super().__init__(DIALOG_RULES)
