from __future__ import annotations

from .detector import DialogDetector
from .rules import DIALOG_RULES, DialogValidator

__all__ = ["DIALOG_RULES", "DialogDetector", "DialogValidator"]
