from __future__ import annotations

from .aria import (
    accessible_name,
    aria_level,
    find_label,
    has_accessible_name,
    is_disabled,
    is_focusable,
    is_required,
    role,
)
from .dom import (
    ancestors,
    attr_text,
    class_tokens,
    common_ancestor,
    contains,
    descendants_matching,
    element_by_id,
    element_selector,
    find_by_attribute_value,
    focusable_descendants,
    is_explicitly_hidden,
    is_offscreen,
    is_visible,
    iter_elements,
    node_path,
    owner_document,
    select,
    select_one,
    text_content,
)

__all__ = [
    "accessible_name",
    "ancestors",
    "aria_level",
    "attr_text",
    "class_tokens",
    "common_ancestor",
    "contains",
    "descendants_matching",
    "element_by_id",
    "element_selector",
    "find_by_attribute_value",
    "find_label",
    "focusable_descendants",
    "has_accessible_name",
    "is_disabled",
    "is_explicitly_hidden",
    "is_focusable",
    "is_offscreen",
    "is_required",
    "is_visible",
    "iter_elements",
    "node_path",
    "owner_document",
    "role",
    "select",
    "select_one",
    "text_content",
]
