# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
"""ARIA semantics for single nodes: names, roles and interaction state.

This is a reduced form of the accessible name computation
(https://www.w3.org/TR/accname-1.2/); it covers the sources authors actually
use on dialogs and their controls.
"""
from __future__ import annotations

import re

from bs4.element import Tag

from .. import standards
from .dom import attr_text, closest, element_by_id, iter_elements, owner_document, parse_int, text_content

_HEADING = re.compile(r"^h([1-6])$")
_LABELABLE = {"input", "textarea", "select"}
_DISABLEABLE = {"button", "fieldset", "input", "optgroup", "option", "select", "textarea"}


def _id_tokens(value: str | None) -> list[str]:
    return [tok for tok in str(value or "").split() if tok.strip()]


def find_label(node: Tag) -> Tag | None:
    labelledby = attr_text(node, "aria-labelledby")
    if labelledby:
        return element_by_id(node, labelledby.strip())
    element_id = attr_text(node, "id")
    if element_id:
        for candidate in iter_elements(owner_document(node)):
            if candidate.name == "label" and attr_text(candidate, "for") == element_id:
                return candidate
    return closest(node, "label")


def accessible_name(node: Tag) -> str:
    tag = node.name

    labelledby = _id_tokens(attr_text(node, "aria-labelledby"))
    if labelledby:
        texts = []
        for token in labelledby:
            ref = element_by_id(node, token)
            text = text_content(ref).strip() if ref is not None else ""
            if text:
                texts.append(text)
        if texts:
            return " ".join(texts)

    aria_label = (attr_text(node, "aria-label") or "").strip()
    if aria_label:
        return aria_label

    if tag in _LABELABLE:
        label = find_label(node)
        if label is not None and text_content(label).strip():
            return text_content(label).strip()

    if tag == "img":
        alt = attr_text(node, "alt")
        if alt is not None:
            return alt.strip()

    title = (attr_text(node, "title") or "").strip()
    if title:
        return title

    if tag in {"button", "a"}:
        text = text_content(node).strip()
        if text:
            return text

    if tag in {"input", "textarea"}:
        placeholder = (attr_text(node, "placeholder") or "").strip()
        if placeholder:
            return placeholder

    return ""


def has_accessible_name(node: Tag) -> bool:
    return accessible_name(node) != ""


def _input_role(node: Tag) -> str | None:
    input_type = (attr_text(node, "type") or "text").strip().lower() or "text"
    if input_type == "hidden":
        return None
    return standards.get("input_type_roles").get(input_type, "textbox")


def role(node: Tag) -> str | None:
    explicit = (attr_text(node, "role") or "").split()
    if explicit:
        return explicit[0]

    tag = node.name
    if tag == "a":
        return "link" if node.has_attr("href") else None
    if tag == "img":
        return "presentation" if attr_text(node, "alt") == "" else "img"
    if tag == "input":
        return _input_role(node)
    if tag == "section":
        return "region" if has_accessible_name(node) else None
    if tag == "select":
        return "listbox" if node.has_attr("multiple") else "combobox"
    return standards.get("implicit_roles").get(tag)


def is_disabled(node: Tag) -> bool:
    if node.name in _DISABLEABLE and node.has_attr("disabled"):
        return True
    if attr_text(node, "aria-disabled") == "true":
        return True
    fieldset = closest(node, "fieldset")
    if fieldset is not None and fieldset.has_attr("disabled"):
        legend = closest(node, "legend")
        if legend is None or not any(p is fieldset for p in legend.parents):
            return True
    return False


def is_focusable(node: Tag) -> bool:
    tag = node.name
    if tag in _DISABLEABLE and node.has_attr("disabled"):
        return False

    tabindex = attr_text(node, "tabindex")
    if tabindex is not None:
        # tabindex="-1" is still programmatically focusable
        return parse_int(tabindex) is not None

    if tag in {"a", "area"}:
        return node.has_attr("href")
    if tag in {"button", "input", "select", "textarea"}:
        return True
    if attr_text(node, "contenteditable") == "true":
        return True
    if tag in {"audio", "video"} and node.has_attr("controls"):
        return True
    return tag == "details"


def is_required(node: Tag) -> bool:
    return node.has_attr("required") or attr_text(node, "aria-required") == "true"


def aria_level(node: Tag) -> int | None:
    level = parse_int(attr_text(node, "aria-level"))
    if level is not None and level >= 1:
        return level
    m = _HEADING.match(node.name or "")
    return int(m.group(1)) if m else None
