# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
"""Structural queries over a parsed document tree.

Nodes are `bs4.element.Tag` objects. bs4 compares tags by markup, so every
identity test in here uses `is`.
"""
from __future__ import annotations

import logging
import re
from typing import Callable, Iterator

from bs4 import BeautifulSoup
from bs4.element import Tag

from .. import standards

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_FORM_CONTROLS = {"button", "input", "select", "textarea"}


def is_element(obj: object) -> bool:
    return isinstance(obj, Tag) and not isinstance(obj, BeautifulSoup)


def iter_elements(root: Tag, *, include_self: bool = True) -> Iterator[Tag]:
    """Yield elements under `root` in document order."""
    if include_self and is_element(root):
        yield root
    for node in root.descendants:
        if isinstance(node, Tag):
            yield node


def attr_text(node: Tag, name: str) -> str | None:
    value = node.get(name)
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return " ".join(str(v) for v in value)
    return str(value)


def parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    m = _LEADING_INT.match(value)
    return int(m.group(1)) if m else None


def class_tokens(node: Tag) -> list[str]:
    return [tok.lower() for tok in (attr_text(node, "class") or "").split() if tok]


def text_content(node: Tag) -> str:
    return node.get_text()


def owner_document(node: Tag) -> Tag:
    top = node
    for parent in node.parents:
        top = parent
    return top


def element_by_id(node: Tag, element_id: str) -> Tag | None:
    if not element_id:
        return None
    for candidate in iter_elements(owner_document(node)):
        if candidate.get("id") == element_id:
            return candidate
    return None


def contains(ancestor: Tag, node: Tag) -> bool:
    if node is ancestor:
        return True
    return any(parent is ancestor for parent in node.parents)


def ancestors(node: Tag) -> list[Tag]:
    out = []
    for parent in node.parents:
        if isinstance(parent, BeautifulSoup):
            break
        out.append(parent)
    return out


def common_ancestor(first: Tag, second: Tag) -> Tag | None:
    chain = [first, *ancestors(first)]
    for candidate in [second, *ancestors(second)]:
        if any(candidate is seen for seen in chain):
            return candidate
    return None


def closest(node: Tag, tag_name: str) -> Tag | None:
    for candidate in [node, *ancestors(node)]:
        if candidate.name == tag_name:
            return candidate
    return None


def inline_style(node: Tag) -> dict[str, str]:
    out: dict[str, str] = {}
    for decl in (attr_text(node, "style") or "").split(";"):
        prop, sep, value = decl.partition(":")
        if not sep:
            continue
        out[prop.strip().lower()] = value.strip().lower()
    return out


def is_visible(node: Tag) -> bool:
    """Attribute-level visibility; ancestors and stylesheets are not consulted."""
    if node.has_attr("hidden"):
        return False
    if attr_text(node, "aria-hidden") == "true":
        return False
    style = inline_style(node)
    if style.get("display") == "none" or style.get("visibility") == "hidden":
        return False
    hidden = {str(c).lower() for c in standards.get("hidden_classes")}
    return not any(tok in hidden for tok in class_tokens(node))


def is_explicitly_hidden(node: Tag) -> bool:
    return not is_visible(node)


def is_offscreen(node: Tag) -> bool:
    style = inline_style(node)
    if style.get("position") in {"absolute", "fixed"}:
        left = parse_int(style.get("left")) or 0
        top = parse_int(style.get("top")) or 0
        if left < -1000 or top < -1000:
            return True
    clip = style.get("clip", "").replace(" ", "").replace("px", "")
    if clip == "rect(0,0,0,0)":
        return True
    return style.get("clip-path", "").replace(" ", "") == "inset(50%)"


def _in_tab_sequence(node: Tag) -> bool:
    tag = node.name
    if tag == "a" and node.has_attr("href"):
        return True
    if tag in _FORM_CONTROLS and not node.has_attr("disabled"):
        if tag == "input" and (attr_text(node, "type") or "").strip().lower() == "hidden":
            return False
        return True
    tabindex = attr_text(node, "tabindex")
    if tabindex is not None and tabindex.strip() != "-1":
        return True
    if attr_text(node, "contenteditable") == "true":
        return True
    if tag in {"audio", "video"} and node.has_attr("controls"):
        return True
    return tag == "details"


def focusable_descendants(container: Tag) -> list[Tag]:
    # No visibility filter: dialogs and menus are usually hidden until opened.
    return [n for n in iter_elements(container, include_self=False) if _in_tab_sequence(n)]


def descendants_matching(root: Tag, predicate: Callable[[Tag], bool]) -> list[Tag]:
    return [n for n in iter_elements(root, include_self=False) if predicate(n)]


def find_by_attribute_value(root: Tag, name: str, value: str) -> list[Tag]:
    if not isinstance(name, str) or not name.strip() or value is None:
        logger.warning("Ignoring malformed attribute query %r=%r", name, value)
        return []
    return descendants_matching(root, lambda n: attr_text(n, name) == value)


def select(root: Tag, selector: str) -> list[Tag]:
    try:
        return list(root.select(selector))
    except Exception as exc:
        logger.warning("Invalid selector %r: %s", selector, exc)
        return []


def select_one(root: Tag, selector: str) -> Tag | None:
    try:
        return root.select_one(selector)
    except Exception as exc:
        logger.warning("Invalid selector %r: %s", selector, exc)
        return None


def element_selector(node: Tag) -> str:
    parts = [node.name or ""]
    element_id = attr_text(node, "id")
    tokens = (attr_text(node, "class") or "").split()
    if element_id:
        parts.append(f"#{element_id}")
    elif tokens:
        parts.append(f".{tokens[0]}")
    role = attr_text(node, "role")
    if role:
        parts.append(f'[role="{role}"]')
    return "".join(parts)


def node_path(node: Tag) -> str:
    segments: list[str] = []
    current: Tag | None = node
    while current is not None and is_element(current):
        parent = current.parent
        idx = 1
        if parent is not None:
            for sibling in parent.children:
                if sibling is current:
                    break
                if isinstance(sibling, Tag):
                    idx += 1
        segments.append(f"{current.name}[{idx}]")
        current = parent
    return "/" + "/".join(reversed(segments))
