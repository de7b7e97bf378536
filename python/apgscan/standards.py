# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
"""Role and visibility tables consulted by the node query primitives.

The built-in tables follow HTML-AAM implicit role mappings for the elements
the pattern detectors care about. Projects can extend them at runtime (for
example to teach the visibility check about a framework's hidden class) with
`configure_standards`, and undo that with `reset_standards`.
"""
from __future__ import annotations

import copy
from typing import Any, Mapping

_ORIGINALS: dict[str, Any] = {
    # Tags whose implicit role depends on context (a, img, input, section,
    # select) are resolved in query.aria and are absent here.
    "implicit_roles": {
        "article": "article",
        "aside": "complementary",
        "button": "button",
        "dialog": "dialog",
        "footer": "contentinfo",
        "form": "form",
        "h1": "heading",
        "h2": "heading",
        "h3": "heading",
        "h4": "heading",
        "h5": "heading",
        "h6": "heading",
        "header": "banner",
        "li": "listitem",
        "main": "main",
        "nav": "navigation",
        "ol": "list",
        "table": "table",
        "textarea": "textbox",
        "ul": "list",
    },
    "input_type_roles": {
        "button": "button",
        "checkbox": "checkbox",
        "email": "textbox",
        "number": "spinbutton",
        "radio": "radio",
        "range": "slider",
        "reset": "button",
        "search": "searchbox",
        "submit": "button",
        "tel": "textbox",
        "text": "textbox",
        "url": "textbox",
    },
    "hidden_classes": [
        "hidden",
        "hide",
        "d-none",
        "invisible",
        "sr-only",
        "visually-hidden",
    ],
}

_current: dict[str, Any] = copy.deepcopy(_ORIGINALS)


def _deep_merge(target: Mapping[str, Any], source: Mapping[str, Any]) -> dict[str, Any]:
    out = dict(target)
    for key, value in source.items():
        if isinstance(value, Mapping) and isinstance(out.get(key), Mapping):
            out[key] = _deep_merge(out[key], value)
        elif isinstance(value, Mapping):
            out[key] = _deep_merge({}, value)
        else:
            out[key] = copy.deepcopy(value)
    return out


def table_names() -> list[str]:
    return sorted(_ORIGINALS)


def get(name: str) -> Any:
    if name not in _current:
        raise KeyError(f"unknown standards table: {name}")
    return _current[name]


def configure_standards(overrides: Mapping[str, Any]) -> None:
    """Merge `overrides` into the active tables.

    Nested mappings merge key by key; lists and scalars replace the existing
    value outright.
    """
    unknown = sorted(set(overrides) - set(_ORIGINALS))
    if unknown:
        raise ValueError(f"unknown standards table(s): {', '.join(unknown)}")
    for name, value in overrides.items():
        if isinstance(value, Mapping) and isinstance(_current[name], Mapping):
            _current[name] = _deep_merge(_current[name], value)
        else:
            _current[name] = copy.deepcopy(value)


def reset_standards() -> None:
    for name in _ORIGINALS:
        _current[name] = copy.deepcopy(_ORIGINALS[name])
