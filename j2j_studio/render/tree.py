"""Tree rendering of decoded JSON values.

Renders any decoded JSON value as indented text made of type-tagged spans.
Traversal uses an explicit work stack, so arbitrarily deep values cannot
exhaust the interpreter stack; an optional ``max_depth`` turns excessive
nesting into a :class:`DepthExceededError` instead.

Sequence order and mapping insertion order are preserved exactly.
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from rich.text import Text

from j2j_studio.core.exceptions import DepthExceededError

Span = tuple[str, str]

NO_DATA_PLACEHOLDER = "No data to display"

TAG_STYLES: dict[str, str] = {
    "null": "magenta",
    "undefined": "dim italic",
    "string": "green",
    "number": "cyan",
    "boolean": "yellow",
    "key": "bold blue",
    "array": "bold",
    "object": "bold",
    "punct": "",
    "other": "red",
}


class _Undefined:
    """The absent-value sentinel, rendered distinctly from ``null``."""

    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "undefined"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()


@dataclass(frozen=True)
class _Pending:
    value: Any
    depth: int


def _scalar(value: Any) -> Span:
    if value is None:
        return ("null", "null")
    if value is UNDEFINED:
        return ("undefined", "undefined")
    if isinstance(value, bool):
        return ("true" if value else "false", "boolean")
    if isinstance(value, str):
        return (json.dumps(value, ensure_ascii=False), "string")
    if isinstance(value, int):
        return (str(value), "number")
    if isinstance(value, float):
        if math.isnan(value):
            return ("NaN", "number")
        if math.isinf(value):
            return ("Infinity" if value > 0 else "-Infinity", "number")
        return (repr(value), "number")
    return (str(value), "other")


def render_spans(
    value: Any,
    depth: int = 0,
    *,
    indent: int = 2,
    max_depth: int | None = None,
) -> list[Span]:
    """Render ``value`` as a list of ``(text, tag)`` spans.

    Args:
        value: A decoded JSON value (dicts, lists, str, int, float, bool,
            None) or UNDEFINED.
        depth: Indentation level of the value's own line. Nested lines are
            indented one unit deeper per level.
        indent: Spaces per indentation unit.
        max_depth: Maximum nesting below ``value``; None for unbounded.

    Raises:
        DepthExceededError: If the value nests deeper than ``max_depth``.
    """
    spans: list[Span] = []
    stack: list[_Pending | Span] = [_Pending(value, depth)]

    while stack:
        item = stack.pop()
        if isinstance(item, tuple):
            spans.append(item)
            continue

        current, level = item.value, item.depth
        if max_depth is not None and level - depth > max_depth:
            raise DepthExceededError(max_depth)

        inner = " " * (indent * (level + 1))
        outer = " " * (indent * level)

        if isinstance(current, (list, tuple)):
            if not current:
                spans.append(("[]", "array"))
                continue
            pieces: list[_Pending | Span] = [("[", "array"), ("\n", "punct")]
            last = len(current) - 1
            for i, element in enumerate(current):
                pieces.append((inner, "punct"))
                pieces.append(_Pending(element, level + 1))
                if i < last:
                    pieces.append((",", "punct"))
                pieces.append(("\n", "punct"))
            pieces.append((outer, "punct"))
            pieces.append(("]", "array"))
            stack.extend(reversed(pieces))
        elif isinstance(current, Mapping):
            if not current:
                spans.append(("{}", "object"))
                continue
            pieces = [("{", "object"), ("\n", "punct")]
            last = len(current) - 1
            for i, (key, element) in enumerate(current.items()):
                pieces.append((inner, "punct"))
                pieces.append((json.dumps(str(key), ensure_ascii=False), "key"))
                pieces.append((": ", "punct"))
                pieces.append(_Pending(element, level + 1))
                if i < last:
                    pieces.append((",", "punct"))
                pieces.append(("\n", "punct"))
            pieces.append((outer, "punct"))
            pieces.append(("}", "object"))
            stack.extend(reversed(pieces))
        else:
            spans.append(_scalar(current))

    return spans


def render(
    value: Any,
    depth: int = 0,
    *,
    indent: int = 2,
    max_depth: int | None = None,
) -> str:
    """Render ``value`` as indented plain text. See :func:`render_spans`."""
    return "".join(text for text, _ in render_spans(value, depth, indent=indent, max_depth=max_depth))


def render_rich(
    value: Any,
    depth: int = 0,
    *,
    indent: int = 2,
    max_depth: int | None = None,
) -> Text:
    """Render ``value`` as a styled rich Text."""
    text = Text()
    for chunk, tag in render_spans(value, depth, indent=indent, max_depth=max_depth):
        text.append(chunk, style=TAG_STYLES.get(tag, "") or None)
    return text


def render_output(
    output_text: str,
    *,
    indent: int = 2,
    max_depth: int | None = None,
) -> Text:
    """Render the output buffer for the tree view.

    Never raises for bad content: empty text, text that does not decode and
    values nested beyond ``max_depth`` produce a placeholder instead.
    """
    if not output_text.strip():
        return Text(NO_DATA_PLACEHOLDER, style="dim")

    try:
        decoded = json.loads(output_text)
    except ValueError as e:
        return Text(f"Invalid JSON: {e}", style="red")
    except RecursionError:
        return Text("Invalid JSON: nesting too deep to decode", style="red")

    try:
        return render_rich(decoded, 0, indent=indent, max_depth=max_depth)
    except DepthExceededError as e:
        return Text(f"Cannot display: {e}", style="red")
