"""Tree view rendering for decoded JSON."""

from j2j_studio.render.tree import (
    NO_DATA_PLACEHOLDER,
    UNDEFINED,
    render,
    render_output,
    render_rich,
    render_spans,
)

__all__ = [
    "NO_DATA_PLACEHOLDER",
    "UNDEFINED",
    "render",
    "render_output",
    "render_rich",
    "render_spans",
]
