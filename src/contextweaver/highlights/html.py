"""Serialise segments to HTML for the document viewer.

Plain segments become ``<span>`` and highlighted segments become ``<mark>``
carrying the annotation id, the note as a tooltip and the resolved colour.
Elements are joined with no whitespace between them, so the text nodes the
browser builds concatenate to exactly the document content. The viewer
relies on that when it converts a DOM selection back into offsets.
"""

from __future__ import annotations

import html as html_module
from typing import TYPE_CHECKING, Protocol

from contextweaver.highlights.colors import resolve_highlight_color

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from contextweaver.highlights.segments import Segment

HIGHLIGHT_CLASS = "cw-highlight"
PLAIN_CLASS = "cw-text"


class RenderableAnnotation(Protocol):
    """The annotation fields the HTML renderer reads."""

    @property
    def id(self) -> UUID | str: ...

    @property
    def color(self) -> str | None: ...

    @property
    def content(self) -> str | None: ...


def _attr(value: object) -> str:
    return html_module.escape(str(value), quote=True)


def _escape_text(text: str) -> str:
    # The HTML parser folds a raw CR into LF; &#13; survives as CR.
    return html_module.escape(text, quote=False).replace("\r", "&#13;")


def render_segment_html(segment: Segment) -> str:
    """Render one segment as a ``<span>`` or ``<mark>`` element."""
    text = _escape_text(segment.text)
    if segment.annotation is None:
        return f'<span class="{PLAIN_CLASS}" data-start="{segment.start}">{text}</span>'

    ann: RenderableAnnotation = segment.annotation  # type: ignore[assignment]
    background = resolve_highlight_color(getattr(ann, "color", None))
    note = getattr(ann, "content", None) or ""
    return (
        f'<mark class="{HIGHLIGHT_CLASS}"'
        f' data-annotation-id="{_attr(getattr(ann, "id", ""))}"'
        f' data-start="{segment.start}"'
        f' title="{_attr(note)}"'
        f' style="background-color: {background}">'
        f"{text}</mark>"
    )


def render_segments_html(segments: Sequence[Segment]) -> str:
    """Render all segments as one HTML fragment with no separators."""
    return "".join(render_segment_html(segment) for segment in segments)
