"""Highlight core: offset mapping and selection translation.

Usage:
    from contextweaver.highlights import render_segments, translate_selection

    segments = render_segments(document.content, annotations)
    container = TextContainer.from_segments(segments, document_id=str(doc.id))
    selected = translate_selection(container, selection)
"""

from contextweaver.highlights.colors import (
    CONNECTION_TYPES,
    DEFAULT_CONNECTION_TYPE,
    DEFAULT_HIGHLIGHT_COLOR,
    HIGHLIGHT_BACKGROUNDS,
    ConnectionTypeInfo,
    HighlightColor,
    parse_highlight_color,
    resolve_connection_type,
    resolve_highlight_color,
)
from contextweaver.highlights.html import render_segments_html
from contextweaver.highlights.segments import AnnotationRange, Segment, render_segments
from contextweaver.highlights.selection import (
    SelectionPoint,
    SelectionRange,
    TextContainer,
    UserSelection,
    translate_for_document,
    translate_selection,
    utf16_to_index,
)

__all__ = [
    "CONNECTION_TYPES",
    "DEFAULT_CONNECTION_TYPE",
    "DEFAULT_HIGHLIGHT_COLOR",
    "HIGHLIGHT_BACKGROUNDS",
    "AnnotationRange",
    "ConnectionTypeInfo",
    "HighlightColor",
    "Segment",
    "SelectionPoint",
    "SelectionRange",
    "TextContainer",
    "UserSelection",
    "parse_highlight_color",
    "render_segments",
    "render_segments_html",
    "resolve_connection_type",
    "resolve_highlight_color",
    "translate_for_document",
    "translate_selection",
    "utf16_to_index",
]
