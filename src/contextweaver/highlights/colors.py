"""Fixed lookup tables for highlight colours and connection types.

Stored rows carry plain names (``"green"``, ``"supports"``). Display values
are resolved here by table lookup with an explicit default; nothing builds a
class name or style value from a stored string.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum

logger = logging.getLogger(__name__)


class HighlightColor(StrEnum):
    """Colours a user can pick for an annotation."""

    YELLOW = "yellow"
    GREEN = "green"
    BLUE = "blue"
    PINK = "pink"
    PURPLE = "purple"


DEFAULT_HIGHLIGHT_COLOR = HighlightColor.YELLOW

# Background values for <mark> elements and the colour picker swatches.
HIGHLIGHT_BACKGROUNDS: dict[HighlightColor, str] = {
    HighlightColor.YELLOW: "#fef08a",
    HighlightColor.GREEN: "#bbf7d0",
    HighlightColor.BLUE: "#bfdbfe",
    HighlightColor.PINK: "#fbcfe8",
    HighlightColor.PURPLE: "#e9d5ff",
}


def parse_highlight_color(name: str | None) -> HighlightColor | None:
    """Return the enum member for *name*, or None if it is not a known colour."""
    if not name:
        return None
    try:
        return HighlightColor(name.strip().lower())
    except ValueError:
        return None


def resolve_highlight_color(name: str | None) -> str:
    """Map a stored colour name to its display value.

    Unknown or missing names fall back to the yellow background.
    """
    color = parse_highlight_color(name)
    if color is None:
        if name:
            logger.debug("Unknown highlight colour %r, using default", name)
        color = DEFAULT_HIGHLIGHT_COLOR
    return HIGHLIGHT_BACKGROUNDS[color]


@dataclass(frozen=True)
class ConnectionTypeInfo:
    """Display metadata for a connection type."""

    value: str
    label: str
    description: str
    badge_classes: str


CONNECTION_TYPES: dict[str, ConnectionTypeInfo] = {
    info.value: info
    for info in (
        ConnectionTypeInfo(
            "related",
            "Related",
            "Documents share similar topics or themes",
            "bg-blue-100 text-blue-700",
        ),
        ConnectionTypeInfo(
            "supports",
            "Supports",
            "Target document supports source document",
            "bg-green-100 text-green-700",
        ),
        ConnectionTypeInfo(
            "contradicts",
            "Contradicts",
            "Documents present conflicting information",
            "bg-red-100 text-red-700",
        ),
        ConnectionTypeInfo(
            "expands",
            "Expands",
            "Target expands on ideas from source",
            "bg-purple-100 text-purple-700",
        ),
        ConnectionTypeInfo(
            "cites",
            "Cites",
            "Source document cites target document",
            "bg-orange-100 text-orange-700",
        ),
    )
}

DEFAULT_CONNECTION_TYPE = "related"


def resolve_connection_type(value: str | None) -> ConnectionTypeInfo:
    """Look up connection type metadata, falling back to ``related``."""
    return CONNECTION_TYPES.get(value or "", CONNECTION_TYPES[DEFAULT_CONNECTION_TYPE])
