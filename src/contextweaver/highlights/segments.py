"""Offset mapper: annotation ranges to display segments.

Turns a document's raw text plus a list of ``[position_start, position_end)``
annotation ranges into an ordered list of non-overlapping segments, each
either plain or highlighted. Concatenating the segment texts reproduces the
slice of the document they cover, so the rendered view and the stored
offsets share one coordinate space.

Annotation coordinates are treated as best-effort: they are clamped to the
document and overlaps are trimmed against what has already been emitted.
"""

# Pattern: Functional Core

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


class AnnotationRange(Protocol):
    """Anything with stored start/end offsets (DB rows, test stubs)."""

    @property
    def position_start(self) -> int: ...

    @property
    def position_end(self) -> int: ...


@dataclass(frozen=True)
class Segment:
    """A contiguous slice of document text, plain or highlighted.

    Attributes:
        text: The slice of the document content.
        start: Offset of the first character in the document.
        end: Offset one past the last character.
        annotation: The annotation drawn over this slice, None when plain.
    """

    text: str
    start: int
    end: int
    annotation: AnnotationRange | None = None

    @property
    def highlighted(self) -> bool:
        return self.annotation is not None


def _clamp(value: int, length: int) -> int:
    return max(0, min(value, length))


def render_segments(
    content: str,
    annotations: Sequence[AnnotationRange],
) -> list[Segment]:
    """Split *content* into plain and highlighted segments.

    Annotations are ordered by ``position_start``; equal starts keep their
    input order. Each highlight starts at the later of its own start and the
    end of the previous highlight, so overlapping text is emitted once and
    attributed to the annotation that reached it first. Zero-length
    highlights are dropped.

    Args:
        content: The document's raw text.
        annotations: Stored annotation ranges for this document.

    Returns:
        Segments in document order. With no annotations, a single plain
        segment holding all of *content* (even when it is empty).
    """
    length = len(content)
    if not annotations:
        return [Segment(text=content, start=0, end=length)]

    # sorted() is stable: equal starts stay in insertion order
    ordered = sorted(annotations, key=lambda a: a.position_start)

    segments: list[Segment] = []
    cursor = 0
    for ann in ordered:
        start = _clamp(ann.position_start, length)
        end = _clamp(ann.position_end, length)
        if (start, end) != (ann.position_start, ann.position_end):
            logger.debug(
                "Clamped annotation range [%d, %d) to [%d, %d) (length %d)",
                ann.position_start,
                ann.position_end,
                start,
                end,
                length,
            )

        start = max(start, cursor)
        if end <= start:
            continue

        if start > cursor:
            segments.append(
                Segment(text=content[cursor:start], start=cursor, end=start)
            )
        segments.append(
            Segment(text=content[start:end], start=start, end=end, annotation=ann)
        )
        cursor = end

    if cursor < length or not segments:
        segments.append(Segment(text=content[cursor:], start=cursor, end=length))

    return segments
