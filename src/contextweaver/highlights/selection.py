"""Selection translator: rendered-view selection to document offsets.

The viewer renders a document as a run of segment elements, so a browser
selection is expressed against several text nodes. This module maps such a
selection back onto the single logical text stream of the document.

The browser reports each boundary point as ``(text node index, offset within
that node)``, counting text nodes in document order inside one document
container. ``TextContainer`` holds the same text nodes on the server side,
built either from the segments that were rendered or by walking the rendered
HTML, and ``translate_selection`` turns the two points into a
``[start, end)`` range over the document content.

Offsets inside a node are DOM offsets, counted in UTF-16 code units, while
document offsets are Python string indices. Characters outside the Basic
Multilingual Plane (most emoji) take two units in the browser and one
index here, so every node offset goes through ``utf16_to_index``.
"""

# Pattern: Functional Core

from __future__ import annotations

import bisect
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from selectolax.lexbor import LexborHTMLParser

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from contextweaver.highlights.segments import Segment

logger = logging.getLogger(__name__)

# Elements whose text never reaches the rendered view
_SKIP_TAGS = frozenset(("script", "style", "noscript", "template"))

_BMP_MAX = 0xFFFF


def utf16_to_index(text: str, units: int) -> int:
    """Index into *text* of a DOM offset counted in UTF-16 code units.

    Clamped to ``[0, len(text)]``. An offset that falls between the two
    halves of a surrogate pair resolves to the character after the pair.
    """
    if units <= 0:
        return 0
    count = 0
    for index, char in enumerate(text):
        if count >= units:
            return index
        count += 2 if ord(char) > _BMP_MAX else 1
    return len(text)


def utf16_length(text: str) -> int:
    """Length of *text* as the browser counts it."""
    return len(text) + sum(1 for char in text if ord(char) > _BMP_MAX)


@dataclass(frozen=True)
class SelectionPoint:
    """A boundary point: text node index plus UTF-16 offset inside that node."""

    node: int
    offset: int


@dataclass(frozen=True)
class UserSelection:
    """An explicit selection inside one document container.

    ``anchor`` is where the user started dragging and ``focus`` where they
    released, so ``focus`` may precede ``anchor`` for backward selections.
    """

    anchor: SelectionPoint
    focus: SelectionPoint
    document_id: str | None = None

    @property
    def is_collapsed(self) -> bool:
        return self.anchor == self.focus

    @classmethod
    def from_event(cls, args: Mapping[str, Any]) -> UserSelection | None:
        """Build a selection from a ``selection_made`` browser event payload.

        Expected shape::

            {"doc_id": "...", "anchor": {"node": 0, "offset": 3},
             "focus": {"node": 2, "offset": 1}}

        Returns None for malformed payloads.
        """
        points: list[SelectionPoint] = []
        for key in ("anchor", "focus"):
            raw = args.get(key)
            if not isinstance(raw, dict):
                return None
            node = raw.get("node")
            offset = raw.get("offset")
            # bool is an int subclass; reject it explicitly
            if (
                not isinstance(node, int)
                or not isinstance(offset, int)
                or isinstance(node, bool)
                or isinstance(offset, bool)
            ):
                return None
            points.append(SelectionPoint(node=node, offset=offset))

        doc_id = args.get("doc_id")
        return cls(
            anchor=points[0],
            focus=points[1],
            document_id=str(doc_id) if doc_id is not None else None,
        )


@dataclass(frozen=True)
class SelectionRange:
    """A selection translated into document coordinates."""

    text: str
    start: int
    end: int
    document_id: str | None = None


@dataclass(frozen=True)
class TextContainer:
    """The ordered text nodes of one rendered document.

    Attributes:
        nodes: Text node contents in document order (empty nodes excluded,
            matching what the browser creates).
        document_id: Identifier of the document this container renders.
    """

    nodes: tuple[str, ...]
    document_id: str | None = None
    _starts: tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        starts: list[int] = []
        total = 0
        for node in self.nodes:
            starts.append(total)
            total += len(node)
        object.__setattr__(self, "_starts", tuple(starts))

    @classmethod
    def from_texts(
        cls, texts: Iterable[str], document_id: str | None = None
    ) -> TextContainer:
        return cls(nodes=tuple(t for t in texts if t), document_id=document_id)

    @classmethod
    def from_segments(
        cls, segments: Iterable[Segment], document_id: str | None = None
    ) -> TextContainer:
        """Container for the text nodes produced by rendering *segments*."""
        return cls.from_texts((s.text for s in segments), document_id)

    @classmethod
    def from_html(cls, html: str, document_id: str | None = None) -> TextContainer:
        """Walk rendered HTML and collect its text nodes in document order."""
        if not html:
            return cls(nodes=(), document_id=document_id)

        tree = LexborHTMLParser(html)
        root = tree.body if tree.body is not None else tree.root
        texts: list[str] = []

        def _walk(node: Any) -> None:
            tag = node.tag
            if tag == "-text":
                texts.append(node.text_content or "")
                return
            if tag in _SKIP_TAGS:
                return
            child = node.child
            while child is not None:
                _walk(child)
                child = child.next

        if root is not None:
            child = root.child
            while child is not None:
                _walk(child)
                child = child.next

        return cls.from_texts(texts, document_id)

    @property
    def text(self) -> str:
        """The logical text stream (all nodes concatenated)."""
        return "".join(self.nodes)

    def __len__(self) -> int:
        if not self.nodes:
            return 0
        return self._starts[-1] + len(self.nodes[-1])

    def offset_of(self, point: SelectionPoint) -> int:
        """Document offset of a boundary point, clamped to the container."""
        if not self.nodes or point.node < 0:
            return 0
        if point.node >= len(self.nodes):
            return len(self)
        node = self.nodes[point.node]
        return self._starts[point.node] + utf16_to_index(node, point.offset)

    def point_at(self, offset: int) -> SelectionPoint:
        """Inverse of :meth:`offset_of`: the boundary point for a document offset.

        Offsets on a node boundary resolve to the start of the later node,
        the way a browser places a caret after a click.
        """
        if not self.nodes:
            return SelectionPoint(node=0, offset=0)
        offset = max(0, min(offset, len(self)))
        index = bisect.bisect_right(self._starts, offset) - 1
        within = self.nodes[index][: offset - self._starts[index]]
        return SelectionPoint(node=index, offset=utf16_length(within))


def translate_selection(
    container: TextContainer,
    selection: UserSelection,
) -> SelectionRange | None:
    """Translate a view selection into ``[start, end)`` document offsets.

    Args:
        container: Text nodes of the document the selection was made in.
        selection: Anchor and focus points, in either order.

    Returns:
        The selected text with its offsets, or None when the selection is
        collapsed or contains only whitespace.
    """
    if selection.is_collapsed:
        return None

    a = container.offset_of(selection.anchor)
    b = container.offset_of(selection.focus)
    start, stop = min(a, b), max(a, b)

    text = container.text[start:stop]
    if not text.strip():
        return None

    logger.debug(
        "Selection on document %s -> [%d, %d)",
        selection.document_id or container.document_id,
        start,
        start + len(text),
    )
    return SelectionRange(
        text=text,
        start=start,
        end=start + len(text),
        document_id=selection.document_id or container.document_id,
    )


def translate_for_document(
    containers: Mapping[str, TextContainer], args: Any
) -> SelectionRange | None:
    """Translate a ``selection_made`` payload against the container it names.

    The payload's ``doc_id`` picks the container, so with several documents
    open a selection is only ever measured against the one it was made in.

    Returns:
        The translated range, or None when the payload is malformed, names
        a document that is not open, or selects nothing but whitespace.
    """
    selection = UserSelection.from_event(args) if isinstance(args, dict) else None
    if selection is None:
        logger.debug("Ignoring malformed selection event: %r", args)
        return None
    container = containers.get(selection.document_id or "")
    if container is None:
        logger.debug("Selection for unknown document %s", selection.document_id)
        return None
    return translate_selection(container, selection)
