"""Tests for the selection translator and TextContainer."""

from __future__ import annotations

import pytest

from contextweaver.highlights import (
    SelectionPoint,
    TextContainer,
    UserSelection,
    render_segments,
    render_segments_html,
    translate_for_document,
    translate_selection,
    utf16_to_index,
)
from tests.helpers.annotations import FakeAnnotation

CONTENT = "The quick brown fox"


def _select(
    anchor: tuple[int, int], focus: tuple[int, int], doc_id: str | None = None
) -> UserSelection:
    return UserSelection(
        anchor=SelectionPoint(*anchor), focus=SelectionPoint(*focus), document_id=doc_id
    )


@pytest.fixture
def highlighted_container() -> TextContainer:
    """'The ' | 'quick' | ' brown fox' as three text nodes."""
    segments = render_segments(CONTENT, [FakeAnnotation(4, 9, color="green")])
    return TextContainer.from_segments(segments, document_id="doc-1")


class TestTextContainer:
    def test_from_segments_matches_content(
        self, highlighted_container: TextContainer
    ) -> None:
        assert highlighted_container.nodes == ("The ", "quick", " brown fox")
        assert highlighted_container.text == CONTENT
        assert len(highlighted_container) == len(CONTENT)

    def test_empty_nodes_are_skipped(self) -> None:
        container = TextContainer.from_texts(["", "ab", "", "cd"])
        assert container.nodes == ("ab", "cd")

    def test_offset_of_is_clamped(self, highlighted_container: TextContainer) -> None:
        assert highlighted_container.offset_of(SelectionPoint(1, 99)) == 9
        assert highlighted_container.offset_of(SelectionPoint(99, 0)) == len(CONTENT)
        assert highlighted_container.offset_of(SelectionPoint(-1, 3)) == 0
        assert highlighted_container.offset_of(SelectionPoint(2, -4)) == 9

    def test_point_at_inverts_offset_of(
        self, highlighted_container: TextContainer
    ) -> None:
        for offset in range(len(CONTENT) + 1):
            point = highlighted_container.point_at(offset)
            assert highlighted_container.offset_of(point) == offset

    def test_point_at_node_boundary_prefers_later_node(
        self, highlighted_container: TextContainer
    ) -> None:
        assert highlighted_container.point_at(4) == SelectionPoint(1, 0)

    def test_empty_container(self) -> None:
        container = TextContainer.from_texts([])
        assert len(container) == 0
        assert container.point_at(5) == SelectionPoint(0, 0)
        assert container.offset_of(SelectionPoint(0, 3)) == 0


class TestFromHtml:
    def test_matches_rendered_segments(self) -> None:
        """The HTML walk sees the same text nodes as the segment list."""
        content = 'a < b && "c"\nnext line'
        segments = render_segments(content, [FakeAnnotation(2, 3)])
        html = render_segments_html(segments)

        from_html = TextContainer.from_html(html, document_id="d")
        assert from_html.nodes == TextContainer.from_segments(segments).nodes
        assert from_html.text == content

    def test_skips_script_and_style(self) -> None:
        html = "<div><style>p{}</style><span>ab</span><script>x()</script>cd</div>"
        assert TextContainer.from_html(html).nodes == ("ab", "cd")

    def test_empty_html(self) -> None:
        assert TextContainer.from_html("").nodes == ()

    def test_carriage_return_survives(self) -> None:
        segments = render_segments("a\rb", [])
        container = TextContainer.from_html(render_segments_html(segments))
        assert container.text == "a\rb"


class TestTranslateSelection:
    def test_within_one_node(self, highlighted_container: TextContainer) -> None:
        result = translate_selection(highlighted_container, _select((2, 1), (2, 6)))
        assert result is not None
        assert (result.text, result.start, result.end) == ("brown", 10, 15)

    def test_across_segment_boundaries(
        self, highlighted_container: TextContainer
    ) -> None:
        """'e quick b' spans three nodes and maps to one contiguous range."""
        result = translate_selection(highlighted_container, _select((0, 2), (2, 2)))
        assert result is not None
        assert result.text == "e quick b"
        assert (result.start, result.end) == (2, 11)
        assert CONTENT[result.start : result.end] == result.text

    def test_backward_selection_is_normalised(
        self, highlighted_container: TextContainer
    ) -> None:
        forward = translate_selection(highlighted_container, _select((0, 2), (2, 2)))
        backward = translate_selection(highlighted_container, _select((2, 2), (0, 2)))
        assert forward == backward

    def test_collapsed_selection_returns_none(
        self, highlighted_container: TextContainer
    ) -> None:
        selection = _select((1, 2), (1, 2))
        assert translate_selection(highlighted_container, selection) is None

    def test_whitespace_only_returns_none(
        self, highlighted_container: TextContainer
    ) -> None:
        # The space between "quick" and "brown"
        selection = _select((2, 0), (2, 1))
        assert translate_selection(highlighted_container, selection) is None

    def test_out_of_range_points_are_clamped(
        self, highlighted_container: TextContainer
    ) -> None:
        result = translate_selection(highlighted_container, _select((0, 0), (9, 9)))
        assert result is not None
        assert (result.start, result.end) == (0, len(CONTENT))

    def test_end_equals_start_plus_length(
        self, highlighted_container: TextContainer
    ) -> None:
        result = translate_selection(highlighted_container, _select((1, 3), (2, 7)))
        assert result is not None
        assert result.end == result.start + len(result.text)

    def test_document_id_comes_from_selection(
        self, highlighted_container: TextContainer
    ) -> None:
        result = translate_selection(
            highlighted_container, _select((0, 0), (0, 3), doc_id="doc-1")
        )
        assert result is not None
        assert result.document_id == "doc-1"

    def test_document_id_falls_back_to_container(
        self, highlighted_container: TextContainer
    ) -> None:
        result = translate_selection(highlighted_container, _select((0, 0), (0, 3)))
        assert result is not None
        assert result.document_id == "doc-1"


class TestRoundTrip:
    @pytest.mark.parametrize(
        ("start", "end"), [(0, 3), (4, 9), (2, 11), (10, 19), (0, 19)]
    )
    def test_selecting_a_range_reproduces_it(self, start: int, end: int) -> None:
        """Selecting content[start:end] in the view gives back {start, end}."""
        anns = [FakeAnnotation(4, 9), FakeAnnotation(12, 15)]
        container = TextContainer.from_segments(render_segments(CONTENT, anns))
        selection = UserSelection(
            anchor=container.point_at(start), focus=container.point_at(end)
        )

        result = translate_selection(container, selection)
        assert result is not None
        assert (result.start, result.end) == (start, end)
        assert result.text == CONTENT[start:end]


class TestUserSelectionFromEvent:
    def test_valid_payload(self) -> None:
        selection = UserSelection.from_event(
            {
                "doc_id": "abc",
                "anchor": {"node": 0, "offset": 3},
                "focus": {"node": 2, "offset": 1},
            }
        )
        assert selection == UserSelection(
            anchor=SelectionPoint(0, 3), focus=SelectionPoint(2, 1), document_id="abc"
        )

    def test_missing_doc_id_is_none(self) -> None:
        selection = UserSelection.from_event(
            {"anchor": {"node": 0, "offset": 0}, "focus": {"node": 0, "offset": 1}}
        )
        assert selection is not None
        assert selection.document_id is None

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"anchor": {"node": 0, "offset": 0}},
            {"anchor": "0:0", "focus": {"node": 0, "offset": 1}},
            {"anchor": {"node": "0", "offset": 0}, "focus": {"node": 0, "offset": 1}},
            {"anchor": {"node": True, "offset": 0}, "focus": {"node": 0, "offset": 1}},
            {"anchor": {"node": 0, "offset": 1.5}, "focus": {"node": 0, "offset": 1}},
        ],
    )
    def test_malformed_payloads_return_none(self, payload: dict) -> None:
        assert UserSelection.from_event(payload) is None


class TestUtf16Offsets:
    """The browser counts node offsets in UTF-16 code units."""

    @pytest.mark.parametrize(
        ("units", "expected"), [(-1, 0), (0, 0), (1, 1), (2, 2), (3, 2), (4, 3), (9, 3)]
    )
    def test_utf16_to_index(self, units: int, expected: int) -> None:
        # "🚀" is two units, so unit 2 lands inside it and resolves past it
        assert utf16_to_index("a🚀b", units) == expected

    def test_bmp_text_is_unchanged(self) -> None:
        assert utf16_to_index("café", 3) == 3

    def test_selection_after_emoji_in_same_node(self) -> None:
        content = "Rocket 🚀 launch went well"
        container = TextContainer.from_texts([content])
        # DOM offsets of "launch": the rocket counts twice
        result = translate_selection(container, _select((0, 10), (0, 16)))

        assert result is not None
        assert (result.text, result.start, result.end) == ("launch", 9, 15)
        assert content[result.start : result.end] == result.text

    def test_selection_across_highlighted_emoji(self) -> None:
        content = "🚀 go 🚀 far"
        segments = render_segments(content, [FakeAnnotation(0, 1)])
        container = TextContainer.from_segments(segments)
        assert container.nodes == ("🚀", " go 🚀 far")

        result = translate_selection(container, _select((0, 0), (1, 10)))
        assert result is not None
        assert (result.start, result.end) == (0, len(content))

        far = translate_selection(container, _select((1, 7), (1, 10)))
        assert far is not None
        assert (far.text, far.start, far.end) == ("far", 7, 10)

    def test_point_at_reports_utf16_offsets(self) -> None:
        content = "🚀🚀 ok"
        container = TextContainer.from_texts([content])
        assert container.point_at(2) == SelectionPoint(0, 4)
        for offset in range(len(content) + 1):
            assert container.offset_of(container.point_at(offset)) == offset


class TestTranslateForDocument:
    @pytest.fixture
    def containers(self) -> dict[str, TextContainer]:
        return {
            "doc-a": TextContainer.from_texts(["alpha beta"], document_id="doc-a"),
            "doc-b": TextContainer.from_texts(["gamma delta"], document_id="doc-b"),
        }

    @staticmethod
    def _payload(doc_id: object) -> dict:
        return {
            "doc_id": doc_id,
            "anchor": {"node": 0, "offset": 0},
            "focus": {"node": 0, "offset": 5},
        }

    def test_measured_against_the_named_container(
        self, containers: dict[str, TextContainer]
    ) -> None:
        a = translate_for_document(containers, self._payload("doc-a"))
        b = translate_for_document(containers, self._payload("doc-b"))

        assert a is not None
        assert b is not None
        assert (a.text, a.document_id) == ("alpha", "doc-a")
        assert (b.text, b.document_id) == ("gamma", "doc-b")

    @pytest.mark.parametrize("doc_id", ["doc-c", None, ""])
    def test_unknown_document_is_ignored(
        self, containers: dict[str, TextContainer], doc_id: object
    ) -> None:
        assert translate_for_document(containers, self._payload(doc_id)) is None

    @pytest.mark.parametrize(
        "args",
        [
            None,
            ["doc-a", 0, 5],
            {"doc_id": "doc-a"},
            {"doc_id": "doc-a", "anchor": {"node": 0}, "focus": {"node": 0}},
        ],
    )
    def test_malformed_payload_is_ignored(
        self, containers: dict[str, TextContainer], args: object
    ) -> None:
        assert translate_for_document(containers, args) is None
