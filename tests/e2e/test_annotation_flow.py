"""Browser tests for selecting text and saving annotations.

The selection is made programmatically (a DOM Range over the rendered
text) and then a mouseup is dispatched, which is what the viewer listens
for. The server translates the boundary points back into offsets.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING
from uuid import uuid4

from playwright.sync_api import expect

if TYPE_CHECKING:
    from playwright.sync_api import Page

# Select the first occurrence of `needle` in the `index`-th open document,
# across however many text nodes it spans, then fire mouseup on that
# container. Offsets here are JS string indices, as the browser reports.
_SELECT_TEXT_JS = """
([needle, index]) => {
    const container = document.querySelectorAll('.cw-doc')[index || 0];
    const walker = document.createTreeWalker(container, NodeFilter.SHOW_TEXT);
    const nodes = [];
    let text = '';
    while (walker.nextNode()) {
        nodes.push([walker.currentNode, text.length]);
        text += walker.currentNode.data;
    }
    const start = text.indexOf(needle);
    if (start < 0) return false;
    const end = start + needle.length;
    const locate = (offset) => {
        for (const [node, base] of nodes) {
            if (offset <= base + node.length) return [node, offset - base];
        }
    };
    const range = document.createRange();
    range.setStart(...locate(start));
    range.setEnd(...locate(end));
    const sel = window.getSelection();
    sel.removeAllRanges();
    sel.addRange(range);
    container.dispatchEvent(new MouseEvent('mouseup', {bubbles: true}));
    return true;
}
"""


def _document_id(page: Page, title: str) -> str:
    card = page.locator("[data-testid^='document-card-']", has_text=title)
    testid = card.get_attribute("data-testid")
    assert testid is not None
    return testid.removeprefix("document-card-")


def _wait_for_viewer(page: Page) -> None:
    page.wait_for_url(re.compile(r"/viewer\?docs="))
    expect(page.locator("body[data-selection-ready='true']")).to_be_attached(
        timeout=10000
    )


def _open_document(page: Page, title: str) -> None:
    card = page.locator("[data-testid^='document-card-']", has_text=title)
    card.get_by_role("button", name="Open").click()
    _wait_for_viewer(page)


def _annotation_count(page: Page, doc_id: str | None = None) -> int:
    if doc_id is None:
        badge = page.locator("[data-testid^='annotation-count-']").first
    else:
        badge = page.get_by_test_id(f"annotation-count-{doc_id}")
    expect(badge).to_be_visible()
    match = re.match(r"(\d+)", badge.inner_text())
    assert match is not None
    return int(match.group(1))


class TestViewer:
    def test_seeded_highlights_render(self, authenticated_page: Page) -> None:
        page = authenticated_page
        _open_document(page, "Reading Notes")

        marks = page.locator(".cw-doc mark.cw-highlight")
        expect(marks.first).to_be_visible()
        texts = marks.all_inner_texts()
        assert "quick brown fox" in texts
        assert "adaptable" in texts

    def test_select_across_highlight_and_save(self, authenticated_page: Page) -> None:
        """A selection spanning a highlight boundary is saved as one annotation."""
        page = authenticated_page
        _open_document(page, "Reading Notes")
        before = _annotation_count(page)

        # "The quick" starts in plain text and ends inside the yellow mark
        assert page.evaluate(_SELECT_TEXT_JS, ["The quick"])

        preview = page.get_by_test_id("selected-text-preview")
        expect(preview).to_contain_text("The quick")
        page.get_by_test_id("color-pink").click()
        page.get_by_test_id("note-input").locator("textarea").fill("Opening line")
        page.get_by_test_id("save-annotation-btn").click()

        expect(page.locator("[data-testid^='annotation-count-']").first).to_have_text(
            re.compile(rf"^{before + 1} annotations")
        )

    def test_whitespace_selection_opens_no_dialog(
        self, authenticated_page: Page
    ) -> None:
        page = authenticated_page
        _open_document(page, "Methods")

        page.evaluate(_SELECT_TEXT_JS, [" "])
        page.wait_for_timeout(300)

        expect(page.get_by_test_id("save-annotation-btn")).to_have_count(0)

    def test_click_highlight_shows_note(self, authenticated_page: Page) -> None:
        page = authenticated_page
        _open_document(page, "Field Report")

        page.locator(".cw-doc mark.cw-highlight", has_text="two red foxes").click()

        expect(page.get_by_test_id("annotation-note")).to_contain_text(
            "Primary observation"
        )
        expect(page.get_by_test_id("delete-annotation-btn")).to_be_visible()

    def test_panel_header_shows_tags(self, authenticated_page: Page) -> None:
        page = authenticated_page
        doc_id = _document_id(page, "Reading Notes")
        _open_document(page, "Reading Notes")

        tags = page.get_by_test_id(f"document-tags-{doc_id}")
        expect(tags).to_contain_text("notes")
        expect(tags).to_contain_text("animals")

    def test_selection_after_emoji_saves_exact_range(
        self, authenticated_page: Page
    ) -> None:
        """Astral characters count twice in the DOM but once in the document."""
        page = authenticated_page
        title = f"Launch {uuid4().hex[:6]}"
        page.get_by_test_id("upload-btn").click()
        page.get_by_test_id("title-input").locator("input").fill(title)
        page.get_by_test_id("content-input").locator("textarea").fill(
            "Rocket 🚀 launch went well"
        )
        page.get_by_test_id("upload-submit-btn").click()
        _open_document(page, title)

        assert page.evaluate(_SELECT_TEXT_JS, ["launch"])
        expect(page.get_by_test_id("selected-text-preview")).to_contain_text(
            "launch"
        )
        page.get_by_test_id("save-annotation-btn").click()

        expect(page.locator(".cw-doc mark.cw-highlight")).to_have_text("launch")


class TestSideBySide:
    def test_selection_is_saved_on_the_document_it_was_made_in(
        self, authenticated_page: Page, app_server: str
    ) -> None:
        page = authenticated_page
        notes_id = _document_id(page, "Reading Notes")
        methods_id = _document_id(page, "Methods")
        page.goto(f"{app_server}/viewer?docs={notes_id},{methods_id}")
        _wait_for_viewer(page)
        notes_before = _annotation_count(page, notes_id)
        methods_before = _annotation_count(page, methods_id)

        # Second panel is Methods
        assert page.evaluate(_SELECT_TEXT_JS, ["six weeks", 1])
        page.get_by_test_id("save-annotation-btn").click()

        expect(page.get_by_test_id(f"annotation-count-{methods_id}")).to_have_text(
            re.compile(rf"^{methods_before + 1} annotations")
        )
        assert _annotation_count(page, notes_id) == notes_before
        methods_panel = page.locator(f".cw-doc[data-doc-id='{methods_id}']")
        expect(
            methods_panel.locator("mark.cw-highlight", has_text="six weeks")
        ).to_be_visible()
