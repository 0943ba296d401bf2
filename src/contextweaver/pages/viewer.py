"""Document viewer: side-by-side reading with highlights and annotations.

Each open document is rendered from its segments into a container tagged
with the document id. A delegated browser listener reports selections as
(text node index, offset) pairs; the server translates them against the
matching TextContainer, so offsets are always in document coordinates.

Route: /viewer?docs=<id>,<id>
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from uuid import UUID

from nicegui import ui

from contextweaver.config import get_settings
from contextweaver.highlights import (
    TextContainer,
    render_segments,
    render_segments_html,
    resolve_highlight_color,
    translate_for_document,
)
from contextweaver.pages.dialogs import show_annotation_dialog, show_confirm_dialog
from contextweaver.pages.layout import page_layout, require_user_id
from contextweaver.pages.registry import page_route
from contextweaver.store import AnnotationInsert, StoreError, get_store

if TYPE_CHECKING:
    from nicegui.events import GenericEventArguments

    from contextweaver.db.models import Annotation, Document
    from contextweaver.highlights import SelectionRange

logger = logging.getLogger(__name__)

DOC_CONTAINER_CLASS = "cw-doc"

_VIEWER_CSS = f"""
.{DOC_CONTAINER_CLASS} {{
    white-space: pre-wrap;
    line-height: 1.7;
    font-size: 0.95rem;
}}
.{DOC_CONTAINER_CLASS} mark.cw-highlight {{
    cursor: pointer;
    border-radius: 2px;
    color: inherit;
}}
"""

# Delegated listeners: installed once per page, survive re-rendering.
# Boundary points are reported against the container's text nodes in
# document order, the same nodes TextContainer holds. Offsets are left in
# the DOM's UTF-16 units; the server converts them.
_SELECTION_JS = """
if (!window._cwSelectionReady) {
    window._cwSelectionReady = true;
    const DEBOUNCE_MS = 10;

    function textNodes(container) {
        const walker = document.createTreeWalker(container, NodeFilter.SHOW_TEXT);
        const nodes = [];
        while (walker.nextNode()) {
            if (walker.currentNode.length > 0) nodes.push(walker.currentNode);
        }
        return nodes;
    }

    function toPoint(nodes, node, offset) {
        if (node.nodeType === Node.TEXT_NODE) {
            const idx = nodes.indexOf(node);
            if (idx >= 0) return {node: idx, offset: offset};
        }
        // Element boundary: first text node at or after the point
        const caret = document.createRange();
        caret.setStart(node, offset);
        for (let i = 0; i < nodes.length; i++) {
            if (caret.comparePoint(nodes[i], 0) >= 0) return {node: i, offset: 0};
        }
        if (nodes.length === 0) return {node: 0, offset: 0};
        const last = nodes.length - 1;
        return {node: last, offset: nodes[last].length};
    }

    // Scoped to the container the mouse was released over; a point
    // outside it clamps to that container's start or end.
    function emitSelection(container) {
        const sel = window.getSelection();
        if (!sel || sel.isCollapsed || sel.rangeCount === 0) return;
        if (!sel.toString().trim()) return;
        const nodes = textNodes(container);
        emitEvent('selection_made', {
            doc_id: container.dataset.docId,
            anchor: toPoint(nodes, sel.anchorNode, sel.anchorOffset),
            focus: toPoint(nodes, sel.focusNode, sel.focusOffset),
        });
    }

    document.addEventListener('mouseup', function(e) {
        const container = e.target.closest && e.target.closest('.cw-doc');
        if (!container) return;
        setTimeout(() => emitSelection(container), DEBOUNCE_MS);
    });

    document.addEventListener('click', function(e) {
        const mark = e.target.closest && e.target.closest('mark.cw-highlight');
        if (!mark) return;
        const sel = window.getSelection();
        if (sel && !sel.isCollapsed) return;
        const container = mark.closest('.cw-doc');
        emitEvent('annotation_clicked', {
            annotation_id: mark.dataset.annotationId,
            doc_id: container ? container.dataset.docId : null,
        });
    });

    document.body.setAttribute('data-selection-ready', 'true');
}
"""


def parse_document_ids(raw: str | None, limit: int) -> list[UUID]:
    """Parse the ``docs`` query parameter: comma-separated UUIDs.

    Invalid and duplicate ids are dropped; at most *limit* are kept.
    """
    ids: list[UUID] = []
    for part in (raw or "").split(","):
        try:
            doc_id = UUID(part.strip())
        except ValueError:
            continue
        if doc_id not in ids:
            ids.append(doc_id)
    return ids[:limit]


@page_route("/viewer", title="Viewer", icon="menu_book", order=20)
async def viewer_page(docs: str = "") -> None:
    """Open up to ``APP__MAX_VIEWER_DOCUMENTS`` documents side by side."""
    user_id = require_user_id()
    if user_id is None:
        return

    store = get_store()
    max_docs = get_settings().app.max_viewer_documents
    state: dict[str, Any] = {
        "selected": parse_document_ids(docs, max_docs),
        "annotations": {},
        "containers": {},
    }

    try:
        all_documents = await store.list_documents(user_id)
    except StoreError as exc:
        ui.notify(str(exc), type="negative")
        all_documents = []
    by_id: dict[UUID, Document] = {d.id: d for d in all_documents}
    state["selected"] = [d for d in state["selected"] if d in by_id]

    async def load_annotations() -> list[Annotation]:
        try:
            return await store.list_annotations(state["selected"], user_id)
        except StoreError as exc:
            ui.notify(str(exc), type="negative")
            return []

    @ui.refreshable
    async def documents_view() -> None:
        annotations = await load_annotations()
        state["annotations"] = {str(a.id): a for a in annotations}
        state["containers"] = {}

        if not state["selected"]:
            ui.label(f"Choose up to {max_docs} documents to view.").classes(
                "text-gray-500"
            )
            return

        with ui.row().classes("w-full gap-4 no-wrap items-start"):
            for doc_id in state["selected"]:
                doc = by_id[doc_id]
                doc_annotations = [a for a in annotations if a.document_id == doc_id]
                segments = render_segments(doc.content, doc_annotations)
                state["containers"][str(doc_id)] = TextContainer.from_segments(
                    segments, document_id=str(doc_id)
                )
                with ui.card().classes("flex-1 min-w-0"):
                    with ui.row().classes("items-center justify-between w-full"):
                        ui.label(doc.title).classes("text-lg font-semibold")
                        with ui.row().classes("items-center gap-1").props(
                            f'data-testid="document-tags-{doc_id}"'
                        ):
                            for tag in doc.tags:
                                ui.badge(tag).props("outline")
                            ui.badge(
                                f"{len(doc_annotations)} annotations", color="grey-6"
                            ).props(f'data-testid="annotation-count-{doc_id}"')
                    with (
                        ui.element("div")
                        .classes(DOC_CONTAINER_CLASS)
                        .props(f'data-doc-id="{doc_id}"')
                    ):
                        # Content is escaped by render_segments_html.
                        ui.html(render_segments_html(segments), sanitize=False)

    async def save_annotation(selected: SelectionRange) -> None:
        draft = await show_annotation_dialog(selected.text)
        await ui.run_javascript("window.getSelection().removeAllRanges()")
        if draft is None:
            return
        try:
            await store.create_annotation(
                AnnotationInsert(
                    user_id=user_id,
                    document_id=UUID(str(selected.document_id)),
                    highlighted_text=selected.text,
                    position_start=selected.start,
                    position_end=selected.end,
                    content=draft.note,
                    color=draft.color.value,
                )
            )
        except StoreError as exc:
            ui.notify(str(exc), type="negative")
            return
        logger.info("Saved annotation on document %s", selected.document_id)
        ui.notify("Annotation saved", type="positive")
        documents_view.refresh()

    async def handle_selection(e: GenericEventArguments) -> None:
        selected = translate_for_document(state["containers"], e.args)
        if selected is None:
            return
        await save_annotation(selected)

    async def handle_annotation_click(e: GenericEventArguments) -> None:
        annotation = state["annotations"].get(str(e.args.get("annotation_id")))
        if annotation is None:
            return
        await show_annotation_details(annotation)

    async def show_annotation_details(annotation: Annotation) -> None:
        with ui.dialog() as dialog, ui.card().classes("w-[32rem]"):
            with ui.row().classes("items-center gap-2"):
                ui.element("div").classes("w-4 h-4 rounded").style(
                    f"background-color: {resolve_highlight_color(annotation.color)}"
                )
                ui.label("Annotation").classes("text-lg font-bold")
            ui.label(f'"{annotation.highlighted_text}"').classes(
                "text-sm italic whitespace-pre-wrap"
            )
            ui.label(annotation.content or "No note").classes(
                "text-body2 whitespace-pre-wrap"
            ).props('data-testid="annotation-note"')
            ui.label(annotation.created_at.strftime("%Y-%m-%d %H:%M")).classes(
                "text-xs text-gray-500"
            )
            with ui.row().classes("w-full justify-end gap-2"):
                ui.button("Close", on_click=lambda: dialog.submit(False)).props("flat")
                ui.button("Delete", on_click=lambda: dialog.submit(True)).props(
                    'color=negative data-testid="delete-annotation-btn"'
                )
        dialog.open()
        if not await dialog:
            return
        if not await show_confirm_dialog("Delete this annotation?"):
            return
        try:
            await store.delete_annotation(annotation.id, user_id)
        except StoreError as exc:
            ui.notify(str(exc), type="negative")
            return
        ui.notify("Annotation deleted")
        documents_view.refresh()

    def on_pick(e: Any) -> None:
        picked = [UUID(v) for v in (e.value or [])]
        if len(picked) > max_docs:
            ui.notify(f"You can view up to {max_docs} documents", type="warning")
            picker.value = [str(d) for d in picked[:max_docs]]
            return
        state["selected"] = picked
        documents_view.refresh()

    ui.add_css(_VIEWER_CSS)
    with page_layout("Viewer"):
        picker = (
            ui.select(
                {str(d.id): d.title for d in all_documents},
                value=[str(d) for d in state["selected"]],
                label="Documents",
                multiple=True,
                on_change=on_pick,
            )
            .props('outlined dense use-chips data-testid="document-picker"')
            .classes("w-full max-w-2xl mb-4")
        )
        await documents_view()

    ui.on("selection_made", handle_selection)
    ui.on("annotation_clicked", handle_annotation_click)

    await ui.context.client.connected()
    await ui.run_javascript(_SELECTION_JS)
