"""Documents page: list, search, filter, upload and delete.

Route: /
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from uuid import UUID

from nicegui import ui

from contextweaver.config import get_settings
from contextweaver.documents import collect_tags, filter_documents, preview
from contextweaver.pages.dialogs import show_confirm_dialog, show_upload_dialog
from contextweaver.pages.layout import page_layout, require_user_id
from contextweaver.pages.registry import page_route
from contextweaver.store import DocumentInsert, StoreError, get_store

if TYPE_CHECKING:
    from contextweaver.db.models import Document

logger = logging.getLogger(__name__)


def _viewer_url(document_ids: list[UUID]) -> str:
    return "/viewer?docs=" + ",".join(str(d) for d in document_ids)


@page_route("/", title="Documents", icon="description", order=10)
async def documents_page() -> None:
    """List the user's documents with search, tag and collection filters."""
    user_id = require_user_id()
    if user_id is None:
        return

    store = get_store()
    preview_chars = get_settings().app.preview_chars
    state: dict[str, Any] = {
        "documents": [],
        "query": "",
        "tags": [],
        "collection": None,
        "collection_ids": None,
    }

    async def reload() -> None:
        try:
            state["documents"] = await store.list_documents(user_id)
            collections = await store.list_collections(user_id)
        except StoreError as exc:
            ui.notify(str(exc), type="negative")
            return
        tag_select.set_options(collect_tags(state["documents"]))
        collection_select.set_options(
            {"": "All documents"} | {str(c.id): c.name for c in collections}
        )
        documents_list.refresh()

    async def on_collection_change(e: Any) -> None:
        value = e.value or None
        state["collection"] = value
        try:
            state["collection_ids"] = (
                await store.list_collection_document_ids(UUID(value), user_id)
                if value
                else None
            )
        except StoreError as exc:
            ui.notify(str(exc), type="negative")
            return
        documents_list.refresh()

    def on_query_change(e: Any) -> None:
        state["query"] = e.value or ""
        documents_list.refresh()

    def on_tags_change(e: Any) -> None:
        state["tags"] = list(e.value or [])
        documents_list.refresh()

    async def upload() -> None:
        result = await show_upload_dialog()
        if result is None:
            return
        try:
            doc = await store.create_document(
                DocumentInsert(
                    user_id=user_id,
                    title=result.title,
                    content=result.content,
                    file_type=result.file_type,
                    tags=result.tags,
                )
            )
        except StoreError as exc:
            ui.notify(str(exc), type="negative")
            return
        logger.info("Uploaded document %s (%d chars)", doc.id, doc.file_size)
        ui.notify(f"Uploaded: {doc.title}", type="positive")
        await reload()

    async def delete(doc: Document) -> None:
        confirmed = await show_confirm_dialog(
            f'Delete "{doc.title}"? Its annotations and connections are deleted too.'
        )
        if not confirmed:
            return
        try:
            deleted = await store.delete_document(doc.id, user_id)
        except StoreError as exc:
            ui.notify(str(exc), type="negative")
            return
        if deleted:
            ui.notify("Document deleted")
        await reload()

    @ui.refreshable
    def documents_list() -> None:
        docs = filter_documents(
            state["documents"],
            query=state["query"],
            tags=state["tags"],
            document_ids=state["collection_ids"],
        )
        if not docs:
            ui.label("No documents found.").classes("text-gray-500")
            return

        with ui.column().classes("gap-2 w-full max-w-4xl"):
            for doc in docs:
                with (
                    ui.card()
                    .classes("w-full")
                    .props(f'data-testid="document-card-{doc.id}"')
                ):
                    with ui.row().classes("items-center justify-between w-full"):
                        ui.label(doc.title).classes("text-lg font-semibold")
                        with ui.row().classes("gap-1"):
                            ui.button(
                                "Open",
                                icon="menu_book",
                                on_click=lambda d=doc: ui.navigate.to(
                                    _viewer_url([d.id])
                                ),
                            ).props("flat dense")
                            ui.button(
                                icon="delete",
                                on_click=lambda d=doc: delete(d),
                            ).props("flat dense color=negative").tooltip("Delete")
                    with ui.row().classes("gap-2 text-xs text-gray-500"):
                        ui.label(doc.file_type.upper())
                        ui.label(f"{doc.file_size} chars")
                        ui.label(doc.created_at.strftime("%Y-%m-%d"))
                        for tag in doc.tags:
                            ui.badge(tag).props("outline")
                    ui.label(preview(doc.content, preview_chars)).classes(
                        "text-sm text-gray-700 whitespace-pre-wrap"
                    )

    with page_layout("Documents"):
        with ui.row().classes("items-center gap-4 w-full max-w-4xl mb-4"):
            ui.input(
                "Search title or content", on_change=on_query_change
            ).props('outlined dense clearable data-testid="search-input"').classes(
                "flex-grow"
            )
            tag_select = (
                ui.select([], label="Tags", multiple=True, on_change=on_tags_change)
                .props("outlined dense use-chips clearable")
                .classes("w-48")
            )
            collection_select = (
                ui.select(
                    {"": "All documents"},
                    value="",
                    label="Collection",
                    on_change=on_collection_change,
                )
                .props("outlined dense")
                .classes("w-48")
            )
            ui.button("Upload", icon="upload", on_click=upload).props(
                'color=primary data-testid="upload-btn"'
            )
        documents_list()

    await reload()
