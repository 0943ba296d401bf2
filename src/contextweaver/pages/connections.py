"""Connections page: typed links between documents.

Route: /connections
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from nicegui import ui

from contextweaver.highlights import resolve_connection_type
from contextweaver.pages.dialogs import show_confirm_dialog, show_connection_dialog
from contextweaver.pages.layout import page_layout, require_user_id
from contextweaver.pages.registry import page_route
from contextweaver.store import ConnectionInsert, StoreError, get_store

if TYPE_CHECKING:
    from uuid import UUID

    from contextweaver.db.models import Connection, Document

logger = logging.getLogger(__name__)

UNKNOWN_DOCUMENT_TITLE = "Unknown Document"


def document_title(documents: dict[UUID, Document], document_id: UUID | None) -> str:
    """Title for *document_id*, or the unknown-document placeholder."""
    doc = documents.get(document_id) if document_id is not None else None
    return doc.title if doc is not None else UNKNOWN_DOCUMENT_TITLE


@page_route("/connections", title="Connections", icon="hub", order=30)
async def connections_page() -> None:
    """List, create and delete connections between the user's documents."""
    user_id = require_user_id()
    if user_id is None:
        return

    store = get_store()
    state: dict[str, Any] = {"documents": {}, "connections": []}

    async def reload() -> None:
        try:
            documents = await store.list_documents(user_id)
            state["connections"] = await store.list_connections(user_id)
        except StoreError as exc:
            ui.notify(str(exc), type="negative")
            return
        state["documents"] = {d.id: d for d in documents}
        connections_list.refresh()

    async def create() -> None:
        documents = list(state["documents"].values())
        if len(documents) < 2:
            ui.notify("Upload at least two documents first", type="warning")
            return
        draft = await show_connection_dialog(documents)
        if draft is None:
            return
        try:
            await store.create_connection(
                ConnectionInsert(
                    user_id=user_id,
                    source_document_id=draft.source_document_id,
                    target_document_id=draft.target_document_id,
                    connection_type=draft.connection_type,
                    notes=draft.notes,
                )
            )
        except StoreError as exc:
            ui.notify(str(exc), type="negative")
            return
        ui.notify("Connection created", type="positive")
        await reload()

    async def delete(connection: Connection) -> None:
        if not await show_confirm_dialog("Delete this connection?"):
            return
        try:
            await store.delete_connection(connection.id, user_id)
        except StoreError as exc:
            ui.notify(str(exc), type="negative")
            return
        ui.notify("Connection deleted")
        await reload()

    @ui.refreshable
    def connections_list() -> None:
        connections: list[Connection] = state["connections"]
        if not connections:
            ui.label("No connections yet.").classes("text-gray-500")
            return

        documents = state["documents"]
        with ui.column().classes("gap-2 w-full max-w-4xl"):
            for conn in connections:
                info = resolve_connection_type(conn.connection_type)
                with ui.card().classes("w-full"):
                    with ui.row().classes("items-center gap-3 w-full"):
                        ui.label(document_title(documents, conn.source_document_id))
                        ui.label(info.label).classes(
                            f"text-xs font-medium px-2 py-1 rounded {info.badge_classes}"
                        ).tooltip(info.description)
                        ui.label(document_title(documents, conn.target_document_id))
                        ui.element("div").classes("flex-grow")
                        ui.button(
                            icon="delete", on_click=lambda c=conn: delete(c)
                        ).props("flat dense color=negative").tooltip("Delete")
                    if conn.notes:
                        ui.label(conn.notes).classes(
                            "text-sm text-gray-700 whitespace-pre-wrap"
                        )
                    ui.label(conn.created_at.strftime("%Y-%m-%d")).classes(
                        "text-xs text-gray-500"
                    )

    with page_layout("Connections"):
        ui.button("New Connection", icon="add_link", on_click=create).props(
            'color=primary data-testid="new-connection-btn"'
        ).classes("mb-4")
        connections_list()

    await reload()
