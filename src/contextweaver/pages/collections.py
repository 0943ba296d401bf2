"""Collections page: group documents under a name.

Route: /collections
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from nicegui import ui

from contextweaver.pages.dialogs import show_confirm_dialog
from contextweaver.pages.layout import page_layout, require_user_id
from contextweaver.pages.registry import page_route
from contextweaver.store import CollectionInsert, StoreError, get_store

if TYPE_CHECKING:
    from uuid import UUID

    from contextweaver.db.models import Collection


@page_route("/collections", title="Collections", icon="folder", order=40)
async def collections_page() -> None:
    """Create and delete collections and toggle document membership."""
    user_id = require_user_id()
    if user_id is None:
        return

    store = get_store()
    state: dict[str, Any] = {"documents": [], "collections": [], "members": {}}

    async def reload() -> None:
        try:
            state["documents"] = await store.list_documents(user_id)
            state["collections"] = await store.list_collections(user_id)
            state["members"] = {
                c.id: await store.list_collection_document_ids(c.id, user_id)
                for c in state["collections"]
            }
        except StoreError as exc:
            ui.notify(str(exc), type="negative")
            return
        collections_list.refresh()

    async def create() -> None:
        try:
            await store.create_collection(
                CollectionInsert(
                    user_id=user_id,
                    name=name_input.value or "",
                    description=description_input.value or "",
                )
            )
        except StoreError as exc:
            ui.notify(str(exc), type="negative")
            return
        name_input.value = ""
        description_input.value = ""
        await reload()

    async def delete(collection: Collection) -> None:
        if not await show_confirm_dialog(
            f'Delete collection "{collection.name}"? Its documents are kept.'
        ):
            return
        try:
            await store.delete_collection(collection.id, user_id)
        except StoreError as exc:
            ui.notify(str(exc), type="negative")
            return
        await reload()

    async def toggle(collection_id: UUID, document_id: UUID, member: bool) -> None:
        try:
            if member:
                await store.add_to_collection(collection_id, document_id, user_id)
            else:
                await store.remove_from_collection(collection_id, document_id, user_id)
        except StoreError as exc:
            ui.notify(str(exc), type="negative")
        await reload()

    @ui.refreshable
    def collections_list() -> None:
        if not state["collections"]:
            ui.label("No collections yet.").classes("text-gray-500")
            return

        with ui.column().classes("gap-2 w-full max-w-3xl"):
            for collection in state["collections"]:
                members = state["members"].get(collection.id, set())
                with ui.expansion(
                    f"{collection.name} ({len(members)})", icon="folder"
                ).classes("w-full border rounded"):
                    if collection.description:
                        ui.label(collection.description).classes(
                            "text-sm text-gray-600 mb-2"
                        )
                    for doc in state["documents"]:
                        ui.checkbox(
                            doc.title,
                            value=doc.id in members,
                            on_change=lambda e, c=collection.id, d=doc.id: toggle(
                                c, d, e.value
                            ),
                        )
                    ui.button(
                        "Delete collection",
                        icon="delete",
                        on_click=lambda c=collection: delete(c),
                    ).props("flat dense color=negative").classes("mt-2")

    with page_layout("Collections"):
        with ui.row().classes("items-end gap-2 w-full max-w-3xl mb-4"):
            name_input = ui.input("Name").props(
                'outlined dense data-testid="collection-name-input"'
            )
            description_input = (
                ui.input("Description").props("outlined dense").classes("flex-grow")
            )
            ui.button("Create", icon="create_new_folder", on_click=create).props(
                'color=primary data-testid="create-collection-btn"'
            )
        collections_list()

    await reload()
