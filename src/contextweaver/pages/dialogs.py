"""Reusable dialog components for NiceGUI pages.

Each dialog is awaitable: it opens, waits for the user, and returns the
collected values or None when cancelled.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID

from nicegui import events, ui

from contextweaver.documents import (
    UPLOAD_ACCEPT,
    decode_upload,
    file_type_from_filename,
    parse_tags,
    title_from_filename,
)
from contextweaver.highlights.colors import (
    CONNECTION_TYPES,
    DEFAULT_CONNECTION_TYPE,
    DEFAULT_HIGHLIGHT_COLOR,
    HIGHLIGHT_BACKGROUNDS,
    HighlightColor,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from contextweaver.db.models import Document

# Truncate the selected-text preview in the annotation dialog
MAX_PREVIEW_LENGTH = 300
# Uploaded files above this size are rejected
MAX_UPLOAD_BYTES = 5 * 1024 * 1024

_SELECTED_SWATCH = "ring-2 ring-offset-2 ring-gray-700"


@dataclass(frozen=True)
class UploadResult:
    """Values collected by the upload dialog."""

    title: str
    content: str
    file_type: str
    tags: list[str]


@dataclass(frozen=True)
class AnnotationDraft:
    """Values collected by the annotation dialog."""

    note: str
    color: HighlightColor


@dataclass(frozen=True)
class ConnectionDraft:
    """Values collected by the connection dialog."""

    source_document_id: UUID
    target_document_id: UUID
    connection_type: str
    notes: str


async def show_confirm_dialog(message: str, confirm_label: str = "Delete") -> bool:
    """Ask the user to confirm a destructive action."""
    with ui.dialog() as dialog, ui.card():
        ui.label(message)
        with ui.row().classes("w-full justify-end gap-2"):
            ui.button("Cancel", on_click=lambda: dialog.submit(False)).props("flat")
            ui.button(confirm_label, on_click=lambda: dialog.submit(True)).props(
                'color=negative data-testid="confirm-btn"'
            )
    dialog.open()
    return bool(await dialog)


async def show_upload_dialog() -> UploadResult | None:
    """Collect a new document from a ``.txt``/``.md`` file or pasted text.

    Choosing a file fills in the title (file name without extension) and
    the content; both stay editable.

    Returns:
        The collected document, or None if cancelled.
    """
    file_type = {"value": "txt"}

    async def handle_upload(e: events.UploadEventArguments) -> None:
        filename: str = e.file.name  # pyright: ignore[reportAttributeAccessIssue]
        data: bytes = await e.file.read()  # pyright: ignore[reportAttributeAccessIssue]
        if len(data) > MAX_UPLOAD_BYTES:
            ui.notify("File too large (max 5MB)", type="negative")
            return
        content_area.value = decode_upload(data)
        if not (title_input.value or "").strip():
            title_input.value = title_from_filename(filename)
        file_type["value"] = file_type_from_filename(filename)
        ui.notify(f"Loaded {filename}")

    def submit() -> None:
        title = (title_input.value or "").strip()
        if not title:
            ui.notify("Please enter a title", type="warning")
            return
        dialog.submit(
            UploadResult(
                title=title,
                content=content_area.value or "",
                file_type=file_type["value"],
                tags=parse_tags(tags_input.value or ""),
            )
        )

    with ui.dialog() as dialog, ui.card().classes("w-[36rem]"):
        ui.label("Upload Document").classes("text-lg font-bold mb-2")
        ui.upload(
            label="Choose a .txt or .md file",
            on_upload=handle_upload,
            auto_upload=True,
            max_files=1,
        ).props(f'accept="{UPLOAD_ACCEPT}"').classes("w-full")
        title_input = (
            ui.input("Title")
            .props('outlined data-testid="title-input"')
            .classes("w-full")
        )
        tags_input = (
            ui.input("Tags (comma separated)")
            .props('outlined data-testid="tags-input"')
            .classes("w-full")
        )
        content_area = (
            ui.textarea("Content")
            .props('outlined rows=10 data-testid="content-input"')
            .classes("w-full")
        )
        with ui.row().classes("w-full justify-end gap-2"):
            ui.button("Cancel", on_click=lambda: dialog.submit(None)).props("flat")
            ui.button("Upload", on_click=submit).props(
                'color=primary data-testid="upload-submit-btn"'
            )

    dialog.open()
    return await dialog


async def show_annotation_dialog(selected_text: str) -> AnnotationDraft | None:
    """Ask for a highlight colour and note for the selected passage.

    Returns:
        The colour and note, or None if cancelled.
    """
    chosen = {"color": DEFAULT_HIGHLIGHT_COLOR}
    swatches: dict[HighlightColor, ui.button] = {}

    def pick(color: HighlightColor) -> None:
        chosen["color"] = color
        for c, swatch in swatches.items():
            if c == color:
                swatch.classes(add=_SELECTED_SWATCH)
            else:
                swatch.classes(remove=_SELECTED_SWATCH)

    with ui.dialog() as dialog, ui.card().classes("w-[32rem]"):
        ui.label("Add Annotation").classes("text-lg font-bold mb-2")
        shown = selected_text
        if len(shown) > MAX_PREVIEW_LENGTH:
            shown = shown[:MAX_PREVIEW_LENGTH] + "..."
        ui.label(f'"{shown}"').classes(
            "text-sm italic bg-grey-2 q-pa-sm rounded w-full whitespace-pre-wrap"
        ).props('data-testid="selected-text-preview"')

        ui.label("Highlight colour").classes("text-sm text-gray-600 mt-2")
        with ui.row().classes("gap-2"):
            for color in HighlightColor:
                swatches[color] = (
                    ui.button(on_click=lambda c=color: pick(c))
                    .style(f"background-color: {HIGHLIGHT_BACKGROUNDS[color]}")
                    .props(f'round size=sm data-testid="color-{color.value}"')
                    .tooltip(color.value.title())
                )
        pick(DEFAULT_HIGHLIGHT_COLOR)

        note_area = (
            ui.textarea("Note (optional)")
            .props('outlined rows=3 data-testid="note-input"')
            .classes("w-full")
        )
        with ui.row().classes("w-full justify-end gap-2"):
            ui.button("Cancel", on_click=lambda: dialog.submit(None)).props("flat")
            ui.button(
                "Save",
                on_click=lambda: dialog.submit(
                    AnnotationDraft(note=note_area.value or "", color=chosen["color"])
                ),
            ).props('color=primary data-testid="save-annotation-btn"')

    dialog.open()
    return await dialog


async def show_connection_dialog(
    documents: Sequence[Document],
) -> ConnectionDraft | None:
    """Pick source, type, target and notes for a new connection.

    Returns:
        The connection draft, or None if cancelled.
    """
    options = {str(doc.id): doc.title for doc in documents}
    type_options = {
        value: f"{info.label}: {info.description}"
        for value, info in CONNECTION_TYPES.items()
    }

    def submit() -> None:
        source, target = source_select.value, target_select.value
        if source is None or target is None:
            ui.notify("Please select both documents", type="warning")
            return
        if source == target:
            ui.notify("Please select two different documents", type="warning")
            return
        dialog.submit(
            ConnectionDraft(
                source_document_id=UUID(source),
                target_document_id=UUID(target),
                connection_type=type_radio.value or DEFAULT_CONNECTION_TYPE,
                notes=notes_area.value or "",
            )
        )

    with ui.dialog() as dialog, ui.card().classes("w-[36rem]"):
        ui.label("New Connection").classes("text-lg font-bold mb-2")
        source_select = (
            ui.select(options, label="Source document")
            .props('outlined data-testid="source-select"')
            .classes("w-full")
        )
        ui.label("Connection type").classes("text-sm text-gray-600 mt-2")
        type_radio = ui.radio(type_options, value=DEFAULT_CONNECTION_TYPE).props(
            'data-testid="type-radio"'
        )
        target_select = (
            ui.select(options, label="Target document")
            .props('outlined data-testid="target-select"')
            .classes("w-full")
        )
        notes_area = (
            ui.textarea("Notes (optional)").props("outlined rows=3").classes("w-full")
        )
        with ui.row().classes("w-full justify-end gap-2"):
            ui.button("Cancel", on_click=lambda: dialog.submit(None)).props("flat")
            ui.button("Create", on_click=submit).props(
                'color=primary data-testid="create-connection-btn"'
            )

    dialog.open()
    return await dialog
