"""Shared layout components for Context Weaver.

Provides consistent header, navigation drawer, and page structure, plus
access to the signed-in user kept in ``app.storage.user``.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING
from uuid import UUID

from nicegui import app, ui

from contextweaver.pages.registry import get_visible_pages

if TYPE_CHECKING:
    from collections.abc import Iterator


def get_session_user() -> dict | None:
    """Get the current user from session storage."""
    return app.storage.user.get("auth_user")


def require_user_id() -> UUID | None:
    """Return the signed-in user's id, or redirect to /login and return None.

    Use at the start of pages that need a user.
    """
    user = get_session_user()
    if not user or not user.get("user_id"):
        ui.navigate.to("/login")
        return None
    return UUID(user["user_id"])


def _nav_item(label: str, route: str, icon: str | None = None) -> None:
    """Create a navigation item in the drawer."""
    with ui.item(on_click=lambda: ui.navigate.to(route)).classes("w-full"):
        if icon:
            with ui.item_section().props("avatar"):
                ui.icon(icon)
        with ui.item_section():
            ui.item_label(label)


@contextmanager
def page_layout(title: str = "Context Weaver") -> Iterator[None]:
    """Context manager for consistent page layout with header and nav drawer.

    Usage:
        @page_route("/my-page", title="My Page", icon="star")
        async def my_page():
            with page_layout("My Page"):
                ui.label("Page content here")

    Args:
        title: Page title shown in header.

    Yields:
        Context for page content.
    """
    user = get_session_user()

    with ui.header().classes("bg-primary items-center q-py-xs"):
        menu_btn = ui.button(icon="menu").props("flat color=white")
        ui.label(title).classes("text-h6 text-white q-ml-sm")

        ui.element("div").classes("flex-grow")

        if user:
            ui.label(user.get("display_name") or user.get("email", "")).classes(
                "text-white text-body2 q-mr-md"
            )
            ui.button(icon="logout", on_click=lambda: ui.navigate.to("/logout")).props(
                "flat color=white"
            ).tooltip("Logout")

    with ui.left_drawer().classes("bg-grey-2") as drawer:
        ui.label("Context Weaver").classes("text-h6 q-pa-md")
        ui.separator()
        with ui.list().props("padding"):
            for page in get_visible_pages(user):
                _nav_item(page.title, page.route, page.icon)

    menu_btn.on("click", drawer.toggle)

    with ui.element("div").classes("q-pa-md w-full"):
        yield
