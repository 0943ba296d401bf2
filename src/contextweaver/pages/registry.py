"""Page registration system for data-driven navigation.

Provides a decorator for registering pages with metadata, so the
navigation drawer is built from what is registered.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from nicegui import ui

if TYPE_CHECKING:
    from collections.abc import Callable

Category = Literal["main", "auth", "hidden"]


@dataclass
class PageMeta:
    """Metadata for a registered page."""

    route: str
    title: str
    icon: str
    category: Category = "main"
    requires_auth: bool = True
    order: int = field(default=100)


# Global registry of all pages
_page_registry: dict[str, PageMeta] = {}


def page_route(
    route: str,
    *,
    title: str,
    icon: str,
    category: Category = "main",
    requires_auth: bool = True,
    order: int = 100,
) -> Callable:
    """Decorator to register a page with navigation metadata.

    Usage:
        @page_route("/viewer", title="Viewer", icon="menu_book", order=20)
        async def viewer_page():
            ...

    Args:
        route: URL path for the page.
        title: Display title in navigation.
        icon: Material icon name.
        category: Navigation section (main, auth, hidden).
        requires_auth: Whether page requires a signed-in user.
        order: Sort order within category (lower = higher).

    Returns:
        Decorated function registered with NiceGUI and the page registry.
    """

    def decorator(func: Callable) -> Callable:
        _page_registry[route] = PageMeta(
            route=route,
            title=title,
            icon=icon,
            category=category,
            requires_auth=requires_auth,
            order=order,
        )
        return ui.page(route)(func)

    return decorator


def get_visible_pages(user: dict | None) -> list[PageMeta]:
    """Get navigation pages for the current user, sorted by order.

    Hidden and auth pages never appear in navigation; pages that need a
    signed-in user are left out when ``user`` is None.
    """
    visible = [
        meta
        for meta in _page_registry.values()
        if meta.category == "main" and (user is not None or not meta.requires_auth)
    ]
    visible.sort(key=lambda p: p.order)
    return visible
