"""Sign-in pages for Context Weaver.

Sign-in is by email: the user is found or created in the store and kept
in ``app.storage.user`` for the browser session.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from nicegui import app, ui

from contextweaver.pages.layout import get_session_user
from contextweaver.pages.registry import page_route
from contextweaver.store import StoreError, get_store

if TYPE_CHECKING:
    from contextweaver.db.models import User

logger = logging.getLogger(__name__)


def _set_session_user(user: User) -> None:
    """Store the signed-in user in session storage."""
    logger.info("Login successful: email=%s, user_id=%s", user.email, user.id)
    app.storage.user["auth_user"] = {
        "email": user.email,
        "display_name": user.full_name or user.email,
        "user_id": str(user.id),
    }


def _clear_session() -> None:
    """Clear the current session."""
    app.storage.user.pop("auth_user", None)


def _looks_like_email(value: str) -> bool:
    local, sep, domain = value.partition("@")
    return bool(local and sep and "." in domain)


@page_route(
    "/login", title="Login", icon="login", category="auth", requires_auth=False
)
async def login_page() -> None:
    """Email sign-in form."""
    if get_session_user():
        ui.navigate.to("/")
        return

    with ui.column().classes("absolute-center items-center"):
        ui.label("Sign in to Context Weaver").classes("text-2xl font-bold mb-4")
        email_input = (
            ui.input("Email")
            .props('outlined type=email data-testid="email-input"')
            .classes("w-80")
        )
        name_input = (
            ui.input("Full name (optional)")
            .props('outlined data-testid="name-input"')
            .classes("w-80")
        )

        async def sign_in() -> None:
            email = (email_input.value or "").strip()
            if not _looks_like_email(email):
                ui.notify("Please enter a valid email address", type="warning")
                return
            try:
                user = await get_store().get_or_create_user(
                    email, name_input.value or ""
                )
            except StoreError as exc:
                ui.notify(str(exc), type="negative")
                return
            _set_session_user(user)
            ui.navigate.to("/")

        email_input.on("keydown.enter", sign_in)
        ui.button("Sign in", on_click=sign_in).props(
            'color=primary data-testid="sign-in-btn"'
        ).classes("w-80 mt-2")


@page_route(
    "/logout", title="Logout", icon="logout", category="auth", requires_auth=False
)
def logout_page() -> None:
    """Logout and redirect to login."""
    _clear_session()
    ui.navigate.to("/login")
