"""E2E test configuration.

Auto-applies the 'e2e' marker to all tests in this directory.
Run with: pytest -m e2e

The session server (``app_server`` in tests/conftest.py) uses the in-memory
store seeded with the demo user, so tests sign in as that user and work
with the sample documents. Each test gets its own browser context.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from playwright.sync_api import expect

from contextweaver.cli import SEED_EMAIL

if TYPE_CHECKING:
    from collections.abc import Generator

    from playwright.sync_api import Browser, Page


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Add e2e marker to all tests in this directory."""
    for item in items:
        if "/e2e/" in str(item.fspath):
            item.add_marker(pytest.mark.e2e)


@pytest.fixture
def fresh_page(browser: Browser) -> Generator[Page]:
    """Provide an isolated page: new context, no shared cookies or storage."""
    context = browser.new_context()
    page = context.new_page()
    page.goto("about:blank")

    yield page

    page.close()
    context.close()


@pytest.fixture
def authenticated_page(fresh_page: Page, app_server: str) -> Page:
    """A page signed in as the seeded demo user, on the documents list."""
    fresh_page.goto(f"{app_server}/login")
    fresh_page.get_by_test_id("email-input").locator("input").fill(SEED_EMAIL)
    fresh_page.get_by_test_id("sign-in-btn").click()
    expect(fresh_page.get_by_text("Reading Notes")).to_be_visible(timeout=10000)
    return fresh_page
