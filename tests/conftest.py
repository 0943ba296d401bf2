"""Shared pytest fixtures for Context Weaver tests."""

from __future__ import annotations

import os
import socket
import subprocess
import sys
import time
from typing import TYPE_CHECKING

import pytest
from dotenv import load_dotenv

from contextweaver.store.factory import clear_store_cache
from contextweaver.store.memory import MemoryStore

if TYPE_CHECKING:
    from collections.abc import Generator

    from contextweaver.db.models import User

load_dotenv()

TEST_STORAGE_SECRET = "test-secret-for-e2e"


@pytest.fixture
def memory_store() -> MemoryStore:
    """A fresh, empty in-memory store."""
    return MemoryStore()


@pytest.fixture
async def user(memory_store: MemoryStore) -> User:
    """A signed-in user in ``memory_store``."""
    return await memory_store.get_or_create_user("reader@example.com", "Reader")


@pytest.fixture
async def other_user(memory_store: MemoryStore) -> User:
    """A second user, for isolation checks."""
    return await memory_store.get_or_create_user("other@example.com", "Other")


@pytest.fixture
def reset_store() -> Generator[None]:
    """Clear cached settings and store before and after the test."""
    clear_store_cache()
    yield
    clear_store_cache()


def _find_free_port() -> int:
    """Find an available port on localhost."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("", 0))
        return s.getsockname()[1]


# Script to run the NiceGUI server with the in-memory store and demo data.
# PYTEST/NICEGUI env vars are cleared so NiceGUI does not enter test mode.
_SERVER_SCRIPT = f"""
import os
import sys

for key in list(os.environ.keys()):
    if 'PYTEST' in key or 'NICEGUI' in key:
        del os.environ[key]

os.environ['STORE__BACKEND'] = 'memory'

port = int(sys.argv[1])

from nicegui import app, ui

import contextweaver.pages  # noqa: F401 - registers routes
from contextweaver.cli import seed_store
from contextweaver.store import get_store


@app.on_startup
async def seed() -> None:
    await seed_store(get_store())


ui.run(port=port, reload=False, show=False, storage_secret='{TEST_STORAGE_SECRET}')
"""


@pytest.fixture(scope="session")
def app_server() -> Generator[str]:
    """Provide the base URL of the NiceGUI app server for E2E tests.

    If ``E2E_BASE_URL`` is set, yields that URL directly. Otherwise starts
    a server in a subprocess on a random port for the session.
    """
    external_url = os.environ.get("E2E_BASE_URL")
    if external_url:
        yield external_url
        return

    port = _find_free_port()
    url = f"http://localhost:{port}"

    clean_env = {
        k: v for k, v in os.environ.items() if "PYTEST" not in k and "NICEGUI" not in k
    }
    process = subprocess.Popen(
        [sys.executable, "-c", _SERVER_SCRIPT, str(port)],
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        env=clean_env,
    )

    max_wait = 15  # seconds
    start_time = time.time()
    while time.time() - start_time < max_wait:
        if process.poll() is not None:
            stdout, stderr = process.communicate()
            pytest.fail(
                f"Server process died. Exit code: {process.returncode}\n"
                f"stdout: {stdout.decode()}\n"
                f"stderr: {stderr.decode()}"
            )
        try:
            with socket.create_connection(("localhost", port), timeout=1):
                break
        except OSError:
            time.sleep(0.1)
    else:
        process.terminate()
        pytest.fail(f"Server failed to start within {max_wait} seconds")

    yield url

    process.terminate()
    try:
        process.wait(timeout=5)
    except subprocess.TimeoutExpired:
        process.kill()
