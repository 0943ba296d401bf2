"""Context Weaver - annotate and connect plain-text documents.

Upload notes and sources, highlight passages with coloured annotations and
link documents with typed connections.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

__version__ = "0.1.0"


def _setup_logging(log_dir: Path = Path("logs")) -> None:
    """Configure logging to both console and rotating file."""
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"contextweaver.{os.getpid()}.log"

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # File handler - detailed logging with rotation (10MB, keep 5 backups)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    # Console handler - less verbose
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logging.info("Logging configured. Log file: %s", log_file.absolute())


def main() -> None:
    """Entry point for the Context Weaver application."""
    from nicegui import app, ui

    from contextweaver.config import get_settings

    settings = get_settings()
    _setup_logging(settings.app.log_dir)

    import contextweaver.pages  # noqa: F401 - registers routes

    # Database lifecycle hooks (only for the database backend)
    if settings.store_backend == "database":
        from contextweaver.db import (
            close_db,
            get_engine,
            init_db,
            run_alembic_upgrade,
            verify_schema,
        )

        run_alembic_upgrade()  # idempotent, creates the database if missing

        @app.on_startup
        async def startup() -> None:
            await init_db()
            await verify_schema(get_engine())
            print("Database connected")

        @app.on_shutdown
        async def shutdown() -> None:
            await close_db()
    else:
        print("Using in-memory store: data is lost when the server stops")

    if settings.dev.enable_seed_data:
        from contextweaver.cli import SEED_EMAIL, seed_store
        from contextweaver.store import get_store

        @app.on_startup
        async def seed() -> None:
            _user_id, created = await seed_store(get_store())
            if created:
                print(f"Seeded {created} demo documents for {SEED_EMAIL}")

    port = settings.app.port
    storage_secret = settings.app.storage_secret.get_secret_value()

    print(f"Context Weaver v{__version__}")
    print(f"Starting application on http://0.0.0.0:{port}")

    reload = os.environ.get("CONTEXTWEAVER_RELOAD", "1") != "0"
    ui.run(
        host="0.0.0.0",  # nosec B104
        port=port,
        reload=reload,
        title="Context Weaver",
        storage_secret=storage_secret,
    )


if __name__ in {"__main__", "__mp_main__"}:
    main()
