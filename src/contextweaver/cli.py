"""Command-line utilities for Context Weaver development.

Provides a seed command for a development database and a segment
inspector for checking how annotations split a document.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING
from uuid import UUID

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from contextweaver.documents import normalise_newlines
from contextweaver.highlights import (
    HighlightColor,
    parse_highlight_color,
    render_segments,
    resolve_highlight_color,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from contextweaver.highlights import Segment
    from contextweaver.store import StoreProtocol

console = Console()

SEED_EMAIL = "demo@example.com"

_SEED_DOCUMENTS: tuple[tuple[str, str, list[str]], ...] = (
    (
        "Reading Notes",
        "The quick brown fox jumps over the lazy dog.\n"
        "Foxes are adaptable and live on every continent except Antarctica.\n",
        ["notes", "animals"],
    ),
    (
        "Field Report",
        "Observed two red foxes near the river at dusk.\n"
        "Both animals avoided the open meadow and kept to the hedgerow.\n",
        ["fieldwork", "animals"],
    ),
    (
        "Methods",
        "Observations were recorded every evening for six weeks.\n"
        "Sightings were logged with time, location and behaviour.\n",
        ["methods"],
    ),
)


@dataclass(frozen=True)
class _CliAnnotation:
    """Ad-hoc annotation parsed from ``--annotate start:end[:colour]``."""

    position_start: int
    position_end: int
    color: str = HighlightColor.YELLOW.value


def parse_annotation_arg(value: str) -> _CliAnnotation:
    """Parse ``START:END[:COLOUR]`` for ``show-segments --annotate``.

    Raises:
        argparse.ArgumentTypeError: On malformed input or unknown colour.
    """
    parts = value.split(":")
    if len(parts) not in (2, 3):
        msg = f"expected START:END[:COLOUR], got {value!r}"
        raise argparse.ArgumentTypeError(msg)
    try:
        start, end = int(parts[0]), int(parts[1])
    except ValueError as exc:
        msg = f"offsets must be integers: {value!r}"
        raise argparse.ArgumentTypeError(msg) from exc
    color = HighlightColor.YELLOW
    if len(parts) == 3:
        parsed = parse_highlight_color(parts[2])
        if parsed is None:
            msg = f"unknown colour {parts[2]!r}"
            raise argparse.ArgumentTypeError(msg)
        color = parsed
    return _CliAnnotation(start, end, color.value)


def segments_table(segments: Sequence[Segment]) -> Table:
    """Tabulate segments: offsets, colour and text."""
    table = Table(title="Segments")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Start", justify="right")
    table.add_column("End", justify="right")
    table.add_column("Colour")
    table.add_column("Text", overflow="fold")
    for index, segment in enumerate(segments):
        color = getattr(segment.annotation, "color", "") if segment.annotation else ""
        table.add_row(
            str(index),
            str(segment.start),
            str(segment.end),
            color or "-",
            repr(segment.text),
        )
    return table


def highlighted_text(segments: Sequence[Segment]) -> Text:
    """The document as rich Text with highlight backgrounds."""
    text = Text()
    for segment in segments:
        if segment.annotation is None:
            text.append(segment.text)
        else:
            background = resolve_highlight_color(
                getattr(segment.annotation, "color", None)
            )
            text.append(segment.text, style=f"black on {background}")
    return text


def _build_show_segments_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="show-segments",
        description="Show how annotations split a document into segments.",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", type=Path, help="Plain-text file to render")
    source.add_argument("--document", type=UUID, help="Stored document id")
    parser.add_argument(
        "--email",
        default=SEED_EMAIL,
        help=f"Owner of --document (default: {SEED_EMAIL})",
    )
    parser.add_argument(
        "--annotate",
        action="append",
        type=parse_annotation_arg,
        default=[],
        metavar="START:END[:COLOUR]",
        help="Add an ad-hoc annotation (repeatable, --file only)",
    )
    return parser


async def load_stored_document(
    store: StoreProtocol, document_id: UUID, email: str
) -> tuple[str, list] | None:
    """Content and annotations of a stored document, or None if not found.

    Read-only: an unknown email is reported as not found, never created.
    """
    user = await store.get_user_by_email(email)
    if user is None:
        return None
    doc = await store.get_document(document_id, user.id)
    if doc is None:
        return None
    annotations = await store.list_annotations([doc.id], user.id)
    return doc.content, annotations


async def _load_and_close(document_id: UUID, email: str) -> tuple[str, list] | None:
    from contextweaver.db.engine import close_db
    from contextweaver.store import get_store

    try:
        return await load_stored_document(get_store(), document_id, email)
    finally:
        await close_db()


def show_segments(argv: Sequence[str] | None = None) -> None:
    """Print the segments a document renders into.

    Usage:
        show-segments --file notes.txt --annotate 4:9:green
        show-segments --document <uuid> --email demo@example.com
    """
    args = _build_show_segments_parser().parse_args(argv)

    if args.file is not None:
        try:
            content = normalise_newlines(args.file.read_text(encoding="utf-8"))
        except OSError as exc:
            console.print(f"[red]Error:[/] Cannot read {args.file}: {exc}")
            sys.exit(1)
        annotations = list(args.annotate)
    else:
        loaded = asyncio.run(_load_and_close(args.document, args.email))
        if loaded is None:
            console.print(
                f"[red]Error:[/] Document {args.document} not found for {args.email}"
            )
            sys.exit(1)
        content, annotations = loaded

    segments = render_segments(content, annotations)
    console.print(segments_table(segments))
    console.print(Panel(highlighted_text(segments), title="Rendered"))


async def seed_store(store: StoreProtocol) -> tuple[UUID, int]:
    """Create the demo user and sample documents, annotations and a connection.

    Idempotent: if the demo user already has documents nothing is added.

    Returns:
        The demo user's id and the number of documents created.
    """
    from contextweaver.store import AnnotationInsert, ConnectionInsert, DocumentInsert

    user = await store.get_or_create_user(SEED_EMAIL, "Demo User")
    if await store.list_documents(user.id):
        return user.id, 0

    docs = []
    for title, content, tags in _SEED_DOCUMENTS:
        docs.append(
            await store.create_document(
                DocumentInsert(user_id=user.id, title=title, content=content, tags=tags)
            )
        )

    notes, report, _methods = docs
    for doc, needle, color, note in (
        (notes, "quick brown fox", "yellow", "Classic pangram"),
        (notes, "adaptable", "green", "Key claim"),
        (report, "two red foxes", "blue", "Primary observation"),
    ):
        start = doc.content.index(needle)
        await store.create_annotation(
            AnnotationInsert(
                user_id=user.id,
                document_id=doc.id,
                highlighted_text=needle,
                position_start=start,
                position_end=start + len(needle),
                content=note,
                color=color,
            )
        )

    await store.create_connection(
        ConnectionInsert(
            user_id=user.id,
            source_document_id=notes.id,
            target_document_id=report.id,
            connection_type="supports",
            notes="Field sightings back up the reading notes.",
        )
    )
    return user.id, len(docs)


def seed_data() -> None:
    """Seed the database with demo data for development.

    Usage:
        seed-data
    """
    from contextweaver.config import get_settings

    settings = get_settings()
    if not settings.database.url:
        console.print("[red]Error:[/] DATABASE__URL not set")
        sys.exit(1)

    async def _seed() -> tuple[UUID, int]:
        from contextweaver.db.engine import close_db, init_db
        from contextweaver.store.database import DatabaseStore

        await init_db()
        try:
            return await seed_store(DatabaseStore())
        finally:
            await close_db()

    user_id, created = asyncio.run(_seed())
    status = f"{created} documents created" if created else "already seeded"

    console.print()
    console.print(
        Panel(
            f"[bold]Login:[/] {settings.app.base_url}/login\n"
            f"[bold]Email:[/] {SEED_EMAIL}\n"
            f"[bold]User id:[/] {user_id}\n"
            f"[bold]Status:[/] {status}",
            title="Seed Data Ready",
        )
    )
