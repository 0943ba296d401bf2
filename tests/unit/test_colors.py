"""Tests for highlight colour and connection type lookups."""

from __future__ import annotations

import pytest

from contextweaver.highlights import (
    CONNECTION_TYPES,
    HIGHLIGHT_BACKGROUNDS,
    HighlightColor,
    parse_highlight_color,
    resolve_connection_type,
    resolve_highlight_color,
)


def test_every_colour_has_a_background() -> None:
    assert set(HIGHLIGHT_BACKGROUNDS) == set(HighlightColor)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("green", HighlightColor.GREEN),
        (" Pink ", HighlightColor.PINK),
        ("PURPLE", HighlightColor.PURPLE),
        ("orange", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_highlight_color(
    name: str | None, expected: HighlightColor | None
) -> None:
    assert parse_highlight_color(name) is expected


def test_resolve_known_colour() -> None:
    assert resolve_highlight_color("blue") == HIGHLIGHT_BACKGROUNDS[HighlightColor.BLUE]


@pytest.mark.parametrize("name", [None, "", "bg-red-500; background: url(x)"])
def test_resolve_unknown_colour_defaults_to_yellow(name: str | None) -> None:
    assert resolve_highlight_color(name) == HIGHLIGHT_BACKGROUNDS[HighlightColor.YELLOW]


def test_connection_types_cover_the_five_kinds() -> None:
    assert set(CONNECTION_TYPES) == {
        "related",
        "supports",
        "contradicts",
        "expands",
        "cites",
    }


def test_resolve_connection_type() -> None:
    info = resolve_connection_type("contradicts")
    assert info.label == "Contradicts"
    assert "red" in info.badge_classes


@pytest.mark.parametrize("value", [None, "", "refutes"])
def test_unknown_connection_type_falls_back_to_related(value: str | None) -> None:
    assert resolve_connection_type(value).value == "related"
