"""Tests for document upload helpers and list filtering."""

from __future__ import annotations

from uuid import uuid4

import pytest

from contextweaver.db.models import Document
from contextweaver.documents import (
    collect_tags,
    decode_upload,
    file_type_from_filename,
    filter_documents,
    normalise_newlines,
    parse_tags,
    preview,
    title_from_filename,
)


def _doc(title: str, content: str = "", tags: list[str] | None = None) -> Document:
    return Document(user_id=uuid4(), title=title, content=content, tags=tags or [])


class TestUploadHelpers:
    def test_normalise_newlines(self) -> None:
        assert normalise_newlines("a\r\nb\rc\nd") == "a\nb\nc\nd"

    def test_parse_tags_from_string(self) -> None:
        assert parse_tags(" law, ethics ,, law,ai ") == ["law", "ethics", "ai"]

    def test_parse_tags_from_list(self) -> None:
        assert parse_tags(["a", " ", "b ", "a"]) == ["a", "b"]

    @pytest.mark.parametrize(
        ("filename", "title", "file_type"),
        [
            ("notes.md", "notes", "md"),
            ("Report.final.TXT", "Report.final", "txt"),
            ("README", "README", "txt"),
            ("data.csv", "data", "txt"),
        ],
    )
    def test_filename_helpers(self, filename: str, title: str, file_type: str) -> None:
        assert title_from_filename(filename) == title
        assert file_type_from_filename(filename) == file_type

    def test_decode_utf8_with_bom(self) -> None:
        assert decode_upload("\ufeffcafé".encode()) == "café"

    def test_decode_falls_back_to_latin1(self) -> None:
        assert decode_upload(b"caf\xe9") == "café"

    def test_preview_short_content_unchanged(self) -> None:
        assert preview("short", 10) == "short"

    def test_preview_truncates_with_ellipsis(self) -> None:
        assert preview("one two three", 8) == "one two..."


class TestFiltering:
    @pytest.fixture
    def documents(self) -> list[Document]:
        return [
            _doc("Contract Law", "Offer and acceptance", ["law"]),
            _doc("Ethics primer", "Duty of care", ["ethics", "law"]),
            _doc("Field notes", "Two red foxes", []),
        ]

    def test_no_filters_keeps_everything(self, documents: list[Document]) -> None:
        assert filter_documents(documents) == documents

    def test_query_matches_title_or_content(self, documents: list[Document]) -> None:
        assert filter_documents(documents, query="CONTRACT") == [documents[0]]
        assert filter_documents(documents, query="foxes") == [documents[2]]

    def test_tags_match_any(self, documents: list[Document]) -> None:
        assert filter_documents(documents, tags=["ethics"]) == [documents[1]]
        assert filter_documents(documents, tags=["law"]) == documents[:2]

    def test_collection_ids(self, documents: list[Document]) -> None:
        ids = {documents[2].id}
        assert filter_documents(documents, document_ids=ids) == [documents[2]]
        assert filter_documents(documents, document_ids=set()) == []

    def test_filters_combine(self, documents: list[Document]) -> None:
        result = filter_documents(
            documents, query="duty", tags=["law"], document_ids={documents[1].id}
        )
        assert result == [documents[1]]

    def test_collect_tags_sorted_unique(self, documents: list[Document]) -> None:
        assert collect_tags(documents) == ["ethics", "law"]
