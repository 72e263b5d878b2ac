from datetime import date, datetime, timezone

import pytest

from folio.documents import ContentDocument, DocumentType


def test_document_type_parse():
    assert DocumentType.parse("Post") is DocumentType.POST
    assert DocumentType.parse(" settings ") is DocumentType.SETTINGS
    with pytest.raises(ValueError, match="unknown document type"):
        DocumentType.parse("gallery")


def test_derived_properties():
    document = ContentDocument(
        path="blog/2024-09-01-first-trip",
        type=DocumentType.POST,
        metadata={
            "date": date(2024, 9, 1),
            "author": "Jane Doe",
            "tags": ["travel"],
            "categories": "Europe",
        },
        body="# Heading\n\nIt all started in Lisbon.\n",
    )
    assert document.title == "First Trip"
    assert document.slug == "first-trip"
    assert document.date == datetime(2024, 9, 1, tzinfo=timezone.utc)
    assert document.draft is False
    assert document.author == "Jane Doe"
    assert document.tags == ["travel"]
    assert document.categories == ["Europe"]
    assert document.summary == "It all started in Lisbon."


def test_description_wins_over_body_summary():
    document = ContentDocument(
        path="about",
        type=DocumentType.PAGE,
        metadata={"title": "About", "description": "Who we are"},
        body="Long body text.",
    )
    assert document.summary == "Who we are"
    assert document.date is None


def test_source_is_not_part_of_equality(tmp_path):
    a = ContentDocument(path="x", type=DocumentType.PAGE, source=tmp_path / "x.md")
    b = ContentDocument(path="x", type=DocumentType.PAGE)
    assert a == b


def test_to_dict_is_json_friendly():
    document = ContentDocument(
        path="blog/post",
        type=DocumentType.POST,
        metadata={"title": "Post", "date": "2024-09-19T05:00:00Z", "draft": True},
    )
    assert document.to_dict() == {
        "path": "blog/post",
        "type": "post",
        "title": "Post",
        "date": "2024-09-19T05:00:00+00:00",
        "author": None,
        "tags": [],
        "categories": [],
        "draft": True,
        "summary": "",
    }
