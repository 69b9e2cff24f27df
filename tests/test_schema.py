"""Tests for the Schema mapper."""

from typing import Optional

import pytest
from pydantic import BaseModel

from podrepo.document import Document
from podrepo.errors import MultipleIdentitiesDefined, NoIdentityDefined
from podrepo.namespaces import RDF_TYPE
from podrepo.schema import Schema, fields

from tests.conftest import (
    BOOKMARK,
    BOOKMARK_1,
    OTHER_TYPE,
    RECALLS,
    TITLE,
    bookmark_definition,
    expected,
    make_document,
    triples,
)

TAGS = "http://vocab.example/tags"
VISITS = "http://vocab.example/visits"


class Bookmark(BaseModel):
    id: Optional[str] = None
    title: Optional[str] = None
    url: Optional[str] = None


def test_requires_an_identity_field():
    with pytest.raises(NoIdentityDefined):
        Schema(BOOKMARK, {"title": fields.string(TITLE)})


def test_rejects_a_second_identity_field():
    with pytest.raises(MultipleIdentitiesDefined) as info:
        Schema(BOOKMARK, {"id": fields.key(), "title": fields.string(TITLE), "other_id": fields.key().base64()})

    assert info.value.names == ["id", "other_id"]


def test_identity_is_resolved_at_construction():
    schema = Schema(BOOKMARK, bookmark_definition())

    assert schema.identity_name == "id"
    assert list(schema.fields) == ["id", "title", "url"]


def test_of_type(bookmarks_document):
    schema = Schema(BOOKMARK, bookmark_definition())

    assert schema.of_type(bookmarks_document, "http://bookmark.ttl#1")
    assert not schema.of_type(bookmarks_document, "http://bookmark.ttl#anotherTypeOfResource")
    assert not schema.of_type(bookmarks_document, "http://bookmark.ttl#missing")


def test_of_type_accepts_subjects_with_several_types():
    document = make_document("http://bookmark.ttl", ("#x", RDF_TYPE, OTHER_TYPE), ("#x", RDF_TYPE, BOOKMARK))

    assert Schema(BOOKMARK, bookmark_definition()).of_type(document, "#x")


def test_read(bookmarks_document):
    schema = Schema(BOOKMARK, bookmark_definition())

    assert schema.read(bookmarks_document, "http://bookmark.ttl#1") == BOOKMARK_1


def test_read_into_model(bookmarks_document):
    schema = Schema(BOOKMARK, bookmark_definition(), model=Bookmark)

    record = schema.read(bookmarks_document, "http://bookmark.ttl#1")

    assert record == Bookmark(**BOOKMARK_1)


def test_write_sets_type_and_fields():
    schema = Schema(BOOKMARK, bookmark_definition())
    document = make_document("http://bookmark.ttl", ("#1", RDF_TYPE, OTHER_TYPE))

    written = schema.write(document, "#1", {"title": "a title", "url": "http://a.url"})

    assert triples(written) == expected(
        ("http://bookmark.ttl#1", RDF_TYPE, BOOKMARK),
        ("http://bookmark.ttl#1", TITLE, "a title"),
        ("http://bookmark.ttl#1", RECALLS, "http://a.url"),
    )


def test_write_ignores_identity_value():
    schema = Schema(BOOKMARK, bookmark_definition())

    written = schema.write(Document(url="http://bookmark.ttl"), "#1", {"id": "whatever", "title": "t"})

    assert all(s.predicate != "id" for s in written.statements)
    assert written.subjects() == ["http://bookmark.ttl#1"]


def test_write_missing_properties_clears_them(bookmarks_document):
    schema = Schema(BOOKMARK, bookmark_definition())

    written = schema.write(bookmarks_document, "http://bookmark.ttl#1", {"title": "only a title"})

    assert schema.read(written, "http://bookmark.ttl#1") == {
        "id": BOOKMARK_1["id"],
        "title": "only a title",
        "url": None,
    }


def test_round_trip_with_every_field_kind():
    schema = Schema(
        BOOKMARK,
        {
            "id": fields.key(),
            "title": fields.string(TITLE),
            "tags": fields.strings(TAGS),
            "visits": fields.integer(VISITS),
            "url": fields.url(RECALLS),
        },
    )
    record = {
        "id": "http://bookmark.ttl#new",
        "title": "round trip",
        "tags": ["a", "b"],
        "visits": 3,
        "url": "http://round.trip",
    }

    document = schema.write(Document(url="http://bookmark.ttl"), "#new", record)

    assert schema.read(document, "#new") == record


def test_subject_url_from_key_or_record():
    schema = Schema(BOOKMARK, bookmark_definition())

    assert schema.subject_url(BOOKMARK_1["id"]) == "http://bookmark.ttl#1"
    assert schema.subject_url(BOOKMARK_1) == "http://bookmark.ttl#1"
    assert schema.subject_url(Bookmark(**BOOKMARK_1)) == "http://bookmark.ttl#1"


def test_set_identity_on_dict_and_model():
    schema = Schema(BOOKMARK, bookmark_definition())
    as_dict = {"id": None}
    as_model = Bookmark()

    schema.set_identity(as_dict, "http://bookmark.ttl#1")
    schema.set_identity(as_model, "http://bookmark.ttl#1")

    assert as_dict["id"] == BOOKMARK_1["id"]
    assert as_model.id == BOOKMARK_1["id"]
