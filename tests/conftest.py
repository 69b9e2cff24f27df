"""Test fixtures and helpers shared by the podrepo test suite.

This module provides:
- `make_document()` to build documents from plain (subject, predicate, value)
  tuples, converting Python values to the rdflib terms podrepo writes
- `triples()` to compare documents as sets of statements
- A sample bookmarks document holding two bookmarks and one record of
  another type
- A pod layout (profile, public and private type indexes, registered
  documents) served by an `InMemoryDocumentStore`
- An autouse fixture resetting the current settings between tests
"""

from datetime import datetime
from typing import Any

import pytest
from rdflib import Literal, URIRef

from podrepo.config import reset_settings
from podrepo.document import Document
from podrepo.namespaces import (
    RDF_TYPE,
    SOLID_FOR_CLASS,
    SOLID_INSTANCE,
    SOLID_PRIVATE_TYPE_INDEX,
    SOLID_PUBLIC_TYPE_INDEX,
    SOLID_TYPE_REGISTRATION,
    XSD,
)
from podrepo.schema import fields
from podrepo.storage.memory import InMemoryDocumentStore

WEBID = "https://alice.pod.example/profile/card#me"
PROFILE = "https://alice.pod.example/profile/card"
PUBLIC_INDEX = "https://alice.pod.example/settings/publicTypeIndex.ttl"
PRIVATE_INDEX = "https://alice.pod.example/settings/privateTypeIndex.ttl"
PUBLIC_BOOKMARKS = "https://alice.pod.example/public/bookmarks.ttl"
PRIVATE_BOOKMARKS = "https://alice.pod.example/private/bookmarks.ttl"

BOOKMARK = "https://www.w3.org/2002/01/bookmark#Bookmark"
TITLE = "http://purl.org/dc/elements/1.1/title"
RECALLS = "https://www.w3.org/2002/01/bookmark#recalls"
OTHER_TYPE = "http://another.kind.of.resource"

BOOKMARKS_SOURCE = "http://bookmark.ttl"

BOOKMARK_1 = {
    "id": "aHR0cDovL2Jvb2ttYXJrLnR0bCMx",  # http://bookmark.ttl#1
    "title": "the first bookmark",
    "url": "http://localhost:3000",
}

BOOKMARK_2 = {
    "id": "aHR0cDovL2Jvb2ttYXJrLnR0bCMy",  # http://bookmark.ttl#2
    "title": "the second bookmark",
    "url": "http://localhost:4000",
}


def term(value: Any):
    """Convert a Python value to the rdflib term podrepo would write."""
    if isinstance(value, (URIRef, Literal)):
        return value
    if isinstance(value, bool):
        return Literal("true" if value else "false", datatype=XSD.boolean)
    if isinstance(value, int):
        return Literal(str(value), datatype=XSD.integer)
    if isinstance(value, float):
        return Literal(str(value), datatype=XSD.decimal)
    if isinstance(value, datetime):
        return Literal(value.isoformat(), datatype=XSD.dateTime)
    if isinstance(value, str) and value.startswith("http"):
        return URIRef(value)
    return Literal(value)


def make_document(url: str | None, *statements: tuple[str, str, Any]) -> Document:
    document = Document(url=url)
    for subject, predicate, value in statements:
        document = document.add(subject, predicate, term(value))
    return document


def triples(document: Document) -> set[tuple[str, str, Any]]:
    """Return the statements of a document as a set of resolved triples."""
    resolved = document.resolved()
    return {(s.subject, s.predicate, s.value) for s in resolved.statements}


def expected(*statements: tuple[str, str, Any]) -> set[tuple[str, str, Any]]:
    return {(subject, predicate, term(value)) for subject, predicate, value in statements}


def bookmark_definition() -> dict:
    return {
        "id": fields.key().base64(),
        "title": fields.string(TITLE),
        "url": fields.url(RECALLS),
    }


BOOKMARK_STATEMENTS = (
    ("http://bookmark.ttl#1", RDF_TYPE, BOOKMARK),
    ("http://bookmark.ttl#1", TITLE, BOOKMARK_1["title"]),
    ("http://bookmark.ttl#1", RECALLS, BOOKMARK_1["url"]),
    ("http://bookmark.ttl#2", RDF_TYPE, BOOKMARK),
    ("http://bookmark.ttl#2", TITLE, BOOKMARK_2["title"]),
    ("http://bookmark.ttl#2", RECALLS, BOOKMARK_2["url"]),
    ("http://bookmark.ttl#anotherTypeOfResource", RDF_TYPE, OTHER_TYPE),
)


def registration(index: str, name: str, for_class: str, instance: str) -> tuple[tuple[str, str, Any], ...]:
    subject = f"{index}#{name}"
    return (
        (subject, RDF_TYPE, SOLID_TYPE_REGISTRATION),
        (subject, SOLID_FOR_CLASS, for_class),
        (subject, SOLID_INSTANCE, instance),
    )


@pytest.fixture(autouse=True)
def _reset_settings():
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def bookmarks_document() -> Document:
    return make_document(BOOKMARKS_SOURCE, *BOOKMARK_STATEMENTS)


@pytest.fixture
def bookmarks_store(bookmarks_document) -> InMemoryDocumentStore:
    return InMemoryDocumentStore([bookmarks_document])


@pytest.fixture
def profile_document() -> Document:
    return make_document(
        PROFILE,
        (WEBID, SOLID_PUBLIC_TYPE_INDEX, PUBLIC_INDEX),
        (WEBID, SOLID_PRIVATE_TYPE_INDEX, PRIVATE_INDEX),
    )


@pytest.fixture
def pod_store(profile_document) -> InMemoryDocumentStore:
    """A pod where both indexes register a bookmarks document."""
    return InMemoryDocumentStore(
        [
            profile_document,
            make_document(PUBLIC_INDEX, *registration(PUBLIC_INDEX, "bookmarks", BOOKMARK, PUBLIC_BOOKMARKS)),
            make_document(PRIVATE_INDEX, *registration(PRIVATE_INDEX, "bookmarks", BOOKMARK, PRIVATE_BOOKMARKS)),
            make_document(PUBLIC_BOOKMARKS),
            make_document(PRIVATE_BOOKMARKS),
        ]
    )
