"""Documents: named, immutable collections of statements.

A `Document` is what a document store fetches and saves as one unit. Every
helper that changes statements returns a new document and leaves the
original untouched, so a fetched snapshot can be transformed step by step
without aliasing surprises.

Subjects are plain strings. They are either absolute URLs, local fragment
references such as ``#3f2a...`` (minted for records that have not been saved
yet) or blank node labels (``_:b0``). A located document resolves local
references against its URL when statements are added, so ``#a`` and
``https://pod.example/doc.ttl#a`` name the same subject inside a document
located at ``https://pod.example/doc.ttl``.

Statements are kept grouped by subject. Lookups by subject are dictionary
hits, and a copy only duplicates the subject table, not every statement.
"""

import re
from itertools import chain
from typing import Iterable
from urllib.parse import urljoin

from pydantic import BaseModel, ConfigDict
from rdflib import BNode, Graph, URIRef
from rdflib.term import Identifier

BLANK_PREFIX = "_:"

_SCHEME = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*:")


class Statement(BaseModel):
    """One (subject, predicate, value) triple.

    Attributes:
        subject: Subject URL, local fragment reference or blank node label.
        predicate: Predicate URL.
        value: An rdflib term, either a `URIRef` or a `Literal`.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    subject: str
    predicate: str
    value: Identifier


def _is_absolute(reference: str) -> bool:
    return reference.startswith(BLANK_PREFIX) or _SCHEME.match(reference) is not None


class Document:
    """An immutable set of statements, optionally located at a URL.

    `subjects()` reports subjects in order of first appearance and the values
    at a (subject, predicate) pair keep their insertion order, which keeps
    record and registration order stable across reads. A subject keeps its
    position while its statements are rewritten; only `remove_subject`
    forgets it.
    """

    __slots__ = ("_url", "_subjects")

    def __init__(self, url: str | None = None, statements: Iterable[Statement] = ()) -> None:
        self._url = url
        grouped: dict[str, list[Statement]] = {}
        for statement in statements:
            subject = self.subject_url(statement.subject)
            if subject != statement.subject:
                statement = statement.model_copy(update={"subject": subject})
            grouped.setdefault(subject, []).append(statement)
        self._subjects: dict[str, tuple[Statement, ...]] = {s: tuple(group) for s, group in grouped.items()}

    @classmethod
    def _from_subjects(cls, url: str | None, subjects: dict[str, tuple[Statement, ...]]) -> "Document":
        document = cls.__new__(cls)
        document._url = url
        document._subjects = subjects
        return document

    @property
    def url(self) -> str | None:
        return self._url

    @property
    def statements(self) -> tuple[Statement, ...]:
        return tuple(chain.from_iterable(self._subjects.values()))

    def __len__(self) -> int:
        return sum(len(group) for group in self._subjects.values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return self._url == other._url and self._groups() == other._groups()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Document(url={self._url!r}, statements={len(self)})"

    def _groups(self) -> dict[str, tuple[Statement, ...]]:
        return {subject: group for subject, group in self._subjects.items() if group}

    def subject_url(self, subject: str) -> str:
        """Resolve a subject against this document's URL."""
        subject = str(subject)
        if self._url is None or _is_absolute(subject):
            return subject
        return urljoin(self._url, subject)

    def subjects(self) -> list[str]:
        """Return every subject (resolved) in order of first appearance."""
        return [subject for subject, group in self._subjects.items() if group]

    def has_subject(self, subject: str) -> bool:
        return bool(self._subjects.get(self.subject_url(subject)))

    def values(self, subject: str, predicate: str) -> list[Identifier]:
        """Return every value at (subject, predicate) in insertion order."""
        predicate = str(predicate)
        return [s.value for s in self._subjects.get(self.subject_url(subject), ()) if s.predicate == predicate]

    def add(self, subject: str, predicate: str, value: Identifier) -> "Document":
        """Return a copy with one more statement."""
        target = self.subject_url(subject)
        statement = Statement(subject=target, predicate=str(predicate), value=value)
        subjects = dict(self._subjects)
        subjects[target] = (*subjects.get(target, ()), statement)
        return self._from_subjects(self._url, subjects)

    def remove_all(self, subject: str, predicate: str) -> "Document":
        """Return a copy without any statement at (subject, predicate)."""
        target = self.subject_url(subject)
        predicate = str(predicate)
        group = self._subjects.get(target, ())
        kept = tuple(s for s in group if s.predicate != predicate)
        if len(kept) == len(group):
            return self
        subjects = dict(self._subjects)
        subjects[target] = kept
        return self._from_subjects(self._url, subjects)

    def remove_subject(self, subject: str) -> "Document":
        """Return a copy without any statement about `subject`."""
        target = self.subject_url(subject)
        if target not in self._subjects:
            return self
        subjects = dict(self._subjects)
        del subjects[target]
        return self._from_subjects(self._url, subjects)

    def with_url(self, url: str) -> "Document":
        return Document(url, self.statements)

    def resolved(self) -> "Document":
        """Return a copy where local subjects and IRI values are absolute."""
        if self._url is None:
            return self
        statements = []
        for s in self.statements:
            if isinstance(s.value, URIRef) and not _is_absolute(str(s.value)):
                s = s.model_copy(update={"value": URIRef(urljoin(self._url, str(s.value)))})
            statements.append(s)
        return Document(self._url, statements)

    def ntriples(self) -> list[str]:
        """Render each statement as an N-Triples-like line."""
        return [f"{_subject_node(s.subject).n3()} <{s.predicate}> {s.value.n3()} ." for s in self.statements]

    def to_graph(self) -> Graph:
        """Convert to an rdflib graph with every local reference resolved."""
        graph = Graph()
        for s in self.resolved().statements:
            graph.add((_subject_node(s.subject), URIRef(s.predicate), s.value))
        return graph

    @classmethod
    def from_graph(cls, graph: Graph, url: str | None = None) -> "Document":
        statements = (
            Statement(
                subject=f"{BLANK_PREFIX}{subject}" if isinstance(subject, BNode) else str(subject),
                predicate=str(predicate),
                value=value,
            )
            for subject, predicate, value in graph
        )
        return cls(url, statements)


def _subject_node(subject: str) -> Identifier:
    if subject.startswith(BLANK_PREFIX):
        return BNode(subject[len(BLANK_PREFIX):])
    return URIRef(subject)
