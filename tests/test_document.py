"""Tests for the immutable Document value type."""

from rdflib import BNode, Graph, Literal, URIRef

from podrepo.document import Document

from tests.conftest import expected, make_document, triples

DOC = "https://pod.example/doc.ttl"
NAME = "http://xmlns.com/foaf/0.1/name"
KNOWS = "http://xmlns.com/foaf/0.1/knows"


class TestDocumentEditing:
    def test_add_returns_new_document(self):
        empty = Document(url=DOC)
        one = empty.add(f"{DOC}#a", NAME, Literal("a"))

        assert len(empty) == 0
        assert len(one) == 1

    def test_remove_all_only_touches_one_subject_and_predicate(self):
        document = make_document(
            DOC,
            (f"{DOC}#a", NAME, "a"),
            (f"{DOC}#a", NAME, "alias"),
            (f"{DOC}#a", KNOWS, f"{DOC}#b"),
            (f"{DOC}#b", NAME, "b"),
        )

        updated = document.remove_all(f"{DOC}#a", NAME)

        assert triples(updated) == expected(
            (f"{DOC}#a", KNOWS, f"{DOC}#b"),
            (f"{DOC}#b", NAME, "b"),
        )
        assert len(document) == 4

    def test_remove_subject(self):
        document = make_document(DOC, (f"{DOC}#a", NAME, "a"), (f"{DOC}#b", NAME, "b"))

        assert triples(document.remove_subject(f"{DOC}#a")) == expected((f"{DOC}#b", NAME, "b"))


class TestSubjects:
    def test_local_subjects_resolve_against_document_url(self):
        document = make_document(DOC, ("#a", NAME, "a"))

        assert document.subject_url("#a") == f"{DOC}#a"
        assert document.has_subject(f"{DOC}#a")
        assert document.has_subject("#a")
        assert document.values(f"{DOC}#a", NAME) == [Literal("a")]

    def test_unlocated_document_keeps_local_subjects(self):
        document = make_document(None, ("#a", NAME, "a"))

        assert document.subject_url("#a") == "#a"
        assert document.resolved() is document

    def test_subjects_in_first_appearance_order(self):
        document = make_document(
            DOC,
            (f"{DOC}#b", NAME, "b"),
            ("#a", NAME, "a"),
            (f"{DOC}#b", KNOWS, f"{DOC}#a"),
        )

        assert document.subjects() == [f"{DOC}#b", f"{DOC}#a"]

    def test_resolved_rewrites_local_subjects_and_links(self):
        document = Document(url=DOC).add("#a", KNOWS, URIRef("#b"))

        statement = document.resolved().statements[0]

        assert statement.subject == f"{DOC}#a"
        assert statement.value == URIRef(f"{DOC}#b")


class TestGraphConversion:
    def test_to_graph_and_back(self):
        document = make_document(DOC, ("#a", NAME, "a"), ("#a", KNOWS, f"{DOC}#b"))

        graph = document.to_graph()
        assert (URIRef(f"{DOC}#a"), URIRef(NAME), Literal("a")) in graph

        restored = Document.from_graph(graph, url=DOC)
        assert triples(restored) == triples(document)

    def test_blank_nodes_survive_conversion(self):
        graph = Graph()
        graph.add((BNode("x"), URIRef(NAME), Literal("anonymous")))

        document = Document.from_graph(graph, url=DOC)

        assert document.subjects() == ["_:x"]
        assert (BNode("x"), URIRef(NAME), Literal("anonymous")) in document.to_graph()

    def test_ntriples_rendering(self):
        document = make_document(DOC, ("#a", NAME, "a"))

        assert document.ntriples() == [f'<{DOC}#a> <{NAME}> "a" .']


class TestSubjectIndex:
    def test_local_subjects_are_stored_resolved(self):
        document = Document(url=DOC).add("#a", NAME, Literal("a"))

        assert document.statements[0].subject == f"{DOC}#a"

    def test_unlocated_subjects_resolve_when_located(self):
        document = make_document(None, ("#a", NAME, "a")).with_url(DOC)

        assert document.subjects() == [f"{DOC}#a"]
        assert document.values(f"{DOC}#a", NAME) == [Literal("a")]

    def test_rewritten_subject_keeps_its_position(self):
        document = make_document(DOC, ("#a", NAME, "a"), ("#b", NAME, "b"))

        rewritten = document.remove_all("#a", NAME).add("#a", NAME, Literal("a2"))

        assert rewritten.subjects() == [f"{DOC}#a", f"{DOC}#b"]
        assert not document.remove_all("#a", NAME).has_subject("#a")

    def test_unchanged_copies_are_the_same_document(self):
        document = make_document(DOC, ("#a", NAME, "a"))

        assert document.remove_all("#a", KNOWS) is document
        assert document.remove_subject("#missing") is document

    def test_equality_ignores_emptied_subjects(self):
        document = make_document(DOC, ("#a", NAME, "a"))

        assert document.remove_all("#a", NAME) == Document(url=DOC)
        assert document != Document(url="https://pod.example/other.ttl")
