"""In-memory document store for testing and development.

Documents live in a dictionary keyed by their fragment-less URL. Access
control is simulated with `deny()`: a denied URL fails every fetch and save
with a 403 `TransportError`, which is how an inaccessible type index or
registered document looks to the resolver.

**Not meant for production**: nothing is persisted and there is no
concurrency control.
"""

from typing import Iterable
from urllib.parse import urldefrag

from podrepo.document import Document
from podrepo.errors import TransportError
from podrepo.logging import setup_logging
from podrepo.storage.interfaces import DocumentStoreInterface

logger = setup_logging()


class InMemoryDocumentStore(DocumentStoreInterface):
    """Dictionary backed document store.

    Every call is appended to `calls` as an ``(operation, url)`` tuple so
    tests can assert on the exact sequence of transport calls.

    Example:
        ```python
        store = InMemoryDocumentStore([Document(url="https://pod.example/a.ttl")])
        store.deny("https://pod.example/private/")
        document = await store.fetch_document("https://pod.example/a.ttl")
        ```
    """

    def __init__(self, documents: Iterable[Document] = (), denied: Iterable[str] = ()) -> None:
        self._documents: dict[str, Document] = {}
        self._denied: set[str] = {urldefrag(url)[0] for url in denied}
        self.calls: list[tuple[str, str]] = []
        for document in documents:
            self.put(document)

    def put(self, document: Document) -> None:
        """Seed a document without going through `save_document`."""
        if document.url is None:
            raise ValueError("only located documents can be stored")
        url = urldefrag(document.url)[0]
        self._documents[url] = document.with_url(url).resolved()

    def get(self, url: str) -> Document | None:
        """Return the stored document at `url`, bypassing access control."""
        return self._documents.get(urldefrag(url)[0])

    def deny(self, url: str) -> None:
        self._denied.add(urldefrag(url)[0])

    def allow(self, url: str) -> None:
        self._denied.discard(urldefrag(url)[0])

    def _check_access(self, url: str) -> None:
        if url in self._denied:
            raise TransportError(url, "access denied", status_code=403)

    async def fetch_document(self, url: str) -> Document:
        url = urldefrag(url)[0]
        self.calls.append(("fetch", url))
        self._check_access(url)
        document = self._documents.get(url)
        if document is None:
            raise TransportError(url, "document not found", status_code=404)
        logger.debug(f"fetched {url} ({len(document)} statements)")
        return document

    async def save_document(self, url: str, document: Document) -> Document:
        url = urldefrag(url)[0]
        self.calls.append(("save", url))
        self._check_access(url)
        saved = document.with_url(url).resolved()
        self._documents[url] = saved
        logger.debug(f"saved {url} ({len(saved)} statements)")
        return saved

    async def create_document(self, url: str, document: Document) -> Document:
        url = urldefrag(url)[0]
        self.calls.append(("create", url))
        self._check_access(url)
        if url in self._documents:
            raise TransportError(url, "document already exists", status_code=412)
        created = document.with_url(url).resolved()
        self._documents[url] = created
        logger.debug(f"created {url} ({len(created)} statements)")
        return created
