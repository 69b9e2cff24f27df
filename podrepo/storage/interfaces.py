"""Document store interface.

The document store is the only component that performs I/O. Everything else
in podrepo is a synchronous transformation of `Document` snapshots between
two store calls, so swapping the store (HTTP, in-memory, ...) changes where
data lives without touching the marshalling or resolution logic.
"""

import uuid
from abc import ABC, abstractmethod

from podrepo.document import Document


class DocumentStoreInterface(ABC):
    """Abstract interface for fetching and saving whole documents.

    Implementations raise `podrepo.errors.TransportError` for every failure
    to read or write a document (missing, forbidden, unreachable or
    unparsable), so callers can tell transport problems apart from their own
    errors.
    """

    @abstractmethod
    async def fetch_document(self, url: str) -> Document:
        """Fetch the document located at `url`.

        Any fragment in `url` is ignored. The returned document carries the
        fragment-less URL.

        Raises:
            TransportError: If the document cannot be read.
        """

    @abstractmethod
    async def save_document(self, url: str, document: Document) -> Document:
        """Replace the document at `url` with `document`.

        Local subjects are resolved against `url` before writing.

        Returns:
            The persisted document, located at `url` with resolved subjects.

        Raises:
            TransportError: If the document cannot be written.
        """

    @abstractmethod
    async def create_document(self, url: str, document: Document) -> Document:
        """Store `document` at `url`, which must not hold a document yet.

        Returns:
            The persisted document, located at `url` with resolved subjects.

        Raises:
            TransportError: If a document already exists at `url` (status
                412) or the document cannot be written.
        """

    def create_subject(self) -> str:
        """Return a fresh local subject reference for a new record."""
        return f"#{uuid.uuid4().hex}"
