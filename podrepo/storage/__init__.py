"""Document store interface and implementations."""

from podrepo.storage.http import HttpDocumentStore
from podrepo.storage.interfaces import DocumentStoreInterface
from podrepo.storage.memory import InMemoryDocumentStore

__all__ = [
    "DocumentStoreInterface",
    "HttpDocumentStore",
    "InMemoryDocumentStore",
]
