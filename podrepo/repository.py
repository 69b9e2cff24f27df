"""Repository: CRUD access to the records of one type stored in one document.

Every operation works on a fresh snapshot: the document is fetched once at
the start, transformed in memory through the schema, and (for `save` and
`remove`) written back with a single save call. Nothing is cached between
calls, so concurrent writers elsewhere simply win or lose at the store
(last write wins).

Typical usage:
    ```python
    repo = Repository(
        source="https://alice.pod.example/public/bookmarks.ttl",
        type=BOOKMARK,
        schema={
            "id": fields.key().base64(),
            "title": fields.string(DC_TITLE),
            "url": fields.url(BOOKMARK_RECALLS),
        },
    )
    bookmark = {"id": None, "title": "podrepo", "url": "https://example.org"}
    await repo.save(bookmark)          # bookmark["id"] is now set
    everything = await repo.find()
    one = await repo.only(by_keys(bookmark["id"]))
    ```
"""

from collections.abc import Mapping
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel

from podrepo.config import Settings, effective
from podrepo.document import Document
from podrepo.errors import InvalidKey, NoTypeDefined
from podrepo.logging import setup_logging
from podrepo.query import All, ByFilter, ByKeys, Query
from podrepo.resolver import IndexName, ResolveOptions, resolve_location, resolve_or_create_location
from podrepo.schema import AnyField, Schema
from podrepo.schema.schema import get_value
from podrepo.storage.interfaces import DocumentStoreInterface

logger = setup_logging()

TRecord = TypeVar("TRecord")


class Repository(Generic[TRecord]):
    """Find, save and remove records of one schema in one document.

    Args:
        source: URL of the document holding the records.
        schema: A `Schema`, or a raw field definition (name to field). A raw
            definition requires `type`.
        type: rdf:type URL used to build a schema from a raw definition.
        model: Optional pydantic model records are read into.
        store: Document store to use. Defaults to the configured store.
        settings: Settings to use instead of the current ones.

    Raises:
        NoTypeDefined: If `schema` is a raw definition and `type` is missing.
        NoIdentityDefined: If the definition has no key field.
    """

    def __init__(
        self,
        *,
        source: str,
        schema: Schema[TRecord] | Mapping[str, AnyField],
        type: Optional[str] = None,
        model: Optional[type[BaseModel]] = None,
        store: Optional[DocumentStoreInterface] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        if isinstance(schema, Schema):
            self.schema = schema
        else:
            if not type:
                raise NoTypeDefined()
            self.schema = Schema(type, schema, model=model)
        self._source = source
        self._store = store
        self._settings = settings

    @property
    def source(self) -> str:
        return self._source

    @property
    def store(self) -> DocumentStoreInterface:
        if self._store is not None:
            return self._store
        return effective(self._settings).document_store()

    @classmethod
    async def resolve(
        cls,
        *,
        schema: Schema[TRecord] | Mapping[str, AnyField],
        type: Optional[str] = None,
        model: Optional[type[BaseModel]] = None,
        path: Optional[str] = None,
        index: IndexName = "public",
        user_id: Optional[str] = None,
        store: Optional[DocumentStoreInterface] = None,
        settings: Optional[Settings] = None,
    ) -> "Repository[TRecord]":
        """Build a repository whose source is found through the type indexes.

        With `path`, a missing location is created at `path` and registered
        in the `index` type index; without it, a missing location raises
        `NoLocationFound`.
        """
        repository = cls(source="", schema=schema, type=type, model=model, store=store, settings=settings)
        type_url = repository.schema.type_url
        if path is not None:
            repository._source = await resolve_or_create_location(
                type_url,
                ResolveOptions(path=path, index=index),
                user_id=user_id,
                store=store,
                settings=settings,
            )
        else:
            repository._source = await resolve_location(type_url, user_id=user_id, store=store, settings=settings)
        return repository

    async def _fetch(self) -> Document:
        return await self.store.fetch_document(self._source)

    def _read_all(self, document: Document) -> list[TRecord]:
        return [
            self.schema.read(document, subject)
            for subject in document.subjects()
            if self.schema.of_type(document, subject)
        ]

    def _read_keys(self, document: Document, keys: tuple[str, ...]) -> list[TRecord]:
        records = []
        for key in keys:
            try:
                subject = self.schema.subject_url(key)
            except InvalidKey as e:
                logger.debug(f"no record for {e}")
                continue
            # Same URL but another type is not one of ours.
            if document.has_subject(subject) and self.schema.of_type(document, subject):
                records.append(self.schema.read(document, subject))
        return records

    async def find(self, query: Query = All()) -> list[TRecord]:
        """Return the records selected by `query` (every record by default)."""
        document = await self._fetch()
        if isinstance(query, ByKeys):
            return self._read_keys(document, query.keys)
        records = self._read_all(document)
        if isinstance(query, ByFilter):
            return [record for record in records if query.predicate(record)]
        return records

    async def only(self, query: ByKeys | ByFilter) -> Optional[TRecord]:
        """Return the first record selected by `query`, or None."""
        document = await self._fetch()
        if isinstance(query, ByKeys):
            found = self._read_keys(document, query.keys[:1])
            return found[0] if found else None
        for record in self._read_all(document):
            if query.predicate(record):
                return record
        return None

    async def save(self, *records: TRecord) -> tuple[TRecord, ...]:
        """Create or update `records`, then persist the document once.

        A record with an empty key gets a fresh subject. Once it is placed in
        the document its key is set from the subject URL, relative to the
        document location.
        """
        document = await self._fetch()
        store = self.store
        for record in records:
            key = get_value(record, self.schema.identity_name)
            subject = self.schema.subject_url(record) if key else store.create_subject()
            document = self.schema.write(document, subject, record)
            self.schema.set_identity(record, document.subject_url(subject))

        logger.debug(f"saving {len(records)} record(s) to {self._source}")
        await store.save_document(self._source, document)
        return records

    async def remove(self, *keys_or_records: Any) -> None:
        """Remove records given by key or by record, then persist once."""
        document = await self._fetch()
        for item in keys_or_records:
            document = document.remove_subject(self.schema.subject_url(item))

        logger.debug(f"removing {len(keys_or_records)} record(s) from {self._source}")
        await self.store.save_document(self._source, document)
