"""Locate the document holding records of a type, using the user's type indexes.

A user's profile declares up to two type index documents, a public one and
a private one. Each index lists type registrations: "instances of class C
are stored in document D". Resolution walks the public index, then the
private one, and returns the first registered document the current store can
actually read. Entries that are stale or not readable are skipped; only
running out of candidates is an error.

`resolve_or_create_location` adds a create-on-demand path: when nothing is
found it creates an empty document and registers it in the requested index.
"""

from typing import Literal, Optional
from urllib.parse import urljoin, urlparse

from pydantic import BaseModel, ConfigDict

from podrepo.config import Settings, effective
from podrepo.document import Document
from podrepo.errors import (
    NoIndexLocationFound,
    NoLocationFound,
    NoProfileFound,
    NoUserId,
    TransportError,
)
from podrepo.logging import setup_logging
from podrepo.namespaces import (
    SOLID_FOR_CLASS,
    SOLID_INSTANCE,
    SOLID_PRIVATE_TYPE_INDEX,
    SOLID_PUBLIC_TYPE_INDEX,
    SOLID_TYPE_REGISTRATION,
)
from podrepo.schema import Schema, fields
from podrepo.storage.interfaces import DocumentStoreInterface

logger = setup_logging()

IndexName = Literal["public", "private"]


class TypeRegistration(BaseModel):
    """One type index entry: instances of `for_class` live in `instance`."""

    url: Optional[str] = None
    for_class: Optional[str] = None
    instance: Optional[str] = None


class ResolveOptions(BaseModel):
    """Where to create a document when none is registered yet.

    Attributes:
        path: Absolute URL, or a path resolved against the user id.
        index: Which type index receives the new registration.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    index: IndexName = "public"


TYPE_REGISTRATION_SCHEMA: Schema[TypeRegistration] = Schema(
    SOLID_TYPE_REGISTRATION,
    {
        "url": fields.key(),
        "for_class": fields.url(SOLID_FOR_CLASS),
        "instance": fields.url(SOLID_INSTANCE),
    },
    model=TypeRegistration,
)

# Probed in this order: public before private.
_INDEX_FIELDS = {
    "public": fields.url(SOLID_PUBLIC_TYPE_INDEX),
    "private": fields.url(SOLID_PRIVATE_TYPE_INDEX),
}


def _user_id(user_id: Optional[str], settings: Settings) -> str:
    resolved = user_id or settings.user_id
    if not resolved:
        raise NoUserId()
    return resolved


def _store(store: Optional[DocumentStoreInterface], settings: Settings) -> DocumentStoreInterface:
    return store if store is not None else settings.document_store()


async def _index_locations(user_id: str, store: DocumentStoreInterface) -> dict[str, Optional[str]]:
    """Fetch the profile and read its public and private index URLs."""
    profile = await store.fetch_document(user_id)
    if not profile.has_subject(user_id):
        raise NoProfileFound(user_id)
    return {name: field.read(profile, user_id) for name, field in _INDEX_FIELDS.items()}


def registrations_for(index: Document, type_url: str) -> list[TypeRegistration]:
    """Return the registrations of `type_url` in an index, in document order."""
    return [
        registration
        for registration in (
            TYPE_REGISTRATION_SCHEMA.read(index, subject)
            for subject in index.subjects()
            if TYPE_REGISTRATION_SCHEMA.of_type(index, subject)
        )
        if registration.for_class == type_url and registration.instance
    ]


async def _first_accessible(type_url: str, index_url: str, store: DocumentStoreInterface) -> Optional[str]:
    try:
        index = await store.fetch_document(index_url)
    except TransportError as e:
        logger.debug(f"skipping type index {index_url}: {e} (status {e.status_code})")
        return None

    for registration in registrations_for(index, type_url):
        try:
            await store.fetch_document(registration.instance)  # type: ignore[arg-type]
        except TransportError as e:
            logger.debug(f"skipping registered location {registration.instance}: {e} (status {e.status_code})")
            continue
        return registration.instance
    return None


async def resolve_location(
    type_url: str,
    user_id: Optional[str] = None,
    store: Optional[DocumentStoreInterface] = None,
    settings: Optional[Settings] = None,
) -> str:
    """Find an accessible document registered for `type_url`.

    The public index is probed before the private one, and registrations are
    tried in document order; the first one the store can fetch wins.

    Args:
        type_url: The rdf:type of the records to locate.
        user_id: User whose profile lists the type indexes. Defaults to the
            configured user id.
        store: Document store to use. Defaults to the configured store.
        settings: Settings to use instead of the current ones.

    Raises:
        NoUserId: If no user id is available.
        NoProfileFound: If the profile has no statement about the user id.
        NoLocationFound: If no accessible registered document exists.
        TransportError: If the profile itself cannot be fetched.
    """
    settings = effective(settings)
    user = _user_id(user_id, settings)
    store = _store(store, settings)

    indexes = await _index_locations(user, store)
    for name, index_url in indexes.items():
        if not index_url:
            continue
        logger.debug(f"looking for {type_url} in the {name} type index {index_url}")
        location = await _first_accessible(type_url, index_url, store)
        if location is not None:
            logger.debug(f"resolved {type_url} to {location}")
            return location

    raise NoLocationFound(type_url)


def target_url(path: str, user_id: str) -> str:
    """Return `path` if it is an http(s) URL, else `path` resolved against `user_id`."""
    parsed = urlparse(path)
    if parsed.scheme in ("http", "https") and parsed.netloc:
        return path
    if parsed.scheme:
        # "host:port/x" is a path, not a URL with scheme "host".
        path = f"./{path}"
    return urljoin(user_id, path)


async def resolve_or_create_location(
    type_url: str,
    options: ResolveOptions,
    user_id: Optional[str] = None,
    store: Optional[DocumentStoreInterface] = None,
    settings: Optional[Settings] = None,
) -> str:
    """Resolve `type_url`, creating and registering a document if none exists.

    When `resolve_location` finds nothing, an empty document is created at
    `options.path` and a registration pointing to it is added to the index
    named by `options.index`. Any other resolution error propagates.

    Raises:
        NoIndexLocationFound: If the profile does not declare the index.
        TransportError: If a document already exists at `options.path`; it
            is left untouched and nothing is registered.
    """
    try:
        return await resolve_location(type_url, user_id=user_id, store=store, settings=settings)
    except NoLocationFound:
        logger.info(f"no location registered for {type_url}, creating one at {options.path}")

    settings = effective(settings)
    user = _user_id(user_id, settings)
    store = _store(store, settings)

    index_url = (await _index_locations(user, store))[options.index]
    if not index_url:
        raise NoIndexLocationFound(options.index)

    created = await store.create_document(target_url(options.path, user), Document())
    location = created.url or target_url(options.path, user)

    index = await store.fetch_document(index_url)
    index = TYPE_REGISTRATION_SCHEMA.write(
        index,
        store.create_subject(),
        TypeRegistration(for_class=type_url, instance=location),
    )
    await store.save_document(index_url, index)

    logger.info(f"registered {type_url} at {location} in the {options.index} type index")
    return location
