"""
podrepo - typed records on top of per-user linked data document stores.

Records (dicts or pydantic models) are mapped to statements about one
subject by a `Schema`, stored in a document located either explicitly or
through the user's public and private type indexes.

    from podrepo import Repository, fields, configure, by_keys
"""

from podrepo.config import Settings, configure, current_settings, load_settings, reset_settings, setting, use_settings
from podrepo.document import Document, Statement
from podrepo.errors import (
    InvalidKey,
    MultipleIdentitiesDefined,
    NoIdentityDefined,
    NoIndexLocationFound,
    NoLocationFound,
    NoProfileFound,
    NoTypeDefined,
    NoUserId,
    PodRepoError,
    TransportError,
)
from podrepo.query import All, ByFilter, ByKeys, Query, by_filter, by_keys
from podrepo.repository import Repository
from podrepo.resolver import (
    ResolveOptions,
    TypeRegistration,
    resolve_location,
    resolve_or_create_location,
)
from podrepo.schema import Schema, fields
from podrepo.storage import DocumentStoreInterface, HttpDocumentStore, InMemoryDocumentStore

__all__ = [
    "Settings",
    "configure",
    "current_settings",
    "load_settings",
    "reset_settings",
    "setting",
    "use_settings",
    "Document",
    "Statement",
    "InvalidKey",
    "MultipleIdentitiesDefined",
    "NoIdentityDefined",
    "NoIndexLocationFound",
    "NoLocationFound",
    "NoProfileFound",
    "NoTypeDefined",
    "NoUserId",
    "PodRepoError",
    "TransportError",
    "All",
    "ByFilter",
    "ByKeys",
    "Query",
    "by_filter",
    "by_keys",
    "Repository",
    "ResolveOptions",
    "TypeRegistration",
    "resolve_location",
    "resolve_or_create_location",
    "Schema",
    "fields",
    "DocumentStoreInterface",
    "HttpDocumentStore",
    "InMemoryDocumentStore",
]

__version__ = "0.1.0"
