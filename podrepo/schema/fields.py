"""Field definitions mapping record properties to statements.

Three kinds of fields exist, tagged by `FieldKind`:

- **ScalarField**: one value read from the first predicate holding one and
  written to every predicate.
- **RepeatedField**: the same contract for a list of values. Writing replaces
  every value at each predicate.
- **IdentityField**: the record key. It is derived from the subject URL and
  never written as a statement.

Fields are frozen pydantic models. Configuration helpers return a new field,
so a field can be shared between schemas:

    ```python
    title = fields.string(DC_TITLE).with_default("untitled")
    tags = fields.strings(SCHEMA_KEYWORDS, DC_SUBJECT)
    key = fields.key().base64()
    ```
"""

import base64 as _base64
from enum import Enum
from typing import Any, Callable, Iterable, Literal, Optional

from pydantic import BaseModel, ConfigDict, model_validator

from podrepo.document import Document
from podrepo.errors import InvalidKey
from podrepo.logging import setup_logging
from podrepo.schema.values import ValueKind, decode, encode, matches

logger = setup_logging()

Converter = Callable[[Any], Any]


class FieldKind(str, Enum):
    SCALAR = "scalar"
    REPEATED = "repeated"
    IDENTITY = "identity"


class _ValueField(BaseModel):
    model_config = ConfigDict(frozen=True)

    value_kind: ValueKind
    predicates: tuple[str, ...]
    serialize: Optional[Converter] = None
    deserialize: Optional[Converter] = None

    @model_validator(mode="after")
    def _has_predicates(self) -> "_ValueField":
        if not self.predicates:
            raise ValueError("a field needs at least one predicate")
        return self

    def with_converter(self, serialize: Converter, deserialize: Converter):
        """Return a copy applying `serialize` on write and `deserialize` on read."""
        return self.model_copy(update={"serialize": serialize, "deserialize": deserialize})

    def _read_all(self, document: Document, subject: str, predicate: str) -> list[Any]:
        values = []
        for term in document.values(subject, predicate):
            if not matches(self.value_kind, term):
                continue
            try:
                values.append(decode(self.value_kind, term))
            except ValueError as e:
                logger.debug(f"ignoring ill-typed value at {subject} <{predicate}>: {e}")
        return values


class ScalarField(_ValueField):
    """A single typed value stored at one or more predicates."""

    kind: Literal[FieldKind.SCALAR] = FieldKind.SCALAR
    default_value: Any = None

    def with_default(self, value: Any) -> "ScalarField":
        return self.model_copy(update={"default_value": value})

    def read(self, document: Document, subject: str) -> Any:
        value = None
        for predicate in self.predicates:
            found = self._read_all(document, subject, predicate)
            if found:
                value = found[0]
                break

        if value is None:
            value = self.default_value

        return self.deserialize(value) if self.deserialize else value

    def write(self, document: Document, subject: str, value: Any) -> Document:
        to_write = self.default_value if value is None else value

        if self.serialize:
            to_write = self.serialize(to_write)

        for predicate in self.predicates:
            document = document.remove_all(subject, predicate)
            if to_write is not None:
                document = document.add(subject, predicate, encode(self.value_kind, to_write))
        return document


class RepeatedField(_ValueField):
    """An ordered list of typed values stored at one or more predicates.

    A predicate only counts as holding a value when its list is non-empty;
    `None`, `[]` and a missing property are treated alike.
    """

    kind: Literal[FieldKind.REPEATED] = FieldKind.REPEATED
    default_value: Optional[tuple[Any, ...]] = None

    def with_default(self, values: Iterable[Any]) -> "RepeatedField":
        return self.model_copy(update={"default_value": tuple(values)})

    def _or_default(self, values: Optional[list[Any]]) -> Optional[list[Any]]:
        if not values and self.default_value:
            return list(self.default_value)
        return values

    def read(self, document: Document, subject: str) -> Optional[list[Any]]:
        values: list[Any] = []
        for predicate in self.predicates:
            values = self._read_all(document, subject, predicate)
            if values:
                break

        values = self._or_default(values)

        return self.deserialize(values) if self.deserialize else values

    def write(self, document: Document, subject: str, values: Optional[Iterable[Any]]) -> Document:
        to_write = self._or_default(list(values) if values is not None else None)

        if self.serialize:
            to_write = self.serialize(to_write)

        for predicate in self.predicates:
            document = document.remove_all(subject, predicate)
            for value in to_write or ():
                document = document.add(subject, predicate, encode(self.value_kind, value))
        return document


def _encode_url(url: str) -> str:
    return _base64.urlsafe_b64encode(url.encode("utf-8")).decode("ascii").rstrip("=")


def _decode_url(token: str) -> str:
    padding = "=" * (-len(token) % 4)
    return _base64.urlsafe_b64decode(token + padding).decode("utf-8")


class IdentityField(BaseModel):
    """The record key, derived from the subject URL.

    Without a codec the key is the subject URL itself. A codec is a pair of
    mutually inverse functions converting a key to a URL and back; it is up
    to the caller to make sure they really are inverses.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal[FieldKind.IDENTITY] = FieldKind.IDENTITY
    key_to_url: Optional[Callable[[str], str]] = None
    url_to_key: Optional[Callable[[str], str]] = None

    def with_codec(
        self,
        to_subject_url: Callable[[str], str],
        from_subject_url: Callable[[str], str],
    ) -> "IdentityField":
        return self.model_copy(update={"key_to_url": to_subject_url, "url_to_key": from_subject_url})

    def base64(self) -> "IdentityField":
        """Expose keys as unpadded URL-safe base64 tokens of the subject URL."""
        return self.with_codec(_decode_url, _encode_url)

    def to_subject_url(self, value: str) -> str:
        """Convert a key to its subject URL.

        Raises:
            InvalidKey: If the codec cannot decode `value`.
        """
        if not self.key_to_url:
            return value
        try:
            return self.key_to_url(value)
        except ValueError as e:
            raise InvalidKey(value) from e

    def from_subject_url(self, url: str) -> str:
        return self.url_to_key(url) if self.url_to_key else url

    def read(self, document: Document, subject: str) -> str:
        return self.from_subject_url(document.subject_url(subject))

    def write(self, document: Document, subject: str, value: Any) -> Document:
        # The key is the subject itself; rewriting statements cannot change it.
        return document


AnyField = ScalarField | RepeatedField | IdentityField


def key() -> IdentityField:
    return IdentityField()


def string(*predicates: str) -> ScalarField:
    return ScalarField(value_kind=ValueKind.STRING, predicates=predicates)


def strings(*predicates: str) -> RepeatedField:
    return RepeatedField(value_kind=ValueKind.STRING, predicates=predicates)


def url(*predicates: str) -> ScalarField:
    return ScalarField(value_kind=ValueKind.URL, predicates=predicates)


def urls(*predicates: str) -> RepeatedField:
    return RepeatedField(value_kind=ValueKind.URL, predicates=predicates)


def boolean(*predicates: str) -> ScalarField:
    return ScalarField(value_kind=ValueKind.BOOLEAN, predicates=predicates)


def booleans(*predicates: str) -> RepeatedField:
    return RepeatedField(value_kind=ValueKind.BOOLEAN, predicates=predicates)


def integer(*predicates: str) -> ScalarField:
    return ScalarField(value_kind=ValueKind.INTEGER, predicates=predicates)


def integers(*predicates: str) -> RepeatedField:
    return RepeatedField(value_kind=ValueKind.INTEGER, predicates=predicates)


def decimal(*predicates: str) -> ScalarField:
    return ScalarField(value_kind=ValueKind.DECIMAL, predicates=predicates)


def decimals(*predicates: str) -> RepeatedField:
    return RepeatedField(value_kind=ValueKind.DECIMAL, predicates=predicates)


def datetime(*predicates: str) -> ScalarField:
    return ScalarField(value_kind=ValueKind.DATETIME, predicates=predicates)


def datetimes(*predicates: str) -> RepeatedField:
    return RepeatedField(value_kind=ValueKind.DATETIME, predicates=predicates)
