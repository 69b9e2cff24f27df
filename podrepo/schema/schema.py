"""Schema: binds a type URL to an ordered set of fields.

A schema is the marshalling engine between records and statements. It is
built once from a definition mapping property names to fields, picks out
the single identity field at construction time and keeps the remaining
fields in declaration order.

Records are either plain dicts or instances of a pydantic model class. When
a model is given, `read` validates the field values into it; otherwise a
fresh dict is returned.
"""

from collections.abc import Mapping, MutableMapping
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel

from podrepo.document import Document
from podrepo.errors import MultipleIdentitiesDefined, NoIdentityDefined
from podrepo.namespaces import RDF_TYPE
from podrepo.schema.fields import AnyField, FieldKind, IdentityField, urls

TRecord = TypeVar("TRecord")

_TYPE_FIELD = urls(RDF_TYPE)


def get_value(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def set_value(record: Any, name: str, value: Any) -> None:
    if isinstance(record, MutableMapping):
        record[name] = value
    else:
        setattr(record, name, value)


class Schema(Generic[TRecord]):
    """Maps records of one type to statements about one subject.

    Args:
        type_url: The rdf:type written for every record and used to
            recognise records of this schema.
        definition: Property name to field, in the order fields are written.
            Exactly one field must be an identity field.
        model: Optional pydantic model class records are read into.

    Raises:
        NoIdentityDefined: If `definition` has no identity field.
        MultipleIdentitiesDefined: If it has more than one.
    """

    def __init__(
        self,
        type_url: str,
        definition: Mapping[str, AnyField],
        model: Optional[type[BaseModel]] = None,
    ) -> None:
        self.type_url = str(type_url)
        self.model = model
        self._fields: dict[str, AnyField] = dict(definition)

        identity: Optional[tuple[str, IdentityField]] = None
        values: list[tuple[str, AnyField]] = []
        for name, field in self._fields.items():
            if field.kind is FieldKind.IDENTITY:
                if identity is not None:
                    raise MultipleIdentitiesDefined([identity[0], name])
                identity = (name, field)
            else:
                values.append((name, field))

        if identity is None:
            raise NoIdentityDefined()

        self.identity_name, self.identity = identity
        self._value_fields = values

    @property
    def fields(self) -> dict[str, AnyField]:
        return dict(self._fields)

    def of_type(self, document: Document, subject: str) -> bool:
        """Tell whether `subject` carries this schema's rdf:type."""
        return self.type_url in _TYPE_FIELD.read(document, subject)

    def subject_url(self, record_or_key: Any) -> str:
        """Return the subject URL for a record or a raw key value."""
        key = record_or_key if isinstance(record_or_key, str) else get_value(record_or_key, self.identity_name)
        return self.identity.to_subject_url(key)

    def set_identity(self, record: Any, subject_url: str) -> None:
        """Store the key derived from `subject_url` into `record`."""
        set_value(record, self.identity_name, self.identity.from_subject_url(subject_url))

    def write(self, document: Document, subject: str, record: Any) -> Document:
        """Write `record` as statements about `subject` and return the new document."""
        document = _TYPE_FIELD.write(document, subject, [self.type_url])
        for name, field in self._value_fields:
            document = field.write(document, subject, get_value(record, name))
        return document

    def read(self, document: Document, subject: str) -> TRecord:
        """Read every field, identity included, into a fresh record."""
        data = {name: field.read(document, subject) for name, field in self._fields.items()}
        if self.model is not None:
            return self.model.model_validate(data)  # type: ignore[return-value]
        return data  # type: ignore[return-value]
