"""Value kinds understood by scalar and repeated fields.

Each kind decides which statement values belong to it, how such a value is
turned into a Python value and how a Python value is written back as an
rdflib term. A statement whose value does not match a field's kind is
invisible to that field, the same way a string getter ignores integers.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from rdflib import Literal, URIRef
from rdflib.term import Identifier

from podrepo.namespaces import XSD


class ValueKind(str, Enum):
    STRING = "string"
    URL = "url"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    DECIMAL = "decimal"
    DATETIME = "datetime"


_DATATYPES = {
    ValueKind.BOOLEAN: XSD.boolean,
    ValueKind.INTEGER: XSD.integer,
    ValueKind.DECIMAL: XSD.decimal,
    ValueKind.DATETIME: XSD.dateTime,
}


def matches(kind: ValueKind, term: Identifier) -> bool:
    """Tell whether a statement value can be read as `kind`."""
    if kind is ValueKind.URL:
        return isinstance(term, URIRef)
    if not isinstance(term, Literal):
        return False
    if kind is ValueKind.STRING:
        return term.language is None and term.datatype in (None, XSD.string)
    return term.datatype == _DATATYPES[kind]


def decode(kind: ValueKind, term: Identifier) -> Any:
    """Convert a matching statement value to its Python value."""
    if kind in (ValueKind.STRING, ValueKind.URL):
        return str(term)
    if kind is ValueKind.BOOLEAN:
        return str(term).strip().lower() in ("true", "1")
    if kind is ValueKind.INTEGER:
        return int(str(term))
    if kind is ValueKind.DECIMAL:
        return float(str(term))
    value = term.toPython()
    if not isinstance(value, datetime):
        raise ValueError(f"invalid xsd:dateTime literal {str(term)!r}")
    return value


def encode(kind: ValueKind, value: Any) -> Identifier:
    """Convert a Python value to the statement value written for `kind`."""
    if kind is ValueKind.URL:
        return URIRef(str(value))
    if kind is ValueKind.STRING:
        return Literal(str(value))
    if kind is ValueKind.BOOLEAN:
        return Literal("true" if value else "false", datatype=XSD.boolean)
    if kind is ValueKind.INTEGER:
        return Literal(str(int(value)), datatype=XSD.integer)
    if kind is ValueKind.DECIMAL:
        return Literal(str(Decimal(str(value))), datatype=XSD.decimal)
    if not isinstance(value, datetime):
        raise TypeError(f"expected a datetime, got {type(value).__name__}")
    return Literal(value.isoformat(), datatype=XSD.dateTime)
