"""Schema definitions: fields, value kinds and the Schema mapper."""

from podrepo.schema import fields
from podrepo.schema.fields import (
    AnyField,
    FieldKind,
    IdentityField,
    RepeatedField,
    ScalarField,
)
from podrepo.schema.schema import Schema
from podrepo.schema.values import ValueKind

__all__ = [
    "fields",
    "AnyField",
    "FieldKind",
    "IdentityField",
    "RepeatedField",
    "ScalarField",
    "Schema",
    "ValueKind",
]
