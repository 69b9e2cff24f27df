"""Vocabulary used when reading and writing statements.

Only the handful of terms the repository and the type index resolver need
are declared here; application vocabularies (Dublin Core, bookmarks, ...)
are supplied by callers as plain predicate URLs.
"""

from rdflib.namespace import RDF, XSD, Namespace

SOLID = Namespace("http://www.w3.org/ns/solid/terms#")

RDF_TYPE = str(RDF.type)

SOLID_FOR_CLASS = str(SOLID.forClass)
SOLID_INSTANCE = str(SOLID.instance)
SOLID_PUBLIC_TYPE_INDEX = str(SOLID.publicTypeIndex)
SOLID_PRIVATE_TYPE_INDEX = str(SOLID.privateTypeIndex)
SOLID_TYPE_REGISTRATION = str(SOLID.TypeRegistration)

__all__ = [
    "RDF",
    "XSD",
    "SOLID",
    "RDF_TYPE",
    "SOLID_FOR_CLASS",
    "SOLID_INSTANCE",
    "SOLID_PUBLIC_TYPE_INDEX",
    "SOLID_PRIVATE_TYPE_INDEX",
    "SOLID_TYPE_REGISTRATION",
]
