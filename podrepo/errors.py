"""Errors raised by podrepo.

Every error is terminal for the operation that raised it; nothing here is
retried internally. Callers can branch on the concrete class, for example
catching `NoLocationFound` to fall back to creating a new document.
"""


class PodRepoError(Exception):
    """Base class for every error raised by this package."""


class NoIdentityDefined(PodRepoError):
    """A schema definition has no identity (`key()`) field."""

    def __init__(self) -> None:
        super().__init__("a schema definition needs a key() field to hold the subject URL")


class NoTypeDefined(PodRepoError):
    """A repository was given a raw field definition without a type URL."""

    def __init__(self) -> None:
        super().__init__("a type URL is required when the schema is given as a field definition")


class NoUserId(PodRepoError):
    """No user id was given and none is configured."""

    def __init__(self) -> None:
        super().__init__("no user id was given and the configured settings do not define one")


class NoProfileFound(PodRepoError):
    """The profile document holds no statement about the user id."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"could not find a profile for {user_id}")
        self.user_id = user_id


class NoLocationFound(PodRepoError):
    """Neither type index points to an accessible document for a type."""

    def __init__(self, type_url: str) -> None:
        super().__init__(f"could not find any accessible location holding data of type {type_url}")
        self.type_url = type_url


class NoIndexLocationFound(PodRepoError):
    """The profile does not declare the requested type index."""

    def __init__(self, index: str) -> None:
        super().__init__(f"the profile does not declare a {index} type index")
        self.index = index


class TransportError(PodRepoError):
    """A document could not be fetched or saved.

    Attributes:
        url: The document URL the request targeted.
        status_code: HTTP status code when one was received, None for
            network or parse failures.
    """

    def __init__(self, url: str, message: str, status_code: int | None = None) -> None:
        super().__init__(f"{url}: {message}")
        self.url = url
        self.status_code = status_code


class MultipleIdentitiesDefined(PodRepoError):
    """A schema definition has more than one identity (`key()`) field."""

    def __init__(self, names: list[str]) -> None:
        super().__init__(f"a schema definition needs exactly one key() field, found {', '.join(names)}")
        self.names = names


class InvalidKey(PodRepoError, ValueError):
    """A key cannot be converted to a subject URL by its identity codec."""

    def __init__(self, key: str) -> None:
        super().__init__(f"{key!r} is not a valid key")
        self.key = key
