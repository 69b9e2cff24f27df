"""Record selection for `Repository.find` and `Repository.only`.

A query is one of three explicit variants chosen by the caller:

- `All()`: every record of the repository type.
- `ByKeys(keys)`: records whose key is listed, in the order given.
- `ByFilter(predicate)`: records for which `predicate(record)` is true.
"""

from typing import Any, Callable, Iterable

from pydantic import BaseModel, ConfigDict


class All(BaseModel):
    model_config = ConfigDict(frozen=True)


class ByKeys(BaseModel):
    model_config = ConfigDict(frozen=True)

    keys: tuple[str, ...]


class ByFilter(BaseModel):
    model_config = ConfigDict(frozen=True)

    predicate: Callable[[Any], bool]


Query = All | ByKeys | ByFilter


def by_keys(*keys: str | Iterable[str]) -> ByKeys:
    """Build a `ByKeys` query from keys or iterables of keys."""
    flat: list[str] = []
    for key in keys:
        if isinstance(key, str):
            flat.append(key)
        else:
            flat.extend(key)
    return ByKeys(keys=tuple(flat))


def by_filter(predicate: Callable[[Any], bool]) -> ByFilter:
    return ByFilter(predicate=predicate)
