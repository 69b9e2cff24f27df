"""Default settings shared by repositories and resolvers.

In a typical client application the user logs in once, and from then on
every repository should use that user's id and an authenticated document
store. Rather than passing both everywhere, they can be placed in the
current `Settings`:

    ```python
    configure(user_id="https://alice.pod.example/profile/card#me",
              store=HttpDocumentStore(auth=my_auth))
    ```

The current settings live in a context variable, so each asyncio task (and
each test) works on an explicit value that can be scoped with
`use_settings()` and restored with `reset_settings()`. Explicit arguments to
a call always win over injected `settings=`, which win over the current
context value.

`load_settings()` reads defaults from a TOML file and the environment. It is
never applied implicitly. The file is looked up in order:
  1. Path in the PODREPO_CONFIG env var (if set)
  2. podrepo.toml in the current working directory

Example file:

    ```toml
    [podrepo]
    user_id = "https://alice.pod.example/profile/card#me"
    timeout = 5.0
    ```

PODREPO_USER_ID and PODREPO_TIMEOUT override the file.
"""

from __future__ import annotations

import os
import tomllib
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field

from podrepo.logging import setup_logging
from podrepo.storage.http import DEFAULT_TIMEOUT, HttpDocumentStore
from podrepo.storage.interfaces import DocumentStoreInterface

logger = setup_logging()


class Settings(BaseModel):
    """Defaults applied when a call does not provide its own values.

    Attributes:
        user_id: URL of the user's profile (WebID) used to locate type indexes.
        store: Document store used for every fetch and save.
        timeout: Request timeout for the default HTTP store.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    user_id: Optional[str] = Field(default=None, description="Default user id (WebID)")
    store: Optional[DocumentStoreInterface] = Field(default=None, description="Default document store")
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, description="Timeout of the default HTTP store")

    def document_store(self) -> DocumentStoreInterface:
        """Return the configured store, or an unauthenticated HTTP store."""
        if self.store is not None:
            return self.store
        return HttpDocumentStore(timeout=self.timeout)


_current: ContextVar[Settings] = ContextVar("podrepo_settings", default=Settings())


def current_settings() -> Settings:
    return _current.get()


def configure(**options: Any) -> Settings:
    """Merge `options` into the current settings and return the result.

    Passing None for an option clears it.
    """
    unknown = set(options) - set(Settings.model_fields)
    if unknown:
        raise ValueError(f"Unknown settings: {sorted(unknown)}")
    settings = Settings.model_validate({**dict(_current.get()), **options})
    _current.set(settings)
    return settings


def setting(name: str) -> Any:
    """Read one value from the current settings."""
    return getattr(_current.get(), name)


def reset_settings() -> None:
    _current.set(Settings())


@contextmanager
def use_settings(settings: Settings) -> Iterator[Settings]:
    """Make `settings` current for the duration of the block."""
    token = _current.set(settings)
    try:
        yield settings
    finally:
        _current.reset(token)


def effective(settings: Optional[Settings]) -> Settings:
    return settings if settings is not None else _current.get()


def _default_config_paths() -> list[Path]:
    """Return paths to check for podrepo.toml (first existing wins)."""
    paths: list[Path] = []
    if os.environ.get("PODREPO_CONFIG"):
        paths.append(Path(os.environ["PODREPO_CONFIG"]))
    paths.append(Path.cwd() / "podrepo.toml")
    return paths


def load_settings(store: Optional[DocumentStoreInterface] = None) -> Settings:
    """Build settings from podrepo.toml and PODREPO_* environment variables."""
    values: dict[str, Any] = {}
    for path in _default_config_paths():
        if path.is_file():
            try:
                with open(path, "rb") as f:
                    data = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as e:
                logger.warning(f"ignoring unreadable config file {path}: {e}")
                continue
            section = data.get("podrepo")
            if isinstance(section, dict):
                if isinstance(section.get("user_id"), str):
                    values["user_id"] = section["user_id"]
                if isinstance(section.get("timeout"), (int, float)):
                    values["timeout"] = float(section["timeout"])
            break

    if os.environ.get("PODREPO_USER_ID"):
        values["user_id"] = os.environ["PODREPO_USER_ID"]
    if os.environ.get("PODREPO_TIMEOUT"):
        values["timeout"] = float(os.environ["PODREPO_TIMEOUT"])

    return Settings(store=store, **values)
