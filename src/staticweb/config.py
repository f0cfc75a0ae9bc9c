"""
=============================================================================
STATIC SERVER CONFIGURATION
=============================================================================

Centralized, immutable configuration for the static content server.

=============================================================================
SNAPSHOTS, NOT MUTATION
=============================================================================

Every settings call produces a brand new ``WebConfig`` and the server swaps
it in as a whole, then rebuilds its buffer from that snapshot:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    SETTINGS APPLICATION                             │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   current snapshot ──┐                                              │
    │                      ├──► WebConfig.from_options(opts, base=current)│
    │   option dict ───────┘              │                               │
    │                                     ▼                               │
    │                              new snapshot ──► validate()            │
    │                                     │                               │
    │                                     ▼                               │
    │                       server.config = new snapshot                  │
    │                       buffer rebuilt from new snapshot              │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Only options that are present (and not None) override the base snapshot.
Missing options fall back to the documented defaults, which is never an
error.

=============================================================================
OPTION NAMES
=============================================================================

    Option            Field                 Default
    ───────────────   ───────────────────   ─────────────────────
    url               url                   "/"
    rootDir           roots                 "htdocs" under "/"
    mimes             mimes                 DEFAULT_MIMES
    headers           headers               {}
    buffering         buffering             True
    bufferingMaxSize  buffering_max_size    300000 bytes
    directReading     direct_reading        False
    notFound          not_found             False (disabled)
    directoryIndexs   directory_indexes     ()
    listNavigator     list_navigator        False
    logAccess         log_access            None

=============================================================================
"""

import logging
import os
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Mapping, Optional, Union

from .core.roots import Mount, RootSpec, normalize_roots, with_mount
from .http.mime_types import MimeTable


logger = logging.getLogger(__name__)


DEFAULT_ROOT_DIR = "htdocs"
DEFAULT_MAX_SIZE = 300000


class ConfigError(ValueError):
    """Raised when a settings snapshot fails validation."""


class NotFoundMode(Enum):
    DISABLED = "disabled"   # listen() returns False, nothing written
    STATUS = "status"       # bare 404 with an empty body
    PAGE = "page"           # 404 with the content of a page file


@dataclass(frozen=True)
class NotFoundPolicy:
    """
    What to do when a request matches no content.

    The ``notFound`` option accepts ``False``, ``True`` or a page path;
    ``parse`` turns those into an explicit mode.
    """

    mode: NotFoundMode = NotFoundMode.DISABLED
    page: Optional[str] = None

    @classmethod
    def parse(cls, value: Union[bool, str, "NotFoundPolicy", None]) -> "NotFoundPolicy":
        if isinstance(value, NotFoundPolicy):
            return value
        if value is None or value is False:
            return cls(NotFoundMode.DISABLED)
        if value is True:
            return cls(NotFoundMode.STATUS)
        if isinstance(value, str):
            return cls(NotFoundMode.PAGE, value)
        raise ConfigError(f"notFound must be a bool or a page path, got {value!r}")

    @property
    def enabled(self) -> bool:
        return self.mode is not NotFoundMode.DISABLED


# Option name → dataclass field
_OPTION_FIELDS = {
    "url": "url",
    "rootDir": "roots",
    "mimes": "mimes",
    "headers": "headers",
    "buffering": "buffering",
    "bufferingMaxSize": "buffering_max_size",
    "directReading": "direct_reading",
    "notFound": "not_found",
    "directoryIndexs": "directory_indexes",
    "listNavigator": "list_navigator",
    "logAccess": "log_access",
}


@dataclass(frozen=True)
class WebConfig:
    """
    Configuration snapshot for ``StaticWeb``.

    Build one directly with Python field names, or from the option dict
    accepted by ``StaticWeb.setting`` with ``from_options``.
    """

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT LOCATION
    # ─────────────────────────────────────────────────────────────────────

    url: str = "/"
    """Subdirectory URL the site is published under."""

    roots: tuple[Mount, ...] = (Mount("/", DEFAULT_ROOT_DIR),)
    """Ordered mounts. Always in mounted form, see ``normalize_roots``."""

    # ─────────────────────────────────────────────────────────────────────
    # RESPONSE SHAPING
    # ─────────────────────────────────────────────────────────────────────

    mimes: MimeTable = field(default_factory=MimeTable)
    """Allowed extensions and the content type served for each."""

    headers: Mapping[str, str] = field(default_factory=dict)
    """Static headers added to every 200 response."""

    # ─────────────────────────────────────────────────────────────────────
    # BUFFERING
    # ─────────────────────────────────────────────────────────────────────

    buffering: bool = True
    """Serve from an in-memory copy of the roots, built eagerly."""

    buffering_max_size: int = DEFAULT_MAX_SIZE
    """Files larger than this many bytes are never buffered."""

    direct_reading: bool = False
    """With buffering on, also probe the disk when the buffer misses."""

    # ─────────────────────────────────────────────────────────────────────
    # MISSES
    # ─────────────────────────────────────────────────────────────────────

    not_found: NotFoundPolicy = field(default_factory=NotFoundPolicy)

    directory_indexes: tuple[str, ...] = ()
    """File names tried, in order, for directory-style URLs."""

    list_navigator: bool = False
    """Render a file listing for directories without an index file."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_access: Optional[str] = None
    """Access log mode name handed to the access logger, None disables."""

    @classmethod
    def from_options(
        cls,
        options: Optional[Mapping[str, Any]] = None,
        base: Optional["WebConfig"] = None,
    ) -> "WebConfig":
        """
        Apply an option dict on top of a base snapshot.

        Args:
            options: camelCase options (see module docstring).
                     Keys that are missing or None keep the base value.
            base:    Snapshot to start from. Defaults to ``WebConfig()``.

        Returns:
            A new, validated snapshot.
        """
        config = base or cls()
        changes: dict[str, Any] = {}

        for name, value in (options or {}).items():
            if value is None:
                continue
            target = _OPTION_FIELDS.get(name)
            if target is None:
                logger.warning(f"Ignoring unknown static server option: {name}")
                continue
            changes[target] = _convert(target, value)

        config = replace(config, **changes)
        config.validate()
        return config

    @classmethod
    def from_env(cls) -> "WebConfig":
        """
        Create configuration from environment variables.

        STATICWEB_ROOT            Root directory (default: htdocs)
        STATICWEB_URL             Base URL (default: /)
        STATICWEB_BUFFERING       "0" disables buffering
        STATICWEB_MAX_SIZE        Buffering size cap in bytes
        STATICWEB_DIRECT_READING  "1" enables direct reading
        STATICWEB_NOT_FOUND       "1", "0" or a 404 page path
        STATICWEB_INDEXES         Comma separated index file names
        STATICWEB_LIST_NAVIGATOR  "1" enables directory listings
        STATICWEB_LOG_ACCESS      Access log mode name
        """
        not_found: Union[bool, str] = os.getenv("STATICWEB_NOT_FOUND", "0")
        if not_found in ("0", "1"):
            not_found = not_found == "1"
        indexes = os.getenv("STATICWEB_INDEXES", "")

        return cls.from_options({
            "rootDir": os.getenv("STATICWEB_ROOT", DEFAULT_ROOT_DIR),
            "url": os.getenv("STATICWEB_URL", "/"),
            "buffering": os.getenv("STATICWEB_BUFFERING", "1") == "1",
            "bufferingMaxSize": os.getenv("STATICWEB_MAX_SIZE", str(DEFAULT_MAX_SIZE)),
            "directReading": os.getenv("STATICWEB_DIRECT_READING", "0") == "1",
            "notFound": not_found,
            "directoryIndexs": [name.strip() for name in indexes.split(",") if name.strip()],
            "listNavigator": os.getenv("STATICWEB_LIST_NAVIGATOR", "0") == "1",
            "logAccess": os.getenv("STATICWEB_LOG_ACCESS") or None,
        })

    def with_root(self, prefix: str, directory: str) -> "WebConfig":
        """New snapshot with a mount inserted, or overwritten if the prefix exists."""
        config = replace(self, roots=with_mount(self.roots, prefix, directory))
        config.validate()
        return config

    def validate(self) -> None:
        """
        Validate configuration values.

        Fails fast with ConfigError rather than serving from a snapshot
        that cannot work.
        """
        if not self.url.startswith("/"):
            raise ConfigError(f"url must start with '/': {self.url!r}")

        if self.buffering_max_size < 0:
            raise ConfigError("bufferingMaxSize must be >= 0")

        if not self.roots:
            raise ConfigError("At least one root directory is required")

        seen = set()
        for mount in self.roots:
            if not mount.prefix.startswith("/"):
                raise ConfigError(f"Mount prefix must start with '/': {mount.prefix!r}")
            if mount.prefix in seen:
                raise ConfigError(f"Duplicate mount prefix: {mount.prefix!r}")
            seen.add(mount.prefix)

        for name in self.directory_indexes:
            if name in ("", ".", "..") or "/" in name:
                raise ConfigError(f"Invalid directory index name: {name!r}")


def _convert(target: str, value: Any) -> Any:
    """Coerce one option value into the type of its dataclass field."""
    if target == "roots":
        if isinstance(value, tuple) and all(isinstance(m, Mount) for m in value):
            return value
        return normalize_roots(value)
    if target == "mimes":
        return value if isinstance(value, MimeTable) else MimeTable(value)
    if target == "headers":
        return dict(value)
    if target == "not_found":
        return NotFoundPolicy.parse(value)
    if target == "directory_indexes":
        if isinstance(value, str):
            raise ConfigError("directoryIndexs must be a list of file names")
        return tuple(value)
    if target == "buffering_max_size":
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"bufferingMaxSize must be a number of bytes, got {value!r}") from e
    if target in ("buffering", "direct_reading", "list_navigator"):
        return bool(value)
    return value


__all__ = [
    "ConfigError",
    "NotFoundMode",
    "NotFoundPolicy",
    "RootSpec",
    "WebConfig",
]
