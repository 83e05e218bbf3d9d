"""In-memory version catalog with symbolic-key lookups.

The store is built in one shot by ``CatalogStore.load`` and is read-only
afterwards. Versions, libraries, plugins and bundles are independent key
namespaces; lookups are case-sensitive exact matches.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Tuple

from common.errors import DuplicateKeyError, MalformedEntryError, UnknownKeyError
from common.logging_utils import extra_context, is_debug_enabled
from constants import CatalogNamespaces, Constants
from versioning.parser import parse_coordinate, parse_module, parse_plugin_notation

from .models import LibraryCoordinate, PluginCoordinate, VersionEntry

logger = logging.getLogger(__name__)

VERSIONS = CatalogNamespaces.VERSIONS.value
LIBRARIES = CatalogNamespaces.LIBRARIES.value
PLUGINS = CatalogNamespaces.PLUGINS.value
BUNDLES = CatalogNamespaces.BUNDLES.value

# Tables a Gradle catalog may carry that hold no aliases
_IGNORED_TABLES = ("metadata",)


def _iter_table(namespace: str, table: Any) -> Iterator[Tuple[str, Any]]:
    """Yield (key, value) pairs, rejecting repeated keys.

    A table is either a mapping or an ordered sequence of (key, value) pairs;
    only the latter can actually carry duplicates.
    """
    if table is None:
        return
    if isinstance(table, Mapping):
        pairs: Iterable[Any] = table.items()
    elif isinstance(table, (list, tuple)):
        pairs = table
    else:
        raise MalformedEntryError(namespace, None, "table must be a mapping or a list of (key, value) pairs")

    seen = set()
    for pair in pairs:
        if not isinstance(pair, (list, tuple)) or len(pair) != 2:
            raise MalformedEntryError(namespace, None, f"expected a (key, value) pair, got {pair!r}")
        key, value = pair
        if not isinstance(key, str) or not key:
            raise MalformedEntryError(namespace, None, f"keys must be non-empty strings, got {key!r}")
        if key in seen:
            raise DuplicateKeyError(namespace, key)
        seen.add(key)
        yield key, value


def _rich_version(namespace: str, key: str, table: Mapping[str, Any]) -> Tuple[str, Tuple[Tuple[str, str], ...]]:
    """Pick the effective version of a rich version table."""
    allowed = set(Constants.RICH_VERSION_KEYS) | set(Constants.RICH_VERSION_EXTRA_KEYS)
    unknown = sorted(k for k in table if k not in allowed)
    if unknown:
        raise MalformedEntryError(namespace, key, f"unsupported version keys: {', '.join(unknown)}")

    constraint = []
    for name in sorted(table):
        value = table[name]
        if isinstance(value, (list, tuple)):
            value = ",".join(str(v) for v in value)
        constraint.append((name, str(value)))

    for name in Constants.RICH_VERSION_KEYS:
        value = table.get(name)
        if isinstance(value, str) and value.strip():
            return value.strip(), tuple(constraint)
    raise MalformedEntryError(
        namespace, key, "rich version needs one of: " + ", ".join(Constants.RICH_VERSION_KEYS)
    )


def _parse_version_entry(key: str, value: Any) -> VersionEntry:
    if isinstance(value, str):
        if not value.strip():
            raise MalformedEntryError(VERSIONS, key, "version must not be empty")
        return VersionEntry(key=key, version=value.strip())
    if isinstance(value, Mapping):
        resolved, constraint = _rich_version(VERSIONS, key, value)
        return VersionEntry(key=key, version=resolved, constraint=constraint)
    raise MalformedEntryError(VERSIONS, key, f"expected a string or a rich version table, got {type(value).__name__}")


def _parse_version_part(namespace: str, key: str, value: Any) -> Tuple[Optional[str], Optional[str]]:
    """Return (version_ref, literal_version) from an alias ``version`` field."""
    if value is None:
        return None, None
    if isinstance(value, str):
        if not value.strip():
            raise MalformedEntryError(namespace, key, "version must not be empty")
        return None, value.strip()
    if isinstance(value, Mapping):
        if "ref" in value:
            ref = value["ref"]
            if len(value) != 1 or not isinstance(ref, str) or not ref:
                raise MalformedEntryError(namespace, key, "'version.ref' must be a lone non-empty string")
            return ref, None
        resolved, _ = _rich_version(namespace, key, value)
        return None, resolved
    raise MalformedEntryError(namespace, key, f"unsupported version value {value!r}")


def _parse_library(key: str, value: Any) -> LibraryCoordinate:
    if isinstance(value, str):
        coord = parse_coordinate(value, LIBRARIES, key)
        return LibraryCoordinate(key=key, group=coord.group, artifact=coord.artifact, version=coord.version)
    if not isinstance(value, Mapping):
        raise MalformedEntryError(LIBRARIES, key, f"expected a string or a table, got {type(value).__name__}")

    unknown = sorted(k for k in value if k not in ("module", "group", "name", "version"))
    if unknown:
        raise MalformedEntryError(LIBRARIES, key, f"unsupported keys: {', '.join(unknown)}")
    module = value.get("module")
    if module is not None:
        if "group" in value or "name" in value:
            raise MalformedEntryError(LIBRARIES, key, "use either 'module' or 'group'/'name', not both")
        if not isinstance(module, str):
            raise MalformedEntryError(LIBRARIES, key, "'module' must be a string")
        group, artifact = parse_module(module, LIBRARIES, key)
    else:
        group, artifact = value.get("group"), value.get("name")
        if not isinstance(group, str) or not group or not isinstance(artifact, str) or not artifact:
            raise MalformedEntryError(LIBRARIES, key, "needs 'module' or both 'group' and 'name'")
    version_ref, version = _parse_version_part(LIBRARIES, key, value.get("version"))
    return LibraryCoordinate(key=key, group=group, artifact=artifact, version_ref=version_ref, version=version)


def _parse_plugin(key: str, value: Any) -> PluginCoordinate:
    if isinstance(value, str):
        plugin_id, version = parse_plugin_notation(value, key)
        return PluginCoordinate(key=key, plugin_id=plugin_id, version=version)
    if not isinstance(value, Mapping):
        raise MalformedEntryError(PLUGINS, key, f"expected a string or a table, got {type(value).__name__}")

    unknown = sorted(k for k in value if k not in ("id", "version"))
    if unknown:
        raise MalformedEntryError(PLUGINS, key, f"unsupported keys: {', '.join(unknown)}")
    plugin_id = value.get("id")
    if not isinstance(plugin_id, str) or not plugin_id:
        raise MalformedEntryError(PLUGINS, key, "'id' must be a non-empty string")
    version_ref, version = _parse_version_part(PLUGINS, key, value.get("version"))
    if version_ref is None and version is None:
        raise MalformedEntryError(PLUGINS, key, "plugin aliases need a version or version.ref")
    return PluginCoordinate(key=key, plugin_id=plugin_id, version_ref=version_ref, version=version)


class CatalogStore:
    """Read-only catalog of versions, libraries, plugins and bundles."""

    def __init__(
        self,
        versions: Dict[str, VersionEntry],
        libraries: Dict[str, LibraryCoordinate],
        plugins: Dict[str, PluginCoordinate],
        bundles: Dict[str, Tuple[str, ...]],
    ):
        self._versions = MappingProxyType(dict(versions))
        self._libraries = MappingProxyType(dict(libraries))
        self._plugins = MappingProxyType(dict(plugins))
        self._bundles = MappingProxyType(dict(bundles))

    @classmethod
    def load(cls, raw: Mapping[str, Any]) -> "CatalogStore":
        """Build a store from raw catalog tables.

        Args:
            raw: Mapping with optional ``versions``, ``libraries``, ``plugins``
                 and ``bundles`` tables.

        Raises:
            DuplicateKeyError: A table repeats a key.
            UnknownKeyError: A version or bundle reference dangles.
            MalformedEntryError: An entry has the wrong shape.
        """
        if not isinstance(raw, Mapping):
            raise MalformedEntryError("catalog", None, "catalog must be a mapping of tables")
        for table in raw:
            if table not in Constants.CATALOG_TABLES and table not in _IGNORED_TABLES:
                raise MalformedEntryError("catalog", table, "unknown table")

        versions = {k: _parse_version_entry(k, v) for k, v in _iter_table(VERSIONS, raw.get(VERSIONS))}

        libraries: Dict[str, LibraryCoordinate] = {}
        for key, value in _iter_table(LIBRARIES, raw.get(LIBRARIES)):
            lib = _parse_library(key, value)
            if lib.version_ref is not None and lib.version_ref not in versions:
                raise UnknownKeyError(VERSIONS, lib.version_ref, referenced_by=f"library '{key}'")
            libraries[key] = lib

        plugins: Dict[str, PluginCoordinate] = {}
        for key, value in _iter_table(PLUGINS, raw.get(PLUGINS)):
            plugin = _parse_plugin(key, value)
            if plugin.version_ref is not None and plugin.version_ref not in versions:
                raise UnknownKeyError(VERSIONS, plugin.version_ref, referenced_by=f"plugin '{key}'")
            plugins[key] = plugin

        bundles: Dict[str, Tuple[str, ...]] = {}
        for key, value in _iter_table(BUNDLES, raw.get(BUNDLES)):
            if not isinstance(value, (list, tuple)) or not all(isinstance(m, str) for m in value):
                raise MalformedEntryError(BUNDLES, key, "a bundle is a list of library keys")
            for member in value:
                if member not in libraries:
                    raise UnknownKeyError(LIBRARIES, member, referenced_by=f"bundle '{key}'")
            bundles[key] = tuple(value)

        store = cls(versions, libraries, plugins, bundles)
        if is_debug_enabled(logger):
            logger.debug(
                "Catalog loaded",
                extra=extra_context(
                    event="catalog_loaded",
                    component="catalog",
                    versions=len(versions),
                    libraries=len(libraries),
                    plugins=len(plugins),
                    bundles=len(bundles),
                ),
            )
        return store

    def resolve_version(self, key: str) -> str:
        """Return the version string declared under ``key``."""
        entry = self._versions.get(key)
        if entry is None:
            raise UnknownKeyError(VERSIONS, key)
        return entry.version

    def version_entry(self, key: str) -> VersionEntry:
        entry = self._versions.get(key)
        if entry is None:
            raise UnknownKeyError(VERSIONS, key)
        return entry

    def resolve_library(self, key: str) -> LibraryCoordinate:
        """Return the library coordinate declared under ``key``."""
        lib = self._libraries.get(key)
        if lib is None:
            raise UnknownKeyError(LIBRARIES, key)
        return lib

    def resolve_plugin(self, key: str) -> PluginCoordinate:
        """Return the plugin coordinate declared under ``key``."""
        plugin = self._plugins.get(key)
        if plugin is None:
            raise UnknownKeyError(PLUGINS, key)
        return plugin

    def resolve_bundle(self, key: str) -> Tuple[LibraryCoordinate, ...]:
        """Return the libraries of a bundle, in declared order."""
        members = self._bundles.get(key)
        if members is None:
            raise UnknownKeyError(BUNDLES, key)
        return tuple(self._libraries[m] for m in members)

    def library_version(self, lib: LibraryCoordinate) -> Optional[str]:
        """Resolved version of a library, or None when it declares none."""
        if lib.version_ref is not None:
            return self.resolve_version(lib.version_ref)
        return lib.version

    def plugin_version(self, plugin: PluginCoordinate) -> str:
        if plugin.version_ref is not None:
            return self.resolve_version(plugin.version_ref)
        return plugin.version  # type: ignore[return-value]

    @property
    def versions(self) -> Mapping[str, VersionEntry]:
        return self._versions

    @property
    def libraries(self) -> Mapping[str, LibraryCoordinate]:
        return self._libraries

    @property
    def plugins(self) -> Mapping[str, PluginCoordinate]:
        return self._plugins

    @property
    def bundles(self) -> Mapping[str, Tuple[str, ...]]:
        return self._bundles
