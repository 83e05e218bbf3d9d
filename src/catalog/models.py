"""Data models for version catalog entries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class VersionEntry:
    """A named version.

    ``version`` is the resolved string. For rich versions ``constraint``
    keeps the declared table as sorted (kind, value) pairs.
    """
    key: str
    version: str
    constraint: Tuple[Tuple[str, str], ...] = ()


@dataclass(frozen=True)
class LibraryCoordinate:
    """A library alias: module coordinates plus a version reference or literal.

    At most one of ``version_ref`` and ``version`` is set; both unset means
    the version is managed elsewhere (e.g. by a platform/BOM).
    """
    key: str
    group: str
    artifact: str
    version_ref: Optional[str] = None
    version: Optional[str] = None

    @property
    def module(self) -> str:
        return f"{self.group}:{self.artifact}"


@dataclass(frozen=True)
class PluginCoordinate:
    """A plugin alias: plugin id plus a version reference or literal."""
    key: str
    plugin_id: str
    version_ref: Optional[str] = None
    version: Optional[str] = None


@dataclass(frozen=True)
class MarkerAddress:
    """Artifact address under which a plugin can be fetched as a dependency."""
    group: str
    artifact: str
    version: str

    def notation(self) -> str:
        return f"{self.group}:{self.artifact}:{self.version}"

    def to_dict(self):
        return {"group": self.group, "artifact": self.artifact, "version": self.version}
