"""Data models for convention sets, consuming units and their merged output."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from catalog.models import MarkerAddress
from common.errors import FrozenUnitError, MalformedEntryError, MultipleConventionError
from versioning.models import ModuleKey
from versioning.parser import is_literal_coordinate


@dataclass(frozen=True)
class DependencyDecl:
    """A scope-tagged dependency declaration.

    ``notation`` is a library key, a bundle key (``bundle=True``) or a literal
    ``group:artifact[:version]`` coordinate.
    """
    scope: str
    notation: str
    bundle: bool = False

    def __post_init__(self):
        if not isinstance(self.scope, str) or not self.scope.strip():
            raise MalformedEntryError("dependencies", self.notation, "scope must be a non-empty string")
        if not isinstance(self.notation, str) or not self.notation.strip():
            raise MalformedEntryError("dependencies", None, "notation must be a non-empty string")
        if self.bundle and is_literal_coordinate(self.notation):
            raise MalformedEntryError("dependencies", self.notation, "a bundle reference cannot be a coordinate")

    @property
    def is_literal(self) -> bool:
        return not self.bundle and is_literal_coordinate(self.notation)


@dataclass(frozen=True)
class PluginDecl:
    """A plugin application: catalog plugin key, or a versionless core plugin id."""
    notation: str
    core: bool = False

    def __post_init__(self):
        if not isinstance(self.notation, str) or not self.notation.strip():
            raise MalformedEntryError("plugins", None, "plugin reference must be a non-empty string")


@dataclass(frozen=True)
class ResolvedDependency:
    """A dependency with its coordinates resolved through the catalog."""
    scope: str
    group: str
    artifact: str
    version: Optional[str]
    origin: str

    @property
    def module_key(self) -> ModuleKey:
        return (self.group, self.artifact)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scope": self.scope,
            "group": self.group,
            "artifact": self.artifact,
            "version": self.version,
        }


@dataclass(frozen=True)
class AppliedPlugin:
    """A resolved plugin application; core plugins carry no key or marker."""
    plugin_id: str
    key: Optional[str] = None
    marker: Optional[MarkerAddress] = None


@dataclass(frozen=True)
class ConventionSet:
    """Named, immutable bundle of plugins and dependencies shared by units."""
    name: str
    plugins: Tuple[AppliedPlugin, ...]
    dependencies: Tuple[ResolvedDependency, ...]


@dataclass(frozen=True)
class EffectiveConfiguration:
    """Final plugins and dependencies of one unit."""
    unit: str
    convention: Optional[str]
    plugins: Tuple[AppliedPlugin, ...]
    dependencies: Tuple[ResolvedDependency, ...]

    @property
    def plugin_ids(self) -> List[str]:
        return [p.plugin_id for p in self.plugins]

    @property
    def markers(self) -> List[MarkerAddress]:
        return [p.marker for p in self.plugins if p.marker is not None]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "convention": self.convention,
            "plugins": self.plugin_ids,
            "pluginMarkers": [m.to_dict() for m in self.markers],
            "dependencies": [d.to_dict() for d in self.dependencies],
        }


class ConsumingUnit:
    """A module that applies at most one convention set plus its own entries.

    The unit is mutable until the engine merges it; afterwards every mutator
    raises FrozenUnitError.
    """

    def __init__(self, name: str):
        if not isinstance(name, str) or not name:
            raise MalformedEntryError("units", None, "unit name must be a non-empty string")
        self.name = name
        self._convention: Optional[ConventionSet] = None
        self._dependencies: List[DependencyDecl] = []
        self._plugins: List[PluginDecl] = []
        self._frozen = False

    def _check_mutable(self) -> None:
        if self._frozen:
            raise FrozenUnitError(self.name)

    def attach_convention(self, convention: ConventionSet) -> None:
        """Apply ``convention``; a unit accepts only one."""
        self._check_mutable()
        if self._convention is not None:
            raise MultipleConventionError(self.name, self._convention.name, convention.name)
        self._convention = convention

    def add_dependency(self, scope: str, notation: str, bundle: bool = False) -> None:
        """Append a dependency; literal coordinates are not checked against the catalog."""
        self._check_mutable()
        self._dependencies.append(DependencyDecl(scope=scope, notation=notation, bundle=bundle))

    def add_plugin(self, plugin: PluginDecl) -> None:
        self._check_mutable()
        self._plugins.append(plugin)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def convention(self) -> Optional[ConventionSet]:
        return self._convention

    @property
    def dependencies(self) -> Tuple[DependencyDecl, ...]:
        return tuple(self._dependencies)

    @property
    def plugins(self) -> Tuple[PluginDecl, ...]:
        return tuple(self._plugins)

    def __repr__(self) -> str:
        conv = self._convention.name if self._convention else None
        return f"ConsumingUnit(name={self.name!r}, convention={conv!r}, dependencies={len(self._dependencies)})"
