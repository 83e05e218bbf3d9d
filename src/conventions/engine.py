"""Resolution engine: catalog -> convention sets -> per-unit effective configuration.

A pass is all-or-nothing. The first failure aborts it and surfaces as a
ResolutionError naming the convention or unit being processed; no unit's
configuration is returned unless every unit succeeded.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from catalog.markers import MarkerResolver
from catalog.store import CatalogStore
from common.errors import BuildcatError, DuplicateKeyError, ResolutionError, UnknownKeyError
from common.logging_utils import Timer, extra_context, is_debug_enabled
from constants import Constants
from versioning.compare import is_downgrade
from versioning.models import ModuleKey

from .builder import build_convention_set, resolve_dependency, resolve_plugin_decl
from .definitions import (
    ConventionDefinition,
    ConventionInput,
    UnitDefinition,
    UnitInput,
    parse_conventions,
    parse_units,
)
from .models import AppliedPlugin, ConsumingUnit, ConventionSet, EffectiveConfiguration, ResolvedDependency

logger = logging.getLogger(__name__)


def _collapse_dependencies(unit: str, entries: List[ResolvedDependency]) -> Tuple[ResolvedDependency, ...]:
    """Keep only the last declaration of each group:artifact, at its own position."""
    last_index: Dict[ModuleKey, int] = {}
    for i, dep in enumerate(entries):
        previous = last_index.get(dep.module_key)
        if previous is not None:
            dropped = entries[previous]
            logger.info(
                "Unit '%s': %s:%s from %s (%s) overridden by %s (%s)",
                unit,
                dep.group,
                dep.artifact,
                dropped.origin,
                dropped.scope,
                dep.origin,
                dep.scope,
            )
            if is_downgrade(dropped.version, dep.version):
                logger.warning(
                    "Unit '%s': %s:%s downgraded from %s to %s",
                    unit,
                    dep.group,
                    dep.artifact,
                    dropped.version,
                    dep.version,
                )
        last_index[dep.module_key] = i
    keep = set(last_index.values())
    return tuple(dep for i, dep in enumerate(entries) if i in keep)


def _collapse_plugins(unit: str, plugins: List[AppliedPlugin]) -> Tuple[AppliedPlugin, ...]:
    """Keep the first application of each plugin id."""
    kept: Dict[str, AppliedPlugin] = {}
    for plugin in plugins:
        first = kept.get(plugin.plugin_id)
        if first is None:
            kept[plugin.plugin_id] = plugin
            continue
        logger.info(
            "Unit '%s': plugin %s (%s) already applied as %s, ignoring repeat",
            unit,
            plugin.plugin_id,
            plugin.key or "core",
            first.key or "core",
        )
        first_version = first.marker.version if first.marker else None
        repeat_version = plugin.marker.version if plugin.marker else None
        if first_version != repeat_version:
            logger.warning(
                "Unit '%s': plugin %s kept at version %s, repeat with version %s ignored",
                unit,
                plugin.plugin_id,
                first_version,
                repeat_version,
            )
    return tuple(kept.values())


def merge_unit(unit: ConsumingUnit, catalog: CatalogStore, markers: MarkerResolver) -> EffectiveConfiguration:
    """Merge a unit's own declarations on top of its convention set and freeze it.

    Convention entries come first, then the unit's own. A repeated
    group:artifact keeps only its last declaration; plugins keep their first.
    """
    convention = unit.convention
    origin = f"unit:{unit.name}"

    plugins: List[AppliedPlugin] = list(convention.plugins) if convention else []
    plugins.extend(resolve_plugin_decl(p, catalog, markers) for p in unit.plugins)

    entries: List[ResolvedDependency] = list(convention.dependencies) if convention else []
    for decl in unit.dependencies:
        entries.extend(resolve_dependency(decl, catalog, origin))

    config = EffectiveConfiguration(
        unit=unit.name,
        convention=convention.name if convention else None,
        plugins=_collapse_plugins(unit.name, plugins),
        dependencies=_collapse_dependencies(unit.name, entries),
    )
    unit.freeze()
    return config


def _check_unique(namespace: str, names: List[str]) -> None:
    seen = set()
    for name in names:
        if name in seen:
            raise DuplicateKeyError(namespace, name)
        seen.add(name)


class ResolutionEngine:
    """Runs single resolution passes.

    The engine keeps no state between passes; each call to ``resolve`` builds
    a fresh marker resolver and fresh units.
    """

    def __init__(self, marker_suffix: Optional[str] = None):
        self.marker_suffix = marker_suffix

    def resolve(
        self,
        catalog_raw: Union[CatalogStore, Mapping[str, Any]],
        convention_defs: ConventionInput,
        units: UnitInput,
    ) -> Dict[str, EffectiveConfiguration]:
        """Resolve every unit.

        Args:
            catalog_raw:     Raw catalog tables or an already loaded CatalogStore.
            convention_defs: Mapping name -> {plugins, dependencies}, or
                             ConventionDefinition objects.
            units:           Mapping name -> {convention, plugins, dependencies},
                             or UnitDefinition objects.

        Returns:
            Unit name -> EffectiveConfiguration, in unit declaration order.

        Raises:
            ResolutionError: Wrapping the first failure of the pass.
        """
        with Timer() as t:
            catalog = self._load_catalog(catalog_raw)
            markers = MarkerResolver(self.marker_suffix)
            conventions = self._build_conventions(convention_defs, catalog, markers)
            unit_defs = self._parse_units(units)

            results: Dict[str, EffectiveConfiguration] = {}
            for unit_def in unit_defs:
                try:
                    unit = self._build_unit(unit_def, conventions)
                    results[unit_def.name] = merge_unit(unit, catalog, markers)
                except BuildcatError as e:
                    logger.error("Resolution failed for unit '%s': %s", unit_def.name, e)
                    raise ResolutionError(e, unit=unit_def.name) from e

        if is_debug_enabled(logger):
            logger.debug(
                "Resolution pass complete",
                extra=extra_context(
                    event="resolution_complete",
                    component="engine",
                    conventions=len(conventions),
                    units=len(results),
                    duration_ms=round(t.duration_ms, 2),
                ),
            )
        return results

    @staticmethod
    def _load_catalog(catalog_raw) -> CatalogStore:
        if isinstance(catalog_raw, CatalogStore):
            return catalog_raw
        try:
            return CatalogStore.load(catalog_raw)
        except BuildcatError as e:
            logger.error("Catalog could not be loaded: %s", e)
            raise ResolutionError(e) from e

    @staticmethod
    def _build_conventions(
        convention_defs: ConventionInput, catalog: CatalogStore, markers: MarkerResolver
    ) -> Dict[str, ConventionSet]:
        try:
            defs: Tuple[ConventionDefinition, ...] = parse_conventions(convention_defs)
            _check_unique(Constants.CONVENTIONS_NAMESPACE, [d.name for d in defs])
        except BuildcatError as e:
            raise ResolutionError(e) from e

        conventions: Dict[str, ConventionSet] = {}
        for d in defs:
            try:
                conventions[d.name] = build_convention_set(d.name, d.plugins, d.dependencies, catalog, markers)
            except BuildcatError as e:
                logger.error("Convention '%s' could not be built: %s", d.name, e)
                raise ResolutionError(e, convention=d.name) from e
        return conventions

    @staticmethod
    def _parse_units(units: UnitInput) -> Tuple[UnitDefinition, ...]:
        try:
            defs = parse_units(units)
            _check_unique(Constants.UNITS_NAMESPACE, [d.name for d in defs])
        except BuildcatError as e:
            raise ResolutionError(e) from e
        return defs

    @staticmethod
    def _build_unit(unit_def: UnitDefinition, conventions: Mapping[str, ConventionSet]) -> ConsumingUnit:
        unit = ConsumingUnit(unit_def.name)
        for name in unit_def.conventions:
            convention = conventions.get(name)
            if convention is None:
                raise UnknownKeyError(Constants.CONVENTIONS_NAMESPACE, name, referenced_by=f"unit '{unit_def.name}'")
            unit.attach_convention(convention)
        for plugin in unit_def.plugins:
            unit.add_plugin(plugin)
        for decl in unit_def.dependencies:
            unit.add_dependency(decl.scope, decl.notation, bundle=decl.bundle)
        return unit


def resolve(catalog_raw, convention_defs, units, marker_suffix: Optional[str] = None) -> Dict[str, EffectiveConfiguration]:
    """Convenience wrapper around ``ResolutionEngine().resolve``."""
    return ResolutionEngine(marker_suffix).resolve(catalog_raw, convention_defs, units)
