"""Resolution of plugin and dependency declarations through the catalog."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple

from catalog.markers import MarkerResolver
from catalog.store import CatalogStore
from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from versioning.parser import parse_coordinate

from .models import AppliedPlugin, ConventionSet, DependencyDecl, PluginDecl, ResolvedDependency

logger = logging.getLogger(__name__)


def resolve_dependency(
    decl: DependencyDecl, catalog: CatalogStore, origin: str
) -> Tuple[ResolvedDependency, ...]:
    """Resolve one declaration; bundles expand to several dependencies.

    Raises:
        UnknownKeyError: A library or bundle key is not in the catalog.
        MalformedEntryError: A literal coordinate does not parse.
    """
    if decl.scope not in Constants.KNOWN_SCOPES:
        logger.warning("Unrecognized dependency scope '%s' for %s (%s)", decl.scope, decl.notation, origin)

    if decl.bundle:
        libs = catalog.resolve_bundle(decl.notation)
    elif decl.is_literal:
        coord = parse_coordinate(decl.notation, key=origin)
        return (
            ResolvedDependency(
                scope=decl.scope,
                group=coord.group,
                artifact=coord.artifact,
                version=coord.version,
                origin=origin,
            ),
        )
    else:
        libs = (catalog.resolve_library(decl.notation),)

    return tuple(
        ResolvedDependency(
            scope=decl.scope,
            group=lib.group,
            artifact=lib.artifact,
            version=catalog.library_version(lib),
            origin=origin,
        )
        for lib in libs
    )


def resolve_plugin_decl(
    decl: PluginDecl, catalog: CatalogStore, markers: MarkerResolver
) -> AppliedPlugin:
    """Resolve a plugin application; catalog plugins also get a marker address."""
    if decl.core:
        return AppliedPlugin(plugin_id=decl.notation)
    plugin = catalog.resolve_plugin(decl.notation)
    return AppliedPlugin(
        plugin_id=plugin.plugin_id,
        key=plugin.key,
        marker=markers.to_marker_address(plugin, catalog),
    )


def build_convention_set(
    name: str,
    plugin_decls: Iterable[PluginDecl],
    dependency_decls: Iterable[DependencyDecl],
    catalog: CatalogStore,
    markers: Optional[MarkerResolver] = None,
) -> ConventionSet:
    """Build an immutable convention set, resolving every reference eagerly.

    Lookup failures (UnknownKeyError) propagate to the caller unchanged.
    """
    markers = markers if markers is not None else MarkerResolver()
    origin = f"convention:{name}"
    plugins = tuple(resolve_plugin_decl(p, catalog, markers) for p in plugin_decls)
    dependencies = tuple(
        dep for decl in dependency_decls for dep in resolve_dependency(decl, catalog, origin)
    )
    if is_debug_enabled(logger):
        logger.debug(
            "Convention set built",
            extra=extra_context(
                event="convention_built",
                component="conventions",
                target=name,
                plugins=len(plugins),
                dependencies=len(dependencies),
            ),
        )
    return ConventionSet(name=name, plugins=plugins, dependencies=dependencies)
