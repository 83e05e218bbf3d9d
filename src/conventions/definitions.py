"""Parsing of convention and unit definitions.

Definitions arrive either as a document (YAML/JSON file, see
``load_definitions_file``) or as plain mappings built in code. Both paths are
validated against the schemas in ``schemas.py`` before any declaration
object is created.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from catalog.loader import read_document
from common.errors import MalformedEntryError
from constants import Constants
from schema_validate import validate_document
from schemas import CONVENTIONS_SCHEMA, DEFINITIONS_SCHEMA, UNITS_SCHEMA

from .models import DependencyDecl, PluginDecl

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConventionDefinition:
    name: str
    plugins: Tuple[PluginDecl, ...] = ()
    dependencies: Tuple[DependencyDecl, ...] = ()


@dataclass(frozen=True)
class UnitDefinition:
    """A unit as declared; ``conventions`` may list more than one name so
    that the engine can report the conflict."""
    name: str
    conventions: Tuple[str, ...] = ()
    plugins: Tuple[PluginDecl, ...] = ()
    dependencies: Tuple[DependencyDecl, ...] = ()


@dataclass(frozen=True)
class Definitions:
    conventions: Tuple[ConventionDefinition, ...] = ()
    units: Tuple[UnitDefinition, ...] = ()
    settings: Dict[str, Any] = field(default_factory=dict)


ConventionInput = Union[Mapping[str, Any], Iterable[ConventionDefinition], None]
UnitInput = Union[Mapping[str, Any], Iterable[UnitDefinition], None]


def _plugin_decl(raw: Any) -> PluginDecl:
    if isinstance(raw, str):
        return PluginDecl(notation=raw)
    if "alias" in raw:
        return PluginDecl(notation=raw["alias"])
    return PluginDecl(notation=raw["id"], core=True)


def _dependency_decl(raw: Mapping[str, Any]) -> DependencyDecl:
    scope = raw["scope"]
    if "bundle" in raw:
        return DependencyDecl(scope=scope, notation=raw["bundle"], bundle=True)
    if "coordinate" in raw:
        return DependencyDecl(scope=scope, notation=raw["coordinate"])
    return DependencyDecl(scope=scope, notation=raw["library"])


def _conventions_list(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


def parse_conventions(raw: ConventionInput) -> Tuple[ConventionDefinition, ...]:
    """Normalize convention definitions to ``ConventionDefinition`` objects."""
    if raw is None:
        return ()
    if not isinstance(raw, Mapping):
        defs = tuple(raw)
        for d in defs:
            if not isinstance(d, ConventionDefinition):
                raise MalformedEntryError(Constants.CONVENTIONS_NAMESPACE, None, f"unexpected item {d!r}")
        return defs

    validate_document(CONVENTIONS_SCHEMA, dict(raw), Constants.CONVENTIONS_NAMESPACE)
    result: List[ConventionDefinition] = []
    for name, body in raw.items():
        body = body or {}
        result.append(
            ConventionDefinition(
                name=name,
                plugins=tuple(_plugin_decl(p) for p in body.get("plugins") or ()),
                dependencies=tuple(_dependency_decl(d) for d in body.get("dependencies") or ()),
            )
        )
    return tuple(result)


def parse_units(raw: UnitInput) -> Tuple[UnitDefinition, ...]:
    """Normalize unit definitions to ``UnitDefinition`` objects."""
    if raw is None:
        return ()
    if not isinstance(raw, Mapping):
        defs = tuple(raw)
        for d in defs:
            if not isinstance(d, UnitDefinition):
                raise MalformedEntryError(Constants.UNITS_NAMESPACE, None, f"unexpected item {d!r}")
        return defs

    validate_document(UNITS_SCHEMA, dict(raw), Constants.UNITS_NAMESPACE)
    result: List[UnitDefinition] = []
    for name, body in raw.items():
        body = body or {}
        result.append(
            UnitDefinition(
                name=name,
                conventions=_conventions_list(body.get("convention")),
                plugins=tuple(_plugin_decl(p) for p in body.get("plugins") or ()),
                dependencies=tuple(_dependency_decl(d) for d in body.get("dependencies") or ()),
            )
        )
    return tuple(result)


def parse_definitions(doc: Optional[Mapping[str, Any]]) -> Definitions:
    """Validate and parse a whole definitions document."""
    doc = doc if doc is not None else {}
    validate_document(DEFINITIONS_SCHEMA, doc, "definitions")
    return Definitions(
        conventions=parse_conventions(doc.get("conventions")),
        units=parse_units(doc.get("units")),
        settings=dict(doc.get("settings") or {}),
    )


def load_definitions_file(path: str) -> Definitions:
    """Read and parse a YAML or JSON definitions file."""
    definitions = parse_definitions(read_document(path))
    logger.info(
        "Loaded %d convention(s) and %d unit(s) from %s",
        len(definitions.conventions),
        len(definitions.units),
        path,
    )
    return definitions
