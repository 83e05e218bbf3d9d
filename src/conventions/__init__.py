"""Convention sets, consuming units and the resolution engine."""

from .models import (
    AppliedPlugin,
    ConsumingUnit,
    ConventionSet,
    DependencyDecl,
    EffectiveConfiguration,
    PluginDecl,
    ResolvedDependency,
)
from .builder import build_convention_set
from .definitions import (
    ConventionDefinition,
    Definitions,
    UnitDefinition,
    load_definitions_file,
    parse_definitions,
)
from .engine import ResolutionEngine, merge_unit, resolve

__all__ = [
    "AppliedPlugin",
    "ConsumingUnit",
    "ConventionDefinition",
    "ConventionSet",
    "Definitions",
    "DependencyDecl",
    "EffectiveConfiguration",
    "PluginDecl",
    "ResolutionEngine",
    "ResolvedDependency",
    "UnitDefinition",
    "build_convention_set",
    "load_definitions_file",
    "merge_unit",
    "parse_definitions",
    "resolve",
]
