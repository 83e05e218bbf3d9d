"""Token parsing utilities for dependency and plugin notations."""

from typing import Optional, Tuple

from common.errors import MalformedEntryError

from .models import Coordinate


def tokenize_rightmost_colon(s: str) -> Tuple[str, Optional[str]]:
    """Return (identifier, version or None) using the rightmost-colon rule.

    Does not assume notation-specific syntax.
    """
    s = s.strip()
    if ':' not in s:
        return s, None
    parts = s.rsplit(':', 1)
    identifier = parts[0].strip()
    spec_part = parts[1].strip() if len(parts) > 1 else ''
    spec = spec_part if spec_part else None
    return identifier, spec


def is_literal_coordinate(notation: str) -> bool:
    """A notation with a colon is a literal coordinate, otherwise a catalog key."""
    return ':' in notation


def parse_module(module: str, namespace: str = "libraries", key: Optional[str] = None) -> Tuple[str, str]:
    """Split a ``group:artifact`` module string."""
    parts = [p.strip() for p in module.split(':')]
    if len(parts) != 2 or not all(parts):
        raise MalformedEntryError(namespace, key, f"expected 'group:artifact', got '{module}'")
    return parts[0], parts[1]


def parse_coordinate(notation: str, namespace: str = "dependencies", key: Optional[str] = None) -> Coordinate:
    """Parse a literal ``group:artifact[:version]`` notation.

    An empty version part (``group:artifact:``) is treated as no version.
    """
    colon_count = notation.count(':')
    if colon_count == 1:
        group, artifact = parse_module(notation, namespace, key)
        return Coordinate(group=group, artifact=artifact, version=None)
    if colon_count == 2:
        module, version = tokenize_rightmost_colon(notation)
        group, artifact = parse_module(module, namespace, key)
        return Coordinate(group=group, artifact=artifact, version=version)
    raise MalformedEntryError(
        namespace, key, f"expected 'group:artifact[:version]', got '{notation}'"
    )


def parse_plugin_notation(notation: str, key: Optional[str] = None) -> Tuple[str, str]:
    """Parse the ``plugin.id:version`` plugin shorthand."""
    plugin_id, version = tokenize_rightmost_colon(notation)
    if not plugin_id or not version or ':' in plugin_id:
        raise MalformedEntryError("plugins", key, f"expected 'plugin.id:version', got '{notation}'")
    return plugin_id, version
