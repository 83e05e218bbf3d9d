"""Data models for coordinates and version comparison."""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Coordinate:
    """A literal ``group:artifact[:version]`` dependency coordinate."""
    group: str
    artifact: str
    version: Optional[str]


# Type alias for the identity used when collapsing duplicate dependencies.
ModuleKey = Tuple[str, str]
