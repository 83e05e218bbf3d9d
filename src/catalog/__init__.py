"""Version catalog: symbolic versions, libraries, plugins and bundles."""

from .models import LibraryCoordinate, MarkerAddress, PluginCoordinate, VersionEntry
from .store import CatalogStore
from .markers import MarkerResolver, marker_notations
from .loader import load_catalog_file, read_document

__all__ = [
    "CatalogStore",
    "LibraryCoordinate",
    "MarkerAddress",
    "MarkerResolver",
    "PluginCoordinate",
    "VersionEntry",
    "load_catalog_file",
    "marker_notations",
    "read_document",
]
