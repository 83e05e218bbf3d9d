"""Plugin marker address derivation.

A plugin published to a repository can be fetched as a regular dependency
through its marker artifact, whose group and artifact are both the plugin id.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

from constants import Constants

from .models import MarkerAddress, PluginCoordinate
from .store import CatalogStore

logger = logging.getLogger(__name__)


class MarkerResolver:
    """Derive marker addresses, memoizing per plugin id and version reference.

    One resolver is meant to live for a single resolution pass.
    """

    def __init__(self, artifact_suffix: Optional[str] = None):
        self.artifact_suffix = (
            Constants.MARKER_ARTIFACT_SUFFIX if artifact_suffix is None else artifact_suffix
        )
        self._memo: Dict[Tuple[str, Optional[str], Optional[str]], MarkerAddress] = {}

    def to_marker_address(self, plugin: PluginCoordinate, catalog: CatalogStore) -> MarkerAddress:
        """Return the marker address of ``plugin``.

        Raises:
            UnknownKeyError: The plugin's version reference does not resolve.
        """
        memo_key = (plugin.plugin_id, plugin.version_ref, plugin.version)
        cached = self._memo.get(memo_key)
        if cached is not None:
            return cached

        address = MarkerAddress(
            group=plugin.plugin_id,
            artifact=plugin.plugin_id + self.artifact_suffix,
            version=catalog.plugin_version(plugin),
        )
        self._memo[memo_key] = address
        logger.debug("Marker for plugin %s -> %s", plugin.plugin_id, address.notation())
        return address


def marker_notations(catalog: CatalogStore, artifact_suffix: Optional[str] = None):
    """Marker notation of every catalog plugin, in declaration order."""
    resolver = MarkerResolver(artifact_suffix)
    return [resolver.to_marker_address(p, catalog).notation() for p in catalog.plugins.values()]
