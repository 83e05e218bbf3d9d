"""Readers for catalog and definition documents (TOML, YAML, JSON).

All readers refuse documents that repeat a key inside one mapping: silently
keeping the last value would hide exactly the kind of drift a catalog exists
to prevent.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List, Tuple

import yaml

from common.errors import DuplicateKeyError, MalformedEntryError
from common.logging_utils import Timer, extra_context, is_debug_enabled

from .store import CatalogStore

logger = logging.getLogger(__name__)


class _UniqueKeyLoader(yaml.SafeLoader):  # pylint: disable=too-many-ancestors
    """SafeLoader variant raising DuplicateKeyError on repeated mapping keys."""

    def construct_mapping(self, node, deep=False):
        seen = set()
        for key_node, _ in node.value:
            key = self.construct_object(key_node, deep=deep)
            if key in seen:
                raise DuplicateKeyError(
                    f"mapping (line {key_node.start_mark.line + 1})", str(key)
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


def _reject_duplicate_pairs(pairs: List[Tuple[str, Any]]) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            raise DuplicateKeyError("mapping", key)
        result[key] = value
    return result


def _read_toml(path: str) -> Dict[str, Any]:
    try:
        import tomllib as toml  # type: ignore
    except ImportError:  # Python < 3.11
        import tomli as toml  # type: ignore

    with open(path, "rb") as f:
        try:
            return toml.load(f)
        except toml.TOMLDecodeError as e:
            # TOML forbids repeated keys, so duplicates surface here too
            raise MalformedEntryError(os.path.basename(path), None, str(e)) from e


def _read_yaml(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        try:
            return yaml.load(f, Loader=_UniqueKeyLoader)  # nosec B506 - SafeLoader subclass
        except yaml.YAMLError as e:
            raise MalformedEntryError(os.path.basename(path), None, str(e)) from e


def _read_json(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        try:
            return json.load(f, object_pairs_hook=_reject_duplicate_pairs)
        except json.JSONDecodeError as e:
            raise MalformedEntryError(os.path.basename(path), None, str(e)) from e


def read_document(path: str) -> Any:
    """Parse a TOML, YAML or JSON file, chosen by extension.

    Raises:
        OSError: The file cannot be read.
        DuplicateKeyError: A mapping repeats a key (YAML/JSON).
        MalformedEntryError: The file does not parse or has an unknown extension.
    """
    lower = path.lower()
    if lower.endswith(".toml"):
        return _read_toml(path)
    if lower.endswith((".yaml", ".yml")):
        return _read_yaml(path)
    if lower.endswith(".json"):
        return _read_json(path)
    raise MalformedEntryError(
        os.path.basename(path), None, "unsupported file type (expected .toml, .yaml, .yml or .json)"
    )


def load_catalog_file(path: str) -> CatalogStore:
    """Read a version catalog file (e.g. ``gradle/libs.versions.toml``)."""
    with Timer() as t:
        raw = read_document(path)
        if raw is None:
            raw = {}
        store = CatalogStore.load(raw)
    if is_debug_enabled(logger):
        logger.debug(
            "Catalog file parsed",
            extra=extra_context(
                event="catalog_file_loaded",
                component="catalog",
                target=path,
                duration_ms=round(t.duration_ms, 2),
            ),
        )
    return store
