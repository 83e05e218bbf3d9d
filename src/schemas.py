"""JSON Schemas (Draft-07) for definition documents."""

from __future__ import annotations

from typing import Any, Dict

_NON_EMPTY = {"type": "string", "minLength": 1}

PLUGIN_SCHEMA: Dict[str, Any] = {
    "oneOf": [
        # catalog plugin key
        _NON_EMPTY,
        {
            "type": "object",
            "properties": {"alias": _NON_EMPTY},
            "required": ["alias"],
            "additionalProperties": False,
        },
        # core plugin without version, e.g. {id: java}
        {
            "type": "object",
            "properties": {"id": _NON_EMPTY},
            "required": ["id"],
            "additionalProperties": False,
        },
    ]
}

DEPENDENCY_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "scope": _NON_EMPTY,
        "library": {"type": "string", "minLength": 1, "pattern": "^[^:]+$"},
        "bundle": {"type": "string", "minLength": 1, "pattern": "^[^:]+$"},
        "coordinate": {"type": "string", "pattern": "^[^:]+:[^:]+(:[^:]*)?$"},
    },
    "required": ["scope"],
    "additionalProperties": False,
    "oneOf": [
        {"required": ["library"]},
        {"required": ["bundle"]},
        {"required": ["coordinate"]},
    ],
}

_PLUGIN_LIST = {"type": "array", "items": PLUGIN_SCHEMA}
_DEPENDENCY_LIST = {"type": "array", "items": DEPENDENCY_SCHEMA}

CONVENTIONS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": {
        "type": ["object", "null"],
        "properties": {
            "plugins": _PLUGIN_LIST,
            "dependencies": _DEPENDENCY_LIST,
        },
        "additionalProperties": False,
    },
}

UNITS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": {
        "type": ["object", "null"],
        "properties": {
            "convention": {
                "oneOf": [
                    {"type": "null"},
                    _NON_EMPTY,
                    {"type": "array", "items": _NON_EMPTY},
                ]
            },
            "plugins": _PLUGIN_LIST,
            "dependencies": _DEPENDENCY_LIST,
        },
        "additionalProperties": False,
    },
}

SETTINGS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "marker_suffix": {"type": "string"},
        "gradle_markers": {"type": "boolean"},
    },
    "additionalProperties": False,
}

DEFINITIONS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "settings": SETTINGS_SCHEMA,
        "conventions": CONVENTIONS_SCHEMA,
        "units": UNITS_SCHEMA,
    },
    "additionalProperties": False,
}
