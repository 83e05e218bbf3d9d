"""JSON Schema validation helpers for definition documents.

This module wraps jsonschema Draft7 validation and reports the first error
as a MalformedEntryError carrying the JSON path of the offending value.
"""

from __future__ import annotations

from typing import Any, Dict

from jsonschema import Draft7Validator

from common.errors import MalformedEntryError


def validate_document(schema: Dict[str, Any], data: Any, namespace: str) -> None:
    """Validate ``data`` strictly and raise on the first error.

    Args:
        schema:    Draft-07 JSON Schema dict.
        data:      Parsed document (or document section).
        namespace: Name used in the error message, e.g. "conventions".
    """
    validator = Draft7Validator(schema)
    errs = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])
    if errs:
        first = errs[0]
        path = "/".join([str(p) for p in first.path])
        raise MalformedEntryError(namespace, path or None, first.message)

