"""Error types raised while loading catalogs and resolving conventions."""

from __future__ import annotations

from typing import Optional


class BuildcatError(Exception):
    """Base class for all resolution-related failures."""


class UnknownKeyError(BuildcatError, LookupError):
    """A symbolic reference has no entry in its namespace."""

    def __init__(self, namespace: str, key: str, referenced_by: Optional[str] = None):
        self.namespace = namespace
        self.key = key
        self.referenced_by = referenced_by
        msg = f"Unknown {namespace} key '{key}'"
        if referenced_by:
            msg += f" (referenced by {referenced_by})"
        super().__init__(msg)

    def __str__(self) -> str:
        # LookupError would otherwise repr() the single argument
        return self.args[0]


class DuplicateKeyError(BuildcatError):
    """Two entries share a key within one namespace."""

    def __init__(self, namespace: str, key: str):
        self.namespace = namespace
        self.key = key
        super().__init__(f"Duplicate {namespace} key '{key}'")


class MalformedEntryError(BuildcatError, ValueError):
    """An entry (or a whole document) does not have the expected shape."""

    def __init__(self, namespace: str, key: Optional[str], reason: str):
        self.namespace = namespace
        self.key = key
        self.reason = reason
        where = f"{namespace} entry '{key}'" if key is not None else namespace
        super().__init__(f"Malformed {where}: {reason}")


class MultipleConventionError(BuildcatError):
    """A unit attempted to attach a second convention set."""

    def __init__(self, unit: str, existing: str, attempted: str):
        self.unit = unit
        self.existing = existing
        self.attempted = attempted
        super().__init__(
            f"Unit '{unit}' already applies convention '{existing}'; "
            f"cannot also apply '{attempted}'"
        )


class FrozenUnitError(BuildcatError):
    """A unit was modified after its effective configuration was computed."""

    def __init__(self, unit: str):
        self.unit = unit
        super().__init__(f"Unit '{unit}' has already been resolved and is frozen")


class ResolutionError(BuildcatError):
    """Aborted resolution pass; wraps the first underlying failure."""

    def __init__(
        self,
        cause: BuildcatError,
        convention: Optional[str] = None,
        unit: Optional[str] = None,
    ):
        self.cause = cause
        self.convention = convention
        self.unit = unit
        if convention is not None:
            msg = f"Convention '{convention}': {cause}"
        elif unit is not None:
            msg = f"Unit '{unit}': {cause}"
        else:
            msg = f"Catalog: {cause}"
        super().__init__(msg)
