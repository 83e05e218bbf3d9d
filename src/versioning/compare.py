"""Version comparison used when one declaration overrides another."""

from typing import Optional

from packaging import version


def compare_versions(left: Optional[str], right: Optional[str]) -> Optional[int]:
    """Compare two version strings.

    Returns -1, 0 or 1, or None when either side is missing or is not a
    PEP 440 parsable version (e.g. Maven ``-SNAPSHOT`` qualifiers).
    """
    if left is None or right is None:
        return None
    try:
        lv = version.Version(left)
        rv = version.Version(right)
    except version.InvalidVersion:
        return None
    if lv < rv:
        return -1
    if lv > rv:
        return 1
    return 0


def is_downgrade(previous: Optional[str], replacement: Optional[str]) -> bool:
    """True when ``replacement`` is a known-lower version than ``previous``."""
    return compare_versions(previous, replacement) == 1
