"""Runtime configuration for the CLI.

Resolves tunables with the precedence: CLI flags > environment >
``settings`` section of the definitions document > Constants defaults.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Mapping, Optional

from common.logging_utils import configure_logging
from constants import Constants

logger = logging.getLogger(__name__)

_FILE_HANDLER: Optional[logging.Handler] = None


def setup_logging(args: Any) -> None:
    """Configure logging based on CLI arguments.

    Args:
        args: Parsed CLI arguments.
    """
    global _FILE_HANDLER  # pylint: disable=global-statement
    # --loglevel only when given; otherwise BUILDCAT_LOG_LEVEL, then INFO
    configure_logging(getattr(args, "LOG_LEVEL", None))

    root = logging.getLogger()
    if _FILE_HANDLER is not None:
        root.removeHandler(_FILE_HANDLER)
        _FILE_HANDLER.close()
        _FILE_HANDLER = None

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        root.addHandler(file_handler)
        _FILE_HANDLER = file_handler
        logger.info("Logging to file: %s", log_file)


def resolve_marker_suffix(args: Any, settings: Optional[Mapping[str, Any]] = None) -> str:
    """Pick the marker artifact suffix for this run.

    ``settings`` may set ``marker_suffix`` directly or ``gradle_markers: true``
    for the standard ``.gradle.plugin`` suffix.
    """
    cli_value = getattr(args, "MARKER_SUFFIX", None)
    if cli_value is not None:
        return cli_value

    env_value = os.environ.get(Constants.ENV_MARKER_SUFFIX)
    if env_value is not None:
        return env_value.strip()

    settings = settings or {}
    if "marker_suffix" in settings:
        return str(settings["marker_suffix"])
    if settings.get("gradle_markers"):
        return Constants.GRADLE_MARKER_SUFFIX

    return Constants.MARKER_ARTIFACT_SUFFIX


def infer_output_format(args: Any) -> str:
    """Output format from --format, else the --output extension, else json."""
    fmt = getattr(args, "OUTPUT_FORMAT", None)
    if fmt:
        return fmt.lower()
    output = getattr(args, "OUTPUT", None) or ""
    if output.lower().endswith(".csv"):
        return "csv"
    return "json"
