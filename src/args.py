"""Argument parsing functionality for buildcat."""

import argparse
from constants import Constants

def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="buildcat",
        description=(
            "buildcat - Version catalog and build convention resolver"
        ),
        add_help=True,
    )

    parser.add_argument("-c", "--catalog",
                        dest="CATALOG",
                        help=f"Path to the version catalog (TOML, YAML or JSON). Default: {Constants.DEFAULT_CATALOG_PATH}",
                        action="store",
                        type=str,
                        default=Constants.DEFAULT_CATALOG_PATH)
    parser.add_argument("-d", "--definitions",
                        dest="DEFINITIONS",
                        help=f"Path to the convention/unit definitions (YAML or JSON). Default: {Constants.DEFAULT_DEFINITIONS_PATH}",
                        action="store",
                        type=str,
                        default=Constants.DEFAULT_DEFINITIONS_PATH)
    parser.add_argument("-u", "--unit",
                        dest="UNITS",
                        help="Only output the named unit (can be used multiple times)",
                        action="append",
                        type=str,
                        default=[])

    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Path to output file (JSON or CSV)",
                        action="store",
                        type=str)
    parser.add_argument("-f", "--format",
                        dest="OUTPUT_FORMAT",
                        help="Output format (json or csv). If not specified, inferred from --output extension; defaults to json.",
                        action="store",
                        type=str.lower,
                        choices=Constants.OUTPUT_FORMATS)

    parser.add_argument("--markers",
                        dest="MARKERS",
                        help="Print the marker address of every catalog plugin and exit.",
                        action="store_true")
    parser.add_argument("--marker-suffix",
                        dest="MARKER_SUFFIX",
                        help="Suffix appended to plugin marker artifact ids (e.g. .gradle.plugin)",
                        action="store",
                        type=str)

    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help=f"Set the logging level. Default: ${Constants.ENV_LOG_LEVEL} or INFO",
                        action="store",
                        type=str,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not output to console.",
                        action="store_true")

    return parser.parse_args(argv)
