"""buildcat - Version catalog and build convention resolver

    Reads a version catalog and a definitions document, resolves every unit's
    effective plugins and dependencies, and writes them as JSON or CSV.

    Returns:
        int: Exit code
"""
import csv
import json
import logging
import sys

from args import parse_args
from catalog.loader import read_document
from catalog.markers import marker_notations
from catalog.store import CatalogStore
from cli_config import infer_output_format, resolve_marker_suffix, setup_logging
from common.errors import BuildcatError
from common.logging_utils import extra_context, is_debug_enabled
from constants import ExitCodes
from conventions.definitions import load_definitions_file
from conventions.engine import ResolutionEngine

logger = logging.getLogger(__name__)

CSV_HEADERS = ["unit", "convention", "scope", "group", "artifact", "version", "origin"]


def render_json(configs):
    """Serialize effective configurations; identical input gives identical text.

    Args:
        configs (dict): Unit name -> EffectiveConfiguration.

    Returns:
        str: JSON document.
    """
    data = {name: cfg.to_dict() for name, cfg in configs.items()}
    return json.dumps(data, ensure_ascii=False, indent=4)


def export_json(configs, path):
    """Exports the effective configurations to a JSON file.

    Args:
        configs (dict): Unit name -> EffectiveConfiguration.
        path (str): File path to export the JSON.
    """
    try:
        with open(path, 'w', encoding='utf-8') as file:
            file.write(render_json(configs))
            file.write("\n")
        logging.info("JSON file has been successfully exported at: %s", path)
    except OSError as e:
        logging.error("JSON file couldn't be written to disk: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def export_csv(configs, path):
    """Exports one row per resolved dependency to a CSV file.

    Args:
        configs (dict): Unit name -> EffectiveConfiguration.
        path (str): File path to export the CSV.
    """
    rows = [CSV_HEADERS]

    def _nv(v):
        return "" if v is None else v

    for name, cfg in configs.items():
        for dep in cfg.dependencies:
            rows.append([
                name,
                _nv(cfg.convention),
                dep.scope,
                dep.group,
                dep.artifact,
                _nv(dep.version),
                dep.origin,
            ])
    try:
        with open(path, 'w', newline='', encoding='utf-8') as file:
            export = csv.writer(file)
            export.writerows(rows)
        logging.info("CSV file has been successfully exported at: %s", path)
    except (OSError, csv.Error) as e:
        logging.error("CSV file couldn't be written to disk: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def load_document_or_exit(path, what):
    """Read a catalog or definitions document, exiting on I/O errors."""
    try:
        return read_document(path)
    except FileNotFoundError as e:
        logging.error("%s file not found: %s, aborting", what, e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    except OSError as e:
        logging.error("IO error reading %s file: %s, aborting", what, e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    except BuildcatError as e:
        logging.error("Invalid %s file %s: %s", what, path, e)
        sys.exit(ExitCodes.RESOLUTION_ERROR.value)


def print_markers(args):
    """Print the marker notation of every catalog plugin."""
    raw = load_document_or_exit(args.CATALOG, "catalog")
    try:
        catalog = CatalogStore.load(raw or {})
    except BuildcatError as e:
        logging.error("Invalid catalog %s: %s", args.CATALOG, e)
        sys.exit(ExitCodes.RESOLUTION_ERROR.value)
    suffix = resolve_marker_suffix(args)
    if not args.QUIET:
        for notation in marker_notations(catalog, suffix):
            print(notation)
    sys.exit(ExitCodes.SUCCESS.value)


def select_units(configs, names):
    """Restrict output to ``names``; an unknown name is a usage error."""
    if not names:
        return configs
    missing = [n for n in names if n not in configs]
    if missing:
        logging.error("Unknown unit(s): %s. Defined units: %s", ", ".join(missing), ", ".join(configs))
        sys.exit(ExitCodes.FILE_ERROR.value)
    return {n: configs[n] for n in dict.fromkeys(names)}


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    setup_logging(args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main")
        )

    if args.MARKERS:
        print_markers(args)

    catalog_raw = load_document_or_exit(args.CATALOG, "catalog")
    try:
        definitions = load_definitions_file(args.DEFINITIONS)
    except FileNotFoundError as e:
        logging.error("Definitions file not found: %s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    except OSError as e:
        logging.error("IO error reading definitions file: %s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    except BuildcatError as e:
        logging.error("Invalid definitions file %s: %s", args.DEFINITIONS, e)
        sys.exit(ExitCodes.RESOLUTION_ERROR.value)

    engine = ResolutionEngine(marker_suffix=resolve_marker_suffix(args, definitions.settings))
    try:
        configs = engine.resolve(catalog_raw or {}, definitions.conventions, definitions.units)
    except BuildcatError as e:
        logging.error("Resolution failed: %s", e)
        sys.exit(ExitCodes.RESOLUTION_ERROR.value)

    if not configs:
        logging.warning("No units found in %s.", args.DEFINITIONS)
    configs = select_units(configs, args.UNITS)
    logging.info("Resolved %d unit(s).", len(configs))

    if args.OUTPUT:
        if infer_output_format(args) == "csv":
            export_csv(configs, args.OUTPUT)
        else:
            export_json(configs, args.OUTPUT)
    elif not args.QUIET:
        print(render_json(configs))

    if is_debug_enabled(logger):
        logger.debug(
            "CLI finished",
            extra=extra_context(event="function_exit", component="cli", action="main", outcome="success")
        )
    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
