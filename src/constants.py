"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    RESOLUTION_ERROR = 2


class CatalogNamespaces(Enum):
    """Independent key namespaces of a version catalog.

    Args:
        Enum (string): Table names as they appear in the catalog file.
    """

    VERSIONS = "versions"
    LIBRARIES = "libraries"
    PLUGINS = "plugins"
    BUNDLES = "bundles"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    DEFAULT_CATALOG_PATH = "gradle/libs.versions.toml"
    DEFAULT_DEFINITIONS_PATH = "buildcat.yml"
    CATALOG_TABLES = [ns.value for ns in CatalogNamespaces]
    CONVENTIONS_NAMESPACE = "conventions"
    UNITS_NAMESPACE = "units"

    # Rich version keys in precedence order; "reject" is carried but never selected
    RICH_VERSION_KEYS = ["strictly", "require", "prefer"]
    RICH_VERSION_EXTRA_KEYS = ["reject", "rejectAll"]

    # Plugin marker artifacts are published as <id>:<id><suffix>:<version>.
    # Gradle's suffix is ".gradle.plugin"; empty keeps artifact == plugin id.
    MARKER_ARTIFACT_SUFFIX = ""
    GRADLE_MARKER_SUFFIX = ".gradle.plugin"

    KNOWN_SCOPES = [
        "api",
        "implementation",
        "compileOnly",
        "compileOnlyApi",
        "runtimeOnly",
        "annotationProcessor",
        "developmentOnly",
        "testImplementation",
        "testCompileOnly",
        "testRuntimeOnly",
        "testAnnotationProcessor",
    ]

    OUTPUT_FORMATS = ["json", "csv"]
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "BUILDCAT_LOG_LEVEL"
    ENV_MARKER_SUFFIX = "BUILDCAT_MARKER_SUFFIX"
