"""key-smtmgr: install, update and enable SMT solvers for KeY."""

import logging

__version__ = "1.0.0"

# Name of the program, used for configuration and data directories
NAME = "key-smtmgr"

# Layout version of the repository documents understood by this program
FORMAT_VERSION = 1


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging for a single CLI invocation."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(format="%(levelname)s: %(message)s")
    logging.getLogger().setLevel(level)


from smtmgr.errors import (  # noqa: E402
    AlreadyInstalled,
    ConfigError,
    ExtractionError,
    NetworkError,
    NoInstalledVersion,
    SchemaMismatchError,
    SmtMgrError,
    UnknownSolverVersion,
    UnsupportedPlatform,
    UnsafePath,
    SettingsError,
    VersionParseError,
    format_error,
    format_field_error,
    format_suggestion,
)
from smtmgr.versions import compare_versions, is_newer, max_version  # noqa: E402

__all__ = [
    "__version__",
    "NAME",
    "FORMAT_VERSION",
    "setup_logging",
    "SmtMgrError",
    "ConfigError",
    "NetworkError",
    "SchemaMismatchError",
    "UnknownSolverVersion",
    "AlreadyInstalled",
    "NoInstalledVersion",
    "VersionParseError",
    "ExtractionError",
    "UnsupportedPlatform",
    "UnsafePath",
    "SettingsError",
    "format_error",
    "format_field_error",
    "format_suggestion",
    "compare_versions",
    "is_newer",
    "max_version",
]
