"""Exception taxonomy and error formatting utilities.

All user-facing errors should be printed through these helpers.

Error Style Guide:
- User-facing errors use 'Error: ' prefix
- Field errors use structured format: '<entity> field '<field>' <issue>'
- Use present tense: 'must be', 'is required'
- Include actionable hints where helpful
"""


class SmtMgrError(Exception):
    """Base class for every error the manager reports to the user."""


class ConfigError(SmtMgrError):
    """Raised when the configuration file cannot be read or parsed."""


class NetworkError(SmtMgrError):
    """Raised when fetching the catalog or downloading an artifact fails."""


class SchemaMismatchError(SmtMgrError):
    """Raised when a repository document does not match the expected shape."""


class UnknownSolverVersion(SmtMgrError):
    """Raised when a solver/version pair is absent from the catalog."""

    def __init__(self, solver: str, version: str):
        super().__init__(f"solver {solver}:{version} is unknown")
        self.solver = solver
        self.version = version


class AlreadyInstalled(SmtMgrError):
    """Raised when the installation directory of a solver version exists."""

    def __init__(self, solver: str, version: str, path):
        super().__init__(f"{solver}:{version} is already installed at {path}")
        self.solver = solver
        self.version = version
        self.path = path


class NoInstalledVersion(SmtMgrError):
    """Raised when enable has no installed version to resolve to."""

    def __init__(self, solver: str, version: str | None = None):
        if version is None:
            message = f"no version of {solver} is installed"
        else:
            message = f"{solver}:{version} is not installed"
        super().__init__(message)
        self.solver = solver
        self.version = version


class VersionParseError(SmtMgrError, ValueError):
    """Raised when a version string cannot be coerced to a semantic version."""

    def __init__(self, text: str):
        super().__init__(f"cannot parse version {text!r}")
        self.text = text


class ExtractionError(SmtMgrError):
    """Raised when unpacking a downloaded archive fails."""


class UnsupportedPlatform(SmtMgrError):
    """Raised when a catalog entry has no artifact for the running OS."""


class UnsafePath(SmtMgrError):
    """Raised when a solver name or version would address files outside
    its installation directory."""


class SettingsError(SmtMgrError):
    """Raised when the KeY settings file cannot be parsed."""


def format_error(message: str) -> str:
    """Format an error message with consistent prefix.

    Examples:
        >>> format_error("solver z3:9.9.9 is unknown")
        'Error: solver z3:9.9.9 is unknown'
    """
    return f"Error: {message}"


def format_field_error(entity: str, field: str, issue: str) -> str:
    """Format a field validation error with structured format.

    Examples:
        >>> format_field_error("solvers[0]", "name", "is required")
        "solvers[0] field 'name' is required"
    """
    return f"{entity} field '{field}' {issue}"


def format_suggestion(message: str, suggestion: str) -> str:
    """Format an error message with a helpful suggestion.

    Examples:
        >>> format_suggestion("solver z3:9.9.9 is unknown", "run 'key-smtmgr list'")
        "Error: solver z3:9.9.9 is unknown. Hint: run 'key-smtmgr list'"
    """
    return f"{format_error(message)}. Hint: {suggestion}"


__all__ = [
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
]
