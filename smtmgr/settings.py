"""Access to KeY's proof-independent settings file."""

import logging
from contextlib import contextmanager
from pathlib import Path

from smtmgr import properties
from smtmgr.errors import SettingsError

_logging = logging.getLogger(__name__)

SOLVER_COMMAND_PREFIX = "[SMTSettings]solverCommand"


def solver_command_key(solver: str) -> str:
    """Settings key under which KeY looks up the command for solver."""
    return f"{SOLVER_COMMAND_PREFIX}{solver}"


class KeySettings:
    """Load, modify and store KeY's ``proofIndependentSettings.props``.

    A missing file reads as empty and is created on the first save.
    """

    def __init__(self, path: Path):
        self.path = path

    def load(self) -> dict[str, str]:
        """Read the settings; a missing file reads as empty.

        Raises:
            SettingsError: If the file is not valid properties syntax.
        """
        if not self.path.exists():
            _logging.debug(f"No KeY settings at {self.path}")
            return {}
        text = self.path.read_text(encoding="latin-1")
        try:
            return properties.loads(text)
        except ValueError as e:
            raise SettingsError(f"Cannot parse KeY settings {self.path}: {e}") from e

    def save(self, props: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(properties.dumps(props, comment=""), encoding="latin-1")

    @contextmanager
    def edit(self):
        """Yield the loaded settings and save them afterwards."""
        props = self.load()
        yield props
        self.save(props)

    def get_solver_command(self, solver: str) -> str | None:
        return self.load().get(solver_command_key(solver))

    def set_solver_command(self, solver: str, command: str) -> None:
        with self.edit() as props:
            props[solver_command_key(solver)] = command
        _logging.debug(f"Set {solver_command_key(solver)}={command}")

    def clear_solver_command(self, solver: str) -> bool:
        """Remove the solver's command. Returns True if one was set."""
        props = self.load()
        if props.pop(solver_command_key(solver), None) is None:
            return False
        self.save(props)
        return True


__all__ = [
    "SOLVER_COMMAND_PREFIX",
    "solver_command_key",
    "KeySettings",
]
