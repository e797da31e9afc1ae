"""Install command implementation."""

import logging
import sys

import click

from smtmgr import (
    NAME,
    AlreadyInstalled,
    SmtMgrError,
    UnknownSolverVersion,
    format_error,
    format_suggestion,
)
from smtmgr.commands.utils import get_installer

_logging = logging.getLogger(__name__)


class DownloadProgress:
    """Progress callback that drives a click progress bar.

    The bar is only shown once the total size is known.
    """

    def __init__(self, label: str):
        self.label = label
        self.bar = None
        self.seen = 0

    def __call__(self, downloaded: int, total: int | None) -> None:
        if total is None:
            _logging.debug(f"{self.label}: {downloaded} bytes")
            return
        if self.bar is None:
            self.bar = click.progressbar(length=total, label=self.label)
            self.bar.__enter__()
        self.bar.update(downloaded - self.seen)
        self.seen = downloaded

    def close(self) -> None:
        if self.bar is not None:
            self.bar.__exit__(None, None, None)
            self.bar = None


@click.command()
@click.argument("solver")
@click.argument("version")
@click.option("--enable", is_flag=True, help="Enable the solver in KeY after installing")
@click.pass_context
def install(ctx, solver: str, version: str, enable: bool):
    """Install VERSION of SOLVER."""
    try:
        run_install(ctx, solver, version, enable)
    except AlreadyInstalled as e:
        click.echo(f"{e}. Nothing to do.")
    except UnknownSolverVersion as e:
        click.echo(format_suggestion(str(e), f"run '{NAME} list' to see available solvers"), err=True)
        sys.exit(1)
    except (SmtMgrError, OSError) as e:
        click.echo(format_error(str(e)), err=True)
        sys.exit(1)


def run_install(ctx, solver: str, version: str, enable: bool):
    installer = get_installer(ctx)
    progress = DownloadProgress(f"{solver} {version}")
    try:
        target = installer.install(solver, version, enable=enable, progress=progress)
    finally:
        progress.close()
    click.echo(f"✅ {solver} {version} installed to {target}")

    if enable:
        click.echo(f"✅ {solver} {version} enabled: {installer.enabled_command(solver)}")
