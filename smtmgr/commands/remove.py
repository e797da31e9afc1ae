"""Remove command implementation."""

import sys

import click

from smtmgr import SmtMgrError, format_error
from smtmgr.commands.utils import get_installer


@click.command()
@click.argument("solver")
@click.argument("version")
@click.pass_context
def remove(ctx, solver: str, version: str):
    """Remove VERSION of SOLVER."""
    try:
        installer = get_installer(ctx)
        if installer.remove(solver, version):
            click.echo(f"✅ {solver} {version} removed")
        else:
            click.echo(f"{solver} {version} is not installed.")
    except (SmtMgrError, OSError) as e:
        click.echo(format_error(str(e)), err=True)
        sys.exit(1)
