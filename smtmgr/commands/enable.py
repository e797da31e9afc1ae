"""Enable command implementation."""

import sys

import click

from smtmgr import SmtMgrError, format_error
from smtmgr.commands.utils import get_installer


@click.command()
@click.argument("solver")
@click.argument("version", required=False)
@click.pass_context
def enable(ctx, solver: str, version: str | None):
    """Register SOLVER in KeY, using VERSION or the latest installed one."""
    try:
        executable = get_installer(ctx).enable(solver, version)
    except (SmtMgrError, OSError) as e:
        click.echo(format_error(str(e)), err=True)
        sys.exit(1)
    click.echo(f"✅ {solver} enabled: {executable}")
