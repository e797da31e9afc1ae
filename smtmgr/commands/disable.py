"""Disable command implementation."""

import sys

import click

from smtmgr import SmtMgrError, format_error
from smtmgr.commands.utils import get_installer


@click.command()
@click.argument("solver")
@click.pass_context
def disable(ctx, solver: str):
    """Remove SOLVER's command from the KeY settings."""
    try:
        changed = get_installer(ctx).disable(solver)
    except (SmtMgrError, OSError) as e:
        click.echo(format_error(str(e)), err=True)
        sys.exit(1)
    if changed:
        click.echo(f"✅ {solver} disabled")
    else:
        click.echo(f"{solver} was not enabled.")
