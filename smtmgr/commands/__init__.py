"""CLI command definitions for key-smtmgr."""

import sys

import click

from smtmgr import NAME, SmtMgrError, __version__, format_error, setup_logging
from smtmgr.commands.disable import disable
from smtmgr.commands.enable import enable
from smtmgr.commands.install import install
from smtmgr.commands.list import list_solvers
from smtmgr.commands.remove import remove
from smtmgr.commands.update import update
from smtmgr.commands.utils import get_context


@click.group(invoke_without_command=True)
@click.version_option(__version__, prog_name=NAME)
@click.option("--verbose", "-v", is_flag=True, help="Print debug output and configuration")
@click.pass_context
def cli(ctx, verbose):
    """Manage SMT solver installations for KeY."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging(verbose)

    if ctx.invoked_subcommand is None:
        if verbose:
            # loading the context prints version, paths and configuration
            try:
                get_context(ctx)
            except (SmtMgrError, OSError) as e:
                click.echo(format_error(str(e)), err=True)
                sys.exit(1)
        else:
            click.echo(ctx.get_help())


cli.add_command(update)
cli.add_command(list_solvers, name="list")
cli.add_command(install)
cli.add_command(remove)
cli.add_command(enable)
cli.add_command(disable)

__all__ = ["cli"]


if __name__ == "__main__":
    cli()
