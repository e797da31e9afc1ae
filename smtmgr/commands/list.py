"""List command implementation."""

import sys

import click

from smtmgr import SmtMgrError, format_error
from smtmgr.commands.utils import get_installer

SEPARATOR = "-" * 36


@click.command(name="list")
@click.pass_context
def list_solvers(ctx):
    """List the solver catalog with installation status."""
    try:
        run_list(ctx)
    except (SmtMgrError, OSError) as e:
        click.echo(format_error(str(e)), err=True)
        sys.exit(1)


def run_list(ctx):
    installer = get_installer(ctx)
    remote = installer.store.load_remote_cache()
    local = installer.store.load_local_record()

    if not remote.solvers:
        click.echo("The catalog lists no solvers.")

    for solver in remote.solvers.values():
        enabled = installer.enabled_command(solver.name)
        click.echo(SEPARATOR)
        click.echo(f"Solver: {solver.name}")
        click.echo(f"License: {solver.license}")
        click.echo(f"Homepage: {solver.homepage}")
        if solver.description:
            click.echo(solver.description)
        click.echo("Versions:")
        for version in solver.versions.values():
            marks = []
            found = local.get_solver_version(solver.name, version.version)
            if found is not None:
                marks.append("(INSTALLED)")
                executable = installer.executable_path(solver.name, found[1])
                if enabled == str(executable):
                    marks.append("(ENABLED)")
            line = f"\t* {version.version} {version.release_date} {' '.join(marks)}"
            click.echo(line.rstrip())
            if version.description:
                click.echo(f"\t  {version.description}")
    if remote.solvers:
        click.echo(SEPARATOR)

    orphans = [
        (name, v)
        for name, solver in local.installed.items()
        for v in solver.versions
        if remote.find_solver_version(name, v) is None
    ]
    if orphans:
        click.echo("Installed but not in catalog:")
        for name, v in orphans:
            click.echo(f"\t* {name} {v}")
