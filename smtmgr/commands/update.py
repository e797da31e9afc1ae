"""Update command implementation."""

import sys

import click

from smtmgr import NAME, SmtMgrError, format_error
from smtmgr.commands.utils import get_store
from smtmgr.updates import check_manager_update, compute_updates


@click.command()
@click.pass_context
def update(ctx):
    """Refresh the solver catalog and report available updates."""
    try:
        run_update(ctx)
    except (SmtMgrError, OSError) as e:
        click.echo(format_error(str(e)), err=True)
        sys.exit(1)


def run_update(ctx):
    store = get_store(ctx)

    click.echo("Updating the remote repository information.")
    store.refresh_remote_cache()
    click.echo("Repository information is updated.")

    remote = store.load_remote_cache()
    local = store.load_local_record()

    newer_manager = check_manager_update(remote)
    if newer_manager:
        click.secho(f"A newer {NAME} is available: {newer_manager}", fg="yellow")
        if remote.latest_tool_download_url:
            click.echo(f"Download: {remote.latest_tool_download_url}")

    updates = compute_updates(remote, local)
    for solver, version in updates.items():
        click.echo(f"🔄 {solver} is updatable to {version}")
        click.echo(f"   Use: {NAME} install --enable {solver} {version}")

    if not updates:
        click.echo("All installed solvers are up to date.")
