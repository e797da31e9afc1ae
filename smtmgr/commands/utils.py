"""Shared helpers for commands."""

import click

from smtmgr import NAME, FORMAT_VERSION, __version__
from smtmgr.config import config_to_dict
from smtmgr.context import AppContext
from smtmgr.installer import Installer
from smtmgr.repository import RepositoryStore
from smtmgr.settings import KeySettings


def get_context(ctx: click.Context) -> AppContext:
    """Return the invocation's AppContext, loading it on first use."""
    obj = ctx.ensure_object(dict)
    if "context" not in obj:
        context = AppContext.load()
        obj["context"] = context
        if obj.get("verbose"):
            describe_context(context)
    return obj["context"]


def get_store(ctx: click.Context) -> RepositoryStore:
    obj = ctx.ensure_object(dict)
    if "store" not in obj:
        obj["store"] = RepositoryStore(get_context(ctx))
    return obj["store"]


def get_installer(ctx: click.Context) -> Installer:
    obj = ctx.ensure_object(dict)
    if "installer" not in obj:
        context = get_context(ctx)
        obj["installer"] = Installer(
            context, get_store(ctx), KeySettings(context.key_settings_path)
        )
    return obj["installer"]


def describe_context(context: AppContext) -> None:
    click.echo(f"{NAME} {__version__} (format version {FORMAT_VERSION})", err=True)
    click.echo(f"config home {context.config_dir}", err=True)
    click.echo(f"installation path {context.installation_path}", err=True)
    click.echo(f"KeY settings {context.key_settings_path}", err=True)
    for key, value in config_to_dict(context.config).items():
        click.echo(f"  {key}: {value}", err=True)
