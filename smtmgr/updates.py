"""Update checking utilities."""

from smtmgr import __version__
from smtmgr.models import LocalRepository, RemoteRepository
from smtmgr.repository import RepositoryStore
from smtmgr.versions import is_newer


def compute_updates(remote: RemoteRepository, local: LocalRepository) -> dict[str, str]:
    """Map installed solvers to a strictly newer catalog version.

    Solvers missing from the catalog, and catalog solvers that were never
    installed, do not appear in the result.
    """
    latest_remote = remote.find_latest_versions()
    latest_local = local.find_latest_versions()

    updates = {}
    for name, installed in latest_local.items():
        available = latest_remote.get(name)
        if available is not None and is_newer(available, installed):
            updates[name] = available
    return updates


def check_for_updates(store: RepositoryStore) -> dict[str, str]:
    """Load both repositories and compute the available updates."""
    remote = store.load_remote_cache()
    local = store.load_local_record()
    return compute_updates(remote, local)


def check_manager_update(
    remote: RemoteRepository, current: str = __version__
) -> str | None:
    """Return the catalog's manager version if it is newer than current."""
    latest = remote.latest_tool_version
    if latest and is_newer(latest, current):
        return latest
    return None


__all__ = [
    "compute_updates",
    "check_for_updates",
    "check_manager_update",
]
