"""Reading and writing the catalog cache and the local install record."""

import json
import logging
from pathlib import Path
from typing import Callable

import requests

from smtmgr import FORMAT_VERSION
from smtmgr.config import format_syntax_error
from smtmgr.context import AppContext
from smtmgr.errors import NetworkError, SchemaMismatchError
from smtmgr.models import LocalRepository, RemoteRepository

_logging = logging.getLogger(__name__)

FETCH_TIMEOUT = 30


def fetch_document(url: str) -> str:
    """Fetch a text document over HTTP(S).

    Raises:
        NetworkError: If the request fails or returns an error status.
    """
    _logging.debug(f"Fetching {url}")
    try:
        response = requests.get(url, timeout=FETCH_TIMEOUT)
        response.raise_for_status()
    except requests.RequestException as e:
        raise NetworkError(f"Failed to fetch {url}: {e}") from e
    return response.text


def _read_json(path: Path, what: str):
    text = path.read_text(encoding="utf-8")
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise SchemaMismatchError(
            f"{format_syntax_error(text, e, what)}\n(in {path})"
        ) from e


def _write_json_atomic(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    with open(tmp, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.write("\n")
    tmp.replace(path)


class RepositoryStore:
    """Persistence for the two repository documents.

    Every mutation of the local record is written back as a whole
    document. There is no locking; concurrent writers race and the last
    one wins.
    """

    def __init__(
        self, context: AppContext, fetch: Callable[[str], str] = fetch_document
    ):
        self.context = context
        self.fetch = fetch

    @property
    def cache_path(self) -> Path:
        return self.context.repository_cache_path

    @property
    def record_path(self) -> Path:
        return self.context.local_record_path

    def refresh_remote_cache(self) -> None:
        """Download the catalog and overwrite the cache file verbatim."""
        url = self.context.config.repository_url
        _logging.info(f"Update remote repository information: {self.cache_path}")
        content = self.fetch(url)
        self.cache_path.parent.mkdir(parents=True, exist_ok=True)
        self.cache_path.write_text(content, encoding="utf-8")

    def load_remote_cache(self) -> RemoteRepository:
        """Read the cached catalog, fetching it first if there is no cache."""
        if not self.cache_path.exists():
            self.refresh_remote_cache()

        data = _read_json(self.cache_path, "Repository cache")
        if isinstance(data, dict) and isinstance(data.get("formatVersion"), int):
            if data["formatVersion"] > FORMAT_VERSION:
                _logging.warning(
                    f"The repository uses format version {data['formatVersion']}, "
                    f"this key-smtmgr understands {FORMAT_VERSION}. "
                    "Please update key-smtmgr."
                )
        try:
            return RemoteRepository.from_dict(data)
        except SchemaMismatchError as e:
            raise SchemaMismatchError(f"Repository cache {self.cache_path}: {e}") from e

    def load_local_record(self) -> LocalRepository:
        """Read the install record, creating an empty one on first use."""
        if not self.record_path.exists():
            local = LocalRepository(format_version=FORMAT_VERSION)
            self.save_local_record(local)
            return local

        data = _read_json(self.record_path, "Install record")
        try:
            local = LocalRepository.from_dict(data)
        except SchemaMismatchError as e:
            raise SchemaMismatchError(f"Install record {self.record_path}: {e}") from e

        if local.format_version != FORMAT_VERSION:
            _logging.warning(
                f"Install record {self.record_path} has format version "
                f"{local.format_version}, expected {FORMAT_VERSION}"
            )
        return local

    def save_local_record(self, local: LocalRepository) -> None:
        _write_json_atomic(self.record_path, local.to_dict())


__all__ = [
    "FETCH_TIMEOUT",
    "fetch_document",
    "RepositoryStore",
]
