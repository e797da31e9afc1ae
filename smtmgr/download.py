"""Streaming artifact download."""

import logging
import re
from pathlib import Path, PurePosixPath
from typing import Callable
from urllib.parse import unquote, urlparse

import requests

from smtmgr.errors import NetworkError

_logging = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
CONNECT_TIMEOUT = 30
READ_TIMEOUT = 300

# progress(downloaded_bytes, total_bytes_or_None)
ProgressCallback = Callable[[int, int | None], None]

_CONTENT_DISPOSITION = re.compile(
    r"""filename\*?=(?:UTF-8'')?["']?([^"';]+)["']?""", re.IGNORECASE
)


def _name_from_url(url: str) -> str | None:
    name = PurePosixPath(unquote(urlparse(url).path)).name
    return name or None


def resolve_filename(response: requests.Response, requested_url: str) -> str:
    """Pick the local filename for a download.

    Servers that redirect to the real artifact (``download.php?file=...``)
    determine the name: a Content-Disposition header wins, then the final
    URL after redirects, then the requested URL.
    """
    disposition = response.headers.get("content-disposition", "")
    match = _CONTENT_DISPOSITION.search(disposition)
    if match:
        name = PurePosixPath(unquote(match.group(1).strip())).name
        if name:
            return name

    for url in (response.url, requested_url):
        name = _name_from_url(url or "")
        if name and not name.endswith(".php"):
            return name
    return "download"


def download_file(
    url: str, target_dir: Path, progress: ProgressCallback | None = None
) -> Path:
    """Download url into target_dir and return the local path.

    progress is called after every chunk with the cumulative byte count and
    the Content-Length (None when the server does not send one).

    Raises:
        NetworkError: If the transfer fails.
    """
    try:
        response = requests.get(
            url, stream=True, allow_redirects=True, timeout=(CONNECT_TIMEOUT, READ_TIMEOUT)
        )
        response.raise_for_status()
    except requests.RequestException as e:
        raise NetworkError(f"Failed to download {url}: {e}") from e

    with response:
        target = target_dir / resolve_filename(response, url)
        length = response.headers.get("content-length")
        total = int(length) if length and length.isdigit() else None
        _logging.info(f"Download {url} to {target}")

        downloaded = 0
        try:
            with open(target, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if not chunk:
                        continue
                    f.write(chunk)
                    downloaded += len(chunk)
                    if progress:
                        progress(downloaded, total)
        except requests.RequestException as e:
            raise NetworkError(f"Download of {url} interrupted: {e}") from e

    if total is not None and downloaded != total:
        raise NetworkError(
            f"Download of {url} incomplete: got {downloaded} of {total} bytes"
        )
    return target


__all__ = [
    "ProgressCallback",
    "resolve_filename",
    "download_file",
]
