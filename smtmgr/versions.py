"""Semantic version coercion and comparison."""

import re
from dataclasses import dataclass
from functools import total_ordering
from typing import Iterable

from packaging import version as pkg_version

from smtmgr.errors import VersionParseError

# Release cores, most specific first: 1.2.3(.4), 1.2, 1
_RELEASE_PATTERNS = [
    re.compile(r"\d+\.\d+\.\d+(?:\.\d+)?"),
    re.compile(r"\d+\.\d+"),
    re.compile(r"\d+"),
]

# Text directly after the release core: -rc.1, -SNAPSHOT, rc1, _beta
_SUFFIX = re.compile(r"[-_.]?([0-9A-Za-z][0-9A-Za-z.-]*)")

# Artifact tags such as -x64-glibc-2.35 or -arm64 end the pre-release part
_PLATFORM_TAG = re.compile(
    r"(x64|x86|x86_64|amd64|arm64|aarch64|i[36]86|glibc|musl|static"
    r"|linux|win|win32|win64|windows|mac|macos|osx|darwin|ubuntu|debian)",
    re.IGNORECASE,
)


def _identifier_key(identifier: str) -> tuple:
    # numeric identifiers sort numerically and below alphanumeric ones
    if identifier.isdigit():
        return (0, int(identifier), "")
    return (1, 0, identifier)


@total_ordering
@dataclass(frozen=True)
class SemVer:
    """A release core plus semver pre-release identifiers."""
    release: pkg_version.Version
    prerelease: tuple[str, ...] = ()

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    def _key(self) -> tuple:
        # a version without pre-release ranks above any pre-release of it
        return (
            self.release,
            not self.prerelease,
            tuple(_identifier_key(i) for i in self.prerelease),
        )

    def __eq__(self, other):
        if not isinstance(other, SemVer):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other):
        if not isinstance(other, SemVer):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self):
        return hash(self._key())

    def __str__(self):
        if self.prerelease:
            return f"{self.release}-{'.'.join(self.prerelease)}"
        return str(self.release)


def _prerelease(suffix: str) -> tuple[str, ...]:
    match = _SUFFIX.match(suffix)
    if not match:
        return ()
    kept = []
    for part in match.group(1).split("-"):
        if _PLATFORM_TAG.fullmatch(part):
            break
        kept.append(part)
    return tuple(i for i in "-".join(kept).split(".") if i)


def coerce_version(text: str) -> SemVer:
    """Coerce a loose version string into a comparable version.

    Tags such as ``z3-4.12.1``, ``v1.2`` or ``cvc5-1.0.5`` are reduced to
    their release core. Whatever follows the core (``-rc.1``, ``-SNAPSHOT``)
    is kept as pre-release identifiers, up to the first platform tag
    (``-x64``, ``-glibc``). Build metadata after ``+`` is dropped.

    Raises:
        VersionParseError: If no release number can be found.
    """
    if not isinstance(text, str) or not text.strip():
        raise VersionParseError(str(text))

    candidate = text.strip().split("+", 1)[0]
    for pattern in _RELEASE_PATTERNS:
        match = pattern.search(candidate)
        if match:
            break
    else:
        raise VersionParseError(text)

    try:
        release = pkg_version.Version(match.group(0))
    except pkg_version.InvalidVersion as e:
        raise VersionParseError(text) from e
    return SemVer(release, _prerelease(candidate[match.end():]))


def compare_versions(version1: str, version2: str) -> int:
    """Compare two version strings. Returns -1, 0, or 1."""
    v1 = coerce_version(version1)
    v2 = coerce_version(version2)
    if v1 < v2:
        return -1
    elif v1 > v2:
        return 1
    else:
        return 0


def is_newer(candidate: str, current: str) -> bool:
    """Return True if candidate is strictly greater than current."""
    return compare_versions(candidate, current) > 0


def max_version(versions: Iterable[str]) -> str:
    """Return the highest of the given version strings.

    Ties keep the first occurrence.

    Raises:
        ValueError: If versions is empty.
        VersionParseError: If any version cannot be parsed.
    """
    best: str | None = None
    best_parsed = None
    for v in versions:
        parsed = coerce_version(v)
        if best_parsed is None or parsed > best_parsed:
            best, best_parsed = v, parsed
    if best is None:
        raise ValueError("max_version() arg is an empty sequence")
    return best


__all__ = [
    "SemVer",
    "coerce_version",
    "compare_versions",
    "is_newer",
    "max_version",
]
