import typing as t

import pydantic
from packaging.version import InvalidVersion, Version


def _version_sort_key(version: str) -> tuple[int, Version, str] | tuple[int, str]:
    try:
        return (0, Version(version), version)
    except InvalidVersion:
        return (1, version)


def sort_versions(versions: t.Iterable[str]) -> list[str]:
    """Sort versions for display.

    Versions that PEP 440 understands come first, in version order,
    which covers typical SemVer strings.
    Anything else follows in plain string order.

    >>> sort_versions({"10.0.0", "9.1.0", "1.0.0-beta.2", "workspace:."})
    ['1.0.0-beta.2', '9.1.0', '10.0.0', 'workspace:.']
    """
    return sorted(versions, key=_version_sort_key)


type Versions = t.Annotated[
    frozenset[str], pydantic.PlainSerializer(sort_versions, return_type=list[str])
]
"""A set of versions that is serialized as a sorted list."""

type VersionSet = dict[str, Versions]
"""Maps each package name to the distinct versions that are locked for it.

Names never map to an empty set.
"""


class ParsedEntry(t.NamedTuple):
    """A single `name@version` occurrence found in a lockfile."""

    name: str
    version: str
    key: str
    """The raw key or header this entry was extracted from.

    Only kept for diagnostics. Locating lines rescans the content instead.
    """


class MalformedLockfileError(ValueError):
    """The lockfile could not be decoded at all."""
