"""Findings derived from locked versions, beyond the plain diff."""

import typing as t

from ._model import VersionSet, sort_versions


def count_versions(versions: VersionSet) -> int:
    """Count all locked `(name, version)` pairs.

    >>> versions = {"a": frozenset({"1.0.0", "2.0.0"}), "b": frozenset({"1.0.0"})}
    >>> count_versions(versions)
    3
    """
    return sum(len(v) for v in versions.values())


def exceeds_dependency_threshold(
    old: VersionSet, new: VersionSet, *, threshold: int
) -> bool:
    """Check whether the `new` lockfile adds at least `threshold` locked versions.

    >>> old = {"a": frozenset({"1.0.0"})}
    >>> new = {"a": frozenset({"1.0.0", "2.0.0"}), "b": frozenset({"1.0.0"})}
    >>> exceeds_dependency_threshold(old, new, threshold=2)
    True
    >>> exceeds_dependency_threshold(old, new, threshold=3)
    False
    """
    return count_versions(new) - count_versions(old) >= threshold


def find_duplicates(
    versions: VersionSet, *, threshold: int = 1
) -> dict[str, list[str]]:
    """Find packages that are locked in more than `threshold` different versions.

    >>> versions = {"a": frozenset({"2.0.0", "1.0.0"}), "b": frozenset({"1.0.0"})}
    >>> find_duplicates(versions)
    {'a': ['1.0.0', '2.0.0']}
    """
    return {
        name: sort_versions(package_versions)
        for name, package_versions in sorted(versions.items())
        if len(package_versions) > threshold
    }


class NewVersion(t.TypedDict):
    name: str
    version: str
    is_new_package: bool
    """True if no version of this package was locked before."""


def new_versions(old: VersionSet, new: VersionSet) -> list[NewVersion]:
    """List every version that is only locked in the `new` lockfile."""
    found = []
    for name, current in sorted(new.items()):
        previous = old.get(name, frozenset())
        for version in sort_versions(current - previous):
            found.append(
                NewVersion(name=name, version=version, is_new_package=not previous)
            )
    return found
