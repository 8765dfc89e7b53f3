import typing as t
from dataclasses import dataclass

import pydantic

from ._checks import count_versions, exceeds_dependency_threshold
from ._model import Versions, VersionSet


def _is_falsey(value: object) -> bool:
    return not value


def _is_none(value: object) -> bool:
    return value is None


@pydantic.with_config(use_attribute_docstrings=True)
@dataclass(kw_only=True, frozen=True)
class DiffRecord:
    name: str

    removed: Versions
    """Versions that are only locked in the old lockfile."""

    added: Versions
    """Versions that are only locked in the new lockfile."""

    is_new_package: t.Annotated[
        bool, pydantic.Field(default=False, exclude_if=_is_falsey)
    ]
    """True if the package wasn't locked at all in the old lockfile."""

    is_removed_package: t.Annotated[
        bool, pydantic.Field(default=False, exclude_if=_is_falsey)
    ]
    """True if the package isn't locked at all in the new lockfile."""


@dataclass(kw_only=True)
class DiffStat:
    total: int
    added: int
    removed: int
    updated: int
    old_versions: int
    """Number of `(name, version)` pairs in the old lockfile."""
    new_versions: int
    """Number of `(name, version)` pairs in the new lockfile."""
    dependency_threshold: t.Annotated[
        int | None, pydantic.Field(exclude_if=_is_none)
    ] = None
    """How many added versions are too many, if checked."""
    exceeds_dependency_threshold: t.Annotated[
        bool, pydantic.Field(exclude_if=_is_falsey)
    ] = False
    """True if the new lockfile adds at least `dependency_threshold` versions."""


@dataclass(kw_only=True)
class Diff:
    stat: DiffStat
    packages: list[DiffRecord]


def diff(old: VersionSet, new: VersionSet) -> list[DiffRecord]:
    """Compare the locked versions, package by package.

    A package that is missing on one side is compared against an empty set.
    Unchanged packages are omitted.

    >>> [r.name for r in diff({"a": frozenset({"1"})}, {"a": frozenset({"1"})})]
    []
    >>> [record] = diff({"a": frozenset({"1", "2"})}, {"a": frozenset({"2", "3"})})
    >>> record.removed, record.added
    (frozenset({'1'}), frozenset({'3'}))
    """
    records = []
    for name in sorted({*old, *new}):
        record = _package_diff(
            name, old=old.get(name, frozenset()), new=new.get(name, frozenset())
        )
        if record is not None:
            records.append(record)
    return records


def _package_diff(
    name: str, *, old: frozenset[str], new: frozenset[str]
) -> DiffRecord | None:
    if old == new:
        return None
    return DiffRecord(
        name=name,
        removed=old - new,
        added=new - old,
        is_new_package=not old,
        is_removed_package=not new,
    )


def summarize(
    old: VersionSet, new: VersionSet, *, dependency_threshold: int | None = None
) -> Diff:
    """Show version changes between the two lockfiles, with statistics.

    If a `dependency_threshold` is given, the stats also tell whether
    the new lockfile adds at least that many locked versions.
    """
    the_diff = Diff(
        stat=DiffStat(
            total=0,
            added=0,
            removed=0,
            updated=0,
            old_versions=count_versions(old),
            new_versions=count_versions(new),
            dependency_threshold=dependency_threshold,
            exceeds_dependency_threshold=(
                dependency_threshold is not None
                and exceeds_dependency_threshold(
                    old, new, threshold=dependency_threshold
                )
            ),
        ),
        packages=diff(old, new),
    )
    for record in the_diff.packages:
        the_diff.stat.total += 1
        the_diff.stat.added += record.is_new_package
        the_diff.stat.removed += record.is_removed_package
        the_diff.stat.updated += not (
            record.is_new_package or record.is_removed_package
        )
    return the_diff
