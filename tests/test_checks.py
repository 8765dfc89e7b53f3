from inline_snapshot import snapshot

import depdelta

from . import resources


def _new_versions() -> depdelta.VersionSet:
    return depdelta.lockfile_from(resources.NEW_NPM_LOCKFILE).versions


def test_count_versions() -> None:
    assert depdelta.count_versions({}) == 0
    assert depdelta.count_versions(_new_versions()) == 4


def test_find_duplicates() -> None:
    assert depdelta.find_duplicates(_new_versions()) == snapshot(
        {"lodash": ["3.10.1", "4.17.21"]}
    )
    assert depdelta.find_duplicates(_new_versions(), threshold=2) == {}


def test_find_duplicates_sorts_versions() -> None:
    versions = {
        "b": frozenset({"10.0.0", "9.0.0", "1.0.0-rc.1"}),
        "a": frozenset({"2.0.0", "1.0.0"}),
        "c": frozenset({"1.0.0"}),
    }
    assert depdelta.find_duplicates(versions) == snapshot(
        {"a": ["1.0.0", "2.0.0"], "b": ["1.0.0-rc.1", "9.0.0", "10.0.0"]}
    )
    assert list(depdelta.find_duplicates(versions)) == ["a", "b"]


def test_new_versions() -> None:
    old = depdelta.lockfile_from(resources.OLD_NPM_LOCKFILE).versions
    assert depdelta.new_versions(old, _new_versions()) == snapshot(
        [
            {"name": "left-pad", "version": "1.3.0", "is_new_package": True},
            {"name": "lodash", "version": "3.10.1", "is_new_package": False},
            {"name": "lodash", "version": "4.17.21", "is_new_package": False},
        ]
    )
    assert depdelta.new_versions(_new_versions(), _new_versions()) == []


def test_sort_versions() -> None:
    assert depdelta.sort_versions(["1.10.0", "1.9.0", "1.9.0-beta.1"]) == [
        "1.9.0-beta.1",
        "1.9.0",
        "1.10.0",
    ]
    assert depdelta.sort_versions(["workspace:b", "2.0.0", "workspace:a"]) == [
        "2.0.0",
        "workspace:a",
        "workspace:b",
    ]


def test_exceeds_dependency_threshold() -> None:
    old = depdelta.lockfile_from(resources.OLD_NPM_LOCKFILE).versions
    new = _new_versions()
    assert depdelta.count_versions(new) - depdelta.count_versions(old) == 2
    assert depdelta.exceeds_dependency_threshold(old, new, threshold=1)
    assert depdelta.exceeds_dependency_threshold(old, new, threshold=2)
    assert not depdelta.exceeds_dependency_threshold(old, new, threshold=3)
    # removing versions never counts
    assert not depdelta.exceeds_dependency_threshold(new, old, threshold=1)
