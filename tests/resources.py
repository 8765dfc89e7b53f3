import importlib.resources
import pathlib
import typing as t

import depdelta

_RESOURCES = importlib.resources.files()

# The `importlib.resources` API only guarantees the `Traversable` interface.
# This matters when resources aren't installed as actual files,
# e.g. when a Python package is installed as a Zip archive.
# However, these resources are only used during development,
# which always uses an editable install.
# So we know that these resources are ordinary file paths.
assert isinstance(_RESOURCES, pathlib.Path)  # noqa: S101  # assert

OLD_NPM_LOCKFILE = _RESOURCES / "old-npm-project/package-lock.json"
NEW_NPM_LOCKFILE = _RESOURCES / "new-npm-project/package-lock.json"
OLD_PNPM_LOCKFILE = _RESOURCES / "old-pnpm-project/pnpm-lock.yaml"
NEW_PNPM_LOCKFILE = _RESOURCES / "new-pnpm-project/pnpm-lock.yaml"
OLD_YARN_CLASSIC_LOCKFILE = _RESOURCES / "old-yarn-classic-project/yarn.lock"
NEW_YARN_CLASSIC_LOCKFILE = _RESOURCES / "new-yarn-classic-project/yarn.lock"
OLD_YARN_BERRY_LOCKFILE = _RESOURCES / "old-yarn-berry-project/yarn.lock"
NEW_YARN_BERRY_LOCKFILE = _RESOURCES / "new-yarn-berry-project/yarn.lock"
OLD_BUN_LOCKFILE = _RESOURCES / "old-bun-project/bun.lock"
NEW_BUN_LOCKFILE = _RESOURCES / "new-bun-project/bun.lock"


class LockfilePair(t.NamedTuple):
    old: pathlib.Path
    new: pathlib.Path


LOCKFILES: dict[depdelta.Dialect, LockfilePair] = {
    "npm": LockfilePair(OLD_NPM_LOCKFILE, NEW_NPM_LOCKFILE),
    "pnpm": LockfilePair(OLD_PNPM_LOCKFILE, NEW_PNPM_LOCKFILE),
    "yarn-classic": LockfilePair(
        OLD_YARN_CLASSIC_LOCKFILE, NEW_YARN_CLASSIC_LOCKFILE
    ),
    "yarn-berry": LockfilePair(OLD_YARN_BERRY_LOCKFILE, NEW_YARN_BERRY_LOCKFILE),
    "bun": LockfilePair(OLD_BUN_LOCKFILE, NEW_BUN_LOCKFILE),
}
"""Each example project exists in an old and a new revision.

All of them describe the same change:
`lodash` is bumped from 4.17.20 to 4.17.21,
and the new `left-pad` dependency pulls in an older `lodash` 3.10.1.
"""

NEW_LINES: dict[depdelta.Dialect, dict[tuple[str, str], int]] = {
    "npm": {
        ("left-pad", "1.3.0"): 21,
        ("lodash", "3.10.1"): 29,
        ("lodash", "4.17.21"): 34,
    },
    "pnpm": {
        ("left-pad", "1.3.0"): 26,
        ("lodash", "3.10.1"): 29,
        ("lodash", "4.17.21"): 32,
    },
    "yarn-classic": {
        ("left-pad", "1.3.0"): 11,
        ("lodash", "3.10.1"): 18,
        ("lodash", "4.17.21"): 23,
    },
    "yarn-berry": {
        ("left-pad", "1.3.0"): 26,
        ("lodash", "3.10.1"): 35,
        ("lodash", "4.17.21"): 42,
    },
    "bun": {
        ("left-pad", "1.3.0"): 16,
        ("lodash", "3.10.1"): 18,
        ("lodash", "4.17.21"): 20,
    },
}
"""Where the new entries are declared in the new lockfiles."""
