from inline_snapshot import snapshot

import depdelta
from depdelta._pnpm import locate_pnpm, scan_package_keys, split_package_key
from depdelta._scan import split_lines

from .helpers import parametrized

_V6_LOCKFILE = """\
lockfileVersion: '6.0'

dependencies:
  lodash:
    specifier: ^4.17.21
    version: 4.17.21

packages:

  /lodash@4.17.21:
    resolution: {integrity: sha512-abc}
    dev: false

  /@scope/name@1.2.3:
    resolution: {integrity: sha512-def}

  '/@babel/core@7.23.0(supports-color@8.1.1)':
    resolution: {integrity: sha512-ghi}

snapshots:

  /not-a-package@1.0.0:
    resolution: {integrity: sha512-jkl}
"""


def test_parse() -> None:
    assert depdelta.parse_versions("pnpm", _V6_LOCKFILE) == {
        "lodash": {"4.17.21"},
        "@scope/name": {"1.2.3"},
        "@babel/core": {"7.23.0"},
    }


def test_scan_package_keys_only_sees_packages_block() -> None:
    assert list(scan_package_keys(split_lines(_V6_LOCKFILE))) == snapshot(
        [
            (10, "/lodash@4.17.21"),
            (14, "/@scope/name@1.2.3"),
            (17, "'/@babel/core@7.23.0(supports-color@8.1.1)'"),
        ]
    )


@parametrized(
    "key",
    {
        "legacy": "/@scope/name@1.2.3",
        "quoted-legacy": '"/@scope/name@1.2.3"',
        "v9": "@scope/name@1.2.3",
        "v9-quoted": "'@scope/name@1.2.3'",
        "peers": "@scope/name@1.2.3(react@18.2.0)(@types/react@18.2.0)",
    },
)
def test_split_scoped_key(key: str) -> None:
    assert split_package_key(key) == ("@scope/name", "1.2.3")


@parametrized(
    "key",
    {
        "no-version": "/lodash",
        "bare-scope": "@scope/name",
        "empty-version": "lodash@",
        "blank-version": "lodash@  ",
        "leading-at": "@1.0.0",
    },
)
def test_split_rejects_key(key: str) -> None:
    assert split_package_key(key) is None


def test_parse_crlf() -> None:
    content = "packages:\r\n\r\n  /a@1.0.0:\r\n    resolution: {}\r\n"
    assert depdelta.parse_versions("pnpm", content) == {"a": {"1.0.0"}}


def test_parse_without_packages() -> None:
    assert depdelta.parse_lockfile("pnpm", "lockfileVersion: '9.0'\n") == (
        depdelta.ParseResult(dialect="pnpm", status="parsed", versions={})
    )


def test_locate() -> None:
    assert locate_pnpm(_V6_LOCKFILE, "lodash", "4.17.21") == 10
    assert locate_pnpm(_V6_LOCKFILE, "@scope/name", "1.2.3") == 14
    assert locate_pnpm(_V6_LOCKFILE, "@babel/core", "7.23.0") == 17
    assert locate_pnpm(_V6_LOCKFILE, "lodash", "4.17.2") is None
    assert locate_pnpm(_V6_LOCKFILE, "lodash", "4.17.20") is None


def test_locate_v9_key() -> None:
    content = "packages:\n\n  '@scope/name@1.2.3':\n    resolution: {}\n"
    assert locate_pnpm(content, "@scope/name", "1.2.3") == 3
    assert locate_pnpm(content, "@scope/name", "1.2.4") is None


def test_locate_inline_entry() -> None:
    content = "packages:\n  /foo@1.0.0: {resolution: {integrity: x}}\n"
    assert locate_pnpm(content, "foo", "1.0.0") == 2
    assert locate_pnpm(content, "foo", "1.0.1") is None
