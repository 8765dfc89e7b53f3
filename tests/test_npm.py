import json

import pytest
from inline_snapshot import snapshot

import depdelta
from depdelta._model import MalformedLockfileError
from depdelta._npm import locate_npm, parse_npm


def _lockfile(packages: dict[str, object]) -> str:
    return json.dumps({"lockfileVersion": 3, "packages": packages}, indent=2)


def test_parse_skips_root_package() -> None:
    content = _lockfile(
        {
            "": {"name": "example", "version": "0.1.0"},
            "node_modules/foo": {"version": "1.0.0"},
            "node_modules/@s/bar": {"version": "2.0.0"},
        }
    )
    assert depdelta.parse_versions("npm", content) == {
        "foo": {"1.0.0"},
        "@s/bar": {"2.0.0"},
    }


def test_parse_nested_and_aliased() -> None:
    content = _lockfile(
        {
            "node_modules/a/node_modules/@t/b": {"version": "1.0.0"},
            "node_modules/a/node_modules/@t/b/": {"version": "1.0.1"},
            "node_modules/alias": {"name": "real-name", "version": "3.0.0"},
            "packages/workspace": {"version": "0.0.1"},
        }
    )
    assert depdelta.parse_versions("npm", content) == {
        "@t/b": {"1.0.0", "1.0.1"},
        "real-name": {"3.0.0"},
        "packages/workspace": {"0.0.1"},
    }


def test_parse_skips_partial_entries() -> None:
    content = _lockfile(
        {
            "node_modules/no-version": {"resolved": "https://example.com"},
            "node_modules/empty-version": {"version": ""},
            "node_modules/not-a-string": {"version": 1},
            "node_modules/not-an-object": "1.0.0",
            "node_modules/ok": {"version": "1.0.0"},
        }
    )
    assert depdelta.parse_versions("npm", content) == {"ok": {"1.0.0"}}


def test_parse_without_packages() -> None:
    # lockfile version 1 only has a nested `dependencies` tree
    content = json.dumps({"lockfileVersion": 1, "dependencies": {}})
    assert depdelta.parse_lockfile("npm", content) == depdelta.ParseResult(
        dialect="npm", status="parsed", versions={}
    )


@pytest.mark.parametrize(
    "content",
    ["", "{", "not json", '{"packages": []}', '{"packages": {"a": 1}'],
)
def test_parse_malformed(content: str) -> None:
    with pytest.raises(MalformedLockfileError):
        parse_npm(content)
    assert depdelta.parse_lockfile("npm", content) == depdelta.ParseResult(
        dialect="npm", status="malformed", versions={}
    )


def test_locate() -> None:
    content = _lockfile(
        {
            "": {"name": "example", "version": "0.1.0"},
            "node_modules/foo": {"version": "1.0.0"},
            "node_modules/bar/node_modules/foo": {"version": "0.9.0"},
        }
    )
    assert content.splitlines()[7:13] == snapshot(
        [
            '    "node_modules/foo": {',
            '      "version": "1.0.0"',
            "    },",
            '    "node_modules/bar/node_modules/foo": {',
            '      "version": "0.9.0"',
            "    }",
        ]
    )
    assert locate_npm(content, "foo", "1.0.0") == 8
    assert locate_npm(content, "foo", "0.9.0") == 11

    # unknown versions fall back to the first install location of the name
    assert locate_npm(content, "foo", "2.0.0") == 8
    assert locate_npm(content, "example", "0.1.0") == 5
    assert locate_npm(content, "missing", "1.0.0") is None


def test_locate_malformed() -> None:
    content = '{\n  "packages": {\n    "node_modules/foo": {'
    assert locate_npm(content, "foo", "1.0.0") == 3
    assert locate_npm(content, "bar", "1.0.0") is None
