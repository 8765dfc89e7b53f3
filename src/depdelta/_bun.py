"""Bun lockfiles (`bun.lock`).

This is a minimal JSON format that may contain comments and trailing commas.
The `packages` field appears in several shapes:

* a list of `{"name": ..., "version": ...}` records,
* an object keyed by `name@version` with `{"version": ...}` values,
* an object keyed by name with tuple values whose first item is the
  resolved `name@version`, as written by current Bun releases.
"""

import logging
import re
import typing as t
from dataclasses import dataclass

import pydantic

from ._model import MalformedLockfileError, ParsedEntry
from ._scan import split_lines

logger = logging.getLogger(__name__)


@dataclass
class BunLockfilePackageList:
    packages: list[pydantic.JsonValue]


@dataclass
class BunLockfilePackageMap:
    packages: dict[str, pydantic.JsonValue]


AnyBunLockfile = t.Annotated[
    BunLockfilePackageList | BunLockfilePackageMap,
    pydantic.Field(union_mode="left_to_right"),
]

_ANY_BUN_LOCKFILE_SCHEMA = pydantic.TypeAdapter[AnyBunLockfile](AnyBunLockfile)

_LINE_COMMENT = re.compile(r"(^|\s)//.*$", re.MULTILINE)
_TRAILING_COMMA = re.compile(r",(\s*[}\]])")


def strip_jsonc(content: str) -> str:
    r"""Heuristically turn JSONC into JSON.

    Comments are only recognized at the start of a line or after whitespace,
    so that URLs in string values survive.

    >>> print(strip_jsonc('{\n// comment\n  "url": "https://x",\n}'))
    {
    <BLANKLINE>
      "url": "https://x"
    }
    """
    content = _LINE_COMMENT.sub(r"\1", content)
    return _TRAILING_COMMA.sub(r"\1", content)


def load_bun(content: str) -> BunLockfilePackageList | BunLockfilePackageMap:
    try:
        return _ANY_BUN_LOCKFILE_SCHEMA.validate_json(content)
    except pydantic.ValidationError:
        logger.debug("bun.lock is not strict JSON, retrying as JSONC")
    try:
        return _ANY_BUN_LOCKFILE_SCHEMA.validate_json(strip_jsonc(content))
    except pydantic.ValidationError as err:
        raise MalformedLockfileError("not a bun.lock document") from err


def split_specifier(spec: str) -> tuple[str, str] | None:
    """Split `name@version` at the first `@` that doesn't start a scope.

    >>> split_specifier("@types/node@20.8.0")
    ('@types/node', '20.8.0')
    >>> split_specifier("lodash@4.17.21")
    ('lodash', '4.17.21')
    >>> split_specifier("lodash") is None
    True
    """
    at = spec.find("@", 1) if spec.startswith("@") else spec.find("@")
    if at <= 0:
        return None
    return spec[:at], spec[at + 1 :]


def _from_record(entry: pydantic.JsonValue) -> tuple[str, str] | None:
    match entry:
        case {"name": str(name), "version": str(version)} if name and version:
            return name, version
        case _:
            return None


def _from_keyed(key: str, entry: pydantic.JsonValue) -> tuple[str, str] | None:
    match entry:
        case {"name": str(name), "version": str(version)} if name and version:
            return name, version
        case {"version": str(version)} if version:
            if (split := split_specifier(key)) is None:
                return None
            return split[0], version
        case [str(resolved), *_]:
            if (split := split_specifier(resolved)) is None or not split[1]:
                return None
            return split
        case _:
            return None


def parse_bun(content: str) -> list[ParsedEntry]:
    """Extract all locked packages from a Bun lockfile."""
    entries = []
    match load_bun(content):
        case BunLockfilePackageList(packages=records):
            for index, record in enumerate(records):
                if (found := _from_record(record)) is None:
                    logger.debug("skipping package record #%d", index)
                    continue
                entries.append(ParsedEntry(*found, key=f"#{index}"))
        case BunLockfilePackageMap(packages=keyed):
            for key, entry in keyed.items():
                if (found := _from_keyed(key, entry)) is None:
                    logger.debug("skipping package %r", key)
                    continue
                entries.append(ParsedEntry(*found, key=key))
        case other:  # pragma: no cover
            t.assert_never(other)
    return entries


def locate_bun(content: str, name: str, version: str) -> int | None:
    """Find the line where this package version is declared."""
    lines = split_lines(content)
    version_field = re.compile(rf'"version"\s*:\s*"{re.escape(version)}"')

    for index, line in enumerate(lines):
        if '"name"' in line and f'"{name}"' in line:
            for j in range(index, min(len(lines), index + 30)):
                if version_field.search(lines[j]):
                    return j + 1
                if "}" in lines[j]:
                    break

    needle = f'"{name}@{version}"'
    for index, line in enumerate(lines):
        if needle in line:
            return index + 1

    for index, line in enumerate(lines):
        if version_field.search(line):
            return index + 1

    return None
