"""npm lockfiles (`package-lock.json`, lockfile versions 2 and 3)."""

import json
import logging
import re
from dataclasses import dataclass, field

import pydantic

from ._model import MalformedLockfileError, ParsedEntry

logger = logging.getLogger(__name__)


@dataclass
class NpmLockfile:
    # The `packages` map is keyed by install location, e.g.
    # `node_modules/@scope/bar/node_modules/baz`. The `""` key is the project itself.
    # <https://docs.npmjs.com/cli/v10/configuring-npm/package-lock-json#packages>
    packages: dict[str, pydantic.JsonValue] = field(default_factory=dict)


_NPM_LOCKFILE_SCHEMA = pydantic.TypeAdapter(NpmLockfile)


def load_npm(content: str) -> NpmLockfile:
    try:
        return _NPM_LOCKFILE_SCHEMA.validate_json(content)
    except pydantic.ValidationError as err:
        raise MalformedLockfileError("not a package-lock.json document") from err


def name_from_install_path(path: str) -> str | None:
    """Derive the package name from its location below `node_modules`.

    >>> name_from_install_path("node_modules/foo")
    'foo'
    >>> name_from_install_path("node_modules/@s/bar/node_modules/@t/baz/")
    '@t/baz'
    >>> name_from_install_path("packages/workspace-a")
    'packages/workspace-a'
    """
    parts = [part for part in path.split("node_modules/") if part]
    if not parts:
        return None
    return parts[-1].removesuffix("/") or None


def _resolve(path: str, entry: pydantic.JsonValue) -> ParsedEntry | None:
    match entry:
        case {"version": str(version)} if version:
            pass
        case _:
            return None
    match entry:
        case {"name": str(name)} if name:
            pass
        case _:
            name = name_from_install_path(path)
    if not name:
        return None
    return ParsedEntry(name, version, path)


def parse_npm(content: str) -> list[ParsedEntry]:
    """Extract all installed packages from an npm lockfile."""
    entries = []
    for path, entry in load_npm(content).packages.items():
        if path == "":
            continue
        if (parsed := _resolve(path, entry)) is None:
            logger.debug("skipping package without name or version: %r", path)
            continue
        entries.append(parsed)
    return entries


def _line_of(content: str, needle: str) -> int | None:
    index = content.find(needle)
    if index < 0:
        return None
    return content.count("\n", 0, index) + 1


def locate_npm(content: str, name: str, version: str) -> int | None:
    """Find the line where this package is declared."""
    try:
        packages = load_npm(content).packages
    except MalformedLockfileError:
        packages = {}

    for path, entry in packages.items():
        if path and _resolve(path, entry) == (name, version, path):
            key = re.compile(rf"{re.escape(json.dumps(path))}\s*:")
            if m := key.search(content):
                return content.count("\n", 0, m.start()) + 1

    for needle in (f'"node_modules/{name}"', f'"name": "{name}"'):
        if (lineno := _line_of(content, needle)) is not None:
            return lineno

    return None
