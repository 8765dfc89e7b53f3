"""pnpm lockfiles (`pnpm-lock.yaml`).

This is not a YAML parser.
We only need the keys of the top-level `packages:` mapping,
which pnpm always writes in a predictable layout:

```yaml
packages:

  /@babel/core@7.23.0:
    resolution: {integrity: sha512-...}

  '@types/node@20.8.0':
    resolution: {integrity: sha512-...}

snapshots:
  ...
```
"""

import enum
import logging
import re
import typing as t

from ._model import ParsedEntry
from ._scan import split_lines, strip_quotes

logger = logging.getLogger(__name__)

_PACKAGES_START = re.compile(r"^packages:\s*$")
_TOP_LEVEL_KEY = re.compile(r"^\S.*:$")
_ENTRY = re.compile(r"^\s{2}(\S.*?):\s*$")


class _State(enum.Enum):
    OUTSIDE_BLOCK = enum.auto()
    IN_BLOCK = enum.auto()


def scan_package_keys(lines: t.Sequence[str]) -> t.Iterator[tuple[int, str]]:
    """Yield `(lineno, key)` for each entry in the `packages:` block.

    >>> lines = ["packages:", "  /a@1.0.0:", "    x: y", "snapshots:", "  b@2.0.0:"]
    >>> list(scan_package_keys(lines))
    [(2, '/a@1.0.0')]
    """
    state = _State.OUTSIDE_BLOCK
    for index, line in enumerate(lines):
        match state:
            case _State.OUTSIDE_BLOCK:
                if _PACKAGES_START.match(line):
                    state = _State.IN_BLOCK
            case _State.IN_BLOCK:
                if _TOP_LEVEL_KEY.match(line):
                    if not _PACKAGES_START.match(line):
                        state = _State.OUTSIDE_BLOCK
                elif m := _ENTRY.match(line):
                    yield index + 1, m[1]
            case other:  # pragma: no cover
                t.assert_never(other)


def split_package_key(key: str) -> tuple[str, str] | None:
    """Split a `packages:` key into name and version.

    >>> split_package_key("/@scope/name@1.2.3")
    ('@scope/name', '1.2.3')
    >>> split_package_key("'/@scope/name@1.2.3'")
    ('@scope/name', '1.2.3')
    >>> split_package_key("react-dom@18.2.0(react@18.2.0)")
    ('react-dom', '18.2.0')
    >>> split_package_key("/@scope/name") is None
    True
    >>> split_package_key("/foo@ ") is None
    True
    """
    if (key.startswith('"') and key.endswith('"')) or (
        key.startswith("'") and key.endswith("'")
    ):
        key = strip_quotes(key)
    key = key.removeprefix("/")
    core, _paren, _peers = key.partition("(")
    at = core.rfind("@")
    if at <= 0:
        return None
    name = core[:at]
    version = core[at + 1 :].strip()
    if not version:
        return None
    return name, version


def parse_pnpm(content: str) -> list[ParsedEntry]:
    """Extract all locked packages from a pnpm lockfile."""
    entries = []
    for lineno, key in scan_package_keys(split_lines(content)):
        if (split := split_package_key(key)) is None:
            logger.debug("skipping unparseable package key %r at line %d", key, lineno)
            continue
        name, version = split
        entries.append(ParsedEntry(name, version, key))
    return entries


def locate_pnpm(content: str, name: str, version: str) -> int | None:
    """Find the line that introduces this package entry."""
    lines = split_lines(content)
    # `/a@1.0.0` must neither match `/@scope/a@1.0.0` nor `/a@1.0.0-rc.1`.
    needle = re.compile(
        rf"""(?:^|[\s'"])/{re.escape(name)}@{re.escape(version)}(?=[\s:('"]|$)"""
    )

    for index, line in enumerate(lines):
        if needle.search(line) and line.rstrip().endswith(":"):
            return index + 1

    for index, line in enumerate(lines):
        if needle.match(line.lstrip()):
            return index + 1

    # Newer lockfiles don't prefix their keys with a slash.
    for lineno, key in scan_package_keys(lines):
        if split_package_key(key) == (name, version):
            return lineno

    return None
