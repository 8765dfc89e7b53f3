"""Yarn lockfiles.

Yarn v1 ("classic") uses a custom block format:

```
"@babel/code-frame@^7.0.0", "@babel/code-frame@^7.10.4":
  version "7.22.13"
  resolved "https://registry.yarnpkg.com/..."
```

Yarn v2+ ("berry") uses a YAML subset with the same overall shape:

```
"@babel/code-frame@npm:^7.0.0, @babel/code-frame@npm:^7.10.4":
  version: 7.22.13
  resolution: "@babel/code-frame@npm:7.22.13"
```
"""

import logging
import re
import typing as t

from ._model import ParsedEntry
from ._scan import Block, BlockGrammar, scan_blocks, split_lines

logger = logging.getLogger(__name__)


def _is_top_level_header(line: str) -> bool:
    # Long headers wrap after a comma, e.g. `"a@^1.0.0",` then `"a@^1.1.0":`.
    return (
        bool(line)
        and not line[0].isspace()
        and not line.startswith("#")
        and line.rstrip().endswith((":", ","))
    )


CLASSIC_GRAMMAR = BlockGrammar(
    is_header=_is_top_level_header,
    continues_header=lambda line: bool(line) and not line.startswith("  "),
    ends_body=lambda line: not line or _is_top_level_header(line),
    version=re.compile(r'^\s{2}version\s+"([^"]+)"'),
)


def _is_berry_header(line: str) -> bool:
    # Comment lines can't start with a quote, so they are never headers.
    return line.startswith(('"', "'")) and line.rstrip().endswith(":")


BERRY_GRAMMAR = BlockGrammar(
    is_header=_is_berry_header,
    continues_header=lambda _line: False,
    ends_body=lambda line: not line.startswith(" "),
    version=re.compile(r"""^\s{2}version:\s*(?:"([^"]+)"|'([^']+)'|([^\s#]+))"""),
)


def classic_name(specifier: str) -> str | None:
    """Extract the package name from a Yarn v1 specifier.

    The version range follows the last `@`.

    >>> classic_name("@babel/core@^7.0.0")
    '@babel/core'
    >>> classic_name("lodash@^4.17.21")
    'lodash'
    >>> classic_name("@scope/no-range") is None
    True
    """
    at = specifier.rfind("@")
    if at <= 0:
        return None
    return specifier[:at]


def berry_name(specifier: str) -> str | None:
    """Extract the package name from a Yarn v2+ specifier.

    Here, the name ends at the first `@` that doesn't start a scope,
    since the range itself may contain further `@` characters.

    >>> berry_name("@types/node@npm:^20.0.0")
    '@types/node'
    >>> berry_name("my-alias@npm:lodash@^4.17.21")
    'my-alias'
    >>> berry_name("'lodash@npm:4.17.21'")
    'lodash'
    >>> berry_name("@broken") is None
    True
    """
    spec = specifier.removeprefix('"').removesuffix('"')
    spec = spec.removeprefix("'").removesuffix("'")
    at = spec.find("@", 1) if spec.startswith("@") else spec.find("@")
    if at <= 0:
        return None
    return spec[:at]


class _Flavor(t.NamedTuple):
    grammar: BlockGrammar
    name_of: t.Callable[[str], str | None]


_CLASSIC = _Flavor(CLASSIC_GRAMMAR, classic_name)
_BERRY = _Flavor(BERRY_GRAMMAR, berry_name)


def _entries(content: str, flavor: _Flavor) -> t.Iterator[ParsedEntry]:
    for block in scan_blocks(split_lines(content), flavor.grammar):
        if not block.version:
            logger.debug(
                "skipping block without version at line %d", block.header_lineno
            )
            continue
        for spec in block.specifiers:
            if name := flavor.name_of(spec):
                yield ParsedEntry(name, block.version, block.header)
            else:
                logger.debug("skipping unparseable specifier %r", spec)


def parse_yarn_classic(content: str) -> list[ParsedEntry]:
    r"""Extract all resolved packages from a Yarn v1 lockfile.

    >>> content = '"a@^1.0.0", "a@^1.1.0":\n  version "1.1.0"\n'
    >>> for entry in parse_yarn_classic(content):
    ...     print(entry.name, entry.version)
    a 1.1.0
    a 1.1.0
    """
    return list(_entries(content, _CLASSIC))


def parse_yarn_berry(content: str) -> list[ParsedEntry]:
    """Extract all resolved packages from a Yarn v2+ lockfile."""
    return list(_entries(content, _BERRY))


def _locate(content: str, name: str, version: str, flavor: _Flavor) -> int | None:
    for block in _matching_blocks(content, name, flavor):
        if block.version == version:
            return block.version_lineno
    return None


def _matching_blocks(content: str, name: str, flavor: _Flavor) -> t.Iterator[Block]:
    for block in scan_blocks(split_lines(content), flavor.grammar):
        if f"{name}@" not in block.header:
            continue
        if any(flavor.name_of(spec) == name for spec in block.specifiers):
            yield block


def locate_yarn_classic(content: str, name: str, version: str) -> int | None:
    """Find the line with the resolved version of this package."""
    return _locate(content, name, version, _CLASSIC)


def locate_yarn_berry(content: str, name: str, version: str) -> int | None:
    """Find the line with the resolved version of this package."""
    return _locate(content, name, version, _BERRY)
