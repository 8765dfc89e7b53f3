import collections
import importlib.resources.abc
import logging
import pathlib
import typing as t
from dataclasses import dataclass

from ._bun import parse_bun
from ._dialect import DetectedDialect, Dialect, detect_dialect
from ._model import MalformedLockfileError, ParsedEntry, VersionSet
from ._npm import parse_npm
from ._pnpm import parse_pnpm
from ._utils import error_context
from ._yarn import parse_yarn_berry, parse_yarn_classic

logger = logging.getLogger(__name__)

type PathLike = pathlib.Path | importlib.resources.abc.Traversable

type ParseStatus = t.Literal["parsed", "malformed", "unrecognized"]
"""How parsing went.

* `parsed`: the dialect was known and the document could be read.
  There may still be zero entries.
* `malformed`: the document could not be decoded, e.g. invalid JSON.
* `unrecognized`: the dialect is unknown, so nothing was parsed.
"""


@dataclass(frozen=True, kw_only=True)
class ParseResult:
    dialect: DetectedDialect
    status: ParseStatus
    versions: VersionSet


def versions_from(entries: t.Iterable[ParsedEntry]) -> VersionSet:
    """Collect entries into a mapping of package names to their versions.

    >>> versions_from(
    ...     [
    ...         ParsedEntry("foo", "1.0.0", key=""),
    ...         ParsedEntry("foo", "1.1.0", key=""),
    ...         ParsedEntry("foo", "1.0.0", key=""),
    ...         ParsedEntry("", "2.0.0", key=""),
    ...         ParsedEntry("bar", "", key=""),
    ...     ]
    ... ) == {"foo": {"1.0.0", "1.1.0"}}
    True
    """
    collected = collections.defaultdict[str, set[str]](set)
    for entry in entries:
        if not entry.name or not entry.version:
            continue
        collected[entry.name].add(entry.version)
    return {name: frozenset(collected[name]) for name in sorted(collected)}


def parse_entries(dialect: Dialect, content: str) -> list[ParsedEntry]:
    """Run the parser for the dialect.

    Raises `MalformedLockfileError` if the document cannot be decoded.
    """
    match dialect:
        case "npm":
            return parse_npm(content)
        case "pnpm":
            return parse_pnpm(content)
        case "yarn-classic":
            return parse_yarn_classic(content)
        case "yarn-berry":
            return parse_yarn_berry(content)
        case "bun":
            return parse_bun(content)
        case other:  # pragma: no cover
            t.assert_never(other)


def parse_lockfile(dialect: DetectedDialect, content: str) -> ParseResult:
    """Parse the lockfile contents, never failing because of their shape."""
    if dialect == "unknown":
        return ParseResult(dialect=dialect, status="unrecognized", versions={})
    try:
        entries = parse_entries(dialect, content)
    except MalformedLockfileError as err:
        logger.warning("ignoring malformed %s lockfile: %s", dialect, err)
        return ParseResult(dialect=dialect, status="malformed", versions={})
    return ParseResult(
        dialect=dialect, status="parsed", versions=versions_from(entries)
    )


def parse_versions(dialect: DetectedDialect, content: str) -> VersionSet:
    """Get all locked versions, or an empty mapping if nothing could be parsed."""
    return parse_lockfile(dialect, content).versions


@dataclass(frozen=True, kw_only=True)
class LoadedLockfile:
    """A lockfile read from disk, with the text it was parsed from."""

    path: PathLike
    dialect: DetectedDialect
    content: str
    result: ParseResult


def load_lockfile(
    path: PathLike, *, dialect: DetectedDialect | None = None
) -> LoadedLockfile:
    """Read and parse the lockfile at the `path`, keeping its contents.

    The dialect is detected from the file name unless given explicitly.
    Bytes that aren't valid UTF-8 are replaced instead of failing the read,
    so that a damaged file is reported as malformed.
    """
    with error_context(f"while reading {path}"):
        content = path.read_bytes().decode("utf-8", errors="replace")
    if dialect is None:
        dialect = detect_dialect(path.name, content=content)
    return LoadedLockfile(
        path=path,
        dialect=dialect,
        content=content,
        result=parse_lockfile(dialect, content),
    )


def lockfile_from(
    path: PathLike, *, dialect: DetectedDialect | None = None
) -> ParseResult:
    """Read and parse the lockfile at the `path`.

    The dialect is detected from the file name unless given explicitly.
    """
    return load_lockfile(path, dialect=dialect).result
