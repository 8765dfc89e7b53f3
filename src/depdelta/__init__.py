from ._checks import (
    NewVersion,
    count_versions,
    exceeds_dependency_threshold,
    find_duplicates,
    new_versions,
)
from ._dialect import (
    SUPPORTED_LOCKFILES,
    DetectedDialect,
    Dialect,
    detect_dialect,
    why_command,
)
from ._diff import Diff, DiffRecord, DiffStat, diff, summarize
from ._locate import locate_line
from ._lockfile import (
    LoadedLockfile,
    ParseResult,
    ParseStatus,
    load_lockfile,
    lockfile_from,
    parse_entries,
    parse_lockfile,
    parse_versions,
    versions_from,
)
from ._model import ParsedEntry, VersionSet, sort_versions

__all__ = [
    "SUPPORTED_LOCKFILES",
    "DetectedDialect",
    "Dialect",
    "Diff",
    "DiffRecord",
    "DiffStat",
    "LoadedLockfile",
    "NewVersion",
    "ParseResult",
    "ParseStatus",
    "ParsedEntry",
    "VersionSet",
    "count_versions",
    "detect_dialect",
    "diff",
    "exceeds_dependency_threshold",
    "find_duplicates",
    "load_lockfile",
    "locate_line",
    "lockfile_from",
    "new_versions",
    "parse_entries",
    "parse_lockfile",
    "parse_versions",
    "sort_versions",
    "summarize",
    "versions_from",
    "why_command",
]
