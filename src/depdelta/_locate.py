import typing as t

from ._bun import locate_bun
from ._dialect import DetectedDialect
from ._npm import locate_npm
from ._pnpm import locate_pnpm
from ._yarn import locate_yarn_berry, locate_yarn_classic


def locate_line(
    dialect: DetectedDialect, content: str, name: str, version: str
) -> int | None:
    """Find the 1-based line number of the `name@version` entry in the lockfile.

    Returns `None` if the entry cannot be found.
    This is a best-effort search intended for citations,
    so a miss is not an error.

    >>> locate_line("pnpm", "packages:\\n  /a@1.0.0:\\n", "a", "1.0.0")
    2
    >>> locate_line("pnpm", "packages:\\n  /a@1.0.0:\\n", "a", "2.0.0") is None
    True
    """
    match dialect:
        case "npm":
            return locate_npm(content, name, version)
        case "pnpm":
            return locate_pnpm(content, name, version)
        case "yarn-classic":
            return locate_yarn_classic(content, name, version)
        case "yarn-berry":
            return locate_yarn_berry(content, name, version)
        case "bun":
            return locate_bun(content, name, version)
        case "unknown":
            return None
        case other:  # pragma: no cover
            t.assert_never(other)
