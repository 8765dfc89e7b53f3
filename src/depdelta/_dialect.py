import pathlib
import typing as t

type Dialect = t.Literal["npm", "pnpm", "yarn-classic", "yarn-berry", "bun"]
"""Known lockfile grammars.

* `npm`: `package-lock.json`, a JSON document with a flat `packages` map.
* `pnpm`: `pnpm-lock.yaml`, YAML-like text with a `packages:` block.
* `yarn-classic`: `yarn.lock` as written by Yarn v1.
* `yarn-berry`: `yarn.lock` as written by Yarn v2 and later.
* `bun`: `bun.lock`, a minimal JSON (or JSONC) document.
"""

type DetectedDialect = Dialect | t.Literal["unknown"]

DIALECTS: tuple[Dialect, ...] = t.get_args(Dialect.__value__)

SUPPORTED_LOCKFILES = (
    "pnpm-lock.yaml",
    "package-lock.json",
    "yarn.lock",
    "bun.lock",
)
"""Lockfile names, in the order in which they are looked up."""

_YARN_CLASSIC_MARKER = "yarn lockfile v1"


def detect_dialect(filename: str, *, content: str | None = None) -> DetectedDialect:
    """Select the lockfile dialect based on the file name.

    Both Yarn generations write a `yarn.lock`,
    so the `content` is consulted for those files if available.

    >>> detect_dialect("package-lock.json")
    'npm'
    >>> detect_dialect("some/dir/pnpm-lock.yaml")
    'pnpm'
    >>> detect_dialect("yarn.lock")
    'yarn-classic'
    >>> detect_dialect("yarn.lock", content="__metadata:\\n  version: 8\\n")
    'yarn-berry'
    >>> detect_dialect("Cargo.lock")
    'unknown'
    """
    name = pathlib.PurePath(filename).name
    if name.endswith("package-lock.json"):
        return "npm"
    if name.endswith("pnpm-lock.yaml"):
        return "pnpm"
    if name.endswith("yarn.lock"):
        if content is None or _YARN_CLASSIC_MARKER in content:
            return "yarn-classic"
        return "yarn-berry"
    if name.endswith("bun.lock"):
        return "bun"
    return "unknown"


def why_command(dialect: Dialect, package: str) -> str:
    """Suggest a command that explains why a package is installed.

    >>> why_command("yarn-berry", "@babel/core")
    'yarn why @babel/core'
    """
    match dialect:
        case "npm":
            return f"npm ls {package}"
        case "pnpm":
            return f"pnpm why {package}"
        case "yarn-classic" | "yarn-berry":
            return f"yarn why {package}"
        case "bun":
            return f"bun pm ls {package}"
        case other:  # pragma: no cover
            t.assert_never(other)
