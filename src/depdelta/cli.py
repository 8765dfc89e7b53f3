"""The depdelta command-line interface."""

import enum
import functools
import logging
import pathlib
import shlex
import typing as t
from dataclasses import dataclass

import click
import pydantic
import rich

import depdelta

from ._cli_app import App
from ._dialect import DIALECTS, SUPPORTED_LOCKFILES
from ._markdown import md_from_diff, md_from_duplicates, md_from_lockfile
from ._model import sort_versions

logger = logging.getLogger(__name__)

app = App(
    name="depdelta",
    help="""\
Inspect and compare JavaScript dependency lockfiles (npm, pnpm, Yarn, Bun).

<!-- options -->

Supported lockfiles: package-lock.json, pnpm-lock.yaml, yarn.lock, bun.lock.
""",
)


class OutputFormat(enum.Enum):
    """Different output formats available for structured data."""

    JSON = enum.auto()
    MARKDOWN = enum.auto()


@dataclass
class _with_print_json[R]:  # noqa: N801  # invalid-name
    """Decorator for pretty-printing returned data from a Click command."""

    adapter: pydantic.TypeAdapter[R] | t.Callable[[R], pydantic.JsonValue]
    markdown: t.Callable[[R], str]

    def __call__[**P](
        self, command: t.Callable[P, R]
    ) -> t.Callable[t.Concatenate[OutputFormat, P], None]:
        @functools.wraps(command)
        @click.option(
            "--format",
            type=click.Choice(OutputFormat, case_sensitive=False),
            default=OutputFormat.JSON,
            show_default=True,
            help="Choose the output format, e.g. Markdown.",
        )
        def command_with_json_output(
            format: OutputFormat, *args: P.args, **kwargs: P.kwargs
        ) -> None:
            data = command(*args, **kwargs)
            match format:
                case OutputFormat.JSON:
                    if isinstance(self.adapter, pydantic.TypeAdapter):
                        json_data = self.adapter.dump_python(data, mode="json")
                    else:
                        json_data = self.adapter(data)
                    rich.print_json(data=json_data)
                case OutputFormat.MARKDOWN:
                    click.echo(self.markdown(data))
                case other:  # pragma: no cover
                    t.assert_never(other)

        return command_with_json_output


_ExistingPath = click.Path(
    exists=True, path_type=pathlib.Path, file_okay=True, dir_okay=True
)

_dialect_option = click.option(
    "--dialect",
    type=click.Choice(DIALECTS),
    default=None,
    help="Lockfile format. Detected from the file name by default.",
)


LOCKFILE_SCHEMA = pydantic.TypeAdapter(depdelta.ParseResult)
DIFF_SCHEMA = pydantic.TypeAdapter(depdelta.Diff)


def _find_lockfile(
    ctx: click.Context,
    lockfile: pathlib.Path | None,
    *,
    err_msg: t.Callable[[pathlib.Path], str],
) -> pathlib.Path:
    if lockfile is None:
        project_dir = pathlib.Path()
    elif lockfile.is_dir():
        project_dir = lockfile
    else:
        return lockfile

    candidates = [project_dir / name for name in SUPPORTED_LOCKFILES]
    match [f for f in candidates if f.exists()]:
        case [exactly_one]:
            return exactly_one
        case existing_lockfiles:
            msg = err_msg(project_dir)
            for f in existing_lockfiles:
                msg += f"\nNote: Candidate lockfile: {shlex.quote(str(f))}"
            ctx.fail(msg)


def _load(
    ctx: click.Context,
    path: pathlib.Path | None,
    *,
    argname: str,
    dialect: depdelta.Dialect | None,
) -> depdelta.LoadedLockfile:
    path = _find_lockfile(
        ctx,
        path,
        err_msg=lambda project_dir: f"Could not infer `{argname}` for `{project_dir}`.",
    )
    loaded = depdelta.load_lockfile(path, dialect=dialect)
    if loaded.dialect == "unknown":
        ctx.fail(
            f"Could not detect the lockfile format of `{path}`. Use `--dialect`."
        )
    logger.info(
        "parsed %s as %s: %d packages (%s)",
        path,
        loaded.dialect,
        len(loaded.result.versions),
        loaded.result.status,
    )
    return loaded


@app.command()
@click.argument("lockfile", type=_ExistingPath, required=False)
@_dialect_option
@_with_print_json(LOCKFILE_SCHEMA, md_from_lockfile)
@click.pass_context
def inspect(
    ctx: click.Context,
    lockfile: pathlib.Path | None,
    dialect: depdelta.Dialect | None,
) -> depdelta.ParseResult:
    """Inspect a lockfile.

    The `LOCKFILE` should point to a supported lockfile,
    or to a directory containing exactly one such file.
    If this argument is not specified,
    the one in the current working directory will be used.
    """
    return _load(ctx, lockfile, argname="LOCKFILE", dialect=dialect).result


@dataclass
class _LocatedDiff:
    diff: depdelta.Diff
    lines: dict[str, int]
    """Line of each changed package in the new lockfile, where known."""


@app.command()
@click.argument("old", type=_ExistingPath)
@click.argument("new", type=_ExistingPath)
@click.option(
    "--dependency-threshold",
    type=click.IntRange(min=1),
    default=10,
    show_default=True,
    help="Warn if the new lockfile adds at least this many locked versions.",
)
@_dialect_option
@_with_print_json(
    adapter=lambda located: DIFF_SCHEMA.dump_python(located.diff, mode="json"),
    markdown=lambda located: md_from_diff(located.diff, lines=located.lines),
)
@click.pass_context
def diff(
    ctx: click.Context,
    old: pathlib.Path,
    new: pathlib.Path,
    dependency_threshold: int,
    dialect: depdelta.Dialect | None,
) -> _LocatedDiff:
    """Compare two lockfiles.

    The `OLD` and `NEW` arguments must each point to a supported lockfile,
    or to a directory containing exactly one such file.

    To compare against another Git revision, use a shell redirect
    and name the format explicitly:

    ```bash
    depdelta diff --dialect=pnpm <(git show main:pnpm-lock.yaml) pnpm-lock.yaml
    ```
    """
    old_loaded = _load(ctx, old, argname="OLD", dialect=dialect)
    new_loaded = _load(ctx, new, argname="NEW", dialect=dialect)
    the_diff = depdelta.summarize(
        old_loaded.result.versions,
        new_loaded.result.versions,
        dependency_threshold=dependency_threshold,
    )

    lines: dict[str, int] = {}
    for record in the_diff.packages:
        if not record.added:
            continue
        line = depdelta.locate_line(
            new_loaded.dialect,
            new_loaded.content,
            record.name,
            sort_versions(record.added)[0],
        )
        if line is not None:
            lines[record.name] = line

    return _LocatedDiff(diff=the_diff, lines=lines)


@app.command()
@click.argument("lockfile", type=_ExistingPath)
@click.argument("name")
@click.argument("version")
@_dialect_option
@click.pass_context
def locate(
    ctx: click.Context,
    lockfile: pathlib.Path,
    name: str,
    version: str,
    dialect: depdelta.Dialect | None,
) -> None:
    """Find the line where a package version is declared.

    Prints `{"line": null}` and exits with status 1 if the entry wasn't found.
    """
    loaded = _load(ctx, lockfile, argname="LOCKFILE", dialect=dialect)
    line = depdelta.locate_line(loaded.dialect, loaded.content, name, version)
    rich.print_json(data={"line": line})
    if line is None:
        ctx.exit(1)


class Duplicates(t.TypedDict):
    dialect: depdelta.DetectedDialect
    threshold: int
    packages: dict[str, list[str]]


DUPLICATES_SCHEMA = pydantic.TypeAdapter(Duplicates)


@app.command()
@click.argument("lockfile", type=_ExistingPath, required=False)
@click.option(
    "--threshold",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Report packages that are locked in more versions than this.",
)
@_dialect_option
@_with_print_json(
    DUPLICATES_SCHEMA,
    lambda found: md_from_duplicates(
        found["packages"], threshold=found["threshold"], dialect=found["dialect"]
    ),
)
@click.pass_context
def duplicates(
    ctx: click.Context,
    lockfile: pathlib.Path | None,
    threshold: int,
    dialect: depdelta.Dialect | None,
) -> Duplicates:
    """List packages that are locked in multiple versions.

    The `LOCKFILE` argument works as for `inspect`.
    """
    loaded = _load(ctx, lockfile, argname="LOCKFILE", dialect=dialect)
    return Duplicates(
        dialect=loaded.dialect,
        threshold=threshold,
        packages=depdelta.find_duplicates(loaded.result.versions, threshold=threshold),
    )
