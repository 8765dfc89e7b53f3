import logging
import os
import typing as t
from dataclasses import dataclass

import click
import rich.console
import rich.logging

if t.TYPE_CHECKING:  # pragma: no cover
    import click.testing
    import pydantic

_VERBOSE_OPTION = click.Option(
    ("-v", "--verbose"),
    count=True,
    help="Show log messages on stderr. Repeat for debug output.",
)


def _configure_logging(verbose: int) -> None:
    """Route log records of the library to stderr."""
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbose, logging.DEBUG)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[
            rich.logging.RichHandler(
                console=rich.console.Console(stderr=True),
                show_time=False,
                show_path=verbose > 1,
            )
        ],
        force=True,
    )


class App:
    """A Click command group with shared logging setup and test helpers."""

    def __init__(self, name: str, *, help: str) -> None:
        prolog, _, epilog = help.partition("\n<!-- options -->\n")
        self.click = click.Group(
            name=name,
            help=prolog.strip(),
            epilog=epilog.strip() or None,
            params=[_VERBOSE_OPTION],
            callback=_configure_logging,
        )

    def __call__(self, args: t.Sequence[str] | None = None) -> object:
        return self.click.main(args)

    def command(
        self, name: str | None = None
    ) -> t.Callable[[t.Callable], click.Command]:
        """Register a subcommand."""
        return self.click.command(name)

    def testrunner(self) -> "AppTestRunner":
        return AppTestRunner(self)


type AppTestCliArg = str | os.PathLike[str]


@t.final
@dataclass
class AppTestRunner:
    """Invoke the app in a testing context."""

    app: App

    class Opts(t.TypedDict, total=False):
        expect_exit: int
        """Which exit code to expect, default `0`."""

    def __call__(
        self, *args: AppTestCliArg, **opts: t.Unpack[Opts]
    ) -> "click.testing.Result":
        """Run an app command."""
        import click.testing  # noqa: PLC0415  # import-outside-toplevel

        __tracebackhide__ = True
        expect_exit = opts.get("expect_exit", 0)

        result = click.testing.CliRunner().invoke(
            self.app.click, [os.fspath(arg) for arg in args]
        )
        print(result.output)
        if result.exit_code != expect_exit:  # pragma: no cover
            err = AssertionError("command failed with unexpected status code")
            err.add_note(f"exited with code: {result.exit_code}")
            err.add_note(f"expected exit code: {expect_exit}")
            err.add_note(f"args: {list(args)}")
            raise err
        return result

    def stdout(self, *args: AppTestCliArg, **opts: t.Unpack[Opts]) -> str:
        """Run an app command and return captured STDOUT."""
        __tracebackhide__ = True
        return self(*args, **opts).stdout

    def json(
        self, *args: AppTestCliArg, **opts: t.Unpack[Opts]
    ) -> "pydantic.JsonValue":
        """Run an app command and return captured STDOUT, parsed as JSON."""
        import json  # noqa: PLC0415  # import-outside-toplevel

        __tracebackhide__ = True
        return json.loads(self(*args, **opts).stdout)
