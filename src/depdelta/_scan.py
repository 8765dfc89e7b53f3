"""Line-oriented scanning primitives for the text-based lockfile dialects.

The Yarn dialects share a block structure:
a non-indented header listing one or more specifiers,
followed by an indented body that contains the resolved version.
The scanner here is a small explicit state machine over the line sequence,
so that parsing and line location walk the lockfile in exactly the same way.
"""

import enum
import re
import typing as t
from dataclasses import dataclass

_NEWLINE = re.compile(r"\r?\n")


def split_lines(content: str) -> list[str]:
    r"""Split text into lines, accepting both LF and CRLF line endings.

    >>> split_lines("a\r\nb\nc")
    ['a', 'b', 'c']
    """
    return _NEWLINE.split(content)


def strip_quotes(value: str) -> str:
    """Remove one layer of double or single quotes around the value.

    >>> strip_quotes('"@scope/name@^1.0.0"')
    '@scope/name@^1.0.0'
    >>> strip_quotes("'lodash@npm:4.17.21'")
    'lodash@npm:4.17.21'
    >>> strip_quotes("unquoted")
    'unquoted'
    """
    return value.removeprefix('"').removesuffix('"').removeprefix("'").removesuffix("'")


def split_specifiers(header: str) -> list[str]:
    r"""Split a block header into its individual specifiers.

    >>> split_specifiers('"a@^1.0.0", "a@^1.1.0":')
    ['a@^1.0.0', 'a@^1.1.0']
    >>> split_specifiers('"b@^1.0.0",\n  "b@~1.2.0":')
    ['b@^1.0.0', 'b@~1.2.0']
    >>> split_specifiers('"@s/c@npm:^2.0.0, @s/c@npm:^2.1.0":')
    ['@s/c@npm:^2.0.0', '@s/c@npm:^2.1.0']

    Header lines without a separating comma are split as well.

    >>> split_specifiers("d@^1.0.0:\nd@^1.1.0:")
    ['d@^1.0.0', 'd@^1.1.0']
    """
    header = header.strip().removesuffix(":")
    return [
        strip_quotes(spec)
        for part in re.split(r",\s*|\n", header)
        if (spec := part.strip().removesuffix(":"))
    ]


@dataclass(frozen=True, kw_only=True)
class BlockGrammar:
    """Line predicates that describe one block-structured dialect."""

    is_header: t.Callable[[str], bool]
    """Whether the line starts a new block."""
    continues_header: t.Callable[[str], bool]
    """Whether the line extends a header that wraps across multiple lines."""
    ends_body: t.Callable[[str], bool]
    """Whether the line terminates the body of the current block."""
    version: re.Pattern[str]
    """Matches a body line carrying the resolved version in some group."""


@dataclass(frozen=True, kw_only=True)
class Block:
    header: str
    """The raw header text, possibly spanning multiple lines."""
    header_lineno: int
    version: str | None
    version_lineno: int | None

    @property
    def specifiers(self) -> list[str]:
        return split_specifiers(self.header)


class _State(enum.Enum):
    OUTSIDE_BLOCK = enum.auto()
    IN_HEADER = enum.auto()
    IN_BODY = enum.auto()


@dataclass
class _PendingBlock:
    header_lines: list[str]
    header_lineno: int
    version: str | None = None
    version_lineno: int | None = None

    def finish(self) -> Block:
        return Block(
            header="\n".join(self.header_lines),
            header_lineno=self.header_lineno,
            version=self.version,
            version_lineno=self.version_lineno,
        )


def scan_blocks(lines: t.Sequence[str], grammar: BlockGrammar) -> t.Iterator[Block]:
    r"""Find all header/body blocks in the lines.

    Line numbers are 1-based.
    If a body contains multiple version lines, the last one wins.

    >>> grammar = BlockGrammar(
    ...     is_header=lambda line: line.endswith(":") and not line.startswith(" "),
    ...     continues_header=lambda line: False,
    ...     ends_body=lambda line: not line.startswith(" "),
    ...     version=re.compile(r"^  v=(\S+)"),
    ... )
    >>> for block in scan_blocks(["a:", "  v=1", "", "b:", "  x"], grammar):
    ...     print(block.header, block.version, block.version_lineno)
    a: 1 2
    b: None None
    """
    state = _State.OUTSIDE_BLOCK
    pending: _PendingBlock | None = None

    for index, line in enumerate(lines):
        lineno = index + 1

        if state is _State.IN_HEADER:
            if pending is None:  # pragma: no cover
                raise AssertionError("header state without a block")
            if grammar.continues_header(line):
                pending.header_lines.append(line)
                continue
            state = _State.IN_BODY

        if state is _State.IN_BODY:
            if pending is None:  # pragma: no cover
                raise AssertionError("body state without a block")
            if not grammar.ends_body(line):
                if match := grammar.version.match(line):
                    pending.version = next(g for g in match.groups() if g)
                    pending.version_lineno = lineno
                continue
            yield pending.finish()
            pending = None
            state = _State.OUTSIDE_BLOCK

        if grammar.is_header(line):
            pending = _PendingBlock(header_lines=[line], header_lineno=lineno)
            state = _State.IN_HEADER

    if pending is not None:
        yield pending.finish()
