import contextlib
import typing as t


@contextlib.contextmanager
def error_context(note: str) -> t.Iterator[None]:
    """Attach the `note` to any exception raised within this block.

    >>> try:
    ...     with error_context("while doing something"):
    ...         raise ValueError("oops")
    ... except ValueError as err:
    ...     print(err.__notes__)
    ['while doing something']
    """
    try:
        yield
    except Exception as err:
        err.add_note(note)
        raise
