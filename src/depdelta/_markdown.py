import typing as t

from ._dialect import DetectedDialect, why_command
from ._diff import Diff, DiffRecord
from ._lockfile import ParseResult
from ._model import sort_versions


def md_from_lockfile(result: ParseResult) -> str:
    """Summarize the locked versions as a Markdown table."""
    return _table(
        ("package", "versions"),
        [
            (package, ", ".join(sort_versions(versions)))
            for package, versions in sorted(result.versions.items())
        ],
    )


def md_from_diff(diff: Diff, *, lines: t.Mapping[str, int] | None = None) -> str:
    """Summarize the Diff as a Markdown table.

    If `lines` are given, they are shown as the location of each package
    in the new lockfile.
    """
    lines = lines or {}
    stat = diff.stat
    summary = f"{stat.total} changed packages"
    if summary_details := ", ".join(_diff_summary_details(diff)):
        summary += f" ({summary_details})"

    if stat.total <= 0:
        return summary

    counts = f"Locked versions: {stat.old_versions} → {stat.new_versions}"
    if delta := stat.new_versions - stat.old_versions:
        counts += f" ({delta:+d})"
    paragraphs = [summary, counts]
    if stat.exceeds_dependency_threshold:
        paragraphs.append(
            f"⚠️ This adds {delta} locked versions,"
            f" which reaches the threshold of {stat.dependency_threshold}."
        )

    table = _table(
        ("package", "removed", "added", "notes", "line"),
        [
            (
                record.name,
                _md_versions(record.removed),
                _md_versions(record.added),
                _diff_notes(record),
                str(lines[record.name]) if record.name in lines else "",
            )
            for record in diff.packages
        ],
        collapsible_cols=("notes", "line"),
    )
    paragraphs.append(table)
    return "\n\n".join(paragraphs)


def _md_versions(versions: t.Iterable[str]) -> str:
    return ", ".join(sort_versions(versions)) or "-"


def _diff_notes(record: DiffRecord) -> str:
    if record.is_new_package:
        return "new"
    if record.is_removed_package:
        return "removed"
    return ""


def _diff_summary_details(diff: Diff) -> t.Iterator[str]:
    stat = diff.stat
    if count := stat.added:
        yield f"{count} added"
    if count := stat.updated:
        yield f"{count} updated"
    if count := stat.removed:
        yield f"{count} removed"


def md_from_duplicates(
    duplicates: t.Mapping[str, t.Sequence[str]],
    *,
    threshold: int,
    dialect: DetectedDialect,
) -> str:
    """Summarize packages with too many locked versions."""
    summary = f"{len(duplicates)} packages with more than {threshold} versions"
    if not duplicates:
        return summary
    table = _table(
        ("package", "count", "versions"),
        [
            (package, str(len(versions)), ", ".join(versions))
            for package, versions in duplicates.items()
        ],
    )
    if dialect == "unknown":
        return "\n\n".join([summary, table])
    hint = (
        "To find out what depends on a specific package, run: "
        f"`{why_command(dialect, '<package>')}`"
    )
    return "\n\n".join([summary, table, hint])


def _table[Row: tuple[str, ...]](
    header: Row,
    values: t.Sequence[Row],
    *,
    collapsible_cols: t.Container[str] = (),
) -> str:
    """Render a Markdown table with aligned columns.

    >>> print(_table(("a", "bbb"), [("111", "2"), ("3", "4")]))
    | a   | bbb |
    |-----|-----|
    | 111 | 2   |
    | 3   | 4   |

    Collapsible columns are dropped when they contain no data.

    >>> print(_table(("a", "b"), [("a1", ""), ("a2", "")], collapsible_cols=("b",)))
    | a  |
    |----|
    | a1 |
    | a2 |
    """
    keep = [
        index
        for index, name in enumerate(header)
        if name not in collapsible_cols or any(row[index] for row in values)
    ]
    rows = [tuple(row[i] for i in keep) for row in (header, *values)]
    widths = [max(len(row[col]) for row in rows) for col in range(len(keep))]

    def render(row: tuple[str, ...]) -> str:
        cells = (cell.ljust(width) for cell, width in zip(row, widths, strict=True))
        return "| " + " | ".join(cells) + " |"

    lines = [render(rows[0])]
    lines.append("|-" + "-|-".join("-" * width for width in widths) + "-|")
    lines.extend(render(row) for row in rows[1:])
    return "\n".join(lines)
