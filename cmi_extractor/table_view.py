"""
Terminal rendering of journal rows
"""

from .config import EXPORT_HEADERS, TERMINAL_LABEL_WIDTH
from .journal import JournalRow

# Amount columns are right aligned
_RIGHT_ALIGNED: frozenset[int] = frozenset({4, 5})


def _truncate(value: str, width: int) -> str:
    if len(value) <= width:
        return value
    return value[: width - 1] + "…"


def render_rows_table(rows: list[JournalRow], label_width: int = TERMINAL_LABEL_WIDTH) -> str:
    """Render rows as a plain text table, one line per row in input order.

    :param rows: Rows to render
    :type rows: list[JournalRow]
    :param label_width: Maximum width of the LIBELLE column
    :type label_width: int
    :return: The table, header and separator included
    :rtype: str
    """
    cells: list[list[str]] = [
        [
            row.date,
            row.compte_general,
            row.compte_tier,
            _truncate(row.libelle, label_width),
            row.debit,
            row.credit,
        ]
        for row in rows
    ]

    widths: list[int] = [len(header) for header in EXPORT_HEADERS]
    for line in cells:
        for col_idx, value in enumerate(line):
            widths[col_idx] = max(widths[col_idx], len(value))

    def format_line(values: list[str]) -> str:
        padded: list[str] = [
            value.rjust(widths[col_idx]) if col_idx in _RIGHT_ALIGNED else value.ljust(widths[col_idx])
            for col_idx, value in enumerate(values)
        ]
        return " | ".join(padded).rstrip()

    lines: list[str] = [
        format_line(EXPORT_HEADERS),
        "-+-".join("-" * width for width in widths),
    ]
    lines.extend(format_line(line) for line in cells)
    return "\n".join(lines)
