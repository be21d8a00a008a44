"""
Validation functions for extracted journal rows
"""

import re

from .amounts import parse_amount
from .errors import AmountFormatError
from .journal import JournalRow, RowKind

GROUP_SIZE: int = len(RowKind)

THIRD_PARTY_PATTERN: re.Pattern[str] = re.compile(r"^CMI\d{1,5}$")


def _check_row(row: JournalRow, kind: RowKind, position: int) -> list[str]:
    """Compare one row with its rule-table entry.

    :param row: Extracted row
    :type row: JournalRow
    :param kind: Kind expected at this position of the group
    :type kind: RowKind
    :param position: 1-based row number, used in messages
    :type position: int
    :return: Problems found, empty if the row conforms
    :rtype: list[str]
    """
    problems: list[str] = []
    prefix: str = f"Row {position} ({kind.description})"

    if row.compte_general != kind.general_account:
        problems.append(
            f"{prefix}: general account {row.compte_general!r}, "
            f"expected {kind.general_account!r}"
        )

    if kind.has_third_party:
        if not THIRD_PARTY_PATTERN.match(row.compte_tier):
            problems.append(
                f"{prefix}: third-party account {row.compte_tier!r} is not CMI + terminal digits"
            )
    elif row.compte_tier:
        problems.append(f"{prefix}: third-party account should be empty")

    filled, empty = ("debit", "credit") if kind.side == "debit" else ("credit", "debit")
    if not getattr(row, filled).strip():
        problems.append(f"{prefix}: {filled} amount is missing")
    if getattr(row, empty).strip():
        problems.append(f"{prefix}: {empty} should be empty")

    for field in ("debit", "credit"):
        try:
            parse_amount(getattr(row, field))
        except AmountFormatError as e:
            problems.append(f"{prefix}: {e}")

    return problems


def check_journal_rows(rows: list[JournalRow]) -> dict[str, bool | int | str | list[str]]:
    """Check rows produced by the model against the four-row rule table.

    Rows are read in groups of four, in ``RowKind`` order. Both CMI rows of a
    group must carry the same third-party account.

    :param rows: Extracted rows in document order
    :type rows: list[JournalRow]
    :return: Dictionary with 'valid' (bool), 'groups' (int), 'problems'
        (list[str]) and 'message' (str)
    :rtype: dict[str, bool | int | str | list[str]]
    """
    problems: list[str] = []

    if len(rows) % GROUP_SIZE:
        problems.append(
            f"{len(rows)} rows cannot be split into groups of {GROUP_SIZE} "
            f"({len(rows) % GROUP_SIZE} left over)"
        )

    for start in range(0, len(rows) - len(rows) % GROUP_SIZE, GROUP_SIZE):
        group: list[JournalRow] = rows[start : start + GROUP_SIZE]

        for offset, (row, kind) in enumerate(zip(group, RowKind)):
            problems.extend(_check_row(row, kind, start + offset + 1))

        tiers: set[str] = {
            row.compte_tier for row, kind in zip(group, RowKind) if kind.has_third_party
        }
        if len(tiers) > 1:
            problems.append(
                f"Rows {start + 1}-{start + GROUP_SIZE}: third-party accounts differ "
                f"({', '.join(sorted(tiers))})"
            )

    is_valid: bool = not problems
    groups: int = len(rows) // GROUP_SIZE

    return {
        "valid": is_valid,
        "groups": groups,
        "problems": problems,
        "message": (
            f"✓ {groups} terminal group(s) follow the journal rules"
            if is_valid
            else f"⚠ {len(problems)} deviation(s) from the journal rules"
        ),
    }
