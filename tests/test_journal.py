"""Tests for the four-row journal rule."""

import dataclasses

import pytest

from cmi_extractor.errors import AmountFormatError
from cmi_extractor.journal import (
    JournalRow,
    RowKind,
    TransactionGroup,
    build_journal_rows,
    compose_label,
    normalize_date,
    rows_from_groups,
    third_party_account,
)


@pytest.fixture
def group(sample_groups: list[dict[str, str]]) -> TransactionGroup:
    return TransactionGroup.from_dict(sample_groups[0])


def test_third_party_account_keeps_last_five_digits() -> None:
    assert third_party_account("0012345678") == "CMI45678"
    assert third_party_account("TPE 00-98765432") == "CMI65432"
    assert third_party_account("123") == "CMI123"


def test_third_party_account_requires_digits() -> None:
    with pytest.raises(ValueError):
        third_party_account("TPE-ABC")


def test_build_journal_rows_follows_rule_table(group: TransactionGroup) -> None:
    rows = build_journal_rows(group)

    assert [row.compte_general for row in rows] == [
        "34210000",
        "61740000",
        "34552010",
        "34210000",
    ]
    assert [row.compte_tier for row in rows] == ["CMI45678", "", "", "CMI45678"]
    assert [(row.debit, row.credit) for row in rows] == [
        ("", "1 234,56"),
        ("12,35", ""),
        ("1,24", ""),
        ("1 220,97", ""),
    ]
    assert {row.date for row in rows} == {"05/03/2024"}


def test_labels_combine_terminal_remittance_card_and_kind(
    sample_groups: list[dict[str, str]],
) -> None:
    with_card = TransactionGroup.from_dict(sample_groups[1])

    assert compose_label(with_card, RowKind.TVA_SUR_COMMISSIONS) == (
        "TPE 0098765432 REMISE 000124 CARTE 4242 TVA SUR COMMISSIONS"
    )


def test_labels_skip_missing_parts(group: TransactionGroup) -> None:
    bare = dataclasses.replace(group, remittance_number="", card_info="")

    assert compose_label(bare, RowKind.TOTAL_REMISE) == "TPE 0012345678 TOTAL REMISE"


def test_amounts_are_normalized(group: TransactionGroup) -> None:
    loose = dataclasses.replace(group, total_remise="1.234,5")

    assert build_journal_rows(loose)[0].credit == "1 234,50"


def test_empty_amount_stays_empty(group: TransactionGroup) -> None:
    no_vat = dataclasses.replace(group, tva_commissions="")

    row = build_journal_rows(no_vat)[2]
    assert row.debit == ""
    assert row.credit == ""


def test_malformed_amount_fails_closed(group: TransactionGroup) -> None:
    broken = dataclasses.replace(group, commissions_ht="12.345.6")

    with pytest.raises(AmountFormatError):
        build_journal_rows(broken)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("05/03/2024", "05/03/2024"),
        ("5/3/2024", "05/03/2024"),
        ("05.03.2024", "05/03/2024"),
        ("05-03-24", "05/03/2024"),
        (" 05/03/2024 ", "05/03/2024"),
        ("2024-03-05", "05/03/2024"),
        ("2024-3-5", "05/03/2024"),
        # partial dates are never completed from today's date
        ("12", "12"),
        ("05/03", "05/03"),
        ("31/02/2024", "31/02/2024"),
        ("05 mars 2024", "05 mars 2024"),
        ("", ""),
        ("not a date", "not a date"),
    ],
)
def test_normalize_date(raw: str, expected: str) -> None:
    assert normalize_date(raw) == expected


@pytest.mark.parametrize("count", [0, 1, 5])
def test_rows_from_groups_gives_four_rows_per_group(group: TransactionGroup, count: int) -> None:
    rows = rows_from_groups([group] * count)

    assert len(rows) == 4 * count


def test_rows_keep_document_order(sample_groups: list[dict[str, str]]) -> None:
    groups = [TransactionGroup.from_dict(item) for item in sample_groups]

    rows = rows_from_groups(groups)

    assert [row.compte_tier for row in rows if row.compte_tier] == [
        "CMI45678",
        "CMI45678",
        "CMI65432",
        "CMI65432",
    ]


def test_group_from_dict_rejects_missing_and_non_string_fields(
    sample_groups: list[dict[str, str]],
) -> None:
    missing = dict(sample_groups[0])
    del missing["terminalId"]
    with pytest.raises(KeyError):
        TransactionGroup.from_dict(missing)

    wrong_type = dict(sample_groups[0], totalRemise=1234.56)
    with pytest.raises(TypeError):
        TransactionGroup.from_dict(wrong_type)


def test_journal_row_dict_round_trip(sample_journal_rows: list[dict[str, str]]) -> None:
    row = JournalRow.from_dict(sample_journal_rows[0])

    assert row.compte_general == "34210000"
    assert row.to_dict() == sample_journal_rows[0]


def test_journal_rows_are_immutable(sample_rows: list[JournalRow]) -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        sample_rows[0].debit = "1,00"  # type: ignore[misc]


@pytest.mark.parametrize(("raw", "expected"), [("2024-03-05", "05/03/2024"), ("05/03", "05/03")])
def test_group_date_is_never_swapped_or_completed(
    group: TransactionGroup, raw: str, expected: str
) -> None:
    rows = build_journal_rows(dataclasses.replace(group, date=raw))

    assert {row.date for row in rows} == {expected}
