"""Tests for the terminal table."""

import dataclasses

from cmi_extractor.journal import JournalRow
from cmi_extractor.table_view import render_rows_table


def test_table_has_header_and_one_line_per_row(sample_rows: list[JournalRow]) -> None:
    lines = render_rows_table(sample_rows).splitlines()

    assert len(lines) == 2 + len(sample_rows)
    assert lines[0].split(" | ")[:3] == ["DATE      ", "COMPTE GENERAL", "COMPTE TIER"]
    assert "LIBELLE" in lines[0] and lines[0].rstrip().endswith("CREDIT")


def test_rows_keep_input_order(sample_rows: list[JournalRow]) -> None:
    lines = render_rows_table(sample_rows).splitlines()[2:]

    for line, row in zip(lines, sample_rows):
        assert line.startswith(row.date)
        assert row.compte_general in line
        assert row.libelle in line


def test_long_labels_are_truncated(sample_rows: list[JournalRow]) -> None:
    long_row = dataclasses.replace(sample_rows[0], libelle="X" * 100)

    line = render_rows_table([long_row], label_width=20).splitlines()[2]

    assert "X" * 19 + "…" in line
    assert "X" * 20 not in line


def test_empty_table_still_has_header() -> None:
    assert render_rows_table([]).splitlines()[0].startswith("DATE")
