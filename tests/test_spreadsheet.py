"""Tests for XLSX and ODS export."""

import dataclasses
import io
import zipfile
from pathlib import Path

import pytest
from odf import table
from odf.namespaces import TABLENS
from odf.opendocument import load
from openpyxl import load_workbook

from cmi_extractor.config import AMOUNT_NUMBER_FORMAT, EXPORT_HEADERS, SHEET_NAME
from cmi_extractor.errors import AmountFormatError
from cmi_extractor.journal import JournalRow
from cmi_extractor.ods_cells import get_cell_value
from cmi_extractor.spreadsheet import (
    build_workbook_bytes,
    export_filename,
    export_rows,
    rows_to_records,
)


def _ods_rows(content: bytes) -> list[list[table.TableCell]]:
    doc = load(io.BytesIO(content))
    sheet = doc.spreadsheet.getElementsByType(table.Table)[0]
    return [row.getElementsByType(table.TableCell) for row in sheet.getElementsByType(table.TableRow)]


class TestRecords:
    def test_amounts_become_numbers_and_empty_stays_empty(self, sample_rows: list[JournalRow]) -> None:
        records = rows_to_records(sample_rows)

        assert records[0] == [
            "05/03/2024",
            "34210000",
            "CMI45678",
            "TPE 0012345678 REMISE 000123 TOTAL REMISE",
            None,
            1234.56,
        ]
        assert records[3][4] == 1220.97
        assert records[3][5] is None

    def test_malformed_amount_names_row_and_column(self, sample_rows: list[JournalRow]) -> None:
        rows = list(sample_rows)
        rows[2] = dataclasses.replace(rows[2], debit="1,234.56")

        with pytest.raises(AmountFormatError) as exc_info:
            rows_to_records(rows)

        assert str(exc_info.value) == "Invalid amount '1,234.56' in column DEBIT of row 3."


class TestXlsxExport:
    def test_sheet_layout(self, sample_rows: list[JournalRow]) -> None:
        workbook = load_workbook(io.BytesIO(build_workbook_bytes(sample_rows, "xlsx")))

        assert workbook.sheetnames == [SHEET_NAME]
        worksheet = workbook[SHEET_NAME]
        assert [cell.value for cell in worksheet[1]] == EXPORT_HEADERS
        assert worksheet.max_row == 1 + len(sample_rows)
        assert [worksheet.column_dimensions[letter].width for letter in "ABCDEF"] == [
            15,
            20,
            20,
            80,
            15,
            15,
        ]

    def test_amount_cells(self, sample_rows: list[JournalRow]) -> None:
        worksheet = load_workbook(io.BytesIO(build_workbook_bytes(sample_rows, "xlsx")))[SHEET_NAME]

        # TOTAL REMISE of the first terminal: credit only
        assert worksheet["E2"].value is None
        assert worksheet["F2"].value == pytest.approx(1234.56)
        assert worksheet["F2"].number_format == AMOUNT_NUMBER_FORMAT
        # SOLDE NET REMISE: debit only
        assert worksheet["E5"].value == pytest.approx(1220.97)
        assert worksheet["E5"].number_format == AMOUNT_NUMBER_FORMAT
        assert worksheet["F5"].value is None

    def test_account_codes_follow_rule_table(self, sample_rows: list[JournalRow]) -> None:
        worksheet = load_workbook(io.BytesIO(build_workbook_bytes(sample_rows, "xlsx")))[SHEET_NAME]

        general = [worksheet.cell(row=idx, column=2).value for idx in range(2, 10)]
        tier = [worksheet.cell(row=idx, column=3).value or "" for idx in range(2, 10)]
        assert general == ["34210000", "61740000", "34552010", "34210000"] * 2
        assert tier == ["CMI45678", "", "", "CMI45678", "CMI65432", "", "", "CMI65432"]

    def test_reexport_is_identical_apart_from_timestamps(self, sample_rows: list[JournalRow]) -> None:
        def snapshot(content: bytes) -> tuple:
            worksheet = load_workbook(io.BytesIO(content))[SHEET_NAME]
            cells = [(cell.value, cell.number_format) for row in worksheet.iter_rows() for cell in row]
            widths = [worksheet.column_dimensions[letter].width for letter in "ABCDEF"]
            return cells, widths

        first = build_workbook_bytes(sample_rows, "xlsx")
        second = build_workbook_bytes(sample_rows, "xlsx")

        assert snapshot(first) == snapshot(second)
        with zipfile.ZipFile(io.BytesIO(first)) as a, zipfile.ZipFile(io.BytesIO(second)) as b:
            assert a.read("xl/worksheets/sheet1.xml") == b.read("xl/worksheets/sheet1.xml")


class TestOdsExport:
    def test_sheet_layout(self, sample_rows: list[JournalRow]) -> None:
        content = build_workbook_bytes(sample_rows, "ods")
        doc = load(io.BytesIO(content))
        sheets = doc.spreadsheet.getElementsByType(table.Table)

        assert [sheet.getAttrNS(TABLENS, "name") for sheet in sheets] == [SHEET_NAME]
        columns = sheets[0].getElementsByType(table.TableColumn)
        assert [column.getAttrNS(TABLENS, "style-name") for column in columns] == [
            "col-width-15",
            "col-width-20",
            "col-width-20",
            "col-width-80",
            "col-width-15",
            "col-width-15",
        ]

        rows = _ods_rows(content)
        assert len(rows) == 1 + len(sample_rows)
        assert [get_cell_value(cell) for cell in rows[0]] == EXPORT_HEADERS

    def test_amount_cells(self, sample_rows: list[JournalRow]) -> None:
        rows = _ods_rows(build_workbook_bytes(sample_rows, "ods"))

        total_remise = rows[1]
        assert get_cell_value(total_remise[4]) == ""
        assert float(get_cell_value(total_remise[5])) == pytest.approx(1234.56)
        assert total_remise[5].getAttrNS(TABLENS, "style-name") == "amount-cell-style"
        # Account codes stay text
        assert get_cell_value(total_remise[1]) == "34210000"

    def test_reexport_is_identical_apart_from_timestamps(self, sample_rows: list[JournalRow]) -> None:
        first = build_workbook_bytes(sample_rows, "ods")
        second = build_workbook_bytes(sample_rows, "ods")

        with zipfile.ZipFile(io.BytesIO(first)) as a, zipfile.ZipFile(io.BytesIO(second)) as b:
            for name in ("content.xml", "styles.xml"):
                assert a.read(name) == b.read(name)


def test_export_rows_picks_format_from_suffix(tmp_path: Path, sample_rows: list[JournalRow]) -> None:
    written = export_rows(sample_rows, str(tmp_path / "journal.ods"))

    assert written.endswith("journal.ods")
    assert zipfile.ZipFile(written).read("mimetype") == b"application/vnd.oasis.opendocument.spreadsheet"


def test_export_rows_defaults_to_xlsx(tmp_path: Path, sample_rows: list[JournalRow]) -> None:
    written = export_rows(sample_rows, str(tmp_path / "journal"))

    assert written == str(tmp_path / "journal.xlsx")
    assert load_workbook(written)[SHEET_NAME].max_row == 9


def test_unknown_format_is_rejected(sample_rows: list[JournalRow]) -> None:
    with pytest.raises(ValueError):
        build_workbook_bytes(sample_rows, "csv")


def test_fixed_file_names() -> None:
    assert export_filename() == "cmi_statement_data.xlsx"
    assert export_filename("ods") == "cmi_statement_data.ods"
