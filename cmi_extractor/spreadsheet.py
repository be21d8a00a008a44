"""
Spreadsheet export of journal rows (XLSX and ODS)
"""

import io
import os
from decimal import Decimal

from odf import table
from odf.namespaces import TABLENS
from odf.opendocument import OpenDocument, OpenDocumentSpreadsheet
from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from .amounts import parse_amount
from .config import (
    AMOUNT_NUMBER_FORMAT,
    COL_CREDIT,
    COL_DEBIT,
    COLUMN_WIDTHS,
    DEFAULT_EXPORT_FORMAT,
    EXPORT_BASENAME,
    EXPORT_FORMATS,
    EXPORT_HEADERS,
    SHEET_NAME,
)
from .errors import AmountFormatError
from .journal import JournalRow
from .logging_setup import get_logger
from .ods_cells import create_cell
from .ods_styles import ensure_column_style_exists, ensure_header_style_exists

logger = get_logger(__name__)

CellValue = str | float | None


def export_filename(fmt: str = DEFAULT_EXPORT_FORMAT) -> str:
    """Return the fixed export file name for a format."""
    return f"{EXPORT_BASENAME}.{fmt}"


def _amount_cell(value: str, field: str, row_number: int) -> float | None:
    try:
        amount: Decimal | None = parse_amount(value)
    except AmountFormatError as e:
        raise AmountFormatError(value, field, row_number) from e
    return None if amount is None else float(amount)


def rows_to_records(rows: list[JournalRow]) -> list[list[CellValue]]:
    """Convert rows to cell values in export column order.

    Empty amounts become ``None`` so the cell stays empty instead of zero.

    :param rows: Rows to export
    :type rows: list[JournalRow]
    :return: One list of cell values per row
    :rtype: list[list[CellValue]]
    :raises AmountFormatError: If a debit or credit is not a valid amount
    """
    records: list[list[CellValue]] = []
    for row_number, row in enumerate(rows, start=1):
        records.append(
            [
                row.date,
                row.compte_general,
                row.compte_tier,
                row.libelle,
                _amount_cell(row.debit, EXPORT_HEADERS[COL_DEBIT], row_number),
                _amount_cell(row.credit, EXPORT_HEADERS[COL_CREDIT], row_number),
            ]
        )
    return records


def build_xlsx(rows: list[JournalRow]) -> Workbook:
    """Build an openpyxl workbook with one journal sheet."""
    records: list[list[CellValue]] = rows_to_records(rows)

    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = SHEET_NAME

    worksheet.append(EXPORT_HEADERS)
    for cell in worksheet[1]:
        cell.font = Font(bold=True)

    for record in records:
        worksheet.append(record)

    for row in worksheet.iter_rows(min_row=2, min_col=COL_DEBIT + 1, max_col=COL_CREDIT + 1):
        for cell in row:
            if cell.value is not None:
                cell.number_format = AMOUNT_NUMBER_FORMAT

    for col_idx, width in enumerate(COLUMN_WIDTHS, start=1):
        worksheet.column_dimensions[get_column_letter(col_idx)].width = width

    return workbook


def build_ods(rows: list[JournalRow]) -> OpenDocument:
    """Build an odfpy spreadsheet document with one journal sheet."""
    records: list[list[CellValue]] = rows_to_records(rows)

    doc: OpenDocument = OpenDocumentSpreadsheet()
    sheet = table.Table(name=SHEET_NAME)

    for width in COLUMN_WIDTHS:
        column = table.TableColumn()
        column.setAttrNS(TABLENS, "style-name", ensure_column_style_exists(doc, width))
        sheet.addElement(column)

    header_style: str = ensure_header_style_exists(doc)
    header_row = table.TableRow()
    for header in EXPORT_HEADERS:
        header_row.addElement(create_cell(header, doc, header_style))
    sheet.addElement(header_row)

    for record in records:
        data_row = table.TableRow()
        for value in record:
            data_row.addElement(create_cell(value, doc))
        sheet.addElement(data_row)

    doc.spreadsheet.addElement(sheet)
    return doc


def build_workbook_bytes(rows: list[JournalRow], fmt: str = DEFAULT_EXPORT_FORMAT) -> bytes:
    """Render the rows as a spreadsheet file in memory.

    :param rows: Rows to export
    :type rows: list[JournalRow]
    :param fmt: ``"xlsx"`` or ``"ods"``
    :type fmt: str
    :return: File content
    :rtype: bytes
    :raises ValueError: If the format is unknown
    :raises AmountFormatError: If a debit or credit is not a valid amount
    """
    buffer = io.BytesIO()

    match fmt:
        case "xlsx":
            build_xlsx(rows).save(buffer)
        case "ods":
            build_ods(rows).save(buffer)
        case _:
            raise ValueError(f"Unsupported export format '{fmt}', use one of {EXPORT_FORMATS}")

    return buffer.getvalue()


def export_rows(rows: list[JournalRow], output_path: str) -> str:
    """Write the rows to a spreadsheet file, the suffix selects the format.

    A path without suffix gets the default format appended.

    :param rows: Rows to export
    :type rows: list[JournalRow]
    :param output_path: Target file path
    :type output_path: str
    :return: Path of the written file
    :rtype: str
    """
    stem, suffix = os.path.splitext(output_path)
    fmt: str = suffix.lstrip(".").lower()
    if not fmt:
        fmt = DEFAULT_EXPORT_FORMAT
        output_path = f"{stem}.{fmt}"

    content: bytes = build_workbook_bytes(rows, fmt)
    with open(output_path, "wb") as output_file:
        output_file.write(content)

    logger.info("Exported %d row(s) to %s", len(rows), output_path)
    return output_path
