"""
ODS cell operations
"""

# pyright: reportGeneralTypeIssues=false

from decimal import Decimal
from typing import Any

from odf import table, text
from odf.namespaces import OFFICENS, TABLENS
from odf.opendocument import OpenDocument

from .amounts import format_amount
from .ods_styles import ensure_amount_style_exists


def get_cell_value(cell: table.TableCell) -> str:
    """Read a cell back as text: the raw number for amounts, else the first paragraph."""
    match cell.getAttrNS(OFFICENS, "value-type"):
        case "float":
            return cell.getAttrNS(OFFICENS, "value")
        case "string" | None:
            paragraphs = cell.getElementsByType(text.P)
            return str(paragraphs[0]) if paragraphs else ""

    return ""


def _set_amount_value(cell: table.TableCell, value: float, doc: OpenDocument | None) -> None:
    """Set an amount in a cell, formatted with two decimals and grouping.

    :param cell: ODS table cell
    :type cell: table.TableCell
    :param value: Amount to set
    :type value: float
    :param doc: Optional ODS document for the amount style
    :type doc: OpenDocument | None
    """
    p: text.P = text.P(text=format_amount(Decimal(str(value))))
    cell.appendChild(p)

    cell.setAttrNS(OFFICENS, "value-type", "float")
    cell.setAttrNS(OFFICENS, "value", str(value))

    if doc:
        style_name: str = ensure_amount_style_exists(doc)
        cell.setAttrNS(TABLENS, "style-name", style_name)


def _set_string_value(cell: table.TableCell, value: str) -> None:
    """Set a string value in a cell.

    Account codes and dates stay text, ``34210000`` is not a number here.

    :param cell: ODS table cell
    :type cell: table.TableCell
    :param value: String value to set
    :type value: str
    """
    p: text.P = text.P(text=value)
    cell.appendChild(p)

    cell.setAttrNS(OFFICENS, "value-type", "string")


def set_cell_value(
    cell: table.TableCell, value: Any, doc: OpenDocument | None = None
) -> None:
    """Set value in a new ODS cell.

    ``None`` leaves the cell empty, numbers are written as formatted amounts
    and everything else as text.

    :param cell: ODS table cell
    :type cell: table.TableCell
    :param value: Value to set (None, number or string)
    :type value: Any
    :param doc: Optional ODS document (required to format amounts)
    :type doc: OpenDocument | None
    """
    if value is None:
        return

    # bool is an int, keep it out of the amount branch
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        _set_amount_value(cell, float(value), doc)
    else:
        _set_string_value(cell, str(value))


def create_cell(
    value: Any, doc: OpenDocument | None = None, style_name: str | None = None
) -> table.TableCell:
    """Create a cell holding ``value``, with an optional cell style."""
    cell = table.TableCell()
    if style_name:
        cell.setAttrNS(TABLENS, "style-name", style_name)
    set_cell_value(cell, value, doc)
    return cell
