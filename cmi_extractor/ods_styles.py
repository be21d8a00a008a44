"""
ODS style management functions
"""

from typing import Any

from odf import number, style
from odf.namespaces import STYLENS

from .config import ODS_CHAR_WIDTH_CM


def _find_style(styles: Any, style_name: str) -> bool:
    for existing_style in styles.getElementsByType(style.Style):
        if existing_style.getAttribute("name") == style_name:
            return True
    return False


def ensure_amount_style_exists(doc: Any) -> str:
    """
    Ensure an amount cell style exists in the document and return its name.

    This creates a number-style equivalent to ``#,##0.00``: two decimals and
    thousands grouping.

    Args:
        doc: ODS document object

    Returns:
        Name of the cell style to use for amounts
    """
    style_name = "amount-cell-style"
    number_style_name = "N_AMOUNT"

    if _find_style(doc.styles, style_name):
        return style_name

    amount_style = number.NumberStyle(name=number_style_name)
    amount_style.addElement(
        number.Number(decimalplaces=2, minintegerdigits=1, grouping="true")
    )
    doc.styles.addElement(amount_style)

    # Create a cell style that uses this number style
    cell_style = style.Style(name=style_name, family="table-cell")
    cell_style.setAttrNS(STYLENS, "data-style-name", number_style_name)
    doc.styles.addElement(cell_style)

    return style_name


def ensure_header_style_exists(doc: Any) -> str:
    """Ensure the bold header cell style exists and return its name."""
    style_name = "header-cell-style"

    if _find_style(doc.styles, style_name):
        return style_name

    header_style = style.Style(name=style_name, family="table-cell")
    header_style.addElement(style.TextProperties(fontweight="bold"))
    doc.styles.addElement(header_style)

    return style_name


def ensure_column_style_exists(doc: Any, width_chars: int) -> str:
    """
    Ensure a column style with the given width exists and return its name.

    Args:
        doc: ODS document object
        width_chars: Column width in character units

    Returns:
        Name of the column style
    """
    style_name = f"col-width-{width_chars}"

    if _find_style(doc.automaticstyles, style_name):
        return style_name

    column_style = style.Style(name=style_name, family="table-column")
    column_style.addElement(
        style.TableColumnProperties(columnwidth=f"{width_chars * ODS_CHAR_WIDTH_CM:.2f}cm")
    )
    doc.automaticstyles.addElement(column_style)

    return style_name
