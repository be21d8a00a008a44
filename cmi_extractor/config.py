"""
Configuration constants for the AI CMI Statement Extractor
"""

import os
from typing import Any, Final

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv(".env.cmi_extractor")


# ==============================================================================
# CLAUDE API CONFIGURATION
# ==============================================================================

CLAUDE_MODEL: Final[str] = os.environ.get(
    "CMI_EXTRACTOR_MODEL", "claude-opus-4-5-20251101"
)
CLAUDE_MAX_TOKENS: Final[int] = 8192

# Name of the forced tool used to constrain the response shape
EXTRACTION_TOOL_NAME: Final[str] = "record_statement_data"

# "groups" lets the model read raw figures only, "journal" asks it for the rows
EXTRACTION_MODE: Final[str] = os.environ.get("CMI_EXTRACTION_MODE", "groups")


# ==============================================================================
# INPUT FILES
# ==============================================================================

MEDIA_TYPE_PDF: Final[str] = "application/pdf"
MEDIA_TYPE_PNG: Final[str] = "image/png"
MEDIA_TYPE_JPEG: Final[str] = "image/jpeg"

ALLOWED_MEDIA_TYPES: Final[frozenset[str]] = frozenset(
    {MEDIA_TYPE_PDF, MEDIA_TYPE_PNG, MEDIA_TYPE_JPEG}
)

FILE_DIALOG_TYPES: Final[list[tuple[str, str]]] = [
    ("Statements", "*.pdf *.png *.jpg *.jpeg"),
    ("PDF files", "*.pdf"),
    ("Images", "*.png *.jpg *.jpeg"),
]


# ==============================================================================
# ACCOUNTING CODES
# ==============================================================================

ACCOUNT_CMI_SETTLEMENT: Final[str] = "34210000"
ACCOUNT_COMMISSIONS: Final[str] = "61740000"
ACCOUNT_VAT_ON_COMMISSIONS: Final[str] = "34552010"

THIRD_PARTY_PREFIX: Final[str] = "CMI"
TERMINAL_SUFFIX_LENGTH: Final[int] = 5


# ==============================================================================
# EXPORT LAYOUT
# ==============================================================================

EXPORT_HEADERS: Final[list[str]] = [
    "DATE",
    "COMPTE GENERAL",
    "COMPTE TIER",
    "LIBELLE",
    "DEBIT",
    "CREDIT",
]

# Widths in character units, same order as EXPORT_HEADERS
COLUMN_WIDTHS: Final[list[int]] = [15, 20, 20, 80, 15, 15]

COL_DEBIT: Final[int] = 4
COL_CREDIT: Final[int] = 5

AMOUNT_NUMBER_FORMAT: Final[str] = "#,##0.00"

SHEET_NAME: Final[str] = "CMI Statement"
EXPORT_BASENAME: Final[str] = "cmi_statement_data"
DEFAULT_EXPORT_FORMAT: Final[str] = "xlsx"
EXPORT_FORMATS: Final[tuple[str, ...]] = ("xlsx", "ods")

EXPORT_MEDIA_TYPES: Final[dict[str, str]] = {
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "ods": "application/vnd.oasis.opendocument.spreadsheet",
}

# Approximate width of one character in the default ODS font
ODS_CHAR_WIDTH_CM: Final[float] = 0.2

# Width of the label column in the terminal table
TERMINAL_LABEL_WIDTH: Final[int] = 48


# ==============================================================================
# USER MESSAGES
# ==============================================================================

MSG_EMPTY_RESPONSE: Final[str] = (
    "The AI returned an empty response. "
    "The document might be unreadable or not a CMI statement."
)
MSG_INVALID_FORMAT: Final[str] = (
    "The AI returned an invalid format. "
    "Please try a clearer image or a different file."
)
MSG_SERVICE_ERROR: Final[str] = "An error occurred while processing the statement: {}"
MSG_NO_ROWS: Final[str] = (
    "No data could be extracted from the document. "
    "It might be empty or in an unsupported format."
)
MSG_READ_FAILED: Final[str] = "Failed to read the file. Please try again."
MSG_UNSUPPORTED_TYPE: Final[str] = (
    "Unsupported file type '{}'. Please upload a PDF, PNG or JPEG file."
)


# ==============================================================================
# EXTRACTION PROMPTS
# ==============================================================================

_PROMPT_INTRO: Final[str] = """You are an expert financial data analyst working on CMI \
(Centre Monétique Interbancaire) statements.
Analyze the provided document (image or PDF). Each transaction group belongs to a TPE \
(Terminal de Paiement Electronique) and shows the amounts "TOTAL REMISE", \
"COMMISSIONS HT", "TVA SUR COMMISSIONS" and "SOLDE NET REMISE"."""

JOURNAL_PROMPT: Final[str] = (
    _PROMPT_INTRO
    + """

Convert every transaction group into a specific accounting journal format. For each group \
you must generate four distinct rows corresponding to "TOTAL REMISE", "COMMISSIONS HT", \
"TVA SUR COMMISSIONS", and "SOLDE NET REMISE".

Follow these rules precisely for each transaction group you identify:

1. Identify Key Information: From each transaction group, extract the TPE number, the \
transaction date, the remittance number (if available), card info (if available), and the \
amounts for each of the four components.

2. Construct the 'Libellé': The 'Libellé' for each of the four rows must be a combination \
of the TPE number, remittance number, card info (like last 4 digits), and the specific \
description (e.g., "TOTAL REMISE").

3. Generate Four Rows with Specific Accounting Logic:

| Row kind | COMPTE GENERAL | COMPTE TIER | DEBIT | CREDIT |
|---|---|---|---|---|
| TOTAL REMISE | "34210000" | "CMI" + last 5 digits of the TPE number | "" | amount |
| COMMISSIONS HT | "61740000" | "" | amount | "" |
| TVA SUR COMMISSIONS | "34552010" | "" | amount | "" |
| SOLDE NET REMISE | "34210000" | "CMI" + last 5 digits of the TPE number | amount | "" |

- DATE is the transaction date (DD/MM/YYYY).
- Amounts are strings with a comma decimal separator, empty cells are empty strings "".

4. Final Output: Record all generated rows, in document order, with the \
"""
    + EXTRACTION_TOOL_NAME
    + """ tool. Do not include any explanatory text, markdown, or summaries."""
)

GROUPS_PROMPT: Final[str] = (
    _PROMPT_INTRO
    + """

For every transaction group, in document order, report:
- terminalId: the full TPE number.
- date: the transaction date (DD/MM/YYYY).
- remittanceNumber: the remittance number, or "" if there is none.
- cardInfo: card information such as the last 4 digits, or "" if there is none.
- totalRemise, commissionsHt, tvaCommissions, soldeNetRemise: the four amounts exactly \
as printed, with a comma decimal separator (e.g. "1 234,56").

Do not compute or invent amounts. Record the groups with the """
    + EXTRACTION_TOOL_NAME
    + """ tool. Do not include any explanatory text, markdown, or summaries."""
)


# ==============================================================================
# RESPONSE SCHEMAS
# ==============================================================================

JOURNAL_ROW_FIELDS: Final[list[str]] = [
    "date",
    "compteGeneral",
    "compteTier",
    "libelle",
    "debit",
    "credit",
]

TRANSACTION_GROUP_FIELDS: Final[list[str]] = [
    "terminalId",
    "date",
    "remittanceNumber",
    "cardInfo",
    "totalRemise",
    "commissionsHt",
    "tvaCommissions",
    "soldeNetRemise",
]

JOURNAL_ROW_SCHEMA: Final[dict[str, Any]] = {
    "type": "object",
    "properties": {
        "date": {"type": "string", "description": "Transaction date (DD/MM/YYYY)"},
        "compteGeneral": {
            "type": "string",
            "description": "General account number based on rules",
        },
        "compteTier": {
            "type": "string",
            "description": "Third-party account, if applicable",
        },
        "libelle": {"type": "string", "description": "Combined transaction description"},
        "debit": {"type": "string", "description": "Debit amount"},
        "credit": {"type": "string", "description": "Credit amount"},
    },
    "required": JOURNAL_ROW_FIELDS,
}

TRANSACTION_GROUP_SCHEMA: Final[dict[str, Any]] = {
    "type": "object",
    "properties": {
        "terminalId": {"type": "string", "description": "TPE number"},
        "date": {"type": "string", "description": "Transaction date (DD/MM/YYYY)"},
        "remittanceNumber": {"type": "string", "description": "Remittance number"},
        "cardInfo": {"type": "string", "description": "Card information"},
        "totalRemise": {"type": "string", "description": "TOTAL REMISE amount"},
        "commissionsHt": {"type": "string", "description": "COMMISSIONS HT amount"},
        "tvaCommissions": {
            "type": "string",
            "description": "TVA SUR COMMISSIONS amount",
        },
        "soldeNetRemise": {"type": "string", "description": "SOLDE NET REMISE amount"},
    },
    "required": TRANSACTION_GROUP_FIELDS,
}


# ==============================================================================
# LOGGING
# ==============================================================================

LOG_LEVEL_ENV: Final[str] = "CMI_EXTRACTOR_LOG_LEVEL"
LOG_FORMAT: Final[str] = "%(asctime)s %(name)s %(levelname)s %(message)s"
