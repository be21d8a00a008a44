"""
Journal rows and the four-row accounting rule for CMI terminal groups
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

import dateutil.parser as dparser

from .amounts import normalize_amount
from .config import (
    ACCOUNT_CMI_SETTLEMENT,
    ACCOUNT_COMMISSIONS,
    ACCOUNT_VAT_ON_COMMISSIONS,
    JOURNAL_ROW_FIELDS,
    TERMINAL_SUFFIX_LENGTH,
    THIRD_PARTY_PREFIX,
    TRANSACTION_GROUP_FIELDS,
)

_DAY_FIRST_DATE = re.compile(r"^\d{1,2}[./-]\d{1,2}[./-](?:\d{2}|\d{4})$")
_ISO_DATE = re.compile(r"^\d{4}-\d{1,2}-\d{1,2}$")


class RowKind(Enum):
    """The four rows generated for every terminal group, in output order."""

    TOTAL_REMISE = ("TOTAL REMISE", ACCOUNT_CMI_SETTLEMENT, True, "credit")
    COMMISSIONS_HT = ("COMMISSIONS HT", ACCOUNT_COMMISSIONS, False, "debit")
    TVA_SUR_COMMISSIONS = ("TVA SUR COMMISSIONS", ACCOUNT_VAT_ON_COMMISSIONS, False, "debit")
    SOLDE_NET_REMISE = ("SOLDE NET REMISE", ACCOUNT_CMI_SETTLEMENT, True, "debit")

    def __init__(
        self, description: str, general_account: str, has_third_party: bool, side: str
    ) -> None:
        self.description = description
        self.general_account = general_account
        self.has_third_party = has_third_party
        self.side = side


@dataclass(frozen=True)
class JournalRow:
    """One accounting journal line."""

    date: str
    compte_general: str
    compte_tier: str
    libelle: str
    debit: str
    credit: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JournalRow":
        """Build a row from its JSON form.

        :raises KeyError: If a field is missing
        :raises TypeError: If a field is not a string
        """
        values: list[str] = []
        for field in JOURNAL_ROW_FIELDS:
            value = data[field]
            if not isinstance(value, str):
                raise TypeError(f"Field '{field}' must be a string, got {type(value).__name__}")
            values.append(value)
        return cls(*values)

    def to_dict(self) -> dict[str, str]:
        return dict(zip(JOURNAL_ROW_FIELDS, self.as_tuple()))

    def as_tuple(self) -> tuple[str, str, str, str, str, str]:
        """Values in export column order."""
        return (
            self.date,
            self.compte_general,
            self.compte_tier,
            self.libelle,
            self.debit,
            self.credit,
        )


@dataclass(frozen=True)
class TransactionGroup:
    """Raw figures of one terminal group as printed on the statement."""

    terminal_id: str
    date: str
    remittance_number: str
    card_info: str
    total_remise: str
    commissions_ht: str
    tva_commissions: str
    solde_net_remise: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TransactionGroup":
        """Build a group from its JSON form.

        :raises KeyError: If a field is missing
        :raises TypeError: If a field is not a string
        """
        values: list[str] = []
        for field in TRANSACTION_GROUP_FIELDS:
            value = data[field]
            if not isinstance(value, str):
                raise TypeError(f"Field '{field}' must be a string, got {type(value).__name__}")
            values.append(value.strip())
        return cls(*values)

    def amount_for(self, kind: RowKind) -> str:
        match kind:
            case RowKind.TOTAL_REMISE:
                return self.total_remise
            case RowKind.COMMISSIONS_HT:
                return self.commissions_ht
            case RowKind.TVA_SUR_COMMISSIONS:
                return self.tva_commissions
            case RowKind.SOLDE_NET_REMISE:
                return self.solde_net_remise


def third_party_account(terminal_id: str) -> str:
    """Return ``CMI`` followed by the last five digits of the terminal id.

    :raises ValueError: If the terminal id has no digits
    """
    digits: str = re.sub(r"\D", "", terminal_id)
    if not digits:
        raise ValueError(f"Terminal id '{terminal_id}' contains no digits")
    return THIRD_PARTY_PREFIX + digits[-TERMINAL_SUFFIX_LENGTH:]


def compose_label(group: TransactionGroup, kind: RowKind) -> str:
    """Combine terminal, remittance, card info and row description."""
    parts: list[str] = [f"TPE {group.terminal_id}"]
    if group.remittance_number:
        parts.append(f"REMISE {group.remittance_number}")
    if group.card_info:
        parts.append(f"CARTE {group.card_info}")
    parts.append(kind.description)
    return " ".join(parts)


def normalize_date(date_str: str) -> str:
    """Return a full day-first or ISO date as DD/MM/YYYY.

    Anything else, partial dates included, is returned as read.
    """
    stripped: str = date_str.strip()

    if _DAY_FIRST_DATE.match(stripped):
        options: dict[str, bool] = {"dayfirst": True}
    elif _ISO_DATE.match(stripped):
        options = {"yearfirst": True, "dayfirst": False}
    else:
        return stripped

    try:
        return dparser.parse(stripped, **options).strftime("%d/%m/%Y")
    except (ValueError, OverflowError):
        return stripped


def build_journal_rows(group: TransactionGroup) -> list[JournalRow]:
    """Apply the accounting rule to one terminal group.

    Every group gives exactly four rows, one per ``RowKind``:

    ====================  ========  ===========  ======  ======
    Row kind              General   Third party  Debit   Credit
    ====================  ========  ===========  ======  ======
    TOTAL REMISE          34210000  CMI+last5                amount
    COMMISSIONS HT        61740000               amount
    TVA SUR COMMISSIONS   34552010               amount
    SOLDE NET REMISE      34210000  CMI+last5    amount
    ====================  ========  ===========  ======  ======

    :param group: Raw group figures
    :type group: TransactionGroup
    :return: The four journal rows
    :rtype: list[JournalRow]
    :raises ValueError: If the terminal id has no digits
    :raises AmountFormatError: If an amount does not follow the grammar
    """
    tier: str = third_party_account(group.terminal_id)
    date: str = normalize_date(group.date)

    rows: list[JournalRow] = []
    for kind in RowKind:
        amount: str = normalize_amount(group.amount_for(kind))
        rows.append(
            JournalRow(
                date=date,
                compte_general=kind.general_account,
                compte_tier=tier if kind.has_third_party else "",
                libelle=compose_label(group, kind),
                debit=amount if kind.side == "debit" else "",
                credit=amount if kind.side == "credit" else "",
            )
        )
    return rows


def rows_from_groups(groups: list[TransactionGroup]) -> list[JournalRow]:
    """Build the journal for a whole statement, keeping document order."""
    rows: list[JournalRow] = []
    for group in groups:
        rows.extend(build_journal_rows(group))
    return rows
