"""Shared fixtures: a Claude client stub and sample CMI statement data.

No test talks to the Anthropic API. ``ClaudeStub`` mimics the
``client.messages.create(...)`` surface, records every call and answers with
a canned message or raises a canned error.
"""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest

from cmi_extractor import claude_api
from cmi_extractor.config import EXTRACTION_TOOL_NAME
from cmi_extractor.journal import JournalRow

SAMPLE_GROUPS: list[dict[str, str]] = [
    {
        "terminalId": "0012345678",
        "date": "05/03/2024",
        "remittanceNumber": "000123",
        "cardInfo": "",
        "totalRemise": "1 234,56",
        "commissionsHt": "12,35",
        "tvaCommissions": "1,24",
        "soldeNetRemise": "1 220,97",
    },
    {
        "terminalId": "0098765432",
        "date": "06/03/2024",
        "remittanceNumber": "000124",
        "cardInfo": "4242",
        "totalRemise": "500,00",
        "commissionsHt": "5,00",
        "tvaCommissions": "0,50",
        "soldeNetRemise": "494,50",
    },
]


def _journal_rows_for(group: dict[str, str], tier: str) -> list[dict[str, str]]:
    label = f"TPE {group['terminalId']} REMISE {group['remittanceNumber']}"
    return [
        {
            "date": group["date"],
            "compteGeneral": "34210000",
            "compteTier": tier,
            "libelle": f"{label} TOTAL REMISE",
            "debit": "",
            "credit": group["totalRemise"],
        },
        {
            "date": group["date"],
            "compteGeneral": "61740000",
            "compteTier": "",
            "libelle": f"{label} COMMISSIONS HT",
            "debit": group["commissionsHt"],
            "credit": "",
        },
        {
            "date": group["date"],
            "compteGeneral": "34552010",
            "compteTier": "",
            "libelle": f"{label} TVA SUR COMMISSIONS",
            "debit": group["tvaCommissions"],
            "credit": "",
        },
        {
            "date": group["date"],
            "compteGeneral": "34210000",
            "compteTier": tier,
            "libelle": f"{label} SOLDE NET REMISE",
            "debit": group["soldeNetRemise"],
            "credit": "",
        },
    ]


SAMPLE_JOURNAL_ROWS: list[dict[str, str]] = _journal_rows_for(
    SAMPLE_GROUPS[0], "CMI45678"
) + _journal_rows_for(SAMPLE_GROUPS[1], "CMI65432")


def text_message(text: str) -> SimpleNamespace:
    """A Claude message holding a single text block."""
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=text)])


def tool_message(payload: Any) -> SimpleNamespace:
    """A Claude message holding the forced extraction tool call."""
    return SimpleNamespace(
        content=[
            SimpleNamespace(
                type="tool_use", id="toolu_01", name=EXTRACTION_TOOL_NAME, input=payload
            )
        ]
    )


class ClaudeStub:
    """Minimal stand-in for ``anthropic.Anthropic``."""

    def __init__(self, response: Any = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[dict[str, Any]] = []
        self.messages = self

    def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def install_claude(monkeypatch: pytest.MonkeyPatch):
    """Return a function installing a ``ClaudeStub`` as the shared client."""

    def _install(response: Any = None, error: Exception | None = None) -> ClaudeStub:
        stub = ClaudeStub(response, error)
        monkeypatch.setattr(claude_api, "_client", stub)
        return stub

    return _install


@pytest.fixture
def sample_groups() -> list[dict[str, str]]:
    return [dict(group) for group in SAMPLE_GROUPS]


@pytest.fixture
def sample_journal_rows() -> list[dict[str, str]]:
    return [dict(row) for row in SAMPLE_JOURNAL_ROWS]


@pytest.fixture
def sample_rows() -> list[JournalRow]:
    return [JournalRow.from_dict(row) for row in SAMPLE_JOURNAL_ROWS]


@pytest.fixture
def statement_pdf(tmp_path: Path) -> Path:
    path = tmp_path / "releve_cmi.pdf"
    path.write_bytes(b"%PDF-1.4\n% fake CMI statement\n")
    return path


@pytest.fixture
def statement_png(tmp_path: Path) -> Path:
    path = tmp_path / "releve_cmi.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\nfake")
    return path
