"""
Claude API integration for CMI statement extraction
"""

import json
import os
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

import anthropic

from .config import (
    CLAUDE_MAX_TOKENS,
    CLAUDE_MODEL,
    EXTRACTION_MODE,
    EXTRACTION_TOOL_NAME,
    GROUPS_PROMPT,
    JOURNAL_PROMPT,
    JOURNAL_ROW_SCHEMA,
    TRANSACTION_GROUP_SCHEMA,
)
from .errors import EmptyExtractionError, ExtractionServiceError, MalformedExtractionError
from .file_utils import EncodedFile
from .journal import JournalRow, TransactionGroup, rows_from_groups
from .json_utils import parse_json_from_markdown, unwrap_records
from .logging_setup import get_logger
from .validators import check_journal_rows

logger = get_logger(__name__)

T = TypeVar("T")

_client: anthropic.Anthropic | None = None


class ExtractionMode(str, Enum):
    """What the model is asked to return."""

    GROUPS = "groups"  # raw terminal groups, journal rule applied locally
    JOURNAL = "journal"  # finished journal rows

    @property
    def records_key(self) -> str:
        return "groups" if self is ExtractionMode.GROUPS else "rows"


@dataclass(frozen=True)
class StatementExtraction:
    """Rows produced by one extraction call."""

    mode: ExtractionMode
    rows: tuple[JournalRow, ...]
    warnings: tuple[str, ...] = ()


def default_mode() -> ExtractionMode:
    """Return the configured mode, falling back to groups for an unknown value."""
    try:
        return ExtractionMode(EXTRACTION_MODE)
    except ValueError:
        logger.warning(
            "Unknown CMI_EXTRACTION_MODE '%s', using '%s'",
            EXTRACTION_MODE,
            ExtractionMode.GROUPS.value,
        )
        return ExtractionMode.GROUPS


def get_client() -> anthropic.Anthropic:
    """Return the shared Anthropic client, creating it on first use.

    :raises anthropic.AnthropicError: If no API key is configured
    """
    global _client
    if _client is None:
        _client = anthropic.Anthropic(
            api_key=os.environ.get("ANTHROPIC_API_KEY"), max_retries=0
        )
    return _client


def build_file_block(encoded: EncodedFile) -> dict[str, Any]:
    """Build the message content block carrying the statement."""
    return {
        "type": "document" if encoded.is_pdf else "image",
        "source": {
            "type": "base64",
            "media_type": encoded.media_type,
            "data": encoded.data,
        },
    }


def build_extraction_tool(mode: ExtractionMode) -> dict[str, Any]:
    """Build the tool whose input schema constrains the answer shape."""
    item_schema: dict[str, Any] = (
        TRANSACTION_GROUP_SCHEMA if mode is ExtractionMode.GROUPS else JOURNAL_ROW_SCHEMA
    )
    key: str = mode.records_key

    return {
        "name": EXTRACTION_TOOL_NAME,
        "description": f"Record the {key} read from the CMI statement, in document order.",
        "input_schema": {
            "type": "object",
            "properties": {key: {"type": "array", "items": item_schema}},
            "required": [key],
        },
    }


def request_extraction(
    encoded: EncodedFile, mode: ExtractionMode, client: anthropic.Anthropic | None = None
) -> Any:
    """Send the statement to Claude, exactly once.

    :param encoded: Encoded statement file
    :type encoded: EncodedFile
    :param mode: What the model should return
    :type mode: ExtractionMode
    :param client: Anthropic client, the shared one if omitted
    :type client: anthropic.Anthropic | None
    :return: The Claude message
    :raises anthropic.AnthropicError: If the call fails
    """
    if client is None:
        client = get_client()

    prompt: str = GROUPS_PROMPT if mode is ExtractionMode.GROUPS else JOURNAL_PROMPT

    return client.messages.create(
        model=CLAUDE_MODEL,
        max_tokens=CLAUDE_MAX_TOKENS,
        tools=[build_extraction_tool(mode)],
        tool_choice={"type": "tool", "name": EXTRACTION_TOOL_NAME},
        messages=[
            {
                "role": "user",
                "content": [
                    build_file_block(encoded),
                    {"type": "text", "text": prompt},
                ],
            }
        ],
    )


def read_payload(message: Any, key: str) -> Any:
    """Return the JSON records carried by a Claude message.

    The forced tool call is preferred. A plain text answer is accepted as well,
    as raw JSON or inside a markdown code block.

    :raises EmptyExtractionError: If the message holds no usable content
    :raises MalformedExtractionError: If the text is not JSON
    """
    for block in message.content:
        if block.type == "tool_use" and block.name == EXTRACTION_TOOL_NAME:
            return unwrap_records(block.input, key)

    text: str = "".join(
        block.text for block in message.content if block.type == "text"
    ).strip()
    if not text:
        raise EmptyExtractionError()

    try:
        payload: Any = parse_json_from_markdown(text)
    except json.JSONDecodeError as e:
        raise MalformedExtractionError(detail=str(e)) from e

    return unwrap_records(payload, key)


def _coerce_records(payload: Any, factory: Callable[[dict[str, Any]], T]) -> list[T]:
    """Turn a JSON array of objects into records, rejecting any other shape."""
    if not isinstance(payload, list):
        raise MalformedExtractionError(
            detail=f"Expected a JSON array, got {type(payload).__name__}"
        )

    records: list[T] = []
    for idx, item in enumerate(payload, start=1):
        if not isinstance(item, dict):
            raise MalformedExtractionError(
                detail=f"Item {idx} is a {type(item).__name__}, not an object"
            )
        try:
            records.append(factory(item))
        except KeyError as e:
            raise MalformedExtractionError(detail=f"Item {idx} is missing {e}") from e
        except TypeError as e:
            raise MalformedExtractionError(detail=f"Item {idx}: {e}") from e

    return records


def parse_extraction(message: Any, mode: ExtractionMode) -> StatementExtraction:
    """Turn a Claude message into journal rows.

    :raises EmptyExtractionError: If the answer is empty
    :raises MalformedExtractionError: If the answer has the wrong shape
    """
    payload: Any = read_payload(message, mode.records_key)

    if mode is ExtractionMode.JOURNAL:
        rows: list[JournalRow] = _coerce_records(payload, JournalRow.from_dict)
        report = check_journal_rows(rows)
        warnings: list[str] = list(report["problems"])  # type: ignore[arg-type]
        for warning in warnings:
            logger.warning("Journal rule deviation: %s", warning)
        return StatementExtraction(mode, tuple(rows), tuple(warnings))

    groups: list[TransactionGroup] = _coerce_records(payload, TransactionGroup.from_dict)
    try:
        rows = rows_from_groups(groups)
    except ValueError as e:
        # AmountFormatError is a ValueError as well
        raise MalformedExtractionError(detail=str(e)) from e

    return StatementExtraction(mode, tuple(rows))


def extract_statement(
    encoded: EncodedFile,
    mode: ExtractionMode | str | None = None,
    client: anthropic.Anthropic | None = None,
) -> StatementExtraction:
    """Extract the journal rows of a CMI statement.

    One call, no retry: every failure ends the attempt.

    :param encoded: Encoded statement file
    :type encoded: EncodedFile
    :param mode: Extraction mode, ``default_mode()`` if omitted
    :type mode: ExtractionMode | str | None
    :param client: Anthropic client, the shared one if omitted
    :type client: anthropic.Anthropic | None
    :return: The extracted rows and any rule deviations
    :rtype: StatementExtraction
    :raises EmptyExtractionError: If the model returned nothing usable
    :raises MalformedExtractionError: If the answer is not the expected JSON
    :raises ExtractionServiceError: If the API call failed for any reason
    :raises ValueError: If ``mode`` is not a known mode
    """
    extraction_mode: ExtractionMode = ExtractionMode(mode) if mode else default_mode()
    logger.info(
        "Extracting %s (%s) in %s mode", encoded.name, encoded.media_type, extraction_mode.value
    )

    try:
        message: Any = request_extraction(encoded, extraction_mode, client)
    except anthropic.AnthropicError as e:
        logger.error("Error extracting data from Claude: %s", e)
        raise ExtractionServiceError(str(e)) from e
    except Exception as e:
        # e.g. the TypeError raised when no API key can be resolved
        logger.error("Unexpected error calling Claude: %r", e)
        raise ExtractionServiceError(str(e)) from e

    try:
        extraction: StatementExtraction = parse_extraction(message, extraction_mode)
    except MalformedExtractionError as e:
        logger.error("Malformed extraction for %s: %s", encoded.name, e.detail)
        raise

    logger.info("Extracted %d row(s) from %s", len(extraction.rows), encoded.name)
    return extraction
