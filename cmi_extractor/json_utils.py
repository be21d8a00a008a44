"""
JSON helpers for model answers
"""

import json
import re
from typing import Any

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*\n?(.*?)\n?```", re.DOTALL)


def parse_json_from_markdown(text: str) -> Any:
    """Parse the JSON of a model answer.

    The answer may be bare JSON or wrapped in a fenced code block
    (`` ```json ... ``` ``). Only the first block is read.

    :param text: Raw answer text
    :type text: str
    :return: Decoded value, usually an array of records or ``{key: [...]}``
    :raises json.JSONDecodeError: If the content is not valid JSON
    """
    fenced = _FENCED_BLOCK.search(text)
    candidate: str = fenced.group(1) if fenced else text
    return json.loads(candidate.strip())


def unwrap_records(payload: Any, key: str) -> Any:
    """Return the record list of a payload.

    The tool answer is an object ``{key: [...]}`` while a plain text answer is
    usually the bare array. Anything else is returned unchanged for the caller
    to reject.
    """
    if isinstance(payload, dict) and key in payload:
        return payload[key]
    return payload
