"""
Exceptions raised while turning a statement into journal rows
"""

from .config import (
    MSG_EMPTY_RESPONSE,
    MSG_INVALID_FORMAT,
    MSG_NO_ROWS,
    MSG_SERVICE_ERROR,
    MSG_UNSUPPORTED_TYPE,
)


class StatementError(Exception):
    """Base class for every error shown to the user.

    The message is always meant for display. Every error ends the current
    attempt; the user has to submit the file again.
    """


class UnsupportedFileTypeError(StatementError):
    """The declared media type is not PDF, PNG or JPEG."""

    def __init__(self, media_type: str | None) -> None:
        self.media_type = media_type
        super().__init__(MSG_UNSUPPORTED_TYPE.format(media_type or "unknown"))


class FileReadError(StatementError):
    """The selected file could not be read."""


class EmptyExtractionError(StatementError):
    """The model answered without any usable content."""

    def __init__(self, message: str = MSG_EMPTY_RESPONSE) -> None:
        super().__init__(message)


class MalformedExtractionError(StatementError):
    """The model answered, but not with the expected JSON shape."""

    def __init__(self, message: str = MSG_INVALID_FORMAT, detail: str | None = None) -> None:
        self.detail = detail
        super().__init__(message)


class ExtractionServiceError(StatementError):
    """The call to the model failed."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(MSG_SERVICE_ERROR.format(reason))


class NoRowsExtractedError(StatementError):
    """The extraction succeeded but produced no journal rows."""

    def __init__(self, message: str = MSG_NO_ROWS) -> None:
        super().__init__(message)


class AmountFormatError(StatementError, ValueError):
    """An amount does not follow the decimal-comma grammar."""

    def __init__(self, value: str, field: str | None = None, row: int | None = None) -> None:
        self.value = value
        self.field = field
        self.row = row

        location: str = ""
        if field is not None:
            location = f" in column {field}"
        if row is not None:
            location += f" of row {row}"
        super().__init__(f"Invalid amount '{value}'{location}.")
