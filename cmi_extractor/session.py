"""
Processing session: Idle -> Loading -> Success / Error
"""

import os
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from .claude_api import ExtractionMode, StatementExtraction, extract_statement
from .errors import NoRowsExtractedError, StatementError, UnsupportedFileTypeError
from .file_utils import EncodedFile, declared_media_type, encode_file, validate_media_type
from .journal import JournalRow
from .logging_setup import get_logger

logger = get_logger(__name__)

Extractor = Callable[[EncodedFile, ExtractionMode | str | None], StatementExtraction]


class SessionState(Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of one successful request."""

    request_id: int
    file_name: str
    rows: tuple[JournalRow, ...]
    warnings: tuple[str, ...] = ()


class StatementSession:
    """Tracks the one statement currently being processed.

    Every ``begin`` hands out a new, increasing request id. A completion or
    failure carrying an older id belongs to an abandoned flow and is ignored,
    so a late answer never overwrites a newer one.
    """

    def __init__(
        self,
        extractor: Extractor | None = None,
        mode: ExtractionMode | str | None = None,
    ) -> None:
        self._extractor: Extractor = extractor or extract_statement
        self._mode = mode
        self._latest_request_id: int = 0
        self.state: SessionState = SessionState.IDLE
        self.file_name: str | None = None
        self.result: ExtractionResult | None = None
        self.error: str | None = None

    @property
    def latest_request_id(self) -> int:
        return self._latest_request_id

    @property
    def rows(self) -> tuple[JournalRow, ...]:
        return self.result.rows if self.result else ()

    def begin(self, file_name: str) -> int:
        """Start a new flow, from any state, and return its request id."""
        self._latest_request_id += 1
        self.state = SessionState.LOADING
        self.file_name = file_name
        self.result = None
        self.error = None
        logger.debug("Request %d started for %s", self._latest_request_id, file_name)
        return self._latest_request_id

    def _is_current(self, request_id: int) -> bool:
        if request_id != self._latest_request_id or self.state is not SessionState.LOADING:
            logger.info("Discarding stale response for request %d", request_id)
            return False
        return True

    def complete(self, request_id: int, extraction: StatementExtraction) -> bool:
        """Record the rows of a finished request.

        An empty extraction moves the session to ``ERROR``.

        :return: False if the response was stale and ignored
        """
        if not self._is_current(request_id):
            return False

        if not extraction.rows:
            return self.fail(request_id, str(NoRowsExtractedError()))

        self.result = ExtractionResult(
            request_id=request_id,
            file_name=self.file_name or "",
            rows=extraction.rows,
            warnings=extraction.warnings,
        )
        self.state = SessionState.SUCCESS
        return True

    def fail(self, request_id: int, message: str) -> bool:
        """Record the failure of a request.

        :return: False if the response was stale and ignored
        """
        if not self._is_current(request_id):
            return False

        self.error = message
        self.state = SessionState.ERROR
        return True

    def reject(self, file_name: str, message: str) -> None:
        """Show an error for a file that was refused before any request."""
        self._latest_request_id += 1
        self.file_name = file_name
        self.result = None
        self.error = message
        self.state = SessionState.ERROR

    def reset(self) -> None:
        """Return to ``IDLE``. Requests still in flight become stale."""
        self._latest_request_id += 1
        self.state = SessionState.IDLE
        self.file_name = None
        self.result = None
        self.error = None

    def process(self, file_path: str) -> SessionState:
        """Read, encode and extract one statement file.

        Errors are not raised, they end up in ``error`` with the ``ERROR`` state.

        :param file_path: Path to the statement
        :type file_path: str
        :return: The resulting state
        :rtype: SessionState
        """
        file_name: str = os.path.basename(file_path)

        try:
            validate_media_type(declared_media_type(file_path))
        except UnsupportedFileTypeError as e:
            # Refused before any request is made
            self.reject(file_name, str(e))
            return self.state

        request_id: int = self.begin(file_name)
        try:
            encoded: EncodedFile = encode_file(file_path)
            extraction: StatementExtraction = self._extractor(encoded, self._mode)
        except StatementError as e:
            self.fail(request_id, str(e))
            return self.state

        self.complete(request_id, extraction)
        return self.state
