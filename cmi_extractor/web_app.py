"""Flask web application for extracting CMI statements in the browser.

Provides the upload page, an extraction endpoint returning journal rows as
JSON, and an export endpoint returning the workbook. The server keeps no
session state: the page holds the current rows and the latest request id.
"""

import io
from typing import Any, Final

from flask import Flask, Response, jsonify, render_template, request, send_file
from flask_cors import CORS

from .claude_api import ExtractionMode, StatementExtraction, extract_statement
from .config import DEFAULT_EXPORT_FORMAT, EXPORT_FORMATS, EXPORT_MEDIA_TYPES, MSG_READ_FAILED
from .errors import (
    AmountFormatError,
    EmptyExtractionError,
    ExtractionServiceError,
    FileReadError,
    MalformedExtractionError,
    NoRowsExtractedError,
    StatementError,
    UnsupportedFileTypeError,
)
from .file_utils import EncodedFile, encode_bytes
from .journal import JournalRow
from .logging_setup import configure_logging, get_logger
from .spreadsheet import build_workbook_bytes, export_filename

logger = get_logger(__name__)

app: Flask = Flask(__name__)
CORS(app)

# Type alias for API responses that may include HTTP status codes
ApiResponse = Response | tuple[Response, int]

STATUS_BY_ERROR: Final[dict[type[StatementError], int]] = {
    UnsupportedFileTypeError: 415,
    FileReadError: 400,
    EmptyExtractionError: 422,
    MalformedExtractionError: 422,
    NoRowsExtractedError: 422,
    ExtractionServiceError: 502,
    AmountFormatError: 400,
}


def error_response(error: StatementError, request_id: str | None = None) -> ApiResponse:
    """Build the JSON error answer for a statement error."""
    status: int = STATUS_BY_ERROR.get(type(error), 500)
    return jsonify({"success": False, "request_id": request_id, "error": str(error)}), status


@app.route("/")
def index() -> str:
    """Render the upload page."""
    return render_template("index.html", export_formats=EXPORT_FORMATS)


@app.route("/api/extract", methods=["POST"])
def extract() -> ApiResponse:
    """Extract the journal rows of an uploaded statement."""
    request_id: str | None = request.form.get("request_id")
    upload = request.files.get("file")

    if upload is None or not upload.filename:
        return jsonify({"success": False, "request_id": request_id, "error": "Missing file"}), 400

    mode: str | None = request.form.get("mode") or None
    if mode is not None and mode not in {m.value for m in ExtractionMode}:
        return jsonify({"success": False, "request_id": request_id, "error": "Unknown mode"}), 400

    try:
        try:
            content: bytes = upload.read()
        except OSError as e:
            raise FileReadError(MSG_READ_FAILED) from e

        encoded: EncodedFile = encode_bytes(content, upload.mimetype, upload.filename)
        extraction: StatementExtraction = extract_statement(encoded, mode)

        if not extraction.rows:
            raise NoRowsExtractedError()
    except StatementError as e:
        logger.warning("Extraction of %s failed: %s", upload.filename, e)
        return error_response(e, request_id)

    return jsonify(
        {
            "success": True,
            "request_id": request_id,
            "file_name": upload.filename,
            "rows": [row.to_dict() for row in extraction.rows],
            "warnings": list(extraction.warnings),
        }
    )


@app.route("/api/export", methods=["POST"])
def export() -> ApiResponse:
    """Return the posted rows as a workbook download."""
    data: Any = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"success": False, "error": "Expected a JSON object"}), 400

    fmt: str = data.get("format") or DEFAULT_EXPORT_FORMAT

    if fmt not in EXPORT_FORMATS:
        return jsonify({"success": False, "error": f"Unsupported format '{fmt}'"}), 400

    try:
        rows: list[JournalRow] = [JournalRow.from_dict(item) for item in data.get("rows", [])]
    except (KeyError, TypeError) as e:
        return jsonify({"success": False, "error": f"Invalid rows: {e}"}), 400

    if not rows:
        return jsonify({"success": False, "error": "No rows to export"}), 400

    try:
        content: bytes = build_workbook_bytes(rows, fmt)
    except AmountFormatError as e:
        return error_response(e)

    return send_file(
        io.BytesIO(content),
        mimetype=EXPORT_MEDIA_TYPES[fmt],
        as_attachment=True,
        download_name=export_filename(fmt),
    )


def main() -> None:
    """Start the Flask development server."""
    configure_logging()
    app.run(debug=True, port=5000)


if __name__ == "__main__":
    main()
