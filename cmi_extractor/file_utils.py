"""
File reading and encoding for statement uploads
"""

import base64
import mimetypes
import os
from dataclasses import dataclass

from .config import ALLOWED_MEDIA_TYPES, MEDIA_TYPE_JPEG, MEDIA_TYPE_PDF, MSG_READ_FAILED
from .errors import FileReadError, UnsupportedFileTypeError
from .logging_setup import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class EncodedFile:
    """A statement file ready to be sent to the model."""

    name: str
    media_type: str
    data: str  # base64

    @property
    def is_pdf(self) -> bool:
        return self.media_type == MEDIA_TYPE_PDF


def declared_media_type(file_path: str) -> str | None:
    """Return the media type declared by the file name.

    The content is never inspected, ``statement.pdf`` is a PDF whatever its bytes.

    :param file_path: Path or name of the file
    :type file_path: str
    :return: Media type, or None if the extension is unknown
    :rtype: str | None
    """
    media_type, _encoding = mimetypes.guess_type(file_path, strict=False)
    return media_type


def validate_media_type(media_type: str | None) -> str:
    """Check a declared media type against the allow-list.

    :param media_type: Declared media type (may carry parameters)
    :type media_type: str | None
    :return: The normalized media type
    :rtype: str
    :raises UnsupportedFileTypeError: If the type is not PDF, PNG or JPEG
    """
    if not media_type:
        raise UnsupportedFileTypeError(media_type)

    normalized: str = media_type.split(";", 1)[0].strip().lower()
    # Some browsers still declare JPEG uploads as image/jpg or image/pjpeg
    if normalized in ("image/jpg", "image/pjpeg"):
        normalized = MEDIA_TYPE_JPEG

    if normalized not in ALLOWED_MEDIA_TYPES:
        raise UnsupportedFileTypeError(media_type)

    return normalized


def encode_bytes(content: bytes, media_type: str | None, name: str) -> EncodedFile:
    """Validate the media type and base64-encode already loaded content.

    :raises UnsupportedFileTypeError: If the type is not allowed
    """
    normalized: str = validate_media_type(media_type)
    data: str = base64.standard_b64encode(content).decode("utf-8")
    return EncodedFile(name=name, media_type=normalized, data=data)


def encode_file(file_path: str) -> EncodedFile:
    """Read a statement file and base64-encode its content.

    The media type is checked before the file is opened.

    :param file_path: Path to the PDF, PNG or JPEG file
    :type file_path: str
    :return: Encoded file
    :rtype: EncodedFile
    :raises UnsupportedFileTypeError: If the declared type is not allowed
    :raises FileReadError: If the file cannot be read
    """
    media_type: str = validate_media_type(declared_media_type(file_path))

    try:
        with open(file_path, "rb") as statement_file:
            content: bytes = statement_file.read()
    except OSError as e:
        logger.error("Could not read %s: %s", file_path, e)
        raise FileReadError(MSG_READ_FAILED) from e

    return encode_bytes(content, media_type, os.path.basename(file_path))
