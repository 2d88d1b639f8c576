"""File attachment helpers used at the upload boundary.

Files are size-checked before encoding and stored inline as base64 data URLs.
A batch is processed file by file: an oversized file is reported and skipped
while the rest of the batch is still accepted.
"""
from __future__ import annotations

import base64
import binascii
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

from classroom.config import get_settings
from classroom.errors import AttachmentTooLargeError, RecordValidationError
from classroom.identity import new_record_id
from classroom.models import FileAttachment, utc_now


logger = logging.getLogger("classroom.attachments")

DEFAULT_MIME_TYPE = "application/octet-stream"
SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]


@dataclass
class UploadedFile:
    name: str
    content: bytes
    mime_type: str = ""


@dataclass
class RejectedFile:
    name: str
    reason: str


@dataclass
class AttachmentBatch:
    accepted: list[FileAttachment] = field(default_factory=list)
    rejected: list[RejectedFile] = field(default_factory=list)


def _limit_mb(max_size_mb: Optional[int]) -> int:
    return max_size_mb if max_size_mb is not None else get_settings().MAX_UPLOAD_SIZE_MB


def validate_file_size(size: int, max_size_mb: Optional[int] = None) -> bool:
    return size <= _limit_mb(max_size_mb) * 1024 * 1024


def encode_data_url(content: bytes, mime_type: str = "") -> str:
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{mime_type or DEFAULT_MIME_TYPE};base64,{encoded}"


def decode_data_url(data: str) -> tuple[bytes, str]:
    """Return the raw bytes and mime type of a base64 data URL."""
    header, sep, encoded = data.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValueError("Attachment payload is not a base64 data URL.")
    mime_type = header[len("data:"):-len(";base64")] or DEFAULT_MIME_TYPE
    try:
        return base64.b64decode(encoded, validate=True), mime_type
    except binascii.Error as exc:
        raise ValueError("Attachment payload is not valid base64.") from exc


def build_attachment(
    upload: UploadedFile,
    uploaded_by: str,
    suffix: str = "",
    max_size_mb: Optional[int] = None,
) -> FileAttachment:
    size = len(upload.content)
    max_size_mb = _limit_mb(max_size_mb)
    if not validate_file_size(size, max_size_mb):
        raise AttachmentTooLargeError(upload.name, size, max_size_mb * 1024 * 1024)
    return FileAttachment(
        id=new_record_id(suffix),
        name=upload.name,
        size=size,
        type=upload.mime_type,
        data=encode_data_url(upload.content, upload.mime_type),
        uploaded_at=utc_now(),
        uploaded_by=uploaded_by,
    )


def build_attachments(
    uploads: Iterable[UploadedFile],
    uploaded_by: str,
    max_size_mb: Optional[int] = None,
) -> AttachmentBatch:
    batch = AttachmentBatch()
    for index, upload in enumerate(uploads):
        try:
            attachment = build_attachment(upload, uploaded_by, str(index), max_size_mb)
        except AttachmentTooLargeError as exc:
            logger.warning("Rejected attachment %s: %s", upload.name, exc)
            batch.rejected.append(RejectedFile(name=upload.name, reason=str(exc)))
            continue
        batch.accepted.append(attachment)
    return batch


def verify_attachment(
    attachment: FileAttachment,
    uploaded_by: str,
    max_size_mb: Optional[int] = None,
) -> None:
    """Check an attachment sent back by a client before it is stored.

    The payload must decode, match its declared size, fit under the upload
    ceiling and belong to the user saving it.
    """
    try:
        content, _ = decode_data_url(attachment.data)
    except ValueError as exc:
        raise RecordValidationError(f"File {attachment.name}: {exc}") from exc
    if len(content) != attachment.size:
        raise RecordValidationError(
            f"File {attachment.name} declares {attachment.size} bytes but contains {len(content)}."
        )
    max_size_mb = _limit_mb(max_size_mb)
    if not validate_file_size(len(content), max_size_mb):
        raise RecordValidationError(
            str(AttachmentTooLargeError(attachment.name, len(content), max_size_mb * 1024 * 1024))
        )
    if attachment.uploaded_by != uploaded_by:
        raise RecordValidationError(f"File {attachment.name} was not uploaded by this user.")


def verify_attachments(
    attachments: Iterable[FileAttachment],
    uploaded_by: str,
    max_size_mb: Optional[int] = None,
) -> None:
    for attachment in attachments:
        verify_attachment(attachment, uploaded_by, max_size_mb)


def format_file_size(size: int) -> str:
    if size == 0:
        return "0 Bytes"
    exponent = min(int(math.floor(math.log(size, 1024))), len(SIZE_UNITS) - 1)
    value = round(size / 1024 ** exponent, 2)
    return f"{value:g} {SIZE_UNITS[exponent]}"


def format_date(value: datetime) -> str:
    """Display format used on dashboards, e.g. ``05/03/2024 at 14:07``."""
    local = value.astimezone() if value.tzinfo else value
    return f"{local:%d/%m/%Y} at {local:%H:%M}"
