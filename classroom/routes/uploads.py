"""Helpers shared by the routers that accept or serve files."""
from __future__ import annotations

from dataclasses import asdict

from fastapi import HTTPException, UploadFile, status
from fastapi.responses import Response

from classroom.attachments import UploadedFile, build_attachments, decode_data_url, format_file_size
from classroom.models import FileAttachment


async def process_uploads(files: list[UploadFile], uploaded_by: str, max_size_mb: int) -> dict:
    """Encode every upload; oversized files are listed under ``rejected``."""
    uploads = [
        UploadedFile(
            name=upload.filename or "file",
            content=await upload.read(),
            mime_type=upload.content_type or "",
        )
        for upload in files
        if upload.filename
    ]
    if not uploads:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="At least one file must be uploaded.",
        )
    batch = build_attachments(uploads, uploaded_by, max_size_mb)
    return {
        "attachments": [
            attachment.to_json_dict() | {"sizeLabel": format_file_size(attachment.size)}
            for attachment in batch.accepted
        ],
        "rejected": [asdict(rejected) for rejected in batch.rejected],
    }


def download_response(attachment: FileAttachment | None) -> Response:
    if attachment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Attachment not found.")
    try:
        content, mime_type = decode_data_url(attachment.data)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Attachment {attachment.name} cannot be decoded.",
        ) from exc
    return Response(
        content=content,
        media_type=attachment.type or mime_type,
        headers={"Content-Disposition": f'attachment; filename="{attachment.name}"'},
    )
