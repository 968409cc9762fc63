from typing import Dict, Optional

from fastapi import UploadFile

from metadata_api.core.errors import MissingFile


async def read_required_pdf(upload: Optional[UploadFile], message: Optional[str] = None) -> bytes:
    """Read the uploaded PDF body, raising MissingFile when no file was sent."""
    if upload is None or not upload.filename:
        raise MissingFile(message)
    data = await upload.read()
    if not data:
        raise MissingFile(message)
    return data


async def read_optional_upload(upload: Optional[UploadFile]) -> Optional[bytes]:
    if upload is None or not upload.filename:
        return None
    data = await upload.read()
    return data or None


def attachment_headers(filename: str) -> Dict[str, str]:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


def kilobytes(size_bytes: int) -> str:
    """File size in KB formatted with two decimals."""
    return f"{size_bytes / 1024:.2f}"
