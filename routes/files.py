"""
File upload and download endpoints for trip attachments (ticket scans,
booking confirmations, document files).
Supports images (jpg, png, gif, webp) and PDFs.
"""
from fastapi import APIRouter, UploadFile, File, HTTPException, Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session
import os
import uuid
from pathlib import Path

from config import UPLOAD_DIR
from database import get_db
from models.Profile import Profile
from services.auth import get_current_user
from services.permissions import require_edit
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/files", tags=["Files"])

TRIPS_DIR = Path(UPLOAD_DIR) / "trips"
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MB
ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}
ALLOWED_PDF_TYPES = {"application/pdf"}
ALLOWED_TYPES = ALLOWED_IMAGE_TYPES | ALLOWED_PDF_TYPES
FILE_KINDS = {"images", "pdfs"}

MIME_BY_EXTENSION = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".pdf": "application/pdf",
}


def get_file_type(content_type: str) -> str:
    if content_type in ALLOWED_IMAGE_TYPES:
        return "image"
    if content_type in ALLOWED_PDF_TYPES:
        return "pdf"
    return "unknown"


def resolve_content_type(file: UploadFile) -> str:
    """Validate the upload's type, guessing it from the extension when the client sent none."""
    content_type = file.content_type
    if (not content_type or content_type == "application/octet-stream") and file.filename:
        content_type = MIME_BY_EXTENSION.get(Path(file.filename).suffix.lower())

    if not content_type or content_type not in ALLOWED_TYPES:
        raise HTTPException(
            status_code=400,
            detail=f"File type not allowed. Allowed types: images (jpg, png, gif, webp) and PDFs. Received: {content_type or 'unknown'}"
        )
    return content_type


def _stored_path(trip_id: int, kind: str, filename: str) -> Path:
    if kind not in FILE_KINDS:
        raise HTTPException(status_code=400, detail="Invalid file type")
    # uploads are flat uuid names; anything with a path part is rejected
    if Path(filename).name != filename or filename.startswith("."):
        raise HTTPException(status_code=400, detail="Invalid filename")

    file_path = TRIPS_DIR / str(trip_id) / kind / filename
    if not file_path.exists():
        raise HTTPException(status_code=404, detail="File not found")
    return file_path


@router.post("/upload")
async def upload_file(
    trip_id: int,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    """
    Upload an attachment for a trip. The returned url is what tickets and
    documents store as their file reference.
    """
    await run_in_threadpool(require_edit, db, trip_id, user.id)
    content_type = resolve_content_type(file)

    content = await file.read()
    if len(content) > MAX_FILE_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size: {MAX_FILE_SIZE / (1024 * 1024):.1f} MB"
        )

    file_ext = Path(file.filename or "").suffix.lower() or ".bin"
    unique_filename = f"{uuid.uuid4()}{file_ext}"

    file_type = get_file_type(content_type)
    subdir = TRIPS_DIR / str(trip_id) / f"{file_type}s"
    subdir.mkdir(parents=True, exist_ok=True)

    with open(subdir / unique_filename, "wb") as buffer:
        buffer.write(content)
    logger.info("Stored %s (%d bytes) for trip %s", unique_filename, len(content), trip_id)

    return {
        "url": f"/files/trips/{trip_id}/{file_type}s/{unique_filename}",
        "filename": unique_filename,
        "original_filename": file.filename,
        "content_type": content_type,
        "size": len(content),
        "type": file_type
    }


@router.get("/trips/{trip_id}/{kind}/{filename}")
async def get_trip_file(trip_id: int, kind: str, filename: str):
    """
    Serve a stored attachment. kind is 'images' or 'pdfs'.
    """
    file_path = _stored_path(trip_id, kind, filename)
    content_type = MIME_BY_EXTENSION.get(file_path.suffix.lower(), "application/octet-stream")
    return FileResponse(file_path, media_type=content_type, filename=filename)


@router.delete("/trips/{trip_id}/{kind}/{filename}")
def delete_trip_file(
    trip_id: int,
    kind: str,
    filename: str,
    db: Session = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    """
    Delete a stored attachment of a trip the caller can edit. Only the
    physical file is removed; records pointing at it keep their url.
    """
    require_edit(db, trip_id, user.id)
    file_path = _stored_path(trip_id, kind, filename)
    try:
        os.remove(file_path)
    except OSError as e:
        logger.error("Could not delete %s: %s", file_path, e)
        raise HTTPException(status_code=500, detail="Error deleting file")

    logger.info("User %s deleted %s/%s of trip %s", user.id, kind, filename, trip_id)
    return {"message": "File deleted successfully"}
