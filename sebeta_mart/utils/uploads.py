"""
Image upload storage and URL building
"""
from fastapi import HTTPException, UploadFile, Request
from pathlib import Path
from typing import Optional, Tuple
import uuid
from sebeta_mart.config import settings

ALLOWED_IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.gif', '.webp'}


def validate_image_file(file: UploadFile) -> str:
    """Validate and return the lower-cased file extension"""
    file_ext = Path(file.filename).suffix.lower() if file.filename else ''

    if file_ext not in ALLOWED_IMAGE_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid file type. Allowed: {', '.join(sorted(ALLOWED_IMAGE_EXTENSIONS))}"
        )
    return file_ext


def read_image_upload(file: UploadFile) -> Tuple[str, bytes]:
    """Validate type and size without touching disk; returns (extension, content)"""
    file_ext = validate_image_file(file)

    content = file.file.read()
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"File size exceeds maximum allowed size of {settings.MAX_UPLOAD_SIZE / 1024 / 1024:.0f}MB"
        )
    return file_ext, content


def store_image(file_ext: str, content: bytes, upload_type: str, owner_id: int) -> str:
    """
    Write an already validated image under UPLOAD_DIR/<upload_type>/<owner_id>/ and
    return its path relative to the site root, e.g. ``uploads/products/3/<uuid>.png``.
    """
    upload_dir = Path(settings.UPLOAD_DIR) / upload_type / str(owner_id)
    upload_dir.mkdir(parents=True, exist_ok=True)

    unique_filename = f"{uuid.uuid4().hex}{file_ext}"
    with open(upload_dir / unique_filename, 'wb') as f:
        f.write(content)

    return f"uploads/{upload_type}/{owner_id}/{unique_filename}"


def save_uploaded_file(file: UploadFile, upload_type: str, owner_id: int) -> str:
    file_ext, content = read_image_upload(file)
    return store_image(file_ext, content, upload_type, owner_id)


def has_upload(file: Optional[UploadFile]) -> bool:
    """Browsers send an empty part for untouched file inputs"""
    return file is not None and bool(file.filename)


def build_file_url(request: Optional[Request], path: Optional[str]) -> Optional[str]:
    """Absolute URL for a stored file path (Windows separators normalized)"""
    if not path:
        return None
    path = path.replace("\\", "/").lstrip("/")
    if settings.CDN_BASE_URL:
        base = settings.CDN_BASE_URL.rstrip("/")
    elif request is not None:
        base = str(request.base_url).rstrip("/")
    else:
        return path
    return f"{base}/{path}"
