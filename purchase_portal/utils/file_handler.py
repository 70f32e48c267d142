"""
File Handler Utilities
Attachment upload validation and disk storage
"""

import os
import shutil
from pathlib import Path
from typing import Optional, Tuple
from fastapi import UploadFile
import mimetypes
from datetime import datetime
import uuid

from purchase_portal.config.settings import settings
from purchase_portal.utils.logger import setup_logger

logger = setup_logger()


def get_file_mime_type(file: UploadFile) -> str:
    """
    Get MIME type of an uploaded file

    Prefers the declared content type, falling back to the file name.

    Args:
        file: Uploaded file

    Returns:
        str: MIME type
    """
    if file.content_type and file.content_type != "application/octet-stream":
        return file.content_type

    mime_type, _ = mimetypes.guess_type(file.filename or "")
    return mime_type or "application/octet-stream"


def get_file_size(file: UploadFile) -> int:
    file.file.seek(0, 2)  # Seek to end
    size = file.file.tell()
    file.file.seek(0)  # Seek back to start
    return size


def validate_file(file: UploadFile) -> Tuple[bool, Optional[str]]:
    """
    Validate uploaded file

    Args:
        file: Uploaded file

    Returns:
        Tuple[bool, Optional[str]]: (is_valid, error_message)
    """
    mime_type = get_file_mime_type(file)
    if mime_type not in settings.allowed_mime_types_list:
        return False, "Invalid file type. Only PDF, Word, Excel, and images are allowed."

    file_size = get_file_size(file)

    if file_size > settings.MAX_FILE_SIZE:
        max_size_mb = settings.MAX_FILE_SIZE / (1024 * 1024)
        return False, f"File '{file.filename}' exceeds maximum allowed size of {max_size_mb:g}MB"

    if file_size == 0:
        return False, f"File '{file.filename}' is empty"

    return True, None


def save_upload_file(file: UploadFile, purchase_request_id: int) -> Tuple[str, str, int]:
    """
    Save uploaded file to disk under a randomized name

    Args:
        file: Uploaded file (already validated)
        purchase_request_id: Owning purchase request

    Returns:
        Tuple[str, str, int]: (stored_file_name, file_path, file_size)
    """
    request_dir = Path(settings.UPLOAD_DIRECTORY) / str(purchase_request_id)
    request_dir.mkdir(parents=True, exist_ok=True)

    file_ext = Path(file.filename or "").suffix.lower()
    unique_filename = f"{datetime.now().strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:8]}{file_ext}"
    file_path = request_dir / unique_filename

    try:
        with file_path.open("wb") as buffer:
            shutil.copyfileobj(file.file, buffer)
    finally:
        file.file.close()

    file_size = file_path.stat().st_size
    logger.info(f"File saved: {file_path} for purchase request {purchase_request_id}")
    return unique_filename, str(file_path), file_size


def delete_file(file_path: str) -> bool:
    """
    Delete a file from disk

    Args:
        file_path: Path to file

    Returns:
        bool: True if deleted successfully
    """
    try:
        if os.path.exists(file_path):
            os.remove(file_path)
            logger.info(f"File deleted: {file_path}")
            return True
        return False
    except OSError as e:
        logger.error(f"Error deleting file {file_path}: {str(e)}")
        return False
