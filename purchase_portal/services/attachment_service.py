"""
Attachment Service
Stores supporting documents for purchase requests
"""

from typing import List

from fastapi import HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from purchase_portal.config.database import atomic
from purchase_portal.config.settings import settings
from purchase_portal.models.purchase_request import Attachment, PurchaseRequest
from purchase_portal.utils.file_handler import (
    delete_file,
    get_file_mime_type,
    save_upload_file,
    validate_file,
)
from purchase_portal.utils.logger import setup_logger

logger = setup_logger()


class AttachmentService:
    """Service for request attachments"""

    def list_attachments(self, db: Session, purchase_request_id: int) -> List[Attachment]:
        return db.query(Attachment).filter(
            Attachment.purchase_request_id == purchase_request_id
        ).order_by(Attachment.uploaded_at.asc(), Attachment.id.asc()).all()

    def add_attachments(self, db: Session, request: PurchaseRequest, files: List[UploadFile]) -> List[Attachment]:
        """
        Validate and store a batch of uploads

        The whole batch is rejected if any file fails validation; files
        already written for the batch are removed again.

        Args:
            db: Database session
            request: Purchase request the files belong to
            files: Uploaded files

        Returns:
            List[Attachment]: Stored attachment rows
        """
        if not files:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No files uploaded"
            )

        if len(files) > settings.MAX_FILES_PER_UPLOAD:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Too many files. Maximum {settings.MAX_FILES_PER_UPLOAD} files per upload"
            )

        for upload in files:
            is_valid, error_message = validate_file(upload)
            if not is_valid:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error_message)

        written_paths = []
        attachments = []
        try:
            with atomic(db):
                for upload in files:
                    mime_type = get_file_mime_type(upload)
                    stored_name, file_path, file_size = save_upload_file(upload, request.id)
                    written_paths.append(file_path)

                    attachment = Attachment(
                        purchase_request_id=request.id,
                        file_name=stored_name,
                        original_name=upload.filename or stored_name,
                        file_size=file_size,
                        mime_type=mime_type,
                        file_path=file_path,
                    )
                    db.add(attachment)
                    attachments.append(attachment)
        except Exception:
            for path in written_paths:
                delete_file(path)
            raise

        for attachment in attachments:
            db.refresh(attachment)

        logger.info(f"{len(attachments)} attachment(s) added to {request.requisition_number}")
        return attachments

    def delete_attachment(self, db: Session, request: PurchaseRequest, attachment_id: int):
        attachment = db.query(Attachment).filter(
            Attachment.id == attachment_id,
            Attachment.purchase_request_id == request.id
        ).first()

        if not attachment:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Attachment not found"
            )

        file_path = attachment.file_path
        with atomic(db):
            db.delete(attachment)
        delete_file(file_path)

        logger.info(f"Attachment {attachment_id} removed from {request.requisition_number}")


# Create singleton instance
attachment_service = AttachmentService()
