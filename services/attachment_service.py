# services/attachment_service.py
"""
Attachment Service - at most one stored file per charge.

Blob storage and the database share no transaction, so every operation is
ordered to leave at worst an orphaned blob, never a pointer to a missing one.
"""
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from azure_blob import BlobStorage
from errors import NoAttachment, StorageError
from models import Charge, User
from services.access import get_owned_charge
from utils.file_validation import validate_attachment

logger = logging.getLogger(__name__)


def attachment_path(charge: Charge, extension: str) -> str:
     """Storage key "<apartment_id>/<charge_id>.<ext>"."""
     return f"{charge.lease.apartment_id}/{charge.id}.{extension}"


def _delete_quietly(storage: BlobStorage, path: str) -> bool:
     try:
          storage.delete(path)
          return True
     except StorageError:
          logger.warning("Best-effort delete of %s failed", path, exc_info=True)
          return False


def set_attachment(
     db: Session,
     charge_id: str,
     owner: User,
     data: bytes,
     content_type: str,
     storage: BlobStorage,
) -> Charge:
     """
     Bind a file to a charge, replacing any previous one.

     Order: validate, delete the previous blob (best-effort), upload the new
     blob, then update the pointer. If the pointer update fails the new blob
     is removed again (best-effort).

     Raises:
          ChargeNotFound: Not one of the caller's charges
          InvalidFileType, FileTooLarge: Nothing was touched
          StorageError: Upload failed
     """
     charge = get_owned_charge(db, charge_id, owner)
     extension = validate_attachment(content_type, len(data))

     previous_path = charge.attachment_path
     new_path = attachment_path(charge, extension)

     previous_deleted = False
     if previous_path:
          previous_deleted = _delete_quietly(storage, previous_path)

     try:
          storage.upload(new_path, data, content_type)
     except StorageError:
          if previous_deleted:
               # The old pointer now names a deleted blob; drop it.
               charge.attachment_path = None
               db.commit()
          logger.error("Attachment upload failed for charge %s", charge_id)
          raise

     try:
          charge.attachment_path = new_path
          db.commit()
     except SQLAlchemyError:
          db.rollback()
          if new_path != previous_path:
               _delete_quietly(storage, new_path)
          raise
     db.refresh(charge)

     logger.info("Attachment %s bound to charge %s", new_path, charge_id)
     return charge


def remove_attachment(db: Session, charge_id: str, owner: User, storage: BlobStorage) -> Charge:
     """
     Unbind and delete the charge's file.

     Raises:
          ChargeNotFound: Not one of the caller's charges
          NoAttachment: The charge has no file
     """
     charge = get_owned_charge(db, charge_id, owner)
     if not charge.attachment_path:
          raise NoAttachment()

     path = charge.attachment_path
     _delete_quietly(storage, path)

     charge.attachment_path = None
     db.commit()
     db.refresh(charge)

     logger.info("Attachment %s removed from charge %s", path, charge_id)
     return charge
