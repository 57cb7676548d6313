# utils/file_validation.py
"""
Attachment file checks, applied before any storage or database change.
"""
from errors import FileTooLarge, InvalidFileType

MAX_FILE_SIZE = 5 * 1024 * 1024  # 5 MiB

ALLOWED_CONTENT_TYPES = {
     "application/pdf": "pdf",
     "image/jpeg": "jpg",
     "image/png": "png",
}


def validate_attachment(content_type: str, size: int) -> str:
     """
     Check an uploaded file and return the extension it is stored under.

     Args:
          content_type: MIME type reported by the client
          size: File size in bytes

     Returns:
          "pdf", "jpg" or "png"

     Raises:
          InvalidFileType: Content type is not PDF, JPEG or PNG
          FileTooLarge: File is larger than 5 MiB
     """
     extension = ALLOWED_CONTENT_TYPES.get((content_type or "").lower())
     if extension is None:
          raise InvalidFileType(details={"content_type": content_type})
     if size > MAX_FILE_SIZE:
          raise FileTooLarge(details={"max_bytes": MAX_FILE_SIZE})
     return extension
