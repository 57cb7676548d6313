# azure_blob.py
"""
Azure Blob Storage adapter for charge attachments.

Blobs are addressed by a container-relative path ("<apartment_id>/<charge_id>.pdf");
that path is what the charges table stores. Download links are short-lived
read-only SAS URLs.
"""
import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

from azure.core.exceptions import AzureError, ResourceNotFoundError
from azure.storage.blob import BlobSasPermissions, BlobServiceClient, ContentSettings, generate_blob_sas

from config import (
     ATTACHMENT_URL_TTL_SECONDS,
     ATTACHMENTS_CONTAINER,
     AZURE_STORAGE_ACCOUNT,
     AZURE_STORAGE_CONNECTION_STRING,
     AZURE_STORAGE_KEY,
)
from errors import StorageError

logger = logging.getLogger(__name__)


class BlobStorage:
     """Thin wrapper over one blob container."""

     def __init__(
          self,
          blob_service: BlobServiceClient,
          container: str,
          account_name: Optional[str] = None,
          account_key: Optional[str] = None,
          url_ttl_seconds: int = 3600,
     ):
          self.blob_service = blob_service
          self.container = container
          self.account_name = account_name or blob_service.account_name
          self.account_key = account_key or getattr(blob_service.credential, "account_key", None)
          self.url_ttl_seconds = url_ttl_seconds

     def upload(self, path: str, data: bytes, content_type: str) -> None:
          """Store data at path, replacing any existing blob. Raises StorageError."""
          blob_client = self.blob_service.get_blob_client(container=self.container, blob=path)
          try:
               blob_client.upload_blob(
                    data,
                    overwrite=True,
                    content_settings=ContentSettings(content_type=content_type),
               )
          except AzureError as exc:
               raise StorageError(f"Failed to upload {path}") from exc

     def delete(self, path: str) -> None:
          """Delete the blob at path. A missing blob is not an error."""
          blob_client = self.blob_service.get_blob_client(container=self.container, blob=path)
          try:
               blob_client.delete_blob()
          except ResourceNotFoundError:
               logger.info("Blob already absent: %s/%s", self.container, path)
          except AzureError as exc:
               raise StorageError(f"Failed to delete {path}") from exc

     def download_url(self, path: str) -> str:
          """Return a read-only SAS URL valid for url_ttl_seconds."""
          expiry = datetime.now(timezone.utc) + timedelta(seconds=self.url_ttl_seconds)
          try:
               sas = generate_blob_sas(
                    account_name=self.account_name,
                    container_name=self.container,
                    blob_name=path,
                    account_key=self.account_key,
                    permission=BlobSasPermissions(read=True),
                    expiry=expiry,
               )
          except (TypeError, ValueError) as exc:
               raise StorageError(f"Failed to sign download URL for {path}") from exc
          return f"https://{self.account_name}.blob.core.windows.net/{self.container}/{path}?{sas}"


def _connection_string() -> str:
     if AZURE_STORAGE_CONNECTION_STRING:
          return AZURE_STORAGE_CONNECTION_STRING
     return (
          f"DefaultEndpointsProtocol=https;"
          f"AccountName={AZURE_STORAGE_ACCOUNT};"
          f"AccountKey={AZURE_STORAGE_KEY};"
          f"EndpointSuffix=core.windows.net"
     )


@lru_cache(maxsize=1)
def _default_storage() -> BlobStorage:
     blob_service = BlobServiceClient.from_connection_string(_connection_string())
     return BlobStorage(
          blob_service,
          container=ATTACHMENTS_CONTAINER,
          account_name=AZURE_STORAGE_ACCOUNT,
          account_key=AZURE_STORAGE_KEY,
          url_ttl_seconds=ATTACHMENT_URL_TTL_SECONDS,
     )


def get_blob_storage() -> BlobStorage:
     """FastAPI dependency returning the attachments container adapter."""
     return _default_storage()
