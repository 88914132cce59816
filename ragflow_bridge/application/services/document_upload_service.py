"""Single document upload: validate, store locally, push to RAGFlow"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional
import os
import uuid
import logging

import aiofiles

from ...domain.entities.base import parse_remote_time
from ...domain.entities.dataset import Dataset
from ...domain.entities.document import Document
from ...domain.entities.document_status import DocumentStatus
from ...domain.exceptions import DocumentOperationError
from ...domain.repositories.document_repository import DocumentRepository
from ...infrastructure.external.ragflow_client import RAGFlowClient
from ..validators.file_upload_validator import FileUploadValidator

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"


@dataclass
class IncomingFile:
    """File received from a client request."""
    filename: Optional[str]
    content: bytes
    mime_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


def apply_upload_result(document: Document, result: Any) -> None:
    """Apply the first entry of a RAGFlow upload response to ``document``."""
    entries: List[Dict[str, Any]] = result if isinstance(result, list) else []
    first = entries[0] if entries and isinstance(entries[0], dict) else {}

    document.mark_synced(first.get("id"))
    if first.get("run"):
        document.parse_status = first["run"]
    if first.get("chunk_count") is not None:
        document.chunk_count = first["chunk_count"]
    document.remote_create_time = parse_remote_time(first.get("create_time")) or document.remote_create_time


class DocumentUploadService:
    """Uploads one file into a dataset."""

    def __init__(
        self,
        document_repo: DocumentRepository,
        client: RAGFlowClient,
        validator: FileUploadValidator,
        upload_dir: str = "./uploads"
    ):
        self.document_repo = document_repo
        self.client = client
        self.validator = validator
        self.upload_dir = upload_dir

    async def upload(self, dataset: Dataset, incoming: IncomingFile) -> Document:
        """Create the local document, then sync it to RAGFlow.

        The local record survives a failed sync with status ``sync_failed``.
        """
        extension = self.validator.validate(incoming.filename, incoming.mime_type, incoming.size)

        file_path = await self._store(dataset, incoming)

        document = Document(
            dataset_id=dataset.id,
            name=incoming.filename,
            filename=incoming.filename,
            file_path=file_path,
            type=extension,
            mime_type=incoming.mime_type or None,
            size=incoming.size,
            status=DocumentStatus.PENDING
        )
        document = await self.document_repo.save(document)

        document.set_status(DocumentStatus.UPLOADING)
        await self.document_repo.update(document)

        try:
            result = await self.client.upload_documents(
                dataset.remote_id,
                [(incoming.filename, incoming.content, incoming.mime_type or DEFAULT_MIME_TYPE)]
            )
        except Exception as e:
            logger.error(f"Failed to sync document {document.id} to RAGFlow: {e}")
            document.set_status(DocumentStatus.SYNC_FAILED)
            await self.document_repo.update(document)
            raise DocumentOperationError(f"Uploaded to local but failed to sync to RAGFlow: {e}") from e

        apply_upload_result(document, result)
        await self.document_repo.update(document)

        logger.info(f"Document {document.id} uploaded to dataset {dataset.id} as {document.remote_id}")
        return document

    async def _store(self, dataset: Dataset, incoming: IncomingFile) -> str:
        directory = os.path.join(self.upload_dir, str(dataset.id))
        os.makedirs(directory, exist_ok=True)

        file_path = os.path.join(directory, f"{uuid.uuid4().hex}_{Path(incoming.filename).name}")
        async with aiofiles.open(file_path, "wb") as f:
            await f.write(incoming.content)

        return file_path
