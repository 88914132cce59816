from datetime import datetime
from typing import Any
import os
import logging

import aiofiles

from ....domain.entities.dataset import Dataset
from ....domain.entities.document import Document
from ....domain.entities.document_status import DocumentStatus
from ....domain.exceptions import DocumentOperationError
from ....domain.repositories.document_repository import DocumentRepository
from ....infrastructure.external.ragflow_client import RAGFlowClient
from ...services.document_upload_service import DEFAULT_MIME_TYPE, apply_upload_result

logger = logging.getLogger(__name__)


class DocumentRetryHandler:
    """Re-uploads failed documents from their stored local copy."""

    def __init__(self, document_repo: DocumentRepository, client: RAGFlowClient):
        self.document_repo = document_repo
        self.client = client

    def should_retry(self, document: Document) -> bool:
        """Only documents that still need an upload and kept their local file."""
        return (
            document.is_upload_required()
            and bool(document.file_path)
            and os.path.exists(document.file_path)
        )

    async def process_retry(self, document: Document, dataset: Dataset) -> None:
        document.set_status(DocumentStatus.UPLOADING)
        await self.document_repo.update(document)

        if not document.file_path:
            raise DocumentOperationError.upload_failed("File path is empty")

        if not dataset.remote_id:
            raise DocumentOperationError.dataset_not_found(dataset.id)

        async with aiofiles.open(document.file_path, "rb") as f:
            content = await f.read()

        result = await self.client.upload_documents(
            dataset.remote_id,
            [(document.filename or document.name, content, document.mime_type or DEFAULT_MIME_TYPE)]
        )
        await self.update_after_retry(document, result)

    async def update_after_retry(self, document: Document, result: Any) -> None:
        apply_upload_result(document, result)
        document.last_sync_time = datetime.utcnow()
        await self.document_repo.update(document)
        logger.info(f"Document {document.id} re-uploaded as {document.remote_id}")

    async def handle_error(self, document: Document, error: Exception) -> str:
        logger.error(f"Retry of document {document.id} failed: {error}")
        document.set_status(DocumentStatus.SYNC_FAILED)
        await self.document_repo.update(document)
        return f"Retry document {document.name} failed: {error}"
