from typing import Any, Dict, List
import logging

from ....domain.entities.dataset import Dataset
from ....domain.entities.document import Document
from ....domain.repositories.document_repository import DocumentRepository
from ....infrastructure.external.ragflow_client import RAGFlowClient
from ..files import remove_stored_file

logger = logging.getLogger(__name__)


class DocumentBatchDeleter:
    """Deletes documents locally and, best effort, in RAGFlow."""

    def __init__(self, document_repo: DocumentRepository, client: RAGFlowClient):
        self.document_repo = document_repo
        self.client = client

    async def batch_delete(self, dataset: Dataset, document_ids: List[int]) -> Dict[str, Any]:
        deleted_count = 0
        errors: List[str] = []

        for document_id in document_ids:
            try:
                document = await self.document_repo.get_by_id(document_id)
                if document is None or document.dataset_id != dataset.id:
                    errors.append(f"Document {document_id} not found or not belongs to this dataset")
                    continue

                await self.delete_document(document, dataset)
                deleted_count += 1
            except Exception as e:
                logger.error(f"Delete document {document_id} failed: {e}")
                errors.append(f"Delete document {document_id} failed: {e}")

        return {"deleted_count": deleted_count, "errors": errors}

    async def delete_document(self, document: Document, dataset: Dataset) -> None:
        if document.remote_id and dataset.remote_id:
            try:
                await self.client.delete_documents(dataset.remote_id, [document.remote_id])
            except Exception as e:
                logger.warning(f"Failed to delete document {document.remote_id} from RAGFlow: {e}")

        await self.document_repo.delete(document.id)
        remove_stored_file(document.file_path)
