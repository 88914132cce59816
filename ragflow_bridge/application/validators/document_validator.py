from typing import Tuple

from ...domain.entities.dataset import Dataset
from ...domain.entities.document import Document
from ...domain.exceptions import ResourceNotFoundError
from ...domain.repositories.dataset_repository import DatasetRepository
from ...domain.repositories.document_repository import DocumentRepository


class DocumentValidator:
    """Loads datasets and documents, rejecting missing or mismatched ones."""

    def __init__(self, dataset_repo: DatasetRepository, document_repo: DocumentRepository):
        self.dataset_repo = dataset_repo
        self.document_repo = document_repo

    async def get_dataset(self, dataset_id: int) -> Dataset:
        dataset = await self.dataset_repo.get_by_id(dataset_id)
        if dataset is None:
            raise ResourceNotFoundError("Dataset not found")
        return dataset

    async def get_dataset_document(self, dataset_id: int, document_id: int) -> Tuple[Dataset, Document]:
        dataset = await self.get_dataset(dataset_id)
        document = await self.document_repo.get_by_id(document_id)
        if document is None or document.dataset_id != dataset.id:
            raise ResourceNotFoundError("Document not found or not belongs to this dataset")
        return dataset, document

    @staticmethod
    def validate_for_parsing(document: Document) -> None:
        if not document.remote_id:
            raise ValueError("Document not uploaded to RAGFlow yet")
