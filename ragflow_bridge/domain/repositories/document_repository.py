from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
from ..entities.document import Document


class DocumentRepository(ABC):
    """Abstract repository for document persistence."""

    @abstractmethod
    async def save(self, document: Document) -> Document:
        """Save a new document and assign its local ID."""
        pass

    @abstractmethod
    async def get_by_id(self, document_id: int) -> Optional[Document]:
        """Get document by local ID."""
        pass

    @abstractmethod
    async def list_by_dataset(
        self,
        dataset_id: int,
        name: Optional[str] = None,
        status: Optional[str] = None,
        type: Optional[str] = None,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[Document], int]:
        """List documents of a dataset newest first, with the total count."""
        pass

    @abstractmethod
    async def get_all_by_dataset(self, dataset_id: int) -> List[Document]:
        """Get every document of a dataset."""
        pass

    @abstractmethod
    async def get_failed_by_dataset(self, dataset_id: int) -> List[Document]:
        """Get documents of a dataset whose upload or parse failed."""
        pass

    @abstractmethod
    async def update(self, document: Document) -> Document:
        """Update document in repository."""
        pass

    @abstractmethod
    async def delete(self, document_id: int) -> bool:
        """Delete document by local ID."""
        pass
