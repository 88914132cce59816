from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
from ..entities.dataset import Dataset


class DatasetRepository(ABC):
    """Abstract repository for dataset persistence."""

    @abstractmethod
    async def save(self, dataset: Dataset) -> Dataset:
        """Save a new dataset and assign its local ID."""
        pass

    @abstractmethod
    async def get_by_id(self, dataset_id: int) -> Optional[Dataset]:
        """Get dataset by local ID."""
        pass

    @abstractmethod
    async def get_by_remote_id(self, remote_id: str) -> Optional[Dataset]:
        """Get dataset by RAGFlow ID."""
        pass

    @abstractmethod
    async def get_by_name(self, name: str) -> Optional[Dataset]:
        """Get dataset by its unique name."""
        pass

    @abstractmethod
    async def list(
        self,
        name: Optional[str] = None,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[Dataset], int]:
        """List datasets newest first, returning the page and the total count."""
        pass

    @abstractmethod
    async def update(self, dataset: Dataset) -> Dataset:
        """Update dataset in repository."""
        pass

    @abstractmethod
    async def delete(self, dataset_id: int) -> bool:
        """Delete dataset and its documents."""
        pass
