from abc import ABC, abstractmethod
from typing import List, Tuple
from ..entities.chunk import Chunk


class ChunkRepository(ABC):
    """Abstract repository for chunk mirrors."""

    @abstractmethod
    async def upsert(self, chunk: Chunk) -> Chunk:
        """Insert or update the chunk identified by document and remote ID."""
        pass

    @abstractmethod
    async def list_by_document(self, document_id: int, skip: int = 0, limit: int = 50) -> Tuple[List[Chunk], int]:
        """List chunks of a document in position order, with the total count."""
        pass

    @abstractmethod
    async def delete_stale(self, document_id: int, keep_remote_ids: List[str]) -> int:
        """Delete chunks of a document not in ``keep_remote_ids``; return how many."""
        pass
