"""Chunk use case"""

from typing import Any, Dict, List, Optional
import logging

from ...domain.entities.chunk import VirtualChunk
from ...infrastructure.external.ragflow_client import RAGFlowClient

logger = logging.getLogger(__name__)


class ChunkUseCase:
    """Use case for chunk retrieval and editing in RAGFlow"""

    def __init__(self, client: RAGFlowClient):
        self.client = client

    async def retrieve(self, dataset_id: str, data: Optional[Dict[str, Any]]) -> List[VirtualChunk]:
        """Retrieve chunks of a dataset relevant to ``query``."""
        options = dict(data or {})
        query = options.pop("query", None)
        if not query:
            raise ValueError("Query is required")
        if not isinstance(query, str):
            raise ValueError("Query must be a string")

        options.pop("dataset_ids", None)
        result = await self.client.retrieve(query, [dataset_id], **options)

        chunks = result.get("chunks") if isinstance(result, dict) else None
        return [
            VirtualChunk.from_api(chunk, dataset_id)
            for chunk in chunks or []
            if isinstance(chunk, dict)
        ]

    async def add_chunks(self, dataset_id: str, chunks: Any) -> Dict[str, Any]:
        """Add chunks to documents of a dataset.

        Every chunk names its ``document_id`` and ``content``; failed chunks
        are reported in ``errors`` and do not stop the rest.
        """
        if not isinstance(chunks, list):
            raise ValueError("Chunks array is required")

        added: List[Dict[str, Any]] = []
        errors: List[str] = []
        for index, chunk in enumerate(chunks):
            if not isinstance(chunk, dict) or not chunk.get("document_id") or not chunk.get("content"):
                errors.append(f"Chunk {index}: document_id and content are required")
                continue
            try:
                result = await self.client.add_chunk(
                    dataset_id,
                    chunk["document_id"],
                    chunk["content"],
                    important_keywords=chunk.get("important_keywords")
                )
                added.append(result.get("chunk", result) if isinstance(result, dict) else result)
            except Exception as e:
                logger.error(f"Add chunk {index} to dataset {dataset_id} failed: {e}")
                errors.append(f"Chunk {index}: {e}")

        return {"added_count": len(added), "chunks": added, "errors": errors}

    async def update_chunk(self, dataset_id: str, chunk_id: str, data: Optional[Dict[str, Any]]) -> Any:
        """Update one chunk"""
        changes = dict(data or {})
        if not changes:
            raise ValueError("Update data is required")

        document_id = changes.pop("document_id", None)
        if not document_id:
            raise ValueError("document_id is required")

        return await self.client.update_chunk(dataset_id, document_id, chunk_id, changes)

    async def delete_chunk(self, dataset_id: str, chunk_id: str, document_id: Optional[str]) -> None:
        """Delete one chunk"""
        if not document_id:
            raise ValueError("document_id is required")

        await self.client.delete_chunks(dataset_id, document_id, [chunk_id])
        logger.info(f"Chunk {chunk_id} deleted from dataset {dataset_id}")
