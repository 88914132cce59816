from datetime import datetime
from typing import Any, Dict, List, Tuple
import logging

from ....domain.entities.chunk import Chunk
from ....domain.entities.dataset import Dataset
from ....domain.entities.document import Document
from ....domain.entities.document_status import DocumentStatus
from ....domain.exceptions import DocumentOperationError
from ....domain.repositories.chunk_repository import ChunkRepository
from ....domain.repositories.document_repository import DocumentRepository
from ....infrastructure.external.ragflow_client import RAGFlowClient

logger = logging.getLogger(__name__)

PAGE_SIZE = 100


class DocumentChunkSyncer:
    """Mirror the chunks RAGFlow produced for parsed documents"""

    def __init__(self, chunk_repo: ChunkRepository, document_repo: DocumentRepository, client: RAGFlowClient):
        self.chunk_repo = chunk_repo
        self.document_repo = document_repo
        self.client = client

    async def sync_document(self, document: Document, dataset: Dataset) -> Dict[str, Any]:
        """Fetch every chunk of ``document`` and store it locally.

        Chunks RAGFlow no longer lists are removed and the document's
        ``chunk_count`` is set to the remote total.
        """
        if not document.remote_id:
            raise DocumentOperationError("Document not uploaded to RAGFlow yet")
        if not dataset.remote_id:
            raise DocumentOperationError.dataset_not_found(dataset.id)

        try:
            remote_chunks, total = await self._fetch_all(dataset.remote_id, document.remote_id)

            synced: List[str] = []
            for position, data in enumerate(remote_chunks):
                chunk = Chunk.from_api(data, document.id, position)
                if not chunk.remote_id:
                    continue
                await self.chunk_repo.upsert(chunk)
                synced.append(chunk.remote_id)

            await self.chunk_repo.delete_stale(document.id, synced)

            document.chunk_count = total
            document.last_sync_time = datetime.utcnow()
            await self.document_repo.update(document)
        except Exception as e:
            logger.error(f"Sync chunks of document {document.id} failed: {e}")
            return {"success": False, "synced_count": 0, "total_count": 0, "error": str(e)}

        logger.info(f"Synced {len(synced)} of {total} chunks of document {document.id}")
        return {"success": True, "synced_count": len(synced), "total_count": total}

    async def sync_dataset(self, dataset: Dataset) -> Dict[str, Any]:
        """Sync chunks of every parsed document of a dataset"""
        if not dataset.remote_id:
            raise DocumentOperationError.dataset_not_found(dataset.id)

        documents = await self.document_repo.get_all_by_dataset(dataset.id)

        synced_count = 0
        chunk_count = 0
        errors: List[str] = []
        for document in documents:
            if document.status != DocumentStatus.COMPLETED or not document.remote_id:
                continue
            result = await self.sync_document(document, dataset)
            if result["success"]:
                synced_count += 1
                chunk_count += result["synced_count"]
            else:
                errors.append(f"{document.name}: {result['error']}")

        return {"synced_count": synced_count, "chunk_count": chunk_count, "errors": errors}

    async def _fetch_all(self, dataset_remote_id: str, document_remote_id: str) -> Tuple[List[Dict[str, Any]], int]:
        chunks: List[Dict[str, Any]] = []
        total = 0
        page = 1
        while True:
            data = await self.client.list_chunks(
                dataset_remote_id, document_remote_id, page=page, page_size=PAGE_SIZE
            )
            batch = [chunk for chunk in data.get("chunks") or [] if isinstance(chunk, dict)]
            chunks.extend(batch)
            total = data.get("total") if isinstance(data.get("total"), int) else len(chunks)

            if len(batch) < PAGE_SIZE or len(chunks) >= total:
                return chunks, total
            page += 1
