"""Dataset document use case"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import logging

from ...domain.entities.chunk import Chunk
from ...domain.entities.dataset import Dataset, DatasetDocumentStats
from ...domain.entities.document import Document
from ..helpers.document import (
    DocumentBatchDeleter,
    DocumentChunkSyncer,
    DocumentRetryHandler,
    DocumentStatusUpdater,
    DocumentUploadHandler,
)
from ..services.document_upload_service import IncomingFile
from ..validators.document_validator import DocumentValidator

logger = logging.getLogger(__name__)


@dataclass
class DocumentPage:
    """One page of documents of a dataset"""
    dataset: Dataset
    documents: List[Document]
    page: int
    limit: int
    total: int


@dataclass
class ChunkPage:
    """One page of locally mirrored chunks of a document"""
    document: Document
    chunks: List[Chunk]
    page: int
    limit: int
    total: int


def parse_document_ids(raw_ids: Any) -> List[int]:
    """Keep the ints and numeric strings of ``raw_ids``."""
    if not isinstance(raw_ids, list) or not raw_ids:
        raise ValueError("No document IDs provided")

    document_ids = []
    for raw_id in raw_ids:
        if isinstance(raw_id, bool):
            continue
        if isinstance(raw_id, int):
            document_ids.append(raw_id)
        elif isinstance(raw_id, str) and raw_id.strip().isdigit():
            document_ids.append(int(raw_id.strip()))

    if not document_ids:
        raise ValueError("No valid document IDs provided")
    return document_ids


class DatasetDocumentUseCase:
    """Use case for documents inside a dataset"""

    def __init__(
        self,
        validator: DocumentValidator,
        upload_handler: DocumentUploadHandler,
        status_updater: DocumentStatusUpdater,
        retry_handler: DocumentRetryHandler,
        batch_deleter: DocumentBatchDeleter,
        chunk_syncer: DocumentChunkSyncer
    ):
        self.validator = validator
        self.document_repo = validator.document_repo
        self.upload_handler = upload_handler
        self.status_updater = status_updater
        self.retry_handler = retry_handler
        self.batch_deleter = batch_deleter
        self.chunk_syncer = chunk_syncer

    async def list_documents(
        self,
        dataset_id: int,
        page: int = 1,
        limit: int = 20,
        name: Optional[str] = None,
        status: Optional[str] = None,
        type: Optional[str] = None
    ) -> DocumentPage:
        """List documents of a dataset"""
        dataset = await self.validator.get_dataset(dataset_id)
        page = max(page, 1)
        limit = max(limit, 1)

        documents, total = await self.document_repo.list_by_dataset(
            dataset.id,
            name=name or None,
            status=status or None,
            type=type or None,
            skip=(page - 1) * limit,
            limit=limit
        )
        return DocumentPage(dataset=dataset, documents=documents, page=page, limit=limit, total=total)

    async def upload_documents(self, dataset_id: int, files: List[IncomingFile]) -> Dict[str, Any]:
        """Upload files into a dataset, collecting per-file errors"""
        dataset = await self.validator.get_dataset(dataset_id)

        files = self.upload_handler.extract_files(files or [])
        if not files:
            raise ValueError("No files uploaded")

        self.upload_handler.validate_dataset_remote_id(dataset)

        result = await self.upload_handler.process_uploads(dataset, files)
        result["dataset"] = dataset.to_summary()

        logger.info(
            f"Uploaded {result['uploaded_count']} of {len(files)} files to dataset {dataset.id}"
        )
        return result

    async def delete_document(self, dataset_id: int, document_id: int) -> Document:
        """Delete one document of a dataset"""
        dataset, document = await self.validator.get_dataset_document(dataset_id, document_id)
        await self.batch_deleter.delete_document(document, dataset)

        logger.info(f"Document {document_id} deleted from dataset {dataset_id}")
        return document

    async def batch_delete(self, dataset_id: int, raw_ids: Any) -> Dict[str, Any]:
        """Delete several documents of a dataset"""
        dataset = await self.validator.get_dataset(dataset_id)
        document_ids = parse_document_ids(raw_ids)
        return await self.batch_deleter.batch_delete(dataset, document_ids)

    async def parse_document(self, dataset_id: int, document_id: int) -> Dict[str, Any]:
        """Start parsing a document in RAGFlow"""
        dataset, document = await self.validator.get_dataset_document(dataset_id, document_id)
        self.validator.validate_for_parsing(document)
        return await self.status_updater.reparse(document, dataset)

    async def stop_parsing(self, dataset_id: int, document_id: int) -> Dict[str, Any]:
        """Stop parsing a document in RAGFlow"""
        dataset, document = await self.validator.get_dataset_document(dataset_id, document_id)
        return await self.status_updater.stop_parsing(document, dataset)

    async def get_parse_status(self, dataset_id: int, document_id: int) -> Dict[str, Any]:
        """Refresh and report the parse state of a document"""
        dataset, document = await self.validator.get_dataset_document(dataset_id, document_id)

        if document.remote_id:
            await self.status_updater.update_from_api(document, dataset)

        return {
            "id": document.id,
            "remote_id": document.remote_id,
            "status": document.status.value,
            "status_label": document.status.label,
            "parse_status": document.parse_status,
            "progress": document.progress,
            "progress_msg": document.progress_msg,
            "chunk_count": document.chunk_count,
        }

    async def get_stats(self, dataset_id: int) -> DatasetDocumentStats:
        """Aggregate document statistics of a dataset"""
        dataset = await self.validator.get_dataset(dataset_id)
        documents = await self.document_repo.get_all_by_dataset(dataset.id)
        return DatasetDocumentStats.from_documents(documents)

    async def retry_document(self, dataset_id: int, document_id: int) -> Dict[str, Any]:
        """Re-upload one failed document"""
        dataset, document = await self.validator.get_dataset_document(dataset_id, document_id)

        if not self.retry_handler.should_retry(document):
            raise ValueError("Document does not need retry or its local file is missing")

        try:
            await self.retry_handler.process_retry(document, dataset)
        except Exception as e:
            message = await self.retry_handler.handle_error(document, e)
            return {"success": False, "message": message}

        return {"success": True, "message": f"Document {document.name} re-uploaded"}

    async def retry_failed(self, dataset_id: int) -> Dict[str, Any]:
        """Re-upload every failed document of a dataset"""
        dataset = await self.validator.get_dataset(dataset_id)
        failed = await self.document_repo.get_failed_by_dataset(dataset.id)

        retried_count = 0
        errors: List[str] = []
        for document in failed:
            if not self.retry_handler.should_retry(document):
                continue
            try:
                await self.retry_handler.process_retry(document, dataset)
                retried_count += 1
            except Exception as e:
                errors.append(await self.retry_handler.handle_error(document, e))

        logger.info(f"Retried {retried_count} documents of dataset {dataset.id}")
        return {"retried_count": retried_count, "errors": errors}

    async def sync_chunks(self, dataset_id: int, document_id: int) -> Dict[str, Any]:
        """Mirror the chunks of one uploaded document"""
        dataset, document = await self.validator.get_dataset_document(dataset_id, document_id)
        return await self.chunk_syncer.sync_document(document, dataset)

    async def sync_all_chunks(self, dataset_id: int) -> Dict[str, Any]:
        """Mirror the chunks of every parsed document of a dataset"""
        dataset = await self.validator.get_dataset(dataset_id)
        result = await self.chunk_syncer.sync_dataset(dataset)

        logger.info(f"Synced chunks of {result['synced_count']} documents of dataset {dataset.id}")
        return result

    async def list_chunks(self, dataset_id: int, document_id: int, page: int = 1, limit: int = 50) -> ChunkPage:
        """List the locally mirrored chunks of a document"""
        _, document = await self.validator.get_dataset_document(dataset_id, document_id)
        page = max(page, 1)
        limit = max(limit, 1)

        chunks, total = await self.chunk_syncer.chunk_repo.list_by_document(
            document.id, skip=(page - 1) * limit, limit=limit
        )
        return ChunkPage(document=document, chunks=chunks, page=page, limit=limit, total=total)
