from datetime import datetime
from typing import Any, Dict
import logging

from ....domain.entities.dataset import Dataset
from ....domain.entities.document import Document
from ....domain.entities.document_status import DocumentStatus
from ....domain.exceptions import DocumentOperationError
from ....domain.repositories.document_repository import DocumentRepository
from ....infrastructure.external.ragflow_client import RAGFlowClient

logger = logging.getLogger(__name__)

# RAGFlow document "run" values
RUN_STATUS_MAP = {
    "RUNNING": DocumentStatus.PROCESSING,
    "DONE": DocumentStatus.COMPLETED,
    "FAIL": DocumentStatus.FAILED,
    "CANCEL": DocumentStatus.PENDING,
}


class DocumentStatusUpdater:
    """Drives parsing of a document and mirrors its parse state."""

    def __init__(self, document_repo: DocumentRepository, client: RAGFlowClient):
        self.document_repo = document_repo
        self.client = client

    async def reparse(self, document: Document, dataset: Dataset) -> Dict[str, Any]:
        if not document.remote_id:
            return {
                "success": False,
                "message": "Document has not been uploaded to RAGFlow, cannot parse",
            }

        try:
            dataset_remote_id = self._require_dataset_remote_id(dataset)
            result = await self.client.parse_documents(dataset_remote_id, [document.remote_id])

            document.set_status(DocumentStatus.PROCESSING)
            document.progress = 0.0
            document.progress_msg = "Parsing started"
            await self.document_repo.update(document)

            logger.info(f"Parsing started for document {document.id} ({document.remote_id})")
            return {
                "success": True,
                "message": "Document parsing started",
                "data": result,
            }
        except Exception as e:
            logger.error(f"Failed to start parsing for document {document.id}: {e}")
            return {
                "success": False,
                "message": "Failed to start parsing",
                "error": str(e),
            }

    async def stop_parsing(self, document: Document, dataset: Dataset) -> Dict[str, Any]:
        if not document.remote_id:
            return {
                "success": False,
                "message": "Document has not been uploaded to RAGFlow, cannot stop parsing",
            }

        try:
            dataset_remote_id = self._require_dataset_remote_id(dataset)
            result = await self.client.stop_parsing(dataset_remote_id, [document.remote_id])

            document.set_status(DocumentStatus.PENDING)
            document.progress = None
            document.progress_msg = "Parsing stopped"
            await self.document_repo.update(document)

            logger.info(f"Parsing stopped for document {document.id}")
            return {"success": True, "message": "Document parsing stopped", "data": result}
        except Exception as e:
            logger.error(f"Failed to stop parsing for document {document.id}: {e}")
            return {
                "success": False,
                "message": "Failed to stop parsing",
                "error": str(e),
            }

    @staticmethod
    def _require_dataset_remote_id(dataset: Dataset) -> str:
        if not dataset.remote_id:
            raise DocumentOperationError.dataset_not_found(dataset.id)
        return dataset.remote_id

    async def update_from_api(self, document: Document, dataset: Dataset) -> None:
        """Refresh parse state from RAGFlow; failures are logged, never raised."""
        if not document.remote_id or not dataset.remote_id:
            return

        try:
            remote = await self.client.get_parse_status(dataset.remote_id, document.remote_id)
            self._apply_remote_state(document, remote)
            await self.document_repo.update(document)
        except Exception as e:
            logger.warning(f"Failed to refresh parse status for document {document.id}: {e}")

    def _apply_remote_state(self, document: Document, remote: Dict[str, Any]) -> None:
        run = remote.get("run")
        if isinstance(run, str) and run:
            document.parse_status = run
            status = RUN_STATUS_MAP.get(run.upper()) or DocumentStatus.from_value(run.lower())
            if status is not None:
                document.set_status(status)

        progress = remote.get("progress")
        if isinstance(progress, (int, float)):
            document.progress = round(float(progress) * 100, 2)

        if "progress_msg" in remote:
            document.progress_msg = remote.get("progress_msg")

        chunk_count = remote.get("chunk_count", remote.get("chunk_num"))
        if isinstance(chunk_count, int):
            document.chunk_count = chunk_count

        document.last_sync_time = datetime.utcnow()
