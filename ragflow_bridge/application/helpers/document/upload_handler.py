from typing import Any, Dict, Iterable, List
import logging

from ....domain.entities.dataset import Dataset, DatasetStatus
from ....domain.exceptions import DocumentOperationError
from ...services.document_upload_service import DocumentUploadService, IncomingFile

logger = logging.getLogger(__name__)


class DocumentUploadHandler:
    """Uploads a batch of files, collecting per-file errors."""

    def __init__(self, upload_service: DocumentUploadService):
        self.upload_service = upload_service

    @staticmethod
    def extract_files(files: Iterable[IncomingFile]) -> List[IncomingFile]:
        return [incoming for incoming in files if incoming.filename and incoming.content]

    @staticmethod
    def validate_dataset_remote_id(dataset: Dataset) -> str:
        if not dataset.remote_id or dataset.status == DatasetStatus.SYNC_FAILED.value:
            raise DocumentOperationError.dataset_not_found(dataset.id)
        return dataset.remote_id

    async def process_uploads(self, dataset: Dataset, files: List[IncomingFile]) -> Dict[str, Any]:
        uploaded: List[Dict[str, Any]] = []
        errors: List[str] = []

        for incoming in files:
            try:
                document = await self.upload_service.upload(dataset, incoming)
                uploaded.append(document.to_dict())
            except Exception as e:
                logger.error(f"Upload of {incoming.filename} to dataset {dataset.id} failed: {e}")
                errors.append(f"{incoming.filename}: {e}")

        return {"uploaded_count": len(uploaded), "uploaded": uploaded, "errors": errors}
