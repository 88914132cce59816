"""Dataset management use case"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from ...domain.entities.dataset import Dataset, DatasetStatus
from ...domain.exceptions import ResourceNotFoundError
from ...domain.repositories.dataset_repository import DatasetRepository
from ...domain.repositories.document_repository import DocumentRepository
from ...infrastructure.external.ragflow_client import RAGFlowClient
from ..helpers.files import remove_stored_file

logger = logging.getLogger(__name__)


@dataclass
class DatasetPage:
    """One page of datasets"""
    datasets: List[Dataset]
    page: int
    limit: int
    total: int


@dataclass
class DatasetDefaults:
    """Defaults applied to new datasets"""
    chunk_method: str = "naive"
    embedding_model: str = "BAAI/bge-large-zh-v1.5"


UPDATABLE_FIELDS = ("name", "description", "chunk_method", "embedding_model", "language")


class DatasetUseCase:
    """Use case for dataset operations"""

    def __init__(
        self,
        dataset_repository: DatasetRepository,
        document_repository: DocumentRepository,
        client: RAGFlowClient,
        defaults: DatasetDefaults = None
    ):
        self.dataset_repository = dataset_repository
        self.document_repository = document_repository
        self.client = client
        self.defaults = defaults or DatasetDefaults()

    async def create_dataset(
        self,
        name: Optional[str],
        description: Optional[str] = None,
        chunk_method: Optional[str] = None,
        embedding_model: Optional[str] = None,
        language: Optional[str] = None
    ) -> Dataset:
        """Create a dataset locally, then in RAGFlow.

        A failed remote create keeps the local record with status ``sync_failed``.
        """
        if not name or not name.strip():
            raise ValueError("Dataset name is required")
        name = name.strip()

        if await self.dataset_repository.get_by_name(name):
            raise ValueError(f"Dataset with name '{name}' already exists")

        dataset = Dataset(
            name=name,
            description=description,
            chunk_method=chunk_method or self.defaults.chunk_method,
            embedding_model=embedding_model or self.defaults.embedding_model,
            language=language,
            status=DatasetStatus.PENDING.value
        )
        dataset = await self.dataset_repository.save(dataset)

        try:
            remote = await self.client.create_dataset(
                name=dataset.name,
                description=dataset.description,
                chunk_method=dataset.chunk_method,
                embedding_model=dataset.embedding_model
            )
            dataset.apply_remote(remote)
            logger.info(f"Dataset {dataset.id} created in RAGFlow as {dataset.remote_id}")
        except Exception as e:
            logger.error(f"Failed to create dataset {dataset.id} in RAGFlow: {e}")
            dataset.mark_sync_failed()

        return await self.dataset_repository.update(dataset)

    async def list_datasets(
        self,
        page: int = 1,
        limit: int = 20,
        name: Optional[str] = None,
        status: Optional[str] = None
    ) -> DatasetPage:
        """List local datasets"""
        page = max(page, 1)
        limit = max(limit, 1)

        datasets, total = await self.dataset_repository.list(
            name=name or None,
            status=status or None,
            skip=(page - 1) * limit,
            limit=limit
        )
        return DatasetPage(datasets=datasets, page=page, limit=limit, total=total)

    async def update_dataset(self, dataset_id: int, changes: Dict[str, Any]) -> Dataset:
        """Update a dataset and push the change to RAGFlow when it is synced"""
        dataset = await self.dataset_repository.get_by_id(dataset_id)
        if dataset is None:
            raise ResourceNotFoundError("Dataset not found")

        changes = {key: value for key, value in changes.items() if key in UPDATABLE_FIELDS and value is not None}
        if "name" in changes:
            name = str(changes["name"]).strip()
            if not name:
                raise ValueError("Dataset name cannot be empty")
            existing = await self.dataset_repository.get_by_name(name)
            if existing and existing.id != dataset.id:
                raise ValueError(f"Dataset with name '{name}' already exists")
            changes["name"] = name

        for key, value in changes.items():
            setattr(dataset, key, value)
        dataset.update_time = datetime.utcnow()

        remote_changes = self._remote_changes(changes)
        if dataset.remote_id and remote_changes:
            try:
                await self.client.update_dataset(dataset.remote_id, remote_changes)
                dataset.mark_synced()
            except Exception as e:
                logger.error(f"Failed to update dataset {dataset.id} in RAGFlow: {e}")
                dataset.mark_sync_failed()

        return await self.dataset_repository.update(dataset)

    async def delete_dataset(self, dataset_id: int) -> Dataset:
        """Delete a dataset; the RAGFlow delete is best effort"""
        dataset = await self.dataset_repository.get_by_id(dataset_id)
        if dataset is None:
            raise ResourceNotFoundError("Dataset not found")

        if dataset.remote_id:
            try:
                await self.client.delete_datasets([dataset.remote_id])
            except Exception as e:
                logger.warning(f"Failed to delete dataset {dataset.remote_id} from RAGFlow: {e}")

        documents = await self.document_repository.get_all_by_dataset(dataset.id)
        await self.dataset_repository.delete(dataset.id)
        for document in documents:
            remove_stored_file(document.file_path)

        logger.info(f"Dataset {dataset_id} deleted")
        return dataset

    async def get_knowledge_graph(self, remote_dataset_id: str) -> Dict[str, Any]:
        """Fetch the knowledge graph of a RAGFlow dataset"""
        return await self.client.get_knowledge_graph(remote_dataset_id)

    def _remote_changes(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        # RAGFlow datasets have no language field
        return {key: value for key, value in changes.items() if key != "language"}
