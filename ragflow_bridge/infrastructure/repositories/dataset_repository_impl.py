from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from ..database.models import DatasetDB
from ...domain.entities.dataset import Dataset
from ...domain.repositories.dataset_repository import DatasetRepository
import logging

logger = logging.getLogger(__name__)

_FIELDS = (
    "remote_id", "name", "description", "parser_method", "chunk_method",
    "chunk_size", "language", "embedding_model", "similarity_threshold",
    "status", "enabled", "chunk_config", "remote_create_time",
    "remote_update_time", "last_sync_time", "create_time", "update_time",
)


class SqlAlchemyDatasetRepository(DatasetRepository):
    """SQLAlchemy implementation of DatasetRepository."""

    def __init__(self, db_session: Session):
        self.db = db_session

    async def save(self, dataset: Dataset) -> Dataset:
        """Save dataset to database."""
        dataset_db = DatasetDB(**{name: getattr(dataset, name) for name in _FIELDS})

        self.db.add(dataset_db)
        self.db.commit()
        self.db.refresh(dataset_db)

        dataset.id = dataset_db.id
        logger.info(f"Dataset {dataset.id} ({dataset.name}) saved to database")
        return dataset

    async def get_by_id(self, dataset_id: int) -> Optional[Dataset]:
        """Get dataset by ID."""
        dataset_db = self.db.query(DatasetDB).filter(DatasetDB.id == dataset_id).first()
        return self._map_to_domain(dataset_db) if dataset_db else None

    async def get_by_remote_id(self, remote_id: str) -> Optional[Dataset]:
        """Get dataset by RAGFlow ID."""
        dataset_db = self.db.query(DatasetDB).filter(DatasetDB.remote_id == remote_id).first()
        return self._map_to_domain(dataset_db) if dataset_db else None

    async def get_by_name(self, name: str) -> Optional[Dataset]:
        """Get dataset by name."""
        dataset_db = self.db.query(DatasetDB).filter(DatasetDB.name == name).first()
        return self._map_to_domain(dataset_db) if dataset_db else None

    async def list(
        self,
        name: Optional[str] = None,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[Dataset], int]:
        """List datasets with filters and pagination."""
        query = self.db.query(DatasetDB)
        if name:
            query = query.filter(DatasetDB.name == name)
        if status:
            query = query.filter(DatasetDB.status == status)

        total = query.count()
        datasets_db = (
            query.order_by(DatasetDB.create_time.desc(), DatasetDB.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

        return [self._map_to_domain(dataset_db) for dataset_db in datasets_db], total

    async def update(self, dataset: Dataset) -> Dataset:
        """Update dataset in database."""
        dataset_db = self.db.query(DatasetDB).filter(DatasetDB.id == dataset.id).first()

        if not dataset_db:
            raise ValueError(f"Dataset {dataset.id} not found")

        for name in _FIELDS:
            setattr(dataset_db, name, getattr(dataset, name))

        self.db.commit()
        self.db.refresh(dataset_db)

        logger.info(f"Dataset {dataset.id} updated in database")
        return dataset

    async def delete(self, dataset_id: int) -> bool:
        """Delete dataset by ID."""
        dataset_db = self.db.query(DatasetDB).filter(DatasetDB.id == dataset_id).first()

        if not dataset_db:
            return False

        self.db.delete(dataset_db)
        self.db.commit()

        logger.info(f"Dataset {dataset_id} deleted from database")
        return True

    def _map_to_domain(self, dataset_db: DatasetDB) -> Dataset:
        return Dataset(id=dataset_db.id, **{name: getattr(dataset_db, name) for name in _FIELDS})
