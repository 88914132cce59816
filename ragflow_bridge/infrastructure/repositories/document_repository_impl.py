from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from ..database.models import DocumentDB
from ...domain.entities.document import Document
from ...domain.entities.document_status import DocumentStatus
from ...domain.repositories.document_repository import DocumentRepository
import logging

logger = logging.getLogger(__name__)

_FIELDS = (
    "remote_id", "dataset_id", "name", "filename", "file_path", "type",
    "mime_type", "size", "parse_status", "progress", "progress_msg",
    "language", "chunk_count", "summary", "remote_create_time",
    "remote_update_time", "last_sync_time", "create_time", "update_time",
)

FAILED_STATUSES = (DocumentStatus.SYNC_FAILED.value, DocumentStatus.FAILED.value)


class SqlAlchemyDocumentRepository(DocumentRepository):
    """SQLAlchemy implementation of DocumentRepository."""

    def __init__(self, db_session: Session):
        self.db = db_session

    async def save(self, document: Document) -> Document:
        """Save document to database."""
        document_db = DocumentDB(status=document.status.value, **self._columns(document))

        self.db.add(document_db)
        self.db.commit()
        self.db.refresh(document_db)

        document.id = document_db.id
        logger.info(f"Document {document.id} saved to database")
        return document

    async def get_by_id(self, document_id: int) -> Optional[Document]:
        """Get document by ID."""
        document_db = self.db.query(DocumentDB).filter(DocumentDB.id == document_id).first()
        return self._map_to_domain(document_db) if document_db else None

    async def list_by_dataset(
        self,
        dataset_id: int,
        name: Optional[str] = None,
        status: Optional[str] = None,
        type: Optional[str] = None,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[Document], int]:
        """List documents of a dataset with filters and pagination."""
        query = self.db.query(DocumentDB).filter(DocumentDB.dataset_id == dataset_id)
        if name:
            query = query.filter(DocumentDB.name.ilike(f"%{name}%"))
        if status:
            query = query.filter(DocumentDB.status == status)
        if type:
            query = query.filter(DocumentDB.type == type)

        total = query.count()
        documents_db = (
            query.order_by(DocumentDB.create_time.desc(), DocumentDB.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

        return [self._map_to_domain(document_db) for document_db in documents_db], total

    async def get_all_by_dataset(self, dataset_id: int) -> List[Document]:
        """Get all documents of a dataset."""
        documents_db = self.db.query(DocumentDB).filter(DocumentDB.dataset_id == dataset_id).all()
        return [self._map_to_domain(document_db) for document_db in documents_db]

    async def get_failed_by_dataset(self, dataset_id: int) -> List[Document]:
        """Get documents of a dataset whose upload or parse failed."""
        documents_db = self.db.query(DocumentDB).filter(
            DocumentDB.dataset_id == dataset_id,
            DocumentDB.status.in_(FAILED_STATUSES)
        ).all()
        return [self._map_to_domain(document_db) for document_db in documents_db]

    async def update(self, document: Document) -> Document:
        """Update document in database."""
        document_db = self.db.query(DocumentDB).filter(DocumentDB.id == document.id).first()

        if not document_db:
            raise ValueError(f"Document {document.id} not found")

        document_db.status = document.status.value
        for name, value in self._columns(document).items():
            setattr(document_db, name, value)

        self.db.commit()
        self.db.refresh(document_db)

        logger.debug(f"Document {document.id} updated in database")
        return document

    async def delete(self, document_id: int) -> bool:
        """Delete document by ID."""
        document_db = self.db.query(DocumentDB).filter(DocumentDB.id == document_id).first()

        if not document_db:
            return False

        self.db.delete(document_db)
        self.db.commit()

        logger.info(f"Document {document_id} deleted from database")
        return True

    def _columns(self, document: Document) -> dict:
        return {name: getattr(document, name) for name in _FIELDS}

    def _map_to_domain(self, document_db: DocumentDB) -> Document:
        return Document(
            id=document_db.id,
            status=DocumentStatus.from_value(document_db.status) or DocumentStatus.PENDING,
            **{name: getattr(document_db, name) for name in _FIELDS}
        )
