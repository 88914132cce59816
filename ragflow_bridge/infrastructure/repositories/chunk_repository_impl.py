from typing import List, Tuple
from sqlalchemy.orm import Session
from ..database.models import ChunkDB
from ...domain.entities.chunk import Chunk
from ...domain.repositories.chunk_repository import ChunkRepository
import logging

logger = logging.getLogger(__name__)


class SqlAlchemyChunkRepository(ChunkRepository):
    """SQLAlchemy implementation of ChunkRepository."""

    def __init__(self, db_session: Session):
        self.db = db_session

    async def upsert(self, chunk: Chunk) -> Chunk:
        """Insert or update chunk by document and remote ID."""
        chunk_db = self.db.query(ChunkDB).filter(
            ChunkDB.document_id == chunk.document_id,
            ChunkDB.remote_id == chunk.remote_id
        ).first()

        if not chunk_db:
            chunk_db = ChunkDB(document_id=chunk.document_id, remote_id=chunk.remote_id)
            self.db.add(chunk_db)

        chunk_db.content = chunk.content
        chunk_db.position = chunk.position
        chunk_db.size = chunk.size
        chunk_db.page_number = chunk.page_number
        chunk_db.positions = list(chunk.positions)
        chunk_db.keywords = list(chunk.keywords)
        chunk_db.available = chunk.available
        chunk_db.chunk_metadata = dict(chunk.metadata)
        chunk_db.last_sync_time = chunk.last_sync_time

        self.db.commit()
        self.db.refresh(chunk_db)

        chunk.id = chunk_db.id
        return chunk

    async def list_by_document(self, document_id: int, skip: int = 0, limit: int = 50) -> Tuple[List[Chunk], int]:
        """List chunks of a document by position."""
        query = self.db.query(ChunkDB).filter(ChunkDB.document_id == document_id)

        total = query.count()
        chunks_db = query.order_by(ChunkDB.position, ChunkDB.id).offset(skip).limit(limit).all()

        return [self._map_to_domain(chunk_db) for chunk_db in chunks_db], total

    async def delete_stale(self, document_id: int, keep_remote_ids: List[str]) -> int:
        """Delete chunks of a document that RAGFlow no longer lists."""
        query = self.db.query(ChunkDB).filter(ChunkDB.document_id == document_id)
        if keep_remote_ids:
            query = query.filter(ChunkDB.remote_id.notin_(keep_remote_ids))

        removed = query.delete(synchronize_session=False)
        self.db.commit()

        if removed:
            logger.info(f"Removed {removed} stale chunks of document {document_id}")
        return removed

    def _map_to_domain(self, chunk_db: ChunkDB) -> Chunk:
        return Chunk(
            id=chunk_db.id,
            remote_id=chunk_db.remote_id,
            document_id=chunk_db.document_id,
            content=chunk_db.content or "",
            position=chunk_db.position,
            size=chunk_db.size or 0,
            page_number=chunk_db.page_number,
            positions=chunk_db.positions or [],
            keywords=chunk_db.keywords or [],
            available=chunk_db.available,
            metadata=chunk_db.chunk_metadata or {},
            last_sync_time=chunk_db.last_sync_time
        )
