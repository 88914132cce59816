from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Dict, Any, List

from .base import isoformat_or_none


@dataclass
class VirtualChunk:
    """A chunk returned by RAGFlow; never persisted locally."""
    id: Optional[str] = None
    dataset_id: Optional[str] = None
    document_id: Optional[str] = None
    content: Optional[str] = None
    title: Optional[str] = None
    keywords: Optional[str] = None
    similarity_score: Optional[float] = None
    position: Optional[int] = None
    length: Optional[int] = None
    status: Optional[str] = None
    language: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: Dict[str, Any], dataset_id: Optional[str] = None) -> "VirtualChunk":
        content = data.get("content") or data.get("content_with_weight")
        keywords = data.get("important_keywords") or data.get("keywords")
        if isinstance(keywords, list):
            keywords = ",".join(str(keyword) for keyword in keywords)

        positions = data.get("positions")
        position = data.get("position")
        if position is None and isinstance(positions, list) and positions:
            first = positions[0]
            position = first[0] if isinstance(first, list) and first else None

        return cls(
            id=data.get("id") or data.get("chunk_id"),
            dataset_id=data.get("dataset_id") or data.get("kb_id") or dataset_id,
            document_id=data.get("document_id") or data.get("doc_id"),
            content=content,
            title=data.get("document_keyword") or data.get("docnm_kwd"),
            keywords=keywords,
            similarity_score=data.get("similarity"),
            position=position,
            length=len(content) if content else 0,
            status="available" if data.get("available", True) else "unavailable",
            language=data.get("language"),
            metadata={
                key: data[key]
                for key in ("vector_similarity", "term_similarity", "image_id", "positions")
                if key in data
            },
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "dataset_id": self.dataset_id,
            "document_id": self.document_id,
            "content": self.content,
            "title": self.title,
            "keywords": self.keywords,
            "similarity_score": self.similarity_score,
            "position": self.position,
            "length": self.length,
            "status": self.status,
            "language": self.language,
            "metadata": dict(self.metadata),
        }


@dataclass
class Chunk:
    """Local mirror of a chunk of an uploaded document."""
    remote_id: str
    document_id: int
    id: Optional[int] = None
    content: str = ""
    position: Optional[int] = None
    size: int = 0
    page_number: Optional[int] = None
    positions: List[Any] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)
    available: bool = True
    metadata: Dict[str, Any] = field(default_factory=dict)
    last_sync_time: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any], document_id: int, position: Optional[int] = None) -> "Chunk":
        """Build a chunk from an entry of the RAGFlow chunk list."""
        content = data.get("content") or data.get("content_with_weight") or ""
        positions = data.get("positions") if isinstance(data.get("positions"), list) else []
        page_number = None
        if positions and isinstance(positions[0], list) and positions[0]:
            page_number = positions[0][0]

        keywords = data.get("important_keywords") or []
        if isinstance(keywords, str):
            keywords = [keyword.strip() for keyword in keywords.split(",") if keyword.strip()]

        return cls(
            remote_id=str(data.get("id") or data.get("chunk_id") or ""),
            document_id=document_id,
            content=content,
            position=position,
            size=len(content),
            page_number=page_number,
            positions=positions,
            keywords=list(keywords),
            available=bool(data.get("available", True)),
            metadata={key: data[key] for key in ("image_id", "questions", "docnm_kwd") if data.get(key)},
            last_sync_time=datetime.utcnow(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "remoteId": self.remote_id,
            "documentId": self.document_id,
            "content": self.content,
            "position": self.position,
            "size": self.size,
            "pageNumber": self.page_number,
            "keywords": list(self.keywords),
            "available": self.available,
            "metadata": dict(self.metadata),
            "lastSyncTime": isoformat_or_none(self.last_sync_time),
        }
