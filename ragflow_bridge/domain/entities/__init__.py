from .document_status import DocumentStatus
from .document import Document, SUPPORTED_FILE_TYPES, SUPPORTED_MIME_TYPES
from .dataset import Dataset, DatasetStatus, DatasetDocumentStats, format_size
from .chat import ChatAssistant, Conversation
from .chunk import Chunk, VirtualChunk
from .agent import Agent, AgentStatus

__all__ = [
    "DocumentStatus",
    "Document",
    "SUPPORTED_FILE_TYPES",
    "SUPPORTED_MIME_TYPES",
    "Dataset",
    "DatasetStatus",
    "DatasetDocumentStats",
    "format_size",
    "ChatAssistant",
    "Conversation",
    "VirtualChunk",
    "Chunk",
    "Agent",
    "AgentStatus",
]
