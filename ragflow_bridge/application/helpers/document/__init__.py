from .status_updater import DocumentStatusUpdater
from .retry_handler import DocumentRetryHandler
from .upload_handler import DocumentUploadHandler
from .batch_deleter import DocumentBatchDeleter
from .chunk_syncer import DocumentChunkSyncer

__all__ = [
    "DocumentStatusUpdater",
    "DocumentRetryHandler",
    "DocumentUploadHandler",
    "DocumentBatchDeleter",
    "DocumentChunkSyncer",
]
