"""Domain and integration errors"""

from typing import Any, Optional


class RAGFlowApiError(Exception):
    """Error returned by, or while talking to, the RAGFlow API."""

    def __init__(self, message: str, code: Optional[int] = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details

    def __str__(self) -> str:
        if self.code is not None:
            return f"{self.message} (code {self.code})"
        return self.message


class DocumentOperationError(Exception):
    """Document operation could not be carried out."""

    @classmethod
    def dataset_not_found(cls, dataset_id: Any) -> "DocumentOperationError":
        return cls(f"Dataset {dataset_id} not found or not synced to RAGFlow")

    @classmethod
    def upload_failed(cls, reason: str) -> "DocumentOperationError":
        return cls(f"Document upload failed: {reason}")


class ResourceNotFoundError(Exception):
    """Local record does not exist."""
    pass


class FileValidationError(ValueError):
    """Uploaded file was rejected."""
    pass


class InvalidCompletionRequest(ValueError):
    """Chat completion request rejected before reaching RAGFlow."""

    def __init__(self, message: str, param: Optional[str] = None):
        super().__init__(message)
        self.param = param
