from .file_upload_validator import FileUploadValidator
from .document_validator import DocumentValidator

__all__ = ["FileUploadValidator", "DocumentValidator"]
