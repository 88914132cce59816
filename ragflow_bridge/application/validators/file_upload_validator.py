"""Upload validation"""

from pathlib import Path
from typing import Optional

from ...domain.entities.document import Document
from ...domain.exceptions import FileValidationError


class FileUploadValidator:
    """Validates uploaded files against the supported types.

    An empty or missing MIME type skips the MIME check; the extension is
    always checked.
    """

    def __init__(self, max_size: Optional[int] = None):
        self.max_size = max_size

    def validate(self, filename: Optional[str], mime_type: Optional[str], size: int) -> str:
        """Validate an upload and return its normalized extension."""
        if not filename:
            raise FileValidationError("Invalid file upload: missing filename")

        if size <= 0:
            raise FileValidationError(f"Invalid file upload: {filename} is empty")

        if self.max_size is not None and size > self.max_size:
            raise FileValidationError(
                f"File {filename} is too large: {size} bytes (max {self.max_size})"
            )

        extension = self.get_extension(filename)
        if not Document.is_file_type_supported(extension):
            raise FileValidationError(f"Unsupported file type: {extension}")

        if mime_type and not Document.is_mime_type_supported(mime_type):
            raise FileValidationError(f"Unsupported MIME type: {mime_type}")

        return extension

    @staticmethod
    def get_extension(filename: str) -> str:
        return Path(filename).suffix.lower().lstrip(".")
