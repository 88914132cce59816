from typing import Optional
import os
import logging

logger = logging.getLogger(__name__)


def remove_stored_file(file_path: Optional[str]) -> None:
    """Remove a stored upload if it is still on disk."""
    if not file_path or not os.path.exists(file_path):
        return
    try:
        os.remove(file_path)
    except OSError as e:
        logger.warning(f"Failed to remove stored file {file_path}: {e}")
