# gallery/utils/file_upload.py

import logging
import re
import secrets
import time
from pathlib import Path
from typing import Optional, Union

from fastapi import HTTPException

from gallery.core.config import settings

logger = logging.getLogger(__name__)

STORAGE_URL_PREFIX = "/storage"
STORAGE_FOLDERS = ("artworks", "thumbnails")


class FileUploadService:
    """Service to store artwork files under the storage directory."""

    def __init__(self, base_storage_path: Union[str, Path, None] = None):
        """
        Initialize the file upload service.

        Args:
            base_storage_path: Base directory for file storage (defaults to
                the configured storage path, which is also mounted at /storage)
        """
        self.base_storage_path = Path(base_storage_path or settings.storage_path)

    def _ensure_storage_directories(self):
        """Create storage directories if they don't exist."""
        for folder in STORAGE_FOLDERS:
            (self.base_storage_path / folder).mkdir(parents=True, exist_ok=True)

    @staticmethod
    def sanitize_filename(filename: str) -> str:
        """Keep only filesystem-safe characters, max 100 chars."""
        cleaned = re.sub(r"[^a-zA-Z0-9._-]", "_", filename or "")
        cleaned = re.sub(r"_{2,}", "_", cleaned)
        return cleaned[:100]

    @staticmethod
    def generate_secure_filename(file_hash: str, extension: str) -> str:
        """artwork_<ms timestamp>_<hash prefix>_<random hex><extension>"""
        timestamp = int(time.time() * 1000)
        return f"artwork_{timestamp}_{file_hash[:8]}_{secrets.token_hex(4)}{extension}"

    @staticmethod
    def public_url(folder: str, filename: str) -> str:
        return f"{STORAGE_URL_PREFIX}/{folder}/{filename}"

    def resolve_stored_path(self, url: str) -> Optional[Path]:
        """
        Map a public /storage URL (or a storage-relative path) to a file
        inside the storage root. Returns None when it would leave the root.
        """
        relative = url or ""
        if relative.startswith(f"{STORAGE_URL_PREFIX}/"):
            relative = relative[len(STORAGE_URL_PREFIX) + 1 :]
        relative = relative.lstrip("/\\")

        root = self.base_storage_path.resolve()
        path = (root / relative).resolve()
        if path == root or not path.is_relative_to(root):
            return None
        return path

    def is_stored_url(self, url: str, folder: str) -> bool:
        """True for a /storage/<folder>/<name> URL that stays inside that folder."""
        if not (url or "").startswith(f"{STORAGE_URL_PREFIX}/{folder}/"):
            return False
        path = self.resolve_stored_path(url)
        return path is not None and path.parent == (self.base_storage_path.resolve() / folder)

    def save_bytes(self, contents: bytes, folder: str, filename: str) -> str:
        """
        Write raw bytes to storage/<folder>/<filename>.

        Returns:
            Public URL of the file (e.g. '/storage/artworks/x.webp')

        Raises:
            HTTPException: If the file cannot be written
        """
        self._ensure_storage_directories()
        folder_path = self.base_storage_path / folder
        folder_path.mkdir(parents=True, exist_ok=True)

        try:
            with open(folder_path / filename, "wb") as f:
                f.write(contents)
        except OSError as e:
            logger.error(f"Error saving file {folder}/{filename}: {e}")
            raise HTTPException(status_code=500, detail="Error saving file")

        return self.public_url(folder, filename)

    def delete_file(self, url: str) -> bool:
        """
        Delete a stored file.

        Args:
            url: Public URL or storage-relative path of the file

        Returns:
            True if deleted successfully, False otherwise
        """
        file_path = self.resolve_stored_path(url)
        if file_path is None:
            logger.warning(f"Refusing to delete path outside storage: {url}")
            return False

        try:
            if file_path.is_file():
                file_path.unlink()
                return True
            return False
        except OSError as e:
            logger.warning(f"Could not delete {url}: {e}")
            return False


# Create a singleton instance
file_upload_service = FileUploadService()
