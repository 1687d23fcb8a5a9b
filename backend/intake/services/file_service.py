"""
Adoption Intake Backend: Document File Service
=================================================

What:  Locates and removes the stored file behind a document record.
How:   Document paths are opaque locators written by the uploader. Relative
       paths resolve under STORAGE_ROOT; absolute paths are accepted only if
       they fall inside it. Removal runs through aiofiles so the event loop
       is never blocked on disk I/O.
Who:   Called by DocumentService after a document row has been deleted.

Removal is best-effort. A missing file, a permission problem or a path
outside the storage root is logged and reported as False, never raised:
the metadata deletion has already happened and stays.

Storage Layout (written by the uploader, not by this service):
    storage/
    └── applications/
        └── 42/
            ├── skck.pdf
            └── health-certificate.pdf
"""

import logging
from pathlib import Path
from typing import Optional

import aiofiles.os

from intake.config import settings

logger = logging.getLogger(__name__)


class FileService:
    """
    Resolves document locators against the storage root and deletes files.
    """

    def __init__(self, storage_root: Optional[str] = None):
        """
        Args:
            storage_root: Override the configured root (used in tests).
        """
        self.storage_root = Path(storage_root or settings.storage_root).resolve()

    def resolve(self, file_path: str) -> Optional[Path]:
        """
        Absolute location of `file_path`, or None if it escapes the root.

        Blocks `../` traversal and absolute paths pointing elsewhere on the
        host, since document paths come from API clients.
        """
        candidate = Path(file_path)
        if not candidate.is_absolute():
            candidate = self.storage_root / candidate
        candidate = candidate.resolve()

        if candidate != self.storage_root and self.storage_root not in candidate.parents:
            return None
        return candidate

    async def remove_file(self, file_path: str) -> bool:
        """
        Delete the file behind a document record.

        Returns:
            True if a file was removed, False otherwise. Never raises.
        """
        try:
            path = self.resolve(file_path)
        except (OSError, ValueError) as e:
            logger.warning("Cannot resolve backing file %r: %s", file_path, str(e))
            return False

        if path is None:
            logger.warning(
                "Refusing to delete %s: outside storage root %s",
                file_path,
                self.storage_root,
            )
            return False

        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            logger.info("Backing file already gone: %s", file_path)
            return False
        except OSError as e:
            logger.warning("Failed to delete backing file %s: %s", file_path, str(e))
            return False

        logger.info("Deleted backing file: %s", file_path)
        return True


file_service = FileService()
