"""
Adoption Intake Backend: File Service Unit Tests
===================================================

What:  Path resolution against the storage root and best-effort removal.

Test Strategy:
    ✅ Relative paths resolve under the root
    ✅ Traversal and foreign absolute paths are refused
    ✅ Missing files and OS errors are reported as False, never raised
"""

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from intake.services.file_service import FileService


class TestResolve:

    def setup_method(self):
        self.root = "/srv/intake-storage"
        self.service = FileService(storage_root=self.root)

    def test_relative_path_joins_root(self):
        resolved = self.service.resolve("applications/3/skck.pdf")
        assert resolved == Path(self.root).resolve() / "applications/3/skck.pdf"

    def test_absolute_path_inside_root(self):
        inside = str(Path(self.root).resolve() / "applications/3/photo.jpg")
        assert self.service.resolve(inside) == Path(inside)

    def test_traversal_refused(self):
        assert self.service.resolve("../../etc/passwd") is None

    def test_absolute_path_outside_root_refused(self):
        assert self.service.resolve("/etc/passwd") is None


class TestRemoveFile:

    @pytest.mark.asyncio
    async def test_removes_existing_file(self, temp_storage):
        service = FileService(storage_root=temp_storage)
        target = Path(temp_storage) / "applications" / "1" / "skck.pdf"
        target.parent.mkdir(parents=True)
        target.write_bytes(b"test content")

        assert await service.remove_file("applications/1/skck.pdf") is True
        assert not target.exists()

    @pytest.mark.asyncio
    async def test_missing_file_returns_false(self, temp_storage):
        service = FileService(storage_root=temp_storage)
        assert await service.remove_file("applications/1/nonexistent.pdf") is False

    @pytest.mark.asyncio
    async def test_outside_root_left_alone(self, tmp_path, temp_storage):
        outsider = tmp_path / "outside.txt"
        outsider.write_text("keep me")
        service = FileService(storage_root=temp_storage)

        assert await service.remove_file(str(outsider)) is False
        assert outsider.exists()

    @pytest.mark.asyncio
    async def test_os_error_swallowed(self, temp_storage):
        service = FileService(storage_root=temp_storage)
        with patch(
            "intake.services.file_service.aiofiles.os.remove",
            new=AsyncMock(side_effect=PermissionError("read-only filesystem")),
        ):
            assert await service.remove_file("applications/1/skck.pdf") is False
