"""
HotOrNot Backend — Upload Service
===================================

What:  Accepts an uploaded image, writes it to the upload directory, and
       registers a new Image in the store.
How:   Validates presence, extension, declared content type and size, then
       writes with async file I/O and inserts the image row.
Who:   Called by POST /api/upload.

Storage Layout:
    uploads/
    ├── 1718000000000-3f9a1c2e-cat.jpg
    └── 1718000004211-b07d55aa-dog.png

    <epoch millis>-<8 hex chars>-<sanitized original name>. The original
    name is reduced to its last path component and to [A-Za-z0-9._-], so a
    client cannot steer the write outside the upload directory.

Failure Handling:
    save_upload() commits the image row itself. If the insert or the commit
    fails, the file just written is removed before the error propagates, so
    no orphan files accumulate.
"""

import logging
import os
import re
import time
import uuid
from pathlib import Path
from typing import Iterable, Optional

import aiofiles
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hotornot.config import settings
from hotornot.exceptions import FileStorageError, StorageError, UploadError
from hotornot.schemas.image import UploadResponse
from hotornot.services.image_store import ImageStore, image_store

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class UploadService:
    """
    Manages the upload lifecycle.

    Lifecycle of an uploaded file:
        1. Route reads the multipart field `image` → save_upload()
        2. Presence check (no file / empty file → UploadError)
        3. Extension and content-type check
        4. Size check
        5. File written under a generated name
        6. Image row inserted with url = <prefix>/<name>
        7. On insert failure: cleanup_file() removes the written file
    """

    def __init__(
        self,
        upload_dir: Optional[str] = None,
        url_prefix: Optional[str] = None,
        max_file_size: Optional[int] = None,
        allowed_extensions: Optional[Iterable[str]] = None,
        store: Optional[ImageStore] = None,
    ):
        """
        Args:
            upload_dir: Override settings.upload_dir (used in tests).
            url_prefix: Override settings.uploads_url_prefix.
            max_file_size: Override settings.max_file_size (bytes).
            allowed_extensions: Override settings.allowed_extensions_set.
            store: ImageStore to register uploads in.
        """
        self.upload_dir = Path(upload_dir or settings.upload_dir).resolve()
        self.url_prefix = (url_prefix or settings.uploads_url_prefix).rstrip("/")
        self.max_file_size = max_file_size or settings.max_file_size
        self.allowed_extensions = (
            {ext.lower() for ext in allowed_extensions}
            if allowed_extensions is not None
            else settings.allowed_extensions_set
        )
        self.store = store or image_store
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        logger.info("UploadService initialized with upload_dir=%s", self.upload_dir)

    # ── Validation ────────────────────────────────────────────────────────

    def validate_presence(self, filename: Optional[str], content: Optional[bytes]) -> None:
        if not filename:
            raise UploadError(message="No file uploaded")
        if not content:
            raise UploadError(
                message="The uploaded file is empty",
                context={"filename": filename},
            )

    def validate_extension(self, filename: str) -> str:
        """
        Returns the normalized extension (lowercase with dot).
        Raises UploadError if the extension is not allowed.
        """
        ext = Path(filename).suffix.lower()
        if ext not in self.allowed_extensions:
            raise UploadError(
                message=(
                    f"File type '{ext or filename}' is not supported. "
                    f"Allowed types: {', '.join(sorted(self.allowed_extensions))}"
                ),
                context={"extension": ext, "allowed": sorted(self.allowed_extensions)},
            )
        return ext

    def validate_content_type(self, content_type: Optional[str]) -> None:
        """Rejects a declared non-image type; a missing header is accepted."""
        if content_type and not content_type.lower().startswith("image/"):
            raise UploadError(
                message=f"Content type '{content_type}' is not an image",
                context={"content_type": content_type},
            )

    def validate_size(self, content_length: Optional[int], actual_size: int) -> None:
        """
        Checks the declared Content-Length first, then the bytes received
        (clients can send a wrong header).
        """
        max_mb = self.max_file_size / (1024 * 1024)

        if content_length and content_length > self.max_file_size:
            raise UploadError(
                message=f"File size exceeds maximum of {max_mb:.0f}MB. Please upload a smaller image.",
                context={"max_size_mb": max_mb, "reported_size": content_length},
            )

        if actual_size > self.max_file_size:
            raise UploadError(
                message=f"File size ({actual_size / (1024 * 1024):.1f}MB) exceeds maximum of {max_mb:.0f}MB.",
                context={"max_size_mb": max_mb, "actual_size": actual_size},
            )

    # ── Storage ───────────────────────────────────────────────────────────

    @staticmethod
    def sanitize_filename(filename: str) -> str:
        # Backslashes too: Windows clients send full paths
        name = Path(filename.replace("\\", "/")).name
        name = _UNSAFE_CHARS.sub("_", name).lstrip(".")
        return name or "upload"

    def generate_filename(self, original: str) -> str:
        millis = int(time.time() * 1000)
        return f"{millis}-{uuid.uuid4().hex[:8]}-{self.sanitize_filename(original)}"

    def public_url(self, stored_name: str) -> str:
        return f"{self.url_prefix}/{stored_name}"

    async def store_file(self, content: bytes, original_filename: str) -> Path:
        """
        Write content to the upload directory under a generated name.

        Raises:
            FileStorageError if the directory or file cannot be written.
        """
        path = self.upload_dir / self.generate_filename(original_filename)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store file at %s: %s", path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded image. Please try again.",
                context={"path": str(path), "os_error": str(e)},
            )

        logger.info("File stored: %s (%d bytes)", path.name, len(content))
        return path

    async def cleanup_file(self, file_path: str) -> None:
        """
        Best-effort removal of a stored file.

        Missing files are ignored; other failures are logged, not raised,
        because the original error is the one the client needs to see.
        """
        try:
            path = Path(file_path)
            if path.exists():
                os.remove(path)
                logger.info("Cleaned up file: %s", path.name)
            else:
                logger.debug("Cleanup: file already gone: %s", path.name)
        except OSError as e:
            logger.warning("Failed to clean up file %s: %s", file_path, str(e))

    # ── Workflow ──────────────────────────────────────────────────────────

    def precheck(
        self,
        filename: Optional[str],
        content_length: Optional[int],
        content_type: Optional[str] = None,
    ) -> None:
        """
        Checks that need only the multipart headers, run before the body is
        read into memory. A missing filename is left to save_upload().
        """
        if not filename:
            return
        self.validate_extension(filename)
        self.validate_content_type(content_type)
        if content_length:
            self.validate_size(content_length, content_length)

    async def save_upload(
        self,
        db: AsyncSession,
        filename: Optional[str],
        content: Optional[bytes],
        content_length: Optional[int] = None,
        content_type: Optional[str] = None,
    ) -> UploadResponse:
        """
        Validate, store and register one uploaded image.

        The image row is committed here rather than by the request session,
        so a failing commit still removes the file just written.

        Returns:
            UploadResponse with the new image id and its public URL.

        Raises:
            UploadError:      missing, empty, oversized or non-image file
            FileStorageError: the file could not be written
            StorageError:     the image row could not be inserted or committed
        """
        self.validate_presence(filename, content)
        self.validate_extension(filename)
        self.validate_content_type(content_type)
        self.validate_size(content_length, len(content))

        path = await self.store_file(content, filename)
        url = self.public_url(path.name)

        try:
            image = await self.store.create_image(db, filename=path.name, url=url)
            await db.commit()
        except SQLAlchemyError as e:
            await self.cleanup_file(str(path))
            logger.error("Failed to commit image %s: %s", path.name, str(e))
            raise StorageError(
                message="Could not register the uploaded image. Please try again.",
                context={"filename": path.name, "error_type": type(e).__name__},
            )
        except Exception:
            await self.cleanup_file(str(path))
            raise

        return UploadResponse(id=image.id, url=url)


upload_service = UploadService()
