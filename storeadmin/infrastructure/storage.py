"""Local storage for uploaded images.

Files are written under ``settings.upload_dir`` with generated names and
served back as static files under ``settings.upload_url_prefix``.
"""

import time
from pathlib import Path
from uuid import uuid4

import structlog
from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from storeadmin.domain.exceptions import ValidationError
from storeadmin.infrastructure.config import Settings, settings

logger = structlog.get_logger()

ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png", ".gif", ".webp"}


class ImageStorage:
    """Stores uploaded images on the local filesystem.

    Example usage:
        storage = ImageStorage()
        url = await storage.save(upload)  # "/uploads/1718000000000-3f2a....png"
    """

    def __init__(self, config: Settings | None = None) -> None:
        """Initialize storage.

        Args:
            config: Settings to read the upload options from.
        """
        self.config = config or settings

    @property
    def directory(self) -> Path:
        """Directory uploaded files are written to."""
        return Path(self.config.upload_dir)

    def generate_name(self, extension: str) -> str:
        """Build a unique file name: ``<unix-ms>-<uuid hex><ext>``."""
        return f"{int(time.time() * 1000)}-{uuid4().hex}{extension}"

    def validate(self, filename: str | None, content_type: str | None) -> str:
        """Check an upload looks like an image.

        Args:
            filename: Client-supplied file name.
            content_type: Client-supplied MIME type.

        Returns:
            Lower-cased file extension.

        Raises:
            ValidationError: If the file is not an accepted image.
        """
        extension = Path(filename or "").suffix.lower()
        if extension not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                f"Unsupported image type '{extension or filename}'",
                details={"field": "image", "allowed": sorted(ALLOWED_EXTENSIONS)},
            )
        if not (content_type or "").startswith("image/"):
            raise ValidationError(
                "Uploaded file is not an image",
                details={"field": "image", "content_type": content_type},
            )
        return extension

    async def save(self, upload: UploadFile) -> str:
        """Validate and store an upload.

        Args:
            upload: Multipart file.

        Returns:
            Public URL of the stored file.

        Raises:
            ValidationError: Wrong type, empty or too large.
        """
        extension = self.validate(upload.filename, upload.content_type)
        data = await upload.read(self.config.upload_max_bytes + 1)
        if not data:
            raise ValidationError("Uploaded file is empty", details={"field": "image"})
        if len(data) > self.config.upload_max_bytes:
            raise ValidationError(
                f"Image exceeds {self.config.upload_max_bytes} bytes",
                details={"field": "image", "max_bytes": self.config.upload_max_bytes},
            )

        name = self.generate_name(extension)
        target = self.directory / name
        await run_in_threadpool(self._write, target, data)

        logger.info("Image uploaded", file_name=name, size=len(data))
        return f"{self.config.upload_url_prefix.rstrip('/')}/{name}"

    def _write(self, target: Path, data: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
