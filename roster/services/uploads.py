"""Multipart form extraction for user uploads."""

import logging
import re
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path

from starlette.datastructures import FormData, UploadFile

from roster.errors import MalformedUploadError, StorageError

logger = logging.getLogger(__name__)

TEXT_CONTENT_TYPES = {"application/octet-stream", "text/plain"}
CHUNK_SIZE = 64 * 1024
MAX_FILENAME_LENGTH = 255

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def sanitize_filename(filename: str) -> str:
    """Reduce a client-supplied filename to a safe basename.

    Directory components are dropped, unsafe characters become underscores
    and leading dots are removed. Returns an empty string when nothing usable
    is left.
    """
    basename = filename.replace("\\", "/").rsplit("/", 1)[-1]
    cleaned = _UNSAFE_CHARS.sub("_", basename).lstrip(".")
    return cleaned[:MAX_FILENAME_LENGTH]


def _media_type(content_type: str | None) -> str:
    return (content_type or "").split(";", 1)[0].strip().lower()


@dataclass
class PendingFile:
    """An image part waiting to be written to storage."""

    field: str
    upload: UploadFile
    filename: str
    staged: Path | None = None


@dataclass
class ExtractedForm:
    """Text values and stored-file references keyed by field name."""

    values: dict[str, str] = field(default_factory=dict)
    files: list[PendingFile] = field(default_factory=list)


class UploadExtractor:
    """Split a multipart form into text fields and image files.

    Images are only written inside stored(), so a request that fails
    validation leaves nothing on disk.
    """

    def __init__(self, storage_dir: str | Path, url_prefix: str = "/storage"):
        self.storage_dir = Path(storage_dir)
        self.url_prefix = url_prefix.rstrip("/")

    def reference(self, filename: str) -> str:
        """Server-relative path a stored file is served from."""
        return f"{self.url_prefix}/{filename}"

    async def extract(self, form: FormData) -> ExtractedForm:
        """Classify every part of a parsed multipart form."""
        extracted = ExtractedForm()
        for name, value in form.multi_items():
            if isinstance(value, str):
                extracted.values[name] = value
                continue

            media_type = _media_type(value.content_type)
            if media_type in TEXT_CONTENT_TYPES:
                extracted.values[name] = await self._read_text(name, value)
            elif media_type.startswith("image/"):
                filename = sanitize_filename(value.filename or "")
                if not filename:
                    logger.info(f"Ignoring image part '{name}' without a usable filename")
                    continue
                extracted.files.append(PendingFile(name, value, filename))
                extracted.values[name] = self.reference(filename)
            else:
                logger.debug(f"Ignoring part '{name}' with content type '{media_type}'")
        return extracted

    async def _read_text(self, name: str, upload: UploadFile) -> str:
        body = await upload.read()
        try:
            return body.decode("utf-8")
        except UnicodeDecodeError:
            raise MalformedUploadError({name: ["must be UTF-8 text"]}) from None

    @asynccontextmanager
    async def stored(self, extracted: ExtractedForm) -> AsyncIterator[None]:
        """Keep pending images only if the enclosed block succeeds.

        Images are streamed to temporary files first. They replace their final
        names when the block exits cleanly and are removed when it raises, so
        a rejected request never overwrites an existing upload.
        """
        try:
            await self.stage(extracted)
            yield
        except BaseException:
            self.discard(extracted)
            raise
        self.commit(extracted)

    async def stage(self, extracted: ExtractedForm) -> None:
        """Stream pending images into temporary files in the storage directory."""
        for pending in extracted.files:
            await self._write(pending)

    def commit(self, extracted: ExtractedForm) -> list[Path]:
        """Move staged images onto their final names."""
        paths = []
        for pending in extracted.files:
            path = self.storage_dir / pending.filename
            try:
                pending.staged.replace(path)
            except OSError as e:
                logger.error(f"Failed to store upload '{pending.field}' at {path}: {e}")
                self.discard(extracted)
                raise StorageError() from e
            pending.staged = None
            logger.info(f"Stored upload '{pending.field}' at {path}")
            paths.append(path)
        return paths

    def discard(self, extracted: ExtractedForm) -> None:
        """Remove staged images that were never committed."""
        for pending in extracted.files:
            if pending.staged is None:
                continue
            try:
                pending.staged.unlink(missing_ok=True)
            except OSError as e:
                logger.warning(f"Could not remove staged upload {pending.staged}: {e}")
            pending.staged = None

    async def _write(self, pending: PendingFile) -> Path:
        staged = self.storage_dir / f".upload-{uuid.uuid4().hex}.part"
        try:
            self.storage_dir.mkdir(parents=True, exist_ok=True)
            await pending.upload.seek(0)
            with staged.open("wb") as out:
                while chunk := await pending.upload.read(CHUNK_SIZE):
                    out.write(chunk)
        except OSError as e:
            logger.error(f"Failed to stage upload '{pending.field}' at {staged}: {e}")
            staged.unlink(missing_ok=True)
            raise StorageError() from e
        pending.staged = staged
        logger.debug(f"Staged upload '{pending.field}' at {staged}")
        return staged
