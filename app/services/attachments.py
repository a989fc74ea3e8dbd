"""
Post attachment storage: batch validation, collision-free stored names and
keeping files under UPLOAD_DIR consistent with post_attachments rows.

Layout on disk: <UPLOAD_DIR>/posts/<post_id>/<stored_name>. The path kept on
each record is relative to UPLOAD_DIR.
"""

import logging
import secrets
import shutil
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from app.core.exceptions import BadRequestError, ConflictError
from app.models import PostAttachment
from app.repositories.posts import PostRepository

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = frozenset(
    {
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "text/plain",
    }
)
MAX_FILE_SIZE = 5 * 1024 * 1024  # 5 MiB per file
MAX_FILES = 10
# 256 possible suffixes per stem; give up well before cycling through them all.
MAX_NAME_ATTEMPTS = 64
DEFAULT_EXTENSION = "bin"
DEFAULT_STEM = "file"
# Keeps stored_name and original_name inside their String(255) columns.
MAX_NAME_LEN = 255
MAX_STEM_LEN = 200
MAX_EXTENSION_LEN = 20


class PathTraversalError(ValueError):
    """Raised when a path escapes the upload root."""


def safe_join(base: Path, relative: str) -> Path:
    """Join relative to base; the result must resolve inside base."""
    base_resolved = base.resolve()
    rel_path = Path(relative)
    if rel_path.is_absolute():
        raise PathTraversalError("absolute paths not allowed")
    candidate = (base_resolved / rel_path).resolve()
    if candidate == base_resolved or base_resolved in candidate.parents:
        return candidate
    raise PathTraversalError("path traversal detected")


@dataclass(frozen=True)
class IncomingFile:
    """One uploaded part as received from the client, before validation."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def _basename(filename: str | None) -> str:
    name = PurePosixPath((filename or "").replace("\\", "/")).name
    return name if name not in ("", ".", "..") else DEFAULT_STEM


def display_name(filename: str | None) -> str:
    """Client filename reduced to its last path segment, at most MAX_NAME_LEN characters."""
    return _basename(filename)[:MAX_NAME_LEN]


def stored_name_for(original_name: str, taken: set[str]) -> str:
    """
    "{stem}-{xx}.{ext}" where xx is two random hex characters, regenerated
    until the name is not in taken. The extension is kept as given; names
    without one get "bin". Long stems and extensions are cut short.
    """
    name = _basename(original_name)
    stem, dot, ext = name.rpartition(".")
    if not dot:
        stem, ext = name, DEFAULT_EXTENSION
    stem, ext = stem[:MAX_STEM_LEN], ext[:MAX_EXTENSION_LEN]
    for _ in range(MAX_NAME_ATTEMPTS):
        candidate = f"{stem}-{secrets.token_hex(1)}.{ext}"
        if candidate not in taken:
            return candidate
    raise ConflictError(f'Could not allocate a unique stored name for "{name}"')


def validate_batch(files: list[IncomingFile]) -> None:
    """Reject the whole batch on the first problem; nothing has been written yet."""
    if not files:
        raise BadRequestError("No files provided")
    if len(files) > MAX_FILES:
        raise BadRequestError(f"Maximum {MAX_FILES} files allowed per upload")
    for incoming in files:
        name = display_name(incoming.filename)
        if incoming.content_type not in ALLOWED_MIME_TYPES:
            raise BadRequestError(
                f'File "{name}" has unsupported type: {incoming.content_type}. '
                "Allowed: images, PDF, DOC, DOCX, TXT"
            )
        if incoming.size > MAX_FILE_SIZE:
            raise BadRequestError(f'File "{name}" exceeds maximum size of 5MB')


class AttachmentStore:
    def __init__(self, upload_root: Path, posts: PostRepository) -> None:
        self._root = Path(upload_root)
        self._posts = posts

    def resource_dir(self, post_id: int) -> Path:
        return safe_join(self._root, f"posts/{post_id}")

    def store_batch(self, post_id: int, files: list[IncomingFile]) -> list[PostAttachment]:
        """
        Validate, write and record a batch for an existing post.

        All-or-nothing: if any write or the record insert fails, the files
        written so far are removed and the error propagates.
        """
        validate_batch(files)
        directory = self.resource_dir(post_id)
        directory.mkdir(parents=True, exist_ok=True)

        taken = self._posts.stored_names(post_id)
        written: list[Path] = []
        records: list[PostAttachment] = []
        try:
            for incoming in files:
                stored_name = stored_name_for(incoming.filename, taken)
                taken.add(stored_name)
                target = directory / stored_name
                target.write_bytes(incoming.data)
                written.append(target)
                records.append(
                    PostAttachment(
                        post_id=post_id,
                        original_name=display_name(incoming.filename),
                        stored_name=stored_name,
                        path=str(PurePosixPath("posts", str(post_id), stored_name)),
                        mime_type=incoming.content_type,
                        size=incoming.size,
                    )
                )
            created = self._posts.create_attachments(records)
        except Exception:
            logger.warning("Upload failed for post_id=%s; removing %s written file(s)", post_id, len(written))
            for path in written:
                path.unlink(missing_ok=True)
            raise
        logger.info("Stored %s attachment(s) for post_id=%s", len(created), post_id)
        return created

    def remove_file(self, relative_path: str) -> None:
        """Unlink one payload; an already missing file is fine."""
        safe_join(self._root, relative_path).unlink(missing_ok=True)

    def remove_resource_dir(self, post_id: int) -> None:
        """Remove a post's whole attachment directory; a missing directory is fine."""
        try:
            shutil.rmtree(self.resource_dir(post_id))
        except FileNotFoundError:
            pass
