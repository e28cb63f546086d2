import uuid
from pathlib import Path, PurePosixPath

from studybot.context import UserContext
from studybot.database.exceptions import PersistenceError
from studybot.extraction.models import Document
from studybot.logging.logger import Log


def stored_object_path(user_id: str, object_id: str, extension: str) -> str:
    """Build the relative object path: {user_id}/{object_id}{extension}"""
    return str(PurePosixPath(user_id) / f"{object_id}{extension}")


class FileStore:
    """Keeps the original bytes of uploads under a per-user prefix."""

    FILES_ROOT = Path("/app/files")

    def __init__(self, files_root: Path | None = None) -> None:
        self._files_root = files_root if files_root is not None else self.FILES_ROOT

    def save(self, user: UserContext, document: Document) -> str:
        """Write *document* bytes and return the path relative to the store root."""
        extension = document.media_type.extension if document.media_type else ""
        relative = stored_object_path(user.user_id, str(uuid.uuid4()), extension)
        path = self._files_root / relative
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(document.content)
        except OSError as exc:
            raise PersistenceError(f"Could not store '{document.file_name}': {exc}") from exc
        Log.info(f"Stored {len(document.content)} bytes at {relative}")
        return relative

    def load(self, user: UserContext, relative_path: str) -> bytes:
        """Read stored bytes.

        Raises:
            PersistenceError: if the path is outside the caller's prefix or
                the object does not exist.
        """
        path = self._resolve_path(user, relative_path)
        if not path.exists():
            raise PersistenceError(f"File not found: {relative_path}")
        return path.read_bytes()

    def delete(self, user: UserContext, relative_path: str) -> None:
        """Remove a stored object; a missing object is not an error."""
        path = self._resolve_path(user, relative_path)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise PersistenceError(f"Could not delete {relative_path}: {exc}") from exc
        Log.info(f"Deleted stored object {relative_path}")

    def _resolve_path(self, user: UserContext, relative_path: str) -> Path:
        prefix = (self._files_root / user.user_id).resolve()
        path = (self._files_root / relative_path).resolve()
        if not path.is_relative_to(prefix) or path == prefix:
            raise PersistenceError(f"Path {relative_path} is outside the caller's storage")
        return path
