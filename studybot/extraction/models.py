from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath


class MediaType(str, Enum):
    """Declared media types an upload may carry."""

    PDF = "application/pdf"
    DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    PLAIN = "text/plain"

    @property
    def extension(self) -> str:
        return _EXTENSIONS[self]


_EXTENSIONS: dict[MediaType, str] = {
    MediaType.PDF: ".pdf",
    MediaType.DOCX: ".docx",
    MediaType.PLAIN: ".txt",
}


def detect_media_type(file_name: str, mime_type: str | None = None) -> MediaType | None:
    """Classify an upload by MIME type, falling back to the file extension.

    Returns None when neither matches a known media type.
    """
    if mime_type:
        normalized = mime_type.split(";", 1)[0].strip().lower()
        for media_type in MediaType:
            if media_type.value == normalized:
                return media_type
    suffix = PurePath(file_name).suffix.lower()
    for media_type, extension in _EXTENSIONS.items():
        if extension == suffix:
            return media_type
    return None


@dataclass(frozen=True)
class Document:
    """An uploaded file, alive only for the duration of one pipeline run."""

    file_name: str
    content: bytes
    media_type: MediaType | None = None

    @classmethod
    def from_upload(
        cls,
        file_name: str,
        content: bytes,
        mime_type: str | None = None,
    ) -> "Document":
        return cls(
            file_name=file_name,
            content=content,
            media_type=detect_media_type(file_name, mime_type),
        )

    @property
    def stem(self) -> str:
        """File name without extension, used as a default title."""
        return PurePath(self.file_name).stem
