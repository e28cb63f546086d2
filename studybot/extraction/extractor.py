from studybot.extraction.base import BaseTextExtractor
from studybot.extraction.exceptions import ExtractionFailureError, UnsupportedFormatError
from studybot.extraction.models import Document, MediaType
from studybot.logging.logger import Log


class TextExtractor:
    """Routes an uploaded document to the adapter for its media type."""

    UPLOAD_MEDIA_TYPES: frozenset[MediaType] = frozenset({MediaType.PDF, MediaType.DOCX})

    def __init__(
        self,
        pdf_extractor: BaseTextExtractor,
        docx_extractor: BaseTextExtractor,
        max_upload_bytes: int,
    ) -> None:
        self._adapters: dict[MediaType, BaseTextExtractor] = {
            MediaType.PDF: pdf_extractor,
            MediaType.DOCX: docx_extractor,
        }
        self._max_upload_bytes = max_upload_bytes

    def validate(self, document: Document) -> MediaType:
        """Check that *document* is an acceptable upload.

        Raises:
            UnsupportedFormatError: if the media type is not PDF/DOCX or the
                file exceeds the upload size limit.
        """
        media_type = document.media_type
        if media_type not in self.UPLOAD_MEDIA_TYPES:
            raise UnsupportedFormatError(
                f"'{document.file_name}' is not supported. Please upload a PDF or DOCX file"
            )
        if len(document.content) > self._max_upload_bytes:
            raise UnsupportedFormatError(
                f"'{document.file_name}' exceeds the upload limit of "
                f"{self._max_upload_bytes} bytes"
            )
        return media_type

    def extract(self, document: Document) -> str:
        """Return the plain text of *document*.

        Raises:
            UnsupportedFormatError: see validate().
            ExtractionFailureError: if the document is unreadable or has no text.
        """
        media_type = self.validate(document)
        text = self._adapters[media_type].extract(document.content)
        if not text:
            raise ExtractionFailureError(
                f"No extractable text in '{document.file_name}'. "
                "It may be scanned or empty; paste the text instead"
            )
        Log.info(f"Extracted {len(text)} chars from '{document.file_name}'")
        return text
