import pymupdf

from studybot.extraction.base import BaseTextExtractor
from studybot.extraction.exceptions import ExtractionFailureError
from studybot.extraction.pdfplumber_adapter import join_pages


class PyMuPdfAdapter(BaseTextExtractor):
    """Extracts text from PDF using PyMuPDF."""

    def extract(self, content: bytes) -> str:
        try:
            with pymupdf.open(stream=content, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                if doc.needs_pass:
                    raise ExtractionFailureError("PDF is password-protected")
                pages = [page.get_text() for page in doc]
            return join_pages(pages)
        except ExtractionFailureError:
            raise
        except Exception as exc:
            raise ExtractionFailureError(f"pymupdf extraction failed: {exc}") from exc
