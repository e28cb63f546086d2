import io

import pdfplumber

from studybot.extraction.base import BaseTextExtractor
from studybot.extraction.exceptions import ExtractionFailureError

PAGE_SEPARATOR = "\n\n"


def join_pages(pages: list[str]) -> str:
    """Join per-page text in page order, one blank line between pages."""
    return PAGE_SEPARATOR.join(page.strip() for page in pages if page and page.strip())


class PdfPlumberAdapter(BaseTextExtractor):
    """Extracts text from PDF using pdfplumber."""

    def extract(self, content: bytes) -> str:
        try:
            with pdfplumber.open(io.BytesIO(content)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
            return join_pages(pages)
        except ExtractionFailureError:
            raise
        except Exception as exc:
            raise ExtractionFailureError(f"pdfplumber extraction failed: {exc}") from exc
