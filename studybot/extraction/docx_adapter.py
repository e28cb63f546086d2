import io

import docx

from studybot.extraction.base import BaseTextExtractor
from studybot.extraction.exceptions import ExtractionFailureError


class DocxAdapter(BaseTextExtractor):
    """Flattens a DOCX document to paragraph text using python-docx."""

    def extract(self, content: bytes) -> str:
        try:
            document = docx.Document(io.BytesIO(content))
            paragraphs = [p.text.strip() for p in document.paragraphs]
            return "\n".join(p for p in paragraphs if p)
        except Exception as exc:
            raise ExtractionFailureError(f"python-docx extraction failed: {exc}") from exc
