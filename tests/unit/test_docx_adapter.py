import pytest

from studybot.extraction.docx_adapter import DocxAdapter
from studybot.extraction.exceptions import ExtractionFailureError


class TestDocxAdapter:
    def test_joins_paragraphs_and_drops_styling(self, sample_docx_bytes: bytes) -> None:
        result = DocxAdapter().extract(sample_docx_bytes)
        assert result == "Cell Biology\nMitochondria are the powerhouse of the cell."

    def test_empty_document_returns_empty_string(self, empty_docx_bytes: bytes) -> None:
        assert DocxAdapter().extract(empty_docx_bytes) == ""

    def test_raises_on_invalid_bytes(self) -> None:
        with pytest.raises(ExtractionFailureError, match="python-docx"):
            DocxAdapter().extract(b"PK not really a zip")
