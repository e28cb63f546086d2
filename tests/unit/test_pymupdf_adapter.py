import pytest

from studybot.extraction.exceptions import ExtractionFailureError
from studybot.extraction.pymupdf_adapter import PyMuPdfAdapter


class TestPyMuPdfAdapter:
    def test_extract_returns_text(self, sample_pdf_bytes: bytes) -> None:
        result = PyMuPdfAdapter().extract(sample_pdf_bytes)
        assert "Photosynthesis converts light energy" in result

    def test_extract_multi_page(self, multi_page_pdf_bytes: bytes) -> None:
        result = PyMuPdfAdapter().extract(multi_page_pdf_bytes)
        assert result == "Page one content\n\nPage two content"

    def test_extract_empty_pdf_returns_empty_string(self, empty_pdf_bytes: bytes) -> None:
        assert PyMuPdfAdapter().extract(empty_pdf_bytes) == ""

    def test_extract_raises_on_invalid_bytes(self) -> None:
        with pytest.raises(ExtractionFailureError, match="pymupdf"):
            PyMuPdfAdapter().extract(b"not a pdf")

    def test_extract_raises_on_password_protected_pdf(self, encrypted_pdf_bytes: bytes) -> None:
        with pytest.raises(ExtractionFailureError, match="password-protected"):
            PyMuPdfAdapter().extract(encrypted_pdf_bytes)
