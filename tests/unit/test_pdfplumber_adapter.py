import pytest

from studybot.extraction.exceptions import ExtractionFailureError
from studybot.extraction.pdfplumber_adapter import PdfPlumberAdapter, join_pages


class TestJoinPages:
    def test_joins_pages_with_blank_line(self) -> None:
        assert join_pages(["one", "two"]) == "one\n\ntwo"

    def test_skips_empty_pages_and_strips(self) -> None:
        assert join_pages(["  one \n", "", "   ", "\ntwo"]) == "one\n\ntwo"

    def test_no_pages_gives_empty_string(self) -> None:
        assert join_pages([]) == ""


class TestPdfPlumberAdapter:
    def test_extract_returns_text(self, sample_pdf_bytes: bytes) -> None:
        adapter = PdfPlumberAdapter()
        result = adapter.extract(sample_pdf_bytes)
        assert isinstance(result, str)
        assert "Photosynthesis converts light energy" in result

    def test_extract_multi_page_in_order(self, multi_page_pdf_bytes: bytes) -> None:
        adapter = PdfPlumberAdapter()
        result = adapter.extract(multi_page_pdf_bytes)
        assert result.index("Page one content") < result.index("Page two content")
        assert "\n\n" in result

    def test_extract_skips_blank_page(self, blank_middle_page_pdf_bytes: bytes) -> None:
        adapter = PdfPlumberAdapter()
        result = adapter.extract(blank_middle_page_pdf_bytes)
        assert result == "First page\n\nThird page"

    def test_extract_empty_pdf_returns_empty_string(self, empty_pdf_bytes: bytes) -> None:
        adapter = PdfPlumberAdapter()
        assert adapter.extract(empty_pdf_bytes) == ""

    def test_extract_raises_on_invalid_bytes(self) -> None:
        adapter = PdfPlumberAdapter()
        with pytest.raises(ExtractionFailureError, match="pdfplumber"):
            adapter.extract(b"not a pdf")

    def test_extract_raises_on_password_protected_pdf(self, encrypted_pdf_bytes: bytes) -> None:
        adapter = PdfPlumberAdapter()
        with pytest.raises(ExtractionFailureError):
            adapter.extract(encrypted_pdf_bytes)
