from studybot.config.settings import Settings
from studybot.errors import ConfigurationError
from studybot.extraction.base import BaseTextExtractor
from studybot.extraction.docx_adapter import DocxAdapter
from studybot.extraction.extractor import TextExtractor
from studybot.extraction.pdfplumber_adapter import PdfPlumberAdapter
from studybot.extraction.pymupdf_adapter import PyMuPdfAdapter


class TextExtractorFactory:
    """Creates the text extractor with the configured PDF engine."""

    PDF_ADAPTERS: dict[str, type[BaseTextExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> TextExtractor:
        return TextExtractor(
            pdf_extractor=cls.create_pdf_extractor(settings),
            docx_extractor=DocxAdapter(),
            max_upload_bytes=settings.max_upload_bytes,
        )

    @classmethod
    def create_pdf_extractor(cls, settings: Settings) -> BaseTextExtractor:
        engine = settings.pdf_engine.lower()
        adapter_cls = cls.PDF_ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ConfigurationError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.PDF_ADAPTERS)}"
            )
        return adapter_cls()
