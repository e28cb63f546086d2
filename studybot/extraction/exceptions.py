from studybot.errors import StudyBotError


class ExtractionError(StudyBotError):
    """Base exception for text extraction errors."""


class UnsupportedFormatError(ExtractionError):
    """Raised when an upload is not a PDF or DOCX document."""


class ExtractionFailureError(ExtractionError):
    """Raised when a supported document yields no usable text.

    Covers corrupt files, password-protected PDFs and documents whose
    pages carry no text layer (scans, blank pages).
    """
