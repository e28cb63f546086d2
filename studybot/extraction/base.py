from abc import ABC, abstractmethod


class BaseTextExtractor(ABC):
    """Contract for all document text extraction adapters."""

    @abstractmethod
    def extract(self, content: bytes) -> str:
        """Extract plain text from raw document bytes.

        Args:
            content: Raw file content.

        Returns:
            Extracted text as a single normalized string. Empty when the
            document carries no text layer.

        Raises:
            ExtractionFailureError: if the document cannot be read.
        """
