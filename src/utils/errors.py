class ScrapeError(Exception):
    """Base exception for competitor scraping errors."""

    def __init__(self, message: str, source: str = "", url: str = ""):
        self.source = source
        self.url = url
        super().__init__(message)


class FetchError(ScrapeError):
    """Raised when a fetch fails at the network level or with a non-2xx status."""

    def __init__(self, message: str, status_code: int = 0, **kwargs: str):
        self.status_code = status_code
        super().__init__(message, **kwargs)


class NotPdfError(ScrapeError):
    """Raised when the resolved price list is still not a PDF after re-resolution."""


class PdfTextExtractionError(ScrapeError):
    """Raised when the pdftotext subprocess is missing or fails."""
