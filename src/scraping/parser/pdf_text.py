"""Text extraction from PDF documents through the external pdftotext tool."""

import os
import tempfile

from src.config.settings import get_settings
from src.utils.errors import PdfTextExtractionError
from src.utils.shell import run_command


async def extract_pdf_text(pdf_bytes: bytes, *, source: str = "", url: str = "") -> str:
    """Write the PDF to a temporary file and run ``pdftotext <file> -`` on it.

    Layout and column structure are lost; callers get plain text lines. The
    temporary file is always removed, whatever the outcome.
    """
    settings = get_settings()
    fd, temp_path = tempfile.mkstemp(prefix="competitor-", suffix=".pdf")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(pdf_bytes)

        try:
            result = await run_command(
                settings.pdftotext_path,
                temp_path,
                "-",
                timeout=settings.pdftotext_timeout_seconds,
            )
        except FileNotFoundError as e:
            raise PdfTextExtractionError(
                f"pdftotext not found at {settings.pdftotext_path}", source=source, url=url
            ) from e
        except TimeoutError as e:
            raise PdfTextExtractionError(
                f"pdftotext timed out after {settings.pdftotext_timeout_seconds}s",
                source=source,
                url=url,
            ) from e

        if not result.ok:
            raise PdfTextExtractionError(
                f"pdftotext exited with code {result.returncode}", source=source, url=url
            )

        return result.stdout.decode("utf-8", errors="replace")
    finally:
        try:
            os.unlink(temp_path)
        except FileNotFoundError:
            pass
