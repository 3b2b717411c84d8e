import fitz  # PyMuPDF
import io
import logging
from PyPDF2 import PdfReader

from errors import FileExtractionError

logger = logging.getLogger(__name__)


def pdf_to_text(source) -> str:
    """
    Extract text from a PDF.
    Works with file paths (str), raw bytes, and in-memory file-like objects (uploads).
    PyMuPDF first, PyPDF2 as fallback.
    """
    if isinstance(source, str):
        with open(source, "rb") as f:
            data = f.read()
    elif isinstance(source, (bytes, bytearray)):
        data = bytes(source)
    else:
        data = source.read()

    text = ""
    try:
        doc = fitz.open(stream=data, filetype="pdf")
        text = "\n".join(page.get_text("text") or "" for page in doc)
        doc.close()
        if text.strip():
            logger.info(f"Extracted {len(text)} characters via PyMuPDF")
            return text.strip()
    except Exception as e:
        logger.warning(f"PyMuPDF extraction failed: {e}")

    try:
        reader = PdfReader(io.BytesIO(data))
        text = "\n".join(page.extract_text() or "" for page in reader.pages)
        if text.strip():
            logger.info(f"Extracted {len(text)} characters via PyPDF2 fallback")
            return text.strip()
    except Exception as e:
        logger.error(f"PyPDF2 extraction failed: {e}")
        raise FileExtractionError(f"Failed to parse PDF file: {e}") from e

    raise FileExtractionError("No text could be extracted from the PDF")
