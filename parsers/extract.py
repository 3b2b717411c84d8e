import io
import logging
from pathlib import Path
from typing import Optional, Union

import docx

from errors import FileExtractionError, UnsupportedFileTypeError
from schemas import ResumeData
from .pdf import pdf_to_text

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".pdf", ".docx", ".txt"}
CONTENT_TYPES = {
    "application/pdf": ".pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": ".docx",
    "text/plain": ".txt",
}


class ResumeTextExtractor:
    """Turns an uploaded resume (PDF, DOCX or TXT) into plain text."""

    encodings = ['utf-8', 'cp1252', 'latin-1']

    def detect_extension(self, file_name: str, content_type: Optional[str] = None) -> str:
        extension = Path(file_name or "").suffix.lower()
        if extension in SUPPORTED_EXTENSIONS:
            return extension
        if content_type in CONTENT_TYPES:
            return CONTENT_TYPES[content_type]
        raise UnsupportedFileTypeError("Please upload a PDF, DOCX, or TXT file")

    def read_pdf(self, data: bytes) -> str:
        return pdf_to_text(data)

    def read_docx(self, data: bytes) -> str:
        """Extract paragraphs and table cells from a DOCX document."""
        try:
            document = docx.Document(io.BytesIO(data))
        except Exception as e:
            logger.error(f"Error reading DOCX: {e}")
            raise FileExtractionError("Failed to parse DOCX file") from e

        lines = [p.text for p in document.paragraphs if p.text]
        for table in document.tables:
            for row in table.rows:
                cells = [cell.text for cell in row.cells if cell.text]
                if cells:
                    lines.append(" ".join(cells))
        return "\n".join(lines)

    def read_txt(self, data: bytes) -> str:
        """Decode a text file, trying a few common encodings"""
        for encoding in self.encodings:
            try:
                return data.decode(encoding)
            except UnicodeDecodeError:
                continue
        raise FileExtractionError("Unable to decode file with supported encodings")

    def extract_text(self, file_name: str, data: bytes, content_type: Optional[str] = None) -> str:
        extension = self.detect_extension(file_name, content_type)
        logger.info(f"Extracting {file_name} as {extension}")

        if extension == '.pdf':
            text = self.read_pdf(data)
        elif extension == '.docx':
            text = self.read_docx(data)
        else:
            text = self.read_txt(data)

        text = text.strip()
        if not text:
            raise FileExtractionError("No text could be extracted from the file")
        return text

    def extract(self, file_name: str, data: bytes, content_type: Optional[str] = None) -> ResumeData:
        text = self.extract_text(file_name, data, content_type)
        logger.info(f"Extracted {len(text)} characters from {file_name}")
        return ResumeData(text=text, file_name=file_name)

    def extract_path(self, file_path: Union[str, Path]) -> ResumeData:
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")
        return self.extract(path.name, path.read_bytes())


def resume_from_text(text: str, file_name: str = "pasted-resume.txt") -> ResumeData:
    """Intake for pasted resume text."""
    if not (text or "").strip():
        raise FileExtractionError("Resume text is empty")
    return ResumeData(text=text.strip(), file_name=file_name)
