import io

import docx
import fitz
import pytest

from errors import FileExtractionError, UnsupportedFileTypeError
from parsers.extract import ResumeTextExtractor, resume_from_text
from parsers.jd_extract import clean_job_description, guess_title


@pytest.fixture
def extractor():
    return ResumeTextExtractor()


def docx_bytes(*paragraphs):
    document = docx.Document()
    for p in paragraphs:
        document.add_paragraph(p)
    table = document.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Skills"
    table.rows[0].cells[1].text = "React, Node"
    buf = io.BytesIO()
    document.save(buf)
    return buf.getvalue()


def pdf_bytes(text):
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


def test_txt(extractor):
    resume = extractor.extract("cv.txt", "Jane Doe\nReact developer\n".encode("utf-8"))
    assert resume.text == "Jane Doe\nReact developer"
    assert resume.file_name == "cv.txt"


def test_txt_cp1252_fallback(extractor):
    assert extractor.extract_text("cv.txt", "José – React".encode("cp1252")) == "José – React"


def test_txt_latin1_last_resort(extractor):
    # 0x81 is unmapped in cp1252
    assert extractor.extract_text("cv.txt", b"Jos\xe9 \x81") == "José \x81"


def test_docx(extractor):
    text = extractor.extract_text("cv.docx", docx_bytes("Jane Doe", "Senior React developer"))
    assert "Senior React developer" in text
    assert "Skills React, Node" in text


def test_pdf(extractor):
    text = extractor.extract_text("cv.pdf", pdf_bytes("Senior React developer"))
    assert "Senior React developer" in text


def test_content_type_used_when_extension_missing(extractor):
    assert extractor.detect_extension("resume", "application/pdf") == ".pdf"


@pytest.mark.parametrize("name", ["cv.png", "cv.doc", "cv"])
def test_unsupported_type(extractor, name):
    with pytest.raises(UnsupportedFileTypeError, match="PDF, DOCX, or TXT"):
        extractor.extract(name, b"data")


def test_empty_file(extractor):
    with pytest.raises(FileExtractionError):
        extractor.extract("cv.txt", b"   \n")


def test_corrupt_docx(extractor):
    with pytest.raises(FileExtractionError, match="DOCX"):
        extractor.extract("cv.docx", b"not a zip")


def test_extract_path(extractor, tmp_path):
    path = tmp_path / "resume.txt"
    path.write_text("Python and React")
    assert extractor.extract_path(path).text == "Python and React"


def test_pasted_resume():
    assert resume_from_text("  React dev  ").text == "React dev"
    with pytest.raises(FileExtractionError):
        resume_from_text("   ")


def test_clean_job_description():
    raw = "Senior Engineer\r\n\r\n\r\n\r\n•  React\t\tNode  –  AWS"
    assert clean_job_description(raw) == "Senior Engineer\n\n- React Node - AWS"


@pytest.mark.parametrize("text,title", [
    ("Looking for a senior React/Node engineer", "senior React/Node engineer"),
    ("Job Title: Data Analyst\nWe need SQL.", "Data Analyst"),
    ("Our team needs a Staff Backend Engineer with Go.", "Staff Backend Engineer"),
    ("Help wanted.", "General Role"),
])
def test_guess_title(text, title):
    assert guess_title(text) == title
