import io

import docx
import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from studybot.context import UserContext


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Photosynthesis converts light energy")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def blank_middle_page_pdf_bytes() -> bytes:
    """Generate a three-page PDF whose middle page has no text."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "First page")
    c.showPage()
    c.showPage()
    c.drawString(72, 720, "Third page")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def encrypted_pdf_bytes() -> bytes:
    """Generate a PDF that needs a user password to open."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter, encrypt="secret")
    c.drawString(72, 720, "Locked content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_docx_bytes() -> bytes:
    """Generate a DOCX with a heading, a blank paragraph and styled text."""
    document = docx.Document()
    document.add_heading("Cell Biology", level=1)
    document.add_paragraph("")
    paragraph = document.add_paragraph("Mitochondria are the ")
    paragraph.add_run("powerhouse").bold = True
    paragraph.add_run(" of the cell.")
    buf = io.BytesIO()
    document.save(buf)
    return buf.getvalue()


@pytest.fixture()
def empty_docx_bytes() -> bytes:
    buf = io.BytesIO()
    docx.Document().save(buf)
    return buf.getvalue()


@pytest.fixture()
def user() -> UserContext:
    return UserContext(user_id="11111111-1111-1111-1111-111111111111", email="ada@example.com")


@pytest.fixture()
def other_user() -> UserContext:
    return UserContext(user_id="22222222-2222-2222-2222-222222222222", email="bob@example.com")
