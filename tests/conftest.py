# tests/conftest.py

import pikepdf
import pytest

from .pdf_factory import add_page, text_block

HEADER = "DOE, JANE (DOB: 02/02/1980 ID: 456)"


##########
# FIXTURES
##########


@pytest.fixture
def create_pdf():
    """Factory fixture to create a 1-page PDF (Helvetica as /F1) with given content."""

    def _make(content_stream_bytes: bytes, fonts=None):
        pdf = pikepdf.new()
        add_page(pdf, content_stream_bytes, fonts=fonts)
        return pdf

    return _make


@pytest.fixture
def chart_pdf_path(tmp_path):
    """A two-page patient chart with the header line in the header region."""
    pdf = pikepdf.new()
    add_page(
        pdf,
        text_block(
            (770, "Patient: "),
            (742, HEADER),
            (700, " Visit notes: DOE, JANE reported..."),
        ),
    )
    add_page(pdf, text_block((700, "Follow-up for Jane Doe. No change.")))
    path = tmp_path / "chart.pdf"
    pdf.save(path)
    return path


@pytest.fixture
def page_text():
    """Returns a function reading the visible text of a page.

    Blanked operands are skipped, so this also reads redacted pages, which
    the font tracker rejects.
    """
    from patient_redactor import TokenStream, decode_glyph
    from patient_redactor.font_tracker import page_fonts

    def _text(page):
        tokens = TokenStream.from_page(page)
        fonts = page_fonts(page)
        font = None
        chars = []
        for operand_indices, operator_index in tokens.instructions():
            op = tokens.operator_name(operator_index)
            if op == "Tf":
                font = fonts.get_font(tokens.value(operand_indices[0]))
            elif op == "Tj":
                for i in operand_indices:
                    raw = bytes(tokens.value(i))
                    if raw:
                        chars.append(decode_glyph(font, raw))
        return "".join(chars)

    return _text
