# tests/test_tokens.py
import pikepdf
import pytest

from patient_redactor import FormatError, Operand, Operator, TokenStream


def test_tokenize_flattens_instructions():
    tokens = TokenStream.from_bytes(b"BT /F1 12 Tf (A) Tj ET")

    assert len(tokens) == 7
    assert tokens[0] == Operator("BT")
    assert isinstance(tokens[1], Operand)
    assert str(tokens[1].value) == "/F1"
    assert tokens[2].value == 12
    assert tokens[3] == Operator("Tf")
    assert bytes(tokens[4].value) == b"A"
    assert tokens[5] == Operator("Tj")
    assert tokens[6] == Operator("ET")


def test_instructions_group_operand_indices():
    tokens = TokenStream.from_bytes(b"q 1 0 0 1 5 5 cm (A) (B) Tj Q")

    groups = list(tokens.instructions())

    assert groups == [([], 0), ([1, 2, 3, 4, 5, 6], 7), ([8, 9], 10), ([], 11)]
    assert [tokens.operator_name(op) for _, op in groups] == ["q", "cm", "Tj", "Q"]


def test_blank_empties_string_and_keeps_count():
    tokens = TokenStream.from_bytes(b"BT /F1 12 Tf (Secret) Tj (Keep) Tj ET")
    count = len(tokens)

    tokens.blank(4)

    assert bytes(tokens.value(4)) == b""
    assert bytes(tokens.value(6)) == b"Keep"
    assert len(tokens) == count

    reparsed = TokenStream.from_bytes(tokens.serialize())
    assert len(reparsed) == count
    assert bytes(reparsed.value(4)) == b""
    assert b"Secret" not in tokens.serialize()


def test_blank_is_idempotent():
    tokens = TokenStream.from_bytes(b"(A) Tj")
    tokens.blank(0)
    once = tokens.serialize()
    tokens.blank(0)
    assert tokens.serialize() == once


def test_blank_rejects_non_string_tokens():
    tokens = TokenStream.from_bytes(b"/F1 12 Tf")

    with pytest.raises(TypeError, match="not a string operand"):
        tokens.blank(0)
    with pytest.raises(TypeError, match="not a string operand"):
        tokens.blank(1)
    with pytest.raises(TypeError, match="operator"):
        tokens.blank(2)


def test_serialize_preserves_order_and_values():
    source = b"q 0.5 g 10 10 50 50 re f Q BT /F1 12 Tf [(A) -20 (B)] TJ ET"
    tokens = TokenStream.from_bytes(source)

    reparsed = TokenStream.from_bytes(tokens.serialize())

    assert len(reparsed) == len(tokens)
    assert reparsed.serialize() == tokens.serialize()
    assert [t for t in reparsed if isinstance(t, Operator)] == [
        t for t in tokens if isinstance(t, Operator)
    ]


def test_empty_stream():
    tokens = TokenStream.from_bytes(b"")
    assert len(tokens) == 0
    assert tokens.serialize() == b""


def test_page_without_contents():
    pdf = pikepdf.new()
    page = pdf.add_blank_page()
    if "/Contents" in page.obj:
        del page.obj["/Contents"]

    assert len(TokenStream.from_page(page)) == 0


def test_from_page_joins_content_arrays(create_pdf):
    pdf = create_pdf(b"")
    page = pdf.pages[0]
    page.Contents = pikepdf.Array(
        [pdf.make_stream(b"BT /F1 12 Tf"), pdf.make_stream(b"(A) Tj ET")]
    )

    tokens = TokenStream.from_page(page)

    assert [t.name for t in tokens if isinstance(t, Operator)] == ["BT", "Tf", "Tj", "ET"]


def test_install_replaces_page_content(create_pdf):
    pdf = create_pdf(b"BT /F1 12 Tf (A) Tj ET")
    page = pdf.pages[0]
    tokens = TokenStream.from_page(page)
    tokens.blank(4)

    tokens.install(pdf, page)

    content = page.Contents.read_bytes()
    assert b"(A)" not in content
    assert b"()" in content
    assert b"Tf" in content


def test_malformed_stream_raises_format_error(monkeypatch):
    def broken(*args, **kwargs):
        raise pikepdf.PdfError("unexpected token")

    monkeypatch.setattr(pikepdf, "parse_content_stream", broken)

    with pytest.raises(FormatError, match="Could not tokenize"):
        TokenStream.from_bytes(b"(A) Tj")
