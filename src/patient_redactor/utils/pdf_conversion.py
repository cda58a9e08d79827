# src/patient_redactor/utils/pdf_conversion.py
"""
Conversions between pikepdf objects (used to tokenize and rewrite content
streams) and the plain types pdfminer understands (used to decode fonts).
"""
from decimal import Decimal
from typing import Any

import pikepdf
from pdfminer.pdftypes import PDFStream
from pdfminer.psparser import LIT, PSLiteral


def is_string_operand(operand: Any) -> bool:
    """True if ``operand`` is a PDF byte-string (literal or hex)."""
    return isinstance(operand, (bytes, pikepdf.String))


def extract_string_bytes(operand: Any) -> bytes:
    """
    Helper to get raw bytes from various string representations.
    Handles fallback to UTF-8 if the string contains special characters.
    """
    if isinstance(operand, bytes):
        return operand

    if isinstance(operand, str):
        try:
            return operand.encode("latin1")
        except UnicodeEncodeError:
            return operand.encode("utf-8")

    # pikepdf.String and friends
    try:
        return bytes(operand)
    except (TypeError, ValueError) as e:
        raise TypeError(f"Not a PDF string operand: {operand!r}") from e


def font_name_to_string(font_obj: Any) -> str:
    """Extracts a clean string name from a font operand."""
    if isinstance(font_obj, PSLiteral):
        name = font_obj.name
        if isinstance(name, bytes):
            return name.decode("ascii")
        return name

    if isinstance(font_obj, pikepdf.Name):
        return str(font_obj).lstrip("/")

    return str(font_obj).lstrip("/")


def convert_to_pdfminer_resources(obj: Any, strip_slash=False) -> Any:
    """Recursively converts pikepdf resources to types pdfminer understands."""
    result = obj
    if isinstance(obj, pikepdf.Dictionary):
        result = {
            convert_to_pdfminer_resources(k, strip_slash=True): (
                convert_to_pdfminer_resources(v)
            )
            for k, v in obj.items()
        }
    elif isinstance(obj, pikepdf.Array):
        result = [convert_to_pdfminer_resources(v) for v in obj]
    elif isinstance(obj, pikepdf.Stream):
        attrs = convert_to_pdfminer_resources(obj.stream_dict)
        # Raw (still filtered) bytes; pdfminer applies /Filter itself.
        result = PDFStream(attrs, obj.read_raw_bytes())
    elif isinstance(obj, (str, pikepdf.String)):
        s = str(obj)
        if strip_slash and s.startswith("/"):
            result = s[1:]
        else:
            result = s
    elif isinstance(obj, pikepdf.Name):
        result = LIT(str(obj)[1:])
    elif isinstance(obj, Decimal):
        result = float(obj)
    return result
