"""
Utility modules for converting between pikepdf and pdfminer data.
"""
from .pdf_conversion import (
    convert_to_pdfminer_resources,
    extract_string_bytes,
    font_name_to_string,
    is_string_operand,
)

__all__ = [
    "convert_to_pdfminer_resources",
    "extract_string_bytes",
    "font_name_to_string",
    "is_string_operand",
]
