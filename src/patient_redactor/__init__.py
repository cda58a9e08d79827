# src/patient_redactor/__init__.py
"""
patient-redactor: removes a patient's name from the text of a PDF.

Each page's content stream is tokenized with `pikepdf`, the active font is
tracked while operators are replayed, and every shown string is decoded to a
single character through `pdfminer` font tables. Case-insensitive matches of
the target phrases are redacted by emptying the strings that drew them; the
token stream is then written back, leaving layout, fonts and all other text
untouched.
"""
import logging

from .api import RedactionOptions, output_path_for, redact_document, redact_file
from .errors import (
    DecodeError,
    DocumentIOError,
    FormatError,
    ParseError,
    RedactionError,
    ResourceError,
    StateError,
)
from .font_tracker import FontStateTracker, PageFonts, build_text_index, decode_glyph
from .header import Patient, build_phrase_list, extract_region, parse_patient_name
from .redactor import PageReport, apply_redactions, find_match_ranges, redact_page
from .text_index import Glyph, MatchRange, PageTextIndex
from .tokens import Operand, Operator, TokenStream


# pylint: disable=too-few-public-methods
class SuppressFontBBoxWarning(logging.Filter):
    """Suppress a warning from pdfminer"""

    def filter(self, record):
        # Return False to suppress the log, True to allow it
        return (
            "get FontBBox from font descriptor because None cannot be parsed"
            not in record.getMessage()
        )


# Attach filter to the specific logger used by pdfminer.pdffont
logging.getLogger("pdfminer.pdffont").addFilter(SuppressFontBBoxWarning())


__all__ = [
    "redact_file",
    "redact_document",
    "redact_page",
    "output_path_for",
    "RedactionOptions",
    "TokenStream",
    "Operand",
    "Operator",
    "PageFonts",
    "FontStateTracker",
    "build_text_index",
    "decode_glyph",
    "Glyph",
    "MatchRange",
    "PageTextIndex",
    "PageReport",
    "find_match_ranges",
    "apply_redactions",
    "Patient",
    "extract_region",
    "parse_patient_name",
    "build_phrase_list",
    "RedactionError",
    "DocumentIOError",
    "FormatError",
    "ResourceError",
    "StateError",
    "DecodeError",
    "ParseError",
]
