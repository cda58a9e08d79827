# src/patient_redactor/font_tracker.py

"""Module: patient_redactor.font_tracker

Replays a page's tokens to know which font is active at every text-show
operator, and decodes each shown string into one Unicode character.

Font resources are converted from pikepdf to pdfminer objects, and
``pdfminer`` supplies the character code to Unicode mapping
(``ToUnicode`` CMaps, simple font encodings, CID fonts).
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from pdfminer.pdffont import PDFFont, PDFUnicodeNotDefined
from pdfminer.pdfinterp import PDFResourceManager
from pdfminer.psparser import PSException

from .errors import DecodeError, FormatError, ResourceError, StateError
from .text_index import Glyph, PageTextIndex
from .tokens import TokenStream
from .utils.pdf_conversion import (
    convert_to_pdfminer_resources,
    extract_string_bytes,
    font_name_to_string,
    is_string_operand,
)

logger = logging.getLogger(__name__)

FONT_OPERATOR = "Tf"
TEXT_SHOW_OPERATORS = frozenset(["Tj", "'", '"'])


class PageFonts:
    """
    Font lookup for a single page.

    Fonts are converted lazily and cached by resource name, so each font is
    built once per page. Nothing is shared between pages.

    Args:
        resources: The page's ``/Resources`` dictionary (pikepdf), or ``{}``.
        rsrcmgr: Optional pdfminer resource manager.
    """

    def __init__(
        self, resources: Any, rsrcmgr: Optional[PDFResourceManager] = None
    ):
        self.resources = resources if resources is not None else {}
        self.rsrcmgr = rsrcmgr or PDFResourceManager()
        self._cache: Dict[str, PDFFont] = {}

    def get_font(self, name: Any) -> PDFFont:
        """Returns the pdfminer font for a resource name such as ``/F1``.

        Raises:
            ResourceError: The page has no font by that name, or it cannot be loaded.
        """
        key = font_name_to_string(name)
        if key in self._cache:
            return self._cache[key]

        font_dict = self.resources.get("/Font")
        spec = font_dict.get(f"/{key}") if font_dict is not None else None
        if spec is None:
            raise ResourceError(f"Font /{key} not found in page resources")

        try:
            font = self.rsrcmgr.get_font(None, convert_to_pdfminer_resources(spec))
        except PSException as e:
            raise ResourceError(f"Font /{key} could not be loaded: {e}") from e

        logger.debug("Loaded font /%s (%s)", key, getattr(font, "basefont", "?"))
        self._cache[key] = font
        return font


def decode_glyph(font: PDFFont, raw: bytes) -> str:
    """Decodes one text-show operand to exactly one Unicode character.

    The whole operand is read as a single big-endian character code.

    Raises:
        DecodeError: The code is unmapped, or maps to zero or several
            characters, or is multi-byte for a single-byte font.
    """
    if not font.is_multibyte() and len(raw) != 1:
        raise DecodeError(
            f"Operand {raw!r} holds {len(raw)} codes for single-byte font "
            f"{getattr(font, 'basefont', font)!r}"
        )

    code = int.from_bytes(raw, "big")
    try:
        unicode = font.to_unichr(code)
    except (PDFUnicodeNotDefined, KeyError) as e:
        raise DecodeError(f"No Unicode mapping for character code {code:#x}") from e

    if unicode is None or len(unicode) != 1:
        raise DecodeError(
            f"Character code {code:#x} decodes to {unicode!r}, expected one character"
        )
    return unicode


class FontStateTracker:
    """
    Two-state machine over a page's operators: no font set, or font set.

    ``Tf`` selects a font. ``Tj``, ``'`` and ``"`` decode every string
    operand they carry, one glyph per operand. Empty or non-string text
    operands are errors; only the spacing numbers of ``"`` are skipped.
    All other operators are ignored here and survive untouched in the
    token stream.

    Args:
        tokens: The page's token stream.
        fonts: Font lookup for the same page.
    """

    def __init__(self, tokens: TokenStream, fonts: PageFonts):
        self.tokens = tokens
        self.fonts = fonts
        self.font: Optional[PDFFont] = None
        self.glyphs: List[Glyph] = []

    def replay(self) -> PageTextIndex:
        """Visits every operator in order and returns the page's text index."""
        for operand_indices, operator_index in self.tokens.instructions():
            self.visit(self.tokens.operator_name(operator_index), operand_indices)
        return PageTextIndex(self.glyphs)

    def visit(self, op_name: str, operand_indices: List[int]) -> None:
        # same method naming as pdfminer's interpreter: ' -> _q, " -> _w
        func_name = "do_%s" % op_name.replace('"', "_w").replace("'", "_q")
        func = getattr(self, func_name, None)
        if func is not None:
            func(operand_indices)

    def do_Tf(self, operand_indices: List[int]) -> None:
        """Set font."""
        if not operand_indices:
            raise FormatError("Tf operator without a font name")
        self.font = self.fonts.get_font(self.tokens.value(operand_indices[0]))

    def do_Tj(self, operand_indices: List[int]) -> None:
        """Show text."""
        self._show(operand_indices)

    def do__q(self, operand_indices: List[int]) -> None:
        """Move to next line and show text."""
        self._show(operand_indices)

    def do__w(self, operand_indices: List[int]) -> None:
        """Set spacing, move to next line and show text."""
        # aw ac string
        self._show(operand_indices[2:])

    def _show(self, operand_indices: List[int]) -> None:
        if self.font is None:
            raise StateError("Text shown before any font was selected")

        for index in operand_indices:
            value = self.tokens.value(index)
            if not is_string_operand(value):
                raise DecodeError(
                    f"Text operand at token {index} is not a string: {value!r}"
                )
            raw = extract_string_bytes(value)
            if not raw:
                raise DecodeError(f"Empty string operand at token {index}")
            self.glyphs.append(Glyph(decode_glyph(self.font, raw), index))


def build_text_index(tokens: TokenStream, fonts: PageFonts) -> PageTextIndex:
    """Replays ``tokens`` with a fresh tracker and returns the page's text index."""
    return FontStateTracker(tokens, fonts).replay()


def page_fonts(page: Any) -> PageFonts:
    """Font lookup over a page's own ``/Resources``."""
    resources: Mapping = getattr(page, "Resources", {})
    return PageFonts(resources)
