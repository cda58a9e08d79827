# src/patient_redactor/redactor.py
"""
Phrase matching and token redaction for a single page.

Redaction runs in three passes over a page: build the text index, compute
every match range against that unchanging index, then blank the matched
tokens. Because blanking never shifts characters in the index, the order of
the phrases does not change which glyphs end up redacted.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Set

import pikepdf

from .font_tracker import build_text_index, page_fonts
from .text_index import MatchRange, PageTextIndex
from .tokens import TokenStream

logger = logging.getLogger(__name__)


@dataclass
class PageReport:
    """Summary of the redaction of one page."""

    page_number: Optional[int]
    glyph_count: int
    match_count: int
    redacted_tokens: int


def find_match_ranges(index: PageTextIndex, phrases: Sequence[str]) -> List[MatchRange]:
    """All occurrences of every phrase, in phrase order.

    Each phrase is searched in the original text, so ranges from different
    phrases may overlap.
    """
    ranges: List[MatchRange] = []
    for phrase in phrases:
        found = index.find(phrase)
        if found:
            logger.debug("Phrase %r matched %d time(s)", phrase, len(found))
        ranges.extend(found)
    return ranges


def apply_redactions(
    tokens: TokenStream, index: PageTextIndex, ranges: Iterable[MatchRange]
) -> Set[int]:
    """Blanks every token referenced by a glyph in ``ranges``.

    Returns:
        Set[int]: The token indices that were blanked. A token claimed by
        several ranges is blanked once.
    """
    redacted: Set[int] = set()
    for match_range in ranges:
        for token_index in index.token_indices(match_range):
            if token_index not in redacted:
                tokens.blank(token_index)
                redacted.add(token_index)
    return redacted


def redact_tokens(
    tokens: TokenStream, fonts, phrases: Sequence[str], page_number=None
) -> PageReport:
    """Runs index, match and blank over an already tokenized page."""
    index = build_text_index(tokens, fonts)
    ranges = find_match_ranges(index, phrases)
    redacted = apply_redactions(tokens, index, ranges)
    return PageReport(
        page_number=page_number,
        glyph_count=len(index),
        match_count=len(ranges),
        redacted_tokens=len(redacted),
    )


def redact_page(
    pdf: pikepdf.Pdf,
    page: pikepdf.Page,
    phrases: Sequence[str],
    page_number: Optional[int] = None,
) -> PageReport:
    """Redacts ``phrases`` from one page and installs the rewritten content.

    Raises:
        FormatError, ResourceError, StateError, DecodeError: Propagated
            unchanged; the page content is left as it was.
    """
    tokens = TokenStream.from_page(page)
    report = redact_tokens(tokens, page_fonts(page), phrases, page_number)
    tokens.install(pdf, page)
    logger.info(
        "Page %s: %d glyphs, %d matches, %d tokens redacted",
        "?" if page_number is None else page_number + 1,
        report.glyph_count,
        report.match_count,
        report.redacted_tokens,
    )
    return report
