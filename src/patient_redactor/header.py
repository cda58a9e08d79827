# src/patient_redactor/header.py
"""
Reads the patient header line from the top of the first page and derives
the list of phrases to redact from it.

Positional extraction uses ``pdfminer`` layout analysis. Regions are given
the way a reader would measure them: ``(x, y, width, height)`` from the
top-left corner of the page.
"""
import logging
import re
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Tuple

from pdfminer.high_level import extract_pages
from pdfminer.layout import LAParams, LTAnno, LTChar, LTContainer, LTTextLine
from pdfminer.psparser import PSException

from .errors import DocumentIOError, ParseError

logger = logging.getLogger(__name__)

Region = Tuple[float, float, float, float]

HEADER_REGION: Region = (0, 40, 800, 20)

# "Last, First (...)"
_HEADER_PATTERN = re.compile(
    r"^\s*(?P<last>[^,()\s][^,()]*?)\s*,\s*(?P<first>[^,()\s][^,()]*?)\s+\("
)


@dataclass(frozen=True)
class Patient:
    first_name: str
    last_name: str


def extract_region(
    source: Any,
    region: Region = HEADER_REGION,
    page_number: int = 0,
    laparams: Optional[LAParams] = None,
) -> str:
    """Returns the text drawn inside ``region`` on one page.

    A character belongs to the region if its centre does. Lines are ordered
    top to bottom, characters left to right.

    Args:
        source: Path or binary file object of the PDF.
        region: ``(x, y, width, height)`` measured from the page's top-left corner.
        page_number: 0-based page index.
        laparams: pdfminer layout parameters.

    Raises:
        DocumentIOError: The document cannot be read.
        ParseError: The document has no such page.
    """
    try:
        layout = next(
            extract_pages(
                source, page_numbers=[page_number], laparams=laparams or LAParams()
            ),
            None,
        )
    except (OSError, PSException) as e:
        raise DocumentIOError(f"Could not read {source}: {e}") from e

    if layout is None:
        raise ParseError(f"Document has no page {page_number + 1}")

    x, y, width, height = region
    top = layout.y1
    bounds = (x, top - y - height, x + width, top - y)

    lines = []
    for line in _iter_text_lines(layout):
        text = _line_text_in(line, bounds)
        if text:
            lines.append((-line.y1, line.x0, text))

    text = "\n".join(text for _, _, text in sorted(lines)).strip()
    logger.debug("Region %r on page %d: %r", region, page_number + 1, text)
    return text


def _iter_text_lines(item) -> Iterator[LTTextLine]:
    if isinstance(item, LTTextLine):
        yield item
    elif isinstance(item, LTContainer):
        for child in item:
            yield from _iter_text_lines(child)


def _line_text_in(line: LTTextLine, bounds) -> str:
    x0, y0, x1, y1 = bounds
    parts: List[str] = []
    for obj in line:
        if isinstance(obj, LTChar):
            cx = (obj.x0 + obj.x1) / 2
            cy = (obj.y0 + obj.y1) / 2
            if x0 <= cx <= x1 and y0 <= cy <= y1:
                parts.append(obj.get_text())
        elif isinstance(obj, LTAnno) and parts:
            parts.append(obj.get_text())
    return "".join(parts).strip()


def parse_patient_name(header_line: str) -> Patient:
    """Parses ``"Last, First (...)"`` into a :class:`Patient`.

    Raises:
        ParseError: The header line has any other shape.
    """
    match = _HEADER_PATTERN.match(header_line)
    if not match:
        raise ParseError(f"Header line {header_line!r} is not 'Last, First (...)'")
    return Patient(first_name=match.group("first"), last_name=match.group("last"))


def build_phrase_list(header_line: str, patient: Patient) -> List[str]:
    """The phrases to redact, in order.

    Every phrase is searched in the original page text, so the order only
    decides which phrase claims shared characters first.
    """
    return [
        header_line,
        f"{patient.first_name} {patient.last_name}",
        f"{patient.last_name}, {patient.first_name}",
    ]


def phrases_from_header(header_line: str) -> List[str]:
    """Parses the header line and returns the phrase list derived from it."""
    return build_phrase_list(header_line, parse_patient_name(header_line))
