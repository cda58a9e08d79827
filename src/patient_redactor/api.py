# src/patient_redactor/api.py
"""
Public API: redact a patient's name from a whole document.
"""

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

import pikepdf

from .errors import DocumentIOError
from .header import HEADER_REGION, Region, extract_region, phrases_from_header
from .redactor import PageReport, redact_page

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


@dataclass
class RedactionOptions:
    """Configuration options for a redaction run."""

    header_region: Region = HEADER_REGION
    """Rectangle ``(x, y, width, height)``, measured from the top-left corner
    of the page, holding the ``Last, First (...)`` header line.

    """

    header_page: int = 0
    """0-based index of the page the header line is read from."""

    output_prefix: str = "redacted-"
    """Prefix prepended to the input file name to form the output file name."""

    output_dir: Optional[PathLike] = None
    """Directory the output is written to. Defaults to the current working
    directory.

    """


def redact_document(pdf: pikepdf.Pdf, phrases: Sequence[str]) -> List[PageReport]:
    """Redacts ``phrases`` from every page, in document order.

    Pages are processed one at a time and share no state. The first error
    aborts the run; the caller must then discard ``pdf``.

    Args:
        pdf: The :class:`pikepdf.Pdf` to modify in place.
        phrases: Target phrases, matched case-insensitively.

    Raises:
        TypeError: If ``pdf`` is not a pikepdf object.
    """
    if not isinstance(pdf, pikepdf.Pdf):
        raise TypeError("The 'pdf' argument must be a pikepdf.Pdf object.")

    return [
        redact_page(pdf, page, phrases, page_number=page_number)
        for page_number, page in enumerate(pdf.pages)
    ]


def output_path_for(
    input_path: PathLike, options: Optional[RedactionOptions] = None
) -> Path:
    """The output path: ``output_prefix`` + input file name, in ``output_dir``."""
    if options is None:
        options = RedactionOptions()
    output_dir = Path(options.output_dir) if options.output_dir else Path.cwd()
    return output_dir / f"{options.output_prefix}{Path(input_path).name}"


def redact_file(input_path: PathLike, options: Optional[RedactionOptions] = None) -> Path:
    """Redacts the patient named in the header line and writes a new document.

    The output is saved only after every page has been redacted, so a failed
    run writes nothing. The input file is never modified.

    Returns:
        Path: Where the redacted document was written.

    Raises:
        DocumentIOError: The input cannot be read or the output cannot be written.
        ParseError: The header line is not ``Last, First (...)``.
        FormatError, ResourceError, StateError, DecodeError: A page could not
            be redacted.
    """
    if options is None:
        options = RedactionOptions()

    input_path = Path(input_path)
    output_path = output_path_for(input_path, options)
    if output_path.resolve() == input_path.resolve():
        raise DocumentIOError(f"Refusing to overwrite input file {input_path}")

    header_line = extract_region(
        input_path, options.header_region, page_number=options.header_page
    )
    logger.info("Header line: %r", header_line)
    phrases = phrases_from_header(header_line)

    try:
        pdf = pikepdf.open(input_path)
    except (OSError, pikepdf.PdfError) as e:
        raise DocumentIOError(f"Could not open {input_path}: {e}") from e

    with pdf:
        redact_document(pdf, phrases)
        _save(pdf, output_path)

    logger.info("Wrote %s", output_path)
    return output_path


def _save(pdf: pikepdf.Pdf, output_path: Path) -> None:
    # written beside the target and renamed into place
    temp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            delete=False, dir=output_path.parent, prefix=".", suffix=".pdf"
        ) as tmp:
            temp_path = tmp.name
            pdf.save(tmp)
        os.replace(temp_path, output_path)
    except (OSError, pikepdf.PdfError) as e:
        if temp_path is not None and os.path.exists(temp_path):
            os.unlink(temp_path)
        raise DocumentIOError(f"Could not write {output_path}: {e}") from e
