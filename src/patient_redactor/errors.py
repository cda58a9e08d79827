# src/patient_redactor/errors.py
"""
Exception hierarchy for the redaction pipeline.

Every error is fatal: nothing is recovered locally, and the output document
is only written once every page has been processed successfully.
"""


class RedactionError(Exception):
    """Base class for all errors raised by patient_redactor."""


class DocumentIOError(RedactionError, OSError):
    """The input document could not be read, or the output could not be written."""


class FormatError(RedactionError):
    """A content stream could not be tokenized."""


class ResourceError(RedactionError):
    """A font-selection operator named a font missing from the page resources."""


class StateError(RedactionError):
    """A text-show operator was encountered before any font was selected."""


class DecodeError(RedactionError):
    """A text-show operand did not decode to exactly one Unicode character."""


class ParseError(RedactionError):
    """The header line does not have the expected ``Last, First (...)`` shape."""
