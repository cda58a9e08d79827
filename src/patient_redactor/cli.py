# src/patient_redactor/cli.py
"""Command line entry point: ``patient-redactor input.pdf``."""
import logging
import sys

from .api import redact_file
from .errors import RedactionError

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    if argv is None:
        argv = sys.argv
    if len(argv) != 2:
        print(f"Usage: {argv[0]} input.pdf")
        return 1

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    try:
        redact_file(argv[1])
    except RedactionError as e:
        logger.error("Redaction failed, no output written: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
