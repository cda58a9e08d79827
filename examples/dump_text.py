#!/usr/bin/env python
"""Print the decoded text of every page, as the redactor sees it, and
mark where the given phrases would be redacted. Nothing is written.

Useful to check that a document's glyph order matches its reading order
before trusting a redaction run.

"""
import sys

import pikepdf

import patient_redactor as redactor
from patient_redactor.font_tracker import page_fonts


def main():
    if len(sys.argv) < 2:
        print(f"Usage: python {sys.argv[0]} input.pdf [phrase ...]")
        sys.exit(1)

    phrases = sys.argv[2:]

    with pikepdf.open(sys.argv[1]) as pdf:
        for page_number, page in enumerate(pdf.pages, start=1):
            tokens = redactor.TokenStream.from_page(page)
            index = redactor.build_text_index(tokens, page_fonts(page))
            marked = list(index.text)
            for match_range in redactor.find_match_ranges(index, phrases):
                for i in match_range:
                    marked[i] = "#"
            print(f"--- page {page_number} ({len(index)} glyphs)")
            print("".join(marked))


if __name__ == "__main__":
    main()
