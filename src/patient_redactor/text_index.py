# src/patient_redactor/text_index.py
"""The decoded text of one page, and the mapping from text offsets back to tokens."""
import re
from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple


@dataclass(frozen=True)
class Glyph:
    """A decoded character and the index of the string token that drew it.

    Attributes:
        character (str): Exactly one Unicode code point.
        token_index (int): Index into the page's :class:`~patient_redactor.tokens.TokenStream`.
    """

    character: str
    token_index: int

    def __post_init__(self):
        if len(self.character) != 1:
            raise ValueError(f"Glyph must hold one character, got {self.character!r}")


@dataclass(frozen=True)
class MatchRange:
    """Half-open range ``[start, end)`` of glyph indices matching ``phrase``."""

    start: int
    end: int
    phrase: str = ""

    def __len__(self) -> int:
        return self.end - self.start

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.start, self.end))


class PageTextIndex:
    """
    Ordered glyphs of a page plus their concatenated text.

    ``text[i] == glyphs[i].character`` for every ``i``, so a character offset
    in ``text`` is also a glyph index. The index is immutable: redaction
    empties tokens but never removes or shifts characters here, which is why
    every phrase can be searched in the same, original text.
    """

    def __init__(self, glyphs: Sequence[Glyph]):
        self._glyphs: Tuple[Glyph, ...] = tuple(glyphs)
        self._text = "".join(glyph.character for glyph in self._glyphs)

    @property
    def glyphs(self) -> Tuple[Glyph, ...]:
        return self._glyphs

    @property
    def text(self) -> str:
        return self._text

    def __len__(self) -> int:
        return len(self._glyphs)

    def __repr__(self):
        return f"PageTextIndex({self._text!r})"

    def find(self, phrase: str) -> List[MatchRange]:
        """Every case-insensitive, non-overlapping occurrence of ``phrase``.

        An empty phrase matches nothing.
        """
        if not phrase:
            return []
        pattern = re.compile(re.escape(phrase), re.IGNORECASE)
        return [
            MatchRange(match.start(), match.end(), phrase)
            for match in pattern.finditer(self._text)
        ]

    def token_indices(self, match_range: MatchRange) -> List[int]:
        """Token indices of the glyphs covered by ``match_range``."""
        return [self._glyphs[i].token_index for i in match_range]
