# src/patient_redactor/tokens.py

"""Module: patient_redactor.tokens

A page's content stream held as a flat, indexable arena of tokens.

``pikepdf`` groups a content stream into ``(operands, operator)``
instructions. The :class:`TokenStream` flattens those groups into a single
list so that every operand and every operator has a stable index from
tokenization until the stream is written back. Decoded glyphs refer to
their source string by that index, and the only mutation ever applied is
:meth:`TokenStream.blank`.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterator, List, Sequence, Tuple, Union

import pikepdf

from .errors import FormatError
from .utils.pdf_conversion import is_string_operand

logger = logging.getLogger(__name__)

EMPTY_STRING = b""


@dataclass(frozen=True)
class Operand:
    """An operand value: string, name, number, array, dictionary or inline image."""

    value: Any


@dataclass(frozen=True)
class Operator:
    """A content stream operator, e.g. ``Tf`` or ``Tj``."""

    name: str


Token = Union[Operand, Operator]


class TokenStream:
    """
    Owns the ordered tokens of one content stream.

    Args:
        tokens: The flat token sequence, operands preceding their operator.
    """

    def __init__(self, tokens: Sequence[Token], owner: Any = None):
        self._tokens: List[Token] = list(tokens)
        # objects parsed from a scratch document stay valid while it lives
        self._owner = owner

    @classmethod
    def from_instructions(cls, instructions, owner: Any = None) -> "TokenStream":
        """Flattens pikepdf content stream instructions into a token stream."""
        tokens: List[Token] = []
        for instruction in instructions:
            operands, operator = _split_instruction(instruction)
            tokens.extend(Operand(value) for value in operands)
            tokens.append(Operator(str(operator)))
        return cls(tokens, owner=owner)

    @classmethod
    def from_page(cls, page: pikepdf.Page) -> "TokenStream":
        """Tokenizes a page's content, concatenating multiple content streams.

        Raises:
            FormatError: The content cannot be tokenized.
        """
        if page.get("/Contents") is None:
            return cls([])
        return cls.from_instructions(_parse(page))

    @classmethod
    def from_bytes(cls, data: bytes) -> "TokenStream":
        """Tokenizes raw content stream bytes.

        Raises:
            FormatError: The bytes cannot be tokenized.
        """
        scratch = pikepdf.new()
        stream = pikepdf.Stream(scratch, data)
        return cls.from_instructions(_parse(stream), owner=scratch)

    def __len__(self) -> int:
        return len(self._tokens)

    def __getitem__(self, index: int) -> Token:
        return self._tokens[index]

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens)

    def __repr__(self):
        return f"TokenStream({len(self._tokens)} tokens)"

    def instructions(self) -> Iterator[Tuple[List[int], int]]:
        """Yields ``(operand_indices, operator_index)`` groups in stream order."""
        pending: List[int] = []
        for index, token in enumerate(self._tokens):
            if isinstance(token, Operator):
                yield pending, index
                pending = []
            else:
                pending.append(index)

    def operator_name(self, index: int) -> str:
        return self._tokens[index].name

    def value(self, index: int) -> Any:
        """Returns the operand value stored at ``index``."""
        token = self._tokens[index]
        if not isinstance(token, Operand):
            raise TypeError(f"Token {index} is an operator, not an operand")
        return token.value

    def blank(self, index: int) -> None:
        """Replaces the string operand at ``index`` with an empty string.

        Blanking an already empty string is a no-op.
        """
        value = self.value(index)
        if not is_string_operand(value):
            raise TypeError(f"Token {index} is not a string operand: {value!r}")
        self._tokens[index] = Operand(pikepdf.String(EMPTY_STRING))

    def to_instructions(self) -> List[Tuple[List[Any], pikepdf.Operator]]:
        """Regroups the arena into pikepdf ``(operands, operator)`` tuples."""
        grouped = []
        for operand_indices, operator_index in self.instructions():
            operands = [self._tokens[i].value for i in operand_indices]
            grouped.append(
                (operands, pikepdf.Operator(self._tokens[operator_index].name))
            )
        return grouped

    def serialize(self) -> bytes:
        """Writes the tokens back out as content stream bytes, in order."""
        if not self._tokens:
            return b""
        return pikepdf.unparse_content_stream(self.to_instructions())

    def install(self, pdf: pikepdf.Pdf, page: pikepdf.Page) -> None:
        """Replaces the page's entire content with the serialized tokens.

        If the page previously had an array of content streams, it is replaced
        with a single consolidated stream.
        """
        logger.debug("Installing %d tokens as new page content", len(self._tokens))
        page.Contents = pdf.make_stream(self.serialize())


def _parse(page_or_stream) -> List[Any]:
    try:
        return list(pikepdf.parse_content_stream(page_or_stream))
    except pikepdf.PdfError as e:
        raise FormatError(f"Could not tokenize content stream: {e}") from e


def _split_instruction(instruction) -> Tuple[Sequence[Any], Any]:
    # ContentStreamInstruction and ContentStreamInlineImage both expose
    # .operands/.operator; plain tuples come from older pikepdf releases.
    if hasattr(instruction, "operator"):
        return instruction.operands, instruction.operator
    operands, operator = instruction
    return operands, operator

