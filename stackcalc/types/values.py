"""Value model for stackcalc.

Numbers are plain Python ints and floats. The remaining variants are small
immutable classes so that anything pushed on the stack can be shared freely:
nothing a quotation holds is ever mutated after it has been read.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from stackcalc import CalcValue, Token


class Sequence(tuple):
    """Ordered, immutable list of values built by `[ ... ]` or a combinator."""

    def __repr__(self):
        return f"Sequence({list(self)!r})"


@dataclass(frozen=True)
class Quotation:
    """An unevaluated block of reader tokens."""

    tokens: tuple[Token, ...]

    def __repr__(self):
        return f"Quotation({format_tokens(self.tokens)!r})"


@dataclass(frozen=True)
class WordReference:
    """The literal name of a word, pushed by the `,name` marker."""

    name: str

    def __repr__(self):
        return f"WordReference({self.name!r})"


def is_number(value: CalcValue) -> bool:
    # bool is an int subclass but never a stackcalc value
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def type_name(value: CalcValue) -> str:
    if is_number(value):
        return "number"
    if isinstance(value, Sequence):
        return "sequence"
    if isinstance(value, Quotation):
        return "quotation"
    if isinstance(value, WordReference):
        return "word reference"
    return type(value).__name__


def format_number(n: int | float) -> str:
    if isinstance(n, float) and n.is_integer():
        return str(int(n))
    return repr(n)


def format_token(token: Token) -> str:
    kind, value = token
    if kind == "number":
        return format_number(value)
    if kind == "quoted":
        return f",{value}"
    return str(value)


def format_tokens(tokens: Iterable[Token]) -> str:
    return " ".join(format_token(t) for t in tokens)


def format_value(value: CalcValue) -> str:
    """Render a value the way it would be written in source."""
    if is_number(value):
        return format_number(value)
    if isinstance(value, Sequence):
        return "[" + " ".join(format_value(v) for v in value) + "]"
    if isinstance(value, Quotation):
        body = format_tokens(value.tokens)
        return "{ " + body + " }" if body else "{ }"
    if isinstance(value, WordReference):
        return f",{value.name}"
    return repr(value)
