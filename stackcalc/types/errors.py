from __future__ import annotations


class CalcError(Exception):
    """ Base class for all stackcalc errors

    `word` is the innermost word executing when the error was raised and
    `trace` the chain of active words, innermost first. Both are filled in
    by the evaluator while the exception propagates.
    """

    def __init__(self, message: str = "", word: str | None = None):
        super().__init__(message)
        self.message = message
        self.word = word
        self.trace: list[str] = []

    @property
    def kind(self) -> str:
        return type(self).__name__

    def add_frame(self, name: str) -> None:
        if self.word is None:
            self.word = name
        self.trace.append(name)

    def __str__(self):
        if self.word is None:
            return f"{self.kind}: {self.message}"
        return f"{self.kind} in '{self.word}': {self.message}"


class StackUnderflow(CalcError):
    """ Raised when an operation needs more operands than the stack holds"""


class UnknownWord(CalcError):
    """ Raised when a name has no dictionary binding"""


class TypeMismatch(CalcError):
    """ Raised when an operand has the wrong value variant"""


class DivisionByZero(CalcError):
    """ Raised by div and mod when the divisor is exactly zero"""


class EmptySequence(CalcError):
    """ Raised when a sequence must have at least one element"""


class ArityError(CalcError):
    """ Raised when a combinator's quotation leaves the stack in the wrong shape"""


class ParseError(CalcError):
    """ Raised for unbalanced delimiters and malformed literals"""


class UnexpectedEndOfInput(CalcError):
    """ Raised when stdin is exhausted"""


class DomainError(CalcError):
    """ Raised when a numeric result falls outside the real numbers"""


class RecursionDepthExceeded(CalcError):
    """ Raised when words nest deeper than the interpreter can follow"""
