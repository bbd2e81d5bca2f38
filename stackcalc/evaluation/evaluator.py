"""Core evaluator for stackcalc.

Runs a flat token sequence left to right against a Stack, consulting the
Dictionary for every bare word. Quotation bodies are captured verbatim and
array-build brackets evaluate on a fresh sub-stack. User words run on the
caller's stack by re-entering `run`; combinators re-enter it the same way.
"""

from __future__ import annotations

import logging
import sys
from typing import Iterable, Sequence as Tokens, TextIO

from stackcalc import Token
from stackcalc.reader.parser import find_closing
from stackcalc.types.dictionary import Dictionary, Primitive
from stackcalc.types.errors import CalcError, ParseError, RecursionDepthExceeded
from stackcalc.types.stack import Stack
from stackcalc.types.values import Quotation, Sequence, WordReference

logger = logging.getLogger(__name__)


class Evaluator:
    """Executes tokens against a stack using one Dictionary.

    `stdin` and `stdout` are the streams the `stdin` and `print` primitives
    talk to; they default to the process streams at call time.
    """

    def __init__(
        self,
        dictionary: Dictionary,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ):
        self.dictionary = dictionary
        self._stdin = stdin
        self._stdout = stdout

    @property
    def stdin(self) -> TextIO:
        return self._stdin if self._stdin is not None else sys.stdin

    @property
    def stdout(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    def run(self, tokens: Tokens[Token], stack: Stack) -> None:
        """Execute `tokens` to completion, or until a CalcError is raised."""
        i = 0
        n = len(tokens)
        while i < n:
            kind, value = tokens[i]
            if kind == "number":
                stack.push(value)
            elif kind == "quoted":
                stack.push(WordReference(value))
            elif kind == "lbrace":
                end = find_closing(tokens, i)
                stack.push(Quotation(tuple(tokens[i + 1:end])))
                i = end
            elif kind == "lbracket":
                end = find_closing(tokens, i)
                stack.push(self.collect(tokens[i + 1:end], stack))
                i = end
            elif kind == "word":
                self.call(value, stack)
            else:
                raise ParseError(f"unexpected '{value}'")
            i += 1

    def collect(self, tokens: Tokens[Token], enclosing: Stack) -> Sequence:
        """Evaluate `tokens` on a fresh sub-stack and return its contents."""
        sub = Stack(enclosing=enclosing)
        self.run(tokens, sub)
        return Sequence(sub.items)

    def call(self, name: str, stack: Stack) -> None:
        """Look up `name` and execute its definition on `stack`."""
        try:
            definition = self.dictionary.lookup(name)
            if isinstance(definition, Primitive):
                logger.debug("executing primitive %s", name)
                stack.require(definition.arity)
                definition.fn(self, stack)
            else:
                logger.debug("executing word %s", name)
                self.run(definition.tokens, stack)
        except CalcError as err:
            err.add_frame(name)
            raise
        except RecursionError:
            # Converted once, at the innermost word; outer frames see a CalcError
            err = RecursionDepthExceeded(f"words nested too deeply (limit {sys.getrecursionlimit()})")
            err.add_frame(name)
            raise err from None

    def run_quotation(self, quotation: Quotation, stack: Stack) -> None:
        self.run(quotation.tokens, stack)

    def run_isolated(self, quotation: Quotation, values: Iterable, enclosing: Stack) -> Stack:
        """Run `quotation` on a fresh sub-stack seeded with `values`."""
        sub = Stack(values, enclosing=enclosing)
        self.run(quotation.tokens, sub)
        return sub
