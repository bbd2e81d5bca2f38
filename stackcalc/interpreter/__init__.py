from __future__ import annotations
from dataclasses import dataclass, field
from typing import Literal, Optional, TextIO

from stackcalc import CalcValue
from stackcalc.builtin.primitives import register
from stackcalc.evaluation.evaluator import Evaluator
from stackcalc.reader.parser import read
from stackcalc.types.dictionary import Dictionary
from stackcalc.types.errors import CalcError
from stackcalc.types.stack import Stack


@dataclass(frozen=True)
class ErrorReport:
    """What a host needs to report a failed evaluation."""

    kind: str
    message: str
    word: Optional[str] = None
    trace: tuple[str, ...] = ()

    @classmethod
    def from_error(cls, err: CalcError) -> ErrorReport:
        return cls(err.kind, err.message, err.word, tuple(err.trace))

    def __str__(self):
        text = f"{self.kind}: {self.message}"
        if self.trace:
            text += f" (in {' <- '.join(self.trace)})"
        return text


@dataclass
class EvalResult:
    """Outcome of evaluate_line: the stack on success, otherwise an error."""

    stack: list[CalcValue] = field(default_factory=list)
    error: Optional[ErrorReport] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def top(self) -> CalcValue:
        return self.stack[-1] if self.stack else None


class Interpreter:
    """
    One evaluation session: a Dictionary pre-populated with the primitives,
    the prelude, and a Stack that persists across calls.
    """

    def __init__(
        self,
        prelude: str | None | Literal['auto'] = 'auto',
        *,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ):
        self.dictionary = Dictionary()
        register(self.dictionary)
        self.stack = Stack()
        self.evaluator = Evaluator(self.dictionary, stdin=stdin, stdout=stdout)

        if prelude is None:
            pass  # explicit: no prelude
        elif prelude == 'auto':
            # Lazy import to avoid circular imports
            from stackcalc.modules.prelude_loader import load_prelude
            load_prelude(self)
        elif prelude:
            self.load(prelude)

    def load(self, code: str) -> None:
        """Read and evaluate `code` against the session stack; errors propagate."""
        self.evaluator.run(read(code), self.stack)

    def evaluate_line(self, code: str) -> EvalResult:
        """Evaluate one line, reporting failure instead of raising.

        Mutations made before a failure stay on the session stack.
        """
        try:
            self.load(code)
        except CalcError as err:
            return EvalResult(self.stack.snapshot(), ErrorReport.from_error(err))
        return EvalResult(self.stack.snapshot())

    def eval(self, code: str) -> CalcValue:
        """Evaluate `code` and return the top of the stack (None when empty)."""
        self.load(code)
        return self.stack.items[-1] if self.stack.items else None

    def reset(self) -> None:
        self.stack.clear()
