"""The data stack shared by one evaluation session.

A Stack grows and shrinks only at its top. Sub-stacks created for `[ ... ]`
and for combinator bodies keep a link to their `enclosing` stack, which is
where the `arg` primitive takes its values from.
"""

from __future__ import annotations

from typing import Iterator, Optional

from stackcalc import CalcValue
from stackcalc.types.errors import StackUnderflow, TypeMismatch
from stackcalc.types.values import (
    Quotation,
    Sequence,
    WordReference,
    is_number,
    type_name,
)


class Stack:
    __slots__ = ("items", "enclosing")

    def __init__(self, items=(), enclosing: Optional[Stack] = None):
        self.items: list[CalcValue] = list(items)
        self.enclosing: Stack | None = enclosing

    def push(self, value: CalcValue) -> None:
        self.items.append(value)

    def pop(self) -> CalcValue:
        if not self.items:
            raise StackUnderflow("operation needs an operand but the stack is empty")
        return self.items.pop()

    def peek(self) -> CalcValue:
        if not self.items:
            raise StackUnderflow("stack is empty")
        return self.items[-1]

    def require(self, count: int) -> None:
        """Raise StackUnderflow unless at least `count` values are present."""
        if len(self.items) < count:
            raise StackUnderflow(
                f"needs {count} operand(s) but the stack holds {len(self.items)}"
            )

    # -------------------------------
    # Typed pops
    # -------------------------------
    def pop_number(self) -> int | float:
        value = self.pop()
        if not is_number(value):
            raise TypeMismatch(f"expected a number, got {type_name(value)}")
        return value

    def pop_integer(self) -> int:
        """Pop a number with an integral value (3 and 3.0 both qualify)."""
        value = self.pop_number()
        if isinstance(value, float):
            if not value.is_integer():
                raise TypeMismatch(f"expected an integer, got {value!r}")
            return int(value)
        return value

    def pop_sequence(self) -> Sequence:
        value = self.pop()
        if not isinstance(value, Sequence):
            raise TypeMismatch(f"expected a sequence, got {type_name(value)}")
        return value

    def pop_quotation(self) -> Quotation:
        value = self.pop()
        if not isinstance(value, Quotation):
            raise TypeMismatch(f"expected a quotation, got {type_name(value)}")
        return value

    def pop_word(self) -> str:
        value = self.pop()
        if not isinstance(value, WordReference):
            raise TypeMismatch(f"expected a quoted word, got {type_name(value)}")
        return value.name

    def snapshot(self) -> list[CalcValue]:
        return list(self.items)

    def clear(self) -> None:
        self.items.clear()

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[CalcValue]:
        return iter(self.items)

    def __repr__(self):
        return f"<Stack {self.items!r}>"
