"""Native primitives for the stackcalc dictionary.

This module defines arithmetic, comparison, stack shuffling, definition,
sequence and I/O primitives, and `register`, which installs them (together
with the combinators) into a Dictionary before any prelude is loaded.

Every primitive takes the running Evaluator and the Stack it acts on. The
evaluator has already checked that the declared arity is available.
"""
from __future__ import annotations

import logging
import math
import operator
from typing import Callable

from stackcalc.evaluation import combinators
from stackcalc.evaluation.evaluator import Evaluator
from stackcalc.reader.parser import NUMBER_RE, parse_number
from stackcalc.types.dictionary import Dictionary, Primitive, UserQuotation
from stackcalc.types.errors import (
    DivisionByZero,
    DomainError,
    ParseError,
    TypeMismatch,
    UnexpectedEndOfInput,
)
from stackcalc.types.stack import Stack
from stackcalc.types.values import format_value, is_number, type_name

logger = logging.getLogger(__name__)


# -------------------------------
# Arithmetic
# -------------------------------
def _binop(op: Callable) -> Callable[[Evaluator, Stack], None]:
    """Build a primitive for `x y op`; int op int stays int."""
    def primitive(evaluator: Evaluator, stack: Stack) -> None:
        y = stack.pop_number()
        x = stack.pop_number()
        try:
            stack.push(op(x, y))
        except OverflowError as ex:
            # an int too large to mix with a float
            raise DomainError(f"{op.__name__}: {ex}") from ex
    primitive.__name__ = op.__name__
    return primitive


add = _binop(operator.add)
sub = _binop(operator.sub)
mul = _binop(operator.mul)
maximum = _binop(max)
minimum = _binop(min)


def div(evaluator: Evaluator, stack: Stack) -> None:
    """x y div -> x / y, always a float."""
    y = stack.pop_number()
    x = stack.pop_number()
    if y == 0:
        raise DivisionByZero("division by zero")
    try:
        stack.push(x / y)
    except OverflowError as ex:
        raise DomainError(f"div: {ex}") from ex


def mod(evaluator: Evaluator, stack: Stack) -> None:
    """x y mod -> x % y (floored, sign of the divisor)."""
    y = stack.pop_number()
    x = stack.pop_number()
    if y == 0:
        raise DivisionByZero("modulo by zero")
    try:
        stack.push(x % y)
    except OverflowError as ex:
        raise DomainError(f"mod: {ex}") from ex


def power(evaluator: Evaluator, stack: Stack) -> None:
    """x y pow -> x ** y"""
    y = stack.pop_number()
    x = stack.pop_number()
    if isinstance(x, int) and isinstance(y, int) and y >= 0:
        stack.push(x ** y)
        return
    try:
        stack.push(math.pow(x, y))
    except (ValueError, OverflowError, ZeroDivisionError) as ex:
        raise DomainError(f"{x} pow {y}: {ex}") from ex


def log(evaluator: Evaluator, stack: Stack) -> None:
    """x base log -> logarithm of x in the given base."""
    base = stack.pop_number()
    x = stack.pop_number()
    try:
        stack.push(math.log(x, base))
    except (ValueError, ZeroDivisionError) as ex:
        raise DomainError(f"{x} {base} log: {ex}") from ex


def cmp(evaluator: Evaluator, stack: Stack) -> None:
    """a b cmp -> -1, 0 or 1 for a < b, a = b, a > b."""
    b = stack.pop_number()
    a = stack.pop_number()
    stack.push((a > b) - (a < b))


# -------------------------------
# Stack shuffling
# -------------------------------
def dup(evaluator: Evaluator, stack: Stack) -> None:
    stack.push(stack.peek())


def swap(evaluator: Evaluator, stack: Stack) -> None:
    a = stack.pop()
    b = stack.pop()
    stack.push(a)
    stack.push(b)


def pop(evaluator: Evaluator, stack: Stack) -> None:
    stack.pop()


def over(evaluator: Evaluator, stack: Stack) -> None:
    """a b over -> a b a"""
    stack.push(stack.items[-2])


def roll3(evaluator: Evaluator, stack: Stack) -> None:
    """a b c roll3 -> b c a"""
    stack.push(stack.items.pop(-3))


def arg(evaluator: Evaluator, stack: Stack) -> None:
    """Move the top of the enclosing stack onto this one.

    Outside `[ ... ]` and combinator bodies there is no enclosing stack and
    `arg` does nothing.
    """
    if stack.enclosing is not None:
        stack.push(stack.enclosing.pop())


# -------------------------------
# Definitions
# -------------------------------
def define(evaluator: Evaluator, stack: Stack) -> None:
    """,name { body } def"""
    quotation = stack.pop_quotation()
    name = stack.pop_word()
    evaluator.dictionary.define(name, UserQuotation(name, quotation.tokens))
    logger.debug("defined %s", name)


def alias(evaluator: Evaluator, stack: Stack) -> None:
    """,new ,existing alias"""
    existing = stack.pop_word()
    new_name = stack.pop_word()
    evaluator.dictionary.alias(new_name, existing)
    logger.debug("aliased %s to %s", new_name, existing)


# -------------------------------
# Sequences
# -------------------------------
def length(evaluator: Evaluator, stack: Stack) -> None:
    stack.push(len(stack.pop_sequence()))


def total(evaluator: Evaluator, stack: Stack) -> None:
    values = stack.pop_sequence()
    for v in values:
        if not is_number(v):
            raise TypeMismatch(f"sum expects numbers, got {type_name(v)}")
    try:
        stack.push(sum(values))
    except OverflowError as ex:
        raise DomainError(f"sum: {ex}") from ex


# -------------------------------
# I/O
# -------------------------------
def print_value(evaluator: Evaluator, stack: Stack) -> None:
    out = evaluator.stdout
    out.write(format_value(stack.pop()) + "\n")
    out.flush()


def read_number(evaluator: Evaluator, stack: Stack) -> None:
    line = evaluator.stdin.readline()
    if not line:
        raise UnexpectedEndOfInput("stdin is exhausted")
    text = line.strip()
    if not NUMBER_RE.fullmatch(text):
        raise ParseError(f"cannot read {text!r} as a number")
    stack.push(parse_number(text))


PRIMITIVES: dict[str, tuple[Callable, int]] = {
    # Arithmetic
    "add": (add, 2),
    "sub": (sub, 2),
    "mul": (mul, 2),
    "div": (div, 2),
    "mod": (mod, 2),
    "pow": (power, 2),
    "log": (log, 2),
    "max": (maximum, 2),
    "min": (minimum, 2),
    "cmp": (cmp, 2),
    # Stack manipulation
    "dup": (dup, 1),
    "swap": (swap, 2),
    "pop": (pop, 1),
    "over": (over, 2),
    "roll3": (roll3, 3),
    "arg": (arg, 0),
    # Definitions
    "def": (define, 2),
    "alias": (alias, 2),
    # Combinators
    "apply": (combinators.apply, 1),
    "map": (combinators.map_combinator, 2),
    "filter": (combinators.filter_combinator, 2),
    "fold": (combinators.fold, 3),
    "fold1": (combinators.fold1, 2),
    "repeat": (combinators.repeat, 2),
    "if": (combinators.if_combinator, 3),
    # Sequences
    "len": (length, 1),
    "sum": (total, 1),
    # IO
    "print": (print_value, 1),
    "stdin": (read_number, 0),
}


def register(dictionary: Dictionary) -> None:
    """Register all primitives into the given dictionary."""
    dictionary.update(
        {name: Primitive(name, fn, arity) for name, (fn, arity) in PRIMITIVES.items()}
    )
