"""Combinators: primitives whose operands include quotations.

Each handler pops its operands, then re-enters the evaluator to run the
quotation. `map`, `filter`, `fold` and `fold1` run the quotation on a fresh
sub-stack per step and take the step's result from its top; `repeat`, `if`
and `apply` run on the caller's stack.
"""

from __future__ import annotations

from stackcalc import CalcValue
from stackcalc.evaluation.evaluator import Evaluator
from stackcalc.types.errors import ArityError, EmptySequence, TypeMismatch
from stackcalc.types.stack import Stack
from stackcalc.types.values import (
    Quotation,
    Sequence,
    WordReference,
    is_number,
    type_name,
)


def _step_result(sub: Stack, combinator: str) -> CalcValue:
    if not sub.items:
        raise ArityError(f"{combinator} quotation left no result on the stack")
    return sub.items[-1]


def map_combinator(evaluator: Evaluator, stack: Stack) -> None:
    """seq quot map -> seq'"""
    quotation = stack.pop_quotation()
    values = stack.pop_sequence()
    result = []
    for value in values:
        sub = evaluator.run_isolated(quotation, [value], stack)
        result.append(_step_result(sub, "map"))
    stack.push(Sequence(result))


def filter_combinator(evaluator: Evaluator, stack: Stack) -> None:
    """seq quot filter -> seq' (elements whose quotation result is non-zero)"""
    quotation = stack.pop_quotation()
    values = stack.pop_sequence()
    kept = []
    for value in values:
        sub = evaluator.run_isolated(quotation, [value], stack)
        flag = _step_result(sub, "filter")
        if not is_number(flag):
            raise TypeMismatch(f"filter quotation must leave a number, got {type_name(flag)}")
        if flag != 0:
            kept.append(value)
    stack.push(Sequence(kept))


def _reduce(evaluator: Evaluator, stack: Stack, quotation: Quotation, acc, values, name: str) -> None:
    for value in values:
        sub = evaluator.run_isolated(quotation, [acc, value], stack)
        acc = _step_result(sub, name)
    stack.push(acc)


def fold(evaluator: Evaluator, stack: Stack) -> None:
    """seq init quot fold -> acc"""
    quotation = stack.pop_quotation()
    init = stack.pop()
    values = stack.pop_sequence()
    _reduce(evaluator, stack, quotation, init, values, "fold")


def fold1(evaluator: Evaluator, stack: Stack) -> None:
    """seq quot fold1 -> acc, seeded with the first element"""
    quotation = stack.pop_quotation()
    values = stack.pop_sequence()
    if not values:
        raise EmptySequence("fold1 needs at least one element")
    _reduce(evaluator, stack, quotation, values[0], values[1:], "fold1")


def repeat(evaluator: Evaluator, stack: Stack) -> None:
    """quot n repeat -> runs quot n times on the shared stack"""
    count = stack.pop_integer()
    quotation = stack.pop_quotation()
    if count < 0:
        raise TypeMismatch(f"repeat count must be non-negative, got {count}")
    for _ in range(count):
        evaluator.run_quotation(quotation, stack)


def if_combinator(evaluator: Evaluator, stack: Stack) -> None:
    """cond then else if"""
    else_branch = stack.pop()
    then_branch = stack.pop()
    test = stack.pop_number()
    branch = then_branch if test != 0 else else_branch
    # Non-quotation branches are plain values
    if isinstance(branch, Quotation):
        evaluator.run_quotation(branch, stack)
    else:
        stack.push(branch)


def apply(evaluator: Evaluator, stack: Stack) -> None:
    """quot apply | ,word apply"""
    op = stack.pop()
    if isinstance(op, Quotation):
        evaluator.run_quotation(op, stack)
    elif isinstance(op, WordReference):
        evaluator.call(op.name, stack)
    else:
        raise TypeMismatch(f"apply expects a quotation or quoted word, got {type_name(op)}")
