# Core type aliases for stackcalc's data model.
# Runtime values are plain Python objects where one fits (int/float for
# Number) and small frozen classes from stackcalc.types.values otherwise.
#
# Naming guidance:
# - Token:     Use in reader/evaluator code for a single classified token,
#              a (token_type, value) tuple.
# - CalcValue: Use in evaluator/runtime code to denote a value on the stack.

from typing import Any, Callable

# Runtime value alias
CalcValue = Any

# Reader token: (token_type, value)
Token = tuple[str, Any]

# Native primitive: receives the running evaluator and the stack it acts on
PrimitiveFn = Callable[..., None]
