"""Hosts for the stackcalc engine.

This package provides:
- An interactive console (prompt_toolkit) and script runner.
- A simple TCP REPL server to evaluate code via the existing Interpreter.

Both talk to the engine only through `Interpreter.load` and
`Interpreter.evaluate_line`.
"""

__all__ = [
    "console",
    "repl_server",
]
