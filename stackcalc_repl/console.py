"""Console host for stackcalc.

    stackcalc FILE...        load each file, then print the top of the stack
    stackcalc -e CODE        evaluate CODE, then print the top of the stack
    stackcalc                interactive session

The interactive session uses prompt_toolkit with completion over the words
currently in the dictionary. Lines starting with '.' are console commands:
.stack, .words, .clear, .quit.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, Optional, TextIO

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion

from stackcalc.config import get_log_level
from stackcalc.interpreter import EvalResult, Interpreter
from stackcalc.types.errors import CalcError
from stackcalc.types.values import format_value

DOT_CMDS = (".stack", ".words", ".clear", ".quit")


class WordCompleter(Completer):
    """Complete dictionary words (and dot-commands) before the cursor."""

    def __init__(self, interp: Interpreter):
        self.interp = interp

    def get_completions(self, document, complete_event):
        word_before = document.get_word_before_cursor(WORD=True)
        if not word_before:
            return
        if word_before.startswith("."):
            candidates: Iterable[str] = DOT_CMDS
            prefix = word_before
        else:
            candidates = self.interp.dictionary.names()
            # ,name completes to a quoted word
            prefix = word_before.lstrip(",")
        for name in candidates:
            if name.startswith(prefix):
                yield Completion(name, start_position=-len(prefix))


def format_result(result: EvalResult) -> str:
    if not result.ok:
        return f"error: {result.error}"
    if not result.stack:
        return ""
    return format_value(result.top)


def run_command(interp: Interpreter, line: str, out: TextIO) -> bool:
    """Handle a dot-command; returns False when the session should end."""
    cmd = line.strip()
    if cmd == ".quit":
        return False
    if cmd == ".stack":
        for value in interp.stack:
            print(format_value(value), file=out)
    elif cmd == ".words":
        for word, aliases in interp.dictionary.available_words():
            if aliases:
                print(f"{word} (aliases: {', '.join(aliases)})", file=out)
            else:
                print(word, file=out)
    elif cmd == ".clear":
        interp.reset()
    else:
        print(f"unknown command {cmd}; try one of {', '.join(DOT_CMDS)}", file=out)
    return True


def handle_line(interp: Interpreter, line: str, out: TextIO) -> bool:
    """Evaluate or dispatch one console line; returns False to quit."""
    if not line.strip():
        return True
    if line.lstrip().startswith("."):
        return run_command(interp, line, out)
    text = format_result(interp.evaluate_line(line))
    if text:
        print(text, file=out)
    return True


def interactive(interp: Interpreter) -> None:
    session = PromptSession(completer=WordCompleter(interp))
    print("stackcalc. .words lists the dictionary, .quit (or Ctrl-D) leaves.")
    while True:
        try:
            line = session.prompt("calc> ")
        except EOFError:
            break
        except KeyboardInterrupt:
            continue
        if not handle_line(interp, line, sys.stdout):
            break


def run_sources(interp: Interpreter, sources: Iterable[str], out: TextIO) -> int:
    """Load each source text in turn; print the top of stack. Returns an exit code."""
    try:
        for code in sources:
            interp.load(code)
    except (CalcError, OSError, UnicodeDecodeError) as err:
        print(f"Error: {err}", file=out)
        return 1
    if interp.stack.items:
        print(format_value(interp.stack.items[-1]), file=out)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="stackcalc", description="Postfix stack calculator")
    parser.add_argument("files", nargs="*", type=Path, help="source files to load in order")
    parser.add_argument("-e", "--eval", dest="code", help="evaluate CODE instead of files")
    parser.add_argument("--no-prelude", action="store_true", help="start without the standard prelude")
    args = parser.parse_args(argv)

    logging.basicConfig(level=get_log_level())
    interp = Interpreter(prelude=None if args.no_prelude else 'auto')

    if args.code is not None:
        return run_sources(interp, [args.code], sys.stdout)
    if args.files:
        return run_sources(interp, (p.read_text(encoding="utf-8") for p in args.files), sys.stdout)
    interactive(interp)
    return 0


if __name__ == "__main__":
    sys.exit(main())
