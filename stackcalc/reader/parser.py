"""
  stackcalc Reader and Lexer

- Single pass, whitespace delimited
- Classifies tokens only, nothing is evaluated here:

    - `# ...`      -> comment, dropped up to end of line
    - `{` `}`      -> quotation delimiters
    - `[` `]`      -> array-build delimiters
    - `,name`      -> quoted word (pushed as a reference, not called)
    - `-1.5`, `42` -> number literal (optional sign, optional fraction)
    - anything else -> bare word

   n.b. Delimiters never need surrounding whitespace, so `[1 2 3]` and
   `{dup mul}` read the same as their spaced-out forms.
"""

from __future__ import annotations

import re
from typing import Iterator

from stackcalc import Token
from stackcalc.types.errors import ParseError


TOKEN_RE = re.compile(
    r"\s*(?:"
    r"(?P<comment>\#[^\n]*)"  # comment to end of line
    r"|(?P<lbrace>\{)"  # {
    r"|(?P<rbrace>\})"  # }
    r"|(?P<lbracket>\[)"  # [
    r"|(?P<rbracket>\])"  # ]
    r"|(?P<quoted>,[^\s{}\[\]\#,]+)"  # ,name
    r"|(?P<stray_comma>,)"  # comma with no name attached
    r"|(?P<word>[^\s{}\[\]\#]+)"  # fallback: words and numbers
    r")",
)

NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)")

OPENERS: dict[str, str] = {"lbrace": "rbrace", "lbracket": "rbracket"}
CLOSERS: dict[str, str] = {v: k for k, v in OPENERS.items()}
DELIMITER_TEXT: dict[str, str] = {
    "lbrace": "{",
    "rbrace": "}",
    "lbracket": "[",
    "rbracket": "]",
}


def _scan(source: str) -> Iterator[tuple[str, str, int]]:
    """Yield (token_type, text, offset) for every token in `source`."""
    pos = 0
    n = len(source)
    while pos < n:
        m = TOKEN_RE.match(source, pos)
        if not m or m.end() == pos:
            # only trailing whitespace left
            break
        pos = m.end()
        kind = m.lastgroup
        text = m.group(kind)
        offset = m.start(kind)
        if kind == "comment":
            continue
        if kind == "stray_comma":
            raise ParseError(f"',' at offset {offset} is not followed by a name")
        if kind == "word" and NUMBER_RE.fullmatch(text):
            kind = "number"
        yield kind, text, offset


def lex(source: str) -> Iterator[tuple[str, str]]:
    """Token generator: yields (token_type, token_text) tuples."""
    for kind, text, _ in _scan(source):
        yield kind, text


def parse_number(text: str) -> int | float:
    if not NUMBER_RE.fullmatch(text):
        raise ParseError(f"malformed number literal {text!r}")
    if "." in text:
        return float(text)
    return int(text)


def read(source: str) -> list[Token]:
    """Read `source` into a flat token list ready for evaluation.

    Number tokens carry their int/float value and quoted tokens carry the bare
    name. Raises ParseError when `{ }` or `[ ]` are unbalanced or interleaved.
    """
    tokens: list[Token] = []
    open_delims: list[tuple[str, int]] = []
    for kind, text, offset in _scan(source):
        if kind in OPENERS:
            open_delims.append((kind, offset))
        elif kind in CLOSERS:
            if not open_delims:
                raise ParseError(f"unmatched '{text}' at offset {offset}")
            opener, opened_at = open_delims.pop()
            if OPENERS[opener] != kind:
                raise ParseError(
                    f"'{DELIMITER_TEXT[opener]}' at offset {opened_at} "
                    f"closed by '{text}' at offset {offset}"
                )
        if kind == "number":
            tokens.append((kind, parse_number(text)))
        elif kind == "quoted":
            tokens.append((kind, text[1:]))
        else:
            tokens.append((kind, text))
    if open_delims:
        opener, opened_at = open_delims[-1]
        raise ParseError(f"unclosed '{DELIMITER_TEXT[opener]}' at offset {opened_at}")
    return tokens


def find_closing(tokens: list[Token] | tuple[Token, ...], start: int) -> int:
    """Return the index of the delimiter closing the opener at `start`."""
    opener = tokens[start][0]
    closer = OPENERS[opener]
    depth = 0
    for i in range(start, len(tokens)):
        kind = tokens[i][0]
        if kind == opener:
            depth += 1
        elif kind == closer:
            depth -= 1
            if depth == 0:
                return i
    raise ParseError(f"unclosed '{DELIMITER_TEXT[opener]}'")
