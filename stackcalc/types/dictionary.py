"""The word dictionary for stackcalc.

The Dictionary maps names to Definitions. There is a single flat namespace:
primitives and user words live side by side and a later `def` of any name
replaces the earlier binding. Definitions are immutable, so binding one under
a second name (`alias`) is a copy in every observable way.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from io import StringIO
from typing import Iterator, Union

from stackcalc import PrimitiveFn, Token
from stackcalc.types.errors import TypeMismatch, UnknownWord


@dataclass(frozen=True)
class Primitive:
    """A native operation that consumes `arity` values from the stack."""

    name: str
    fn: PrimitiveFn
    arity: int = 0

    def __repr__(self):
        return f"<primitive {self.name}>"


@dataclass(frozen=True)
class UserQuotation:
    """A token sequence bound to a name by `def`."""

    name: str
    tokens: tuple[Token, ...]

    def __repr__(self):
        return f"<word {self.name}>"


Definition = Union[Primitive, UserQuotation]


class Dictionary:
    """Mapping from word names to Definitions, last write wins."""

    __slots__ = ("words",)

    def __init__(self):
        self.words: dict[str, Definition] = {}

    def define(self, name: str, definition: Definition) -> None:
        """Bind `name` to `definition`, replacing any existing binding.

        Raises TypeMismatch if `name` is not a non-empty string.
        """
        if not isinstance(name, str) or not name:
            raise TypeMismatch(f"Cannot define {name!r} as a word")
        self.words[name] = definition

    def lookup(self, name: str) -> Definition:
        """Return the current Definition of `name`.

        Raises UnknownWord if nothing is bound to it.
        """
        try:
            return self.words[name]
        except KeyError:
            raise UnknownWord(f"unknown word '{name}'") from None

    def alias(self, new_name: str, existing: str) -> None:
        """Bind `new_name` to a copy of the current Definition of `existing`."""
        definition = dataclasses.replace(self.lookup(existing))
        self.define(new_name, definition)

    def update(self, mapping: dict[str, Definition]) -> None:
        """Bulk-define a mapping of name -> Definition."""
        for k, v in mapping.items():
            self.define(k, v)

    def names(self) -> list[str]:
        return sorted(self.words)

    def _is_alias(self, name: str) -> bool:
        # An alias keeps the name of the definition it copied
        definition = self.words[name]
        return definition.name != name and self.words.get(definition.name) == definition

    def available_words(self) -> list[tuple[str, list[str]]]:
        """Sorted (word, aliases) pairs.

        A name counts as an alias only while the word it copied is still bound
        to the same definition; once the original is redefined the alias is
        listed as a word of its own.
        """
        groups: dict[str, list[str]] = {
            name: [] for name in self.names() if not self._is_alias(name)
        }
        for name in self.names():
            if self._is_alias(name):
                groups[self.words[name].name].append(name)
        return list(groups.items())

    def __contains__(self, name: object) -> bool:
        return name in self.words

    def __iter__(self) -> Iterator[str]:
        return iter(self.words)

    def __len__(self) -> int:
        return len(self.words)

    def __str__(self) -> str:
        with StringIO() as buffer:
            buffer.write("{")
            buffer.write(", ".join(f"{k}: {v!r}" for k, v in self.words.items()))
            buffer.write("}")
            return buffer.getvalue()

    def __repr__(self) -> str:
        return f"<Dictionary of {len(self.words)} words>"
