"""
Token tree produced by the parser.

Comments and section-close tags only exist while parsing; they never
appear in a compiled tree.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple, Union


@dataclass(frozen=True)
class Text:
    value: str


@dataclass(frozen=True)
class Variable:
    name: str
    escape: bool = True


@dataclass(frozen=True)
class Section:
    name: str
    inverted: bool = False
    children: Tuple["Token", ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Partial:
    name: str


Token = Union[Text, Variable, Section, Partial]


def iter_tokens(tokens: Tuple[Token, ...]):
    """Depth-first walk over a token tree, sections before their children."""
    for tok in tokens:
        yield tok
        if isinstance(tok, Section):
            yield from iter_tokens(tok.children)


__all__ = ["Text", "Variable", "Section", "Partial", "Token", "iter_tokens"]
