"""
Error kinds raised while compiling or rendering templates.

Every error aborts the whole compile/render call; nothing is recovered.
"""
from __future__ import annotations

from typing import Optional


class MustacheError(Exception):
    """Base class for all tinymustache errors."""


# -----------------------------
# Compile errors
# -----------------------------
class CompileError(MustacheError):
    def __init__(self, message: str, position: int = 0, line: int = 1, column: int = 1):
        super().__init__(f"{message} at {line}:{column}")
        self.message = message
        self.position = position
        self.line = line
        self.column = column


class UnexpectedTagSigil(CompileError):
    def __init__(self, sigil: str, position: int = 0, line: int = 1, column: int = 1):
        super().__init__(f"Unexpected tag type {sigil!r}", position, line, column)
        self.sigil = sigil


class IllegalTagContent(CompileError):
    def __init__(self, content: str, position: int = 0, line: int = 1, column: int = 1):
        super().__init__(f"Illegal content in tag {content!r}", position, line, column)
        self.content = content


class UnclosedTag(CompileError):
    def __init__(self, closing: str, position: int = 0, line: int = 1, column: int = 1):
        super().__init__(f"Unclosed tag, expected {closing!r}", position, line, column)
        self.closing = closing


class UnclosedSection(CompileError):
    def __init__(self, name: str, position: int = 0, line: int = 1, column: int = 1):
        super().__init__(f"Unclosed section {name!r}", position, line, column)
        self.name = name


class SectionMismatch(CompileError):
    def __init__(self, expected: Optional[str], found: str, position: int = 0, line: int = 1, column: int = 1):
        if expected is None:
            message = f"Unexpected section end {found!r}, no section is open"
        else:
            message = f"Section {expected!r} closed by {found!r}"
        super().__init__(message, position, line, column)
        self.expected = expected
        self.found = found


# -----------------------------
# Scanner errors
# -----------------------------
class OutOfRange(MustacheError, IndexError):
    """Cursor or substring bounds outside the scanned input (a parser bug)."""


# -----------------------------
# Render errors
# -----------------------------
class RenderError(MustacheError):
    pass


class LookupTypeError(RenderError, TypeError):
    def __init__(self, context: object, name: str):
        super().__init__(
            f"Cannot look up {name!r}: only mappings are supported, found context of type {type(context).__name__}"
        )
        self.name = name


class PartialRecursionError(RenderError):
    def __init__(self, name: str, depth: int):
        super().__init__(f"Partial {name!r} exceeded the maximum nesting depth of {depth}")
        self.name = name
        self.depth = depth


class UnknownTokenError(RenderError, TypeError):
    def __init__(self, token: object):
        super().__init__(f"Unknown token {token!r}")
        self.token = token


__all__ = [
    "MustacheError",
    "CompileError",
    "UnexpectedTagSigil",
    "IllegalTagContent",
    "UnclosedTag",
    "UnclosedSection",
    "SectionMismatch",
    "OutOfRange",
    "RenderError",
    "LookupTypeError",
    "PartialRecursionError",
    "UnknownTokenError",
]
