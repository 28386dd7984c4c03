"""
Template parser.

Drives a Scanner through "try a tag, otherwise consume text" until the
input is exhausted, building the token tree and applying the
standalone-line whitespace rules.

Supported tags:
- Variables: {{name}} (HTML-escaped), {{{name}}} and {{&name}} (unescaped)
- Sections: {{#name}} ... {{/name}}
- Inverted sections: {{^name}} ... {{/name}}
- Comments: {{! comment }}
- Partials: {{> name}}
"""
from __future__ import annotations

from dataclasses import dataclass, field
import enum
import logging
import re
from typing import List, Tuple

from .errors import (
    IllegalTagContent,
    SectionMismatch,
    UnclosedSection,
    UnclosedTag,
    UnexpectedTagSigil,
)
from .scanner import Scanner
from .tokens import Partial, Section, Text, Token, Variable

logger = logging.getLogger(__name__)

# -----------------------------
# Patterns
# -----------------------------
_OPEN_TAG = re.compile(r"([ \t]*)\{\{")
# Indentation is only split off when it starts a line; mid-line it stays with the text.
_NEXT_OPEN_TAG = re.compile(r"(^[ \t]*)?\{\{", re.MULTILINE)
_SIGIL = re.compile(r"[!{&#^/>]")
_NOT_CONTENT = re.compile(r"[^\s\w?!/.\-}]")
_WHITESPACE = re.compile(r"\s*")
_CONTENT = re.compile(r"[\w?!/.\-]+")
_STANDALONE_TAIL = re.compile(r"[ \t]*(?:\r?\n|\Z)")
_COMMENT_END = re.compile(r"[ \t]*!?\}\}")


class TagKind(enum.Enum):
    VARIABLE = "variable"
    UNESCAPED = "unescaped"      # {{{name}}}
    AMPERSAND = "ampersand"      # {{&name}}
    SECTION = "section"
    INVERTED = "inverted"
    CLOSE = "close"
    PARTIAL = "partial"
    COMMENT = "comment"


_SIGILS = {
    "!": TagKind.COMMENT,
    "{": TagKind.UNESCAPED,
    "&": TagKind.AMPERSAND,
    "#": TagKind.SECTION,
    "^": TagKind.INVERTED,
    "/": TagKind.CLOSE,
    ">": TagKind.PARTIAL,
}

# (pattern, literal used in error messages)
_CLOSE_TAG = {
    TagKind.UNESCAPED: (re.compile(r"\}\}\}"), "}}}"),
    TagKind.COMMENT: (re.compile(r"!?\}\}"), "}}"),
}
_DEFAULT_CLOSE_TAG = (re.compile(r"\}\}"), "}}")

# Tags that remove their whole line when nothing else is on it.
_STANDALONE_KINDS = frozenset({
    TagKind.COMMENT,
    TagKind.SECTION,
    TagKind.INVERTED,
    TagKind.CLOSE,
    TagKind.PARTIAL,
})


# -----------------------------
# Parse-time records
# -----------------------------
@dataclass(frozen=True)
class OpenTag:
    padding: str
    start_of_line: bool
    position: int          # offset of "{{"


@dataclass(frozen=True)
class TagContent:
    value: str
    position: int


@dataclass
class _Frame:
    name: str
    inverted: bool
    position: int
    tokens: List[Token] = field(default_factory=list)

    def close(self) -> Section:
        return Section(self.name, self.inverted, tuple(self.tokens))


class Parser:
    def __init__(self, text: str):
        self.scanner = Scanner(text)
        self.root = _Frame(name="", inverted=False, position=0)
        self.sections: List[_Frame] = []

    def parse(self) -> Tuple[Token, ...]:
        while not self.scanner.done():
            if self._parse_tag():
                continue
            self._parse_text()

        if self.sections:
            outer = self.sections[0]
            raise UnclosedSection(outer.name, outer.position, *self.scanner.line_col(outer.position))

        logger.debug("Parsed template of length %d into %d root tokens", len(self.scanner), len(self.root.tokens))
        return tuple(self.root.tokens)

    # -----------------------------
    # Emission
    # -----------------------------
    def _current(self) -> _Frame:
        return self.sections[-1] if self.sections else self.root

    def _emit(self, token: Token) -> None:
        self._current().tokens.append(token)

    # -----------------------------
    # Text
    # -----------------------------
    def _parse_text(self) -> None:
        s = self.scanner
        m = s.check_until(_NEXT_OPEN_TAG)
        if m is None:
            self._emit(Text(s.substring(s.pos, len(s))))
            s.set_pos(len(s))
            return
        before = m.before
        self._emit(Text(before))
        s.set_pos(s.pos + len(before))

    # -----------------------------
    # Tags
    # -----------------------------
    def _parse_tag(self) -> bool:
        s = self.scanner
        start_of_line = s.at_start_of_line()
        m = s.scan(_OPEN_TAG)
        if m is None:
            return False

        padding = m.group(1) or ""
        tag = OpenTag(padding, start_of_line, s.pos - 2)

        # Padding at a line start is held back: the line may turn out to be standalone.
        if not start_of_line and padding:
            self._emit(Text(padding))

        kind = self._parse_kind(tag)
        s.scan(_WHITESPACE)
        content = self._parse_content(kind, tag)
        self._parse_close(kind, content, tag)

        standalone = (
            start_of_line
            and kind in _STANDALONE_KINDS
            and s.scan(_STANDALONE_TAIL) is not None
        )
        if start_of_line and padding and not standalone:
            self._emit(Text(padding))

        self._apply(kind, content, tag)
        return True

    def _error_location(self, position: int) -> Tuple[int, int, int]:
        line, column = self.scanner.line_col(position)
        return position, line, column

    def _parse_kind(self, tag: OpenTag) -> TagKind:
        s = self.scanner
        m = s.scan(_SIGIL)
        if m is not None:
            return _SIGILS[m.text]
        bad = s.check(_NOT_CONTENT)
        if bad is not None:
            raise UnexpectedTagSigil(bad.text, *self._error_location(tag.position))
        return TagKind.VARIABLE

    def _parse_content(self, kind: TagKind, tag: OpenTag) -> TagContent:
        s = self.scanner
        start = s.pos
        if kind is TagKind.COMMENT:
            m = s.scan_until(_COMMENT_END)
            if m is None:
                raise UnclosedTag("}}", *self._error_location(tag.position))
            # Leave the close sequence for _parse_close.
            s.set_pos(s.pos - len(m.text))
            return TagContent(m.before, start)

        m = s.scan(_CONTENT)
        return TagContent(m.text if m is not None else "", start)

    def _parse_close(self, kind: TagKind, content: TagContent, tag: OpenTag) -> None:
        s = self.scanner
        pattern, literal = _CLOSE_TAG.get(kind, _DEFAULT_CLOSE_TAG)
        s.scan(_WHITESPACE)
        if (content.value or kind is TagKind.COMMENT) and s.scan(pattern) is not None:
            return

        ahead = s.check_until(pattern)
        if ahead is None:
            raise UnclosedTag(literal, *self._error_location(tag.position))
        region = s.text[content.position:s.pos + len(ahead.before)].strip()
        raise IllegalTagContent(region, *self._error_location(content.position))

    def _apply(self, kind: TagKind, content: TagContent, tag: OpenTag) -> None:
        name = content.value
        if kind is TagKind.COMMENT:
            return
        if kind is TagKind.VARIABLE:
            self._emit(Variable(name, escape=True))
        elif kind in (TagKind.UNESCAPED, TagKind.AMPERSAND):
            self._emit(Variable(name, escape=False))
        elif kind in (TagKind.SECTION, TagKind.INVERTED):
            self.sections.append(_Frame(name, kind is TagKind.INVERTED, tag.position))
        elif kind is TagKind.CLOSE:
            self._close_section(name, tag)
        elif kind is TagKind.PARTIAL:
            self._emit(Partial(name))
        else:
            raise AssertionError(f"unhandled tag kind {kind}")

    def _close_section(self, name: str, tag: OpenTag) -> None:
        if not self.sections:
            raise SectionMismatch(None, name, *self._error_location(tag.position))
        top = self.sections[-1]
        if top.name != name:
            raise SectionMismatch(top.name, name, *self._error_location(tag.position))
        self.sections.pop()
        self._emit(top.close())


def parse(text: str) -> Tuple[Token, ...]:
    """Parse template source into its root token sequence."""
    return Parser(text).parse()


__all__ = ["Parser", "TagKind", "OpenTag", "TagContent", "parse"]
