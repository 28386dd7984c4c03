"""
Token tree evaluation against a data context.

The renderer never mutates the token tree; each render call keeps its own
context stack, so a compiled template can be rendered from several threads.
"""
from __future__ import annotations

import io
import logging
from collections.abc import Iterable, Mapping, Sized
from typing import Any, BinaryIO, Callable, Dict, List, Optional, Sequence, TextIO, Tuple, Union

from .errors import LookupTypeError, PartialRecursionError, UnknownTokenError
from .escaping import html_escape
from .parser import parse
from .tokens import Partial, Section, Text, Token, Variable

logger = logging.getLogger(__name__)

DEFAULT_MAX_PARTIAL_DEPTH = 100


# -----------------------------
# Context lookup
# -----------------------------
def lookup(context: Any, name: str) -> Tuple[bool, Any]:
    """Look ``name`` up in a single mapping context.

    Returns ``(found, value)``; raises LookupTypeError when the context
    does not support name lookup.
    """
    if not isinstance(context, Mapping):
        raise LookupTypeError(context, name)
    if name in context:
        return True, context[name]
    return False, None


def _resolve_part(value: Any, part: str) -> Tuple[bool, Any]:
    if isinstance(value, Mapping):
        return lookup(value, part)
    if isinstance(value, (list, tuple)) and part.isdigit():
        idx = int(part)
        if idx < len(value):
            return True, value[idx]
    return False, None


def lookup_stack(ctx_stack: Sequence[Any], name: str) -> Tuple[bool, Any]:
    """Resolve a possibly dotted name against a context stack, innermost first."""
    if name == ".":
        return True, ctx_stack[-1]

    head, *rest = name.split(".")
    for ctx in reversed(ctx_stack):
        # Scalars pushed by sections (list items, truthy values) cannot answer lookups.
        if not isinstance(ctx, Mapping):
            continue
        found, value = lookup(ctx, head)
        if found:
            break
    else:
        root = ctx_stack[0]
        if not isinstance(root, Mapping):
            raise LookupTypeError(root, name)
        return False, None

    for part in rest:
        found, value = _resolve_part(value, part)
        if not found:
            return False, None
    return True, value


def is_truthy(val: Any) -> bool:
    if val is None:
        return False
    if val is False:
        return False
    # Empty strings, lists, sets, ranges and mappings are all falsy.
    if isinstance(val, Sized) and len(val) == 0:
        return False
    return True


def section_items(val: Any) -> List[Any]:
    """Context values a section renders its children against, one pass each."""
    if isinstance(val, (str, bytes, Mapping)) or not isinstance(val, Iterable):
        return [val]
    return list(val)


class _EncodingWriter:
    """Adapts a binary sink to the ``write(str)`` calls the renderer makes."""

    def __init__(self, out: BinaryIO, encoding: str):
        self._out = out
        self._encoding = encoding

    def write(self, s: str) -> None:
        self._out.write(s.encode(self._encoding))


def _is_binary(out: Any) -> bool:
    return isinstance(out, (io.RawIOBase, io.BufferedIOBase))


# -----------------------------
# Renderer
# -----------------------------
class Renderer:
    """Walks a token tree and writes the output.

    ``partials`` is the partial registry: any object with ``get(name)``
    returning a compiled Template, template source text, or None when the
    partial does not exist. A plain dict of sources qualifies.
    """

    def __init__(
        self,
        partials: Optional[Any] = None,
        escape: Callable[[str], str] = html_escape,
        max_partial_depth: int = DEFAULT_MAX_PARTIAL_DEPTH,
    ):
        self.partials = partials
        self.escape = escape
        self.max_partial_depth = max_partial_depth
        self._parsed_sources: Dict[str, Tuple[Token, ...]] = {}

    def render(self, tokens: Sequence[Token], context: Any = None) -> str:
        buf = io.StringIO()
        self.render_to(buf, tokens, context)
        return buf.getvalue()

    def render_to(
        self,
        out: Union[TextIO, BinaryIO],
        tokens: Sequence[Token],
        context: Any = None,
        encoding: str = "utf-8",
    ) -> None:
        """Write the output to a text sink, or encoded to a binary one."""
        if _is_binary(out):
            out = _EncodingWriter(out, encoding)
        self._render_tokens(out, tokens, [context], 0)

    def _render_tokens(self, out: TextIO, tokens: Sequence[Token], ctx_stack: List[Any], depth: int) -> None:
        for tok in tokens:
            if isinstance(tok, Text):
                out.write(tok.value)
            elif isinstance(tok, Variable):
                self._render_variable(out, tok, ctx_stack)
            elif isinstance(tok, Section):
                self._render_section(out, tok, ctx_stack, depth)
            elif isinstance(tok, Partial):
                self._render_partial(out, tok, ctx_stack, depth)
            else:
                raise UnknownTokenError(tok)

    def _render_variable(self, out: TextIO, tok: Variable, ctx_stack: List[Any]) -> None:
        found, val = lookup_stack(ctx_stack, tok.name)
        if not found or val is None:
            return
        s = str(val)
        out.write(self.escape(s) if tok.escape else s)

    def _render_section(self, out: TextIO, tok: Section, ctx_stack: List[Any], depth: int) -> None:
        _, val = lookup_stack(ctx_stack, tok.name)
        if tok.inverted:
            if not is_truthy(val):
                self._render_tokens(out, tok.children, ctx_stack, depth)
            return

        if not is_truthy(val):
            return
        for item in section_items(val):
            ctx_stack.append(item)
            try:
                self._render_tokens(out, tok.children, ctx_stack, depth)
            finally:
                ctx_stack.pop()

    def _render_partial(self, out: TextIO, tok: Partial, ctx_stack: List[Any], depth: int) -> None:
        if depth >= self.max_partial_depth:
            raise PartialRecursionError(tok.name, self.max_partial_depth)
        tokens = self._load_partial(tok.name)
        if tokens is None:
            logger.debug("Partial %r not found, rendering nothing", tok.name)
            return
        self._render_tokens(out, tokens, ctx_stack, depth + 1)

    def _load_partial(self, name: str) -> Optional[Sequence[Token]]:
        if self.partials is None:
            return None
        found = self.partials.get(name)
        if found is None:
            return None
        if isinstance(found, str):
            if name not in self._parsed_sources:
                self._parsed_sources[name] = parse(found)
            return self._parsed_sources[name]
        return found.tokens


__all__ = ["Renderer", "lookup", "lookup_stack", "is_truthy", "section_items", "DEFAULT_MAX_PARTIAL_DEPTH"]
