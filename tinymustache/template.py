"""Compiled templates."""
from __future__ import annotations

from typing import Any, BinaryIO, Callable, Optional, TextIO, Tuple, Union

from .escaping import html_escape
from .parser import parse
from .renderer import DEFAULT_MAX_PARTIAL_DEPTH, Renderer
from .tokens import Token


class Template:
    """An immutable compiled template.

    Rendering never touches the token tree, so one instance can be shared
    between threads as long as each caller's context is left alone while
    rendering.
    """

    __slots__ = ("_tokens",)

    def __init__(self, tokens: Tuple[Token, ...]):
        self._tokens = tuple(tokens)

    @classmethod
    def compile(cls, text: str) -> "Template":
        return cls(parse(text))

    @property
    def tokens(self) -> Tuple[Token, ...]:
        return self._tokens

    def render(
        self,
        context: Any = None,
        partials: Optional[Any] = None,
        escape: Callable[[str], str] = html_escape,
        max_partial_depth: int = DEFAULT_MAX_PARTIAL_DEPTH,
    ) -> str:
        renderer = Renderer(partials=partials, escape=escape, max_partial_depth=max_partial_depth)
        return renderer.render(self._tokens, context)

    def render_to(
        self,
        out: Union[TextIO, BinaryIO],
        context: Any = None,
        partials: Optional[Any] = None,
        escape: Callable[[str], str] = html_escape,
        max_partial_depth: int = DEFAULT_MAX_PARTIAL_DEPTH,
        encoding: str = "utf-8",
    ) -> None:
        """Render straight into ``out``.

        Text sinks get ``str`` writes; binary sinks (BytesIO, ``sys.stdout.buffer``)
        get the output encoded with ``encoding``.
        """
        renderer = Renderer(partials=partials, escape=escape, max_partial_depth=max_partial_depth)
        renderer.render_to(out, self._tokens, context, encoding=encoding)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Template):
            return NotImplemented
        return self._tokens == other._tokens

    def __hash__(self) -> int:
        return hash(self._tokens)

    def __repr__(self) -> str:
        return f"Template({len(self._tokens)} tokens)"


def compile_template(text: str) -> Template:
    return Template.compile(text)


def render(text: str, context: Any = None, partials: Optional[Any] = None) -> str:
    """Compile ``text`` and render it in one step."""
    return compile_template(text).render(context, partials=partials)


__all__ = ["Template", "compile_template", "render"]
