"""
Tiny Mustache renderer (subset).

Supported:
- Variables: {{name}} (HTML-escaped), {{{name}}} and {{&name}} (unescaped)
- Dotted names: {{person.full_name}}, implicit iterator {{.}}
- Sections: {{#items}} ... {{/items}} (lists and other iterables, dicts, truthy values)
- Inverted sections: {{^items}} ... {{/items}}
- Comments: {{! comment }}
- Partials: {{> partial}} (resolved through a partial registry)

Delimiter changes ({{=<% %>=}}) and lambdas are not supported.
"""
from __future__ import annotations

from .errors import (
    CompileError,
    IllegalTagContent,
    LookupTypeError,
    MustacheError,
    OutOfRange,
    PartialRecursionError,
    RenderError,
    SectionMismatch,
    UnclosedSection,
    UnclosedTag,
    UnexpectedTagSigil,
    UnknownTokenError,
)
from .escaping import html_escape
from .loaders import DictLoader, FileSystemLoader
from .renderer import Renderer, lookup
from .template import Template, compile_template, render
from .tokens import Partial, Section, Text, Token, Variable

__version__ = "0.1.0"

__all__ = [
    "compile_template",
    "render",
    "Template",
    "Renderer",
    "lookup",
    "html_escape",
    "DictLoader",
    "FileSystemLoader",
    "Text",
    "Variable",
    "Section",
    "Partial",
    "Token",
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
