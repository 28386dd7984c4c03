"""HTML escaping applied to {{name}} tags."""
from __future__ import annotations


def html_escape(s: str) -> str:
    # Ampersand first so entities produced below are not escaped twice.
    return (
        s.replace("&", "&amp;")
         .replace("<", "&lt;")
         .replace(">", "&gt;")
         .replace('"', "&quot;")
         .replace("'", "&#39;")
    )


def no_escape(s: str) -> str:
    return s


__all__ = ["html_escape", "no_escape"]
