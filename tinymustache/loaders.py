"""
Partial registries.

A registry is anything with ``get(name)`` returning a Template, template
source, or None. A plain dict of sources works; these loaders add
compile-once caching and filesystem lookup.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence, Union

from .template import Template

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = (".mustache", ".mustache.html", "")


class DictLoader:
    def __init__(self, sources: Mapping[str, Union[str, Template]]):
        self._sources = dict(sources)
        self._compiled: Dict[str, Template] = {}

    def get(self, name: str) -> Optional[Template]:
        if name in self._compiled:
            return self._compiled[name]
        src = self._sources.get(name)
        if src is None:
            return None
        tmpl = src if isinstance(src, Template) else Template.compile(src)
        self._compiled[name] = tmpl
        return tmpl


class FileSystemLoader:
    """Load partials from ``directory``, trying each extension in order."""

    def __init__(
        self,
        directory: Union[str, Path],
        extensions: Sequence[str] = DEFAULT_EXTENSIONS,
        encoding: str = "utf-8",
    ):
        self.directory = Path(directory)
        self.extensions = tuple(extensions)
        self.encoding = encoding
        self._compiled: Dict[str, Template] = {}

    def find(self, name: str) -> Optional[Path]:
        root = self.directory.resolve()
        for ext in self.extensions:
            path = (self.directory / (name + ext)).resolve()
            try:
                path.relative_to(root)
            except ValueError:
                logger.debug("Partial %r resolves outside %s, ignoring", name, root)
                return None
            if path.is_file():
                return path
        return None

    def get(self, name: str) -> Optional[Template]:
        if name in self._compiled:
            return self._compiled[name]
        path = self.find(name)
        if path is None:
            return None
        logger.debug("Loading partial %r from %s", name, path)
        tmpl = Template.compile(path.read_text(encoding=self.encoding))
        self._compiled[name] = tmpl
        return tmpl


__all__ = ["DictLoader", "FileSystemLoader", "DEFAULT_EXTENSIONS"]
