"""
Render a Mustache template file against a JSON or YAML data file.

Usage:
  python -m tinymustache templates/page.mustache --data page.yaml --output page.html

Partials ({{> name}}) are looked up next to the template unless --partials
points somewhere else.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import MustacheError
from .escaping import html_escape, no_escape
from .loaders import FileSystemLoader
from .template import Template

logger = logging.getLogger(__name__)

_yaml = YAML(typ="safe")

_YAML_SUFFIXES = {".yaml", ".yml"}


class DataFileError(Exception):
    pass


# -----------------------------
# Data loading
# -----------------------------
def load_data(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() in _YAML_SUFFIXES:
            data = _yaml.load(text)
        else:
            data = json.loads(text)
    except (ValueError, YAMLError) as e:
        raise DataFileError(f"Could not parse {path}: {e}") from e
    # An empty YAML document means an empty context.
    return {} if data is None else data


# -----------------------------
# CLI
# -----------------------------
def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="tinymustache", description="Render a Mustache template")
    ap.add_argument("template", help="Path to the Mustache template")
    ap.add_argument("--data", default=None, help="Path to a JSON or YAML context file (.yaml/.yml)")
    ap.add_argument("--partials", default=None, help="Directory holding partials (default: template directory)")
    ap.add_argument("--output", default=None, help="Path to write rendered output (default: stdout)")
    ap.add_argument("--data-out", default=None, help="Optional path to write the loaded context as JSON")
    ap.add_argument("--no-escape", action="store_true", help="Do not HTML-escape {{name}} values")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    template_path = Path(args.template)
    partials_dir = Path(args.partials) if args.partials else template_path.parent

    try:
        data = load_data(Path(args.data)) if args.data else {}
        if args.data_out:
            # YAML dates and timestamps have no JSON form; write them as strings.
            dumped = json.dumps(data, indent=2, ensure_ascii=False, default=str)
            Path(args.data_out).write_text(dumped, encoding="utf-8")

        tmpl = Template.compile(template_path.read_text(encoding="utf-8"))
        rendered = tmpl.render(
            data,
            partials=FileSystemLoader(partials_dir),
            escape=no_escape if args.no_escape else html_escape,
        )
    except (MustacheError, DataFileError, OSError, UnicodeDecodeError) as e:
        print(f"tinymustache: {e}", file=sys.stderr)
        return 2

    if args.output:
        out_path = Path(args.output)
        out_path.write_text(rendered, encoding="utf-8")
        logger.info("Wrote %s", out_path)
    else:
        sys.stdout.write(rendered)
    return 0


if __name__ == "__main__":
    sys.exit(main())
