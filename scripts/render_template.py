"""Render a stored template document to standalone HTML.

Usage:
    python scripts/render_template.py template.json --values values.json -o out.html
    python scripts/render_template.py template.json --renderer preview
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from blockdoc.core.config import get_settings
from blockdoc.core.errors import BlockdocError
from blockdoc.core.factory import ComponentFactory
from blockdoc.core.logging_config import setup_logging
from blockdoc.models.template import check_schema_version, hydrate_template

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render a template document to HTML.")
    parser.add_argument("template", type=Path, help="Path to the template JSON document")
    parser.add_argument("--values", type=Path, help="Path to a JSON value object")
    parser.add_argument(
        "--renderer",
        choices=("preview", "document"),
        help="Renderer strategy (defaults to BLOCKDOC_RENDERER_TYPE)",
    )
    parser.add_argument("-o", "--output", type=Path, help="Write HTML here instead of stdout")
    parser.add_argument(
        "--skip-version-check",
        action="store_true",
        help="Render documents written for another schema version",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Render one template. Returns the process exit code."""
    args = parse_args(argv)
    settings = get_settings()
    setup_logging(settings)

    try:
        raw = json.loads(args.template.read_text(encoding="utf-8"))
        values = json.loads(args.values.read_text(encoding="utf-8")) if args.values else {}
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Could not read input: {e}")
        return 1

    try:
        if not args.skip_version_check:
            check_schema_version(raw, settings)
        template = hydrate_template(raw, settings)
        renderer = ComponentFactory(settings).get_renderer(args.renderer)
        result = renderer.render(template, values)
    except BlockdocError as e:
        logger.error(f"Rendering failed: {e}")
        for detail in getattr(e, "details", []):
            logger.error(f"  {detail}")
        return 1

    if args.output:
        args.output.write_text(result.html, encoding="utf-8")
        logger.info(f"Wrote {args.output}")
    else:
        sys.stdout.write(result.html)
    return 0


if __name__ == "__main__":
    sys.exit(main())
