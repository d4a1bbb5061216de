#!/usr/bin/env python
"""Write the presenter API's OpenAPI document for browser-client developers.

The default output is ``openapi.yaml`` at the repository root; a ``.json``
suffix switches the format.
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import yaml

REPO_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_OUTPUT = REPO_ROOT / "openapi.yaml"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Export the presenter OpenAPI document")
    parser.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_OUTPUT,
        help="Destination file (.yaml, .yml or .json).",
    )
    return parser.parse_args(argv)


def render(schema: dict, output: Path) -> str:
    if output.suffix.lower() == ".json":
        return json.dumps(schema, indent=2) + "\n"
    return yaml.safe_dump(schema, sort_keys=False, allow_unicode=True)


def main(argv: list[str] | None = None) -> Path:
    args = parse_args(argv)

    from presenter.main import app

    schema = app.openapi()
    args.output.write_text(render(schema, args.output), encoding="utf-8")
    print(f"Wrote {len(schema.get('paths', {}))} paths to {args.output}")
    return args.output


if __name__ == "__main__":
    main()
