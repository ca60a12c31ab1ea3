"""
Write the application's OpenAPI schema to a JSON file.

The app is built around an in-memory repository, so exporting the schema needs
no database. Tag metadata comes from ``main.openapi_tags``.

Usage:
    python -m tasks_api.generate_openapi [output_path]

The default output path, relative to the working directory, is
interfaces/openapi.json.
"""
from __future__ import annotations

import json
import os
import sys
from typing import List, Optional

from .main import create_app
from .repositories import InMemoryRepository

DEFAULT_OUTPUT = os.path.join("interfaces", "openapi.json")


# PUBLIC_INTERFACE
def generate_openapi(out_path: Optional[str] = None) -> str:
    """Generate the OpenAPI schema file and return the written file path."""
    out_path = out_path or DEFAULT_OUTPUT
    schema = create_app(InMemoryRepository()).openapi()

    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(schema, f, indent=2, ensure_ascii=False)
    return out_path


def main(argv: Optional[List[str]] = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    out_path = generate_openapi(args[0] if args else None)
    print(f"Wrote OpenAPI schema to: {out_path}")


if __name__ == "__main__":
    main()
