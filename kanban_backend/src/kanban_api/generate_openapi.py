"""
Utility script to generate and write the OpenAPI schema for the FastAPI app.

The schema is serialized to interfaces/openapi.json (next to src/) so that API
clients and documentation tools can consume a stable document without running
the server. The bearer security scheme and the tags from `openapi_tags` are
guaranteed to be present.

Usage:
    python -m kanban_api.generate_openapi
"""
from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Optional

from .main import app, openapi_tags


def _ensure_tags(schema: Dict[str, Any]) -> None:
    """
    Add any tag from openapi_tags missing in the schema; existing tag
    definitions are left alone.
    """
    existing_tags: List[Dict[str, Any]] = schema.get("tags", []) or []
    existing_names = {t.get("name") for t in existing_tags if isinstance(t, dict)}
    for tag in openapi_tags:
        if tag.get("name") not in existing_names:
            existing_tags.append(tag)
    if existing_tags:
        schema["tags"] = existing_tags


def _default_out_path() -> str:
    src_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return os.path.join(os.path.dirname(src_dir), "interfaces", "openapi.json")


# PUBLIC_INTERFACE
def generate_openapi(out_path: Optional[str] = None) -> str:
    """Write the OpenAPI schema to out_path (default interfaces/openapi.json) and return the path."""
    schema = app.openapi()
    _ensure_tags(schema)

    path = out_path or _default_out_path()
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(schema, f, indent=2, ensure_ascii=False)
    return path


def main() -> None:
    print(f"Wrote OpenAPI schema to: {generate_openapi()}")


if __name__ == "__main__":
    main()
