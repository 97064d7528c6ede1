"""package.json helpers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..utils import load_json, print_warning

MANIFEST_FILENAME = "package.json"

PACKAGE_SCRIPTS: dict[str, str] = {
    "dev": "nodemon",
    "build": "tsc",
    "start": "node dist/main.js",
}


def load_manifest(path: Path) -> dict[str, Any]:
    """Load the manifest, or return an empty one.

    A missing file is normal (nothing has been initialised yet). A file that
    is not a JSON object is replaced wholesale, with a warning.
    """
    if not path.exists():
        return {}
    try:
        data = load_json(path)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        print_warning(f"Failed to parse {path.name}, using empty object.")
        return {}
    if not isinstance(data, dict):
        print_warning(f"{path.name} is not a JSON object, using empty object.")
        return {}
    return data


def inject_scripts(
    manifest: dict[str, Any],
    scripts: dict[str, str] | None = None,
) -> dict[str, Any]:
    """Return a copy of *manifest* with the run scripts set.

    Unrelated scripts are preserved. Scripts with the same names are
    overwritten.
    """
    scripts = PACKAGE_SCRIPTS if scripts is None else scripts
    result = dict(manifest)
    existing = result.get("scripts")
    merged = dict(existing) if isinstance(existing, dict) else {}
    merged.update(scripts)
    result["scripts"] = merged
    return result
