"""tsconfig.json handling.

The scaffolder enforces a fixed set of compiler options. When a
``tsconfig.json`` already exists (left over from a previous run or written by
``tsc --init``) its options are kept, but every canonical option overrides
the existing value. The file may contain comments and trailing commas, which
are stripped before parsing.
"""

from __future__ import annotations

import copy
import json
import re
from pathlib import Path
from typing import Any

from ..utils import print_warning

TSCONFIG_FILENAME = "tsconfig.json"

CANONICAL_COMPILER_OPTIONS: dict[str, Any] = {
    "module": "ESNext",
    "target": "ES2020",
    "outDir": "dist",
    "rootDir": "src",
    "strict": True,
    "esModuleInterop": True,
    "moduleResolution": "node",
}

CANONICAL_INCLUDE: list[str] = ["src/**/*"]
CANONICAL_EXCLUDE: list[str] = ["node_modules", "dist"]

_STRING = r'"(?:\\.|[^"\\\n])*"'
_COMMENT = re.compile(_STRING + r"|//[^\n]*|/\*.*?\*/", re.DOTALL)
_TRAILING_COMMA = re.compile(_STRING + r"|,\s*([}\]])")


def canonical_tsconfig() -> dict[str, Any]:
    """Return a fresh copy of the canonical tsconfig document."""
    return {
        "compilerOptions": copy.deepcopy(CANONICAL_COMPILER_OPTIONS),
        "include": list(CANONICAL_INCLUDE),
        "exclude": list(CANONICAL_EXCLUDE),
    }


def strip_json_comments(text: str) -> str:
    """Remove ``//`` and ``/* */`` comments and trailing commas.

    String literals are matched first and kept as they are, so URLs and path
    patterns such as ``"@/*"`` survive.
    """
    text = _COMMENT.sub(lambda m: m.group(0) if m.group(0).startswith('"') else "", text)
    text = _TRAILING_COMMA.sub(lambda m: m.group(1) or m.group(0), text)
    return text.strip()


def parse_tsconfig(text: str) -> dict[str, Any]:
    """Parse tsconfig text that may contain comments.

    Raises:
        ValueError: If the cleaned text is not a JSON object.
    """
    data = json.loads(strip_json_comments(text))
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    return data


def merge_tsconfig(existing: dict[str, Any] | None) -> dict[str, Any]:
    """Overlay the canonical compiler options on *existing*.

    Existing compiler options that are not canonical survive unchanged;
    canonical keys always end up with the canonical value. ``include`` and
    ``exclude`` are never merged.
    """
    result = canonical_tsconfig()
    if not existing:
        return result

    existing_options = existing.get("compilerOptions")
    if not isinstance(existing_options, dict):
        existing_options = {}

    result["compilerOptions"] = {
        **copy.deepcopy(existing_options),
        **result["compilerOptions"],
    }
    return result


def build_tsconfig(path: Path) -> dict[str, Any]:
    """Compute the tsconfig document to write at *path*.

    A missing file yields the canonical document. An unreadable or malformed
    file yields the canonical document as well, with a warning.
    """
    if not path.exists():
        return merge_tsconfig(None)

    try:
        existing = parse_tsconfig(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValueError) as exc:
        print_warning(f"Failed to parse existing {path.name} ({exc}), using defaults.")
        return merge_tsconfig(None)

    return merge_tsconfig(existing)
