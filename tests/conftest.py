"""Shared pytest fixtures for the ts-express-init test suite.

Provides reusable fixtures for:
- Scripted prompt input (``InputSource`` over a ``StringIO``)
- A fake ``run_command`` that imitates npm and git without spawning them
"""

from __future__ import annotations

import io
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from rich.console import Console

from ts_express_init.prompts import InputSource


# ---------------------------------------------------------------------------
# Prompt input
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_console() -> Console:
    """Console that writes to memory; inspect with ``console.file.getvalue()``."""
    return Console(file=io.StringIO(), width=120)


@pytest.fixture
def make_input(quiet_console: Console) -> Callable[..., InputSource]:
    """Factory: ``make_input("demo", "", "8080")`` answers three prompts."""

    def _make(*answers: str) -> InputSource:
        text = "".join(f"{a}\n" for a in answers)
        return InputSource(stream=io.StringIO(text), console=quiet_console)

    return _make


# ---------------------------------------------------------------------------
# Fake external commands
# ---------------------------------------------------------------------------


class FakeCommands:
    """Imitates the subset of npm/git behaviour the scaffolder relies on.

    ``npm init`` writes a package.json, ``npm pkg set`` edits it and
    ``git init`` creates ``.git``. Any command whose argv contains a string
    registered with :meth:`fail_on` exits 1.
    """

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self._failures: list[str] = []

    def fail_on(self, fragment: str) -> None:
        self._failures.append(fragment)

    @property
    def argvs(self) -> list[list[str]]:
        return [c["argv"] for c in self.calls]

    async def __call__(
        self,
        cmd: list[str],
        cwd: str | Path | None = None,
        timeout: int | None = None,
        capture: bool = True,
    ) -> tuple[int, str, str]:
        self.calls.append({"argv": list(cmd), "cwd": Path(cwd) if cwd else None, "capture": capture})
        if any(fragment in cmd for fragment in self._failures):
            return (1, "", f"simulated failure: {' '.join(cmd)}")

        root = Path(cwd) if cwd else Path.cwd()
        manifest = root / "package.json"
        if cmd[:2] == ["npm", "init"]:
            manifest.write_text(
                json.dumps(
                    {
                        "name": root.name,
                        "version": "1.0.0",
                        "main": "index.js",
                        "scripts": {"test": 'echo "Error: no test specified" && exit 1'},
                    },
                    indent=2,
                ),
                encoding="utf-8",
            )
        elif cmd[:3] == ["npm", "pkg", "set"]:
            data = json.loads(manifest.read_text(encoding="utf-8"))
            for assignment in cmd[3:]:
                key, _, value = assignment.partition("=")
                data[key] = value
            manifest.write_text(json.dumps(data, indent=2), encoding="utf-8")
        elif cmd[:2] == ["git", "init"]:
            (root / ".git").mkdir(exist_ok=True)
        return (0, "", "")


@pytest.fixture
def fake_commands() -> FakeCommands:
    """Patch the pipeline's ``run_command`` with a :class:`FakeCommands`."""
    fake = FakeCommands()
    with patch("ts_express_init.pipeline.run_command", new=fake):
        yield fake
