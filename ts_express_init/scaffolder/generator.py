"""File generation for the starter project.

``ProjectGenerator`` writes every file the scaffolder owns into a
:class:`~ts_express_init.config.WorkingDirectory`. It never runs external
commands; the pipeline interleaves those with the writes below.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from ..config import ProjectParameters, WorkingDirectory
from ..utils import save_json
from .manifest import MANIFEST_FILENAME, PACKAGE_SCRIPTS, inject_scripts, load_manifest
from .templates import TemplateRenderer
from .tsconfig import TSCONFIG_FILENAME, build_tsconfig

SOURCE_DIR = "src"
ENTRYPOINT_NAME = "main.ts"
ENTRYPOINT_PATH = f"{SOURCE_DIR}/{ENTRYPOINT_NAME}"

GITIGNORE_FILENAME = ".gitignore"
WATCHER_FILENAME = "nodemon.json"

WATCHER_CONFIG: dict[str, Any] = {
    "watch": [SOURCE_DIR],
    "ext": "ts",
    "exec": f"node --loader ts-node/esm {ENTRYPOINT_PATH}",
}


class ProjectGenerator:
    """Writes the scaffolder-owned files of a project.

    Every write replaces the target file. Given the same parameters (and, for
    the merged files, the same pre-existing content) the output is identical.
    """

    def __init__(
        self,
        workdir: WorkingDirectory,
        params: ProjectParameters,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.workdir = workdir
        self.params = params
        self.renderer = renderer or TemplateRenderer()

    def _build_context(self) -> dict[str, Any]:
        """Build the Jinja2 template context from the project parameters."""
        return {
            "port": self.params.port,
        }

    async def write_tsconfig(self) -> Path:
        """Merge the canonical compiler options into ``tsconfig.json``."""
        path = self.workdir.path(TSCONFIG_FILENAME)
        document = await asyncio.to_thread(build_tsconfig, path)
        return await save_json(document, path)

    async def write_package_scripts(self) -> Path:
        """Add the ``dev``/``build``/``start`` scripts to ``package.json``."""
        path = self.workdir.path(MANIFEST_FILENAME)
        manifest = await asyncio.to_thread(load_manifest, path)
        return await save_json(inject_scripts(manifest, PACKAGE_SCRIPTS), path)

    async def write_gitignore(self) -> Path:
        return await self.renderer.render_to_file(
            "gitignore.j2", self.workdir.path(GITIGNORE_FILENAME), self._build_context()
        )

    async def write_watcher_config(self) -> Path:
        return await save_json(WATCHER_CONFIG, self.workdir.path(WATCHER_FILENAME))

    async def write_entrypoint(self) -> Path:
        """Render ``src/main.ts`` with the chosen port as the fallback."""
        return await self.renderer.render_to_file(
            "main.ts.j2",
            self.workdir.path(SOURCE_DIR, ENTRYPOINT_NAME),
            self._build_context(),
        )
