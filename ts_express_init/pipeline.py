"""ts-express-init pipeline orchestrator.

Drives the scaffolding run as a sequence of stages:

Stage 1: COLLECTING_PARAMS    -- Prompt for project name, npm init mode, port.
Stage 2: BOOTSTRAPPING        -- Create the project directory, npm init, ESM.
Stage 3: CONFIGURING_COMPILER -- tsconfig.json, package.json scripts, git.
Stage 4: INSTALLING           -- Runtime and development dependencies.
Stage 5: WRITING_ENTRYPOINT   -- nodemon.json and src/main.ts.

The run ends in DONE, or in FAILED at the first stage that raises.

Usage::

    ts-express-init
    python -m ts_express_init.pipeline
"""

from __future__ import annotations

import asyncio
import sys
import time
import traceback
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Any

from rich.markup import escape
from rich.panel import Panel

from ts_express_init.config import (
    CommandConfig,
    ProjectParameters,
    ScaffoldConfig,
    WorkingDirectory,
)
from ts_express_init.prompts import (
    InputSource,
    InvalidParameterError,
    collect_parameters,
)
from ts_express_init.scaffolder import ProjectGenerator
from ts_express_init.scaffolder.tsconfig import TSCONFIG_FILENAME
from ts_express_init.utils import (
    console,
    format_duration,
    print_error,
    print_stage_header,
    print_step,
    print_success,
    print_summary_table,
    run_command,
)

# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------


class Stage(str, Enum):
    """States of a scaffolding run."""

    COLLECTING_PARAMS = "collecting-params"
    BOOTSTRAPPING = "bootstrapping"
    CONFIGURING_COMPILER = "configuring-compiler"
    INSTALLING = "installing"
    WRITING_ENTRYPOINT = "writing-entrypoint"
    DONE = "done"
    FAILED = "failed"


STAGE_TITLES: dict[Stage, str] = {
    Stage.COLLECTING_PARAMS: "Collect parameters",
    Stage.BOOTSTRAPPING: "Bootstrap",
    Stage.CONFIGURING_COMPILER: "Configure",
    Stage.INSTALLING: "Install dependencies",
    Stage.WRITING_ENTRYPOINT: "Write entrypoint",
}

STAGE_COLORS: dict[Stage, str] = {
    Stage.COLLECTING_PARAMS: "bright_cyan",
    Stage.BOOTSTRAPPING: "bright_green",
    Stage.CONFIGURING_COMPILER: "bright_yellow",
    Stage.INSTALLING: "bright_magenta",
    Stage.WRITING_ENTRYPOINT: "bright_blue",
}


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ScaffoldError(Exception):
    """Raised when a stage fails irrecoverably."""

    def __init__(self, stage: Stage, message: str) -> None:
        self.stage = stage
        super().__init__(message)


class CommandError(ScaffoldError):
    """An external command exited non-zero or could not be started."""

    def __init__(
        self,
        stage: Stage,
        command: CommandConfig,
        returncode: int,
        stderr: str = "",
    ) -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        message = f"Command failed (exit {returncode}): {command.display}"
        if stderr:
            message = f"{message}\n{stderr}"
        super().__init__(stage, message)


# ---------------------------------------------------------------------------
# State threaded through the stages
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ScaffoldState:
    """What earlier stages hand to later ones."""

    params: ProjectParameters | None = None
    workdir: WorkingDirectory | None = None
    files: tuple[Path, ...] = ()

    def require_params(self) -> ProjectParameters:
        if self.params is None:
            raise RuntimeError("project parameters have not been collected")
        return self.params

    def require_workdir(self) -> WorkingDirectory:
        if self.workdir is None:
            raise RuntimeError("project directory has not been bootstrapped")
        return self.workdir


# ---------------------------------------------------------------------------
# Pipeline Orchestrator
# ---------------------------------------------------------------------------


class Pipeline:
    """Runs the scaffolding stages in order.

    Attributes:
        config: Commands and dependency lists to use.
        input_source: Where prompt answers are read from.
        base_dir: Directory in which the project directory is created.
        result: Summary of the run, returned by :meth:`run`.
    """

    _STAGE_METHODS: list[tuple[Stage, str]] = [
        (Stage.COLLECTING_PARAMS, "stage_collect_params"),
        (Stage.BOOTSTRAPPING, "stage_bootstrap"),
        (Stage.CONFIGURING_COMPILER, "stage_configure"),
        (Stage.INSTALLING, "stage_install"),
        (Stage.WRITING_ENTRYPOINT, "stage_write_entrypoint"),
    ]

    def __init__(
        self,
        config: ScaffoldConfig | None = None,
        input_source: InputSource | None = None,
        base_dir: str | Path | None = None,
    ) -> None:
        self.config = config or ScaffoldConfig()
        self.input_source = input_source or InputSource()
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd()
        self.result: dict[str, Any] = {
            "stage": Stage.COLLECTING_PARAMS.value,
            "stages_completed": [],
            "stages_failed": [],
            "error": None,
            "project_path": None,
            "files": [],
            "success": False,
        }

    async def run(self) -> dict[str, Any]:
        """Execute every stage, stopping at the first failure.

        Returns:
            The result dictionary, including a top-level ``success`` boolean
            and the terminal ``stage`` (``done`` or ``failed``).
        """
        run_start = time.monotonic()
        console.print(
            Panel(
                "[bold bright_cyan]TypeScript + Express starter[/bold bright_cyan]\n"
                f"Base directory : {escape(str(self.base_dir.resolve()))}",
                title="[bold]ts-express-init[/bold]",
                border_style="bright_cyan",
            )
        )

        state = ScaffoldState()
        success = True

        for number, (stage, method_name) in enumerate(self._STAGE_METHODS, start=1):
            self.result["stage"] = stage.value
            print_stage_header(number, STAGE_TITLES[stage], STAGE_COLORS[stage])

            stage_start = time.monotonic()
            try:
                state = await getattr(self, method_name)(state)
            except (ScaffoldError, InvalidParameterError) as exc:
                success = False
                self._record_failure(stage, str(exc))
                print_error(f"{STAGE_TITLES[stage]} failed: {exc}")
                break
            except Exception as exc:
                success = False
                self._record_failure(stage, str(exc))
                print_error(f"{STAGE_TITLES[stage]} failed: {exc}")
                console.print(f"[dim]{escape(traceback.format_exc())}[/dim]")
                break
            else:
                self.result["stages_completed"].append(stage.value)
                print_success(
                    f"{STAGE_TITLES[stage]} completed in "
                    f"{format_duration(time.monotonic() - stage_start)}"
                )
            finally:
                self.result["files"] = [str(p) for p in state.files]
                if state.workdir is not None:
                    self.result["project_path"] = str(state.workdir.root)

        self.result["success"] = success
        self.result["stage"] = (Stage.DONE if success else Stage.FAILED).value
        self.result["duration"] = format_duration(time.monotonic() - run_start)

        self._print_final_summary(state)
        return self.result

    # ------------------------------------------------------------------
    # Stage 1: COLLECTING_PARAMS
    # ------------------------------------------------------------------

    async def stage_collect_params(self, state: ScaffoldState) -> ScaffoldState:
        params = collect_parameters(self.input_source)
        print_summary_table(
            {
                "Project": params.name,
                "npm init": params.init_mode.value,
                "Port": str(params.port),
            },
            title="Project Parameters",
        )
        return replace(state, params=params)

    # ------------------------------------------------------------------
    # Stage 2: BOOTSTRAPPING
    # ------------------------------------------------------------------

    async def stage_bootstrap(self, state: ScaffoldState) -> ScaffoldState:
        """Create the project directory, run ``npm init`` and switch to ESM.

        The directory may already exist. Nothing is cleaned up on failure.
        """
        params = state.require_params()
        root = self.base_dir / params.name

        print_step(f"Creating project directory {root}")
        try:
            await asyncio.to_thread(root.mkdir, parents=True, exist_ok=True)
        except OSError as exc:
            raise ScaffoldError(
                Stage.BOOTSTRAPPING, f"Could not create project directory {root}: {exc}"
            ) from exc
        workdir = WorkingDirectory(root=root)

        await self._exec(Stage.BOOTSTRAPPING, self.config.init_command(params.init_mode), workdir)
        await self._exec(Stage.BOOTSTRAPPING, self.config.commands.set_module_type, workdir)
        return replace(state, workdir=workdir)

    # ------------------------------------------------------------------
    # Stage 3: CONFIGURING_COMPILER
    # ------------------------------------------------------------------

    async def stage_configure(self, state: ScaffoldState) -> ScaffoldState:
        """Write tsconfig.json, add package scripts, initialise git."""
        workdir = state.require_workdir()
        generator = ProjectGenerator(workdir, state.require_params())

        # tsc --init refuses to overwrite an existing tsconfig.json.
        if self.config.run_tsc_init and not workdir.path(TSCONFIG_FILENAME).exists():
            await self._exec(Stage.CONFIGURING_COMPILER, self.config.commands.tsc_init, workdir)

        print_step(f"Writing {TSCONFIG_FILENAME}")
        tsconfig = await generator.write_tsconfig()

        print_step("Adding scripts to package.json")
        manifest = await generator.write_package_scripts()

        await self._exec(Stage.CONFIGURING_COMPILER, self.config.commands.git_init, workdir)
        print_step("Writing .gitignore")
        gitignore = await generator.write_gitignore()

        return replace(state, files=(*state.files, tsconfig, manifest, gitignore))

    # ------------------------------------------------------------------
    # Stage 4: INSTALLING
    # ------------------------------------------------------------------

    async def stage_install(self, state: ScaffoldState) -> ScaffoldState:
        workdir = state.require_workdir()
        for command in self.config.install_commands():
            await self._exec(Stage.INSTALLING, command, workdir)
        return state

    # ------------------------------------------------------------------
    # Stage 5: WRITING_ENTRYPOINT
    # ------------------------------------------------------------------

    async def stage_write_entrypoint(self, state: ScaffoldState) -> ScaffoldState:
        generator = ProjectGenerator(state.require_workdir(), state.require_params())

        print_step("Writing nodemon.json")
        watcher = await generator.write_watcher_config()

        print_step("Writing src/main.ts")
        entrypoint = await generator.write_entrypoint()

        return replace(state, files=(*state.files, watcher, entrypoint))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _exec(
        self, stage: Stage, command: CommandConfig, workdir: WorkingDirectory
    ) -> None:
        """Run *command* inside the project directory.

        Raises:
            CommandError: On a non-zero exit or when the program cannot be
                started.
        """
        print_step(command.display)
        try:
            returncode, _, stderr = await run_command(
                command.argv, cwd=workdir.root, capture=command.silent
            )
        except FileNotFoundError as exc:
            raise CommandError(
                stage, command, 127, f"{command.argv[0]}: command not found"
            ) from exc
        except OSError as exc:
            raise CommandError(stage, command, 126, str(exc)) from exc

        if returncode != 0:
            raise CommandError(stage, command, returncode, stderr)

    def _record_failure(self, stage: Stage, message: str) -> None:
        self.result["stages_failed"].append(stage.value)
        self.result["error"] = message

    def _print_final_summary(self, state: ScaffoldState) -> None:
        """Print the closing panel: next steps on success, the error otherwise."""
        if self.result["success"]:
            name = state.require_params().name
            lines = [
                f"[bold green]Project {escape(name)} created![/bold green]",
                "",
                "Run:",
                f"  cd {escape(name)}",
                "  npm run dev",
                "  npm run build",
                "  npm start",
            ]
            border_style = "bold green"
        else:
            lines = [
                "[bold red]SCAFFOLDING FAILED[/bold red]",
                "",
                f"Stage : {self.result['stages_failed'][-1]}",
                f"Error : {escape(str(self.result['error']))}",
            ]
            if self.result["project_path"]:
                lines.append(f"Output: {escape(self.result['project_path'])} (left as is)")
            border_style = "bold red"

        lines.extend(["", f"Duration : {self.result['duration']}"])
        console.print()
        console.print(
            Panel("\n".join(lines), title="[bold]Summary[/bold]", border_style=border_style)
        )


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """CLI entry point for ``ts-express-init``."""
    import argparse

    parser = argparse.ArgumentParser(
        prog="ts-express-init",
        description="Interactively scaffold a TypeScript + Express starter project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "All input is read from interactive prompts. The project directory\n"
            "is created inside the current working directory.\n"
        ),
    )
    parser.parse_args()

    result = asyncio.run(Pipeline().run())

    if result.get("success"):
        console.print("[bold green]Project created successfully![/bold green]")
    else:
        sys.exit(1)


if __name__ == "__main__":
    main()
