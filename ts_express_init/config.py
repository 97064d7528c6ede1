"""ts-express-init configuration.

Typed settings and value objects for a scaffolding run. Everything is a
Pydantic v2 model so that invalid parameters (an empty project name, a port
outside 1-65535) are rejected at construction time instead of leaking into
generated files.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_PROJECT_NAME = "my-app"
DEFAULT_PORT = 3000


class InitMode(str, Enum):
    """How ``npm init`` is invoked."""

    DEFAULT = "default"
    INTERACTIVE = "interactive"


class ProjectParameters(BaseModel):
    """The answers collected by the prompt sequence. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(default=DEFAULT_PROJECT_NAME, min_length=1)
    init_mode: InitMode = Field(default=InitMode.DEFAULT)
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)

    @field_validator("name")
    @classmethod
    def _single_path_component(cls, value: str) -> str:
        # The project directory is created directly under the base directory.
        if "/" in value or "\\" in value or value in (".", ".."):
            raise ValueError(
                f"Project name must be a single directory name, got {value!r}"
            )
        return value


class WorkingDirectory(BaseModel):
    """Root of the project being generated.

    Every relative path used after the directory is bootstrapped is resolved
    through this value; the process working directory is never changed.
    """

    model_config = ConfigDict(frozen=True)

    root: Path

    def path(self, *parts: str) -> Path:
        """Return ``root / parts``."""
        return self.root.joinpath(*parts)


class CommandConfig(BaseModel):
    """A single external command and whether its output is captured."""

    argv: list[str] = Field(..., min_length=1)
    silent: bool = Field(
        default=False,
        description="Capture stdout/stderr instead of inheriting the terminal",
    )

    @property
    def display(self) -> str:
        """Shell-like rendering used in messages."""
        return " ".join(self.argv)


class DependencyConfig(BaseModel):
    """npm packages installed into the generated project."""

    runtime: list[str] = Field(default_factory=lambda: ["express"])
    dev: list[str] = Field(
        default_factory=lambda: [
            "typescript",
            "ts-node",
            "nodemon",
            "@types/node",
            "@types/express",
        ]
    )


class CommandsConfig(BaseModel):
    """Every external command the scaffolder runs, one entry per invocation."""

    npm_init: CommandConfig = Field(
        default_factory=lambda: CommandConfig(argv=["npm", "init", "-y"])
    )
    npm_init_interactive: CommandConfig = Field(
        default_factory=lambda: CommandConfig(argv=["npm", "init"])
    )
    set_module_type: CommandConfig = Field(
        default_factory=lambda: CommandConfig(argv=["npm", "pkg", "set", "type=module"])
    )
    tsc_init: CommandConfig = Field(
        default_factory=lambda: CommandConfig(argv=["npx", "tsc", "--init"], silent=True)
    )
    git_init: CommandConfig = Field(
        default_factory=lambda: CommandConfig(argv=["git", "init"], silent=True)
    )
    npm_install: list[str] = Field(default_factory=lambda: ["npm", "install"])
    silent_install: bool = Field(default=False)


class ScaffoldConfig(BaseModel):
    """Global scaffolder configuration.

    The CLI always runs with the defaults; tests and embedding callers build
    custom instances (e.g. to enable ``tsc --init`` or swap the dependency
    lists).
    """

    commands: CommandsConfig = Field(default_factory=CommandsConfig)
    dependencies: DependencyConfig = Field(default_factory=DependencyConfig)
    run_tsc_init: bool = Field(
        default=False,
        description="Run `npx tsc --init` before merging tsconfig.json",
    )

    def init_command(self, mode: InitMode) -> CommandConfig:
        """Return the ``npm init`` variant for *mode*.

        The interactive variant always inherits the terminal so npm can ask
        its own questions.
        """
        if mode is InitMode.INTERACTIVE:
            return self.commands.npm_init_interactive.model_copy(update={"silent": False})
        return self.commands.npm_init

    def install_commands(self) -> list[CommandConfig]:
        """Return the runtime install followed by the dev install.

        An empty dependency list produces no command.
        """
        base = self.commands.npm_install
        silent = self.commands.silent_install
        result: list[CommandConfig] = []
        if self.dependencies.runtime:
            result.append(
                CommandConfig(argv=[*base, *self.dependencies.runtime], silent=silent)
            )
        if self.dependencies.dev:
            result.append(
                CommandConfig(argv=[*base, "-D", *self.dependencies.dev], silent=silent)
            )
        return result
