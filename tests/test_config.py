"""Unit tests for the Pydantic configuration models (ts_express_init.config).

Tests cover:
- ProjectParameters defaults, immutability, validation
- WorkingDirectory path resolution
- CommandConfig display and validation
- ScaffoldConfig command selection and install command derivation
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from ts_express_init.config import (
    CommandConfig,
    CommandsConfig,
    DependencyConfig,
    InitMode,
    ProjectParameters,
    ScaffoldConfig,
    WorkingDirectory,
)


# ---------------------------------------------------------------------------
# ProjectParameters
# ---------------------------------------------------------------------------


class TestProjectParameters:
    @pytest.mark.unit
    def test_defaults(self):
        params = ProjectParameters()
        assert params.name == "my-app"
        assert params.init_mode is InitMode.DEFAULT
        assert params.port == 3000

    @pytest.mark.unit
    def test_frozen(self):
        params = ProjectParameters(name="demo")
        with pytest.raises(ValidationError):
            params.name = "other"

    @pytest.mark.unit
    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            ProjectParameters(name="")

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["../escaped", "/tmp/app", "a\\b", ".", ".."])
    def test_name_must_be_single_directory(self, name: str):
        with pytest.raises(ValidationError, match="single directory name"):
            ProjectParameters(name=name)

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["demo", "my.app", "app[red]", "..app"])
    def test_plain_names_accepted(self, name: str):
        assert ProjectParameters(name=name).name == name

    @pytest.mark.unit
    @pytest.mark.parametrize("port", [0, -1, 65536])
    def test_port_out_of_range_rejected(self, port: int):
        with pytest.raises(ValidationError):
            ProjectParameters(port=port)

    @pytest.mark.unit
    @pytest.mark.parametrize("port", [1, 8080, 65535])
    def test_port_in_range_accepted(self, port: int):
        assert ProjectParameters(port=port).port == port


# ---------------------------------------------------------------------------
# WorkingDirectory
# ---------------------------------------------------------------------------


class TestWorkingDirectory:
    @pytest.mark.unit
    def test_path_joins_parts(self, tmp_path: Path):
        workdir = WorkingDirectory(root=tmp_path / "demo")
        assert workdir.path("src", "main.ts") == tmp_path / "demo" / "src" / "main.ts"

    @pytest.mark.unit
    def test_path_without_parts_is_root(self, tmp_path: Path):
        workdir = WorkingDirectory(root=tmp_path)
        assert workdir.path() == tmp_path


# ---------------------------------------------------------------------------
# CommandConfig
# ---------------------------------------------------------------------------


class TestCommandConfig:
    @pytest.mark.unit
    def test_display(self):
        cmd = CommandConfig(argv=["npm", "pkg", "set", "type=module"])
        assert cmd.display == "npm pkg set type=module"
        assert cmd.silent is False

    @pytest.mark.unit
    def test_empty_argv_rejected(self):
        with pytest.raises(ValidationError):
            CommandConfig(argv=[])


# ---------------------------------------------------------------------------
# ScaffoldConfig
# ---------------------------------------------------------------------------


class TestScaffoldConfig:
    @pytest.mark.unit
    def test_default_init_command(self):
        config = ScaffoldConfig()
        assert config.init_command(InitMode.DEFAULT).argv == ["npm", "init", "-y"]

    @pytest.mark.unit
    def test_interactive_init_command(self):
        config = ScaffoldConfig()
        cmd = config.init_command(InitMode.INTERACTIVE)
        assert cmd.argv == ["npm", "init"]
        assert cmd.silent is False

    @pytest.mark.unit
    def test_interactive_init_never_silent(self):
        config = ScaffoldConfig(
            commands=CommandsConfig(
                npm_init_interactive=CommandConfig(argv=["npm", "init"], silent=True)
            )
        )
        assert config.init_command(InitMode.INTERACTIVE).silent is False

    @pytest.mark.unit
    def test_git_init_is_silent_by_default(self):
        config = ScaffoldConfig()
        assert config.commands.git_init.argv == ["git", "init"]
        assert config.commands.git_init.silent is True

    @pytest.mark.unit
    def test_tsc_init_disabled_by_default(self):
        config = ScaffoldConfig()
        assert config.run_tsc_init is False
        assert config.commands.tsc_init.argv == ["npx", "tsc", "--init"]

    @pytest.mark.unit
    def test_default_install_commands(self):
        commands = ScaffoldConfig().install_commands()
        assert [c.argv for c in commands] == [
            ["npm", "install", "express"],
            [
                "npm",
                "install",
                "-D",
                "typescript",
                "ts-node",
                "nodemon",
                "@types/node",
                "@types/express",
            ],
        ]
        assert all(not c.silent for c in commands)

    @pytest.mark.unit
    def test_install_commands_skip_empty_lists(self):
        config = ScaffoldConfig(dependencies=DependencyConfig(runtime=[], dev=["typescript"]))
        commands = config.install_commands()
        assert [c.argv for c in commands] == [["npm", "install", "-D", "typescript"]]

    @pytest.mark.unit
    def test_silent_install(self):
        config = ScaffoldConfig(commands=CommandsConfig(silent_install=True))
        assert all(c.silent for c in config.install_commands())
