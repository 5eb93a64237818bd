from __future__ import annotations

from pathlib import Path
import os
import tempfile
import textwrap
import unittest
from unittest.mock import patch

from iroha_wasm_pack.config import CONFIG_DIR_ENV, ToolConfig, ToolPaths, resolve_config_directories
from iroha_wasm_pack.errors import ConfigError


class ToolConfigTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.workspace = Path(self.temp_dir.name)
        self.user_dir = self.workspace / "user"
        self.project_dir = self.workspace / "project"
        self.user_dir.mkdir()
        self.project_dir.mkdir()

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_defaults_without_files(self) -> None:
        config = ToolConfig.load([self.workspace / "missing"], workspace=self.workspace)
        self.assertEqual(config.tools, ToolPaths())
        self.assertIsNone(config.log_level)
        self.assertEqual(config.sources, ())

    def test_later_directories_override(self) -> None:
        (self.user_dir / "config.toml").write_text(
            textwrap.dedent(
                """
                [global]
                log_level = "info"

                [tools]
                cargo = "/usr/bin/cargo"
                wasm_opt = "/opt/binaryen/bin/wasm-opt"
                """
            )
        )
        (self.project_dir / "config.yaml").write_text(
            textwrap.dedent(
                """
                global:
                  log_level: debug
                tools:
                  cargo: cargo-nightly
                """
            )
        )
        config = ToolConfig.load([self.user_dir, self.project_dir], workspace=self.workspace)
        self.assertEqual(config.log_level, "debug")
        self.assertEqual(config.tools.cargo, "cargo-nightly")
        self.assertEqual(config.tools.wasm_opt, "/opt/binaryen/bin/wasm-opt")
        self.assertEqual(config.tools.rustc, "rustc")
        self.assertEqual(config.sources, (self.user_dir / "config.toml", self.project_dir / "config.yaml"))

    def test_json_config(self) -> None:
        (self.project_dir / "config.json").write_text('{"tools": {"rustup": "/home/me/.cargo/bin/rustup"}}')
        config = ToolConfig.load([self.project_dir], workspace=self.workspace)
        self.assertEqual(config.tools.rustup, "/home/me/.cargo/bin/rustup")

    def test_relative_directories_resolve_against_workspace(self) -> None:
        (self.project_dir / "config.toml").write_text('[tools]\nrustc = "rustc-beta"\n')
        config = ToolConfig.load([Path("project")], workspace=self.workspace)
        self.assertEqual(config.tools.rustc, "rustc-beta")

    def test_unknown_tool_key(self) -> None:
        (self.project_dir / "config.toml").write_text('[tools]\nclang = "clang"\n')
        with self.assertRaises(ConfigError) as ctx:
            ToolConfig.load([self.project_dir], workspace=self.workspace)
        self.assertIn("clang", str(ctx.exception))
        self.assertEqual(ctx.exception.path, self.project_dir / "config.toml")

    def test_malformed_file(self) -> None:
        (self.project_dir / "config.toml").write_text("[tools\n")
        with self.assertRaises(ConfigError):
            ToolConfig.load([self.project_dir], workspace=self.workspace)

    def test_two_formats_for_same_stem(self) -> None:
        (self.project_dir / "config.toml").write_text("")
        (self.project_dir / "config.json").write_text("{}")
        with self.assertRaises(ConfigError) as ctx:
            ToolConfig.load([self.project_dir], workspace=self.workspace)
        self.assertIn("Multiple configuration files", str(ctx.exception))

    def test_other_files_are_ignored(self) -> None:
        (self.project_dir / "notes.toml").write_text("not = [valid")
        config = ToolConfig.load([self.project_dir], workspace=self.workspace)
        self.assertEqual(config.sources, ())

    def test_directory_order(self) -> None:
        env = {CONFIG_DIR_ENV: os.pathsep.join(["env-a", "/abs/env-b"]), "XDG_CONFIG_HOME": "/xdg"}
        with patch.dict(os.environ, env):
            directories = resolve_config_directories(self.workspace, ["cli"])
        self.assertEqual(
            directories,
            [
                Path("/xdg/iroha_wasm_pack"),
                self.workspace / "env-a",
                Path("/abs/env-b"),
                self.workspace / "cli",
            ],
        )


if __name__ == "__main__":
    unittest.main()
