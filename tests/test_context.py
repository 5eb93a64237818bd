from __future__ import annotations

from pathlib import Path
import tempfile
import textwrap
import unittest

from iroha_wasm_pack.context import WASM_TARGET, BuildArgs, BuildContext
from iroha_wasm_pack.errors import ManifestParseError, MissingLibraryKind, ProjectNotFound


class BuildContextTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name).resolve()
        self._write_manifest('crate-type = ["cdylib", "rlib"]')
        self.cwd = self.root / "src" / "nested"
        self.cwd.mkdir(parents=True)

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def _write_manifest(self, lib_line: str) -> None:
        (self.root / "Cargo.toml").write_text(
            textwrap.dedent(
                f"""
                [package]
                name = "contract"

                [lib]
                {lib_line}
                """
            )
        )

    def test_debug_mode_without_release_flag(self) -> None:
        for options in [(), ("--features", "x"), ("--release-candidate",), ("-r",)]:
            ctx = BuildContext.from_args(BuildArgs(options), self.cwd)
            self.assertEqual(ctx.profile, "debug", options)

    def test_release_mode_when_flag_anywhere(self) -> None:
        for options in [("--release",), ("--locked", "--release"), ("--release", "--", "extra")]:
            ctx = BuildContext.from_args(BuildArgs(options), self.cwd)
            self.assertEqual(ctx.profile, "release", options)

    def test_artifact_paths(self) -> None:
        for options, profile in [((), "debug"), (("--release",), "release")]:
            ctx = BuildContext.from_args(BuildArgs(options), self.cwd)
            folder = self.root / "target" / WASM_TARGET / profile
            self.assertEqual(ctx.root, self.root)
            self.assertEqual(ctx.wasm_in, folder / "contract.wasm")
            self.assertEqual(ctx.wasm_out, folder / "contract_optimized.wasm")
            self.assertNotEqual(ctx.wasm_in, ctx.wasm_out)
            self.assertEqual(ctx.wasm_in.parent, ctx.wasm_out.parent)

    def test_first_crate_type_is_authoritative(self) -> None:
        ctx = BuildContext.from_args(BuildArgs(), self.cwd)
        self.assertEqual(ctx.crate_type, "cdylib")

    def test_empty_crate_types_raise_missing_library_kind(self) -> None:
        self._write_manifest("crate-type = []")
        with self.assertRaises(MissingLibraryKind) as ctx:
            BuildContext.from_args(BuildArgs(), self.cwd)
        self.assertIn('crate-type = ["cdylib"]', str(ctx.exception))

    def test_manifest_errors_propagate(self) -> None:
        (self.root / "Cargo.toml").write_text("not toml = = =")
        with self.assertRaises(ManifestParseError):
            BuildContext.from_args(BuildArgs(), self.cwd)

    def test_locator_errors_propagate(self) -> None:
        with tempfile.TemporaryDirectory() as other:
            with self.assertRaises(ProjectNotFound):
                BuildContext.from_args(BuildArgs(), Path(other))

    def test_context_is_immutable(self) -> None:
        ctx = BuildContext.from_args(BuildArgs(), self.cwd)
        with self.assertRaises(AttributeError):
            ctx.crate_type = "rlib"  # type: ignore[misc]


if __name__ == "__main__":
    unittest.main()
