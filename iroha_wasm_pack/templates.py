"""File templates written by ``iroha_wasm_pack new``."""
from __future__ import annotations

from typing import Mapping
import re

_PLACEHOLDER_PATTERN = re.compile(r"\{\{([^{}]+)\}\}")


def render(template: str, values: Mapping[str, str]) -> str:
    """Replace ``{{key}}`` placeholders; unknown keys are an error."""

    def replacement(match: re.Match[str]) -> str:
        key = match.group(1).strip()
        if key not in values:
            raise KeyError(f"Unknown template placeholder '{key}'")
        return values[key]

    return _PLACEHOLDER_PATTERN.sub(replacement, template)


CARGO_MANIFEST = """[package]
name = "{{project.name}}"
version = "0.1.0"
edition = "2021"

[lib]
# A smart contract should be linked dynamically so that it may link to functions exported
# from the host environment. The host environment executes a smart contract by
# calling the function that smart contract exports (entry point of execution)
crate-type = ['cdylib']

[profile.release]
strip = "debuginfo" # Remove debugging info from the binary
panic = "abort"     # Panics are transcribed to Traps when compiling for WASM
lto = true          # Link-time-optimization produces notable decrease in binary size
opt-level = "z"     # Optimize for size vs speed with "s"/"z" (removes vectorization)
codegen-units = 1   # Further reduces binary size but increases compilation time

[dependencies]
iroha_data_model = { git = "https://github.com/hyperledger/iroha/", branch = "iroha2-dev", default-features = false }
iroha_wasm = { git = "https://github.com/hyperledger/iroha/", branch = "iroha2-dev" }

[dev-dependencies]
webassembly-test-runner = { version = "0.1.0" }
"""

ENTRYPOINT = """//! Smartcontract which creates new nft for every user
//!
//! This module isn't included in the build-tree,
//! but instead it is being built by a `client/build.rs`

#![no_std]
#![no_main]
#![allow(clippy::all)]

//! Sample smartcontract which mints 1 rose for it's authority

use core::str::FromStr as _;

use iroha_wasm::{data_model::prelude::*, DebugExpectExt};

/// Mint 1 rose for authority
#[iroha_wasm::entrypoint(params = "[authority]")]
fn trigger_entrypoint(authority: <Account as Identifiable>::Id) {
    let rose_definition_id = <AssetDefinition as Identifiable>::Id::from_str("token#open")
        .dbg_expect("Failed to parse `token#open` asset definition id");
    let rose_id = <Asset as Identifiable>::Id::new(rose_definition_id, authority);

    Instruction::Mint(MintBox::new(1_u32, rose_id)).execute();
}
"""


def cargo_manifest(name: str) -> str:
    return render(CARGO_MANIFEST, {"project.name": name})


__all__ = ["CARGO_MANIFEST", "ENTRYPOINT", "cargo_manifest", "render"]
