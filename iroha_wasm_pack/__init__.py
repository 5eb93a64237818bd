"""Build Iroha smart contracts into size-constrained wasm modules."""

from .cli import main

__all__ = ["main"]
