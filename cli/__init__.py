"""CLI package for interacting with the distance reading service."""

from importlib import import_module
from types import ModuleType


def __getattr__(name: str) -> ModuleType:
    if name == "app":
        return import_module("cli.app")
    raise AttributeError(name)

# The Typer instance stays in ``cli.app`` so that the module path remains
# patchable from tests.

__all__ = []
