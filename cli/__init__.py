"""Command line interface for the UV bot."""

from importlib import import_module
from types import ModuleType


def __getattr__(name: str) -> ModuleType:
    if name == "app":
        return import_module("cli.app")
    raise AttributeError(name)

# Resolve ``cli.app`` lazily to the Typer module; tests patch names such as
# ``cli.app.build_provider`` on it, which a re-exported Typer object would hide.

__all__ = []
