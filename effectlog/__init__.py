"""Effect history query engine."""
from __future__ import annotations

from types import ModuleType
from typing import Any

from . import lib

__all__ = ["lib", "services"]


def __getattr__(name: str) -> Any:
    """Lazily import services so the key codec can be used without FastAPI."""
    if name == "services":
        import importlib

        module: ModuleType = importlib.import_module("effectlog.services")
        globals()["services"] = module
        return module
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
