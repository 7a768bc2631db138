from __future__ import annotations

"""Console-script entry point for the ``boardgameatlas`` command."""

from typing import Any

__all__ = ["main", "cli"]


def __getattr__(name: str) -> Any:  # pragma: no cover - lazy import of the click command
    if name == "cli":
        from .__main__ import cli

        return cli
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def main() -> None:  # pragma: no cover - thin wrapper
    from .__main__ import cli

    cli(prog_name="boardgameatlas")
