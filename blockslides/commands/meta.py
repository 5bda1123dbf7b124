"""
Transaction-level commands.
"""

from __future__ import annotations

from typing import Any, Callable

from .manager import Command, CommandProps


def set_meta(key: str, value: Any) -> Command:
    def command(props: CommandProps) -> bool:
        props.tr.set_meta(key, value)
        return True

    return command


def command(fn: Callable[[CommandProps], bool]) -> Command:
    """Run an ad-hoc function as a command (useful inside chains)."""

    def run(props: CommandProps) -> bool:
        return fn(props)

    return run
