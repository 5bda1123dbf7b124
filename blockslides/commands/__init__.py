"""
Blockslides Commands

Command manager, chains and the built-in command set.
"""

from .core import CoreCommands
from .manager import (
    FOCUS,
    PREVENT_DISPATCH,
    PREVENT_UPDATE,
    BoundCommands,
    CanCommands,
    Command,
    CommandChain,
    CommandFactory,
    CommandManager,
    CommandProps,
    SingleCommands,
)

__all__ = [
    "BoundCommands",
    "CanCommands",
    "Command",
    "CommandChain",
    "CommandFactory",
    "CommandManager",
    "CommandProps",
    "CoreCommands",
    "FOCUS",
    "PREVENT_DISPATCH",
    "PREVENT_UPDATE",
    "SingleCommands",
]
