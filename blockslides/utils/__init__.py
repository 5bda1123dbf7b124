"""
Blockslides Utilities
"""

from .objects import find_duplicates, merge_deep

__all__ = [
    "find_duplicates",
    "merge_deep",
]
