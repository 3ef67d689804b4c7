"""Domain layer definitions."""

from .board import BoardState, LoadStatus

__all__ = [
    "BoardState",
    "LoadStatus",
]
