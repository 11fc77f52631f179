"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    IN_PROGRESS = "in progress"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    DRAW_FIFTY_MOVE_RULE = "draw by fifty-move rule"
    DRAW_REPETITION = "draw by threefold repetition"
    DRAW_INSUFFICIENT_MATERIAL = "draw by insufficient material"
