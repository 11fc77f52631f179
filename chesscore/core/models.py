"""
Boundary layer data model(s).

These objects are used to communicate with the Service.
Hence, both the service layer (higher) and the db layer (lower) use the model defined here to send/receive games.
(Decouples the data model specific to the DB layer from the domain layer)
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class GameModel:
    """Transport-safe representation of a chess game used between Service, DB, and Game layers.

    The moves (long algebraic) replayed from the starting FEN rebuild the full game, repetition history included.
    """

    starting_fen: str
    current_fen: str
    moves: list[str] = field(default_factory=list)
    status: str = "in progress"
    result: Optional[str] = None
