"""Game engine module for Square Dash."""
from .arena import Arena, Position
from .engine import (
    GameEngine,
    GameState,
    MoveResult,
    Phase,
    Direction,
    CrashCause,
    DIRECTIONS,
    new_game,
    move,
)
from .view import Cell, ViewModel, build_view
from .commands import parse_command, submit_command
from .renderer import Renderer

__all__ = [
    "Arena",
    "Position",
    "GameEngine",
    "GameState",
    "MoveResult",
    "Phase",
    "Direction",
    "CrashCause",
    "DIRECTIONS",
    "new_game",
    "move",
    "Cell",
    "ViewModel",
    "build_view",
    "parse_command",
    "submit_command",
    "Renderer",
]
