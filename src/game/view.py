"""
Render view model for Square Dash.

Front ends never read ``GameState`` directly: after each transition they call
``build_view`` and draw the result.
"""
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional
import numpy as np

from .arena import Arena, Position
from .engine import (
    GameState, Phase, GRID_SIZE, ARENA_SHRINK_INTERVAL, pulsing_cells,
)


class Cell(IntEnum):
    """Cell codes of the view grid, in drawing priority order."""
    EMPTY = 0
    WALL = 1
    OBSTACLE = 2
    PULSE = 3
    EXIT = 4
    PLAYER = 5


@dataclass
class ViewModel:
    """Read-only projection of a game state for rendering."""
    grid_size: int
    grid: np.ndarray
    walls: List[Position] = field(default_factory=list)
    obstacles: List[Position] = field(default_factory=list)
    pulses: List[Position] = field(default_factory=list)
    exit: Optional[Position] = None
    player: Optional[Position] = None
    turn: int = 0
    lives: int = 0
    border_size: int = 0
    phase: Phase = Phase.NOT_STARTED
    message: str = ""
    pulse_warning: bool = False
    shrink_warning: bool = False

    @property
    def started(self) -> bool:
        return self.phase is not Phase.NOT_STARTED

    @property
    def finished(self) -> bool:
        return self.phase in (Phase.GAME_OVER, Phase.VICTORY)

    def cell(self, row: int, col: int) -> Cell:
        return Cell(int(self.grid[row, col]))


def build_view(
    state: Optional[GameState],
    message: Optional[str] = None,
    grid_size: int = GRID_SIZE,
) -> ViewModel:
    """
    Derive the view model for a state.

    Layers are drawn walls first, then live obstacles, pulses on empty cells,
    the exit and the player. The exit and the player are hidden once the
    walls cover them.

    Args:
        state: Game state, or None before the first game
        message: Overrides the state's message (e.g. an input error)
        grid_size: Grid size used when there is no state yet
    """
    if state is None:
        return ViewModel(
            grid_size=grid_size,
            grid=np.zeros((grid_size, grid_size), dtype=np.int8),
            message=message or "",
        )

    arena = Arena(state.grid_size, state.border_size)
    grid = np.zeros((state.grid_size, state.grid_size), dtype=np.int8)

    walls = arena.wall_cells()
    for r, c in walls:
        grid[r, c] = Cell.WALL

    obstacles = sorted(state.live_obstacles())
    for r, c in obstacles:
        grid[r, c] = Cell.OBSTACLE

    pulses = sorted(pulsing_cells(state))
    for r, c in pulses:
        grid[r, c] = Cell.PULSE

    exit_pos = state.exit if arena.in_live_area(*state.exit) else None
    if exit_pos is not None:
        grid[exit_pos] = Cell.EXIT

    player = state.player if arena.in_live_area(*state.player) else None
    if player is not None:
        grid[player] = Cell.PLAYER

    return ViewModel(
        grid_size=state.grid_size,
        grid=grid,
        walls=walls,
        obstacles=obstacles,
        pulses=pulses,
        exit=exit_pos,
        player=player,
        turn=state.turn,
        lives=state.lives,
        border_size=state.border_size,
        phase=state.phase,
        message=state.message if message is None else message,
        pulse_warning=state.pulses_active,
        shrink_warning=state.turn > 0 and state.turn % ARENA_SHRINK_INTERVAL == 0,
    )
