"""
Square Dash Game Engine.

This module implements the complete game logic including:
- Board generation (obstacles and exit placement)
- Movement with the two-tile momentum slide
- Pulse and collision detection
- Arena shrinking every few turns
- Lives, crash respawns, victory and game over

All transitions are functions of (state, input, rng) returning a new
immutable ``GameState``. ``GameEngine`` wraps them for callers that want a
single owned session.
"""
from dataclasses import dataclass, replace
from typing import List, Tuple, Optional, Dict, Any, Union, FrozenSet
from enum import Enum
import numpy as np

from .arena import Arena, Position, NEIGHBOR_OFFSETS, manhattan, is_adjacent


GRID_SIZE = 9
INITIAL_LIVES = 3
NUM_OBSTACLES = 6
MIN_OBSTACLE_DISTANCE = 3  # Manhattan distance from the centre
ARENA_SHRINK_INTERVAL = 5
MAX_PLACEMENT_ATTEMPTS = 1000

VICTORY_MESSAGE = "You escaped the crush!"
GAME_OVER_MESSAGE = "Flat as a pancake! Game over."
CRASH_MESSAGE = "Crashed! Lives remaining: {lives}"
SHRINK_MESSAGE = "The arena is shrinking!"
PULSE_WARNING = "WARNING: Obstacles are pulsing!"
INVALID_DIRECTION_MESSAGE = "Invalid direction. Use N, S, E, or W."
GAME_FINISHED_MESSAGE = "The game has ended. Start a new game to play again."
NOT_STARTED_MESSAGE = "Game has not started."


class Phase(Enum):
    """Game phase enumeration."""
    NOT_STARTED = "not_started"
    PLAYING = "playing"
    GAME_OVER = "game_over"
    VICTORY = "victory"


class CrashCause(Enum):
    """What the player ran into."""
    WALL = "wall"
    OBSTACLE = "obstacle"
    PULSE = "pulse"
    SHRINK = "shrink"


class Direction(Enum):
    """Movement direction; the value is the (row, col) unit vector."""
    N = (-1, 0)
    S = (1, 0)
    E = (0, 1)
    W = (0, -1)

    @property
    def vector(self) -> Position:
        return self.value

    @classmethod
    def parse(cls, value: Union["Direction", str, None]) -> Optional["Direction"]:
        """
        Map a direction letter (any case) to a Direction.

        Returns None for anything that is not N, S, E or W.
        """
        if isinstance(value, Direction):
            return value
        if not isinstance(value, str):
            return None
        return cls.__members__.get(value.strip().upper())


# Action index order used by the environment and agents
DIRECTIONS: Tuple[Direction, ...] = (Direction.N, Direction.S, Direction.E, Direction.W)


@dataclass(frozen=True)
class GameState:
    """Complete immutable game state."""
    player: Position
    obstacles: Tuple[Position, ...]
    exit: Position
    turn: int = 0
    lives: int = INITIAL_LIVES
    border_size: int = 0
    phase: Phase = Phase.PLAYING
    message: str = ""
    grid_size: int = GRID_SIZE

    @property
    def arena(self) -> Arena:
        """Arena geometry for the current border."""
        return Arena(self.grid_size, self.border_size)

    @property
    def is_terminal(self) -> bool:
        return self.phase in (Phase.GAME_OVER, Phase.VICTORY)

    @property
    def pulses_active(self) -> bool:
        """Obstacles pulse on even, positive turns."""
        return self.turn > 0 and self.turn % 2 == 0

    def live_obstacles(self) -> List[Position]:
        """Obstacles that have not been swallowed by the walls."""
        arena = self.arena
        return [pos for pos in self.obstacles if arena.in_live_area(*pos)]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "player": list(self.player),
            "obstacles": [list(pos) for pos in self.obstacles],
            "exit": list(self.exit),
            "turn": self.turn,
            "lives": self.lives,
            "border_size": self.border_size,
            "phase": self.phase.value,
            "message": self.message,
            "grid_size": self.grid_size,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameState":
        """Create from dictionary."""
        return cls(
            player=tuple(data["player"]),
            obstacles=tuple(tuple(pos) for pos in data["obstacles"]),
            exit=tuple(data["exit"]),
            turn=data["turn"],
            lives=data["lives"],
            border_size=data["border_size"],
            phase=Phase(data["phase"]),
            message=data.get("message", ""),
            grid_size=data.get("grid_size", GRID_SIZE),
        )


@dataclass(frozen=True)
class Resolution:
    """Deterministic outcome of a move, before any respawn."""
    direction: Direction
    start: Position
    destination: Position
    slid: bool = False
    turn: int = 0
    border_size: int = 0
    shrinks: bool = False
    reached_exit: bool = False
    crash_cause: Optional[CrashCause] = None

    @property
    def crashes(self) -> bool:
        return self.crash_cause is not None


@dataclass
class MoveResult:
    """Result of a move action."""
    success: bool
    state: Optional[GameState]
    direction: Optional[Direction] = None
    start: Optional[Position] = None
    end: Optional[Position] = None
    slid: bool = False
    turn_advanced: bool = False
    crashed: bool = False
    crash_cause: Optional[CrashCause] = None
    shrunk: bool = False
    reached_exit: bool = False
    game_over: bool = False
    message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "direction": self.direction.name if self.direction else None,
            "start": list(self.start) if self.start else None,
            "end": list(self.end) if self.end else None,
            "slid": self.slid,
            "turn_advanced": self.turn_advanced,
            "crashed": self.crashed,
            "crash_cause": self.crash_cause.value if self.crash_cause else None,
            "shrunk": self.shrunk,
            "reached_exit": self.reached_exit,
            "game_over": self.game_over,
            "message": self.message,
        }


# =============================================================================
# Board generation
# =============================================================================

def place_obstacles(
    arena: Arena,
    rng: np.random.Generator,
    count: int = NUM_OBSTACLES,
    min_distance: int = MIN_OBSTACLE_DISTANCE,
    max_attempts: int = MAX_PLACEMENT_ATTEMPTS,
) -> Tuple[Position, ...]:
    """
    Randomly place distinct obstacles at least ``min_distance`` from the centre.

    Uses rejection sampling capped at ``max_attempts`` draws. If the cap is
    hit, the rest are drawn without replacement from the eligible cells.

    Raises:
        ValueError: if the grid has fewer eligible cells than ``count``
    """
    center = arena.center
    obstacles: List[Position] = []

    for _ in range(max_attempts):
        if len(obstacles) == count:
            break
        row, col = (int(v) for v in rng.integers(0, arena.size, size=2))
        if manhattan((row, col), center) < min_distance:
            continue
        if (row, col) in obstacles:
            continue
        obstacles.append((row, col))

    if len(obstacles) < count:
        eligible = [
            cell for cell in arena.cells()
            if manhattan(cell, center) >= min_distance and cell not in obstacles
        ]
        missing = count - len(obstacles)
        if len(eligible) < missing:
            raise ValueError(
                f"Cannot place {count} obstacles on a {arena.size}x{arena.size} grid"
            )
        picks = rng.choice(len(eligible), size=missing, replace=False)
        obstacles.extend(eligible[int(i)] for i in picks)

    return tuple(obstacles)


def choose_exit(
    arena: Arena,
    obstacles: Tuple[Position, ...],
    rng: np.random.Generator,
) -> Position:
    """Pick a perimeter cell not covered by an obstacle, uniformly at random."""
    candidates = [pos for pos in arena.perimeter() if pos not in obstacles]
    if not candidates:
        raise ValueError("No free perimeter cell for the exit")
    return candidates[int(rng.integers(len(candidates)))]


def new_game(
    rng: Optional[np.random.Generator] = None,
    lives: int = INITIAL_LIVES,
    grid_size: int = GRID_SIZE,
    message: str = "",
) -> GameState:
    """
    Create a freshly randomised board.

    Args:
        rng: Random generator (a fresh unseeded one if None)
        lives: Lives to carry; INITIAL_LIVES for a true new game
        grid_size: Size of the square grid
        message: Message to show on the new board

    Returns:
        New game state in the PLAYING phase
    """
    if rng is None:
        rng = np.random.default_rng()

    arena = Arena(grid_size)
    obstacles = place_obstacles(arena, rng)
    exit_pos = choose_exit(arena, obstacles, rng)

    return GameState(
        player=arena.center,
        obstacles=obstacles,
        exit=exit_pos,
        turn=0,
        lives=lives,
        border_size=0,
        phase=Phase.PLAYING,
        message=message,
        grid_size=grid_size,
    )


# =============================================================================
# Movement rules
# =============================================================================

def is_pulsing(state: GameState, cell: Position) -> bool:
    """
    Check if a cell is pulsing for the move about to be made.

    A cell pulses when the current turn is even and positive and the cell is
    orthogonally adjacent to a live obstacle.
    """
    if not state.pulses_active:
        return False
    return any(is_adjacent(cell, obs) for obs in state.live_obstacles())


def pulsing_cells(state: GameState) -> FrozenSet[Position]:
    """
    Visible pulse cells: live, empty cells next to a live obstacle.

    Walls and obstacles block movement anyway, so they are not listed.
    """
    if not state.pulses_active:
        return frozenset()

    arena = state.arena
    obstacles = set(state.obstacles)
    cells = set()
    for row, col in state.live_obstacles():
        for dr, dc in NEIGHBOR_OFFSETS:
            r, c = row + dr, col + dc
            if arena.in_live_area(r, c) and (r, c) not in obstacles:
                cells.add((r, c))
    return frozenset(cells)


def blocking_cause(state: GameState, cell: Position) -> Optional[CrashCause]:
    """Return why a cell cannot be entered, or None if it is free."""
    if not state.arena.in_live_area(*cell):
        return CrashCause.WALL
    if cell in state.obstacles:
        return CrashCause.OBSTACLE
    if is_pulsing(state, cell):
        return CrashCause.PULSE
    return None


def resolve_move(state: GameState, direction: Direction) -> Resolution:
    """
    Work out where a move ends without touching randomness.

    The pulse test uses the turn before this move's increment. A crash on the
    first step leaves the turn unchanged; otherwise the turn advances, the
    exit check runs, and the arena shrinks on every ARENA_SHRINK_INTERVAL-th
    turn, which crashes a player left in the new wall ring.
    """
    dr, dc = direction.vector
    row, col = state.player
    first = (row + dr, col + dc)

    cause = blocking_cause(state, first)
    if cause is not None:
        return Resolution(
            direction=direction,
            start=state.player,
            destination=state.player,
            turn=state.turn,
            border_size=state.border_size,
            crash_cause=cause,
        )

    second = (first[0] + dr, first[1] + dc)
    slid = blocking_cause(state, second) is None
    destination = second if slid else first
    turn = state.turn + 1

    if destination == state.exit:
        return Resolution(
            direction=direction,
            start=state.player,
            destination=destination,
            slid=slid,
            turn=turn,
            border_size=state.border_size,
            reached_exit=True,
        )

    border_size = state.border_size
    shrinks = turn % ARENA_SHRINK_INTERVAL == 0
    crash_cause = None
    if shrinks:
        border_size += 1
        if not Arena(state.grid_size, border_size).in_live_area(*destination):
            crash_cause = CrashCause.SHRINK

    return Resolution(
        direction=direction,
        start=state.player,
        destination=destination,
        slid=slid,
        turn=turn,
        border_size=border_size,
        shrinks=shrinks,
        crash_cause=crash_cause,
    )


def crash(
    state: GameState,
    rng: Optional[np.random.Generator] = None,
) -> GameState:
    """
    Apply a crash: lose a life, then respawn on a new board or end the game.
    """
    lives = max(state.lives - 1, 0)
    if lives <= 0:
        return replace(state, lives=0, phase=Phase.GAME_OVER, message=GAME_OVER_MESSAGE)
    return new_game(
        rng,
        lives=lives,
        grid_size=state.grid_size,
        message=CRASH_MESSAGE.format(lives=lives),
    )


def move(
    state: GameState,
    direction: Union[Direction, str],
    rng: Optional[np.random.Generator] = None,
) -> MoveResult:
    """
    Make a move in the given direction.

    Args:
        state: Current game state
        direction: Direction or direction letter
        rng: Random generator used if the board has to be re-randomised

    Returns:
        MoveResult whose ``state`` is the next game state. Invalid input
        returns ``success=False`` with the state unchanged.
    """
    if state.phase is not Phase.PLAYING:
        message = NOT_STARTED_MESSAGE if state.phase is Phase.NOT_STARTED else GAME_FINISHED_MESSAGE
        return MoveResult(success=False, state=state, message=message)

    parsed = Direction.parse(direction)
    if parsed is None:
        return MoveResult(success=False, state=state, message=INVALID_DIRECTION_MESSAGE)

    res = resolve_move(state, parsed)
    moved = replace(
        state,
        player=res.destination,
        turn=res.turn,
        border_size=res.border_size,
        message=SHRINK_MESSAGE if res.shrinks else "",
    )

    if res.reached_exit:
        moved = replace(moved, phase=Phase.VICTORY, message=VICTORY_MESSAGE)
    elif res.crashes:
        moved = crash(moved, rng)

    return MoveResult(
        success=True,
        state=moved,
        direction=parsed,
        start=res.start,
        end=res.destination,
        slid=res.slid,
        turn_advanced=res.turn > state.turn,
        crashed=res.crashes,
        crash_cause=res.crash_cause,
        shrunk=res.shrinks,
        reached_exit=res.reached_exit,
        game_over=moved.phase is Phase.GAME_OVER,
        message=moved.message,
    )


def safe_directions(state: GameState) -> List[Direction]:
    """Directions that neither crash nor leave the player in a shrinking ring."""
    if state.phase is not Phase.PLAYING:
        return []
    return [d for d in DIRECTIONS if not resolve_move(state, d).crashes]


# =============================================================================
# Session wrapper
# =============================================================================

class GameEngine:
    """
    Square Dash game engine.

    Owns one session's state and random generator and provides methods for:
    - Starting games
    - Making moves
    - Checking safe actions
    - Building observations and views
    - Tracking statistics
    """

    def __init__(self, grid_size: int = GRID_SIZE, seed: Optional[int] = None):
        """
        Initialize an engine. No game is running until ``new_game`` is called.

        Args:
            grid_size: Size of the square grid (default 9)
            seed: Random seed for reproducibility
        """
        self.grid_size = grid_size
        self.rng = np.random.default_rng(seed)
        self.state: Optional[GameState] = None
        self._reset_statistics()

    def _reset_statistics(self) -> None:
        self.moves_made = 0
        self.crashes = 0
        self.boards_played = 0
        self.shrinks = 0
        self.best_turn = 0

    @property
    def phase(self) -> Phase:
        if self.state is None:
            return Phase.NOT_STARTED
        return self.state.phase

    def new_game(self) -> GameState:
        """Start a new game with full lives."""
        self._reset_statistics()
        self.state = new_game(self.rng, grid_size=self.grid_size)
        self.boards_played = 1
        return self.state

    def reset(self, seed: Optional[int] = None) -> GameState:
        """
        Reset to a new game.

        Args:
            seed: New random seed (optional)

        Returns:
            Initial game state
        """
        if seed is not None:
            self.rng = np.random.default_rng(seed)
        return self.new_game()

    def make_move(self, direction: Union[Direction, str]) -> MoveResult:
        """
        Move the player and record statistics.

        Args:
            direction: Direction or direction letter

        Returns:
            MoveResult with details about the move
        """
        if self.state is None:
            return MoveResult(success=False, state=None, message=NOT_STARTED_MESSAGE)

        result = move(self.state, direction, self.rng)
        if not result.success:
            return result

        if result.turn_advanced:
            self.moves_made += 1
        if result.shrunk:
            self.shrinks += 1
        if result.crashed:
            self.crashes += 1
            if not result.game_over:
                self.boards_played += 1

        self.state = result.state
        self.best_turn = max(self.best_turn, self.state.turn)
        return result

    def get_state(self) -> Optional[GameState]:
        """Get the current game state."""
        return self.state

    def set_state(self, state: GameState) -> None:
        """Restore game from a saved state."""
        self.state = state
        self.grid_size = state.grid_size

    def is_finished(self) -> bool:
        """Check if the game has reached victory or game over."""
        return self.state is not None and self.state.is_terminal

    def is_game_over(self) -> bool:
        return self.phase is Phase.GAME_OVER

    def get_safe_directions(self) -> List[Direction]:
        if self.state is None:
            return []
        return safe_directions(self.state)

    def get_action_mask(self) -> np.ndarray:
        """
        Boolean array of shape (4,) in N, S, E, W order, True = safe move.
        """
        safe = set(self.get_safe_directions())
        return np.array([d in safe for d in DIRECTIONS], dtype=bool)

    def get_observation(self) -> Dict[str, np.ndarray]:
        """
        Get observation planes for agents.

        Returns:
            Dictionary with:
            - 'grid': (5, N, N) float array of wall, obstacle, pulse, exit and
              player planes
            - 'status': (3,) float array of lives, turns until the next
              shrink, and whether pulses are active, each scaled to [0, 1]
            - 'action_mask': (4,) bool array of safe directions
        """
        size = self.grid_size
        grid = np.zeros((5, size, size), dtype=np.float32)
        status = np.zeros(3, dtype=np.float32)

        if self.state is not None:
            state = self.state
            arena = state.arena
            grid[0] = arena.wall_mask()
            for r, c in state.live_obstacles():
                grid[1, r, c] = 1.0
            for r, c in pulsing_cells(state):
                grid[2, r, c] = 1.0
            if arena.in_live_area(*state.exit):
                grid[3, state.exit[0], state.exit[1]] = 1.0
            if arena.in_live_area(*state.player):
                grid[4, state.player[0], state.player[1]] = 1.0

            until_shrink = ARENA_SHRINK_INTERVAL - state.turn % ARENA_SHRINK_INTERVAL
            status[0] = state.lives / INITIAL_LIVES
            status[1] = until_shrink / ARENA_SHRINK_INTERVAL
            status[2] = 1.0 if state.pulses_active else 0.0

        return {
            'grid': grid,
            'status': status,
            'action_mask': self.get_action_mask(),
        }

    def get_view(self, message: Optional[str] = None):
        """Derive the render view model for the current state."""
        from .view import build_view
        return build_view(self.state, message=message, grid_size=self.grid_size)

    def get_statistics(self) -> Dict[str, Any]:
        """Get game statistics."""
        state = self.state
        return {
            'phase': self.phase.value,
            'moves_made': self.moves_made,
            'crashes': self.crashes,
            'boards_played': self.boards_played,
            'shrinks': self.shrinks,
            'best_turn': self.best_turn,
            'turn': state.turn if state else 0,
            'lives': state.lives if state else INITIAL_LIVES,
            'border_size': state.border_size if state else 0,
            'victory': self.phase is Phase.VICTORY,
        }

    def __str__(self) -> str:
        from .renderer import Renderer
        return Renderer().render_game_state(self.get_view())


def play_random_game(seed: Optional[int] = None, verbose: bool = False) -> Dict[str, Any]:
    """
    Play a complete game with random safe moves for testing.

    Falls back to any direction when no move is safe, which costs a life.

    Args:
        seed: Random seed
        verbose: Whether to print game progress

    Returns:
        Dictionary with game statistics
    """
    engine = GameEngine(seed=seed)
    engine.new_game()

    if verbose:
        print("Starting random game...")
        print(engine)

    while not engine.is_finished():
        options = engine.get_safe_directions() or list(DIRECTIONS)
        direction = options[int(engine.rng.integers(len(options)))]
        result = engine.make_move(direction)

        if verbose and (result.crashed or result.shrunk):
            print(f"\nTurn {engine.state.turn}: {result.message}")

    stats = engine.get_statistics()

    if verbose:
        print("\n" + "=" * 40)
        print("VICTORY!" if stats['victory'] else "GAME OVER!")
        print(engine)
        print(f"\nFinal Statistics: {stats}")

    return stats


if __name__ == "__main__":
    stats = play_random_game(seed=42, verbose=True)
    print(f"\nMoves made: {stats['moves_made']}")
