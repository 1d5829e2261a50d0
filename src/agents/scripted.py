"""
Scripted agents for Square Dash.

Both agents read only the environment observation, so they work with
``SquareDashEnv`` and with ``GameEngine.get_observation()``.
"""
from typing import Dict, Any, Optional, Tuple, List
import numpy as np

from .base import BaseAgent

# (row, col) vectors in action order: N, S, E, W
ACTION_VECTORS: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, 1), (0, -1))

WALL, OBSTACLE, PULSE, EXIT, PLAYER = range(5)


def _find(plane: np.ndarray) -> Optional[Tuple[int, int]]:
    cells = np.argwhere(plane > 0)
    if len(cells) == 0:
        return None
    return int(cells[0][0]), int(cells[0][1])


def predict_destination(grid: np.ndarray, action: int) -> Optional[Tuple[int, int]]:
    """
    Predict where a slide ends from the observation planes.

    Returns:
        The landing cell, or None if the first step is blocked
    """
    player = _find(grid[PLAYER])
    if player is None:
        return None

    size = grid.shape[1]
    blocked = (grid[WALL] + grid[OBSTACLE] + grid[PULSE]) > 0

    def free(r: int, c: int) -> bool:
        return 0 <= r < size and 0 <= c < size and not blocked[r, c]

    dr, dc = ACTION_VECTORS[action]
    first = (player[0] + dr, player[1] + dc)
    if not free(*first):
        return None
    second = (first[0] + dr, first[1] + dc)
    return second if free(*second) else first


class RandomAgent(BaseAgent):
    """Picks uniformly among safe actions, or among all when none is safe."""

    name = "random"

    def __init__(self, seed: Optional[int] = None):
        self.rng = np.random.default_rng(seed)

    def select_action(
        self,
        observation: Dict[str, np.ndarray],
        deterministic: bool = False,
    ) -> Tuple[int, Dict[str, Any]]:
        mask = np.asarray(observation['action_mask']).astype(bool)
        options = np.flatnonzero(mask)
        if len(options) == 0:
            options = np.arange(len(mask))
        if deterministic:
            return int(options[0]), {'options': options.tolist()}
        return int(self.rng.choice(options)), {'options': options.tolist()}


class GreedyAgent(BaseAgent):
    """
    Heads for the exit by the safe move that lands closest to it.

    Once the exit is walled off it keeps to the centre, which is the last
    cell the walls reach.
    """

    name = "greedy"

    def __init__(self, seed: Optional[int] = None):
        self.rng = np.random.default_rng(seed)

    def select_action(
        self,
        observation: Dict[str, np.ndarray],
        deterministic: bool = False,
    ) -> Tuple[int, Dict[str, Any]]:
        grid = observation['grid']
        mask = np.asarray(observation['action_mask']).astype(bool)
        size = grid.shape[1]

        target = _find(grid[EXIT])
        if target is None:
            target = (size // 2, size // 2)

        scores: List[Tuple[int, int]] = []
        for action in np.flatnonzero(mask):
            destination = predict_destination(grid, int(action))
            if destination is None:
                continue
            distance = abs(destination[0] - target[0]) + abs(destination[1] - target[1])
            scores.append((distance, int(action)))

        if not scores:
            # Every move crashes
            return 0, {'target': target, 'distance': None}

        best = min(distance for distance, _ in scores)
        candidates = [action for distance, action in scores if distance == best]
        if deterministic or len(candidates) == 1:
            action = candidates[0]
        else:
            action = int(self.rng.choice(candidates))

        return action, {'target': target, 'distance': best}


AGENTS = {
    RandomAgent.name: RandomAgent,
    GreedyAgent.name: GreedyAgent,
}


def make_agent(name: str, seed: Optional[int] = None) -> BaseAgent:
    """Create an agent by name ('random' or 'greedy')."""
    if name not in AGENTS:
        raise ValueError(f"Unknown agent '{name}'. Choose from: {', '.join(AGENTS)}")
    return AGENTS[name](seed=seed)
