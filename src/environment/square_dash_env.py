"""
Square Dash Gymnasium Environment.

This module provides a Gymnasium-compatible environment so scripted and
learning agents can play Square Dash.
"""
from typing import Dict, Tuple, Any, Optional, List
import numpy as np
import gymnasium as gym
from gymnasium import spaces

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from game.arena import manhattan
from game.engine import GameEngine, MoveResult, DIRECTIONS, GRID_SIZE
from utils.config import DEFAULT_CONFIG


class SquareDashEnv(gym.Env):
    """
    Gymnasium environment for Square Dash.

    Observation Space:
        Dictionary with:
        - 'grid': (5, 9, 9) float32 planes: wall, obstacle, pulse, exit, player
        - 'status': (3,) float32: lives, turns until shrink, pulses active
        - 'action_mask': (4,) int8, 1 = direction does not crash

    Action Space:
        Discrete(4) - N, S, E, W in that order
    """

    metadata = {"render_modes": ["human", "ansi"]}

    GRID_SIZE = GRID_SIZE
    NUM_CHANNELS = 5
    ACTION_SPACE_SIZE = len(DIRECTIONS)

    def __init__(
        self,
        render_mode: Optional[str] = None,
        reward_config: Optional[Dict[str, float]] = None,
        seed: Optional[int] = None,
    ):
        """
        Initialize the Square Dash environment.

        Args:
            render_mode: 'human' for console output, 'ansi' for string return
            reward_config: Custom reward configuration
            seed: Random seed for reproducibility
        """
        super().__init__()

        self.render_mode = render_mode
        self.seed_value = seed

        # Rewards scaled to roughly [-1, 1]
        self.reward_config = dict(DEFAULT_CONFIG['rewards'])
        if reward_config:
            self.reward_config.update(reward_config)

        self.engine = GameEngine(grid_size=self.GRID_SIZE, seed=seed)

        self.observation_space = spaces.Dict({
            'grid': spaces.Box(
                low=0.0, high=1.0,
                shape=(self.NUM_CHANNELS, self.GRID_SIZE, self.GRID_SIZE),
                dtype=np.float32
            ),
            'status': spaces.Box(
                low=0.0, high=1.0,
                shape=(3,),
                dtype=np.float32
            ),
            'action_mask': spaces.Box(
                low=0, high=1,
                shape=(self.ACTION_SPACE_SIZE,),
                dtype=np.int8
            ),
        })

        self.action_space = spaces.Discrete(self.ACTION_SPACE_SIZE)

        self._prev_distance = 0

    def _exit_distance(self) -> int:
        state = self.engine.state
        return manhattan(state.player, state.exit)

    def _get_observation(self) -> Dict[str, np.ndarray]:
        """Get the current observation."""
        obs = self.engine.get_observation()
        return {
            'grid': obs['grid'],
            'status': obs['status'],
            'action_mask': obs['action_mask'].astype(np.int8),
        }

    def _calculate_reward(self, result: MoveResult) -> float:
        """
        Calculate reward for a move.

        Args:
            result: The result of the move

        Returns:
            Reward value
        """
        reward = self.reward_config['step_penalty']

        if result.reached_exit:
            return reward + self.reward_config['victory_reward']

        if result.crashed:
            reward += self.reward_config['crash_penalty']
            if result.game_over:
                reward += self.reward_config['game_over_penalty']
            self._prev_distance = self._exit_distance()
            return reward

        # Shaping: getting closer to the exit
        distance = self._exit_distance()
        reward += (self._prev_distance - distance) * self.reward_config['progress_bonus']
        self._prev_distance = distance

        return reward

    def reset(
        self,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment to a new game.

        Args:
            seed: Random seed
            options: Additional options (unused)

        Returns:
            Tuple of (observation, info)
        """
        super().reset(seed=seed)

        if seed is not None:
            self.seed_value = seed

        self.engine.reset(seed=self.seed_value)
        # Later resets without a seed continue the same random stream
        self.seed_value = None
        self._prev_distance = self._exit_distance()

        return self._get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Take a step in the environment.

        Args:
            action: Direction index (0-3)

        Returns:
            Tuple of (observation, reward, terminated, truncated, info)
        """
        if self.engine.is_finished():
            info = self._get_info()
            info['invalid_action'] = True
            return self._get_observation(), 0.0, True, False, info

        direction = DIRECTIONS[int(action)]
        result = self.engine.make_move(direction)

        reward = float(self._calculate_reward(result))
        terminated = self.engine.is_finished()
        truncated = False

        observation = self._get_observation()
        info = self._get_info(result)

        if self.render_mode == "human":
            self.render()

        return observation, reward, terminated, truncated, info

    def _get_info(self, result: Optional[MoveResult] = None) -> Dict[str, Any]:
        """Get info dictionary."""
        stats = self.engine.get_statistics()
        info = {
            'turn': stats['turn'],
            'lives': stats['lives'],
            'moves': stats['moves_made'],
            'crashes': stats['crashes'],
            'boards_played': stats['boards_played'],
            'border_size': stats['border_size'],
            'victory': stats['victory'],
            'phase': stats['phase'],
            'invalid_action': False,
        }

        if result:
            info['last_move'] = result.to_dict()

        return info

    def get_action_mask(self) -> np.ndarray:
        """
        Get the current action mask.

        Returns:
            Boolean array of shape (4,) where True = safe action
        """
        return self.engine.get_action_mask()

    def render(self) -> Optional[str]:
        """Render the current game state."""
        if self.render_mode == "ansi":
            return str(self.engine)
        elif self.render_mode == "human":
            print("\033[2J\033[H")  # Clear screen
            print(self.engine)
            return None
        return None

    def close(self) -> None:
        """Clean up resources."""
        pass

    def get_valid_actions(self) -> List[int]:
        """Get list of safe action indices."""
        return np.where(self.get_action_mask())[0].tolist()

    def sample_valid_action(self) -> int:
        """Sample a random safe action, or any action if none is safe."""
        valid_actions = self.get_valid_actions() or list(range(self.ACTION_SPACE_SIZE))
        return int(self.np_random.choice(valid_actions))


gym.register(
    id='SquareDash-v0',
    entry_point='environment.square_dash_env:SquareDashEnv',
    max_episode_steps=200,
)


if __name__ == "__main__":
    print("Testing SquareDashEnv...")
    env = SquareDashEnv(render_mode="ansi")

    obs, info = env.reset(seed=42)
    print("Initial observation shapes:")
    print(f"  grid: {obs['grid'].shape}")
    print(f"  status: {obs['status'].shape}")
    print(f"  action_mask: {obs['action_mask'].shape}")

    total_reward = 0
    done = False
    steps = 0

    while not done:
        action = env.sample_valid_action()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += reward
        done = terminated or truncated
        steps += 1

        if info['last_move']['crashed']:
            print(f"Step {steps}: {info['last_move']['message']}")

    print(env.render())
    print(f"\nFinished after {steps} steps ({info['phase']})")
    print(f"Total reward: {total_reward:.2f}")

    env.close()
