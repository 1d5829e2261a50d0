"""
Environment wrappers for Square Dash.

Provides a vectorized environment and factory helpers.
"""
from typing import List, Tuple, Dict, Any, Optional
import numpy as np
import gymnasium as gym

from .square_dash_env import SquareDashEnv


class VectorizedSquareDashEnv:
    """
    Several Square Dash games stepped in lockstep.

    Finished games are reset automatically; the final info is kept under
    'terminal_observation' and 'final_phase'.
    """

    def __init__(
        self,
        num_envs: int,
        seed: Optional[int] = None,
        reward_config: Optional[Dict[str, float]] = None,
    ):
        """
        Initialize vectorized environment.

        Args:
            num_envs: Number of environments
            seed: Base random seed (each env gets seed + i)
            reward_config: Custom reward configuration
        """
        self.num_envs = num_envs
        self.reward_config = reward_config

        self.envs = []
        for i in range(num_envs):
            env_seed = seed + i if seed is not None else None
            self.envs.append(SquareDashEnv(seed=env_seed, reward_config=reward_config))

        self.observation_space = self.envs[0].observation_space
        self.action_space = self.envs[0].action_space
        self.single_action_space = self.action_space

    def reset(
        self,
        seed: Optional[int] = None,
    ) -> Tuple[Dict[str, np.ndarray], List[Dict[str, Any]]]:
        """
        Reset all environments.

        Returns:
            Tuple of (stacked observations, list of info dicts)
        """
        observations = []
        infos = []

        for i, env in enumerate(self.envs):
            env_seed = seed + i if seed is not None else None
            obs, info = env.reset(seed=env_seed)
            observations.append(obs)
            infos.append(info)

        return self._stack_observations(observations), infos

    def step(
        self, actions: np.ndarray
    ) -> Tuple[Dict[str, np.ndarray], np.ndarray, np.ndarray, np.ndarray, List[Dict[str, Any]]]:
        """
        Step all environments.

        Args:
            actions: Array of actions, one per environment

        Returns:
            Tuple of (observations, rewards, terminated, truncated, infos)
        """
        observations = []
        rewards = np.zeros(self.num_envs, dtype=np.float32)
        terminated = np.zeros(self.num_envs, dtype=bool)
        truncated = np.zeros(self.num_envs, dtype=bool)
        infos = []

        for i, (env, action) in enumerate(zip(self.envs, actions)):
            obs, reward, term, trunc, info = env.step(int(action))

            if term or trunc:
                info['terminal_observation'] = obs
                info['final_phase'] = info['phase']
                obs, _ = env.reset()

            observations.append(obs)
            rewards[i] = reward
            terminated[i] = term
            truncated[i] = trunc
            infos.append(info)

        return (
            self._stack_observations(observations),
            rewards,
            terminated,
            truncated,
            infos,
        )

    def _stack_observations(
        self, observations: List[Dict[str, np.ndarray]]
    ) -> Dict[str, np.ndarray]:
        """Stack observations from all environments."""
        return {
            key: np.stack([obs[key] for obs in observations])
            for key in ('grid', 'status', 'action_mask')
        }

    def get_action_masks(self) -> np.ndarray:
        """Get action masks for all environments."""
        return np.stack([env.get_action_mask() for env in self.envs])

    def sample_valid_actions(self) -> np.ndarray:
        """Sample valid actions for all environments."""
        return np.array([env.sample_valid_action() for env in self.envs])

    def close(self) -> None:
        """Close all environments."""
        for env in self.envs:
            env.close()


def make_env(
    seed: Optional[int] = None,
    reward_config: Optional[Dict[str, float]] = None,
    max_episode_steps: Optional[int] = None,
    render_mode: Optional[str] = None,
) -> gym.Env:
    """
    Factory function to create a Square Dash environment.

    Args:
        seed: Random seed
        reward_config: Custom reward configuration
        max_episode_steps: Truncate episodes after this many steps (None = never)
        render_mode: Passed through to the environment

    Returns:
        Configured environment
    """
    env = SquareDashEnv(render_mode=render_mode, reward_config=reward_config, seed=seed)

    if max_episode_steps is not None:
        env = gym.wrappers.TimeLimit(env, max_episode_steps=max_episode_steps)

    return env


def make_vec_env(
    num_envs: int,
    seed: Optional[int] = None,
    reward_config: Optional[Dict[str, float]] = None,
) -> VectorizedSquareDashEnv:
    """
    Factory function to create vectorized Square Dash environments.

    Args:
        num_envs: Number of environments
        seed: Base random seed
        reward_config: Custom reward configuration

    Returns:
        Vectorized environment
    """
    return VectorizedSquareDashEnv(
        num_envs=num_envs,
        seed=seed,
        reward_config=reward_config,
    )
