"""
Tests for the scripted agents.
"""
import pytest
import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from agents import RandomAgent, GreedyAgent, make_agent
from agents.scripted import predict_destination
from environment.square_dash_env import SquareDashEnv
from game.engine import GameEngine, GameState


def observation_for(**kwargs):
    values = dict(player=(4, 4), obstacles=((8, 8),), exit=(0, 0))
    values.update(kwargs)
    values['obstacles'] = tuple(values['obstacles'])
    engine = GameEngine()
    engine.set_state(GameState(**values))
    return engine.get_observation()


class TestPredictDestination:
    """Test slide prediction from observation planes."""

    def test_open_slide(self):
        grid = observation_for()['grid']

        assert predict_destination(grid, 0) == (2, 4)
        assert predict_destination(grid, 3) == (4, 2)

    def test_short_stop(self):
        grid = observation_for(obstacles=[(2, 4)])['grid']
        assert predict_destination(grid, 0) == (3, 4)

    def test_blocked(self):
        grid = observation_for(player=(0, 4))['grid']
        assert predict_destination(grid, 0) is None


class TestRandomAgent:
    """Test RandomAgent."""

    def test_picks_safe_actions(self):
        agent = RandomAgent(seed=0)
        obs = observation_for(player=(0, 4), obstacles=[(1, 4)])

        for _ in range(20):
            action, info = agent.select_action(obs)
            assert action in (2, 3)
            assert info['options'] == [2, 3]

    def test_no_safe_actions(self):
        agent = RandomAgent(seed=0)
        obs = {'action_mask': np.zeros(4, dtype=np.int8)}

        action, _ = agent.select_action(obs)
        assert 0 <= action < 4


class TestGreedyAgent:
    """Test GreedyAgent."""

    def test_heads_for_exit(self):
        agent = GreedyAgent(seed=0)
        action, info = agent.select_action(observation_for(player=(2, 4), exit=(0, 4)))

        assert action == 0
        assert info['distance'] == 0

    def test_avoids_unsafe_moves(self):
        agent = GreedyAgent(seed=0)
        # Moving N is closest to the exit but crashes into the obstacle
        obs = observation_for(player=(4, 4), obstacles=[(3, 4)], exit=(0, 4))

        action, _ = agent.select_action(obs)
        assert action != 0
        assert obs['action_mask'][action]

    def test_walled_exit_targets_centre(self):
        agent = GreedyAgent(seed=0)
        obs = observation_for(player=(1, 4), exit=(0, 0), turn=6, border_size=1)

        action, info = agent.select_action(obs)
        assert info['target'] == (4, 4)
        assert action == 1

    def test_plays_full_episode(self):
        env = SquareDashEnv()
        agent = GreedyAgent(seed=0)
        obs, _ = env.reset(seed=5)

        done = False
        steps = 0
        while not done and steps < 1000:
            action, _ = agent.select_action(obs, deterministic=True)
            obs, _, terminated, truncated, info = env.step(action)
            done = terminated or truncated
            steps += 1

        assert done


class TestMakeAgent:
    """Test the agent factory."""

    def test_known_agents(self):
        assert isinstance(make_agent("random"), RandomAgent)
        assert isinstance(make_agent("greedy", seed=1), GreedyAgent)

    def test_unknown_agent(self):
        with pytest.raises(ValueError):
            make_agent("ppo")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
