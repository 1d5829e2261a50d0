"""
Tests for the evaluation and benchmark scripts.
"""
import json
import pytest
import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent.parent / "scripts"))

from agents import make_agent
from utils.logger import Logger
import evaluate
import benchmark


class TestEvaluateAgent:
    """Test agent evaluation."""

    def test_full_episodes(self):
        results = evaluate.evaluate_agent(
            make_agent("greedy", seed=0), num_episodes=4, seed=0, progress=False
        )

        assert results['num_episodes'] == 4
        assert len(results['rewards']) == 4
        assert 0.0 <= results['win_rate'] <= 1.0
        assert results['truncated_episodes'] == 0
        assert results['mean_reward'] == pytest.approx(np.mean(results['rewards']))
        assert results['max_length'] == max(results['lengths'])

    def test_step_limit_truncates(self):
        results = evaluate.evaluate_agent(
            make_agent("random", seed=0),
            num_episodes=3,
            seed=0,
            max_episode_steps=1,
            progress=False,
        )

        assert results['lengths'] == [1, 1, 1]
        assert results['truncated_episodes'] == 3
        assert results['win_rate'] == 0.0

    def test_episode_records_logged(self, tmp_path):
        logger = Logger(str(tmp_path), name="eval")
        evaluate.evaluate_agent(
            make_agent("greedy", seed=0), num_episodes=2, seed=0,
            logger=logger, progress=False,
        )

        lines = logger.log_file.read_text().strip().split("\n")
        assert len(lines) == 2
        assert json.loads(lines[0])['event'] == 'episode'


class TestEvaluateMain:
    """Test the evaluation command line."""

    def test_configured_step_limit(self, tmp_path, monkeypatch, capsys):
        config_path = tmp_path / "config.yaml"
        config_path.write_text(
            "environment:\n  max_episode_steps: 1\n"
            f"paths:\n  log_dir: {tmp_path / 'logs'}\n"
        )
        output = tmp_path / "results.json"
        monkeypatch.setattr(sys, 'argv', [
            "evaluate.py", "--episodes", "2", "--config", str(config_path),
            "--log", "--output", str(output),
        ])

        evaluate.main()

        out = capsys.readouterr().out
        assert "Truncated: 2 episodes hit the step limit" in out
        assert "truncated_episodes: 2" in out
        assert json.loads(output.read_text())['lengths'] == [1, 1]


class TestBenchmark:
    """Test the benchmark helpers."""

    def test_vectorized_env(self):
        results = benchmark.benchmark_vectorized_env(num_envs=2, num_steps=100, seed=0)

        assert results['num_envs'] == 2
        assert results['total_steps'] == 200
        assert results['num_episodes'] > 0
        assert 0.0 <= results['win_rate'] <= 1.0

    def test_engine(self):
        results = benchmark.benchmark_engine(num_games=3, seed=0)

        assert results['num_games'] == 3
        assert results['total_moves'] > 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
