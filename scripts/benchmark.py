"""
Performance benchmark script for Square Dash.

Tests the speed of the game engine and environment.
"""
import argparse
import sys
import time
from pathlib import Path
from typing import Dict, Any
from tqdm import tqdm

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from utils.seeding import set_seed


def benchmark_engine(num_games: int = 1000, seed: int = 42) -> Dict[str, float]:
    """
    Benchmark the game engine speed with random safe moves.

    Args:
        num_games: Number of games to play
        seed: Random seed

    Returns:
        Dictionary of benchmark results
    """
    from game.engine import GameEngine, DIRECTIONS

    total_moves = 0
    total_time = 0.0

    for i in tqdm(range(num_games), desc="Engine"):
        engine = GameEngine(seed=seed + i)
        engine.new_game()

        start = time.perf_counter()
        while not engine.is_finished():
            options = engine.get_safe_directions() or list(DIRECTIONS)
            engine.make_move(options[int(engine.rng.integers(len(options)))])
            total_moves += 1
        total_time += time.perf_counter() - start

    return {
        'num_games': num_games,
        'total_moves': total_moves,
        'total_time': total_time,
        'moves_per_second': total_moves / total_time,
        'games_per_second': num_games / total_time,
        'avg_moves_per_game': total_moves / num_games,
    }


def benchmark_environment(num_steps: int = 100000, seed: int = 42) -> Dict[str, float]:
    """
    Benchmark the Gymnasium environment speed.

    Args:
        num_steps: Number of steps to take
        seed: Random seed

    Returns:
        Dictionary of benchmark results
    """
    from environment.square_dash_env import SquareDashEnv

    env = SquareDashEnv(seed=seed)
    env.reset(seed=seed)

    episodes = 0
    start = time.perf_counter()

    for _ in tqdm(range(num_steps), desc="Environment"):
        action = env.sample_valid_action()
        _, _, terminated, truncated, _ = env.step(action)
        if terminated or truncated:
            env.reset()
            episodes += 1

    total_time = time.perf_counter() - start
    env.close()

    return {
        'num_steps': num_steps,
        'num_episodes': episodes,
        'total_time': total_time,
        'steps_per_second': num_steps / total_time,
        'avg_episode_length': num_steps / episodes if episodes > 0 else 0,
    }


def benchmark_vectorized_env(
    num_envs: int = 64,
    num_steps: int = 1000,
    seed: int = 42,
) -> Dict[str, float]:
    """
    Benchmark the vectorized environment speed.

    Args:
        num_envs: Number of parallel environments
        num_steps: Number of steps per environment
        seed: Base random seed

    Returns:
        Dictionary of benchmark results
    """
    from environment.wrappers import make_vec_env

    vec_env = make_vec_env(num_envs=num_envs, seed=seed)
    vec_env.reset()

    total_steps = 0
    episodes = 0
    victories = 0
    start = time.perf_counter()

    for _ in tqdm(range(num_steps), desc="Vectorized"):
        _, _, terminated, truncated, infos = vec_env.step(vec_env.sample_valid_actions())
        total_steps += num_envs
        for info, done in zip(infos, terminated | truncated):
            if done:
                episodes += 1
                victories += int(info['final_phase'] == 'victory')

    total_time = time.perf_counter() - start
    vec_env.close()

    return {
        'num_envs': num_envs,
        'total_steps': total_steps,
        'num_episodes': episodes,
        'total_time': total_time,
        'steps_per_second': total_steps / total_time,
        'episodes_per_second': episodes / total_time,
        'win_rate': victories / episodes if episodes > 0 else 0.0,
    }


def print_results(name: str, results: Dict[str, Any]) -> None:
    print(f"\n{name}:")
    for key, value in results.items():
        if isinstance(value, float):
            print(f"  {key}: {value:,.2f}")
        else:
            print(f"  {key}: {value:,}")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Benchmark Square Dash")
    parser.add_argument("--games", type=int, default=1000, help="Engine games to play")
    parser.add_argument("--steps", type=int, default=100000, help="Environment steps")
    parser.add_argument("--num-envs", type=int, default=64, help="Vectorized environments")
    parser.add_argument("--vec-steps", type=int, default=1000, help="Steps per vectorized environment")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument(
        "--only",
        type=str,
        choices=["engine", "env", "vec"],
        default=None,
        help="Run a single benchmark"
    )
    args = parser.parse_args()

    set_seed(args.seed)

    print("=" * 60)
    print("SQUARE DASH BENCHMARK")
    print("=" * 60)

    if args.only in (None, "engine"):
        print_results("Game engine", benchmark_engine(args.games, args.seed))
    if args.only in (None, "env"):
        print_results("Environment", benchmark_environment(args.steps, args.seed))
    if args.only in (None, "vec"):
        print_results(
            "Vectorized environment",
            benchmark_vectorized_env(args.num_envs, args.vec_steps, args.seed),
        )


if __name__ == "__main__":
    main()
