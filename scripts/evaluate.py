"""
Evaluation script for Square Dash agents.

Runs a scripted agent over many episodes and reports win rate, crashes and
episode lengths.
"""
import argparse
import json
import sys
from pathlib import Path
from typing import Dict, Any, Optional
from tqdm import tqdm

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from environment.wrappers import make_env
from agents.base import BaseAgent
from agents.scripted import make_agent
from utils.config import load_config
from utils.logger import Logger, MetricsTracker, convert_to_serializable


def evaluate_agent(
    agent: BaseAgent,
    num_episodes: int = 100,
    deterministic: bool = False,
    render: bool = False,
    seed: int = 42,
    reward_config: Optional[Dict[str, float]] = None,
    max_episode_steps: Optional[int] = None,
    logger: Optional[Logger] = None,
    progress: bool = True,
) -> Dict[str, Any]:
    """
    Evaluate an agent over multiple episodes.

    Args:
        agent: Agent to evaluate
        num_episodes: Number of episodes to run
        deterministic: Whether the agent breaks ties deterministically
        render: Whether to render the game
        seed: Random seed; episode i uses seed + i
        reward_config: Reward overrides for the environment
        max_episode_steps: Truncate episodes after this many steps (None = never)
        logger: Optional logger receiving one record per episode
        progress: Whether to show a progress bar

    Returns:
        Dictionary of evaluation statistics
    """
    env = make_env(
        reward_config=reward_config,
        max_episode_steps=max_episode_steps,
        render_mode="human" if render else None,
    )
    metrics_tracker = MetricsTracker(window_size=num_episodes)
    truncations = 0

    episodes = range(num_episodes)
    if progress:
        episodes = tqdm(episodes, desc=f"Evaluating {agent.name}")

    for episode in episodes:
        obs, info = env.reset(seed=seed + episode)
        agent.reset()
        episode_reward = 0.0
        episode_length = 0
        done = False

        while not done:
            action, _ = agent.select_action(obs, deterministic=deterministic)
            obs, reward, terminated, truncated, info = env.step(action)
            episode_reward += reward
            episode_length += 1
            done = terminated or truncated

        truncations += int(truncated and not terminated)
        metrics_tracker.add('reward', episode_reward)
        metrics_tracker.add('length', episode_length)
        metrics_tracker.add('crashes', info['crashes'])
        metrics_tracker.add('victory', float(info['victory']))

        if logger:
            logger.log({
                'event': 'episode',
                'episode': episode,
                'reward': episode_reward,
                'length': episode_length,
                'crashes': info['crashes'],
                'victory': bool(info['victory']),
                'truncated': bool(truncated),
            }, step=episode)

    env.close()

    reward = metrics_tracker.get_summary('reward')
    length = metrics_tracker.get_summary('length')

    return {
        'agent': agent.name,
        'num_episodes': num_episodes,
        'win_rate': metrics_tracker.get_mean('victory'),
        'mean_reward': reward['mean'],
        'std_reward': reward['std'],
        'mean_length': length['mean'],
        'std_length': length['std'],
        'max_length': int(length['max']),
        'mean_crashes': metrics_tracker.get_mean('crashes'),
        'truncated_episodes': truncations,
        'rewards': list(metrics_tracker.metrics['reward']),
        'lengths': [int(v) for v in metrics_tracker.metrics['length']],
    }


def print_results(results: Dict[str, Any]) -> None:
    """Print evaluation results."""
    print("\n" + "=" * 60)
    print(f"EVALUATION RESULTS ({results['agent']})")
    print("=" * 60)
    print(f"Episodes: {results['num_episodes']}")
    print(f"Win rate: {results['win_rate']:.1%}")
    print()
    print("Episode Statistics:")
    print(f"  Reward: {results['mean_reward']:.2f} ± {results['std_reward']:.2f}")
    print(f"  Length: {results['mean_length']:.1f} ± {results['std_length']:.1f}"
          f" (max {results['max_length']})")
    print(f"  Crashes: {results['mean_crashes']:.2f}")
    if results.get('truncated_episodes'):
        print(f"  Truncated: {results['truncated_episodes']} episodes hit the step limit")
    print("=" * 60)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Evaluate Square Dash agents")
    parser.add_argument(
        "--agent",
        type=str,
        choices=["greedy", "random"],
        default=None,
        help="Agent to evaluate (default: config evaluation.agent)"
    )
    parser.add_argument(
        "--episodes",
        type=int,
        default=None,
        help="Number of episodes (default: config evaluation.episodes)"
    )
    parser.add_argument(
        "--deterministic",
        action="store_true",
        help="Break ties deterministically"
    )
    parser.add_argument(
        "--render",
        action="store_true",
        help="Render the game"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to configuration file"
    )
    parser.add_argument(
        "--log",
        action="store_true",
        help="Write per-episode JSONL records to the configured log directory"
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Path to save results (JSON)"
    )

    args = parser.parse_args()
    config = load_config(args.config)

    agent_name = args.agent or config['evaluation']['agent']
    num_episodes = args.episodes or config['evaluation']['episodes']
    agent = make_agent(agent_name, seed=args.seed)

    logger = Logger(config['paths']['log_dir'], name=f"eval_{agent_name}") if args.log else None

    results = evaluate_agent(
        agent,
        num_episodes=num_episodes,
        deterministic=args.deterministic,
        render=args.render,
        seed=args.seed,
        reward_config=config['rewards'],
        max_episode_steps=config['environment']['max_episode_steps'],
        logger=logger,
    )

    print_results(results)

    if logger:
        logger.print_metrics({
            key: results[key]
            for key in ('win_rate', 'mean_reward', 'mean_length', 'mean_crashes', 'truncated_episodes')
        })
        summary = logger.save_summary()
        print(f"\nLog saved to {logger.log_file} (summary: {summary})")

    if args.output:
        with open(args.output, 'w') as f:
            json.dump(convert_to_serializable(results), f, indent=2)
        print(f"\nResults saved to {args.output}")


if __name__ == "__main__":
    main()
