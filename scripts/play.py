"""
Interactive play script for Square Dash.

Play with text commands, watch a scripted agent, or run random games.
"""
import argparse
import sys
import time
from pathlib import Path
from typing import Optional
import numpy as np

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from game.engine import GameEngine, Phase, play_random_game
from game.commands import submit_command
from game.renderer import Renderer, clear_screen
from utils.config import load_config
from utils.logger import Logger


def watch_agent_play(
    agent_name: str = "greedy",
    num_games: int = 1,
    delay: float = 0.5,
    seed: Optional[int] = 42,
    max_episode_steps: Optional[int] = None,
) -> None:
    """
    Watch a scripted agent play Square Dash.

    Args:
        agent_name: 'greedy' or 'random'
        num_games: Number of games to play
        delay: Delay between moves (seconds)
        seed: Random seed
        max_episode_steps: Stop a game after this many steps (None = never)
    """
    from environment.wrappers import make_env
    from agents.scripted import make_agent

    agent = make_agent(agent_name, seed=seed)

    for game_num in range(num_games):
        env = make_env(max_episode_steps=max_episode_steps)
        obs, info = env.reset(seed=None if seed is None else seed + game_num)
        agent.reset()

        done = False
        total_reward = 0.0
        step = 0

        while not done:
            clear_screen()
            print(f"Game {game_num + 1}/{num_games} | Step {step} | Agent: {agent_name}")
            print(str(env.unwrapped.engine))

            action, _ = agent.select_action(obs, deterministic=True)
            obs, reward, terminated, truncated, info = env.step(action)
            total_reward += reward
            done = terminated or truncated
            step += 1

            time.sleep(delay)

        clear_screen()
        print(str(env.unwrapped.engine))
        print(f"\n{'='*60}")
        if info['victory']:
            print("ESCAPED!")
        elif truncated and not terminated:
            print("STOPPED (step limit)")
        else:
            print("GAME OVER!")
        print(f"{'='*60}")
        print(f"Moves: {info['moves']}")
        print(f"Crashes: {info['crashes']}")
        print(f"Boards played: {info['boards_played']}")
        print(f"Total Reward: {total_reward:.2f}")
        print(f"{'='*60}\n")

        env.close()

        if game_num < num_games - 1:
            input("Press Enter for next game...")


def play_manual(seed: Optional[int] = None, log_dir: Optional[str] = None) -> None:
    """
    Play Square Dash in the terminal with "move X" commands.

    Args:
        seed: Random seed
        log_dir: Directory for a JSONL move log (None = no log)
    """
    engine = GameEngine(seed=seed)
    renderer = Renderer()
    logger = Logger(log_dir, name="manual") if log_dir else None

    print("\n" + "="*60)
    print("SQUARE DASH - Manual Play")
    print("="*60)
    print(renderer.render_rules())
    print("\n  Type 'q' to quit, 'r' to restart")
    print("="*60 + "\n")
    input("Press Enter to start...")

    engine.new_game()
    message = None

    while True:
        clear_screen()
        print(renderer.render_game_state(engine.get_view(message=message)))
        message = None

        if engine.is_finished():
            won = engine.phase is Phase.VICTORY
            print("\n*** YOU ESCAPED! ***" if won else "\n*** GAME OVER! ***")
            stats = engine.get_statistics()
            print(f"Moves: {stats['moves_made']} | Crashes: {stats['crashes']}")

            action = input("\nPlay again? (y/n): ").strip().lower()
            if action == 'y':
                engine.new_game()
                continue
            break

        user_input = input("\n> ").strip()

        if user_input.lower() == 'q':
            print("Thanks for playing!")
            break
        elif user_input.lower() == 'r':
            engine.new_game()
            continue

        result = submit_command(engine, user_input)
        if not result.success:
            message = result.message
        elif logger:
            logger.log_move(result)

    if logger:
        print(f"Move log written to {logger.log_file}")


def play_random(num_games: int = 10, seed: int = 42) -> None:
    """
    Play random games and show statistics.

    Args:
        num_games: Number of games to play
        seed: Random seed
    """
    print(f"\nPlaying {num_games} random games...")

    moves = []
    crashes = []
    wins = 0

    for i in range(num_games):
        stats = play_random_game(seed=seed + i)
        moves.append(stats['moves_made'])
        crashes.append(stats['crashes'])
        wins += int(stats['victory'])

        outcome = "escaped" if stats['victory'] else "crushed"
        print(f"Game {i+1}: {outcome}, Moves={stats['moves_made']}, "
              f"Crashes={stats['crashes']}")

    print("\n" + "="*60)
    print("RANDOM AGENT STATISTICS")
    print("="*60)
    print(f"Games: {num_games}")
    print(f"Win rate: {wins / num_games:.1%}")
    print(f"Mean Moves: {np.mean(moves):.1f} ± {np.std(moves):.1f}")
    print(f"Mean Crashes: {np.mean(crashes):.1f}")
    print("="*60)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Play Square Dash")
    parser.add_argument(
        "--mode",
        type=str,
        choices=["manual", "watch", "random"],
        default="manual",
        help="Play mode: play yourself, watch an agent, or run random games"
    )
    parser.add_argument(
        "--agent",
        type=str,
        choices=["greedy", "random"],
        default="greedy",
        help="Agent to watch (watch mode)"
    )
    parser.add_argument(
        "--games",
        type=int,
        default=1,
        help="Number of games to play"
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=0.5,
        help="Delay between moves (seconds) for watch mode"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed (default: config game.seed)"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to configuration file (default: config/default.yaml)"
    )
    parser.add_argument(
        "--log",
        action="store_true",
        help="Write a JSONL move log to the configured log directory (manual mode)"
    )

    args = parser.parse_args()
    config = load_config(args.config)
    seed = args.seed if args.seed is not None else config['game']['seed']

    if args.mode == "manual":
        play_manual(seed=seed, log_dir=config['paths']['log_dir'] if args.log else None)

    elif args.mode == "watch":
        watch_agent_play(
            agent_name=args.agent,
            num_games=args.games,
            delay=args.delay,
            seed=seed,
            max_episode_steps=config['environment']['max_episode_steps'],
        )

    elif args.mode == "random":
        play_random(num_games=args.games, seed=seed if seed is not None else 42)


if __name__ == "__main__":
    main()
