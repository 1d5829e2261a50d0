"""
Configuration loading.

Settings live in ``config/default.yaml``. A user file only needs the keys it
changes; everything else comes from ``DEFAULT_CONFIG``.
"""
import copy
from pathlib import Path
from typing import Dict, Any, Optional, Union
import yaml

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DEFAULT_CONFIG_PATH = PROJECT_ROOT / "config" / "default.yaml"

DEFAULT_CONFIG: Dict[str, Any] = {
    'game': {
        'seed': None,
    },
    'environment': {
        'max_episode_steps': 200,
    },
    'rewards': {
        'step_penalty': -0.01,
        'progress_bonus': 0.05,
        'crash_penalty': -0.5,
        'game_over_penalty': -1.0,
        'victory_reward': 1.0,
    },
    'evaluation': {
        'episodes': 100,
        'agent': 'greedy',
    },
    'gui': {
        'cell_size': 48,
        'watch_delay_ms': 400,
    },
    'paths': {
        'log_dir': 'logs',
        'results_dir': 'results',
    },
}


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: YAML file to load; ``config/default.yaml`` when None

    Returns:
        Full configuration dictionary. A missing or unreadable file falls
        back to the built-in defaults with a warning.
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH

    try:
        with open(path, 'r') as f:
            loaded = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        print(f"Warning: Could not load {path}: {e}")
        return copy.deepcopy(DEFAULT_CONFIG)

    if not isinstance(loaded, dict):
        print(f"Warning: {path} does not contain a mapping, using defaults")
        return copy.deepcopy(DEFAULT_CONFIG)

    return merge_config(DEFAULT_CONFIG, loaded)
