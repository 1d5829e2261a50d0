"""Gymnasium environment for Square Dash."""
from .square_dash_env import SquareDashEnv
from .wrappers import VectorizedSquareDashEnv, make_env, make_vec_env

__all__ = [
    "SquareDashEnv",
    "VectorizedSquareDashEnv",
    "make_env",
    "make_vec_env",
]
