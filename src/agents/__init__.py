"""Scripted agents for Square Dash."""
from .base import BaseAgent
from .scripted import RandomAgent, GreedyAgent, make_agent

__all__ = [
    "BaseAgent",
    "RandomAgent",
    "GreedyAgent",
    "make_agent",
]
