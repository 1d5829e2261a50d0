"""
Base Agent class for Square Dash.
"""
from abc import ABC, abstractmethod
from typing import Dict, Any, Tuple
import numpy as np


class BaseAgent(ABC):
    """
    Abstract base class for all agents.
    """

    name = "base"

    @abstractmethod
    def select_action(
        self,
        observation: Dict[str, np.ndarray],
        deterministic: bool = False,
    ) -> Tuple[int, Dict[str, Any]]:
        """
        Select an action given an observation.

        Args:
            observation: Environment observation
            deterministic: Whether to break ties deterministically

        Returns:
            Tuple of (action, info_dict)
        """
        pass

    def reset(self) -> None:
        """Called at the start of every episode."""
        pass
