"""
Square Dash GUI Package.

Provides a native graphical interface for playing and watching agents.
"""
from .app import SquareDashGUI

__all__ = ['SquareDashGUI']
