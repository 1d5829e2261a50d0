"""
Text command parsing for Square Dash.

Accepts ``move N``, ``move S``, ``move E`` or ``move W`` (any case, outer
whitespace ignored). Anything else is rejected before it reaches the engine.
"""
from typing import Optional

from .engine import Direction, GameEngine, MoveResult

COMMAND_PREFIX = "move "
INVALID_COMMAND_MESSAGE = 'Invalid command. Use "move N", "move S", "move E", or "move W".'


def parse_command(text: str) -> Optional[Direction]:
    """
    Parse a text command into a direction.

    Returns:
        The direction, or None if the command is malformed
    """
    if not isinstance(text, str):
        return None
    command = text.strip().lower()
    if not command.startswith(COMMAND_PREFIX) or len(command) != len(COMMAND_PREFIX) + 1:
        return None
    return Direction.parse(command[-1])


def submit_command(engine: GameEngine, text: str) -> MoveResult:
    """
    Parse a command and, if valid, play it.

    A malformed command returns ``success=False`` with the invalid-command
    message and does not touch the engine.
    """
    direction = parse_command(text)
    if direction is None:
        return MoveResult(success=False, state=engine.get_state(), message=INVALID_COMMAND_MESSAGE)
    return engine.make_move(direction)
