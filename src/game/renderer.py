"""
Square Dash Renderer.

Provides text visualization of a view model.
"""
from typing import List

from .engine import Phase, PULSE_WARNING, SHRINK_MESSAGE
from .view import Cell, ViewModel


class Renderer:
    """
    ASCII renderer for Square Dash.

    Draws a ``ViewModel``; it never looks at engine state directly.
    """

    SYMBOLS = {
        Cell.EMPTY: "·",
        Cell.WALL: "#",
        Cell.OBSTACLE: "X",
        Cell.PULSE: "+",
        Cell.EXIT: "E",
        Cell.PLAYER: "@",
    }

    RULES = [
        "@ = player, X = obstacle, + = pulse, E = exit, · = empty, # = wall",
        'Type "move N", "move S", "move E", or "move W" to move',
        "You slide 2 tiles in that direction (momentum slide)",
        "Obstacles pulse every even-numbered turn",
        "The arena shrinks every 5 turns",
        "Crashing costs 1 life and resets the level",
    ]

    def render_board(self, view: ViewModel, show_coords: bool = True) -> str:
        """
        Render the grid as ASCII art.

        Args:
            view: The view model to render
            show_coords: Whether to show row/column numbers

        Returns:
            String representation of the grid
        """
        size = view.grid_size
        lines = []

        if show_coords:
            lines.append("  " + " ".join(str(i) for i in range(size)))
            lines.append("  " + "-" * (size * 2 - 1))

        for row in range(size):
            cells = " ".join(self.SYMBOLS[view.cell(row, col)] for col in range(size))
            lines.append(f"{row}|{cells}" if show_coords else cells)

        if show_coords:
            lines.append("  " + "-" * (size * 2 - 1))

        return "\n".join(lines)

    def render_status(self, view: ViewModel) -> str:
        """Turn and lives line plus any warnings."""
        lines = [f"Turn: {view.turn} | Lives: {view.lives}"]
        if view.phase is Phase.PLAYING:
            if view.pulse_warning:
                lines.append(PULSE_WARNING)
            if view.shrink_warning:
                lines.append(SHRINK_MESSAGE)
        return "\n".join(lines)

    def render_rules(self) -> str:
        return "\n".join(["Game Rules:"] + [f"  - {rule}" for rule in self.RULES])

    def render_game_state(self, view: ViewModel) -> str:
        """
        Render the complete game screen.

        Returns:
            Status, board and message
        """
        lines: List[str] = ["=" * 40]
        if not view.started:
            lines.append("Square Dash - press start to play")
            lines.append("=" * 40)
            return "\n".join(lines)

        lines.append(self.render_status(view))
        lines.append("=" * 40)
        lines.append("")
        lines.append(self.render_board(view))
        if view.message:
            lines.append("")
            lines.append(view.message)
        lines.append("=" * 40)

        return "\n".join(lines)


def clear_screen():
    """Clear the terminal screen."""
    import os
    os.system('cls' if os.name == 'nt' else 'clear')
