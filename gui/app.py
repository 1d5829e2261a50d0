"""
Square Dash - Native Tkinter GUI

Play the game with buttons or text commands, or watch a scripted agent.
"""
import tkinter as tk
from tkinter import ttk
import sys
from pathlib import Path
from typing import Optional, Dict, Any

# Add project paths
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
sys.path.insert(0, str(project_root / "src"))

from game.engine import (
    GameEngine, Direction, Phase, DIRECTIONS, CRASH_MESSAGE, PULSE_WARNING, SHRINK_MESSAGE,
)
from game.commands import submit_command
from game.view import Cell, ViewModel
from game.renderer import Renderer
from utils.config import load_config


class SquareDashGUI:
    """Main GUI application for Square Dash."""

    # Color scheme
    COLORS = {
        'bg': '#1a1a2e',
        'panel': '#16213e',
        'accent': '#e94560',
        'accent2': '#0f3460',
        'text': '#ffffff',
        'text_dim': '#8892b0',
        'grid_bg': '#0d1b2a',
        'warning': '#e74c3c',
        'shrink': '#f39c12',
        'success': '#2ecc71',
    }

    CELL_COLORS = {
        Cell.EMPTY: '#e5e7eb',
        Cell.WALL: '#1f2937',
        Cell.OBSTACLE: '#dc2626',
        Cell.PULSE: '#fca5a5',
        Cell.EXIT: '#22c55e',
        Cell.PLAYER: '#3b82f6',
    }

    def __init__(self, root: tk.Tk, config: Optional[Dict[str, Any]] = None):
        self.root = root
        self.root.title("Square Dash")
        self.root.configure(bg=self.COLORS['bg'])
        self.root.geometry("900x700")
        self.root.minsize(800, 620)

        self.config = config or load_config()
        self.cell_size = self.config['gui']['cell_size']
        self.watch_delay = self.config['gui']['watch_delay_ms']
        seed = self.config['game']['seed']

        # One engine per page; the view is rebuilt after every transition
        self.play_engine = GameEngine(seed=seed)
        self.watch_engine = GameEngine(seed=seed)
        self.watch_agent = None
        self.watch_job = None
        self.is_watching = False

        self.pages = {}
        self.current_page = None

        self._setup_styles()
        self._create_main_container()
        self._create_pages()
        self._show_page('menu')

    def _setup_styles(self):
        """Configure ttk styles."""
        style = ttk.Style()
        style.theme_use('clam')
        style.configure('TFrame', background=self.COLORS['bg'])

    def _create_main_container(self):
        self.container = tk.Frame(self.root, bg=self.COLORS['bg'])
        self.container.pack(fill=tk.BOTH, expand=True)

    def _create_pages(self):
        """Create all pages."""
        self._create_menu_page()
        self._create_play_page()
        self._create_watch_page()

    def _show_page(self, page_name: str):
        """Show a specific page."""
        if self.current_page:
            self.pages[self.current_page].pack_forget()

        self.pages[page_name].pack(fill=tk.BOTH, expand=True)
        self.current_page = page_name

    def _button(self, parent, text, command, color=None, width=20, size=14):
        return tk.Button(
            parent,
            text=text,
            font=('Segoe UI', size, 'bold'),
            bg=color or self.COLORS['accent'],
            fg=self.COLORS['text'],
            activeforeground=self.COLORS['text'],
            width=width,
            cursor='hand2',
            relief='flat',
            command=command
        )

    # ==================== MENU PAGE ====================

    def _create_menu_page(self):
        """Create the main menu page."""
        page = tk.Frame(self.container, bg=self.COLORS['bg'])
        self.pages['menu'] = page

        center_frame = tk.Frame(page, bg=self.COLORS['bg'])
        center_frame.place(relx=0.5, rely=0.5, anchor='center')

        tk.Label(
            center_frame,
            text="SQUARE DASH",
            font=('Segoe UI', 42, 'bold'),
            bg=self.COLORS['bg'],
            fg=self.COLORS['accent']
        ).pack(pady=(0, 10))

        tk.Label(
            center_frame,
            text="Reach the exit before the walls crush you!",
            font=('Segoe UI', 14),
            bg=self.COLORS['bg'],
            fg=self.COLORS['text_dim']
        ).pack(pady=(0, 50))

        self._button(center_frame, "Start Game", self._start_human_play,
                     color=self.COLORS['success']).pack(pady=10)
        self._button(center_frame, "Watch Agent Play", lambda: self._show_page('watch'),
                     color=self.COLORS['accent2']).pack(pady=10)

    # ==================== PLAY PAGE ====================

    def _create_board(self, parent) -> tk.Canvas:
        size = self.cell_size * self.play_engine.grid_size + 2
        canvas = tk.Canvas(
            parent,
            width=size,
            height=size,
            bg=self.COLORS['grid_bg'],
            highlightthickness=3,
            highlightbackground=self.COLORS['accent2']
        )
        canvas.pack(pady=20)
        return canvas

    def _create_header(self, page, title: str, back_command):
        header = tk.Frame(page, bg=self.COLORS['panel'], height=60)
        header.pack(fill=tk.X)
        header.pack_propagate(False)

        tk.Button(
            header,
            text="< Back",
            font=('Segoe UI', 11),
            bg=self.COLORS['accent2'],
            fg=self.COLORS['text'],
            relief='flat',
            cursor='hand2',
            command=back_command
        ).pack(side=tk.LEFT, padx=15, pady=12)

        tk.Label(
            header,
            text=title,
            font=('Segoe UI', 18, 'bold'),
            bg=self.COLORS['panel'],
            fg=self.COLORS['text']
        ).pack(side=tk.LEFT, padx=20)

    def _create_status_labels(self, parent) -> Dict[str, tk.Label]:
        labels = {}
        labels['stats'] = tk.Label(
            parent, text="Turn: 0 | Lives: 3", font=('Consolas', 13, 'bold'),
            bg=self.COLORS['panel'], fg=self.COLORS['text']
        )
        labels['stats'].pack(pady=(0, 5))
        labels['pulse'] = tk.Label(
            parent, text="", font=('Segoe UI', 10, 'bold'),
            bg=self.COLORS['panel'], fg=self.COLORS['warning']
        )
        labels['pulse'].pack()
        labels['shrink'] = tk.Label(
            parent, text="", font=('Segoe UI', 10, 'bold'),
            bg=self.COLORS['panel'], fg=self.COLORS['shrink']
        )
        labels['shrink'].pack()
        labels['message'] = tk.Label(
            parent, text="", font=('Segoe UI', 11, 'bold'), wraplength=260,
            bg=self.COLORS['panel'], fg=self.COLORS['text']
        )
        labels['message'].pack(pady=(10, 10))
        return labels

    def _create_play_page(self):
        """Create the human play page."""
        page = tk.Frame(self.container, bg=self.COLORS['bg'])
        self.pages['play'] = page
        self._create_header(page, "Play Square Dash", lambda: self._show_page('menu'))

        content = tk.Frame(page, bg=self.COLORS['bg'])
        content.pack(fill=tk.BOTH, expand=True, padx=20, pady=20)

        left_panel = tk.Frame(content, bg=self.COLORS['panel'])
        left_panel.pack(side=tk.LEFT, fill=tk.BOTH, expand=True, padx=(0, 20))
        self.play_canvas = self._create_board(left_panel)

        right_panel = tk.Frame(content, bg=self.COLORS['panel'], width=300)
        right_panel.pack(side=tk.RIGHT, fill=tk.Y)
        right_panel.pack_propagate(False)
        inner = tk.Frame(right_panel, bg=self.COLORS['panel'])
        inner.pack(fill=tk.BOTH, expand=True, padx=15, pady=15)

        self.play_labels = self._create_status_labels(inner)

        # Text command entry
        self.controls_frame = tk.Frame(inner, bg=self.COLORS['panel'])
        self.controls_frame.pack(pady=5)

        entry_row = tk.Frame(self.controls_frame, bg=self.COLORS['panel'])
        entry_row.pack(pady=(0, 10))
        self.command_var = tk.StringVar()
        self.command_entry = tk.Entry(entry_row, textvariable=self.command_var, width=16,
                                      font=('Consolas', 12))
        self.command_entry.pack(side=tk.LEFT)
        self.command_entry.bind('<Return>', lambda e: self._submit_command())
        self._button(entry_row, "Go", self._submit_command, width=4, size=11).pack(side=tk.LEFT, padx=(5, 0))

        # Direction pad
        pad = tk.Frame(self.controls_frame, bg=self.COLORS['panel'])
        pad.pack()
        buttons = [
            ("North", Direction.N, 0, 1),
            ("West", Direction.W, 1, 0),
            ("East", Direction.E, 1, 2),
            ("South", Direction.S, 2, 1),
        ]
        for text, direction, row, col in buttons:
            self._button(pad, text, lambda d=direction: self._move(d),
                         color=self.COLORS['accent2'], width=6, size=11).grid(row=row, column=col, padx=3, pady=3)

        for key, direction in (('<Up>', Direction.N), ('<Down>', Direction.S),
                               ('<Left>', Direction.W), ('<Right>', Direction.E)):
            self.play_canvas.bind(key, lambda e, d=direction: self._move(d))

        self.new_game_btn = self._button(inner, "New Game", self._new_game,
                                         color=self.COLORS['success'], width=16, size=12)
        self.new_game_btn.pack(pady=(20, 10))

        tk.Label(
            inner,
            text=Renderer().render_rules(),
            font=('Segoe UI', 9),
            justify=tk.LEFT,
            wraplength=260,
            bg=self.COLORS['panel'],
            fg=self.COLORS['text_dim']
        ).pack(pady=(10, 0))

    def _start_human_play(self):
        self._show_page('play')
        self._new_game()

    def _new_game(self):
        """Start a new game."""
        self.play_engine.new_game()
        self.command_var.set("")
        self._update_play_display()
        self.play_canvas.focus_set()

    def _move(self, direction: Direction):
        if self.play_engine.is_finished():
            return
        result = self.play_engine.make_move(direction)
        self._update_play_display(None if result.success else result.message)

    def _submit_command(self):
        if self.play_engine.is_finished():
            return
        result = submit_command(self.play_engine, self.command_var.get())
        if result.success:
            self.command_var.set("")
        self._update_play_display(None if result.success else result.message)

    def _update_play_display(self, message: Optional[str] = None):
        """Redraw the play page from a fresh view model."""
        view = self.play_engine.get_view(message=message)
        self._draw_board(self.play_canvas, view)
        self._update_status(self.play_labels, view)

        if view.finished:
            self.new_game_btn.config(text="Play Again")
            self.controls_frame.pack_forget()
        else:
            self.new_game_btn.config(text="New Game")
            if not self.controls_frame.winfo_ismapped():
                self.controls_frame.pack(pady=5, before=self.new_game_btn)

    # ==================== WATCH PAGE ====================

    def _create_watch_page(self):
        """Create the agent watch page."""
        page = tk.Frame(self.container, bg=self.COLORS['bg'])
        self.pages['watch'] = page
        self._create_header(page, "Watch Agent", self._back_from_watch)

        content = tk.Frame(page, bg=self.COLORS['bg'])
        content.pack(fill=tk.BOTH, expand=True, padx=20, pady=20)

        left_panel = tk.Frame(content, bg=self.COLORS['panel'])
        left_panel.pack(side=tk.LEFT, fill=tk.BOTH, expand=True, padx=(0, 20))
        self.watch_canvas = self._create_board(left_panel)

        right_panel = tk.Frame(content, bg=self.COLORS['panel'], width=300)
        right_panel.pack(side=tk.RIGHT, fill=tk.Y)
        right_panel.pack_propagate(False)
        inner = tk.Frame(right_panel, bg=self.COLORS['panel'])
        inner.pack(fill=tk.BOTH, expand=True, padx=15, pady=15)

        self.watch_labels = self._create_status_labels(inner)

        self.agent_var = tk.StringVar(value=self.config['evaluation']['agent'])
        agent_row = tk.Frame(inner, bg=self.COLORS['panel'])
        agent_row.pack(pady=10)
        for name in ("greedy", "random"):
            tk.Radiobutton(
                agent_row, text=name.title(), value=name, variable=self.agent_var,
                bg=self.COLORS['panel'], fg=self.COLORS['text'],
                selectcolor=self.COLORS['accent2'], activebackground=self.COLORS['panel']
            ).pack(side=tk.LEFT, padx=5)

        self.watch_btn = self._button(inner, "Start", self._toggle_watching,
                                      color=self.COLORS['success'], width=16, size=12)
        self.watch_btn.pack(pady=(10, 0))

    def _back_from_watch(self):
        self._stop_watching()
        self._show_page('menu')

    def _toggle_watching(self):
        if self.is_watching:
            self._stop_watching()
        else:
            self._start_watching()

    def _start_watching(self):
        from agents.scripted import make_agent

        self.watch_agent = make_agent(self.agent_var.get())
        self.watch_engine.new_game()
        self.is_watching = True
        self.watch_btn.config(text="Stop", bg=self.COLORS['accent'])
        self._update_watch_display()
        self.watch_job = self.root.after(self.watch_delay, self._watch_step)

    def _stop_watching(self):
        self.is_watching = False
        if self.watch_job is not None:
            self.root.after_cancel(self.watch_job)
            self.watch_job = None
        self.watch_btn.config(text="Start", bg=self.COLORS['success'])

    def _watch_step(self):
        """Play one agent move per tick on the Tk event loop."""
        self.watch_job = None
        if not self.is_watching:
            return

        obs = self.watch_engine.get_observation()
        action, _ = self.watch_agent.select_action(obs, deterministic=True)
        self.watch_engine.make_move(DIRECTIONS[action])
        self._update_watch_display()

        if self.watch_engine.is_finished():
            self._stop_watching()
            return
        self.watch_job = self.root.after(self.watch_delay, self._watch_step)

    def _update_watch_display(self):
        view = self.watch_engine.get_view()
        self._draw_board(self.watch_canvas, view)
        self._update_status(self.watch_labels, view)

    # ==================== DRAWING ====================

    def _draw_board(self, canvas: tk.Canvas, view: ViewModel):
        """Draw a view model onto a canvas."""
        canvas.delete('all')
        if not view.started:
            return

        for row in range(view.grid_size):
            for col in range(view.grid_size):
                x1 = col * self.cell_size + 2
                y1 = row * self.cell_size + 2
                x2 = x1 + self.cell_size - 3
                y2 = y1 + self.cell_size - 3
                cell = view.cell(row, col)
                canvas.create_rectangle(x1, y1, x2, y2, fill=self.CELL_COLORS[cell], outline='')
                if cell == Cell.PULSE:
                    canvas.create_text((x1 + x2) / 2, (y1 + y2) / 2, text="+",
                                       font=('Segoe UI', 14, 'bold'), fill=self.CELL_COLORS[Cell.OBSTACLE])

    def _update_status(self, labels: Dict[str, tk.Label], view: ViewModel):
        playing = view.phase is Phase.PLAYING
        labels['stats'].config(text=f"Turn: {view.turn} | Lives: {view.lives}")
        labels['pulse'].config(text=PULSE_WARNING if playing and view.pulse_warning else "")
        labels['shrink'].config(text=SHRINK_MESSAGE if playing and view.shrink_warning else "")

        if view.phase is Phase.VICTORY:
            color = self.COLORS['success']
        elif view.message.startswith(CRASH_MESSAGE.split('{')[0]) or view.phase is Phase.GAME_OVER:
            color = self.COLORS['warning']
        else:
            color = self.COLORS['text']
        labels['message'].config(text=view.message, fg=color)


def main():
    """Launch the GUI."""
    root = tk.Tk()

    icon_path = project_root / "gui" / "icon.ico"
    if icon_path.exists():
        root.iconbitmap(str(icon_path))

    SquareDashGUI(root)
    root.mainloop()


if __name__ == "__main__":
    main()
