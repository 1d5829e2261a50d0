"""
Logging utilities for game sessions and evaluation runs.
"""
from typing import Dict, Any, Optional, List
from pathlib import Path
import json
import time
from datetime import datetime
from collections import defaultdict
import numpy as np


def convert_to_serializable(obj):
    """Convert numpy types to Python types for JSON serialization."""
    if isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        return float(obj)
    elif isinstance(obj, np.bool_):
        return bool(obj)
    elif isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, dict):
        return {k: convert_to_serializable(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [convert_to_serializable(i) for i in obj]
    return obj


class Logger:
    """
    JSONL logger: one record per line, numeric fields kept for the summary.
    """

    def __init__(self, log_dir: str, name: str = "session"):
        """
        Initialize logger.

        Args:
            log_dir: Directory to save logs
            name: Name of the session or run
        """
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.name = name
        self.start_time = time.time()

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.log_file = self.log_dir / f"{name}_{timestamp}.jsonl"

        self.metrics_history: Dict[str, List[float]] = defaultdict(list)
        self.step = 0

    def log(self, record: Dict[str, Any], step: Optional[int] = None) -> None:
        """
        Append a record.

        Args:
            record: Dictionary of field names to values
            step: Optional step number
        """
        if step is not None:
            self.step = step
        else:
            self.step += 1

        line = {
            'step': self.step,
            'time': time.time() - self.start_time,
            'timestamp': datetime.now().isoformat(),
            **record,
        }
        line = convert_to_serializable(line)

        for key, value in record.items():
            if isinstance(value, (bool, np.bool_)):
                continue
            if isinstance(value, (int, float, np.integer, np.floating)):
                self.metrics_history[key].append(float(value))

        with open(self.log_file, 'a') as f:
            f.write(json.dumps(line) + '\n')

    def log_move(self, result, step: Optional[int] = None) -> None:
        """Record one engine move (a ``game.engine.MoveResult``)."""
        record = {'event': 'move', **result.to_dict()}
        if result.state is not None:
            record.update({
                'turn': result.state.turn,
                'lives': result.state.lives,
                'border_size': result.state.border_size,
                'phase': result.state.phase.value,
            })
        self.log(record, step=step)

    def print_metrics(self, metrics: Dict[str, Any]) -> None:
        """Print metrics to console."""
        elapsed = time.time() - self.start_time
        minutes = int(elapsed // 60)
        seconds = int(elapsed % 60)

        print(f"\n[Step {self.step:,}] [{minutes:02d}:{seconds:02d}]")
        for key, value in metrics.items():
            if isinstance(value, float):
                print(f"  {key}: {value:.4f}")
            else:
                print(f"  {key}: {value}")

    def save_summary(self) -> Path:
        """Save a summary of all numeric fields and return its path."""
        summary = {
            'name': self.name,
            'total_steps': self.step,
            'total_time': time.time() - self.start_time,
            'metrics': {},
        }

        for key, values in self.metrics_history.items():
            summary['metrics'][key] = {
                'mean': float(np.mean(values)),
                'std': float(np.std(values)),
                'min': float(np.min(values)),
                'max': float(np.max(values)),
                'last': float(values[-1]),
            }

        summary_file = self.log_dir / f"{self.name}_summary.json"
        with open(summary_file, 'w') as f:
            json.dump(summary, f, indent=2)
        return summary_file


class MetricsTracker:
    """
    Track running statistics for metrics.
    """

    def __init__(self, window_size: int = 100):
        """
        Initialize metrics tracker.

        Args:
            window_size: Size of rolling window for statistics
        """
        self.window_size = window_size
        self.metrics: Dict[str, List[float]] = defaultdict(list)

    def add(self, name: str, value: float) -> None:
        """Add a value to a metric."""
        self.metrics[name].append(float(value))
        if len(self.metrics[name]) > self.window_size:
            self.metrics[name].pop(0)

    def get_mean(self, name: str) -> float:
        values = self.metrics.get(name, [])
        return float(np.mean(values)) if values else 0.0

    def get_std(self, name: str) -> float:
        values = self.metrics.get(name, [])
        return float(np.std(values)) if values else 0.0

    def get_min(self, name: str) -> float:
        values = self.metrics.get(name, [])
        return float(np.min(values)) if values else 0.0

    def get_max(self, name: str) -> float:
        values = self.metrics.get(name, [])
        return float(np.max(values)) if values else 0.0

    def get_last(self, name: str) -> float:
        values = self.metrics.get(name, [])
        return values[-1] if values else 0.0

    def get_summary(self, name: str) -> Dict[str, float]:
        """Get summary statistics for a metric."""
        return {
            'mean': self.get_mean(name),
            'std': self.get_std(name),
            'min': self.get_min(name),
            'max': self.get_max(name),
            'last': self.get_last(name),
        }
