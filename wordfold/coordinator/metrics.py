"""
Performance metrics collection for pipeline runs.
"""

import time
import json
import psutil
from dataclasses import dataclass, asdict
from typing import Dict, Optional


@dataclass
class RunMetrics:
    """Metrics for a single pipeline run."""

    run_id: str
    folds: int
    top_k: int
    input_size_bytes: int
    start_time: float
    end_time: float = 0.0
    split_phase_end: float = 0.0
    map_phase_end: float = 0.0
    num_chunks: int = 0
    chunks_collected: int = 0
    chunks_timed_out: int = 0
    chunks_failed: int = 0
    distinct_words: int = 0
    total_words: int = 0
    rss_bytes: int = 0

    @property
    def total_time_seconds(self) -> float:
        """Total run time in seconds."""
        return self.end_time - self.start_time

    @property
    def split_phase_time_seconds(self) -> float:
        """Time spent splitting the input."""
        return self.split_phase_end - self.start_time

    @property
    def map_phase_time_seconds(self) -> float:
        """Time from dispatch until the last collection attempt."""
        return self.map_phase_end - self.split_phase_end

    @property
    def reduce_phase_time_seconds(self) -> float:
        """Top-k selection plus waiting for the workers to exit."""
        return self.end_time - self.map_phase_end

    def to_dict(self) -> dict:
        """Convert metrics to dictionary, including derived phase times."""
        data = asdict(self)
        data['total_time_seconds'] = self.total_time_seconds
        data['split_phase_time_seconds'] = self.split_phase_time_seconds
        data['map_phase_time_seconds'] = self.map_phase_time_seconds
        data['reduce_phase_time_seconds'] = self.reduce_phase_time_seconds
        return data

    def save_to_file(self, filepath: str):
        """Save metrics to JSON file."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)


class MetricsCollector:
    """Collects and manages metrics for pipeline runs."""

    def __init__(self):
        self.run_metrics: Dict[str, RunMetrics] = {}
        self.process = psutil.Process()

    def start_run(self, run_id: str, folds: int, top_k: int, input_size_bytes: int):
        """Initialize metrics tracking for a new run."""
        self.run_metrics[run_id] = RunMetrics(
            run_id=run_id,
            folds=folds,
            top_k=top_k,
            input_size_bytes=input_size_bytes,
            start_time=time.time(),
        )

    def end_split_phase(self, run_id: str, num_chunks: int):
        """Mark the end of splitting, recording how many chunks will be dispatched."""
        if run_id in self.run_metrics:
            metrics = self.run_metrics[run_id]
            metrics.split_phase_end = time.time()
            metrics.num_chunks = num_chunks

    def end_map_phase(self, run_id: str, collected: int, timed_out: int, failed: int):
        """Mark the end of result collection."""
        if run_id in self.run_metrics:
            metrics = self.run_metrics[run_id]
            metrics.map_phase_end = time.time()
            metrics.chunks_collected = collected
            metrics.chunks_timed_out = timed_out
            metrics.chunks_failed = failed

    def end_run(self, run_id: str, aggregate: Dict[str, int]):
        """Mark run completion and record aggregate size and memory use."""
        if run_id in self.run_metrics:
            metrics = self.run_metrics[run_id]
            metrics.end_time = time.time()
            metrics.distinct_words = len(aggregate)
            metrics.total_words = sum(aggregate.values())
            metrics.rss_bytes = self.process.memory_info().rss

    def get_metrics(self, run_id: str) -> Optional[RunMetrics]:
        """Retrieve metrics for a specific run."""
        return self.run_metrics.get(run_id)

    def pop_metrics(self, run_id: str) -> Optional[RunMetrics]:
        """Remove and return metrics for a specific run."""
        return self.run_metrics.pop(run_id, None)

    def clear(self):
        """Forget metrics of all runs."""
        self.run_metrics.clear()
