"""
wordfold: parallel map-reduce word frequency counting over a local file.
"""

from wordfold.config import PipelineConfig
from wordfold.errors import CollectionTimeout, PipelineError, SourceReadError, WorkerFailure
from wordfold.coordinator.pipeline import PipelineCoordinator, PipelineResult, run_pipeline

__version__ = "0.1.0"

__all__ = [
    "CollectionTimeout",
    "PipelineConfig",
    "PipelineCoordinator",
    "PipelineError",
    "PipelineResult",
    "SourceReadError",
    "WorkerFailure",
    "run_pipeline",
]
