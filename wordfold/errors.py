"""
Error taxonomy for the word-frequency pipeline.

Only SourceReadError aborts a run. Timeouts and worker failures degrade the
result instead and are reported back as warning records.
"""

from dataclasses import dataclass


class PipelineError(Exception):
    """Base class for pipeline failures."""


class SourceReadError(PipelineError):
    """The input source could not be opened or read."""

    def __init__(self, source: str, cause: OSError):
        self.source = source
        self.cause = cause
        super().__init__(f"Cannot read input source {source}: {cause}")


@dataclass(frozen=True)
class CollectionTimeout:
    """A collection attempt saw no map result within the timeout."""

    attempt: int
    timeout: float

    def __str__(self):
        return f"Collection attempt {self.attempt} timed out after {self.timeout:.1f}s"


@dataclass(frozen=True)
class WorkerFailure:
    """A map task failed and reported no counts."""

    task_id: int
    error_message: str

    def __str__(self):
        return f"Map task {self.task_id} failed: {self.error_message}"
