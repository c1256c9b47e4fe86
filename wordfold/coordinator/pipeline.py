"""
Pipeline coordinator.
Splits the input, runs one map task per chunk concurrently, folds the
partial counts into one aggregate and selects the most frequent words.
"""

import uuid
import queue
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Union

from wordfold.config import PipelineConfig
from wordfold.errors import CollectionTimeout, SourceReadError, WorkerFailure
from wordfold.coordinator.metrics import MetricsCollector, RunMetrics
from wordfold.coordinator.shuffle import merge
from wordfold.coordinator.splitter import Source, describe_source, source_size, split
from wordfold.worker.map_executor import CountFunction, MapExecutor, MapResult
from wordfold.worker.reduce_executor import RankedEntry, top_k as select_top_k

logger = logging.getLogger(__name__)

PipelineWarning = Union[CollectionTimeout, WorkerFailure]


@dataclass
class PipelineResult:
    """Ranked words of one run plus everything that degraded them."""

    top_words: List[RankedEntry]
    num_chunks: int = 0
    warnings: List[PipelineWarning] = field(default_factory=list)
    dropped_chunks: List[int] = field(default_factory=list)
    metrics: Optional[RunMetrics] = None

    @property
    def complete(self) -> bool:
        """True when every chunk's counts reached the aggregate."""
        return not self.dropped_chunks


class PipelineCoordinator:
    """
    Coordinates a single-process map-reduce word count.

    The coordinator is the only owner of the aggregate counts. Map tasks
    never touch it; each one puts exactly one MapResult on a queue that the
    coordinator drains and merges sequentially.
    """

    def __init__(self, config: Optional[PipelineConfig] = None,
                 metrics: Optional[MetricsCollector] = None,
                 count_fn: Optional[CountFunction] = None):
        self.config = config or PipelineConfig()
        # A collector passed in is shared and keeps every run; an owned one
        # hands each run's metrics to its result and forgets them
        self.keep_metrics = metrics is not None
        self.metrics = metrics or MetricsCollector()
        self.count_fn = count_fn

    def run(self, source: Source) -> PipelineResult:
        """
        Run the pipeline over one input source

        Args:
            source: Path to the input file or a binary stream

        Returns:
            PipelineResult, possibly incomplete if map results timed out or failed

        Raises:
            SourceReadError: If the input cannot be read. No task is started.
        """
        run_id = uuid.uuid4().hex[:8]
        config = self.config

        self.metrics.start_run(run_id, config.folds, config.top_k, source_size(source))
        logger.info(f"Run {run_id}: Starting on {describe_source(source)} "
                    f"(folds={config.folds}, top_k={config.top_k})")

        try:
            chunks = split(source, config.folds)
        except SourceReadError:
            if not self.keep_metrics:
                self.metrics.pop_metrics(run_id)
            raise
        self.metrics.end_split_phase(run_id, len(chunks))

        aggregate: Dict[str, int] = {}
        warnings: List[PipelineWarning] = []
        pending: Set[int] = set(range(len(chunks)))
        failed_ids: List[int] = []
        collected = 0
        timed_out = 0
        failed = 0
        results: queue.Queue = queue.Queue()

        with ThreadPoolExecutor(max_workers=max(1, len(chunks)),
                                thread_name_prefix=f"map-{run_id}") as pool:
            # Dispatch every map task up front
            futures = []
            for task_id, chunk in enumerate(chunks):
                executor = MapExecutor(task_id, chunk, results,
                                       count_fn=self.count_fn,
                                       lowercase=not config.case_sensitive)
                futures.append(pool.submit(executor.execute))

            # One collection attempt per dispatched task
            for attempt in range(len(futures)):
                try:
                    result: MapResult = results.get(timeout=config.collect_timeout)
                except queue.Empty:
                    timed_out += 1
                    warning = CollectionTimeout(attempt, config.collect_timeout)
                    logger.warning(f"Run {run_id}: {warning}, continuing without it")
                    warnings.append(warning)
                    continue

                pending.discard(result.task_id)
                if not result.success:
                    failed += 1
                    failed_ids.append(result.task_id)
                    warning = WorkerFailure(result.task_id, result.error_message)
                    logger.warning(f"Run {run_id}: {warning}, its counts are dropped")
                    warnings.append(warning)
                    continue

                merge(aggregate, result.counts)
                collected += 1

            self.metrics.end_map_phase(run_id, collected, timed_out, failed)

            ranked = select_top_k(aggregate, config.top_k)

        # Every map task has exited here, timed out ones included
        late = 0
        while True:
            try:
                results.get_nowait()
            except queue.Empty:
                break
            late += 1
        if late:
            logger.warning(f"Run {run_id}: Discarded {late} map results that arrived after their collection timed out")

        dropped = sorted(pending.union(failed_ids))

        self.metrics.end_run(run_id, aggregate)
        logger.info(f"Run {run_id}: Completed with {len(aggregate)} distinct words, "
                    f"{collected}/{len(futures)} chunks counted")

        return PipelineResult(
            top_words=ranked,
            num_chunks=len(futures),
            warnings=warnings,
            dropped_chunks=dropped,
            metrics=self._finish_metrics(run_id),
        )

    def _finish_metrics(self, run_id: str) -> Optional[RunMetrics]:
        if self.keep_metrics:
            return self.metrics.get_metrics(run_id)
        return self.metrics.pop_metrics(run_id)


def run_pipeline(source: Source, folds: int, top_k: int, collect_timeout: Optional[float] = None,
                 case_sensitive: bool = False) -> PipelineResult:
    """
    Count words in source and return the top_k most frequent

    Args:
        source: Path to the input file or a binary stream
        folds: Target number of chunks (at least 1)
        top_k: Number of entries to return (at least 0)
        collect_timeout: Seconds to wait for each map result
        case_sensitive: Count 'The' and 'the' as different words

    Returns:
        PipelineResult

    Raises:
        ValueError: If folds, top_k or collect_timeout are out of range
        SourceReadError: If the input cannot be read
    """
    kwargs = {}
    if collect_timeout is not None:
        kwargs['collect_timeout'] = collect_timeout
    config = PipelineConfig(folds=folds, top_k=top_k, case_sensitive=case_sensitive, **kwargs)
    return PipelineCoordinator(config).run(source)
