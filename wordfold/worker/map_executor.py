"""
Map Task Executor
Counts words in a single chunk and reports the counts through the
coordinator's result channel
"""

import time
import queue
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)

CountFunction = Callable[[str], Dict[str, int]]


def count_words(chunk: str, lowercase: bool = True) -> Dict[str, int]:
    """
    Count whitespace-separated words in a chunk

    Args:
        chunk: Text to tokenize
        lowercase: Fold every token to lower case before counting

    Returns:
        Dictionary mapping word to number of occurrences
    """
    counts: Dict[str, int] = {}
    for word in chunk.split():
        if lowercase:
            word = word.lower()
        counts[word] = counts.get(word, 0) + 1
    return counts


@dataclass
class MapResult:
    """Outcome of one map task, sent exactly once per task."""

    task_id: int
    counts: Dict[str, int] = field(default_factory=dict)
    success: bool = True
    error_message: str = ''
    execution_time_ms: int = 0


class MapExecutor:
    """Executes a single map task"""

    def __init__(self, task_id: int, chunk: str, results: queue.Queue,
                 count_fn: Optional[CountFunction] = None, lowercase: bool = True):
        """
        Initialize the map executor

        Args:
            task_id: Index of the chunk this task owns
            chunk: Text to count, owned exclusively by this task
            results: Channel the finished MapResult is put on
            count_fn: Replacement counting function taking the chunk text
            lowercase: Case policy for the default counting function
        """
        self.task_id = task_id
        self.chunk = chunk
        self.results = results
        self.count_fn = count_fn
        self.lowercase = lowercase

    def execute(self) -> MapResult:
        """
        Execute the map task

        Failures are reported as an unsuccessful MapResult instead of being
        raised, so one bad chunk never takes down the coordinator.

        Returns:
            The MapResult that was put on the result channel
        """
        start_time = time.time()

        try:
            logger.debug(f"Map task {self.task_id}: Counting {len(self.chunk)} characters")
            if self.count_fn is not None:
                counts = self.count_fn(self.chunk)
            else:
                counts = count_words(self.chunk, lowercase=self.lowercase)

            execution_time = int((time.time() - start_time) * 1000)
            logger.info(f"Map task {self.task_id}: Counted {len(counts)} distinct words in {execution_time}ms")
            result = MapResult(self.task_id, counts, execution_time_ms=execution_time)

        except Exception as e:
            execution_time = int((time.time() - start_time) * 1000)
            logger.error(f"Map task {self.task_id} failed: {e}")
            result = MapResult(self.task_id, success=False, error_message=str(e),
                               execution_time_ms=execution_time)

        self.results.put(result)
        return result
