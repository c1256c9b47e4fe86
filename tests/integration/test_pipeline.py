"""
End-to-end tests for the pipeline coordinator
"""

import io
import os
import time
import threading
import pytest
from unittest.mock import patch

from wordfold import (
    CollectionTimeout, PipelineConfig, PipelineCoordinator, SourceReadError,
    WorkerFailure, run_pipeline,
)
from wordfold.coordinator.metrics import MetricsCollector
from wordfold.worker.map_executor import count_words

# Three 18-byte lines: with folds=3 each line becomes its own chunk
THREE_LINES = "apple apple apple\nmango mango mango\nzebra zebra zebra\n"


@pytest.mark.integration
class TestPipelineResults:
    """Tests for correct counts across chunking choices"""

    def test_single_fold_example(self, write_input):
        """Test the reference example with one fold"""
        result = run_pipeline(write_input("the quick fox the quick the"), folds=1, top_k=2)

        assert result.top_words == [("the", 3), ("quick", 2)]
        assert result.num_chunks == 1
        assert result.complete
        assert result.warnings == []

    def test_straddling_word_counted_once(self, write_input):
        """Test that a word across a naive byte boundary is not split in two"""
        path = write_input("aa bb supercalifragilistic cc dd ee")

        result = run_pipeline(path, folds=3, top_k=100)

        counts = dict(result.top_words)
        assert counts["supercalifragilistic"] == 1
        assert len(counts) == 6
        assert all(count == 1 for count in counts.values())

    @pytest.mark.parametrize("folds", [1, 2, 3, 5, 8, 13])
    def test_same_counts_for_every_fold_count(self, sample_input_file, sample_text, folds):
        """Test that the fold count never changes the result"""
        expected = sorted(count_words(sample_text).items(), key=lambda kv: (-kv[1], kv[0]))

        result = run_pipeline(sample_input_file, folds=folds, top_k=1000)

        assert result.top_words == expected
        assert result.complete

    def test_case_sensitive_run(self, write_input):
        result = run_pipeline(write_input("Dog dog DOG dog"), folds=2, top_k=5, case_sensitive=True)

        assert result.top_words == [("dog", 2), ("DOG", 1), ("Dog", 1)]

    def test_top_k_zero(self, sample_input_file):
        assert run_pipeline(sample_input_file, folds=3, top_k=0).top_words == []

    def test_empty_input(self, write_input):
        """Test that an empty file gives an empty, complete result"""
        result = run_pipeline(write_input(""), folds=4, top_k=3)

        assert result.top_words == []
        assert result.num_chunks == 0
        assert result.complete

    def test_stream_source(self):
        result = run_pipeline(io.BytesIO(b"b a b c b a"), folds=2, top_k=2)

        assert result.top_words == [("b", 3), ("a", 2)]

    def test_metrics_recorded(self, sample_input_file, sample_text):
        collector = MetricsCollector()
        coordinator = PipelineCoordinator(PipelineConfig(folds=3, top_k=2), metrics=collector)

        result = coordinator.run(sample_input_file)

        metrics = result.metrics
        assert metrics is collector.get_metrics(metrics.run_id)
        assert metrics.input_size_bytes == os.path.getsize(sample_input_file)
        assert metrics.num_chunks == result.num_chunks
        assert metrics.chunks_collected == result.num_chunks
        assert metrics.total_words == len(sample_text.split())

    def test_owned_collector_does_not_accumulate(self, sample_input_file):
        coordinator = PipelineCoordinator(PipelineConfig(folds=2, top_k=2))

        first = coordinator.run(sample_input_file)
        second = coordinator.run(sample_input_file)

        assert first.metrics is not None
        assert second.metrics is not None
        assert first.metrics.run_id != second.metrics.run_id
        assert coordinator.metrics.run_metrics == {}

    def test_shared_collector_keeps_runs(self, sample_input_file):
        collector = MetricsCollector()
        coordinator = PipelineCoordinator(PipelineConfig(folds=2, top_k=2), metrics=collector)

        coordinator.run(sample_input_file)
        coordinator.run(sample_input_file)

        assert len(collector.run_metrics) == 2

    def test_owned_collector_forgets_failed_read(self, temp_dir):
        coordinator = PipelineCoordinator(PipelineConfig(folds=2, top_k=2))
        missing = os.path.join(temp_dir, 'missing.txt')

        with pytest.raises(SourceReadError):
            coordinator.run(missing)

        assert coordinator.metrics.run_metrics == {}


@pytest.mark.integration
class TestPipelineDegradation:
    """Tests for timeouts, worker failures and read errors"""

    def test_slow_worker_is_dropped_after_timeout(self, write_input):
        """Test that a chunk missing its deadline is left out of the result"""
        finished = threading.Event()

        def slow_on_zebra(chunk):
            if "zebra" in chunk:
                time.sleep(1.5)
                finished.set()
            return count_words(chunk)

        config = PipelineConfig(folds=3, top_k=10, collect_timeout=0.5)
        coordinator = PipelineCoordinator(config, count_fn=slow_on_zebra)

        result = coordinator.run(write_input(THREE_LINES))

        assert dict(result.top_words) == {"apple": 3, "mango": 3}
        assert result.dropped_chunks == [2]
        assert not result.complete
        assert len(result.warnings) == 1
        assert isinstance(result.warnings[0], CollectionTimeout)
        assert result.metrics.chunks_timed_out == 1
        # The slow task was joined before the run returned
        assert finished.is_set()

    def test_failing_worker_does_not_stop_the_others(self, write_input):
        """Test that a map task exception only drops its own chunk"""
        def fail_on_mango(chunk):
            if "mango" in chunk:
                raise RuntimeError("bad chunk")
            return count_words(chunk)

        config = PipelineConfig(folds=3, top_k=10, collect_timeout=5.0)
        coordinator = PipelineCoordinator(config, count_fn=fail_on_mango)

        start = time.time()
        result = coordinator.run(write_input(THREE_LINES))

        # Failures are reported through the channel, no timeout is waited out
        assert time.time() - start < 5.0
        assert dict(result.top_words) == {"apple": 3, "zebra": 3}
        assert result.dropped_chunks == [1]
        assert result.warnings == [WorkerFailure(1, "bad chunk")]
        assert result.metrics.chunks_failed == 1

    def test_unreadable_source_dispatches_nothing(self, temp_dir):
        """Test that a read error aborts before any map task starts"""
        missing = os.path.join(temp_dir, 'missing.txt')

        with patch('wordfold.coordinator.pipeline.MapExecutor') as mock_executor:
            with pytest.raises(SourceReadError):
                PipelineCoordinator(PipelineConfig(folds=2)).run(missing)

        mock_executor.assert_not_called()

    def test_invalid_arguments(self, sample_input_file):
        with pytest.raises(ValueError):
            run_pipeline(sample_input_file, folds=0, top_k=1)
        with pytest.raises(ValueError):
            run_pipeline(sample_input_file, folds=1, top_k=-1)


@pytest.mark.integration
class TestPipelineConcurrency:
    """Tests for the concurrent dispatch"""

    def test_map_tasks_run_in_parallel(self, write_input):
        """Test that all map tasks are started before any finishes"""
        barrier = threading.Barrier(3, timeout=5)

        def wait_for_peers(chunk):
            barrier.wait()
            return count_words(chunk)

        config = PipelineConfig(folds=3, top_k=10, collect_timeout=5.0)
        result = PipelineCoordinator(config, count_fn=wait_for_peers).run(write_input(THREE_LINES))

        assert result.complete
        assert dict(result.top_words) == {"apple": 3, "mango": 3, "zebra": 3}

    def test_no_map_threads_outlive_the_run(self, write_input):
        run_pipeline(write_input(THREE_LINES), folds=3, top_k=1)

        assert not [t for t in threading.enumerate() if t.name.startswith("map-") and t.is_alive()]
