"""
Unit tests for MapExecutor and word counting
"""

import queue
import pytest
from unittest.mock import Mock

from wordfold.worker.map_executor import MapExecutor, MapResult, count_words


class TestCountWords:
    """Tests for tokenizing and counting a chunk"""

    def test_counts_repeated_words(self):
        """Test basic word counting"""
        assert count_words("the quick fox the quick the") == {'the': 3, 'quick': 2, 'fox': 1}

    def test_whitespace_runs_do_not_produce_empty_words(self):
        """Test that tabs, newlines and repeated spaces are all separators"""
        counts = count_words("  alpha\t\tbeta \n\n alpha  ")

        assert counts == {'alpha': 2, 'beta': 1}
        assert '' not in counts

    def test_lowercases_by_default(self):
        """Test that the same word in different cases is counted once"""
        assert count_words("The THE the") == {'the': 3}

    def test_case_sensitive_counting(self):
        """Test counting with case folding disabled"""
        assert count_words("The THE the", lowercase=False) == {'The': 1, 'THE': 1, 'the': 1}

    def test_empty_chunk(self):
        """Test handling of an empty chunk"""
        assert count_words("") == {}

    def test_punctuation_is_part_of_the_word(self):
        """Test that only whitespace separates words"""
        assert count_words("dog. dog") == {'dog.': 1, 'dog': 1}


class TestMapExecutor:
    """Tests for map task execution and reporting"""

    def test_successful_task_reports_counts(self):
        """Test that a finished task puts its counts on the result channel"""
        results = queue.Queue()
        executor = MapExecutor(task_id=3, chunk="Hello World hello", results=results)

        returned = executor.execute()

        reported = results.get_nowait()
        assert reported is returned
        assert reported.task_id == 3
        assert reported.success is True
        assert reported.counts == {'hello': 2, 'world': 1}
        assert reported.error_message == ''
        assert results.empty()

    def test_case_policy_is_forwarded(self):
        """Test that lowercase=False keeps original case"""
        results = queue.Queue()

        MapExecutor(0, "Hello hello", results, lowercase=False).execute()

        assert results.get_nowait().counts == {'Hello': 1, 'hello': 1}

    def test_custom_count_function(self):
        """Test that an injected counting function is used"""
        results = queue.Queue()
        count_fn = Mock(return_value={'x': 7})

        MapExecutor(1, "some text", results, count_fn=count_fn).execute()

        count_fn.assert_called_once_with("some text")
        assert results.get_nowait().counts == {'x': 7}

    def test_failure_is_reported_not_raised(self):
        """Test that an exception becomes an unsuccessful MapResult"""
        results = queue.Queue()
        count_fn = Mock(side_effect=RuntimeError("disk on fire"))

        returned = MapExecutor(2, "text", results, count_fn=count_fn).execute()

        reported = results.get_nowait()
        assert reported is returned
        assert returned.success is False
        assert reported.task_id == 2
        assert reported.counts == {}
        assert "disk on fire" in reported.error_message

    def test_reports_exactly_once(self):
        """Test that each task puts a single result"""
        results = queue.Queue()

        MapExecutor(0, "a b c", results).execute()

        results.get_nowait()
        with pytest.raises(queue.Empty):
            results.get_nowait()


class TestMapResult:
    """Tests for MapResult defaults"""

    def test_defaults(self):
        result = MapResult(task_id=0)

        assert result.success is True
        assert result.counts == {}
        assert result.execution_time_ms == 0
