"""
Unit tests for observability helpers.

Tests logging context propagation and the metrics collector.
"""

import logging
import threading

import pytest

from mongo_index_copy import copy_all_indexes
from mongo_index_copy.observability import (
    MetricsCollector,
    OperationMetrics,
    copy_scope,
    get_correlation_id,
    get_logger,
    get_logging_context,
    get_metrics_collector,
    log_operation,
    record_operation,
    set_correlation_id,
)


class TestLoggingContext:
    """Test the copy scope and the contextual logger."""

    def test_scope_binds_correlation_id_and_collections(self):
        """Inside a scope the context names both collections and one ID."""
        with copy_scope("db.a", "db.b") as correlation_id:
            context = get_logging_context()

        assert context["correlation_id"] == correlation_id
        assert context["source"] == "db.a"
        assert context["destination"] == "db.b"
        assert "timestamp" in context

    def test_scope_restores_context_on_exit(self):
        """Leaving a scope removes its context and generated ID."""
        with copy_scope("db.a", "db.b"):
            pass

        assert "source" not in get_logging_context()
        assert get_correlation_id() is None

    def test_scope_restores_context_on_error(self):
        """The context is restored even when the scoped block raises."""
        with pytest.raises(ValueError):
            with copy_scope("db.a", "db.b"):
                raise ValueError("boom")

        assert "source" not in get_logging_context()

    def test_scope_reuses_pinned_correlation_id(self):
        """A pinned correlation ID is shared by the scope and survives it."""
        pinned = set_correlation_id("run-7")

        with copy_scope("db.a", "db.b") as correlation_id:
            assert correlation_id == pinned

        assert get_correlation_id() == "run-7"

    def test_adapter_adds_context_to_records(self, caplog):
        """Records from a contextual logger carry the scope and extras."""
        logger = get_logger("mongo_index_copy.test")

        with caplog.at_level(logging.INFO, logger="mongo_index_copy.test"):
            with copy_scope("db.a", "db.b"):
                logger.info("hello", extra={"indexes": 3})

        record = caplog.records[-1]
        assert record.source == "db.a"
        assert record.indexes == 3

    def test_log_operation_failure_message(self, caplog):
        """A failed operation is summarised at WARNING with its duration."""
        logger = logging.getLogger("mongo_index_copy.test")

        with caplog.at_level(logging.INFO, logger="mongo_index_copy.test"):
            log_operation(logger, "index_copy.copy_all", success=False, duration_ms=12.5)

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.getMessage() == "Operation failed: index_copy.copy_all (duration: 12.50ms)"
        assert record.duration_ms == 12.5
        assert record.success is False

    def test_copy_logs_operation_and_clears_context(
        self, caplog, source_collection, destination_collection
    ):
        """A copy emits one summary record and leaves no context behind."""
        with caplog.at_level(logging.INFO, logger="mongo_index_copy"):
            copy_all_indexes(source_collection, destination_collection)

        operation_records = [r for r in caplog.records if getattr(r, "operation", None)]
        assert len(operation_records) == 1
        assert operation_records[0].operation == "index_copy.copy_all"
        assert operation_records[0].source == "test_db.source"
        assert operation_records[0].indexes == 4
        assert "source" not in get_logging_context()


class TestOperationMetrics:
    """Test per-operation aggregation."""

    def test_record_and_to_dict(self):
        """Durations, errors and submitted indexes aggregate into the dict."""
        metrics = OperationMetrics(operation_name="index_copy.copy_all")
        metrics.record(10.0, indexes_submitted=3)
        metrics.record(30.0, success=False)

        data = metrics.to_dict()

        assert data["count"] == 2
        assert data["avg_duration_ms"] == 20.0
        assert data["min_duration_ms"] == 10.0
        assert data["max_duration_ms"] == 30.0
        assert data["error_rate_percent"] == 50.0
        assert data["indexes_submitted"] == 3

    def test_empty_metrics(self):
        """Unused metrics report zeros rather than infinity."""
        data = OperationMetrics(operation_name="x").to_dict()

        assert data["min_duration_ms"] == 0.0
        assert data["last_execution"] is None


class TestMetricsCollector:
    """Test the bounded, thread-safe collector."""

    def test_tags_create_separate_keys(self):
        """Each tag set is tracked under its own key."""
        collector = MetricsCollector()
        collector.record_operation("index_copy.copy_all", 1.0, source="db.a")
        collector.record_operation("index_copy.copy_all", 1.0, source="db.b")

        metrics = collector.get_metrics("index_copy")["metrics"]

        assert set(metrics) == {
            "index_copy.copy_all[source=db.a]",
            "index_copy.copy_all[source=db.b]",
        }
        assert collector.get_operation_count("index_copy.copy_all") == 2

    def test_summary_aggregates_tags(self):
        """The summary folds tag sets per operation."""
        collector = MetricsCollector()
        collector.record_operation("index_copy.copy_all", 5.0, indexes_submitted=2, source="db.a")
        collector.record_operation("index_copy.copy_all", 15.0, False, source="db.b")

        summary = collector.get_summary()["summary"]["index_copy.copy_all"]

        assert summary["count"] == 2
        assert summary["error_count"] == 1
        assert summary["indexes_submitted"] == 2

    def test_lru_eviction(self):
        """The least recently used entry is evicted first."""
        collector = MetricsCollector(max_metrics=2)
        collector.record_operation("a", 1.0)
        collector.record_operation("b", 1.0)
        collector.record_operation("a", 1.0)
        collector.record_operation("c", 1.0)

        assert set(collector.get_metrics()["metrics"]) == {"a", "c"}

    def test_concurrent_record_operation(self):
        """Concurrent recording loses no counts."""
        collector = MetricsCollector()
        num_threads = 8
        per_thread = 50
        barrier = threading.Barrier(num_threads)

        def record(thread_id: int):
            barrier.wait()
            for _ in range(per_thread):
                collector.record_operation("index_copy.copy_all", 1.0, thread=thread_id)

        threads = [threading.Thread(target=record, args=(i,)) for i in range(num_threads)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert collector.get_operation_count("index_copy.copy_all") == num_threads * per_thread

    def test_global_collector(self):
        """record_operation writes to the process-wide collector."""
        record_operation("index_copy.copy_named", 3.0, indexes_submitted=1)

        assert get_metrics_collector().get_operation_count("index_copy.copy_named") == 1
