"""
Unit tests for the course engine wiring.
"""

import random
from datetime import timedelta

import pytest

from drillcore.config import Settings
from drillcore.delivery import CourseEngine
from drillcore.study import SessionMode


@pytest.fixture
def engine(store, sample_catalog):
    return CourseEngine(store, catalog=sample_catalog, rng=random.Random(3), session_size=4)


class TestRecordAttempt:
    def test_got_it_schedules_tomorrow(self, engine, today):
        result = engine.record_attempt("m1_warmup_1", 1, today=today)

        assert result.quality == 5
        assert result.progress.status == "completed"
        assert result.review.next_review == today + timedelta(days=1)
        assert engine.progress.get("m1_warmup_1").self_rating == 1

    def test_hints_lower_quality(self, engine, today):
        result = engine.record_attempt("m1_warmup_1", 1, hints_used=True, today=today)

        assert result.quality == 4

    def test_needed_solution_resets(self, engine, today):
        engine.record_attempt("x", 1, today=today)
        engine.record_attempt("x", 1, today=today)
        result = engine.record_attempt("x", 3, solution_viewed=True, today=today)

        assert result.quality == 1
        assert result.review.repetitions == 0
        assert result.review.interval == 1

    def test_label_stored(self, engine, today):
        engine.record_attempt("m1_warmup_1", 2, label="Hello", today=today)

        assert engine.reviews.get("m1_warmup_1").label == "Hello"


class TestQueuesAndReports:
    def test_due_items_come_back_in_review_queue(self, engine, today):
        engine.record_attempt("m1_warmup_1", 1, today=today)
        engine.record_attempt("m2_warmup_1", 1, today=today)

        queue = engine.build_queue(SessionMode.REVIEW, today=today + timedelta(days=1))

        assert sorted(queue.keys) == ["m1_warmup_1", "m2_warmup_1"]
        assert queue.requested == 4

    def test_prefix_filter(self, engine, today):
        engine.record_attempt("m1_warmup_1", 1, today=today)
        engine.record_attempt("m2_warmup_1", 1, today=today)

        queue = engine.build_queue("review", prefix="m2_", today=today + timedelta(days=1))

        assert queue.keys == ("m2_warmup_1",)

    def test_discover_uses_catalog(self, engine, today):
        queue = engine.build_queue("discover", 10, difficulty="hard", today=today)

        assert queue.keys == ("m2_challenge_1_v1",)

    def test_report_after_attempts(self, engine, today):
        assert engine.report(today=today) is None

        engine.record_attempt("m1_warmup_1", 1, today=today)
        report = engine.report(today=today)

        assert report.total_tracked == 1
        assert report.ratings.got_it == 1
        assert today in engine.trends.get_snapshots()


class TestFromSettings:
    def test_uses_configured_paths(self, tmp_path):
        settings = Settings(data_dir=tmp_path, namespace="go-course", session_size=7)

        engine = CourseEngine.from_settings(settings)

        assert engine.store.namespace == "go-course"
        assert engine.queues.config.default_count == 7
        assert (tmp_path / "state.db").exists()
        engine.close()
