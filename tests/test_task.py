"""Tests for the task state machine and its defect/review ledgers."""

import random

import pytest

from circle_of_trust.config import TaskConfig
from circle_of_trust.simulation import InvalidTransitionError, Task, TaskState
from circle_of_trust.simulation.task import jittered, roll


class TestSizing:

    def test_lines_derive_from_points(self, make_task):
        task = make_task(points=5.0, lines_per_point=100.0)
        assert task.lines == 500.0
        assert task.line_count == 500

    def test_fresh_copy_keeps_sizing_only(self, open_pr):
        task = open_pr()
        copy = task.fresh_copy()
        assert copy.id != task.id
        assert copy.state == TaskState.TO_DO
        assert (copy.points, copy.lines_per_point, copy.lines_per_reviewer) == (
            task.points, task.lines_per_point, task.lines_per_reviewer
        )
        assert copy.state_history == []

    def test_fractional_lines_round_up_for_line_positions(self, make_task):
        task = make_task(points=2.345, lines_per_point=100.0)
        assert task.line_count == 235

    def test_required_reviews_is_ceiling(self, make_task):
        assert make_task(points=5.0, threshold=300.0).required_reviews == 2
        assert make_task(points=5.0, threshold=100.0).required_reviews == 5
        assert make_task(points=5.5, threshold=100.0).required_reviews == 6

    def test_lines_equal_to_threshold_need_one_review(self, make_task):
        assert make_task(points=5.0, threshold=500.0).required_reviews == 1

    def test_points_must_be_positive(self):
        with pytest.raises(ValueError):
            Task(points=0)

    def test_generate_copies_sizing_from_config(self):
        config = TaskConfig(
            average_lines_per_point=50.0,
            average_points=3.0,
            lines_per_reviewer_threshold=120.0
        )
        task = Task.generate(config, random.Random(1))
        assert task.state == TaskState.TO_DO
        assert task.lines_per_point == 50.0
        assert task.lines_per_reviewer == 120.0
        assert 3.0 <= task.points < 6.0

    def test_generate_with_fixed_points(self):
        task = Task.generate(TaskConfig(), points=5.0)
        assert task.points == 5.0
        assert task.lines == 500.0


class TestRandomness:

    def test_jitter_stays_within_one_to_two_times_average(self):
        rng = random.Random(7)
        samples = [jittered(5.0, rng) for _ in range(500)]
        assert min(samples) >= 5.0
        assert max(samples) < 10.0

    def test_roll_extremes(self):
        rng = random.Random(3)
        assert not any(roll(0.0, rng) for _ in range(200))
        assert all(roll(1.0, rng) for _ in range(200))

    def test_module_random_when_no_rng_given(self):
        assert 5.0 <= jittered(5.0) < 10.0
        assert roll(1.0)
        assert not roll(0.0)


class TestTransitions:

    def test_happy_path_single_review(self, make_task):
        task = make_task(points=5.0, threshold=500.0)
        task.start()
        assert task.state == TaskState.IN_PROGRESS
        task.create_pr()
        assert task.state == TaskState.READY_FOR_REVIEW

        task.review_pr("alice")

        assert task.state == TaskState.COMPLETE
        assert task.is_fully_reviewed()
        states = [entry["to_state"] for entry in task.state_history]
        assert states == [
            TaskState.IN_PROGRESS,
            TaskState.READY_FOR_REVIEW,
            TaskState.IN_REVIEW,
            TaskState.COMPLETE
        ]

    def test_in_review_after_first_of_two_reviews(self, open_pr):
        task = open_pr(points=5.0, threshold=300.0)

        task.review_pr("alice")
        assert task.state == TaskState.IN_REVIEW
        assert not task.is_fully_reviewed()

        task.review_pr("bob")
        assert task.state == TaskState.COMPLETE
        assert task.reviewed_by == {"alice", "bob"}

    def test_in_review_self_loop(self, open_pr):
        task = open_pr(points=5.0, threshold=100.0)
        for name in ("a", "b", "c", "d"):
            task.review_pr(name)
            assert task.state == TaskState.IN_REVIEW
        task.review_pr("e")
        assert task.state == TaskState.COMPLETE

    def test_never_skips_in_review_when_several_reviews_required(self, open_pr):
        task = open_pr(points=5.0, threshold=200.0)
        for name in ("a", "b", "c"):
            task.review_pr(name)
        states = [entry["to_state"] for entry in task.state_history]
        assert states.index(TaskState.IN_REVIEW) < states.index(TaskState.COMPLETE)
        assert states.count(TaskState.IN_REVIEW) == 1

    def test_start_twice_fails(self, make_task):
        task = make_task()
        task.start()
        with pytest.raises(InvalidTransitionError) as exc:
            task.start()
        assert exc.value.task_id == task.id
        assert exc.value.current == TaskState.IN_PROGRESS
        assert task.state == TaskState.IN_PROGRESS

    def test_create_pr_before_start_fails(self, make_task):
        task = make_task()
        with pytest.raises(InvalidTransitionError):
            task.create_pr()
        assert task.state == TaskState.TO_DO
        assert task.state_history == []

    def test_review_before_pr_fails_without_mutation(self, make_task):
        task = make_task()
        task.start()
        with pytest.raises(InvalidTransitionError):
            task.review_pr("alice")
        assert task.reviewed_by == set()
        assert task.review_log == []

    def test_review_after_complete_fails_without_mutation(self, open_pr):
        task = open_pr(points=5.0, threshold=500.0)
        task.review_pr("alice")
        with pytest.raises(InvalidTransitionError):
            task.review_pr("bob")
        assert task.reviewed_by == {"alice"}

    def test_error_message_names_states(self, make_task):
        task = make_task()
        with pytest.raises(InvalidTransitionError, match="from todo to ready for review"):
            task.create_pr()


class TestLedgers:

    def test_membership_predicates_return_bools(self, make_task):
        task = make_task()
        task.add_error(3)
        task.add_reviewer("alice")
        assert task.has_error(3) is True
        assert task.has_error(4) is False
        assert task.has_reviewer("alice") is True
        assert task.has_reviewer("bob") is False

    def test_authored_errors_counts_distinct_lines(self, make_task):
        task = make_task()
        task.add_error(1)
        task.add_error(1)
        task.add_error(2)
        assert task.authored_errors == 2
        task.correct_error(1)
        assert task.error_count == 1
        assert task.authored_errors == 2

    def test_correcting_clean_line_is_noop(self, make_task):
        task = make_task()
        task.correct_error(10)
        assert task.error_lines == set()

    def test_reviewed_by_is_a_set(self, open_pr):
        task = open_pr(points=5.0, threshold=100.0)
        task.review_pr("alice")
        task.review_pr("alice")
        assert len(task.reviewed_by) == 1


class TestTiming:

    def test_cycle_time_and_review_wait(self, make_task):
        task = make_task(points=5.0, threshold=500.0)
        task.start(timestamp=1.0)
        task.create_pr(timestamp=4.0)
        task.review_pr("alice", timestamp=9.0, started_at=6.0)

        assert task.entered_at(TaskState.READY_FOR_REVIEW) == 4.0
        assert task.cycle_time() == 8.0
        assert task.review_wait() == 2.0

    def test_timing_unknown_until_complete(self, open_pr):
        task = open_pr()
        assert task.cycle_time() is None
        assert task.review_wait() is None
