import pytest

from core import (
    InvalidTransition,
    Pace,
    RunStatus,
    TaskStatus,
    Template,
    advance,
    compute_remaining_time,
    create_run_from_template,
    end,
    extend,
    pause,
    resume,
    start,
)
from core.clock import MINUTE_MS


def test_start_activates_first_pending_task(make_run, t0, by_name):
    run = make_run("A", "B", started=False)
    started = start(run, t0)
    assert started.status == RunStatus.RUNNING
    assert started.started_at == t0
    a = by_name(started, "A")
    assert a.status == TaskStatus.ACTIVE
    assert started.active_task_id == a.id
    assert a.planned_end_at - a.started_at == a.duration_ms + a.extension_ms


def test_start_twice_raises_and_leaves_run_untouched(make_run, t0):
    run = make_run("A")
    with pytest.raises(InvalidTransition) as excinfo:
        start(run, t0 + 1)
    assert excinfo.value.code == "ERR_INVALID_TRANSITION"
    assert run.status == RunStatus.RUNNING


def test_start_empty_run_completes_immediately(ids, t0):
    run = create_run_from_template(Template(id="e", name="Empty"), Pace.STEADY, now=t0, id_factory=ids)
    started = start(run, t0)
    assert started.status == RunStatus.COMPLETED
    assert started.active_task_id is None


class TestPauseResume:
    def test_pause_requires_running(self, make_run, t0):
        with pytest.raises(InvalidTransition):
            pause(make_run("A", started=False), t0)

    def test_resume_requires_paused(self, make_run, t0):
        with pytest.raises(InvalidTransition):
            resume(make_run("A"), t0)

    def test_double_pause_raises(self, make_run, t0):
        paused = pause(make_run("A"), t0 + 1000)
        with pytest.raises(InvalidTransition):
            pause(paused, t0 + 2000)

    def test_resume_shifts_deadline_by_pause_length(self, make_run, t0):
        run = make_run("A")
        before = run.active_task.planned_end_at
        paused = pause(run, t0 + MINUTE_MS)
        assert paused.status == RunStatus.PAUSED
        assert paused.paused_at == t0 + MINUTE_MS
        resumed = resume(paused, t0 + 4 * MINUTE_MS)
        assert resumed.status == RunStatus.RUNNING
        assert resumed.paused_at is None
        assert resumed.active_task.planned_end_at == before + 3 * MINUTE_MS
        assert resumed.total_pause_ms == 3 * MINUTE_MS

    def test_immediate_resume_keeps_deadline(self, make_run, t0):
        run = make_run("A")
        resumed = resume(pause(run, t0 + 500), t0 + 500)
        assert resumed.active_task.planned_end_at == run.active_task.planned_end_at

    def test_pause_lengths_accumulate(self, make_run, t0):
        run = resume(pause(make_run("A"), t0 + 1000), t0 + 3000)
        run = resume(pause(run, t0 + 5000), t0 + 10000)
        assert run.total_pause_ms == 7000

    def test_task_started_while_paused_gets_its_full_window(self, make_run, t0):
        paused = pause(make_run("A", "B"), t0 + MINUTE_MS)
        advanced = advance(paused, t0 + 10 * MINUTE_MS).run
        b = advanced.active_task
        assert b.name == "B"
        assert b.started_at == t0 + MINUTE_MS
        resumed = resume(advanced, t0 + 20 * MINUTE_MS)
        remaining = compute_remaining_time(resumed.active_task, now=t0 + 20 * MINUTE_MS)
        assert remaining.remaining_ms == 5 * MINUTE_MS

    def test_extension_while_paused_counts_from_pause(self, make_run, t0):
        run = make_run("A")
        paused = pause(run, t0 + MINUTE_MS)
        extended = extend(paused, run.active_task_id, 5 * MINUTE_MS, t0 + 10 * MINUTE_MS)
        assert extended.active_task.planned_end_at == t0 + 6 * MINUTE_MS
        resumed = resume(extended, t0 + 20 * MINUTE_MS)
        remaining = compute_remaining_time(resumed.active_task, now=t0 + 20 * MINUTE_MS)
        assert remaining.remaining_ms == 5 * MINUTE_MS


class TestEnd:
    def test_end_abandons_and_skips_active_task(self, make_run, t0, by_name):
        ended = end(make_run("A", "B"), t0 + 10)
        assert ended.status == RunStatus.ABANDONED
        assert ended.ended_at == t0 + 10
        assert ended.active_task_id is None
        assert by_name(ended, "A").status == TaskStatus.SKIPPED
        assert by_name(ended, "B").status == TaskStatus.PENDING

    def test_end_from_paused_and_not_started(self, make_run, t0):
        assert end(pause(make_run("A"), t0), t0).status == RunStatus.ABANDONED
        assert end(make_run("A", started=False), t0).status == RunStatus.ABANDONED

    def test_end_terminal_run_raises(self, make_run, t0):
        ended = end(make_run("A"), t0)
        with pytest.raises(InvalidTransition):
            end(ended, t0)
