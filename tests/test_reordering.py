import pytest

from core import InvalidTransition, RunStatus, TaskNotFound, TaskNotMovable, add_quick_task, advance, end, move_task, skip
from core.clock import MINUTE_MS
from core.reordering import pending_position


def _pending_names(run):
    return [t.name for t in run.pending_tasks()]


def _layout(run):
    return [(t.name, t.status.value, t.order) for t in run.tasks]


class TestMoveTask:
    def test_move_to_next_puts_task_right_after_active(self, make_run, by_name):
        run = make_run("A", "B", "C", "D")
        moved = move_task(run, by_name(run, "D").id, "next")
        assert _pending_names(moved) == ["D", "B", "C"]
        assert _layout(moved)[0] == ("A", "active", 0)

    def test_up_and_down(self, make_run, by_name):
        run = make_run("A", "B", "C", "D")
        up = move_task(run, by_name(run, "C").id, "up")
        assert _pending_names(up) == ["C", "B", "D"]
        down = move_task(up, by_name(up, "C").id, "down")
        assert _pending_names(down) == ["B", "C", "D"]

    def test_end_and_numeric_positions(self, make_run, by_name):
        run = make_run("A", "B", "C", "D")
        assert _pending_names(move_task(run, by_name(run, "B").id, "end")) == ["C", "D", "B"]
        assert _pending_names(move_task(run, by_name(run, "D").id, 1)) == ["B", "D", "C"]
        assert _pending_names(move_task(run, by_name(run, "D").id, "0")) == ["D", "B", "C"]
        assert _pending_names(move_task(run, by_name(run, "B").id, 99)) == ["C", "D", "B"]

    def test_noop_returns_same_run(self, make_run, by_name):
        run = make_run("A", "B", "C")
        assert move_task(run, by_name(run, "B").id, "up") is run
        assert move_task(run, by_name(run, "C").id, "end") is run
        assert move_task(run, by_name(run, "B").id, "next") is run

    def test_layout_puts_finished_first_and_renumbers(self, make_run, by_name, t0):
        run = make_run("A", "B", "C", "D", "E")
        run = advance(run, t0).run
        run = skip(run, by_name(run, "C").id, t0).run
        moved = move_task(run, by_name(run, "E").id, "next")
        assert _layout(moved) == [
            ("A", "completed", 0),
            ("C", "skipped", 1),
            ("B", "active", 2),
            ("E", "pending", 3),
            ("D", "pending", 4),
        ]

    def test_active_task_cannot_move(self, make_run, by_name):
        run = make_run("A", "B")
        with pytest.raises(TaskNotMovable):
            move_task(run, by_name(run, "A").id, "end")

    def test_finished_task_cannot_move(self, make_run, by_name, t0):
        run = advance(make_run("A", "B", "C"), t0).run
        with pytest.raises(TaskNotMovable) as excinfo:
            move_task(run, by_name(run, "A").id, "next")
        assert excinfo.value.status == "completed"

    def test_unknown_task(self, make_run):
        with pytest.raises(TaskNotFound):
            move_task(make_run("A", "B"), "ghost", "up")

    def test_unknown_position(self, make_run, by_name):
        run = make_run("A", "B", "C")
        with pytest.raises(ValueError):
            move_task(run, by_name(run, "C").id, "sideways")

    def test_pending_position(self, make_run, by_name):
        run = make_run("A", "B", "C")
        assert pending_position(run, by_name(run, "C").id) == 1
        assert pending_position(run, by_name(run, "A").id) is None


class TestAddQuickTask:
    def test_inserted_right_after_active(self, make_run, ids):
        run = make_run("A", "B", "C")
        added = add_quick_task(run, "Water plants", 3 * MINUTE_MS, id_factory=ids)
        assert _pending_names(added) == ["Water plants", "B", "C"]
        quick = added.pending_tasks()[0]
        assert quick.duration_ms == 3 * MINUTE_MS
        assert quick.started_at is None and quick.auto_advance is False
        assert [t.order for t in added.tasks] == [0, 1, 2, 3]

    def test_quick_task_runs_next(self, make_run, ids, t0):
        run = add_quick_task(make_run("A", "B"), "Quick", MINUTE_MS, id_factory=ids)
        assert advance(run, t0).run.active_task.name == "Quick"

    def test_added_to_not_started_run_goes_first(self, make_run, ids):
        run = add_quick_task(make_run("A", "B", started=False), "Warmup", MINUTE_MS, id_factory=ids)
        assert _pending_names(run) == ["Warmup", "A", "B"]

    @pytest.mark.parametrize("finish", ["complete", "abandon"])
    def test_finished_run_refuses_new_tasks(self, make_run, ids, t0, finish):
        run = make_run("A")
        finished = advance(run, t0).run if finish == "complete" else end(run, t0)
        assert finished.status.is_terminal
        with pytest.raises(InvalidTransition):
            add_quick_task(finished, "Late", MINUTE_MS, id_factory=ids)
        assert finished.pending_tasks() == []


def test_abandoned_run_cannot_be_reordered(make_run, by_name, t0):
    abandoned = end(make_run("A", "B", "C"), t0)
    assert abandoned.status == RunStatus.ABANDONED
    with pytest.raises(InvalidTransition):
        move_task(abandoned, by_name(abandoned, "B").id, "end")
