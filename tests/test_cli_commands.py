import json
from types import SimpleNamespace

import pytest

from application.effect_dispatcher import EffectDispatcher
from application.run_service import RunService
from core import TemplateError
from core.clock import MINUTE_MS
from infrastructure.run_state_store import MemoryRunStore
from interface import cli_commands as cmds
from interface.serializers import run_to_dict


class Clock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def env(make_template, ids, t0):
    store = MemoryRunStore()
    clock = Clock(t0)
    settings = {}
    templates = {"morning.yaml": make_template("Wake", "Shower", "Dress")}

    def load_template(path):
        try:
            return templates[path.name]
        except KeyError:
            raise TemplateError(f"Template not found: {path}") from None

    deps = cmds.CliDeps(
        service_factory=lambda: RunService(store, EffectDispatcher(), clock=clock, id_factory=ids),
        load_template=load_template,
        translate=lambda key, **kwargs: key,
        run_to_dict=lambda run: run_to_dict(run, clock()),
        default_pace=lambda: "steady",
        get_setting=lambda key: settings.get(key),
        set_setting=settings.__setitem__,
    )
    return SimpleNamespace(store=store, clock=clock, deps=deps, settings=settings)


def _call(capsys, func, deps, **args):
    rc = func(SimpleNamespace(**args), deps)
    body = json.loads(capsys.readouterr().out)
    return rc, body


def _start(capsys, env):
    return _call(capsys, cmds.cmd_start, env.deps, template="morning.yaml", pace=None, replace=False)


def test_start_prints_run(capsys, env):
    rc, body = _start(capsys, env)
    assert rc == 0
    assert body["command"] == "start"
    assert body["message"] == "MSG_RUN_STARTED"
    run = body["payload"]["run"]
    assert run["status"] == "running"
    assert run["view"]["activeTask"]["name"] == "Wake"
    assert run["view"]["timer"]["display"] == "5:00"
    assert [t["name"] for t in run["view"]["pending"]] == ["Shower", "Dress"]


def test_start_missing_template(capsys, env):
    rc, body = _call(capsys, cmds.cmd_start, env.deps, template="nope.yaml", pace=None, replace=False)
    assert rc == 1
    assert body["status"] == "ERROR"
    assert body["payload"]["code"] == "ERR_TEMPLATE_INVALID"


def test_start_twice_needs_replace(capsys, env):
    _start(capsys, env)
    rc, body = _start(capsys, env)
    assert rc == 1
    assert body["payload"]["code"] == "ERR_INVALID_TRANSITION"
    rc, _ = _call(capsys, cmds.cmd_start, env.deps, template="morning.yaml", pace="flow", replace=True)
    assert rc == 0


def test_focus_runs_single_item(capsys, env):
    rc, body = _call(capsys, cmds.cmd_focus, env.deps, title="Taxes", duration="~25 min", subtask=["Forms"], replace=False)
    assert rc == 0
    run = body["payload"]["run"]
    assert run["templateId"] == "optional-item"
    assert run["tasks"][0]["durationMs"] == 25 * MINUTE_MS
    assert run["view"]["activeTask"]["subtasks"][0]["text"] == "Forms"


def test_status_without_run(capsys, env):
    rc, body = _call(capsys, cmds.cmd_status, env.deps)
    assert rc == 0
    assert body["payload"]["run"] is None


def test_commands_without_run_report_error(capsys, env):
    rc, body = _call(capsys, cmds.cmd_pause, env.deps)
    assert rc == 1
    assert body["payload"]["code"] == "ERR_NO_CURRENT_RUN"


def test_done_reports_effects(capsys, env):
    _start(capsys, env)
    rc, body = _call(capsys, cmds.cmd_done, env.deps)
    assert rc == 0
    assert body["payload"]["run"]["view"]["activeTask"]["name"] == "Shower"
    assert body["payload"]["effects"][0]["effect"]["kind"] == "task_transition"
    assert body["summary"] == "SUMMARY_COUNTS"


def test_pause_twice_is_an_error(capsys, env):
    _start(capsys, env)
    assert _call(capsys, cmds.cmd_pause, env.deps)[0] == 0
    rc, body = _call(capsys, cmds.cmd_pause, env.deps)
    assert rc == 1
    assert body["payload"] == {"code": "ERR_INVALID_TRANSITION", "action": "pause", "status": "paused"}
    assert _call(capsys, cmds.cmd_resume, env.deps)[0] == 0


def test_skip_by_name_and_position(capsys, env):
    _start(capsys, env)
    rc, _ = _call(capsys, cmds.cmd_skip, env.deps, task="dress")
    assert rc == 0
    rc, body = _call(capsys, cmds.cmd_skip, env.deps, task=None)
    assert rc == 0
    statuses = [t["status"] for t in body["payload"]["run"]["tasks"]]
    assert statuses == ["skipped", "active", "skipped"]
    rc, body = _call(capsys, cmds.cmd_skip, env.deps, task="1")
    assert rc == 1
    assert body["payload"]["code"] == "ERR_TASK_NOT_MOVABLE"


def test_extend_active_task(capsys, env):
    _start(capsys, env)
    env.clock.now += 8 * MINUTE_MS
    rc, body = _call(capsys, cmds.cmd_extend, env.deps, minutes=5.0, task=None)
    assert rc == 0
    assert body["payload"]["run"]["view"]["timer"]["display"] == "5:00"


def test_move_and_noop(capsys, env):
    _start(capsys, env)
    rc, body = _call(capsys, cmds.cmd_move, env.deps, task="Dress", position="next")
    assert rc == 0
    assert body["payload"]["moved"] is True
    assert body["payload"]["position"] == 0
    assert [t["name"] for t in body["payload"]["run"]["view"]["pending"]] == ["Dress", "Shower"]
    rc, body = _call(capsys, cmds.cmd_move, env.deps, task="Dress", position="up")
    assert body["payload"]["moved"] is False
    rc, body = _call(capsys, cmds.cmd_move, env.deps, task="Dress", position="sideways")
    assert rc == 1
    assert body["message"] == "ERR_INVALID_POSITION"
    assert body["payload"] == {"code": "ERR_INVALID_POSITION"}
    rc, body = _call(capsys, cmds.cmd_move, env.deps, task="Wake", position="end")
    assert body["payload"]["code"] == "ERR_TASK_NOT_MOVABLE"


def test_add_auto_and_check(capsys, env):
    _call(capsys, cmds.cmd_focus, env.deps, title="Pack", duration=None, subtask=["Shoes", "Keys"], replace=False)
    rc, body = _call(capsys, cmds.cmd_add, env.deps, name="Water", minutes=2.0)
    assert rc == 0
    assert body["payload"]["run"]["view"]["pending"][0]["name"] == "Water"
    rc, body = _call(capsys, cmds.cmd_auto, env.deps, task=None)
    assert body["message"] == "MSG_AUTO_ON"
    rc, body = _call(capsys, cmds.cmd_check, env.deps, task="Pack", subtask="2")
    assert rc == 0
    assert [s["checked"] for s in body["payload"]["run"]["view"]["activeTask"]["subtasks"]] == [False, True]
    rc, body = _call(capsys, cmds.cmd_check, env.deps, task="Pack", subtask="Wallet")
    assert rc == 1


def test_end_and_clear(capsys, env):
    _start(capsys, env)
    rc, body = _call(capsys, cmds.cmd_end, env.deps)
    assert body["payload"]["run"]["status"] == "abandoned"
    rc, body = _call(capsys, cmds.cmd_end, env.deps)
    assert rc == 1
    rc, body = _call(capsys, cmds.cmd_clear, env.deps)
    assert body["payload"]["cleared"] is True
    rc, body = _call(capsys, cmds.cmd_clear, env.deps)
    assert body["payload"]["cleared"] is False


def test_tick_reports_time_up(capsys, env):
    _start(capsys, env)
    env.clock.now += 5 * MINUTE_MS
    rc, body = _call(capsys, cmds.cmd_tick, env.deps)
    assert rc == 0
    kinds = [e["effect"]["kind"] for e in body["payload"]["effects"]]
    assert "time_up" in kinds
    assert body["payload"]["run"]["tasks"][0]["timeUpAnnounced"] is True


def test_watch_with_max_ticks(capsys, env):
    _start(capsys, env)
    rc, body = _call(capsys, cmds.cmd_watch, env.deps, interval=0.01, max_ticks=2)
    assert rc == 0
    assert body["payload"]["ticks"] == 2


class TestConfigCommand:
    def test_show_all(self, capsys, env):
        rc, body = _call(capsys, cmds.cmd_config, env.deps, key=None, value=None)
        assert rc == 0
        assert set(body["payload"]["settings"]) == set(cmds.SETTING_PARSERS)

    def test_set_valid_values(self, capsys, env):
        assert _call(capsys, cmds.cmd_config, env.deps, key="milestone_interval", value="1")[0] == 0
        assert _call(capsys, cmds.cmd_config, env.deps, key="voice", value="off")[0] == 0
        assert env.settings == {"milestone_interval": 1, "voice": False}

    def test_rejects_bad_values(self, capsys, env):
        assert _call(capsys, cmds.cmd_config, env.deps, key="milestone_interval", value="3")[0] == 1
        assert _call(capsys, cmds.cmd_config, env.deps, key="default_pace", value="turbo")[0] == 1
        assert _call(capsys, cmds.cmd_config, env.deps, key="colour", value="red")[0] == 1
        assert env.settings == {}
