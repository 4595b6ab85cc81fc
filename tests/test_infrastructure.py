import io
import json

import pytest
import yaml

from core import Pace, RunStatus, TemplateError, create_run_from_template
from core.clock import MINUTE_MS
from infrastructure.console_outputs import ConsoleNotifier, ConsoleSpeaker
from infrastructure.run_state_store import RUN_FILENAME, FileRunStore
from infrastructure.template_file_parser import TemplateFileParser


class TestFileRunStore:
    def test_load_missing_returns_none(self, tmp_path):
        assert FileRunStore(tmp_path / "state").load() is None

    def test_save_and_load(self, tmp_path, make_run):
        store = FileRunStore(tmp_path / "state")
        run = make_run("A", "B")
        store.save(run)
        path = tmp_path / "state" / RUN_FILENAME
        assert path.exists()
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert data["status"] == "running"
        assert data["tasks"][0]["name"] == "A"
        assert store.load() == run

    def test_clear(self, tmp_path, make_run):
        store = FileRunStore(tmp_path)
        store.save(make_run("A"))
        assert store.clear() is True
        assert store.load() is None
        assert store.clear() is False

    def test_corrupt_snapshot_is_ignored(self, tmp_path, caplog):
        (tmp_path / RUN_FILENAME).write_text("tasks: [unclosed", encoding="utf-8")
        assert FileRunStore(tmp_path).load() is None
        assert "Cannot read run snapshot" in caplog.text

    def test_bad_status_is_ignored(self, tmp_path):
        (tmp_path / RUN_FILENAME).write_text(yaml.safe_dump({"id": "r", "status": "exploded"}), encoding="utf-8")
        assert FileRunStore(tmp_path).load() is None


class TestTemplateFileParser:
    def test_yaml_template_with_duration_shorthands(self, tmp_path):
        path = tmp_path / "morning.yaml"
        path.write_text(
            """
name: Morning
tasks:
  - name: Wake up
    minutes: 2
    lowSafe: true
  - name: Shower
    duration: "~10 min"
    subtasks: [Soap, Towel]
  - name: Run
    durationMs: 1200000
    flowExtra: true
    autoAdvance: true
""",
            encoding="utf-8",
        )
        template = TemplateFileParser.load(path)
        assert template.id == "morning"
        assert template.name == "Morning"
        assert [t.duration_ms for t in template.tasks] == [2 * MINUTE_MS, 10 * MINUTE_MS, 20 * MINUTE_MS]
        assert [t.order for t in template.tasks] == [0, 1, 2]
        assert template.tasks[0].low_included is True
        assert template.tasks[2].flow_included is True and template.tasks[2].steady_included is False
        assert [s.text for s in template.tasks[1].subtasks] == ["Soap", "Towel"]
        assert template.tasks[2].auto_advance is True

    def test_json_template(self, tmp_path):
        path = tmp_path / "evening.json"
        path.write_text(json.dumps({"id": "ev", "name": "Evening", "tasks": [{"name": "Dishes"}]}), encoding="utf-8")
        template = TemplateFileParser.load(path)
        assert template.id == "ev"
        assert template.tasks[0].duration_ms == 15 * MINUTE_MS
        assert template.tasks[0].steady_included is True

    @pytest.mark.parametrize(
        "content",
        [
            "- just\n- a list\n",
            "name: Empty\ntasks: []\n",
            "name: X\ntasks:\n  - minutes: 3\n",
            "name: X\ntasks:\n  - name: A\n    durationMs: lots\n",
            "tasks: [unclosed",
        ],
    )
    def test_invalid_templates_raise(self, tmp_path, content):
        path = tmp_path / "bad.yaml"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(TemplateError):
            TemplateFileParser.load(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(TemplateError):
            TemplateFileParser.load(tmp_path / "nope.yaml")

    def test_loaded_template_builds_run(self, tmp_path, ids, t0):
        path = tmp_path / "r.yaml"
        path.write_text("name: R\ntasks:\n  - name: A\n  - name: B\n    lowSafe: true\n", encoding="utf-8")
        run = create_run_from_template(TemplateFileParser.load(path), Pace.LOW, now=t0, id_factory=ids)
        assert [t.name for t in run.tasks] == ["B"]
        assert run.status == RunStatus.NOT_STARTED


def test_console_outputs_write_to_stream():
    stream = io.StringIO()
    ConsoleSpeaker(stream).speak("Time for tea")
    ConsoleNotifier(stream).notify("Task complete", "Tea is done")
    lines = stream.getvalue().splitlines()
    assert lines[0].endswith("Time for tea")
    assert lines[1] == "[Task complete] Tea is done"
