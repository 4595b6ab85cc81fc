import itertools
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core import Pace, Template, TemplateTask, create_run_from_template, start  # noqa: E402
from core.clock import MINUTE_MS  # noqa: E402

T0 = 1_700_000_000_000


def _counter_ids():
    counter = itertools.count(1)
    return lambda prefix: f"{prefix}-{next(counter)}"


@pytest.fixture
def t0():
    return T0


@pytest.fixture
def ids():
    return _counter_ids()


@pytest.fixture
def make_template():
    def _make(*names, minutes=5, template_id="morning", name="Morning", **task_fields):
        tasks = tuple(
            TemplateTask(
                id=f"tt-{idx}",
                name=task_name,
                duration_ms=minutes * MINUTE_MS,
                order=idx,
                low_included=True,
                steady_included=True,
                flow_included=True,
                **task_fields,
            )
            for idx, task_name in enumerate(names or ("A", "B"))
        )
        return Template(id=template_id, name=name, tasks=tasks)

    return _make


@pytest.fixture
def make_run(make_template, ids):
    """Build a run from task names; ``started=True`` starts it at ``now``."""

    def _make(*names, minutes=5, started=True, now=T0, pace=Pace.STEADY, **task_fields):
        template = make_template(*names, minutes=minutes, **task_fields)
        run = create_run_from_template(template, pace, now=now, id_factory=ids)
        return start(run, now) if started else run

    return _make


@pytest.fixture
def by_name():
    def _find(run, name):
        return next(t for t in run.tasks if t.name == name)

    return _find
