"""Application-level run service.

Every command follows the same sequence: load the current run from the
store, apply a pure engine transition, save the new snapshot, then dispatch
the transition's effects. Saving happens before dispatch, so a speaker or
notifier failure can never lose or corrupt state.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, List, Optional, Tuple

from application.effect_dispatcher import Delivery, EffectDispatcher
from application.ports import RunStore
from application.ticker import RunTicker, TickResult
from core import (
    Item,
    Pace,
    Run,
    RunEngineError,
    RunStatus,
    Template,
    Transition,
    add_quick_task,
    advance,
    create_run_from_item,
    create_run_from_template,
    end,
    extend,
    move_task,
    pause,
    resume,
    skip,
    start,
    toggle_auto_advance,
    toggle_subtask,
)
from core.clock import Clock, now_ms
from core.errors import InvalidTransition
from core.reordering import Position
from core.run_factory import IdFactory, new_id

logger = logging.getLogger("routine_run.service")


class NoCurrentRun(RunEngineError):
    code = "ERR_NO_CURRENT_RUN"

    def __init__(self):
        super().__init__("There is no current run")


class RunService:
    def __init__(
        self,
        store: RunStore,
        dispatcher: Optional[EffectDispatcher] = None,
        ticker: Optional[RunTicker] = None,
        *,
        clock: Clock = now_ms,
        id_factory: IdFactory = new_id,
    ):
        self.store = store
        self.dispatcher = dispatcher or EffectDispatcher()
        self.ticker = ticker or RunTicker()
        self.clock = clock
        self.id_factory = id_factory
        self.last_deliveries: List[Delivery] = []

    # ---- state access -------------------------------------------------

    def current(self) -> Optional[Run]:
        return self.store.load()

    def _require_run(self) -> Run:
        run = self.store.load()
        if run is None:
            raise NoCurrentRun()
        return run

    def _require_live_run(self, action: str) -> Run:
        run = self._require_run()
        if run.is_finished or run.status == RunStatus.NOT_STARTED:
            raise InvalidTransition(action, run.status.value)
        return run

    def _require_open_run(self, action: str) -> Run:
        run = self._require_run()
        if run.is_finished:
            raise InvalidTransition(action, run.status.value)
        return run

    def _commit(self, run: Run, effects=()) -> Run:
        self.store.save(run)
        self.last_deliveries = self.dispatcher.dispatch(effects) if effects else []
        return run

    def _commit_transition(self, transition: Transition) -> Transition:
        self._commit(transition.run, transition.effects)
        return transition

    # ---- creation -----------------------------------------------------

    def _replace_current(self, *, replace_existing: bool) -> None:
        existing = self.store.load()
        if existing is not None and not existing.is_finished and not replace_existing:
            raise InvalidTransition("replace", existing.status.value)
        if existing is not None:
            logger.info("Replacing run %s (%s)", existing.id, existing.status.value)

    def begin_from_template(
        self,
        template: Template,
        pace: Pace,
        *,
        autostart: bool = True,
        replace_existing: bool = False,
    ) -> Run:
        run = create_run_from_template(template, pace, now=self.clock(), id_factory=self.id_factory)
        self._replace_current(replace_existing=replace_existing)
        if autostart:
            run = start(run, self.clock())
        logger.info("Run %s created from template %s (%d tasks)", run.id, template.id, len(run.tasks))
        return self._commit(run)

    def begin_from_item(self, item: Item, *, autostart: bool = True, replace_existing: bool = False) -> Run:
        run = create_run_from_item(item, now=self.clock(), id_factory=self.id_factory)
        self._replace_current(replace_existing=replace_existing)
        if autostart:
            run = start(run, self.clock())
        logger.info("Run %s created from item %s", run.id, item.id)
        return self._commit(run)

    def clear(self) -> bool:
        return self.store.clear()

    # ---- lifecycle ----------------------------------------------------

    def start(self) -> Run:
        return self._commit(start(self._require_run(), self.clock()))

    def pause(self) -> Run:
        return self._commit(pause(self._require_run(), self.clock()))

    def resume(self) -> Run:
        return self._commit(resume(self._require_run(), self.clock()))

    def end(self) -> Run:
        run = end(self._require_run(), self.clock())
        logger.info("Run %s abandoned", run.id)
        return self._commit(run)

    # ---- task transitions ---------------------------------------------

    def advance(self) -> Transition:
        return self._commit_transition(advance(self._require_live_run("advance"), self.clock()))

    def skip(self, task_id: Optional[str] = None) -> Transition:
        run = self._require_live_run("skip")
        target = task_id or run.active_task_id
        if target is None:
            raise InvalidTransition("skip", run.status.value)
        return self._commit_transition(skip(run, target, self.clock()))

    def extend(self, delta_ms: int, task_id: Optional[str] = None) -> Run:
        run = self._require_live_run("extend")
        target = task_id or run.active_task_id
        if target is None:
            raise InvalidTransition("extend", run.status.value)
        return self._commit(extend(run, target, delta_ms, self.clock()))

    def move(self, task_id: str, position: Position) -> Run:
        run = self._require_open_run("reorder")
        moved = move_task(run, task_id, position)
        if moved is run:
            return run
        return self._commit(moved)

    def add_quick_task(self, name: str, duration_ms: int) -> Run:
        run = add_quick_task(self._require_open_run("add a task to"), name, duration_ms, id_factory=self.id_factory)
        return self._commit(run)

    def toggle_auto_advance(self, task_id: Optional[str] = None) -> Run:
        run = self._require_open_run("toggle auto-advance on")
        target = task_id or run.active_task_id
        if target is None:
            raise InvalidTransition("toggle auto-advance on", run.status.value)
        return self._commit(toggle_auto_advance(run, target))

    def toggle_subtask(self, task_id: str, subtask_id: str) -> Run:
        return self._commit(toggle_subtask(self._require_open_run("check a subtask on"), task_id, subtask_id))

    # ---- polling ------------------------------------------------------

    def tick(self) -> TickResult:
        run = self.store.load()
        result = self.ticker.tick(run, self.clock())
        if result.changed and result.run is not None:
            self._commit(result.run, result.effects)
        else:
            self.last_deliveries = []
        return result

    def watch(
        self,
        interval: float = 1.0,
        *,
        max_ticks: Optional[int] = None,
        stop: Optional[threading.Event] = None,
        on_tick: Optional[Callable[[TickResult], None]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> Tuple[int, Optional[Run]]:
        """Tick until the run finishes, ``max_ticks`` is reached or ``stop`` is set.

        Returns the number of ticks performed and the last run snapshot.
        """
        ticks = 0
        last: Optional[Run] = self.store.load()
        while True:
            if stop is not None and stop.is_set():
                break
            if max_ticks is not None and ticks >= max_ticks:
                break
            result = self.tick()
            ticks += 1
            last = result.run
            if on_tick is not None:
                on_tick(result)
            if last is None or last.is_finished:
                break
            sleep(interval)
        return ticks, last
