"""Host polling loop for a running routine.

A UI polls roughly once per second; :class:`RunTicker` is that poll. Each
tick reads the timer for the active task, decides which thresholds were
crossed and returns the updated snapshot (announcement flags recorded) with
the effects to dispatch. It never performs I/O itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Tuple

from core import Effect, Run, RunStatus, advance, check_overtime_reminder, compute_remaining_time
from core.clock import resolve_now
from core.milestones import (
    check_time_milestone,
    should_announce_time_up,
    should_auto_advance,
    should_warn_auto_advance,
)
from core.timer import TimeRemaining
from core.transitions import (
    mark_auto_advance_warning_announced,
    mark_milestone_in_run,
    mark_overtime_in_run,
    mark_time_up_announced,
)

logger = logging.getLogger("routine_run.ticker")


@dataclass(frozen=True)
class TickSettings:
    milestone_interval: int = 5
    milestones: bool = True
    overtime_reminders: bool = True


class TickResult(NamedTuple):
    run: Optional[Run]
    effects: Tuple[Effect, ...] = ()
    time_remaining: Optional[TimeRemaining] = None
    advanced: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.effects) or self.advanced


class RunTicker:
    def __init__(self, settings: Optional[TickSettings] = None):
        self.settings = settings or TickSettings()

    def tick(self, run: Optional[Run], now: Optional[int] = None) -> TickResult:
        if run is None or run.status != RunStatus.RUNNING:
            return TickResult(run)
        task = run.active_task
        if task is None:
            return TickResult(run)
        now = resolve_now(now)
        remaining = compute_remaining_time(task, now=now)
        if remaining is None:
            return TickResult(run)

        effects: List[Effect] = []
        updated = run

        next_task = run.next_pending_task()
        if should_warn_auto_advance(task, remaining, has_next=next_task is not None):
            effects.append(Effect.auto_advance_warning(task.id, task.name, next_task.name))
            updated = mark_auto_advance_warning_announced(updated, task.id)

        if should_announce_time_up(task, remaining):
            effects.append(Effect.time_up(task.id, task.name))
            updated = mark_time_up_announced(updated, task.id)

        if self.settings.overtime_reminders:
            minutes = check_overtime_reminder(task, remaining)
            if minutes is not None:
                effects.append(Effect.overtime_reminder(task.id, task.name, minutes))
                updated = mark_overtime_in_run(updated, task.id, minutes)

        if self.settings.milestones:
            milestone = check_time_milestone(task, remaining, self.settings.milestone_interval)
            if milestone is not None:
                effects.append(Effect.time_milestone(task.id, task.name, milestone))
                updated = mark_milestone_in_run(updated, task.id, milestone)

        if should_auto_advance(task, remaining):
            logger.info("Auto-advancing past %s", task.name)
            transition = advance(updated, now)
            effects.extend(transition.effects)
            return TickResult(transition.run, tuple(effects), remaining, advanced=True)

        return TickResult(updated, tuple(effects), remaining)
