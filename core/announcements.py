"""Supportive announcement phrasing for run effects.

Phrases are picked at random from small pools so repeated routines do not
sound robotic. Pass a seeded :class:`random.Random` for deterministic output.
"""

import random
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from .effects import (
    Effect,
    EFFECT_AUTO_ADVANCE_WARNING,
    EFFECT_OVERTIME_REMINDER,
    EFFECT_ROUTINE_COMPLETE,
    EFFECT_TASK_SKIPPED,
    EFFECT_TASK_TRANSITION,
    EFFECT_TIME_MILESTONE,
    EFFECT_TIME_UP,
)


@dataclass(frozen=True)
class Message:
    speech: str
    display: str
    title: str = ""


COMPLETION_PHRASES = (
    "{done} is done",
    "You finished {done}",
    "{done} is complete",
    "You did it. {done} is finished",
    "{done} is behind you now",
)
COMPLETION_NEXT_PHRASES = (
    "Time to move on to {next}",
    "Let's move on to {next}",
    "Now it's time for {next}",
    "Ready for {next}",
    "{next} is next",
)
SKIP_PHRASES = (
    "It's okay. We're moving past {skipped}",
    "No problem. {skipped} can wait",
    "That's fine. We're skipping {skipped}",
    "{skipped} is skipped. That's alright",
)
SKIP_NEXT_PHRASES = (
    "Let's focus on {next} instead",
    "Time for {next}",
    "Moving on to {next}",
    "{next} is next",
)
ROUTINE_COMPLETE_PHRASES = (
    ("You did it", "Your routine is complete", "Well done"),
    ("All done", "You made it through", "Great job"),
    ("Your routine is finished", "You did great today"),
    ("That's everything", "You completed your routine", "Be proud"),
)
FOCUS_COMPLETE_PHRASES = (
    ("Focus session complete", "Nice work"),
    ("You stayed with it", "That task is done"),
    ("Done", "You showed up for this one"),
)
MILESTONE_PHRASES = (
    "{minutes} minutes have passed on {task}",
    "You've been on {task} for {minutes} minutes",
    "{minutes} minutes into {task}",
    "It's been {minutes} minutes on {task}",
)
ENCOURAGEMENT_PHRASES = (
    "You're doing fine",
    "Keep going at your own pace",
    "You're doing great",
    "No rush, take your time",
    "You've got this",
)
OVERTIME_PHRASES = (
    "{task} is {minutes} minutes over time",
    "You're {minutes} minutes over on {task}. Finish when you're ready",
)
TIME_UP_PHRASES = (
    "Time is up for {task}",
    "{task} has reached its planned time",
)
WARNING_PHRASES = (
    "1 minute remaining on {task}",
    "{task} has 1 minute left",
    "1 more minute on {task}",
)
WARNING_NEXT_PHRASES = (
    "We'll move to {next} next",
    "{next} is up next",
    "Then it's time for {next}",
)


def _two_part(first: str, second: str, title: str) -> Message:
    return Message(speech=f"{first}. {second}.", display=f"{first}.\n\n{second}.", title=title)


def _sentences(parts: Sequence[str], title: str) -> Message:
    return Message(
        speech=" ".join(f"{p}." for p in parts),
        display="\n\n".join(f"{p}." for p in parts),
        title=title,
    )


class PhraseAnnouncer:
    """Default announcer: effect -> :class:`Message`."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def _pick(self, pool: Sequence, **values) -> str:
        template = self.rng.choice(pool)
        return template.format(**values)

    def message_for(self, effect: Effect) -> Message:
        data: Dict = effect.data
        if effect.kind == EFFECT_TASK_TRANSITION:
            return _two_part(
                self._pick(COMPLETION_PHRASES, done=data.get("completed", "Task")),
                self._pick(COMPLETION_NEXT_PHRASES, next=data.get("next", "")),
                title="Task complete",
            )
        if effect.kind == EFFECT_TASK_SKIPPED:
            return _two_part(
                self._pick(SKIP_PHRASES, skipped=data.get("skipped", "Task")),
                self._pick(SKIP_NEXT_PHRASES, next=data.get("next", "")),
                title="Task skipped",
            )
        if effect.kind == EFFECT_ROUTINE_COMPLETE:
            pool = FOCUS_COMPLETE_PHRASES if data.get("single_item") else ROUTINE_COMPLETE_PHRASES
            return _sentences(self.rng.choice(pool), title="Routine complete")
        if effect.kind == EFFECT_TIME_MILESTONE:
            return _two_part(
                self._pick(MILESTONE_PHRASES, task=data.get("task", ""), minutes=data.get("minutes", 0)),
                self.rng.choice(ENCOURAGEMENT_PHRASES),
                title="Time check",
            )
        if effect.kind == EFFECT_OVERTIME_REMINDER:
            text = self._pick(OVERTIME_PHRASES, task=data.get("task", ""), minutes=data.get("minutes", 0))
            return Message(speech=text, display=text, title="Overtime")
        if effect.kind == EFFECT_TIME_UP:
            text = self._pick(TIME_UP_PHRASES, task=data.get("task", ""))
            return Message(speech=text, display=text, title="Time is up")
        if effect.kind == EFFECT_AUTO_ADVANCE_WARNING:
            return _two_part(
                self._pick(WARNING_PHRASES, task=data.get("task", "")),
                self._pick(WARNING_NEXT_PHRASES, next=data.get("next", "")),
                title="1 minute left",
            )
        text = f"{effect.kind}: {data}"
        return Message(speech=text, display=text, title=effect.kind)
