"""Fire-and-forget delivery of run effects.

Dispatch happens after the new run snapshot is committed. A failing
announcer, speaker or notifier is logged and skipped; nothing raised here
ever reaches the state machine or the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from application.ports import Announcer, Notifier, Speaker
from core import Effect, EFFECT_OVERTIME_REMINDER, EFFECT_TIME_UP
from core.announcements import Message, PhraseAnnouncer

logger = logging.getLogger("routine_run.effects")

# Effects that are spoken but never pushed as notifications.
_SPEECH_ONLY = frozenset({EFFECT_OVERTIME_REMINDER, EFFECT_TIME_UP})


@dataclass
class Delivery:
    effect: Effect
    message: Optional[Message]
    spoken: bool = False
    notified: bool = False

    def to_dict(self) -> dict:
        return {
            "effect": self.effect.to_dict(),
            "message": self.message.display if self.message else None,
            "spoken": self.spoken,
            "notified": self.notified,
        }


class EffectDispatcher:
    def __init__(
        self,
        announcer: Optional[Announcer] = None,
        speaker: Optional[Speaker] = None,
        notifier: Optional[Notifier] = None,
        *,
        voice: bool = True,
        notifications: bool = True,
    ):
        self.announcer = announcer or PhraseAnnouncer()
        self.speaker = speaker
        self.notifier = notifier
        self.voice = voice
        self.notifications = notifications

    def _message(self, effect: Effect) -> Optional[Message]:
        try:
            return self.announcer.message_for(effect)
        except Exception as exc:
            logger.warning("Announcer failed for %s: %s", effect.kind, exc)
            return None

    def _speak(self, message: Message) -> bool:
        if not (self.voice and self.speaker):
            return False
        try:
            self.speaker.speak(message.speech)
            return True
        except Exception as exc:
            logger.warning("Speech failed: %s", exc)
            return False

    def _notify(self, effect: Effect, message: Message) -> bool:
        if not (self.notifications and self.notifier) or effect.kind in _SPEECH_ONLY:
            return False
        try:
            self.notifier.notify(message.title or effect.kind, message.display)
            return True
        except Exception as exc:
            logger.warning("Notification failed: %s", exc)
            return False

    def dispatch_one(self, effect: Effect) -> Delivery:
        message = self._message(effect)
        if message is None:
            return Delivery(effect, None)
        spoken = self._speak(message)
        notified = self._notify(effect, message)
        level = logging.INFO if effect.is_transition else logging.DEBUG
        logger.log(level, "Dispatched %s (spoken=%s notified=%s)", effect.kind, spoken, notified)
        return Delivery(effect, message, spoken=spoken, notified=notified)

    def dispatch(self, effects: Iterable[Effect]) -> List[Delivery]:
        return [self.dispatch_one(effect) for effect in effects]


__all__ = ["Delivery", "EffectDispatcher"]
