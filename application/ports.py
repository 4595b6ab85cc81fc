from typing import Optional, Protocol

from core import Effect, Run
from core.announcements import Message


class RunStore(Protocol):
    """Holds exactly one current run; there is no history."""

    def load(self) -> Optional[Run]:
        ...

    def save(self, run: Run) -> None:
        ...

    def clear(self) -> bool:
        ...


class Announcer(Protocol):
    def message_for(self, effect: Effect) -> Message:
        ...


class Speaker(Protocol):
    def speak(self, text: str) -> None:
        ...


class Notifier(Protocol):
    def notify(self, title: str, body: str) -> None:
        ...
