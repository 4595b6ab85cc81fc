"""Terminal stand-ins for speech and push notifications.

Both write to stderr by default so stdout stays reserved for the CLI's
JSON responses.
"""

import sys
from typing import Optional, TextIO


class ConsoleSpeaker:
    def __init__(self, stream: Optional[TextIO] = None, prefix: str = "🔊"):
        self.stream = stream
        self.prefix = prefix

    def speak(self, text: str) -> None:
        print(f"{self.prefix} {text}", file=self.stream or sys.stderr)


class ConsoleNotifier:
    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream

    def notify(self, title: str, body: str) -> None:
        print(f"[{title}] {body}", file=self.stream or sys.stderr)


__all__ = ["ConsoleNotifier", "ConsoleSpeaker"]
