import logging
from pathlib import Path
from typing import Optional

import yaml

from application.ports import RunStore
from core import Run

logger = logging.getLogger("routine_run.store")

RUN_FILENAME = "current_run.yaml"


class FileRunStore(RunStore):
    """Keeps the single current run as a YAML document in ``state_dir``."""

    def __init__(self, state_dir: Path):
        self.state_dir = Path(state_dir)

    @property
    def path(self) -> Path:
        return self.state_dir / RUN_FILENAME

    def load(self) -> Optional[Run]:
        path = self.path
        if not path.exists():
            return None
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            logger.warning("Cannot read run snapshot %s: %s", path, exc)
            return None
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed run snapshot %s", path)
            return None
        try:
            return Run.from_dict(data)
        except (TypeError, ValueError) as exc:
            logger.warning("Ignoring malformed run snapshot %s: %s", path, exc)
            return None

    def save(self, run: Run) -> None:
        path = self.path
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(yaml.safe_dump(run.to_dict(), allow_unicode=True, sort_keys=False), encoding="utf-8")
        tmp.replace(path)
        logger.debug("Saved run %s (%s)", run.id, run.status.value)

    def clear(self) -> bool:
        path = self.path
        if not path.exists():
            return False
        path.unlink()
        logger.debug("Cleared run snapshot %s", path)
        return True


class MemoryRunStore(RunStore):
    """In-process store used by tests and embedding hosts."""

    def __init__(self, run: Optional[Run] = None):
        self.run = run
        self.saves = 0

    def load(self) -> Optional[Run]:
        return self.run

    def save(self, run: Run) -> None:
        self.run = run
        self.saves += 1

    def clear(self) -> bool:
        existed = self.run is not None
        self.run = None
        return existed


__all__ = ["FileRunStore", "MemoryRunStore", "RUN_FILENAME"]
