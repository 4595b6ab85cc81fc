from __future__ import annotations

import os
import yaml
from pathlib import Path
from typing import Any, Dict

DEFAULT_CONFIG_PATH = Path.home() / ".routine_run_config.yaml"
DEFAULT_STATE_DIR = Path.home() / ".routine_run"

DEFAULTS: Dict[str, Any] = {
    "default_pace": "steady",
    "milestone_interval": 5,
    "milestones": True,
    "overtime_reminders": True,
    "voice": True,
    "notifications": True,
    "lang": "en",
    "log_level": "WARNING",
}


def config_path() -> Path:
    env = os.getenv("ROUTINE_RUN_CONFIG")
    return Path(env).expanduser() if env else DEFAULT_CONFIG_PATH


def _load_config() -> Dict[str, Any]:
    path = config_path()
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError):
        return {}
    return data if isinstance(data, dict) else {}


def _save_config(data: Dict[str, Any]) -> None:
    path = config_path()
    if not data:
        if path.exists():
            path.unlink()
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data, allow_unicode=True), encoding="utf-8")


def get_setting(key: str) -> Any:
    return _load_config().get(key, DEFAULTS.get(key))


def set_setting(key: str, value: Any) -> None:
    data = _load_config()
    if value is None or value == "":
        data.pop(key, None)
    else:
        data[key] = value
    _save_config(data)


def get_state_dir() -> Path:
    env = os.getenv("ROUTINE_RUN_STATE_DIR")
    if env:
        return Path(env).expanduser()
    raw = _load_config().get("state_dir")
    return Path(str(raw)).expanduser() if raw else DEFAULT_STATE_DIR


def get_default_pace() -> str:
    return str(get_setting("default_pace") or "steady").strip().lower()


def get_milestone_interval() -> int:
    try:
        value = int(get_setting("milestone_interval"))
    except (TypeError, ValueError):
        return DEFAULTS["milestone_interval"]
    return value if value in (1, 5) else DEFAULTS["milestone_interval"]


def get_flag(key: str) -> bool:
    value = get_setting(key)
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def get_user_lang() -> str:
    env = os.getenv("ROUTINE_RUN_LANG")
    if env:
        return env.strip()
    return str(get_setting("lang") or "").strip()


def get_log_level() -> str:
    env = os.getenv("ROUTINE_RUN_LOG_LEVEL")
    return (env or str(get_setting("log_level") or "WARNING")).strip().upper()
