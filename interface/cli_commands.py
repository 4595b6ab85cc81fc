from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from application.run_service import NoCurrentRun, RunService
from core import EFFECT_ROUTINE_COMPLETE, Item, Pace, Run, RunEngineError, RunTask, Template, TaskNotFound, TemplateError
from core.duration import minutes_to_ms
from core.milestones import MILESTONE_INTERVALS
from core.reordering import pending_position
from core.run_factory import new_id
from interface.cli_io import structured_error, structured_response


ServiceFactory = Callable[[], RunService]
Translate = Callable[..., str]


@dataclass
class CliDeps:
    service_factory: ServiceFactory
    load_template: Callable[[Path], Template]
    translate: Translate
    run_to_dict: Callable[[Run], Dict[str, Any]]
    default_pace: Callable[[], str]
    get_setting: Callable[[str], Any]
    set_setting: Callable[[str, Any], None]


def _engine_error(command: str, exc: Exception, deps: CliDeps) -> int:
    if isinstance(exc, RunEngineError):
        message = deps.translate(exc.code, message=exc.message, **exc.details)
        return structured_error(command, message, code=exc.code, payload=exc.details)
    if isinstance(exc, TemplateError):
        return structured_error(command, deps.translate(exc.code, detail=str(exc)), code=exc.code)
    return structured_error(command, str(exc))


def _summary(run: Run, deps: CliDeps) -> str:
    counts = run.counts()
    return deps.translate(
        "SUMMARY_COUNTS",
        completed=counts["completed"] + counts["skipped"],
        total=counts["total"],
        pending=counts["pending"],
    )


def _respond(command: str, run: Run, message: str, deps: CliDeps, service: Optional[RunService] = None, **extra) -> int:
    payload: Dict[str, Any] = {"run": deps.run_to_dict(run)}
    if service is not None and service.last_deliveries:
        payload["effects"] = [d.to_dict() for d in service.last_deliveries]
    payload.update(extra)
    return structured_response(command, status="OK", message=message, payload=payload, summary=_summary(run, deps))


def resolve_task(run: Run, ref: str) -> RunTask:
    """Find a task by id, 1-based position or case-insensitive name."""
    ref = str(ref).strip()
    task = run.find_task(ref)
    if task is not None:
        return task
    ordered = sorted(run.tasks, key=lambda t: t.order)
    if ref.isdigit() and 1 <= int(ref) <= len(ordered):
        return ordered[int(ref) - 1]
    lowered = ref.lower()
    for candidate in ordered:
        if candidate.name.lower() == lowered:
            return candidate
    raise TaskNotFound(ref)


def _resolve_subtask_id(task: RunTask, ref: str) -> Optional[str]:
    subtasks = sorted(task.subtasks or (), key=lambda s: s.order)
    for st in subtasks:
        if st.id == ref:
            return st.id
    if ref.isdigit() and 1 <= int(ref) <= len(subtasks):
        return subtasks[int(ref) - 1].id
    lowered = ref.lower()
    for st in subtasks:
        if st.text.lower() == lowered:
            return st.id
    return None


def _current(service: RunService) -> Run:
    run = service.current()
    if run is None:
        raise NoCurrentRun()
    return run


def cmd_start(args, deps: CliDeps) -> int:
    service = deps.service_factory()
    pace_raw = getattr(args, "pace", None) or deps.default_pace()
    try:
        template = deps.load_template(Path(args.template))
        pace = Pace.from_string(pace_raw)
        run = service.begin_from_template(template, pace, replace_existing=bool(getattr(args, "replace", False)))
    except TemplateError as exc:
        return _engine_error("start", exc, deps)
    except ValueError:
        return structured_error("start", deps.translate("ERR_INVALID_PACE", pace=pace_raw), code="ERR_INVALID_PACE")
    except RunEngineError as exc:
        return _engine_error("start", exc, deps)
    return _respond("start", run, deps.translate("MSG_RUN_STARTED", name=run.template_name, count=len(run.tasks)), deps)


def cmd_focus(args, deps: CliDeps) -> int:
    service = deps.service_factory()
    item = Item(
        id=new_id("item"),
        title=args.title,
        estimated_duration=getattr(args, "duration", None),
        subtasks=list(getattr(args, "subtask", None) or []),
    )
    try:
        run = service.begin_from_item(item, replace_existing=bool(getattr(args, "replace", False)))
    except RunEngineError as exc:
        return _engine_error("focus", exc, deps)
    return _respond("focus", run, deps.translate("MSG_FOCUS_STARTED", name=item.title), deps)


def cmd_status(args, deps: CliDeps) -> int:
    service = deps.service_factory()
    run = service.current()
    if run is None:
        return structured_response("status", status="OK", message=deps.translate("MSG_NO_RUN"), payload={"run": None})
    return _respond("status", run, deps.translate("MSG_STATUS", status=run.status.value), deps)


def cmd_pause(args, deps: CliDeps) -> int:
    service = deps.service_factory()
    try:
        run = service.pause()
    except RunEngineError as exc:
        return _engine_error("pause", exc, deps)
    return _respond("pause", run, deps.translate("MSG_PAUSED"), deps)


def cmd_resume(args, deps: CliDeps) -> int:
    service = deps.service_factory()
    try:
        run = service.resume()
    except RunEngineError as exc:
        return _engine_error("resume", exc, deps)
    return _respond("resume", run, deps.translate("MSG_RESUMED"), deps)


def cmd_done(args, deps: CliDeps) -> int:
    service = deps.service_factory()
    try:
        transition = service.advance()
    except RunEngineError as exc:
        return _engine_error("done", exc, deps)
    run = transition.run
    if transition.first(EFFECT_ROUTINE_COMPLETE) is not None:
        message = deps.translate("MSG_ROUTINE_COMPLETE")
    else:
        message = deps.translate("MSG_ADVANCED", task=run.active_task.name if run.active_task else "")
    return _respond("done", run, message, deps, service)


def cmd_skip(args, deps: CliDeps) -> int:
    service = deps.service_factory()
    try:
        before = _current(service)
        task = resolve_task(before, args.task) if getattr(args, "task", None) else before.active_task
        transition = service.skip(task.id if task else None)
    except RunEngineError as exc:
        return _engine_error("skip", exc, deps)
    if transition.first(EFFECT_ROUTINE_COMPLETE) is not None:
        message = deps.translate("MSG_ROUTINE_COMPLETE")
    else:
        message = deps.translate("MSG_SKIPPED", task=task.name)
    return _respond("skip", transition.run, message, deps, service)


def cmd_extend(args, deps: CliDeps) -> int:
    service = deps.service_factory()
    try:
        task_id = None
        if getattr(args, "task", None):
            task_id = resolve_task(_current(service), args.task).id
        run = service.extend(minutes_to_ms(args.minutes), task_id)
    except RunEngineError as exc:
        return _engine_error("extend", exc, deps)
    task = run.find_task(task_id) if task_id else run.active_task
    minutes = int(args.minutes) if float(args.minutes).is_integer() else args.minutes
    return _respond("extend", run, deps.translate("MSG_EXTENDED", task=task.name if task else "", minutes=minutes), deps)


def cmd_move(args, deps: CliDeps) -> int:
    service = deps.service_factory()
    try:
        current = _current(service)
        task = resolve_task(current, args.task)
        run = service.move(task.id, args.position)
    except RunEngineError as exc:
        return _engine_error("move", exc, deps)
    except ValueError:
        return structured_error("move", deps.translate("ERR_INVALID_POSITION", position=args.position), code="ERR_INVALID_POSITION")
    if run == current:
        return _respond("move", run, deps.translate("MSG_MOVE_NOOP"), deps, moved=False, position=pending_position(run, task.id))
    return _respond("move", run, deps.translate("MSG_MOVED", task=task.name, position=args.position), deps, moved=True, position=pending_position(run, task.id))


def cmd_add(args, deps: CliDeps) -> int:
    service = deps.service_factory()
    try:
        run = service.add_quick_task(args.name, minutes_to_ms(args.minutes))
    except RunEngineError as exc:
        return _engine_error("add", exc, deps)
    return _respond("add", run, deps.translate("MSG_TASK_ADDED", task=args.name), deps)


def cmd_auto(args, deps: CliDeps) -> int:
    service = deps.service_factory()
    try:
        task_id = None
        if getattr(args, "task", None):
            task_id = resolve_task(_current(service), args.task).id
        run = service.toggle_auto_advance(task_id)
    except RunEngineError as exc:
        return _engine_error("auto", exc, deps)
    task = run.find_task(task_id) if task_id else run.active_task
    key = "MSG_AUTO_ON" if task is not None and task.auto_advance else "MSG_AUTO_OFF"
    return _respond("auto", run, deps.translate(key, task=task.name if task else ""), deps)


def cmd_check(args, deps: CliDeps) -> int:
    service = deps.service_factory()
    try:
        task = resolve_task(_current(service), args.task)
        subtask_id = _resolve_subtask_id(task, str(args.subtask).strip())
        if subtask_id is None:
            return structured_error("check", deps.translate("ERR_SUBTASK_NOT_FOUND", subtask=args.subtask), code="ERR_SUBTASK_NOT_FOUND")
        run = service.toggle_subtask(task.id, subtask_id)
    except RunEngineError as exc:
        return _engine_error("check", exc, deps)
    updated = next(st for st in run.find_task(task.id).subtasks if st.id == subtask_id)
    state = deps.translate("STATE_CHECKED" if updated.checked else "STATE_UNCHECKED")
    return _respond("check", run, deps.translate("MSG_SUBTASK_TOGGLED", subtask=updated.text, state=state), deps)


def cmd_end(args, deps: CliDeps) -> int:
    service = deps.service_factory()
    try:
        run = service.end()
    except RunEngineError as exc:
        return _engine_error("end", exc, deps)
    return _respond("end", run, deps.translate("MSG_ENDED"), deps)


def cmd_clear(args, deps: CliDeps) -> int:
    service = deps.service_factory()
    cleared = service.clear()
    key = "MSG_CLEARED" if cleared else "MSG_NOTHING_TO_CLEAR"
    return structured_response("clear", status="OK", message=deps.translate(key), payload={"cleared": cleared})


def cmd_tick(args, deps: CliDeps) -> int:
    service = deps.service_factory()
    result = service.tick()
    if result.run is None:
        return structured_response("tick", status="OK", message=deps.translate("MSG_NO_RUN"), payload={"run": None})
    return _respond("tick", result.run, deps.translate("MSG_TICK", count=len(result.effects)), deps, service)


def cmd_watch(args, deps: CliDeps) -> int:
    service = deps.service_factory()
    effects: List[Dict[str, Any]] = []
    ticks = 0

    def collect(result) -> None:
        nonlocal ticks
        ticks += 1
        effects.extend(d.to_dict() for d in service.last_deliveries)

    try:
        _, run = service.watch(
            float(getattr(args, "interval", None) or 1.0),
            max_ticks=getattr(args, "max_ticks", None),
            on_tick=collect,
        )
    except KeyboardInterrupt:
        run = service.current()
    if run is None:
        return structured_response("watch", status="OK", message=deps.translate("MSG_NO_RUN"), payload={"run": None})
    return _respond("watch", run, deps.translate("MSG_WATCH_DONE", ticks=ticks), deps, ticks=ticks, effects=effects)


SETTING_PARSERS: Dict[str, Callable[[str], Any]] = {
    "state_dir": str,
    "default_pace": lambda raw: Pace.from_string(raw).value,
    "milestone_interval": lambda raw: _choice_int(raw, MILESTONE_INTERVALS),
    "milestones": lambda raw: _bool(raw),
    "overtime_reminders": lambda raw: _bool(raw),
    "voice": lambda raw: _bool(raw),
    "notifications": lambda raw: _bool(raw),
    "lang": str,
    "log_level": lambda raw: raw.strip().upper(),
}


def _choice_int(raw: str, choices) -> int:
    value = int(raw)
    if value not in choices:
        raise ValueError(raw)
    return value


def _bool(raw: str) -> bool:
    token = raw.strip().lower()
    if token in {"1", "true", "yes", "on"}:
        return True
    if token in {"0", "false", "no", "off"}:
        return False
    raise ValueError(raw)


def cmd_config(args, deps: CliDeps) -> int:
    key = getattr(args, "key", None)
    value = getattr(args, "value", None)
    if key is None:
        settings = {name: deps.get_setting(name) for name in SETTING_PARSERS}
        return structured_response("config", status="OK", message=deps.translate("MSG_CONFIG"), payload={"settings": settings})
    if key not in SETTING_PARSERS:
        return structured_error("config", deps.translate("ERR_UNKNOWN_SETTING", setting=key), code="ERR_UNKNOWN_SETTING")
    if value is None:
        return structured_response("config", status="OK", message=deps.translate("MSG_CONFIG"), payload={"settings": {key: deps.get_setting(key)}})
    try:
        parsed = SETTING_PARSERS[key](value)
    except ValueError:
        return structured_error("config", deps.translate("ERR_INVALID_VALUE", setting=key, value=value), code="ERR_INVALID_VALUE")
    deps.set_setting(key, parsed)
    return structured_response("config", status="OK", message=deps.translate("MSG_CONFIG_SET", setting=key), payload={"settings": {key: parsed}})
