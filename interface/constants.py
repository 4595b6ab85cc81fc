"""Interface-level constants for the routine CLI."""

LANG_PACK = {
    "en": {
        "MSG_RUN_STARTED": "Routine started: {name} ({count} tasks)",
        "MSG_FOCUS_STARTED": "Focus started: {name}",
        "MSG_STATUS": "Run is {status}",
        "MSG_NO_RUN": "No current run",
        "MSG_PAUSED": "Paused",
        "MSG_RESUMED": "Resumed",
        "MSG_ADVANCED": "Now: {task}",
        "MSG_ROUTINE_COMPLETE": "Routine complete",
        "MSG_SKIPPED": "Skipped {task}",
        "MSG_EXTENDED": "{task}: {minutes} min from now",
        "MSG_MOVED": "Moved {task} ({position})",
        "MSG_MOVE_NOOP": "Order unchanged",
        "MSG_TASK_ADDED": "Added {task}",
        "MSG_AUTO_ON": "Auto-advance on for {task}",
        "MSG_AUTO_OFF": "Auto-advance off for {task}",
        "MSG_SUBTASK_TOGGLED": "{subtask}: {state}",
        "MSG_ENDED": "Run ended",
        "MSG_CLEARED": "Current run cleared",
        "MSG_NOTHING_TO_CLEAR": "Nothing to clear",
        "MSG_TICK": "{count} effects",
        "MSG_WATCH_DONE": "Stopped after {ticks} ticks",
        "MSG_CONFIG": "Configuration",
        "MSG_CONFIG_SET": "{setting} updated",
        "STATE_CHECKED": "checked",
        "STATE_UNCHECKED": "unchecked",
        "SUMMARY_COUNTS": "{completed}/{total} done, {pending} pending",
        "ERR_RUN_ENGINE": "{message}",
        "ERR_INVALID_TRANSITION": "Cannot {action} a run that is {status}",
        "ERR_TASK_NOT_FOUND": "Task not found: {task_id}",
        "ERR_TASK_NOT_MOVABLE": "Task {task_id} is {status} and cannot be moved",
        "ERR_NO_CURRENT_RUN": "No current run. Start one with `routine start TEMPLATE`",
        "ERR_TEMPLATE_INVALID": "Invalid template: {detail}",
        "ERR_SUBTASK_NOT_FOUND": "Subtask not found: {subtask}",
        "ERR_INVALID_POSITION": "Invalid position: {position}",
        "ERR_INVALID_PACE": "Invalid pace: {pace}",
        "ERR_INVALID_VALUE": "Invalid value for {setting}: {value}",
        "ERR_UNKNOWN_SETTING": "Unknown setting: {setting}",
    },
    "ru": {
        "MSG_RUN_STARTED": "Рутина запущена: {name} ({count} задач)",
        "MSG_FOCUS_STARTED": "Фокус запущен: {name}",
        "MSG_STATUS": "Состояние: {status}",
        "MSG_NO_RUN": "Нет текущего запуска",
        "MSG_PAUSED": "Пауза",
        "MSG_RESUMED": "Продолжаем",
        "MSG_ADVANCED": "Сейчас: {task}",
        "MSG_ROUTINE_COMPLETE": "Рутина завершена",
        "MSG_SKIPPED": "Пропущено: {task}",
        "MSG_EXTENDED": "{task}: {minutes} мин. с текущего момента",
        "MSG_MOVED": "{task} перемещена ({position})",
        "MSG_MOVE_NOOP": "Порядок не изменился",
        "MSG_TASK_ADDED": "Добавлена задача {task}",
        "MSG_AUTO_ON": "Автопереход включён: {task}",
        "MSG_AUTO_OFF": "Автопереход выключен: {task}",
        "MSG_ENDED": "Запуск остановлен",
        "MSG_CLEARED": "Текущий запуск удалён",
        "MSG_NOTHING_TO_CLEAR": "Удалять нечего",
        "MSG_CONFIG": "Настройки",
        "MSG_CONFIG_SET": "{setting} обновлено",
        "STATE_CHECKED": "отмечено",
        "STATE_UNCHECKED": "не отмечено",
        "SUMMARY_COUNTS": "{completed}/{total} готово, осталось {pending}",
        "ERR_INVALID_TRANSITION": "Нельзя выполнить {action}: запуск в состоянии {status}",
        "ERR_TASK_NOT_FOUND": "Задача не найдена: {task_id}",
        "ERR_TASK_NOT_MOVABLE": "Задачу {task_id} ({status}) нельзя переместить",
        "ERR_NO_CURRENT_RUN": "Нет текущего запуска. Начните с `routine start TEMPLATE`",
        "ERR_TEMPLATE_INVALID": "Некорректный шаблон: {detail}",
        "ERR_INVALID_POSITION": "Некорректная позиция: {position}",
        "ERR_INVALID_PACE": "Некорректный темп: {pace}",
    },
}
