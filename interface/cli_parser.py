"""CLI parser construction for the routine runner."""

import argparse
from typing import Any

from core.duration import Duration
from core.reordering import POSITIONS


def build_parser(commands: Any) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="routine",
        description="routine: run timed routines task by task",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="store_true", help="Show version and exit")

    def add_replace_arg(sp):
        sp.add_argument("--replace", action="store_true", help="replace an unfinished current run")
        return sp

    sub = parser.add_subparsers(dest="command", help="Commands")

    # start
    sp = sub.add_parser("start", help="Start a routine from a YAML/JSON template")
    sp.add_argument("template", help="path to the template file")
    sp.add_argument("--pace", choices=["low", "steady", "flow"], help="pace filter (default from config)")
    add_replace_arg(sp)
    sp.set_defaults(func=commands.cmd_start)

    # focus
    fp = sub.add_parser("focus", help="Run a single item as a one-task routine")
    fp.add_argument("title")
    fp.add_argument(
        "--duration",
        "-d",
        help=f"estimated duration, e.g. {', '.join(repr(d.value) for d in Duration)} or '~20 min'",
    )
    fp.add_argument("--subtask", "-s", action="append", help="checklist entry (repeatable)")
    add_replace_arg(fp)
    fp.set_defaults(func=commands.cmd_focus)

    sub.add_parser("status", help="Show the current run").set_defaults(func=commands.cmd_status)
    sub.add_parser("pause", help="Pause the running routine").set_defaults(func=commands.cmd_pause)
    sub.add_parser("resume", help="Resume a paused routine").set_defaults(func=commands.cmd_resume)
    sub.add_parser("done", help="Complete the active task and start the next").set_defaults(func=commands.cmd_done)

    # skip
    kp = sub.add_parser("skip", help="Skip the active task or a pending one")
    kp.add_argument("task", nargs="?", help="task id, 1-based position or name")
    kp.set_defaults(func=commands.cmd_skip)

    # extend
    ep = sub.add_parser("extend", help="Give a task fresh time counted from now")
    ep.add_argument("minutes", type=float)
    ep.add_argument("--task", "-t", help="task id, 1-based position or name (default: active)")
    ep.set_defaults(func=commands.cmd_extend)

    # move
    mp = sub.add_parser("move", help="Reorder a pending task")
    mp.add_argument("task", help="task id, 1-based position or name")
    mp.add_argument("position", help=f"{'|'.join(POSITIONS)} or a 0-based queue index")
    mp.set_defaults(func=commands.cmd_move)

    # add
    ap = sub.add_parser("add", help="Insert a quick task right after the active one")
    ap.add_argument("name")
    ap.add_argument("--minutes", "-m", type=float, default=5.0)
    ap.set_defaults(func=commands.cmd_add)

    # auto
    up = sub.add_parser("auto", help="Toggle auto-advance for a task")
    up.add_argument("task", nargs="?", help="task id, 1-based position or name (default: active)")
    up.set_defaults(func=commands.cmd_auto)

    # check
    cp = sub.add_parser("check", help="Toggle a subtask checkbox")
    cp.add_argument("task", help="task id, 1-based position or name")
    cp.add_argument("subtask", help="subtask id, 1-based position or text")
    cp.set_defaults(func=commands.cmd_check)

    sub.add_parser("end", help="Abandon the current run").set_defaults(func=commands.cmd_end)
    sub.add_parser("clear", help="Forget the current run").set_defaults(func=commands.cmd_clear)
    sub.add_parser("tick", help="Evaluate timers once and deliver due announcements").set_defaults(func=commands.cmd_tick)

    # watch
    wp = sub.add_parser("watch", help="Poll timers until the run finishes")
    wp.add_argument("--interval", type=float, default=1.0, help="seconds between ticks")
    wp.add_argument("--max-ticks", type=int, dest="max_ticks")
    wp.set_defaults(func=commands.cmd_watch)

    # config
    gp = sub.add_parser("config", help="Show or change settings")
    gp.add_argument("key", nargs="?")
    gp.add_argument("value", nargs="?")
    gp.set_defaults(func=commands.cmd_config)

    return parser
