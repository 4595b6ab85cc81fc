"""
routine: wiring for the routine runner CLI.

Builds the run service from user configuration and dispatches parsed
commands to :mod:`interface.cli_commands`.
"""

import logging
import sys
from importlib.metadata import PackageNotFoundError, version as pkg_version

import config
from application.effect_dispatcher import EffectDispatcher
from application.run_service import RunService
from application.ticker import RunTicker, TickSettings
from core.announcements import PhraseAnnouncer
from infrastructure.console_outputs import ConsoleNotifier, ConsoleSpeaker
from infrastructure.run_state_store import FileRunStore
from infrastructure.template_file_parser import TemplateFileParser
from interface import cli_commands
from interface.cli_parser import build_parser as build_cli_parser
from interface.i18n import translate
from interface.serializers import run_to_dict


def configure_logging() -> None:
    level = getattr(logging, config.get_log_level(), logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)


def build_service() -> RunService:
    dispatcher = EffectDispatcher(
        PhraseAnnouncer(),
        ConsoleSpeaker(),
        ConsoleNotifier(),
        voice=config.get_flag("voice"),
        notifications=config.get_flag("notifications"),
    )
    ticker = RunTicker(
        TickSettings(
            milestone_interval=config.get_milestone_interval(),
            milestones=config.get_flag("milestones"),
            overtime_reminders=config.get_flag("overtime_reminders"),
        )
    )
    return RunService(FileRunStore(config.get_state_dir()), dispatcher, ticker)


def build_deps() -> cli_commands.CliDeps:
    return cli_commands.CliDeps(
        service_factory=build_service,
        load_template=TemplateFileParser.load,
        translate=translate,
        run_to_dict=run_to_dict,
        default_pace=config.get_default_pace,
        get_setting=config.get_setting,
        set_setting=config.set_setting,
    )


def build_parser():
    return build_cli_parser(commands=cli_commands)


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if getattr(args, "version", False):
        try:
            print(pkg_version("routine-run"))
        except PackageNotFoundError:
            print("0.0.0")
        return 0
    if not getattr(args, "command", None):
        parser.print_help()
        return 1
    configure_logging()
    return args.func(args, build_deps())


if __name__ == "__main__":
    sys.exit(main())
