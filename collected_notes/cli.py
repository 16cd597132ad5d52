from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from .client import ApiError, CollectedNotesClient
from .config import ConfigurationError, load_settings


LOGGER_NAME = "collected_notes"
LOG_FILENAME = ".collected-notes.log"
DEBUG_LOG_FILENAME = ".collected-notes.debug.log"


@dataclass(frozen=True)
class Command:
    '''A subcommand and the client call it maps to'''

    name: str
    arguments: str
    min_args: int
    call: Callable[[CollectedNotesClient, List[str]], Any]

    @property
    def usage(self) -> str:
        return f"Usage: {self.name} {self.arguments}".rstrip()

    def paths(self, args: List[str]) -> List[str]:
        """Return only the site and note paths among the given arguments."""

        names = self.arguments.split()
        return [value for name, value in zip(names, args) if name in ("<site_path>", "<note_path>")]


def _optional(args: List[str], index: int) -> Optional[str]:
    return args[index] if len(args) > index else None


COMMANDS: Tuple[Command, ...] = (
    Command("get-sites", "", 0, lambda client, args: client.get_sites())
    ,Command("get-site", "<site_path>", 1, lambda client, args: client.get_site(args[0]))
    ,Command("create-site", "<site_path> <name>", 2, lambda client, args: client.create_site(args[0], args[1]))
    ,Command(
        "update-site"
        ,"<site_path> <name> [headline] [about] [domain]"
        ,2
        ,lambda client, args: client.update_site(
            args[0], args[1], _optional(args, 2), _optional(args, 3), _optional(args, 4)
        )
    )
    ,Command("delete-site", "<site_path>", 1, lambda client, args: client.delete_site(args[0]))
    ,Command("get-notes", "<site_path>", 1, lambda client, args: client.get_notes(args[0]))
    ,Command(
        "create-note"
        ,"<site_path> <body> <visibility>"
        ,3
        ,lambda client, args: client.create_note(args[0], args[1], args[2])
    )
    ,Command("get-note", "<site_path> <note_path>", 2, lambda client, args: client.get_note(args[0], args[1]))
    ,Command(
        "update-note"
        ,"<site_path> <note_path> <body> <visibility>"
        ,4
        ,lambda client, args: client.update_note(args[0], args[1], args[2], args[3])
    )
    ,Command("delete-note", "<site_path> <note_path>", 2, lambda client, args: client.delete_note(args[0], args[1]))
    ,Command(
        "get-links-from-note"
        ,"<site_path> <note_path>"
        ,2
        ,lambda client, args: client.get_note_links(args[0], args[1])
    )
    ,Command(
        "get-note-body-as-html"
        ,"<site_path> <note_path>"
        ,2
        ,lambda client, args: client.get_note_body_html(args[0], args[1])
    )
    ,Command(
        "get-note-as-markdown"
        ,"<site_path> <note_path>"
        ,2
        ,lambda client, args: client.get_note_markdown(args[0], args[1])
    )
    ,Command(
        "get-note-as-plaintext"
        ,"<site_path> <note_path>"
        ,2
        ,lambda client, args: client.get_note_plain_text(args[0], args[1])
    )
    ,Command(
        "search-notes"
        ,"<site_path> <term> [mode]"
        ,2
        ,lambda client, args: client.search_notes(args[0], args[1], _optional(args, 2))
    )
)
COMMANDS_BY_NAME: Dict[str, Command] = {command.name: command for command in COMMANDS}
AVAILABLE_COMMANDS = "Available commands: " + ", ".join(command.name for command in COMMANDS)


GLOBAL_FLAGS = ("--dev", "--debug-log")


def build_arg_parser() -> argparse.ArgumentParser:
    """Construct the parser for the global flags pulled out of argv."""

    parser = argparse.ArgumentParser(
        prog="collected-notes"
        ,description="Command-line client for the Collected Notes API."
        ,allow_abbrev=False
        ,add_help=False
    )
    parser.add_argument("--dev", action="store_true", help="Use the local development server.")
    parser.add_argument(
        "--debug-log",
        action="store_true",
        help="Write request and response payloads to ~/.collected-notes.debug.log",
    )
    return parser


def split_global_flags(argv: List[str]) -> Tuple[argparse.Namespace, List[str]]:
    """Pull the global flags out of argv wherever they appear.

    Only exact matches are removed; every other token, dashes included, is
    kept in order for command dispatch.
    """

    flags = [arg for arg in argv if arg in GLOBAL_FLAGS]
    remaining = [arg for arg in argv if arg not in GLOBAL_FLAGS]
    return build_arg_parser().parse_args(flags), remaining


def format_payload(payload: Any) -> str:
    if isinstance(payload, str):
        return payload
    return json.dumps(payload, indent=2, ensure_ascii=False)


def dispatch(client_factory: Callable[[], CollectedNotesClient], command_name: Optional[str], args: List[str]) -> int:
    """Route one command to its client call and print the result."""

    logger = logging.getLogger(LOGGER_NAME)

    if command_name is None:
        print("Usage: collected-notes [--dev] <command> [arguments]", file=sys.stderr)
        print(AVAILABLE_COMMANDS)
        return 1

    command = COMMANDS_BY_NAME.get(command_name)
    if command is None:
        logger.warning("Unknown command: %s", command_name)
        print(f"Unknown command: {command_name}", file=sys.stderr)
        print(AVAILABLE_COMMANDS)
        return 1

    if len(args) < command.min_args:
        print(command.usage, file=sys.stderr)
        return 1

    logger.info("Running %s %s", command.name, "/".join(command.paths(args)))
    try:
        result = command.call(client_factory(), args)
    except ApiError as err:
        logger.error("%s failed: %s", command.name, err)
        detail = err.payload if err.payload is not None else str(err)
        print(f"Error: {format_payload(detail)}", file=sys.stderr)
        return 1

    if result is not None:
        print(format_payload(result))
    logger.info("Completed %s", command.name)
    return 0


def run_cli(argv: Optional[List[str]] = None) -> int:
    """Entry point invoked by collected_notes_cli.py or tests; returns the exit status."""

    flags, remaining = split_global_flags(sys.argv[1:] if argv is None else argv)

    logger = configure_logging()

    try:
        settings = load_settings(flags.dev, debug_log=flags.debug_log)
    except ConfigurationError as err:
        logger.error("%s", err)
        print(err, file=sys.stderr)
        return 1

    logger.info("Using API at %s", settings.base_url)
    debug_logger = configure_debug_logger() if settings.debug_log else None

    def client_factory() -> CollectedNotesClient:
        return CollectedNotesClient(settings.base_url, settings.token, debug_logger=debug_logger)

    command_name = remaining[0] if remaining else None
    return dispatch(client_factory, command_name, remaining[1:])


def main() -> None:
    sys.exit(run_cli())


def _file_handler(filename: str, fmt: str) -> logging.Handler:
    """Log to a file in HOME, or nowhere if that file cannot be opened."""

    try:
        handler: logging.Handler = logging.FileHandler(Path.home() / filename, encoding="utf-8")
    except OSError:
        return logging.NullHandler()
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def configure_logging() -> logging.Logger:
    """Set up the primary info-level logger that writes to ~/.collected-notes.log."""

    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        logger.setLevel(logging.INFO)
        logger.addHandler(_file_handler(LOG_FILENAME, "%(asctime)s [%(levelname)s] %(message)s"))
    return logger


def configure_debug_logger() -> logging.Logger:
    """Create or return the debug logger that captures request and response payloads."""

    debug_logger = logging.getLogger(f"{LOGGER_NAME}.debug")
    if not debug_logger.handlers:
        debug_logger.setLevel(logging.INFO)
        debug_logger.addHandler(_file_handler(DEBUG_LOG_FILENAME, "%(asctime)s [DEBUG] %(message)s"))
    return debug_logger
