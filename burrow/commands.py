"""
Translate a line typed at the prompt into a navigation intent.
"""

from __future__ import annotations

import re
from typing import NamedTuple

RE_GO_CMD = re.compile(r"^go(?:\s+(.*))?$", re.IGNORECASE)
RE_BOOKMARK_CMD = re.compile(r"^(?:bk|bookmarks)(?:\s+(.*))?$", re.IGNORECASE)
RE_BOOKMARK_SUB = re.compile(r"^(\S+)(?:\s+(.*))?$")

SIMPLE_COMMANDS = {
    "up": "up",
    "back": "back",
    "help": "help",
    "quit": "quit",
}

HELP_TEXT = (
    "Please enter one of the following commands:\n"
    "\tgo [url]: Go to this url\n"
    "\t[index]: Follow link index\n"
    "\tup: Go up one directory\n"
    "\tback: Go back previous page\n"
    "\tbk: List bookmarks\n"
    "\tbk [index]: Follow bookmark\n"
    "\tbk add [url]: Add bookmark\n"
    "\tbk rm [index]: Remove bookmark\n"
    "\tquit: Quit this program"
)


class CommandError(Exception):
    pass


class Command(NamedTuple):
    kind: str
    argument: str = ""


def parse_command(line: str) -> Command:
    text = line.strip()
    lowered = text.lower()

    if lowered in SIMPLE_COMMANDS:
        return Command(SIMPLE_COMMANDS[lowered])

    m_go = RE_GO_CMD.match(text)
    if m_go:
        url = (m_go.group(1) or "").strip()
        if not url:
            raise CommandError("No URL to go to")
        return Command("go", url)

    m_bk = RE_BOOKMARK_CMD.match(text)
    if m_bk:
        return _parse_bookmark_command((m_bk.group(1) or "").strip())

    if text[:1].isdigit():
        return Command("index", text)

    return Command("help")


def _parse_bookmark_command(args: str) -> Command:
    if not args:
        return Command("bookmarks")
    if args[0].isdigit():
        return Command("bookmark_go", args)

    m_sub = RE_BOOKMARK_SUB.match(args)
    sub = m_sub.group(1).lower() if m_sub else ""
    rest = ((m_sub.group(2) if m_sub else "") or "").strip()
    if sub == "add":
        return Command("bookmark_add", rest)
    if sub == "rm":
        return Command("bookmark_rm", rest)
    raise CommandError("Bookmark subcommand not found")


__all__ = ["Command", "CommandError", "HELP_TEXT", "parse_command"]
