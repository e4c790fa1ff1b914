#!/usr/bin/env python3
# main.py
"""
burrow: interactive Gopher navigator.

ENV (optional):
  BURROW_TIMEOUT    -> socket timeout in seconds (default: 15, 0 disables)
  BURROW_BOOKMARKS  -> bookmarks file (default: $HOME/.burrow/bookmarks.txt)

Usage:
  burrow [gopher-url]
"""

import os
import sys
from typing import Callable, Dict, List, Optional

from pubsub import pub

from burrow import __version__
from burrow.bookmarks import BookmarkLocationError, BookmarkStore
from burrow.commands import HELP_TEXT, Command, CommandError, parse_command
from burrow.navigation import TOPIC_BOOKMARKS, TOPIC_DOCUMENT, NavigationError, NavigationState
from burrow.render import render_bookmarks, render_document
from gopherlib import SOCKET_TIMEOUT, Document, GopherClient, GopherError, GopherURL

SOFTWARE_NAME = "burrow"


def _get_env_timeout() -> Optional[float]:
    raw = os.getenv("BURROW_TIMEOUT")
    if raw is None or not raw.strip():
        return SOCKET_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        return SOCKET_TIMEOUT
    return timeout if timeout > 0 else None


class Shell:
    """
    Glue between the prompt and NavigationState: runs one command, turns any
    navigation or transport failure into a message, and prints documents as
    they are published.
    """

    def __init__(self, state: NavigationState, write: Callable[[str], None] = print):
        self.state = state
        self.write = write
        self.running = True
        self.handlers: Dict[str, Callable[[str], object]] = {
            "go": self.state.open_url,
            "index": self.state.follow_index,
            "up": lambda _arg: self.state.go_up(),
            "back": lambda _arg: self.state.go_back(),
            "bookmarks": lambda _arg: self.state.list_bookmarks(),
            "bookmark_add": self.state.add_bookmark,
            "bookmark_rm": self.state.remove_bookmark,
            "bookmark_go": self.state.go_bookmark,
            "help": lambda _arg: self.write(HELP_TEXT),
            "quit": self._quit,
        }
        pub.subscribe(self.on_document, TOPIC_DOCUMENT)
        pub.subscribe(self.on_bookmarks, TOPIC_BOOKMARKS)

    def on_document(self, url: GopherURL, document: Document):
        self.write(render_document(document))

    def on_bookmarks(self, bookmarks: List[GopherURL]):
        self.write(render_bookmarks(bookmarks))

    def _quit(self, _arg: str):
        self.write("Goodbye!")
        self.running = False

    def prompt(self) -> str:
        lines = []
        current = self.state.current_url
        if current is not None and current.url:
            lines.append(f"\nCurrent page: {current.url}")
        lines.append(f"{SOFTWARE_NAME}> ")
        return "\n".join(lines)

    def execute(self, command: Command):
        try:
            self.handlers[command.kind](command.argument)
        except (NavigationError, GopherError) as e:
            self.write(str(e))

    def handle_line(self, line: str):
        try:
            command = parse_command(line)
        except CommandError as e:
            self.write(f"Command parsing error: {e}")
            return
        self.execute(command)

    def close(self):
        pub.unsubscribe(self.on_document, TOPIC_DOCUMENT)
        pub.unsubscribe(self.on_bookmarks, TOPIC_BOOKMARKS)


def main(argv: Optional[List[str]] = None):
    args = sys.argv[1:] if argv is None else argv

    try:
        store = BookmarkStore()
    except BookmarkLocationError as e:
        sys.stderr.write(f"[ERROR] {e}\n")
        sys.exit(2)

    print(f"Welcome to {SOFTWARE_NAME} v{__version__}!")
    print("Enter 'help' if you don't know how to start. Have a nice journey in the Gopherspace!\n")

    client = GopherClient(timeout=_get_env_timeout())
    state = NavigationState(client.fetch, store=store)
    shell = Shell(state)

    if args:
        shell.execute(Command("go", args[0]))

    try:
        while shell.running:
            try:
                line = input(shell.prompt())
            except EOFError:
                print()
                break
            shell.handle_line(line)
    except KeyboardInterrupt:
        print("\nExiting.")
    finally:
        shell.close()


if __name__ == "__main__":
    main()
