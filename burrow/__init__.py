"""
burrow: an interactive Gopher navigator (history, link numbers, bookmarks).
"""

from .bookmarks import BookmarkLocationError, BookmarkStore, MemoryBookmarkStore
from .commands import Command, CommandError, parse_command
from .navigation import NavigationError, NavigationState, TOPIC_BOOKMARKS, TOPIC_DOCUMENT
from .render import render_bookmarks, render_document

__version__ = "0.3.0"

__all__ = [
    "BookmarkLocationError",
    "BookmarkStore",
    "Command",
    "CommandError",
    "MemoryBookmarkStore",
    "NavigationError",
    "NavigationState",
    "TOPIC_BOOKMARKS",
    "TOPIC_DOCUMENT",
    "parse_command",
    "render_bookmarks",
    "render_document",
]
