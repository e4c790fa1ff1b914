"""
File-backed bookmark list: one canonical gopher URL per line.
"""

from __future__ import annotations

import os
import sys
from typing import List, Mapping, Optional, Sequence

from gopherlib import GopherURL, parse_gopher_url

APP_DIR_NAME = ".burrow"
BOOKMARKS_FILE_NAME = "bookmarks.txt"
BOOKMARKS_ENV = "BURROW_BOOKMARKS"


class BookmarkLocationError(Exception):
    """No usable place to keep bookmarks could be determined."""


def default_bookmarks_path(environ: Optional[Mapping[str, str]] = None) -> str:
    env = os.environ if environ is None else environ
    explicit = env.get(BOOKMARKS_ENV)
    if explicit:
        return explicit
    home = env.get("HOME")
    if not home:
        raise BookmarkLocationError(
            f"Could not get path to bookmarks because $HOME is not set (or set {BOOKMARKS_ENV})"
        )
    return os.path.join(home, APP_DIR_NAME, BOOKMARKS_FILE_NAME)


class BookmarkStore:
    def __init__(self, path: Optional[str] = None, verbose: bool = True):
        self.path = path or default_bookmarks_path()
        self.verbose = verbose
        # Cleared after a failed write; the session then keeps bookmarks in memory only
        self.writable = True

    def _warn(self, message: str):
        if self.verbose:
            sys.stderr.write(f"[Bookmarks] Warning: {message}\n")

    def _ensure_file(self):
        parent = os.path.dirname(self.path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(self.path, "a", encoding="utf-8"):
            pass

    def load(self) -> List[GopherURL]:
        if not os.path.exists(self.path):
            try:
                self._ensure_file()
            except OSError as e:
                self._warn(f"problem creating the bookmarks file {self.path}: {e}")
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                contents = fh.read()
        except (OSError, UnicodeDecodeError) as e:
            self._warn(f"problem reading the bookmarks file {self.path}: {e}")
            return []

        bookmarks: List[GopherURL] = []
        for line in contents.splitlines():
            line = line.strip()
            if not line:
                continue
            url = parse_gopher_url(line)
            if url.host:
                bookmarks.append(url)
        return bookmarks

    def save(self, bookmarks: Sequence[GopherURL]):
        if not self.writable:
            return
        lines = [url.url for url in bookmarks if url.host]
        try:
            self._ensure_file()
            with open(self.path, "w", encoding="utf-8") as fh:
                for line in lines:
                    fh.write(f"{line}\n")
        except OSError as e:
            self.writable = False
            self._warn(f"problem writing the bookmarks file {self.path}: {e}; "
                       "bookmarks will only be kept for this session")


class MemoryBookmarkStore:
    """Store that never touches the disk."""

    def __init__(self, bookmarks: Optional[Sequence[GopherURL]] = None):
        self.saved: List[GopherURL] = list(bookmarks or [])

    def load(self) -> List[GopherURL]:
        return list(self.saved)

    def save(self, bookmarks: Sequence[GopherURL]):
        self.saved = list(bookmarks)


__all__ = [
    "BookmarkLocationError",
    "BookmarkStore",
    "MemoryBookmarkStore",
    "default_bookmarks_path",
]
