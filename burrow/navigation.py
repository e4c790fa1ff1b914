"""
Navigation state: history, current document and bookmarks.

Every command a user can type reduces to a handful of operations on a single
NavigationState. Operations that hit the network go through ``open`` and
either complete fully or leave the state exactly as it was.

Display is published on PyPubSub topics so the state machine itself never
prints:

  burrow.document   -> listener(url, document)
  burrow.bookmarks  -> listener(bookmarks)
"""

from __future__ import annotations

from typing import List, Optional, Union

from pubsub import pub

from gopherlib import (
    Document,
    Fetcher,
    GopherURL,
    TextDocument,
    parse_document,
    parse_gopher_url,
    resolve_link,
)

TOPIC_DOCUMENT = "burrow.document"
TOPIC_BOOKMARKS = "burrow.bookmarks"


class NavigationError(Exception):
    message = "Navigation failed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)


class NoResourceError(NavigationError):
    message = "There is no host to request"


class NoCurrentDocumentError(NavigationError):
    message = "There is no current document"


class NoParentError(NavigationError):
    message = "Seems there is no parent for this document"


class NoPreviousDocumentError(NavigationError):
    message = "There is no previous document to go back"


class BookmarkIndexError(NavigationError):
    message = "There is no bookmark to remove at this index"


class NoBookmarkError(NavigationError):
    message = "There is no bookmark at this index"


def _bookmark_position(position: Union[str, int], error: type) -> int:
    if isinstance(position, str):
        token = position.strip()
        if not (token.isascii() and token.isdigit()):
            raise error(f"Could not parse the bookmarks index: {position!r}")
        position = int(token)
    if position < 0:
        raise error()
    return position


class NavigationState:
    def __init__(self, fetch: Fetcher, store=None):
        self.fetch = fetch
        self.store = store
        self.history: List[GopherURL] = []   # most recent first
        self.document: Document = TextDocument()
        self.bookmarks: List[GopherURL] = list(store.load()) if store is not None else []

    @property
    def current_url(self) -> Optional[GopherURL]:
        return self.history[0] if self.history else None

    # ---------- Navigation ----------

    def open(self, url: GopherURL) -> Document:
        if not url.host:
            raise NoResourceError()
        raw = self.fetch(url.host, url.port, url.selector)
        document = parse_document(url, raw)

        pub.sendMessage(TOPIC_DOCUMENT, url=url, document=document)
        self.document = document
        self.history.insert(0, url)
        return document

    def open_url(self, raw_url: str) -> Document:
        return self.open(parse_gopher_url(raw_url))

    def follow_index(self, user_index: Union[str, int]) -> Document:
        return self.open(resolve_link(self.document, user_index))

    def go_up(self) -> Document:
        current = self.current_url
        if current is None:
            raise NoCurrentDocumentError()
        parent = current.parent()
        if parent is None:
            raise NoParentError()
        return self.open(parse_gopher_url(parent))

    def go_back(self) -> Document:
        if len(self.history) < 2:
            raise NoPreviousDocumentError()
        saved = list(self.history)
        # Drop the previous page first, then the current one; reopening
        # puts the previous page back at the front.
        previous = self.history.pop(1)
        self.history.pop(0)
        try:
            return self.open(previous)
        except Exception:
            self.history[:] = saved
            raise

    # ---------- Bookmarks ----------

    def _persist_bookmarks(self):
        if self.store is not None:
            self.store.save(self.bookmarks)
        self.list_bookmarks()

    def list_bookmarks(self) -> List[GopherURL]:
        bookmarks = list(self.bookmarks)
        pub.sendMessage(TOPIC_BOOKMARKS, bookmarks=bookmarks)
        return bookmarks

    def add_bookmark(self, raw_url: str) -> GopherURL:
        url = parse_gopher_url(raw_url)
        if not url.host:
            raise NoResourceError("Cannot bookmark an address without a host")
        self.bookmarks.append(url)
        self._persist_bookmarks()
        return url

    def remove_bookmark(self, position: Union[str, int]) -> GopherURL:
        index = _bookmark_position(position, BookmarkIndexError)
        if index >= len(self.bookmarks):
            raise BookmarkIndexError()
        removed = self.bookmarks.pop(index)
        self._persist_bookmarks()
        return removed

    def go_bookmark(self, position: Union[str, int]) -> Document:
        index = _bookmark_position(position, NoBookmarkError)
        if index >= len(self.bookmarks):
            raise NoBookmarkError()
        return self.open(self.bookmarks[index])


__all__ = [
    "BookmarkIndexError",
    "NavigationError",
    "NavigationState",
    "NoBookmarkError",
    "NoCurrentDocumentError",
    "NoParentError",
    "NoPreviousDocumentError",
    "NoResourceError",
    "TOPIC_BOOKMARKS",
    "TOPIC_DOCUMENT",
]
