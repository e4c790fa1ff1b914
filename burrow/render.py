"""
Plain-text rendering of documents and the bookmark list.
"""

from __future__ import annotations

from typing import Dict, List, NamedTuple, Optional, Sequence

from gopherlib import Document, GopherURL, MenuDocument, MenuLineError

UNKNOWN_LABEL = "UNKNOWN"
ERROR_LABEL = "ERR"


class ItemStyle(NamedTuple):
    label: Optional[str]    # None renders the description only (info lines)
    indexed: bool = False   # show the 1-based link number
    suffix: str = ""


# Keyed by item type; a new type only needs a row here
ITEM_STYLES: Dict[str, ItemStyle] = {
    "0": ItemStyle("TXT", indexed=True),
    "1": ItemStyle("MENU", indexed=True, suffix="/"),
    "i": ItemStyle(None),
}

UNKNOWN_STYLE = ItemStyle(UNKNOWN_LABEL)


def _render_menu(document: MenuDocument) -> List[str]:
    link_numbers = {pos: n for n, pos in enumerate(document.links, 1)}
    out: List[str] = []
    for index, entry in enumerate(document.entries):
        if isinstance(entry, MenuLineError):
            out.append(f"{ERROR_LABEL}\t\tProblem parsing line {index}: {entry.reason}")
            continue
        style = ITEM_STYLES.get(entry.type, UNKNOWN_STYLE)
        text = f"{entry.description}{style.suffix}"
        if style.label is None:
            out.append(f"\t\t{text}")
        elif style.indexed and index in link_numbers:
            out.append(f"{style.label}\t[{link_numbers[index]}]\t{text}")
        else:
            out.append(f"{style.label}\t\t{text}")
    return out


def render_document(document: Document) -> str:
    if isinstance(document, MenuDocument):
        return "\n".join(_render_menu(document))
    return "\n".join(document.lines)


def render_bookmarks(bookmarks: Sequence[GopherURL]) -> str:
    if not bookmarks:
        return "There are no bookmarks"
    lines = ["Bookmarks:"]
    for index, url in enumerate(bookmarks):
        lines.append(f"[bk {index}] {url.url}")
    return "\n".join(lines)


__all__ = ["ITEM_STYLES", "ItemStyle", "render_document", "render_bookmarks"]
