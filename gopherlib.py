#!/usr/bin/env python3
# gopherlib.py
import socket
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple, Union

DEFAULT_PORT = 70
DEFAULT_TYPE = "1"
SOCKET_TIMEOUT = 15
SCHEME = "gopher://"
CRLF = "\r\n"

# Item types that can be followed from a menu
LINKABLE_TYPES = frozenset(("0", "1"))


class GopherError(Exception):
    pass


class TransportError(GopherError):
    pass


class ConnectError(TransportError):
    pass


class ReceiveError(TransportError):
    pass


class LinkError(GopherError):
    pass


class NoLinksError(LinkError):
    def __init__(self):
        super().__init__("There is no link in the current document")


class NegativeIndexError(LinkError):
    def __init__(self):
        super().__init__("Link index can't be negative")


class IndexOutOfBoundsError(LinkError):
    def __init__(self):
        super().__init__("Given index is out of bounds")


class BrokenLinkError(LinkError):
    def __init__(self, reason: str):
        super().__init__(f"Chosen link has an issue: {reason}")
        self.reason = reason


def _parse_port(port_str: str) -> int:
    port_str = port_str.strip()
    if port_str.isascii() and port_str.isdigit():
        return int(port_str)
    return DEFAULT_PORT


@dataclass(frozen=True)
class GopherURL:
    host: str
    port: int = DEFAULT_PORT
    type: str = DEFAULT_TYPE
    selector: str = ""

    @property
    def server(self) -> str:
        return f"{self.host}:{self.port}"

    @property
    def url(self) -> Optional[str]:
        return self.to_canonical_string()

    def to_canonical_string(self) -> Optional[str]:
        if not self.host:
            return None
        return f"{SCHEME}{self.host}:{self.port}/{self.type}{self.selector}"

    def parent(self) -> Optional[str]:
        """
        Canonical URL of the menu one level above this resource, or None at
        the server root. A selector ending in '/' names a directory, so that
        slash is dropped before looking for the enclosing one.
        """
        if not self.host or not self.selector:
            return None
        trimmed = self.selector[:-1] if self.selector.endswith("/") else self.selector
        idx = trimmed.rfind("/")
        parent_selector = trimmed[:idx] if idx >= 0 else ""
        return GopherURL(self.host, self.port, "1", parent_selector).to_canonical_string()


def parse_gopher_url(url: str) -> GopherURL:
    # Never raises: unparsable fragments fall back to defaults.
    body = url
    if body[:len(SCHEME)].lower() == SCHEME:
        body = body[len(SCHEME):]

    host_port, *rest = body.split("/", 1)
    selector_with_type = rest[0] if rest else ""

    if ":" in host_port:
        host, port_str = host_port.split(":", 1)
        port = _parse_port(port_str)
    else:
        host, port = host_port, DEFAULT_PORT

    if selector_with_type == "":
        return GopherURL(host=host, port=port, type=DEFAULT_TYPE, selector="")
    return GopherURL(host=host, port=port, type=selector_with_type[0], selector=selector_with_type[1:])


@dataclass(frozen=True)
class MenuEntry:
    type: str
    description: str
    selector: str
    host: str
    port: int = DEFAULT_PORT

    @property
    def linkable(self) -> bool:
        return self.type in LINKABLE_TYPES

    def to_url(self) -> GopherURL:
        return GopherURL(host=self.host, port=self.port, type=self.type, selector=self.selector)


@dataclass(frozen=True)
class MenuLineError:
    raw: str
    reason: str


MenuLine = Union[MenuEntry, MenuLineError]


@dataclass(frozen=True)
class MenuDocument:
    entries: Tuple[MenuLine, ...] = ()
    # Indices into entries, in display order, of the followable ones
    links: Tuple[int, ...] = ()


@dataclass(frozen=True)
class TextDocument:
    lines: Tuple[str, ...] = ()


Document = Union[MenuDocument, TextDocument]


def parse_menu_line(line: str) -> MenuLine:
    fields = line.split("\t")
    first = fields[0]

    def _missing(name: str) -> MenuLineError:
        return MenuLineError(raw=line, reason=f'Could not parse {name} in: "{line}"')

    if not first:
        return _missing("item type")
    if len(fields) < 2:
        return _missing("selector")
    if len(fields) < 3:
        return _missing("host")
    if len(fields) < 4:
        return _missing("port")
    # Anything past the port (Gopher+ markers) is ignored
    return MenuEntry(
        type=first[0],
        description=first[1:],
        selector=fields[1],
        host=fields[2],
        port=_parse_port(fields[3]),
    )


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


def parse_menu(raw: bytes) -> MenuDocument:
    entries: List[MenuLine] = []
    links: List[int] = []
    for index, line in enumerate(_decode(raw).split(CRLF)):
        if line == "." or not line.strip():
            break
        entry = parse_menu_line(line)
        if isinstance(entry, MenuEntry) and entry.linkable:
            links.append(index)
        entries.append(entry)
    return MenuDocument(entries=tuple(entries), links=tuple(links))


def parse_text(raw: bytes) -> TextDocument:
    lines: List[str] = []
    for line in _decode(raw).split("\n"):
        # Lines stay verbatim; only the terminator tolerates a CRLF ending
        if line.rstrip("\r") == ".":
            break
        lines.append(line)
    return TextDocument(lines=tuple(lines))


def parse_document(url: GopherURL, raw: bytes) -> Document:
    # Trust the requested type, never the shape of the response
    if url.type == "1":
        return parse_menu(raw)
    return parse_text(raw)


def _parse_user_index(user_index: Union[str, int]) -> int:
    if isinstance(user_index, int):
        if user_index < 0:
            raise NegativeIndexError()
        return user_index
    token = str(user_index).strip()
    if not (token.isascii() and token.isdigit()):
        raise NegativeIndexError()
    return int(token)


def resolve_link(document: Document, user_index: Union[str, int]) -> GopherURL:
    """
    Map a 1-based link number, as shown next to menu rows, to the address of
    that entry.
    """
    if not isinstance(document, MenuDocument):
        raise NoLinksError()
    index = _parse_user_index(user_index)
    if index == 0 or index > len(document.links):
        raise IndexOutOfBoundsError()
    entry = document.entries[document.links[index - 1]]
    if isinstance(entry, MenuLineError):
        raise BrokenLinkError(entry.reason)
    return entry.to_url()


Fetcher = Callable[[str, int, str], bytes]


@dataclass
class GopherClient:
    timeout: Optional[float] = SOCKET_TIMEOUT
    chunk_size: int = field(default=4096, repr=False)

    def fetch(self, host: str, port: int, selector: str) -> bytes:
        request = f"{selector}{CRLF}".encode("utf-8", errors="replace")
        server = GopherURL(host, port).server
        # Bad host names fail in the IDNA codec or address checks, not as OSError
        try:
            conn = socket.create_connection((host, port), timeout=self.timeout)
        except (OSError, UnicodeError, ValueError, OverflowError) as e:
            raise ConnectError(f"Failed to connect to {server}: {e}") from e

        with conn as s:
            try:
                s.sendall(request)
                s.shutdown(socket.SHUT_WR)
                chunks = []
                while True:
                    data = s.recv(self.chunk_size)
                    if not data:
                        break
                    chunks.append(data)
            except OSError as e:
                raise ReceiveError(f"Failed to receive data from {server}: {e}") from e
        return b"".join(chunks)
