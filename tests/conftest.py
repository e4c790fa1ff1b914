import socketserver
import threading
from typing import Dict, List, Tuple

import pytest
from pubsub import pub

from burrow.navigation import TOPIC_BOOKMARKS, TOPIC_DOCUMENT
from gopherlib import ConnectError

MENU_ROOT = (
    "isome test\t\terror.host\t1\r\n"
    "i \t\terror.host\t1\r\n"
    "1About\t/about\tkhzae.net\t70\r\n"
    "i \t\terror.host\t1\r\n"
    "1Super Dimension Fortress (SDF)\t/\tsdf.org\t70\r\n"
    "0RFC 4266 (gopher URI scheme)\t/rfc4266.txt\tkhzae.net\t70\r\n"
    ".\r\n"
).encode("utf-8")


class FakeFetcher:
    """Canned responses keyed by (host, port, selector); records every call."""

    def __init__(self, responses: Dict[Tuple[str, int, str], bytes] = None):
        self.responses = dict(responses or {})
        self.calls: List[Tuple[str, int, str]] = []
        self.failing = set()

    def __call__(self, host: str, port: int, selector: str) -> bytes:
        key = (host, port, selector)
        self.calls.append(key)
        if key in self.failing:
            raise ConnectError(f"Failed to connect to {host}:{port}: refused")
        return self.responses.get(key, b"")


class Collector:
    def __init__(self):
        self.documents = []
        self.bookmark_lists = []

    def on_document(self, url, document):
        self.documents.append((url, document))

    def on_bookmarks(self, bookmarks):
        self.bookmark_lists.append(bookmarks)


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def collector():
    c = Collector()
    pub.subscribe(c.on_document, TOPIC_DOCUMENT)
    pub.subscribe(c.on_bookmarks, TOPIC_BOOKMARKS)
    yield c
    pub.unsubAll()


class _CannedHandler(socketserver.BaseRequestHandler):
    def handle(self):
        chunks = []
        self.request.settimeout(5)
        while True:
            data = self.request.recv(1024)
            if not data:
                break
            chunks.append(data)
            if b"\n" in data:
                break
        raw = b"".join(chunks).decode("utf-8", errors="replace")
        selector = raw.split("\n", 1)[0].rstrip("\r")
        self.server.requests.append(selector)
        try:
            self.request.sendall(self.server.pages.get(selector, b"3Not found\tfake\tlocalhost\t0\r\n.\r\n"))
        except BrokenPipeError:
            pass


class CannedGopherServer(socketserver.ThreadingTCPServer):
    allow_reuse_address = True
    daemon_threads = True

    def __init__(self, pages: Dict[str, bytes]):
        self.pages = pages
        self.requests: List[str] = []
        super().__init__(("127.0.0.1", 0), _CannedHandler)

    @property
    def port(self) -> int:
        return self.server_address[1]


@pytest.fixture
def gopher_server():
    server = CannedGopherServer({})
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.shutdown()
    server.server_close()
