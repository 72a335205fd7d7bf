"""A minimal single-threaded HTTP/1.x server."""

from __future__ import annotations

import selectors
import socket
import sys
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Protocol

from .textutil import strip_whitespace

CONTENT_TYPE_TEXT = "text/plain"
CONTENT_TYPE_JSON = "application/json"

_RECV_SIZE = 2047
_BACKLOG = 5
_POLL_INTERVAL = 0.1


class HttpMethod(Enum):
    """Request methods the parser recognises."""

    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    CONNECT = "CONNECT"
    LINK = "LINK"
    UNLINK = "UNLINK"


class HttpVersion(Enum):
    """Protocol versions the parser recognises."""

    HTTP_0_9 = "HTTP/0.9"
    HTTP_1_0 = "HTTP/1.0"
    HTTP_1_1 = "HTTP/1.1"
    HTTP_2_0 = "HTTP/2.0"
    HTTP_3_0 = "HTTP/3.0"


class HttpStatus(IntEnum):
    OK = 200
    NOT_FOUND = 404


class HttpParseError(ValueError):
    """Raised when a request cannot be parsed."""


class _Connection(Protocol):
    def sendall(self, data: bytes) -> Any: ...


@dataclass
class HttpRequest:
    """A parsed request; ``connection`` is the client socket, if any."""

    method: HttpMethod
    request_uri: str
    http_version: HttpVersion
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: str = ""
    connection: Any = None


@dataclass
class HttpResponse:
    """A response under construction; ``headers`` holds raw header lines."""

    status: int = 0
    headers: str = ""
    body: str | None = None

    def set_header(self, key: str, value: str) -> None:
        """Append a ``key: value`` header line."""
        self.headers += f"{key}: {value}\r\n"

    def encode(self) -> bytes:
        """Return the response as it goes on the wire."""
        text = f"HTTP/1.1 {int(self.status)}\r\n{self.headers}\r\n{self.body or ''}"
        return text.encode("utf-8")


class _Tokenizer:
    """Splits text the way successive ``strtok`` calls on one buffer do."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def next(self, delimiters: str) -> str | None:
        text, size = self._text, len(self._text)
        start = self._pos
        while start < size and text[start] in delimiters:
            start += 1
        if start >= size:
            self._pos = size
            return None
        end = start
        while end < size and text[end] not in delimiters:
            end += 1
        self._pos = min(end + 1, size)
        return text[start:end]

    def rest(self) -> str | None:
        if self._pos >= len(self._text):
            return None
        remainder = self._text[self._pos :]
        self._pos = len(self._text)
        return remainder


def parse_request(data: bytes | str) -> HttpRequest:
    """Parse a raw request into an :class:`HttpRequest`.

    Raises :class:`HttpParseError` for an unknown method or version, or when
    the header block is not terminated by an empty line.
    """
    if isinstance(data, bytes):
        data = data.decode("utf-8", errors="replace")
    data = data.split("\x00", 1)[0]

    tokens = _Tokenizer(data)
    request_line = tokens.next("\r\n")
    if request_line is None:
        raise HttpParseError("Empty request")
    rest = tokens.rest()

    line = _Tokenizer(request_line)
    method_text = line.next(" ")
    try:
        method = HttpMethod(method_text)
    except ValueError:
        raise HttpParseError("Invalid request method") from None
    uri = line.next(" ")
    version_text = line.rest()
    try:
        version = HttpVersion(version_text)
    except ValueError:
        raise HttpParseError("Invalid request HTTP version") from None

    if rest is None:
        raise HttpParseError("Missing end of headers")
    end_of_headers = rest.find("\r\n\r\n")
    if end_of_headers < 0:
        raise HttpParseError("Missing end of headers")
    header_text = rest[: end_of_headers + 1]
    body = rest[end_of_headers + 4 :]

    headers: list[tuple[str, str]] = []
    header_tokens = _Tokenizer(header_text)
    key = header_tokens.next(":")
    while key is not None:
        value = header_tokens.next("\r\n")
        headers.append((strip_whitespace(key), strip_whitespace(value or "")))
        key = header_tokens.next(":")

    return HttpRequest(method, uri or "", version, headers, body)


def headers_to_string(headers: Iterable[tuple[str, str]], pretty_print: bool = False) -> str:
    """Render headers as ``key: value`` lines or as compact ``{key:value},`` items."""
    template = "{}: {}\n" if pretty_print else "{{{}:{}}},"
    return "".join(template.format(key, value) for key, value in headers)


def respond(response: HttpResponse, connection: _Connection) -> None:
    """Send ``response`` over ``connection`` with a Content-Length header.

    Raises ValueError if the response has no body.
    """
    if response.body is None:
        raise ValueError("response has no body")
    response.set_header("Content-Length", str(len(response.body.encode("utf-8"))))
    connection.sendall(response.encode())


Entrypoint = Callable[[HttpRequest, Any], Any]


class HttpServer:
    """Accepts connections and hands each parsed request to ``entrypoint``.

    Every connection carries one request and is closed once it is handled.
    """

    def __init__(self, port: str | int, entrypoint: Entrypoint, context: Any = None) -> None:
        self.entrypoint = entrypoint
        self.context = context
        self.poll_interval = _POLL_INTERVAL
        self._stop = threading.Event()
        self._listening = False
        family, socktype, proto, _, address = socket.getaddrinfo(
            None, str(port), socket.AF_UNSPEC, socket.SOCK_STREAM, 0, socket.AI_PASSIVE
        )[0]
        self._socket = socket.socket(family, socktype, proto)
        try:
            self._socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            self._socket.bind(address)
            self._socket.listen(_BACKLOG)
        except OSError:
            self._socket.close()
            raise

    @property
    def port(self) -> int:
        return self._socket.getsockname()[1]

    def __enter__(self) -> HttpServer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def listen(self) -> None:
        """Serve requests until :meth:`close` is called."""
        if self._stop.is_set():
            return
        self._listening = True
        with selectors.DefaultSelector() as selector:
            selector.register(self._socket, selectors.EVENT_READ)
            try:
                while not self._stop.is_set():
                    for key, _ in selector.select(timeout=self.poll_interval):
                        sock = key.fileobj
                        if sock is self._socket:
                            try:
                                client, _ = self._socket.accept()
                            except OSError:
                                continue
                            selector.register(client, selectors.EVENT_READ)
                        else:
                            selector.unregister(sock)
                            try:
                                self._serve(sock)
                            finally:
                                sock.close()
            finally:
                for key in list(selector.get_map().values()):
                    if key.fileobj is not self._socket:
                        key.fileobj.close()
                self._socket.close()
                self._listening = False

    def _serve(self, client: socket.socket) -> None:
        try:
            data = client.recv(_RECV_SIZE)
        except OSError:
            return
        if not data:
            return
        try:
            request = parse_request(data)
        except HttpParseError as exc:
            print(exc, file=sys.stderr)
            print("Failed to parse HTTP request.", file=sys.stderr)
            return
        request.connection = client
        try:
            self.entrypoint(request, self.context)
        except OSError as exc:
            print(f"connection error: {exc}", file=sys.stderr)

    def close(self) -> None:
        """Stop listening and release the listening socket."""
        self._stop.set()
        if not self._listening:
            self._socket.close()