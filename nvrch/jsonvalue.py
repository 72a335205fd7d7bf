"""A small JSON document model with a lenient parser and a compact writer."""

from __future__ import annotations

import math
import re
import struct
from dataclasses import dataclass
from enum import Enum
from typing import Any

_WHITESPACE = " \t\n\v\f\r"
_DIGITS = "0123456789"

_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_OUTPUT_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "/": "\\/",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

_HEX_NUMBER = re.compile(
    r"-?0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)(?:[pP][+-]?\d+)?"
)
_SPECIAL_NUMBER = re.compile(r"-(?:infinity|inf|nan)", re.IGNORECASE)
_DECIMAL_NUMBER = re.compile(r"-?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _to_float32(value: float) -> float:
    """Round ``value`` to single precision, overflowing to infinity."""
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


class JsonType(Enum):
    """Kind of value a :class:`JsonElement` holds."""

    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"


@dataclass
class JsonElement:
    """One JSON value.

    ``value`` is a ``dict`` for objects (in insertion order), a ``list`` for
    arrays, a ``str``, a single-precision ``float``, a ``bool`` or ``None``.
    """

    type: JsonType
    value: Any = None

    @classmethod
    def string(cls, value: str) -> JsonElement:
        return cls(JsonType.STRING, str(value))

    @classmethod
    def number(cls, value: float) -> JsonElement:
        return cls(JsonType.NUMBER, _to_float32(float(value)))

    @classmethod
    def boolean(cls, value: bool) -> JsonElement:
        return cls(JsonType.BOOLEAN, bool(value))

    @classmethod
    def null(cls) -> JsonElement:
        return cls(JsonType.NULL, None)

    @classmethod
    def array(cls, first: JsonElement | None = None) -> JsonElement:
        """Create an array, holding ``first`` if one is given."""
        out = cls(JsonType.ARRAY, [])
        out.append(first)
        return out

    @classmethod
    def object(cls, key: str | None = None, value: JsonElement | None = None) -> JsonElement:
        """Create an object, holding ``key: value`` if a value is given."""
        out = cls(JsonType.OBJECT, {})
        if value is not None:
            out.set_key(key, value)
        return out

    def _require(self, kind: JsonType) -> None:
        if self.type is not kind:
            raise TypeError(f"expected a JSON {kind.value}, got {self.type.value}")

    def get_key(self, key: str) -> JsonElement | None:
        """Return the member named ``key``, or ``None`` if there is none."""
        self._require(JsonType.OBJECT)
        return self.value.get(key)

    def set_key(self, key: str, value: JsonElement | None) -> None:
        """Set member ``key``; a ``None`` value removes the member."""
        self._require(JsonType.OBJECT)
        if value is None:
            self.value.pop(key, None)
        else:
            self.value[key] = value

    def append(self, item: JsonElement | None) -> None:
        """Add ``item`` to the end of the array; ``None`` is ignored."""
        self._require(JsonType.ARRAY)
        if item is not None:
            self.value.append(item)

    def pop(self) -> JsonElement | None:
        """Remove and return the last item, or ``None`` if the array is empty."""
        self._require(JsonType.ARRAY)
        return self.value.pop() if self.value else None

    def get_index(self, index: int) -> JsonElement:
        self._require(JsonType.ARRAY)
        return self.value[index]

    def stringify(self, pretty_print: bool = False) -> str:
        """Serialise to compact JSON text."""
        parts: list[str] = []
        _write(self, parts)
        return "".join(parts)


def _write_string(text: str, out: list[str]) -> None:
    out.append('"')
    for ch in text:
        escaped = _OUTPUT_ESCAPES.get(ch)
        if escaped is not None:
            out.append(escaped)
        elif ord(ch) < 0x20:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    out.append('"')


def _write(element: JsonElement, out: list[str]) -> None:
    kind = element.type
    if kind is JsonType.STRING:
        _write_string(element.value or "", out)
    elif kind is JsonType.ARRAY:
        out.append("[")
        for position, item in enumerate(element.value or ()):
            if position:
                out.append(",")
            _write(item, out)
        out.append("]")
    elif kind is JsonType.OBJECT:
        out.append("{")
        for position, (key, item) in enumerate((element.value or {}).items()):
            if position:
                out.append(",")
            _write_string(key, out)
            out.append(":")
            _write(item, out)
        out.append("}")
    elif kind is JsonType.NUMBER:
        out.append("null" if element.value is None else f"{element.value:f}")
    elif kind is JsonType.BOOLEAN:
        if element.value is None:
            out.append("null")
        else:
            out.append("true" if element.value else "false")
    else:
        out.append("null")


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def advance(self) -> str:
        ch = self.peek()
        if ch:
            self.pos += 1
        return ch

    def skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos] in _WHITESPACE:
            self.pos += 1

    def element(self) -> JsonElement:
        self.skip_whitespace()
        cur = self.peek()
        if cur == '"':
            self.pos += 1
            return self.string()
        if cur == "[":
            return self.array()
        if cur == "{":
            return self.object()
        for word, result in (("true", True), ("false", False)):
            if self.text.startswith(word, self.pos):
                self.pos += len(word)
                return JsonElement.boolean(result)
        if self.text.startswith("null", self.pos):
            self.pos += 4
            return JsonElement.null()
        if cur and (cur in _DIGITS or cur == "-"):
            number = self.number()
            if number is not None:
                return number
        return JsonElement.null()

    def number(self) -> JsonElement | None:
        match = _HEX_NUMBER.match(self.text, self.pos)
        if match:
            value = float.fromhex(match.group())
        else:
            match = _SPECIAL_NUMBER.match(self.text, self.pos) or _DECIMAL_NUMBER.match(
                self.text, self.pos
            )
            if not match:
                return None
            value = float(match.group())
        self.pos = match.end()
        return JsonElement.number(value)

    def string(self) -> JsonElement:
        chars: list[str] = []
        while True:
            ch = self.peek()
            if not ch or ch == '"':
                break
            self.pos += 1
            if ch == "\\":
                escape = self.advance()
                if not escape:
                    break
                chars.append(_ESCAPES.get(escape, escape))
            else:
                chars.append(ch)
        if self.peek() == '"':
            self.pos += 1
        return JsonElement.string("".join(chars))

    def array(self) -> JsonElement:
        self.pos += 1
        out = JsonElement.array()
        self.skip_whitespace()
        if self.peek() != "]":
            while True:
                out.append(self.element())
                self.skip_whitespace()
                if self.peek() != ",":
                    break
                self.pos += 1
                self.skip_whitespace()
        if self.peek() == "]":
            self.pos += 1
            return out
        return JsonElement.null()

    def object(self) -> JsonElement:
        self.pos += 1
        out = JsonElement.object()
        self.skip_whitespace()
        if self.peek() != "}":
            while True:
                if self.advance() != '"':
                    break
                key = self.string().value
                self.skip_whitespace()
                if self.advance() != ":":
                    break
                self.skip_whitespace()
                out.set_key(key, self.element())
                self.skip_whitespace()
                if self.peek() != ",":
                    break
                self.pos += 1
                self.skip_whitespace()
        if self.peek() == "}":
            self.pos += 1
            return out
        return JsonElement.null()


def parse(text: str) -> JsonElement:
    """Parse the first JSON value in ``text``.

    Parsing is lenient: malformed input yields a null element and anything
    after the first value is ignored.
    """
    return _Parser(text.split("\x00", 1)[0]).element()


def stringify(element: JsonElement | None, pretty_print: bool = False) -> str:
    """Serialise ``element`` to compact JSON; ``None`` gives an empty string."""
    if element is None:
        return ""
    return element.stringify(pretty_print)