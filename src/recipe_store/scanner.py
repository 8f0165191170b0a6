"""
Text-scanning primitives for recipe documents.

Everything the reader needs to pick a JSON document apart without a JSON
library lives here:

- A cursor (``Scanner``) that knows whether it is inside a quoted string
  and how deeply it is nested in objects and arrays
- Matching-delimiter search and top-level comma splitting built on it
- Object member extraction by key, with every value checked to be a
  well-formed token
- String escaping (for the writer) and unescaping (for the reader)

Offsets carried on ``Segment`` and on raised errors are absolute character
offsets into the original document.
"""

import logging
import re
from typing import Dict, List, NamedTuple, Optional

from .errors import StructuralError

logger = logging.getLogger(__name__)

WHITESPACE = " \t\n\r"

LITERALS = ("true", "false", "null")

# Decimal text, more lenient than JSON: a sign, a bare leading or trailing
# point and leading zeros are all allowed.
NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

_CLOSERS = {"{": "}", "[": "]"}

_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_WRITE_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


class Segment(NamedTuple):
    """A slice of the document: stripped text plus its absolute offset."""

    text: str
    start: int


class Scanner:
    """
    Cursor over document text.

    Tracks three pieces of state while stepping forward one character at a
    time: whether the cursor is inside a quoted string, the object-brace
    depth and the array-bracket depth. Structural characters inside strings
    never change the depths.
    """

    def __init__(self, text: str, start: int = 0):
        self.text = text
        self.pos = start
        self.in_string = False
        self.brace_depth = 0
        self.bracket_depth = 0
        self._escaped = False

    @property
    def at_top_level(self) -> bool:
        return not self.in_string and self.brace_depth == 0 and self.bracket_depth == 0

    @property
    def exhausted(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        return self.text[self.pos]

    def step(self) -> str:
        """Consume one character and update string and depth state."""
        c = self.text[self.pos]
        if self.in_string:
            if self._escaped:
                self._escaped = False
            elif c == "\\":
                self._escaped = True
            elif c == '"':
                self.in_string = False
        elif c == '"':
            self.in_string = True
        elif c == "{":
            self.brace_depth += 1
        elif c == "}":
            self.brace_depth -= 1
        elif c == "[":
            self.bracket_depth += 1
        elif c == "]":
            self.bracket_depth -= 1

        if self.brace_depth < 0 or self.bracket_depth < 0:
            raise StructuralError(f"Unexpected '{c}'", position=self.pos)
        self.pos += 1
        return c


def skip_whitespace(text: str, pos: int) -> int:
    """Return the first index at or after ``pos`` that is not whitespace."""
    while pos < len(text) and text[pos] in WHITESPACE:
        pos += 1
    return pos


def strip_segment(text: str, start: int, end: int) -> Segment:
    """Trim whitespace from ``text[start:end]`` keeping the absolute offset."""
    left = skip_whitespace(text, start)
    right = end
    while right > left and text[right - 1] in WHITESPACE:
        right -= 1
    return Segment(text[left:right], left)


def find_matching(text: str, open_index: int) -> int:
    """
    Find the index of the delimiter closing the one at ``open_index``.

    Works for both ``[`` and ``{``; quoted strings and nested containers
    are skipped.

    Raises:
        StructuralError: If there is no opener at ``open_index``, the
            container is never closed, or it is closed by the wrong kind
            of delimiter.
    """
    if open_index < 0 or open_index >= len(text) or text[open_index] not in _CLOSERS:
        raise StructuralError("Expected '[' or '{'", position=max(open_index, 0))

    opener = text[open_index]
    scanner = Scanner(text, open_index)
    while not scanner.exhausted:
        c = scanner.step()
        if scanner.at_top_level:
            if c != _CLOSERS[opener]:
                raise StructuralError(
                    f"Mismatched '{c}' closing '{opener}' opened at offset {open_index}",
                    position=scanner.pos - 1,
                )
            return scanner.pos - 1

    kind = "object" if opener == "{" else "array"
    raise StructuralError(f"Unterminated {kind}", position=open_index)


def split_top_level(text: str, start: int, end: int) -> List[Segment]:
    """
    Split ``text[start:end]`` on commas that are not nested.

    Used on the inside of an array or object. A blank range yields no
    segments; an empty segment between commas is an error.

    Raises:
        StructuralError: On empty elements, unterminated strings or
            unbalanced nesting inside the range.
    """
    if strip_segment(text, start, end).text == "":
        return []

    segments: List[Segment] = []
    scanner = Scanner(text, start)
    seg_start = start
    while scanner.pos < end:
        if scanner.at_top_level and scanner.peek() == ",":
            segments.append(_non_empty(text, seg_start, scanner.pos))
            scanner.pos += 1
            seg_start = scanner.pos
            continue
        scanner.step()

    if scanner.in_string:
        raise StructuralError("Unterminated string", position=seg_start)
    if not scanner.at_top_level:
        raise StructuralError("Unbalanced brackets", position=seg_start)

    segments.append(_non_empty(text, seg_start, end))
    return segments


def _non_empty(text: str, start: int, end: int) -> Segment:
    segment = strip_segment(text, start, end)
    if not segment.text:
        raise StructuralError("Empty element", position=segment.start)
    return segment


def find_string_end(text: str, quote_index: int) -> int:
    """
    Return the index of the quote closing the string opened at ``quote_index``.

    Raises:
        StructuralError: If the string is never closed.
    """
    i = quote_index + 1
    while i < len(text):
        c = text[i]
        if c == "\\":
            i += 2
            continue
        if c == '"':
            return i
        i += 1
    raise StructuralError("Unterminated string", position=quote_index)


def decode_string(segment: Segment) -> str:
    """
    Turn a quoted string token into its value.

    The segment must be exactly one string token. Escapes written by the
    writer are reversed, along with the remaining standard JSON escapes.

    Raises:
        StructuralError: If the token is not a single well-formed string.
    """
    raw, offset = segment
    if not raw.startswith('"'):
        raise StructuralError("Expected a string", position=offset)
    try:
        end = find_string_end(raw, 0)
    except StructuralError:
        raise StructuralError("Unterminated string", position=offset) from None
    if end != len(raw) - 1:
        raise StructuralError("Unexpected text after string", position=offset + end + 1)

    out: List[str] = []
    i = 1
    while i < end:
        c = raw[i]
        if c != "\\":
            out.append(c)
            i += 1
            continue
        code = raw[i + 1]
        if code in _ESCAPES:
            out.append(_ESCAPES[code])
            i += 2
        elif code == "u":
            digits = raw[i + 2:i + 6]
            if len(digits) != 4 or any(d not in "0123456789abcdefABCDEF" for d in digits):
                raise StructuralError("Invalid \\u escape", position=offset + i)
            out.append(chr(int(digits, 16)))
            i += 6
        else:
            raise StructuralError(f"Invalid escape '\\{code}'", position=offset + i)

    value = "".join(out)
    if "\\u" not in raw:
        return value
    # Surrogate pairs from \u escapes collapse into one code point.
    try:
        return value.encode("utf-16-le", "surrogatepass").decode("utf-16-le")
    except UnicodeDecodeError:
        raise StructuralError("Unpaired surrogate in string", position=offset) from None


def encode_string(value: str) -> str:
    """Quote ``value`` for output, escaping quotes, backslashes and control characters."""
    out = ['"']
    for c in value:
        if c in _WRITE_ESCAPES:
            out.append(_WRITE_ESCAPES[c])
        elif c < " ":
            out.append(f"\\u{ord(c):04x}")
        else:
            out.append(c)
    out.append('"')
    return "".join(out)


def parse_members(text: str, segment: Segment, path: str = "$") -> Dict[str, Segment]:
    """
    Split an object into its members.

    Args:
        text: The whole document.
        segment: The object, braces included.
        path: Location of the object, used in error messages.

    Returns:
        Mapping of decoded key to raw value segment, in document order.

    Raises:
        StructuralError: If the segment is not an object, a member is not a
            ``"key": value`` pair, or a key appears twice.
    """
    start = segment.start
    end = start + len(segment.text)
    if not segment.text.startswith("{"):
        raise StructuralError(f"Expected an object at {path}", position=start, path=path)
    close = find_matching(text, start)
    if close != end - 1:
        raise StructuralError(
            f"Unexpected text after object at {path}", position=close + 1, path=path
        )

    members: Dict[str, Segment] = {}
    for member in split_top_level(text, start + 1, close):
        if not member.text.startswith('"'):
            raise StructuralError(
                f"Expected a quoted key in object at {path}",
                position=member.start,
                path=path,
            )
        key_end = find_string_end(text, member.start)
        key = decode_string(Segment(text[member.start:key_end + 1], member.start))

        colon = skip_whitespace(text, key_end + 1)
        if colon >= close or text[colon] != ":":
            raise StructuralError(
                f"Expected ':' after key '{key}' at {path}", position=colon, path=path
            )
        value = strip_segment(text, colon + 1, member.start + len(member.text))
        if not value.text:
            raise StructuralError(
                f"Missing value for key '{key}' at {path}", position=colon, path=path
            )
        if key in members:
            raise StructuralError(
                f"Duplicate key '{key}' at {path}", position=member.start, path=path
            )
        check_value(text, value, f"{path}.{key}")
        members[key] = value

    return members


def extract_value(text: str, segment: Segment, key: str, path: str = "$") -> Optional[Segment]:
    """
    Return the raw value stored under ``key`` in an object, or None.

    Only the object's own members are considered; a key of the same name
    inside a nested value never matches. Keys are compared exactly.
    """
    return parse_members(text, segment, path).get(key)


def split_array(text: str, segment: Segment, path: str = "$") -> List[Segment]:
    """
    Split an array into its element segments, in order.

    Raises:
        StructuralError: If the segment is not exactly one array.
    """
    start = segment.start
    if not segment.text.startswith("["):
        raise StructuralError(f"Expected an array at {path}", position=start, path=path)
    close = find_matching(text, start)
    if close != start + len(segment.text) - 1:
        raise StructuralError(
            f"Unexpected text after array at {path}", position=close + 1, path=path
        )
    return split_top_level(text, start + 1, close)


def check_value(text: str, segment: Segment, path: str = "$") -> None:
    """
    Check that a value segment is exactly one well-formed value.

    Strings, numbers and ``true``/``false``/``null`` are checked as tokens;
    objects and arrays are checked all the way down.

    Raises:
        StructuralError: If the segment is not a single valid value.
    """
    raw = segment.text
    if raw.startswith('"'):
        decode_string(segment)
    elif raw.startswith("{"):
        parse_members(text, segment, path)
    elif raw.startswith("["):
        for i, element in enumerate(split_array(text, segment, path)):
            check_value(text, element, f"{path}[{i}]")
    elif raw not in LITERALS and not NUMBER_RE.fullmatch(raw):
        raise StructuralError(
            f"Invalid value at {path}", position=segment.start, path=path
        )
