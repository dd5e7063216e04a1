"""
Lenient JavaScript/TypeScript Literal Parser

Reads the value of an `export const name = [...]` declaration straight from
source text. The grammar is the permissive subset of JS object/array literals
that hand-written data files use:

- bare, quoted or numeric object keys
- single, double and backtick quoted strings (no ${} interpolation)
- trailing commas, line and block comments
- true / false / null / undefined
- decimal, hex, octal and binary numbers with optional `_` separators

Anything outside that subset (references to other constants, spreads,
function calls) is rejected with the line and column where it appears.
"""

import math
import re
from typing import Any, Dict, List, Optional, Tuple


class LiteralSyntaxError(ValueError):
    """Raised when source text is not a supported literal."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(message)


# export const tasksData = [      export const tasksData: Task[] = [
DECLARATION_RE = re.compile(
    r"export\s+const\s+([A-Za-z_$][\w$]*)\s*(?::\s*[^=;]+?)?\s*=\s*\[",
)

_IDENT_START = re.compile(r"[A-Za-z_$]")
_IDENT = re.compile(r"[A-Za-z_$][\w$]*")
_NUMBER = re.compile(
    r"""
    [+-]?
    (?:
        0[xX][0-9a-fA-F](?:_?[0-9a-fA-F])*
      | 0[oO][0-7](?:_?[0-7])*
      | 0[bB][01](?:_?[01])*
      | (?:\d(?:_?\d)*(?:\.(?:\d(?:_?\d)*)?)?|\.\d(?:_?\d)*)
        (?:[eE][+-]?\d(?:_?\d)*)?
    )
    """,
    re.VERBOSE,
)

# Largest integer a JS number holds exactly (Number.MAX_SAFE_INTEGER)
MAX_SAFE_INTEGER = 2 ** 53 - 1

_KEYWORDS = {"true": True, "false": False, "null": None, "undefined": None}

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}


class LiteralParser:
    """
    Recursive-descent parser over a single source string.

    The parser works on offsets into the original text so errors can point at
    the exact line and column of the offending token.
    """

    def __init__(self, text: str):
        self.text = text
        self.length = len(text)

    # ── Public API ──────────────────────────────────────────────────────

    def parse_value(self, pos: int) -> Tuple[Any, int]:
        """Parse one value starting at `pos`, return it and the offset after it."""
        pos = self.skip(pos)
        if pos >= self.length:
            self.fail("Unexpected end of input", pos)

        char = self.text[pos]
        if char == "[":
            return self._parse_array(pos)
        if char == "{":
            return self._parse_object(pos)
        if char in "'\"`":
            return self._parse_string(pos)
        if char.isdigit() or char in "+-.":
            return self._parse_number(pos)

        match = _IDENT.match(self.text, pos)
        if match:
            word = match.group(0)
            if word in _KEYWORDS:
                return _KEYWORDS[word], match.end()
            self.fail(f"Unsupported identifier {word!r}; only literal values are allowed", pos)

        self.fail(f"Unexpected character {char!r}", pos)

    def location(self, pos: int) -> Tuple[int, int]:
        """Convert an offset into a 1-based (line, column) pair."""
        line = self.text.count("\n", 0, pos) + 1
        column = pos - (self.text.rfind("\n", 0, pos) + 1) + 1
        return line, column

    # ── Containers ──────────────────────────────────────────────────────

    def _parse_array(self, pos: int) -> Tuple[List[Any], int]:
        items: List[Any] = []
        pos += 1  # [

        while True:
            pos = self.skip(pos)
            if self._peek(pos) == "]":
                return items, pos + 1
            if self._peek(pos) == ".":
                if self.text.startswith("...", pos):
                    self.fail("Spread elements are not supported", pos)

            value, pos = self.parse_value(pos)
            items.append(value)

            pos = self.skip(pos)
            char = self._peek(pos)
            if char == ",":
                pos += 1
            elif char == "]":
                return items, pos + 1
            else:
                self.fail("Expected ',' or ']' in array", pos)

    def _parse_object(self, pos: int) -> Tuple[Dict[str, Any], int]:
        result: Dict[str, Any] = {}
        pos += 1  # {

        while True:
            pos = self.skip(pos)
            if self._peek(pos) == "}":
                return result, pos + 1

            key, pos = self._parse_key(pos)

            pos = self.skip(pos)
            if self._peek(pos) != ":":
                self.fail(f"Expected ':' after key {key!r}", pos)
            value, pos = self.parse_value(pos + 1)
            result[key] = value

            pos = self.skip(pos)
            char = self._peek(pos)
            if char == ",":
                pos += 1
            elif char == "}":
                return result, pos + 1
            else:
                self.fail("Expected ',' or '}' in object", pos)

    def _parse_key(self, pos: int) -> Tuple[str, int]:
        char = self._peek(pos)
        if char in ("'", '"'):
            return self._parse_string(pos)
        if char == "[":
            self.fail("Computed property keys are not supported", pos)
        if char == ".":
            self.fail("Spread properties are not supported", pos)
        if char and (char.isdigit() or char in "+-."):
            number, end = self._parse_number(pos)
            return str(number), end
        if char and _IDENT_START.match(char):
            match = _IDENT.match(self.text, pos)
            return match.group(0), match.end()
        self.fail("Expected a property name", pos)

    # ── Scalars ─────────────────────────────────────────────────────────

    def _parse_string(self, pos: int) -> Tuple[str, int]:
        quote = self.text[pos]
        start = pos
        pos += 1
        chunks: List[str] = []

        while pos < self.length:
            char = self.text[pos]

            if char == quote:
                return "".join(chunks), pos + 1

            if char == "\\":
                escaped, pos = self._parse_escape(pos + 1)
                chunks.append(escaped)
                continue

            if quote == "`" and self.text.startswith("${", pos):
                self.fail("Template literal interpolation is not supported", pos)

            if char == "\n" and quote != "`":
                self.fail("Unterminated string literal", start)

            chunks.append(char)
            pos += 1

        self.fail("Unterminated string literal", start)

    def _parse_escape(self, pos: int) -> Tuple[str, int]:
        if pos >= self.length:
            self.fail("Unterminated escape sequence", pos - 1)

        char = self.text[pos]

        if char in _SIMPLE_ESCAPES and not (char == "0" and self._peek(pos + 1).isdigit()):
            return _SIMPLE_ESCAPES[char], pos + 1

        if char == "x":
            digits = self.text[pos + 1:pos + 3]
            if not re.fullmatch(r"[0-9a-fA-F]{2}", digits):
                self.fail("Invalid \\x escape", pos - 1)
            return chr(int(digits, 16)), pos + 3

        if char == "u":
            if self._peek(pos + 1) == "{":
                end = self.text.find("}", pos + 2)
                digits = self.text[pos + 2:end] if end != -1 else ""
                if not re.fullmatch(r"[0-9a-fA-F]{1,6}", digits) or int(digits, 16) > 0x10FFFF:
                    self.fail("Invalid \\u{} escape", pos - 1)
                code = int(digits, 16)
                end += 1
            else:
                digits = self.text[pos + 1:pos + 5]
                if not re.fullmatch(r"[0-9a-fA-F]{4}", digits):
                    self.fail("Invalid \\u escape", pos - 1)
                code = int(digits, 16)
                end = pos + 5

                # Join a UTF-16 surrogate pair into one code point
                if 0xD800 <= code <= 0xDBFF and self.text.startswith("\\u", end):
                    low_digits = self.text[end + 2:end + 6]
                    if re.fullmatch(r"[0-9a-fA-F]{4}", low_digits):
                        low = int(low_digits, 16)
                        if 0xDC00 <= low <= 0xDFFF:
                            code = 0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00)
                            end += 6

            # An unpaired surrogate cannot be encoded as UTF-8
            if 0xD800 <= code <= 0xDFFF:
                self.fail(f"Unpaired surrogate escape \\u{code:04X}", pos - 1)
            return chr(code), end

        # Line continuation
        if char == "\r":
            return "", pos + 2 if self._peek(pos + 1) == "\n" else pos + 1
        if char in "\n\u2028\u2029":
            return "", pos + 1

        # \' \" \\ \` and any other escaped character stand for themselves
        return char, pos + 1

    def _parse_number(self, pos: int) -> Tuple[Any, int]:
        match = _NUMBER.match(self.text, pos)
        if not match or match.group(0) in ("+", "-", "."):
            rest = _IDENT.match(self.text, pos + 1)
            if rest and rest.group(0) in ("Infinity", "NaN"):
                self.fail(f"{rest.group(0)} cannot be stored in SQL", pos)
            self.fail("Invalid number", pos)

        raw = match.group(0)
        end = match.end()
        if end < self.length and (self.text[end].isalnum() or self.text[end] in "_$"):
            self.fail(f"Invalid number {raw + self.text[end]!r}", pos)

        literal = raw.replace("_", "")
        sign = -1 if literal.startswith("-") else 1
        unsigned = literal.lstrip("+-")
        prefix = unsigned[:2].lower()

        if prefix in ("0x", "0o", "0b"):
            base = {"0x": 16, "0o": 8, "0b": 2}[prefix]
            return sign * int(unsigned[2:], base), end
        if any(c in unsigned for c in ".eE"):
            value = float(unsigned)
            if not math.isfinite(value):
                self.fail(f"Number {raw!r} is out of range and cannot be stored in SQL", pos)
            # Whole-valued decimals (10.0, 1e3) are integers, as in JS
            if value.is_integer() and value <= MAX_SAFE_INTEGER:
                return sign * int(value), end
            return sign * value, end
        return sign * int(unsigned), end

    # ── Lexical helpers ─────────────────────────────────────────────────

    def _peek(self, pos: int) -> str:
        return self.text[pos] if pos < self.length else ""

    def skip(self, pos: int) -> int:
        """Skip whitespace and comments."""
        while pos < self.length:
            char = self.text[pos]
            if char.isspace() or char == "\ufeff":
                pos += 1
            elif self.text.startswith("//", pos):
                newline = self.text.find("\n", pos)
                pos = self.length if newline == -1 else newline + 1
            elif self.text.startswith("/*", pos):
                end = self.text.find("*/", pos + 2)
                if end == -1:
                    self.fail("Unterminated block comment", pos)
                pos = end + 2
            else:
                break
        return pos

    def fail(self, message: str, pos: int):
        line, column = self.location(pos)
        raise LiteralSyntaxError(message, line, column)


def locate_collection(text: str) -> Tuple[str, int]:
    """
    Find the first `export const NAME = [` declaration.

    Returns the exported name and the offset of the opening bracket.
    """
    match = DECLARATION_RE.search(text)
    if not match:
        raise LiteralSyntaxError(
            "No exported array found; expected `export const name = [ ... ];`"
        )
    return match.group(1), match.end() - 1


def extract_collection(text: str) -> Tuple[str, List[Any]]:
    """Locate the exported array in `text` and parse it into Python values."""
    name, start = locate_collection(text)
    parser = LiteralParser(text)
    records, end = parser.parse_value(start)

    # `[...].map(...)` and friends are not plain literals; `as const` is fine
    following = parser.skip(end)
    if following < len(text) and text[following] in ".([":
        parser.fail("Exported array must be a plain literal", following)

    return name, records
