"""Reading of XPM pixmaps into plain 32-bit pixel grids."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from os import PathLike

from cubecaster.colors import NONE_COLOR, lookup_color

TRANSPARENT_PIXEL = 0xFF000000

_HEX_PREFIX = re.compile(r"\s*([+-]?)(?:0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]*)")
_DECIMAL_PREFIX = re.compile(r"\s*([+-]?\d+)")
_NAME_LIMIT = 63


class XpmError(ValueError):
    """Raised when XPM data cannot be read or is malformed."""


@dataclass(frozen=True)
class XpmImage:
    """A decoded XPM image: row-major 32-bit pixels, 0x00RRGGBB or transparent."""

    width: int
    height: int
    pixels: tuple[int, ...]

    def __post_init__(self) -> None:
        if len(self.pixels) != self.width * self.height:
            raise ValueError("pixel count does not match width * height")

    def pixel(self, x: int, y: int) -> int:
        """Return the pixel at column ``x`` and row ``y``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")
        return self.pixels[y * self.width + x]


def split_words(text: str) -> list[str]:
    """Split ``text`` into words separated by spaces and tabs only."""
    return [word for word in text.replace("\t", " ").split(" ") if word]


def _find_outside_quotes(text: str, token: str) -> int:
    inside = False
    for pos, char in enumerate(text):
        if char == '"':
            inside = not inside
        if not inside and text.startswith(token, pos):
            return pos
    return -1


def strip_comments(text: str) -> str:
    """Blank out C-style comments that lie outside double quotes.

    Comment characters are replaced by spaces, so the length is unchanged.
    Block comments are removed first, then line comments with their newline.
    """
    while (begin := _find_outside_quotes(text, "/*")) != -1:
        end = text.find("*/", begin + 2)
        stop = len(text) if end == -1 else end + 2
        text = text[:begin] + " " * (stop - begin) + text[stop:]
    while (begin := _find_outside_quotes(text, "//")) != -1:
        end = text.find("\n", begin + 2)
        stop = len(text) if end == -1 else end + 1
        text = text[:begin] + " " * (stop - begin) + text[stop:]
    return text


def quoted_strings(text: str) -> Iterator[str]:
    """Yield the contents of each pair of double quotes in ``text``, in order."""
    pos = 0
    while (start := text.find('"', pos)) != -1:
        end = text.find('"', start + 1)
        if end == -1:
            return
        yield text[start + 1 : end]
        pos = end + 1


def color_from_spec(name: str, extra: str | None = None) -> int:
    """Turn an XPM colour value into 0xRRGGBB, or -1 for ``None``.

    ``#`` values are read as hexadecimal. Otherwise ``extra``, the following
    word, is joined to the name with a space before the lookup, so two-word
    names work. Unknown names give 0.
    """
    if name.startswith("#"):
        match = _HEX_PREFIX.match(name, 1)
        sign, digits = match.groups()
        value = int(digits, 16) if digits else 0
        return -value if sign == "-" else value
    if extra:
        name = f"{name} {extra}"[:_NAME_LIMIT]
    try:
        return lookup_color(name)
    except KeyError:
        return 0


def _leading_int(word: str) -> int:
    match = _DECIMAL_PREFIX.match(word)
    return int(match.group(1)) if match else 0


def _read_header(line: str) -> tuple[int, int, int, int]:
    words = split_words(line)
    if len(words) < 4:
        raise XpmError(f"incomplete XPM header: {line!r}")
    values = tuple(_leading_int(word) for word in words[:4])
    if any(value <= 0 for value in values):
        raise XpmError(f"invalid XPM header: {line!r}")
    return values  # type: ignore[return-value]


def _read_color(line: str, cpp: int) -> tuple[str, int]:
    words = split_words(line[cpp:])
    try:
        index = words.index("c")
        value = words[index + 1]
    except (ValueError, IndexError):
        raise XpmError(f"colour line without a 'c' value: {line!r}") from None
    extra = words[index + 2] if index + 2 < len(words) else None
    return line[:cpp], color_from_spec(value, extra)


def parse_xpm(lines: Iterable[str]) -> XpmImage:
    """Decode an XPM image from its quoted strings: header, colours, then rows."""
    source = iter(lines)

    def next_line(what: str) -> str:
        try:
            return next(source)
        except StopIteration:
            raise XpmError(f"XPM data ends before the {what}") from None

    width, height, ncolors, cpp = _read_header(next_line("header"))

    palette: dict[str, int] = {}
    for _ in range(ncolors):
        key, color = _read_color(next_line("colour table ends"), cpp)
        # Short keys take the last definition, longer ones the first.
        if cpp <= 2:
            palette[key] = color
        else:
            palette.setdefault(key, color)

    pixels: list[int] = []
    for _ in range(height):
        row = next_line("last pixel row")
        for x in range(width):
            color = palette.get(row[cpp * x : cpp * (x + 1)], 0)
            if color == NONE_COLOR:
                color = TRANSPARENT_PIXEL
            pixels.append(color & 0xFFFFFFFF)
    return XpmImage(width, height, tuple(pixels))


def parse_xpm_text(text: str) -> XpmImage:
    """Decode the text of an XPM file."""
    return parse_xpm(quoted_strings(strip_comments(text)))


def load_xpm(path: str | PathLike[str]) -> XpmImage:
    """Read and decode the XPM file at ``path``."""
    try:
        with open(path, encoding="latin-1") as handle:
            text = handle.read()
    except OSError as exc:
        raise XpmError(f"cannot read XPM file {path}: {exc}") from exc
    return parse_xpm_text(text)