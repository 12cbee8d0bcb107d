"""Scene-file settings: wall textures and floor and ceiling colours."""

from __future__ import annotations

import enum
import os
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from os import PathLike
from types import MappingProxyType

from cubecaster.mapfile import GameMap, leading_spaces, parse_map

SCENE_SUFFIX = ".cub"
_MAP_START = "1"
_COLOR_KEYS = ("C", "F")
_PATH_MARKERS = ".xpm"

_BAD_COLOR = "Invalid color"
_BAD_TEXTURE = "Invalid texture"
_BAD_TEXTURE_PATH = "Invalid texture path"
_MISSING_SETTINGS = "Invalid textures"

_ATOI_PREFIX = re.compile(r"[ \t\n\v\f\r]*([+-]?)([0-9]*)")


class ConfigError(ValueError):
    """Raised when the settings part of a scene file is missing or malformed."""


class Direction(enum.IntEnum):
    """Compass directions; north is towards smaller row numbers."""

    NORTH = 0
    SOUTH = 1
    EAST = 2
    WEST = 3


# Identifier letters and the slot its texture goes to. A texture is keyed by
# the direction a ray travels when it meets the face the texture covers, so
# the north face (NO) is seen by rays going south.
_TEXTURE_KEYS = (
    ("N", "O", Direction.SOUTH),
    ("S", "O", Direction.NORTH),
    ("W", "E", Direction.EAST),
    ("E", "A", Direction.WEST),
)


@dataclass(frozen=True)
class SceneConfig:
    """Texture paths and the packed 0xRRGGBB floor and ceiling colours.

    ``textures`` is keyed by the direction a ray travels when it hits the
    wall face the texture covers: the ``NO`` texture is under
    ``Direction.SOUTH``, ``SO`` under ``NORTH``, ``WE`` under ``EAST`` and
    ``EA`` under ``WEST``.
    """

    textures: Mapping[Direction, str]
    floor: int
    ceiling: int


@dataclass(frozen=True)
class Scene:
    """A fully read scene: its settings and its validated map."""

    config: SceneConfig
    game_map: GameMap


def _wrap_int(value: int) -> int:
    return ((value + 2**31) % 2**32) - 2**31


def atoi(text: str) -> int:
    """Read a leading decimal integer, after whitespace and an optional sign.

    Text with no digits gives 0; the result wraps like a 32-bit int.
    """
    sign, digits = _ATOI_PREFIX.match(text).groups()
    value = 0
    for digit in digits:
        value = _wrap_int(value * 10 + int(digit))
    return _wrap_int(-value if sign == "-" else value)


def split_fields(text: str, sep: str) -> list[str]:
    """Split ``text`` on ``sep``, dropping empty fields."""
    return [part for part in text.split(sep) if part]


def trim_chars(text: str, chars: str) -> str:
    """Remove every character of ``chars`` from both ends of ``text``."""
    return text.strip(chars)


def _is_digits(text: str) -> bool:
    return all("0" <= char <= "9" for char in text)


def parse_color(value: str) -> int:
    """Parse ``R,G,B`` with components 0..255 into a packed 0xRRGGBB value.

    Empty fields are skipped, fields may hold spaces, and fields past the
    third are accepted but ignored.
    """
    text = trim_chars(value, " ").split("\n", 1)[0].rstrip(" ")
    if not text:
        raise ConfigError(_BAD_COLOR)
    fields = split_fields(text, ",")
    for field in fields:
        significant = field[leading_spaces(field):].replace(" ", "")
        if significant and (not _is_digits(significant) or not 0 <= atoi(field) <= 255):
            raise ConfigError(_BAD_COLOR)
    if len(fields) < 3:
        raise ConfigError(_BAD_COLOR)
    red, green, blue = (atoi(field) for field in fields[:3])
    return (red << 16) | (green << 8) | blue


def parse_texture_path(value: str) -> str:
    """Return the texture path held in ``value`` once checked to be readable.

    The path must be longer than four characters, with ``.``, ``x``, ``p``
    or ``m`` fourth from the end.
    """
    path = trim_chars(value.split("\n", 1)[0], " ")
    if len(path) <= 4 or path[-4] not in _PATH_MARKERS:
        raise ConfigError(_BAD_TEXTURE_PATH)
    try:
        fd = os.open(path, os.O_RDONLY)
    except OSError as exc:
        raise ConfigError(_BAD_TEXTURE) from exc
    os.close(fd)
    return path


def _texture_key(text: str) -> tuple[str, str, Direction] | None:
    for first, second, slot in _TEXTURE_KEYS:
        if len(text) > 2 and text[0] == first and text[1] == second and text[2] != second:
            return first, second, slot
    return None


def parse_config(lines: Iterable[str]) -> SceneConfig:
    """Read the settings lines that come before the map.

    Each of NO, SO, WE, EA, F and C must appear exactly once; other lines are
    ignored. Reading stops at the first line whose first non-space
    character is a wall.
    """
    textures: dict[Direction, str] = {}
    colors: dict[str, int] = {}
    for line in lines:
        rest = line[leading_spaces(line):]
        if rest.startswith(_MAP_START):
            break
        key = _texture_key(rest)
        if key is not None:
            first, second, slot = key
            if slot in textures:
                raise ConfigError(_BAD_TEXTURE)
            textures[slot] = parse_texture_path(trim_chars(trim_chars(rest, first), second))
        elif rest[:1] in _COLOR_KEYS:
            letter = rest[0]
            color = parse_color(trim_chars(rest, letter))
            if letter in colors:
                raise ConfigError(_BAD_COLOR)
            colors[letter] = color
    if len(textures) != len(_TEXTURE_KEYS) or len(colors) != len(_COLOR_KEYS):
        raise ConfigError(_MISSING_SETTINGS)
    return SceneConfig(
        textures=MappingProxyType(dict(sorted(textures.items()))),
        floor=colors["F"],
        ceiling=colors["C"],
    )


def _split_lines(text: str) -> list[str]:
    parts = text.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def load_scene(path: str | PathLike[str]) -> Scene:
    """Read a ``.cub`` scene file: its map is checked first, then its settings."""
    name = os.fspath(path)
    if not name.endswith(SCENE_SUFFIX):
        raise ConfigError("Invalid map path")
    try:
        with open(name, encoding="utf-8", errors="surrogateescape", newline="") as handle:
            text = handle.read()
    except OSError as exc:
        raise ConfigError("Failed to open file") from exc
    lines = _split_lines(text)
    game_map = parse_map(lines)
    config = parse_config(lines)
    return Scene(config=config, game_map=game_map)