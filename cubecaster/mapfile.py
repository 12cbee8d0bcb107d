"""Extraction and validation of the grid section of a scene file."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from itertools import pairwise

WALL = "1"
FLOOR = "0"
EMPTY = " "
ORIENTATIONS = "NSEW"
_PLAIN_CELLS = frozenset((WALL, FLOOR, EMPTY))

_BAD_CONTENTS = "Invalid contents in map"
_BAD_WALLS = "Invalid walls of map"
_BAD_LAST_WALL = "Invalid last wall of map"


class MapError(ValueError):
    """Raised when the map section of a scene is missing or malformed."""


@dataclass(frozen=True)
class Spawn:
    """Where the player starts and which way it faces (N, S, E or W)."""

    row: int
    col: int
    orientation: str


@dataclass(frozen=True)
class GameMap:
    """A validated grid of rows; the spawn cell has been turned into floor."""

    rows: tuple[str, ...]
    spawn: Spawn

    @property
    def height(self) -> int:
        """Number of rows."""
        return len(self.rows)

    @property
    def width(self) -> int:
        """Length of the longest row."""
        return max((len(row) for row in self.rows), default=0)

    def cell(self, row: int, col: int) -> str:
        """Return the character at ``row``, ``col``; a space outside the grid."""
        if row < 0 or col < 0 or row >= len(self.rows):
            return EMPTY
        line = self.rows[row]
        return line[col] if col < len(line) else EMPTY

    def is_wall(self, row: int, col: int) -> bool:
        """Tell whether the cell at ``row``, ``col`` is a wall."""
        return self.cell(row, col) == WALL


def strip_line(line: str) -> str:
    """Cut ``line`` at its first newline and drop trailing spaces.

    A line made only of spaces is kept as it is; an empty line stays empty.
    """
    line = line.split("\n", 1)[0]
    stripped = line.rstrip(EMPTY)
    return stripped if stripped else line


def leading_spaces(line: str) -> int:
    """Count the spaces at the start of ``line``."""
    return len(line) - len(line.lstrip(EMPTY))


def _starts_map(line: str) -> bool:
    return line[leading_spaces(line):].startswith(WALL)


def extract_map_rows(lines: Iterable[str]) -> list[str]:
    """Return the map rows: from the first line starting with a wall up to an empty line.

    Lines before the map are skipped; lines after the first empty one are ignored.
    """
    source = iter(lines)
    line = next(source, None)
    if line is None:
        raise MapError("Invalid map1")
    while not _starts_map(line):
        line = next(source, None)
        if line is None:
            raise MapError("Invalid map2")
    rows: list[str] = []
    while line is not None:
        row = strip_line(line)
        if not row:
            break
        rows.append(row)
        line = next(source, None)
    return rows


def find_spawn(rows: Sequence[str]) -> Spawn:
    """Locate the single spawn cell; every other cell must be 0, 1 or a space."""
    spawns: list[Spawn] = []
    for row_index, row in enumerate(rows):
        for col, char in enumerate(row):
            if char in ORIENTATIONS:
                spawns.append(Spawn(row_index, col, char))
            elif char not in _PLAIN_CELLS:
                raise MapError(_BAD_CONTENTS)
    if len(spawns) != 1:
        raise MapError(_BAD_CONTENTS)
    return spawns[0]


def _char_at(row: str, col: int) -> str:
    return row[col] if 0 <= col < len(row) else ""


def _check_bottom_gap(rows: Sequence[str], index: int, col: int) -> None:
    # Only gaps in the bottom row are traced upwards to a closing wall.
    if index != len(rows) - 1:
        return
    above = index - 1
    while above >= 0 and _char_at(rows[above], col) == EMPTY:
        above -= 1
    if above < 0 or _char_at(rows[above], col) != WALL:
        raise MapError(_BAD_LAST_WALL)


def validate_walls(rows: Sequence[str]) -> None:
    """Check that the map is closed by walls; raise MapError otherwise."""
    last = len(rows) - 1
    for index, row in enumerate(rows):
        if index in (0, last):
            for col in range(leading_spaces(row), len(row)):
                if row[col] == EMPTY:
                    _check_bottom_gap(rows, index, col)
                elif row[col] != WALL:
                    raise MapError(_BAD_WALLS)
        if not row or row[0] not in (WALL, EMPTY) or row[-1] != WALL:
            raise MapError(_BAD_WALLS)
    for above, below in pairwise(rows):
        if len(above) < len(below) and set(below[len(above):]) != {WALL}:
            raise MapError(_BAD_WALLS)
        if len(above) > len(below) and set(above[len(below):]) != {WALL}:
            raise MapError(_BAD_WALLS)


def parse_map(lines: Iterable[str]) -> GameMap:
    """Read, check and return the map found among the lines of a scene file."""
    rows = extract_map_rows(lines)
    spawn = find_spawn(rows)
    spawn_row = rows[spawn.row]
    rows[spawn.row] = spawn_row[: spawn.col] + FLOOR + spawn_row[spawn.col + 1 :]
    validate_walls(rows)
    return GameMap(tuple(rows), spawn)