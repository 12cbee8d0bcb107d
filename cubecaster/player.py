"""The player's position, view direction and camera plane, and how keys move them."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass

from cubecaster.mapfile import GameMap

MOVE_SPEED = 0.08
ROTATION_SPEED = 0.05
PLANE_LENGTH = 0.66


class Key(enum.IntEnum):
    """Key symbols the game reacts to."""

    ESC = 0xFF1B
    A = 0x61
    W = 0x77
    D = 0x64
    S = 0x73
    LEFT = 0xFF51
    RIGHT = 0xFF53


# Direction and camera plane for each spawn letter: dir_x, dir_y, plane_x, plane_y.
_SPAWN_VECTORS = {
    "N": (0.0, -1.0, PLANE_LENGTH, 0.0),
    "S": (0.0, 1.0, -PLANE_LENGTH, 0.0),
    "E": (1.0, 0.0, 0.0, PLANE_LENGTH),
    "W": (1.0, 0.0, 0.0, -PLANE_LENGTH),
}


@dataclass
class Player:
    """Position in map units (x is the column, y the row), view direction and camera plane."""

    pos_x: float
    pos_y: float
    dir_x: float
    dir_y: float
    plane_x: float
    plane_y: float

    @classmethod
    def from_spawn(cls, row: int, col: int, orientation: str) -> Player:
        """Place a player in the middle of the spawn cell, facing as the map letter says."""
        try:
            dir_x, dir_y, plane_x, plane_y = _SPAWN_VECTORS[orientation]
        except KeyError:
            raise ValueError(f"unknown spawn orientation: {orientation!r}") from None
        return cls(col + 0.5, row + 0.5, dir_x, dir_y, plane_x, plane_y)

    def rotate(self, angle: float) -> None:
        """Turn the view direction and camera plane by ``angle`` radians."""
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        self.dir_x, self.dir_y = (
            self.dir_x * cos_a - self.dir_y * sin_a,
            self.dir_x * sin_a + self.dir_y * cos_a,
        )
        self.plane_x, self.plane_y = (
            self.plane_x * cos_a - self.plane_y * sin_a,
            self.plane_x * sin_a + self.plane_y * cos_a,
        )

    def look_left(self) -> None:
        """Turn the camera left by one rotation step."""
        self.rotate(-ROTATION_SPEED)

    def look_right(self) -> None:
        """Turn the camera right by one rotation step."""
        self.rotate(ROTATION_SPEED)

    def try_move(self, game_map: GameMap, x: float, y: float) -> bool:
        """Move to ``x``, ``y`` unless that point lies in a wall; tell whether it moved."""
        if game_map.is_wall(int(y), int(x)):
            return False
        self.pos_x = x
        self.pos_y = y
        return True

    def move_forward(self, game_map: GameMap) -> bool:
        """Step along the view direction."""
        return self.try_move(
            game_map,
            self.pos_x + self.dir_x * MOVE_SPEED,
            self.pos_y + self.dir_y * MOVE_SPEED,
        )

    def move_backward(self, game_map: GameMap) -> bool:
        """Step against the view direction."""
        return self.try_move(
            game_map,
            self.pos_x - self.dir_x * MOVE_SPEED,
            self.pos_y - self.dir_y * MOVE_SPEED,
        )

    def strafe_left(self, game_map: GameMap) -> bool:
        """Step sideways to the left of the view direction."""
        return self.try_move(
            game_map,
            self.pos_x + self.dir_y * MOVE_SPEED,
            self.pos_y - self.dir_x * MOVE_SPEED,
        )

    def strafe_right(self, game_map: GameMap) -> bool:
        """Step sideways to the right of the view direction."""
        return self.try_move(
            game_map,
            self.pos_x - self.dir_y * MOVE_SPEED,
            self.pos_y + self.dir_x * MOVE_SPEED,
        )

    def handle_key(self, key: int, game_map: GameMap) -> bool:
        """Apply a key press; return False when the key asks to quit, True otherwise.

        Keys the game does not use are ignored.
        """
        if key == Key.ESC:
            return False
        movers = {
            Key.W: self.move_forward,
            Key.S: self.move_backward,
            Key.A: self.strafe_left,
            Key.D: self.strafe_right,
        }
        turners = {Key.LEFT: self.look_left, Key.RIGHT: self.look_right}
        if key in movers:
            movers[key](game_map)
        elif key in turners:
            turners[key]()
        return True