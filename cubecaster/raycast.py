"""Grid ray casting and textured wall rendering into a pixel frame."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field

from cubecaster.config import Direction
from cubecaster.mapfile import GameMap
from cubecaster.player import Player
from cubecaster.xpm import XpmImage

WIN_WIDTH = 500
WIN_HEIGHT = 400
TEX_SIZE = 64
SHADE_MASK = 0x7F7F7F
_MIN_DISTANCE = 1e-9


@dataclass
class Frame:
    """A width x height grid of 32-bit pixels, row-major, initially black."""

    width: int
    height: int
    pixels: list[int] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("frame dimensions must be positive")
        self.pixels = [0] * (self.width * self.height)

    def put(self, x: int, y: int, color: int) -> None:
        """Set a pixel; points outside the frame are ignored."""
        if 0 <= x < self.width and 0 <= y < self.height:
            self.pixels[y * self.width + x] = color & 0xFFFFFFFF

    def get(self, x: int, y: int) -> int:
        """Return the pixel at ``x``, ``y``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} frame")
        return self.pixels[y * self.width + x]


@dataclass(frozen=True)
class Texture:
    """A TEX_SIZE x TEX_SIZE wall texture of 32-bit pixels."""

    pixels: tuple[int, ...]

    def __post_init__(self) -> None:
        if len(self.pixels) != TEX_SIZE * TEX_SIZE:
            raise ValueError(f"a texture holds exactly {TEX_SIZE * TEX_SIZE} pixels")

    @classmethod
    def from_xpm(cls, image: XpmImage) -> Texture:
        """Copy an image into a texture, taking the image height as the row stride.

        Square images up to TEX_SIZE wide land unchanged; the rest of the
        texture stays black, and pixels that would fall outside are dropped.
        """
        pixels = [0] * (TEX_SIZE * TEX_SIZE)
        for y in range(image.height):
            for x in range(image.width):
                index = image.height * y + x
                if index < len(pixels) and index < len(image.pixels):
                    pixels[index] = image.pixels[index]
        return cls(tuple(pixels))

    def sample(self, x: int, y: int) -> int:
        """Return the texel at column ``x`` and row ``y``."""
        if not (0 <= x < TEX_SIZE and 0 <= y < TEX_SIZE):
            raise IndexError(f"texel ({x}, {y}) outside the texture")
        return self.pixels[TEX_SIZE * y + x]


@dataclass(frozen=True)
class RayHit:
    """Where a screen column's ray met a wall and how tall that wall is drawn."""

    map_x: int
    map_y: int
    side: int
    direction: Direction
    ray_x: float
    ray_y: float
    distance: float
    line_height: int
    draw_start: int
    draw_end: int
    wall_x: float


def _inverse_length(component: float) -> float:
    return math.inf if component == 0 else abs(1 / component)


def cast_ray(
    player: Player,
    game_map: GameMap,
    column: int,
    width: int = WIN_WIDTH,
    height: int = WIN_HEIGHT,
) -> RayHit:
    """Trace the ray of screen ``column`` through the grid until it meets a wall.

    Raises ValueError if the ray leaves the grid without meeting one.
    """
    camera_x = 2 * column / width - 1
    ray_x = player.dir_x + player.plane_x * camera_x
    ray_y = player.dir_y + player.plane_y * camera_x
    map_x = int(player.pos_x)
    map_y = int(player.pos_y)
    delta_x = _inverse_length(ray_x)
    delta_y = _inverse_length(ray_y)

    if ray_x < 0:
        step_x = -1
        side_x = (player.pos_x - map_x) * delta_x
    else:
        step_x = 1
        side_x = (map_x + 1.0 - player.pos_x) * delta_x
    if ray_y < 0:
        step_y = -1
        side_y = (player.pos_y - map_y) * delta_y
    else:
        step_y = 1
        side_y = (map_y + 1.0 - player.pos_y) * delta_y

    while True:
        if side_x < side_y:
            side_x += delta_x
            map_x += step_x
            side = 0
        else:
            side_y += delta_y
            map_y += step_y
            side = 1
        if game_map.is_wall(map_y, map_x):
            break
        if not (0 <= map_y < game_map.height and 0 <= map_x < game_map.width):
            raise ValueError(f"ray of column {column} left the map without hitting a wall")

    if side == 0:
        direction = Direction.WEST if ray_x < 0 else Direction.EAST
        distance = side_x - delta_x
    else:
        direction = Direction.SOUTH if ray_y > 0 else Direction.NORTH
        distance = side_y - delta_y

    line_height = int(height / (distance if distance > 0 else _MIN_DISTANCE))
    draw_start = max(0, -(line_height // 2) + height // 2)
    draw_end = min(height - 1, line_height // 2 + height // 2)
    if side == 0:
        wall_x = player.pos_y + distance * ray_y
    else:
        wall_x = player.pos_x + distance * ray_x
    wall_x -= math.floor(wall_x)

    return RayHit(
        map_x=map_x,
        map_y=map_y,
        side=side,
        direction=direction,
        ray_x=ray_x,
        ray_y=ray_y,
        distance=distance,
        line_height=line_height,
        draw_start=draw_start,
        draw_end=draw_end,
        wall_x=wall_x,
    )


def draw_background(frame: Frame, floor: int, ceiling: int) -> None:
    """Paint the lower half of the frame with ``floor`` and the upper half with ``ceiling``."""
    half = frame.height // 2
    split = half * frame.width
    frame.pixels[split:] = [floor & 0xFFFFFFFF] * (len(frame.pixels) - split)
    frame.pixels[:split] = [ceiling & 0xFFFFFFFF] * split


def draw_column(frame: Frame, hit: RayHit, texture: Texture, column: int) -> None:
    """Draw the textured wall slice of ``hit`` into ``column``; y-side walls are darkened."""
    if hit.draw_end <= hit.draw_start:
        return
    tex_x = int(hit.wall_x * TEX_SIZE)
    if (hit.side == 0 and hit.ray_x < 0) or (hit.side == 1 and hit.ray_y > 0):
        tex_x = TEX_SIZE - tex_x - 1
    step = TEX_SIZE / hit.line_height
    tex_pos = (hit.draw_start - frame.height // 2 + hit.line_height // 2) * step
    for y in range(hit.draw_start, hit.draw_end):
        tex_y = int(tex_pos) & (TEX_SIZE - 1)
        tex_pos += step
        color = texture.sample(tex_x, tex_y)
        if hit.side == 1:
            color = (color >> 1) & SHADE_MASK
        frame.put(column, y, color)


def render_frame(
    player: Player,
    game_map: GameMap,
    textures: Mapping[Direction, Texture],
    floor: int,
    ceiling: int,
    width: int = WIN_WIDTH,
    height: int = WIN_HEIGHT,
) -> Frame:
    """Render the view of ``player``: background first, then one wall slice per column."""
    frame = Frame(width, height)
    draw_background(frame, floor, ceiling)
    for column in range(width):
        hit = cast_ray(player, game_map, column, width, height)
        draw_column(frame, hit, textures[hit.direction], column)
    return frame