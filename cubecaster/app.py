"""The game session and the command that opens a scene in a window."""

from __future__ import annotations

import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from os import PathLike

from cubecaster.config import ConfigError, Direction, Scene, SceneConfig, load_scene
from cubecaster.mapfile import MapError
from cubecaster.player import Key, Player
from cubecaster.raycast import WIN_HEIGHT, WIN_WIDTH, Frame, Texture, render_frame
from cubecaster.xpm import XpmError, load_xpm

WINDOW_TITLE = "cub3D"
_FRAME_RATE = 60
# Textures are loaded in this order, so the first unreadable one is reported.
_LOAD_ORDER = (Direction.EAST, Direction.NORTH, Direction.SOUTH, Direction.WEST)


def load_textures(config: SceneConfig) -> dict[Direction, Texture]:
    """Read the four wall textures named by ``config``."""
    textures: dict[Direction, Texture] = {}
    for direction in _LOAD_ORDER:
        try:
            image = load_xpm(config.textures[direction])
        except XpmError as exc:
            raise ConfigError("Error on img addr") from exc
        textures[direction] = Texture.from_xpm(image)
    return textures


@dataclass
class Game:
    """A loaded scene with its player and textures, ready to be drawn."""

    scene: Scene
    player: Player
    textures: Mapping[Direction, Texture]
    width: int = WIN_WIDTH
    height: int = WIN_HEIGHT

    @classmethod
    def from_path(cls, path: str | PathLike[str]) -> Game:
        """Load the scene at ``path``, place the player and read the textures."""
        scene = load_scene(path)
        spawn = scene.game_map.spawn
        player = Player.from_spawn(spawn.row, spawn.col, spawn.orientation)
        textures = load_textures(scene.config)
        return cls(scene=scene, player=player, textures=textures)

    def press(self, key: int) -> bool:
        """Apply a key; return False when the game should end."""
        return self.player.handle_key(key, self.scene.game_map)

    def frame(self) -> Frame:
        """Render the current view."""
        return render_frame(
            self.player,
            self.scene.game_map,
            self.textures,
            self.scene.config.floor,
            self.scene.config.ceiling,
            self.width,
            self.height,
        )


def _frame_bytes(frame: Frame) -> bytes:
    pixels = frame.pixels
    rgb = bytearray(3 * len(pixels))
    rgb[0::3] = bytes((pixel >> 16) & 0xFF for pixel in pixels)
    rgb[1::3] = bytes((pixel >> 8) & 0xFF for pixel in pixels)
    rgb[2::3] = bytes(pixel & 0xFF for pixel in pixels)
    return bytes(rgb)


def run(game: Game) -> None:
    """Show ``game`` in a window until it is closed or Escape is released."""
    import pygame

    key_map = {
        pygame.K_ESCAPE: Key.ESC,
        pygame.K_w: Key.W,
        pygame.K_a: Key.A,
        pygame.K_s: Key.S,
        pygame.K_d: Key.D,
        pygame.K_LEFT: Key.LEFT,
        pygame.K_RIGHT: Key.RIGHT,
    }
    pygame.init()
    try:
        screen = pygame.display.set_mode((game.width, game.height))
        pygame.display.set_caption(WINDOW_TITLE)
        clock = pygame.time.Clock()
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYUP and event.key in key_map:
                    if not game.press(key_map[event.key]):
                        running = False
            if not running:
                break
            frame = game.frame()
            surface = pygame.image.frombuffer(
                _frame_bytes(frame), (frame.width, frame.height), "RGB"
            )
            screen.blit(surface, (0, 0))
            pygame.display.flip()
            clock.tick(_FRAME_RATE)
    finally:
        pygame.quit()


def _report(message: str) -> int:
    print("Error", file=sys.stderr)
    print(message, file=sys.stderr)
    return 1


def main(argv: Sequence[str] | None = None) -> int:
    """Open the scene file given as the only argument; return the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        return _report("Number of arguments")
    try:
        game = Game.from_path(args[0])
    except (ConfigError, MapError) as exc:
        return _report(str(exc))
    run(game)
    return 0


if __name__ == "__main__":
    sys.exit(main())