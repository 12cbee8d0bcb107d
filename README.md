# cubecaster

cubecaster is a small first-person grid raycaster. It reads a `.cub` scene
file, which names four wall textures and gives a floor colour, a ceiling
colour and a map. It draws the scene in a 500×400 window with pygame.

## Installing

```
pip install .
```

## Running

```
cubecaster path/to/scene.cub
```

The command takes exactly one argument: a file whose name ends in `.cub`.

If the arguments are wrong, or the file cannot be opened or fails a check, no
window is opened. The command prints `Error` on standard error, then a line
that says what went wrong, and exits with status 1.

## Controls

Keys act when they are released.

| Key         | Action              |
|-------------|---------------------|
| W / S       | move forward / back |
| A / D       | strafe left / right |
| ← / →       | turn left / right   |
| Esc         | quit                |

Closing the window also quits. A move into a wall cell is refused.

## Scene files

The settings lines come before the map. They may appear in any order, and
blank lines and unrelated lines between them are ignored:

```
NO ./textures/north.xpm
SO ./textures/south.xpm
WE ./textures/west.xpm
EA ./textures/east.xpm
F 220,100,0
C 225,30,0

        1111111111111
        1000000000001
111111111011000001111
100000000000000000001
1111111110110000011101
        1000000N00001
        1111111111111
```

Settings rules:

- Each of `NO`, `SO`, `WE`, `EA`, `F` and `C` must appear exactly once.
- A texture path must be longer than four characters. Its fourth character
  from the end must be `.`, `x`, `p` or `m`, as in `.xpm`. The file must exist
  and be readable.
- `F` and `C` take at least three comma-separated values, each a whole number
  from 0 to 255. Values past the third are ignored.

Map rules:

- The map begins at the first line whose first non-space character is `1`,
  and ends at the first empty line. Trailing spaces on a row are dropped.
- It may use only `0` (floor), `1` (wall) and spaces.
- It must hold exactly one spawn: `N`, `S`, `E` or `W`. The letter gives the
  way the player first faces.
- Walls must close the map off: the first and last rows are walls, every row
  starts with a wall or a space and ends with a wall, and where one row is
  longer than its neighbour the extra part is wall.

Textures are XPM files. Colours may be `#rrggbb` values or X11 colour names
such as `dark slate`, `navy` or `gray50`, matched without regard to case. The
name `none` marks a transparent pixel. Up to 64×64 pixels of each texture are
used.

## Using it as a library

The package's modules can be used on their own:

- `cubecaster.config.load_scene` reads and checks a scene file and returns a
  `Scene` with its `config` (`SceneConfig`) and `game_map` (`GameMap`).
  Problems raise `ConfigError` or `MapError`.
- `cubecaster.mapfile.parse_map` checks the map lines on their own.
- `cubecaster.xpm.load_xpm` and `parse_xpm_text` decode a texture into an
  `XpmImage`. Problems raise `XpmError`.
- `cubecaster.colors.lookup_color` looks up a colour name.
- `cubecaster.player.Player` holds position, view direction and camera plane.
  `handle_key` applies a `Key`.
- `cubecaster.raycast.render_frame` draws a frame into a plain pixel buffer
  (`Frame`) with no window.
- `cubecaster.app.Game` ties these together. `press` applies a key and
  returns `False` for Escape, and `frame` renders the current view.

```python
from cubecaster.app import Game
from cubecaster.player import Key

game = Game.from_path("maps/simple.cub")
game.press(Key.W)
frame = game.frame()
print(hex(frame.get(250, 10)))   # pixel as 0xRRGGBB
```