"""A textured grid raycaster: scene-file parsing, XPM textures, rendering and a pygame front end."""

__version__ = "0.1.0"
__all__ = ["app", "colors", "config", "mapfile", "player", "raycast", "xpm"]