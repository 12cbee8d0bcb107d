import pytest

from cubecaster.config import (
    ConfigError,
    Direction,
    Scene,
    atoi,
    load_scene,
    parse_color,
    parse_config,
    parse_texture_path,
    split_fields,
    trim_chars,
)
from cubecaster.mapfile import MapError, Spawn

MAP_LINES = ["111111\n", "100001\n", "10N001\n", "111111\n"]


@pytest.fixture
def textures(tmp_path):
    paths = {}
    for name in ("north", "south", "west", "east"):
        target = tmp_path / f"{name}.xpm"
        target.write_text("/* XPM */\n")
        paths[name] = str(target)
    return paths


def _settings(paths, floor="220,100,0", ceiling="225,30,0"):
    return [
        f"NO {paths['north']}\n",
        f"SO {paths['south']}\n",
        f"WE {paths['west']}\n",
        f"EA {paths['east']}\n",
        "\n",
        f"F {floor}\n",
        f"C {ceiling}\n",
        "\n",
    ]


@pytest.mark.parametrize(
    ("text", "expected"),
    [("42", 42), ("  -7x", -7), ("+13", 13), ("abc", 0), ("\t\n 5", 5), ("", 0)],
)
def test_atoi_reads_leading_integer(text, expected):
    assert atoi(text) == expected


def test_split_fields_drops_empty_fields():
    assert split_fields("1,,2,3", ",") == ["1", "2", "3"]
    assert split_fields(",,", ",") == []


def test_trim_chars_strips_both_ends():
    assert trim_chars("NNhelloN", "N") == "hello"
    assert trim_chars("xx", "x") == ""
    assert trim_chars("abc", "") == "abc"


@pytest.mark.parametrize("rgb", [(0, 0, 0), (255, 255, 255), (12, 200, 7)])
def test_parse_color_packs_channels(rgb):
    red, green, blue = rgb
    value = parse_color(f"{red},{green},{blue}")
    assert value >> 16 == red
    assert (value >> 8) & 0xFF == green
    assert value & 0xFF == blue


def test_parse_color_red_is_high_byte():
    assert parse_color("255,0,0") == 0xFF0000


def test_parse_color_tolerates_spaces_and_newline():
    assert parse_color("  10 , 20 , 30  \n") == parse_color("10,20,30")


def test_parse_color_ignores_extra_fields_and_empty_fields():
    assert parse_color("1,2,3,4") == parse_color("1,2,3")
    assert parse_color("1,,2,3") == parse_color("1,2,3")


def test_parse_color_blank_field_counts_as_zero():
    assert parse_color("1, ,3") == parse_color("1,0,3")


@pytest.mark.parametrize("value", ["256,0,0", "1,2", "a,2,3", "-1,2,3", "", "  \n", "1.5,2,3"])
def test_parse_color_rejects_bad_values(value):
    with pytest.raises(ConfigError, match="^Invalid color$"):
        parse_color(value)


def test_parse_texture_path_returns_existing_path(textures):
    assert parse_texture_path(f"   {textures['north']}   \n") == textures["north"]


def test_parse_texture_path_checks_only_fourth_last_char(tmp_path):
    target = tmp_path / "wall.png"
    target.write_bytes(b"")
    assert parse_texture_path(str(target)) == str(target)


@pytest.mark.parametrize("value", ["a.xp", "abcdefgh", "", "   \n"])
def test_parse_texture_path_rejects_bad_names(value):
    with pytest.raises(ConfigError, match="^Invalid texture path$"):
        parse_texture_path(value)


def test_parse_texture_path_rejects_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="^Invalid texture$"):
        parse_texture_path(str(tmp_path / "missing.xpm"))


def test_parse_config_assigns_texture_slots(textures):
    config = parse_config(_settings(textures) + MAP_LINES)
    assert config.textures[Direction.SOUTH] == textures["north"]
    assert config.textures[Direction.NORTH] == textures["south"]
    assert config.textures[Direction.EAST] == textures["west"]
    assert config.textures[Direction.WEST] == textures["east"]
    assert list(config.textures) == sorted(Direction)


def test_parse_config_reads_colors(textures):
    config = parse_config(_settings(textures) + MAP_LINES)
    assert config.floor == parse_color("220,100,0")
    assert config.ceiling == parse_color("225,30,0")


def test_parse_config_ignores_unknown_lines(textures):
    lines = ["R 1920 1080\n", "   \n"] + _settings(textures) + MAP_LINES
    config = parse_config(lines)
    assert config.floor == parse_color("220,100,0")


def test_parse_config_stops_at_map(textures):
    lines = _settings(textures) + MAP_LINES + ["C 1,2,3\n"]
    config = parse_config(lines)
    assert config.ceiling == parse_color("225,30,0")


def test_parse_config_rejects_duplicate_texture(textures):
    lines = [f"NO {textures['north']}\n"] + _settings(textures) + MAP_LINES
    with pytest.raises(ConfigError, match="^Invalid texture$"):
        parse_config(lines)


def test_parse_config_rejects_duplicate_color(textures):
    lines = _settings(textures) + ["C 1,2,3\n"] + MAP_LINES
    with pytest.raises(ConfigError, match="^Invalid color$"):
        parse_config(lines)


def test_parse_config_rejects_missing_setting(textures):
    lines = [line for line in _settings(textures) if not line.startswith("EA")]
    with pytest.raises(ConfigError, match="^Invalid textures$"):
        parse_config(lines + MAP_LINES)


def test_parse_config_rejects_empty_texture_value(textures):
    lines = ["NO\n"] + _settings(textures)[1:] + MAP_LINES
    with pytest.raises(ConfigError, match="^Invalid texture path$"):
        parse_config(lines)


def test_load_scene_reads_map_and_settings(tmp_path, textures):
    scene_file = tmp_path / "level.cub"
    scene_file.write_text("".join(_settings(textures) + MAP_LINES))
    scene = load_scene(scene_file)
    assert isinstance(scene, Scene)
    assert scene.game_map.spawn == Spawn(2, 2, "N")
    assert scene.game_map.rows[2] == "100001"
    assert scene.config.textures[Direction.SOUTH] == textures["north"]
    assert scene.config.ceiling == parse_color("225,30,0")


def test_load_scene_rejects_wrong_suffix(tmp_path):
    with pytest.raises(ConfigError, match="^Invalid map path$"):
        load_scene(tmp_path / "level.txt")


def test_load_scene_rejects_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="^Failed to open file$"):
        load_scene(tmp_path / "nope.cub")


def test_load_scene_checks_map_before_settings(tmp_path):
    scene_file = tmp_path / "broken.cub"
    scene_file.write_text("NO nothing\n111\n1NS1\n111\n")
    with pytest.raises(MapError):
        load_scene(scene_file)


def test_load_scene_reports_missing_settings(tmp_path, textures):
    scene_file = tmp_path / "partial.cub"
    lines = [line for line in _settings(textures) if not line.startswith("F")]
    scene_file.write_text("".join(lines + MAP_LINES))
    with pytest.raises(ConfigError, match="^Invalid textures$"):
        load_scene(scene_file)