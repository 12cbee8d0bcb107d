import pytest

from cubecaster.mapfile import (
    GameMap,
    MapError,
    Spawn,
    extract_map_rows,
    find_spawn,
    leading_spaces,
    parse_map,
    strip_line,
    validate_walls,
)

SCENE = [
    "NO ./north.xpm\n",
    "\n",
    "F 10,20,30\n",
    "111111\n",
    "100001\n",
    "10N001   \n",
    "111111\n",
    "\n",
    "anything after the blank line\n",
]


def test_strip_line_drops_newline_and_trailing_spaces():
    assert strip_line("11 1  \n") == "11 1"


def test_strip_line_keeps_blank_row_of_spaces():
    assert strip_line("   \n") == "   "


def test_strip_line_empty_line():
    assert strip_line("\n") == ""


def test_leading_spaces_counts_only_spaces():
    assert leading_spaces(" " * 3 + "101") == 3
    assert leading_spaces("\t101") == 0


def test_extract_map_rows_skips_header_and_stops_at_blank():
    rows = extract_map_rows(SCENE)
    assert rows == ["111111", "100001", "10N001", "111111"]


def test_extract_map_rows_keeps_indentation():
    rows = extract_map_rows(["  111\n", "  101\n", "  111"])
    assert rows == ["  111", "  101", "  111"]


def test_extract_map_rows_without_lines():
    with pytest.raises(MapError, match="Invalid map1"):
        extract_map_rows([])


def test_extract_map_rows_without_map():
    with pytest.raises(MapError, match="Invalid map2"):
        extract_map_rows(["NO ./north.xpm\n", "C 1,2,3\n"])


def test_find_spawn_position_and_orientation():
    spawn = find_spawn(["1111", "1W01", "1111"])
    assert spawn == Spawn(row=1, col=1, orientation="W")


def test_find_spawn_rejects_two_spawns():
    with pytest.raises(MapError, match="Invalid contents in map"):
        find_spawn(["1111", "1NS1", "1111"])


def test_find_spawn_rejects_missing_spawn():
    with pytest.raises(MapError, match="Invalid contents in map"):
        find_spawn(["1111", "1001", "1111"])


def test_find_spawn_rejects_unknown_character():
    with pytest.raises(MapError, match="Invalid contents in map"):
        find_spawn(["1111", "1NX1", "1111"])


def test_validate_walls_open_top_row():
    with pytest.raises(MapError, match="Invalid walls of map"):
        validate_walls(["1101", "1001", "1111"])


def test_validate_walls_row_not_ending_in_wall():
    with pytest.raises(MapError, match="Invalid walls of map"):
        validate_walls(["1111", "1000", "1111"])


def test_validate_walls_longer_row_tail_must_be_wall():
    with pytest.raises(MapError, match="Invalid walls of map"):
        validate_walls(["111", "10001", "11111"])


def test_validate_walls_shorter_row_leaves_wall_above():
    with pytest.raises(MapError, match="Invalid walls of map"):
        validate_walls(["11111", "10001", "101", "111"])


def test_validate_walls_gap_in_last_row_open_above():
    with pytest.raises(MapError, match="Invalid last wall of map"):
        validate_walls(["1111", "1001", "10 1", "11 1"])


def test_validate_walls_single_row_with_gap():
    with pytest.raises(MapError, match="Invalid last wall of map"):
        validate_walls(["11 1"])


def test_parse_map_accepts_gap_closed_above():
    game_map = parse_map(["1111\n", "1N01\n", "1111\n", "11 1\n"])
    assert game_map.rows[-1] == "11 1"
    assert game_map.cell(3, 2) == " "


def test_parse_map_replaces_spawn_with_floor():
    game_map = parse_map(SCENE)
    assert game_map.spawn == Spawn(row=2, col=2, orientation="N")
    assert game_map.cell(2, 2) == "0"
    assert all(set(row) <= set("01 ") for row in game_map.rows)


def test_parse_map_dimensions():
    game_map = parse_map(["11111\n", "1E001\n", "11111\n"])
    assert game_map.height == len(game_map.rows)
    assert game_map.width == len("11111")


def test_cell_outside_grid_is_space():
    game_map = parse_map(SCENE)
    assert game_map.cell(-1, 0) == " "
    assert game_map.cell(0, -1) == " "
    assert game_map.cell(game_map.height, 0) == " "
    assert game_map.cell(0, game_map.width) == " "


def test_is_wall_matches_cells():
    game_map = parse_map(SCENE)
    for row in range(game_map.height):
        for col in range(game_map.width):
            assert game_map.is_wall(row, col) == (game_map.cell(row, col) == "1")
    assert game_map.is_wall(0, 0)
    assert not game_map.is_wall(1, 1)


def test_parse_map_reports_wall_error():
    with pytest.raises(MapError, match="Invalid walls of map"):
        parse_map(["1111\n", "1N00\n", "1111\n"])


def test_game_map_is_constructible_directly():
    game_map = GameMap(("111", "101", "111"), Spawn(1, 1, "S"))
    assert game_map.cell(1, 1) == "0"
    assert game_map.is_wall(1, 0)