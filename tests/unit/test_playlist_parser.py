# pylint: disable=missing-module-docstring,missing-function-docstring

from protocol.playlist import PlaylistEntry, parse_entry, parse_playlist


# ---------------------------------------------------------------------
# Basic block
# ---------------------------------------------------------------------

def test_parses_entries_in_order():
    dump = "\n".join([
        "+----[ Playlist - test ]",
        "|   1 - SongA (00:03:45)",
        "| * 2 - SongB (00:02:10) [played 3 times]",
    ])

    assert parse_playlist(dump) == [
        PlaylistEntry(id=1, name="SongA", length=225, current=False),
        PlaylistEntry(id=2, name="SongB", length=130, current=True),
    ]


def test_player_dump_with_nodes_and_crlf():
    dump = "\r\n".join([
        "+----[ Playlist - playlist ]",
        "| 1 - Playlist",
        "|   4 - Intro (00:00:30)",
        "|  *5 - Szene1 (01:00:01) [played 1 time]",
        "| 2 - Media Library",
        "|   9 - Library item (00:00:10)",
        "+----[ End of playlist ]",
    ])

    entries = parse_playlist(dump)

    assert [e.id for e in entries] == [4, 5]
    assert entries[1] == PlaylistEntry(id=5, name="Szene1", length=3601, current=True)


# ---------------------------------------------------------------------
# Edge cases
# ---------------------------------------------------------------------

def test_missing_header_yields_empty_list():
    dump = "|   1 - SongA (00:03:45)\n|   2 - SongB (00:02:10)"

    assert parse_playlist(dump) == []


def test_header_without_entries_yields_empty_list():
    dump = "+----[ Playlist - empty ]\n+----[ End of playlist ]"

    assert parse_playlist(dump) == []


def test_empty_text():
    assert parse_playlist("") == []


def test_lines_before_header_are_ignored():
    dump = "\n".join([
        "|   7 - Stray (00:00:01)",
        "status change: ( play state: 3 )",
        "+----[ Playlist - test ]",
        "|   1 - SongA (00:03:45)",
    ])

    assert [e.id for e in parse_playlist(dump)] == [1]


def test_first_non_entry_line_ends_block():
    dump = "\n".join([
        "+----[ Playlist - test ]",
        "|   1 - SongA (00:03:45)",
        "garbage",
        "|   2 - SongB (00:02:10)",
    ])

    assert [e.id for e in parse_playlist(dump)] == [1]


def test_missing_duration_gives_zero_length():
    entry = parse_entry("|   3 - http://stream.example/live")

    assert entry == PlaylistEntry(id=3, name="http://stream.example/live", length=0, current=False)


def test_name_keeps_inner_separators_and_parentheses():
    entry = parse_entry("|   8 - Artist - Track (Live) (00:04:00) [played 12 times]")

    assert entry is not None
    assert entry.name == "Artist - Track (Live)"
    assert entry.length == 240


def test_nested_children_do_not_match():
    assert parse_entry("|     12 - Nested (00:00:05)") is None
    assert parse_entry("| 1 - Playlist") is None
