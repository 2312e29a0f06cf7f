from __future__ import annotations

from datetime import datetime, timezone

import pytest

from osm_tag_history.columns import parse_columns
from osm_tag_history.diff import ChangeEvent, TagChange, history_rows
from osm_tag_history.errors import ConfigurationError, MissingFieldError
from osm_tag_history.layout import LineLayout
from osm_tag_history.rows import RowFormatter, encode_field, epoch_time, format_time


class FakeLookup:
    def __init__(self, changesets):
        self.changesets = changesets
        self.calls = []

    def tag(self, changeset_id, key):
        self.calls.append(changeset_id)
        return dict(self.changesets.get(changeset_id, [])).get(key)


def decode_field(value):
    return value.replace("\\t", "\t").replace("\\n", "\n")


def test_encode_field_escapes_tabs_and_newlines() -> None:
    assert encode_field("a\tb\nc") == "a\\tb\\nc"
    assert encode_field("Straße 日本") == "Straße 日本"


def test_escaped_values_round_trip(version) -> None:
    value = "first line\nsecond\tcolumn"
    rows = list(history_rows([version(tags={"note": value})], parse_columns("key,new_value")))
    assert rows == [["note", "first line\\nsecond\\tcolumn"]]
    assert "\t" not in rows[0][1] and "\n" not in rows[0][1]
    assert decode_field(rows[0][1]) == value


def test_default_style_row(version) -> None:
    v1 = version(id=17, version=1, tags={"highway": "primary"})
    v2 = version(id=17, version=2, tags={"highway": "secondary"}, user="bob\tsmith", uid=7, changeset_id=99)
    columns = parse_columns("key,new_value,old_value,id,raw_id,object_type_short,object_type_long,"
                            "new_version,old_version,datetime,epoch_time,username,uid,changeset_id")
    rows = list(history_rows([v1, v2], columns))
    assert rows[-1] == [
        "highway", "secondary", "primary", "n17", "17", "n", "node", "2", "1",
        "2020-01-01T12:00:02Z", "1577880002", "bob\\tsmith", "7", "99",
    ]
    assert rows[0][8] == ""


def test_id_letters(version) -> None:
    columns = parse_columns("id,object_type_long")
    rows = list(history_rows([version("w", id=3, tags={"a": "1"}), version("r", id=4, tags={"a": "1"})], columns))
    assert rows == [["w3", "way"], ["r4", "relation"]]


def test_naive_timestamps_are_utc(version) -> None:
    ts = datetime(2021, 6, 1, 8, 30, 0)
    assert format_time(ts) == "2021-06-01T08:30:00Z"
    assert epoch_time(ts) == str(int(datetime(2021, 6, 1, 8, 30, tzinfo=timezone.utc).timestamp()))


def test_tag_count_delta(version) -> None:
    objects = [
        version(version=1, tags={"a": "1", "b": "1"}),
        version(version=2, tags={"a": "2", "c": "1"}),
    ]
    rows = list(history_rows(objects, parse_columns("key,tag_count_delta,old_version")))
    assert rows[2:] == [["a", "0", "1"], ["b", "-1", "1"], ["c", "+1", "1"]]


def test_old_new_value_layout_is_one_row_per_change(version) -> None:
    columns = parse_columns("key,value,new_value,old_value")
    formatter = RowFormatter(columns)
    assert formatter.layout is LineLayout.OLD_NEW_VALUE
    event = ChangeEvent(TagChange("amenity", "bench", None), version())
    assert formatter.rows(event) == [["amenity", "", "", "bench"]]


def test_separate_lines_for_a_changed_value(version) -> None:
    objects = [version(version=1, tags={"access": "yes"}), version(version=2, tags={"access": "no"})]
    columns = parse_columns("key,value,value_count_delta,new_version")
    rows = list(history_rows(objects, columns))
    assert rows == [
        ["access", "yes", "+1", "1"],
        ["access", "yes", "-1", "2"],
        ["access", "no", "+1", "2"],
    ]


def test_separate_lines_for_removed_tag(version) -> None:
    objects = [version(version=1, tags={"access": "yes", "x": "1"}), version(version=2, tags={"x": "1"})]
    rows = list(history_rows(objects, parse_columns("value,value_count_delta,tag_count_delta")))
    assert rows[-1] == ["yes", "-1", "-1"]
    assert len(rows) == 3


def test_missing_metadata_is_fatal(version) -> None:
    objects = [version(tags={"a": "1"}, user=None)]
    with pytest.raises(MissingFieldError) as excinfo:
        list(history_rows(objects, parse_columns("key,username")))
    assert excinfo.value.field == "user"
    # not needed for these columns
    assert list(history_rows(objects, parse_columns("key,id"))) == [["a", "n1"]]


def test_missing_timestamp_is_fatal(version) -> None:
    with pytest.raises(MissingFieldError):
        list(history_rows([version(tags={"a": "1"}, timestamp=None)], parse_columns("datetime")))


def test_changeset_tag_columns(version) -> None:
    lookup = FakeLookup({1001: [("created_by", "JOSM"), ("comment", "tab\there")]})
    columns = parse_columns("key,changeset_created_by,changeset_comment,changeset_source")
    rows = list(history_rows([version(tags={"a": "1"})], columns, changeset_lookup=lookup))
    assert rows == [["a", "JOSM", "tab\\there", ""]]


def test_unknown_changeset_gives_empty_columns(version) -> None:
    lookup = FakeLookup({})
    columns = parse_columns("key,changeset_created_by,changeset_comment")
    rows = list(history_rows([version(tags={"a": "1", "b": "2"})], columns, changeset_lookup=lookup))
    assert rows == [["a", "", ""], ["b", "", ""]]


def test_changeset_columns_need_a_lookup() -> None:
    with pytest.raises(ConfigurationError):
        RowFormatter(parse_columns("changeset_comment"))


def test_header() -> None:
    formatter = RowFormatter(parse_columns("key,value_count_delta"))
    assert formatter.header == ["key", "value_count_delta"]
    assert formatter.layout is LineLayout.SEPARATE_LINES
