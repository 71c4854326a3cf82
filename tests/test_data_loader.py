"""
Tests for DataLoader: JSONL reading of raw details and list items.
Run: python -m pytest tests/test_data_loader.py
"""

import json

import pytest

from media_index.data_loader import DataLoader


def test_load_details_skips_bad_lines(tmp_path):
    path = tmp_path / "details.jsonl"
    path.write_text(
        "\n".join([
            json.dumps({"id": 1, "cid": 6, "pid": 1, "descriptor": {"area": "大陆"}}, ensure_ascii=False),
            "{broken",
            "",
            "[1, 2]",
            json.dumps({"id": 2, "cid": 6, "pid": 1}),
        ]),
        encoding="utf-8",
    )
    details = DataLoader().load_details_from_jsonl(str(path))
    assert [d["id"] for d in details] == [1, 2]
    assert details[0]["descriptor"]["area"] == "大陆"


def test_load_list_items(tmp_path):
    path = tmp_path / "list.jsonl"
    path.write_text(
        json.dumps({"id": 3, "name": "Movie 3", "cid": 6, "CName": "Action Movies", "playFrom": "m3u8"}) + "\n"
        + json.dumps({"id": "abc", "name": "Bad", "cid": 6}) + "\n",
        encoding="utf-8",
    )
    items = DataLoader().load_list_items_from_jsonl(str(path))
    assert len(items) == 1
    assert items[0].c_name == "Action Movies"
    assert items[0].play_from == "m3u8"


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        DataLoader().load_details_from_jsonl(str(tmp_path / "nope.jsonl"))
