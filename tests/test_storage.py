import json

import pytest

from TOP100.errors import InvalidArgument
from TOP100.models import TrackRecord
from TOP100.storage import output_filename, result_to_dict, save_result


def test_result_to_dict_omits_missing_enrichment():
    result = {
        "a": TrackRecord(id="a", name="A", popularity=90, features={"tempo": 120.0}),
        "b": TrackRecord(id="b", name="B", popularity=10),
    }
    assert result_to_dict(result) == {
        "a": {"name": "A", "popularity": 90, "features": {"tempo": 120.0}},
        "b": {"name": "B", "popularity": 10},
    }


def test_save_result_writes_category_file(tmp_path):
    output_dir = tmp_path / "nested" / "data"
    result = {"a": TrackRecord(id="a", name="Café", popularity=1, analysis={"bars": []})}

    path = save_result("latin", result, output_dir)

    assert path == output_dir / "latin.json"
    text = path.read_text(encoding="utf-8")
    assert "Café" in text
    assert json.loads(text) == {"a": {"name": "Café", "popularity": 1, "analysis": {"bars": []}}}


def test_save_result_keeps_file_inside_output_dir(tmp_path):
    result = {"a": TrackRecord(id="a", name="A", popularity=1)}

    path = save_result("../../escape", result, tmp_path / "data")

    assert path == tmp_path / "data" / "escape.json"
    assert path.exists()


@pytest.mark.parametrize("category, expected", [
    ("jazz", "jazz.json"),
    ("a/b", "b.json"),
    ("..\\windows", "windows.json"),
])
def test_output_filename(category, expected):
    assert output_filename(category) == expected


@pytest.mark.parametrize("category", ["..", "/", ""])
def test_output_filename_rejects_empty_name(category):
    with pytest.raises(InvalidArgument):
        output_filename(category)
