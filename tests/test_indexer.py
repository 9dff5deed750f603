import json
from pathlib import Path

import pytest

from core.indexer import flag_url, load_capitals, load_index
from core.parser import parse_feature

SQUARE = {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]]]}


def _feature(**props):
    return {"type": "Feature", "properties": props, "geometry": SQUARE}


def _write_data(data_dir: Path, features, capitals=None) -> None:
    data_dir.mkdir(parents=True, exist_ok=True)
    (data_dir / "countries.geojson").write_text(
        json.dumps({"type": "FeatureCollection", "features": features}), encoding="utf-8"
    )
    if capitals is not None:
        (data_dir / "capitals.json").write_text(json.dumps(capitals), encoding="utf-8")


def test_parse_feature_reads_natural_earth_properties() -> None:
    feature = parse_feature(
        _feature(ADMIN="France", ADM0_A3="FRA", ISO_A2="FR", CONTINENT="Europe", LABEL_Y=46.6, LABEL_X=2.5)
    )
    assert feature is not None
    assert feature.id == "FRA"
    assert feature.name == "France"
    assert feature.continent == "Europe"
    assert feature.iso_a2 == "FR"
    assert feature.lat == 46.6
    assert feature.lng == 2.5


def test_parse_feature_treats_minus_99_as_missing() -> None:
    feature = parse_feature(_feature(ADMIN="Norway", ADM0_A3="NOR", ISO_A2="-99", ISO_A2_EH="NO", CONTINENT="Europe"))
    assert feature.iso_a2 == "NO"
    assert feature.lat is None


def test_parse_feature_skips_antarctica_and_incomplete() -> None:
    assert parse_feature(_feature(ADMIN="Antarctica", ADM0_A3="ATA", ISO_A2="AQ", CONTINENT="Antarctica")) is None
    assert parse_feature(_feature(ADMIN="Nowhere")) is None
    assert parse_feature({"properties": None}) is None
    assert parse_feature({"properties": "junk"}) is None


def test_load_index(tmp_path: Path) -> None:
    _write_data(
        tmp_path,
        [
            _feature(ADMIN="France", ADM0_A3="FRA", ISO_A2="FR", CONTINENT="Europe"),
            _feature(ADMIN="Japan", ADM0_A3="JPN", ISO_A2="JP", CONTINENT="Asia"),
            _feature(ADMIN="France again", ADM0_A3="FRA", ISO_A2="FR", CONTINENT="Europe"),
            _feature(ADMIN="Antarctica", ADM0_A3="ATA", ISO_A2="AQ", CONTINENT="Antarctica"),
        ],
        capitals={"FRA": {"capital": "Paris"}, "Japan": {"capital": "Tokyo"}},
    )
    index = load_index(tmp_path)
    assert [f.id for f in index.records] == ["FRA", "JPN"]
    assert index.capital_for(index.records[0]) == "Paris"
    assert index.capital_for(index.records[1]) == "Tokyo"

    collection = index.geojson()
    assert [f["id"] for f in collection["features"]] == ["FRA", "JPN"]
    assert collection["features"][0]["geometry"] == SQUARE


def test_load_index_without_capitals(tmp_path: Path) -> None:
    _write_data(tmp_path, [_feature(ADMIN="France", ADM0_A3="FRA", CONTINENT="Europe")])
    index = load_index(tmp_path)
    assert index.capitals == {}
    assert index.capital_for(index.records[0]) is None


def test_load_index_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_index(tmp_path)


def test_load_index_no_valid_features(tmp_path: Path) -> None:
    _write_data(tmp_path, [_feature(ADMIN="Nowhere")])
    with pytest.raises(RuntimeError):
        load_index(tmp_path)


def test_load_capitals_tolerates_bad_content(tmp_path: Path) -> None:
    path = tmp_path / "capitals.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_capitals(path) == {}
    path.write_text(json.dumps(["Paris"]), encoding="utf-8")
    assert load_capitals(path) == {}
    path.write_text(json.dumps({"FRA": "Paris", "DEU": {"capital": ""}, "ITA": {"name": "Rome"}}), encoding="utf-8")
    assert load_capitals(path) == {"FRA": "Paris"}


def test_flag_url() -> None:
    assert flag_url("FR") == "https://flagcdn.com/256x192/fr.png"
    assert flag_url("jp", size="48x36") == "https://flagcdn.com/48x36/jp.png"
    assert flag_url(None) is None
    with pytest.raises(ValueError):
        flag_url("FR", size="1x1")
