import json

import pytest
import yaml

from rcli.csv_convert import csv_to_records, dump_records, process_csv
from rcli.errors import EncodingError, InvalidFormat, IoError

PLAYERS = """Name,Position,DOB,Nationality,Kit Number
Wojciech Szczesny,Goalkeeper,"Apr 18, 1990 (29)",Poland,1
Mattia Perin,Goalkeeper,"Nov 10, 1992 (26)",Italy,37
"""


def test_csv_to_records():
    records = csv_to_records(PLAYERS)
    assert len(records) == 2
    assert records[0]["Name"] == "Wojciech Szczesny"
    assert records[0]["DOB"] == "Apr 18, 1990 (29)"
    assert records[1]["Kit Number"] == "37"


def test_csv_without_header():
    assert csv_to_records("a;b\nc;d\n", delimiter=";", header=False) == [["a", "b"], ["c", "d"]]


def test_csv_empty():
    assert csv_to_records("") == []


def test_csv_malformed():
    with pytest.raises(EncodingError):
        csv_to_records('a,b\n"unterminated,x\n')


def test_dump_unknown_format():
    with pytest.raises(InvalidFormat):
        dump_records([], "toml")


def test_process_csv_json(tmp_path):
    src = tmp_path / "players.csv"
    src.write_text(PLAYERS)
    out = tmp_path / "players.json"
    assert process_csv(str(src), str(out)) == 2
    data = json.loads(out.read_text())
    assert data[1]["Nationality"] == "Italy"


def test_process_csv_yaml(tmp_path):
    src = tmp_path / "players.csv"
    src.write_text(PLAYERS)
    out = tmp_path / "players.yaml"
    process_csv(str(src), str(out), "yaml")
    data = yaml.safe_load(out.read_text())
    assert data[0]["Position"] == "Goalkeeper"
    assert list(data[0]) == ["Name", "Position", "DOB", "Nationality", "Kit Number"]


def test_process_csv_missing_input(tmp_path):
    with pytest.raises(IoError):
        process_csv(str(tmp_path / "missing.csv"), str(tmp_path / "out.json"))


@pytest.mark.parametrize("text", ["a,b,c\n1,2\n", "a,b,c\n1,2,3\n3,4,5,6\n"])
def test_csv_ragged_record(text):
    with pytest.raises(EncodingError, match="fields, header has 3"):
        csv_to_records(text)


def test_csv_ragged_record_without_header():
    with pytest.raises(EncodingError, match="record on line 2 has 3 fields, first record has 2"):
        csv_to_records("a,b\nc,d,e\n", header=False)
