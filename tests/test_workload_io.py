from pathlib import Path

import pytest

from schedsim.errors import InvalidInput
from schedsim.models import Process
from schedsim.workload_io import load_workload


def test_load_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":1,"burst_time":3},'
                 '{"pid":"P2","burst_time":2,"arrival_time":4}]')
    procs = load_workload(p)
    assert isinstance(procs[0], Process)
    assert procs[0].arrival_index == 0
    assert procs[1].pid == 2
    assert procs[1].arrival_index == 4
    assert procs[1].remaining_burst == 2


def test_load_csv_with_header(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,burst_time,arrival_time\nP1,3,\nP2,2,3\n")
    procs = load_workload(p)
    assert [(q.pid, q.total_burst, q.arrival_index) for q in procs] == [(1, 3, 0), (2, 2, 3)]


def test_load_plain_process_lines(tmp_path: Path):
    p = tmp_path / "schedule.txt"
    p.write_text("P1,5\nP2,3\n\nP3,8\n")
    procs = load_workload(p)
    assert [(q.pid, q.total_burst, q.arrival_index) for q in procs] == [(1, 5, 0), (2, 3, 1), (3, 8, 2)]


@pytest.mark.parametrize(
    "name, content",
    [
        ("w.csv", "P1,0\n"),
        ("w.csv", "P1,5\nP1,3\n"),
        ("w.csv", "P1,5,3\nP2,1,1\n"),
        ("w.csv", "P1\n"),
        ("w.csv", "X1,4\n"),
        ("w.csv", ""),
        ("w.json", "[]"),
        ("w.json", '{"pid": 1}'),
        ("w.json", '[{"pid": 1}]'),
        ("w.json", "not json"),
        ("w.json", '[{"pid": 1, "burst_time": 2.9}]'),
        ("w.json", '[{"pid": 1, "burst_time": true}]'),
        ("w.json", '[{"pid": 1, "burst_time": 2, "arrival_time": 1.7}]'),
        ("w.json", '[{"pid": 1.5, "burst_time": 2}]'),
        ("w.csv", "P1,2.5\n"),
        ("w.yaml", "- pid: 1"),
    ],
)
def test_bad_workloads(tmp_path: Path, name, content):
    p = tmp_path / name
    p.write_text(content)
    with pytest.raises(InvalidInput):
        load_workload(p)


def test_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_workload(tmp_path / "missing.csv")


def test_numeric_strings_in_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":"1","burst_time":"4","arrival_time":" 2 "}]')
    procs = load_workload(p)
    assert [(q.pid, q.total_burst, q.arrival_index) for q in procs] == [(1, 4, 2)]
