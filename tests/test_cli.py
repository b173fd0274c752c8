from pathlib import Path

import pytest

from schedsim.cli import main


@pytest.fixture
def workload(tmp_path: Path) -> Path:
    p = tmp_path / "schedule.csv"
    p.write_text("P1,5\nP2,3\nP3,8\n")
    return p


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    monkeypatch.setenv("COLUMNS", "200")
    for name in ("SCHEDSIM_QUANTUM", "SCHEDSIM_STEP_DELAY", "SCHEDSIM_MAX_TICKS", "SCHEDSIM_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_run_plain_trace_and_summary(workload: Path, capsys):
    assert main(["run", "-a", "fcfs", "-w", str(workload), "--plain"]) == 0
    out = capsys.readouterr().out
    lines = out.splitlines()
    assert lines[0] == "First Come First Served"
    assert lines[1] == "T0   : P1   - Burst left   4, Wait time   0, Turnaround time   1"
    assert "T15  : P3   - Burst left   0, Wait time   6, Turnaround time  14" in lines
    assert "Total average waiting time:     3.3" in lines
    assert "Gantt Chart:" in lines


def test_run_round_robin_with_flag_alias(workload: Path, capsys):
    assert main(["run", "--algorithm=-r", "-q", "2", "-w", str(workload), "--plain"]) == 0
    out = capsys.readouterr().out
    assert out.splitlines()[0] == "Round Robin with Quantum 2"
    assert "T8   : P2   - Burst left   0, Wait time   5, Turnaround time   8" in out


def test_run_without_trace(workload: Path, capsys):
    assert main(["run", "-a", "sjf", "-w", str(workload), "--plain", "--no-trace"]) == 0
    out = capsys.readouterr().out
    assert "Burst left" not in out
    assert "Total average waiting time:     3.0" in out


def test_run_rich_tables(workload: Path, capsys):
    assert main(["run", "-a", "sjf", "-w", str(workload)]) == 0
    out = capsys.readouterr().out
    assert "Shortest Job First" in out
    assert "Per-process metrics" in out
    assert "System metrics" in out
    assert "8.33" in out


def test_round_robin_without_quantum_is_an_error(workload: Path, capsys):
    assert main(["run", "-a", "rr", "-w", str(workload)]) == 2
    captured = capsys.readouterr()
    assert "quantum" in captured.err
    assert "Burst left" not in captured.out


def test_non_positive_quantum_is_an_error(workload: Path, capsys):
    assert main(["run", "-a", "rr", "-q", "0", "-w", str(workload)]) == 2
    assert "positive" in capsys.readouterr().err


def test_unknown_policy_is_an_error(workload: Path, capsys):
    assert main(["run", "-a", "lottery", "-w", str(workload)]) == 2
    assert "lottery" in capsys.readouterr().err


def test_bad_workload_is_an_error(tmp_path: Path, capsys):
    p = tmp_path / "bad.csv"
    p.write_text("P1,0\n")
    assert main(["run", "-a", "fcfs", "-w", str(p)]) == 2
    assert "Burst time must be positive" in capsys.readouterr().err


def test_missing_workload_is_an_error(tmp_path: Path, capsys):
    assert main(["run", "-a", "fcfs", "-w", str(tmp_path / "nope.csv")]) == 2
    assert "Cannot read workload" in capsys.readouterr().err


def test_compare(workload: Path, capsys):
    assert main(["compare", "-w", str(workload), "-q", "2"]) == 0
    out = capsys.readouterr().out
    assert "First Come First Served" in out
    assert "Round Robin" in out
    assert "8.67" in out
    assert "8.33" in out
    assert "11.33" in out


def test_compare_uses_configured_quantum(workload: Path, capsys, monkeypatch):
    monkeypatch.setenv("SCHEDSIM_QUANTUM", "3")
    assert main(["compare", "-w", str(workload), "-a", "rr"]) == 0
    out = capsys.readouterr().out
    assert "Round Robin" in out


def test_invalid_environment_is_reported(workload: Path, capsys, monkeypatch):
    monkeypatch.setenv("SCHEDSIM_MAX_TICKS", "-5")
    assert main(["run", "-a", "fcfs", "-w", str(workload)]) == 2
    assert "SCHEDSIM_MAX_TICKS" in capsys.readouterr().err


def test_step_pauses_after_every_tick(workload: Path, capsys, monkeypatch):
    delays = []
    monkeypatch.setattr("schedsim.cli.time.sleep", delays.append)
    assert main(["run", "-a", "fcfs", "-w", str(workload), "--plain", "--step", "--step-delay", "0.05"]) == 0
    assert delays == [0.05] * 16
    assert "T15  : P3" in capsys.readouterr().out


def test_step_without_trace_does_not_pause(workload: Path, capsys, monkeypatch):
    delays = []
    monkeypatch.setattr("schedsim.cli.time.sleep", delays.append)
    assert main(["run", "-a", "fcfs", "-w", str(workload), "--plain", "--step", "--no-trace"]) == 0
    assert delays == []


def test_interrupted_step_run_exits_130(workload: Path, capsys, monkeypatch):
    def interrupt(delay):
        raise KeyboardInterrupt

    monkeypatch.setattr("schedsim.cli.time.sleep", interrupt)
    assert main(["run", "-a", "sjf", "-w", str(workload), "--plain", "--step"]) == 130
    out = capsys.readouterr().out
    assert "Simulation interrupted." in out
    assert "T1   :" not in out
    assert "Total average" not in out
