import json
from pathlib import Path

from hybrid_scheduler.cli import EXIT_INVALID_INPUT, build_parser, main


def _write_workload(tmp_path: Path, entries) -> str:
    p = tmp_path / "w.json"
    p.write_text(json.dumps(entries))
    return str(p)


def test_compare_uses_sample_workload(capsys):
    assert main(["compare"]) == 0
    out = capsys.readouterr().out
    assert "Algorithm comparison" in out
    assert "CPU efficiency leader" in out
    assert "Processes scheduled: 5" in out


def test_compare_json(capsys):
    assert main(["compare", "--json", "-q", "2"]) == 0
    out = capsys.readouterr().out
    assert '"algorithm": "fcfs"' in out
    assert '"algorithm": "hybrid_ai"' in out


def test_run_single_algorithm(tmp_path, capsys):
    workload = _write_workload(tmp_path, [
        {"id": "a", "arrival_time": 0, "burst_time": 4, "priority": 2},
        {"id": "b", "arrival_time": 1, "burst_time": 2, "priority": 1},
    ])
    assert main(["run", "-a", "rr", "-w", workload, "-q", "2"]) == 0
    out = capsys.readouterr().out
    assert "Algorithm: Round Robin" in out
    assert "Quantum: 2" in out
    assert "Per-process metrics" in out


def test_predict_command(capsys):
    assert main(["predict"]) == 0
    assert "Predicted attributes" in capsys.readouterr().out


def test_quantum_is_clamped_by_default(capsys):
    assert main(["run", "-a", "rr", "-q", "0"]) == 0
    assert "Quantum: 0.5" in capsys.readouterr().out


def test_unclamped_quantum_is_rejected(capsys):
    assert main(["run", "-a", "rr", "-q", "0", "--no-clamp"]) == EXIT_INVALID_INPUT
    assert "Invalid input" in capsys.readouterr().out


def test_unknown_algorithm(capsys):
    assert main(["run", "-a", "lottery"]) == EXIT_INVALID_INPUT
    assert "Unknown algorithm" in capsys.readouterr().out


def test_duplicate_ids_reported(tmp_path, capsys):
    workload = _write_workload(tmp_path, [
        {"id": "a", "arrival_time": 0, "burst_time": 4},
        {"id": "a", "arrival_time": 1, "burst_time": 2},
    ])
    assert main(["compare", "-w", workload]) == EXIT_INVALID_INPUT
    assert "Duplicate" in capsys.readouterr().out


def test_missing_workload_file(tmp_path, capsys):
    assert main(["compare", "-w", str(tmp_path / "missing.json")]) == EXIT_INVALID_INPUT
    assert "Could not read workload" in capsys.readouterr().out


def test_parser_defaults():
    args = build_parser().parse_args(["compare"])
    assert args.quantum == 3
    assert args.workload is None
    assert args.log_level == "WARNING"


def test_undecodable_workload_is_reported(tmp_path, capsys):
    p = tmp_path / "w.json"
    p.write_bytes(b"\xff")
    assert main(["compare", "-w", str(p)]) == EXIT_INVALID_INPUT
    assert "Invalid input" in capsys.readouterr().out
