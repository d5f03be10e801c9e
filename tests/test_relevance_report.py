import importlib.util
import json
import sys
from pathlib import Path

import pytest

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "relevance_report.py"


@pytest.fixture
def report(monkeypatch):
    # matplotlib is an optional extra; the script must work without it
    monkeypatch.setitem(sys.modules, "matplotlib", None)
    monkeypatch.setitem(sys.modules, "matplotlib.pyplot", None)
    spec = importlib.util.spec_from_file_location("relevance_report", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def corpus_file(tmp_path):
    path = tmp_path / "songs.jsonl"
    records = [
        {"id": "1", "artist": "X", "year": 2000, "compilation": False, "tokens": ["a", "a", "b"]},
        {"id": "2", "artist": "X", "year": 2001, "compilation": False, "tokens": ["b", "c"]},
    ]
    path.write_text("\n".join(json.dumps(record) for record in records) + "\n", encoding="utf-8")
    return path


def test_help_without_matplotlib(report, monkeypatch):
    monkeypatch.setattr(sys, "argv", ["relevance_report.py", "--help"])
    with pytest.raises(SystemExit) as exc_info:
        report.main()
    assert exc_info.value.code == 0


def test_report_without_matplotlib(report, corpus_file, monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["relevance_report.py", str(corpus_file), "--top-n", "1"])
    report.main()
    out = capsys.readouterr().out
    assert "Songs: 2, vocabulary: 3" in out
    assert "2000-2001" in out
    assert "a" in out.splitlines()[-1]
