from __future__ import annotations

from pathlib import Path

from hatchet_web.cli.analyze import main


def test_ingest_then_list(tmp_path: Path, sample_log: Path, capsys) -> None:
    out = tmp_path / "cli-data"
    assert main(["ingest-log", str(sample_log), "--out", str(out)]) == 0
    assert (out / "mongod_sample" / "hatchet.json").exists()
    printed = capsys.readouterr().out
    assert "hatchet: mongod_sample" in printed
    assert "logs: 9 rows" in printed

    assert main(["list", "--out", str(out)]) == 0
    assert "mongod_sample: enterprise 6.0.5 (Ubuntu/x86_64), 9 lines" in capsys.readouterr().out


def test_list_empty_root(tmp_path: Path, capsys) -> None:
    assert main(["list", "--out", str(tmp_path / "nowhere")]) == 1
    assert "No hatchets found" in capsys.readouterr().out


def test_clean_removes_hatchet(data_root: Path) -> None:
    assert main(["clean", "sample", "--out", str(data_root), "--force"]) == 0
    assert not (data_root / "sample").exists()


def test_clean_rejects_bad_name(data_root: Path) -> None:
    assert main(["clean", "../etc", "--out", str(data_root), "--force"]) == 1
