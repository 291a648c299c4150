"""Tests for whole-translation import runs."""

# pylint: disable=missing-function-docstring

import json
from pathlib import Path

import pytest

from bible_import.services import pipeline
from bible_import.services.pipeline import discover_usfm_files, import_translation


def _write_book(directory: Path, name: str, code: str, verses: int = 3) -> Path:
    lines = [f"\\id {code}", "\\c 1"] + [f"\\v {n} verse {n}" for n in range(1, verses + 1)]
    path = directory / name
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def test_discover_usfm_files_filters_and_sorts(tmp_path: Path) -> None:
    _write_book(tmp_path, "02-EXOeng-kjv.usfm", "EXO")
    _write_book(tmp_path, "01-GENeng-kjv.SFM", "GEN")
    (tmp_path / "readme.txt").write_text("x", encoding="utf-8")
    (tmp_path / "sub.usfm").mkdir()

    names = [p.name for p in discover_usfm_files(tmp_path)]
    assert names == ["01-GENeng-kjv.SFM", "02-EXOeng-kjv.usfm"]


def test_discover_usfm_files_missing_dir(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        discover_usfm_files(tmp_path / "absent")


def test_import_translation_writes_jsonl(tmp_path: Path) -> None:
    src = tmp_path / "kjv"
    src.mkdir()
    _write_book(src, "01-GEN.usfm", "GEN", verses=2)
    _write_book(src, "02-TOB.usfm", "TOB", verses=5)
    _write_book(src, "03-REV.usfm", "REV", verses=1)
    out = tmp_path / "output" / "kjv.jsonl"

    summary = import_translation("KJV", src, out)

    assert summary.output_file == out
    assert summary.total_verses == 3
    assert summary.failed_files == []
    keys = [json.loads(line)["key"] for line in out.read_text(encoding="utf-8").splitlines()]
    assert keys == ["KJV:gen:1:1", "KJV:gen:1:2", "KJV:rev:1:1"]


def test_import_translation_catholic_canon_keeps_tobit(tmp_path: Path) -> None:
    _write_book(tmp_path, "TOB.usfm", "TOB", verses=2)
    out = tmp_path / "dra.jsonl"
    summary = import_translation("DRA", tmp_path, out, canon_mode="catholic73", max_workers=2)
    assert summary.total_verses == 2
    assert summary.files[0].book_ids == ["tob"]


def test_import_translation_default_output_under_output_dir(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(pipeline.settings, "OUTPUT_DIR", tmp_path / "out")
    src = tmp_path / "asv"
    src.mkdir()
    _write_book(src, "GEN.usfm", "GEN", verses=1)

    summary = import_translation("ASV", src)
    assert summary.output_file == tmp_path / "out" / "asv.jsonl"
    assert summary.output_file.exists()


def test_import_translation_logs_progress(tmp_path: Path, monkeypatch, caplog) -> None:
    monkeypatch.setattr(pipeline.settings, "PROGRESS_LOG_EVERY", 2)
    _write_book(tmp_path, "GEN.usfm", "GEN", verses=4)
    with caplog.at_level("INFO"):
        import_translation("KJV", tmp_path, tmp_path / "kjv.jsonl")
    assert "2 verses parsed..." in caplog.text
    assert "4 verses parsed..." in caplog.text


def test_import_translation_counts_verses_from_file_failing_mid_read(tmp_path: Path) -> None:
    src = tmp_path / "gen"
    src.mkdir()
    body = ["\\id GEN", "\\c 1"] + [f"\\v {n} verse number {n} of Genesis" for n in range(1, 400)]
    (src / "01-GEN.usfm").write_bytes(
        ("\n".join(body) + "\n").encode("utf-8") + b"\\v 400 \xff\n"
    )
    _write_book(src, "02-EXO.usfm", "EXO", verses=2)
    out = tmp_path / "kjv.jsonl"

    summary = import_translation("KJV", src, out)

    written = out.read_text(encoding="utf-8").splitlines()
    assert summary.failed_files == [str(src / "01-GEN.usfm")]
    assert [s.failed for s in summary.files] == [True, False]
    assert summary.total_verses == len(written) > 2
