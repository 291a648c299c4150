"""Tests for JSONL verse persistence."""

# pylint: disable=missing-function-docstring

import json
from pathlib import Path

import pytest

from bible_import.adapters.jsonl import JsonlVerseWriter, iter_verse_records
from bible_import.services.usfm_parser import UsfmStreamParser


def test_writer_as_parser_sink_round_trips(tmp_path: Path, genesis_lines) -> None:
    out = tmp_path / "nested" / "web.jsonl"
    with JsonlVerseWriter(out) as writer:
        UsfmStreamParser("WEB").parse_lines(genesis_lines, writer)

    assert writer.count == 4
    raw_lines = out.read_text(encoding="utf-8").splitlines()
    assert len(raw_lines) == 4
    first = json.loads(raw_lines[0])
    assert first["key"] == "WEB:gen:1:1"
    assert first["bookId"] == "gen"
    assert "createdAt" not in first

    records = list(iter_verse_records(out))
    assert [r.key for r in records] == [json.loads(line)["key"] for line in raw_lines]


def test_writer_truncates_existing_output(tmp_path: Path) -> None:
    out = tmp_path / "kjv.jsonl"
    out.write_text("stale\n", encoding="utf-8")
    with JsonlVerseWriter(out):
        pass
    assert out.read_text(encoding="utf-8") == ""


def test_writer_requires_open(tmp_path: Path, genesis_lines) -> None:
    writer = JsonlVerseWriter(tmp_path / "x.jsonl")
    record = next(UsfmStreamParser("KJV").iter_records(genesis_lines))
    with pytest.raises(RuntimeError):
        writer(record)


def test_reader_skips_blank_lines(tmp_path: Path, genesis_lines) -> None:
    record = next(UsfmStreamParser("KJV").iter_records(genesis_lines))
    out = tmp_path / "kjv.jsonl"
    out.write_text("\n" + record.to_json_line() + "\n\n", encoding="utf-8")
    assert list(iter_verse_records(out)) == [record]
