"""Tests for the command-line entry point."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from clipcore.cli import main
from clipcore.oracle.null import NullOracle


@pytest.fixture
def segments_file(tmp_path: Path) -> Path:
    path = tmp_path / "talk.json"
    path.write_text(
        json.dumps(
            {
                "segments": [
                    {"start": i * 20.0, "end": (i + 1) * 20.0, "text": f"Part {i} of the talk."}
                    for i in range(5)
                ]
            }
        ),
        encoding="utf-8",
    )
    return path


class TestCli:
    def test_windows(self, segments_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["windows", str(segments_file)]) == 0
        output = json.loads(capsys.readouterr().out)
        assert output["count"] == 1
        assert output["windows"][0]["start"] == 20.0

    def test_windows_rejects_plain_text(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = tmp_path / "notes.txt"
        path.write_text("Just words.", encoding="utf-8")
        assert main(["windows", str(path)]) == 1
        assert "timed segments" in capsys.readouterr().err

    def test_missing_file(self, tmp_path: Path) -> None:
        assert main(["windows", str(tmp_path / "missing.vtt")]) == 1

    def test_chapters_plain_text(
        self, tmp_path: Path, transcript: str, capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = tmp_path / "talk.txt"
        path.write_text(transcript, encoding="utf-8")

        with patch("clipcore.cli.build_oracle", return_value=NullOracle()):
            assert main(["chapters", str(path)]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["source"] == "fallback"
        assert output["chapters"]
        assert output["markers"] == []

    def test_chapters_with_segments(
        self, segments_file: Path, make_oracle, capsys: pytest.CaptureFixture[str]
    ) -> None:
        oracle = make_oracle(ready=False)

        with patch("clipcore.cli.build_oracle", return_value=oracle):
            assert main(["chapters", str(segments_file), "--format", "json"]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["source"] == "fallback"
        assert output["chapters_text"] == "00:00 Part, Talk"
