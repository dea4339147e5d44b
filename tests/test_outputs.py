"""Tests for CI output publishing and console rendering."""

from __future__ import annotations

import io
from pathlib import Path

from rich.console import Console

from cloud_upload.console import RichConsole
from cloud_upload.outputs import GitHubOutputs
from cloud_upload.polling.interfaces import ConsoleOutput, OutputSink


class TestGitHubOutputs:
    def test_appends_delimited_blocks(self, tmp_path: Path) -> None:
        path = tmp_path / "github_output"
        outputs = GitHubOutputs(str(path))

        outputs.set_output("STATUS", "SUCCESS")
        outputs.set_output("FLOWS", '[{"name": "a"}]\nsecond line')

        lines = path.read_text().splitlines()
        assert lines[0].startswith("STATUS<<ghadelimiter_")
        assert lines[1] == "SUCCESS"
        assert lines[2] == lines[0].split("<<", 1)[1]
        assert lines[3].startswith("FLOWS<<")
        assert lines[4:6] == ['[{"name": "a"}]', "second line"]

    def test_without_output_file_only_logs(self, monkeypatch, caplog) -> None:
        monkeypatch.delenv("GITHUB_OUTPUT", raising=False)
        outputs = GitHubOutputs()

        with caplog.at_level("INFO"):
            outputs.set_output("STATUS", "SUCCESS")

        assert "STATUS=SUCCESS" in caplog.text

    def test_reads_path_from_environment(self, tmp_path: Path, monkeypatch) -> None:
        path = tmp_path / "out"
        monkeypatch.setenv("GITHUB_OUTPUT", str(path))

        GitHubOutputs().set_output("A", "1")

        assert "A<<" in path.read_text()

    def test_implements_protocol(self) -> None:
        assert isinstance(GitHubOutputs(""), OutputSink)


class TestRichConsole:
    def test_labels_are_not_treated_as_markup(self) -> None:
        buffer = io.StringIO()
        console = RichConsole(Console(file=buffer, force_terminal=False, width=200))

        console.success("[Passed] login")
        console.err("[Failed] signup (boom)")
        console.canceled("[Skipped] checkout")

        assert buffer.getvalue().splitlines() == ["[Passed] login", "[Failed] signup (boom)", "[Skipped] checkout"]

    def test_implements_protocol(self) -> None:
        assert isinstance(RichConsole(), ConsoleOutput)
