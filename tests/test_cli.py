"""
Tests for the command-line interface.
"""

import json
import os
import sys

import pytest

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from outrider.cli import create_parser, main


@pytest.fixture
def project(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "app.js").write_text("console.log('x');\n")
    return tmp_path


class TestParser:
    """Tests for argument parsing."""

    def test_scan_defaults(self):
        args = create_parser().parse_args(["scan"])

        assert args.command == "scan"
        assert args.target == "."
        assert args.output is None
        assert args.jobs is None

    def test_invalid_output_format(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["scan", "-o", "xml"])

    def test_no_command(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out


class TestScanCommand:
    """Tests for `outrider scan`."""

    def test_console(self, project, capsys):
        assert main(["scan", str(project), "--no-color"]) == 0

        out = capsys.readouterr().out
        assert "no-console-log" in out
        assert "Risk score: 20/100" in out

    def test_json(self, project, capsys):
        assert main(["scan", str(project), "-o", "json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["summary"]["warnings"] == 1
        assert data["results"][0]["rule"] == "no-console-log"

    def test_csv_to_file(self, project, capsys):
        report = project / "report.csv"
        assert main(["scan", str(project / "app.js"), "-o", "csv", "--output-file", str(report)]) == 0

        lines = report.read_text().splitlines()
        assert lines[0].startswith("File,Line,Column")
        assert len(lines) == 2
        assert "Results written to" in capsys.readouterr().out

    def test_thresholds_fail_the_scan(self, project):
        (project / ".outrider.yaml").write_text("thresholds:\n  max_errors: 0\n")
        (project / "debug.js").write_text("debugger;\n")

        assert main(["scan", str(project), "--no-color"]) == 1

    def test_warning_threshold(self, project):
        config = project / "strict.yaml"
        config.write_text("thresholds:\n  max_warnings: 0\n")

        assert main(["scan", str(project), "-c", str(config), "--no-color"]) == 1

    def test_missing_target(self, project, capsys):
        assert main(["scan", str(project / "missing")]) == 1
        assert "Error" in capsys.readouterr().err

    def test_invalid_config(self, project, capsys):
        config = project / "bad.yaml"
        config.write_text("output:\n  format: xml\n")

        assert main(["scan", str(project), "-c", str(config)]) == 1
        assert "output.format" in capsys.readouterr().err

    def test_invalid_jobs(self, project):
        assert main(["scan", str(project), "-j", "0"]) == 1


class TestFixCommand:
    """Tests for `outrider fix`."""

    def test_dry_run(self, project, capsys):
        source = project / "app.js"
        source.write_text("foo();  \n")

        assert main(["fix", str(project), "--dry-run"]) == 0
        assert source.read_text() == "foo();  \n"
        assert "dry run" in capsys.readouterr().out

    def test_apply(self, project):
        source = project / "app.js"
        source.write_text("foo();  \n")

        assert main(["fix", str(project)]) == 0
        assert source.read_text() == "foo();\n"
        assert (project / "app.js.outrider-backup").read_text() == "foo();  \n"

    def test_fixes_past_report_cap(self, project):
        """Every fixable finding is fixed, not just the ones that would be reported."""
        source = project / "app.js"
        source.write_text("foo();  \n" * 60)

        assert main(["fix", str(project), "--no-backup"]) == 0
        assert source.read_text() == "foo();\n" * 60

    def test_nothing_to_fix(self, project, capsys):
        assert main(["fix", str(project)]) == 0
        assert "No fixable issues found" in capsys.readouterr().out


class TestOtherCommands:
    """Tests for `outrider init` and `outrider list-rules`."""

    def test_init(self, project):
        assert main(["init"]) == 0
        assert (project / ".outrider.yaml").exists()

        assert main(["init"]) == 1
        assert main(["init", "--force"]) == 0

    def test_list_rules(self, project, capsys):
        assert main(["list-rules"]) == 0

        out = capsys.readouterr().out
        assert "no-console-log" in out
        assert "memory-leak" in out
        assert "Total: 10 rules, 5 categories" in out
