"""
Tests for the scan engine.
"""

import os
import sys

import pytest

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from outrider.config import ScanConfig
from outrider.core.engine import ScanEngine, create_engine
from outrider.core.findings import FILE_ERROR_RULE, FindingType, Severity


@pytest.fixture
def project(tmp_path):
    """A small project tree with sources, vendored code and build output."""
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "app.js").write_text("console.log('x');\n")
    (tmp_path / "src" / "util.ts").write_text("var a = 1;\n")
    (tmp_path / "src" / "app.min.js").write_text("debugger;\n")
    (tmp_path / "src" / "notes.md").write_text("var nothing;\n")
    (tmp_path / "node_modules" / "lib").mkdir(parents=True)
    (tmp_path / "node_modules" / "lib" / "index.js").write_text("debugger;\n")
    return tmp_path


class TestDiscovery:
    """Tests for file discovery."""

    def test_discover_files(self, project):
        engine = ScanEngine()
        files = [os.path.relpath(f, project).replace(os.sep, "/") for f in engine.discover_files(str(project))]

        assert files == ["src/app.js", "src/util.ts"]

    def test_single_file(self, project):
        engine = ScanEngine()
        target = str(project / "src" / "app.js")
        assert list(engine.discover_files(target)) == [target]

    def test_missing_target(self, tmp_path):
        engine = ScanEngine()
        with pytest.raises(FileNotFoundError):
            engine.scan(str(tmp_path / "missing"))

    def test_custom_file_types(self, project):
        engine = ScanEngine(ScanConfig(file_types=["md"]))
        files = list(engine.discover_files(str(project)))

        assert len(files) == 1
        assert files[0].endswith("notes.md")


class TestScanEngine:
    """Tests for scanning files and directories."""

    def test_scan_directory(self, project):
        engine = ScanEngine()
        result = engine.scan(str(project))

        assert result.files_scanned == 2
        assert [f.rule for f in result.findings] == ["no-console-log", "no-var"]
        assert result.summary.warnings == 2
        assert result.summary.risk_score == 20
        assert result.errors == []

    def test_deterministic_order_with_workers(self, tmp_path):
        for name in ("c.js", "a.js", "b.js"):
            (tmp_path / name).write_text("var x;\n")

        engine = ScanEngine(ScanConfig(max_workers=4))
        result = engine.scan(str(tmp_path))

        assert [os.path.basename(f.file) for f in result.findings] == ["a.js", "b.js", "c.js"]

    def test_unreadable_file_becomes_finding(self, tmp_path):
        """A file that cannot be decoded yields one synthetic error finding."""
        (tmp_path / "good.js").write_text("var x;\n")
        (tmp_path / "bad.js").write_bytes(b"\xff\xfe\xfa var x;")

        result = ScanEngine().scan(str(tmp_path))
        failures = [f for f in result.findings if f.rule == FILE_ERROR_RULE]

        assert result.files_scanned == 2
        assert len(failures) == 1
        failure = failures[0]
        assert failure.type == FindingType.ERROR
        assert failure.severity == Severity.ERROR
        assert (failure.line, failure.column) == (1, 1)
        assert failure.message.startswith("Failed to analyze file:")
        assert failure.file.endswith("bad.js")
        assert len(result.errors) == 1
        assert any(f.rule == "no-var" for f in result.findings)

    def test_per_file_cap(self, tmp_path):
        (tmp_path / "app.js").write_text("var a;\n" * 5)
        config = ScanConfig.from_dict({"output": {"max_issues_per_file": 2}})

        result = ScanEngine(config).scan(str(tmp_path))

        assert len(result.findings) == 2
        assert [f.line for f in result.findings] == [1, 2]

    def test_uncapped_scan(self, tmp_path):
        (tmp_path / "app.js").write_text("var a;\n" * 5)
        config = ScanConfig.from_dict({"output": {"max_issues_per_file": 2}})

        result = ScanEngine(config).scan(str(tmp_path), cap=False)

        assert [f.line for f in result.findings] == [1, 2, 3, 4, 5]

    def test_crlf_file(self, tmp_path):
        (tmp_path / "app.js").write_bytes(b"foo();  \r\nbar();\r\n")

        result = ScanEngine().scan(str(tmp_path))

        trailing = [f for f in result.findings if f.rule == "no-trailing-spaces"]
        assert [(f.line, f.column) for f in trailing] == [(1, 7)]

    def test_file_stats(self, project):
        result = ScanEngine().scan(str(project))
        stats = result.file_stats[str(project / "src" / "app.js")]

        assert stats.total_lines == 2
        assert stats.code_lines == 1
        assert stats.blank_lines == 1

    def test_analyze_text(self):
        engine = ScanEngine()
        findings = engine.analyze_text("setInterval(tick, 1000);\nconsole.log(1);\n", "inline.js")

        # rule findings come before heuristic findings
        assert [f.type for f in findings] == [FindingType.RULE, FindingType.ML]
        assert all(f.file == "inline.js" for f in findings)

    def test_pattern_errors_are_reported(self, tmp_path):
        (tmp_path / "app.js").write_text("var a;\n")
        config = ScanConfig.from_dict({"rules": {"broken": {"pattern": "("}}})

        result = ScanEngine(config).scan(str(tmp_path))

        assert len(result.errors) == 1
        assert [f.rule for f in result.findings] == ["no-var"]

    def test_heuristics_disabled_by_config(self, tmp_path):
        (tmp_path / "app.js").write_text("setInterval(tick, 1000);\n")
        config = ScanConfig.from_dict({"ml": {"enabled": False}})

        assert ScanEngine(config).scan(str(tmp_path)).findings == []

    def test_create_engine_discovers_config(self, tmp_path):
        (tmp_path / ".outrider.yaml").write_text("rules:\n  no-var:\n    enabled: false\n")
        (tmp_path / "app.js").write_text("var a;\n")

        engine, config = create_engine(start_dir=str(tmp_path))

        assert config.rules == {"no-var": {"enabled": False}}
        assert engine.scan(str(tmp_path)).findings == []
