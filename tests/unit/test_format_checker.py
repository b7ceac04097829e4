"""
Unit tests for format checkers.
"""

import pytest
from unittest.mock import Mock, patch

from patch_parser.checks.formatting import (
    BlackChecker,
    GofmtChecker,
    build_format_checker,
)
from patch_parser.models.review import WorkingCopy


FORMATTED_PY = 'def main():\n    return "ok"\n'
UNFORMATTED_PY = "def main( ):\n  return 'ok'\n"


@pytest.fixture
def working_copy(tmp_path):
    return WorkingCopy(path=tmp_path, pr_number=42, base_url="https://github.com/docker/docker.git")


def write(working_copy, relative_path, content):
    path = working_copy.resolve(relative_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding='utf-8')


class TestBlackChecker:
    """Unit tests for BlackChecker class."""

    def setup_method(self):
        self.checker = BlackChecker()

    def test_compliant_files(self, working_copy):
        write(working_copy, "pkg/app.py", FORMATTED_PY)

        report = self.checker.check(working_copy, ["pkg/app.py"])

        assert report.compliant
        assert report.violations == ()
        assert report.fix_command == "black"

    def test_violations_follow_diff_order(self, working_copy):
        """Test that violations keep the changed-file order."""
        write(working_copy, "z_last.py", UNFORMATTED_PY)
        write(working_copy, "ok.py", FORMATTED_PY)
        write(working_copy, "a_first.py", UNFORMATTED_PY)

        report = self.checker.check(working_copy, ["z_last.py", "ok.py", "a_first.py"])

        assert not report.compliant
        assert report.violations == ("z_last.py", "a_first.py")

    def test_only_changed_source_files_are_inspected(self, working_copy):
        """Test that untouched and non-source files are ignored."""
        write(working_copy, "untouched.py", UNFORMATTED_PY)
        write(working_copy, "README.md", "# not python (")

        report = self.checker.check(working_copy, ["README.md"])

        assert report.compliant

    def test_no_source_files_is_vacuously_compliant(self, working_copy):
        assert self.checker.check(working_copy, []).compliant

    def test_removed_files_are_skipped(self, working_copy):
        assert self.checker.check(working_copy, ["deleted.py"]).compliant

    def test_unparsable_source_is_a_violation(self, working_copy):
        write(working_copy, "broken.py", "def broken(:\n")

        assert self.checker.check(working_copy, ["broken.py"]).violations == ("broken.py",)

    def test_non_utf8_source_is_a_violation(self, working_copy):
        working_copy.resolve("latin.py").write_bytes(b"x = '\xe9'\n")

        assert self.checker.check(working_copy, ["latin.py"]).violations == ("latin.py",)


class TestGofmtChecker:
    """Unit tests for GofmtChecker class."""

    def setup_method(self):
        self.checker = GofmtChecker()

    def _result(self, returncode=0, stdout="", stderr=""):
        return Mock(returncode=returncode, stdout=stdout, stderr=stderr)

    def test_formatted_file(self, working_copy):
        write(working_copy, "main.go", "package main\n")

        with patch('patch_parser.checks.formatting.subprocess.run', return_value=self._result()) as run:
            report = self.checker.check(working_copy, ["main.go"])

        assert report.compliant
        assert report.fix_command == "gofmt -s -w"
        assert run.call_args.args[0] == ["gofmt", "-s", "-l", str(working_copy.resolve("main.go"))]

    def test_unformatted_files(self, working_copy):
        """Test that listed files and gofmt failures are violations, in diff order."""
        for name in ("b.go", "a.go", "c.go"):
            write(working_copy, name, "package main\n")

        results = {
            "b.go": self._result(stdout="b.go\n"),
            "a.go": self._result(),
            "c.go": self._result(returncode=2, stderr="c.go:1:1: expected 'package'"),
        }

        def fake_run(command, **kwargs):
            return results[command[-1].rsplit('/', 1)[-1]]

        with patch('patch_parser.checks.formatting.subprocess.run', side_effect=fake_run):
            report = self.checker.check(working_copy, ["b.go", "a.go", "c.go", "README.md"])

        assert report.violations == ("b.go", "c.go")

    def test_missing_gofmt_propagates(self, working_copy):
        write(working_copy, "main.go", "package main\n")

        with patch('patch_parser.checks.formatting.subprocess.run', side_effect=FileNotFoundError("gofmt")):
            with pytest.raises(OSError):
                self.checker.check(working_copy, ["main.go"])


class TestBuildFormatChecker:

    def test_known_checkers(self):
        assert isinstance(build_format_checker("gofmt"), GofmtChecker)
        assert isinstance(build_format_checker("black"), BlackChecker)

    def test_unknown_checker(self):
        with pytest.raises(ValueError):
            build_format_checker("prettier")
