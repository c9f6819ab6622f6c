"""
Tests for the command-line interface.

Covers option handling, exit codes, and the rendered listing.
"""

import json

import pytest
from typer.testing import CliRunner

from sbom_dependents import __version__
from sbom_dependents.cli import app

runner = CliRunner()

SBOM_DOT = """
digraph sbom {
    "RPM-Packages" -> "bash";
    "RPM-Packages" -> "coreutils";
    "RPM-Packages" -> "glibc";
    "bash" -> "glibc";
    "coreutils" -> "glibc";
    "dracut" -> "bash";
    "initscripts" -> "coreutils";
    "dracut" -> "coreutils";
}
"""


@pytest.fixture
def sbom_file(tmp_path):
    """Write a small SBOM DOT graph to disk."""
    path = tmp_path / "sbom.dot"
    path.write_text(SBOM_DOT)
    return path


class TestDependentsCommand:
    """Test the dependents listing."""

    def test_lists_dependents_by_depth(self, sbom_file):
        """Test the full listing for an unbounded search."""
        result = runner.invoke(app, ["-i", str(sbom_file), "-p", "glibc"])

        assert result.exit_code == 0
        assert "depth 1 (num 2):" in result.output
        assert "depth 2 (num 2):" in result.output
        assert "RPM-Packages" not in result.output
        assert result.output.index("bash") < result.output.index("coreutils")
        assert result.output.index("dracut") < result.output.index("initscripts")

    def test_depth_limit(self, sbom_file):
        """Test --depth stops after the requested layer."""
        result = runner.invoke(
            app, ["--input-file", str(sbom_file), "--package", "glibc", "-d", "1"]
        )

        assert result.exit_code == 0
        assert "depth 1 (num 2):" in result.output
        assert "depth 2" not in result.output
        assert "dracut" not in result.output

    def test_no_dependents_prints_nothing(self, sbom_file):
        """Test a package nothing depends on."""
        result = runner.invoke(app, ["-i", str(sbom_file), "-p", "dracut"])

        assert result.exit_code == 0
        assert "depth" not in result.output

    def test_root_node_option(self, sbom_file):
        """Test that disabling the root sentinel reports it."""
        result = runner.invoke(
            app, ["-i", str(sbom_file), "-p", "glibc", "--root-node", ""]
        )

        assert result.exit_code == 0
        assert "depth 1 (num 3):" in result.output
        assert "RPM-Packages" in result.output

    def test_json_output(self, sbom_file):
        """Test --json emits the machine-readable summary."""
        result = runner.invoke(app, ["-i", str(sbom_file), "-p", "glibc", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["package"] == "glibc"
        assert data["depths"][0] == {
            "depth": 1,
            "count": 2,
            "dependents": ["bash", "coreutils"],
        }
        assert data["depths"][1]["dependents"] == ["dracut", "initscripts"]

    def test_plain_output(self, sbom_file):
        """Test --plain prints the tab-indented listing verbatim."""
        result = runner.invoke(app, ["-i", str(sbom_file), "-p", "glibc", "--plain"])

        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "depth 1 (num 2):",
            "\t1. bash",
            "\t2. coreutils",
            "depth 2 (num 2):",
            "\t1. dracut",
            "\t2. initscripts",
        ]

    def test_depth_from_config(self, sbom_file, isolated_config):
        """Test the default depth comes from the config file."""
        (isolated_config / ".sbom-dependents.toml").write_text(
            "[tool.sbom-dependents]\nmax_depth = 1\n"
        )

        result = runner.invoke(app, ["-i", str(sbom_file), "-p", "glibc"])

        assert result.exit_code == 0
        assert "dracut" not in result.output

    def test_stdin_input(self):
        """Test reading the graph from stdin with '-'."""
        result = runner.invoke(app, ["-i", "-", "-p", "glibc"], input=SBOM_DOT)

        assert result.exit_code == 0
        assert "depth 1 (num 2):" in result.output


class TestErrors:
    """Test error handling and exit codes."""

    def test_package_not_found(self, sbom_file):
        """Test an unknown package exits with no listing."""
        result = runner.invoke(app, ["-i", str(sbom_file), "-p", "Glibc"])

        assert result.exit_code == 1
        assert "Glibc package is Not Found in your SBOM DOT File." in result.output
        assert "depth" not in result.output

    def test_missing_input_file_option(self):
        """Test that --input-file is required."""
        result = runner.invoke(app, ["-p", "glibc"])

        assert result.exit_code == 1
        assert "Required options: --input-file" in result.output

    def test_missing_package_option(self, sbom_file):
        """Test that --package is required."""
        result = runner.invoke(app, ["-i", str(sbom_file)])

        assert result.exit_code == 1
        assert "Required options: --package" in result.output

    def test_input_file_not_found(self, tmp_path):
        """Test a nonexistent input file."""
        result = runner.invoke(
            app, ["-i", str(tmp_path / "missing.dot"), "-p", "glibc"]
        )

        assert result.exit_code == 1
        assert "Input file not found" in result.output

    def test_malformed_graph(self, tmp_path):
        """Test an input file that is not valid DOT."""
        bad = tmp_path / "bad.dot"
        bad.write_text("digraph { this is -> not valid")

        result = runner.invoke(app, ["-i", str(bad), "-p", "glibc"])

        assert result.exit_code == 1
        assert "Unable to read graph" in result.output


    def test_input_file_not_utf8(self, tmp_path):
        """Test an input file with bytes that are not valid UTF-8."""
        bad = tmp_path / "latin1.dot"
        bad.write_bytes(b'digraph { "caf\xe9" -> "B"; }')

        result = runner.invoke(app, ["-i", str(bad), "-p", "B"])

        assert result.exit_code == 1
        assert not isinstance(result.exception, UnicodeDecodeError)
        assert "Unable to read graph" in result.output


def test_version():
    """Test --version prints the package version."""
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_verbose_does_not_pollute_listing(sbom_file):
    """Test that verbose logging leaves the exit code and listing intact."""
    result = runner.invoke(app, ["-i", str(sbom_file), "-p", "glibc", "-v"])

    assert result.exit_code == 0
    assert "depth 1 (num 2):" in result.output
