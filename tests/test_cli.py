"""
Tests for the command-line interface.
"""

import json

import pytest
from click.testing import CliRunner

from resemble.cli import cli
from resemble.core.config import Config
from resemble.utils.logging_config import setup_logging

FOO_ONE = 'fn foo() { let x = 1; println!("{}", x); }\n'
FOO_TWO = 'fn foo() { let x = 2; println!("{}", x); }\n'


@pytest.fixture(autouse=True)
def reset_config():
    Config.reset()
    yield
    Config.reset()
    # Drop handlers bound to the runner's captured streams
    setup_logging()


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def sources(tmp_path):
    a = tmp_path / "file_a.rs"
    b = tmp_path / "file_b.rs"
    a.write_text(FOO_ONE)
    b.write_text(FOO_TWO)
    return a, b


class TestCompareCommand:
    """Test comparing two files, the default command."""

    def test_prints_similarity(self, runner, sources):
        a, b = sources
        result = runner.invoke(cli, [str(a), str(b)])

        assert result.exit_code == 0
        assert result.output == "Cosine similarity = 1.000000\n"

    def test_disjoint_files(self, runner, tmp_path):
        a = tmp_path / "alias.rs"
        b = tmp_path / "unit.rs"
        a.write_text("type Alias = u32;\n")
        b.write_text("#[derive(Debug)]\nstruct Unit;\n")

        result = runner.invoke(cli, [str(a), str(b)])

        assert result.exit_code == 0
        assert "Cosine similarity = 0.000000" in result.output

    def test_missing_file(self, runner, sources, tmp_path):
        a, _ = sources
        result = runner.invoke(cli, [str(a), str(tmp_path / "missing.rs")])

        assert result.exit_code == 1
        assert "One or both files do not exist" in result.output
        assert "Cosine similarity" not in result.output

    def test_too_few_arguments(self, runner, sources):
        a, _ = sources
        result = runner.invoke(cli, [str(a)])

        assert result.exit_code == 2
        assert "Usage" in result.output

    def test_no_arguments(self, runner):
        result = runner.invoke(cli, [])

        assert result.exit_code == 2
        assert "Usage" in result.output

    def test_compare_without_files(self, runner):
        result = runner.invoke(cli, ["compare"])
        assert result.exit_code == 2

    def test_explicit_compare_command(self, runner, sources):
        a, b = sources
        result = runner.invoke(cli, ["compare", str(a), str(b)])

        assert result.exit_code == 0
        assert result.output == "Cosine similarity = 1.000000\n"

    def test_global_options_before_files(self, runner, sources):
        a, b = sources
        result = runner.invoke(cli, ["-v", str(a), str(b)])

        assert result.exit_code == 0
        assert "Cosine similarity = 1.000000" in result.output

    def test_parse_error(self, runner, sources, tmp_path):
        a, _ = sources
        broken = tmp_path / "broken.rs"
        broken.write_text("fn broken( {\n")

        result = runner.invoke(cli, [str(a), str(broken)])

        assert result.exit_code == 1
        assert f"Failed to parse '{broken}'" in result.output

    def test_json_output(self, runner, sources):
        a, b = sources
        result = runner.invoke(cli, [str(a), str(b), "-f", "json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["similarity"] == 1.0
        assert "Stmt::Macro" in data["shared_labels"]

    def test_output_file(self, runner, sources, tmp_path):
        a, b = sources
        out = tmp_path / "result.txt"
        result = runner.invoke(cli, [str(a), str(b), "-o", str(out)])

        assert result.exit_code == 0
        assert out.read_text() == "Cosine similarity = 1.000000\n"

    def test_config_precision(self, runner, sources, tmp_path):
        a, b = sources
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"output": {"precision": 2}}))

        result = runner.invoke(
            cli, ["--config", str(config_path), str(a), str(b)]
        )

        assert result.exit_code == 0
        assert result.output == "Cosine similarity = 1.00\n"

    def test_invalid_config(self, runner, sources, tmp_path):
        a, b = sources
        config_path = tmp_path / "config.json"
        config_path.write_text("{not json")

        result = runner.invoke(
            cli, ["--config", str(config_path), "compare", str(a), str(b)]
        )

        assert result.exit_code == 2

    def test_mistyped_config(self, runner, sources, tmp_path):
        """A wrong value type is reported as a usage error, not a traceback."""
        a, b = sources
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"output": {"precision": "x"}}))

        result = runner.invoke(cli, ["--config", str(config_path), str(a), str(b)])

        assert result.exit_code == 2
        assert "output.precision" in result.output
        assert isinstance(result.exception, SystemExit)

    def test_invalid_environment(self, runner, sources):
        a, b = sources
        result = runner.invoke(cli, [str(a), str(b)], env={"RESEMBLE_PRECISION": "six"})

        assert result.exit_code == 1
        assert "RESEMBLE_PRECISION" in result.output
        assert "Cosine similarity" not in result.output


class TestFeaturesCommand:
    """Test `resemble features`."""

    def test_text_table(self, runner, sources):
        a, _ = sources
        result = runner.invoke(cli, ["features", str(a)])

        assert result.exit_code == 0
        labels = [line.split()[0] for line in result.output.splitlines()]
        assert labels == sorted(labels)
        assert "Stmt::Local" in labels

    def test_json(self, runner, sources):
        a, _ = sources
        result = runner.invoke(cli, ["features", str(a), "-f", "json"])

        assert result.exit_code == 0
        assert json.loads(result.output)["Macro"] == 1.0

    def test_parse_error(self, runner, tmp_path):
        broken = tmp_path / "broken.rs"
        broken.write_text("let x = 1;\n")

        result = runner.invoke(cli, ["features", str(broken)])

        assert result.exit_code == 1
        assert "expected item" in result.output


class TestInitCommand:
    """Test `resemble init`."""

    def test_writes_default_config(self, runner, tmp_path):
        out = tmp_path / "config.json"
        result = runner.invoke(cli, ["init", "-o", str(out)])

        assert result.exit_code == 0
        data = json.loads(out.read_text())
        assert data["output"]["precision"] == 6
        assert data["parser"]["encoding"] == "utf-8"


def test_version(runner):
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "1.0.0" in result.output
