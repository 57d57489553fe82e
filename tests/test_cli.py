"""Tests for the command line interface."""
import json

import pytest
from click.testing import CliRunner

from main import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def files(tmp_path):
    """Mapping configuration and data files"""
    config = tmp_path / "mapping.yml"
    config.write_text(
        "mappings:\n"
        "  - source: user.name\n"
        "    target: fullName\n"
        "    transforms: [trim]\n"
        "  - source: user.email\n"
        "    target: email\n",
        encoding="utf-8",
    )
    data = tmp_path / "data.json"
    data.write_text('{"user": {"name": " Ada ", "email": "ada@example.org"}}', encoding="utf-8")
    return str(config), str(data)


class TestMapCommand:
    """Test the map command."""

    def test_map_target(self, runner, files):
        result = runner.invoke(cli, ["map", *files, "--apply", "--target", "--quiet"])

        assert result.exit_code == 0
        assert json.loads(result.output) == {"fullName": "Ada", "email": "ada@example.org"}

    def test_map_report(self, runner, files):
        result = runner.invoke(cli, ["map", *files, "--dry-run", "--report", "--quiet"])

        assert result.exit_code == 0
        report = json.loads(result.output)
        assert report["dryRun"] is True
        assert report["mappings"][1]["transformedValue"] == "a***a@example.org"

    def test_map_to_file(self, runner, files, tmp_path):
        output = tmp_path / "out" / "target.json"
        result = runner.invoke(cli, ["map", *files, "--apply", "--target", "-o", str(output)])

        assert result.exit_code == 0
        assert json.loads(output.read_text(encoding="utf-8"))["fullName"] == "Ada"

    def test_map_invalid_config(self, runner, tmp_path, files):
        config = tmp_path / "bad.yml"
        config.write_text("mappings:\n  - source: a\n    target: b\n    transforms: [reverse]\n", encoding="utf-8")

        result = runner.invoke(cli, ["map", str(config), files[1]])

        assert result.exit_code == 1
        assert "reverse" in result.output


class TestOtherCommands:
    """Test validate and classify."""

    def test_validate(self, runner, files):
        result = runner.invoke(cli, ["validate", files[0]])

        assert result.exit_code == 0
        assert "Configuration is valid" in result.output
        assert "Rules: 2" in result.output

    def test_validate_missing_file(self, runner, tmp_path):
        result = runner.invoke(cli, ["validate", str(tmp_path / "missing.yml")])
        assert result.exit_code == 1

    def test_classify(self, runner):
        result = runner.invoke(cli, ["classify", "email", "compass", "ssn"])

        assert result.exit_code == 0
        assert "email: email" in result.output
        assert "compass: not sensitive" in result.output
        assert "ssn: sensitive" in result.output


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
