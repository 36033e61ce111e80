"""Tests for CLI functionality."""
import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from commitcheck import __version__
from commitcheck.cli import main
from commitcheck.config import DEFAULT_CONFIG_FILENAME, Config


@pytest.fixture
def cli_runner():
    """Fixture for testing CLI commands."""
    return CliRunner()


@pytest.fixture
def message_files(tmp_path):
    """Write commit messages to files, one per message."""
    def write(*messages):
        paths = []
        for i, message in enumerate(messages, start=1):
            path = tmp_path / f"msg{i}.txt"
            path.write_text(message)
            paths.append(str(path))
        return paths
    return write


def test_valid_message_files(cli_runner, tmp_path, message_files):
    files = message_files("feat: add login", "fix(db): resolve timeout")
    result = cli_runner.invoke(main, ["-p", str(tmp_path), "--no-validate-title", *files])
    assert result.exit_code == 0
    assert "msg1.txt: feat: add login" in result.output
    assert "Result: PASS" in result.output


def test_invalid_message_fails(cli_runner, tmp_path, message_files):
    files = message_files("feat: add login", "Update readme")
    result = cli_runner.invoke(main, ["-p", str(tmp_path), "--no-validate-title", *files])
    assert result.exit_code == 1
    assert "msg2.txt: Update readme" in result.output
    assert "Result: FAIL" in result.output


def test_no_fail_on_error(cli_runner, tmp_path, message_files):
    files = message_files("Update readme")
    result = cli_runner.invoke(
        main, ["-p", str(tmp_path), "--no-validate-title", "--no-fail-on-error", *files]
    )
    assert result.exit_code == 0
    assert "Result: FAIL" in result.output


def test_git_range(cli_runner, temp_git_repo):
    result = cli_runner.invoke(
        main, ["-p", temp_git_repo, "--range", "base..HEAD", "--title", "feat: add login flow"]
    )
    assert result.exit_code == 1
    assert "PR title: feat: add login flow" in result.output
    assert "Update readme" in result.output


def test_unknown_range_is_error(cli_runner, temp_git_repo):
    result = cli_runner.invoke(main, ["-p", temp_git_repo, "--range", "nope..HEAD"])
    assert result.exit_code == 2
    assert "Error:" in result.output


def test_configuration_error(cli_runner, tmp_path, message_files):
    files = message_files("feat: add login")
    result = cli_runner.invoke(
        main,
        ["-p", str(tmp_path), "--min-subject-length", "50", "--max-subject-length", "10", *files],
    )
    assert result.exit_code == 2
    assert "Configuration error" in result.output


def test_empty_types_is_configuration_error(cli_runner, tmp_path):
    result = cli_runner.invoke(main, ["-p", str(tmp_path), "--types", ","])
    assert result.exit_code == 2
    assert "Configuration error" in result.output


def test_invalid_config_file_is_error(cli_runner, tmp_path, message_files):
    (tmp_path / DEFAULT_CONFIG_FILENAME).write_text(
        '[commitcheck]\ntypes = "feat"\nmax_subject_length = "fifty"\n'
    )
    files = message_files("chore: tidy")
    result = cli_runner.invoke(main, ["-p", str(tmp_path), "--no-validate-title", *files])
    assert result.exit_code == 2
    assert "Configuration error" in result.output
    assert "max_subject_length" in result.output


def test_malformed_config_file_is_error(cli_runner, tmp_path, message_files):
    (tmp_path / DEFAULT_CONFIG_FILENAME).write_text("invalid [ toml")
    files = message_files("feat: add login")
    result = cli_runner.invoke(main, ["-p", str(tmp_path), "--no-validate-title", *files])
    assert result.exit_code == 2
    assert "Configuration error" in result.output


def test_non_integer_environment_is_error(cli_runner, tmp_path, message_files, monkeypatch):
    monkeypatch.setenv("COMMIT_CHECK_MIN_SUBJECT_LENGTH", "abc")
    files = message_files("feat: add login")
    result = cli_runner.invoke(main, ["-p", str(tmp_path), "--no-validate-title", *files])
    assert result.exit_code == 2
    assert "COMMIT_CHECK_MIN_SUBJECT_LENGTH must be an integer" in result.output


def test_no_commits_is_warning(cli_runner, tmp_path):
    result = cli_runner.invoke(main, ["-p", str(tmp_path), "--no-validate-title"])
    assert result.exit_code == 0
    assert "no commits found to validate" in result.output


def test_title_only(cli_runner, tmp_path):
    result = cli_runner.invoke(
        main, ["-p", str(tmp_path), "--no-validate-commits", "--title", "Fix the thing"]
    )
    assert result.exit_code == 1
    assert "PR title: Fix the thing" in result.output


def test_disabled_title_is_advisory(cli_runner, tmp_path, message_files):
    files = message_files("feat: add login")
    result = cli_runner.invoke(
        main, ["-p", str(tmp_path), "--no-validate-title", "--title", "Bad title", *files]
    )
    assert result.exit_code == 0
    assert "(advisory)" in result.output


def test_title_from_environment(cli_runner, tmp_path, monkeypatch):
    monkeypatch.setenv("COMMIT_CHECK_TITLE", "feat: add login")
    result = cli_runner.invoke(main, ["-p", str(tmp_path), "--no-validate-commits"])
    assert result.exit_code == 0
    assert "PR title: feat: add login" in result.output


def test_rule_overrides(cli_runner, tmp_path, message_files):
    files = message_files("chore: tidy up")
    result = cli_runner.invoke(
        main, ["-p", str(tmp_path), "--no-validate-title", "--types", "feat,fix", *files]
    )
    assert result.exit_code == 1
    assert "type 'chore' is not allowed" in result.output


def test_config_file_is_used(cli_runner, tmp_path, message_files):
    Config(require_scope=True).save(tmp_path)
    files = message_files("feat: add login")
    result = cli_runner.invoke(main, ["-p", str(tmp_path), "--no-validate-title", *files])
    assert result.exit_code == 1
    assert "scope is required" in result.output

    result = cli_runner.invoke(
        main, ["-p", str(tmp_path), "--no-validate-title", "--no-require-scope", *files]
    )
    assert result.exit_code == 0


def test_json_format(cli_runner, tmp_path, message_files):
    files = message_files("feat: add login", "Update readme")
    result = cli_runner.invoke(
        main, ["-p", str(tmp_path), "--no-validate-title", "--format", "json", *files]
    )
    assert result.exit_code == 1
    data = json.loads(result.output)
    assert data["overall_valid"] is False
    assert [e["source"] for e in data["entries"]] == ["msg1.txt", "msg2.txt"]


def test_log_file(cli_runner, tmp_path, message_files):
    files = message_files("feat: add login")
    with cli_runner.isolated_filesystem(temp_dir=tmp_path) as td:
        result = cli_runner.invoke(
            main, ["-p", td, "--no-validate-title", "--log-file", "run.log", *files]
        )
        assert result.exit_code == 0
        log_text = (Path(td) / "run.log").read_text()
        assert "msg1.txt: OK - feat: add login" in log_text


def test_absolute_log_file(cli_runner, tmp_path, message_files):
    files = message_files("feat: add login")
    log_path = tmp_path / "logs" / "run.log"
    result = cli_runner.invoke(
        main, ["-p", str(tmp_path), "--no-validate-title", "--log-file", str(log_path), *files]
    )
    assert result.exit_code == 0
    assert "msg1.txt: OK - feat: add login" in log_path.read_text()


def test_config_list(cli_runner, tmp_path):
    result = cli_runner.invoke(main, ["-p", str(tmp_path), "--config-list"])
    assert result.exit_code == 0
    assert "Current Configuration Settings" in result.output
    assert "require_scope" in result.output
    assert "Using default values" in result.output


def test_config_dir_creates_config(cli_runner, tmp_path):
    with patch('pyperclip.copy') as mock_copy:
        result = cli_runner.invoke(main, ["-p", str(tmp_path), "--config-dir"])

        assert result.exit_code == 0
        config_path = tmp_path / DEFAULT_CONFIG_FILENAME
        assert config_path.exists()
        assert "Created new config file with default values" in result.output
        mock_copy.assert_called_once_with(str(config_path))

        config = Config.load(tmp_path)
        assert config.fail_on_error is True


def test_version(cli_runner):
    result = cli_runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output
