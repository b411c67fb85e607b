from pathlib import Path

import pytest
from typer.testing import CliRunner

from uwx import __version__
from uwx.cli import app

runner = CliRunner()

SAMPLE_URL = "https://api.example.com/v1/users?id=123&role=guest\n"


def _invoke(tmp_path: Path, args: list[str], stdin: str = SAMPLE_URL):
    # Point --config at a file that does not exist so a stray uwx.yaml is ignored.
    return runner.invoke(app, ["extract", "--config", str(tmp_path / "absent.yaml"), *args], input=stdin)


def _output_set(text: str) -> set[str]:
    return {line for line in text.splitlines() if line}


def test_extract_without_flags_emits_every_token(tmp_path: Path) -> None:
    result = _invoke(tmp_path, [])

    assert result.exit_code == 0, result.output
    assert _output_set(result.stdout) == {"api", "example", "com", "v1", "users", "id", "123", "role", "guest"}


def test_extract_substring_filter(tmp_path: Path) -> None:
    result = _invoke(tmp_path, ["-f", "user"])

    assert result.exit_code == 0, result.output
    assert _output_set(result.stdout) == {"users"}


def test_extract_regex_filter(tmp_path: Path) -> None:
    result = _invoke(tmp_path, ["-r", "^[0-9]+$"])

    assert result.exit_code == 0, result.output
    assert _output_set(result.stdout) == {"123"}


def test_extract_routes_paths_and_params_to_files(tmp_path: Path) -> None:
    paths = tmp_path / "paths.txt"
    params = tmp_path / "params.txt"

    result = _invoke(tmp_path, ["-o", str(paths), "--op", str(params)])

    assert result.exit_code == 0, result.output
    assert _output_set(paths.read_text(encoding="utf-8")) == {"v1", "users"}
    assert _output_set(params.read_text(encoding="utf-8")) == {"id", "role"}
    assert _output_set(result.stdout) == {"api", "example", "com", "123", "guest"}


def test_extract_non_url_line_uses_generic_tokens(tmp_path: Path) -> None:
    result = _invoke(tmp_path, [], stdin="not a url at all\n")

    assert result.exit_code == 0, result.output
    assert _output_set(result.stdout) == {"not", "a", "url", "at", "all"}


def test_extract_repeated_param_key(tmp_path: Path) -> None:
    result = _invoke(tmp_path, [], stdin="example.com/a?x=1&x=2\n")

    assert result.exit_code == 0, result.output
    lines = result.stdout.splitlines()
    assert lines.count("x") == 1
    assert "1" in lines and "2" in lines


def test_extract_writes_each_value_once_across_lines(tmp_path: Path) -> None:
    stdin = "https://example.com/admin\nhttps://admin.example.com/?admin=1\nadmin panel\n"

    result = _invoke(tmp_path, [], stdin=stdin)

    assert result.exit_code == 0, result.output
    assert result.stdout.splitlines() == ["example", "com", "admin", "1", "panel"]


def test_extract_reads_input_file_and_applies_length_and_alpha_num(tmp_path: Path) -> None:
    source = tmp_path / "urls.txt"
    source.write_text("https://cdn2.example.com/static/v2/app.js?build=abc123\n", encoding="utf-8")

    result = _invoke(tmp_path, ["--input", str(source), "--min", "3", "--alpha-num-only"], stdin="")

    assert result.exit_code == 0, result.output
    assert _output_set(result.stdout) == {"cdn2", "abc123"}


def test_extract_uses_config_file_defaults(tmp_path: Path) -> None:
    config = tmp_path / "uwx.yaml"
    config.write_text("filters:\n  substring: exam\n", encoding="utf-8")

    result = runner.invoke(app, ["extract", "--config", str(config)], input=SAMPLE_URL)

    assert result.exit_code == 0, result.output
    assert _output_set(result.stdout) == {"example"}


@pytest.mark.parametrize("args", [["-r", "([a-z"], ["--min", "9", "--max", "3"]])
def test_extract_rejects_bad_configuration(tmp_path: Path, args: list[str]) -> None:
    out = tmp_path / "paths.txt"

    result = _invoke(tmp_path, [*args, "-o", str(out)])

    assert result.exit_code != 0
    assert not out.exists()


def test_extract_fails_when_output_file_cannot_be_created(tmp_path: Path) -> None:
    result = _invoke(tmp_path, ["-o", str(tmp_path / "missing-dir" / "paths.txt")])

    assert result.exit_code == 1


def test_init_writes_default_config_once(tmp_path: Path) -> None:
    target = tmp_path / "uwx.yaml"

    first = runner.invoke(app, ["init", str(target)])
    second = runner.invoke(app, ["init", str(target)])

    assert first.exit_code == 0
    assert "min_length: 1" in target.read_text(encoding="utf-8")
    assert second.exit_code == 1


def test_version_command() -> None:
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert result.stdout.strip() == __version__
