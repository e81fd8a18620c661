"""Tests for CLI commands."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

import neuro.cli
from neuro.cli import app


@pytest.fixture
def cli_runner():
    """Return a CLI test runner."""
    return CliRunner()


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, hello_source: str) -> Path:
    """Temporary working directory with a hello.neuro source file."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("NEURO_LLM_PROVIDER", raising=False)
    (tmp_path / "hello.neuro").write_text(hello_source)
    return tmp_path


@pytest.fixture
def provider(monkeypatch: pytest.MonkeyPatch, echo_provider):
    monkeypatch.setattr(neuro.cli, "create_provider", lambda config: echo_provider)
    return echo_provider


def test_version(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "neuro version" in result.stdout


def test_compile_writes_default_output(cli_runner: CliRunner, project: Path, provider):
    result = cli_runner.invoke(app, ["compile", "--file", "hello.neuro"])
    assert result.exit_code == 0, result.output
    assert "Parsed successfully..." in result.stdout
    assert "Writing to build/hello.neuro.ts" in result.stdout

    output = (project / "build" / "hello.neuro.ts").read_text()
    assert output.startswith("type Person = {")
    assert "type Mood = Happy | Sad | Sleepy;" in output
    assert output.endswith("main();")
    assert len(provider.requests) == 3


def test_compile_pins_against_previous_output(
    cli_runner: CliRunner, project: Path, provider, hello_previous_output: str
):
    out = project / "build" / "hello.neuro.ts"
    out.parent.mkdir()
    out.write_text(hello_previous_output)

    result = cli_runner.invoke(app, ["compile", "--file", "hello.neuro", "--quiet"])
    assert result.exit_code == 0, result.output
    assert result.stdout == ""
    assert 'return text.toUpperCase() + "!";' in out.read_text()
    assert len(provider.requests) == 2


def test_compile_to_stdout(cli_runner: CliRunner, project: Path, provider):
    result = cli_runner.invoke(
        app, ["compile", "--file", "hello.neuro", "--output", "/dev/stdout", "--quiet"]
    )
    assert result.exit_code == 0, result.output
    assert "export { greet, shout };" in result.stdout
    assert not (project / "build").exists()


def test_compile_parse_failure_writes_nothing(cli_runner: CliRunner, project: Path, provider):
    (project / "bad.neuro").write_text("function (a) {\n}\nfunction g(a {\n}\n")
    result = cli_runner.invoke(app, ["compile", "--file", "bad.neuro"])
    assert result.exit_code == 1
    assert "Failed to parse program" in result.output
    assert "Failed to find function name" in result.output
    assert "Failed to find function arguments" in result.output
    assert provider.requests == []
    assert not (project / "build").exists()


def test_compile_generation_failure_writes_nothing(
    cli_runner: CliRunner, project: Path, monkeypatch: pytest.MonkeyPatch, make_provider
):
    def fail(final_message: str) -> str:
        raise RuntimeError("service unavailable")

    monkeypatch.setattr(neuro.cli, "create_provider", lambda config: make_provider(reply=fail))
    result = cli_runner.invoke(app, ["compile", "--file", "hello.neuro"])
    assert result.exit_code == 1
    assert "service unavailable" in result.output
    assert not (project / "build" / "hello.neuro.ts").exists()


def test_compile_missing_file(cli_runner: CliRunner, project: Path):
    result = cli_runner.invoke(app, ["compile", "--file", "missing.neuro"])
    assert result.exit_code == 1
    assert "Source file not found" in result.output


def test_compile_structural_only_needs_no_provider(
    cli_runner: CliRunner, project: Path, monkeypatch: pytest.MonkeyPatch
):
    def no_provider(config):
        raise AssertionError("provider should not be created")

    monkeypatch.setattr(neuro.cli, "create_provider", no_provider)
    (project / "types.neuro").write_text("union type Shade = Red | Blue;\n")
    result = cli_runner.invoke(app, ["compile", "--file", "types.neuro", "-o", "out.ts"])
    assert result.exit_code == 0, result.output
    assert (project / "out.ts").read_text() == "type Shade = Red | Blue;"


def test_compile_and_run(
    cli_runner: CliRunner, project: Path, provider, monkeypatch: pytest.MonkeyPatch
):
    calls: list[tuple[list[str], Path]] = []

    def fake_run(run_command: list[str], path: Path) -> int:
        calls.append((run_command, path))
        return 0

    monkeypatch.setattr(neuro.cli, "run_file", fake_run)
    result = cli_runner.invoke(app, ["compile", "--file", "hello.neuro", "--run"])
    assert result.exit_code == 0, result.output
    assert "Running program" in result.stdout
    assert calls == [(["npx", "ts-node"], Path("build/hello.neuro.ts"))]


def test_compile_uses_manifest(cli_runner: CliRunner, project: Path, provider):
    (project / "neuro.toml").write_text('[build]\noutput_dir = "dist"\n')
    result = cli_runner.invoke(app, ["compile", "--file", "hello.neuro", "-q"])
    assert result.exit_code == 0, result.output
    assert (project / "dist" / "hello.neuro.ts").exists()


def test_compile_invalid_manifest(cli_runner: CliRunner, project: Path, provider):
    (project / "neuro.toml").write_text('[llm]\nprovider = "llama"\n')
    result = cli_runner.invoke(app, ["compile", "--file", "hello.neuro"])
    assert result.exit_code == 1
    assert "Unknown LLM provider" in result.output


def test_check_lists_constructs(cli_runner: CliRunner, project: Path, monkeypatch):
    monkeypatch.setattr(
        neuro.cli, "create_provider", lambda config: pytest.fail("check must not generate")
    )
    result = cli_runner.invoke(app, ["check", "--file", "hello.neuro"])
    assert result.exit_code == 0, result.output
    assert "6 construct(s)" in result.stdout
    assert "greet" in result.stdout
    assert "Mood" in result.stdout


def test_check_reports_errors(cli_runner: CliRunner, project: Path):
    (project / "bad.neuro").write_text("function f() {\n")
    result = cli_runner.invoke(app, ["check", "--file", "bad.neuro"])
    assert result.exit_code == 1
    assert "Failed to find closing bracket" in result.output


def test_check_verbose_configures_debug_logging(
    cli_runner: CliRunner, project: Path, monkeypatch: pytest.MonkeyPatch
):
    calls: list[bool] = []
    monkeypatch.setattr(neuro.cli, "configure_logging", calls.append)
    result = cli_runner.invoke(app, ["check", "--file", "hello.neuro", "--verbose"])
    assert result.exit_code == 0, result.output
    assert calls == [True]
