"""
neuro CLI.

Commands:
- compile: Parse a source file, generate live functions, write the output
- check: Parse a source file and list its constructs without generating
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from neuro import ir
from neuro._version import get_version
from neuro.core.errors import ConfigError
from neuro.core.manifest import (
    LLMConfig,
    ProjectManifest,
    apply_env_overrides,
    find_manifest,
    load_manifest,
)
from neuro.core.parser import parse_source
from neuro.generator import CompletionProvider, generate_program
from neuro.generator.emitters import render_signature

logger = logging.getLogger(__name__)

STDOUT_PATH = "/dev/stdout"

console = Console()

app = typer.Typer(
    help="neuro – compile function stubs into TypeScript with an LLM",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"neuro version {get_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version information",
    ),
) -> None:
    """neuro CLI main callback for global options."""
    pass


def configure_logging(verbose: bool) -> None:
    """Log level from --verbose, else LOG_LEVEL (default: WARNING)."""
    level_name = "DEBUG" if verbose else os.getenv("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def load_config(manifest_path: Path | None) -> ProjectManifest:
    """Load neuro.toml (explicit path or cwd) with environment overrides."""
    try:
        manifest = load_manifest(manifest_path) if manifest_path else find_manifest()
        return apply_env_overrides(manifest)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


def create_provider(config: LLMConfig) -> CompletionProvider:
    """Build the completion provider described by the [llm] section."""
    from neuro.llm import LLMAPIClient

    return LLMAPIClient.from_config(config)


def read_previous_output(output_path: Path) -> str:
    """Previously generated text for pinning; empty if there is none."""
    if str(output_path) == STDOUT_PATH or not output_path.is_file():
        return ""
    return output_path.read_bytes().decode("utf-8")


def run_file(run_command: list[str], path: Path) -> int:
    """Run the generated file with inherited stdio and return its exit code."""
    result = subprocess.run([*run_command, str(path)], check=False)
    return result.returncode


def _read_source(file: Path) -> str:
    if not file.is_file():
        typer.echo(f"Error: Source file not found: {file}", err=True)
        raise typer.Exit(code=1)
    return file.read_text(encoding="utf-8")


def _describe(construct: ir.Construct) -> tuple[str, str, str]:
    """(kind, name, detail) row for the check table."""
    if isinstance(construct, ir.LiveFunction | ir.PinnedFunction):
        return construct.kind.value, construct.name, render_signature(construct)
    if isinstance(construct, ir.UnionTypeDefinition):
        return construct.kind.value, construct.name, " | ".join(construct.tags)
    if isinstance(construct, ir.TypeDefinition):
        return construct.kind.value, "", construct.body.split("\n")[0]
    return construct.kind.value, "", ", ".join(construct.exports)


@app.command("compile")
def compile_command(
    file: Path = typer.Option(..., "--file", help="The source file to compile"),
    output: str | None = typer.Option(
        None, "--output", "-o", help="Output file location (default: build/<file>.ts)"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Avoid writing non-essential output to the terminal"
    ),
    run: bool = typer.Option(False, "--run", help="Run the file after generating it"),
    manifest: Path | None = typer.Option(
        None, "--manifest", "-m", help="Path to neuro.toml (default: ./neuro.toml)"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """
    Generate a TypeScript file from a neuro source file.

    Pinned functions keep the body they have in the existing output file.
    """
    configure_logging(verbose)
    config = load_config(manifest)
    contents = _read_source(file)

    output_path = Path(output) if output else config.build.default_output_path(file)
    to_stdout = str(output_path) == STDOUT_PATH

    result = parse_source(contents, read_previous_output(output_path), file, output_path)
    if not result.ok:
        typer.echo("Failed to parse program", err=True)
        typer.echo(result.error, err=True)
        raise typer.Exit(code=1)
    program = result.unwrap()

    if not quiet:
        typer.echo("Parsed successfully...")
        typer.echo("Generating code...")

    try:
        provider = create_provider(config.llm) if program.live_functions else None
        code = generate_program(
            program, provider, strict=config.generation.strict_empty_responses
        )
    except Exception as e:
        logger.debug("Generation failed", exc_info=True)
        typer.echo(f"Error generating code: {e}", err=True)
        raise typer.Exit(code=1)

    if not quiet:
        typer.echo(f"Writing to {output_path}")

    if to_stdout:
        typer.echo(code)
    else:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(code, encoding="utf-8")

    if run:
        if to_stdout:
            typer.echo("Error: Cannot run output written to /dev/stdout", err=True)
            raise typer.Exit(code=1)
        if not quiet:
            typer.echo("Running program")
        try:
            returncode = run_file(config.build.run_command, output_path)
        except FileNotFoundError:
            typer.echo(f"Error: Run command not found: {config.build.run_command[0]}", err=True)
            raise typer.Exit(code=1)
        if returncode != 0:
            raise typer.Exit(code=returncode)


@app.command("check")
def check_command(
    file: Path = typer.Option(..., "--file", help="The source file to check"),
    output: str | None = typer.Option(
        None, "--output", "-o", help="Previous output to pin against (default: build/<file>.ts)"
    ),
    manifest: Path | None = typer.Option(
        None, "--manifest", "-m", help="Path to neuro.toml (default: ./neuro.toml)"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """
    Parse a source file and list its constructs.

    Never contacts a completion provider.
    """
    configure_logging(verbose)
    config = load_config(manifest)
    contents = _read_source(file)
    output_path = Path(output) if output else config.build.default_output_path(file)

    result = parse_source(contents, read_previous_output(output_path), file, output_path)
    if not result.ok:
        typer.echo("Failed to parse program", err=True)
        typer.echo(result.error, err=True)
        raise typer.Exit(code=1)
    program = result.unwrap()

    table = Table(title=f"{file.name}: {len(program.constructs)} construct(s)")
    table.add_column("#", justify="right")
    table.add_column("Kind")
    table.add_column("Name")
    table.add_column("Detail")
    for index, construct in enumerate(program.constructs, start=1):
        table.add_row(str(index), *_describe(construct))
    console.print(table)


def main(argv: list[str] | None = None) -> None:
    app(args=argv, standalone_mode=True)


if __name__ == "__main__":
    main(sys.argv[1:])
