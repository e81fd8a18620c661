"""
Project configuration from ``neuro.toml``.

Every section is optional; a missing file yields the defaults. Environment
variables override the LLM section so a single run can switch models.
"""

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from .errors import ConfigError

MANIFEST_NAME = "neuro.toml"

PROVIDERS = ("openai", "anthropic")

DEFAULT_MODELS = {
    "openai": "gpt-3.5-turbo",
    "anthropic": "claude-3-5-sonnet-20241022",
}


@dataclass
class LLMConfig:
    """Completion provider settings."""

    provider: str = "openai"  # "openai" | "anthropic"
    model: str | None = None  # None = provider default
    temperature: float = 1.0
    max_tokens: int = 4096
    api_key_env: str | None = None

    @property
    def resolved_model(self) -> str:
        return self.model or DEFAULT_MODELS[self.provider]


@dataclass
class GenerationConfig:
    """Generation behaviour."""

    strict_empty_responses: bool = False


@dataclass
class BuildConfig:
    """Output location and how to run the generated file."""

    output_dir: str = "build"
    extension: str = ".ts"
    run_command: list[str] = field(default_factory=lambda: ["npx", "ts-node"])

    def default_output_path(self, source: Path) -> Path:
        """``build/<source name>.ts`` for a source file."""
        return Path(self.output_dir) / f"{source.name}{self.extension}"


@dataclass
class ProjectManifest:
    llm: LLMConfig = field(default_factory=LLMConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    build: BuildConfig = field(default_factory=BuildConfig)


def _get(
    section: Mapping[str, Any], key: str, expected: type | tuple[type, ...], default: Any
) -> Any:
    value = section.get(key, default)
    if value is not None and not isinstance(value, expected):
        raise ConfigError(f"Invalid value for '{key}' in {MANIFEST_NAME}: {value!r}")
    return value


def parse_manifest(data: Mapping[str, Any]) -> ProjectManifest:
    """
    Build a manifest from already-decoded TOML data.

    Raises:
        ConfigError: On unknown providers or wrongly typed values
    """
    llm_data = data.get("llm", {})
    generation_data = data.get("generation", {})
    build_data = data.get("build", {})

    provider = _get(llm_data, "provider", str, "openai")
    if provider not in PROVIDERS:
        raise ConfigError(f"Unknown LLM provider: {provider!r} (expected one of {PROVIDERS})")

    llm = LLMConfig(
        provider=provider,
        model=_get(llm_data, "model", str, None),
        temperature=float(_get(llm_data, "temperature", (int, float), 1.0)),
        max_tokens=_get(llm_data, "max_tokens", int, 4096),
        api_key_env=_get(llm_data, "api_key_env", str, None),
    )

    generation = GenerationConfig(
        strict_empty_responses=_get(generation_data, "strict_empty_responses", bool, False),
    )

    run_command = _get(build_data, "run_command", list, ["npx", "ts-node"])
    if not all(isinstance(part, str) for part in run_command):
        raise ConfigError(f"Invalid value for 'run_command' in {MANIFEST_NAME}: {run_command!r}")

    build = BuildConfig(
        output_dir=_get(build_data, "output_dir", str, "build"),
        extension=_get(build_data, "extension", str, ".ts"),
        run_command=run_command,
    )

    return ProjectManifest(llm=llm, generation=generation, build=build)


def load_manifest(path: Path) -> ProjectManifest:
    """
    Load ``neuro.toml``.

    Raises:
        ConfigError: If the file is not valid TOML or has invalid values
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}")
    return parse_manifest(data)


def find_manifest(start: Path | None = None) -> ProjectManifest:
    """Load ``neuro.toml`` from ``start`` (default: cwd), or defaults if absent."""
    path = (start or Path.cwd()) / MANIFEST_NAME
    if path.is_file():
        return load_manifest(path)
    return ProjectManifest()


def apply_env_overrides(
    manifest: ProjectManifest, environ: Mapping[str, str] | None = None
) -> ProjectManifest:
    """
    Apply environment overrides to the LLM section.

    - NEURO_LLM_PROVIDER: provider name
    - NEURO_LLM_MODEL: model name
    - OPENAI_GPT_MODEL: model name, OpenAI provider only
    """
    env = os.environ if environ is None else environ
    llm = manifest.llm

    provider = env.get("NEURO_LLM_PROVIDER")
    if provider:
        if provider not in PROVIDERS:
            raise ConfigError(f"Unknown LLM provider in NEURO_LLM_PROVIDER: {provider!r}")
        if provider != llm.provider:
            # A model name belongs to its provider
            llm = replace(llm, provider=provider, model=None)

    model = env.get("NEURO_LLM_MODEL")
    if not model and llm.provider == "openai":
        model = env.get("OPENAI_GPT_MODEL")
    if model:
        llm = replace(llm, model=model)

    return replace(manifest, llm=llm)
