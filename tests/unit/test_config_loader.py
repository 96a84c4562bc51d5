"""Unit tests for YAML and environment config loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from hebrew_palindromes.config import AppConfig, ConfigLoader, RuntimeConfigSources
from hebrew_palindromes.errors import ScanConfigurationError


def test_config_loader_from_yaml_loads_valid_config_and_normalizes_values(
    tmp_path: Path,
) -> None:
    """YAML loader should parse typed values and strip strings."""

    config_path = tmp_path / "palindromes.yaml"
    config_path.write_text(
        "\n".join(
            [
                "min_length: 4",
                "max_length: '20'",
                "model: ' gemini-1.5-pro '",
                "identify_sources: 'yes'",
                "temperature: 0.2",
                "request_interval_seconds: 0",
            ]
        ),
        encoding="utf-8",
    )

    config = ConfigLoader.from_yaml(config_path)

    assert config.min_length == 4
    assert config.max_length == 20
    assert config.model == "gemini-1.5-pro"
    assert config.identify_sources is True
    assert config.temperature == 0.2
    assert config.request_interval_seconds == 0.0
    assert config.provider == "gemini"


def test_config_loader_from_yaml_accepts_empty_file(tmp_path: Path) -> None:
    """An empty YAML document should produce defaults."""

    config_path = tmp_path / "empty.yaml"
    config_path.write_text("", encoding="utf-8")

    config = ConfigLoader.from_yaml(config_path)

    assert (config.min_length, config.max_length) == (3, 50)
    assert config.identify_sources is False


def test_config_loader_from_yaml_rejects_unknown_keys_and_bad_documents(
    tmp_path: Path,
) -> None:
    """Unknown keys, non-mapping roots, and invalid YAML should be rejected."""

    unknown = tmp_path / "unknown.yaml"
    unknown.write_text("min_length: 3\nextra:\n  team: tanakh\n", encoding="utf-8")
    listing = tmp_path / "list.yaml"
    listing.write_text("- 1\n- 2\n", encoding="utf-8")
    broken = tmp_path / "broken.yaml"
    broken.write_text("min_length: [\n", encoding="utf-8")

    with pytest.raises(ValueError, match="unsupported key\\(s\\): extra"):
        ConfigLoader.from_yaml(unknown)
    with pytest.raises(ValueError, match="top-level mapping"):
        ConfigLoader.from_yaml(listing)
    with pytest.raises(ValueError, match="not valid YAML"):
        ConfigLoader.from_yaml(broken)


def test_config_loader_from_yaml_rejects_invalid_typed_values(tmp_path: Path) -> None:
    """Typed fields should fail with the source label and field name."""

    config_path = tmp_path / "bad.yaml"
    config_path.write_text("min_length: zero\n", encoding="utf-8")

    with pytest.raises(ValueError, match="field `min_length` must be a positive integer"):
        ConfigLoader.from_yaml(config_path)


def test_config_loader_rejects_inverted_bounds(tmp_path: Path) -> None:
    """Inverted scan bounds should raise the scan configuration error."""

    config_path = tmp_path / "inverted.yaml"
    config_path.write_text("min_length: 10\nmax_length: 5\n", encoding="utf-8")

    with pytest.raises(ScanConfigurationError, match="max_length"):
        ConfigLoader.from_yaml(config_path)


def test_config_loader_from_env_loads_runtime_values_and_normalizes_blanks() -> None:
    """Env loader should read prefixed keys, the API key, and skip blanks."""

    config = ConfigLoader.from_env(
        {
            "HEBREW_PALINDROMES_MIN_LENGTH": "4",
            "HEBREW_PALINDROMES_MODEL": "   ",
            "HEBREW_PALINDROMES_IDENTIFY_SOURCES": "on",
            "GEMINI_API_KEY": " env-key ",
            "UNRELATED": "value",
        }
    )

    assert config.min_length == 4
    assert config.model == "gemini-2.0-flash"
    assert config.identify_sources is True
    assert config.api_key == "env-key"
    assert dict(config.runtime_sources.env) == {
        "HEBREW_PALINDROMES_MIN_LENGTH": "4",
        "HEBREW_PALINDROMES_IDENTIFY_SOURCES": "on",
        "GEMINI_API_KEY": " env-key ",
    }


def test_config_loader_from_env_rejects_invalid_values() -> None:
    """Invalid env values should raise actionable errors."""

    with pytest.raises(ValueError, match="identify_sources"):
        ConfigLoader.from_env({"HEBREW_PALINDROMES_IDENTIFY_SOURCES": "maybe"})
    with pytest.raises(ValueError, match="Unsupported `provider`"):
        ConfigLoader.from_env({"HEBREW_PALINDROMES_PROVIDER": "openai"})


def test_resolved_provider_runtime_applies_source_precedence() -> None:
    """CLI values should win over secure storage, env, and config defaults."""

    config = AppConfig(model="config-model", api_key="config-key")
    env = {"GEMINI_API_KEY": "env-key", "HEBREW_PALINDROMES_MODEL": "env-model"}

    from_cli = config.resolved_provider_runtime(
        RuntimeConfigSources(
            cli={"model": "cli-model"},
            secure={"api_key": "secure-key"},
            env=env,
        )
    )
    from_env = config.resolved_provider_runtime(RuntimeConfigSources(env=env))
    from_defaults = config.resolved_provider_runtime()

    assert (from_cli.model, from_cli.api_key) == ("cli-model", "secure-key")
    assert (from_env.model, from_env.api_key) == ("env-model", "env-key")
    assert (from_defaults.model, from_defaults.api_key) == ("config-model", "config-key")
    assert AppConfig().resolved_provider_runtime().api_key is None


def test_app_config_validate_rejects_bad_provider_settings() -> None:
    """Validation should reject non-positive timeouts and token caps."""

    with pytest.raises(ValueError, match="timeout_seconds"):
        AppConfig(timeout_seconds=0).validate()
    with pytest.raises(ValueError, match="max_output_tokens"):
        AppConfig(max_output_tokens=0).validate()
    with pytest.raises(ScanConfigurationError):
        AppConfig(min_length=0).validate()
