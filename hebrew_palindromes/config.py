"""Configuration model and loaders for Hebrew palindrome scanning.

Responsibilities:
- Define scan and AI-provider settings as a typed dataclass.
- Provide deterministic precedence resolution for provider runtime settings.
- Provide loader entry points for YAML- and environment-based configuration.

Key types:
- `AppConfig`: normalized settings for one CLI invocation.
- `ProviderRuntimeConfig`: resolved provider/model/key values.
- `RuntimeConfigSources`: optional value sources for precedence resolution.
- `ConfigLoader`: static construction helpers for `AppConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .llm.gemini_client import DEFAULT_GEMINI_BASE_URL
from .parsing import (
    normalize_optional_string,
    parse_non_negative_float,
    parse_positive_int,
    parse_required_boolean,
)
from .text.palindromes import DEFAULT_MAX_LENGTH, DEFAULT_MIN_LENGTH, validate_length_bounds


DEFAULT_PROVIDER = "gemini"
DEFAULT_MODEL = "gemini-2.0-flash"
_SUPPORTED_PROVIDER_IDS = frozenset({"gemini"})

ENV_PREFIX = "HEBREW_PALINDROMES_"
API_KEY_ENV = "GEMINI_API_KEY"


@dataclass(frozen=True, slots=True)
class RuntimeConfigSources:
    """Source mappings used for deterministic runtime value precedence.

    Attributes:
        cli: Values explicitly provided by CLI arguments.
        secure: Values loaded from secure local credential storage.
        env: Values loaded from environment variables.
    """

    cli: Mapping[str, str] = field(default_factory=dict)
    secure: Mapping[str, str] = field(default_factory=dict)
    env: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ProviderRuntimeConfig:
    """Resolved AI provider settings for one invocation.

    Attributes:
        provider: Provider identifier.
        model: Model identifier.
        base_url: REST API base URL.
        api_key: Optional provider API key (never logged or echoed).
    """

    provider: str
    model: str
    base_url: str
    api_key: str | None = None


@dataclass(slots=True)
class AppConfig:
    """Settings for scanning text and calling the AI collaborator.

    Attributes:
        min_length: Smallest normalized palindrome length to report.
        max_length: Largest normalized palindrome length to report.
        provider: AI provider identifier.
        model: AI model identifier.
        api_key: Optional API key for provider calls.
        base_url: Provider REST API base URL.
        timeout_seconds: Per-request timeout.
        temperature: Sampling temperature for AI requests.
        max_output_tokens: Output token cap for AI requests.
        request_interval_seconds: Minimum spacing between AI requests.
        identify_sources: Whether scans look up biblical sources for each result.
        runtime_sources: Optional runtime source overrides injected by CLI.
    """

    min_length: int = DEFAULT_MIN_LENGTH
    max_length: int = DEFAULT_MAX_LENGTH
    provider: str = DEFAULT_PROVIDER
    model: str = DEFAULT_MODEL
    api_key: str | None = None
    base_url: str = DEFAULT_GEMINI_BASE_URL
    timeout_seconds: float = 60.0
    temperature: float = 0.7
    max_output_tokens: int = 2048
    request_interval_seconds: float = 0.5
    identify_sources: bool = False
    runtime_sources: RuntimeConfigSources = field(default_factory=RuntimeConfigSources)

    def validate(self) -> None:
        """Validate configuration values before use.

        Raises:
            ScanConfigurationError: If scan length bounds are misconfigured.
            ValueError: If provider settings are invalid.
        """

        validate_length_bounds(self.min_length, self.max_length)
        self._validate_provider_id(self.provider)
        self._require_non_empty(self.model, "model")
        self._require_non_empty(self.base_url, "base_url")
        if self.timeout_seconds <= 0:
            raise ValueError("`timeout_seconds` must be positive.")
        if self.temperature < 0:
            raise ValueError("`temperature` must be a non-negative number.")
        if self.max_output_tokens <= 0:
            raise ValueError("`max_output_tokens` must be a positive integer.")
        if self.request_interval_seconds < 0:
            raise ValueError("`request_interval_seconds` must be a non-negative number.")

    def with_runtime_sources(self, sources: RuntimeConfigSources) -> AppConfig:
        """Return a copy of this config carrying `sources`."""

        return replace(self, runtime_sources=sources)

    def resolved_provider_runtime(
        self, sources: RuntimeConfigSources | None = None
    ) -> ProviderRuntimeConfig:
        """Resolve provider settings with deterministic source precedence.

        Precedence for each key is:
        `cli` > `secure` > `env` > config field default.
        """

        resolved_sources = sources if sources is not None else self.runtime_sources

        provider = self._resolve_runtime_value(
            key="provider",
            env_key=f"{ENV_PREFIX}PROVIDER",
            default_value=self.provider,
            sources=resolved_sources,
        )
        model = self._resolve_runtime_value(
            key="model",
            env_key=f"{ENV_PREFIX}MODEL",
            default_value=self.model,
            sources=resolved_sources,
        )
        base_url = self._resolve_runtime_value(
            key="base_url",
            env_key=f"{ENV_PREFIX}BASE_URL",
            default_value=self.base_url,
            sources=resolved_sources,
        )
        api_key = self._resolve_optional_runtime_value(
            key="api_key",
            env_key=API_KEY_ENV,
            default_value=self.api_key,
            sources=resolved_sources,
        )

        self._validate_provider_id(provider)
        return ProviderRuntimeConfig(
            provider=provider,
            model=model,
            base_url=base_url,
            api_key=api_key,
        )

    def _resolve_runtime_value(
        self,
        key: str,
        env_key: str,
        default_value: str | None,
        sources: RuntimeConfigSources,
    ) -> str:
        """Resolve a required runtime value from sources in precedence order."""

        resolved = self._resolve_optional_runtime_value(key, env_key, default_value, sources)
        if resolved is None:
            raise ValueError(
                f"`{key}` could not be resolved from CLI, secure storage, env, or defaults."
            )
        return resolved

    def _resolve_optional_runtime_value(
        self,
        key: str,
        env_key: str,
        default_value: str | None,
        sources: RuntimeConfigSources,
    ) -> str | None:
        """Resolve an optional runtime value from sources in precedence order."""

        for mapping, lookup_key in (
            (sources.cli, key),
            (sources.secure, key),
            (sources.env, env_key),
        ):
            value = self._normalized_lookup(mapping, lookup_key)
            if value is not None:
                return value
        return normalize_optional_string(default_value)

    @staticmethod
    def _normalized_lookup(mapping: Mapping[str, str], key: str) -> str | None:
        """Return a stripped mapping value for a key or `None` when missing/blank."""

        if key not in mapping:
            return None
        return normalize_optional_string(mapping.get(key))

    @staticmethod
    def _validate_provider_id(provider_id: str) -> None:
        """Validate provider identifiers against currently supported providers."""

        if provider_id not in _SUPPORTED_PROVIDER_IDS:
            supported = ", ".join(sorted(_SUPPORTED_PROVIDER_IDS))
            raise ValueError(f"Unsupported `provider` value `{provider_id}`; supported: {supported}.")

    @staticmethod
    def _require_non_empty(value: str, field_name: str) -> None:
        """Validate that string fields are not empty."""

        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"`{field_name}` must be a non-empty string.")


class ConfigLoader:
    """Factory methods for creating `AppConfig` from external sources."""

    _INT_KEYS = frozenset({"min_length", "max_length", "max_output_tokens"})
    _FLOAT_KEYS = frozenset({"timeout_seconds", "temperature", "request_interval_seconds"})
    _STRING_KEYS = frozenset({"provider", "model", "api_key", "base_url"})
    _BOOL_KEYS = frozenset({"identify_sources"})
    _SUPPORTED_YAML_KEYS = (
        _INT_KEYS | _FLOAT_KEYS | _STRING_KEYS | _BOOL_KEYS
    )

    @staticmethod
    def from_yaml(path: Path) -> AppConfig:
        """Create a validated config from a YAML file."""

        path_text = path.read_text(encoding="utf-8")
        try:
            payload = yaml.safe_load(path_text)
        except yaml.YAMLError as exc:
            raise ValueError(f"YAML config `{path}` is not valid YAML: {exc}") from exc

        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return ConfigLoader._build_config_from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> AppConfig:
        """Create a validated config from `HEBREW_PALINDROMES_*` environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env

        payload: dict[str, Any] = {}
        for key in sorted(ConfigLoader._SUPPORTED_YAML_KEYS - {"api_key"}):
            value = normalize_optional_string(env_map.get(f"{ENV_PREFIX}{key.upper()}"))
            if value is not None:
                payload[key] = value
        api_key = normalize_optional_string(env_map.get(API_KEY_ENV))
        if api_key is not None:
            payload["api_key"] = api_key

        runtime_env = {
            key: value
            for key, value in env_map.items()
            if (key.startswith(ENV_PREFIX) or key == API_KEY_ENV)
            and normalize_optional_string(value) is not None
        }
        config = ConfigLoader._build_config_from_mapping(payload, source_label="Environment")
        return config.with_runtime_sources(RuntimeConfigSources(env=runtime_env))

    @staticmethod
    def _build_config_from_mapping(payload: Mapping[str, Any], source_label: str) -> AppConfig:
        """Build a validated config from a normalized mapping payload."""

        unknown = sorted(str(key) for key in set(payload) - ConfigLoader._SUPPORTED_YAML_KEYS)
        if unknown:
            raise ValueError(f"{source_label} includes unsupported key(s): {', '.join(unknown)}.")

        values: dict[str, Any] = {}
        for key in ConfigLoader._INT_KEYS & set(payload):
            values[key] = ConfigLoader._typed(
                payload[key], key, source_label, parse_positive_int
            )
        for key in ConfigLoader._FLOAT_KEYS & set(payload):
            values[key] = ConfigLoader._typed(
                payload[key], key, source_label, parse_non_negative_float
            )
        for key in ConfigLoader._BOOL_KEYS & set(payload):
            values[key] = ConfigLoader._typed(
                payload[key], key, source_label, parse_required_boolean
            )
        for key in ConfigLoader._STRING_KEYS & set(payload):
            value = normalize_optional_string(payload[key])
            if value is not None:
                values[key] = value

        config = AppConfig(**values)
        config.validate()
        return config

    @staticmethod
    def _typed(value: Any, key: str, source_label: str, parser: Any) -> Any:
        """Parse one typed field, prefixing errors with the source label."""

        try:
            return parser(value, key)
        except ValueError as exc:
            raise ValueError(f"{source_label} field {exc}") from exc

