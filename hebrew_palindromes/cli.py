"""Command-line interface for Hebrew palindrome scanning.

Responsibilities:
- Expose user-facing commands for scanning, AI discovery, and source lookup.
- Convert CLI arguments into `AppConfig` and explicitly constructed services.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated

import typer

from .annotation import annotate, lookup_sources
from .cli_rendering import (
    echo_discovery,
    echo_json,
    echo_scan_results,
    echo_source_lookup,
    exit_with_command_error,
)
from .cli_runtime import prompt_hidden_api_key, resolve_provider_runtime_sources
from .config import AppConfig, ConfigLoader, RuntimeConfigSources
from .credentials import CredentialStoreError, create_credential_store
from .errors import CommandStageError, ScanConfigurationError
from .llm.gemini_client import GeminiProviderError
from .llm.service import PalindromeAIService
from .models.datatypes import DiscoveryStatus, SourceLookupStatus
from .provider_factory import ProviderFactory
from .telemetry.logger import RunLogger
from .text.palindromes import PalindromeScanner

app = typer.Typer(
    name="hebrew-palindromes",
    no_args_is_help=True,
    help="Find Hebrew palindromes in text and look up their biblical sources.",
)

_PROVIDER_HINTS = {
    "invalid_api_key": (
        "Set `GEMINI_API_KEY`, pass `--api-key`, or run "
        "`hebrew-palindromes credentials --set-api-key`."
    ),
    "insufficient_quota": "Wait for the quota window to reset or use a key with more quota.",
    "invalid_model": "Pass a supported Gemini model id via `--model`.",
    "timeout": "Retry, or raise `timeout_seconds` in the config file.",
    "transport": "Check network connectivity and retry.",
}

ModelOption = Annotated[
    str | None, typer.Option("--model", help="Gemini model id override.")
]
ApiKeyOption = Annotated[
    str | None,
    typer.Option(
        "--api-key",
        help="Gemini API key override. Prefer `--prompt-api-key` to avoid shell history.",
    ),
]
PromptApiKeyOption = Annotated[
    bool,
    typer.Option("--prompt-api-key", help="Prompt for API key with hidden input."),
]
StoreApiKeyOption = Annotated[
    bool,
    typer.Option(
        "--store-api-key/--no-store-api-key",
        help="Save a CLI-entered API key to the system keyring.",
    ),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="Path to YAML config file with command defaults."),
]
JsonOption = Annotated[bool, typer.Option("--json", help="Print results as JSON.")]
VerboseOption = Annotated[
    bool, typer.Option("--verbose", "-v", help="Print phase logs to stderr.")
]


def _load_config(config_path: Path | None) -> AppConfig:
    """Load YAML or environment config and map failures to stage errors."""

    try:
        if config_path is None:
            return ConfigLoader.from_env()
        return ConfigLoader.from_yaml(config_path)
    except FileNotFoundError as exc:
        raise CommandStageError(
            stage="config",
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        source = f"config file `{config_path}`" if config_path else "environment config"
        raise CommandStageError(
            stage="config",
            detail=f"Invalid {source}: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc


def _apply_scan_overrides(
    config: AppConfig,
    min_length: int | None,
    max_length: int | None,
    identify_sources: bool | None,
) -> AppConfig:
    """Apply explicit CLI scan options on top of loaded config."""

    if min_length is not None:
        config.min_length = min_length
    if max_length is not None:
        config.max_length = max_length
    if identify_sources is not None:
        config.identify_sources = identify_sources
    try:
        config.validate()
    except ScanConfigurationError as exc:
        raise CommandStageError(
            stage="config",
            detail=str(exc),
            hint="Use a positive `--min-length` and a `--max-length` no smaller than it.",
        ) from exc
    return config


def _read_input_text(text: str | None, input_file: Path | None) -> str:
    """Return scan input from the argument, a UTF-8 file, or stdin."""

    if text is not None and input_file is not None:
        raise CommandStageError(
            stage="input",
            detail="Provide either a TEXT argument or `--file`, not both.",
        )
    if input_file is not None:
        try:
            return input_file.read_text(encoding="utf-8")
        except OSError as exc:
            raise CommandStageError(
                stage="input",
                detail=f"Failed to read input file `{input_file}`: {exc}",
                hint="Verify the file exists and is UTF-8 encoded.",
            ) from exc
    if text is not None:
        return text
    return typer.get_text_stream("stdin").read()


def _create_ai_service(
    config: AppConfig,
    stage: str,
    model: str | None,
    api_key: str | None,
    prompt_api_key: bool,
    store_api_key: bool,
) -> PalindromeAIService:
    """Resolve provider sources and build a configured AI service."""

    runtime_cli_values, runtime_secure_values = resolve_provider_runtime_sources(
        model=model,
        api_key=api_key,
        prompt_api_key=prompt_api_key,
        store_api_key=store_api_key,
        credential_store_factory=create_credential_store,
    )
    sources = RuntimeConfigSources(
        cli=runtime_cli_values,
        secure=runtime_secure_values,
        env=os.environ,
    )
    service = ProviderFactory.create_ai_service(config.with_runtime_sources(sources))
    if not service.is_configured():
        raise CommandStageError(
            stage=stage,
            detail="Gemini API key is not configured.",
            hint=_PROVIDER_HINTS["invalid_api_key"],
        )
    return service


def _provider_stage_error(stage: str, exc: GeminiProviderError) -> CommandStageError:
    """Convert a provider failure into a stage error with a remediation hint."""

    return CommandStageError(
        stage=stage,
        detail=str(exc),
        hint=_PROVIDER_HINTS.get(exc.failure_kind),
    )


@app.command("scan")
def scan_command(
    text: Annotated[
        str | None,
        typer.Argument(help="Text to scan. Reads `--file` or stdin when omitted."),
    ] = None,
    input_file: Annotated[
        Path | None,
        typer.Option("--file", "-f", help="UTF-8 text file to scan."),
    ] = None,
    config_file: ConfigOption = None,
    min_length: Annotated[
        int | None,
        typer.Option("--min-length", help="Smallest normalized palindrome length."),
    ] = None,
    max_length: Annotated[
        int | None,
        typer.Option("--max-length", help="Largest normalized palindrome length."),
    ] = None,
    identify_sources: Annotated[
        bool | None,
        typer.Option(
            "--identify-sources/--no-identify-sources",
            help="Ask the AI service for the biblical source of each result.",
        ),
    ] = None,
    model: ModelOption = None,
    api_key: ApiKeyOption = None,
    prompt_api_key: PromptApiKeyOption = False,
    store_api_key: StoreApiKeyOption = True,
    as_json: JsonOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Find palindromes in text, longest first."""

    try:
        run_logger = RunLogger(level="INFO" if verbose else "WARNING")
        config = _apply_scan_overrides(
            _load_config(config_file), min_length, max_length, identify_sources
        )
        source_text = _read_input_text(text, input_file)

        run_logger.log_stage_start("scan", chars=len(source_text))
        scanner = PalindromeScanner(min_length=config.min_length, max_length=config.max_length)
        entries = annotate(scanner.scan(source_text))
        run_logger.log_stage_complete("scan", results=len(entries))

        if config.identify_sources and entries:
            service = _create_ai_service(
                config, "identify-source", model, api_key, prompt_api_key, store_api_key
            )
            run_logger.log_stage_start("identify-source", results=len(entries))
            entries = lookup_sources(entries, service, run_logger=run_logger)
            run_logger.log_stage_complete("identify-source")
    except Exception as exc:
        exit_with_command_error("scan", exc)

    if as_json:
        echo_json([entry.as_dict() for entry in entries])
    else:
        echo_scan_results(entries)


@app.command("discover")
def discover_command(
    prompt: Annotated[
        str | None,
        typer.Option("--prompt", "-p", help="Optional guidance for the AI discovery."),
    ] = None,
    config_file: ConfigOption = None,
    model: ModelOption = None,
    api_key: ApiKeyOption = None,
    prompt_api_key: PromptApiKeyOption = False,
    store_api_key: StoreApiKeyOption = True,
    as_json: JsonOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Ask the AI service for palindromes found in the Tanakh."""

    try:
        run_logger = RunLogger(level="INFO" if verbose else "WARNING")
        config = _load_config(config_file)
        service = _create_ai_service(
            config, "discover", model, api_key, prompt_api_key, store_api_key
        )
        run_logger.log_stage_start("discover")
        try:
            outcome = service.discover_palindromes(prompt)
        except GeminiProviderError as exc:
            run_logger.log_stage_failure("discover", exc.failure_kind)
            raise _provider_stage_error("discover", exc) from exc
        run_logger.log_stage_complete(
            "discover", status=outcome.status.value, results=len(outcome.palindromes)
        )
    except Exception as exc:
        exit_with_command_error("discover", exc)

    if as_json:
        echo_json(
            {
                "status": outcome.status.value,
                "palindromes": [item.as_dict() for item in outcome.palindromes],
                "detail": outcome.detail,
            }
        )
    else:
        echo_discovery(outcome)
    if outcome.status is DiscoveryStatus.PARSE_FAILURE:
        raise typer.Exit(code=1)


@app.command("identify-source")
def identify_source_command(
    text: Annotated[str, typer.Argument(help="Hebrew text to locate in the Tanakh.")],
    config_file: ConfigOption = None,
    model: ModelOption = None,
    api_key: ApiKeyOption = None,
    prompt_api_key: PromptApiKeyOption = False,
    store_api_key: StoreApiKeyOption = True,
    as_json: JsonOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Ask the AI service where a text appears in the Hebrew Bible."""

    try:
        run_logger = RunLogger(level="INFO" if verbose else "WARNING")
        if not text.strip():
            raise CommandStageError(stage="input", detail="Text to identify is empty.")
        config = _load_config(config_file)
        service = _create_ai_service(
            config, "identify-source", model, api_key, prompt_api_key, store_api_key
        )
        run_logger.log_stage_start("identify-source")
        try:
            outcome = service.identify_source(text)
        except GeminiProviderError as exc:
            run_logger.log_stage_failure("identify-source", exc.failure_kind)
            raise _provider_stage_error("identify-source", exc) from exc
        run_logger.log_stage_complete("identify-source", status=outcome.status.value)
    except Exception as exc:
        exit_with_command_error("identify-source", exc)

    if as_json:
        echo_json(
            {
                "status": outcome.status.value,
                "source": outcome.source.as_dict() if outcome.source else None,
                "confidence": outcome.confidence,
                "detail": outcome.detail,
            }
        )
    else:
        echo_source_lookup(text.strip(), outcome)
    if outcome.status is SourceLookupStatus.PARSE_FAILURE:
        raise typer.Exit(code=1)


@app.command("credentials")
def credentials_command(
    set_api_key: Annotated[
        bool,
        typer.Option(
            "--set-api-key",
            help="Prompt for API key with hidden input and store it securely.",
        ),
    ] = False,
    clear_api_key: Annotated[
        bool,
        typer.Option(
            "--clear-api-key",
            help="Remove the stored Gemini API key from the system keyring.",
        ),
    ] = False,
) -> None:
    """Manage the securely stored Gemini API key."""

    if set_api_key and clear_api_key:
        exit_with_command_error(
            "credentials",
            CommandStageError(
                stage="credentials",
                detail="`--set-api-key` and `--clear-api-key` cannot be used together.",
                hint="Run one credentials action per command invocation.",
            ),
        )

    credential_store = create_credential_store()
    if set_api_key:
        if not credential_store.is_available():
            exit_with_command_error(
                "credentials",
                CommandStageError(
                    stage="credentials",
                    detail="No keyring backend is available on this system.",
                    hint=(
                        "Install a keyring backend (for example `keyrings.alt` on headless "
                        "hosts), or set `GEMINI_API_KEY` instead."
                    ),
                ),
            )
        prompted_api_key = prompt_hidden_api_key("Gemini API key (hidden input)")
        if prompted_api_key is None:
            exit_with_command_error(
                "credentials",
                CommandStageError(
                    stage="credentials",
                    detail="No API key entered.",
                    hint="Provide a non-empty API key when using `--set-api-key`.",
                ),
            )
        try:
            credential_store.set_api_key(prompted_api_key)
        except CredentialStoreError as exc:
            exit_with_command_error(
                "credentials",
                CommandStageError(stage="credentials", detail=str(exc)),
            )
        typer.echo("Saved the Gemini API key to the system keyring.")
        return

    if clear_api_key:
        if credential_store.clear_api_key():
            typer.echo("Removed the Gemini API key from the system keyring.")
        else:
            typer.echo("No Gemini API key is stored in the system keyring.")
        return

    stored_api_key = credential_store.get_api_key()
    if stored_api_key is not None:
        status = "present"
    elif credential_store.last_error:
        status = f"unreadable ({credential_store.last_error})"
    else:
        status = "not set"
    availability = "available" if credential_store.is_available() else "unavailable"
    typer.echo(f"Keyring backend: {availability}")
    typer.echo(f"Stored Gemini API key: {status}")


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
