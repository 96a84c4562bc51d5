"""Integration tests for AI-backed CLI commands with a mocked Gemini client."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from hebrew_palindromes.cli import app
from hebrew_palindromes.llm.gemini_client import GeminiClient, GeminiProviderError

_DISCOVERY_ANSWER = json.dumps(
    {
        "palindromes": [
            {
                "text": "אבא",
                "book": "בראשית",
                "chapter": "לב",
                "verse": "יא",
                "meaning": "הופעת המילה בהקשר משפחתי",
            }
        ]
    },
    ensure_ascii=False,
)
_FOUND_ANSWER = (
    '```json\n{"found": true, "book": "בראשית", "chapter": "לב", '
    '"verse": "יא", "confidence": 0.8}\n```'
)


def _mock_generate_text(answer: str, prompts: list[str] | None = None):  # type: ignore[no-untyped-def]
    """Build a `GeminiClient.generate_text` replacement returning `answer`."""

    def _generate_text(self: GeminiClient, **kwargs: object) -> str:
        if not self.api_key:
            raise AssertionError("CLI must not call the client without an API key")
        if prompts is not None:
            prompts.append(str(kwargs["prompt"]))
        return answer

    return _generate_text


def test_discover_command_prints_palindromes(monkeypatch: pytest.MonkeyPatch) -> None:
    """Discover should render AI results and pass user guidance into the prompt."""

    prompts: list[str] = []
    monkeypatch.setenv("GEMINI_API_KEY", "env-key")
    monkeypatch.setattr(GeminiClient, "generate_text", _mock_generate_text(_DISCOVERY_ANSWER, prompts))
    runner = CliRunner()

    result = runner.invoke(app, ["discover", "--prompt", "רק מבראשית"])

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == [
        "1. אבא (בראשית לב:יא)",
        "   הופעת המילה בהקשר משפחתי",
    ]
    assert "הנחיה מהמשתמש: רק מבראשית" in prompts[0]


def test_discover_command_requires_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    """Without any key source the command should fail before calling the provider."""

    monkeypatch.setattr(GeminiClient, "generate_text", _mock_generate_text(_DISCOVERY_ANSWER))
    runner = CliRunner()

    result = runner.invoke(app, ["discover"])

    assert result.exit_code == 1
    assert "discover failed at stage `discover`: Gemini API key is not configured." in result.output
    assert "credentials --set-api-key" in result.output


def test_discover_command_exits_nonzero_on_unparseable_answer(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """A prose-only answer should be reported, not shown as an empty result."""

    monkeypatch.setenv("GEMINI_API_KEY", "env-key")
    monkeypatch.setattr(GeminiClient, "generate_text", _mock_generate_text("Sorry, no idea."))
    runner = CliRunner()

    result = runner.invoke(app, ["discover"])

    assert result.exit_code == 1
    assert "AI response could not be parsed" in result.output
    assert "AI returned no palindromes." not in result.output


def test_discover_command_maps_provider_failures_to_hints(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Provider failures should exit with the stage name and a remediation hint."""

    def _raise_quota(self: GeminiClient, **_kwargs: object) -> str:
        raise GeminiProviderError(
            "Gemini quota or rate limit exceeded (HTTP 429): Quota exceeded.",
            failure_kind="insufficient_quota",
            status_code=429,
        )

    monkeypatch.setenv("GEMINI_API_KEY", "env-key")
    monkeypatch.setattr(GeminiClient, "generate_text", _raise_quota)
    runner = CliRunner()

    result = runner.invoke(app, ["discover"])

    assert result.exit_code == 1
    assert "discover failed at stage `discover`: Gemini quota or rate limit exceeded" in result.output
    assert "Hint: Wait for the quota window to reset" in result.output


def test_identify_source_command_emits_json(monkeypatch: pytest.MonkeyPatch) -> None:
    """`identify-source --json` should serialize status, source, and confidence."""

    monkeypatch.setattr(GeminiClient, "generate_text", _mock_generate_text(_FOUND_ANSWER))
    runner = CliRunner()

    result = runner.invoke(
        app, ["identify-source", "אבא", "--api-key", "cli-key", "--no-store-api-key", "--json"]
    )

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {
        "status": "found",
        "source": {"book": "בראשית", "chapter": "לב", "verse": "יא"},
        "confidence": 0.8,
        "detail": None,
    }


def test_scan_with_identify_sources_annotates_rows(monkeypatch: pytest.MonkeyPatch) -> None:
    """Scan should look up each result's source when requested."""

    monkeypatch.setattr(GeminiClient, "generate_text", _mock_generate_text(_FOUND_ANSWER))
    runner = CliRunner()

    result = runner.invoke(
        app,
        ["scan", "אבא", "--identify-sources", "--api-key", "cli-key", "--no-store-api-key"],
    )

    assert result.exit_code == 0, result.output
    assert "1. (3) אבא | אבא  [בראשית לב:יא]" in result.output


def test_scan_with_identify_sources_marks_failed_lookups(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Provider failures during scan lookups should tag rows instead of aborting."""

    def _raise_timeout(self: GeminiClient, **_kwargs: object) -> str:
        raise GeminiProviderError("Gemini request timed out.", failure_kind="timeout")

    monkeypatch.setenv("GEMINI_API_KEY", "env-key")
    monkeypatch.setattr(GeminiClient, "generate_text", _raise_timeout)
    runner = CliRunner()

    result = runner.invoke(app, ["scan", "אבא", "--identify-sources", "--json"])

    assert result.exit_code == 0, result.output
    payload_text = result.output[result.output.index("[\n") :]
    payload = json.loads(payload_text)
    assert payload[0]["lookup"] == "failed"
    assert payload[0]["error"] == "Gemini request timed out."
