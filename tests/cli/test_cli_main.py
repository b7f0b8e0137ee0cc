"""Tests for the sllmi command line."""

import logging
import typing

import pytest
from typer.testing import CliRunner

from sllmi.cli import main as cli_main
from sllmi.registry import ModelRegistry
from tests.fixtures.fake_provider import FakeModel, KeyScript

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_root_logging():
    """The CLI callback reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def fake_model():
    return FakeModel(
        ["k1"],
        scripts={"k1": KeyScript(text="The sea is wide.", chunks=["The sea ", "is wide."])},
        model_code="fake-model",
    )


@pytest.fixture
def fake_registry(monkeypatch, fake_model):
    registry = ModelRegistry({"fake-model": fake_model})
    monkeypatch.setattr(cli_main, "create_registry", lambda: registry)
    return registry


@pytest.mark.unit
def test_version():
    result = runner.invoke(cli_main.app, ["version"])

    assert result.exit_code == 0
    assert "sllmi" in result.output


@pytest.mark.unit
def test_models_lists_registry(fake_registry):
    result = runner.invoke(cli_main.app, ["models"])

    assert result.exit_code == 0
    assert "fake-model" in result.output


@pytest.mark.unit
def test_models_reports_missing_keys():
    result = runner.invoke(cli_main.app, ["models"])

    assert result.exit_code == 1
    assert "GENAI_API_KEYS" in result.output


@pytest.mark.unit
def test_generate_prints_text(fake_registry, fake_model):
    result = runner.invoke(
        cli_main.app,
        ["generate", "fake-model", "Describe the sea", "--temperature", "0.3", "--max-tokens", "50"],
    )

    assert result.exit_code == 0
    assert "The sea is wide." in result.output
    config = fake_model.seen_configs[-1]
    assert config.temperature == 0.3
    assert config.output_length == 50
    assert config.top_k is None


@pytest.mark.unit
def test_generate_stream_prints_chunks(fake_registry):
    result = runner.invoke(cli_main.app, ["generate", "fake-model", "Describe the sea", "--stream"])

    assert result.exit_code == 0
    assert "The sea is wide." in result.output


@pytest.mark.unit
def test_generate_unknown_model(fake_registry):
    result = runner.invoke(cli_main.app, ["generate", "nope", "hi"])

    assert result.exit_code == 1
    assert "model_not_found" in result.output


@pytest.mark.unit
def test_generate_all_keys_failed(monkeypatch):
    registry = ModelRegistry({"broken": FakeModel(["bad1", "bad2"], model_code="broken")})
    monkeypatch.setattr(cli_main, "create_registry", lambda: registry)

    result = runner.invoke(cli_main.app, ["generate", "broken", "hi"])

    assert result.exit_code == 1
    assert "all API keys failed" in result.output


@pytest.mark.unit
def test_tokens(fake_registry):
    result = runner.invoke(cli_main.app, ["tokens", "fake-model", "hello world"])

    assert result.exit_code == 0
    assert result.output.strip() == "2"


@pytest.mark.unit
def test_config_reports_invalid_settings(monkeypatch):
    monkeypatch.setenv("STREAM_BUFFER_SIZE", "zero")

    result = runner.invoke(cli_main.app, ["config"])

    assert result.exit_code == 1
    assert "STREAM_BUFFER_SIZE" in result.output


@pytest.mark.unit
def test_config_valid():
    result = runner.invoke(cli_main.app, ["config"])

    assert result.exit_code == 0
    assert "Configuration is valid" in result.output


@pytest.mark.unit
def test_config_reports_blank_log_level(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "  ")

    result = runner.invoke(cli_main.app, ["config"])

    assert result.exit_code == 1
    assert "LOG_LEVEL" in result.output


@pytest.mark.unit
def test_error_helpers_are_typed():
    assert typing.get_type_hints(cli_main._fail)["return"] is typing.NoReturn
    assert typing.get_type_hints(cli_main._load_registry)["return"] is ModelRegistry
