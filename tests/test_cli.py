#!/usr/bin/env python3
"""
Tests for the command line boundary.
"""

import json
from pathlib import Path

import pytest

from conftest import StubProvider
from jassos import cli
from jassos.config import ConfigResolver


@pytest.fixture
def cli_resolver(resolver: ConfigResolver, monkeypatch) -> ConfigResolver:
	monkeypatch.setattr(cli, "ConfigResolver", lambda: resolver)
	return resolver


def test_parse_run_arguments():
	args = cli.parse_args(["run", "build a todo app", "-m", "gpt-4o", "--dry-run"])
	assert args.command == "run"
	assert args.prompt == "build a todo app"
	assert args.model == "gpt-4o"
	assert args.dry_run is True


def test_parse_start_continue():
	assert cli.parse_args(["start", "--continue"]).resume is True
	assert cli.parse_args(["start"]).resume is False


def test_init_stores_and_activates_provider(cli_resolver: ConfigResolver, monkeypatch, capsys):
	monkeypatch.setattr(cli.getpass, "getpass", lambda _prompt: " sk-ant \n")
	assert cli.main(["init", "-p", "anthropic"]) == 0
	data = json.loads(cli_resolver.global_path.read_text(encoding="utf-8"))
	assert data["active"] == "anthropic"
	assert data["providers"]["anthropic"] == {"apiKey": "sk-ant"}
	assert "Configured anthropic" in capsys.readouterr().out


def test_init_prompts_for_provider(cli_resolver: ConfigResolver, monkeypatch):
	monkeypatch.setattr("builtins.input", lambda _prompt: "3")
	monkeypatch.setattr(cli.getpass, "getpass", lambda _prompt: "g-key")
	assert cli.main(["init"]) == 0
	assert cli_resolver.get_effective().active == "gemini"


def _no_getpass(_prompt):
	raise AssertionError("no API key prompt expected")


def test_init_keyless_provider_asks_base_url_not_key(cli_resolver: ConfigResolver, monkeypatch):
	monkeypatch.setattr(cli.getpass, "getpass", _no_getpass)
	monkeypatch.setattr("builtins.input", lambda _prompt: "http://gpu:11434")
	assert cli.main(["init", "-p", "ollama"]) == 0
	data = json.loads(cli_resolver.global_path.read_text(encoding="utf-8"))
	assert data["active"] == "ollama"
	assert data["providers"]["ollama"] == {"apiKey": "", "baseUrl": "http://gpu:11434"}


def test_init_base_url_flag_skips_prompt(cli_resolver: ConfigResolver, monkeypatch):
	monkeypatch.setattr(cli.getpass, "getpass", _no_getpass)
	monkeypatch.setattr("builtins.input", _no_getpass)
	assert cli.main(["init", "-p", "ollama", "--base-url", "http://lab:11434"]) == 0
	assert cli_resolver.get_effective().providers["ollama"].base_url == "http://lab:11434"


def test_init_keyless_blank_base_url_uses_default(cli_resolver: ConfigResolver, monkeypatch):
	monkeypatch.setattr("builtins.input", lambda _prompt: "")
	assert cli.main(["init", "-p", "ollama"]) == 0
	assert cli_resolver.get_effective().providers["ollama"].to_dict() == {"apiKey": ""}


def test_init_keyed_provider_accepts_base_url(cli_resolver: ConfigResolver, monkeypatch):
	monkeypatch.setattr(cli.getpass, "getpass", lambda _prompt: "sk")
	assert cli.main(["init", "-p", "openai", "--base-url", "http://proxy/v1"]) == 0
	settings = cli_resolver.get_effective().providers["openai"]
	assert (settings.api_key, settings.base_url) == ("sk", "http://proxy/v1")


def test_init_unknown_provider_exits_nonzero(cli_resolver: ConfigResolver, capsys):
	assert cli.main(["init", "-p", "mistral"]) == 1
	assert "Unknown provider: mistral" in capsys.readouterr().err


def test_change_unconfigured_provider_exits_nonzero(cli_resolver: ConfigResolver, capsys):
	cli_resolver.init()
	assert cli.main(["change", "gemini"]) == 1
	assert "not configured" in capsys.readouterr().err


def test_change_switches_provider(cli_resolver: ConfigResolver):
	cli_resolver.init()
	cli_resolver.set_credential("gemini", "g")
	assert cli.main(["change", "gemini"]) == 0
	assert cli_resolver.get_effective().active == "gemini"


def test_run_without_config_exits_nonzero(cli_resolver: ConfigResolver, capsys):
	assert cli.main(["run", "anything"]) == 1
	assert "jassos init" in capsys.readouterr().err


def test_run_writes_files(cli_resolver: ConfigResolver, tmp_path: Path, monkeypatch, capsys):
	seen = {}

	def _create(resolver, model=None):
		seen["model"] = model
		return StubProvider(text="Done.\nFILE: app.py\n```python\nprint(1)\n```")

	monkeypatch.setattr(cli, "create_provider", _create)
	out_dir = tmp_path / "out"
	assert cli.main(["run", "an app", "-m", "special", "-d", str(out_dir)]) == 0
	assert seen["model"] == "special"
	assert (out_dir / "app.py").read_text(encoding="utf-8") == "print(1)"
	assert "Created: app.py" in capsys.readouterr().out


def test_run_surfaces_text_when_no_files(cli_resolver: ConfigResolver, tmp_path: Path, monkeypatch, capsys):
	monkeypatch.setattr(cli, "create_provider", lambda resolver, model=None: StubProvider(text="Just advice."))
	assert cli.main(["run", "help", "-d", str(tmp_path)]) == 0
	assert "Just advice." in capsys.readouterr().out


def test_start_continue_loads_history(cli_resolver: ConfigResolver, monkeypatch):
	cli_resolver.init()
	history = cli_resolver.config_dir / "history.json"
	history.write_text(json.dumps([{"role": "user", "content": "earlier"}]), encoding="utf-8")
	provider = StubProvider(fragments=["ok"])
	monkeypatch.setattr(cli, "create_provider", lambda resolver, model=None: provider)
	answers = iter(["again"])

	def _input(_prompt):
		try:
			return next(answers)
		except StopIteration:
			raise EOFError

	monkeypatch.setattr("builtins.input", _input)
	assert cli.main(["start", "--continue"]) == 0
	replayed, _options = provider.calls[0]
	assert [m.content for m in replayed] == ["earlier", "again"]
