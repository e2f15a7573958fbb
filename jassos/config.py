#!/usr/bin/env python3
"""
Layered configuration: a project record replaces the global record wholesale.
"""

from __future__ import annotations

# Standard Library
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

# local repo modules
from .errors import ConfigurationError, ConfigurationMissing, ProviderNotConfigured

logger = logging.getLogger(__name__)

CONFIG_DIRNAME = ".jassos"
CONFIG_FILENAME = "config.json"
DEFAULT_PROVIDER = "openai"

#============================================


def _default_home() -> Path:
	override = os.environ.get("JASSOS_HOME")
	if override:
		return Path(override).expanduser()
	return Path.home()


#============================================


@dataclass(slots=True)
class ProviderSettings:
	"""
	Credentials and overrides for one provider.

	Attributes:
		api_key: Provider API key (may be empty for local backends).
		model: Optional model override.
		base_url: Optional endpoint override for self-hosted backends.
	"""
	api_key: str = ""
	model: str | None = None
	base_url: str | None = None

	#============================================
	@classmethod
	def from_dict(cls, data: dict) -> ProviderSettings:
		return cls(
			api_key=str(data.get("apiKey") or ""),
			model=data.get("model") or None,
			base_url=data.get("baseUrl") or None,
		)

	#============================================
	def to_dict(self) -> dict[str, str]:
		data = {"apiKey": self.api_key}
		if self.model:
			data["model"] = self.model
		if self.base_url:
			data["baseUrl"] = self.base_url
		return data


#============================================


@dataclass(slots=True)
class Configuration:
	"""
	One configuration record, as persisted at global or project scope.

	Attributes:
		active: Id of the provider used to build adapters.
		providers: Provider id to settings.
		history: Persist interactive shell history.
		cache_enabled: Stored for compatibility; responses are never cached.
	"""
	active: str = DEFAULT_PROVIDER
	providers: dict[str, ProviderSettings] = field(default_factory=dict)
	history: bool = True
	cache_enabled: bool = False

	#============================================
	@classmethod
	def from_dict(cls, data: dict) -> Configuration:
		raw_providers = data.get("providers") or {}
		if not isinstance(raw_providers, dict):
			raise ConfigurationError("'providers' must be a mapping.")
		providers: dict[str, ProviderSettings] = {}
		for provider_id, raw in raw_providers.items():
			if not isinstance(raw, dict):
				raise ConfigurationError(f"Provider entry '{provider_id}' must be a mapping.")
			providers[str(provider_id)] = ProviderSettings.from_dict(raw)
		return cls(
			active=str(data.get("active") or ""),
			providers=providers,
			history=bool(data.get("history", True)),
			cache_enabled=bool(data.get("cacheEnabled", False)),
		)

	#============================================
	def to_dict(self) -> dict:
		return {
			"active": self.active,
			"providers": {key: value.to_dict() for key, value in self.providers.items()},
			"history": self.history,
			"cacheEnabled": self.cache_enabled,
		}


#============================================


class ConfigResolver:
	"""
	Thin source of truth over the global and project configuration files.

	Every operation re-reads disk; nothing is cached between calls.
	"""

	def __init__(self, home: Path | None = None, project_root: Path | None = None) -> None:
		home_dir = home if home is not None else _default_home()
		project_dir = project_root if project_root is not None else Path.cwd()
		self.global_path = home_dir / CONFIG_DIRNAME / CONFIG_FILENAME
		self.project_path = project_dir / CONFIG_DIRNAME / CONFIG_FILENAME

	#============================================
	@property
	def config_dir(self) -> Path:
		return self.global_path.parent

	#============================================
	def init(self) -> bool:
		"""
		Create the global record with built-in defaults if it is missing.

		Returns:
			True when a new record was written.
		"""
		if self.global_path.exists():
			return False
		self._write(self.global_path, Configuration())
		logger.info("Created default configuration at %s", self.global_path)
		return True

	#============================================
	def get_effective(self) -> Configuration:
		"""
		Return the project record if it exists, else the global record.
		"""
		if self.project_path.exists():
			return self._read(self.project_path)
		if self.global_path.exists():
			return self._read(self.global_path)
		raise ConfigurationMissing()

	#============================================
	def set_credential(
		self,
		provider_id: str,
		credential: str,
		model: str | None = None,
		base_url: str | None = None,
	) -> None:
		"""
		Upsert a provider entry and persist at global scope.

		A model or base URL left as None keeps the stored value.
		"""
		config = self.get_effective()
		existing = config.providers.get(provider_id)
		settings = ProviderSettings(api_key=credential, model=model, base_url=base_url)
		if existing is not None:
			if model is None:
				settings.model = existing.model
			if base_url is None:
				settings.base_url = existing.base_url
		config.providers[provider_id] = settings
		self.save_global(config)

	#============================================
	def set_active(self, provider_id: str) -> None:
		"""
		Switch the active provider; it must already have a credential entry.
		"""
		config = self.get_effective()
		if provider_id not in config.providers:
			raise ProviderNotConfigured(provider_id)
		config.active = provider_id
		self.save_global(config)

	#============================================
	def save_global(self, config: Configuration) -> None:
		self._write(self.global_path, config)

	#============================================
	def save_project(self, config: Configuration) -> None:
		self._write(self.project_path, config)

	#============================================
	def _read(self, path: Path) -> Configuration:
		try:
			data = json.loads(path.read_text(encoding="utf-8"))
		except (OSError, ValueError) as exc:
			raise ConfigurationError(f"Failed to read configuration {path}: {exc}") from exc
		if not isinstance(data, dict):
			raise ConfigurationError(f"Configuration {path} must decode to a mapping.")
		return Configuration.from_dict(data)

	#============================================
	def _write(self, path: Path, config: Configuration) -> None:
		path.parent.mkdir(parents=True, exist_ok=True)
		path.write_text(json.dumps(config.to_dict(), indent=2) + "\n", encoding="utf-8")
