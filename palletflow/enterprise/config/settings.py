"""Layered settings for the palletflow service.

Values resolve from, highest precedence first: keyword arguments, ``PF_``
environment variables (``__`` separates nested fields), a ``.env`` file, the
environment overlay ``config/environments/<environment>.yaml`` and finally the
base ``config/settings.yaml``. The two YAML layers are merged key by key, so an
overlay only lists what differs from the base.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, NonNegativeInt, PositiveFloat, PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = [
	"DatabaseSettings",
	"OperationsSettings",
	"SeedSettings",
	"TelemetrySettings",
	"LoggingSettings",
	"GrpcSettings",
	"AppSettings",
	"get_settings",
]


_ENVIRONMENT_VAR = "PF_ENVIRONMENT"
_CONFIG_DIR_ENV_VAR = "PF_CONFIG_DIR"


def _project_root() -> Path:
	"""Return the absolute project root directory."""

	return Path(__file__).resolve().parents[3]


DEFAULT_CONFIG_DIR = _project_root() / "config"


class DatabaseSettings(BaseModel):
	"""Database configuration for the record store."""

	enabled: bool = Field(False, description="Use the SQL record store instead of process memory.")
	url: str = Field(
		"sqlite+aiosqlite:///./palletflow.db",
		description="SQLAlchemy-compatible database URL (async driver).",
	)
	pool_size: PositiveInt = Field(5, description="Connection pool size for the database engine.")
	max_overflow: PositiveInt = Field(10, description="Maximum overflow connections beyond pool size.")
	echo: bool = Field(False, description="Enable SQL echo for debugging.")
	create_schema: bool = Field(True, description="Create missing tables on startup.")


class OperationsSettings(BaseModel):
	"""Business limits applied by the induction and stow engines."""

	max_pallet_weight_lbs: PositiveFloat = Field(
		500.0,
		description="Maximum combined package weight a single pallet may carry.",
	)


class SeedSettings(BaseModel):
	"""Fixture data loaded into an empty record store."""

	enabled: bool = Field(True, description="Seed warehouses, clients and packages when the store is empty.")
	package_count: NonNegativeInt = Field(50, description="Number of PENDING packages to create.")
	service_window_days: PositiveInt = Field(30, description="Service dates fall within this many days.")
	random_seed: Optional[int] = Field(None, description="Seed for reproducible weights and dates.")


class TelemetrySettings(BaseModel):
	"""Tracing and metrics configuration."""

	otlp_endpoint: Optional[str] = Field(None, description="OTLP collector endpoint for traces.")
	metrics_enabled: bool = Field(True, description="Enable Prometheus metrics collection.")


class LoggingSettings(BaseModel):
	"""Logging verbosity and related tuning parameters."""

	level: str = Field("INFO", description="Root log level (DEBUG, INFO, etc.).")
	json: bool = Field(False, description="Emit logs as JSON for aggregators.")


class GrpcSettings(BaseModel):
	"""Listener configuration for the gRPC gateway."""

	host: str = Field("[::]", description="Interface the gRPC server binds to.")
	port: PositiveInt = Field(50051, description="Port the gRPC server listens on.")


def _read_yaml(path: Path) -> Dict[str, Any]:
	"""Parse one YAML layer; a missing file counts as an empty layer."""

	if not path.is_file():
		return {}

	data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
	if not isinstance(data, dict):
		raise ValueError(f"{path} must contain a mapping at the top level")
	return data


def _overlay(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
	merged = dict(base)
	for key, value in overlay.items():
		current = merged.get(key)
		if isinstance(current, dict) and isinstance(value, dict):
			merged[key] = _overlay(current, value)
		else:
			merged[key] = value
	return merged


def _yaml_layers() -> Dict[str, Any]:
	config_dir = Path(os.getenv(_CONFIG_DIR_ENV_VAR, DEFAULT_CONFIG_DIR))
	base = _read_yaml(config_dir / "settings.yaml")
	environment = os.getenv(_ENVIRONMENT_VAR) or base.get("environment", "dev")
	layered = _overlay(base, _read_yaml(config_dir / "environments" / f"{environment}.yaml"))
	layered.setdefault("environment", environment)
	return layered


class AppSettings(BaseSettings):
	"""Primary configuration model for the application."""

	environment: str = Field("dev", description="Active environment name (dev, test, prod, ...).")
	database: DatabaseSettings = DatabaseSettings()
	operations: OperationsSettings = OperationsSettings()
	seed: SeedSettings = SeedSettings()
	telemetry: TelemetrySettings = TelemetrySettings()
	logging: LoggingSettings = LoggingSettings()
	grpc: GrpcSettings = GrpcSettings()

	model_config = SettingsConfigDict(
		env_prefix="PF_",
		env_file=".env",
		env_file_encoding="utf-8",
		env_nested_delimiter="__",
		extra="ignore",
		validate_assignment=True,
	)

	@classmethod
	def settings_customise_sources(
		cls,
		_settings_cls,
		init_settings,
		env_settings,
		dotenv_settings,
		file_secret_settings,
	):
		# YAML sits below everything else so env vars can patch a deployment.
		return (
			init_settings,
			env_settings,
			dotenv_settings,
			_yaml_layers,
			file_secret_settings,
		)


@lru_cache()
def get_settings(**overrides: Any) -> AppSettings:
	"""Build the settings once per process; call ``cache_clear`` to reload."""

	return AppSettings(**overrides)
