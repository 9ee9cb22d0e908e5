from __future__ import annotations

import json
import os
from typing import Any, Dict, Optional

from loguru import logger
from pydantic import BaseModel, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError


DEFAULT_CONFIG_FILES = (
	"autodocgen.config.json",
	".autodocgen.json",
	"autodocgen.json",
)


class FileSettings(BaseModel):
	output_dir: str = "./docs"
	analysis_filename: str = "analysis.json"
	save_raw_analysis: bool = True
	timestamp_files: bool = True


class FrameworkSettings(BaseModel):
	auto_detect: bool = True
	force: Optional[str] = None


class AnalysisSettings(BaseModel):
	tsconfig: str = "tsconfig.json"


class Settings(BaseSettings):
	"""Run settings, read from AUTODOCGEN_* environment variables, `.env` and a JSON config file.

	Nested sections use a double underscore in the environment, e.g.
	``AUTODOCGEN_FILES__OUTPUT_DIR=./out``.
	"""

	model_config = SettingsConfigDict(
		env_prefix="AUTODOCGEN_",
		env_nested_delimiter="__",
		env_file=".env",
		env_file_encoding="utf-8",
		extra="ignore",
	)

	files: FileSettings = FileSettings()
	framework: FrameworkSettings = FrameworkSettings()
	analysis: AnalysisSettings = AnalysisSettings()
	verbose: bool = False
	log_level: str = "INFO"


def find_config_file(config_file: Optional[str] = None, cwd: Optional[str] = None) -> Optional[str]:
	base = cwd or os.getcwd()
	if config_file:
		path = config_file if os.path.isabs(config_file) else os.path.join(base, config_file)
		if not os.path.isfile(path):
			raise ConfigurationError(config_file, "configuration file not found")
		return path
	for name in DEFAULT_CONFIG_FILES:
		path = os.path.join(base, name)
		if os.path.isfile(path):
			return path
	return None


def read_config_file(path: str) -> Dict[str, Any]:
	try:
		with open(path, "r", encoding="utf-8") as fh:
			data = json.load(fh)
	except (OSError, json.JSONDecodeError) as e:
		raise ConfigurationError(path, f"cannot read configuration: {e}") from e
	if not isinstance(data, dict):
		raise ConfigurationError(path, "configuration must be a JSON object")
	return data


def load_settings(config_file: Optional[str] = None, cwd: Optional[str] = None, **overrides: Any) -> Settings:
	"""Build the settings value for one run.

	Values from the config file win over the environment; keyword overrides win over both.
	"""
	data: Dict[str, Any] = {}
	path = find_config_file(config_file, cwd)
	if path:
		logger.debug(f"Loading configuration from {path}")
		data.update(read_config_file(path))
	data.update({k: v for k, v in overrides.items() if v is not None})
	try:
		return Settings(**data)
	except ValidationError as e:
		raise ConfigurationError(path or "<settings>", str(e)) from e


def config_template(kind: str = "basic") -> Dict[str, Any]:
	files = FileSettings().model_dump()
	if kind == "minimal":
		return {"files": {"output_dir": files["output_dir"]}}
	template: Dict[str, Any] = {
		"files": files,
		"framework": FrameworkSettings().model_dump(),
		"verbose": False,
	}
	if kind == "full":
		template["analysis"] = AnalysisSettings().model_dump()
		template["log_level"] = "INFO"
	elif kind != "basic":
		raise ValueError(f"unknown template: {kind}")
	return template
