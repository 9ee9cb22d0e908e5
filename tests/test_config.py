import json

import pytest

from routescan.config import config_template, load_settings
from routescan.errors import ConfigurationError


def test_defaults(tmp_path, monkeypatch):
	monkeypatch.chdir(tmp_path)
	settings = load_settings(cwd=str(tmp_path))
	assert settings.files.output_dir == "./docs"
	assert settings.analysis.tsconfig == "tsconfig.json"
	assert settings.framework.force is None
	assert settings.verbose is False


def test_config_file_overrides_environment(tmp_path, monkeypatch):
	monkeypatch.chdir(tmp_path)
	monkeypatch.setenv("AUTODOCGEN_FILES__OUTPUT_DIR", "./from-env")
	monkeypatch.setenv("AUTODOCGEN_FILES__TIMESTAMP_FILES", "false")
	(tmp_path / "autodocgen.config.json").write_text(
		json.dumps({"files": {"output_dir": "./from-file"}, "framework": {"force": "express"}})
	)
	settings = load_settings(cwd=str(tmp_path), verbose=True)
	assert settings.files.output_dir == "./from-file"
	assert settings.files.timestamp_files is False
	assert settings.framework.force == "express"
	assert settings.verbose is True


def test_missing_explicit_config_file(tmp_path):
	with pytest.raises(ConfigurationError):
		load_settings("nope.json", cwd=str(tmp_path))


def test_invalid_config_file(tmp_path):
	(tmp_path / ".autodocgen.json").write_text("[1, 2]")
	with pytest.raises(ConfigurationError):
		load_settings(cwd=str(tmp_path))


def test_invalid_config_values(tmp_path):
	(tmp_path / "autodocgen.json").write_text(json.dumps({"verbose": "sometimes"}))
	with pytest.raises(ConfigurationError):
		load_settings(cwd=str(tmp_path))


def test_templates():
	assert set(config_template("basic")) == {"files", "framework", "verbose"}
	assert config_template("minimal") == {"files": {"output_dir": "./docs"}}
	assert "analysis" in config_template("full")
	with pytest.raises(ValueError):
		config_template("fancy")
