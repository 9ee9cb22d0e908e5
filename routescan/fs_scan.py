from __future__ import annotations

import json
import os
import re
from typing import Any, Dict, Iterable, List, Optional

from loguru import logger
from pydantic import BaseModel

from .errors import ConfigurationError


TS_EXTENSIONS = (".ts", ".tsx", ".mts", ".cts")
JS_EXTENSIONS = (".js", ".jsx", ".mjs", ".cjs")

DEFAULT_INCLUDE = ("**/*",)
DEFAULT_EXCLUDE = ("node_modules", "bower_components", "jspm_packages")
ALWAYS_PRUNED = {".git", "node_modules"}

SKIP_MARKERS = ("node_modules", ".spec.", ".test.")


class SourceIndex(BaseModel):
	root: str
	config_path: str
	files: List[str] = []


def should_skip(path: str) -> bool:
	return any(marker in path for marker in SKIP_MARKERS)


def strip_json_comments(text: str) -> str:
	"""Remove // and /* */ comments and trailing commas from tsconfig-style JSON."""
	out: List[str] = []
	in_str = False
	escape = False
	idx = 0
	while idx < len(text):
		ch = text[idx]
		if in_str:
			out.append(ch)
			if escape:
				escape = False
			elif ch == "\\":
				escape = True
			elif ch == '"':
				in_str = False
			idx += 1
			continue
		if ch == '"':
			in_str = True
		elif ch == "/" and idx + 1 < len(text) and text[idx + 1] in "/*":
			if text[idx + 1] == "/":
				end = text.find("\n", idx + 2)
				idx = len(text) if end == -1 else end
			else:
				end = text.find("*/", idx + 2)
				idx = len(text) if end == -1 else end + 2
			continue
		elif ch in "]}":
			# drop a trailing comma before the closing bracket
			cursor = len(out) - 1
			while cursor >= 0 and out[cursor].isspace():
				cursor -= 1
			if cursor >= 0 and out[cursor] == ",":
				del out[cursor]
		out.append(ch)
		idx += 1
	return "".join(out)


def read_build_config(path: str) -> Dict[str, Any]:
	try:
		with open(path, "r", encoding="utf-8") as fh:
			raw = fh.read()
	except OSError as e:
		raise ConfigurationError(path, f"cannot read build configuration: {e}") from e
	try:
		payload = json.loads(strip_json_comments(raw))
	except json.JSONDecodeError as e:
		raise ConfigurationError(path, f"invalid build configuration: {e}") from e
	if not isinstance(payload, dict):
		raise ConfigurationError(path, "build configuration must be a JSON object")

	parent = payload.get("extends")
	if isinstance(parent, str) and parent.startswith("."):
		parent_path = os.path.normpath(os.path.join(os.path.dirname(path), parent))
		if not parent_path.endswith(".json"):
			parent_path += ".json"
		base = read_build_config(parent_path)
		merged = dict(base)
		merged.update({k: v for k, v in payload.items() if k != "compilerOptions"})
		options = dict(base.get("compilerOptions") or {})
		options.update(payload.get("compilerOptions") or {})
		merged["compilerOptions"] = options
		payload = merged
	elif parent:
		logger.debug(f"Ignoring non-relative extends '{parent}' in {path}")
	return payload


def _glob_to_regex(pattern: str, directory_match: bool = False) -> re.Pattern[str]:
	pattern = pattern.replace("\\", "/")
	while pattern.startswith("./"):
		pattern = pattern[2:]
	pattern = pattern.strip("/")
	parts: List[str] = []
	idx = 0
	while idx < len(pattern):
		if pattern.startswith("**/", idx):
			parts.append("(?:.*/)?")
			idx += 3
		elif pattern.startswith("**", idx):
			parts.append(".*")
			idx += 2
		elif pattern[idx] == "*":
			parts.append("[^/]*")
			idx += 1
		elif pattern[idx] == "?":
			parts.append("[^/]")
			idx += 1
		else:
			parts.append(re.escape(pattern[idx]))
			idx += 1
	suffix = "(?:/.*)?" if directory_match else ""
	return re.compile("^" + "".join(parts) + suffix + "$")


def _is_directory_spec(pattern: str) -> bool:
	last = pattern.replace("\\", "/").rstrip("/").rsplit("/", 1)[-1]
	return "*" not in last and "." not in last


def _include_patterns(specs: Iterable[str]) -> List[re.Pattern[str]]:
	patterns: List[re.Pattern[str]] = []
	for spec in specs:
		if _is_directory_spec(spec):
			spec = spec.rstrip("/") + "/**/*"
		patterns.append(_glob_to_regex(spec))
	return patterns


def _matches_any(rel_path: str, patterns: Iterable[re.Pattern[str]]) -> bool:
	return any(p.match(rel_path) for p in patterns)


def resolve_config_path(root: str, config_path: Optional[str] = None) -> str:
	if not config_path:
		return os.path.join(root, "tsconfig.json")
	if os.path.isabs(config_path):
		return config_path
	return os.path.join(root, config_path)


def collect_source_files(config: Dict[str, Any], config_dir: str) -> List[str]:
	options = config.get("compilerOptions") or {}
	extensions = TS_EXTENSIONS + (JS_EXTENSIONS if options.get("allowJs") else ())

	explicit = [
		os.path.normpath(os.path.join(config_dir, f))
		for f in config.get("files") or []
		if isinstance(f, str)
	]

	include_specs = config.get("include")
	if include_specs is None:
		include_specs = [] if explicit else list(DEFAULT_INCLUDE)
	exclude_specs = config.get("exclude")
	if exclude_specs is None:
		exclude_specs = list(DEFAULT_EXCLUDE)
		if options.get("outDir"):
			exclude_specs.append(options["outDir"])

	includes = _include_patterns(s for s in include_specs if isinstance(s, str))
	excludes = [_glob_to_regex(s, directory_match=True) for s in exclude_specs if isinstance(s, str)]

	found: List[str] = list(explicit)
	if includes:
		for dirpath, dirnames, filenames in os.walk(config_dir):
			rel_dir = os.path.relpath(dirpath, config_dir).replace(os.sep, "/")
			rel_dir = "" if rel_dir == "." else rel_dir + "/"
			dirnames[:] = sorted(
				d for d in dirnames
				if d not in ALWAYS_PRUNED and not _matches_any(rel_dir + d, excludes)
			)
			for filename in filenames:
				if not filename.endswith(extensions):
					continue
				rel_path = rel_dir + filename
				if _matches_any(rel_path, excludes) or not _matches_any(rel_path, includes):
					continue
				found.append(os.path.join(dirpath, filename))
	return sorted(set(found))


def load_source_index(root: str, config_path: Optional[str] = None) -> SourceIndex:
	"""Load the set of source files the build configuration under ``root`` compiles."""
	root = os.path.abspath(root)
	path = resolve_config_path(root, config_path)
	if not os.path.isfile(path):
		raise ConfigurationError(path, "build configuration not found")
	config = read_build_config(path)
	files = collect_source_files(config, os.path.dirname(path))
	logger.debug(f"Loaded {len(files)} source files from {path}")
	return SourceIndex(root=root, config_path=path, files=files)
