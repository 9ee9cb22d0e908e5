from __future__ import annotations

import json
import os
from typing import Any, Dict, List

from loguru import logger

from .model import FrameworkInfo


DEPENDENCY_INDICATORS = (
	("express", "express dependency"),
	("@nestjs/core", "nestjs dependency"),
	("fastify", "fastify dependency"),
	("koa", "koa dependency"),
)
EXPRESS_FILES = ("app.js", "server.js", "index.js")
NESTJS_FILES = ("main.ts", "app.module.ts")

DEPENDENCY_WEIGHT = 40
PATTERN_WEIGHT = 20


def read_package_json(root: str) -> Dict[str, Any]:
	path = os.path.join(root, "package.json")
	if not os.path.isfile(path):
		return {}
	try:
		with open(path, "r", encoding="utf-8") as fh:
			data = json.load(fh)
	except (OSError, json.JSONDecodeError) as e:
		logger.warning(f"Could not read {path}: {e}")
		return {}
	return data if isinstance(data, dict) else {}


def has_file_pattern(root: str, names: tuple) -> bool:
	return any(
		os.path.exists(os.path.join(root, "src", name)) or os.path.exists(os.path.join(root, name))
		for name in names
	)


def determine_framework(indicators: List[str]) -> str:
	if "nestjs dependency" in indicators or "nestjs patterns" in indicators:
		return "nestjs"
	if "express dependency" in indicators or "express patterns" in indicators:
		return "express"
	if "fastify dependency" in indicators:
		return "fastify"
	if "koa dependency" in indicators:
		return "koa"
	return "unknown"


def detect_framework(root: str) -> FrameworkInfo:
	"""Guess the project's web framework from package.json and well-known file names.

	The result is a display label only; extraction runs the same way for every framework.
	"""
	dependencies = read_package_json(root).get("dependencies") or {}
	indicators: List[str] = []
	confidence = 0

	for package, indicator in DEPENDENCY_INDICATORS:
		if isinstance(dependencies, dict) and package in dependencies:
			indicators.append(indicator)
			confidence += DEPENDENCY_WEIGHT

	if has_file_pattern(root, EXPRESS_FILES):
		indicators.append("express patterns")
		confidence += PATTERN_WEIGHT
	if has_file_pattern(root, NESTJS_FILES):
		indicators.append("nestjs patterns")
		confidence += PATTERN_WEIGHT

	return FrameworkInfo(
		framework=determine_framework(indicators),
		confidence=min(confidence, 100),
		indicators=indicators,
	)
