from __future__ import annotations

import os
import time
from typing import List, Optional

from loguru import logger

from .config import Settings
from .declarations import extract_declarations
from .detect import detect_framework
from .errors import AnalysisInputError
from .fs_scan import load_source_index, should_skip
from .model import (
	AnalysisMetadata,
	AnalysisResult,
	Controller,
	Route,
	Service,
	TypeInfo,
)
from .patterns import extract_pattern_routes
from .ts_parse import parse_declarations


class ResultBuilder:
	"""Accumulates per-file extraction output in discovery order."""

	def __init__(self) -> None:
		self.routes: List[Route] = []
		self.controllers: List[Controller] = []
		self.services: List[Service] = []
		self.types: List[TypeInfo] = []

	def add_file(self, path: str, text: str) -> None:
		found = extract_declarations(parse_declarations(path, text))
		self.controllers.extend(found.controllers)
		for controller in found.controllers:
			self.routes.extend(controller.routes)
		# pattern matches are appended alongside, never merged
		self.routes.extend(extract_pattern_routes(text))
		self.services.extend(found.services)
		self.types.extend(found.types)

	def build(self, framework: str, started: float) -> AnalysisResult:
		return AnalysisResult(
			framework=framework,
			routes=self.routes,
			controllers=self.controllers,
			services=self.services,
			types=self.types,
			metadata=AnalysisMetadata(
				total_routes=len(self.routes),
				total_controllers=len(self.controllers),
				total_services=len(self.services),
				total_types=len(self.types),
				analysis_time=round(time.perf_counter() - started, 3),
			),
		)


def framework_label(root: str, settings: Settings) -> str:
	if settings.framework.force:
		return settings.framework.force
	if not settings.framework.auto_detect:
		return "unknown"
	info = detect_framework(root)
	logger.info(f"Detected framework: {info.framework} ({info.confidence}% confidence)")
	return info.framework


def analyze_project(root: str, settings: Optional[Settings] = None, tsconfig: Optional[str] = None) -> AnalysisResult:
	settings = settings or Settings()
	started = time.perf_counter()
	root = os.path.abspath(root)
	if not os.path.isdir(root):
		raise AnalysisInputError(f"Invalid project root: {root}")

	framework = framework_label(root, settings)
	index = load_source_index(root, tsconfig or settings.analysis.tsconfig)

	builder = ResultBuilder()
	for path in index.files:
		if should_skip(path):
			logger.debug(f"Skipping {path}")
			continue
		with open(path, "r", encoding="utf-8") as fh:
			text = fh.read()
		logger.debug(f"Analyzing {path}")
		builder.add_file(path, text)

	result = builder.build(framework, started)
	logger.info(
		f"Found: {len(result.routes)} routes, {len(result.controllers)} controllers, "
		f"{len(result.services)} services, {len(result.types)} types "
		f"in {result.metadata.analysis_time}s"
	)
	return result
