"""Partition analysed routes into named documentation modules.

Grouping tries a fixed chain of strategies and keeps the first one that
produces any module:

1. every controller with routes becomes a module named after the controller;
2. otherwise each route is placed on its own, by handler/service match, by the
   first static path segment, or round-robin over the service-derived names.
"""

from __future__ import annotations

import re
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional, Sequence

from loguru import logger

from .model import (
	AnalysisMetadata,
	AnalysisResult,
	Controller,
	ModuleChunk,
	ModuleMap,
	Route,
	Service,
	TypeInfo,
)


APP_MODULE = "app"
ROUND_ROBIN_SIZE = 3

_NAME_SUFFIX = re.compile(r"(Service|Controller|Dto|Entity|Model|Type|Interface)$", re.IGNORECASE)
_SERVICE_SUFFIX = re.compile(r"(Service|Controller)$", re.IGNORECASE)
_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9\-_]")


def derive_module_name(name: Optional[str]) -> Optional[str]:
	if not name:
		return None
	clean = _NAME_SUFFIX.sub("", name).lower()
	if clean.endswith("y"):
		return clean[:-1] + "ies"
	if clean.endswith("s"):
		return clean
	return clean + "s"


def sanitize_module_name(name: str) -> str:
	return _UNSAFE_CHARS.sub("_", name)


class GroupingContext(NamedTuple):
	routes: Sequence[Route]
	controllers: Sequence[Controller]
	# module name -> service name, in discovery order
	service_modules: Dict[str, str]


Strategy = Callable[[GroupingContext], Optional[ModuleMap]]


def service_modules(services: Iterable[Service]) -> Dict[str, str]:
	modules: Dict[str, str] = {}
	for service in services:
		module = derive_module_name(service.name)
		if module:
			modules[module] = service.name
	return modules


def group_by_controller(ctx: GroupingContext) -> Optional[ModuleMap]:
	chunks: ModuleMap = {}
	for controller in ctx.controllers:
		module = derive_module_name(controller.name)
		if not module or not controller.routes:
			continue
		chunks.setdefault(sanitize_module_name(module), []).extend(controller.routes)
	return chunks or None


def _module_by_handler(route: Route, modules: Dict[str, str]) -> Optional[str]:
	handler = route.handler.lower() if route.handler else ""
	if not handler:
		return None
	for module, service_name in modules.items():
		if _SERVICE_SUFFIX.sub("", service_name).lower() in handler:
			return module
	return None


def _module_by_path(path: str) -> Optional[str]:
	if path in ("/", ""):
		return APP_MODULE
	segments = [s for s in path.split("/") if s and not s.startswith(":")]
	return segments[0].lower() if segments else None


def _module_by_position(position: int, modules: Dict[str, str]) -> str:
	names = list(modules)
	group = position // ROUND_ROBIN_SIZE
	return names[group] if group < len(names) else APP_MODULE


def group_by_route(ctx: GroupingContext) -> Optional[ModuleMap]:
	chunks: ModuleMap = {}
	for position, route in enumerate(ctx.routes):
		module = (
			_module_by_handler(route, ctx.service_modules)
			or _module_by_path(route.path)
			or _module_by_position(position, ctx.service_modules)
		)
		chunks.setdefault(sanitize_module_name(module), []).append(route)
	return chunks or None


STRATEGIES: Sequence[Strategy] = (group_by_controller, group_by_route)


def group_routes(
	routes: Sequence[Route],
	services: Sequence[Service] = (),
	controllers: Sequence[Controller] = (),
	strategies: Sequence[Strategy] = STRATEGIES,
) -> ModuleMap:
	ctx = GroupingContext(
		routes=routes,
		controllers=controllers,
		service_modules=service_modules(services),
	)
	logger.debug(f"Detected modules from services: {', '.join(ctx.service_modules)}")
	for strategy in strategies:
		chunks = strategy(ctx)
		if chunks:
			return chunks
	return {}


def _related(module: str, name: str) -> bool:
	lowered = name.lower()
	return module.lower() in lowered or (module == APP_MODULE and APP_MODULE in lowered)


def related_services(module: str, services: Iterable[Service]) -> List[Service]:
	return [s for s in services if _related(module, s.name)]


def related_types(module: str, types: Iterable[TypeInfo]) -> List[TypeInfo]:
	return [t for t in types if _related(module, t.name)]


def _module_controllers(module: str, controllers: Iterable[Controller]) -> List[Controller]:
	selected: List[Controller] = []
	for controller in controllers:
		derived = derive_module_name(controller.name)
		if derived and sanitize_module_name(derived) == module:
			selected.append(controller)
	return selected


def build_module_chunks(result: AnalysisResult) -> List[ModuleChunk]:
	"""Split an analysis into one restricted view per documentation module."""
	chunks: List[ModuleChunk] = []
	grouped = group_routes(result.routes, result.services, result.controllers)
	for module, routes in grouped.items():
		services = related_services(module, result.services)
		types = related_types(module, result.types)
		controllers = _module_controllers(module, result.controllers)
		chunks.append(
			ModuleChunk(
				module_name=module,
				framework=result.framework,
				routes=routes,
				controllers=controllers,
				services=services,
				types=types,
				metadata=AnalysisMetadata(
					total_routes=len(routes),
					total_controllers=len(controllers),
					total_services=len(services),
					total_types=len(types),
					analysis_time=result.metadata.analysis_time,
					module_name=module,
				),
			)
		)
	return chunks
