from __future__ import annotations

import re
from enum import Enum
from typing import List, NamedTuple, Optional

from .model import (
	ClassDecl,
	Controller,
	FileDecls,
	Framework,
	Method,
	MethodDecl,
	Parameter,
	ParamDecl,
	Property,
	Route,
	Service,
	TypeInfo,
)


ROUTE_DECORATORS = ("Get", "Post", "Put", "Delete", "Patch", "All")
FRAMEWORK_DECORATORS = ("Controller", "Injectable")
HIDDEN_MODIFIERS = ("private", "protected")
ACCESSOR_MODIFIERS = ("get", "set")

_QUOTES = re.compile(r"['\"]")


class ClassRole(str, Enum):
	CONTROLLER = "controller"
	SERVICE = "service"
	BOTH = "both"
	NEITHER = "neither"


class Declarations(NamedTuple):
	controllers: List[Controller]
	services: List[Service]
	types: List[TypeInfo]


def is_controller(cls: ClassDecl) -> bool:
	return cls.has_decorator("Controller") or cls.name_matches("controller")


def is_service(cls: ClassDecl) -> bool:
	return cls.has_decorator("Injectable") or cls.name_matches("service")


def classify(cls: ClassDecl) -> ClassRole:
	controller, service = is_controller(cls), is_service(cls)
	if controller and service:
		return ClassRole.BOTH
	if controller:
		return ClassRole.CONTROLLER
	if service:
		return ClassRole.SERVICE
	return ClassRole.NEITHER


def class_framework(cls: ClassDecl) -> Framework:
	if any(cls.has_decorator(name) for name in FRAMEWORK_DECORATORS):
		return Framework.NESTJS
	return Framework.EXPRESS


def _first_argument(arguments: List[str], default: str) -> str:
	if not arguments:
		return default
	return _QUOTES.sub("", arguments[0]) or default


def join_route_path(base_path: str, route_path: str) -> str:
	if not base_path:
		return route_path
	suffix = "" if route_path == "/" else "/" + route_path.lstrip("/")
	return f"/{base_path}{suffix}"


def route_decorator(method: MethodDecl):
	for deco in method.decorators:
		if deco.name in ROUTE_DECORATORS:
			return deco
	return None


def _route_parameter(param: ParamDecl) -> Parameter:
	return Parameter(
		name=param.name,
		type=param.type or "any",
		optional=param.optional,
		decorator=param.decorators[0].name if len(param.decorators) == 1 else None,
	)


def route_from_method(method: MethodDecl, cls: ClassDecl) -> Optional[Route]:
	deco = route_decorator(method)
	if deco is None:
		return None
	controller = cls.decorator("Controller")
	base_path = _first_argument(controller.arguments, "") if controller else ""
	route_path = _first_argument(deco.arguments, "/")
	return Route(
		path=join_route_path(base_path, route_path),
		method=deco.name.upper(),
		handler=method.name,
		middleware=[],
		parameters=[_route_parameter(p) for p in method.parameters],
		framework=Framework.NESTJS,
	)


def extract_controllers(decls: FileDecls) -> List[Controller]:
	controllers: List[Controller] = []
	for cls in decls.classes:
		if not is_controller(cls):
			continue
		routes = [r for r in (route_from_method(m, cls) for m in cls.methods) if r is not None]
		if not routes:
			continue
		controllers.append(
			Controller(
				name=cls.name or "AnonymousController",
				routes=routes,
				framework=class_framework(cls),
				file_path=decls.path,
			)
		)
	return controllers


def _service_method(method: MethodDecl) -> Method:
	return Method(
		name=method.name,
		parameters=[
			Parameter(name=p.name, type=p.type or "any", optional=p.optional)
			for p in method.parameters
		],
		return_type=method.return_type or "void",
		is_public=not any(m in HIDDEN_MODIFIERS for m in method.modifiers),
	)


def is_plain_method(method: MethodDecl) -> bool:
	return method.name != "constructor" and not any(m in ACCESSOR_MODIFIERS for m in method.modifiers)


def extract_services(decls: FileDecls) -> List[Service]:
	return [
		Service(
			name=cls.name or "AnonymousService",
			methods=[_service_method(m) for m in cls.methods if is_plain_method(m)],
			file_path=decls.path,
			framework=class_framework(cls),
		)
		for cls in decls.classes
		if is_service(cls)
	]


def extract_types(decls: FileDecls) -> List[TypeInfo]:
	types: List[TypeInfo] = []
	for iface in decls.interfaces:
		types.append(
			TypeInfo(
				name=iface.name,
				kind="interface",
				file_path=decls.path,
				properties=[
					Property(name=p.name, type=p.type or "any", optional=p.optional)
					for p in iface.properties
				],
			)
		)
	for alias in decls.type_aliases:
		types.append(TypeInfo(name=alias.name, kind="type", file_path=decls.path))
	for enum in decls.enums:
		types.append(
			TypeInfo(
				name=enum.name,
				kind="enum",
				file_path=decls.path,
				properties=[Property(name=m, type="string", optional=False) for m in enum.members],
			)
		)
	return types


def extract_declarations(decls: FileDecls) -> Declarations:
	return Declarations(
		controllers=extract_controllers(decls),
		services=extract_services(decls),
		types=extract_types(decls),
	)
