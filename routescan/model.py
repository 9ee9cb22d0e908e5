from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator


HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "ALL")


class Framework(str, Enum):
	EXPRESS = "express"
	NESTJS = "nestjs"
	FASTIFY = "fastify"
	KOA = "koa"


class Snapshot(BaseModel):
	model_config = ConfigDict(frozen=True)


# Extraction results


class Parameter(Snapshot):
	name: str
	type: str = "any"
	optional: bool = False
	decorator: Optional[str] = None


class Route(Snapshot):
	path: str
	method: str
	handler: str = "anonymous"
	middleware: List[str] = []
	parameters: List[Parameter] = []
	framework: Framework

	@field_validator("method")
	@classmethod
	def _upper_method(cls, value: str) -> str:
		method = value.upper()
		if method not in HTTP_METHODS:
			raise ValueError(f"unsupported HTTP method: {value}")
		return method


class Controller(Snapshot):
	name: str
	routes: List[Route] = []
	framework: Framework
	file_path: str


class Method(Snapshot):
	name: str
	parameters: List[Parameter] = []
	return_type: str = "void"
	is_public: bool = True


class Service(Snapshot):
	name: str
	methods: List[Method] = []
	file_path: str
	framework: Framework


class Property(Snapshot):
	name: str
	type: str = "any"
	optional: bool = False


class TypeInfo(Snapshot):
	name: str
	kind: str
	file_path: str
	properties: List[Property] = []


class AnalysisMetadata(Snapshot):
	total_routes: int = 0
	total_controllers: int = 0
	total_services: int = 0
	total_types: int = 0
	analysis_time: float = 0.0
	module_name: Optional[str] = None


class AnalysisResult(Snapshot):
	framework: str
	routes: List[Route] = []
	controllers: List[Controller] = []
	services: List[Service] = []
	types: List[TypeInfo] = []
	metadata: AnalysisMetadata = AnalysisMetadata()


class ModuleChunk(Snapshot):
	"""Restricted view of an analysis scoped to one documentation module."""

	module_name: str
	framework: str
	routes: List[Route] = []
	controllers: List[Controller] = []
	services: List[Service] = []
	types: List[TypeInfo] = []
	metadata: AnalysisMetadata = AnalysisMetadata()


class FrameworkInfo(Snapshot):
	framework: str
	confidence: int = 0
	indicators: List[str] = []


# Declaration facts read from a parsed source file


class DecoratorInfo(Snapshot):
	name: str
	arguments: List[str] = []


class ParamDecl(Snapshot):
	name: str
	type: Optional[str] = None
	optional: bool = False
	decorators: List[DecoratorInfo] = []


class MethodDecl(Snapshot):
	name: str
	parameters: List[ParamDecl] = []
	return_type: Optional[str] = None
	modifiers: List[str] = []
	decorators: List[DecoratorInfo] = []


class ClassDecl(Snapshot):
	name: Optional[str] = None
	decorators: List[DecoratorInfo] = []
	methods: List[MethodDecl] = []

	def decorator(self, name: str) -> Optional[DecoratorInfo]:
		for deco in self.decorators:
			if deco.name == name:
				return deco
		return None

	def has_decorator(self, name: str) -> bool:
		return self.decorator(name) is not None

	def name_matches(self, marker: str) -> bool:
		lowered = (self.name or "").lower()
		marker = marker.lower()
		return marker in lowered or lowered.endswith(marker)


class PropertyDecl(Snapshot):
	name: str
	type: Optional[str] = None
	optional: bool = False


class InterfaceDecl(Snapshot):
	name: str
	properties: List[PropertyDecl] = []


class TypeAliasDecl(Snapshot):
	name: str


class EnumDecl(Snapshot):
	name: str
	members: List[str] = []


class FileDecls(Snapshot):
	path: str
	classes: List[ClassDecl] = []
	interfaces: List[InterfaceDecl] = []
	type_aliases: List[TypeAliasDecl] = []
	enums: List[EnumDecl] = []


ModuleMap = Dict[str, List[Route]]
