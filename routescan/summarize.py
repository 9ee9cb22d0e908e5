from __future__ import annotations

from typing import List, Sequence

from .model import AnalysisResult, Controller, ModuleChunk, Route, Service, TypeInfo


def _route_rows(routes: Sequence[Route]) -> List[str]:
	rows = ["| Method | Path | Handler | Parameters |", "| --- | --- | --- | --- |"]
	for r in routes:
		params = ", ".join(
			f"{p.name}{'?' if p.optional else ''}: {p.type}" + (f" @{p.decorator}" if p.decorator else "")
			for p in r.parameters
		)
		rows.append(f"| {r.method} | `{r.path}` | {r.handler} | {params} |")
	return rows


def summarize_controllers(controllers: Sequence[Controller]) -> List[str]:
	parts: List[str] = []
	for c in controllers:
		parts.append(f"- **{c.name}** ({c.framework.value}, {len(c.routes)} routes) `{c.file_path}`")
	return parts


def summarize_services(services: Sequence[Service]) -> List[str]:
	parts: List[str] = []
	for s in services:
		public = [m for m in s.methods if m.is_public]
		parts.append(f"- **{s.name}** `{s.file_path}`")
		for m in public:
			params = ", ".join(p.name for p in m.parameters)
			parts.append(f"  - `{m.name}({params}): {m.return_type}`")
	return parts


def summarize_types(types: Sequence[TypeInfo]) -> List[str]:
	parts: List[str] = []
	for t in types:
		parts.append(f"- **{t.name}** ({t.kind})")
		for p in t.properties:
			parts.append(f"  - `{p.name}{'?' if p.optional else ''}: {p.type}`")
	return parts


def _sections(
	routes: Sequence[Route],
	controllers: Sequence[Controller],
	services: Sequence[Service],
	types: Sequence[TypeInfo],
) -> List[str]:
	parts: List[str] = []
	if routes:
		parts += ["", "## Routes", ""] + _route_rows(routes)
	if controllers:
		parts += ["", "## Controllers", ""] + summarize_controllers(controllers)
	if services:
		parts += ["", "## Services", ""] + summarize_services(services)
	if types:
		parts += ["", "## Types", ""] + summarize_types(types)
	return parts


def render_result(result: AnalysisResult) -> str:
	meta = result.metadata
	parts = [
		"# API overview",
		"",
		f"Framework: {result.framework}. "
		f"{meta.total_routes} routes, {meta.total_controllers} controllers, "
		f"{meta.total_services} services, {meta.total_types} types.",
	]
	parts += _sections(result.routes, result.controllers, result.services, result.types)
	return "\n".join(parts) + "\n"


def render_chunk(chunk: ModuleChunk) -> str:
	parts = [
		f"# Module `{chunk.module_name}`",
		"",
		f"Framework: {chunk.framework}. {len(chunk.routes)} routes.",
	]
	parts += _sections(chunk.routes, chunk.controllers, chunk.services, chunk.types)
	return "\n".join(parts) + "\n"
