"""Textual route extraction for call-style and annotation-style registrations.

Every pattern re-scans the whole file on its own, so one registration that
satisfies two patterns is reported twice. Matches are never de-duplicated.
"""

from __future__ import annotations

import re
from typing import Callable, List, NamedTuple

from .model import Framework, Parameter, Route


ANONYMOUS = "anonymous"

_VERBS = "get|post|put|delete|patch"

# const getUsers = (req, res) => ..., getUsers = async function (...) ...
_ASSIGNED_FUNCTION = re.compile(
	r"(\w+)\s*=\s*(?:async\s+)?(?:function\b|\([^)]*\)\s*(?::[^=]*)?=>|\w+\s*=>)"
)
_FUNCTION_DECLARATION = re.compile(r"function\s+(\w+)")
_ASYNC_FUNCTION = re.compile(r"async\s+(\w+)")
_DECORATED_METHOD = re.compile(
	r"^(?:\s*@[\w.]+(?!\w)(?:\((?:[^()]|\([^()]*\))*\))?)*\s*"
	r"(?:(?:public|private|protected|static|async|override)\s+)*"
	r"(\w+)\s*\("
)

DEFAULT_HANDLER_PARAMETERS = (
	Parameter(name="req", type="Request", optional=False),
	Parameter(name="res", type="Response", optional=False),
	Parameter(name="next", type="NextFunction", optional=True),
)


def resolve_handler_name(handler_text: str) -> str:
	for pattern in (_ASSIGNED_FUNCTION, _FUNCTION_DECLARATION, _ASYNC_FUNCTION):
		match = pattern.search(handler_text)
		if match:
			return match.group(1)
	return ANONYMOUS


def resolve_decorated_method(following_text: str) -> str:
	match = _DECORATED_METHOD.match(following_text)
	if match:
		return match.group(1)
	return resolve_handler_name(following_text.split("{", 1)[0])


def extract_middleware(text: str, index: int) -> List[str]:
	# Middleware between the path and the handler is not resolved yet.
	return []


def handler_parameters(handler: str) -> List[Parameter]:
	"""Parameters are not inferred from the handler; every match gets (req, res, next?)."""
	return list(DEFAULT_HANDLER_PARAMETERS)


class RoutePattern(NamedTuple):
	regex: re.Pattern[str]
	framework: Framework
	handler: Callable[[re.Match], str]


def _call_style(receiver: str) -> re.Pattern[str]:
	return re.compile(
		receiver + r"\.(" + _VERBS + r")\(\s*(['\"`])([^'\"`]+)\2\s*,\s*([^\n]*)"
	)


def _call_handler(match: re.Match) -> str:
	return resolve_handler_name(match.group(4))


def _annotation_handler(match: re.Match) -> str:
	return resolve_decorated_method(match.string[match.end():])


ROUTE_PATTERNS = (
	RoutePattern(_call_style("app"), Framework.EXPRESS, _call_handler),
	# a bare router receiver is labelled koa by convention
	RoutePattern(_call_style("router"), Framework.KOA, _call_handler),
	RoutePattern(_call_style("fastify"), Framework.FASTIFY, _call_handler),
	RoutePattern(
		re.compile(r"@(Get|Post|Put|Delete|Patch)\((['\"`])([^'\"`]*)\2\)"),
		Framework.NESTJS,
		_annotation_handler,
	),
)


def extract_pattern_routes(text: str) -> List[Route]:
	routes: List[Route] = []
	for pattern in ROUTE_PATTERNS:
		for match in pattern.regex.finditer(text):
			path = match.group(3) or "/"
			handler = pattern.handler(match)
			routes.append(
				Route(
					path=path,
					method=match.group(1).upper(),
					handler=handler,
					middleware=extract_middleware(text, match.start()),
					parameters=handler_parameters(handler),
					framework=pattern.framework,
				)
			)
	return routes
