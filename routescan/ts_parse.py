from __future__ import annotations

import os
from typing import Dict, Iterator, List, Optional

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

from .model import (
	ClassDecl,
	DecoratorInfo,
	EnumDecl,
	FileDecls,
	InterfaceDecl,
	MethodDecl,
	ParamDecl,
	PropertyDecl,
	TypeAliasDecl,
)


TYPESCRIPT_EXTENSIONS = (".ts", ".mts", ".cts")

CLASS_NODES = ("class_declaration", "abstract_class_declaration", "class")
PARAMETER_NODES = ("required_parameter", "optional_parameter")
MODIFIER_NODES = ("accessibility_modifier", "override_modifier")
MODIFIER_KEYWORDS = ("static", "async", "readonly", "abstract", "get", "set")

_parsers: Dict[str, Parser] = {}


def get_parser(grammar: str) -> Parser:
	if grammar not in _parsers:
		if grammar == "typescript":
			language = Language(tree_sitter_typescript.language_typescript())
		else:
			language = Language(tree_sitter_typescript.language_tsx())
		_parsers[grammar] = Parser(language)
	return _parsers[grammar]


def grammar_for(path: str) -> str:
	_, ext = os.path.splitext(path)
	return "typescript" if ext.lower() in TYPESCRIPT_EXTENSIONS else "tsx"


def _text(node: Optional[Node]) -> str:
	if node is None or node.text is None:
		return ""
	return node.text.decode("utf-8", errors="replace")


def _type_text(annotation: Optional[Node]) -> Optional[str]:
	# type_annotation nodes carry the leading colon
	if annotation is None:
		return None
	text = _text(annotation).strip()
	if text.startswith(":"):
		text = text[1:].strip()
	return text or None


def _decorator_info(node: Node) -> DecoratorInfo:
	expr = next((c for c in node.named_children if c.type != "comment"), None)
	arguments: List[str] = []
	if expr is not None and expr.type == "call_expression":
		args = expr.child_by_field_name("arguments")
		if args is not None:
			arguments = [_text(a) for a in args.named_children if a.type != "comment"]
		expr = expr.child_by_field_name("function")
	# Collect the rightmost identifier, e.g. common.Get -> Get
	while expr is not None and expr.type == "member_expression":
		expr = expr.child_by_field_name("property")
	return DecoratorInfo(name=_text(expr), arguments=arguments)


def _decorators(node: Optional[Node]) -> List[DecoratorInfo]:
	if node is None:
		return []
	return [_decorator_info(c) for c in node.children if c.type == "decorator"]


def _parameter(node: Node) -> ParamDecl:
	pattern = node.child_by_field_name("pattern")
	return ParamDecl(
		name=_text(pattern),
		type=_type_text(node.child_by_field_name("type")),
		optional=any(c.type == "?" for c in node.children),
		decorators=_decorators(node),
	)


def _parameters(node: Optional[Node]) -> List[ParamDecl]:
	if node is None:
		return []
	return [_parameter(c) for c in node.named_children if c.type in PARAMETER_NODES]


def _modifiers(node: Node) -> List[str]:
	modifiers: List[str] = []
	for child in node.children:
		if child.type in MODIFIER_NODES:
			modifiers.append(_text(child))
		elif child.type in MODIFIER_KEYWORDS:
			modifiers.append(child.type)
	return modifiers


def _method(node: Node, leading: List[DecoratorInfo]) -> MethodDecl:
	return MethodDecl(
		name=_text(node.child_by_field_name("name")),
		parameters=_parameters(node.child_by_field_name("parameters")),
		return_type=_type_text(node.child_by_field_name("return_type")),
		modifiers=_modifiers(node),
		decorators=leading + _decorators(node),
	)


def _class(node: Node, outer: List[DecoratorInfo]) -> ClassDecl:
	methods: List[MethodDecl] = []
	pending: List[DecoratorInfo] = []
	body = node.child_by_field_name("body")
	for member in body.children if body is not None else []:
		if member.type == "decorator":
			pending.append(_decorator_info(member))
		elif member.type == "method_definition":
			methods.append(_method(member, pending))
			pending = []
		elif member.type not in ("comment", "{", "}", ";"):
			pending = []
	name = node.child_by_field_name("name")
	return ClassDecl(
		name=_text(name) if name is not None else None,
		decorators=outer + _decorators(node),
		methods=methods,
	)


def _interface(node: Node) -> InterfaceDecl:
	properties: List[PropertyDecl] = []
	body = node.child_by_field_name("body")
	for member in body.named_children if body is not None else []:
		if member.type != "property_signature":
			continue
		properties.append(
			PropertyDecl(
				name=_text(member.child_by_field_name("name")),
				type=_type_text(member.child_by_field_name("type")),
				optional=any(c.type == "?" for c in member.children),
			)
		)
	return InterfaceDecl(name=_text(node.child_by_field_name("name")), properties=properties)


def _enum(node: Node) -> EnumDecl:
	members: List[str] = []
	body = node.child_by_field_name("body")
	for member in body.named_children if body is not None else []:
		if member.type == "enum_assignment":
			member = member.child_by_field_name("name")
		elif member.type not in ("property_identifier", "string"):
			continue
		members.append(_text(member).strip("'\""))
	return EnumDecl(name=_text(node.child_by_field_name("name")), members=members)


def _top_level(root: Node) -> Iterator[tuple]:
	"""Yield (declaration node, decorators found on a wrapping export) pairs."""
	for child in root.named_children:
		if child.type == "export_statement":
			declaration = child.child_by_field_name("declaration")
			if declaration is None:
				declaration = next((c for c in child.named_children if c.type in CLASS_NODES), None)
			if declaration is not None:
				yield declaration, _decorators(child)
		else:
			yield child, []


def parse_declarations(path: str, text: str) -> FileDecls:
	tree = get_parser(grammar_for(path)).parse(text.encode("utf-8"))
	classes: List[ClassDecl] = []
	interfaces: List[InterfaceDecl] = []
	aliases: List[TypeAliasDecl] = []
	enums: List[EnumDecl] = []

	for node, outer in _top_level(tree.root_node):
		if node.type in CLASS_NODES:
			classes.append(_class(node, outer))
		elif node.type == "interface_declaration":
			interfaces.append(_interface(node))
		elif node.type == "type_alias_declaration":
			aliases.append(TypeAliasDecl(name=_text(node.child_by_field_name("name"))))
		elif node.type == "enum_declaration":
			enums.append(_enum(node))

	return FileDecls(
		path=path,
		classes=classes,
		interfaces=interfaces,
		type_aliases=aliases,
		enums=enums,
	)
