from textwrap import dedent

from routescan.ts_parse import grammar_for, parse_declarations


SOURCE = dedent(
	"""
	import { Controller, Get, Param } from '@nestjs/common';

	@Controller('users')
	export class UsersController {
		constructor(private readonly users: UsersService) {}

		@Get(':id')
		findOne(@Param('id') id: string, verbose?: boolean): Promise<User> {
			return this.users.find(id);
		}

		private helper() {}
	}

	export interface User {
		id: string;
		nickname?: string;
		greet(): void;
	}

	export type UserId = string;

	enum Role {
		Admin = 'admin',
		Member,
	}
	"""
)


def test_parse_declarations(tmp_path):
	p = tmp_path / "users.controller.ts"
	p.write_text(SOURCE)
	decls = parse_declarations(str(p), p.read_text())

	assert [c.name for c in decls.classes] == ["UsersController"]
	cls = decls.classes[0]
	assert cls.has_decorator("Controller")
	assert cls.decorator("Controller").arguments == ["'users'"]
	assert cls.name_matches("controller")

	methods = {m.name: m for m in cls.methods}
	assert set(methods) == {"constructor", "findOne", "helper"}
	find_one = methods["findOne"]
	assert [d.name for d in find_one.decorators] == ["Get"]
	assert find_one.return_type == "Promise<User>"
	assert [(p.name, p.type, p.optional) for p in find_one.parameters] == [
		("id", "string", False),
		("verbose", "boolean", True),
	]
	assert [d.name for d in find_one.parameters[0].decorators] == ["Param"]
	assert "private" in methods["helper"].modifiers

	assert [i.name for i in decls.interfaces] == ["User"]
	assert [(p.name, p.type, p.optional) for p in decls.interfaces[0].properties] == [
		("id", "string", False),
		("nickname", "string", True),
	]
	assert [a.name for a in decls.type_aliases] == ["UserId"]
	assert decls.enums[0].name == "Role"
	assert decls.enums[0].members == ["Admin", "Member"]


def test_member_expression_decorator_name():
	text = "@nest.Injectable()\nexport class Store {}\n"
	decls = parse_declarations("store.ts", text)
	assert decls.classes[0].has_decorator("Injectable")


def test_grammar_selection():
	assert grammar_for("a/b.ts") == "typescript"
	assert grammar_for("a/b.tsx") == "tsx"
	assert grammar_for("a/b.js") == "tsx"
