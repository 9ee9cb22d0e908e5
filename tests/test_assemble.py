import json
from textwrap import dedent

import pytest

from routescan.assemble import analyze_project
from routescan.config import Settings
from routescan.errors import AnalysisInputError, ConfigurationError
from routescan.model import Framework


CONTROLLER = dedent(
	"""
	import { Controller, Get, Post, Body } from '@nestjs/common';

	@Controller('users')
	export class UsersController {
		constructor(private readonly users: UsersService) {}

		@Get(':id')
		findOne(@Param('id') id: string) {
			return this.users.find(id);
		}

		@Post()
		create(@Body() dto: CreateUserDto) {}
	}
	"""
)

SERVICE = dedent(
	"""
	@Injectable()
	export class UsersService {
		find(id: string): User {}
		private cache() {}
	}

	export interface User { id: string; email?: string }
	export enum Role { Admin, Member }
	"""
)

SERVER = dedent(
	"""
	const app = express();
	app.get('/health', function health(req, res) { res.send('ok') });
	"""
)


@pytest.fixture
def project(tmp_path):
	(tmp_path / "package.json").write_text(json.dumps({"dependencies": {"@nestjs/core": "10"}}))
	(tmp_path / "tsconfig.json").write_text('{ "compilerOptions": {}, // comment\n}')
	src = tmp_path / "src"
	src.mkdir()
	(src / "users.controller.ts").write_text(CONTROLLER)
	(src / "users.service.ts").write_text(SERVICE)
	(src / "server.ts").write_text(SERVER)
	(src / "users.controller.spec.ts").write_text("app.get('/ignored', function ignored() {})\n")
	return tmp_path


def test_analyze_project(project):
	result = analyze_project(str(project), Settings())

	assert result.framework == "nestjs"
	assert [c.name for c in result.controllers] == ["UsersController"]
	assert [s.name for s in result.services] == ["UsersService"]
	assert [(t.name, t.kind) for t in result.types] == [("User", "interface"), ("Role", "enum")]

	paths = [(r.method, r.path, r.framework) for r in result.routes]
	assert ("GET", "/health", Framework.EXPRESS) in paths
	assert ("GET", "/users/:id", Framework.NESTJS) in paths
	assert ("POST", "/users", Framework.NESTJS) in paths
	# the @Get(':id') annotation is also picked up textually, without its base path
	assert ("GET", ":id", Framework.NESTJS) in paths
	assert len(result.routes) == 4
	assert all("/ignored" != r.path for r in result.routes)

	meta = result.metadata
	assert (meta.total_routes, meta.total_controllers, meta.total_services, meta.total_types) == (4, 1, 1, 2)
	assert meta.analysis_time >= 0


def test_controller_routes_also_flattened(project):
	result = analyze_project(str(project), Settings())
	for route in result.controllers[0].routes:
		assert route in result.routes


def test_forced_framework_label(project):
	settings = Settings(framework={"force": "koa"})
	assert analyze_project(str(project), settings).framework == "koa"


def test_missing_build_configuration_is_fatal(project):
	(project / "tsconfig.json").unlink()
	with pytest.raises(ConfigurationError):
		analyze_project(str(project), Settings())


def test_invalid_root(tmp_path):
	with pytest.raises(AnalysisInputError):
		analyze_project(str(tmp_path / "missing"), Settings())


def test_undecodable_source_file_aborts_run(project):
	(project / "src" / "bad.ts").write_bytes(b"app.get('/x', \xff\xfe handler)\n")
	with pytest.raises(UnicodeDecodeError):
		analyze_project(str(project), Settings())
