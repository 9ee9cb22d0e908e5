from textwrap import dedent

from routescan.model import Framework
from routescan.patterns import extract_pattern_routes, resolve_handler_name


def test_call_style_routes():
	text = dedent(
		"""
		app.get('/users', async function listUsers(req, res) {
			res.json([])
		})
		app.post("/users", (req, res) => res.status(201).end())
		fastify.delete(`/users/:id`, handler)
		"""
	)
	routes = extract_pattern_routes(text)
	assert [(r.method, r.path, r.framework) for r in routes] == [
		("GET", "/users", Framework.EXPRESS),
		("POST", "/users", Framework.EXPRESS),
		("DELETE", "/users/:id", Framework.FASTIFY),
	]
	assert routes[0].handler == "listUsers"
	assert routes[1].handler == "anonymous"
	assert all(r.middleware == [] for r in routes)


def test_router_receiver_is_labelled_koa():
	routes = extract_pattern_routes("router.patch('/items/:id', updateItem)\n")
	assert len(routes) == 1
	assert routes[0].framework == Framework.KOA
	assert routes[0].method == "PATCH"


def test_call_style_parameters_are_fixed():
	routes = extract_pattern_routes("app.get('/a', function show(id) {})\n")
	params = routes[0].parameters
	assert [(p.name, p.type, p.optional) for p in params] == [
		("req", "Request", False),
		("res", "Response", False),
		("next", "NextFunction", True),
	]


def test_handler_name_resolution():
	assert resolve_handler_name("const getUsers = (req,res) => {}") == "getUsers"
	assert resolve_handler_name("function createUser(req, res) {") == "createUser"
	assert resolve_handler_name("async removeUser(req, res) {") == "removeUser"
	assert resolve_handler_name("(req, res) => res.send('ok'))") == "anonymous"
	assert resolve_handler_name("controller.list)") == "anonymous"


def test_annotation_style_routes():
	text = dedent(
		"""
		export class UsersController {
			@Get(':id')
			@UseGuards(AuthGuard)
			async findOne(@Param('id') id: string) {}

			@Post('')
			create() {}

			@Delete(':id')
			@UseGuards(AuthGuard('jwt'))
			remove() {}
		}
		"""
	)
	routes = extract_pattern_routes(text)
	assert [(r.method, r.path, r.handler) for r in routes] == [
		("GET", ":id", "findOne"),
		("POST", "/", "create"),
		("DELETE", ":id", "remove"),
	]
	assert all(r.framework == Framework.NESTJS for r in routes)


def test_no_implicit_deduplication():
	text = dedent(
		"""
		app.get('/health', function health(req, res) {})

		class HealthController {
			@Get('/health')
			health() {}
		}
		"""
	)
	routes = extract_pattern_routes(text)
	assert len(routes) == 2
	assert {r.framework for r in routes} == {Framework.EXPRESS, Framework.NESTJS}
	assert all(r.path == "/health" and r.method == "GET" for r in routes)


def test_scans_are_independent_between_calls():
	text = "app.get('/one', a)\napp.get('/two', b)\n"
	first = extract_pattern_routes(text)
	second = extract_pattern_routes(text)
	assert [r.path for r in first] == [r.path for r in second] == ["/one", "/two"]


def test_no_match_yields_nothing():
	assert extract_pattern_routes("const x = 1;\nconsole.log(app);\n") == []
