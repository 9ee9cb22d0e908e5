import json
from textwrap import dedent

import pytest


@pytest.fixture
def express_project(tmp_path):
	root = tmp_path / "service"
	(root / "src").mkdir(parents=True)
	(root / "package.json").write_text(json.dumps({"dependencies": {"express": "^4"}}))
	(root / "tsconfig.json").write_text('{"include": ["src"]}')
	(root / "src" / "routes.ts").write_text(
		dedent(
			"""
			const router = express.Router();
			router.get('/orders', async function listOrders(req, res) {});
			router.post('/orders', createOrder);
			app.get('/', function home(req, res) {});
			"""
		)
	)
	return root
