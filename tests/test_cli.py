import json

from cli import main


def test_analyze_and_chunks(express_project, tmp_path, monkeypatch):
	monkeypatch.chdir(tmp_path)
	output = tmp_path / "out" / "analysis.json"
	chunks_dir = tmp_path / "chunks"
	overview = tmp_path / "overview.md"

	args = ["analyze", str(express_project), "-o", str(output), "--chunks-dir", str(chunks_dir), "--markdown", str(overview)]
	assert main(args) == 0
	assert "3 routes, 0 controllers" in overview.read_text()
	data = json.loads(output.read_text())
	assert data["metadata"]["total_routes"] == 3
	assert sorted(p.name for p in chunks_dir.iterdir()) == [
		"app-analysis.json",
		"app.md",
		"orders-analysis.json",
		"orders.md",
	]
	orders = json.loads((chunks_dir / "orders-analysis.json").read_text())
	assert orders["metadata"]["module_name"] == "orders"
	assert "| POST | `/orders` | anonymous |" in (chunks_dir / "orders.md").read_text()

	regrouped = tmp_path / "regrouped"
	assert main(["chunks", str(output), "-o", str(regrouped)]) == 0
	assert (regrouped / "orders.md").exists()


def test_analyze_failure_exit_code(tmp_path, monkeypatch):
	monkeypatch.chdir(tmp_path)
	assert main(["analyze", str(tmp_path)]) == 1


def test_config_commands(tmp_path, monkeypatch, capsys):
	monkeypatch.chdir(tmp_path)
	assert main(["config", "--template", "minimal"]) == 0
	assert json.loads((tmp_path / "autodocgen.config.json").read_text()) == {
		"files": {"output_dir": "./docs"}
	}
	assert main(["config-validate"]) == 0
	assert "Configuration is valid" in capsys.readouterr().out


def test_detect_command(express_project, capsys, monkeypatch, tmp_path):
	monkeypatch.chdir(tmp_path)
	assert main(["detect", str(express_project), "-v"]) == 0
	out = capsys.readouterr().out
	assert "Framework: express" in out
	assert "express dependency" in out
