"""Static extraction of a web service's HTTP surface from its TypeScript sources.

Modules:
- fs_scan.py: Build-configuration loading and source file selection.
- ts_parse.py: tree-sitter parsing of classes, interfaces, aliases and enums.
- patterns.py: Textual extraction of call-style and annotation-style routes.
- declarations.py: Controller/service classification and type extraction.
- assemble.py: Per-file merging of both extractors into an analysis result.
- grouping.py: Partitioning of routes into documentation modules.
- detect.py: Framework label guessed from package.json and file names.
- summarize.py: Deterministic Markdown rendering of results and modules.
- config.py: Run settings.
- errors.py: Exceptions that abort a run.
- logs.py: loguru sink setup.
- model.py: Data structures for extracted entities.
"""

__all__ = [
	"fs_scan",
	"ts_parse",
	"patterns",
	"declarations",
	"assemble",
	"grouping",
	"detect",
	"summarize",
	"config",
	"errors",
	"logs",
	"model",
]
