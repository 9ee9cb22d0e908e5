from __future__ import annotations

import argparse
import json
import os
import sys
from datetime import datetime, timezone
from typing import List

import uvicorn
from loguru import logger

from routescan.assemble import analyze_project
from routescan.config import Settings, config_template, load_settings
from routescan.detect import detect_framework
from routescan.errors import RouteScanError
from routescan.grouping import build_module_chunks
from routescan.logs import configure_logging
from routescan.model import AnalysisResult, ModuleChunk
from routescan.summarize import render_chunk, render_result


def _timestamp() -> str:
	return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S-%fZ")


def analysis_filename(settings: Settings) -> str:
	name = settings.files.analysis_filename
	if not settings.files.timestamp_files:
		return name
	stem, ext = os.path.splitext(name)
	return f"{stem}-{_timestamp()}{ext or '.json'}"


def write_text(path: str, payload: str) -> None:
	parent = os.path.dirname(path)
	if parent:
		os.makedirs(parent, exist_ok=True)
	with open(path, "w", encoding="utf-8") as fh:
		fh.write(payload)


def write_chunks(chunks: List[ModuleChunk], output_dir: str) -> None:
	os.makedirs(output_dir, exist_ok=True)
	for chunk in chunks:
		json_path = os.path.join(output_dir, f"{chunk.module_name}-analysis.json")
		write_text(json_path, chunk.model_dump_json(indent=2))
		write_text(os.path.join(output_dir, f"{chunk.module_name}.md"), render_chunk(chunk))
		logger.info(f"{chunk.module_name}: {len(chunk.routes)} routes written to {output_dir}")


def cmd_analyze(args: argparse.Namespace, settings: Settings) -> None:
	if args.framework:
		settings = settings.model_copy(update={"framework": settings.framework.model_copy(update={"force": args.framework})})
	logger.info(f"Analyzing project: {args.path}")
	result = analyze_project(args.path, settings, tsconfig=args.tsconfig)

	if args.output or settings.files.save_raw_analysis:
		output = args.output or os.path.join(settings.files.output_dir, analysis_filename(settings))
		write_text(output, result.model_dump_json(indent=2))
		logger.info(f"Analysis saved to {output}")
	if args.markdown:
		write_text(args.markdown, render_result(result))
		logger.info(f"Overview saved to {args.markdown}")
	if args.chunks_dir:
		write_chunks(build_module_chunks(result), args.chunks_dir)


def cmd_chunks(args: argparse.Namespace, settings: Settings) -> None:
	if not os.path.isfile(args.input):
		raise RouteScanError(f"Analysis file not found: {args.input}")
	with open(args.input, "r", encoding="utf-8") as fh:
		result = AnalysisResult.model_validate_json(fh.read())
	chunks = build_module_chunks(result)
	logger.info(f"Found {len(chunks)} modules to document")
	write_chunks(chunks, args.output_dir or os.path.join(settings.files.output_dir, "chunks"))


def cmd_detect(args: argparse.Namespace, settings: Settings) -> None:
	info = detect_framework(os.path.abspath(args.path))
	print(f"Framework: {info.framework}")
	print(f"Confidence: {info.confidence}%")
	if args.verbose:
		print("Indicators:")
		for indicator in info.indicators:
			print(f"  - {indicator}")


def cmd_config(args: argparse.Namespace) -> None:
	with open(args.output, "w", encoding="utf-8") as fh:
		json.dump(config_template(args.template), fh, indent=2)
	print(f"Configuration file generated: {args.output}")


def cmd_config_validate(args: argparse.Namespace) -> None:
	settings = load_settings(args.config)
	print("Configuration is valid")
	print(json.dumps(settings.model_dump(), indent=2))


def cmd_serve(args: argparse.Namespace) -> None:
	uvicorn.run("api:app", host=args.host, port=args.port, reload=args.reload)


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(prog="routescan")
	parser.add_argument("-c", "--config", help="Configuration file path")
	parser.add_argument("--verbose", action="store_true", help="Verbose output")
	sub = parser.add_subparsers(dest="cmd", required=True)

	pa = sub.add_parser("analyze", help="Analyze a project and save the analysis JSON")
	pa.add_argument("path", help="Path to project root")
	pa.add_argument("--tsconfig", help="Build configuration, relative to the project root")
	pa.add_argument("-o", "--output", help="Output file path")
	pa.add_argument("--chunks-dir", help="Also write one analysis per module into this directory")
	pa.add_argument("--markdown", help="Also write a Markdown overview to this file")
	pa.add_argument("-f", "--framework", help="Force the framework label")
	pa.set_defaults(func=cmd_analyze)

	pc = sub.add_parser("chunks", help="Split a saved analysis into per-module documents")
	pc.add_argument("input", help="Analysis JSON file path")
	pc.add_argument("-o", "--output-dir", help="Output directory")
	pc.set_defaults(func=cmd_chunks)

	pd = sub.add_parser("detect", help="Detect the framework of a project")
	pd.add_argument("path", help="Path to project root")
	pd.add_argument("-v", dest="verbose", action="store_true", help="Show indicators")
	pd.set_defaults(func=cmd_detect)

	pg = sub.add_parser("config", help="Write a configuration file template")
	pg.add_argument("-o", "--output", default="autodocgen.config.json")
	pg.add_argument("--template", choices=["basic", "minimal", "full"], default="basic")
	pg.set_defaults(func=cmd_config, needs_settings=False)

	pv = sub.add_parser("config-validate", help="Validate a configuration file")
	pv.add_argument("-c", "--config", dest="config", default="autodocgen.config.json")
	pv.set_defaults(func=cmd_config_validate, needs_settings=False)

	ps = sub.add_parser("serve", help="Run FastAPI server")
	ps.add_argument("--host", default="127.0.0.1")
	ps.add_argument("--port", type=int, default=8000)
	ps.add_argument("--reload", action="store_true")
	ps.set_defaults(func=cmd_serve, needs_settings=False)
	return parser


def main(argv: List[str] | None = None) -> int:
	args = build_parser().parse_args(argv)
	try:
		if not getattr(args, "needs_settings", True):
			configure_logging(verbose=args.verbose)
			args.func(args)
			return 0
		settings = load_settings(args.config, verbose=args.verbose or None)
		configure_logging(settings.log_level, settings.verbose)
		args.func(args, settings)
	except RouteScanError as e:
		logger.error(f"{args.cmd} failed: {e}")
		return 1
	return 0


if __name__ == "__main__":
	sys.exit(main())
