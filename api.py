from __future__ import annotations

import os
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from routescan.assemble import analyze_project
from routescan.config import Settings
from routescan.detect import detect_framework
from routescan.errors import RouteScanError
from routescan.grouping import build_module_chunks
from routescan.model import AnalysisResult, FrameworkInfo, ModuleChunk


app = FastAPI(title="Route Scan Analyzer")


class AnalyzeRequest(BaseModel):
	root_path: str
	tsconfig: Optional[str] = None


def _root(path: str) -> str:
	root = os.path.abspath(path)
	if not os.path.isdir(root):
		raise HTTPException(status_code=400, detail=f"Invalid root_path: {root}")
	return root


def _analyze(req: AnalyzeRequest) -> AnalysisResult:
	try:
		return analyze_project(_root(req.root_path), Settings(), tsconfig=req.tsconfig)
	except RouteScanError as e:
		raise HTTPException(status_code=400, detail=str(e)) from e


@app.post("/analyze", response_model=AnalysisResult)
def analyze(req: AnalyzeRequest) -> AnalysisResult:
	return _analyze(req)


@app.post("/modules", response_model=List[ModuleChunk])
def modules(req: AnalyzeRequest) -> List[ModuleChunk]:
	return build_module_chunks(_analyze(req))


@app.post("/detect", response_model=FrameworkInfo)
def detect(req: AnalyzeRequest) -> FrameworkInfo:
	return detect_framework(_root(req.root_path))


def create_app() -> FastAPI:
	return app
