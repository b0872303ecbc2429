"""
Code generation REST routes.

All routes are mounted under /api by main.py.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from visualcoder.compiler import InvalidIR, UnsupportedLanguage, build, generate
from visualcoder.compiler.emitters import Language, parse_language

logger = logging.getLogger(__name__)

router = APIRouter()


# ── Request bodies ────────────────────────────────────────────────────────────

# Editor ids may arrive as numbers; the graph loader stringifies them.
NodeId = Union[str, int]


class NodeBody(BaseModel):
    id: NodeId
    type: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)


class EdgeBody(BaseModel):
    id: Optional[NodeId] = None
    source: NodeId
    target: NodeId
    sourceHandle: Optional[str] = None
    targetHandle: Optional[str] = None


class BuildBody(BaseModel):
    nodes: List[NodeBody] = Field(default_factory=list)
    edges: List[EdgeBody] = Field(default_factory=list)


class GenerateBody(BaseModel):
    language: str
    ir: Any = None


class CompileBody(BuildBody):
    language: str


def _graph(body: BuildBody):
    return (
        [n.model_dump() for n in body.nodes],
        [e.model_dump() for e in body.edges],
    )


def _language_or_400(selector: str) -> Language:
    try:
        return parse_language(selector)
    except UnsupportedLanguage:
        raise HTTPException(status_code=400, detail="Unsupported language")


def _render(language: Language, ir: Any) -> str:
    try:
        return generate(language, ir)
    except InvalidIR as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except Exception as exc:
        logger.exception("Code generation error")
        raise HTTPException(
            status_code=500,
            detail={"error": "Failed to generate code", "details": str(exc)},
        )


# ── GET /languages ────────────────────────────────────────────────────────────

@router.get("/languages")
async def list_languages() -> Dict[str, List[str]]:
    return {"languages": [lang.value for lang in Language]}


# ── POST /build ───────────────────────────────────────────────────────────────

@router.post("/build")
async def build_ir(body: BuildBody) -> Dict[str, Any]:
    nodes, edges = _graph(body)
    return {"ir": build(nodes, edges).to_dict()}


# ── POST /generate ────────────────────────────────────────────────────────────

@router.post("/generate")
async def generate_code(body: GenerateBody) -> Dict[str, Any]:
    language = _language_or_400(body.language)
    return {"code": _render(language, body.ir)}


# ── POST /compile ─────────────────────────────────────────────────────────────

@router.post("/compile")
async def compile_code(body: CompileBody) -> Dict[str, Any]:
    language = _language_or_400(body.language)
    nodes, edges = _graph(body)
    program = build(nodes, edges)
    return {"code": _render(language, program), "ir": program.to_dict()}
