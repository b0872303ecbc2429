"""
Visual Coder Compiler
=====================
Turns an editor graph of typed blocks into source code.

Pipeline:
    nodes + edges  →  [builder]   →  Program (IR)
    Program        →  [emitters]  →  C# / C++ / Java / Python source str

Public API
----------
    from visualcoder.compiler import build, generate

    program = build(nodes, edges)
    print(generate("java", program))
    # or, in one step
    print(compile_graph(nodes, edges, "python"))

``generate`` also accepts the JSON form of the IR (``program.to_dict()``),
which is what the HTTP layer passes through.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Union

from .builder import IRBuilder, build
from .emitters import Language, UnsupportedLanguage, get_emitter, parse_language
from .graph import EdgeLike, NodeLike
from .ir import InvalidIR, Program


def generate(
    language: Union[Language, str],
    ir: Union[Program, Mapping[str, Any]],
    block_scoped_declarations: Optional[bool] = None,
) -> str:
    """
    Render ``ir`` in one target language.

    Raises:
        UnsupportedLanguage: the selector is not one of the Language values.
        InvalidIR:           ``ir`` is not a Program (missing program marker).
    """
    emitter = get_emitter(language, block_scoped_declarations=block_scoped_declarations)
    return emitter.emit(ir)


def compile_graph(
    nodes: Iterable[NodeLike],
    edges: Iterable[EdgeLike],
    language: Union[Language, str],
) -> str:
    """Build the IR from a graph and render it in ``language``."""
    # Reject the selector before doing any graph work.
    parse_language(language)
    return generate(language, build(nodes, edges))


__all__ = [
    "IRBuilder",
    "build",
    "generate",
    "compile_graph",
    "Language",
    "UnsupportedLanguage",
    "InvalidIR",
    "Program",
]
