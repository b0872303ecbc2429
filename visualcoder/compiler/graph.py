"""
Visual Coder Compiler: Graph Model
==================================
The node/edge structure delivered by the visual editor, and a permissive
loader that turns editor JSON into it.

Editor JSON
-----------

    {
      "nodes": [
        {"id": "start",  "type": "input",  "data": {"label": "Start"}},
        {"id": "node_1", "type": "assign", "data": {"varName": "x", "value": "5", "dataType": "int"}},
        {"id": "node_2", "type": "if",     "data": {"condition": "x > 3"}}
      ],
      "edges": [
        {"id": "e1", "source": "start",  "target": "node_1"},
        {"id": "e2", "source": "node_1", "target": "node_2"},
        {"id": "e3", "source": "node_2", "target": "node_3", "sourceHandle": "true"}
      ]
    }

The loader never raises on bad shapes: entries that are not objects or lack an
id are dropped, unknown node types are kept as ``NodeKind.UNKNOWN``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

logger = logging.getLogger(__name__)


# ── Node kinds ───────────────────────────────────────────────────────────────

class NodeKind(str, Enum):
    VARIABLE_DECLARE = "variableDeclare"
    VARIABLE_UPDATE  = "variableUpdate"
    ARRAY_VALUES     = "arrayValues"
    ARRAY_SIZE       = "arraySize"
    PRINT            = "print"
    IF               = "if"
    SWITCH           = "switch"
    FOR              = "for"
    WHILE            = "while"
    FUNCTION_DEFINE  = "functionDefine"
    FUNCTION_CALL    = "functionCall"
    CLASS_DEFINE     = "classDefine"
    OBJECT_CREATE    = "createObject"
    ENTRY            = "input"
    UNKNOWN          = "unknown"


# Editor type tags → kind.  "array" is resolved by its declarationType.
_TYPE_ALIASES: Dict[str, NodeKind] = {
    "assign":         NodeKind.VARIABLE_DECLARE,
    "variableDeclare": NodeKind.VARIABLE_DECLARE,
    "assign2":        NodeKind.VARIABLE_UPDATE,
    "variableUpdate": NodeKind.VARIABLE_UPDATE,
    "arrayValues":    NodeKind.ARRAY_VALUES,
    "arraySize":      NodeKind.ARRAY_SIZE,
    "print":          NodeKind.PRINT,
    "if":             NodeKind.IF,
    "switch":         NodeKind.SWITCH,
    "for":            NodeKind.FOR,
    "while":          NodeKind.WHILE,
    "functionDefine": NodeKind.FUNCTION_DEFINE,
    "functionCall":   NodeKind.FUNCTION_CALL,
    "classDefine":    NodeKind.CLASS_DEFINE,
    "createObject":   NodeKind.OBJECT_CREATE,
    "input":          NodeKind.ENTRY,
    "start":          NodeKind.ENTRY,
    "entry":          NodeKind.ENTRY,
}

ENTRY_NODE_ID = "start"


def resolve_kind(type_name: Optional[str], data: Mapping[str, Any]) -> NodeKind:
    """Map an editor type tag (plus data, for arrays) onto a NodeKind."""
    if type_name == "array":
        if str(data.get("declarationType") or "values") == "size":
            return NodeKind.ARRAY_SIZE
        return NodeKind.ARRAY_VALUES
    return _TYPE_ALIASES.get(type_name or "", NodeKind.UNKNOWN)


# ── Node / Edge ──────────────────────────────────────────────────────────────

@dataclass
class GraphNode:
    id: str
    type: str
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def kind(self) -> NodeKind:
        return resolve_kind(self.type, self.data)

    def text(self, key: str, default: str = "") -> str:
        """Read a data field as text; None and missing both yield ``default``."""
        value = self.data.get(key)
        if value is None:
            return default
        return str(value)


@dataclass
class GraphEdge:
    source: str
    target: str
    source_handle: Optional[str] = None
    target_handle: Optional[str] = None
    id: Optional[str] = None


# ── Loading from editor JSON ─────────────────────────────────────────────────

NodeLike = Union[GraphNode, Mapping[str, Any]]
EdgeLike = Union[GraphEdge, Mapping[str, Any]]


def node_from_json(entry: NodeLike) -> Optional[GraphNode]:
    if isinstance(entry, GraphNode):
        return entry
    if not isinstance(entry, Mapping) or entry.get("id") is None:
        logger.debug(f"Dropping malformed node entry: {entry!r}")
        return None
    data = entry.get("data")
    return GraphNode(
        id=str(entry["id"]),
        type=str(entry.get("type") or ""),
        data=dict(data) if isinstance(data, Mapping) else {},
    )


def edge_from_json(entry: EdgeLike) -> Optional[GraphEdge]:
    if isinstance(entry, GraphEdge):
        return entry
    if not isinstance(entry, Mapping):
        logger.debug(f"Dropping malformed edge entry: {entry!r}")
        return None
    source, target = entry.get("source"), entry.get("target")
    if source is None or target is None:
        logger.debug(f"Dropping edge without endpoints: {entry!r}")
        return None
    return GraphEdge(
        id=None if entry.get("id") is None else str(entry["id"]),
        source=str(source),
        target=str(target),
        source_handle=entry.get("sourceHandle"),
        target_handle=entry.get("targetHandle"),
    )


def load_graph(
    nodes: Iterable[NodeLike],
    edges: Iterable[EdgeLike],
) -> Tuple[List[GraphNode], List[GraphEdge]]:
    """Normalise editor JSON (or already-built objects) into graph objects."""
    graph_nodes = [n for n in (node_from_json(s) for s in nodes or []) if n is not None]
    graph_edges = [e for e in (edge_from_json(s) for s in edges or []) if e is not None]
    return graph_nodes, graph_edges


# ── Text splitting helpers ───────────────────────────────────────────────────

def split_csv(text: Optional[str]) -> List[str]:
    """'a, b,,c' → ['a', 'b', 'c']"""
    if not text:
        return []
    return [part.strip() for part in str(text).split(",") if part.strip()]


def split_typed_params(text: Optional[str]) -> List[Tuple[str, str]]:
    """
    'int a, String b, c' → [('int', 'a'), ('String', 'b'), ('var', 'c')]

    Only the first two words of each item are used.
    """
    params: List[Tuple[str, str]] = []
    for item in split_csv(text):
        words = item.split()
        if len(words) > 1:
            params.append((words[0], words[1]))
        else:
            params.append(("var", words[0]))
    return params


__all__ = [
    "NodeKind",
    "ENTRY_NODE_ID",
    "resolve_kind",
    "GraphNode",
    "GraphEdge",
    "node_from_json",
    "edge_from_json",
    "load_graph",
    "split_csv",
    "split_typed_params",
]
