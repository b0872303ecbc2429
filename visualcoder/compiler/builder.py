"""
Visual Coder Compiler: IR Builder
=================================
Rebuilds structured control flow from the editor's unordered node/edge graph.

    build(nodes, edges)  →  Program(classes, functions, body)

Passes
------
  1. classes    every class-define node; its ``members`` handle is walked.
  2. functions  every function-define node not already placed (class methods
                are placed in pass 1); its ``body`` handle is walked.
  3. body       the entry node's first outgoing edge starts the main sequence.

Successor rules inside a sequence walk
--------------------------------------
  ┌────────────────┬──────────────────────────────┬───────────────────────────────┐
  │ kind           │ nested children              │ main sequence continues via   │
  ├────────────────┼──────────────────────────────┼───────────────────────────────┤
  │ if             │ true → body, false → else    │ next                          │
  │ switch         │ case-<i> per declared case,  │ next                          │
  │                │ default → default body       │                               │
  │ for / while    │ loopBody → body              │ next, else first non-loopBody │
  │ everything else│ none                         │ first outgoing edge           │
  └────────────────┴──────────────────────────────┴───────────────────────────────┘

Placement policy
----------------
Every node is placed at most once.  A walk that reaches an already placed (or
missing) node simply stops.  That breaks cycles, and it also means two
branches wired to reconverge on one node do NOT merge: whichever branch is
walked first keeps the shared node and the other branch ends early.

For ordinary nodes with several outgoing edges the first edge in insertion
order wins; the rest are ignored (logged at debug level).

Nested definitions
------------------
A function-define or class-define reached inside a walk (a class member, a
nested class) is an ordinary node by default: it gets no nested content and
the walk continues along its first outgoing edge, so a member method's body
nodes follow it as further members.  With ``expand_nested_definitions`` on
(constructor flag or ``VISUALCODER_EXPAND_NESTED_DEFINITIONS``) its ``body`` /
``members`` handle is walked instead and the sequence continues via ``next``,
else the first edge not on that handle.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set

from .graph import (
    ENTRY_NODE_ID,
    EdgeLike,
    GraphEdge,
    GraphNode,
    NodeKind,
    NodeLike,
    load_graph,
    split_csv,
    split_typed_params,
)
from .ir import (
    ArrayDeclareSize,
    ArrayDeclareValues,
    ClassDefine,
    For,
    FunctionCall,
    FunctionDefine,
    If,
    ObjectCreate,
    Print,
    Program,
    Statement,
    Switch,
    SwitchCase,
    Unknown,
    VariableDeclare,
    VariableUpdate,
    While,
)

logger = logging.getLogger(__name__)


# ── Handles ──────────────────────────────────────────────────────────────────

HANDLE_TRUE      = "true"
HANDLE_FALSE     = "false"
HANDLE_NEXT      = "next"
HANDLE_LOOP_BODY = "loopBody"
HANDLE_BODY      = "body"
HANDLE_MEMBERS   = "members"
HANDLE_DEFAULT   = "default"


def case_handle(index: int) -> str:
    return f"case-{index}"


# ── Node → statement conversion ──────────────────────────────────────────────

def convert_node(node: GraphNode) -> Statement:
    """Convert one node to its statement form.  Nested bodies start empty."""
    kind = node.kind

    if kind is NodeKind.VARIABLE_DECLARE:
        return VariableDeclare(name=node.text("varName"), value=node.text("value"),
                               data_type=node.text("dataType"), node_id=node.id)
    if kind is NodeKind.VARIABLE_UPDATE:
        return VariableUpdate(name=node.text("varName"), value=node.text("value"),
                              node_id=node.id)
    if kind is NodeKind.ARRAY_VALUES:
        values = node.data.get("values")
        if isinstance(values, list):
            items = [str(v).strip() for v in values if str(v).strip()]
        else:
            items = split_csv(values)
        return ArrayDeclareValues(name=node.text("varName"), data_type=node.text("dataType"),
                                  values=items, node_id=node.id)
    if kind is NodeKind.ARRAY_SIZE:
        return ArrayDeclareSize(name=node.text("varName"), data_type=node.text("dataType"),
                                size=node.text("size"), node_id=node.id)
    if kind is NodeKind.PRINT:
        return Print(value=node.text("value"), node_id=node.id)
    if kind is NodeKind.IF:
        return If(condition=node.text("condition"), node_id=node.id)
    if kind is NodeKind.SWITCH:
        return Switch(subject=node.text("switchVar"), node_id=node.id)
    if kind is NodeKind.FOR:
        return For(var=node.text("varName"), bound=node.text("range"), node_id=node.id)
    if kind is NodeKind.WHILE:
        return While(condition=node.text("condition"), node_id=node.id)
    if kind is NodeKind.FUNCTION_DEFINE:
        return FunctionDefine(name=node.text("name"),
                              params=split_typed_params(node.text("params")),
                              node_id=node.id)
    if kind is NodeKind.FUNCTION_CALL:
        return FunctionCall(name=node.text("name"), args=split_csv(node.text("args")),
                            node_id=node.id)
    if kind is NodeKind.CLASS_DEFINE:
        return ClassDefine(name=node.text("className"), base=node.text("inherits").strip(),
                           node_id=node.id)
    if kind is NodeKind.OBJECT_CREATE:
        return ObjectCreate(var=node.text("varName"), class_name=node.text("className"),
                            args=split_csv(node.text("args")), node_id=node.id)

    logger.warning(f"Unknown node type '{node.type}' (node: {node.id})")
    return Unknown(source_kind=node.type or "unknown", data=dict(node.data), node_id=node.id)


def _declared_cases(node: GraphNode) -> List[str]:
    raw = node.data.get("cases")
    if not isinstance(raw, list):
        return []
    values: List[str] = []
    for case in raw:
        if isinstance(case, dict):
            value = case.get("value")
            values.append("" if value is None else str(value))
        else:
            values.append(str(case))
    return values


# ── Traversal context ────────────────────────────────────────────────────────

@dataclass
class _Traversal:
    """Per-build state.  A fresh instance is created for every build() call."""
    nodes: Dict[str, GraphNode]
    outgoing: Dict[str, List[GraphEdge]]
    placed: Set[str] = field(default_factory=set)

    def edges_from(self, node_id: str) -> List[GraphEdge]:
        return self.outgoing.get(node_id, [])

    def handle_target(self, node_id: str, handle: str) -> Optional[str]:
        for edge in self.edges_from(node_id):
            if edge.source_handle == handle:
                return edge.target
        return None

    def first_target_except(self, node_id: str, handle: str) -> Optional[str]:
        for edge in self.edges_from(node_id):
            if edge.source_handle != handle:
                return edge.target
        return None

    def first_target(self, node_id: str) -> Optional[str]:
        edges = self.edges_from(node_id)
        if not edges:
            return None
        if len(edges) > 1:
            ignored = ", ".join(e.target for e in edges[1:])
            logger.debug(f"Node '{node_id}' has {len(edges)} successors; "
                         f"following '{edges[0].target}', ignoring {ignored}")
        return edges[0].target


# ── Builder ──────────────────────────────────────────────────────────────────

class IRBuilder:
    """
    Builds a Program from graph nodes and edges.

    The builder keeps only the (immutable) input graph on the instance; the
    placement registry is created inside ``build`` and threaded through the
    walk, so one builder can be built repeatedly or from several threads.

    ``expand_nested_definitions`` defaults to the configured setting (off).
    """

    def __init__(self, nodes: Iterable[NodeLike], edges: Iterable[EdgeLike],
                 expand_nested_definitions: Optional[bool] = None):
        self.nodes, self.edges = load_graph(nodes, edges)
        if expand_nested_definitions is None:
            from ..config import get_settings
            expand_nested_definitions = get_settings().expand_nested_definitions
        self.expand_nested_definitions = expand_nested_definitions

    def _index(self) -> _Traversal:
        node_map: Dict[str, GraphNode] = {}
        for node in self.nodes:
            node_map.setdefault(node.id, node)
        outgoing: Dict[str, List[GraphEdge]] = defaultdict(list)
        for edge in self.edges:
            outgoing[edge.source].append(edge)
        return _Traversal(nodes=node_map, outgoing=dict(outgoing))

    def _entry_node(self) -> Optional[GraphNode]:
        for node in self.nodes:
            if node.kind is NodeKind.ENTRY:
                return node
        for node in self.nodes:
            if node.id == ENTRY_NODE_ID:
                return node
        return None

    def build(self) -> Program:
        ctx = self._index()
        program = Program()

        # ── 1. classes ──────────────────────────────────────────────────────
        for node in self.nodes:
            if node.kind is not NodeKind.CLASS_DEFINE or node.id in ctx.placed:
                continue
            ctx.placed.add(node.id)
            cls = convert_node(node)
            cls.members = self._walk_handle(ctx, node.id, HANDLE_MEMBERS)
            program.classes.append(cls)

        # ── 2. free functions ───────────────────────────────────────────────
        for node in self.nodes:
            if node.kind is not NodeKind.FUNCTION_DEFINE or node.id in ctx.placed:
                continue
            ctx.placed.add(node.id)
            func = convert_node(node)
            func.body = self._walk_handle(ctx, node.id, HANDLE_BODY)
            program.functions.append(func)

        # ── 3. main body ────────────────────────────────────────────────────
        entry = self._entry_node()
        if entry is None:
            logger.debug("No entry node found; program body is empty")
        else:
            ctx.placed.add(entry.id)
            program.body = self._walk(ctx, ctx.first_target(entry.id))

        logger.debug(
            f"Built program: {len(program.classes)} classes, "
            f"{len(program.functions)} functions, {len(program.body)} body statements"
        )
        return program

    # ── Sequence walk ────────────────────────────────────────────────────────

    def _walk_handle(self, ctx: _Traversal, node_id: str, handle: str) -> List[Statement]:
        return self._walk(ctx, ctx.handle_target(node_id, handle))

    def _walk(self, ctx: _Traversal, start_id: Optional[str]) -> List[Statement]:
        sequence: List[Statement] = []
        current = start_id

        while current is not None:
            node = ctx.nodes.get(current)
            if node is None:
                logger.debug(f"Edge points at missing node '{current}'; sequence ends")
                break
            if current in ctx.placed:
                logger.debug(f"Node '{current}' already placed; sequence ends")
                break

            ctx.placed.add(current)
            stmt = convert_node(node)
            sequence.append(stmt)
            current = self._populate(ctx, node, stmt)

        return sequence

    def _populate(self, ctx: _Traversal, node: GraphNode, stmt: Statement) -> Optional[str]:
        """Fill nested bodies of ``stmt`` and return the next node id of the sequence."""
        kind = node.kind

        if kind is NodeKind.IF:
            stmt.body = self._walk_handle(ctx, node.id, HANDLE_TRUE)
            stmt.else_body = self._walk_handle(ctx, node.id, HANDLE_FALSE)
            return ctx.handle_target(node.id, HANDLE_NEXT)

        if kind is NodeKind.SWITCH:
            stmt.cases = [
                SwitchCase(value=value,
                           body=self._walk_handle(ctx, node.id, case_handle(index)))
                for index, value in enumerate(_declared_cases(node))
            ]
            stmt.default_body = self._walk_handle(ctx, node.id, HANDLE_DEFAULT)
            return ctx.handle_target(node.id, HANDLE_NEXT)

        if kind in (NodeKind.FOR, NodeKind.WHILE):
            return self._nested_then_next(ctx, node, stmt, HANDLE_LOOP_BODY, "body")

        if self.expand_nested_definitions:
            if kind is NodeKind.FUNCTION_DEFINE:
                return self._nested_then_next(ctx, node, stmt, HANDLE_BODY, "body")
            if kind is NodeKind.CLASS_DEFINE:
                return self._nested_then_next(ctx, node, stmt, HANDLE_MEMBERS, "members")

        return ctx.first_target(node.id)

    def _nested_then_next(self, ctx: _Traversal, node: GraphNode, stmt: Statement,
                          handle: str, attr: str) -> Optional[str]:
        setattr(stmt, attr, self._walk_handle(ctx, node.id, handle))
        following = ctx.handle_target(node.id, HANDLE_NEXT)
        if following is None:
            following = ctx.first_target_except(node.id, handle)
        return following


# ── Public API ───────────────────────────────────────────────────────────────

def build(nodes: Iterable[NodeLike], edges: Iterable[EdgeLike],
          expand_nested_definitions: Optional[bool] = None) -> Program:
    """
    Build a Program from editor nodes and edges.

    Args:
        nodes: GraphNode objects or editor node dicts (``id``, ``type``, ``data``).
        edges: GraphEdge objects or editor edge dicts (``source``, ``target``,
               ``sourceHandle``).
        expand_nested_definitions: walk the body / members of definitions met
               inside a sequence; None reads the configured setting.

    Returns:
        A freshly built Program.  Malformed or dangling structure yields
        empty sequences; this function does not raise on bad graphs.
    """
    return IRBuilder(nodes, edges, expand_nested_definitions).build()


__all__ = ["IRBuilder", "build", "convert_node", "case_handle"]
