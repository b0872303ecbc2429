"""
Visual Coder Compiler: Graph JSON Schema + Validator
====================================================
Structural checks for a saved editor graph, used by the command line driver.
The builder itself is permissive and never calls this; run it when a file
should be rejected up front rather than compiled into empty sequences.

Canonical JSON format
---------------------

    {
      "name":  "bubble-sort",                        // label (str, optional)
      "nodes": [
        {
          "id":   "node_1",                          // unique (str, required)
          "type": "assign",                          // editor type tag (str, required)
          "data": {"varName": "x", "value": "5"}     // kind fields (object, optional)
        }
      ],
      "edges": [
        {
          "id":           "e1",                      // (str, optional)
          "source":       "start",                   // node id (str, required)
          "target":       "node_1",                  // node id (str, required)
          "sourceHandle": "next"                     // port label (str, optional)
        }
      ]
    }

A saved project may wrap this in ``{"diagram": {...}}``; ``validate`` and
``validate_file`` unwrap it.
"""

from __future__ import annotations

import json
import warnings
from pathlib import Path
from typing import Any, Dict, List, Union

from .graph import NodeKind, resolve_kind


class SchemaError(ValueError):
    """Raised when graph JSON fails structural validation."""


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise SchemaError(message)


def _require_keys(obj: Dict, keys: List[str], context: str) -> None:
    for key in keys:
        _require(key in obj, f"{context}: missing required field '{key}'")


def unwrap(data: Any) -> Any:
    """Return the graph object inside a saved-project wrapper, if any."""
    if isinstance(data, dict) and "nodes" not in data and isinstance(data.get("diagram"), dict):
        return data["diagram"]
    return data


# ── Public validator ─────────────────────────────────────────────────────────

def validate(data: Dict[str, Any], *, strict: bool = False) -> None:
    """
    Validate a parsed graph JSON dict.

    Args:
        data:   A pre-parsed dict (result of json.load / json.loads).
        strict: When True, raise SchemaError for unknown node types.
                When False (default), unknown types produce a warning.

    Raises:
        SchemaError: On any structural violation.
    """
    data = unwrap(data)
    _require(isinstance(data, dict), "graph JSON must be a JSON object at the top level")
    _require_keys(data, ["nodes", "edges"], "graph root")
    _require(isinstance(data["nodes"], list), "nodes must be a list")
    _require(isinstance(data["edges"], list), "edges must be a list")

    # ── Validate nodes ──────────────────────────────────────────────────────

    node_ids: set[str] = set()

    for i, node in enumerate(data["nodes"]):
        ctx = f"nodes[{i}]"
        _require(isinstance(node, dict), f"{ctx}: each node must be a JSON object")
        _require_keys(node, ["id", "type"], ctx)
        _require(isinstance(node["id"],   str), f"{ctx}.id must be a string")
        _require(isinstance(node["type"], str), f"{ctx}.type must be a string")
        _require(node["id"] not in node_ids, f"{ctx}: duplicate node id '{node['id']}'")
        node_ids.add(node["id"])

        if "data" in node:
            _require(isinstance(node["data"], dict), f"{ctx}.data must be an object")

        if resolve_kind(node["type"], node.get("data") or {}) is NodeKind.UNKNOWN:
            msg = f"{ctx}: unknown node type '{node['type']}'"
            if strict:
                raise SchemaError(msg)
            warnings.warn(msg + " (it will compile to a placeholder comment)", stacklevel=2)

    # ── Validate edges ──────────────────────────────────────────────────────

    for i, edge in enumerate(data["edges"]):
        ctx = f"edges[{i}]"
        _require(isinstance(edge, dict), f"{ctx}: each edge must be a JSON object")
        _require_keys(edge, ["source", "target"], ctx)

        for key in ("source", "target"):
            _require(isinstance(edge[key], str), f"{ctx}.{key} must be a string")
        for key in ("sourceHandle", "targetHandle"):
            if edge.get(key) is not None:
                _require(isinstance(edge[key], str), f"{ctx}.{key} must be a string or null")

        _require(edge["source"] in node_ids,
                 f"{ctx}: source '{edge['source']}' not found in nodes")
        _require(edge["target"] in node_ids,
                 f"{ctx}: target '{edge['target']}' not found in nodes")


def validate_file(path: Union[str, Path], *, strict: bool = False) -> Dict[str, Any]:
    """
    Load and validate a graph JSON file.

    Returns:
        The parsed graph dict (unwrapped from a saved-project wrapper).

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
        SchemaError: If the graph structure is invalid.
    """
    path = Path(path)
    with path.open(encoding="utf-8") as fh:
        data = json.load(fh)
    validate(data, strict=strict)
    return unwrap(data)


__all__ = ["SchemaError", "unwrap", "validate", "validate_file"]
