"""
Visual Coder Compiler: Intermediate Representation
==================================================
A Program is three ordered statement lists (classes, functions, body).  Each
statement variant is its own dataclass with an explicit field set.

    Graph  →  [builder]  →  Program
                               ↓
                         [emitters]  →  C# / C++ / Java / Python source

Design goals:
  - No references back to graph objects (only the originating node id).
  - Serialisable: ``Program.to_dict()`` produces the JSON shape the editor
    protocol uses, ``Program.from_dict()`` reads it back.
  - Closed set of variants; anything unrecognised becomes ``Unknown``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple, Type, Union


PROGRAM_MARKER = "program"


class InvalidIR(ValueError):
    """Raised when a value handed to an emitter is not a Program."""


# ── Statement base ───────────────────────────────────────────────────────────

@dataclass
class Statement:
    # JSON tag used on the wire, and the emitter hook suffix (emit_<kind>).
    TAG: ClassVar[str] = ""
    kind: ClassVar[str] = ""

    def to_dict(self) -> Dict[str, Any]:
        raise NotImplementedError

    def _with_id(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        node_id = getattr(self, "node_id", None)
        if node_id is not None:
            payload["id"] = node_id
        return payload


def _dump(statements: List[Statement]) -> List[Dict[str, Any]]:
    return [s.to_dict() for s in statements]


# ── Variants ─────────────────────────────────────────────────────────────────

@dataclass
class VariableDeclare(Statement):
    TAG: ClassVar[str] = "variable_declaration"
    kind: ClassVar[str] = "variable_declare"

    name: str
    value: str = ""
    data_type: str = ""
    node_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return self._with_id({"type": self.TAG, "var": self.name,
                              "value": self.value, "dataType": self.data_type})


@dataclass
class VariableUpdate(Statement):
    TAG: ClassVar[str] = "variable_update"
    kind: ClassVar[str] = "variable_update"

    name: str
    value: str = ""
    node_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return self._with_id({"type": self.TAG, "var": self.name, "value": self.value})


@dataclass
class ArrayDeclareValues(Statement):
    TAG: ClassVar[str] = "array_assign_values"
    kind: ClassVar[str] = "array_values"

    name: str
    data_type: str = ""
    values: List[str] = field(default_factory=list)
    node_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return self._with_id({"type": self.TAG, "var": self.name,
                              "dataType": self.data_type, "values": list(self.values)})


@dataclass
class ArrayDeclareSize(Statement):
    TAG: ClassVar[str] = "array_assign_size"
    kind: ClassVar[str] = "array_size"

    name: str
    data_type: str = ""
    size: str = ""
    node_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return self._with_id({"type": self.TAG, "var": self.name,
                              "dataType": self.data_type, "size": self.size})


@dataclass
class Print(Statement):
    TAG: ClassVar[str] = "print"
    kind: ClassVar[str] = "print"

    value: str = ""
    node_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return self._with_id({"type": self.TAG, "value": self.value})


@dataclass
class If(Statement):
    TAG: ClassVar[str] = "if"
    kind: ClassVar[str] = "if"

    condition: str = ""
    body: List[Statement] = field(default_factory=list)
    else_body: List[Statement] = field(default_factory=list)
    node_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return self._with_id({"type": self.TAG, "condition": self.condition,
                              "body": _dump(self.body), "elseBody": _dump(self.else_body)})


@dataclass
class SwitchCase:
    value: str
    body: List[Statement] = field(default_factory=list)


@dataclass
class Switch(Statement):
    TAG: ClassVar[str] = "switch"
    kind: ClassVar[str] = "switch"

    subject: str = ""
    cases: List[SwitchCase] = field(default_factory=list)
    default_body: List[Statement] = field(default_factory=list)
    node_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return self._with_id({
            "type": self.TAG,
            "var": self.subject,
            "cases": [{"value": c.value, "body": _dump(c.body)} for c in self.cases],
            "defaultBody": _dump(self.default_body),
        })


@dataclass
class For(Statement):
    TAG: ClassVar[str] = "for"
    kind: ClassVar[str] = "for"

    var: str = ""
    bound: str = ""
    body: List[Statement] = field(default_factory=list)
    node_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return self._with_id({"type": self.TAG, "var": self.var,
                              "range": self.bound, "body": _dump(self.body)})


@dataclass
class While(Statement):
    TAG: ClassVar[str] = "while"
    kind: ClassVar[str] = "while"

    condition: str = ""
    body: List[Statement] = field(default_factory=list)
    node_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return self._with_id({"type": self.TAG, "condition": self.condition,
                              "body": _dump(self.body)})


@dataclass
class FunctionDefine(Statement):
    TAG: ClassVar[str] = "function_define"
    kind: ClassVar[str] = "function_define"

    name: str = ""
    params: List[Tuple[str, str]] = field(default_factory=list)  # (type, name)
    body: List[Statement] = field(default_factory=list)
    node_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return self._with_id({
            "type": self.TAG,
            "name": self.name,
            "params": [{"type": t, "name": n} for t, n in self.params],
            "body": _dump(self.body),
        })


@dataclass
class FunctionCall(Statement):
    TAG: ClassVar[str] = "function_call"
    kind: ClassVar[str] = "function_call"

    name: str = ""
    args: List[str] = field(default_factory=list)
    node_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return self._with_id({"type": self.TAG, "name": self.name, "args": list(self.args)})


@dataclass
class ClassDefine(Statement):
    TAG: ClassVar[str] = "class_define"
    kind: ClassVar[str] = "class_define"

    name: str = ""
    base: str = ""
    members: List[Statement] = field(default_factory=list)
    node_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload = {"type": self.TAG, "name": self.name, "members": _dump(self.members)}
        if self.base:
            payload["inherits"] = self.base
        return self._with_id(payload)


@dataclass
class ObjectCreate(Statement):
    TAG: ClassVar[str] = "object_creation"
    kind: ClassVar[str] = "object_create"

    var: str = ""
    class_name: str = ""
    args: List[str] = field(default_factory=list)
    node_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return self._with_id({"type": self.TAG, "var": self.var,
                              "className": self.class_name, "args": list(self.args)})


@dataclass
class Unknown(Statement):
    TAG: ClassVar[str] = "unknown"
    kind: ClassVar[str] = "unknown"

    # The original node type (or JSON tag) that could not be recognised.
    source_kind: str = ""
    data: Dict[str, Any] = field(default_factory=dict)
    node_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return self._with_id({"type": self.TAG, "kind": self.source_kind,
                              "data": dict(self.data)})


STATEMENT_TYPES: Tuple[Type[Statement], ...] = (
    VariableDeclare, VariableUpdate, ArrayDeclareValues, ArrayDeclareSize,
    Print, If, Switch, For, While, FunctionDefine, FunctionCall,
    ClassDefine, ObjectCreate, Unknown,
)


# ── Program ──────────────────────────────────────────────────────────────────

@dataclass
class Program:
    classes: List[Statement] = field(default_factory=list)
    functions: List[Statement] = field(default_factory=list)
    body: List[Statement] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": PROGRAM_MARKER,
            "classes": _dump(self.classes),
            "functions": _dump(self.functions),
            "body": _dump(self.body),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Program":
        if not isinstance(data, Mapping) or data.get("type") != PROGRAM_MARKER:
            raise InvalidIR("Invalid IR format: expected an object with type 'program'.")
        return cls(
            classes=_load_list(data.get("classes")),
            functions=_load_list(data.get("functions")),
            body=_load_list(data.get("body")),
        )

    def iter_statements(self):
        """Depth-first walk over every statement, nested ones included."""
        for stmt in [*self.classes, *self.functions, *self.body]:
            yield from walk_statements(stmt)


def walk_statements(stmt: Statement):
    yield stmt
    children: List[Statement] = []
    if isinstance(stmt, If):
        children = [*stmt.body, *stmt.else_body]
    elif isinstance(stmt, Switch):
        for case in stmt.cases:
            children.extend(case.body)
        children.extend(stmt.default_body)
    elif isinstance(stmt, (For, While, FunctionDefine)):
        children = list(stmt.body)
    elif isinstance(stmt, ClassDefine):
        children = list(stmt.members)
    for child in children:
        yield from walk_statements(child)


def ensure_program(value: Union[Program, Mapping[str, Any], Any]) -> Program:
    """Accept a Program or its JSON form; anything else is InvalidIR."""
    if isinstance(value, Program):
        return value
    if isinstance(value, Mapping):
        return Program.from_dict(value)
    raise InvalidIR("Invalid IR format: expected a program.")


# ── JSON loading ─────────────────────────────────────────────────────────────

def _text(raw: Mapping[str, Any], key: str) -> str:
    value = raw.get(key)
    return "" if value is None else str(value)


def _texts(raw: Mapping[str, Any], key: str) -> List[str]:
    value = raw.get(key)
    if not isinstance(value, list):
        return []
    return [str(v) for v in value]


def _load_list(raw: Any) -> List[Statement]:
    if not isinstance(raw, list):
        return []
    return [statement_from_dict(item) for item in raw]


def _load_params(raw: Any) -> List[Tuple[str, str]]:
    params: List[Tuple[str, str]] = []
    for item in raw if isinstance(raw, list) else []:
        if isinstance(item, Mapping) and item.get("name"):
            params.append((str(item.get("type") or "var"), str(item["name"])))
    return params


def _load_cases(raw: Any) -> List[SwitchCase]:
    cases: List[SwitchCase] = []
    for item in raw if isinstance(raw, list) else []:
        if isinstance(item, Mapping):
            cases.append(SwitchCase(value=_text(item, "value"), body=_load_list(item.get("body"))))
    return cases


def statement_from_dict(raw: Any) -> Statement:
    """Read one statement from its JSON form.  Never raises."""
    if not isinstance(raw, Mapping):
        return Unknown(source_kind=type(raw).__name__, data={"value": raw})

    tag = raw.get("type")
    node_id = None if raw.get("id") is None else str(raw["id"])

    if tag in ("variable_declaration", "assign"):
        return VariableDeclare(name=_text(raw, "var"), value=_text(raw, "value"),
                               data_type=_text(raw, "dataType"), node_id=node_id)
    if tag in ("variable_update", "assign2"):
        return VariableUpdate(name=_text(raw, "var"), value=_text(raw, "value"), node_id=node_id)
    if tag == "array_assign_values":
        return ArrayDeclareValues(name=_text(raw, "var"), data_type=_text(raw, "dataType"),
                                  values=_texts(raw, "values"), node_id=node_id)
    if tag == "array_assign_size":
        return ArrayDeclareSize(name=_text(raw, "var"), data_type=_text(raw, "dataType"),
                                size=_text(raw, "size"), node_id=node_id)
    if tag == "print":
        return Print(value=_text(raw, "value"), node_id=node_id)
    if tag == "if":
        return If(condition=_text(raw, "condition"), body=_load_list(raw.get("body")),
                  else_body=_load_list(raw.get("elseBody")), node_id=node_id)
    if tag == "switch":
        return Switch(subject=_text(raw, "var"), cases=_load_cases(raw.get("cases")),
                      default_body=_load_list(raw.get("defaultBody")), node_id=node_id)
    if tag == "for":
        return For(var=_text(raw, "var"), bound=_text(raw, "range"),
                   body=_load_list(raw.get("body")), node_id=node_id)
    if tag == "while":
        return While(condition=_text(raw, "condition"), body=_load_list(raw.get("body")),
                     node_id=node_id)
    if tag == "function_define":
        return FunctionDefine(name=_text(raw, "name"), params=_load_params(raw.get("params")),
                              body=_load_list(raw.get("body")), node_id=node_id)
    if tag == "function_call":
        return FunctionCall(name=_text(raw, "name"), args=_texts(raw, "args"), node_id=node_id)
    if tag == "class_define":
        return ClassDefine(name=_text(raw, "name"), base=_text(raw, "inherits"),
                           members=_load_list(raw.get("members")), node_id=node_id)
    if tag == "object_creation":
        return ObjectCreate(var=_text(raw, "var"), class_name=_text(raw, "className"),
                            args=_texts(raw, "args"), node_id=node_id)
    if tag == "unknown":
        data = raw.get("data")
        return Unknown(source_kind=_text(raw, "kind") or "unknown",
                       data=dict(data) if isinstance(data, Mapping) else {}, node_id=node_id)

    return Unknown(source_kind=str(tag), data=dict(raw), node_id=node_id)


__all__ = [
    "PROGRAM_MARKER",
    "InvalidIR",
    "Statement",
    "VariableDeclare",
    "VariableUpdate",
    "ArrayDeclareValues",
    "ArrayDeclareSize",
    "Print",
    "If",
    "SwitchCase",
    "Switch",
    "For",
    "While",
    "FunctionDefine",
    "FunctionCall",
    "ClassDefine",
    "ObjectCreate",
    "Unknown",
    "STATEMENT_TYPES",
    "Program",
    "walk_statements",
    "ensure_program",
    "statement_from_dict",
]
