"""
Visual Coder Compiler: C-family Emitter
=======================================
Common rendering for the brace languages (C#, C++, Java).  Subclasses supply
the type table, the entry-point layout and a handful of per-language lines
(print, arrays, object creation, class headers).

Type / value rules
------------------
  ┌──────────────┬────────────────────────────────────────────────────────┐
  │ type tag     │ declared type comes from TYPE_MAP (case-insensitive);  │
  │              │ unknown tags pass through (user class names);          │
  │              │ a missing tag or "var" uses ``inferred_type``          │
  │ string value │ double-quoted unless already quoted                    │
  │ char value   │ single-quoted when it is one bare character            │
  │ bool value   │ true / false spelled in lower case                     │
  └──────────────┴────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from ..ir import (
    ArrayDeclareSize,
    ArrayDeclareValues,
    ClassDefine,
    For,
    FunctionCall,
    FunctionDefine,
    If,
    ObjectCreate,
    Print,
    Statement,
    Switch,
    VariableDeclare,
    VariableUpdate,
    While,
)
from .base import CodeWriter, DeclarationTracker, LanguageEmitter, quote


STRING_TAGS  = frozenset({"string"})
BOOLEAN_TAGS = frozenset({"boolean", "bool"})
CHAR_TAGS    = frozenset({"char"})


class CFamilyEmitter(LanguageEmitter):

    TYPE_MAP: Dict[str, str] = {}
    inferred_type: str = "var"
    array_fallback_type: str = "int"
    braced_cases: bool = False
    comment_prefix = "//"

    # ── Types and values ──────────────────────────────────────────────────

    def map_type(self, data_type: Optional[str]) -> str:
        tag = (data_type or "").strip()
        if not tag or tag == "var":
            return self.inferred_type
        return self.TYPE_MAP.get(tag.lower(), tag)

    def element_type(self, data_type: Optional[str]) -> str:
        if not (data_type or "").strip():
            return self.array_fallback_type
        return self.map_type(data_type)

    def format_value(self, value: str, data_type: Optional[str] = None) -> str:
        tag = (data_type or "").strip().lower()
        if tag in STRING_TAGS:
            return quote(value)
        if tag in BOOLEAN_TAGS and value.strip().lower() in ("true", "false"):
            return value.strip().lower()
        if tag in CHAR_TAGS and len(value) == 1:
            return f"'{value}'"
        return value

    # ── Per-language lines ────────────────────────────────────────────────

    def print_line(self, value: str) -> str:
        raise NotImplementedError

    def array_values_lines(self, name: str, elem: str, values: str, declare: bool) -> List[str]:
        raise NotImplementedError

    def array_size_lines(self, name: str, elem: str, size: str, declare: bool) -> List[str]:
        raise NotImplementedError

    def object_create_line(self, stmt: ObjectCreate) -> str:
        args = ", ".join(stmt.args)
        return f"{stmt.class_name} {stmt.var} = new {stmt.class_name}({args});"

    def method_header(self, stmt: FunctionDefine, member: bool) -> str:
        raise NotImplementedError

    def class_header(self, stmt: ClassDefine) -> List[str]:
        raise NotImplementedError

    def class_footer(self) -> str:
        return "}"

    def format_params(self, stmt: FunctionDefine) -> str:
        return ", ".join(f"{self.map_type(ptype)} {pname}" for ptype, pname in stmt.params)

    # ── Statement hooks ───────────────────────────────────────────────────

    def emit_variable_declare(self, stmt: VariableDeclare, writer: CodeWriter,
                              decls: DeclarationTracker) -> None:
        value = self.format_value(stmt.value, stmt.data_type)
        if decls.declare(stmt.name):
            declared = self.map_type(stmt.data_type)
            if value == "":
                writer.writeln(f"{declared} {stmt.name};")
            else:
                writer.writeln(f"{declared} {stmt.name} = {value};")
            return
        writer.writeln(f"{stmt.name} = {value};")

    def emit_variable_update(self, stmt: VariableUpdate, writer: CodeWriter,
                             decls: DeclarationTracker) -> None:
        writer.writeln(f"{stmt.name} = {self.format_value(stmt.value)};")

    def emit_array_values(self, stmt: ArrayDeclareValues, writer: CodeWriter,
                          decls: DeclarationTracker) -> None:
        values = ", ".join(self.format_value(v, stmt.data_type) for v in stmt.values)
        elem = self.element_type(stmt.data_type)
        writer.extend(self.array_values_lines(stmt.name, elem, values, decls.declare(stmt.name)))

    def emit_array_size(self, stmt: ArrayDeclareSize, writer: CodeWriter,
                        decls: DeclarationTracker) -> None:
        elem = self.element_type(stmt.data_type)
        writer.extend(self.array_size_lines(stmt.name, elem, stmt.size, decls.declare(stmt.name)))

    def emit_print(self, stmt: Print, writer: CodeWriter,
                   decls: DeclarationTracker) -> None:
        writer.writeln(self.print_line(stmt.value))

    def emit_if(self, stmt: If, writer: CodeWriter,
                decls: DeclarationTracker) -> None:
        writer.writeln(f"if ({stmt.condition}) {{")
        self.emit_block(stmt.body, writer, decls)
        if stmt.else_body:
            writer.writeln("} else {")
            self.emit_block(stmt.else_body, writer, decls)
        writer.writeln("}")

    def emit_switch(self, stmt: Switch, writer: CodeWriter,
                    decls: DeclarationTracker) -> None:
        writer.writeln(f"switch ({stmt.subject}) {{")
        with writer.indented():
            for case in stmt.cases:
                self._emit_case(f"case {case.value}:", case.body, writer, decls)
            if stmt.default_body:
                self._emit_case("default:", stmt.default_body, writer, decls)
        writer.writeln("}")

    def _emit_case(self, label: str, body: Sequence[Statement], writer: CodeWriter,
                   decls: DeclarationTracker) -> None:
        writer.writeln(f"{label} {{" if self.braced_cases else label)
        with writer.indented(), decls.block():
            for stmt in body:
                self.emit_statement(stmt, writer, decls)
            writer.writeln("break;")
        if self.braced_cases:
            writer.writeln("}")

    def emit_for(self, stmt: For, writer: CodeWriter,
                 decls: DeclarationTracker) -> None:
        var = stmt.var
        writer.writeln(f"for (int {var} = 0; {var} < {stmt.bound}; {var}++) {{")
        self.emit_block(stmt.body, writer, decls)
        writer.writeln("}")

    def emit_while(self, stmt: While, writer: CodeWriter,
                   decls: DeclarationTracker) -> None:
        writer.writeln(f"while ({stmt.condition}) {{")
        self.emit_block(stmt.body, writer, decls)
        writer.writeln("}")

    def emit_function_define(self, stmt: FunctionDefine, writer: CodeWriter,
                             decls: DeclarationTracker) -> None:
        self.emit_method(stmt, writer, member=False)

    def emit_method(self, stmt: FunctionDefine, writer: CodeWriter, member: bool) -> None:
        writer.writeln(f"{self.method_header(stmt, member)} {{")
        self.emit_block(stmt.body, writer, self.new_tracker())
        writer.writeln("}")

    def emit_function_call(self, stmt: FunctionCall, writer: CodeWriter,
                           decls: DeclarationTracker) -> None:
        writer.writeln(f"{stmt.name}({', '.join(stmt.args)});")

    def emit_class_define(self, stmt: ClassDefine, writer: CodeWriter,
                          decls: DeclarationTracker) -> None:
        writer.extend(self.class_header(stmt))
        with writer.indented():
            for member in stmt.members:
                if isinstance(member, FunctionDefine):
                    self.emit_method(member, writer, member=True)
                else:
                    self.emit_statement(member, writer, self.new_tracker())
        writer.writeln(self.class_footer())

    def emit_object_create(self, stmt: ObjectCreate, writer: CodeWriter,
                           decls: DeclarationTracker) -> None:
        writer.writeln(self.object_create_line(stmt))

    # ── Program sections ──────────────────────────────────────────────────

    def emit_classes(self, classes: Sequence[Statement], writer: CodeWriter) -> None:
        for index, cls in enumerate(classes):
            if index:
                writer.blank()
            self.emit_statement(cls, writer, self.new_tracker())

    def emit_functions(self, functions: Sequence[Statement], writer: CodeWriter) -> None:
        """Global functions, each preceded by a blank line."""
        for func in functions:
            writer.blank()
            if isinstance(func, FunctionDefine):
                self.emit_method(func, writer, member=False)
            else:
                self.emit_statement(func, writer, self.new_tracker())


__all__ = ["CFamilyEmitter"]
