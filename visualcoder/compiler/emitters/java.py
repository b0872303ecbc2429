"""
Java backend.

Classes are emitted package-private ahead of ``public class Main``, because a
single compilation unit may only hold one public top-level class.
"""

from __future__ import annotations

from typing import List

from ..ir import ClassDefine, FunctionDefine, Program
from .c_family import CFamilyEmitter


class JavaEmitter(CFamilyEmitter):
    language = "java"
    extension = ".java"
    display_name = "Java"

    TYPE_MAP = {
        "string": "String",
        "boolean": "boolean",
        "bool": "boolean",
        "int": "int",
        "float": "float",
        "double": "double",
        "char": "char",
    }
    inferred_type = "var"
    array_fallback_type = "Object"

    def print_line(self, value: str) -> str:
        return f"System.out.println({value});"

    def array_values_lines(self, name: str, elem: str, values: str, declare: bool) -> List[str]:
        if declare:
            return [f"{elem}[] {name} = {{{values}}};"]
        return [f"{name} = new {elem}[]{{{values}}};"]

    def array_size_lines(self, name: str, elem: str, size: str, declare: bool) -> List[str]:
        if declare:
            return [f"{elem}[] {name} = new {elem}[{size}];"]
        return [f"{name} = new {elem}[{size}];"]

    def method_header(self, stmt: FunctionDefine, member: bool) -> str:
        modifiers = "public void" if member else "public static void"
        return f"{modifiers} {stmt.name}({self.format_params(stmt)})"

    def class_header(self, stmt: ClassDefine) -> List[str]:
        base = f" extends {stmt.base}" if stmt.base else ""
        return [f"class {stmt.name}{base} {{"]

    def render_program(self, program: Program) -> str:
        w = self.new_writer()
        if program.classes:
            self.emit_classes(program.classes, w)
            w.blank()
        w.writeln("public class Main {")
        with w.indented():
            w.writeln("public static void main(String[] args) {")
            self.emit_block(program.body, w, self.new_tracker())
            w.writeln("}")
            self.emit_functions(program.functions, w)
        w.writeln("}")
        return w.result() + "\n"


__all__ = ["JavaEmitter"]
