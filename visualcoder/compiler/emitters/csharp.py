"""
C# backend.

    using System;
    using System.Collections.Generic;

    namespace GeneratedCode {
        <classes>

        public class Program {
            public static void Main(string[] args) {
                <body>
            }

            <functions as public static methods>
        }
    }
"""

from __future__ import annotations

from typing import List

from ..ir import ClassDefine, FunctionDefine, Program
from .c_family import CFamilyEmitter


class CSharpEmitter(CFamilyEmitter):
    language = "csharp"
    extension = ".cs"
    display_name = "C#"

    TYPE_MAP = {
        "boolean": "bool",
        "bool": "bool",
        "string": "string",
        "int": "int",
        "float": "float",
        "double": "double",
        "char": "char",
    }
    inferred_type = "var"
    array_fallback_type = "object"

    def print_line(self, value: str) -> str:
        return f"Console.WriteLine({value});"

    def array_values_lines(self, name: str, elem: str, values: str, declare: bool) -> List[str]:
        if declare:
            return [f"{elem}[] {name} = {{ {values} }};"]
        return [f"{name} = new {elem}[] {{ {values} }};"]

    def array_size_lines(self, name: str, elem: str, size: str, declare: bool) -> List[str]:
        if declare:
            return [f"{elem}[] {name} = new {elem}[{size}];"]
        return [f"{name} = new {elem}[{size}];"]

    def method_header(self, stmt: FunctionDefine, member: bool) -> str:
        modifiers = "public void" if member else "public static void"
        return f"{modifiers} {stmt.name}({self.format_params(stmt)})"

    def class_header(self, stmt: ClassDefine) -> List[str]:
        base = f" : {stmt.base}" if stmt.base else ""
        return [f"public class {stmt.name}{base} {{"]

    def render_program(self, program: Program) -> str:
        w = self.new_writer()
        w.extend([
            "using System;",
            "using System.Collections.Generic;",
            "",
            "namespace GeneratedCode {",
        ])
        with w.indented():
            if program.classes:
                self.emit_classes(program.classes, w)
                w.blank()
            w.writeln("public class Program {")
            with w.indented():
                w.writeln("public static void Main(string[] args) {")
                self.emit_block(program.body, w, self.new_tracker())
                w.writeln("}")
                self.emit_functions(program.functions, w)
            w.writeln("}")
        w.writeln("}")
        return w.result() + "\n"


__all__ = ["CSharpEmitter"]
