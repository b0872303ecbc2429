"""
C++ backend.

Classes and free functions come before ``int main()`` so they are declared
before use.  Arrays are C-style and fixed length: a second declaration of the
same array cannot be expressed and is emitted as a warning comment.
"""

from __future__ import annotations

from typing import List

from ..ir import ClassDefine, FunctionDefine, ObjectCreate, Program
from .c_family import CFamilyEmitter

_HEADER = [
    "#include <iostream>",
    "#include <string>",
    "#include <vector>",
    "#include <algorithm>",
    "",
    "using namespace std;",
]


class CppEmitter(CFamilyEmitter):
    language = "cpp"
    extension = ".cpp"
    display_name = "C++"

    TYPE_MAP = {
        "string": "string",
        "boolean": "bool",
        "bool": "bool",
        "int": "int",
        "float": "float",
        "double": "double",
        "char": "char",
    }
    inferred_type = "auto"
    array_fallback_type = "int"
    braced_cases = True

    def print_line(self, value: str) -> str:
        return f"cout << {value} << endl;"

    def array_values_lines(self, name: str, elem: str, values: str, declare: bool) -> List[str]:
        if declare:
            return [f"{elem} {name}[] = {{{values}}};"]
        return [f"// Warning: cannot reassign C-style array {name}"]

    def array_size_lines(self, name: str, elem: str, size: str, declare: bool) -> List[str]:
        if declare:
            return [f"{elem} {name}[{size}] = {{}};"]
        return [f"// Warning: cannot resize C-style array {name}"]

    def object_create_line(self, stmt: ObjectCreate) -> str:
        # "Dog d();" would declare a function, so no-argument objects drop the parens.
        if not stmt.args:
            return f"{stmt.class_name} {stmt.var};"
        return f"{stmt.class_name} {stmt.var}({', '.join(stmt.args)});"

    def method_header(self, stmt: FunctionDefine, member: bool) -> str:
        return f"void {stmt.name}({self.format_params(stmt)})"

    def class_header(self, stmt: ClassDefine) -> List[str]:
        base = f" : public {stmt.base}" if stmt.base else ""
        return [f"class {stmt.name}{base} {{", "public:"]

    def class_footer(self) -> str:
        return "};"

    def render_program(self, program: Program) -> str:
        w = self.new_writer()
        w.extend(_HEADER)
        if program.classes:
            w.blank()
            self.emit_classes(program.classes, w)
        self.emit_functions(program.functions, w)
        w.blank()
        w.writeln("int main() {")
        self.emit_block(program.body, w, self.new_tracker())
        with w.indented():
            w.writeln("return 0;")
        w.writeln("}")
        return w.result() + "\n"


__all__ = ["CppEmitter"]
