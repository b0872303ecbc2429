"""
Python backend.

Output layout
-------------
    class Dog(Animal):
        def bark(self):
            print("woof")


    def helper(a, b):
        ...


    def main():
        <body>


    if __name__ == "__main__":
        main()

The editor speaks C-style expressions, so condition and value text goes
through a light textual rewrite (no parsing):

    a && b     →  a and b          x.length  →  len(x)
    a || b     →  a or b           a / b     →  a // b
    !a         →  not a            i++       →  i  (plus "i += 1" on the next line)
    true/false →  True/False

Python has no declarations, so a first declaration and a later assignment
render the same way; the tracker still records names so block-scoped mode
behaves like the other backends.
"""

from __future__ import annotations

import logging
import math
import re
from typing import List, Optional, Sequence, Tuple

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
    Program,
    Statement,
    Switch,
    VariableDeclare,
    VariableUpdate,
    While,
)
from .base import CodeWriter, DeclarationTracker, LanguageEmitter, is_quoted, quote

logger = logging.getLogger(__name__)

_SINGLE_SLASH = re.compile(r"(?<!/)/(?!/)")
_AND          = re.compile(r"\s*&&\s*")
_OR           = re.compile(r"\s*\|\|\s*")
_NOT          = re.compile(r"!(?!=)\s*")
_TRUE         = re.compile(r"\btrue\b")
_FALSE        = re.compile(r"\bfalse\b")
_LENGTH       = re.compile(r"(\w+)\.length\b")
_POST_INC     = re.compile(r"([A-Za-z0-9_$]+)(\+\+|--)")
_CODE_CHARS   = re.compile(r"[+\-*/%()\[\]<>=!&|.]")
_IDENTIFIER   = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

_ZERO_VALUES = {
    "int": "0",
    "float": "0.0",
    "double": "0.0",
    "boolean": "False",
    "bool": "False",
    "string": '""',
    "char": '""',
}


def to_python_op(text: str) -> str:
    """Rewrite C-style operators and literals; quoted literals are left alone."""
    if not text or is_quoted(text):
        return text
    clean = _SINGLE_SLASH.sub("//", text)
    clean = _AND.sub(" and ", clean)
    clean = _OR.sub(" or ", clean)
    clean = _NOT.sub("not ", clean)
    clean = _TRUE.sub("True", clean)
    return _FALSE.sub("False", clean)


def split_post_increments(text: str) -> Tuple[str, List[str]]:
    """'a[i++]' → ('a[i]', ['i += 1'])"""
    increments: List[str] = []

    def _strip(match: "re.Match[str]") -> str:
        op = " += 1" if match.group(2) == "++" else " -= 1"
        increments.append(f"{match.group(1)}{op}")
        return match.group(1)

    return _POST_INC.sub(_strip, text or ""), increments


def _is_number(text: str) -> bool:
    try:
        return math.isfinite(float(text))
    except ValueError:
        return False


def format_value(value: Optional[str], data_type: Optional[str] = None) -> str:
    if value is None or value == "":
        return "None"
    tag = (data_type or "").strip().lower()
    if tag in ("string", "char"):
        return quote(value)
    if tag in ("boolean", "bool") and value.strip().lower() in ("true", "false"):
        return "True" if value.strip().lower() == "true" else "False"
    if value in ("true", "false"):
        return "True" if value == "true" else "False"
    if _is_number(value) or is_quoted(value):
        return value
    if _CODE_CHARS.search(value):
        return to_python_op(_LENGTH.sub(r"len(\1)", value))
    if _IDENTIFIER.match(value):
        return value
    # Bare prose, e.g. a print label typed without quotes.
    return quote(value, "'")


class PythonEmitter(LanguageEmitter):
    language = "python"
    extension = ".py"
    display_name = "Python"
    comment_prefix = "#"

    # ── Blocks ────────────────────────────────────────────────────────────

    def emit_block(self, statements: Sequence[Statement], writer: CodeWriter,
                   decls: DeclarationTracker) -> None:
        with writer.indented(), decls.block():
            if not statements:
                writer.writeln("pass")
            for stmt in statements:
                self.emit_statement(stmt, writer, decls)

    def emit_unknown(self, stmt: Statement, writer: CodeWriter,
                     decls: DeclarationTracker) -> None:
        # The placeholder may be the only line in its block.
        kind = getattr(stmt, "source_kind", type(stmt).__name__)
        logger.warning(f"[{self.language}] unsupported statement kind '{kind}'")
        writer.writeln(f"pass  # Unsupported node type for Python: {kind}")

    # ── Assignments ───────────────────────────────────────────────────────

    def _assign(self, name: str, value: str, data_type: Optional[str],
                writer: CodeWriter) -> None:
        if (data_type or "").strip().lower() in ("string", "char"):
            writer.writeln(f"{name} = {format_value(value, data_type)}")
            return
        lhs, lhs_incs = split_post_increments(name)
        rhs, rhs_incs = split_post_increments(value)
        writer.writeln(f"{lhs} = {format_value(rhs, data_type)}")
        for inc in [*lhs_incs, *rhs_incs]:
            writer.writeln(inc)

    def emit_variable_declare(self, stmt: VariableDeclare, writer: CodeWriter,
                              decls: DeclarationTracker) -> None:
        decls.declare(stmt.name)
        self._assign(stmt.name, stmt.value, stmt.data_type, writer)

    def emit_variable_update(self, stmt: VariableUpdate, writer: CodeWriter,
                             decls: DeclarationTracker) -> None:
        self._assign(stmt.name, stmt.value, None, writer)

    def emit_array_values(self, stmt: ArrayDeclareValues, writer: CodeWriter,
                          decls: DeclarationTracker) -> None:
        decls.declare(stmt.name)
        values = ", ".join(format_value(v, stmt.data_type) for v in stmt.values)
        writer.writeln(f"{stmt.name} = [{values}]")

    def emit_array_size(self, stmt: ArrayDeclareSize, writer: CodeWriter,
                        decls: DeclarationTracker) -> None:
        decls.declare(stmt.name)
        fill = _ZERO_VALUES.get((stmt.data_type or "").strip().lower(), "None")
        writer.writeln(f"{stmt.name} = [{fill}] * {to_python_op(stmt.size)}")

    def emit_print(self, stmt: Print, writer: CodeWriter,
                   decls: DeclarationTracker) -> None:
        writer.writeln(f"print({format_value(stmt.value)})")

    # ── Control flow ──────────────────────────────────────────────────────

    def emit_if(self, stmt: If, writer: CodeWriter,
                decls: DeclarationTracker) -> None:
        writer.writeln(f"if {to_python_op(stmt.condition)}:")
        self.emit_block(stmt.body, writer, decls)
        if stmt.else_body:
            writer.writeln("else:")
            self.emit_block(stmt.else_body, writer, decls)

    def emit_switch(self, stmt: Switch, writer: CodeWriter,
                    decls: DeclarationTracker) -> None:
        if not stmt.cases:
            # Only a default (or nothing): it always runs.
            if stmt.default_body:
                for child in stmt.default_body:
                    self.emit_statement(child, writer, decls)
            else:
                writer.writeln("pass  # empty switch")
            return

        for index, case in enumerate(stmt.cases):
            keyword = "if" if index == 0 else "elif"
            writer.writeln(f"{keyword} {stmt.subject} == {format_value(case.value)}:")
            self.emit_block(case.body, writer, decls)
        if stmt.default_body:
            writer.writeln("else:")
            self.emit_block(stmt.default_body, writer, decls)

    def emit_for(self, stmt: For, writer: CodeWriter,
                 decls: DeclarationTracker) -> None:
        writer.writeln(f"for {stmt.var} in range({to_python_op(stmt.bound)}):")
        self.emit_block(stmt.body, writer, decls)

    def emit_while(self, stmt: While, writer: CodeWriter,
                   decls: DeclarationTracker) -> None:
        writer.writeln(f"while {to_python_op(stmt.condition)}:")
        self.emit_block(stmt.body, writer, decls)

    # ── Definitions ───────────────────────────────────────────────────────

    def emit_function_define(self, stmt: FunctionDefine, writer: CodeWriter,
                             decls: DeclarationTracker) -> None:
        self.emit_method(stmt, writer, member=False)

    def emit_method(self, stmt: FunctionDefine, writer: CodeWriter, member: bool) -> None:
        names = [pname.replace("[]", "") for _, pname in stmt.params]
        if member and (not names or names[0] != "self"):
            names.insert(0, "self")
        writer.writeln(f"def {stmt.name}({', '.join(names)}):")
        self.emit_block(stmt.body, writer, self.new_tracker())

    def emit_function_call(self, stmt: FunctionCall, writer: CodeWriter,
                           decls: DeclarationTracker) -> None:
        writer.writeln(f"{stmt.name}({', '.join(stmt.args)})")

    def emit_class_define(self, stmt: ClassDefine, writer: CodeWriter,
                          decls: DeclarationTracker) -> None:
        base = f"({stmt.base})" if stmt.base else ""
        writer.writeln(f"class {stmt.name}{base}:")
        with writer.indented():
            if not stmt.members:
                writer.writeln("pass")
            for member in stmt.members:
                if isinstance(member, FunctionDefine):
                    self.emit_method(member, writer, member=True)
                else:
                    self.emit_statement(member, writer, self.new_tracker())

    def emit_object_create(self, stmt: ObjectCreate, writer: CodeWriter,
                           decls: DeclarationTracker) -> None:
        writer.writeln(f"{stmt.var} = {stmt.class_name}({', '.join(stmt.args)})")

    # ── Program ───────────────────────────────────────────────────────────

    def render_program(self, program: Program) -> str:
        w = self.new_writer()
        for stmt in [*program.classes, *program.functions]:
            if isinstance(stmt, FunctionDefine):
                self.emit_method(stmt, w, member=False)
            else:
                self.emit_statement(stmt, w, self.new_tracker())
            w.blank()
            w.blank()

        w.writeln("def main():")
        self.emit_block(program.body, w, self.new_tracker())
        w.blank()
        w.blank()
        w.writeln('if __name__ == "__main__":')
        with w.indented():
            w.writeln("main()")
        return w.result() + "\n"


__all__ = ["PythonEmitter", "format_value", "to_python_op", "split_post_increments"]
