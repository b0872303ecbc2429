"""
Visual Coder Compiler: Emitter Base
===================================
Shared machinery for the four language backends.

  CodeWriter          indented line accumulator (push / pop one level)
  DeclarationTracker  first-sight bookkeeping for variable declarations
  LanguageEmitter     abstract backend: one ``emit_<kind>`` hook per statement
                      variant, dispatched by ``emit_statement``

Adding a new statement variant
------------------------------
1. Add the dataclass to ``compiler/ir.py`` with a ``kind`` class attribute.
2. Add an abstract ``emit_<kind>`` hook here.
3. Implement the hook in every backend (the ABC refuses to instantiate a
   backend that misses one).

Declaration scoping
-------------------
By default a tracker is function scoped: a declaration inside an ``if``
branch counts as declared for the rest of the function, even on paths where
the branch did not run.  Passing ``block_scoped=True`` switches to a scope
stack that is pushed for every nested block and popped on exit.
"""

from __future__ import annotations

import abc
import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence, Set

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
    Unknown,
    VariableDeclare,
    VariableUpdate,
    While,
    ensure_program,
)

logger = logging.getLogger(__name__)


INDENT_UNIT = "    "


# ── Code writer ───────────────────────────────────────────────────────────────

class CodeWriter:
    """Simple indented string accumulator."""

    def __init__(self, indent: int = 0, comment_prefix: str = "#"):
        self._lines: List[str] = []
        self._indent = indent
        self._comment_prefix = comment_prefix

    @property
    def indent(self) -> int:
        return self._indent

    def writeln(self, line: str = "") -> "CodeWriter":
        if line:
            self._lines.append(INDENT_UNIT * self._indent + line)
        else:
            self._lines.append("")
        return self

    def blank(self) -> "CodeWriter":
        return self.writeln()

    def comment(self, text: str) -> "CodeWriter":
        return self.writeln(f"{self._comment_prefix} {text}")

    def push(self) -> "CodeWriter":
        self._indent += 1
        return self

    def pop(self) -> "CodeWriter":
        self._indent = max(0, self._indent - 1)
        return self

    @contextmanager
    def indented(self, levels: int = 1) -> Iterator["CodeWriter"]:
        for _ in range(levels):
            self.push()
        try:
            yield self
        finally:
            for _ in range(levels):
                self.pop()

    def extend(self, lines: List[str]) -> "CodeWriter":
        for line in lines:
            self.writeln(line)
        return self

    def lines(self) -> List[str]:
        return self._lines

    def result(self) -> str:
        return "\n".join(self._lines)


# ── Declaration tracking ──────────────────────────────────────────────────────

class DeclarationTracker:
    """Names declared so far in one function / class member / main body."""

    def __init__(self, block_scoped: bool = False):
        self.block_scoped = block_scoped
        self._scopes: List[Set[str]] = [set()]

    def is_declared(self, name: str) -> bool:
        return any(name in scope for scope in self._scopes)

    def declare(self, name: str) -> bool:
        """Record ``name``; True if this is its first (declaring) occurrence."""
        if self.is_declared(name):
            return False
        self._scopes[-1].add(name)
        return True

    @contextmanager
    def block(self) -> Iterator[None]:
        if not self.block_scoped:
            yield
            return
        self._scopes.append(set())
        try:
            yield
        finally:
            self._scopes.pop()


# ── Language emitter ──────────────────────────────────────────────────────────

class LanguageEmitter(abc.ABC):
    """
    Base class for a target-language backend.

    ``emit(program)`` is the only public entry point.  All per-call state
    (writers, trackers) is created inside it, so instances are safe to share.
    """

    #: Selector value this backend answers to (set by subclasses).
    language: str = ""
    #: Human readable name used in placeholder comments.
    display_name: str = ""
    #: Default file extension for written output.
    extension: str = ""
    comment_prefix: str = "//"

    def __init__(self, block_scoped_declarations: Optional[bool] = None):
        if block_scoped_declarations is None:
            from ...config import get_settings
            block_scoped_declarations = get_settings().block_scoped_declarations
        self.block_scoped_declarations = block_scoped_declarations

    # ── Public API ────────────────────────────────────────────────────────

    def emit(self, ir) -> str:
        """
        Render a Program (or its JSON form) as one source file.

        Raises:
            InvalidIR: if ``ir`` lacks the program marker.
        """
        program = ensure_program(ir)
        logger.debug(
            f"[{self.language}] emitting {len(program.classes)} classes, "
            f"{len(program.functions)} functions, {len(program.body)} body statements"
        )
        return self.render_program(program)

    @abc.abstractmethod
    def render_program(self, program: Program) -> str:
        """Lay out classes, functions and the entry point."""

    # ── Helpers for subclasses ────────────────────────────────────────────

    def new_writer(self, indent: int = 0) -> CodeWriter:
        return CodeWriter(indent=indent, comment_prefix=self.comment_prefix)

    def new_tracker(self) -> DeclarationTracker:
        return DeclarationTracker(block_scoped=self.block_scoped_declarations)

    def emit_block(self, statements: Sequence[Statement], writer: CodeWriter,
                   decls: DeclarationTracker) -> None:
        """Emit ``statements`` one level deeper than the writer's current indent."""
        with writer.indented(), decls.block():
            for stmt in statements:
                self.emit_statement(stmt, writer, decls)

    def emit_statement(self, stmt: Statement, writer: CodeWriter,
                       decls: DeclarationTracker) -> None:
        hook = getattr(self, f"emit_{stmt.kind}", None) if stmt.kind else None
        if hook is None or isinstance(stmt, Unknown):
            self.emit_unknown(stmt, writer, decls)
            return
        hook(stmt, writer, decls)

    def emit_unknown(self, stmt: Statement, writer: CodeWriter,
                     decls: DeclarationTracker) -> None:
        kind = stmt.source_kind if isinstance(stmt, Unknown) else type(stmt).__name__
        logger.warning(f"[{self.language}] unsupported statement kind '{kind}'")
        writer.comment(f"Unsupported node type for {self.display_name or self.language}: {kind}")

    # ── Statement hooks ───────────────────────────────────────────────────

    @abc.abstractmethod
    def emit_variable_declare(self, stmt: VariableDeclare, writer: CodeWriter,
                              decls: DeclarationTracker) -> None: ...

    @abc.abstractmethod
    def emit_variable_update(self, stmt: VariableUpdate, writer: CodeWriter,
                             decls: DeclarationTracker) -> None: ...

    @abc.abstractmethod
    def emit_array_values(self, stmt: ArrayDeclareValues, writer: CodeWriter,
                          decls: DeclarationTracker) -> None: ...

    @abc.abstractmethod
    def emit_array_size(self, stmt: ArrayDeclareSize, writer: CodeWriter,
                        decls: DeclarationTracker) -> None: ...

    @abc.abstractmethod
    def emit_print(self, stmt: Print, writer: CodeWriter,
                   decls: DeclarationTracker) -> None: ...

    @abc.abstractmethod
    def emit_if(self, stmt: If, writer: CodeWriter,
                decls: DeclarationTracker) -> None: ...

    @abc.abstractmethod
    def emit_switch(self, stmt: Switch, writer: CodeWriter,
                    decls: DeclarationTracker) -> None: ...

    @abc.abstractmethod
    def emit_for(self, stmt: For, writer: CodeWriter,
                 decls: DeclarationTracker) -> None: ...

    @abc.abstractmethod
    def emit_while(self, stmt: While, writer: CodeWriter,
                   decls: DeclarationTracker) -> None: ...

    @abc.abstractmethod
    def emit_function_define(self, stmt: FunctionDefine, writer: CodeWriter,
                             decls: DeclarationTracker) -> None: ...

    @abc.abstractmethod
    def emit_function_call(self, stmt: FunctionCall, writer: CodeWriter,
                           decls: DeclarationTracker) -> None: ...

    @abc.abstractmethod
    def emit_class_define(self, stmt: ClassDefine, writer: CodeWriter,
                          decls: DeclarationTracker) -> None: ...

    @abc.abstractmethod
    def emit_object_create(self, stmt: ObjectCreate, writer: CodeWriter,
                           decls: DeclarationTracker) -> None: ...


# ── Value helpers ─────────────────────────────────────────────────────────────

def is_quoted(value: str) -> bool:
    return len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"')


def quote(value: str, mark: str = '"') -> str:
    """Wrap ``value`` in quotes unless it already is a quoted literal."""
    if is_quoted(value):
        return value
    return f"{mark}{value}{mark}"


__all__ = [
    "INDENT_UNIT",
    "CodeWriter",
    "DeclarationTracker",
    "LanguageEmitter",
    "is_quoted",
    "quote",
]
