"""
Visual Coder Compiler: Language Backends
========================================
One emitter per target language, looked up by selector.

    from visualcoder.compiler.emitters import Language, get_emitter

    source = get_emitter(Language.JAVA).emit(program)

Adding a new language
---------------------
1. Subclass LanguageEmitter (or CFamilyEmitter for brace languages).
2. Add a Language member.
3. Register: EMITTER_REGISTRY[Language.X] = XEmitter
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Type, Union

from .base import CodeWriter, DeclarationTracker, LanguageEmitter
from .cpp import CppEmitter
from .csharp import CSharpEmitter
from .java import JavaEmitter
from .python import PythonEmitter


class Language(str, Enum):
    CSHARP = "csharp"
    CPP    = "cpp"
    JAVA   = "java"
    PYTHON = "python"


class UnsupportedLanguage(ValueError):
    """Raised for a language selector outside the Language enum."""


EMITTER_REGISTRY: Dict[Language, Type[LanguageEmitter]] = {
    Language.CSHARP: CSharpEmitter,
    Language.CPP:    CppEmitter,
    Language.JAVA:   JavaEmitter,
    Language.PYTHON: PythonEmitter,
}


def parse_language(selector: Union[Language, str]) -> Language:
    if isinstance(selector, Language):
        return selector
    try:
        return Language(str(selector).strip().lower())
    except ValueError:
        raise UnsupportedLanguage(f"Unsupported language: {selector!r}") from None


def get_emitter(
    selector: Union[Language, str],
    block_scoped_declarations: Optional[bool] = None,
) -> LanguageEmitter:
    language = parse_language(selector)
    return EMITTER_REGISTRY[language](block_scoped_declarations=block_scoped_declarations)


__all__ = [
    "Language",
    "UnsupportedLanguage",
    "EMITTER_REGISTRY",
    "parse_language",
    "get_emitter",
    "CodeWriter",
    "DeclarationTracker",
    "LanguageEmitter",
    "CSharpEmitter",
    "CppEmitter",
    "JavaEmitter",
    "PythonEmitter",
]
