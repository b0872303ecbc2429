"""Visual Coder: compile editor block graphs into C#, C++, Java and Python."""

from visualcoder.compiler import Language, build, compile_graph, generate

__version__ = "1.0.0"

__all__ = ["Language", "build", "compile_graph", "generate", "__version__"]
