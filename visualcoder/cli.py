"""
visualcoder: command line driver for the graph compiler
=======================================================
Compiles a saved editor graph JSON file into source files.

Usage
-----
    visualcoder <graph.json> [options]

Options
-------
    --language {csharp,cpp,java,python}   Target language; repeat for several
                                          (default: all four)
    --out      <dir>                      Output directory (default: ./generated)
    --print                               Print the generated source to stdout
                                          instead of writing files
    --ir                                  Also emit the intermediate representation
                                          as <name>.ir.json
    --strict                              Treat unknown node types as errors
                                          (default: warnings only)

Examples
--------
    # Every language, written next to each other:
    visualcoder graphs/bubble_sort.json --out build/

    # Just Java, printed:
    visualcoder graphs/bubble_sort.json --language java --print
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from visualcoder.compiler import build, generate
from visualcoder.compiler.emitters import EMITTER_REGISTRY, Language
from visualcoder.compiler.schema import SchemaError, validate_file
from visualcoder.config import configure_logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="visualcoder",
        description="Compile a Visual Coder graph to C#, C++, Java or Python.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    p.add_argument(
        "graph_json",
        metavar="graph.json",
        help="Path to the graph JSON file to compile.",
    )
    p.add_argument(
        "--language",
        dest="languages",
        action="append",
        choices=[lang.value for lang in Language],
        help="Target language (repeatable). Defaults to all languages.",
    )
    p.add_argument(
        "--out",
        metavar="DIR",
        default="generated",
        help="Output directory for the generated files (default: generated/).",
    )
    p.add_argument(
        "--print",
        dest="print_only",
        action="store_true",
        help="Print generated source to stdout instead of writing files.",
    )
    p.add_argument(
        "--ir",
        dest="emit_ir",
        action="store_true",
        help="Also write (or print) the intermediate representation as JSON.",
    )
    p.add_argument(
        "--strict",
        action="store_true",
        help="Treat unknown node types as errors rather than warnings.",
    )
    p.add_argument(
        "--log-level",
        default=None,
        help="Logging level (overrides VISUALCODER_LOG_LEVEL).",
    )
    return p


def _stem(path: Path) -> str:
    """'Bubble Sort.json' → 'bubble_sort'"""
    return path.stem.lower().replace("-", "_").replace(" ", "_")


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    json_path = Path(args.graph_json)
    if not json_path.exists():
        print(f"[error] File not found: {json_path}", file=sys.stderr)
        return 1

    # ── Validate JSON ────────────────────────────────────────────────────────
    try:
        data = validate_file(json_path, strict=args.strict)
    except json.JSONDecodeError as exc:
        print(f"[error] Invalid JSON: {exc}", file=sys.stderr)
        return 1
    except SchemaError as exc:
        print(f"[error] Schema validation failed: {exc}", file=sys.stderr)
        return 1

    # ── Build IR ─────────────────────────────────────────────────────────────
    program = build(data["nodes"], data["edges"])
    logger.info(f"{json_path.name}: {len(data['nodes'])} nodes, {len(data['edges'])} edges")

    languages = [Language(v) for v in args.languages] if args.languages else list(Language)
    stem = _stem(json_path)
    out_dir = Path(args.out)

    outputs = []
    if args.emit_ir:
        outputs.append((f"{stem}.ir.json", json.dumps(program.to_dict(), indent=2) + "\n"))
    for language in languages:
        extension = EMITTER_REGISTRY[language].extension
        outputs.append((f"{stem}{extension}", generate(language, program)))

    # ── Output ───────────────────────────────────────────────────────────────
    if args.print_only:
        for filename, source in outputs:
            print(f"==> {filename} <==")
            print(source)
        return 0

    out_dir.mkdir(parents=True, exist_ok=True)
    for filename, source in outputs:
        out_path = out_dir / filename
        out_path.write_text(source, encoding="utf-8")
        print(f"[visualcoder] wrote  : {out_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
