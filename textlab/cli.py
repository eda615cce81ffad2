import argparse
import json
import sys
from typing import Optional

from textlab.results import ToolError
from textlab.suggestions import SuggestionEngine
from textlab.tool_catalog import load_registry


def _parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Suggest CleanTextLab tools for a piece of text")
    parser.add_argument("file", nargs="?", help="Read text from FILE instead of stdin")
    parser.add_argument("--current-tool", help="Tool id currently in use; never suggested")
    parser.add_argument("--tools-file", help="JSON tool catalog to use instead of the built-in one")
    return parser.parse_args(argv)


def _read_text(path: Optional[str]) -> str:
    if path is None:
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8-sig") as f:
        return f.read()


def main(argv: Optional[list[str]] = None) -> int:
    args = _parse_args(argv)
    try:
        registry = load_registry(args.tools_file)
        text = _read_text(args.file)
    except ToolError as exc:
        print(exc.message, file=sys.stderr)
        return 2
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Could not read {args.file}: {exc}", file=sys.stderr)
        return 2

    suggestions = SuggestionEngine(registry).detect(text, args.current_tool)
    print(json.dumps({"suggestions": [s.model_dump() for s in suggestions]}, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
