#!/usr/bin/env python3
"""Preview files from the command line.

Each path given on the command line (and, with --stdin, each line read from
standard input) is treated as one "file selected" event and previewed
independently.
"""
import sys
import argparse
import json
from dataclasses import replace
from pathlib import Path
from typing import Iterable, Iterator, TextIO

# Add parent directory to path for importing previewer modules
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from previewer.config import config
from previewer.dispatcher import PreviewDispatcher
from previewer.models import BinaryPreview, ImagePreview, PreviewFailure, PreviewResult, TextPreview


def iter_selected_paths(paths: Iterable[str], stream: TextIO | None = None) -> Iterator[str]:
    """Yield paths from arguments first, then non-blank lines of `stream`."""
    yield from paths
    if stream is None:
        return
    for line in stream:
        selected = line.rstrip("\r\n")
        if selected.strip():
            yield selected


def format_result(path: str, result: PreviewResult) -> str:
    lines = [f"== {path}"]
    if isinstance(result, ImagePreview):
        size = result.size
        dims = f"{size[0]}x{size[1]}" if size else "unknown size"
        mode = getattr(result.image, "mode", None)
        lines.append(f"Image: {dims}" + (f" ({mode})" if mode else ""))
    elif isinstance(result, TextPreview):
        if result.lines:
            lines.append(result.text)
        else:
            lines.append("(empty file)")
        if result.truncated:
            lines.append(f"... (showing first {len(result.lines)} lines)")
    elif isinstance(result, BinaryPreview):
        lines.append("File Properties:")
        for key, value in result.metadata.to_display().items():
            lines.append(f"  {key}: {value}")
    else:
        lines.append(str(result))
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Preview images, text and binary files.")
    parser.add_argument("paths", nargs="*", help="Files to preview")
    parser.add_argument("--stdin", action="store_true", help="Also read one path per line from standard input")
    parser.add_argument(
        "--max-lines",
        type=int,
        default=None,
        help=f"Lines shown for text files (default: {config.TEXT_MAX_LINES})",
    )
    parser.add_argument("--json", action="store_true", help="Print one JSON object per file")
    return parser


def main(argv: list[str] | None = None, stdin: TextIO | None = None, stdout: TextIO | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    out = stdout or sys.stdout

    if not args.paths and not args.stdin:
        parser.error("no files given; pass paths or use --stdin")
    if args.max_lines is not None and args.max_lines < 1:
        parser.error("--max-lines must be a positive integer")

    cfg = config if args.max_lines is None else replace(config, TEXT_MAX_LINES=args.max_lines)
    dispatcher = PreviewDispatcher(cfg)

    exit_code = 0
    source = (stdin or sys.stdin) if args.stdin else None
    for path in iter_selected_paths(args.paths, source):
        result = dispatcher.preview(path)
        if isinstance(result, PreviewFailure):
            exit_code = 1
        if args.json:
            payload = {"path": path, **result.to_dict()}
            out.write(json.dumps(payload) + "\n")
        else:
            out.write(format_result(path, result) + "\n")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
