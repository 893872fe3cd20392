"""slidedeck: Parse a Landslide or remark markdown deck into slides."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path

from .detect import detect_grammar
from .grammar import PRESETS, Grammar, get_grammar, load_grammar
from .models import ParseError
from .render import render_outline, to_dict, to_source
from .segmenter import segment

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool, log_file: str | None) -> None:
    """Attach handlers to the package logger for --verbose / --log-file."""
    package_logger = logging.getLogger("slidedeck")
    if verbose:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setLevel(logging.DEBUG)
        stream_handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        package_logger.addHandler(stream_handler)
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
        package_logger.addHandler(file_handler)
    if verbose or log_file:
        package_logger.setLevel(logging.DEBUG)


def _resolve_grammar(name: str, grammar_file: str | None, text: str) -> Grammar:
    """Pick the grammar from --grammar-file, --grammar, or auto-detection."""
    if grammar_file:
        path = Path(grammar_file)
        if not path.exists():
            print(f"Error: grammar file {path} not found.", file=sys.stderr)
            sys.exit(1)
        try:
            return load_grammar(path)
        except ValueError as exc:
            print(f"Error: invalid grammar file {path}: {exc}", file=sys.stderr)
            sys.exit(1)
    if name == "auto":
        name = detect_grammar(text)
    return get_grammar(name)


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="slidedeck",
        description="Parse a Landslide or remark markdown deck into slides.",
    )
    parser.add_argument("input", help="Path to the deck .md file")
    parser.add_argument("--grammar", choices=["auto", *sorted(PRESETS)], default="auto",
                        help="Deck grammar: auto, landslide, or remark (default: auto)")
    parser.add_argument("--grammar-file",
                        help="Path to a JSON file with grammar overrides (takes precedence over --grammar)")
    parser.add_argument("--format", choices=["outline", "json", "source"], default="outline",
                        help="Output format (default: outline)")
    parser.add_argument("--presenter", action="store_true",
                        help="Include presenter notes in the outline")
    parser.add_argument("--output", help="Write the result here instead of stdout")
    parser.add_argument("--log-file", help="Write a debug log to this file")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log debug output to stderr")

    args = parser.parse_args()

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: {input_path} not found.", file=sys.stderr)
        sys.exit(1)

    _configure_logging(args.verbose, args.log_file)
    logger.info("CLI arguments: %s", vars(args))

    text = input_path.read_text(encoding="utf-8")
    grammar = _resolve_grammar(args.grammar, args.grammar_file, text)

    try:
        t0 = time.monotonic()
        document = segment(text, grammar)
        logger.info("Parse completed in %.3fs: %d slides", time.monotonic() - t0, len(document))
    except ParseError as exc:
        logger.error("Parse failed: %s", exc)
        print(f"Error: {input_path}: {exc}", file=sys.stderr)
        sys.exit(1)

    try:
        if args.format == "json":
            result = json.dumps(to_dict(document), indent=2, ensure_ascii=False) + "\n"
        elif args.format == "source":
            result = to_source(document, grammar)
        else:
            result = render_outline(document, presenter=args.presenter)
    except Exception:
        logger.exception("Rendering failed")
        raise

    if args.output:
        output_path = Path(args.output)
        output_path.write_text(result, encoding="utf-8")
        notes_count = sum(1 for s in document.slides if s.notes)
        print(f"Done! {len(document)} slides ({notes_count} with presenter notes), grammar: {grammar.name}.")
        print(f"Output: {output_path}")
    else:
        sys.stdout.write(result)


if __name__ == "__main__":
    main()
