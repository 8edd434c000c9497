"""Command-line interface for the tangle/weave engine."""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="litprog",
        description="Literate programming tangle/weave engine",
    )

    # Global logging verbosity flags
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable debug logging output",
    )
    verbosity.add_argument(
        "--quiet", "-q", action="store_true",
        help="Suppress all output except warnings and errors",
    )

    subparsers = parser.add_subparsers(dest="command")
    subparsers.required = True

    def add_document_args(sub: argparse.ArgumentParser) -> None:
        sub.add_argument(
            "--document", required=True, help="Path to the YAML/JSON block stream"
        )
        sub.add_argument(
            "--config", default=None, help="Path to a YAML config file"
        )

    def add_tangle_args(sub: argparse.ArgumentParser) -> None:
        sub.add_argument(
            "--output-dir", default=None,
            help="Output subdirectory, relative to the document directory",
        )
        sub.add_argument(
            "--line-template", default=None,
            help="Line directive template with {line} and {file} slots ('' disables)",
        )

    # process subcommand
    process_parser = subparsers.add_parser(
        "process",
        help="Collect chunks, tangle every root, and weave navigation links",
    )
    add_document_args(process_parser)
    add_tangle_args(process_parser)
    process_parser.add_argument(
        "--annotated", default=None,
        help="Write the woven blocks to this JSON file",
    )

    # tangle subcommand
    tangle_parser = subparsers.add_parser(
        "tangle",
        help="Collect chunks and tangle every root",
    )
    add_document_args(tangle_parser)
    add_tangle_args(tangle_parser)
    tangle_parser.add_argument(
        "--dry-run", action="store_true", default=False,
        help="Show the destinations without writing anything",
    )

    # weave subcommand
    weave_parser = subparsers.add_parser(
        "weave",
        help="Collect chunks and write blocks annotated with navigation links",
    )
    add_document_args(weave_parser)
    weave_parser.add_argument(
        "--output", required=True, help="Output path for the woven blocks JSON"
    )

    # list subcommand
    list_parser = subparsers.add_parser(
        "list",
        help="List root and named chunks",
    )
    add_document_args(list_parser)

    return parser


def _load(args: argparse.Namespace):
    """Load the document and layer config: defaults, file, attributes, flags.

    Returns (document, config), or None after logging the reason.
    """
    from .blocks import load_document
    from .config import LitprogConfig, load_config, validate_config
    from .processor import resolve_config

    document_path = Path(args.document)
    if not document_path.exists():
        logger.error("Document file not found: %s", document_path)
        return None

    base = LitprogConfig()
    if args.config is not None:
        config_path = Path(args.config)
        if not config_path.exists():
            logger.error("Config file not found: %s", config_path)
            return None
        base = load_config(config_path)

    document = load_document(document_path)
    config = resolve_config(document, base)

    if getattr(args, "output_dir", None) is not None:
        config = replace(config, outdir=args.output_dir)
    if getattr(args, "line_template", None) is not None:
        config = replace(config, line_template=args.line_template)

    errors = validate_config(config)
    if errors:
        for err in errors:
            logger.error("Config error: %s", err)
        return None

    logger.info("Loaded %d blocks from %s", len(document.blocks), document_path)
    return document, config


def cmd_process(args: argparse.Namespace) -> int:
    """Collect, tangle, weave, and optionally save the woven blocks.

    Returns exit code (0 = success).
    """
    loaded = _load(args)
    if loaded is None:
        return 1
    document, config = loaded

    from .blocks import save_document
    from .processor import process_document

    result = process_document(document, config)
    for destination in result.written:
        logger.info("Wrote %s", destination)

    if args.annotated is not None:
        save_document(document, Path(args.annotated))
        logger.info("Wrote woven blocks to %s", args.annotated)

    return 0


def cmd_tangle(args: argparse.Namespace) -> int:
    """Collect chunks and tangle every root.

    Returns exit code (0 = success).
    """
    loaded = _load(args)
    if loaded is None:
        return 1
    document, config = loaded

    from .processor import collect_document, process_document
    from .tangle import TangleEngine

    if args.dry_run:
        registry = collect_document(document)
        engine = TangleEngine(registry, config)
        logger.info("Would tangle %d root chunks:", len(registry.roots()))
        for target in registry.roots():
            destination = engine.destination(target)
            logger.info("  %s -> %s", target, destination if destination else "<stdout>")
        return 0

    result = process_document(document, config, weave=False)
    for destination in result.written:
        logger.info("Wrote %s", destination)
    return 0


def cmd_weave(args: argparse.Namespace) -> int:
    """Collect chunks, weave, and save the annotated blocks.

    Returns exit code (0 = success).
    """
    loaded = _load(args)
    if loaded is None:
        return 1
    document, config = loaded

    from .blocks import save_document
    from .processor import process_document

    result = process_document(document, config, tangle=False)
    output_path = Path(args.output)
    save_document(document, output_path)
    logger.info("Wrote %d links to %s", len(result.links), output_path)
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    """List the root and named chunks of a document.

    Returns exit code (0 = success).
    """
    loaded = _load(args)
    if loaded is None:
        return 1
    document, _ = loaded

    from .processor import collect_document

    registry = collect_document(document)
    print("Root chunks:")
    for target in registry.roots():
        print(f"  {target}")
    print("Named chunks:")
    for title in registry.chunk_titles():
        print(f"  {title} ({len(registry.chunk_blocks[title])} blocks)")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()

    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # Return the exit code from argparse (0 for --help, 2 for errors)
        return e.code if isinstance(e.code, int) else 1

    # Configure root logger based on verbosity flags
    if getattr(args, "verbose", False):
        log_level = logging.DEBUG
    elif getattr(args, "quiet", False):
        log_level = logging.WARNING
    else:
        log_level = logging.INFO

    logging.basicConfig(
        level=log_level,
        format="%(levelname)s: %(message)s",
    )

    command_handlers = {
        "process": cmd_process,
        "tangle": cmd_tangle,
        "weave": cmd_weave,
        "list": cmd_list,
    }

    handler = command_handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    try:
        return handler(args)
    except Exception as e:
        logger.error("%s", e)
        return 1
