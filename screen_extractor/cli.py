"""Command line entry point: ``screen-extractor``."""

import argparse
import dataclasses
import sys
from pathlib import Path
from typing import Optional

from screen_extractor.clipboard import copy_to_clipboard
from screen_extractor.config import ExtractorConfig
from screen_extractor.exceptions import ScreenExtractorError
from screen_extractor.handler import ExtractionHandler
from screen_extractor.logger import set_run_id, setup_logging
from screen_extractor.models import AUTO_MODE, ExtractionMode, RunStatus

MODE_CHOICES = [AUTO_MODE] + [mode.value for mode in ExtractionMode]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="screen-extractor",
        description=(
            "Capture a screen region and copy structured text extracted from it "
            "(table, chart, diagram, text or general) to the clipboard."
        ),
    )
    parser.add_argument("--image", help="Process an existing image instead of capturing")
    parser.add_argument("--mode", choices=MODE_CHOICES, help="Force an extraction mode")
    parser.add_argument(
        "--stdout", action="store_true", help="Print the result instead of copying it"
    )
    parser.add_argument("--max-chars", type=int, help="Character budget for the output")
    parser.add_argument(
        "--confidence",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Append a 'Confidence: high|medium|low' line",
    )
    parser.add_argument("--router-model", help="Model used to classify the image")
    parser.add_argument("--extract-model", help="Model used to extract the content")
    parser.add_argument("--env-file", help="Load settings from this .env file")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def load_config(args: argparse.Namespace) -> ExtractorConfig:
    """Environment settings overridden by command line flags."""
    config = ExtractorConfig.from_env(args.env_file)
    overrides = {
        "force_mode": args.mode,
        "max_output_chars": args.max_chars,
        "include_confidence": args.confidence,
        "router_model": args.router_model,
        "extract_model": args.extract_model,
        "debug_logging": True if args.debug else None,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}
    return dataclasses.replace(config, **overrides)


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args)
    except ScreenExtractorError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    setup_logging("DEBUG" if config.debug_logging else "WARNING")

    clipboard = print if args.stdout else copy_to_clipboard
    handler = ExtractionHandler(config, clipboard=clipboard)

    if args.image:
        set_run_id()
        try:
            result = handler.process_file(Path(args.image))
            handler.clipboard(result.text)
        except ScreenExtractorError as exc:
            handler.notifier.failure("Extraction failed", str(exc))
            return 1
        if not args.stdout:
            handler.notifier.success("Copied extracted text", f"Mode: {result.mode.value}")
        return 0

    outcome = handler.run()
    return 1 if outcome.status == RunStatus.FAILED else 0


if __name__ == "__main__":
    sys.exit(main())
