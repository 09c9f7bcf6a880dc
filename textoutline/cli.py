"""Command-line interface for textoutline.

Scans a directory tree for images, runs the EAST and/or DB text detector on
each one and writes annotated copies into mirrored output trees next to the
input directory.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .coordinator import TaskCoordinator
from .detector import EAST_INPUT_SIZE, build_detectors
from .errors import ConfigError, PathError
from .metrics import timing_report
from .paths import output_roots_for
from .utils import LOG_FORMAT, setup_logger

logger = setup_logger(__name__)

PACKAGE_LOGGER = "textoutline"


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on bad arguments."""

    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = _ArgumentParser(
        prog="textoutline",
        description="Outline text regions in every image of a directory tree using "
                    "the EAST and/or DB text detectors."
    )

    parser.add_argument(
        "-i", "--inputImage",
        required=True,
        help="Root directory to scan for .png/.jpg/.jpeg images"
    )

    parser.add_argument(
        "-e", "--eastModel",
        help="Path to the EAST model (frozen_east_text_detection.pb); enables EAST"
    )

    parser.add_argument(
        "-d", "--dbModel",
        help="Path to the DB model (e.g. DB_TD500_resnet50.onnx); enables DB"
    )

    parser.add_argument(
        "-s", "--east-input-size",
        type=int,
        default=EAST_INPUT_SIZE[0],
        help=f"EAST network input width and height, a multiple of 32 (default: {EAST_INPUT_SIZE[0]})"
    )

    parser.add_argument(
        "-t", "--timing",
        action="store_true",
        help="Log a per-detector timing report at the end of the run"
    )

    parser.add_argument(
        "-l", "--logfile",
        help="Path to log file for detailed logging"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    return parser


def _configure_logging(verbose: bool, logfile: Optional[str]) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    for name in list(logging.root.manager.loggerDict):
        if name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + "."):
            logging.getLogger(name).setLevel(level)
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Debug logging enabled")

    if logfile:
        log_path = Path(logfile)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, mode='w')
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logging.getLogger().addHandler(file_handler)
        logger.info(f"Logging to file: {log_path}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point.

    Returns:
        Process exit status: 0 after a complete traversal (even if some
        files or detectors failed), 1 on a fatal configuration or path error.
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    if not argv:
        parser.print_help()
        return 0

    args = parser.parse_args(argv)
    _configure_logging(args.verbose, args.logfile)

    try:
        input_root = Path(args.inputImage)
        if not input_root.is_dir():
            raise ConfigError(f"Input path '{args.inputImage}' does not exist or is not a directory")
        size = args.east_input_size
        detectors = build_detectors(args.eastModel, args.dbModel, (size, size))
    except ConfigError as e:
        logger.error(str(e))
        return 1

    output_roots = output_roots_for(input_root, detectors)
    coordinator = TaskCoordinator(input_root, detectors, output_roots, progress=not args.verbose)

    try:
        summary = coordinator.run()
    except PathError as e:
        logger.error(str(e))
        return 1

    if args.timing:
        logger.info("\n" + timing_report(summary))

    return 0


if __name__ == "__main__":
    sys.exit(main())
