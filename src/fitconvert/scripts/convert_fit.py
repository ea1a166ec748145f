#!/usr/bin/env python3
"""
FIT Telemetry Converter

Converts the records of a FIT activity file into a JSON export or an SRT
subtitle track that overlays the telemetry on a video.

Usage:
    fitconvert -i INPUT -o OUTPUT [-t srt|json] [-f OFFSET_MS] [-s N] [--verbose]

Offset:
    positive - the OFFSET_MS millisecond of the .fit data is shown at the start
               of the video (the video was started after the activity)
    negative - the first .fit record is shown at abs(OFFSET_MS) of the video
               (the activity was started after the video)

Examples:
    fitconvert -i ride.fit -o ride.srt -f 12500 -s 4
    fitconvert -i ride.fit -o ride.json -t json
    cat ride.fit | fitconvert -i stdin -o stdout -t json
"""

import argparse
import logging
import sys
from typing import List, Optional

from fitconvert.config import STDIN_TAG, STDOUT_TAG, OutputFormat
from fitconvert.errors import DecodeError, FitConvertError
from fitconvert.pipeline import load_config, run
from fitconvert.utils import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fitconvert",
        description="FIT telemetry converter to SRT or JSON",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("Offset:", 1)[1] if __doc__ else None,
    )
    parser.add_argument(
        "-i", "--input", help=f"path to .fit file to read data from, or '{STDIN_TAG}'"
    )
    parser.add_argument(
        "-o", "--output", help=f"path to .srt or .json file to write to, or '{STDOUT_TAG}'"
    )
    parser.add_argument(
        "-t",
        "--type",
        default=OutputFormat.SRT.value,
        help="output format to generate (srt or json, default: srt)",
    )
    parser.add_argument(
        "-f",
        "--offset",
        type=int,
        default=0,
        help="offset in milliseconds to sync video and .fit data (srt only)",
    )
    parser.add_argument(
        "-s",
        "--smooth",
        type=int,
        default=0,
        help="insert N smoothed values between records, 0-9 (srt only)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="enable debug logging"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.input or not args.output:
        parser.print_help(sys.stderr)
        return 1

    setup_logging(args.verbose)

    try:
        config = load_config(
            INPUT=args.input,
            OUTPUT=args.output,
            FORMAT=args.type,
            OFFSET_MS=args.offset,
            SMOOTHING=args.smooth,
        )
        run(config)
    except DecodeError as e:
        logger.error("%s [%s]", e.message, e.cause)
        return 1
    except FitConvertError as e:
        logger.error(str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
