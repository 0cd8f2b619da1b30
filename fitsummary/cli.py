from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from fitsummary.config import OUTPUT_FORMATS, Config
from fitsummary.parser import dump_summary, parse_and_write, parse_fit_file

log = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="fitsummary",
        description="Build a workout summary (YAML/JSON) from FIT activity files.",
    )
    ap.add_argument("fit_files", nargs="+", type=Path, help="FIT activity file(s)")
    ap.add_argument("--format", choices=OUTPUT_FORMATS, default=None,
                    help="Output format (default: FITSUMMARY_OUTPUT_FORMAT or yaml)")
    ap.add_argument("--stdout", action="store_true",
                    help="Print summaries instead of writing them next to the FIT files")
    ap.add_argument("--timezone", default=None, help="Timezone for start/end times")
    ap.add_argument("--env-file", default=None, help="Load settings from this .env file")
    return ap


def main(argv: list[str] | None = None) -> int:
    ap = build_arg_parser()
    args = ap.parse_args(argv)

    try:
        config = Config.from_env(args.env_file)
    except ValueError as e:
        ap.error(str(e))

    if args.format:
        config.output_format = args.format
    if args.timezone:
        config.timezone = args.timezone

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    failures = 0
    for fit_path in args.fit_files:
        if not fit_path.exists():
            print(f"File not found: {fit_path}", file=sys.stderr)
            failures += 1
            continue

        if args.stdout:
            summary = parse_fit_file(fit_path, config=config)
            if not summary.summary_data:
                failures += 1
                continue
            sys.stdout.write(dump_summary(summary, config.output_format, config.timezone))
        elif parse_and_write(fit_path, config=config) is None:
            failures += 1

    if failures:
        log.error("%d of %d files produced no summary", failures, len(args.fit_files))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
