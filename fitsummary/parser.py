from __future__ import annotations

import json
import logging
import os
import time
from pathlib import Path
from typing import Iterable, Optional

import yaml

from fitsummary.accumulator import accumulate_all
from fitsummary.config import Config
from fitsummary.decoder import decode_fit_file
from fitsummary.errors import FitDecodeError, MissingSessionError
from fitsummary.records import DecodedRecord
from fitsummary.strings import DEFAULT_STRINGS, DisplayStrings
from fitsummary.summary import WorkoutSummary
from fitsummary.synthesizer import synthesize

log = logging.getLogger(__name__)


def summarize_records(
    records: Iterable[DecodedRecord],
    summary: WorkoutSummary | None = None,
    config: Config | None = None,
    strings: DisplayStrings = DEFAULT_STRINGS,
) -> WorkoutSummary:
    """
    Accumulate already-decoded records into a fresh state and synthesize.

    The summary is returned unmodified when the records hold no session.
    """
    if summary is None:
        summary = WorkoutSummary()
    if config is None:
        config = Config()

    state = accumulate_all(records, config.physiological_metrics_first_wins)
    try:
        synthesize(state, summary, strings)
    except MissingSessionError:
        # already logged by synthesize; the caller keeps its summary as it was
        return summary
    return summary


def parse_workout(
    summary: WorkoutSummary,
    for_details: bool = True,
    config: Config | None = None,
    strings: DisplayStrings = DEFAULT_STRINGS,
) -> WorkoutSummary:
    """
    Fill ``summary`` from the FIT file at ``summary.raw_details_path``.

    Parsing is only worth it for the detail view; list views pass
    ``for_details=False`` and get the summary back as is. Unreadable or
    malformed files are logged and leave the summary unmodified.
    """
    if not for_details:
        return summary

    started = time.perf_counter()

    if summary.raw_details_path is None:
        log.warning("No raw details path")
        return summary
    fit_path = Path(summary.raw_details_path)
    if not fit_path.is_file() or not os.access(fit_path, os.R_OK):
        log.warning("Unable to read %s", fit_path)
        return summary

    try:
        records = decode_fit_file(fit_path)
    except FitDecodeError as e:
        log.error("Failed to parse fit file: %s", e)
        return summary

    summarize_records(records, summary, config=config, strings=strings)

    elapsed_ms = (time.perf_counter() - started) * 1000
    log.debug("Updating summary took %.0fms", elapsed_ms)
    return summary


def parse_fit_file(fit_path: Path, config: Config | None = None) -> WorkoutSummary:
    """Parse a FIT file into a new summary."""
    summary = WorkoutSummary(raw_details_path=Path(fit_path))
    return parse_workout(summary, config=config)


def dump_summary(summary: WorkoutSummary, fmt: str = "yaml", tz_name: str = "UTC") -> str:
    data = summary.to_dict(tz_name)
    if fmt == "json":
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)


def parse_and_write(fit_path: Path, config: Config | None = None) -> Optional[Path]:
    """
    Parse a FIT file and write the summary alongside it (or into
    ``config.output_dir``). Returns the written path, or None when the file
    yielded no summary.
    """
    if config is None:
        config = Config()
    fit_path = Path(fit_path)

    summary = parse_fit_file(fit_path, config=config)
    if not summary.summary_data:
        log.warning("No summary produced for %s", fit_path)
        return None

    suffix = ".json" if config.output_format == "json" else ".yaml"
    out_path = fit_path.with_suffix(suffix)
    if config.output_dir is not None:
        config.output_dir.mkdir(parents=True, exist_ok=True)
        out_path = config.output_dir / out_path.name

    with open(out_path, "w", encoding="utf-8") as f:
        f.write(dump_summary(summary, config.output_format, config.timezone))
    log.info("Wrote %s", out_path)
    return out_path
