from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

OUTPUT_FORMATS = ("yaml", "json")


def _flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("true", "1", "yes")


@dataclass
class Config:
    timezone: str = "UTC"
    output_format: str = "yaml"  # yaml | json
    output_dir: Path | None = None  # None: write next to the FIT file
    log_level: str = "INFO"
    physiological_metrics_first_wins: bool = False  # default keeps the last record

    def __post_init__(self) -> None:
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Unsupported output format {self.output_format!r}, expected one of {OUTPUT_FORMATS}"
            )

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> Config:
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()  # loads .env from cwd

        output_dir = os.environ.get("FITSUMMARY_OUTPUT_DIR")
        return cls(
            timezone=os.environ.get("FITSUMMARY_TIMEZONE", "UTC"),
            output_format=os.environ.get("FITSUMMARY_OUTPUT_FORMAT", "yaml").lower(),
            output_dir=Path(output_dir) if output_dir else None,
            log_level=os.environ.get("FITSUMMARY_LOG_LEVEL", "INFO").upper(),
            physiological_metrics_first_wins=_flag("FITSUMMARY_PHYSIO_FIRST_WINS"),
        )
