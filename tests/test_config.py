from __future__ import annotations

from pathlib import Path

import pytest

from fitsummary.config import Config

ENV_VARS = (
    "FITSUMMARY_TIMEZONE",
    "FITSUMMARY_OUTPUT_FORMAT",
    "FITSUMMARY_OUTPUT_DIR",
    "FITSUMMARY_LOG_LEVEL",
    "FITSUMMARY_PHYSIO_FIRST_WINS",
)


@pytest.fixture
def clean_env(monkeypatch):
    # setenv first so monkeypatch restores the variables load_dotenv may set
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


def test_defaults(clean_env, tmp_path):
    config = Config.from_env(tmp_path / "missing.env")

    assert config == Config()
    assert config.output_dir is None
    assert config.log_level == "INFO"


def test_values_from_environment(clean_env):
    clean_env.setenv("FITSUMMARY_TIMEZONE", "Europe/Amsterdam")
    clean_env.setenv("FITSUMMARY_OUTPUT_FORMAT", "JSON")
    clean_env.setenv("FITSUMMARY_OUTPUT_DIR", "/tmp/summaries")
    clean_env.setenv("FITSUMMARY_LOG_LEVEL", "debug")
    clean_env.setenv("FITSUMMARY_PHYSIO_FIRST_WINS", "yes")

    config = Config.from_env()

    assert config.timezone == "Europe/Amsterdam"
    assert config.output_format == "json"
    assert config.output_dir == Path("/tmp/summaries")
    assert config.log_level == "DEBUG"
    assert config.physiological_metrics_first_wins is True


def test_values_from_env_file(clean_env, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("FITSUMMARY_OUTPUT_FORMAT=json\nFITSUMMARY_PHYSIO_FIRST_WINS=1\n")

    config = Config.from_env(env_file)

    assert config.output_format == "json"
    assert config.physiological_metrics_first_wins is True


def test_environment_wins_over_env_file(clean_env, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("FITSUMMARY_TIMEZONE=Asia/Tokyo\n")
    clean_env.setenv("FITSUMMARY_TIMEZONE", "UTC")

    assert Config.from_env(env_file).timezone == "UTC"


def test_unknown_output_format_rejected():
    with pytest.raises(ValueError):
        Config(output_format="xml")
