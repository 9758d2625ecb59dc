"""Tests for the JSON logging configuration."""

import json
import logging

import pytest

from url_ingest.logging_config import build_logging_config, configure_logging


@pytest.fixture
def restore_root_logger():
    """dictConfig replaces root handlers; put the originals back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_build_logging_config_level():
    config = build_logging_config("debug")
    assert config["root"]["level"] == "DEBUG"
    assert config["loggers"]["httpx"]["level"] == "WARNING"


def test_json_output_carries_extra_fields(capsys, restore_root_logger):
    configure_logging("INFO")
    logging.getLogger("url_ingest.test").info("Fallback tier failed", extra={"tier": "nitter"})

    line = capsys.readouterr().out.strip().splitlines()[-1]
    payload = json.loads(line)
    assert payload["message"] == "Fallback tier failed"
    assert payload["severity"] == "INFO"
    assert payload["logger"] == "url_ingest.test"
    assert payload["service"] == "url-ingest"
    assert payload["tier"] == "nitter"
