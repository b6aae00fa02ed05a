"""
Tests for logging configuration and structured JSON output.

Run with: python -m pytest hyperspace/tests/test_logging_config.py -v
"""

import json
import logging
import sys

import pytest

from hyperspace.animator import Animator
from hyperspace.config import AnimationConfig
from hyperspace.logging_config import JSONFormatter, configure_logging
from hyperspace.shapes import ShapeKind


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way the test runner left it."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def make_record(**extra):
    record = logging.LogRecord(
        name="hyperspace.animator",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Shape changed to: %s",
        args=("Descartes Heart",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_core_fields(self):
        data = json.loads(JSONFormatter().format(make_record()))
        assert data["level"] == "INFO"
        assert data["logger"] == "hyperspace.animator"
        assert data["message"] == "Shape changed to: Descartes Heart"
        assert "timestamp" in data

    def test_animator_extras(self):
        record = make_record(shape="heart", particle_count=1000, frame=42, fps=29.5)
        data = json.loads(JSONFormatter().format(record))
        assert data["shape"] == "heart"
        assert data["particle_count"] == 1000
        assert data["frame"] == 42
        assert data["fps"] == 29.5

    def test_missing_extras_are_omitted(self):
        data = json.loads(JSONFormatter().format(make_record(shape="rose")))
        assert data["shape"] == "rose"
        for key in ("particle_count", "frame", "fps"):
            assert key not in data

    def test_exception_included(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = make_record()
            record.exc_info = sys.exc_info()
        data = json.loads(JSONFormatter().format(record))
        assert "ValueError: boom" in data["exception"]


class TestConfigureLogging:
    def test_production_uses_json_on_stderr(self, monkeypatch, restore_root_logger):
        monkeypatch.setenv("HYPERSPACE_ENV", "production")
        configure_logging(logging.DEBUG)

        root = restore_root_logger
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        handler = root.handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert handler.stream is sys.stderr
        assert handler.level == logging.DEBUG
        assert isinstance(handler.formatter, JSONFormatter)

    def test_prod_alias(self, monkeypatch, restore_root_logger):
        monkeypatch.setenv("HYPERSPACE_ENV", "PROD")
        configure_logging()
        assert isinstance(restore_root_logger.handlers[0].formatter, JSONFormatter)

    def test_development_is_human_readable(self, monkeypatch, restore_root_logger):
        monkeypatch.delenv("HYPERSPACE_ENV", raising=False)
        configure_logging(logging.WARNING)

        root = restore_root_logger
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert not isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_replaces_existing_handlers(self, monkeypatch, restore_root_logger):
        monkeypatch.setenv("HYPERSPACE_ENV", "production")
        configure_logging()
        configure_logging()
        assert len(restore_root_logger.handlers) == 1

    def test_production_lines_are_json(self, monkeypatch, capsys, restore_root_logger):
        monkeypatch.setenv("HYPERSPACE_ENV", "production")
        configure_logging(logging.INFO)

        logging.getLogger("hyperspace.test").info("frame done", extra={"frame": 7})

        captured = capsys.readouterr()
        assert captured.out == ""
        data = json.loads(captured.err.strip().splitlines()[-1])
        assert data["message"] == "frame done"
        assert data["frame"] == 7


class TestAnimatorLogging:
    def test_construction_logs_shape_and_count(self, caplog):
        caplog.set_level(logging.INFO, logger="hyperspace.animator")
        Animator(config=AnimationConfig(particle_count=100, seed=1))

        ready = [r for r in caplog.records if r.getMessage().startswith("Animator ready")]
        assert len(ready) == 1
        assert ready[0].shape == "chaos"
        assert ready[0].particle_count == 100

    def test_transition_logs_shape(self, caplog):
        animator = Animator(config=AnimationConfig(particle_count=100, seed=1))
        caplog.set_level(logging.INFO, logger="hyperspace.animator")
        caplog.clear()

        animator.select_shape(ShapeKind.FIBONACCI)

        changed = [r for r in caplog.records if r.getMessage() == "Shape changed to: Fibonacci Spiral"]
        assert len(changed) == 1
        assert changed[0].shape == "fibonacci"
        assert changed[0].frame == 0

    def test_records_format_as_json(self, caplog):
        caplog.set_level(logging.INFO, logger="hyperspace.animator")
        Animator(config=AnimationConfig(particle_count=10, seed=1), initial_shape=ShapeKind.ROSE)

        data = json.loads(JSONFormatter().format(caplog.records[-1]))
        assert data["shape"] == "rose"
        assert data["particle_count"] == 10
