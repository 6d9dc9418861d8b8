"""Tests for environment configuration."""

import logging

from eventloop_py.config import DEFAULT_FRAME_INTERVAL, DEFAULT_MAX_TICKS, SimulatorConfig, load_config


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self, monkeypatch):
        for name in ("EVENTLOOP_FRAME_INTERVAL", "EVENTLOOP_MAX_TICKS", "EVENTLOOP_LOG_DIR"):
            monkeypatch.delenv(name, raising=False)
        config = load_config()
        assert config == SimulatorConfig()
        assert config.frame_interval == DEFAULT_FRAME_INTERVAL
        assert config.max_ticks == DEFAULT_MAX_TICKS
        assert config.log_dir is None

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("EVENTLOOP_FRAME_INTERVAL", "33.3")
        monkeypatch.setenv("EVENTLOOP_MAX_TICKS", "250")
        monkeypatch.setenv("EVENTLOOP_LOG_DIR", "/tmp/traces")
        config = load_config()
        assert config.frame_interval == 33.3
        assert config.max_ticks == 250
        assert config.log_dir == "/tmp/traces"

    def test_invalid_values_fall_back(self, monkeypatch, caplog):
        monkeypatch.setenv("EVENTLOOP_FRAME_INTERVAL", "fast")
        monkeypatch.setenv("EVENTLOOP_MAX_TICKS", "-3")
        with caplog.at_level(logging.WARNING, logger="eventloop_py.config"):
            config = load_config()
        assert config.frame_interval == DEFAULT_FRAME_INTERVAL
        assert config.max_ticks == DEFAULT_MAX_TICKS
        assert "EVENTLOOP_FRAME_INTERVAL" in caplog.text
        assert "EVENTLOOP_MAX_TICKS" in caplog.text

    def test_empty_log_dir_is_none(self, monkeypatch):
        monkeypatch.setenv("EVENTLOOP_LOG_DIR", "")
        assert load_config().log_dir is None
