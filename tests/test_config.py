"""
Tests for environment-based configuration
"""

import pytest

from payment_engine import config as config_module
from payment_engine.config import PaymentEngineConfig, get_config, reload_config


@pytest.fixture(autouse=True)
def fresh_config():
    yield
    reload_config()


class TestPaymentEngineConfig:
    """Test configuration loading"""

    def test_defaults(self, monkeypatch):
        for name in ("LOG_LEVEL", "LOG_FORMAT", "LOG_FILE", "INPUT_ENCODING", "STRICT_INPUT"):
            monkeypatch.delenv(f"PAYMENT_ENGINE_{name}", raising=False)

        cfg = PaymentEngineConfig(_env_file=None)
        assert cfg.log_level == "WARNING"
        assert cfg.log_format == "json"
        assert cfg.log_file is None
        assert cfg.input_encoding == "utf-8"
        assert cfg.strict_input is False

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("PAYMENT_ENGINE_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("payment_engine_strict_input", "true")
        monkeypatch.setenv("PAYMENT_ENGINE_LOG_FORMAT", "text")

        cfg = reload_config()
        assert cfg.log_level == "DEBUG"
        assert cfg.strict_input is True
        assert cfg.log_format == "text"
        assert get_config() is cfg
        assert config_module.config is cfg

    def test_invalid_log_format(self, monkeypatch):
        monkeypatch.setenv("PAYMENT_ENGINE_LOG_FORMAT", "xml")
        with pytest.raises(ValueError):
            PaymentEngineConfig(_env_file=None)
