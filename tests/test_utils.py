"""Essential tests for utility modules - Config and Logging."""

import logging
import os
from unittest.mock import patch

from order_pricing.pricing.engine import PricingEngine
from order_pricing.pricing.models import TotalStrategy
from order_pricing.utils.config import Config
from order_pricing.utils.logging import get_logger, setup_logging


def test_config_default_values():
    """Test config provides reasonable defaults without an env file."""
    config = Config()

    assert config.get("log_level") == "INFO"
    assert config.get("total_strategy") == "order_flag"
    assert config.get("precision") == 2
    assert config.get("currency") == "INR"
    assert config.get("mongo_url") == ""
    assert config.get("mongo_db") == "theater_canteen"
    assert config.get("mongo_collection") == "theaterorders"


def test_config_ignores_environment_without_env_file():
    with patch.dict(os.environ, {"PRICING_TOTAL_STRATEGY": "line_sum"}):
        assert Config()["total_strategy"] == "order_flag"


def test_config_loads_env_file(tmp_path):
    """Settings in an explicit .env file are picked up."""
    env_file = tmp_path / ".env"
    env_file.write_text(
        "PRICING_TOTAL_STRATEGY=LINE_SUM\n"
        "PRICING_PRECISION=3\n"
        "CURRENCY=USD\n"
        "DB_CONNECTION_URL=mongodb://localhost:27017\n",
        encoding="utf-8",
    )
    # patch.dict restores os.environ after load_dotenv writes into it
    with patch.dict(os.environ, {}):
        for key in ("PRICING_TOTAL_STRATEGY", "PRICING_PRECISION", "CURRENCY", "DB_CONNECTION_URL"):
            os.environ.pop(key, None)
        config = Config(str(env_file))

    assert config["total_strategy"] == "line_sum"
    assert config["precision"] == 3
    assert config["currency"] == "USD"
    assert config["mongo_url"] == "mongodb://localhost:27017"
    assert "precision" in config


def test_config_invalid_precision_falls_back(tmp_path):
    with patch.dict(os.environ, {"PRICING_PRECISION": "two"}):
        config = Config(str(tmp_path / "missing.env"))
    assert config["precision"] == 2


def test_engine_from_config_defaults():
    engine = PricingEngine.from_config(Config())
    assert engine.strategy is TotalStrategy.ORDER_FLAG
    assert engine.precision == 2
    assert engine.currency == "INR"


def test_engine_from_config_unknown_strategy_falls_back(tmp_path):
    with patch.dict(os.environ, {"PRICING_TOTAL_STRATEGY": "per_item", "PRICING_PRECISION": "-1"}):
        config = Config(str(tmp_path / "missing.env"))
    engine = PricingEngine.from_config(config)
    assert engine.strategy is TotalStrategy.ORDER_FLAG
    assert engine.precision == 2


class TestLogging:
    """Test cases for logging utilities."""

    def test_setup_logging_debug(self):
        logger = setup_logging("DEBUG")
        assert logger.name == "order_pricing"
        assert logger.level == logging.DEBUG

    def test_setup_logging_default(self):
        logger = setup_logging()
        assert logger.level == logging.INFO

    def test_setup_logging_does_not_stack_handlers(self):
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1

    def test_setup_logging_with_file(self, tmp_path):
        log_file = tmp_path / "logs" / "pricing.log"
        logger = setup_logging(level="INFO", log_file=str(log_file))
        logger.info("hello")
        for handler in logger.handlers:
            handler.flush()
        assert log_file.exists()
        assert "hello" in log_file.read_text(encoding="utf-8")
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()

    def test_get_logger_names(self):
        assert get_logger("order_pricing.pricing.engine").name == "order_pricing.pricing.engine"
        assert get_logger("reports").name == "order_pricing.reports"
