"""
Tests for structured logging and configuration
"""

import json
import logging

from bank_dashboard.config import BankDashboardConfig, reload_config
from bank_dashboard.logging_config import JSONFormatter, log_action, setup_logging


class ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []
    
    def emit(self, record):
        self.records.append(record)


class TestJSONFormatter:
    
    def test_structured_fields(self):
        logger = logging.getLogger("bank_dashboard.test.json")
        handler = ListHandler()
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        try:
            log_action(
                logger, "info", "Posting committed",
                action="post_transaction", resource="transaction:7",
                correlation_id="req-1", extra={"amount": "200"}
            )
        finally:
            logger.removeHandler(handler)
        
        [record] = handler.records
        entry = json.loads(JSONFormatter().format(record))
        
        assert entry["message"] == "Posting committed"
        assert entry["level"] == "INFO"
        assert entry["action"] == "post_transaction"
        assert entry["resource"] == "transaction:7"
        assert entry["correlation_id"] == "req-1"
        assert entry["extra"] == {"amount": "200"}
    
    def test_none_fields_dropped(self):
        record = logging.LogRecord("x", logging.WARNING, __file__, 1, "plain", (), None)
        entry = json.loads(JSONFormatter().format(record))
        
        assert "action" not in entry
        assert "correlation_id" not in entry
        assert entry["message"] == "plain"
    
    def test_disabled_level_skipped(self):
        logger = logging.getLogger("bank_dashboard.test.level")
        handler = ListHandler()
        logger.addHandler(handler)
        logger.setLevel(logging.WARNING)
        try:
            log_action(logger, "info", "ignored")
        finally:
            logger.removeHandler(handler)
        
        assert handler.records == []


class TestSetupLogging:
    
    def test_json_handler(self):
        logger = setup_logging("DEBUG", "json", logger_name="bank_dashboard.test.setup")
        
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)
        assert logger.propagate is False
    
    def test_text_handler_replaces_previous(self):
        setup_logging("INFO", "json", logger_name="bank_dashboard.test.text")
        logger = setup_logging("INFO", "text", logger_name="bank_dashboard.test.text")
        
        assert len(logger.handlers) == 1
        assert not isinstance(logger.handlers[0].formatter, JSONFormatter)


class TestConfig:
    
    def test_defaults(self):
        config = BankDashboardConfig()
        
        assert config.api_port == 3001
        assert config.max_transaction_amount == "1000000"
        assert config.max_page_size == 100
    
    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("BANKDASH_API_PORT", "8080")
        monkeypatch.setenv("BANKDASH_SEED_SAMPLE_DATA", "false")
        
        config = reload_config()
        
        assert config.api_port == 8080
        assert config.seed_sample_data is False
        
        monkeypatch.delenv("BANKDASH_API_PORT")
        monkeypatch.delenv("BANKDASH_SEED_SAMPLE_DATA")
        reload_config()
