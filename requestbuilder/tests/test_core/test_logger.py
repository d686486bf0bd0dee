import pytest
import logging
import os
from requestbuilder.core.config import Config
from requestbuilder.core.exceptions import LoggerError
from requestbuilder.core.logger import Logger
from requestbuilder.utils.api.request_builder import RequestBuilder

@pytest.fixture
def temp_log_file(tmp_path):
    """Create a temporary log file"""
    return tmp_path / "test.log"

@pytest.fixture
def config_with_custom_logging(temp_log_file):
    """Create a config with custom logging settings"""
    config = Config()
    config.update({
        "logging": {
            "level": "DEBUG",
            "file": str(temp_log_file)
        }
    })
    return config

@pytest.fixture
def logger(config_with_custom_logging):
    """Create a logger instance with custom config"""
    return Logger(config_with_custom_logging)

def read_log(path):
    for handler in logging.getLogger("requestbuilder").handlers:
        handler.flush()
    with open(path, 'r') as f:
        return f.read()

def test_logger_initialization(logger):
    """Test basic logger initialization"""
    assert logger.logger.level == logging.DEBUG
    assert isinstance(logger.logger, logging.Logger)
    assert logger.logger.name == "requestbuilder"

def test_logger_file_handler(logger, temp_log_file):
    """Test if file handler is properly configured"""
    assert os.path.exists(temp_log_file)

    logger.logger.debug("Test message")

    assert "Test message" in read_log(temp_log_file)

def test_logger_levels(logger):
    """Test different logging levels"""
    test_messages = {
        "debug": "Debug message",
        "info": "Info message",
        "warning": "Warning message",
        "error": "Error message",
        "critical": "Critical message"
    }

    for level, message in test_messages.items():
        getattr(logger.logger, level)(message)

def test_invalid_log_level():
    """Test logger initialization with invalid log level"""
    config = Config()
    config.update({"logging": {"level": "INVALID_LEVEL"}})

    with pytest.raises(LoggerError):
        Logger(config)

def test_invalid_log_file(tmp_path):
    """Test logger initialization with a log path below a regular file"""
    blocker = tmp_path / "not_a_directory"
    blocker.write_text("")
    config = Config()
    config.update({"logging": {"file": str(blocker / "log.txt")}})

    with pytest.raises(LoggerError):
        Logger(config)

def test_logger_format(logger, temp_log_file):
    """Test log format"""
    test_message = "Test format message"
    logger.logger.info(test_message)

    log_content = read_log(temp_log_file)
    assert test_message in log_content
    assert " - INFO - " in log_content
    assert "method:- - url:-" in log_content

def test_logger_context(logger, temp_log_file):
    """Test logger request context"""
    context = {"method": "PATCH", "url": "/api/orders/7"}
    logger.logger.info("Test with context", extra=context)

    log_content = read_log(temp_log_file)
    assert "method:PATCH" in log_content
    assert "url:/api/orders/7" in log_content

def test_module_loggers_propagate(logger, temp_log_file):
    """Test that package module loggers write through the configured handlers"""
    RequestBuilder().with_request_uri("/api/ping").add_query_parameter("n", 1).build()

    log_content = read_log(temp_log_file)
    assert "requestbuilder.utils.api.request_builder" in log_content
    assert "Built GET request for /api/ping?n=1" in log_content

def test_multiple_handlers(config_with_custom_logging):
    """Test logger with multiple handlers"""
    config_with_custom_logging.update({
        "logging": {
            "console_output": True
        }
    })

    logger = Logger(config_with_custom_logging)
    assert len(logger.logger.handlers) == 2  # File and console handlers

def test_log_rotation(tmp_path):
    """Test log file rotation"""
    config = Config()
    config.update({
        "logging": {
            "file": str(tmp_path / "rotating.log"),
            "max_size": 1024,  # 1KB
            "backup_count": 3
        }
    })

    logger = Logger(config)

    large_message = "x" * 512
    for _ in range(10):
        logger.logger.info(large_message)

    log_files = list(tmp_path.glob("rotating.log*"))
    assert len(log_files) > 1
