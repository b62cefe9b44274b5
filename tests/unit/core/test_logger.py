import logging

from txsaga import Step, run
from txsaga.core.config import TransactionConfig, configure
from txsaga.core.logger import NullLogger, get_logger, set_logger


class MockLogger:
    def __init__(self):
        self.logs = []

    def info(self, msg, *args, **kwargs):
        self.logs.append(("INFO", msg))

    def error(self, msg, *args, **kwargs):
        self.logs.append(("ERROR", msg))

    def debug(self, msg, *args, **kwargs):
        self.logs.append(("DEBUG", msg))

    def warning(self, msg, *args, **kwargs):
        self.logs.append(("WARNING", msg))

    def exception(self, msg, *args, **kwargs):
        self.logs.append(("EXCEPTION", msg))


def test_logger_propagation():
    """Test that setting a custom logger replaces standard logging."""
    set_logger(None)
    logger1 = get_logger("test")
    assert isinstance(logger1, logging.Logger)

    mock_logger = MockLogger()
    set_logger(mock_logger)
    assert get_logger("test") is mock_logger

    set_logger(None)
    assert isinstance(get_logger("test"), logging.Logger)


def test_default_logger_has_handler():
    """Test the default logger never triggers 'no handler' warnings."""
    logger = get_logger("txsaga.test_default")
    assert logger.handlers


def test_null_logger_accepts_everything():
    logger = NullLogger()
    logger.debug("a")
    logger.info("b", 1)
    logger.warning("c", extra={})
    logger.error("d")
    logger.exception("e")
    logger.critical("f")


def test_runner_logs_through_custom_logger():
    """Test step and compensation failures are reported as warnings."""
    mock_logger = MockLogger()
    set_logger(mock_logger)

    run(
        Step(lambda: None, compensations=[lambda: "cannot undo"]),
        Step(lambda: "declined", name="charge"),
    )

    warnings = [msg for level, msg in mock_logger.logs if level == "WARNING"]
    assert warnings[0] == "Step 1 (charge) failed: declined"
    assert "cannot undo" in warnings[1]
    assert any(level == "INFO" and "rolled back" in msg for level, msg in mock_logger.logs)


def test_runner_logs_commit(caplog):
    """Test a committed transaction is logged under the txsaga namespace."""
    with caplog.at_level(logging.DEBUG, logger="txsaga"):
        run(Step(lambda: None))

    assert "Transaction committed: 1 step(s)" in caplog.messages
    assert all(record.name.startswith("txsaga") for record in caplog.records)


def test_disabled_logging_returns_null_logger():
    """Test get_logger honours TransactionConfig.logging."""
    configure(TransactionConfig(logging=False))

    assert isinstance(get_logger("txsaga.core.runner"), NullLogger)


def test_disabled_logging_overrides_custom_logger():
    """Test a custom logger stays silent while logging is disabled."""
    mock_logger = MockLogger()
    set_logger(mock_logger)
    configure(TransactionConfig(logging=False))

    run(Step(lambda: "declined"))

    assert mock_logger.logs == []
    assert isinstance(get_logger(), NullLogger)
