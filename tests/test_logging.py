import logging

from daisyworld.logging_config import LOGGER_NAME, setup_logging


def _close_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_setup_logging_does_not_duplicate_handlers() -> None:
    setup_logging()
    logger = setup_logging(level=logging.DEBUG)
    try:
        assert logger.name == LOGGER_NAME
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
    finally:
        _close_handlers(logger)


def test_setup_logging_writes_file(tmp_path) -> None:
    log_file = tmp_path / "run.log"
    logger = setup_logging(log_file=log_file)
    try:
        logging.getLogger("daisyworld.engine.model").info("engine started")
        for handler in logger.handlers:
            handler.flush()
        content = log_file.read_text(encoding="utf-8")
    finally:
        _close_handlers(logger)

    assert "Logging initialized." in content
    assert "engine started" in content
