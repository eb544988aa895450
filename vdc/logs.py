# vdc/logs.py

import logging
import sys
from pythonjsonlogger import jsonlogger

CONSOLE_LOGGER = "vdc.console"


def _json_formatter():
    return jsonlogger.JsonFormatter(
        fmt='%(levelname)s %(asctime)s %(filename)s %(funcName)s %(lineno)d %(message)s',
        json_ensure_ascii=False
    )


def configure_logging(level="INFO"):
    """Sends every record to the console as one json object per line"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # console handle with json formatter
    log_handler = logging.StreamHandler()
    log_handler.setFormatter(_json_formatter())

    # clear any existing handlers especially from uvicorn
    if logger.hasHandlers():
        logger.handlers.clear()
    logger.addHandler(log_handler)

    console_logger()
    return logger


def console_logger():
    """
    Logger for the [Log]/[Trace]/[Close] lines. It has its own handler
    and does not propagate, so the configured log level never hides them.
    """
    logger = logging.getLogger(CONSOLE_LOGGER)
    logger.setLevel(logging.INFO)
    logger.propagate = False

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_json_formatter())
    logger.handlers.clear()
    logger.addHandler(handler)
    return logger
