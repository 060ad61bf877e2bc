import logging
import os

LOG_LEVEL = os.getenv("MARKETS_LOG_LEVEL", "INFO").strip().upper()


def setup_logging(name="", level=None):
    """Attach a single stream handler to the ``name`` logger (root by default).

    Safe to call more than once; existing handlers are replaced so records
    are not duplicated.

    Example usage:
    from markets.logging_config import setup_logging
    setup_logging()
    """
    logger = logging.getLogger(name)
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter("%(asctime)s %(levelname)-8s "
                                  "[%(filename)s:%(lineno)d %(funcName)s()] "
                                  "%(message)s")

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    logger.setLevel(level if level is not None else getattr(logging, LOG_LEVEL, logging.INFO))
    return logger
