"""
Logging setup shared by the API service and the scripts.

Format: timestamp | level | module | message
"""
import logging

LOG_FORMAT = '%(asctime)s | %(levelname)s | %(name)s | %(message)s'

_HANDLER_NAME = 'storefront_pricing.stream'


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach a single stdout handler to the package logger.

    Safe to call more than once; the handler is only installed the first time.
    """
    logger = logging.getLogger('storefront_pricing')

    if not any(h.get_name() == _HANDLER_NAME for h in logger.handlers):
        stream_handler = logging.StreamHandler()
        stream_handler.set_name(_HANDLER_NAME)
        stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(stream_handler)

    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    return logger
