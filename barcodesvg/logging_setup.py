import logging

from barcodesvg import config


def configure_logging(level: str = config.LOG_LEVEL) -> logging.Logger:
    """Attach one stream handler to the package logger; repeated calls only adjust the level."""
    logger = logging.getLogger("barcodesvg")
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    if not logger.handlers:
        fmt = logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
        ch = logging.StreamHandler()
        ch.setFormatter(fmt)
        logger.addHandler(ch)
    return logger
