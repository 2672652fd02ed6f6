import logging

from src.core.config import settings


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(asctime)s %(name)s: %(message)s"))
        logger.addHandler(h)
        logger.setLevel(settings.LOG_LEVEL.upper())
    return logger


logger = get_logger("patient_intake")
