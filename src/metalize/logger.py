import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

def setup_logger(level=logging.INFO) -> logging.Logger:
    logger = logging.getLogger("metalize")
    if not logger.handlers:
        h = logging.StreamHandler()
        fmt = logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S")
        h.setFormatter(fmt)
        logger.addHandler(h)
    logger.setLevel(level)
    return logger
