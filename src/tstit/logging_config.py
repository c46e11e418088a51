import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure root logging once for a CLI run."""
    log_level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stderr)
        ],
        force=True,
    )

    logger = logging.getLogger("tstit")
    logger.setLevel(log_level)
    return logger
