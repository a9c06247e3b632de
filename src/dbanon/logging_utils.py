"""
Logging configuration for the anonymizer.

Console output goes to stderr so stdout carries only the rendered summary.
The optional log file always records DEBUG detail, including the SQL and
bound parameters of every statement, as an audit trail of what was changed.
"""

import logging
import logging.handlers
import sys

LOG_FORMAT = '[%(asctime)s] %(levelname)s [%(name)s] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

QUIET_LOGGERS = ('sqlalchemy.engine', 'sqlalchemy.pool')

logger = logging.getLogger(__name__)


def setup_logging(log_file=None, verbose=False):
    """
    Configure logging for an anonymization run.

    Args:
        log_file: Path of a rotating audit log (None = console only)
        verbose: Show DEBUG records on the console too
    """
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(logging.DEBUG if verbose else logging.INFO)
    console.setFormatter(formatter)
    handlers = [console]

    file_error = None
    if log_file:
        try:
            file_handler = logging.handlers.RotatingFileHandler(
                log_file, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS
            )
        except OSError as e:
            file_error = e
        else:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)

    # Root passes everything; each handler applies its own level
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)

    # SQL echo stays off unless explicitly requested on the engine
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if file_error is not None:
        logger.warning(f"Could not create log file {log_file}: {file_error}")
    elif log_file:
        logger.debug(f"Writing audit log to {log_file}")
