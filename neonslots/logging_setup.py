import logging
from contextvars import ContextVar

from pythonjsonlogger import jsonlogger

# Id of the spin being processed in the current task, 'N/A' outside a spin
current_spin_id: ContextVar[str] = ContextVar('current_spin_id', default='N/A')


class SpinIdFilter(logging.Filter):
    def filter(self, record):
        record.spin_id = current_spin_id.get()
        return True


def configure_logging(config, level=None):
    """
    Installs a single stream handler on the package logger.

    JSON output (python-json-logger) is used when ``config.LOG_JSON`` is set;
    otherwise a plain text format carrying the same fields. ``level``
    overrides ``config.LOG_LEVEL``.
    """
    level = level or config.LOG_LEVEL
    logger = logging.getLogger('neonslots')
    handler = logging.StreamHandler()
    if config.LOG_JSON:
        formatter = jsonlogger.JsonFormatter(
            '%(asctime)s %(levelname)s %(spin_id)s %(module)s %(funcName)s %(lineno)d %(message)s'
        )
    else:
        formatter = logging.Formatter('%(asctime)s %(levelname)s [spin %(spin_id)s] %(name)s: %(message)s')
    handler.setFormatter(formatter)
    handler.addFilter(SpinIdFilter())
    if logger.hasHandlers():
        logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level, logging.INFO))
    return logger
