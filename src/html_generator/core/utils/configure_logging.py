# src/html_generator/core/utils/configure_logging.py
import logging
import sys
from tqdm import tqdm

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s"


class LogWithTqdm(logging.Handler):
    """Routes records through `tqdm.write()` so the CLI progress bar stays intact."""
    def emit(self, record):
        try:
            tqdm.write(self.format(record), file=sys.stderr)
            self.flush()
        except Exception:
            self.handleError(record)


def _to_level(level, fallback):
    if isinstance(level, str):
        return getattr(logging, level.upper(), fallback)
    return level


def configure_logger(general_level='INFO', module_specific_levels=None, silenced_loggers=None):
    """
    Installs a single LogWithTqdm handler on the root logger.

    Args:
        general_level: Root level, as a name ('DEBUG') or a logging constant.
        module_specific_levels: Per-logger overrides, e.g. {'auditor.dom': 'DEBUG'}.
        silenced_loggers: Third-party loggers to raise to the given level,
                          e.g. {'markdown_it': 'WARNING'}.
    """
    handler = LogWithTqdm()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(_to_level(general_level, logging.INFO))
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name, level in (module_specific_levels or {}).items():
        logging.getLogger(name).setLevel(_to_level(level, logging.INFO))

    for name, level in (silenced_loggers or {}).items():
        logging.getLogger(name).setLevel(_to_level(level, logging.CRITICAL))

    return root_logger
