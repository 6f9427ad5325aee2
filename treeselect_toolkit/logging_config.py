from __future__ import annotations

"""Central logging configuration for the selection toolkit.

Import and call :func:`setup_logging` at application start-up.
"""

import logging
import logging.config
import os

from treeselect_toolkit.config import ConfigManager

__all__ = ["setup_logging"]

_ENGINE_LOGGERS = (
    "treeselect_toolkit.core.services.propagation_service",
    "treeselect_toolkit.core.services.bulk_toggle_service",
    "treeselect_toolkit.core.services.visibility_service",
)


def setup_logging() -> None:
    """Configure logging for the application using configuration from YAML files."""
    log_dir = os.environ.get("TREESELECT_LOG_DIR", "logs")
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, "app.log")

    try:
        logging_config = ConfigManager().get_logging_config()

        if logging_config and isinstance(logging_config, dict) and logging_config.get("version"):
            if "handlers" in logging_config and "file" in logging_config["handlers"]:
                logging_config["handlers"]["file"]["filename"] = log_file

            logging.config.dictConfig(logging_config)
            logging.info("===== Logging initialised from config files =====")
        else:
            _setup_minimal_logging()
    except (ValueError, TypeError, AttributeError, ImportError) as exc:
        # dictConfig reports a bad schema with one of these
        print(f"Error loading logging config: {exc}")
        _setup_minimal_logging()

    _apply_debug_overrides()


def _setup_minimal_logging() -> None:
    """Set up console-only logging when config is unavailable."""
    minimal_config = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'simple': {
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'simple',
                'level': 'INFO',
            },
        },
        'root': {
            'level': 'INFO',
            'handlers': ['console'],
        },
    }

    logging.config.dictConfig(minimal_config)
    logging.error("===== Logging initialised with minimal fallback (config error) =====")


def _apply_debug_overrides() -> None:
    """Apply environment-driven module-specific debug overrides.

    Supports:
    - TREESELECT_DEBUG_ENGINE=true -> DEBUG for propagation/bulk/visibility services
    - TREESELECT_DEBUG_MODULES=comma,separated,logger,names -> DEBUG for listed loggers
    """
    debug_engine = os.environ.get('TREESELECT_DEBUG_ENGINE', '').strip().lower() in {'1', 'true', 'yes', 'on'}
    extra_modules = os.environ.get('TREESELECT_DEBUG_MODULES', '').strip()
    targets = []
    if debug_engine:
        targets.extend(_ENGINE_LOGGERS)
    if extra_modules:
        targets.extend([m.strip() for m in extra_modules.split(',') if m.strip()])
    for name in targets:
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)
        # Ensure at least one handler emits DEBUG for this logger
        has_debug_handler = any(h.level <= logging.DEBUG for h in logger.handlers)
        if not has_debug_handler:
            h = logging.StreamHandler()
            h.setLevel(logging.DEBUG)
            h.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
            logger.addHandler(h)
        logger.info("Debug override active for logger '%s'", name)
