"""
Centralized logging configuration for the relay

PRODUCTION (LOG_LEVEL=INFO):
- One INFO line per relayed call (operation, upstream status, timing)
- WARNING for rejected input and upstream errors
- ERROR/EXCEPTION with full stacktrace

DEVELOPMENT (LOG_LEVEL=DEBUG):
- Full DEBUG logging, including werkzeug access logs (urllib3.connectionpool stays at INFO: its request lines carry the token)
"""
import logging
import os
import sys
from logging.handlers import RotatingFileHandler


def configure_logging():
    """
    Configure logging for the whole process.

    Environment Variables:
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR). Default: INFO
        LOG_JSON: Enable JSON logging format (0 or 1). Default: 0
        LOG_FILE: Optional path of a rotating log file (10MB x 5)
    """
    log_level_str = os.getenv('LOG_LEVEL', 'INFO').upper()

    log_level_map = {
        'DEBUG': logging.DEBUG,
        'INFO': logging.INFO,
        'WARNING': logging.WARNING,
        'ERROR': logging.ERROR,
        'CRITICAL': logging.CRITICAL
    }

    log_level = log_level_map.get(log_level_str, None)

    if log_level is None:
        # logging isn't configured yet
        print(f"WARNING: Invalid LOG_LEVEL '{log_level_str}', defaulting to INFO", file=sys.stderr)
        log_level = logging.INFO
        log_level_str = 'INFO'

    is_production = log_level >= logging.INFO

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)

    use_json = os.getenv('LOG_JSON', '0') == '1'

    if use_json:
        formatter = logging.Formatter(
            '{"timestamp":"%(asctime)s","level":"%(levelname)s","module":"%(name)s","message":"%(message)s"}',
            datefmt='%Y-%m-%dT%H:%M:%S'
        )
    else:
        formatter = logging.Formatter(
            '[%(asctime)s] %(levelname)-8s [%(name)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)
    root_logger.addHandler(console_handler)

    log_file = os.getenv('LOG_FILE')
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        root_logger.addHandler(file_handler)

    if is_production:
        noisy_libs = {
            'werkzeug': logging.WARNING,
            'urllib3': logging.WARNING,
            'urllib3.connectionpool': logging.WARNING,
            'requests': logging.WARNING,
        }
    else:
        noisy_libs = {
            'werkzeug': logging.INFO,
            'urllib3': logging.DEBUG,
        }

    # connectionpool logs full request lines at DEBUG, API token included
    noisy_libs['urllib3.connectionpool'] = max(noisy_libs.get('urllib3.connectionpool', logging.INFO), logging.INFO)

    for lib_name, lib_level in noisy_libs.items():
        logging.getLogger(lib_name).setLevel(lib_level)

    root_logger.info(f'LOGGING CONFIGURED: level={log_level_str}, json={use_json}, production={is_production}')

    return root_logger
