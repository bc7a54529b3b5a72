"""
Reusable logging and console output for applications embedding manageable.

Functions:
    setup_logging          - Configure the root logger and return it.
    setup_from_settings    - setup_logging driven by ExporterSettings.
    print_and_log          - Print (rich) and log an info message.
    print_error            - Print (rich, stderr) and log an error message.
"""

import logging
import logging.handlers
import os
import sys
from typing import Optional

from rich.console import Console

# Logger used by print_and_log and print_error, set by setup_logging
_print_logger: Optional[logging.Logger] = None

_console = Console()
_err_console = Console(stderr=True)


def _default_logfile(app_name: str) -> str:
    log_dir = os.path.expanduser(f"~/.{app_name}")
    os.makedirs(log_dir, exist_ok=True)
    return os.path.join(log_dir, "log.txt")


def _make_handler(app_name: str, daemon: bool, logfile: Optional[str]) -> logging.Handler:
    if not daemon:
        handler: logging.Handler = logging.FileHandler(logfile or _default_logfile(app_name))
        handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(process)d %(name)s %(message)s'))
        return handler
    try:
        handler = logging.handlers.SysLogHandler(address='/dev/log')
    except OSError as e:
        # no syslog socket (containers, macOS)
        print(f"Syslog unavailable ({e}), logging to stderr", file=sys.stderr)
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(f'%(asctime)s %(levelname)s %(process)d [{app_name}] %(message)s'))
    return handler


def setup_logging(app_name: str = "manageable", daemon: bool = False, loglevel: int | str = logging.INFO,
                  logfile: Optional[str] = None) -> logging.Logger:
    """
    Set up logging for the application.
    - If daemon=True, logs to syslog (Linux only), falling back to stderr.
    - Otherwise, logs to ~/.<app_name>/log.txt or to a custom logfile.
    Existing root handlers are replaced. Returns the root logger.
    """
    global _print_logger
    logger = logging.getLogger()
    logger.setLevel(loglevel)
    for h in logger.handlers[:]:
        logger.removeHandler(h)
    logger.addHandler(_make_handler(app_name, daemon, logfile))
    _print_logger = logger
    logger.debug(f"Logging initialized for {app_name}")
    return logger


def setup_from_settings(settings, daemon: bool = False) -> logging.Logger:
    """Configure logging from an ExporterSettings instance."""
    return setup_logging(app_name=settings.app_name, daemon=daemon,
                         loglevel=settings.log_level.upper(), logfile=settings.logfile)


def print_and_log(message: str, **kwargs):
    """
    Print to stdout (rich markup allowed) and log as info.
    """
    _console.print(message, **kwargs)
    if _print_logger is not None:
        _print_logger.info(message)


def print_error(message: str, **kwargs):
    """
    Print to stderr in bold red and log as error.
    """
    _err_console.print(f'[bold red]{message}[/bold red]', **kwargs)
    if _print_logger is not None:
        _print_logger.error(message)
