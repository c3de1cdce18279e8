"""Logging configuration for lambdacalc.

The library logs through loguru and is disabled by default. The CLI enables it with --debug, or whenever
LAMBDACALC_LOG is set. LAMBDACALC_LOG is either a level ("debug") or a level followed by per-module levels
("info,lambdacalc.pure=debug", "debug,lambdacalc.lang.environment=false").
"""

import os
import sys

from loguru import logger


FORMAT = "{time:HH:mm:ss.SSS} | {level:<7} | {name}:{function}:{line} | {message}"


def parse_log_filter(value):
    """Parses a LAMBDACALC_LOG value into (global level, {module: level or False})."""
    global_level = "info"
    module_filter = {}

    for part in (p.strip() for p in value.lower().split(",")):
        if not part:
            continue
        if "=" in part:
            module, level = (s.strip() for s in part.split("=", 1))
            module_filter[module] = False if level == "false" else level.upper()
        else:
            global_level = part

    return global_level.upper(), module_filter


def configure_logging(debug=False, sink=sys.stderr):
    """Enables lambdacalc logging on sink if debug is set or LAMBDACALC_LOG is defined. Returns whether or not logging
    was enabled.
    """
    value = os.getenv("LAMBDACALC_LOG")
    if not debug and value is None:
        return False

    global_level, module_filter = parse_log_filter(value if value is not None else "debug")
    if debug:
        global_level = "DEBUG"

    logger.remove()
    logger.add(sink, level=global_level, format=FORMAT, filter=module_filter, backtrace=False, diagnose=False)
    logger.enable("lambdacalc")
    return True
