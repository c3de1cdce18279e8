"""Interpreter for an optionally-typed lambda calculus."""

from loguru import logger

__version__ = "0.2.0"

logger.disable("lambdacalc")
